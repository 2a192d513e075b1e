from __future__ import annotations

from .errors import ClassificationError, ErrorKind
from .types import ClassificationResult, InferenceGateway, NormalizedPrediction, WasteCategory

__all__ = [
    "ClassificationError",
    "ClassificationResult",
    "ErrorKind",
    "InferenceGateway",
    "NormalizedPrediction",
    "WasteCategory",
    "ClassificationPipeline",
    "RoboflowInferenceClient",
]


def __getattr__(name: str):
    if name == "ClassificationPipeline":
        from .pipeline import ClassificationPipeline

        return ClassificationPipeline
    if name == "RoboflowInferenceClient":
        from .roboflow_client import RoboflowInferenceClient

        return RoboflowInferenceClient
    raise AttributeError(f"module 'ecosort.ai' has no attribute {name!r}")
