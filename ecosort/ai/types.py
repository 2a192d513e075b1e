from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol

# Top predictions below this confidence fraction are rejected.
DEFAULT_CONFIDENCE_THRESHOLD: float = 0.5

# Confidence assigned to bare labels from classification-style responses,
# which carry no score of their own.
FALLBACK_CONFIDENCE: float = 0.90


class WasteCategory(str, Enum):
    PLASTIC = "plastic"
    PAPER = "paper"
    CARDBOARD = "cardboard"
    METAL = "metal"
    GLASS = "glass"
    ORGANIC = "organic"
    TRASH = "trash"


class InferenceGateway(Protocol):
    def infer(self, image_bytes: bytes) -> dict[str, Any]: ...


@dataclass(frozen=True)
class NormalizedPrediction:
    label: str
    confidence: float
    # False for fallback labels that were assigned a default confidence.
    scored: bool = True


@dataclass(frozen=True)
class CategoryProfile:
    display_category: str
    tips: tuple[str, ...]
    impact: str


@dataclass(frozen=True)
class ClassificationResult:
    name: str
    category: str
    confidence_percent: int
    info: str
    tips: tuple[str, ...] = field(default_factory=tuple)
    impact: str = ""

    def to_payload(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "category": self.category,
            "confidence": self.confidence_percent,
            "info": self.info,
            "tips": list(self.tips),
            "impact": self.impact,
        }


__all__ = [
    "CategoryProfile",
    "ClassificationResult",
    "DEFAULT_CONFIDENCE_THRESHOLD",
    "FALLBACK_CONFIDENCE",
    "InferenceGateway",
    "NormalizedPrediction",
    "WasteCategory",
]
