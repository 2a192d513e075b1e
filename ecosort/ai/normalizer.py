"""Collapse upstream inference payloads into ranked predictions.

The detection service answers in one of three shapes::

    {"predictions": {"<label>": {"confidence": 0.93, ...}, ...}}
    {"predictions": [{"class": "<label>", "confidence": 0.93}, ...]}
    {"predicted_classes": ["<label>", ...]}

``detect_shape`` decodes the payload into one of the variants below, checked
in that order, and ``normalize`` ranks the candidates so the winning
prediction comes first.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Union

from .types import FALLBACK_CONFIDENCE, NormalizedPrediction


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class KeyedDetections:
    entries: tuple[tuple[str, float], ...]


@dataclass(frozen=True)
class ArrayDetections:
    entries: tuple[tuple[str, float], ...]


@dataclass(frozen=True)
class FlatLabels:
    labels: tuple[str, ...]


RawShape = Union[KeyedDetections, ArrayDetections, FlatLabels]


def detect_shape(payload: Any) -> RawShape | None:
    if not isinstance(payload, dict):
        return None

    predictions = payload.get("predictions")
    if isinstance(predictions, dict) and predictions:
        entries = []
        for label, detail in predictions.items():
            if not isinstance(label, str) or not label.strip():
                continue
            confidence = detail.get("confidence") if isinstance(detail, dict) else None
            entries.append((label, _coerce_confidence(confidence)))
        return KeyedDetections(entries=tuple(entries))

    if isinstance(predictions, list) and predictions:
        entries = []
        for item in predictions:
            if not isinstance(item, dict):
                continue
            label = item.get("class")
            if not isinstance(label, str) or not label.strip():
                continue
            entries.append((label, _coerce_confidence(item.get("confidence"))))
        return ArrayDetections(entries=tuple(entries))

    classes = payload.get("predicted_classes")
    if isinstance(classes, list):
        labels = tuple(
            label for label in classes if isinstance(label, str) and label.strip()
        )
        if labels:
            return FlatLabels(labels=labels)

    return None


def normalize(
    payload: Any, fallback_confidence: float = FALLBACK_CONFIDENCE
) -> list[NormalizedPrediction]:
    """Return candidates ordered best first; an empty list means no prediction."""
    shape = detect_shape(payload)
    if shape is None:
        logger.debug("Inference payload matched no known shape")
        return []

    if isinstance(shape, KeyedDetections):
        candidates = _rank(shape.entries)
    elif isinstance(shape, ArrayDetections):
        # Elements have to beat a zero seed to count as detections.
        candidates = _rank(
            (label, confidence) for label, confidence in shape.entries if confidence > 0.0
        )
    else:
        candidates = [
            NormalizedPrediction(label=label, confidence=fallback_confidence, scored=False)
            for label in shape.labels
        ]

    logger.debug(
        "Normalized %s payload into %d candidate(s)",
        type(shape).__name__,
        len(candidates),
    )
    return candidates


def select_top(candidates: list[NormalizedPrediction]) -> NormalizedPrediction | None:
    return candidates[0] if candidates else None


def _rank(entries) -> list[NormalizedPrediction]:
    # sorted() is stable, so equal confidences keep their encounter order.
    ranked = sorted(entries, key=lambda entry: entry[1], reverse=True)
    return [
        NormalizedPrediction(label=label, confidence=max(0.0, min(1.0, score)))
        for label, score in ranked
    ]


def _coerce_confidence(value: Any) -> float:
    if isinstance(value, bool):
        return 0.0
    try:
        score = float(value)
    except (TypeError, ValueError):
        return 0.0
    if score != score or score in (float("inf"), float("-inf")):
        return 0.0
    # Clamped after ranking so out-of-range scores still order correctly.
    return score


__all__ = [
    "ArrayDetections",
    "FlatLabels",
    "KeyedDetections",
    "RawShape",
    "detect_shape",
    "normalize",
    "select_top",
]
