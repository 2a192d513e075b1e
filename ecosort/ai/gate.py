from __future__ import annotations

from dataclasses import dataclass

from .errors import LowConfidenceError
from .types import DEFAULT_CONFIDENCE_THRESHOLD, NormalizedPrediction


@dataclass(frozen=True)
class ConfidenceGate:
    """Reject scored predictions whose confidence falls below ``threshold``.

    Fallback labels carry no measured confidence and pass through unchanged.
    """

    threshold: float = DEFAULT_CONFIDENCE_THRESHOLD

    def check(self, prediction: NormalizedPrediction) -> NormalizedPrediction:
        if prediction.scored and prediction.confidence < self.threshold:
            raise LowConfidenceError(
                label=prediction.label,
                confidence=prediction.confidence,
                threshold=self.threshold,
            )
        return prediction


__all__ = ["ConfidenceGate"]
