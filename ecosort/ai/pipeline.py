from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Any

from .categories import map_waste_category
from .errors import UnclassifiableError, UpstreamError, ValidationError
from .gate import ConfidenceGate
from .normalizer import normalize, select_top
from .tips import profile_for
from .types import (
    FALLBACK_CONFIDENCE,
    ClassificationResult,
    InferenceGateway,
    NormalizedPrediction,
)


logger = logging.getLogger(__name__)


class Stage(str, Enum):
    RECEIVED = "received"
    INFERRED = "inferred"
    NORMALIZED = "normalized"
    GATED = "gated"
    MAPPED = "mapped"
    ASSEMBLED = "assembled"
    RESPONDED = "responded"


def confidence_percent(fraction: float) -> int:
    """Convert a 0-1 fraction to a whole percentage, rounding halves up."""
    percent = (Decimal(str(fraction)) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return max(0, min(100, int(percent)))


@dataclass
class ClassificationPipeline:
    gateway: InferenceGateway
    gate: ConfidenceGate = field(default_factory=ConfidenceGate)
    fallback_confidence: float = FALLBACK_CONFIDENCE
    timeout: float | None = None

    async def classify(self, image_bytes: bytes | None) -> ClassificationResult:
        self._validate(image_bytes)
        raw = await self._infer_async(image_bytes)
        return self.resolve(raw)

    def run(self, image_bytes: bytes | None) -> ClassificationResult:
        self._validate(image_bytes)
        raw = self.gateway.infer(image_bytes)
        logger.debug("Stage %s", Stage.INFERRED.value)
        return self.resolve(raw)

    def resolve(self, raw: dict[str, Any]) -> ClassificationResult:
        """Turn a raw inference payload into the final verdict."""
        candidates = normalize(raw, fallback_confidence=self.fallback_confidence)
        top = select_top(candidates)
        if top is None:
            logger.warning("No usable prediction in inference response")
            raise UnclassifiableError("No object detected or low confidence.")
        logger.debug("Stage %s top=%s confidence=%.4f", Stage.NORMALIZED.value, top.label, top.confidence)

        gated = self.gate.check(top)
        logger.debug("Stage %s", Stage.GATED.value)

        result = self._assemble(gated)
        logger.debug("Stage %s", Stage.ASSEMBLED.value)
        logger.info(
            "Classified label=%s category=%s confidence=%d%%",
            result.name,
            result.category,
            result.confidence_percent,
        )
        return result

    def _validate(self, image_bytes: bytes | None) -> None:
        if not image_bytes:
            raise ValidationError("No file uploaded.")
        logger.debug("Stage %s image_bytes=%d", Stage.RECEIVED.value, len(image_bytes))

    async def _infer_async(self, image_bytes: bytes) -> dict[str, Any]:
        call = asyncio.to_thread(self.gateway.infer, image_bytes)
        try:
            if self.timeout is None:
                raw = await call
            else:
                raw = await asyncio.wait_for(call, timeout=self.timeout)
        except asyncio.TimeoutError as exc:
            raise UpstreamError(
                "Timed out waiting for the inference service", status=504
            ) from exc
        except asyncio.CancelledError:
            logger.info("Inference request cancelled before completion")
            raise
        logger.debug("Stage %s", Stage.INFERRED.value)
        return raw

    def _assemble(self, prediction: NormalizedPrediction) -> ClassificationResult:
        category = map_waste_category(prediction.label)
        logger.debug("Stage %s category=%s", Stage.MAPPED.value, category.value)
        profile = profile_for(category)
        return ClassificationResult(
            name=prediction.label,
            category=profile.display_category,
            confidence_percent=confidence_percent(prediction.confidence),
            info=f"This item has been identified as {prediction.label}.",
            tips=profile.tips,
            impact=profile.impact,
        )


__all__ = ["ClassificationPipeline", "Stage", "confidence_percent"]
