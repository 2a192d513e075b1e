"""Error kinds raised by the classification pipeline.

Each stage raises exactly one of the classes below. The web layer renders
them through ``status_code`` and ``body()`` without inspecting messages.
"""

from __future__ import annotations

from enum import Enum
from typing import Any


GENERIC_FAILURE_MESSAGE = "An error occurred while classifying the image."


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    CONFIGURATION = "configuration"
    UPSTREAM = "upstream"
    UNCLASSIFIABLE = "unclassifiable"
    LOW_CONFIDENCE = "low_confidence"


class ClassificationError(Exception):
    kind: ErrorKind
    status_code: int = 500
    body_key: str = "error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def body(self) -> dict[str, Any]:
        return {self.body_key: self.message}


class ValidationError(ClassificationError):
    kind = ErrorKind.VALIDATION
    status_code = 400
    body_key = "msg"


class ConfigurationError(ClassificationError):
    kind = ErrorKind.CONFIGURATION
    status_code = 500

    def __init__(self, message: str, missing: tuple[str, ...] = ()) -> None:
        super().__init__(message)
        self.missing = missing

    def body(self) -> dict[str, Any]:
        return {"error": "Server configuration error"}


class UpstreamError(ClassificationError):
    kind = ErrorKind.UPSTREAM

    def __init__(
        self,
        message: str,
        status: int | None = None,
        payload: Any = None,
    ) -> None:
        super().__init__(message)
        self.status = status
        self.payload = payload

    @property
    def upstream_error(self) -> str | None:
        if isinstance(self.payload, dict):
            value = self.payload.get("error")
            if value is not None:
                return value if isinstance(value, str) else str(value)
        return None

    @property
    def status_code(self) -> int:  # type: ignore[override]
        if self.status == 504:
            return 504
        if self.status is not None and self.upstream_error is not None:
            return self.status
        return 500

    def body(self) -> dict[str, Any]:
        upstream_error = self.upstream_error
        if self.status is not None and upstream_error is not None:
            return {"error": upstream_error}
        if self.status == 504:
            return {"error": self.message}
        return {"error": GENERIC_FAILURE_MESSAGE}


class UnclassifiableError(ClassificationError):
    kind = ErrorKind.UNCLASSIFIABLE
    status_code = 400
    body_key = "msg"


class LowConfidenceError(ClassificationError):
    kind = ErrorKind.LOW_CONFIDENCE
    status_code = 400
    body_key = "msg"

    def __init__(self, label: str, confidence: float, threshold: float) -> None:
        super().__init__(
            f"Prediction '{label}' confidence {confidence:.2f} is below threshold {threshold:.2f}."
        )
        self.label = label
        self.confidence = confidence
        self.threshold = threshold


__all__ = [
    "ClassificationError",
    "ConfigurationError",
    "ErrorKind",
    "GENERIC_FAILURE_MESSAGE",
    "LowConfidenceError",
    "UnclassifiableError",
    "UpstreamError",
    "ValidationError",
]
