from __future__ import annotations

import base64
import logging
import threading
from dataclasses import dataclass, field
from typing import Any

import requests

from .errors import ConfigurationError, UpstreamError
from .types import InferenceGateway


logger = logging.getLogger(__name__)


@dataclass
class RoboflowInferenceClient(InferenceGateway):
    """Send captures to a hosted Roboflow model and return its JSON reply."""

    model: str | None
    version: str | None
    api_key: str | None
    base_url: str = "https://detect.roboflow.com"
    timeout: float = 30.0
    # Shared by every caller when set; otherwise each worker thread gets its own.
    session: requests.Session | None = None
    _local: threading.local = field(init=False, repr=False, default_factory=threading.local)

    def infer(self, image_bytes: bytes) -> dict[str, Any]:
        self.ensure_configured()
        url = self.endpoint
        encoded = base64.b64encode(image_bytes).decode("ascii")
        logger.debug(
            "Calling inference endpoint url=%s image_bytes=%d",
            url,
            len(image_bytes),
        )
        try:
            response = self._session().post(
                url,
                params={"api_key": self.api_key},
                data=encoded,
                headers={"Content-Type": "application/x-www-form-urlencoded"},
                timeout=self.timeout,
            )
        except requests.Timeout as exc:
            raise UpstreamError(
                "Timed out waiting for the inference service", status=504
            ) from exc
        except requests.RequestException as exc:
            raise UpstreamError(f"Failed to reach inference service: {exc}") from exc

        if not response.ok:
            payload = _safe_json(response)
            logger.error(
                "Inference service returned status=%s body=%s",
                response.status_code,
                payload if payload is not None else response.text[:500],
            )
            raise UpstreamError(
                f"Inference service responded with HTTP {response.status_code}",
                status=response.status_code,
                payload=payload,
            )

        try:
            data = response.json()
        except ValueError as exc:
            raise UpstreamError("Inference service response was not valid JSON") from exc
        logger.debug("Inference service raw response: %s", data)
        return data

    def ensure_configured(self) -> None:
        missing = tuple(
            name
            for name, value in (
                ("model", self.model),
                ("version", self.version),
                ("api_key", self.api_key),
            )
            if not (value and str(value).strip())
        )
        if missing:
            raise ConfigurationError(
                f"Inference credentials missing: {', '.join(missing)}",
                missing=missing,
            )

    def _session(self) -> requests.Session:
        if self.session is not None:
            return self.session
        session = getattr(self._local, "session", None)
        if session is None:
            session = requests.Session()
            self._local.session = session
        return session

    @property
    def endpoint(self) -> str:
        return f"{self.base_url.rstrip('/')}/{self.model}/{self.version}"


def _safe_json(response: requests.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return None


__all__ = ["RoboflowInferenceClient"]
