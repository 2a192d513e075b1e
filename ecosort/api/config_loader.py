"""Service configuration.

Settings come from an optional JSON file (``config/ecosort.json`` by
default). Inference credentials are never stored there; the file only names
the environment variables that hold them.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

from ..ai.types import DEFAULT_CONFIDENCE_THRESHOLD, FALLBACK_CONFIDENCE

logger = logging.getLogger(__name__)


@dataclass
class ServerSettings:
    host: str = "0.0.0.0"
    port: int = 5000


@dataclass
class InferenceSettings:
    base_url: str = "https://detect.roboflow.com"
    timeout: float = 30.0
    confidence_threshold: float = DEFAULT_CONFIDENCE_THRESHOLD
    fallback_confidence: float = FALLBACK_CONFIDENCE
    model_env: str = "ROBOFLOW_MODEL_NAME"
    version_env: str = "ROBOFLOW_MODEL_VERSION"
    api_key_env: str = "ROBOFLOW_API_KEY"


@dataclass
class UploadSettings:
    field_name: str = "wasteImage"
    max_bytes: int = 10 * 1024 * 1024


@dataclass
class AppConfig:
    server: ServerSettings = field(default_factory=ServerSettings)
    inference: InferenceSettings = field(default_factory=InferenceSettings)
    upload: UploadSettings = field(default_factory=UploadSettings)

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "AppConfig":
        defaults_server = ServerSettings()
        defaults_inference = InferenceSettings()
        defaults_upload = UploadSettings()

        server_raw = _section(payload, "server")
        inference_raw = _section(payload, "inference")
        upload_raw = _section(payload, "upload")

        server = ServerSettings(
            host=_string(server_raw.get("host"), defaults_server.host),
            port=int(_number(server_raw.get("port"), defaults_server.port, minimum=1)),
        )
        inference = InferenceSettings(
            base_url=_string(inference_raw.get("base_url"), defaults_inference.base_url),
            timeout=_number(
                inference_raw.get("timeout"), defaults_inference.timeout, minimum=0.1
            ),
            confidence_threshold=_fraction(
                inference_raw.get("confidence_threshold"),
                defaults_inference.confidence_threshold,
            ),
            fallback_confidence=_fraction(
                inference_raw.get("fallback_confidence"),
                defaults_inference.fallback_confidence,
            ),
            model_env=_string(inference_raw.get("model_env"), defaults_inference.model_env),
            version_env=_string(
                inference_raw.get("version_env"), defaults_inference.version_env
            ),
            api_key_env=_string(
                inference_raw.get("api_key_env"), defaults_inference.api_key_env
            ),
        )
        upload = UploadSettings(
            field_name=_string(upload_raw.get("field_name"), defaults_upload.field_name),
            max_bytes=int(
                _number(upload_raw.get("max_bytes"), defaults_upload.max_bytes, minimum=1)
            ),
        )
        return cls(server=server, inference=inference, upload=upload)


@dataclass(frozen=True)
class InferenceCredentials:
    model: str | None
    version: str | None
    api_key: str | None

    @property
    def missing(self) -> list[str]:
        return [
            name
            for name, value in (
                ("model", self.model),
                ("version", self.version),
                ("api_key", self.api_key),
            )
            if not value
        ]


def load_config(path: str | Path | None) -> AppConfig:
    """Load configuration from ``path``; ``None`` yields the defaults."""
    if path is None:
        return AppConfig()
    config_path = Path(path)
    data = json.loads(config_path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"Configuration root in {config_path} must be an object")
    return AppConfig.from_dict(data)


def resolve_credentials(
    settings: InferenceSettings, environ: Mapping[str, str] | None = None
) -> InferenceCredentials:
    env = os.environ if environ is None else environ
    return InferenceCredentials(
        model=(env.get(settings.model_env) or "").strip() or None,
        version=(env.get(settings.version_env) or "").strip() or None,
        api_key=(env.get(settings.api_key_env) or "").strip() or None,
    )


def _section(payload: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    value = payload.get(name) if isinstance(payload, Mapping) else None
    return value if isinstance(value, Mapping) else {}


def _string(value: Any, default: str) -> str:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return default


def _number(value: Any, default: float, minimum: float | None = None) -> float:
    if value is None or isinstance(value, bool):
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        logger.warning("Ignoring invalid numeric setting %r; using %s", value, default)
        return default
    if minimum is not None and number < minimum:
        logger.warning("Setting %r below minimum %s; using %s", value, minimum, default)
        return default
    return number


def _fraction(value: Any, default: float) -> float:
    number = _number(value, default, minimum=0.0)
    if number > 1.0:
        logger.warning("Confidence setting %r above 1.0; using %s", value, default)
        return default
    return number


__all__ = [
    "AppConfig",
    "InferenceCredentials",
    "InferenceSettings",
    "ServerSettings",
    "UploadSettings",
    "load_config",
    "resolve_credentials",
]
