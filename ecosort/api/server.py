from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.datastructures import UploadFile
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..ai.errors import (
    GENERIC_FAILURE_MESSAGE,
    ClassificationError,
    ConfigurationError,
    UpstreamError,
)
from ..ai.gate import ConfidenceGate
from ..ai.pipeline import ClassificationPipeline, Stage
from ..ai.roboflow_client import RoboflowInferenceClient
from ..ai.tips import all_profiles
from .config_loader import AppConfig, InferenceCredentials, resolve_credentials
from .schemas import CategoryProfileModel, ClassificationResponse
from .uploads import validate_image_bytes


logger = logging.getLogger(__name__)


def build_pipeline(
    config: AppConfig, credentials: InferenceCredentials
) -> ClassificationPipeline:
    gateway = RoboflowInferenceClient(
        model=credentials.model,
        version=credentials.version,
        api_key=credentials.api_key,
        base_url=config.inference.base_url,
        timeout=config.inference.timeout,
    )
    return ClassificationPipeline(
        gateway=gateway,
        gate=ConfidenceGate(threshold=config.inference.confidence_threshold),
        fallback_confidence=config.inference.fallback_confidence,
        # Leave headroom over the HTTP timeout so requests reports it first.
        timeout=config.inference.timeout + 5.0,
    )


def create_app(
    config: AppConfig | None = None,
    pipeline: ClassificationPipeline | None = None,
    credentials: InferenceCredentials | None = None,
) -> FastAPI:
    cfg = config or AppConfig()
    if pipeline is None:
        creds = credentials or resolve_credentials(cfg.inference)
        if creds.missing:
            logger.warning(
                "Inference credentials missing (%s); classification requests will fail until configured",
                ", ".join(creds.missing),
            )
        pipeline = build_pipeline(cfg, creds)

    app = FastAPI(title="EcoSort API", version="0.1.0")
    app.state.config = cfg
    app.state.pipeline = pipeline

    logger.info(
        "API server initialised gateway=%s threshold=%.2f fallback_confidence=%.2f upload_field=%s",
        pipeline.gateway.__class__.__name__,
        pipeline.gate.threshold,
        pipeline.fallback_confidence,
        cfg.upload.field_name,
    )

    @app.exception_handler(ClassificationError)
    async def classification_error_handler(
        request: Request, exc: ClassificationError
    ) -> JSONResponse:
        if isinstance(exc, (ConfigurationError, UpstreamError)):
            logger.error(
                "Classification failed kind=%s status=%d error=%s",
                exc.kind.value,
                exc.status_code,
                exc.message,
            )
        else:
            logger.warning(
                "Classification rejected kind=%s error=%s", exc.kind.value, exc.message
            )
        return JSONResponse(status_code=exc.status_code, content=exc.body())

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        if exc.status_code == 404:
            return JSONResponse(status_code=404, content={"message": "API route not found."})
        return JSONResponse(status_code=exc.status_code, content={"message": exc.detail})

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error path=%s", request.url.path)
        return JSONResponse(status_code=500, content={"error": GENERIC_FAILURE_MESSAGE})

    @app.get("/", response_class=PlainTextResponse)
    def index() -> str:
        return "Hello from the EcoSort Server!"

    @app.get("/health", response_model=dict[str, str])
    def healthcheck() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/api/classify/categories", response_model=list[CategoryProfileModel])
    def list_categories() -> list[CategoryProfileModel]:
        return [
            CategoryProfileModel.from_profile(key, profile)
            for key, profile in all_profiles().items()
        ]

    @app.post("/api/classify/upload", response_model=ClassificationResponse)
    async def upload_capture(request: Request) -> ClassificationResponse:
        form = await request.form()
        upload = form.get(cfg.upload.field_name)
        data: bytes | None = None
        if isinstance(upload, UploadFile):
            # One byte past the limit is enough to detect an oversized upload.
            data = await upload.read(cfg.upload.max_bytes + 1)
            await upload.close()
        logger.info(
            "Classification upload field=%s filename=%s bytes=%d",
            cfg.upload.field_name,
            getattr(upload, "filename", None),
            len(data or b""),
        )
        image_bytes = validate_image_bytes(data, cfg.upload.max_bytes)
        result = await pipeline.classify(image_bytes)
        logger.debug("Stage %s name=%s", Stage.RESPONDED.value, result.name)
        return ClassificationResponse.from_result(result)

    return app


__all__ = ["build_pipeline", "create_app"]
