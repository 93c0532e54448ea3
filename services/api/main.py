from __future__ import annotations

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger

from core.exceptions import PhotoStoreError
from core.logging_config import setup_logging
from core.settings import Settings, get_settings
from core.storage import build_storage
from core.uploads import UploadOrchestrator
from services.api.exception_handlers import photo_store_exception_handler, unhandled_exception_handler
from services.api.middleware import RequestLoggingMiddleware
from services.api.routers.storage import router as storage_router
from services.api.routes import router as uploads_router


def build_orchestrator(settings: Settings) -> UploadOrchestrator:
    storage = build_storage(settings.storage)
    return UploadOrchestrator(
        storage,
        prefix=settings.storage.prefix,
        public_base_url=settings.storage.public_base_url,
        policy=settings.storage.overwrite_policy,
    )


def create_app(
    settings: Settings | None = None,
    orchestrator: UploadOrchestrator | None = None,
) -> FastAPI:
    settings = settings or get_settings()
    setup_logging(
        level=settings.logging.level,
        json_format=settings.logging.json_format,
        log_file=settings.logging.log_file,
    )

    app = FastAPI(
        title="Photo Storage API",
        version="0.1.0",
        description="Upload, fetch, update and delete user photos in object storage",
    )
    # Store client is built once here and shared through app.state
    app.state.orchestrator = orchestrator or build_orchestrator(settings)
    app.state.settings = settings

    app.add_middleware(RequestLoggingMiddleware)

    @app.get("/healthz", tags=["meta"])
    async def healthcheck() -> dict[str, str]:
        return {"status": "ok"}

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        logger.warning("Rejected malformed request on {path}: {errors}", path=request.url.path, errors=exc.errors())
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"code": 400, "message": "Missing required parameters."},
        )

    app.add_exception_handler(PhotoStoreError, photo_store_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    app.include_router(uploads_router)
    app.include_router(storage_router)

    logger.info(
        "API initialised with bucket={bucket} backend={backend} policy={policy}",
        bucket=app.state.orchestrator.storage.bucket,
        backend=settings.storage.backend,
        policy=app.state.orchestrator.policy.value,
    )
    return app


def serve() -> None:
    """Run the API with uvicorn on the configured host and port."""
    import uvicorn

    settings = get_settings()
    app = create_app(settings)
    logger.info("Server is running on port {port}", port=settings.server.port)
    uvicorn.run(app, host=settings.server.host, port=settings.server.port, log_config=None)


__all__ = ["create_app", "build_orchestrator", "serve"]


if __name__ == "__main__":
    serve()
