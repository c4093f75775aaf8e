import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from uploader.api.middleware import UploadSizeLimitMiddleware
from uploader.api.routers import debug as debug_router
from uploader.api.routers import files as files_router
from uploader.api.routers import health as health_router
from uploader.api.routers import upload as upload_router
from uploader.core.config import Settings, get_settings
from uploader.core.errors import ValidationError
from uploader.services.storage import StorageGateway, create_storage_gateway

logger = logging.getLogger(__name__)


async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    logger.info("Rejected %s %s: %s", request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.message, **exc.extra},
    )


def create_app(
    settings: Settings | None = None,
    gateway: StorageGateway | None = None,
) -> FastAPI:
    settings = settings or get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(debug=settings.debug, title="Video Uploader API")
    app.state.settings = settings
    app.state.storage_gateway = gateway or create_storage_gateway(settings)

    app.add_middleware(UploadSizeLimitMiddleware, max_bytes=settings.max_upload_bytes)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(ValidationError, validation_error_handler)

    app.include_router(health_router.router)
    app.include_router(debug_router.router)
    app.include_router(upload_router.router)
    app.include_router(files_router.router)

    logger.info(
        "Storage gateway ready for bucket %s in %s",
        settings.s3_bucket,
        settings.aws_region,
    )
    return app


def run() -> None:
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "uploader.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )


app = create_app()


if __name__ == "__main__":
    run()
