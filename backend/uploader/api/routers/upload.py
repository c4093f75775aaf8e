from fastapi import APIRouter, Depends, Header, Request, status
from fastapi.responses import JSONResponse
from starlette.datastructures import UploadFile

from uploader.api.deps import get_app_settings, get_storage_gateway
from uploader.core.config import Settings
from uploader.core.errors import StorageError, ValidationError
from uploader.schemas import UploadResponse
from uploader.services.storage import StorageGateway

router = APIRouter(tags=["upload"])


def validate_source(source: str | None, settings: Settings) -> None:
    if source != settings.client_source:
        raise ValidationError("Invalid upload source")


def validate_video(video: UploadFile | str | None) -> UploadFile:
    # A plain text "video" field counts as no file at all.
    if not isinstance(video, UploadFile):
        raise ValidationError("No file uploaded.")
    if not (video.content_type or "").startswith("video/"):
        raise ValidationError("File must be a video.")
    return video


@router.post("/upload", response_model=UploadResponse)
async def upload_video(
    request: Request,
    x_client_source: str | None = Header(default=None),
    gateway: StorageGateway = Depends(get_storage_gateway),
    settings: Settings = Depends(get_app_settings),
):
    validate_source(x_client_source, settings)

    async with request.form() as form:
        video = validate_video(form.get("video"))
        data = await video.read()
        content_type = video.content_type
        filename = video.filename

    if not data:
        raise ValidationError("Uploaded file is empty.")
    if len(data) > settings.max_upload_bytes:
        raise ValidationError(
            "File too large",
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            limit=settings.max_upload_bytes,
        )

    try:
        result = await gateway.upload_object(data, content_type, filename, len(data))
    except StorageError as exc:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Upload failed", "details": exc.message},
        )

    return UploadResponse(**result.model_dump(), source=x_client_source)
