from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from uploader.api.deps import get_app_settings, get_storage_gateway
from uploader.core.config import Settings
from uploader.core.errors import StorageError
from uploader.schemas import FileListResponse
from uploader.services.storage import StorageGateway

router = APIRouter(prefix="/files", tags=["files"])


@router.get("", response_model=FileListResponse, response_model_exclude_none=True)
async def list_files(
    gateway: StorageGateway = Depends(get_storage_gateway),
    settings: Settings = Depends(get_app_settings),
):
    try:
        files = await gateway.list_recent_objects(settings.recent_files_limit)
    except StorageError as exc:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": "Failed to list files",
                "code": exc.code,
                "details": exc.message,
                "bucket": gateway.bucket,
                "prefix": gateway.prefix,
            },
        )

    if not files:
        return FileListResponse(
            count=0,
            files=[],
            message="No files found",
            bucket=gateway.bucket,
        )
    return FileListResponse(count=len(files), files=files)
