from typing import Any

from boto3.exceptions import S3UploadFailedError
from botocore.exceptions import BotoCoreError, ClientError

STORAGE_EXCEPTIONS = (BotoCoreError, ClientError, S3UploadFailedError)


class ValidationError(Exception):
    """Raised when an incoming request is rejected before reaching storage."""

    def __init__(self, message: str, status_code: int = 400, **extra: Any) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.extra = extra


class StorageError(Exception):
    """Base class for failures reported by the object-storage service."""

    def __init__(self, code: str, message: str, http_status: int | None = None) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.http_status = http_status

    def as_dict(self) -> dict[str, Any]:
        return {"code": self.code, "message": self.message, "httpStatus": self.http_status}


class UpstreamUnavailable(StorageError):
    """The storage service could not be reached or the client is misconfigured."""


class UpstreamRejected(StorageError):
    """The storage service answered with an error response."""


def map_storage_error(exc: Exception) -> StorageError:
    if isinstance(exc, StorageError):
        return exc
    if isinstance(exc, ClientError):
        error = exc.response.get("Error", {})
        metadata = exc.response.get("ResponseMetadata", {})
        return UpstreamRejected(
            code=error.get("Code") or type(exc).__name__,
            message=error.get("Message") or str(exc),
            http_status=metadata.get("HTTPStatusCode"),
        )
    if isinstance(exc, S3UploadFailedError):
        return UpstreamRejected(code=type(exc).__name__, message=str(exc))
    return UpstreamUnavailable(code=type(exc).__name__, message=str(exc))
