from uploader.schemas.diagnostics import DiagnosticStep, DiagnosticsReport
from uploader.schemas.storage import (
    FileListingEntry,
    FileListResponse,
    UploadResponse,
    UploadResult,
)

__all__ = [
    "DiagnosticStep",
    "DiagnosticsReport",
    "FileListingEntry",
    "FileListResponse",
    "UploadResponse",
    "UploadResult",
]
