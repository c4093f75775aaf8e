from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class UploadResult(CamelModel):
    key: str
    url: str
    content_type: str
    size: int


class UploadResponse(UploadResult):
    message: str = "Upload successful"
    source: str


class FileListingEntry(CamelModel):
    key: str
    size: int
    last_modified: datetime
    url: str


class FileListResponse(CamelModel):
    count: int
    files: list[FileListingEntry]
    message: str | None = None
    bucket: str | None = None
