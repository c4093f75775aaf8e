from functools import lru_cache
from typing import ClassVar, Literal

from pydantic import BaseModel, ConfigDict, Field, HttpUrl
from pydantic_settings import BaseSettings, SettingsConfigDict

UPLOAD_PREFIX = "uploads/"
CLIENT_SOURCE = "stickers-recorder"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    env: Literal["local", "prod", "test"] = Field(default="local", alias="ENV")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=4000, alias="PORT")
    cors_origins: list[str] = Field(default=["*"], alias="CORS_ORIGINS")

    aws_region: str = Field(..., alias="AWS_REGION")
    s3_bucket: str = Field(..., alias="S3_BUCKET")
    s3_endpoint: HttpUrl | None = Field(default=None, alias="S3_ENDPOINT_URL")
    s3_access_key: str | None = Field(default=None, alias="AWS_ACCESS_KEY_ID")
    s3_secret_key: str | None = Field(default=None, alias="AWS_SECRET_ACCESS_KEY")

    s3_prefix: ClassVar[str] = UPLOAD_PREFIX
    client_source: ClassVar[str] = CLIENT_SOURCE

    max_upload_bytes: int = Field(default=200 * 1024 * 1024, alias="MAX_UPLOAD_BYTES")
    presigned_url_ttl: int = Field(default=300, alias="PRESIGNED_URL_TTL")
    list_scan_limit: ClassVar[int] = 200
    recent_files_limit: ClassVar[int] = 5


class StorageConfig(BaseModel):
    """Read-only storage settings handed to the gateway at startup."""

    model_config = ConfigDict(frozen=True)

    region: str
    bucket: str
    prefix: str = UPLOAD_PREFIX
    presigned_url_ttl: int = 300
    list_scan_limit: int = 200

    @classmethod
    def from_settings(cls, settings: Settings) -> "StorageConfig":
        return cls(
            region=settings.aws_region,
            bucket=settings.s3_bucket,
            prefix=settings.s3_prefix,
            presigned_url_ttl=settings.presigned_url_ttl,
            list_scan_limit=settings.list_scan_limit,
        )


@lru_cache
def get_settings() -> Settings:
    return Settings()
