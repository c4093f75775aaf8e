import asyncio
import io
import logging
import re
import time
from typing import Any, Callable
from urllib.parse import quote

import boto3
from botocore.client import Config

from uploader.core.config import Settings, StorageConfig
from uploader.core.errors import STORAGE_EXCEPTIONS, map_storage_error
from uploader.schemas import DiagnosticsReport, DiagnosticStep, FileListingEntry, UploadResult

logger = logging.getLogger(__name__)

DEFAULT_FILENAME = "video.mp4"
DIAGNOSTIC_LIST_KEYS = 5


def _sanitize_filename(filename: str) -> str:
    return re.sub(r"\s+", "_", filename)


def _current_millis() -> int:
    return time.time_ns() // 1_000_000


def build_s3_client(settings: Settings) -> Any:
    session = boto3.session.Session()
    return session.client(
        "s3",
        endpoint_url=str(settings.s3_endpoint) if settings.s3_endpoint else None,
        aws_access_key_id=settings.s3_access_key,
        aws_secret_access_key=settings.s3_secret_key,
        region_name=settings.aws_region,
        config=Config(signature_version="s3v4"),
    )


class StorageGateway:
    """Upload, list and probe objects under a single bucket prefix.

    Holds only the boto3 client and a frozen :class:`StorageConfig`; every
    blocking SDK call is pushed to a worker thread so requests never share
    mutable state.
    """

    def __init__(
        self,
        config: StorageConfig,
        client: Any,
        clock: Callable[[], int] = _current_millis,
    ) -> None:
        self.config = config
        self.client = client
        self._clock = clock

    @property
    def bucket(self) -> str:
        return self.config.bucket

    @property
    def prefix(self) -> str:
        return self.config.prefix

    def generate_upload_key(self, filename: str | None) -> str:
        safe_name = _sanitize_filename(filename or DEFAULT_FILENAME)
        return f"{self.prefix}{self._clock()}-{safe_name}"

    def public_url(self, key: str) -> str:
        encoded_key = quote(key, safe="!~*'()")
        return f"https://{self.bucket}.s3.{self.config.region}.amazonaws.com/{encoded_key}"

    def create_presigned_get(self, key: str, expires_in: int | None = None) -> str:
        return self.client.generate_presigned_url(
            "get_object",
            Params={"Bucket": self.bucket, "Key": key},
            ExpiresIn=expires_in if expires_in is not None else self.config.presigned_url_ttl,
        )

    async def probe_connectivity(self) -> DiagnosticsReport:
        report = DiagnosticsReport(region=self.config.region, bucket=self.bucket)

        try:
            head = await asyncio.to_thread(self.client.head_bucket, Bucket=self.bucket)
            report.steps.append(
                DiagnosticStep(
                    step="HeadBucket",
                    ok=True,
                    http_status=head.get("ResponseMetadata", {}).get("HTTPStatusCode"),
                )
            )
        except STORAGE_EXCEPTIONS as exc:
            error = map_storage_error(exc)
            logger.warning("HeadBucket failed for %s: %s", self.bucket, error.message)
            report.steps.append(DiagnosticStep(step="HeadBucket", ok=False, **error.as_dict()))

        try:
            listing = await asyncio.to_thread(
                self.client.list_objects_v2,
                Bucket=self.bucket,
                Prefix=self.prefix,
                MaxKeys=DIAGNOSTIC_LIST_KEYS,
            )
            keys = [item.get("Key") for item in listing.get("Contents") or []]
            report.steps.append(
                DiagnosticStep(step="ListObjectsV2", ok=True, count=len(keys), keys=keys)
            )
        except STORAGE_EXCEPTIONS as exc:
            error = map_storage_error(exc)
            logger.warning("ListObjectsV2 failed for %s: %s", self.bucket, error.message)
            report.steps.append(
                DiagnosticStep(step="ListObjectsV2", ok=False, **error.as_dict())
            )

        return report

    async def upload_object(
        self,
        data: bytes,
        content_type: str,
        filename: str | None,
        size: int,
    ) -> UploadResult:
        key = self.generate_upload_key(filename)

        def _upload() -> None:
            # upload_fileobj switches to multipart for large bodies and aborts
            # the multipart upload itself when a part fails.
            self.client.upload_fileobj(
                io.BytesIO(data),
                self.bucket,
                key,
                ExtraArgs={"ContentType": content_type},
            )

        try:
            await asyncio.to_thread(_upload)
        except STORAGE_EXCEPTIONS as exc:
            error = map_storage_error(exc)
            logger.error("Upload of %s failed: %s (%s)", key, error.message, error.code)
            raise error from exc

        logger.info("Uploaded %s (%d bytes)", key, size)
        return UploadResult(key=key, url=self.public_url(key), content_type=content_type, size=size)

    async def list_recent_objects(self, limit: int = 5) -> list[FileListingEntry]:
        try:
            listing = await asyncio.to_thread(
                self.client.list_objects_v2,
                Bucket=self.bucket,
                Prefix=self.prefix,
                MaxKeys=self.config.list_scan_limit,
            )
        except STORAGE_EXCEPTIONS as exc:
            error = map_storage_error(exc)
            logger.error("Listing %s/%s failed: %s", self.bucket, self.prefix, error.message)
            raise error from exc

        objects = [
            item
            for item in listing.get("Contents") or []
            if item.get("Key") and (item.get("Size") or 0) > 0
        ]
        # sorted() is stable, so equal timestamps keep the order S3 returned.
        recent = sorted(objects, key=lambda item: item["LastModified"], reverse=True)[:limit]
        logger.debug("Listed %d objects, returning %d", len(objects), len(recent))

        try:
            urls = await asyncio.gather(
                *(asyncio.to_thread(self.create_presigned_get, item["Key"]) for item in recent)
            )
        except STORAGE_EXCEPTIONS as exc:
            raise map_storage_error(exc) from exc

        return [
            FileListingEntry(
                key=item["Key"],
                size=item["Size"],
                last_modified=item["LastModified"],
                url=url,
            )
            for item, url in zip(recent, urls)
        ]


def create_storage_gateway(settings: Settings) -> StorageGateway:
    return StorageGateway(StorageConfig.from_settings(settings), build_s3_client(settings))
