"""StorageService: validates image uploads and stores them in S3.

boto3 calls are blocking and run in a worker thread via asyncio.to_thread().
Objects are private; callers get a presigned GET URL back.
"""

import asyncio
import mimetypes

import boto3
import structlog

from storefront.core.clock import Clock, epoch_millis, utc_now
from storefront.core.config import get_settings
from storefront.core.exceptions import UpstreamError, ValidationError

logger = structlog.get_logger(__name__)

IMAGE_CATEGORIES: frozenset[str] = frozenset({"blog", "product", "general"})


def validate_image(content: bytes | None, content_type: str | None, max_bytes: int) -> None:
    """Raise ValidationError unless ``content`` is a non-empty image within ``max_bytes``."""
    if not content:
        raise ValidationError("File required")
    if not content_type or not content_type.startswith("image/"):
        raise ValidationError("Only image files allowed")
    if len(content) > max_bytes:
        limit = f"{max_bytes // (1024 * 1024)}MB" if max_bytes >= 1024 * 1024 else f"{max_bytes} bytes"
        raise ValidationError(f"File size must be less than {limit}")


def file_extension(filename: str | None, content_type: str) -> str:
    if filename and "." in filename:
        return filename.rsplit(".", 1)[-1].lower()
    guessed = mimetypes.guess_extension(content_type) or ".bin"
    return guessed.lstrip(".")


class StorageService:
    """Uploads to the images and profile-pictures buckets.

    Public API:
        upload_image(content, content_type, filename, category) -> str
        upload_profile_picture(content, content_type, filename, user_id) -> str
    """

    def __init__(self, clock: Clock = utc_now, s3_client=None):
        self.settings = get_settings()
        self.clock = clock
        self._s3 = s3_client

    @property
    def s3(self):
        if self._s3 is None:
            self._s3 = boto3.client("s3", region_name=self.settings.s3_region)
        return self._s3

    async def upload_image(
        self,
        content: bytes,
        content_type: str | None,
        filename: str | None,
        category: str = "general",
    ) -> str:
        validate_image(content, content_type, self.settings.max_upload_bytes)
        if category not in IMAGE_CATEGORIES:
            category = "general"
        name = f"{category}-{epoch_millis(self.clock())}.{file_extension(filename, content_type)}"
        return await self._put(self.settings.images_bucket, name, content, content_type)

    async def upload_profile_picture(
        self,
        content: bytes,
        content_type: str | None,
        filename: str | None,
        user_id: str,
    ) -> str:
        validate_image(content, content_type, self.settings.max_upload_bytes)
        name = f"{user_id}-{epoch_millis(self.clock())}.{file_extension(filename, content_type)}"
        return await self._put(self.settings.profile_pictures_bucket, name, content, content_type)

    async def _put(self, bucket: str, key: str, content: bytes, content_type: str) -> str:
        if not bucket:
            raise UpstreamError("Upload storage is not configured")

        try:
            await asyncio.to_thread(
                self.s3.put_object,
                Bucket=bucket,
                Key=key,
                Body=content,
                ContentType=content_type,
            )
            url = await asyncio.to_thread(
                self.s3.generate_presigned_url,
                "get_object",
                Params={"Bucket": bucket, "Key": key},
                ExpiresIn=self.settings.signed_url_ttl_seconds,
            )
        except Exception as exc:
            logger.error(
                "upload_failed",
                bucket=bucket,
                key=key,
                error=str(exc),
                error_type=type(exc).__name__,
            )
            raise UpstreamError("Upload failed") from exc

        logger.info("upload_stored", bucket=bucket, key=key, size=len(content))
        return url
