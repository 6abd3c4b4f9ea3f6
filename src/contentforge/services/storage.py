"""Blob storage for generated media.

Uploads go to an S3-compatible bucket (Cloudflare R2). The store is optional:
when it is not configured every upload returns ``None`` and callers fall back
to inline data.
"""

import asyncio
import base64
import time
from dataclasses import dataclass
from typing import Any
from uuid import uuid4

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from contentforge.adapters.base import is_usable_key
from contentforge.config import Settings
from contentforge.logging import get_logger

logger = get_logger(__name__)

AUDIO_MIME_TYPE = "audio/mpeg"


@dataclass
class StoredArtifact:
    """Reference to a persisted artifact.

    ``reference`` is a public URL when ``stored`` is True, otherwise a data URI.
    """

    reference: str
    stored: bool


def data_uri(mime_type: str, payload_b64: str) -> str:
    return f"data:{mime_type};base64,{payload_b64}"


class BlobStorage:
    """Upload helper around a boto3 S3 client pointed at R2."""

    def __init__(self, settings: Settings, s3_client: Any | None = None) -> None:
        self.bucket = settings.r2_bucket_name
        self.public_url = (settings.r2_public_url or "").rstrip("/")
        self._settings = settings
        self._s3_client = s3_client

    @property
    def is_configured(self) -> bool:
        """True only when every connection setting holds a real value."""
        s = self._settings
        return all(
            is_usable_key(value)
            for value in (s.r2_endpoint, s.r2_access_key_id, s.r2_secret_access_key, s.r2_public_url)
        )

    def _get_s3_client(self) -> Any:
        """Lazy-load the boto3 S3 client."""
        if self._s3_client is None:
            self._s3_client = boto3.client(
                "s3",
                endpoint_url=self._settings.r2_endpoint,
                aws_access_key_id=self._settings.r2_access_key_id,
                aws_secret_access_key=self._settings.r2_secret_access_key,
                region_name="auto",
            )
        return self._s3_client

    @staticmethod
    def build_key(extension: str) -> str:
        return f"{int(time.time() * 1000)}-{uuid4()}.{extension}"

    async def upload_bytes(self, data: bytes, content_type: str, extension: str) -> str | None:
        """Upload raw bytes and return the public URL, or None if unavailable."""
        if not self.is_configured:
            logger.debug("blob_storage_not_configured")
            return None

        key = self.build_key(extension)
        try:
            # boto3 is blocking, and rejects a malformed endpoint with ValueError
            s3_client = self._get_s3_client()
            await asyncio.to_thread(
                s3_client.put_object,
                Bucket=self.bucket,
                Key=key,
                Body=data,
                ContentType=content_type,
            )
        except (BotoCoreError, ClientError, ValueError) as e:
            logger.error("blob_upload_failed", key=key, error=str(e))
            return None

        logger.info("blob_uploaded", key=key, size=len(data), content_type=content_type)
        return f"{self.public_url}/{key}"

    async def upload_base64(self, payload_b64: str, content_type: str, extension: str) -> str | None:
        """Decode a base64 payload and upload it."""
        return await self.upload_bytes(base64.b64decode(payload_b64), content_type, extension)

    async def persist_audio(self, audio_data: bytes) -> StoredArtifact:
        """Store synthesized audio, falling back to an inline data URI."""
        audio_b64 = base64.b64encode(audio_data).decode("ascii")
        url = await self.upload_base64(audio_b64, AUDIO_MIME_TYPE, "mp3")
        if url:
            return StoredArtifact(reference=url, stored=True)

        if self.is_configured:
            logger.warning("audio_upload_fallback_inline", size=len(audio_data))
        return StoredArtifact(reference=data_uri(AUDIO_MIME_TYPE, audio_b64), stored=False)
