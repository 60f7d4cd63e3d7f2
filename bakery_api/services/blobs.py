"""
Bakery API — Image storage (S3)

boto3 is synchronous, so every call is pushed to the thread pool.
"""
import logging
import mimetypes
import time
from functools import lru_cache
from typing import Any, Protocol

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from starlette.concurrency import run_in_threadpool

from bakery_api.core.config import get_settings
from bakery_api.core.errors import BlobStoreError, NotFoundError

settings = get_settings()
logger = logging.getLogger(__name__)

MISSING_OBJECT_CODES = {"404", "NoSuchKey", "NotFound"}


class BlobStore(Protocol):
    async def upload(self, body: bytes, key: str, content_type: str) -> str: ...
    async def exists(self, key: str) -> bool: ...
    async def delete(self, key: str) -> None: ...
    async def signed_url(self, key: str) -> str: ...


class S3BlobStore:
    def __init__(self, client: Any = None, bucket: str | None = None):
        self._client = client or boto3.client(
            "s3",
            aws_access_key_id=settings.S3_KEY or None,
            aws_secret_access_key=settings.S3_SECRET or None,
            region_name=settings.BUCKET_REGION,
        )
        self._bucket = bucket or settings.BUCKET_NAME

    async def upload(self, body: bytes, key: str, content_type: str) -> str:
        try:
            await run_in_threadpool(
                self._client.put_object,
                Bucket=self._bucket,
                Key=key,
                Body=body,
                ContentType=content_type,
                ACL="public-read",
            )
        except (BotoCoreError, ClientError) as exc:
            logger.error("Upload of %s failed: %s", key, exc)
            raise BlobStoreError("There was an issue uploading the file") from exc
        return key

    async def exists(self, key: str) -> bool:
        try:
            await run_in_threadpool(self._client.head_object, Bucket=self._bucket, Key=key)
        except ClientError as exc:
            if exc.response.get("Error", {}).get("Code") in MISSING_OBJECT_CODES:
                return False
            raise BlobStoreError("There was an issue reading the file") from exc
        except BotoCoreError as exc:
            raise BlobStoreError("There was an issue reading the file") from exc
        return True

    async def delete(self, key: str) -> None:
        try:
            await run_in_threadpool(self._client.delete_object, Bucket=self._bucket, Key=key)
        except (BotoCoreError, ClientError) as exc:
            logger.error("Delete of %s failed: %s", key, exc)
            raise BlobStoreError("There was an issue deleting the file") from exc

    async def signed_url(self, key: str) -> str:
        try:
            return await run_in_threadpool(
                self._client.generate_presigned_url,
                "get_object",
                Params={"Bucket": self._bucket, "Key": key},
                ExpiresIn=settings.SIGNED_URL_EXPIRES_SECONDS,
            )
        except (BotoCoreError, ClientError) as exc:
            raise BlobStoreError("There was an error fetching the images") from exc


@lru_cache()
def get_blob_store() -> BlobStore:
    return S3BlobStore()


# ─── Helpers shared by the image, content and order routes ────────────────────

def image_key(collection: str, content_type: str) -> str:
    ext = (mimetypes.guess_extension(content_type) or ".bin").lstrip(".")
    return f"{collection}/{int(time.time() * 1000)}.{ext}"


async def attach_signed_urls(blobs: BlobStore, docs: list[dict[str, Any]]) -> list[dict[str, Any]]:
    for doc in docs:
        if doc.get("imageKey"):
            doc["url"] = await blobs.signed_url(doc["imageKey"])
    return docs


async def remove_image(blobs: BlobStore, doc: dict[str, Any]) -> bool:
    """Delete the document's image, if it has one. NotFoundError if the object is gone."""
    key = doc.get("imageKey")
    if not key:
        return False
    if not await blobs.exists(key):
        raise NotFoundError("File not found")
    await blobs.delete(key)
    logger.info("Deleted image %s", key)
    return True
