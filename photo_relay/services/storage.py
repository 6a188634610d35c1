"""
Object storage writer for uploaded photos and videos.

Talks to S3 (or any S3-compatible store) through boto3 and hands out public
URLs on the configured delivery domain. boto3 is synchronous, so calls run in a
worker thread and the request handler awaits them.
"""

import asyncio
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any
from urllib.parse import quote, unquote
from uuid import uuid4

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from photo_relay.core.errors import StorageReadFailed, StorageWriteFailed
from photo_relay.core.logger import LogIcon, logger
from photo_relay.core.settings import Settings
from photo_relay.models.core import ValidatedUpload
from photo_relay.models.responses import PhotoListing, StoredObject

DEFAULT_EXTENSION = "jpg"
MISSING_OBJECT_CODES = frozenset({"404", "NoSuchKey", "NotFound"})


@dataclass(frozen=True)
class StorageConfig:
    """Where objects go and how they are served."""

    bucket_name: str
    delivery_domain: str
    namespace: str = "photo-uploader"
    cache_control: str = "max-age=31536000"


def file_extension(filename: str) -> str:
    """Suffix after the last dot of ``filename``, or ``jpg`` when there is none."""
    _, dot, suffix = filename.rpartition(".")
    return suffix if dot and suffix else DEFAULT_EXTENSION


def iso_timestamp(moment: datetime) -> str:
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def encode_metadata(value: str) -> str:
    """Percent-encode text for S3 user metadata, which only carries ASCII."""
    return quote(value, safe="")


def decode_metadata(value: str | None) -> str | None:
    return unquote(value) if value is not None else None


class StorageWriter:
    """Writes validated uploads to a bucket and lists what a user has stored."""

    def __init__(self, client: Any, config: StorageConfig) -> None:
        self._client = client
        self._config = config

    @property
    def bucket(self) -> str:
        return self._config.bucket_name

    def user_prefix(self, user_id: str) -> str:
        return f"{self._config.namespace}/{user_id}/"

    def build_key(self, user_id: str, filename: str, moment: datetime) -> str:
        """Key layout: ``{namespace}/{user}/{epoch_ms}-{uuid4}.{ext}``."""
        millis = int(moment.timestamp() * 1000)
        return f"{self.user_prefix(user_id)}{millis}-{uuid4()}.{file_extension(filename)}"

    def public_url(self, key: str) -> str:
        """Delivery URL for a key. The object is not checked for existence."""
        return f"https://{self._config.delivery_domain}/{key}"

    async def write(self, upload: ValidatedUpload) -> StoredObject:
        """Put the whole payload in a single call and describe the stored object."""
        moment = datetime.now(UTC)
        upload_date = iso_timestamp(moment)
        key = self.build_key(upload.user_id, upload.filename, moment)

        logger.info("Uploading to storage", icon=LogIcon.STORAGE, key=key, size=upload.size)
        try:
            await asyncio.to_thread(
                self._client.put_object,
                Bucket=self._config.bucket_name,
                Key=key,
                Body=upload.payload,
                ContentType=upload.content_type,
                CacheControl=self._config.cache_control,
                Metadata={
                    "user-id": encode_metadata(upload.user_id),
                    "upload-date": upload_date,
                    "original-name": encode_metadata(upload.filename),
                    "file-size": str(upload.size),
                },
            )
        except (BotoCoreError, ClientError) as ex:
            logger.error("Storage upload failed", icon=LogIcon.ERROR, key=key, error=str(ex))
            raise StorageWriteFailed(str(ex)) from ex

        logger.info("Storage upload successful", icon=LogIcon.SUCCESS, key=key)
        return StoredObject(
            id=key,
            url=self.public_url(key),
            original_name=upload.filename,
            size=upload.size,
            type=upload.content_type,
            upload_date=upload_date,
            user_id=upload.user_id,
            storage_key=key,
            bucket=self._config.bucket_name,
        )

    async def list_objects(self, user_id: str) -> list[PhotoListing]:
        """All objects under the user's prefix, newest first."""
        try:
            return await asyncio.to_thread(self._list_objects_sync, user_id)
        except (BotoCoreError, ClientError) as ex:
            logger.error("Storage listing failed", icon=LogIcon.ERROR, user_id=user_id, error=str(ex))
            raise StorageReadFailed(str(ex)) from ex

    def _list_objects_sync(self, user_id: str) -> list[PhotoListing]:
        params = {"Bucket": self._config.bucket_name, "Prefix": self.user_prefix(user_id)}
        listings: list[PhotoListing] = []

        while True:
            page = self._client.list_objects_v2(**params)
            for entry in page.get("Contents", []):
                listing = self._describe(entry, user_id)
                if listing is not None:
                    listings.append(listing)
            if not page.get("IsTruncated"):
                break
            params["ContinuationToken"] = page["NextContinuationToken"]

        listings.sort(key=lambda item: item.upload_date, reverse=True)
        return listings

    def _describe(self, entry: dict, user_id: str) -> PhotoListing | None:
        """Listing entry for one key, or None when the object was deleted after listing."""
        key = entry["Key"]
        try:
            head = self._client.head_object(Bucket=self._config.bucket_name, Key=key)
        except ClientError as ex:
            if ex.response.get("Error", {}).get("Code") not in MISSING_OBJECT_CODES:
                raise
            logger.warning("Listed object vanished", icon=LogIcon.WARNING, key=key)
            return None

        metadata = head.get("Metadata", {})
        return PhotoListing(
            id=key,
            url=self.public_url(key),
            original_name=decode_metadata(metadata.get("original-name")),
            size=entry.get("Size", head.get("ContentLength", 0)),
            type=head.get("ContentType"),
            upload_date=metadata.get("upload-date") or iso_timestamp(entry["LastModified"]),
            user_id=decode_metadata(metadata.get("user-id")) or user_id,
            storage_key=key,
        )

    def close(self) -> None:
        self._client.close()


def create_s3_client(settings: Settings) -> Any:
    """Build a boto3 S3 client; unset credentials defer to the default credential chain."""
    return boto3.client(
        "s3",
        endpoint_url=settings.S3_ENDPOINT_URL,
        aws_access_key_id=settings.AWS_ACCESS_KEY_ID,
        aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY,
        region_name=settings.AWS_REGION,
        config=Config(signature_version="s3v4"),
    )


def create_storage_writer(settings: Settings, client: Any | None = None) -> StorageWriter:
    """Create the writer from settings; raises ValueError when bucket or delivery domain is missing."""
    if not settings.storage_configured:
        raise ValueError("S3_BUCKET_NAME and CLOUDFRONT_DOMAIN must be set")

    config = StorageConfig(
        bucket_name=settings.S3_BUCKET_NAME,
        delivery_domain=settings.CLOUDFRONT_DOMAIN,
        namespace=settings.STORAGE_NAMESPACE,
        cache_control=settings.CACHE_CONTROL,
    )
    logger.info("Initialized storage writer", icon=LogIcon.STORAGE, bucket=config.bucket_name)
    return StorageWriter(client or create_s3_client(settings), config)
