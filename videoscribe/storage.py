"""This module contains classes to manage the Amazon S3 communication"""

import logging
import os
import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, BinaryIO, Optional, Union

import boto3
from boto3.exceptions import S3UploadFailedError
from botocore.config import Config as BotoConfig
from botocore.exceptions import BotoCoreError, ClientError

from .config import Settings, get_settings
from .errors import InternalError, InvalidLocator, TransportFailure

logger = logging.getLogger(__name__)

LOCATOR_PATTERN = re.compile(r"^s3://([^/]+)/(.+)$")
DOWNLOAD_CHUNK_SIZE = 1024 * 1024


@dataclass(frozen=True)
class StorageObject:
    bucket: str
    key: str
    content_type: Optional[str] = None

    @property
    def locator(self) -> str:
        """`s3://bucket/key` form of this object."""
        return build_locator(self.bucket, self.key)


def build_locator(bucket: str, key: str) -> str:
    """Join a bucket and key into a locator."""
    return f"s3://{bucket}/{key}"


def parse_locator(locator: str) -> StorageObject:
    """Split an `s3://bucket/key` locator into its bucket and key."""
    match = LOCATOR_PATTERN.match(locator) if isinstance(locator, str) else None
    if match is None:
        raise InvalidLocator(f"Invalid S3 path format: {locator!r}")
    return StorageObject(bucket=match.group(1), key=match.group(2))


class StorageService:
    """Uploads and retrieves objects under a fixed prefix of one bucket."""

    def __init__(self, settings: Settings, client: Any = None) -> None:
        self.settings = settings
        self._client = client

    @property
    def client(self) -> Any:
        """The boto3 S3 client, built on first use and reused afterwards."""
        if self._client is None:
            config = BotoConfig(
                signature_version="s3v4",
                connect_timeout=self.settings.s3_connect_timeout,
                read_timeout=self.settings.s3_read_timeout,
                retries={"max_attempts": self.settings.s3_max_attempts, "mode": "standard"},
            )
            self._client = boto3.client(
                "s3",
                region_name=self.settings.aws_region,
                aws_access_key_id=self.settings.aws_access_key_id,
                aws_secret_access_key=self.settings.aws_secret_access_key,
                config=config,
            )
        return self._client

    @property
    def bucket(self) -> str:
        """Configured bucket name; uploads cannot proceed without one."""
        if not self.settings.bucket:
            raise InternalError("Storage bucket is not configured")
        return self.settings.bucket

    @property
    def prefix_marker(self) -> str:
        """Key of the zero-byte folder marker."""
        return f"{self.settings.upload_prefix}/"

    def object_key(self, filename: str) -> str:
        """Key an uploaded file is stored under."""
        return f"{self.prefix_marker}{filename}"

    def ensure_prefix(self) -> None:
        """Write the zero-byte folder marker. Rewriting an existing one is harmless."""
        bucket = self.bucket
        logger.info("Creating folder marker s3://%s/%s", bucket, self.prefix_marker)
        try:
            self.client.put_object(Bucket=bucket, Key=self.prefix_marker, Body=b"")
        except (BotoCoreError, ClientError) as e:
            raise TransportFailure(f"Could not create folder {self.prefix_marker}: {e}") from e

    def upload(self, fileobj: BinaryIO, filename: str, content_type: str) -> StorageObject:
        """Store `fileobj` under `<prefix>/<filename>` keeping its content type."""
        stored = StorageObject(bucket=self.bucket, key=self.object_key(filename), content_type=content_type)
        try:
            self.client.upload_fileobj(
                fileobj, stored.bucket, stored.key, ExtraArgs={"ContentType": content_type}
            )
        except (BotoCoreError, ClientError, S3UploadFailedError) as e:
            raise TransportFailure(f"Could not upload {stored.key}: {e}") from e
        logger.info("Video file uploaded to %s", stored.locator)
        return stored

    def download(self, locator: str, dest: Union[str, os.PathLike, BinaryIO]) -> int:
        """Stream the object behind `locator` into `dest` and return the number of bytes copied.

        `dest` is either a filesystem path (parent directories are created)
        or a writable binary file object.
        """
        stored = parse_locator(locator)
        logger.info("Downloading %s", stored.locator)
        try:
            response = self.client.get_object(Bucket=stored.bucket, Key=stored.key)
            body = response["Body"]
            if hasattr(dest, "write"):
                return _copy_chunks(body, dest)
            parent = os.path.dirname(os.fspath(dest))
            if parent:
                os.makedirs(parent, exist_ok=True)
            with open(dest, "wb") as f:
                return _copy_chunks(body, f)
        except (BotoCoreError, ClientError) as e:
            raise TransportFailure(f"Could not download {stored.locator}: {e}") from e


def _copy_chunks(body: Any, out: BinaryIO) -> int:
    written = 0
    try:
        for chunk in body.iter_chunks(chunk_size=DOWNLOAD_CHUNK_SIZE):
            out.write(chunk)
            written += len(chunk)
    finally:
        body.close()
    return written


@lru_cache()
def get_storage() -> StorageService:
    """Process-wide storage handle shared by every request."""
    return StorageService(get_settings())
