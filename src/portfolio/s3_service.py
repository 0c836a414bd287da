"""
Asynchronous object store client

This module provides an async-first client for the R2 / S3-compatible bucket
that holds the portfolio photos. It uses aioboto3 for non-blocking calls and is
constructed explicitly with StorageSettings, then shared through the FastAPI
application state.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import AsyncExitStack
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Any

import aioboto3
from botocore.config import Config
from botocore.exceptions import ClientError

from portfolio.exceptions import ObjectNotFoundError, StorageError
from portfolio.settings import StorageSettings

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from types_aiobotocore_s3 import S3Client

NOT_FOUND_CODES = {"NoSuchKey", "NotFound", "404"}
DEFAULT_CHUNK_SIZE = 64 * 1024


@dataclass(frozen=True)
class StoredObject:
    """A single entry of a bucket listing."""

    key: str
    size: int = 0
    last_modified: datetime | None = None


def _is_not_found(error: Exception) -> bool:
    if not isinstance(error, ClientError):
        return False
    code = error.response.get("Error", {}).get("Code")
    return str(code) in NOT_FOUND_CODES


class ObjectStream:
    """Body of a fetched object together with its HTTP metadata.

    The underlying S3 client stays open until the body has been fully iterated
    or aclose() is called.
    """

    def __init__(self, key: str, response: dict[str, Any], exit_stack: AsyncExitStack):
        self.key = key
        self.content_type: str | None = response.get("ContentType")
        self.content_length: int | None = response.get("ContentLength")
        self.etag: str | None = response.get("ETag")
        self._body = response["Body"]
        self._exit_stack = exit_stack
        self._closed = False

    async def iter_chunks(self, chunk_size: int = DEFAULT_CHUNK_SIZE) -> AsyncIterator[bytes]:
        try:
            while True:
                chunk = await self._body.read(chunk_size)
                if not chunk:
                    break
                yield chunk
        finally:
            await self.aclose()

    async def aclose(self) -> None:
        if self._closed:
            return
        self._closed = True
        await self._exit_stack.aclose()


class AsyncS3Client:
    """Asynchronous client for the photo bucket

    A single aioboto3.Session is created lazily and reused; individual S3
    clients are opened per operation with context managers so connections are
    always released.
    """

    def __init__(self, settings: StorageSettings):
        self.settings = settings
        self._session: aioboto3.Session | None = None
        self._config = Config(
            signature_version=settings.signature_version,
            retries={"max_attempts": 3, "mode": "standard"},
            connect_timeout=10,
            read_timeout=60,
            s3={"addressing_style": "path"},
        )
        logger.info(f"AsyncS3Client initialized: endpoint={settings.endpoint_url}, bucket={settings.bucket_name}, region={settings.region}")

    @property
    def bucket(self) -> str:
        return self.settings.bucket_name

    @property
    def session(self) -> aioboto3.Session:
        """Get or create the shared aioboto3 session."""
        if self._session is None:
            self._session = aioboto3.Session(
                aws_access_key_id=self.settings.access_key_id,
                aws_secret_access_key=self.settings.secret_access_key,
                region_name=self.settings.region,
            )
        return self._session

    def _get_s3_client(self) -> "S3Client":
        """Get configured S3 client context manager.

        Usage: async with self._get_s3_client() as s3:
        """
        return self.session.client("s3", endpoint_url=self.settings.endpoint_url, config=self._config)

    async def list_objects(self, prefix: str | None = None, max_keys: int | None = None) -> list[StoredObject]:
        """List objects with a single list_objects_v2 call.

        Args:
            prefix: Optional key prefix to restrict the listing
            max_keys: Page size, defaults to the configured list_max_keys

        Returns:
            Objects in listing order; empty when the bucket has no contents

        Raises:
            StorageError: If the listing call fails
        """
        params: dict[str, Any] = {"Bucket": self.bucket, "MaxKeys": max_keys or self.settings.list_max_keys}
        if prefix:
            params["Prefix"] = prefix

        try:
            async with self._get_s3_client() as s3:
                s3: "S3Client"
                response = await s3.list_objects_v2(**params)
        except Exception as e:
            logger.error(f"Failed to list objects in bucket {self.bucket}: {e}")
            raise StorageError(f"Failed to list bucket {self.bucket}") from e

        contents = response.get("Contents") or []
        objects = [
            StoredObject(
                key=item["Key"],
                size=item.get("Size", 0),
                last_modified=item.get("LastModified"),
            )
            for item in contents
        ]
        logger.debug(f"Listed {len(objects)} objects in bucket {self.bucket}")
        return objects

    async def iter_all_objects(self, prefix: str | None = None) -> AsyncIterator[StoredObject]:
        """Iterate over every object in the bucket, following continuation tokens.

        Only used by maintenance tooling; request handlers use list_objects.
        """
        continuation_token = None
        try:
            async with self._get_s3_client() as s3:
                s3: "S3Client"
                while True:
                    list_params: dict[str, Any] = {"Bucket": self.bucket, "MaxKeys": self.settings.list_max_keys}
                    if prefix:
                        list_params["Prefix"] = prefix
                    if continuation_token:
                        list_params["ContinuationToken"] = continuation_token

                    response = await s3.list_objects_v2(**list_params)
                    for item in response.get("Contents") or []:
                        yield StoredObject(key=item["Key"], size=item.get("Size", 0), last_modified=item.get("LastModified"))

                    if not response.get("IsTruncated"):
                        break
                    continuation_token = response.get("NextContinuationToken")
        except Exception as e:
            logger.error(f"Failed to page through bucket {self.bucket}: {e}")
            raise StorageError(f"Failed to list bucket {self.bucket}") from e

    async def open_object(self, key: str) -> ObjectStream:
        """Fetch an object and return its streaming body.

        Raises:
            ObjectNotFoundError: If the key does not exist
            StorageError: If the get call fails for any other reason
        """
        exit_stack = AsyncExitStack()
        try:
            s3 = await exit_stack.enter_async_context(self._get_s3_client())
            response = await s3.get_object(Bucket=self.bucket, Key=key)
        except Exception as e:
            await exit_stack.aclose()
            if _is_not_found(e):
                logger.info(f"Object not found: {key}")
                raise ObjectNotFoundError(key) from e
            logger.error(f"Failed to get object {key}: {e}")
            raise StorageError(f"Failed to get object {key}") from e

        logger.debug(f"Opened object: {key}")
        return ObjectStream(key, response, exit_stack)

    async def head_bucket(self) -> None:
        """Check that the bucket exists and the credentials can reach it."""
        try:
            async with self._get_s3_client() as s3:
                s3: "S3Client"
                await s3.head_bucket(Bucket=self.bucket)
        except Exception as e:
            logger.error(f"Bucket {self.bucket} is not reachable: {e}")
            raise StorageError(f"Bucket {self.bucket} is not reachable") from e

    async def close(self) -> None:
        """Drop the shared session."""
        if self._session is not None:
            logger.info("Closing AsyncS3Client session")
            self._session = None
