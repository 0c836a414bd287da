from contextlib import AsyncExitStack
from datetime import datetime

from portfolio.exceptions import ObjectNotFoundError, StorageError
from portfolio.s3_service import ObjectStream, StoredObject
from portfolio.settings import StorageSettings

SAMPLE_KEYS = [
    "streetphotography/a.jpg",
    "streetphotography/b.png",
    "hero/banner.jpg",
    "readme.txt",
]


class FakeBody:
    """Stands in for a botocore StreamingBody: hands out the payload in chunks."""

    def __init__(self, data: bytes):
        self._data = data
        self._offset = 0

    async def read(self, amt: int | None = None) -> bytes:
        if amt is None:
            amt = len(self._data) - self._offset
        chunk = self._data[self._offset : self._offset + amt]
        self._offset += len(chunk)
        return chunk


class FakeS3Client:
    """In-memory replacement for AsyncS3Client."""

    def __init__(self, settings: StorageSettings, objects: list[StoredObject] | None = None):
        self.settings = settings
        self.objects = list(objects or [])
        self.blobs: dict[str, tuple[bytes, str | None]] = {}
        self.list_error: Exception | None = None
        self.get_error: Exception | None = None
        self.list_calls = 0
        self.closed = False

    @property
    def bucket(self) -> str:
        return self.settings.bucket_name

    def add(self, key: str, data: bytes = b"", content_type: str | None = None, last_modified: datetime | None = None) -> None:
        self.objects.append(StoredObject(key=key, size=len(data), last_modified=last_modified))
        self.blobs[key] = (data, content_type)

    async def list_objects(self, prefix: str | None = None, max_keys: int | None = None) -> list[StoredObject]:
        self.list_calls += 1
        if self.list_error is not None:
            raise self.list_error
        return [obj for obj in self.objects if not prefix or obj.key.startswith(prefix)]

    async def iter_all_objects(self, prefix: str | None = None):
        for obj in await self.list_objects(prefix):
            yield obj

    async def open_object(self, key: str) -> ObjectStream:
        if self.get_error is not None:
            raise self.get_error
        if key not in self.blobs:
            raise ObjectNotFoundError(key)
        data, content_type = self.blobs[key]
        response = {"Body": FakeBody(data), "ContentType": content_type, "ContentLength": len(data), "ETag": f'"{key}-etag"'}
        return ObjectStream(key, response, AsyncExitStack())

    async def head_bucket(self) -> None:
        if self.list_error is not None:
            raise StorageError("bucket unreachable")

    async def close(self) -> None:
        self.closed = True

