import io
from collections.abc import Generator
from typing import Any

import pytest
from azure.core.exceptions import ResourceNotFoundError
from azure.cosmos.exceptions import CosmosResourceNotFoundError
from fastapi.testclient import TestClient
from PIL import Image

from imageflip.config import Settings
from imageflip.main import app
from imageflip.storage import BlobStore
from imageflip.task.dependencies import get_flip_service
from imageflip.task.service import FlipTaskService
from imageflip.task.store import TaskStore

BLOB_ACCOUNT_URL = "https://devstoreaccount1.blob.core.windows.net"


# ── In-memory Cosmos container ───────────────────────────────────────────────

class FakeCosmosContainer:
    """Just enough of azure.cosmos.aio.ContainerProxy for TaskStore."""

    def __init__(self) -> None:
        self.items: list[dict[str, Any]] = []
        self.history: list[tuple[str, str]] = []
        self.patch_calls = 0
        self.query_error: Exception | None = None
        self.patch_error: Exception | None = None

    def add(self, **doc: Any) -> dict[str, Any]:
        doc.setdefault("_etag", '"0000"')
        self.items.append(doc)
        return doc

    def get(self, task_id: str) -> dict[str, Any]:
        return next(i for i in self.items if i["id"] == task_id)

    def query_items(self, query: str, parameters: list[dict], partition_key: str | None = None):
        wanted = parameters[0]["value"]
        error = self.query_error

        async def _iter():
            if error is not None:
                raise error
            for item in list(self.items):
                if item["id"] == wanted:
                    yield dict(item)

        return _iter()

    async def patch_item(self, item: str, partition_key: str, patch_operations: list[dict]):
        self.patch_calls += 1
        if self.patch_error is not None:
            raise self.patch_error
        matches = [i for i in self.items if i["id"] == item]
        if not matches:
            raise CosmosResourceNotFoundError(status_code=404, message="Entity not found")
        doc = matches[0]
        for op in patch_operations:
            assert op["op"] == "set"
            doc[op["path"].lstrip("/")] = op["value"]
        self.history.append((doc["state"], doc.get("processedFilePath", "")))
        return dict(doc)


# ── In-memory blob container ─────────────────────────────────────────────────

class _FakeDownloader:
    def __init__(self, data: bytes) -> None:
        self._data = data

    async def readinto(self, stream) -> int:
        stream.write(self._data)
        return len(self._data)


class FakeBlobClient:
    def __init__(self, container: "FakeBlobContainer", name: str) -> None:
        self._container = container
        self.blob_name = name
        self.url = f"{BLOB_ACCOUNT_URL}/{container.name}/{name}"

    async def download_blob(self):
        self._container.downloads.append(self.blob_name)
        if self._container.download_error is not None:
            raise self._container.download_error
        if self.blob_name not in self._container.blobs:
            raise ResourceNotFoundError(message="The specified blob does not exist.")
        return _FakeDownloader(self._container.blobs[self.blob_name])

    async def upload_blob(self, data, overwrite: bool = False, content_settings=None):
        if self._container.upload_error is not None:
            raise self._container.upload_error
        assert overwrite
        self._container.blobs[self.blob_name] = data.read()
        self._container.uploads.append(self.blob_name)
        self._container.content_types[self.blob_name] = content_settings.content_type
        return {"etag": "0x1"}


class FakeBlobContainer:
    """Just enough of azure.storage.blob.aio.ContainerClient for BlobStore."""

    def __init__(self, name: str = "images") -> None:
        self.name = name
        self.blobs: dict[str, bytes] = {}
        self.content_types: dict[str, str] = {}
        self.downloads: list[str] = []
        self.uploads: list[str] = []
        self.download_error: Exception | None = None
        self.upload_error: Exception | None = None

    def get_blob_client(self, blob: str) -> FakeBlobClient:
        return FakeBlobClient(self, blob)


# ── Helpers ──────────────────────────────────────────────────────────────────

def make_image_bytes(fmt: str = "PNG", size: tuple[int, int] = (4, 3), mode: str = "RGB") -> bytes:
    """A small image with a distinct colour per pixel."""
    img = Image.new(mode, size)
    width, height = size
    for x in range(width):
        for y in range(height):
            value = (x * 60 % 256, y * 80 % 256, (x + y) * 30 % 256)
            if mode == "RGBA":
                value = value + (255,)
            img.putpixel((x, y), value)
    buf = io.BytesIO()
    img.save(buf, format=fmt)
    return buf.getvalue()


# ── Fixtures ─────────────────────────────────────────────────────────────────

@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None, blob_container="images")


@pytest.fixture
def cosmos() -> FakeCosmosContainer:
    return FakeCosmosContainer()


@pytest.fixture
def blobs() -> FakeBlobContainer:
    return FakeBlobContainer()


@pytest.fixture
def service(settings: Settings, cosmos: FakeCosmosContainer, blobs: FakeBlobContainer) -> FlipTaskService:
    return FlipTaskService(settings, TaskStore(cosmos), BlobStore(blobs))


@pytest.fixture
def cat_task(cosmos: FakeCosmosContainer, blobs: FakeBlobContainer) -> dict[str, Any]:
    blobs.blobs["cat.jpg"] = make_image_bytes("JPEG", size=(8, 6))
    return cosmos.add(
        id="t1",
        fileName="cat.jpg",
        state="Pending",
        originalFilePath=f"{BLOB_ACCOUNT_URL}/images/cat.jpg",
        processedFilePath="",
    )


@pytest.fixture
def client(service: FlipTaskService) -> Generator[TestClient, None, None]:
    app.dependency_overrides[get_flip_service] = lambda: service
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
