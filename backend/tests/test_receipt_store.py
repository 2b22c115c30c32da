# tests/test_receipt_store.py
from __future__ import annotations

import httpx
import pytest
from storage3.exceptions import StorageApiError

from backoffice.core.errors import NotFound, StoreError
from backoffice.storage.receipt_store import SupabaseReceiptStore, guess_content_type


class FakeBucket:
    def __init__(self, error: Exception | None = None) -> None:
        self.error = error
        self.uploads: list[dict] = []
        self.removed: list[list[str]] = []
        self.objects: dict[str, bytes] = {}

    def upload(self, path, file, file_options=None):
        if self.error:
            raise self.error
        self.uploads.append({"path": path, "file": file, "file_options": file_options})
        self.objects[path] = file
        return {"Key": path}

    def download(self, path):
        if self.error:
            raise self.error
        return self.objects[path]

    def remove(self, paths):
        if self.error:
            raise self.error
        self.removed.append(paths)
        return []


class FakeStorage:
    def __init__(self, bucket: FakeBucket) -> None:
        self.bucket = bucket
        self.requested: list[str] = []

    def from_(self, name):
        self.requested.append(name)
        return self.bucket


class FakeClient:
    def __init__(self, bucket: FakeBucket) -> None:
        self.storage = FakeStorage(bucket)


def store_with(bucket: FakeBucket) -> tuple[SupabaseReceiptStore, FakeClient]:
    client = FakeClient(bucket)
    return SupabaseReceiptStore("https://project.supabase.co", "service-key", client=client), client


@pytest.mark.asyncio
async def test_upload_passes_content_type_and_upsert_flag():
    bucket = FakeBucket()
    store, client = store_with(bucket)

    path = await store.upload("Payment Receipt", "LW/Maria/r.png", b"png", overwrite=True, content_type="image/png")
    await store.upload("ar-receipt", "LW/Maria/ar.pdf", b"pdf")

    assert path == "LW/Maria/r.png"
    assert client.storage.requested == ["Payment Receipt", "ar-receipt"]
    assert bucket.uploads[0]["file_options"] == {"content-type": "image/png", "upsert": "true"}
    assert bucket.uploads[1]["file_options"] == {"content-type": "application/pdf", "upsert": "false"}


@pytest.mark.asyncio
async def test_download_and_remove():
    bucket = FakeBucket()
    store, _ = store_with(bucket)
    await store.upload("Payment Receipt", "LW/Maria/r.png", b"png")

    assert await store.download("Payment Receipt", "LW/Maria/r.png") == b"png"

    await store.remove("Payment Receipt", "LW/Maria/r.png")
    assert bucket.removed == [["LW/Maria/r.png"]]


@pytest.mark.asyncio
async def test_missing_object_is_not_found():
    store, _ = store_with(FakeBucket(StorageApiError("Object not found", "not_found", 404)))

    with pytest.raises(NotFound):
        await store.download("Payment Receipt", "LW/Maria/gone.png")


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error",
    [
        StorageApiError("Internal error", "InternalError", 500),
        httpx.ConnectError("connection refused"),
    ],
)
async def test_storage_failures_become_store_errors(error):
    store, _ = store_with(FakeBucket(error))

    with pytest.raises(StoreError):
        await store.upload("Payment Receipt", "LW/Maria/r.png", b"png")
    with pytest.raises(StoreError):
        await store.download("Payment Receipt", "LW/Maria/r.png")
    with pytest.raises(StoreError):
        await store.remove("Payment Receipt", "LW/Maria/r.png")


@pytest.mark.asyncio
async def test_missing_credentials():
    store = SupabaseReceiptStore("", "")

    with pytest.raises(StoreError, match="SUPABASE_URL"):
        await store.upload("Payment Receipt", "LW/Maria/r.png", b"png")


def test_guess_content_type():
    assert guess_content_type("a/b/receipt.pdf") == "application/pdf"
    assert guess_content_type("a/b/receipt.unknownext") == "application/octet-stream"
