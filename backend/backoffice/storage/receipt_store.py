"""Receipt storage: the bucket/path blob store behind payment receipts."""
from __future__ import annotations

import logging
import mimetypes
from typing import Optional, Protocol

import httpx
from fastapi.concurrency import run_in_threadpool
from storage3.exceptions import StorageApiError
from supabase import Client, create_client

from backoffice.core.config import settings
from backoffice.core.errors import NotFound, StoreError

logger = logging.getLogger(__name__)


class ReceiptStore(Protocol):
    """Blob storage addressed by (bucket, path)."""

    async def upload(
        self,
        bucket: str,
        path: str,
        content: bytes,
        *,
        overwrite: bool = False,
        content_type: Optional[str] = None,
    ) -> str: ...

    async def download(self, bucket: str, path: str) -> bytes: ...

    async def remove(self, bucket: str, path: str) -> None: ...


def guess_content_type(path: str) -> str:
    return mimetypes.guess_type(path)[0] or "application/octet-stream"


def _is_missing_object(exc: Exception) -> bool:
    status = str(getattr(exc, "status", "") or getattr(exc, "code", ""))
    message = str(getattr(exc, "message", "") or exc).lower()
    return status == "404" or "not found" in message


class SupabaseReceiptStore:
    """
    Receipt store backed by Supabase Storage buckets.

    The supabase client is synchronous, so calls run in the threadpool.
    """

    def __init__(self, url: str, service_key: str, client: Client | None = None) -> None:
        self._url = url
        self._service_key = service_key
        self._client = client

    def _get_client(self) -> Client:
        if self._client is None:
            if not self._url or not self._service_key:
                raise StoreError(
                    "Supabase credentials not configured. "
                    "Set SUPABASE_URL and SUPABASE_SERVICE_KEY environment variables."
                )
            self._client = create_client(self._url, self._service_key)
        return self._client

    def _bucket(self, bucket: str):
        return self._get_client().storage.from_(bucket)

    async def upload(
        self,
        bucket: str,
        path: str,
        content: bytes,
        *,
        overwrite: bool = False,
        content_type: Optional[str] = None,
    ) -> str:
        file_options = {
            "content-type": content_type or guess_content_type(path),
            "upsert": "true" if overwrite else "false",
        }
        try:
            await run_in_threadpool(self._bucket(bucket).upload, path=path, file=content, file_options=file_options)
        except (StorageApiError, httpx.HTTPError) as exc:
            logger.error("Upload to %s/%s failed: %s", bucket, path, exc)
            raise StoreError(f"Failed to upload receipt to {bucket}: {exc}") from exc
        return path

    async def download(self, bucket: str, path: str) -> bytes:
        try:
            return await run_in_threadpool(self._bucket(bucket).download, path)
        except (StorageApiError, httpx.HTTPError) as exc:
            if _is_missing_object(exc):
                raise NotFound(f"Receipt {path} not found in {bucket}", bucket=bucket, path=path) from exc
            logger.error("Download from %s/%s failed: %s", bucket, path, exc)
            raise StoreError(f"Failed to download receipt from {bucket}: {exc}") from exc

    async def remove(self, bucket: str, path: str) -> None:
        try:
            await run_in_threadpool(self._bucket(bucket).remove, [path])
        except (StorageApiError, httpx.HTTPError) as exc:
            logger.error("Remove of %s/%s failed: %s", bucket, path, exc)
            raise StoreError(f"Failed to remove receipt from {bucket}: {exc}") from exc


def build_receipt_store() -> SupabaseReceiptStore:
    return SupabaseReceiptStore(settings.SUPABASE_URL, settings.SUPABASE_SERVICE_KEY)
