"""Supabase Storage implementation of the BlobStore port.

Talks to the Storage REST API directly with httpx using the service role key.
"""

from __future__ import annotations

from urllib.parse import quote

import httpx

from shipping.ports.exceptions import StorageOperationError
from shipping.ports.storage import BlobStore


class SupabaseBlobStore(BlobStore):
    """Blob store backed by a Supabase Storage bucket."""

    def __init__(
        self,
        base_url: str,
        service_key: str,
        bucket: str,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the store.

        Args:
            base_url: Supabase project URL
            service_key: Service role key
            bucket: Bucket holding attachments
            timeout: HTTP timeout in seconds
            transport: Optional httpx transport, used by tests
        """
        self._base_url = base_url.rstrip("/")
        self._storage_url = f"{self._base_url}/storage/v1"
        self._bucket = bucket
        self._timeout = timeout
        self._transport = transport
        self._headers = {
            "Authorization": f"Bearer {service_key}",
            "apikey": service_key,
        }

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            headers=self._headers,
            timeout=self._timeout,
            transport=self._transport,
        )

    def _object_url(self, *parts: str) -> str:
        return "/".join([self._storage_url, *parts])

    async def upload(self, path: str, content: bytes, content_type: str) -> None:
        url = self._object_url("object", self._bucket, quote(path))
        try:
            async with self._client() as client:
                response = await client.post(
                    url,
                    content=content,
                    headers={"Content-Type": content_type, "x-upsert": "false"},
                )
                response.raise_for_status()
        except httpx.HTTPError as e:
            raise StorageOperationError(f"Failed to upload {path}: {e}") from e

    async def signed_url(self, path: str, expires_in: int) -> str:
        url = self._object_url("object", "sign", self._bucket, quote(path))
        try:
            async with self._client() as client:
                response = await client.post(url, json={"expiresIn": expires_in})
                response.raise_for_status()
                payload = response.json()
        except httpx.HTTPError as e:
            raise StorageOperationError(
                f"Failed to generate download URL for {path}: {e}"
            ) from e

        signed = payload.get("signedURL") or payload.get("signedUrl")
        if not signed:
            raise StorageOperationError(f"Storage returned no signed URL for {path}")
        return f"{self._storage_url}{signed}"

    async def remove(self, paths: list[str]) -> None:
        if not paths:
            return
        url = self._object_url("object", self._bucket)
        try:
            async with self._client() as client:
                response = await client.request(
                    "DELETE", url, json={"prefixes": paths}
                )
                response.raise_for_status()
        except httpx.HTTPError as e:
            raise StorageOperationError(f"Failed to remove {len(paths)} file(s): {e}") from e
