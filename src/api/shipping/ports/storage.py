"""Blob storage port for event attachments."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class BlobStore(Protocol):
    """Stores attachment bytes outside the database."""

    async def upload(self, path: str, content: bytes, content_type: str) -> None:
        """Store ``content`` at ``path``. Never overwrites.

        Raises:
            StorageOperationError: If the store rejects the upload
        """
        ...

    async def signed_url(self, path: str, expires_in: int) -> str:
        """Return a time-limited download URL for ``path``.

        Raises:
            StorageOperationError: If the URL cannot be created
        """
        ...

    async def remove(self, paths: list[str]) -> None:
        """Delete the given paths.

        Raises:
            StorageOperationError: If the store rejects the deletion
        """
        ...
