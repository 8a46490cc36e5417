"""Pydantic models for attachment download responses."""

from __future__ import annotations

from shared_kernel.api_models import CamelModel
from shipping.application.value_objects import SignedDownload


class DownloadResponse(CamelModel):
    """Time-limited link to an attachment."""

    download_url: str
    expires_in: int
    original_name: str
    size: int
    mime_type: str

    @classmethod
    def from_signed(cls, download: SignedDownload) -> DownloadResponse:
        return cls(
            download_url=download.url,
            expires_in=download.expires_in,
            original_name=download.original_name,
            size=download.size,
            mime_type=download.mime_type,
        )
