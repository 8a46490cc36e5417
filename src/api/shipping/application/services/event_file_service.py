"""Attachment service for travel events.

Files are stored in a blob store and described by ``EventFile`` rows. Every
operation resolves ownership through event -> shipment -> organization, so a
caller can only touch attachments of their own organization's shipments.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from shared_kernel.authorization import Permission, TenantAccessGate
from shared_kernel.middleware.tenant_context import TenantContext
from shipping.application.observability import (
    DefaultEventFileServiceProbe,
    EventFileServiceProbe,
)
from shipping.application.value_objects import FileUpload, SignedDownload
from shipping.domain.aggregates import EventFile
from shipping.domain.value_objects import EventFileId, TravelEventId
from shipping.ports.exceptions import (
    EventFileNotFoundError,
    EventNotFoundError,
    FileTooLargeError,
    StorageOperationError,
    StorageUnavailableError,
)
from shipping.ports.repositories import IEventFileRepository, IShipmentRepository
from shipping.ports.storage import BlobStore


class EventFileService:
    """Application service for event attachments."""

    def __init__(
        self,
        event_file_repository: IEventFileRepository,
        shipment_repository: IShipmentRepository,
        session: AsyncSession,
        blob_store: BlobStore | None,
        max_file_bytes: int,
        signed_url_ttl: int = 3600,
        gate: TenantAccessGate | None = None,
        probe: EventFileServiceProbe | None = None,
    ):
        """Initialize EventFileService with dependencies.

        Args:
            event_file_repository: Attachment metadata repository
            shipment_repository: Used to verify event ownership
            session: Database session for transaction management
            blob_store: Attachment storage; None when not configured
            max_file_bytes: Upload size limit
            signed_url_ttl: Lifetime of download URLs in seconds
            gate: Tenant access gate for role checks
            probe: Optional domain probe for observability
        """
        self._files = event_file_repository
        self._shipments = shipment_repository
        self._session = session
        self._blob_store = blob_store
        self._max_file_bytes = max_file_bytes
        self._signed_url_ttl = signed_url_ttl
        self._gate = gate or TenantAccessGate()
        self._probe = probe or DefaultEventFileServiceProbe()

    def _require_store(self) -> BlobStore:
        if self._blob_store is None:
            self._probe.storage_unavailable()
            raise StorageUnavailableError()
        return self._blob_store

    async def _require_event(self, context: TenantContext, event_id: TravelEventId):
        event = await self._shipments.get_event(event_id, context.organization_id)
        if event is None:
            raise EventNotFoundError()
        return event

    async def upload(
        self,
        context: TenantContext,
        event_id: TravelEventId,
        upload: FileUpload,
    ) -> EventFile:
        """Store an attachment and record its metadata.

        The blob is written before the row; if the row insert fails the
        blob is removed again.

        Raises:
            EventNotFoundError: If the event is absent or cross-tenant
            FileTooLargeError: If the upload exceeds the size limit
            StorageUnavailableError: If no blob store is configured
            StorageOperationError: If the blob store rejects the upload
        """
        self._gate.require(context, Permission.MANAGE_SHIPMENTS)
        store = self._require_store()

        if upload.size > self._max_file_bytes:
            self._probe.file_rejected_too_large(
                event_id.value, upload.size, self._max_file_bytes
            )
            raise FileTooLargeError(self._max_file_bytes)

        async with self._session.begin():
            await self._require_event(context, event_id)

        event_file = EventFile.create(
            event_id=event_id,
            original_name=upload.original_name,
            size=upload.size,
            mime_type=upload.mime_type,
            uploaded_by=context.user_id,
        )
        await store.upload(event_file.storage_path, upload.content, upload.mime_type)

        try:
            async with self._session.begin():
                await self._files.add(event_file)
        except Exception:
            await store.remove([event_file.storage_path])
            raise

        self._probe.file_uploaded(event_file.id.value, event_id.value, upload.size)
        return event_file

    async def list_for_event(
        self, context: TenantContext, event_id: TravelEventId
    ) -> list[EventFile]:
        """List attachments of one of the caller's events.

        Raises:
            EventNotFoundError: If the event is absent or cross-tenant
        """
        self._gate.require(context, Permission.VIEW_SHIPMENTS)
        await self._require_event(context, event_id)
        return await self._files.list_by_event(event_id)

    async def download_url(
        self, context: TenantContext, file_id: EventFileId
    ) -> SignedDownload:
        """Issue a time-limited download URL.

        Raises:
            EventFileNotFoundError: If the file is absent or cross-tenant
            StorageUnavailableError: If no blob store is configured
        """
        self._gate.require(context, Permission.VIEW_SHIPMENTS)
        store = self._require_store()

        event_file = await self._files.get_by_id(file_id, context.organization_id)
        if event_file is None:
            raise EventFileNotFoundError()

        url = await store.signed_url(event_file.storage_path, self._signed_url_ttl)
        self._probe.download_url_issued(file_id.value, self._signed_url_ttl)
        return SignedDownload(
            url=url,
            expires_in=self._signed_url_ttl,
            original_name=event_file.original_name,
            size=event_file.size,
            mime_type=event_file.mime_type,
        )

    async def delete(self, context: TenantContext, file_id: EventFileId) -> None:
        """Delete an attachment. Blob removal failures are logged, not raised.

        Raises:
            EventFileNotFoundError: If the file is absent or cross-tenant
            StorageUnavailableError: If no blob store is configured
        """
        self._gate.require(context, Permission.MANAGE_SHIPMENTS)
        store = self._require_store()

        async with self._session.begin():
            event_file = await self._files.get_by_id(file_id, context.organization_id)
            if event_file is None:
                raise EventFileNotFoundError()
            await self._files.delete(event_file)

        try:
            await store.remove([event_file.storage_path])
        except StorageOperationError as e:
            self._probe.storage_delete_failed(file_id.value, str(e))

        self._probe.file_deleted(file_id.value)
