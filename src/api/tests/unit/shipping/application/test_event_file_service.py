"""Unit tests for EventFileService."""

from datetime import UTC, datetime
from unittest.mock import AsyncMock, Mock

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from shared_kernel.authorization import TenantRole
from shared_kernel.middleware.tenant_context import TenantContext
from shipping.application.observability import EventFileServiceProbe
from shipping.application.services import EventFileService
from shipping.application.value_objects import FileUpload
from shipping.domain.aggregates import EventFile, TravelEvent
from shipping.domain.value_objects import (
    EventFileId,
    EventType,
    ShipmentId,
    TravelEventId,
)
from shipping.ports.exceptions import (
    EventFileNotFoundError,
    EventNotFoundError,
    FileTooLargeError,
    StorageOperationError,
    StorageUnavailableError,
)
from shipping.ports.repositories import IEventFileRepository, IShipmentRepository
from shipping.ports.storage import BlobStore

ORG_ID = "01HZX3K8Q5V0000000000000AA"
USER_ID = "01HZX3K8Q5V0000000000000CC"
MAX_BYTES = 1024


@pytest.fixture
def context() -> TenantContext:
    return TenantContext(user_id=USER_ID, organization_id=ORG_ID, role=TenantRole.MEMBER)


@pytest.fixture
def travel_event() -> TravelEvent:
    return TravelEvent(
        id=TravelEventId.generate(),
        shipment_id=ShipmentId.generate(),
        status="in-transit",
        location="Hamburg",
        description="",
        event_type=EventType.IN_TRANSIT,
        timestamp=datetime(2024, 5, 1, tzinfo=UTC),
    )


@pytest.fixture
def mock_file_repo():
    repo = Mock(spec=IEventFileRepository)
    repo.add = AsyncMock()
    repo.get_by_id = AsyncMock(return_value=None)
    repo.list_by_event = AsyncMock(return_value=[])
    repo.delete = AsyncMock()
    return repo


@pytest.fixture
def mock_shipment_repo(travel_event):
    repo = Mock(spec=IShipmentRepository)
    repo.get_event = AsyncMock(return_value=travel_event)
    return repo


@pytest.fixture
def mock_store():
    store = Mock(spec=BlobStore)
    store.upload = AsyncMock()
    store.signed_url = AsyncMock(return_value="https://storage.example/signed?token=t")
    store.remove = AsyncMock()
    return store


@pytest.fixture
def mock_probe():
    return Mock(spec=EventFileServiceProbe)


@pytest.fixture
def mock_session():
    """Mock AsyncSession."""
    session = Mock(spec=AsyncSession)

    ctx_manager = AsyncMock()
    ctx_manager.__aenter__ = AsyncMock(return_value=None)
    ctx_manager.__aexit__ = AsyncMock(return_value=None)

    session.begin = Mock(return_value=ctx_manager)
    return session


def _service(file_repo, shipment_repo, session, store, probe) -> EventFileService:
    return EventFileService(
        event_file_repository=file_repo,
        shipment_repository=shipment_repo,
        session=session,
        blob_store=store,
        max_file_bytes=MAX_BYTES,
        signed_url_ttl=600,
        probe=probe,
    )


@pytest.fixture
def service(mock_file_repo, mock_shipment_repo, mock_session, mock_store, mock_probe):
    return _service(
        mock_file_repo, mock_shipment_repo, mock_session, mock_store, mock_probe
    )


@pytest.fixture
def unconfigured_service(mock_file_repo, mock_shipment_repo, mock_session, mock_probe):
    return _service(mock_file_repo, mock_shipment_repo, mock_session, None, mock_probe)


class TestUpload:
    """Tests for EventFileService.upload()."""

    @pytest.mark.asyncio
    async def test_stores_blob_then_metadata(
        self, service, context, travel_event, mock_store, mock_file_repo
    ):
        upload = FileUpload(
            original_name="pod.PDF", content=b"%PDF-1.4", mime_type="application/pdf"
        )

        event_file = await service.upload(context, travel_event.id, upload)

        assert event_file.event_id == travel_event.id
        assert event_file.size == len(b"%PDF-1.4")
        assert event_file.uploaded_by == USER_ID
        assert event_file.storage_path.startswith(f"events/{travel_event.id.value}/")
        assert event_file.storage_path.endswith(".pdf")
        mock_store.upload.assert_awaited_once_with(
            event_file.storage_path, b"%PDF-1.4", "application/pdf"
        )
        mock_file_repo.add.assert_awaited_once_with(event_file)

    @pytest.mark.asyncio
    async def test_rejects_oversized_file(
        self, service, context, travel_event, mock_store, mock_probe
    ):
        upload = FileUpload(
            original_name="big.bin", content=b"x" * (MAX_BYTES + 1), mime_type="a/b"
        )

        with pytest.raises(FileTooLargeError):
            await service.upload(context, travel_event.id, upload)

        mock_store.upload.assert_not_awaited()
        mock_probe.file_rejected_too_large.assert_called_once()

    @pytest.mark.asyncio
    async def test_file_at_limit_is_accepted(self, service, context, travel_event):
        upload = FileUpload(
            original_name="edge.bin", content=b"x" * MAX_BYTES, mime_type="a/b"
        )
        event_file = await service.upload(context, travel_event.id, upload)
        assert event_file.size == MAX_BYTES

    @pytest.mark.asyncio
    async def test_unknown_event(
        self, service, context, mock_shipment_repo, mock_store
    ):
        mock_shipment_repo.get_event.return_value = None
        upload = FileUpload(original_name="a.txt", content=b"a", mime_type="text/plain")

        with pytest.raises(EventNotFoundError):
            await service.upload(context, TravelEventId.generate(), upload)

        mock_store.upload.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_storage_not_configured(self, unconfigured_service, context):
        upload = FileUpload(original_name="a.txt", content=b"a", mime_type="text/plain")

        with pytest.raises(StorageUnavailableError):
            await unconfigured_service.upload(context, TravelEventId.generate(), upload)

    @pytest.mark.asyncio
    async def test_blob_removed_when_metadata_insert_fails(
        self, service, context, travel_event, mock_store, mock_file_repo
    ):
        mock_file_repo.add.side_effect = RuntimeError("insert failed")
        upload = FileUpload(original_name="a.txt", content=b"a", mime_type="text/plain")

        with pytest.raises(RuntimeError):
            await service.upload(context, travel_event.id, upload)

        stored_path = mock_store.upload.await_args.args[0]
        mock_store.remove.assert_awaited_once_with([stored_path])


class TestDownloadUrl:
    """Tests for EventFileService.download_url()."""

    @pytest.mark.asyncio
    async def test_issues_signed_url(
        self, service, context, travel_event, mock_file_repo, mock_store
    ):
        event_file = EventFile.create(
            event_id=travel_event.id,
            original_name="pod.pdf",
            size=42,
            mime_type="application/pdf",
        )
        mock_file_repo.get_by_id.return_value = event_file

        download = await service.download_url(context, event_file.id)

        assert download.url == "https://storage.example/signed?token=t"
        assert download.expires_in == 600
        assert download.original_name == "pod.pdf"
        assert download.size == 42
        mock_file_repo.get_by_id.assert_awaited_once_with(event_file.id, ORG_ID)
        mock_store.signed_url.assert_awaited_once_with(event_file.storage_path, 600)

    @pytest.mark.asyncio
    async def test_unknown_file(self, service, context):
        with pytest.raises(EventFileNotFoundError):
            await service.download_url(context, EventFileId.generate())


class TestDelete:
    """Tests for EventFileService.delete()."""

    @pytest.mark.asyncio
    async def test_removes_row_and_blob(
        self, service, context, travel_event, mock_file_repo, mock_store
    ):
        event_file = EventFile.create(
            event_id=travel_event.id, original_name="a.txt", size=1, mime_type="text/plain"
        )
        mock_file_repo.get_by_id.return_value = event_file

        await service.delete(context, event_file.id)

        mock_file_repo.delete.assert_awaited_once_with(event_file)
        mock_store.remove.assert_awaited_once_with([event_file.storage_path])

    @pytest.mark.asyncio
    async def test_blob_failure_is_logged(
        self, service, context, travel_event, mock_file_repo, mock_store, mock_probe
    ):
        event_file = EventFile.create(
            event_id=travel_event.id, original_name="a.txt", size=1, mime_type="text/plain"
        )
        mock_file_repo.get_by_id.return_value = event_file
        mock_store.remove.side_effect = StorageOperationError("gone")

        await service.delete(context, event_file.id)

        mock_probe.storage_delete_failed.assert_called_once_with(
            event_file.id.value, "gone"
        )

    @pytest.mark.asyncio
    async def test_unknown_file(self, service, context, mock_file_repo):
        with pytest.raises(EventFileNotFoundError):
            await service.delete(context, EventFileId.generate())
        mock_file_repo.delete.assert_not_awaited()


class TestListForEvent:
    """Tests for EventFileService.list_for_event()."""

    @pytest.mark.asyncio
    async def test_lists_after_ownership_check(
        self, service, context, travel_event, mock_shipment_repo, mock_file_repo
    ):
        await service.list_for_event(context, travel_event.id)

        mock_shipment_repo.get_event.assert_awaited_once_with(travel_event.id, ORG_ID)
        mock_file_repo.list_by_event.assert_awaited_once_with(travel_event.id)

    @pytest.mark.asyncio
    async def test_foreign_event(self, service, context, mock_shipment_repo):
        mock_shipment_repo.get_event.return_value = None
        with pytest.raises(EventNotFoundError):
            await service.list_for_event(context, TravelEventId.generate())
