"""PostgreSQL implementation of IEventFileRepository."""

from __future__ import annotations

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from shipping.domain.aggregates import EventFile
from shipping.domain.value_objects import EventFileId, TravelEventId
from shipping.infrastructure.models import (
    EventFileModel,
    ShipmentModel,
    TravelEventModel,
)
from shipping.ports.repositories import IEventFileRepository


def _from_model(model: EventFileModel) -> EventFile:
    return EventFile(
        id=EventFileId(value=model.id),
        event_id=TravelEventId(value=model.event_id),
        storage_path=model.filename,
        original_name=model.original_name,
        size=model.file_size,
        mime_type=model.mime_type,
        uploaded_by=model.uploaded_by,
        uploaded_at=model.uploaded_at,
    )


class EventFileRepository(IEventFileRepository):
    """PostgreSQL-backed repository for attachment metadata."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def add(self, event_file: EventFile) -> None:
        self._session.add(
            EventFileModel(
                id=event_file.id.value,
                event_id=event_file.event_id.value,
                filename=event_file.storage_path,
                original_name=event_file.original_name,
                file_size=event_file.size,
                mime_type=event_file.mime_type,
                uploaded_at=event_file.uploaded_at,
                uploaded_by=event_file.uploaded_by,
            )
        )
        await self._session.flush()

    async def get_by_id(
        self, file_id: EventFileId, organization_id: str
    ) -> EventFile | None:
        """Fetch an attachment scoped through event and shipment to an organization."""
        stmt = (
            select(EventFileModel)
            .join(TravelEventModel, TravelEventModel.id == EventFileModel.event_id)
            .join(ShipmentModel, ShipmentModel.id == TravelEventModel.shipment_id)
            .where(
                EventFileModel.id == file_id.value,
                ShipmentModel.organization_id == organization_id,
            )
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return _from_model(model) if model is not None else None

    async def list_by_event(self, event_id: TravelEventId) -> list[EventFile]:
        stmt = (
            select(EventFileModel)
            .where(EventFileModel.event_id == event_id.value)
            .order_by(EventFileModel.uploaded_at.desc())
        )
        result = await self._session.execute(stmt)
        return [_from_model(model) for model in result.scalars().all()]

    async def delete(self, event_file: EventFile) -> None:
        await self._session.execute(
            delete(EventFileModel).where(EventFileModel.id == event_file.id.value)
        )
        await self._session.flush()
