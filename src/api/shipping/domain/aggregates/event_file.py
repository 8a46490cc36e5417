"""EventFile aggregate: an attachment stored against a travel event."""

from __future__ import annotations

import secrets
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import PurePosixPath

from shipping.domain.value_objects import EventFileId, TravelEventId


def build_storage_path(event_id: TravelEventId, original_name: str) -> str:
    """Return a collision-free blob path under ``events/{event_id}/``.

    The original extension is kept so downloads get a sensible name.
    """
    suffix = PurePosixPath(original_name).suffix.lower()
    unique = f"{int(datetime.now(UTC).timestamp() * 1000)}-{secrets.token_hex(6)}"
    return f"events/{event_id.value}/{unique}{suffix}"


@dataclass
class EventFile:
    """Metadata for an uploaded attachment.

    The bytes live in the blob store at ``storage_path``; this aggregate is
    what the database keeps.
    """

    id: EventFileId
    event_id: TravelEventId
    storage_path: str
    original_name: str
    size: int
    mime_type: str
    uploaded_by: str | None = None
    uploaded_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    @classmethod
    def create(
        cls,
        event_id: TravelEventId,
        original_name: str,
        size: int,
        mime_type: str,
        uploaded_by: str | None = None,
    ) -> EventFile:
        """Factory method assigning the id and storage path."""
        return cls(
            id=EventFileId.generate(),
            event_id=event_id,
            storage_path=build_storage_path(event_id, original_name),
            original_name=original_name,
            size=size,
            mime_type=mime_type,
            uploaded_by=uploaded_by,
        )
