"""Wire-format helpers shared by the presentation layers.

JSON bodies use camelCase keys and millisecond-precision UTC timestamps
(``2024-05-01T12:30:00.000Z``).
"""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serialized with camelCase aliases.

    Requests may use either the camelCase alias or the field name.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def format_timestamp(value: datetime) -> str:
    """Render a datetime as ``YYYY-MM-DDTHH:MM:SS.mmmZ`` in UTC.

    Naive datetimes are taken to be UTC already.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    value = value.astimezone(UTC)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


def format_optional_timestamp(value: datetime | None) -> str | None:
    return format_timestamp(value) if value is not None else None
