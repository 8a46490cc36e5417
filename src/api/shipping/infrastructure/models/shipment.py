"""SQLAlchemy ORM models for shipments and travel events."""

from datetime import datetime

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base, TimestampMixin

TRACKING_NUMBER_CONSTRAINT = "uq_shipments_organization_id_tracking_number"


class ShipmentModel(Base, TimestampMixin):
    """ORM model for the shipments table.

    Tracking numbers are unique per organization only. Creator references
    survive user removal as NULL.
    """

    __tablename__ = "shipments"
    __table_args__ = (
        UniqueConstraint("organization_id", "tracking_number"),
        CheckConstraint("weight >= 0", name="weight_non_negative"),
        CheckConstraint("pieces >= 1", name="pieces_positive"),
        Index("ix_shipments_organization_id_created_at", "organization_id", "created_at"),
    )

    id: Mapped[str] = mapped_column(String(26), primary_key=True)
    organization_id: Mapped[str] = mapped_column(
        String(26),
        ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
    )
    tracking_number: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    origin: Mapped[str] = mapped_column(String(255), nullable=False)
    destination: Mapped[str] = mapped_column(String(255), nullable=False)
    weight: Mapped[float] = mapped_column(Float, nullable=False)
    pieces: Mapped[int] = mapped_column(Integer, nullable=False)
    current_status: Mapped[str] = mapped_column(String(100), nullable=False)
    company: Mapped[str | None] = mapped_column(String(255), nullable=True)
    created_by_user_id: Mapped[str | None] = mapped_column(
        String(26),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )

    def __repr__(self) -> str:
        """Return string representation."""
        return (
            f"<ShipmentModel(id={self.id}, tracking_number={self.tracking_number}, "
            f"organization_id={self.organization_id})>"
        )


class TravelEventModel(Base, TimestampMixin):
    """ORM model for the travel_events table.

    Rows are deleted with their shipment. ``timestamp`` is the ordering key.
    """

    __tablename__ = "travel_events"
    __table_args__ = (
        Index("ix_travel_events_shipment_id_timestamp", "shipment_id", "timestamp"),
    )

    id: Mapped[str] = mapped_column(String(26), primary_key=True)
    shipment_id: Mapped[str] = mapped_column(
        String(26),
        ForeignKey("shipments.id", ondelete="CASCADE"),
        nullable=False,
    )
    status: Mapped[str] = mapped_column(String(100), nullable=False)
    location: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    event_type: Mapped[str] = mapped_column(String(50), nullable=False)
    timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    created_by_user_id: Mapped[str | None] = mapped_column(
        String(26),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<TravelEventModel(id={self.id}, shipment_id={self.shipment_id})>"
