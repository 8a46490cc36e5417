"""SQLAlchemy ORM model for the organizations table."""

from sqlalchemy import ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base, TimestampMixin

SLUG_CONSTRAINT = "uq_organizations_slug"


class OrganizationModel(Base, TimestampMixin):
    """ORM model for organizations table.

    Organizations are the top-level isolation boundary. Slugs are globally
    unique. ``owner_id`` points back at users, so the foreign key is added
    after both tables exist.
    """

    __tablename__ = "organizations"

    id: Mapped[str] = mapped_column(String(26), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    plan: Mapped[str] = mapped_column(String(50), nullable=False, default="free")
    billing_status: Mapped[str] = mapped_column(
        String(50), nullable=False, default="active"
    )
    owner_id: Mapped[str | None] = mapped_column(
        String(26),
        ForeignKey("users.id", ondelete="SET NULL", use_alter=True),
        nullable=True,
    )
    max_users: Mapped[int | None] = mapped_column(Integer, nullable=True)
    max_shipments_per_month: Mapped[int | None] = mapped_column(Integer, nullable=True)

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<OrganizationModel(id={self.id}, slug={self.slug})>"
