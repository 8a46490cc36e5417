"""create initial schema

Revision ID: 4b1f0c9a7e21
Revises:
Create Date: 2026-10-19

Creates organizations, users, user_invitations, shipments, travel_events
and event_files. organizations.owner_id and users reference each other, so
the owner foreign key is added once both tables exist.
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "4b1f0c9a7e21"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
    ]


def upgrade() -> None:
    """Create all tables, constraints and indexes."""
    op.create_table(
        "organizations",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("slug", sa.String(100), nullable=False),
        sa.Column("plan", sa.String(50), nullable=False, server_default="free"),
        sa.Column(
            "billing_status", sa.String(50), nullable=False, server_default="active"
        ),
        sa.Column("owner_id", sa.String(26), nullable=True),
        sa.Column("max_users", sa.Integer, nullable=True),
        sa.Column("max_shipments_per_month", sa.Integer, nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_organizations"),
        sa.UniqueConstraint("slug", name="uq_organizations_slug"),
    )

    op.create_table(
        "users",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=True),
        sa.Column("google_id", sa.String(255), nullable=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("avatar_url", sa.String(1024), nullable=True),
        sa.Column("role", sa.String(20), nullable=False),
        sa.Column("organization_id", sa.String(26), nullable=False),
        sa.Column("invited_by_user_id", sa.String(26), nullable=True),
        sa.Column("last_login_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_users"),
        sa.UniqueConstraint("email", name="uq_users_email"),
        sa.UniqueConstraint("google_id", name="uq_users_google_id"),
        sa.ForeignKeyConstraint(
            ["organization_id"],
            ["organizations.id"],
            name="fk_users_organization_id_organizations",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["invited_by_user_id"],
            ["users.id"],
            name="fk_users_invited_by_user_id_users",
            ondelete="SET NULL",
        ),
    )
    op.create_index("ix_users_organization_id", "users", ["organization_id"])

    op.create_foreign_key(
        "fk_organizations_owner_id_users",
        "organizations",
        "users",
        ["owner_id"],
        ["id"],
        ondelete="SET NULL",
    )

    op.create_table(
        "user_invitations",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("organization_id", sa.String(26), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("role", sa.String(20), nullable=False),
        sa.Column("invited_by", sa.String(26), nullable=True),
        sa.Column("invitation_token", sa.String(64), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("accepted_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_user_invitations"),
        sa.UniqueConstraint(
            "organization_id",
            "email",
            name="uq_user_invitations_organization_id_email",
        ),
        sa.UniqueConstraint(
            "invitation_token", name="uq_user_invitations_invitation_token"
        ),
        sa.ForeignKeyConstraint(
            ["organization_id"],
            ["organizations.id"],
            name="fk_user_invitations_organization_id_organizations",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["invited_by"],
            ["users.id"],
            name="fk_user_invitations_invited_by_users",
            ondelete="SET NULL",
        ),
    )

    op.create_table(
        "shipments",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("organization_id", sa.String(26), nullable=False),
        sa.Column("tracking_number", sa.String(100), nullable=False),
        sa.Column("origin", sa.String(255), nullable=False),
        sa.Column("destination", sa.String(255), nullable=False),
        sa.Column("weight", sa.Float, nullable=False),
        sa.Column("pieces", sa.Integer, nullable=False),
        sa.Column("current_status", sa.String(100), nullable=False),
        sa.Column("company", sa.String(255), nullable=True),
        sa.Column("created_by_user_id", sa.String(26), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_shipments"),
        sa.UniqueConstraint(
            "organization_id",
            "tracking_number",
            name="uq_shipments_organization_id_tracking_number",
        ),
        sa.CheckConstraint("weight >= 0", name="ck_shipments_weight_non_negative"),
        sa.CheckConstraint("pieces >= 1", name="ck_shipments_pieces_positive"),
        sa.ForeignKeyConstraint(
            ["organization_id"],
            ["organizations.id"],
            name="fk_shipments_organization_id_organizations",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["created_by_user_id"],
            ["users.id"],
            name="fk_shipments_created_by_user_id_users",
            ondelete="SET NULL",
        ),
    )
    op.create_index("ix_shipments_tracking_number", "shipments", ["tracking_number"])
    op.create_index(
        "ix_shipments_organization_id_created_at",
        "shipments",
        ["organization_id", "created_at"],
    )

    op.create_table(
        "travel_events",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("shipment_id", sa.String(26), nullable=False),
        sa.Column("status", sa.String(100), nullable=False),
        sa.Column("location", sa.String(255), nullable=False),
        sa.Column("description", sa.Text, nullable=False, server_default=""),
        sa.Column("event_type", sa.String(50), nullable=False),
        sa.Column("timestamp", sa.DateTime(timezone=True), nullable=False),
        sa.Column("created_by_user_id", sa.String(26), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_travel_events"),
        sa.ForeignKeyConstraint(
            ["shipment_id"],
            ["shipments.id"],
            name="fk_travel_events_shipment_id_shipments",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["created_by_user_id"],
            ["users.id"],
            name="fk_travel_events_created_by_user_id_users",
            ondelete="SET NULL",
        ),
    )
    op.create_index(
        "ix_travel_events_shipment_id_timestamp",
        "travel_events",
        ["shipment_id", "timestamp"],
    )

    op.create_table(
        "event_files",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("event_id", sa.String(26), nullable=False),
        sa.Column("filename", sa.String(512), nullable=False),
        sa.Column("original_name", sa.String(255), nullable=False),
        sa.Column("file_size", sa.Integer, nullable=False),
        sa.Column("mime_type", sa.String(255), nullable=False),
        sa.Column(
            "uploaded_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column("uploaded_by", sa.String(26), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_event_files"),
        sa.ForeignKeyConstraint(
            ["event_id"],
            ["travel_events.id"],
            name="fk_event_files_event_id_travel_events",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["uploaded_by"],
            ["users.id"],
            name="fk_event_files_uploaded_by_users",
            ondelete="SET NULL",
        ),
    )
    op.create_index("ix_event_files_event_id", "event_files", ["event_id"])


def downgrade() -> None:
    """Drop all tables in reverse dependency order."""
    op.drop_index("ix_event_files_event_id", table_name="event_files")
    op.drop_table("event_files")
    op.drop_index("ix_travel_events_shipment_id_timestamp", table_name="travel_events")
    op.drop_table("travel_events")
    op.drop_index("ix_shipments_organization_id_created_at", table_name="shipments")
    op.drop_index("ix_shipments_tracking_number", table_name="shipments")
    op.drop_table("shipments")
    op.drop_table("user_invitations")
    op.drop_constraint(
        "fk_organizations_owner_id_users", "organizations", type_="foreignkey"
    )
    op.drop_index("ix_users_organization_id", table_name="users")
    op.drop_table("users")
    op.drop_table("organizations")
