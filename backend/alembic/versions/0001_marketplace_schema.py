"""Marketplace schema: users, profiles, availability and bookings.

Revision ID: 0001
Revises:
Create Date: 2026-10-19
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    user_role_enum = sa.Enum("DEVELOPER", "CLIENT", name="userrole")
    user_status_enum = sa.Enum("ACTIVE", "SUSPENDED", name="userstatus")
    availability_kind_enum = sa.Enum(
        "RECURRING_WEEKLY", "DATE_RANGE", name="availabilitykind"
    )
    booking_status_enum = sa.Enum(
        "PENDING",
        "CONFIRMED",
        "CANCELLED",
        "COMPLETED",
        "REJECTED",
        name="bookingstatus",
    )

    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(as_uuid=True), nullable=False),
        sa.Column("email", sa.String(length=320), nullable=False),
        sa.Column("hashed_password", sa.String(length=255), nullable=False),
        sa.Column("full_name", sa.String(length=200), nullable=False),
        sa.Column("role", user_role_enum, nullable=False),
        sa.Column("status", user_status_enum, nullable=False),
        sa.Column("timezone", sa.String(length=64)),
        sa.Column("bio", sa.Text()),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_users"),
        sa.UniqueConstraint("id", name="uq_users_id"),
        sa.UniqueConstraint("email", name="uq_users_email"),
    )

    op.create_table(
        "developer_profiles",
        sa.Column("id", sa.Uuid(as_uuid=True), nullable=False),
        sa.Column("phone_number", sa.String(length=32)),
        sa.Column("skills", sa.JSON()),
        sa.Column("focus_areas", sa.JSON()),
        sa.Column("portfolio_url", sa.String(length=500)),
        sa.Column("github_url", sa.String(length=500)),
        sa.Column("portfolio_image_url", sa.String(length=500)),
        sa.Column("hourly_rate", sa.Numeric(10, 2)),
        sa.Column("location", sa.String(length=200)),
        sa.Column("years_of_experience", sa.Integer()),
        sa.Column("rating", sa.Numeric(3, 2)),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ["id"],
            ["users.id"],
            name="fk_developer_profiles_id_users",
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_developer_profiles"),
    )

    op.create_table(
        "client_profiles",
        sa.Column("id", sa.Uuid(as_uuid=True), nullable=False),
        sa.Column("client_name", sa.String(length=200), nullable=False),
        sa.Column("company_name", sa.String(length=200)),
        sa.Column("logo_url", sa.String(length=500)),
        sa.Column("website_url", sa.String(length=500)),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ["id"],
            ["users.id"],
            name="fk_client_profiles_id_users",
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_client_profiles"),
    )

    op.create_table(
        "availabilities",
        sa.Column("id", sa.Uuid(as_uuid=True), nullable=False),
        sa.Column("developer_id", sa.Uuid(as_uuid=True), nullable=False),
        sa.Column("kind", availability_kind_enum, nullable=False),
        sa.Column("day_of_week", sa.SmallInteger()),
        sa.Column("slot_start_time", sa.Time(timezone=False)),
        sa.Column("slot_end_time", sa.Time(timezone=False)),
        sa.Column("range_start_date", sa.Date()),
        sa.Column("range_end_date", sa.Date()),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("booked_by_id", sa.Uuid(as_uuid=True)),
        *_timestamps(),
        sa.CheckConstraint(
            "day_of_week IS NULL OR (day_of_week >= 0 AND day_of_week <= 6)",
            name="ck_availabilities_day_of_week_range",
        ),
        sa.CheckConstraint(
            "slot_start_time IS NULL OR slot_end_time IS NULL "
            "OR slot_start_time < slot_end_time",
            name="ck_availabilities_slot_window_order",
        ),
        sa.CheckConstraint(
            "range_start_date IS NULL OR range_end_date IS NULL "
            "OR range_start_date <= range_end_date",
            name="ck_availabilities_range_order",
        ),
        sa.ForeignKeyConstraint(
            ["developer_id"],
            ["users.id"],
            name="fk_availabilities_developer_id_users",
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_availabilities"),
        sa.UniqueConstraint("id", name="uq_availabilities_id"),
    )
    op.create_index(
        "ix_availabilities_developer_kind",
        "availabilities",
        ["developer_id", "kind"],
    )

    op.create_table(
        "bookings",
        sa.Column("id", sa.Uuid(as_uuid=True), nullable=False),
        sa.Column("client_id", sa.Uuid(as_uuid=True), nullable=False),
        sa.Column("developer_id", sa.Uuid(as_uuid=True), nullable=False),
        sa.Column("availability_id", sa.Uuid(as_uuid=True)),
        sa.Column("start_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("status", booking_status_enum, nullable=False),
        sa.Column("notes", sa.String(length=2000)),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ["client_id"],
            ["users.id"],
            name="fk_bookings_client_id_users",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["developer_id"],
            ["users.id"],
            name="fk_bookings_developer_id_users",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["availability_id"],
            ["availabilities.id"],
            name="fk_bookings_availability_id_availabilities",
            ondelete="SET NULL",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_bookings"),
        sa.UniqueConstraint("id", name="uq_bookings_id"),
    )
    op.create_index(
        "uq_bookings_confirmed_availability",
        "bookings",
        ["availability_id"],
        unique=True,
        postgresql_where=sa.text("status = 'CONFIRMED'"),
        sqlite_where=sa.text("status = 'CONFIRMED'"),
    )
    op.create_index(
        "ix_bookings_client_start", "bookings", ["client_id", "start_time"]
    )
    op.create_index(
        "ix_bookings_developer_start", "bookings", ["developer_id", "start_time"]
    )


def downgrade() -> None:
    op.drop_index("ix_bookings_developer_start", table_name="bookings")
    op.drop_index("ix_bookings_client_start", table_name="bookings")
    op.drop_index("uq_bookings_confirmed_availability", table_name="bookings")
    op.drop_table("bookings")
    op.drop_index("ix_availabilities_developer_kind", table_name="availabilities")
    op.drop_table("availabilities")
    op.drop_table("client_profiles")
    op.drop_table("developer_profiles")
    op.drop_table("users")

    bind = op.get_bind()
    for enum_name in ("bookingstatus", "availabilitykind", "userstatus", "userrole"):
        sa.Enum(name=enum_name).drop(bind, checkfirst=True)
