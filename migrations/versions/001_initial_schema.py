"""Initial schema: barbers, services, weekly_schedules, days_off, appointments.

Revision ID: 001_initial
Revises:
Create Date: 2026-10-17

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

DAY_OF_WEEK = sa.Enum(
    "MONDAY", "TUESDAY", "WEDNESDAY", "THURSDAY", "FRIDAY", "SATURDAY", "SUNDAY",
    name="dayofweek",
)
APPOINTMENT_STATUS = sa.Enum(
    "PENDING", "CONFIRMED", "COMPLETED", "CANCELLED", "NO_SHOW",
    name="appointmentstatus",
)


def upgrade() -> None:
    op.create_table(
        "barbers",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="true"),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "services",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("duration_minutes", sa.Integer(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="true"),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("duration_minutes > 0", name="ck_services_duration_positive"),
    )

    op.create_table(
        "weekly_schedules",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("barber_id", sa.String(), nullable=False),
        sa.Column("day_of_week", DAY_OF_WEEK, nullable=False),
        sa.Column("start_time", sa.String(), nullable=False),
        sa.Column("end_time", sa.String(), nullable=False),
        sa.Column("is_available", sa.Boolean(), nullable=False, server_default="true"),
        sa.ForeignKeyConstraint(["barber_id"], ["barbers.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("barber_id", "day_of_week", name="uq_weekly_schedules_barber_day"),
    )
    op.create_index(op.f("ix_weekly_schedules_barber_id"), "weekly_schedules", ["barber_id"], unique=False)

    op.create_table(
        "days_off",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("barber_id", sa.String(), nullable=False),
        sa.Column("off_date", sa.Date(), nullable=False),
        sa.Column("reason", sa.String(), nullable=True),
        sa.ForeignKeyConstraint(["barber_id"], ["barbers.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("barber_id", "off_date", name="uq_days_off_barber_date"),
    )
    op.create_index(op.f("ix_days_off_barber_id"), "days_off", ["barber_id"], unique=False)
    op.create_index(op.f("ix_days_off_off_date"), "days_off", ["off_date"], unique=False)

    op.create_table(
        "appointments",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("barber_id", sa.String(), nullable=False),
        sa.Column("service_id", sa.String(), nullable=False),
        sa.Column("client_name", sa.String(), nullable=False),
        sa.Column("client_phone", sa.String(), nullable=True),
        sa.Column("appointment_date", sa.Date(), nullable=False),
        sa.Column("time", sa.String(), nullable=False),
        sa.Column("status", APPOINTMENT_STATUS, nullable=False),
        sa.Column("notes", sa.String(), nullable=True),
        sa.Column("active_slot_key", sa.String(), nullable=True),
        sa.Column("cancellation_reason", sa.String(), nullable=True),
        sa.Column("rescheduled_from_id", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["barber_id"], ["barbers.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["service_id"], ["services.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_appointments_barber_id"), "appointments", ["barber_id"], unique=False)
    op.create_index(op.f("ix_appointments_service_id"), "appointments", ["service_id"], unique=False)
    op.create_index(op.f("ix_appointments_appointment_date"), "appointments", ["appointment_date"], unique=False)
    op.create_index(op.f("ix_appointments_status"), "appointments", ["status"], unique=False)
    # NULL once an appointment leaves PENDING/CONFIRMED, so only active bookings compete for a slot
    op.create_index(op.f("ix_appointments_active_slot_key"), "appointments", ["active_slot_key"], unique=True)


def downgrade() -> None:
    op.drop_index(op.f("ix_appointments_active_slot_key"), table_name="appointments")
    op.drop_index(op.f("ix_appointments_status"), table_name="appointments")
    op.drop_index(op.f("ix_appointments_appointment_date"), table_name="appointments")
    op.drop_index(op.f("ix_appointments_service_id"), table_name="appointments")
    op.drop_index(op.f("ix_appointments_barber_id"), table_name="appointments")
    op.drop_table("appointments")
    op.drop_index(op.f("ix_days_off_off_date"), table_name="days_off")
    op.drop_index(op.f("ix_days_off_barber_id"), table_name="days_off")
    op.drop_table("days_off")
    op.drop_index(op.f("ix_weekly_schedules_barber_id"), table_name="weekly_schedules")
    op.drop_table("weekly_schedules")
    op.drop_table("services")
    op.drop_table("barbers")
    APPOINTMENT_STATUS.drop(op.get_bind(), checkfirst=True)
    DAY_OF_WEEK.drop(op.get_bind(), checkfirst=True)
