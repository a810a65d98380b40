"""initial

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-16

"""

from alembic import op
import sqlalchemy as sa

revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None

def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("email", sa.String(length=320), nullable=False),
        sa.Column("full_name", sa.String(length=200), nullable=False, server_default=""),
        sa.Column("role", sa.String(length=30), nullable=False, server_default="user"),
        sa.Column("trust_score", sa.Numeric(3, 2), nullable=False, server_default="0"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_role", "users", ["role"], unique=False)

    op.create_table(
        "items",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("user_id", sa.String(length=36), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False, server_default=""),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="available"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("rent_price_per_day", sa.Numeric(10, 2), nullable=False),
        sa.Column("security_amount", sa.Numeric(10, 2), nullable=True, server_default="0"),
        sa.Column("min_rental_days", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("max_rental_days", sa.Integer(), nullable=False, server_default="30"),
        sa.Column("delivery_mode", sa.String(length=12), nullable=False, server_default="both"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_items_user_id", "items", ["user_id"])
    op.create_index("ix_items_status", "items", ["status"])

    op.create_table(
        "bookings",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("item_id", sa.String(length=36), nullable=False),
        sa.Column("lender_user_id", sa.String(length=36), nullable=False),
        sa.Column("borrower_user_id", sa.String(length=36), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("total_days", sa.Integer(), nullable=False),
        sa.Column("daily_rate", sa.Numeric(10, 2), nullable=False),
        sa.Column("total_rent", sa.Numeric(10, 2), nullable=False),
        sa.Column("security_amount", sa.Numeric(10, 2), nullable=False, server_default="0"),
        sa.Column("platform_fee", sa.Numeric(10, 2), nullable=False, server_default="0"),
        sa.Column("booking_status", sa.String(length=20), nullable=False, server_default="pending"),
        sa.Column("delivery_mode", sa.String(length=12), nullable=False, server_default="none"),
        sa.Column("pickup_location", sa.String(length=36), nullable=True),
        sa.Column("delivery_location", sa.String(length=36), nullable=True),
        sa.Column("special_instructions", sa.Text(), nullable=True),
        sa.Column("confirmed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("cancelled_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("cancellation_reason", sa.Text(), nullable=True),
        sa.Column("rating_by_lender", sa.Integer(), nullable=True),
        sa.Column("rating_by_borrower", sa.Integer(), nullable=True),
        sa.Column("feedback_by_lender", sa.Text(), nullable=True),
        sa.Column("feedback_by_borrower", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("lender_user_id <> borrower_user_id", name="ck_bookings_different_users"),
        sa.CheckConstraint("end_date >= start_date", name="ck_bookings_valid_dates"),
        sa.CheckConstraint(
            "rating_by_lender IS NULL OR (rating_by_lender BETWEEN 1 AND 5)", name="ck_bookings_rating_by_lender"
        ),
        sa.CheckConstraint(
            "rating_by_borrower IS NULL OR (rating_by_borrower BETWEEN 1 AND 5)", name="ck_bookings_rating_by_borrower"
        ),
    )
    op.create_index("ix_bookings_item_id", "bookings", ["item_id"])
    op.create_index("ix_bookings_lender_user_id", "bookings", ["lender_user_id"])
    op.create_index("ix_bookings_borrower_user_id", "bookings", ["borrower_user_id"])
    op.create_index("ix_bookings_booking_status", "bookings", ["booking_status"])
    op.create_index("ix_bookings_created_at", "bookings", ["created_at"])
    op.create_index("ix_bookings_item_dates", "bookings", ["item_id", "start_date", "end_date"])

    op.create_table(
        "payments",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("booking_id", sa.String(length=36), nullable=False),
        sa.Column("user_id", sa.String(length=36), nullable=False),
        sa.Column("amount", sa.Numeric(10, 2), nullable=False),
        sa.Column("platform_fee", sa.Numeric(10, 2), nullable=False, server_default="0"),
        sa.Column("payment_status", sa.String(length=20), nullable=False, server_default="pending"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_payments_booking_id", "payments", ["booking_id"])
    op.create_index("ix_payments_user_id", "payments", ["user_id"])

    op.create_table(
        "booking_events",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("event_type", sa.String(length=40), nullable=False),
        sa.Column("booking_id", sa.String(length=36), nullable=False),
        sa.Column("actor_user_id", sa.String(length=36), nullable=False),
        sa.Column("payload_json", sa.Text(), nullable=False, server_default="{}"),
        sa.Column("occurred_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("recorded_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_booking_events_event_type", "booking_events", ["event_type"])
    op.create_index("ix_booking_events_booking_id", "booking_events", ["booking_id"])
    op.create_index("ix_booking_events_actor_user_id", "booking_events", ["actor_user_id"])


def downgrade() -> None:
    op.drop_table("booking_events")
    op.drop_table("payments")
    op.drop_table("bookings")
    op.drop_table("items")
    op.drop_table("users")
