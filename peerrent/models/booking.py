from decimal import Decimal
from sqlalchemy import String, Integer, DateTime, Date, Numeric, Text, CheckConstraint, Index
from sqlalchemy.orm import Mapped, mapped_column
from datetime import date, datetime, timezone
from peerrent.db.session import Base

class Booking(Base):
    __tablename__ = "bookings"
    __table_args__ = (
        CheckConstraint("lender_user_id <> borrower_user_id", name="ck_bookings_different_users"),
        CheckConstraint("end_date >= start_date", name="ck_bookings_valid_dates"),
        CheckConstraint("rating_by_lender IS NULL OR (rating_by_lender BETWEEN 1 AND 5)", name="ck_bookings_rating_by_lender"),
        CheckConstraint("rating_by_borrower IS NULL OR (rating_by_borrower BETWEEN 1 AND 5)", name="ck_bookings_rating_by_borrower"),
        Index("ix_bookings_item_dates", "item_id", "start_date", "end_date"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    item_id: Mapped[str] = mapped_column(String(36), index=True)
    lender_user_id: Mapped[str] = mapped_column(String(36), index=True)
    borrower_user_id: Mapped[str] = mapped_column(String(36), index=True)

    start_date: Mapped[date] = mapped_column(Date)
    end_date: Mapped[date] = mapped_column(Date)
    total_days: Mapped[int] = mapped_column(Integer)

    # Snapshots taken at creation; never recomputed
    daily_rate: Mapped[Decimal] = mapped_column(Numeric(10, 2))
    total_rent: Mapped[Decimal] = mapped_column(Numeric(10, 2))
    security_amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=Decimal("0"))
    platform_fee: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=Decimal("0"))

    # pending, confirmed, inProgress, completed, cancelled, disputed
    booking_status: Mapped[str] = mapped_column(String(20), default="pending", index=True)
    delivery_mode: Mapped[str] = mapped_column(String(12), default="none")
    pickup_location: Mapped[str] = mapped_column(String(36), nullable=True)
    delivery_location: Mapped[str] = mapped_column(String(36), nullable=True)
    special_instructions: Mapped[str] = mapped_column(Text, nullable=True)

    confirmed_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=True)
    completed_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=True)
    cancelled_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=True)
    cancellation_reason: Mapped[str] = mapped_column(Text, nullable=True)

    rating_by_lender: Mapped[int] = mapped_column(Integer, nullable=True)
    rating_by_borrower: Mapped[int] = mapped_column(Integer, nullable=True)
    feedback_by_lender: Mapped[str] = mapped_column(Text, nullable=True)
    feedback_by_borrower: Mapped[str] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), index=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    @property
    def total_amount(self) -> Decimal:
        return (self.total_rent or Decimal("0")) + (self.security_amount or Decimal("0")) + (self.platform_fee or Decimal("0"))
