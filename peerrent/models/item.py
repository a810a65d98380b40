from decimal import Decimal
from sqlalchemy import String, Integer, DateTime, Boolean, Numeric
from sqlalchemy.orm import Mapped, mapped_column
from datetime import datetime, timezone
from peerrent.db.session import Base

class Item(Base):
    __tablename__ = "items"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    user_id: Mapped[str] = mapped_column(String(36), index=True)  # owner / lender
    title: Mapped[str] = mapped_column(String(255), default="")

    # available, booked, inTransit, delivered, returned, maintenance, inactive
    status: Mapped[str] = mapped_column(String(20), default="available", index=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)

    rent_price_per_day: Mapped[Decimal] = mapped_column(Numeric(10, 2))
    security_amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=True, default=Decimal("0"))
    min_rental_days: Mapped[int] = mapped_column(Integer, default=1)
    max_rental_days: Mapped[int] = mapped_column(Integer, default=30)
    delivery_mode: Mapped[str] = mapped_column(String(12), default="both")  # none|pickup|delivery|both

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
