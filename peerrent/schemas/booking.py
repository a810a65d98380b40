from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Annotated, List, Optional

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer, model_validator
from pydantic.alias_generators import to_camel

from peerrent.core.enums import BookingStatus, DeliveryMode

CENTS = Decimal("0.01")

# Amounts leave the API as fixed two-place strings ("185.00"), never as binary floats
Money = Annotated[
    Decimal,
    PlainSerializer(lambda v: str(Decimal(v).quantize(CENTS, rounding=ROUND_HALF_UP)), return_type=str, when_used="json"),
]


class CamelModel(BaseModel):
    # snake_case in Python, camelCase on the wire
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class BookingCreate(CamelModel):
    item_id: str = Field(min_length=1, max_length=36)
    start_date: date
    end_date: date
    delivery_mode: Optional[DeliveryMode] = None
    pickup_location: Optional[str] = Field(default=None, max_length=36)
    delivery_location: Optional[str] = Field(default=None, max_length=36)
    special_instructions: Optional[str] = Field(default=None, max_length=1000)

    @model_validator(mode="after")
    def check_dates(self):
        if self.start_date < date.today():
            raise ValueError("Start date cannot be in the past")
        if self.end_date < self.start_date:
            raise ValueError("End date must be greater than or equal to start date")
        return self


class StatusUpdate(CamelModel):
    status: BookingStatus
    reason: Optional[str] = Field(default=None, max_length=500)


class ReasonIn(CamelModel):
    reason: Optional[str] = Field(default=None, max_length=500)


class DisputeResolution(CamelModel):
    status: BookingStatus
    reason: Optional[str] = Field(default=None, max_length=500)

    @model_validator(mode="after")
    def check_outcome(self):
        if self.status not in (BookingStatus.COMPLETED, BookingStatus.CANCELLED):
            raise ValueError("A dispute resolves to completed or cancelled")
        return self


class RatingIn(CamelModel):
    rating: int = Field(ge=1, le=5)
    feedback: Optional[str] = Field(default=None, max_length=1000)


class BookingOut(CamelModel):
    id: str
    item_id: str
    lender_user_id: str
    borrower_user_id: str
    start_date: date
    end_date: date
    total_days: int
    daily_rate: Money
    total_rent: Money
    security_amount: Money
    platform_fee: Money
    total_amount: Money
    booking_status: str
    delivery_mode: Optional[str] = None
    pickup_location: Optional[str] = None
    delivery_location: Optional[str] = None
    special_instructions: Optional[str] = None
    confirmed_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None
    cancellation_reason: Optional[str] = None
    rating_by_lender: Optional[int] = None
    rating_by_borrower: Optional[int] = None
    feedback_by_lender: Optional[str] = None
    feedback_by_borrower: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class PaginationOut(CamelModel):
    page: int
    limit: int
    total: int
    total_pages: int
    has_next: bool
    has_prev: bool


class AvailabilityOut(CamelModel):
    available: bool
    reason: Optional[str] = None


class RoleStatsOut(CamelModel):
    total_bookings: int
    completed_bookings: int
    pending_bookings: int
    average_rating: float


class LenderStatsOut(RoleStatsOut):
    total_earnings: Money


class BorrowerStatsOut(RoleStatsOut):
    total_spent: Money


class BookingStatsOut(CamelModel):
    as_lender: LenderStatsOut
    as_borrower: BorrowerStatsOut
    recent_bookings: List[BookingOut]
