from dataclasses import dataclass
from datetime import date
from decimal import Decimal, ROUND_HALF_UP

from peerrent.core.config import settings
from peerrent.core.errors import InvalidInputError, OutOfBoundsError
from peerrent.repositories.base import ItemTerms

CENTS = Decimal("0.01")


@dataclass(frozen=True)
class RentalTerms:
    total_days: int
    daily_rate: Decimal
    total_rent: Decimal
    security_amount: Decimal
    platform_fee: Decimal

    @property
    def total_amount(self) -> Decimal:
        return self.total_rent + self.security_amount + self.platform_fee


def to_money(value) -> Decimal:
    # str() first so floats coming from JSON don't drag binary noise into Decimal
    return Decimal(str(value)).quantize(CENTS, rounding=ROUND_HALF_UP)


def rental_days(start_date: date, end_date: date) -> int:
    """Inclusive day count; a same-day rental is one day."""
    if end_date < start_date:
        raise InvalidInputError("End date must be greater than or equal to start date")
    return (end_date - start_date).days + 1


def calculate_platform_fee(total_rent: Decimal) -> Decimal:
    fee = to_money(total_rent) * settings.PLATFORM_FEE_RATE
    fee = min(max(fee, settings.PLATFORM_FEE_MIN), settings.PLATFORM_FEE_MAX)
    return to_money(fee)


def compute_terms(item: ItemTerms, start_date: date, end_date: date) -> RentalTerms:
    """Derive the financial terms of a rental. Pure: no I/O, same input gives same output."""
    total_days = rental_days(start_date, end_date)

    if total_days < item.min_rental_days:
        raise OutOfBoundsError(
            f"Minimum rental period is {item.min_rental_days} days",
            {"totalDays": total_days, "minRentalDays": item.min_rental_days},
        )
    if total_days > item.max_rental_days:
        raise OutOfBoundsError(
            f"Maximum rental period is {item.max_rental_days} days",
            {"totalDays": total_days, "maxRentalDays": item.max_rental_days},
        )

    daily_rate = to_money(item.daily_rate)
    total_rent = to_money(daily_rate * total_days)
    security = to_money(item.security_amount) if item.security_amount is not None else to_money(0)

    return RentalTerms(
        total_days=total_days,
        daily_rate=daily_rate,
        total_rent=total_rent,
        security_amount=security,
        platform_fee=calculate_platform_fee(total_rent),
    )
