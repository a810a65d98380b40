from enum import Enum


class BookingStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    IN_PROGRESS = "inProgress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    DISPUTED = "disputed"


class ItemStatus(str, Enum):
    AVAILABLE = "available"
    BOOKED = "booked"
    IN_TRANSIT = "inTransit"
    DELIVERED = "delivered"
    RETURNED = "returned"
    MAINTENANCE = "maintenance"
    INACTIVE = "inactive"


class DeliveryMode(str, Enum):
    NONE = "none"
    PICKUP = "pickup"
    DELIVERY = "delivery"
    BOTH = "both"


class BookingRole(str, Enum):
    LENDER = "lender"
    BORROWER = "borrower"
    ADMIN = "admin"


# Statuses that reserve an item's calendar
BLOCKING_STATUSES = frozenset({BookingStatus.CONFIRMED, BookingStatus.IN_PROGRESS})
TERMINAL_STATUSES = frozenset({BookingStatus.COMPLETED, BookingStatus.CANCELLED})
