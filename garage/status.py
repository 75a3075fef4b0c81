"""Status enums for maintenance and tax urgency levels."""

from enum import Enum


class Status(Enum):
    """Odometer-based maintenance status. Lower value = more urgent."""

    OVERDUE = 1
    URGENT = 2
    OK = 3
    UNKNOWN = 4  # Can't calculate (missing odometer or target)


class TaxStatus(Enum):
    """Tax payment status. Lower value = more urgent."""

    OVERDUE = 1
    UPCOMING = 2  # Due within the chip window
    PENDING = 3  # Unpaid, not due soon
    PAID = 4
