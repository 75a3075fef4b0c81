"""Dataclasses pairing a record with its calculated status."""

from dataclasses import dataclass
from datetime import date
from typing import Optional, TYPE_CHECKING

from .status import Status, TaxStatus

if TYPE_CHECKING:
    from .part import Part
    from .service_record import ServiceRecord
    from .tax_record import TaxRecord
    from .vehicle import Vehicle


@dataclass
class ServiceDue:
    """Calculated next-service information for a service record."""

    service: "ServiceRecord"
    status: Status
    vehicle: Optional["Vehicle"] = None
    km_remaining: Optional[int] = None
    next_service_date: Optional[date] = None

    @property
    def is_due(self) -> bool:
        return self.status in (Status.OVERDUE, Status.URGENT)

    @property
    def is_orphaned(self) -> bool:
        """Record points at a vehicle that no longer exists."""
        return self.service.vehicle_id is not None and self.vehicle is None


@dataclass
class PartDue:
    """Calculated replacement information for a part."""

    part: "Part"
    status: Status
    vehicle: Optional["Vehicle"] = None
    km_remaining: Optional[int] = None

    @property
    def is_due(self) -> bool:
        return self.status in (Status.OVERDUE, Status.URGENT)

    @property
    def is_orphaned(self) -> bool:
        return self.part.vehicle_id is not None and self.vehicle is None


@dataclass
class TaxDue:
    """Calculated payment status for a tax record."""

    tax: "TaxRecord"
    status: TaxStatus
    vehicle: Optional["Vehicle"] = None
    due_date: Optional[date] = None
    days_remaining: Optional[int] = None

    @property
    def is_due(self) -> bool:
        return self.status in (TaxStatus.OVERDUE, TaxStatus.UPCOMING)
