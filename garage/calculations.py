"""Helper functions for odometer margins, date parsing and status checks."""

import logging
import re
from datetime import date, datetime, timedelta
from typing import Any, Mapping, Optional

from dateutil.parser import isoparse

from .due import PartDue, ServiceDue, TaxDue
from .errors import MalformedDate
from .part import Part
from .policy import (
    DEFAULT_POLICY,
    DuePolicy,
    PART_URGENT_KM,
    SERVICE_URGENT_KM,
    TAX_CHIP_DAYS,
    TAX_HORIZON_DAYS,
)
from .service_record import ServiceRecord
from .status import Status, TaxStatus
from .tax_record import TaxRecord
from .vehicle import Vehicle

logger = logging.getLogger(__name__)


def parse_date_strict(value: Any) -> Optional[date]:
    """
    Parse a date field, raising MalformedDate when it can't be read.

    Accepts date and datetime objects (PyYAML yields these for unquoted
    dates) and ISO-8601 strings. None and empty strings mean "no date".
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise MalformedDate(f"Not a date: {value!r}")
    try:
        return isoparse(value.strip()).date()
    except (ValueError, OverflowError) as e:
        raise MalformedDate(f"Not a date: {value!r}") from e


def parse_date(value: Any) -> Optional[date]:
    """Parse a date field, treating unreadable values as absent."""
    try:
        return parse_date_strict(value)
    except MalformedDate:
        logger.debug("Ignoring malformed date %r", value)
        return None


# Plain digits, or digits grouped in thousands with "." or ","
KM_PATTERN = re.compile(r"\d{1,3}([.,]\d{3})*|\d+")


def parse_odometer(value: Any) -> Optional[int]:
    """
    Read an odometer value as whole kilometers.

    Accepts non-negative integers and strings such as "19800" or "19.800".
    None and empty strings mean "no reading". Anything else raises ValueError.
    """
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise ValueError(f"Not a kilometer value: {value!r}")
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if isinstance(value, int):
        if value < 0:
            raise ValueError(f"Kilometer value must not be negative: {value}")
        return value
    if isinstance(value, str) and KM_PATTERN.fullmatch(value.strip()):
        return int(re.sub(r"[.,]", "", value.strip()))
    raise ValueError(f"Not a kilometer value: {value!r}")


def calc_odometer_margin(
    target_km: Optional[float], current_km: Optional[float]
) -> Optional[float]:
    """
    Calculate the remaining distance to an odometer target.

    Negative means the target has been passed. None when either side is unknown.
    """
    if target_km is None or current_km is None:
        return None
    return target_km - current_km


def check_margin(margin: Optional[float], urgent_km: float) -> Status:
    """Determine status from a remaining-distance margin."""
    if margin is None:
        return Status.UNKNOWN
    if margin <= 0:
        return Status.OVERDUE
    if margin <= urgent_km:
        return Status.URGENT
    return Status.OK


def classify_service_margin(
    margin: Optional[float], urgent_km: float = SERVICE_URGENT_KM
) -> Status:
    return check_margin(margin, urgent_km)


def classify_part_margin(
    margin: Optional[float],
    needs_replacement: bool = False,
    urgent_km: float = PART_URGENT_KM,
) -> Status:
    """The explicit needs-replacement flag always wins over the margin."""
    if needs_replacement:
        return Status.OVERDUE
    return check_margin(margin, urgent_km)


def classify_tax_timing(
    due_date: Any, is_paid: bool, today: date, chip_days: int = TAX_CHIP_DAYS
) -> TaxStatus:
    """
    Determine the badge status for a tax record.

    Paid wins over everything. Without a readable due date an unpaid
    record is PENDING.
    """
    if is_paid:
        return TaxStatus.PAID
    due = parse_date(due_date)
    if due is None:
        return TaxStatus.PENDING
    if due < today:
        return TaxStatus.OVERDUE
    if due <= today + timedelta(days=chip_days):
        return TaxStatus.UPCOMING
    return TaxStatus.PENDING


def is_within_tax_horizon(
    due_date: Any, is_paid: bool, today: date, horizon_days: int = TAX_HORIZON_DAYS
) -> bool:
    """Dashboard inclusion: unpaid and either overdue or due within the horizon."""
    if is_paid:
        return False
    due = parse_date(due_date)
    if due is None:
        return False
    if due < today:
        return True
    return due <= today + timedelta(days=horizon_days)


def _lookup_vehicle(
    vehicle_id: Optional[str], vehicles_by_id: Mapping[str, Vehicle]
) -> Optional[Vehicle]:
    if not vehicle_id:
        return None
    vehicle = vehicles_by_id.get(vehicle_id)
    if vehicle is None:
        logger.debug("Record references missing vehicle %s", vehicle_id)
    return vehicle


def evaluate_service(
    service: ServiceRecord,
    vehicles_by_id: Mapping[str, Vehicle],
    policy: DuePolicy = DEFAULT_POLICY,
) -> ServiceDue:
    """Calculate remaining km and status for one service record."""
    vehicle = _lookup_vehicle(service.vehicle_id, vehicles_by_id)
    current = vehicle.current_mileage if vehicle else None
    margin = calc_odometer_margin(service.next_service_km, current)
    return ServiceDue(
        service=service,
        status=classify_service_margin(margin, policy.service_urgent_km),
        vehicle=vehicle,
        km_remaining=margin,
        next_service_date=parse_date(service.next_service_date),
    )


def evaluate_part(
    part: Part,
    vehicles_by_id: Mapping[str, Vehicle],
    policy: DuePolicy = DEFAULT_POLICY,
) -> PartDue:
    """
    Calculate remaining km and status for one part.

    Flagged parts skip the odometer calculation entirely.
    """
    vehicle = _lookup_vehicle(part.vehicle_id, vehicles_by_id)
    margin = None
    if part.tracks_odometer:
        current = vehicle.current_mileage if vehicle else None
        margin = calc_odometer_margin(part.replacement_km, current)
    return PartDue(
        part=part,
        status=classify_part_margin(
            margin, part.needs_replacement, policy.part_urgent_km
        ),
        vehicle=vehicle,
        km_remaining=margin,
    )


def evaluate_tax(
    tax: TaxRecord,
    today: date,
    vehicles_by_id: Optional[Mapping[str, Vehicle]] = None,
    policy: DuePolicy = DEFAULT_POLICY,
) -> TaxDue:
    """Calculate days remaining and badge status for one tax record."""
    due = parse_date(tax.due_date)
    vehicle = None
    if vehicles_by_id is not None:
        vehicle = _lookup_vehicle(tax.vehicle_id, vehicles_by_id)
    return TaxDue(
        tax=tax,
        status=classify_tax_timing(due, tax.is_paid, today, policy.tax_chip_days),
        vehicle=vehicle,
        due_date=due,
        days_remaining=(due - today).days if due else None,
    )
