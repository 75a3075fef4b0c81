"""
Due-list aggregation over a snapshot of records.

The select_* functions build the bounded dashboard lists: they keep the
input order and stop after `limit` matches. The *_statuses functions tag
every record with its status for the list screens.
"""

import logging
from datetime import date
from itertools import islice
from typing import Iterable, List, Mapping, Optional

from .calculations import (
    calc_odometer_margin,
    evaluate_part,
    evaluate_service,
    evaluate_tax,
    is_within_tax_horizon,
)
from .due import PartDue, ServiceDue, TaxDue
from .part import Part
from .policy import (
    DEFAULT_POLICY,
    DuePolicy,
    LIST_LIMIT,
    PART_WINDOW_KM,
    SERVICE_WINDOW_KM,
    TAX_HORIZON_DAYS,
)
from .service_record import ServiceRecord
from .tax_record import TaxRecord
from .vehicle import Vehicle

logger = logging.getLogger(__name__)


def index_vehicles(vehicles: Iterable[Vehicle]) -> dict:
    """Map vehicle id to vehicle."""
    return {v.id: v for v in vehicles}


def _check_limit(limit: int) -> int:
    if isinstance(limit, bool) or not isinstance(limit, int) or limit < 0:
        raise ValueError(f"limit must be a non-negative integer, got {limit!r}")
    return limit


def _odometer_margin(
    vehicle_id: Optional[str],
    target_km: Optional[float],
    vehicles_by_id: Mapping[str, Vehicle],
) -> Optional[float]:
    """Margin to target, or None for missing target, orphan or unknown odometer."""
    if not vehicle_id or target_km is None:
        return None
    vehicle = vehicles_by_id.get(vehicle_id)
    if vehicle is None:
        logger.debug("Skipping record for missing vehicle %s", vehicle_id)
        return None
    return calc_odometer_margin(target_km, vehicle.current_mileage)


def select_upcoming_services(
    services: Iterable[ServiceRecord],
    vehicles_by_id: Mapping[str, Vehicle],
    window_km: float = SERVICE_WINDOW_KM,
    limit: int = LIST_LIMIT,
) -> List[ServiceRecord]:
    """
    Services whose next-service target is within window_km (or already passed).

    Returns at most `limit` records, in input order.
    """
    _check_limit(limit)

    def wanted(service: ServiceRecord) -> bool:
        margin = _odometer_margin(
            service.vehicle_id, service.next_service_km, vehicles_by_id
        )
        return margin is not None and margin <= window_km

    return list(islice(filter(wanted, services), limit))


def select_parts_needing_attention(
    parts: Iterable[Part],
    vehicles_by_id: Mapping[str, Vehicle],
    window_km: float = PART_WINDOW_KM,
    limit: int = LIST_LIMIT,
) -> List[Part]:
    """
    Parts flagged for replacement, or whose replacement target is within window_km.

    Returns at most `limit` records, in input order.
    """
    _check_limit(limit)

    def wanted(part: Part) -> bool:
        if part.needs_replacement:
            return True
        margin = _odometer_margin(part.vehicle_id, part.replacement_km, vehicles_by_id)
        return margin is not None and margin <= window_km

    return list(islice(filter(wanted, parts), limit))


def select_upcoming_taxes(
    taxes: Iterable[TaxRecord],
    today: date,
    horizon_days: int = TAX_HORIZON_DAYS,
    limit: int = LIST_LIMIT,
) -> List[TaxRecord]:
    """
    Unpaid taxes that are overdue or due within horizon_days.

    Returns at most `limit` records, in input order.
    """
    _check_limit(limit)

    def wanted(tax: TaxRecord) -> bool:
        return is_within_tax_horizon(tax.due_date, tax.is_paid, today, horizon_days)

    return list(islice(filter(wanted, taxes), limit))


def sort_by_urgency(items: list) -> list:
    """Most urgent first; input order is kept within a status."""
    return sorted(items, key=lambda d: d.status.value)


def service_statuses(
    services: Iterable[ServiceRecord],
    vehicles_by_id: Mapping[str, Vehicle],
    policy: DuePolicy = DEFAULT_POLICY,
) -> List[ServiceDue]:
    """Tag every service with its status (orphans come back UNKNOWN)."""
    return [evaluate_service(s, vehicles_by_id, policy) for s in services]


def part_statuses(
    parts: Iterable[Part],
    vehicles_by_id: Mapping[str, Vehicle],
    policy: DuePolicy = DEFAULT_POLICY,
) -> List[PartDue]:
    """Tag every part with its status."""
    return [evaluate_part(p, vehicles_by_id, policy) for p in parts]


def tax_statuses(
    taxes: Iterable[TaxRecord],
    today: date,
    vehicles_by_id: Optional[Mapping[str, Vehicle]] = None,
    policy: DuePolicy = DEFAULT_POLICY,
) -> List[TaxDue]:
    """Tag every tax record with its badge status."""
    return [evaluate_tax(t, today, vehicles_by_id, policy) for t in taxes]
