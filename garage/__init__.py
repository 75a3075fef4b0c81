"""
Vehicle upkeep models and due-list engine.

This package turns a user's records into maintenance reminders:
- Status / TaxStatus: Urgency levels (OVERDUE, URGENT, OK, ...)
- Vehicle, ServiceRecord, Part, TaxRecord: Stored records
- ServiceDue / PartDue / TaxDue: Records tagged with calculated status
- DuePolicy: Thresholds and the dashboard list cap
- due_list: Bounded dashboard lists and list-screen tagging
- Dashboard: Summary counts for the dashboard screen
- GarageStore: YAML file store, scoped by owner
- SessionManager: Signed-in user with change subscriptions
"""

from .status import Status, TaxStatus
from .errors import (
    GarageError,
    FetchFailure,
    MissingReference,
    MalformedDate,
    RecordNotFound,
)
from .vehicle import Vehicle
from .service_record import ServiceRecord
from .part import Part
from .tax_record import TaxRecord
from .due import ServiceDue, PartDue, TaxDue
from .policy import DuePolicy, DEFAULT_POLICY
from .calculations import (
    parse_date,
    parse_date_strict,
    parse_odometer,
    calc_odometer_margin,
    classify_service_margin,
    classify_part_margin,
    classify_tax_timing,
    is_within_tax_horizon,
    evaluate_service,
    evaluate_part,
    evaluate_tax,
)
from .due_list import (
    index_vehicles,
    select_upcoming_services,
    select_parts_needing_attention,
    select_upcoming_taxes,
    service_statuses,
    part_statuses,
    tax_statuses,
    sort_by_urgency,
)
from .snapshot import Snapshot
from .dashboard import Dashboard, summarize_dashboard
from .loader import GarageStore, load_snapshot, create_garage
from .session import SessionManager

__all__ = [
    "Status",
    "TaxStatus",
    "GarageError",
    "FetchFailure",
    "MissingReference",
    "MalformedDate",
    "RecordNotFound",
    "Vehicle",
    "ServiceRecord",
    "Part",
    "TaxRecord",
    "ServiceDue",
    "PartDue",
    "TaxDue",
    "DuePolicy",
    "DEFAULT_POLICY",
    "parse_date",
    "parse_date_strict",
    "parse_odometer",
    "calc_odometer_margin",
    "classify_service_margin",
    "classify_part_margin",
    "classify_tax_timing",
    "is_within_tax_horizon",
    "evaluate_service",
    "evaluate_part",
    "evaluate_tax",
    "index_vehicles",
    "select_upcoming_services",
    "select_parts_needing_attention",
    "select_upcoming_taxes",
    "service_statuses",
    "part_statuses",
    "tax_statuses",
    "sort_by_urgency",
    "Snapshot",
    "Dashboard",
    "summarize_dashboard",
    "GarageStore",
    "load_snapshot",
    "create_garage",
    "SessionManager",
]
