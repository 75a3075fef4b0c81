"""
Dashboard summary built from one snapshot.

Counts are taken from the bounded due lists, so each count is at most
`limit`. Use Dashboard.is_capped() to tell whether more items may exist.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import List

from .due_list import (
    select_parts_needing_attention,
    select_upcoming_services,
    select_upcoming_taxes,
)
from .part import Part
from .policy import DEFAULT_POLICY, DuePolicy
from .service_record import ServiceRecord
from .snapshot import Snapshot
from .tax_record import TaxRecord

CATEGORIES = ("services", "parts", "taxes")


@dataclass
class Dashboard:
    """View model for the dashboard screen."""

    vehicle_count: int
    limit: int
    upcoming_services: List[ServiceRecord] = field(default_factory=list)
    parts_needing_replacement: List[Part] = field(default_factory=list)
    upcoming_taxes: List[TaxRecord] = field(default_factory=list)

    @property
    def upcoming_service_count(self) -> int:
        return len(self.upcoming_services)

    @property
    def parts_needing_replacement_count(self) -> int:
        return len(self.parts_needing_replacement)

    @property
    def upcoming_tax_count(self) -> int:
        return len(self.upcoming_taxes)

    def is_capped(self, category: str) -> bool:
        """True when the list for `category` hit the limit and may be incomplete."""
        counts = {
            "services": self.upcoming_service_count,
            "parts": self.parts_needing_replacement_count,
            "taxes": self.upcoming_tax_count,
        }
        if category not in counts:
            raise ValueError(
                f"category must be one of {', '.join(CATEGORIES)}, got {category!r}"
            )
        return counts[category] >= self.limit

    def as_dict(self) -> dict:
        return {
            "vehicleCount": self.vehicle_count,
            "upcomingServiceCount": self.upcoming_service_count,
            "partsNeedingReplacementCount": self.parts_needing_replacement_count,
            "upcomingTaxCount": self.upcoming_tax_count,
        }


def summarize_dashboard(
    snapshot: Snapshot, today: date, policy: DuePolicy = DEFAULT_POLICY
) -> Dashboard:
    """Combine the vehicle count with the three bounded due lists."""
    limit = policy.list_limit
    return Dashboard(
        vehicle_count=len(snapshot.vehicles),
        limit=limit,
        upcoming_services=select_upcoming_services(
            snapshot.services,
            snapshot.vehicles_by_id,
            window_km=policy.service_window_km,
            limit=limit,
        ),
        parts_needing_replacement=select_parts_needing_attention(
            snapshot.parts,
            snapshot.vehicles_by_id,
            window_km=policy.part_window_km,
            limit=limit,
        ),
        upcoming_taxes=select_upcoming_taxes(
            snapshot.taxes,
            today,
            horizon_days=policy.tax_horizon_days,
            limit=limit,
        ),
    )
