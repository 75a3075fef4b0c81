"""Snapshot of one user's records from a single fetch."""

from dataclasses import dataclass, field
from typing import Dict, Tuple

from .part import Part
from .service_record import ServiceRecord
from .tax_record import TaxRecord
from .vehicle import Vehicle


@dataclass(frozen=True)
class Snapshot:
    """All four collections for one owner, fetched together."""

    owner_id: str
    vehicles: Tuple[Vehicle, ...] = ()
    services: Tuple[ServiceRecord, ...] = ()
    parts: Tuple[Part, ...] = ()
    taxes: Tuple[TaxRecord, ...] = ()
    vehicles_by_id: Dict[str, Vehicle] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        for name in ("vehicles", "services", "parts", "taxes"):
            object.__setattr__(self, name, tuple(getattr(self, name)))
        object.__setattr__(
            self, "vehicles_by_id", {v.id: v for v in self.vehicles}
        )

    def for_vehicle(self, vehicle_id: str) -> "Snapshot":
        """Narrow the records to one vehicle (the vehicle list is kept whole)."""
        return Snapshot(
            owner_id=self.owner_id,
            vehicles=self.vehicles,
            services=[s for s in self.services if s.vehicle_id == vehicle_id],
            parts=[p for p in self.parts if p.vehicle_id == vehicle_id],
            taxes=[t for t in self.taxes if t.vehicle_id == vehicle_id],
        )
