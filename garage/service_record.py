"""ServiceRecord class for logged services."""
from typing import Any, Optional


class ServiceRecord:
    """A service performed on a vehicle, with an optional next-service target."""

    def __init__(
            self,
            id: str,
            vehicle_id: Optional[str],
            user_id: str,
            service_type: str,
            service_date: Any = None,
            next_service_date: Any = None,
            next_service_km: Optional[int] = None,
            cost: Optional[float] = None,
            notes: Optional[str] = None,
            created_at: Optional[str] = None,
    ):
        self.id = id
        self.vehicle_id = vehicle_id
        self.user_id = user_id
        self.service_type = service_type
        self.service_date = service_date
        self.next_service_date = next_service_date
        self.next_service_km = next_service_km
        self.cost = cost
        self.notes = notes
        self.created_at = created_at
