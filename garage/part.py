"""Part class for installed parts and their replacement thresholds."""
from typing import Any, Optional


class Part:
    """
    A part installed on a vehicle.

    A part is tracked either by odometer (installed_km, installed_at,
    replacement_km) or by an explicit needs_replacement flag. When the flag
    is set the odometer fields are ignored.
    """

    def __init__(
            self,
            id: str,
            vehicle_id: Optional[str],
            user_id: str,
            name: str,
            installed_km: Optional[int] = None,
            installed_at: Any = None,
            replacement_km: Optional[int] = None,
            needs_replacement: bool = False,
            notes: Optional[str] = None,
            created_at: Optional[str] = None,
    ):
        self.id = id
        self.vehicle_id = vehicle_id
        self.user_id = user_id
        self.name = name
        self.installed_km = installed_km
        self.installed_at = installed_at
        self.replacement_km = replacement_km
        self.needs_replacement = bool(needs_replacement)
        self.notes = notes
        self.created_at = created_at

    @property
    def tracks_odometer(self) -> bool:
        """True when replacement is decided by odometer rather than the flag."""
        return not self.needs_replacement
