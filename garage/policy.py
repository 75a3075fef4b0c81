"""Thresholds and caps used when deriving due lists."""

from dataclasses import dataclass, fields
from typing import Any, Dict, Optional

# Urgency windows: margin at or below these is URGENT rather than OK
SERVICE_URGENT_KM = 300
PART_URGENT_KM = 1000

# Dashboard inclusion windows
SERVICE_WINDOW_KM = 1000
PART_WINDOW_KM = 1000

# Tax chip ("due soon" badge) and dashboard horizon are separate policies
TAX_CHIP_DAYS = 7
TAX_HORIZON_DAYS = 60

# Maximum items per dashboard list; dashboard counts are capped at this too
LIST_LIMIT = 5


@dataclass(frozen=True)
class DuePolicy:
    """Named thresholds for one derivation pass."""

    service_urgent_km: int = SERVICE_URGENT_KM
    part_urgent_km: int = PART_URGENT_KM
    service_window_km: int = SERVICE_WINDOW_KM
    part_window_km: int = PART_WINDOW_KM
    tax_chip_days: int = TAX_CHIP_DAYS
    tax_horizon_days: int = TAX_HORIZON_DAYS
    list_limit: int = LIST_LIMIT

    def __post_init__(self):
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"{f.name} must be an integer, got {value!r}")
            if value < 0:
                raise ValueError(f"{f.name} must not be negative, got {value}")

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "DuePolicy":
        """
        Build a policy from a camelCase mapping (the garage file's `policy` block).

        Missing keys keep their defaults; unknown keys are rejected.
        """
        if not data:
            return cls()
        keys = {
            "serviceUrgentKm": "service_urgent_km",
            "partUrgentKm": "part_urgent_km",
            "serviceWindowKm": "service_window_km",
            "partWindowKm": "part_window_km",
            "taxChipDays": "tax_chip_days",
            "taxHorizonDays": "tax_horizon_days",
            "listLimit": "list_limit",
        }
        unknown = set(data) - set(keys)
        if unknown:
            raise ValueError(f"Unknown policy keys: {', '.join(sorted(unknown))}")
        return cls(**{keys[k]: v for k, v in data.items()})


DEFAULT_POLICY = DuePolicy()
