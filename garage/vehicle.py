"""Vehicle class for a registered car or motorcycle."""

from typing import Optional

VEHICLE_TYPES = ("motorcycle", "car")


class Vehicle:
    """A user's vehicle and its current odometer reading."""

    def __init__(
        self,
        id: str,
        user_id: str,
        brand: str,
        model: str,
        year: Optional[int] = None,
        plate_number: Optional[str] = None,
        vehicle_type: str = "motorcycle",
        current_mileage: Optional[int] = None,
        notes: Optional[str] = None,
        created_at: Optional[str] = None,
    ):
        if vehicle_type not in VEHICLE_TYPES:
            raise ValueError(
                f"vehicle_type must be one of {', '.join(VEHICLE_TYPES)}, "
                f"got {vehicle_type!r}"
            )
        self.id = id
        self.user_id = user_id
        self.brand = brand
        self.model = model
        self.year = year
        self.plate_number = plate_number
        self.vehicle_type = vehicle_type
        self.current_mileage = current_mileage
        self.notes = notes
        self.created_at = created_at

    @property
    def name(self) -> str:
        """Human-readable vehicle name."""
        return f"{self.brand} {self.model}"

    @property
    def label(self) -> str:
        """Name with plate number, used in pickers and list screens."""
        if self.plate_number:
            return f"{self.name} ({self.plate_number})"
        return self.name
