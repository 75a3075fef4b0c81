"""Exception types for the garage package."""


class GarageError(Exception):
    """Base class for garage errors."""


class FetchFailure(GarageError):
    """A record collection could not be loaded from the store."""


class MissingReference(GarageError):
    """A lookup referenced a vehicle that does not exist."""

    def __init__(self, vehicle_id: str):
        super().__init__(f"Unknown vehicle '{vehicle_id}'")
        self.vehicle_id = vehicle_id


class MalformedDate(GarageError, ValueError):
    """A date field could not be parsed."""


class RecordNotFound(GarageError):
    """A service, part or tax id does not exist for the owner."""

    def __init__(self, kind: str, record_id: str):
        super().__init__(f"Unknown {kind} '{record_id}'")
        self.kind = kind
        self.record_id = record_id
