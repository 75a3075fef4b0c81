"""
YAML garage file: the document store behind the due-list engine.

A garage file holds four top-level lists (vehicles, services, parts,
taxes) with camelCase keys, plus an optional `policy` mapping. Reads
filter by owner; a file that can't be read raises FetchFailure instead
of returning empty lists.
"""

import logging
import uuid
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

import yaml

from .calculations import parse_date, parse_odometer
from .errors import FetchFailure, MissingReference, RecordNotFound
from .part import Part
from .policy import DuePolicy
from .service_record import ServiceRecord
from .snapshot import Snapshot
from .tax_record import TaxRecord
from .vehicle import Vehicle

logger = logging.getLogger(__name__)

SECTIONS = ("vehicles", "services", "parts", "taxes")
KINDS = {"vehicles": "vehicle", "services": "service", "parts": "part", "taxes": "tax"}

RawData = Dict[str, Any]


def _new_id() -> str:
    return uuid.uuid4().hex[:20]


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


def _date_value(value: Any) -> Any:
    """Store dates as ISO strings; pass anything else through."""
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return value


def _read(filename: Union[str, Path]) -> Dict[str, Any]:
    try:
        with open(filename, "r") as fp:
            data = yaml.load(fp, Loader=yaml.SafeLoader)
    except (OSError, yaml.YAMLError) as e:
        logger.error("Failed to load garage file %s: %s", filename, e)
        raise FetchFailure(f"Could not load {filename}: {e}") from e
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise FetchFailure(f"Could not load {filename}: top level is not a mapping")
    return data


def _write(filename: Union[str, Path], data: Dict[str, Any]) -> None:
    with open(filename, "w") as fp:
        yaml.dump(
            data,
            fp,
            default_flow_style=False,
            allow_unicode=True,
            sort_keys=False,
            width=120,
        )


def _parse_vehicle(dct: Dict[str, Any]) -> Vehicle:
    return Vehicle(
        dct["id"],
        dct["userId"],
        dct["brand"],
        dct["model"],
        dct.get("year"),
        dct.get("plateNumber"),
        dct.get("vehicleType") or "motorcycle",
        parse_odometer(dct.get("currentMileage")),
        dct.get("notes"),
        dct.get("createdAt"),
    )


def _parse_service(dct: Dict[str, Any]) -> ServiceRecord:
    return ServiceRecord(
        dct["id"],
        dct.get("vehicleId"),
        dct["userId"],
        dct["serviceType"],
        dct.get("serviceDate"),
        dct.get("nextServiceDate"),
        parse_odometer(dct.get("nextServiceKm")),
        dct.get("cost"),
        dct.get("notes"),
        dct.get("createdAt"),
    )


def _parse_part(dct: Dict[str, Any]) -> Part:
    return Part(
        dct["id"],
        dct.get("vehicleId"),
        dct["userId"],
        dct["name"],
        parse_odometer(dct.get("installedKm")),
        dct.get("installedAt"),
        parse_odometer(dct.get("replacementKm")),
        dct.get("needsReplacement", False),
        dct.get("notes"),
        dct.get("createdAt"),
    )


def _parse_tax(dct: Dict[str, Any]) -> TaxRecord:
    return TaxRecord(
        dct["id"],
        dct.get("vehicleId"),
        dct["userId"],
        dct["type"],
        dct.get("dueDate"),
        dct.get("amount"),
        dct.get("isPaid", False),
        dct.get("paidDate"),
        dct.get("notes"),
        dct.get("createdAt"),
    )


def _vehicle_to_dict(vehicle: Vehicle) -> Dict[str, Any]:
    """Serialize a Vehicle to the YAML dict format (camelCase keys)."""
    d: Dict[str, Any] = {
        "id": vehicle.id,
        "userId": vehicle.user_id,
        "brand": vehicle.brand,
        "model": vehicle.model,
        "vehicleType": vehicle.vehicle_type,
    }
    if vehicle.year is not None:
        d["year"] = vehicle.year
    if vehicle.plate_number is not None:
        d["plateNumber"] = vehicle.plate_number
    if vehicle.current_mileage is not None:
        d["currentMileage"] = vehicle.current_mileage
    if vehicle.notes is not None:
        d["notes"] = vehicle.notes
    d["createdAt"] = vehicle.created_at
    return d


def _service_to_dict(service: ServiceRecord) -> Dict[str, Any]:
    d: Dict[str, Any] = {
        "id": service.id,
        "vehicleId": service.vehicle_id,
        "userId": service.user_id,
        "serviceType": service.service_type,
        "serviceDate": _date_value(service.service_date),
    }
    if service.next_service_date is not None:
        d["nextServiceDate"] = _date_value(service.next_service_date)
    if service.next_service_km is not None:
        d["nextServiceKm"] = service.next_service_km
    if service.cost is not None:
        d["cost"] = service.cost
    if service.notes is not None:
        d["notes"] = service.notes
    d["createdAt"] = service.created_at
    return d


def _part_to_dict(part: Part) -> Dict[str, Any]:
    d: Dict[str, Any] = {
        "id": part.id,
        "vehicleId": part.vehicle_id,
        "userId": part.user_id,
        "name": part.name,
    }
    # Flagged parts carry no odometer data
    if part.needs_replacement:
        d["needsReplacement"] = True
    else:
        if part.installed_km is not None:
            d["installedKm"] = part.installed_km
        if part.installed_at is not None:
            d["installedAt"] = _date_value(part.installed_at)
        if part.replacement_km is not None:
            d["replacementKm"] = part.replacement_km
    if part.notes is not None:
        d["notes"] = part.notes
    d["createdAt"] = part.created_at
    return d


def _tax_to_dict(tax: TaxRecord) -> Dict[str, Any]:
    d: Dict[str, Any] = {
        "id": tax.id,
        "vehicleId": tax.vehicle_id,
        "userId": tax.user_id,
        "type": tax.tax_type,
        "dueDate": _date_value(tax.due_date),
        "isPaid": tax.is_paid,
    }
    if tax.amount is not None:
        d["amount"] = tax.amount
    if tax.paid_date is not None:
        d["paidDate"] = _date_value(tax.paid_date)
    if tax.notes is not None:
        d["notes"] = tax.notes
    d["createdAt"] = tax.created_at
    return d


def _date_key(value: Any) -> date:
    return parse_date(value) or date.min


class GarageStore:
    """Owner-scoped reads and writes against one garage YAML file."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def _load_section(
        self,
        section: str,
        parse: Callable[[Dict[str, Any]], Any],
        data: Optional[RawData] = None,
    ) -> List[Any]:
        if data is None:
            data = _read(self.path)
        records = []
        for index, dct in enumerate(data.get(section) or []):
            try:
                records.append(parse(dct))
            except (AttributeError, KeyError, TypeError, ValueError) as e:
                raise FetchFailure(
                    f"Could not load {section}[{index}] from {self.path}: {e!r}"
                ) from e
        return records

    @staticmethod
    def _scoped(records, owner_id: str, vehicle_id: Optional[str] = None) -> list:
        return [
            r
            for r in records
            if r.user_id == owner_id
            and (vehicle_id is None or r.vehicle_id == vehicle_id)
        ]

    def list_vehicles(
        self, owner_id: str, data: Optional[RawData] = None
    ) -> List[Vehicle]:
        """Owner's vehicles, newest first."""
        vehicles = self._scoped(
            self._load_section("vehicles", _parse_vehicle, data), owner_id
        )
        return sorted(vehicles, key=lambda v: str(v.created_at or ""), reverse=True)

    def list_services(
        self,
        owner_id: str,
        vehicle_id: Optional[str] = None,
        data: Optional[RawData] = None,
    ) -> List[ServiceRecord]:
        """Owner's services, most recent service date first."""
        services = self._scoped(
            self._load_section("services", _parse_service, data), owner_id, vehicle_id
        )
        return sorted(services, key=lambda s: _date_key(s.service_date), reverse=True)

    def list_parts(
        self,
        owner_id: str,
        vehicle_id: Optional[str] = None,
        data: Optional[RawData] = None,
    ) -> List[Part]:
        """Owner's parts, most recently installed first."""
        parts = self._scoped(
            self._load_section("parts", _parse_part, data), owner_id, vehicle_id
        )
        return sorted(parts, key=lambda p: _date_key(p.installed_at), reverse=True)

    def list_taxes(
        self,
        owner_id: str,
        vehicle_id: Optional[str] = None,
        data: Optional[RawData] = None,
    ) -> List[TaxRecord]:
        """Owner's taxes, earliest due date first."""
        taxes = self._scoped(
            self._load_section("taxes", _parse_tax, data), owner_id, vehicle_id
        )
        return sorted(taxes, key=lambda t: parse_date(t.due_date) or date.max)

    def get_vehicle(self, owner_id: str, vehicle_id: str) -> Vehicle:
        for vehicle in self.list_vehicles(owner_id):
            if vehicle.id == vehicle_id:
                return vehicle
        raise MissingReference(vehicle_id)

    def load_policy(self) -> DuePolicy:
        """Read the optional `policy` block."""
        data = _read(self.path)
        try:
            return DuePolicy.from_dict(data.get("policy"))
        except (TypeError, ValueError) as e:
            raise FetchFailure(f"Invalid policy in {self.path}: {e}") from e

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def _find(
        self, data: Dict[str, Any], section: str, owner_id: str, record_id: str
    ) -> int:
        for index, dct in enumerate(data.get(section) or []):
            if dct.get("id") == record_id and dct.get("userId") == owner_id:
                return index
        if section == "vehicles":
            raise MissingReference(record_id)
        raise RecordNotFound(KINDS[section], record_id)

    def _append(self, section: str, record, to_dict) -> str:
        data = _read(self.path)
        record.id = record.id or _new_id()
        record.created_at = record.created_at or _timestamp()
        if data.get(section) is None:
            data[section] = []
        data[section].append(to_dict(record))
        _write(self.path, data)
        logger.info("Added %s %s to %s", KINDS[section], record.id, self.path)
        return record.id

    def _delete(self, section: str, owner_id: str, record_id: str) -> None:
        data = _read(self.path)
        index = self._find(data, section, owner_id, record_id)
        del data[section][index]
        _write(self.path, data)
        logger.info("Deleted %s %s from %s", KINDS[section], record_id, self.path)

    def add_vehicle(self, vehicle: Vehicle) -> str:
        return self._append("vehicles", vehicle, _vehicle_to_dict)

    def add_service(self, service: ServiceRecord) -> str:
        return self._append("services", service, _service_to_dict)

    def add_part(self, part: Part) -> str:
        return self._append("parts", part, _part_to_dict)

    def add_tax(self, tax: TaxRecord) -> str:
        return self._append("taxes", tax, _tax_to_dict)

    def update_vehicle_mileage(
        self, owner_id: str, vehicle_id: str, mileage: int
    ) -> None:
        """Set the vehicle's odometer reading."""
        if isinstance(mileage, bool) or not isinstance(mileage, int) or mileage < 0:
            raise ValueError(f"mileage must be a non-negative integer, got {mileage!r}")
        data = _read(self.path)
        index = self._find(data, "vehicles", owner_id, vehicle_id)
        entry = data["vehicles"][index]
        try:
            old = parse_odometer(entry.get("currentMileage"))
        except ValueError:
            logger.warning("Replacing unreadable odometer for %s", vehicle_id)
            old = None
        if old is not None and mileage < old:
            logger.warning(
                "Odometer for %s goes backwards: %s -> %s", vehicle_id, old, mileage
            )
        entry["currentMileage"] = mileage
        _write(self.path, data)

    def delete_vehicle(self, owner_id: str, vehicle_id: str) -> int:
        """
        Remove a vehicle. Its services, parts and taxes are left in place.

        Returns the number of records now pointing at a missing vehicle.
        """
        data = _read(self.path)
        index = self._find(data, "vehicles", owner_id, vehicle_id)
        del data["vehicles"][index]
        _write(self.path, data)
        orphaned = sum(
            1
            for section in ("services", "parts", "taxes")
            for dct in data.get(section) or []
            if dct.get("vehicleId") == vehicle_id
        )
        logger.info(
            "Deleted vehicle %s; %d dependent records kept", vehicle_id, orphaned
        )
        return orphaned

    def delete_service(self, owner_id: str, service_id: str) -> None:
        self._delete("services", owner_id, service_id)

    def delete_part(self, owner_id: str, part_id: str) -> None:
        self._delete("parts", owner_id, part_id)

    def delete_tax(self, owner_id: str, tax_id: str) -> None:
        self._delete("taxes", owner_id, tax_id)

    def mark_tax_paid(
        self, owner_id: str, tax_id: str, paid_date: Optional[date] = None
    ) -> None:
        data = _read(self.path)
        index = self._find(data, "taxes", owner_id, tax_id)
        entry = data["taxes"][index]
        entry["isPaid"] = True
        entry["paidDate"] = (paid_date or date.today()).isoformat()
        _write(self.path, data)
        logger.info("Marked tax %s paid", tax_id)


def load_snapshot(store: GarageStore, owner_id: str) -> Snapshot:
    """
    Fetch all four collections for an owner from a single read of the file.

    Any failure propagates; no partial snapshot is returned.
    """
    data = _read(store.path)
    return Snapshot(
        owner_id=owner_id,
        vehicles=store.list_vehicles(owner_id, data),
        services=store.list_services(owner_id, data=data),
        parts=store.list_parts(owner_id, data=data),
        taxes=store.list_taxes(owner_id, data=data),
    )


def create_garage(filename: Union[str, Path]) -> None:
    """Create an empty garage file. Refuses to overwrite an existing one."""
    path = Path(filename)
    if path.exists():
        raise FileExistsError(f"{path} already exists")
    _write(path, {section: [] for section in SECTIONS})
