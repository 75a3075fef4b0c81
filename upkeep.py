#!/usr/bin/env python3
"""
Unified CLI for vehicle upkeep tracking.

Commands:
  dashboard      - Show vehicle count and what needs attention soon
  vehicles       - List registered vehicles
  services       - List services with next-service status
  parts          - List parts with replacement status
  taxes          - List taxes with payment status
  add-vehicle    - Register a vehicle
  update-mileage - Update a vehicle's odometer reading
  delete-vehicle - Remove a vehicle (its records are kept)
  log-service    - Add a service entry
  add-part       - Add an installed part
  add-tax        - Add a tax due date
  pay-tax        - Mark a tax as paid
  delete-service - Remove a service entry
  delete-part    - Remove a part
  delete-tax     - Remove a tax record
  init           - Create an empty garage file
"""

import argparse
import logging
import os
import sys
from datetime import date
from pathlib import Path
from tabulate import tabulate
from typing import List, Optional

from garage import (
    FetchFailure,
    GarageStore,
    MalformedDate,
    MissingReference,
    Part,
    PartDue,
    RecordNotFound,
    ServiceDue,
    ServiceRecord,
    TaxDue,
    TaxRecord,
    Vehicle,
    create_garage,
    load_snapshot,
    parse_date_strict,
    parse_odometer,
    part_statuses,
    service_statuses,
    sort_by_urgency,
    summarize_dashboard,
    tax_statuses,
)
from garage.vehicle import VEHICLE_TYPES

# =============================================================================
# Formatting helpers
# =============================================================================


def format_km(km: Optional[float]) -> str:
    """Format an odometer value for display."""
    return f"{km:,.0f}" if km is not None else "-"


def format_amount(amount: Optional[float]) -> str:
    """Format a cost or tax amount for display."""
    return f"{amount:,.2f}" if amount is not None else "-"


def format_remaining_km(km: Optional[float]) -> str:
    """Format remaining km; negative means the target has been passed."""
    if km is None:
        return "-"
    if km < 0:
        return f"-{abs(km):,.0f}"
    return f"{km:,.0f}"


def format_days(days: Optional[int]) -> str:
    """Format days until a due date (e.g., 'in 10d', 'today', '3d late')."""
    if days is None:
        return "-"
    if days == 0:
        return "today"
    if days < 0:
        return f"{abs(days)}d late"
    return f"in {days}d"


def format_date(value) -> str:
    if value is None or value == "":
        return "-"
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def format_count(count: int, capped: bool) -> str:
    """Dashboard counts stop at the list limit; show '5+' when capped."""
    return f"{count}+" if capped else str(count)


def truncate(text: Optional[str], max_len: int = 30) -> str:
    """Truncate text with ellipsis if too long."""
    if text is None:
        return "-"
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."


def vehicle_name(vehicle: Optional[Vehicle]) -> str:
    return vehicle.label if vehicle else "Unknown"


# =============================================================================
# Argument types
# =============================================================================


def parse_km(text: str) -> int:
    """
    Parse a kilometer value, accepting thousands separators.

    '19.800', '19,800' and '19800' all mean 19800.
    """
    try:
        km = parse_odometer(text)
    except ValueError:
        km = None
    if km is None:
        raise argparse.ArgumentTypeError(f"invalid kilometer value: '{text}'")
    return km


def parse_date_arg(text: str) -> date:
    try:
        value = parse_date_strict(text)
    except MalformedDate:
        raise argparse.ArgumentTypeError(f"invalid date: '{text}' (use YYYY-MM-DD)")
    if value is None:
        raise argparse.ArgumentTypeError("date must not be empty")
    return value


# =============================================================================
# Tables
# =============================================================================


def make_vehicle_table(vehicles: List[Vehicle]) -> List[List[str]]:
    """Convert vehicles to table rows."""
    return [
        [
            v.id,
            v.name,
            v.plate_number or "-",
            v.vehicle_type,
            str(v.year) if v.year else "-",
            format_km(v.current_mileage),
        ]
        for v in vehicles
    ]


def make_service_table(services: List[ServiceDue]) -> List[List[str]]:
    """Convert service statuses to table rows."""
    rows = []
    for svc in services:
        rows.append(
            [
                svc.status.name,
                vehicle_name(svc.vehicle),
                svc.service.service_type,
                format_date(svc.service.service_date),
                format_km(svc.service.next_service_km),
                format_date(svc.next_service_date),
                format_remaining_km(svc.km_remaining),
                format_amount(svc.service.cost),
            ]
        )
    return rows


def make_part_table(parts: List[PartDue]) -> List[List[str]]:
    """Convert part statuses to table rows."""
    rows = []
    for item in parts:
        part = item.part
        if part.needs_replacement:
            remaining = "replace now"
        else:
            remaining = format_remaining_km(item.km_remaining)
        rows.append(
            [
                item.status.name,
                vehicle_name(item.vehicle),
                part.name,
                format_km(part.installed_km),
                format_km(part.replacement_km),
                remaining,
                truncate(part.notes),
            ]
        )
    return rows


def make_tax_table(taxes: List[TaxDue]) -> List[List[str]]:
    """Convert tax statuses to table rows."""
    rows = []
    for item in taxes:
        tax = item.tax
        rows.append(
            [
                tax.id,
                item.status.name,
                vehicle_name(item.vehicle),
                tax.tax_type,
                format_date(item.due_date),
                "-" if tax.is_paid else format_days(item.days_remaining),
                format_amount(tax.amount),
            ]
        )
    return rows


SERVICE_HEADERS = [
    "Status",
    "Vehicle",
    "Service",
    "Date",
    "Next (km)",
    "Next (date)",
    "Remaining (km)",
    "Cost",
]
PART_HEADERS = [
    "Status",
    "Vehicle",
    "Part",
    "Installed (km)",
    "Replace at (km)",
    "Remaining (km)",
    "Notes",
]
TAX_HEADERS = ["ID", "Status", "Vehicle", "Type", "Due", "Remaining", "Amount"]


# =============================================================================
# Read commands
# =============================================================================


def _today(args) -> date:
    return args.today or date.today()


def cmd_dashboard(args, store: GarageStore) -> int:
    """Show vehicle count and what needs attention soon."""
    snapshot = load_snapshot(store, args.user)
    policy = store.load_policy()
    today = _today(args)
    dashboard = summarize_dashboard(snapshot, today, policy)
    by_id = snapshot.vehicles_by_id

    print(f"Vehicles: {dashboard.vehicle_count}")
    services = format_count(
        dashboard.upcoming_service_count, dashboard.is_capped("services")
    )
    parts = format_count(
        dashboard.parts_needing_replacement_count, dashboard.is_capped("parts")
    )
    taxes = format_count(dashboard.upcoming_tax_count, dashboard.is_capped("taxes"))
    print(f"Upcoming services: {services}")
    print(f"Parts to replace: {parts}")
    print(f"Upcoming taxes: {taxes}")
    print()

    if dashboard.upcoming_services:
        print("UPCOMING SERVICES:")
        rows = make_service_table(
            service_statuses(dashboard.upcoming_services, by_id, policy)
        )
        print(tabulate(rows, headers=SERVICE_HEADERS, tablefmt="simple"))
        print()

    if dashboard.parts_needing_replacement:
        print("PARTS TO REPLACE:")
        rows = make_part_table(
            part_statuses(dashboard.parts_needing_replacement, by_id, policy)
        )
        print(tabulate(rows, headers=PART_HEADERS, tablefmt="simple"))
        print()

    if dashboard.upcoming_taxes:
        print("UPCOMING TAXES:")
        rows = make_tax_table(
            tax_statuses(dashboard.upcoming_taxes, today, by_id, policy)
        )
        print(tabulate(rows, headers=TAX_HEADERS, tablefmt="simple"))
        print()

    if not (
        dashboard.upcoming_services
        or dashboard.parts_needing_replacement
        or dashboard.upcoming_taxes
    ):
        print("Nothing needs attention.")

    return 0


def cmd_vehicles(args, store: GarageStore) -> int:
    """List registered vehicles."""
    vehicles = store.list_vehicles(args.user)
    if not vehicles:
        print("No vehicles registered.")
        return 0
    headers = ["ID", "Vehicle", "Plate", "Type", "Year", "Odometer (km)"]
    print(tabulate(make_vehicle_table(vehicles), headers=headers, tablefmt="simple"))
    return 0


def _check_vehicle_filter(args, snapshot) -> None:
    if args.vehicle and args.vehicle not in snapshot.vehicles_by_id:
        raise MissingReference(args.vehicle)


def cmd_services(args, store: GarageStore) -> int:
    """List services with next-service status."""
    snapshot = load_snapshot(store, args.user)
    _check_vehicle_filter(args, snapshot)
    if args.vehicle:
        snapshot = snapshot.for_vehicle(args.vehicle)
    statuses = service_statuses(
        snapshot.services, snapshot.vehicles_by_id, store.load_policy()
    )
    if args.due_only:
        statuses = [s for s in statuses if s.is_due]
    if not statuses:
        print("No services found.")
        return 0
    rows = make_service_table(sort_by_urgency(statuses))
    print(tabulate(rows, headers=SERVICE_HEADERS, tablefmt="simple"))
    return 0


def cmd_parts(args, store: GarageStore) -> int:
    """List parts with replacement status."""
    snapshot = load_snapshot(store, args.user)
    _check_vehicle_filter(args, snapshot)
    if args.vehicle:
        snapshot = snapshot.for_vehicle(args.vehicle)
    statuses = part_statuses(
        snapshot.parts, snapshot.vehicles_by_id, store.load_policy()
    )
    if args.due_only:
        statuses = [p for p in statuses if p.is_due]
    if not statuses:
        print("No parts found.")
        return 0
    rows = make_part_table(sort_by_urgency(statuses))
    print(tabulate(rows, headers=PART_HEADERS, tablefmt="simple"))
    return 0


def cmd_taxes(args, store: GarageStore) -> int:
    """List taxes with payment status."""
    snapshot = load_snapshot(store, args.user)
    _check_vehicle_filter(args, snapshot)
    if args.vehicle:
        snapshot = snapshot.for_vehicle(args.vehicle)
    statuses = tax_statuses(
        snapshot.taxes, _today(args), snapshot.vehicles_by_id, store.load_policy()
    )
    if args.unpaid:
        statuses = [t for t in statuses if not t.tax.is_paid]
    if not statuses:
        print("No taxes found.")
        return 0
    total = sum(t.tax.amount for t in statuses if t.tax.amount and not t.tax.is_paid)
    rows = make_tax_table(sort_by_urgency(statuses))
    print(tabulate(rows, headers=TAX_HEADERS, tablefmt="simple"))
    if total:
        print()
        print(f"Total unpaid: {format_amount(total)}")
    return 0


# =============================================================================
# Write commands
# =============================================================================


def _dry_run(args) -> bool:
    if args.dry_run:
        print("(dry run - no changes made)")
    return args.dry_run


def cmd_add_vehicle(args, store: GarageStore) -> int:
    """Register a vehicle."""
    vehicle = Vehicle(
        id="",
        user_id=args.user,
        brand=args.brand,
        model=args.model,
        year=args.year,
        plate_number=args.plate,
        vehicle_type=args.type,
        current_mileage=args.mileage,
        notes=args.notes,
    )
    print(f"Adding vehicle to {args.garage_file}:")
    print(f"  Vehicle: {vehicle.label}")
    print(f"  Type:    {vehicle.vehicle_type}")
    if vehicle.current_mileage is not None:
        print(f"  Odometer: {format_km(vehicle.current_mileage)} km")
    print()

    if _dry_run(args):
        return 0

    vehicle_id = store.add_vehicle(vehicle)
    print(f"Vehicle saved with id {vehicle_id}.")
    return 0


def cmd_update_mileage(args, store: GarageStore) -> int:
    """Update a vehicle's odometer reading."""
    vehicle = store.get_vehicle(args.user, args.vehicle_id)

    print(f"Vehicle: {vehicle.label}")
    print(f"Current odometer: {format_km(vehicle.current_mileage)} km")
    print(f"New odometer:     {format_km(args.mileage)} km")
    if vehicle.current_mileage is not None and args.mileage < vehicle.current_mileage:
        print("Warning: new reading is lower than the current one")
    print()

    if _dry_run(args):
        return 0

    store.update_vehicle_mileage(args.user, args.vehicle_id, args.mileage)
    print("Odometer updated.")
    return 0


def cmd_delete_vehicle(args, store: GarageStore) -> int:
    """Remove a vehicle; its services, parts and taxes stay in the file."""
    vehicle = store.get_vehicle(args.user, args.vehicle_id)
    print(f"Deleting vehicle: {vehicle.label}")
    print()

    if _dry_run(args):
        return 0

    orphaned = store.delete_vehicle(args.user, args.vehicle_id)
    print("Vehicle deleted.")
    if orphaned:
        print(f"Note: {orphaned} service/part/tax records still reference it.")
    return 0


def cmd_log_service(args, store: GarageStore) -> int:
    """Add a service entry."""
    vehicle = store.get_vehicle(args.user, args.vehicle_id)
    service = ServiceRecord(
        id="",
        vehicle_id=vehicle.id,
        user_id=args.user,
        service_type=args.service_type,
        service_date=args.date or date.today(),
        next_service_date=args.next_date,
        next_service_km=args.next_km,
        cost=args.cost,
        notes=args.notes,
    )

    print(f"Adding service entry to {args.garage_file}:")
    print(f"  Vehicle: {vehicle.label}")
    print(f"  Service: {service.service_type}")
    print(f"  Date:    {format_date(service.service_date)}")
    if service.next_service_km is not None:
        print(f"  Next at: {format_km(service.next_service_km)} km")
    if service.next_service_date is not None:
        print(f"  Next on: {format_date(service.next_service_date)}")
    if service.cost is not None:
        print(f"  Cost:    {format_amount(service.cost)}")
    if service.notes:
        print(f"  Notes:   {service.notes}")
    print()

    if _dry_run(args):
        return 0

    store.add_service(service)
    print("Entry saved.")
    return 0


def cmd_add_part(args, store: GarageStore) -> int:
    """Add an installed part."""
    if args.needs_replacement and (
        args.installed_km is not None or args.replacement_km is not None
    ):
        print("Error: --needs-replacement cannot be combined with odometer values")
        return 1
    if not args.needs_replacement and (
        args.installed_km is None or args.replacement_km is None
    ):
        print(
            "Error: --installed-km and --replacement-km are required "
            "unless --needs-replacement is given"
        )
        return 1

    vehicle = store.get_vehicle(args.user, args.vehicle_id)
    part = Part(
        id="",
        vehicle_id=vehicle.id,
        user_id=args.user,
        name=args.name,
        installed_km=args.installed_km,
        installed_at=None if args.needs_replacement else (args.date or date.today()),
        replacement_km=args.replacement_km,
        needs_replacement=args.needs_replacement,
        notes=args.notes,
    )

    print(f"Adding part to {args.garage_file}:")
    print(f"  Vehicle: {vehicle.label}")
    print(f"  Part:    {part.name}")
    if part.needs_replacement:
        print("  Status:  needs replacement")
    else:
        print(f"  Installed: {format_km(part.installed_km)} km")
        print(f"  Replace:   {format_km(part.replacement_km)} km")
    print()

    if _dry_run(args):
        return 0

    store.add_part(part)
    print("Part saved.")
    return 0


def cmd_add_tax(args, store: GarageStore) -> int:
    """Add a tax due date."""
    vehicle = store.get_vehicle(args.user, args.vehicle_id)
    tax = TaxRecord(
        id="",
        vehicle_id=vehicle.id,
        user_id=args.user,
        tax_type=args.tax_type,
        due_date=args.due,
        amount=args.amount,
        notes=args.notes,
    )

    print(f"Adding tax to {args.garage_file}:")
    print(f"  Vehicle: {vehicle.label}")
    print(f"  Type:    {tax.tax_type}")
    print(f"  Due:     {format_date(tax.due_date)}")
    if tax.amount is not None:
        print(f"  Amount:  {format_amount(tax.amount)}")
    print()

    if _dry_run(args):
        return 0

    store.add_tax(tax)
    print("Tax saved.")
    return 0


def cmd_pay_tax(args, store: GarageStore) -> int:
    """Mark a tax as paid."""
    paid_date = args.date or date.today()
    print(f"Marking tax {args.tax_id} paid on {paid_date.isoformat()}")
    print()

    if _dry_run(args):
        return 0

    store.mark_tax_paid(args.user, args.tax_id, paid_date)
    print("Tax marked as paid.")
    return 0


def _find_by_id(records, record_id: str, kind: str):
    for record in records:
        if record.id == record_id:
            return record
    raise RecordNotFound(kind, record_id)


def cmd_delete_service(args, store: GarageStore) -> int:
    """Remove a service entry."""
    service = _find_by_id(store.list_services(args.user), args.service_id, "service")
    print(
        f"Deleting service: {service.service_type} "
        f"on {format_date(service.service_date)}"
    )
    print()

    if _dry_run(args):
        return 0

    store.delete_service(args.user, args.service_id)
    print("Service deleted.")
    return 0


def cmd_delete_part(args, store: GarageStore) -> int:
    """Remove a part."""
    part = _find_by_id(store.list_parts(args.user), args.part_id, "part")
    print(f"Deleting part: {part.name}")
    print()

    if _dry_run(args):
        return 0

    store.delete_part(args.user, args.part_id)
    print("Part deleted.")
    return 0


def cmd_delete_tax(args, store: GarageStore) -> int:
    """Remove a tax record."""
    tax = _find_by_id(store.list_taxes(args.user), args.tax_id, "tax")
    print(f"Deleting tax: {tax.tax_type} due {format_date(tax.due_date)}")
    print()

    if _dry_run(args):
        return 0

    store.delete_tax(args.user, args.tax_id)
    print("Tax deleted.")
    return 0


def cmd_init(args) -> int:
    """Create an empty garage file."""
    print(f"Creating garage file {args.garage_file}")
    print()

    if _dry_run(args):
        return 0

    create_garage(args.garage_file)
    print("Garage created.")
    return 0


# =============================================================================
# Main
# =============================================================================

COMMANDS = {
    "dashboard": cmd_dashboard,
    "vehicles": cmd_vehicles,
    "services": cmd_services,
    "parts": cmd_parts,
    "taxes": cmd_taxes,
    "add-vehicle": cmd_add_vehicle,
    "update-mileage": cmd_update_mileage,
    "delete-vehicle": cmd_delete_vehicle,
    "log-service": cmd_log_service,
    "add-part": cmd_add_part,
    "add-tax": cmd_add_tax,
    "pay-tax": cmd_pay_tax,
    "delete-service": cmd_delete_service,
    "delete-part": cmd_delete_part,
    "delete-tax": cmd_delete_tax,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Vehicle upkeep tracker",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s garage.yaml --user alice dashboard
  %(prog)s garage.yaml --user alice services --vehicle v1 --due-only
  %(prog)s garage.yaml --user alice taxes --unpaid
  %(prog)s garage.yaml --user alice update-mileage v1 19.800
  %(prog)s garage.yaml --user alice log-service v1 "oil change" \\
      --next-km 22000 --cost 85000
  %(prog)s garage.yaml --user alice add-part v1 "drive belt" \\
      --installed-km 10000 --replacement-km 34000
  %(prog)s garage.yaml --user alice pay-tax t1
  %(prog)s garage.yaml --user alice delete-service s1 --dry-run
  %(prog)s new-garage.yaml init
""",
    )
    parser.add_argument(
        "garage_file",
        type=Path,
        help="Path to garage YAML file",
    )
    parser.add_argument(
        "--user",
        default=os.environ.get("UPKEEP_USER"),
        help="Owner id to show records for (default: $UPKEEP_USER)",
    )
    parser.add_argument(
        "--today",
        type=parse_date_arg,
        help="Evaluate dates as of this day (YYYY-MM-DD, default: today)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log debug details (skipped dates, orphaned records)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser(
        "dashboard", help="Show vehicle count and what needs attention soon"
    )
    subparsers.add_parser("vehicles", help="List registered vehicles")

    services_parser = subparsers.add_parser(
        "services", help="List services with next-service status"
    )
    parts_parser = subparsers.add_parser(
        "parts", help="List parts with replacement status"
    )
    taxes_parser = subparsers.add_parser(
        "taxes", help="List taxes with payment status"
    )
    for list_parser in (services_parser, parts_parser, taxes_parser):
        list_parser.add_argument(
            "--vehicle",
            type=str,
            help="Only show records for this vehicle id",
        )
    for list_parser in (services_parser, parts_parser):
        list_parser.add_argument(
            "--due-only",
            action="store_true",
            help="Only show OVERDUE and URGENT records",
        )
    taxes_parser.add_argument(
        "--unpaid",
        action="store_true",
        help="Hide paid taxes",
    )

    # Add Vehicle subcommand
    add_vehicle_parser = subparsers.add_parser(
        "add-vehicle", help="Register a vehicle"
    )
    add_vehicle_parser.add_argument("brand", type=str, help="Brand (e.g., 'Honda')")
    add_vehicle_parser.add_argument("model", type=str, help="Model (e.g., 'Vario')")
    add_vehicle_parser.add_argument("--year", type=int, help="Model year")
    add_vehicle_parser.add_argument("--plate", type=str, help="License plate")
    add_vehicle_parser.add_argument(
        "--type",
        choices=VEHICLE_TYPES,
        default="motorcycle",
        help="Vehicle kind (default: motorcycle)",
    )
    add_vehicle_parser.add_argument(
        "--mileage", type=parse_km, help="Current odometer reading in km"
    )
    add_vehicle_parser.add_argument("--notes", type=str, help="Notes")

    # Update Mileage subcommand
    update_mileage_parser = subparsers.add_parser(
        "update-mileage", help="Update a vehicle's odometer reading"
    )
    update_mileage_parser.add_argument("vehicle_id", type=str, help="Vehicle id")
    update_mileage_parser.add_argument(
        "mileage", type=parse_km, help="Current odometer reading in km"
    )

    # Delete Vehicle subcommand
    delete_vehicle_parser = subparsers.add_parser(
        "delete-vehicle", help="Remove a vehicle (its records are kept)"
    )
    delete_vehicle_parser.add_argument("vehicle_id", type=str, help="Vehicle id")

    # Log Service subcommand
    log_parser = subparsers.add_parser("log-service", help="Add a service entry")
    log_parser.add_argument("vehicle_id", type=str, help="Vehicle id")
    log_parser.add_argument(
        "service_type", type=str, help="What was done (e.g., 'oil change')"
    )
    log_parser.add_argument(
        "--date",
        type=parse_date_arg,
        help="Service date in YYYY-MM-DD format (default: today)",
    )
    log_parser.add_argument(
        "--next-km", type=parse_km, help="Odometer reading for the next service"
    )
    log_parser.add_argument(
        "--next-date", type=parse_date_arg, help="Date of the next service"
    )
    log_parser.add_argument("--cost", type=float, help="Cost of service")
    log_parser.add_argument("--notes", type=str, help="Notes about the service")

    # Add Part subcommand
    part_parser = subparsers.add_parser("add-part", help="Add an installed part")
    part_parser.add_argument("vehicle_id", type=str, help="Vehicle id")
    part_parser.add_argument("name", type=str, help="Part name (e.g., 'air filter')")
    part_parser.add_argument(
        "--installed-km", type=parse_km, help="Odometer reading at installation"
    )
    part_parser.add_argument(
        "--replacement-km", type=parse_km, help="Odometer reading to replace at"
    )
    part_parser.add_argument(
        "--date",
        type=parse_date_arg,
        help="Installation date in YYYY-MM-DD format (default: today)",
    )
    part_parser.add_argument(
        "--needs-replacement",
        action="store_true",
        help="Flag the part for replacement instead of tracking odometer",
    )
    part_parser.add_argument("--notes", type=str, help="Notes about the part")

    # Add Tax subcommand
    tax_parser = subparsers.add_parser("add-tax", help="Add a tax due date")
    tax_parser.add_argument("vehicle_id", type=str, help="Vehicle id")
    tax_parser.add_argument(
        "tax_type", type=str, help="Tax type (e.g., 'annual', 'five-year')"
    )
    tax_parser.add_argument(
        "--due", type=parse_date_arg, required=True, help="Due date (YYYY-MM-DD)"
    )
    tax_parser.add_argument("--amount", type=float, help="Amount due")
    tax_parser.add_argument("--notes", type=str, help="Notes")

    # Pay Tax subcommand
    pay_parser = subparsers.add_parser("pay-tax", help="Mark a tax as paid")
    pay_parser.add_argument("tax_id", type=str, help="Tax id")
    pay_parser.add_argument(
        "--date",
        type=parse_date_arg,
        help="Payment date in YYYY-MM-DD format (default: today)",
    )

    # Delete subcommands for services, parts and taxes
    for name, record_id, help_text in (
        ("delete-service", "service_id", "Remove a service entry"),
        ("delete-part", "part_id", "Remove a part"),
        ("delete-tax", "tax_id", "Remove a tax record"),
    ):
        delete_parser = subparsers.add_parser(name, help=help_text)
        delete_parser.add_argument(record_id, type=str, help="Record id")

    # Init subcommand
    subparsers.add_parser("init", help="Create an empty garage file")

    for name, sub in subparsers.choices.items():
        if name not in ("dashboard", "vehicles", "services", "parts", "taxes"):
            sub.add_argument(
                "--dry-run",
                action="store_true",
                help="Show what would change without saving",
            )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command == "init":
        try:
            return cmd_init(args)
        except FileExistsError as e:
            print(f"Error: {e}")
            return 1

    if not args.user:
        print("Error: --user is required (or set UPKEEP_USER)")
        return 1

    # Validate garage file exists
    if not args.garage_file.exists():
        print(f"Error: File not found: {args.garage_file}")
        return 1

    store = GarageStore(args.garage_file)
    try:
        return COMMANDS[args.command](args, store)
    except FetchFailure as e:
        print(f"Error: could not load garage data: {e}")
        return 1
    except (MissingReference, RecordNotFound, ValueError) as e:
        print(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main() or 0)
