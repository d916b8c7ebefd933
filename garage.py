#!/usr/bin/env python3
"""
Unified CLI for the fleet garage.

Commands:
  init        - Create an empty garage file
  list        - List all vehicles
  show        - Show one vehicle with its upcoming and past maintenance
  add         - Add a vehicle
  remove      - Remove a vehicle
  power-on    - Power a vehicle on
  power-off   - Power a vehicle off
  accelerate  - Speed up
  brake       - Slow down
  honk        - Sound the horn (or bell)
  turbo       - Engage/disengage a sports car turbo
  load        - Load cargo onto a truck
  unload      - Unload cargo from a truck
  log         - Add a maintenance record (past or scheduled)
  unlog       - Remove a maintenance record
  history     - View maintenance records
"""

import argparse
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from tabulate import tabulate
from typing import Callable, List, Optional

from fleet import (
    CargoHold,
    FleetError,
    MaintenanceRecord,
    Outcome,
    Signal,
    Vehicle,
    VehicleKind,
    create_garage,
    create_vehicle,
    delete_vehicle,
    load_garage,
    load_vehicle,
    save_vehicle,
    schedule_after,
)

# =============================================================================
# Formatting helpers
# =============================================================================


def format_speed(speed: Optional[float]) -> str:
    """Format speed for display."""
    return f"{speed:,.1f} km/h" if speed is not None else "-"


def format_cost(cost: Optional[float]) -> str:
    """Format cost for display."""
    return f"${cost:,.2f}" if cost is not None else "-"


def format_when(record: MaintenanceRecord) -> str:
    """Format a record timestamp as 'YYYY-MM-DD HH:MM' (UTC)."""
    if record.timestamp is None:
        return "-"
    return record.timestamp.strftime("%Y-%m-%d %H:%M")


def truncate(text: Optional[str], max_len: int = 30) -> str:
    """Truncate text with ellipsis if too long."""
    if not text:
        return "-"
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."


def describe_extras(vehicle: Vehicle) -> str:
    """Kind-specific state as a short string."""
    if vehicle.cargo is not None:
        return f"cargo {vehicle.cargo.load:,.0f}/{vehicle.cargo.capacity:,.0f}"
    if vehicle.turbo is not None:
        return "turbo on" if vehicle.turbo.engaged else "turbo off"
    return "-"


def make_vehicle_table(vehicles: List[Vehicle]) -> List[List[str]]:
    """Convert vehicles to table rows."""
    rows = []
    for vehicle in vehicles:
        rows.append(
            [
                vehicle.id,
                vehicle.kind.value,
                vehicle.model,
                vehicle.color,
                "on" if vehicle.powered_on else "off",
                format_speed(vehicle.speed),
                describe_extras(vehicle),
                len(vehicle.history),
            ]
        )
    return rows


def make_record_table(records: List[MaintenanceRecord]) -> List[List[str]]:
    """Convert maintenance records to table rows."""
    rows = []
    for record in records:
        rows.append(
            [
                format_when(record),
                record.service_type,
                format_cost(record.cost),
                truncate(record.description),
                record.id,
            ]
        )
    return rows


VEHICLE_HEADERS = ["ID", "Kind", "Model", "Color", "Power", "Speed", "Extras", "Records"]
RECORD_HEADERS = ["When", "Service", "Cost", "Description", "ID"]


def report(outcome: Outcome) -> int:
    """Print an outcome and return the exit code for it."""
    if outcome.signal is Signal.ERROR:
        print(f"Error: {outcome.message}")
        return 1
    if outcome.signal is Signal.WARNING:
        print(f"Warning: {outcome.message}")
    elif outcome.message:
        print(outcome.message)
    return 0


def run_vehicle_command(args, operation: Callable[[Vehicle], Outcome]) -> int:
    """Load a vehicle, run one operation and save it only if state changed."""
    vehicle = load_vehicle(args.garage_file, args.vehicle_id)
    outcome = operation(vehicle)
    if outcome.changed:
        save_vehicle(args.garage_file, vehicle)
    return report(outcome)


def repeat(operation: Callable[[], Outcome], times: int) -> Outcome:
    """Run an operation up to `times` times, stopping at the first error or no-op."""
    outcome = operation()
    changed = outcome.changed
    for _ in range(times - 1):
        if not outcome.changed:
            break
        outcome = operation()
        changed = changed or outcome.changed
    outcome.changed = changed
    return outcome


# =============================================================================
# Garage commands
# =============================================================================


def cmd_init(args):
    """Create an empty garage file."""
    if args.garage_file.exists() and not args.force:
        print(f"Error: {args.garage_file} already exists (use --force to overwrite)")
        return 1
    create_garage(args.garage_file)
    print(f"Created empty garage: {args.garage_file}")
    return 0


def cmd_list(args):
    """List all vehicles."""
    vehicles = load_garage(args.garage_file)
    print(f"Garage: {args.garage_file}")
    print(f"Vehicles: {len(vehicles)}")
    print()
    if not vehicles:
        print("No vehicles found.")
        return 0
    print(tabulate(make_vehicle_table(vehicles), headers=VEHICLE_HEADERS, tablefmt="simple"))
    return 0


def cmd_show(args):
    """Show one vehicle with its upcoming and past maintenance."""
    vehicle = load_vehicle(args.garage_file, args.vehicle_id)
    schedule = vehicle.classify()

    print(f"Vehicle: {vehicle.name} ({vehicle.kind.value})")
    print(f"ID: {vehicle.id}")
    print(f"Power: {'on' if vehicle.powered_on else 'off'}")
    print(f"Speed: {format_speed(vehicle.speed)}")
    if vehicle.cargo is not None or vehicle.turbo is not None:
        print(f"Extras: {describe_extras(vehicle)}")
    if vehicle.total_cost > 0:
        print(f"Total maintenance cost: {format_cost(vehicle.total_cost)}")
    print()

    if schedule.upcoming:
        print("UPCOMING:")
        print(tabulate(make_record_table(schedule.upcoming), headers=RECORD_HEADERS, tablefmt="simple"))
        print()

    if schedule.past:
        print("HISTORY:")
        print(tabulate(make_record_table(schedule.past), headers=RECORD_HEADERS, tablefmt="simple"))
        print()

    if not schedule.upcoming and not schedule.past:
        print("No maintenance records.")

    return 0


def cmd_add(args):
    """Add a vehicle."""
    extras = None
    if VehicleKind.from_tag(args.kind) is VehicleKind.TRUCK:
        extras = CargoHold(capacity=args.capacity, load=args.load)
    vehicle = create_vehicle(args.kind, args.model, args.color, vehicle_id=args.id, extras=extras)
    save_vehicle(args.garage_file, vehicle)
    print(f"Added {vehicle.kind.value} {vehicle.name}")
    print(f"  ID: {vehicle.id}")
    return 0


def cmd_remove(args):
    """Remove a vehicle."""
    delete_vehicle(args.garage_file, args.vehicle_id)
    print(f"Removed {args.vehicle_id}")
    return 0


# =============================================================================
# Vehicle state commands
# =============================================================================


def cmd_power_on(args):
    return run_vehicle_command(args, lambda v: v.power_on())


def cmd_power_off(args):
    return run_vehicle_command(args, lambda v: v.power_off())


def cmd_accelerate(args):
    return run_vehicle_command(args, lambda v: repeat(v.accelerate, args.times))


def cmd_brake(args):
    return run_vehicle_command(args, lambda v: repeat(v.brake, args.times))


def cmd_honk(args):
    return run_vehicle_command(args, lambda v: v.honk())


def cmd_turbo(args):
    return run_vehicle_command(args, lambda v: v.set_turbo(args.state == "on"))


def cmd_load(args):
    return run_vehicle_command(args, lambda v: v.load(args.quantity))


def cmd_unload(args):
    return run_vehicle_command(args, lambda v: v.unload(args.quantity))


# =============================================================================
# Maintenance commands
# =============================================================================


def cmd_log(args):
    """Add a maintenance record (past or scheduled)."""
    vehicle = load_vehicle(args.garage_file, args.vehicle_id)

    if args.in_months is not None:
        when = schedule_after(args.in_months)
    else:
        when = args.date or datetime.now(timezone.utc)
    record = MaintenanceRecord(when, args.service_type, args.cost, args.description)

    # Show what will be added
    print(f"Adding maintenance record to {vehicle.name}:")
    print(f"  Service: {record.service_type or '-'}")
    print(f"  When:    {format_when(record)}")
    print(f"  Cost:    {format_cost(record.cost)}")
    if record.description:
        print(f"  Notes:   {record.description}")
    print()

    if args.dry_run:
        errors = record.validate()
        for error in errors:
            print(f"Error: {error}")
        print("(dry run - no changes made)")
        return 1 if errors else 0

    outcome = vehicle.add_record(record)
    if outcome.changed:
        save_vehicle(args.garage_file, vehicle)
        print(f"Record saved: {record.id}")
        return 0
    for error in outcome.error.errors:
        print(f"Error: {error}")
    return 1


def cmd_unlog(args):
    return run_vehicle_command(args, lambda v: v.remove_record(args.record_id))


def cmd_history(args):
    """View maintenance records."""
    vehicle = load_vehicle(args.garage_file, args.vehicle_id)
    schedule = vehicle.classify()

    if args.upcoming:
        records = schedule.upcoming
    elif args.past:
        records = schedule.past
    else:
        records = vehicle.get_history_sorted(reverse=not args.asc)

    total_cost = sum(r.cost for r in records if r.cost is not None)

    print(f"Vehicle: {vehicle.name}")
    print(f"Total records: {len(vehicle.history)}")
    if args.upcoming or args.past:
        print(f"Showing: {len(records)} (filtered)")
    if schedule.last_service:
        print(f"Last service: {format_when(schedule.last_service)} ({schedule.last_service.service_type})")
    if schedule.next_service:
        print(f"Next service: {format_when(schedule.next_service)} ({schedule.next_service.service_type})")
    if total_cost > 0:
        print(f"Total cost: {format_cost(total_cost)}")
    print()

    if not records:
        print("No maintenance records found.")
        return 0

    print(tabulate(make_record_table(records), headers=RECORD_HEADERS, tablefmt="simple"))
    return 0


# =============================================================================
# Main
# =============================================================================

COMMANDS = {
    "init": cmd_init,
    "list": cmd_list,
    "show": cmd_show,
    "add": cmd_add,
    "remove": cmd_remove,
    "power-on": cmd_power_on,
    "power-off": cmd_power_off,
    "accelerate": cmd_accelerate,
    "brake": cmd_brake,
    "honk": cmd_honk,
    "turbo": cmd_turbo,
    "load": cmd_load,
    "unload": cmd_unload,
    "log": cmd_log,
    "unlog": cmd_unlog,
    "history": cmd_history,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Fleet garage manager",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s garage.yaml init
  %(prog)s garage.yaml add car Civic red
  %(prog)s garage.yaml add truck Actros white --capacity 5000
  %(prog)s garage.yaml list
  %(prog)s garage.yaml power-on car_civic_abc123
  %(prog)s garage.yaml accelerate car_civic_abc123 --times 2
  %(prog)s garage.yaml load truck_actros_abc123 1200
  %(prog)s garage.yaml log car_civic_abc123 "Oil change" --cost 250
  %(prog)s garage.yaml log car_civic_abc123 "Brake check" --in-months 6
  %(prog)s garage.yaml history car_civic_abc123 --upcoming
""",
    )
    parser.add_argument(
        "garage_file",
        type=Path,
        help="Path to garage YAML file",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # Init subcommand
    init_parser = subparsers.add_parser("init", help="Create an empty garage file")
    init_parser.add_argument(
        "--force", action="store_true", help="Overwrite an existing file"
    )

    # List subcommand
    subparsers.add_parser("list", help="List all vehicles")

    # Add subcommand
    add_parser = subparsers.add_parser("add", help="Add a vehicle")
    add_parser.add_argument(
        "kind",
        choices=[k.value for k in VehicleKind],
        help="Vehicle kind",
    )
    add_parser.add_argument("model", type=str, help="Model name (e.g., 'Civic')")
    add_parser.add_argument("color", type=str, help="Color (e.g., 'red')")
    add_parser.add_argument("--id", type=str, help="Explicit vehicle id (default: generated)")
    add_parser.add_argument(
        "--capacity",
        type=float,
        default=5000,
        help="Truck cargo capacity (default: 5000)",
    )
    add_parser.add_argument(
        "--load",
        type=float,
        default=0,
        help="Truck starting cargo load (default: 0)",
    )

    # Single-vehicle subcommands
    for name, help_text in [
        ("show", "Show a vehicle and its maintenance"),
        ("remove", "Remove a vehicle"),
        ("power-on", "Power a vehicle on"),
        ("power-off", "Power a vehicle off (must be stopped)"),
        ("honk", "Sound the horn (or bell)"),
    ]:
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("vehicle_id", type=str, help="Vehicle id")

    for name, help_text in [
        ("accelerate", "Speed up"),
        ("brake", "Slow down"),
    ]:
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("vehicle_id", type=str, help="Vehicle id")
        sub.add_argument(
            "--times", type=int, default=1, help="Repeat the command (default: 1)"
        )

    # Turbo subcommand
    turbo_parser = subparsers.add_parser("turbo", help="Engage/disengage turbo (sports cars)")
    turbo_parser.add_argument("vehicle_id", type=str, help="Vehicle id")
    turbo_parser.add_argument("state", choices=["on", "off"], help="Turbo state")

    # Cargo subcommands
    for name, help_text in [
        ("load", "Load cargo onto a truck"),
        ("unload", "Unload cargo from a truck"),
    ]:
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("vehicle_id", type=str, help="Vehicle id")
        sub.add_argument("quantity", type=float, help="Cargo quantity")

    # Log subcommand
    log_parser = subparsers.add_parser("log", help="Add a maintenance record")
    log_parser.add_argument("vehicle_id", type=str, help="Vehicle id")
    log_parser.add_argument(
        "service_type",
        type=str,
        help="Service type (e.g., 'Oil change')",
    )
    when_group = log_parser.add_mutually_exclusive_group()
    when_group.add_argument(
        "--date",
        type=str,
        help="Service date/time, e.g. 2025-01-15 or 2025-01-15T10:30 (default: now)",
    )
    when_group.add_argument(
        "--in-months",
        type=float,
        help="Schedule the service this many months from now",
    )
    log_parser.add_argument(
        "--cost",
        type=float,
        default=0,
        help="Cost of service (default: 0)",
    )
    log_parser.add_argument(
        "--description",
        type=str,
        default="",
        help="Notes about the service",
    )
    log_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be added without saving",
    )

    # Unlog subcommand
    unlog_parser = subparsers.add_parser("unlog", help="Remove a maintenance record")
    unlog_parser.add_argument("vehicle_id", type=str, help="Vehicle id")
    unlog_parser.add_argument("record_id", type=str, help="Maintenance record id")

    # History subcommand
    history_parser = subparsers.add_parser("history", help="View maintenance records")
    history_parser.add_argument("vehicle_id", type=str, help="Vehicle id")
    filter_group = history_parser.add_mutually_exclusive_group()
    filter_group.add_argument(
        "--upcoming", action="store_true", help="Only scheduled records (soonest first)"
    )
    filter_group.add_argument(
        "--past", action="store_true", help="Only past records (newest first)"
    )
    history_parser.add_argument(
        "--asc",
        action="store_true",
        help="Sort ascending instead of descending",
    )

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    # Validate garage file exists
    if args.command not in ("init", "add") and not args.garage_file.exists():
        print(f"Error: File not found: {args.garage_file}")
        return 1

    try:
        return COMMANDS[args.command](args)
    except FleetError as e:
        print(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main() or 0)
