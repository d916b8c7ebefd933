"""
Fleet garage models.

This package provides the vehicle domain model and maintenance engine:
- VehicleKind: The closed set of vehicle kinds
- Vehicle / create_vehicle: State machine, kind behavior, maintenance history
- MaintenanceRecord: Validated service entries, past or scheduled
- MaintenanceSchedule: Past vs. upcoming view of a vehicle's records
- Outcome / Signal: Structured results of vehicle operations
- flatten_vehicle / reconstruct_vehicle: Flat record codec
- load_garage / save_vehicle / ...: YAML garage file storage
"""

from .kind import VehicleKind
from .errors import (
    FleetError,
    ConfigurationError,
    InvalidStateError,
    ValidationError,
    CapacityExceededError,
    InsufficientLoadError,
    NotFoundError,
)
from .outcome import Outcome, Signal
from .extras import CargoHold, Turbo, DEFAULT_CARGO_CAPACITY
from .maintenance_record import MaintenanceRecord, schedule_after
from .schedule import MaintenanceSchedule, classify_records
from .behaviors import KindBehavior, behavior_for
from .vehicle import Vehicle, create_vehicle
from .codec import flatten_vehicle, reconstruct_vehicle, flatten_record, reconstruct_record
from .loader import (
    create_garage,
    load_garage,
    load_vehicle,
    save_vehicle,
    delete_vehicle,
    list_maintenance,
)

__all__ = [
    "VehicleKind",
    "FleetError",
    "ConfigurationError",
    "InvalidStateError",
    "ValidationError",
    "CapacityExceededError",
    "InsufficientLoadError",
    "NotFoundError",
    "Outcome",
    "Signal",
    "CargoHold",
    "Turbo",
    "DEFAULT_CARGO_CAPACITY",
    "MaintenanceRecord",
    "schedule_after",
    "MaintenanceSchedule",
    "classify_records",
    "KindBehavior",
    "behavior_for",
    "Vehicle",
    "create_vehicle",
    "flatten_vehicle",
    "reconstruct_vehicle",
    "flatten_record",
    "reconstruct_record",
    "create_garage",
    "load_garage",
    "load_vehicle",
    "save_vehicle",
    "delete_vehicle",
    "list_maintenance",
]
