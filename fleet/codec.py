"""Flat record codec: Vehicle <-> kind-tagged dict for the persistence boundary."""

import logging
from typing import Any, Dict

from .errors import ConfigurationError
from .extras import DEFAULT_CARGO_CAPACITY, CargoHold, Turbo
from .kind import VehicleKind
from .maintenance_record import flatten_record, parse_number, reconstruct_record
from .vehicle import Vehicle

logger = logging.getLogger(__name__)

FALLBACK_KIND = VehicleKind.CAR

__all__ = [
    "flatten_vehicle",
    "reconstruct_vehicle",
    "flatten_record",
    "reconstruct_record",
]


def flatten_vehicle(vehicle: Vehicle) -> Dict[str, Any]:
    """
    Serialize a Vehicle to its flat dict (camelCase keys).

    Cargo fields appear only for trucks and turboEngaged only for sports cars.
    """
    data: Dict[str, Any] = {
        "id": vehicle.id,
        "kind": vehicle.kind.value,
        "model": vehicle.model,
        "color": vehicle.color,
        "poweredOn": vehicle.powered_on,
        "speed": vehicle.speed,
    }
    if vehicle.cargo is not None:
        data["cargoCapacity"] = vehicle.cargo.capacity
        data["currentLoad"] = vehicle.cargo.load
    if vehicle.turbo is not None:
        data["turboEngaged"] = vehicle.turbo.engaged
    data["maintenanceHistory"] = [flatten_record(r) for r in vehicle.history]
    return data


def _resolve_kind(tag, strict: bool) -> VehicleKind:
    kind = VehicleKind.from_tag(tag)
    if kind is not None:
        return kind
    if strict:
        raise ConfigurationError(f"Unknown vehicle kind {tag!r}")
    logger.warning("Unknown vehicle kind %r, rebuilding as %s", tag, FALLBACK_KIND.value)
    return FALLBACK_KIND


def _cargo_from_flat(data: Dict[str, Any]) -> CargoHold:
    """Coerce capacity/load: non-numeric capacity -> default, negatives -> 0, load clamped."""
    capacity = parse_number(data.get("cargoCapacity"))
    if capacity is None:
        capacity = DEFAULT_CARGO_CAPACITY
    capacity = max(0, capacity)
    load = parse_number(data.get("currentLoad"))
    if load is None:
        load = 0
    load = max(0, min(load, capacity))
    return CargoHold(capacity=capacity, load=load)


def reconstruct_vehicle(data: Dict[str, Any], strict: bool = False) -> Vehicle:
    """
    Rebuild a Vehicle from its flat dict.

    A missing or unknown kind is rebuilt as a car (logged), or raises
    ConfigurationError when strict. Unparsable maintenance entries are
    dropped. Model/color problems still raise ConfigurationError.
    """
    if not isinstance(data, dict):
        raise ConfigurationError(f"Vehicle record must be a mapping, got {type(data).__name__}")
    kind = _resolve_kind(data.get("kind"), strict)

    powered_on = data.get("poweredOn") is True

    extras = None
    if kind is VehicleKind.TRUCK:
        extras = _cargo_from_flat(data)
    elif kind is VehicleKind.SPORTS_CAR:
        # Turbo only stays engaged on a powered-on car.
        extras = Turbo(engaged=data.get("turboEngaged") is True and powered_on)

    speed = parse_number(data.get("speed"))
    if speed is None or speed < 0:
        speed = 0
    if kind.has_engine and not powered_on:
        speed = 0

    history = data.get("maintenanceHistory") or []
    if not isinstance(history, list):
        logger.warning("Ignoring non-list maintenanceHistory for %s", data.get("id"))
        history = []

    return Vehicle(
        kind,
        data.get("model"),
        data.get("color"),
        vehicle_id=str(data["id"]) if data.get("id") else None,
        history=history,
        extras=extras,
        powered_on=powered_on,
        speed=speed,
    )
