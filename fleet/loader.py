"""YAML loading and saving utilities for garage files."""

import logging
from pathlib import Path
from typing import Any, Dict, List, Union

import yaml

from .codec import flatten_vehicle, reconstruct_vehicle
from .errors import ConfigurationError, NotFoundError
from .maintenance_record import MaintenanceRecord
from .vehicle import Vehicle

logger = logging.getLogger(__name__)


def _read_raw(filename: Union[str, Path]) -> Dict[str, Any]:
    """Load the raw YAML data (not parsed into objects)."""
    with open(filename, "r") as fp:
        data = yaml.load(fp, Loader=yaml.SafeLoader)
    if data is None:
        data = {}
    if data.get("vehicles") is None:
        data["vehicles"] = []
    return data


def _write_raw(filename: Union[str, Path], data: Dict[str, Any]) -> None:
    with open(filename, "w") as fp:
        yaml.dump(
            data,
            fp,
            default_flow_style=False,
            allow_unicode=True,
            sort_keys=False,
            width=120,
        )


def _find_index(vehicles: List[Dict[str, Any]], vehicle_id: str) -> int:
    for index, entry in enumerate(vehicles):
        if isinstance(entry, dict) and str(entry.get("id")) == vehicle_id:
            return index
    return -1


def create_garage(filename: Union[str, Path]) -> None:
    """Write an empty garage file."""
    _write_raw(filename, {"vehicles": []})


def load_garage(filename: Union[str, Path], strict: bool = False) -> List[Vehicle]:
    """
    Load every vehicle in a garage file.

    Vehicles that cannot be rebuilt are skipped with a warning, unless strict,
    in which case the ConfigurationError propagates.
    """
    vehicles = []
    for entry in _read_raw(filename)["vehicles"]:
        try:
            vehicles.append(reconstruct_vehicle(entry, strict=strict))
        except ConfigurationError as e:
            if strict:
                raise
            logger.warning("Skipping vehicle %r in %s: %s", _entry_id(entry), filename, e)
    return vehicles


def _entry_id(entry: Any) -> Any:
    return entry.get("id") if isinstance(entry, dict) else None


def load_vehicle(
    filename: Union[str, Path], vehicle_id: str, strict: bool = False
) -> Vehicle:
    """Load a single vehicle by id. Raises NotFoundError if absent."""
    vehicles = _read_raw(filename)["vehicles"]
    index = _find_index(vehicles, vehicle_id)
    if index < 0:
        raise NotFoundError(f"Vehicle '{vehicle_id}' not found in {filename}")
    return reconstruct_vehicle(vehicles[index], strict=strict)


def save_vehicle(filename: Union[str, Path], vehicle: Vehicle) -> None:
    """
    Create or update a vehicle in a garage file.

    Loads the raw YAML, replaces the entry with the same id (or appends),
    and writes back to the file. A missing file is created.
    """
    if Path(filename).exists():
        data = _read_raw(filename)
    else:
        data = {"vehicles": []}

    flat = flatten_vehicle(vehicle)
    index = _find_index(data["vehicles"], vehicle.id)
    if index < 0:
        data["vehicles"].append(flat)
        logger.info("Created vehicle %s in %s", vehicle.id, filename)
    else:
        data["vehicles"][index] = flat
        logger.debug("Updated vehicle %s in %s", vehicle.id, filename)

    _write_raw(filename, data)


def delete_vehicle(filename: Union[str, Path], vehicle_id: str) -> None:
    """Remove a vehicle from a garage file. Raises NotFoundError if absent."""
    data = _read_raw(filename)
    index = _find_index(data["vehicles"], vehicle_id)
    if index < 0:
        raise NotFoundError(f"Vehicle '{vehicle_id}' not found in {filename}")
    del data["vehicles"][index]
    _write_raw(filename, data)
    logger.info("Deleted vehicle %s from %s", vehicle_id, filename)


def list_maintenance(
    filename: Union[str, Path], vehicle_id: str, reverse: bool = False
) -> List[MaintenanceRecord]:
    """All maintenance records for one vehicle, ordered by date (oldest first)."""
    vehicle = load_vehicle(filename, vehicle_id)
    return vehicle.get_history_sorted(reverse=reverse)
