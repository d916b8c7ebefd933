"""Vehicle class - the aggregate for state, kind behavior and maintenance history."""

import logging
from dataclasses import replace
from datetime import datetime
from typing import Iterable, List, Optional, Union

from .behaviors import behavior_for
from .errors import (
    CapacityExceededError,
    ConfigurationError,
    InsufficientLoadError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)
from .extras import CargoHold, Turbo
from .identifiers import new_vehicle_id
from .kind import VehicleKind
from .maintenance_record import MaintenanceRecord, parse_number, reconstruct_record
from .outcome import Outcome
from .schedule import MaintenanceSchedule, classify_records

logger = logging.getLogger(__name__)

Extras = Union[CargoHold, Turbo, None]


class Vehicle:
    """
    One fleet vehicle.

    Always built for a concrete kind; the kind selects the behavior set and
    which extras (cargo hold, turbo) exist. State changes only through the
    methods below, each of which returns an Outcome.
    """

    def __init__(
        self,
        kind: Union[VehicleKind, str],
        model: str,
        color: str,
        vehicle_id: Optional[str] = None,
        history: Optional[Iterable[Union[MaintenanceRecord, dict]]] = None,
        extras: Extras = None,
        powered_on: bool = False,
        speed: float = 0,
    ):
        resolved = VehicleKind.from_tag(kind)
        if resolved is None:
            choices = ", ".join(k.value for k in VehicleKind)
            raise ConfigurationError(
                f"A vehicle needs a concrete kind ({choices}), got {kind!r}"
            )

        problems = []
        model = model.strip() if isinstance(model, str) else ""
        color = color.strip() if isinstance(color, str) else ""
        if not model:
            problems.append("Model is required.")
        if not color:
            problems.append("Color is required.")
        speed = parse_number(speed)
        if speed is None or speed < 0:
            problems.append("Speed must be a number greater than or equal to zero.")
        elif resolved.has_engine and not powered_on and speed > 0:
            problems.append("A powered-off vehicle cannot be moving.")
        problems.extend(self._check_extras(resolved, extras))
        if isinstance(extras, Turbo) and extras.engaged and not powered_on:
            problems.append("Turbo cannot be engaged while powered off.")
        if problems:
            raise ConfigurationError(" ".join(problems))

        self._kind = resolved
        self._behavior = behavior_for(resolved)
        self._model = model
        self._color = color
        self._id = vehicle_id or new_vehicle_id(resolved.value, model)
        self._powered_on = True if not resolved.has_engine else bool(powered_on)
        self._speed = speed
        self._cargo = self._turbo = None
        if resolved is VehicleKind.TRUCK:
            self._cargo = replace(extras) if extras is not None else CargoHold()
        elif resolved is VehicleKind.SPORTS_CAR:
            self._turbo = replace(extras) if extras is not None else Turbo()
        self._history: List[MaintenanceRecord] = self._restore_history(history or [])

    @staticmethod
    def _check_extras(kind: VehicleKind, extras: Extras) -> List[str]:
        if extras is None:
            return []
        if kind is VehicleKind.TRUCK:
            if not isinstance(extras, CargoHold):
                return ["Truck extras must be a CargoHold."]
            return extras.validate()
        if kind is VehicleKind.SPORTS_CAR:
            if not isinstance(extras, Turbo):
                return ["Sports car extras must be a Turbo."]
            return []
        return [f"Vehicle kind '{kind.value}' has no extra state."]

    def _restore_history(self, entries) -> List[MaintenanceRecord]:
        """Keep only entries that rebuild into valid, unique records."""
        restored = []
        seen = set()
        for entry in entries:
            if isinstance(entry, MaintenanceRecord):
                record = entry
                errors = record.validate()
                if errors:
                    logger.warning(
                        "Dropping maintenance record %s for %s: %s",
                        record.id, self._id, " ".join(errors),
                    )
                    continue
            else:
                record = reconstruct_record(entry)
                if record is None:
                    continue
            if record.id in seen:
                logger.warning(
                    "Dropping duplicate maintenance record %s for %s", record.id, self._id
                )
                continue
            seen.add(record.id)
            restored.append(record)
        return restored

    # -------------------------------------------------------------------------
    # Identity and state
    # -------------------------------------------------------------------------

    @property
    def id(self) -> str:
        return self._id

    @property
    def kind(self) -> VehicleKind:
        return self._kind

    @property
    def model(self) -> str:
        return self._model

    @property
    def color(self) -> str:
        return self._color

    @property
    def powered_on(self) -> bool:
        return self._powered_on

    @property
    def speed(self) -> float:
        return self._speed

    @property
    def is_moving(self) -> bool:
        return self._speed > 0

    @property
    def cargo(self) -> Optional[CargoHold]:
        """Cargo hold (trucks only)."""
        return self._cargo

    @property
    def turbo(self) -> Optional[Turbo]:
        """Turbo (sports cars only)."""
        return self._turbo

    @property
    def cargo_capacity(self) -> Optional[float]:
        return self._cargo.capacity if self._cargo else None

    @property
    def current_load(self) -> Optional[float]:
        return self._cargo.load if self._cargo else None

    @property
    def turbo_engaged(self) -> Optional[bool]:
        return self._turbo.engaged if self._turbo else None

    @property
    def name(self) -> str:
        """Human-readable vehicle name."""
        return f"{self._color} {self._model}"

    def update_details(
        self, model: Optional[str] = None, color: Optional[str] = None
    ) -> Outcome:
        """Change model and/or color. Blank values are rejected."""
        errors = []
        if model is not None and not (isinstance(model, str) and model.strip()):
            errors.append("Model is required.")
        if color is not None and not (isinstance(color, str) and color.strip()):
            errors.append("Color is required.")
        if errors:
            return Outcome.failure(ValidationError(errors))
        new_model = model.strip() if model is not None else self._model
        new_color = color.strip() if color is not None else self._color
        if (new_model, new_color) == (self._model, self._color):
            return Outcome.noop(f"{self._model} is unchanged.")
        self._model, self._color = new_model, new_color
        return Outcome.changed_state(f"Updated {self._id}: {self.name}.")

    # -------------------------------------------------------------------------
    # Power and movement
    # -------------------------------------------------------------------------

    def power_on(self) -> Outcome:
        if not self._kind.has_engine:
            return Outcome.info(f"{self._model} is always ready to ride. Just pedal!")
        if self._powered_on:
            return Outcome.info(f"{self._model} is already on.")
        self._powered_on = True
        logger.debug("%s powered on", self._id)
        return Outcome.changed_state(f"{self._model} powered on.")

    def power_off(self) -> Outcome:
        if not self._kind.has_engine:
            if self.is_moving:
                return Outcome.info(f"Brake {self._model} to a full stop first.")
            return Outcome.info(f"{self._model} is already stopped. Nothing to do.")
        if not self._powered_on:
            return Outcome.warning(f"{self._model} is already off.")
        if self.is_moving:
            return Outcome.warning(f"{self._model} must stop before powering off.")
        self._powered_on = False
        self._speed = 0
        if self._turbo is not None:
            self._turbo.engaged = False
        logger.debug("%s powered off", self._id)
        return Outcome.changed_state(f"{self._model} powered off.")

    def accelerate(self) -> Outcome:
        if self._behavior.needs_power and not self._powered_on:
            return Outcome.failure(
                InvalidStateError(f"{self._model} must power on first.")
            )
        self._speed += self._behavior.accelerate_delta(self)
        logger.debug("%s accelerated to %s", self._id, self._speed)
        return Outcome.changed_state(f"{self._model} is going {self._speed:g} km/h.")

    def brake(self) -> Outcome:
        if not self.is_moving:
            return Outcome.noop(f"{self._model} is already stopped.")
        self._speed = max(0, self._speed - self._behavior.brake_delta(self))
        logger.debug("%s braked to %s", self._id, self._speed)
        if not self.is_moving:
            return Outcome.changed_state(f"{self._model} came to a full stop.")
        return Outcome.changed_state(f"{self._model} slowed to {self._speed:g} km/h.")

    def honk(self) -> Outcome:
        message = self._behavior.alert_message(self._model)
        logger.info(message)
        return Outcome.alert(message)

    # -------------------------------------------------------------------------
    # Sports car turbo
    # -------------------------------------------------------------------------

    def set_turbo(self, engaged: bool) -> Outcome:
        """Engage (powered on only) or disengage (always) the turbo."""
        if self._turbo is None:
            return Outcome.failure(InvalidStateError(f"{self._model} has no turbo."))
        engaged = bool(engaged)
        if engaged == self._turbo.engaged:
            state = "engaged" if engaged else "disengaged"
            return Outcome.info(f"Turbo is already {state}.")
        if engaged and not self._powered_on:
            return Outcome.failure(
                InvalidStateError(f"{self._model} must power on before engaging turbo.")
            )
        self._turbo.engaged = engaged
        logger.debug("%s turbo engaged=%s", self._id, engaged)
        return Outcome.changed_state(
            f"Turbo {'engaged' if engaged else 'disengaged'} on {self._model}."
        )

    def toggle_turbo(self) -> Outcome:
        if self._turbo is None:
            return self.set_turbo(True)
        return self.set_turbo(not self._turbo.engaged)

    # -------------------------------------------------------------------------
    # Truck cargo
    # -------------------------------------------------------------------------

    def _check_cargo_command(self, quantity, verb: str):
        """Return (quantity, None) if the command may proceed, else (None, failure)."""
        if self._cargo is None:
            return None, Outcome.failure(
                InvalidStateError(f"{self._model} has no cargo hold.")
            )
        if not self._powered_on:
            return None, Outcome.failure(
                InvalidStateError(f"{self._model} must power on to {verb} cargo.")
            )
        qty = parse_number(quantity)
        if qty is None or qty <= 0:
            return None, Outcome.failure(
                ValidationError(["Quantity must be a positive number."])
            )
        return qty, None

    def load(self, quantity) -> Outcome:
        qty, failure = self._check_cargo_command(quantity, "load")
        if failure is not None:
            return failure
        cargo = self._cargo
        if cargo.load + qty > cargo.capacity:
            free = cargo.free_space
            return Outcome.failure(
                CapacityExceededError(
                    f"Cannot load {qty:g}: capacity of {cargo.capacity:g} would be "
                    f"exceeded. Free space: {free:.2f}.",
                    free_space=free,
                )
            )
        cargo.load += qty
        logger.debug("%s loaded %s (now %s/%s)", self._id, qty, cargo.load, cargo.capacity)
        return Outcome.changed_state(
            f"Loaded {qty:g}. Cargo: {cargo.load:g}/{cargo.capacity:g}."
        )

    def unload(self, quantity) -> Outcome:
        qty, failure = self._check_cargo_command(quantity, "unload")
        if failure is not None:
            return failure
        cargo = self._cargo
        if qty > cargo.load:
            return Outcome.failure(
                InsufficientLoadError(
                    f"Cannot unload {qty:g}: only carrying {cargo.load:g}.",
                    current_load=cargo.load,
                )
            )
        cargo.load -= qty
        logger.debug("%s unloaded %s (now %s/%s)", self._id, qty, cargo.load, cargo.capacity)
        return Outcome.changed_state(f"Unloaded {qty:g}. Cargo left: {cargo.load:g}.")

    # -------------------------------------------------------------------------
    # Maintenance
    # -------------------------------------------------------------------------

    @property
    def history(self) -> List[MaintenanceRecord]:
        """Copy of the maintenance records, in insertion order."""
        return list(self._history)

    def get_record(self, record_id: str) -> Optional[MaintenanceRecord]:
        for record in self._history:
            if record.id == record_id:
                return record
        return None

    def add_record(self, record: MaintenanceRecord) -> Outcome:
        """Validate and append a record. Reports every violated rule."""
        if not isinstance(record, MaintenanceRecord):
            return Outcome.failure(ValidationError(["Not a maintenance record."]))
        errors = record.validate()
        if self.get_record(record.id) is not None:
            errors.append(f"A record with id '{record.id}' already exists.")
        if errors:
            return Outcome.failure(ValidationError(errors))
        self._history.append(record)
        logger.debug("%s: added maintenance record %s", self._id, record.id)
        return Outcome.changed_state(f"Added {record.service_type} to {self._model}.")

    def log_service(
        self, timestamp, service_type: str, cost=0, description: str = ""
    ) -> Outcome:
        """Build a record from raw input and add it."""
        return self.add_record(MaintenanceRecord(timestamp, service_type, cost, description))

    def remove_record(self, record_id: str) -> Outcome:
        record = self.get_record(record_id)
        if record is None:
            return Outcome.failure(
                NotFoundError(f"No maintenance record '{record_id}' on {self._model}.")
            )
        self._history.remove(record)
        logger.debug("%s: removed maintenance record %s", self._id, record_id)
        return Outcome.changed_state(f"Removed {record.service_type} from {self._model}.")

    def classify(self, now: Optional[datetime] = None) -> MaintenanceSchedule:
        """Past records (newest first) and upcoming ones (soonest first) as of now."""
        return classify_records(self._history, now)

    def get_history_sorted(self, reverse: bool = True) -> List[MaintenanceRecord]:
        """All records by timestamp, newest first unless reverse is False."""
        dated = [r for r in self._history if r.timestamp is not None]
        return sorted(dated, key=lambda r: r.timestamp, reverse=reverse)

    @property
    def last_service(self) -> Optional[MaintenanceRecord]:
        """Most recent record at or before now."""
        return self.classify().last_service

    @property
    def next_service(self) -> Optional[MaintenanceRecord]:
        """Soonest scheduled record after now."""
        return self.classify().next_service

    @property
    def total_cost(self) -> float:
        return sum(r.cost for r in self._history if r.cost is not None)

    def __repr__(self) -> str:
        return (
            f"Vehicle(id={self._id!r}, kind={self._kind.value!r}, model={self._model!r}, "
            f"powered_on={self._powered_on!r}, speed={self._speed!r})"
        )


def create_vehicle(
    kind: Union[VehicleKind, str],
    model: str,
    color: str,
    vehicle_id: Optional[str] = None,
    history: Optional[Iterable[Union[MaintenanceRecord, dict]]] = None,
    extras: Extras = None,
) -> Vehicle:
    """
    Build a vehicle of the given kind.

    A fresh vehicle gets a generated id and an empty history. Pass vehicle_id
    and history to rebuild a stored one; invalid history entries are dropped.
    Raises ConfigurationError for a missing/unknown kind or bad arguments.
    """
    return Vehicle(kind, model, color, vehicle_id=vehicle_id, history=history, extras=extras)
