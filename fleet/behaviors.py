"""Behavior table: per-kind acceleration, braking and alert rules."""

from dataclasses import dataclass, replace
from typing import Callable, Dict, Optional, TYPE_CHECKING

from .extras import CargoHold
from .kind import VehicleKind

if TYPE_CHECKING:
    from .vehicle import Vehicle

TRUCK_BASE_ACCELERATION = 8
TRUCK_BASE_BRAKING = 12
TRUCK_MIN_LOAD_FACTOR = 1 / 8
SPORTS_CAR_BASE_ACCELERATION = 10
TURBO_MULTIPLIER = 2


@dataclass(frozen=True)
class KindBehavior:
    """How one vehicle kind moves and sounds."""

    kind: VehicleKind
    accelerate_delta: Callable[["Vehicle"], float]
    brake_delta: Callable[["Vehicle"], float]
    alert: str
    needs_power: bool = True

    def alert_message(self, model: str) -> str:
        return self.alert.format(model=model)


def fixed_delta(amount: float) -> Callable[["Vehicle"], float]:
    """Delta that ignores vehicle state."""

    def delta(vehicle: "Vehicle") -> float:
        return amount

    return delta


def truck_load_factor(cargo: CargoHold) -> float:
    """
    Acceleration multiplier for a loaded truck.

    1 - load / (capacity * 1.5), never below 1/8. Empty capacity counts as 1.
    """
    if not cargo.capacity:
        return 1
    return max(1 - cargo.load / (cargo.capacity * 1.5), TRUCK_MIN_LOAD_FACTOR)


def truck_brake_factor(cargo: CargoHold) -> float:
    """Braking divisor for a loaded truck: 1 + load / (capacity * 2)."""
    if not cargo.capacity:
        return 1
    return 1 + cargo.load / (cargo.capacity * 2)


def sports_car_acceleration(vehicle: "Vehicle") -> float:
    if vehicle.turbo_engaged:
        return SPORTS_CAR_BASE_ACCELERATION * TURBO_MULTIPLIER
    return SPORTS_CAR_BASE_ACCELERATION


def truck_acceleration(vehicle: "Vehicle") -> float:
    return TRUCK_BASE_ACCELERATION * truck_load_factor(vehicle.cargo)


def truck_braking(vehicle: "Vehicle") -> float:
    return TRUCK_BASE_BRAKING / truck_brake_factor(vehicle.cargo)


CAR = KindBehavior(
    kind=VehicleKind.CAR,
    accelerate_delta=fixed_delta(10),
    brake_delta=fixed_delta(10),
    alert="{model} honked!",
)

# Sports cars and trucks start from the car defaults and override what differs.
SPORTS_CAR = replace(
    CAR,
    kind=VehicleKind.SPORTS_CAR,
    accelerate_delta=sports_car_acceleration,
)

TRUCK = replace(
    CAR,
    kind=VehicleKind.TRUCK,
    accelerate_delta=truck_acceleration,
    brake_delta=truck_braking,
    alert="{model} honked! FOOM!",
)

MOTORCYCLE = KindBehavior(
    kind=VehicleKind.MOTORCYCLE,
    accelerate_delta=fixed_delta(18),
    brake_delta=fixed_delta(15),
    alert="{model} honked! Beep beep!",
)

BICYCLE = KindBehavior(
    kind=VehicleKind.BICYCLE,
    accelerate_delta=fixed_delta(5),
    brake_delta=fixed_delta(5),
    alert="{model} rang the bell! Ring ring!",
    needs_power=False,
)

BEHAVIORS: Dict[VehicleKind, KindBehavior] = {
    behavior.kind: behavior for behavior in (BICYCLE, CAR, SPORTS_CAR, TRUCK, MOTORCYCLE)
}


def behavior_for(kind: VehicleKind) -> Optional[KindBehavior]:
    """Look up the behavior set for a kind."""
    return BEHAVIORS.get(kind)
