"""Kind-specific extra state: truck cargo hold and sports car turbo."""

import math
from dataclasses import dataclass
from typing import List, Union

Number = Union[int, float]

DEFAULT_CARGO_CAPACITY = 5000


@dataclass
class CargoHold:
    """Truck cargo. Invariant: 0 <= load <= capacity."""

    capacity: Number = DEFAULT_CARGO_CAPACITY
    load: Number = 0

    @property
    def free_space(self) -> Number:
        return self.capacity - self.load

    def validate(self) -> List[str]:
        errors = []
        if not _is_number(self.capacity) or self.capacity < 0:
            errors.append("Cargo capacity must be a number greater than or equal to zero.")
        elif not _is_number(self.load) or not 0 <= self.load <= self.capacity:
            errors.append(
                f"Current load must be between 0 and the cargo capacity ({self.capacity})."
            )
        return errors


@dataclass
class Turbo:
    """Sports car turbo. Doubles acceleration while engaged."""

    engaged: bool = False


def _is_number(value) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)
