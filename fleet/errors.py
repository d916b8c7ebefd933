"""Exception taxonomy for the fleet domain."""

from typing import List


class FleetError(Exception):
    """Base class for all fleet domain errors."""


class ConfigurationError(FleetError):
    """A vehicle cannot be built from the given arguments."""


class InvalidStateError(FleetError):
    """The operation is not allowed in the vehicle's current power/speed state."""


class ValidationError(FleetError):
    """Input failed validation. Holds one message per violated rule."""

    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__("; ".join(self.errors))


class CapacityExceededError(FleetError):
    """Loading would put a truck over its cargo capacity."""

    def __init__(self, message: str, free_space: float):
        self.free_space = free_space
        super().__init__(message)


class InsufficientLoadError(FleetError):
    """Unloading more cargo than a truck is carrying."""

    def __init__(self, message: str, current_load: float):
        self.current_load = current_load
        super().__init__(message)


class NotFoundError(FleetError):
    """No vehicle or maintenance record with the given id."""
