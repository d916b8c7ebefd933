"""Outcome dataclass returned by every vehicle operation."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .errors import FleetError


class Signal(Enum):
    """What an operation did. ERROR is the only failing signal."""

    CHANGED = "changed"
    NOOP = "noop"
    INFO = "info"
    WARNING = "warning"
    ALERT = "alert"
    ERROR = "error"


@dataclass
class Outcome:
    """
    Result of a vehicle operation.

    `changed` tells the caller whether vehicle state was mutated and should be
    persisted. `error` is set only for ERROR outcomes.
    """

    signal: Signal
    message: str = ""
    changed: bool = False
    error: Optional[FleetError] = None

    @classmethod
    def changed_state(cls, message: str) -> "Outcome":
        return cls(Signal.CHANGED, message, changed=True)

    @classmethod
    def noop(cls, message: str = "") -> "Outcome":
        return cls(Signal.NOOP, message)

    @classmethod
    def info(cls, message: str) -> "Outcome":
        return cls(Signal.INFO, message)

    @classmethod
    def warning(cls, message: str) -> "Outcome":
        return cls(Signal.WARNING, message)

    @classmethod
    def alert(cls, message: str) -> "Outcome":
        return cls(Signal.ALERT, message)

    @classmethod
    def failure(cls, error: FleetError) -> "Outcome":
        return cls(Signal.ERROR, str(error), error=error)

    @property
    def ok(self) -> bool:
        return self.signal is not Signal.ERROR

    def __bool__(self) -> bool:
        return self.ok

    def raise_for_error(self) -> "Outcome":
        """Raise the carried error, if any. Returns self otherwise."""
        if self.error is not None:
            raise self.error
        return self
