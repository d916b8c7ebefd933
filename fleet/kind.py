"""VehicleKind enum for the closed set of vehicle kinds."""

from enum import Enum
from typing import Optional


class VehicleKind(Enum):
    """Kinds of vehicle in the garage. Value is the flat-record tag."""

    BICYCLE = "bicycle"
    CAR = "car"
    SPORTS_CAR = "sports_car"
    TRUCK = "truck"
    MOTORCYCLE = "motorcycle"

    @property
    def has_engine(self) -> bool:
        return self is not VehicleKind.BICYCLE

    @classmethod
    def from_tag(cls, tag) -> Optional["VehicleKind"]:
        """Look up a kind by tag (case-insensitive), or None if unknown."""
        if isinstance(tag, cls):
            return tag
        if not isinstance(tag, str):
            return None
        normalized = tag.strip().lower().replace("-", "_").replace(" ", "_")
        for kind in cls:
            if kind.value == normalized:
                return kind
        return None
