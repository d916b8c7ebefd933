"""MaintenanceRecord class for service entries, past or scheduled."""

import logging
import math
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional, Union

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

from .identifiers import new_record_id

logger = logging.getLogger(__name__)

Number = Union[int, float]

REQUIRED_FLAT_KEYS = ("id", "timestamp", "serviceType", "cost")


def parse_timestamp(value) -> Optional[datetime]:
    """
    Parse a timestamp into an aware UTC datetime.

    Accepts datetime, date (midnight) or string. Naive values are taken as UTC.
    Returns None when the value cannot be parsed.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            parsed = date_parser.isoparse(text)
        except ValueError:
            try:
                parsed = date_parser.parse(text)
            except (ValueError, OverflowError):
                return None
    else:
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def format_timestamp(value: Optional[datetime]) -> Optional[str]:
    """ISO-8601 in UTC with millisecond precision and a Z suffix."""
    if value is None:
        return None
    text = value.astimezone(timezone.utc).isoformat(timespec="milliseconds")
    return text.replace("+00:00", "Z")


def parse_number(value) -> Optional[Number]:
    """Coerce to int/float. Finite numbers pass through unchanged; None otherwise."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else None
    if isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
        return number if math.isfinite(number) else None
    return None


def schedule_after(months: float, from_date: Optional[datetime] = None) -> datetime:
    """Timestamp `months` after from_date (default now). Fractions count as 30-day months."""
    start = parse_timestamp(from_date) or datetime.now(timezone.utc)
    whole = int(months)
    days = int((months - whole) * 30)
    return start + relativedelta(months=whole, days=days)


class MaintenanceRecord:
    """A service event for one vehicle, either done (past) or scheduled."""

    def __init__(
        self,
        timestamp,
        service_type: Optional[str],
        cost=0,
        description: Optional[str] = "",
        record_id: Optional[str] = None,
    ):
        self._timestamp = parse_timestamp(timestamp)
        self._service_type = service_type.strip() if isinstance(service_type, str) else ""
        self._cost = parse_number(cost)
        self._description = description.strip() if isinstance(description, str) else ""
        self._id = record_id or new_record_id()

    @property
    def id(self) -> str:
        return self._id

    @property
    def timestamp(self) -> Optional[datetime]:
        return self._timestamp

    @property
    def service_type(self) -> str:
        return self._service_type

    @property
    def cost(self) -> Optional[Number]:
        return self._cost

    @property
    def description(self) -> str:
        return self._description

    def validate(self) -> List[str]:
        """Check every rule and return one message per violation."""
        errors = []
        if self._timestamp is None:
            errors.append("Timestamp is missing or not a valid date/time.")
        if not self._service_type:
            errors.append("Service type is required.")
        if self._cost is None or self._cost < 0:
            errors.append("Cost must be a number greater than or equal to zero.")
        return errors

    @property
    def is_valid(self) -> bool:
        return not self.validate()

    def is_upcoming(self, now: Optional[datetime] = None) -> bool:
        """True if scheduled strictly after now."""
        if self._timestamp is None:
            return False
        now = parse_timestamp(now) or datetime.now(timezone.utc)
        return self._timestamp > now

    def __repr__(self) -> str:
        return (
            f"MaintenanceRecord(id={self._id!r}, "
            f"timestamp={format_timestamp(self._timestamp)!r}, "
            f"service_type={self._service_type!r}, cost={self._cost!r})"
        )


def flatten_record(record: MaintenanceRecord) -> Dict[str, Any]:
    """Serialize a MaintenanceRecord to its flat dict (camelCase keys)."""
    return {
        "id": record.id,
        "timestamp": format_timestamp(record.timestamp),
        "serviceType": record.service_type,
        "cost": record.cost,
        "description": record.description,
    }


def reconstruct_record(data: Dict[str, Any]) -> Optional[MaintenanceRecord]:
    """
    Rebuild a MaintenanceRecord from its flat dict.

    Returns None (and logs a warning) when required keys are missing or the
    rebuilt record fails validation.
    """
    if not isinstance(data, dict):
        logger.warning("Discarding maintenance entry that is not a mapping: %r", data)
        return None
    missing = [key for key in REQUIRED_FLAT_KEYS if key not in data or data[key] in (None, "")]
    if missing:
        logger.warning(
            "Discarding maintenance entry %r: missing %s", data.get("id"), ", ".join(missing)
        )
        return None
    record = MaintenanceRecord(
        data["timestamp"],
        data["serviceType"],
        data["cost"],
        data.get("description"),
        record_id=str(data["id"]),
    )
    errors = record.validate()
    if errors:
        logger.warning("Discarding maintenance entry %s: %s", record.id, " ".join(errors))
        return None
    return record
