"""Split maintenance records into past history and upcoming appointments."""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Iterable, List, Optional

from .maintenance_record import MaintenanceRecord, parse_timestamp

logger = logging.getLogger(__name__)


@dataclass
class MaintenanceSchedule:
    """A point-in-time view of a vehicle's records."""

    past: List[MaintenanceRecord] = field(default_factory=list)
    upcoming: List[MaintenanceRecord] = field(default_factory=list)

    @property
    def last_service(self) -> Optional[MaintenanceRecord]:
        return self.past[0] if self.past else None

    @property
    def next_service(self) -> Optional[MaintenanceRecord]:
        return self.upcoming[0] if self.upcoming else None


def classify_records(
    records: Iterable[MaintenanceRecord], now: Optional[datetime] = None
) -> MaintenanceSchedule:
    """
    Partition records around `now` without touching the input.

    - past: timestamp <= now, newest first
    - upcoming: timestamp > now, soonest first
    Records without a valid timestamp are skipped.
    """
    now = parse_timestamp(now) or datetime.now(timezone.utc)
    past = []
    upcoming = []
    for record in records:
        if record.timestamp is None:
            logger.warning("Skipping maintenance record %s with no valid timestamp", record.id)
            continue
        if record.timestamp <= now:
            past.append(record)
        else:
            upcoming.append(record)
    past.sort(key=lambda r: r.timestamp, reverse=True)
    upcoming.sort(key=lambda r: r.timestamp)
    return MaintenanceSchedule(past=past, upcoming=upcoming)
