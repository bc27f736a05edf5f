"""Expiry sweep: flag every attraction whose expiry date has passed.

The scan and the commit are two separate store calls. A record that becomes
due after the scan is picked up by the next sweep. Updates are idempotent, so
overlapping sweeps converge on the same state.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from backend.lib.attractions.attraction_store import AttractionStore
from backend.lib.attractions.timestamps import format_timestamp, utc_now

logger = logging.getLogger(__name__)


@dataclass
class SweepResult:
    """Outcome of one sweep."""
    swept_at: datetime
    updated_count: int = 0
    record_ids: List[str] = field(default_factory=list)

    def to_dict(self):
        return {
            "swept_at": format_timestamp(self.swept_at),
            "updated_count": self.updated_count,
            "record_ids": self.record_ids,
        }


def find_due_records(store: AttractionStore, now: Optional[datetime] = None) -> List[str]:
    """List ids a sweep at `now` would expire, without writing anything."""
    return store.find_due_for_expiry(now or utc_now())


def sweep(store: AttractionStore, now: Optional[datetime] = None) -> SweepResult:
    """Run one sweep.

    Args:
        store: Attraction store to scan and update
        now: Sweep time (defaults to current UTC time)

    Returns:
        SweepResult; updated_count is 0 when nothing was due

    Raises:
        ClientError: If the scan or a commit fails
    """
    now = now or utc_now()
    record_ids = store.find_due_for_expiry(now)

    if not record_ids:
        logger.info("No attractions due for expiry")
        return SweepResult(swept_at=now)

    updated = store.mark_expired(record_ids, now)
    logger.info(f"Expired {updated} attractions at {format_timestamp(now)}")

    return SweepResult(swept_at=now, updated_count=updated, record_ids=record_ids)
