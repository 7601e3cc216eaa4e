"""
Subscription activity

A record is active while today is before its next due date. Lapsed records
stay in the ledger until an explicit cancellation removes them.
"""

from datetime import date, datetime
from typing import Iterable, List, Optional, Union

from .models import MemberRecord


def is_active(record: MemberRecord, now: Optional[Union[date, datetime]] = None) -> bool:
    """True iff `now` (day granularity) is strictly before record.next_due_date"""
    if now is None:
        today = date.today()
    elif isinstance(now, datetime):
        today = now.date()
    else:
        today = now
    return today < record.next_due_date


def active_records(
    records: Iterable[MemberRecord],
    now: Optional[Union[date, datetime]] = None,
) -> List[MemberRecord]:
    return [record for record in records if is_active(record, now)]


__all__ = ["is_active", "active_records"]
