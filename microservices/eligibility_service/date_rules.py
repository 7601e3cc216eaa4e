"""
Date Rules

Pure calendar helpers: partner effective dates, plan-interval arithmetic
and the date encodings used in extract files.
"""

from datetime import date, datetime
from typing import Optional, Union

from dateutil.parser import isoparse
from dateutil.relativedelta import relativedelta

from .models import SubscriptionPlan

DateLike = Union[date, datetime]

# Day of month after which coverage starts on the 1st of the following month
EFFECTIVE_DATE_CUTOFF_DAY = 15


def _as_date(value: DateLike) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def effective_date(reference: Optional[DateLike] = None) -> date:
    """
    First day of the coverage month for a payment on `reference`.

    Days 1-15 start coverage on the 1st of the same month; later days start
    on the 1st of the next month (December rolls into January).
    """
    ref = _as_date(reference) if reference is not None else date.today()
    if ref.day <= EFFECTIVE_DATE_CUTOFF_DAY:
        return ref.replace(day=1)
    if ref.month == 12:
        return date(ref.year + 1, 1, 1)
    return date(ref.year, ref.month + 1, 1)


def add_months(start: date, months: int) -> date:
    """Add months, clamping to the last valid day (Jan 31 + 1 month => Feb 28/29)."""
    return start + relativedelta(months=months)


def next_due_date(last_payment_date: date, plan) -> date:
    """
    Next due date one plan interval after `last_payment_date`.

    An unrecognized plan returns `last_payment_date` unchanged; callers treat
    that as "no rule matched".
    """
    try:
        plan = SubscriptionPlan(plan)
    except ValueError:
        return last_payment_date

    if plan == SubscriptionPlan.MONTHLY:
        return add_months(last_payment_date, 1)
    if plan == SubscriptionPlan.ANNUAL:
        return last_payment_date + relativedelta(years=1)
    return last_payment_date


def parse_order_timestamp(value: Optional[str]) -> Optional[date]:
    """Calendar date of an ISO-8601 order timestamp, None if absent or malformed"""
    if not value:
        return None
    try:
        return isoparse(value).date()
    except (ValueError, TypeError):
        return None


def parse_birth_date(value: Optional[str]) -> Optional[date]:
    """Parse a free-text `M/D/YYYY` date of birth; None when it does not parse"""
    if not value:
        return None
    try:
        return datetime.strptime(value.strip(), "%m/%d/%Y").date()
    except ValueError:
        return None


def format_mmddyyyy(value: Optional[date]) -> str:
    return value.strftime("%m%d%Y") if value else ""


def format_mmddyy(value: date) -> str:
    return value.strftime("%m%d%y")


def format_yyyymmdd(value: Optional[date]) -> str:
    return value.strftime("%Y%m%d") if value else ""


__all__ = [
    "EFFECTIVE_DATE_CUTOFF_DAY",
    "effective_date",
    "add_months",
    "next_due_date",
    "parse_order_timestamp",
    "parse_birth_date",
    "format_mmddyyyy",
    "format_mmddyy",
    "format_yyyymmdd",
]
