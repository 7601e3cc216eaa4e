"""
Extract Encoder

Renders ledger records into the two partner file formats:

- Eligibility file: pipe-delimited, one member per line, no header, no padding.
  Name: {parentGroupCode}{MMDDYY}_{full|delta}.txt
- Subscription (SDF) file: fixed-width ASCII, active members only.
  Name: {groupCode}{MMDDYY}_full.txt

Over-wide fixed-width values are truncated and logged, never raised, so one
bad record cannot abort a batch.
"""

import logging
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Tuple, Union

from .activity import active_records
from .date_rules import effective_date, format_mmddyy, format_mmddyyyy, format_yyyymmdd
from .models import ExtractMode, MemberRecord

logger = logging.getLogger(__name__)

ELIGIBILITY_DELIMITER = "|"
LINE_SEPARATOR = "\n"


@dataclass(frozen=True)
class FixedWidthColumn:
    name: str
    width: int
    value: Callable[[MemberRecord], str]
    right_justify: bool = False


SDF_LAYOUT: Tuple[FixedWidthColumn, ...] = (
    FixedWidthColumn("email", 50, lambda r: r.email),
    FixedWidthColumn("subscription_plan", 10, lambda r: r.subscription_plan.value),
    FixedWidthColumn("last_payment_date", 8, lambda r: format_yyyymmdd(r.last_payment_date)),
    FixedWidthColumn("next_due_date", 8, lambda r: format_yyyymmdd(r.next_due_date)),
    FixedWidthColumn("payment_amount", 8, lambda r: r.payment_amount, right_justify=True),
    FixedWidthColumn("first_name", 20, lambda r: r.first_name),
    FixedWidthColumn("last_name", 20, lambda r: r.last_name),
    FixedWidthColumn("order_id", 24, lambda r: r.order_id),
)

SDF_LINE_WIDTH = sum(column.width for column in SDF_LAYOUT)

# Partner field order; empty strings for fillers and absent values
ELIGIBILITY_FIELDS: Tuple[Tuple[str, Callable[[MemberRecord], str]], ...] = (
    ("title", lambda r: r.title),
    ("first_name", lambda r: r.first_name),
    ("middle_name", lambda r: r.middle_name),
    ("last_name", lambda r: r.last_name),
    ("post_name", lambda r: r.post_name),
    ("unique_id", lambda r: r.order_id),
    ("sequence_num", lambda r: r.sequence_num),
    ("filler", lambda r: ""),
    ("address1", lambda r: r.address1),
    ("address2", lambda r: r.address2),
    ("city", lambda r: r.city),
    ("state", lambda r: r.state),
    ("zip", lambda r: r.zip),
    ("plus4", lambda r: r.plus4),
    ("home_phone", lambda r: r.home_phone),
    ("work_phone", lambda r: r.work_phone),
    ("coverage", lambda r: r.coverage),
    ("group_code", lambda r: r.group_code),
    ("termination_date", lambda r: format_mmddyyyy(r.termination_date)),
    ("effective_date", lambda r: format_mmddyyyy(effective_date(r.effective_date))),
    ("date_of_birth", lambda r: format_mmddyyyy(r.date_of_birth)),
    ("relation", lambda r: r.relation),
    ("student_status", lambda r: r.student_status),
    ("filler2", lambda r: ""),
    ("gender", lambda r: r.gender),
    ("email", lambda r: r.email),
)


def _clean_delimited(value: Optional[str]) -> str:
    if not value:
        return ""
    return value.replace(ELIGIBILITY_DELIMITER, " ").replace("\r", " ").replace("\n", " ")


def _fit(column: FixedWidthColumn, value: Optional[str], record_key: str) -> str:
    text = (value or "").replace("\r", " ").replace("\n", " ")
    text = text.encode("ascii", "replace").decode("ascii")
    if len(text) > column.width:
        logger.warning(
            f"Truncating {column.name} for {record_key}: {len(text)} chars exceeds width {column.width}"
        )
        text = text[-column.width:] if column.right_justify else text[:column.width]
    if column.right_justify:
        return text.rjust(column.width)
    return text.ljust(column.width)


class ExtractEncoder:
    """Builds partner extract lines and writes them to files"""

    def __init__(self, output_dir: Union[str, Path]):
        self.output_dir = Path(output_dir)

    # ====================
    # Eligibility format
    # ====================

    @staticmethod
    def eligibility_line(record: MemberRecord) -> str:
        return ELIGIBILITY_DELIMITER.join(
            _clean_delimited(render(record)) for _, render in ELIGIBILITY_FIELDS
        )

    @staticmethod
    def eligibility_file_name(
        parent_group_code: str,
        generated_on: Optional[date] = None,
        mode: ExtractMode = ExtractMode.FULL,
    ) -> str:
        stamp = format_mmddyy(generated_on or date.today())
        return f"{parent_group_code}{stamp}_{ExtractMode(mode).value}.txt"

    def write_eligibility_file(
        self,
        records: Iterable[MemberRecord],
        parent_group_code: str,
        mode: ExtractMode = ExtractMode.FULL,
        generated_on: Optional[date] = None,
    ) -> Tuple[Path, int]:
        """Write an eligibility file; returns its path and line count"""
        lines = [self.eligibility_line(record) for record in records]
        path = self.output_dir / self.eligibility_file_name(parent_group_code, generated_on, mode)
        self._write(path, lines, encoding="utf-8")
        logger.info(f"Eligibility file created: {path} ({len(lines)} members)")
        return path, len(lines)

    # ====================
    # Fixed-width (SDF) format
    # ====================

    @staticmethod
    def subscription_line(record: MemberRecord) -> str:
        return "".join(_fit(column, column.value(record), record.email) for column in SDF_LAYOUT)

    @staticmethod
    def subscription_file_name(group_code: str, generated_on: Optional[date] = None) -> str:
        return f"{group_code}{format_mmddyy(generated_on or date.today())}_full.txt"

    def write_subscription_file(
        self,
        records: Iterable[MemberRecord],
        group_code: str,
        today: Optional[date] = None,
    ) -> Tuple[Path, int]:
        """Write the fixed-width file for active records only"""
        today = today or date.today()
        lines = [self.subscription_line(record) for record in active_records(records, today)]
        path = self.output_dir / self.subscription_file_name(group_code, today)
        self._write(path, lines, encoding="ascii")
        logger.info(f"Subscription SDF file created: {path} ({len(lines)} active)")
        return path, len(lines)

    def _write(self, path: Path, lines: List[str], encoding: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(LINE_SEPARATOR.join(lines), encoding=encoding)


__all__ = [
    "ExtractEncoder",
    "FixedWidthColumn",
    "SDF_LAYOUT",
    "SDF_LINE_WIDTH",
    "ELIGIBILITY_FIELDS",
]
