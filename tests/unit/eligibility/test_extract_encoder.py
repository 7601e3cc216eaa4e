"""
Unit Tests for Extract Encoder

Pipe-delimited eligibility lines, fixed-width SDF lines and file naming.
"""

import pytest
from datetime import date

from microservices.eligibility_service.extract_encoder import (
    ELIGIBILITY_FIELDS,
    SDF_LAYOUT,
    SDF_LINE_WIDTH,
    ExtractEncoder,
)
from microservices.eligibility_service.models import ExtractMode, SubscriptionPlan

from tests.fixtures import make_member_record


class TestEligibilityLine:
    def test_field_count(self):
        line = ExtractEncoder.eligibility_line(make_member_record())
        assert len(ELIGIBILITY_FIELDS) == 26
        assert line.count("|") == 25

    def test_field_positions(self):
        record = make_member_record(
            order_id="ord_42",
            date_of_birth=date(1982, 1, 10),
            effective_date=date(2025, 1, 1),
        )
        fields = ExtractEncoder.eligibility_line(record).split("|")

        assert fields[0] == ""
        assert fields[1] == "Jane"
        assert fields[3] == "Doe"
        assert fields[5] == "ord_42"
        assert fields[6] == "00"
        assert fields[7] == ""
        assert fields[8] == "1 Main St"
        assert fields[10] == "Springfield"
        assert fields[11] == "IL"
        assert fields[12] == "62701"
        assert fields[14] == "5551234567"
        assert fields[16] == "MO"
        assert fields[17] == "GRP001"
        assert fields[18] == ""
        assert fields[19] == "01012025"
        assert fields[20] == "01101982"
        assert fields[23] == ""
        assert fields[25] == "jane.doe@example.com"

    def test_termination_date_rendered(self):
        record = make_member_record(termination_date=date(2025, 6, 30))
        assert ExtractEncoder.eligibility_line(record).split("|")[18] == "06302025"

    def test_effective_date_normalized_to_first_of_month(self):
        record = make_member_record(effective_date=date(2025, 1, 20))
        assert ExtractEncoder.eligibility_line(record).split("|")[19] == "02012025"

    def test_delimiter_in_value_does_not_shift_fields(self):
        record = make_member_record(address1="Unit 5 | Rear", city="Spring\nfield")
        fields = ExtractEncoder.eligibility_line(record).split("|")
        assert len(fields) == 26
        assert fields[8] == "Unit 5   Rear"
        assert fields[10] == "Spring field"

    def test_no_padding(self):
        fields = ExtractEncoder.eligibility_line(make_member_record()).split("|")
        assert fields[1] == fields[1].strip()


class TestSubscriptionLine:
    def test_layout_width(self):
        assert SDF_LINE_WIDTH == sum(column.width for column in SDF_LAYOUT)
        assert SDF_LINE_WIDTH == 148

    def test_monthly_member_line(self):
        record = make_member_record(
            email="a@b.com",
            plan=SubscriptionPlan.MONTHLY,
            last_payment_date=date(2025, 1, 10),
            next_due_date=date(2025, 2, 10),
            order_id="ord_1",
        )

        line = ExtractEncoder.subscription_line(record)

        assert len(line) == SDF_LINE_WIDTH
        assert line[0:50] == "a@b.com".ljust(50)
        assert line[50:60] == "Monthly   "
        assert line[60:68] == "20250110"
        assert line[68:76] == "20250210"
        assert line[76:84] == "   19.99"
        assert line[84:104] == "Jane".ljust(20)
        assert line[104:124] == "Doe".ljust(20)
        assert line[124:148] == "ord_1".ljust(24)

    def test_annual_amount_right_justified(self):
        record = make_member_record(plan=SubscriptionPlan.ANNUAL, next_due_date=date(2026, 1, 10))
        line = ExtractEncoder.subscription_line(record)
        assert line[50:60] == "Annual    "
        assert line[76:84] == "  159.00"

    def test_overlong_value_truncated(self):
        long_email = ("x" * 60) + "@example.com"
        line = ExtractEncoder.subscription_line(make_member_record(email=long_email))
        assert len(line) == SDF_LINE_WIDTH
        assert line[0:50] == long_email[:50]
        assert line[50:60] == "Monthly   "

    def test_overlong_amount_keeps_rightmost(self):
        line = ExtractEncoder.subscription_line(make_member_record(payment_amount="1234567.89"))
        assert line[76:84] == "34567.89"

    def test_non_ascii_replaced(self):
        line = ExtractEncoder.subscription_line(make_member_record(first_name="Zoë"))
        assert len(line) == SDF_LINE_WIDTH
        assert line[84:104] == "Zo?".ljust(20)
        line.encode("ascii")


class TestFileNames:
    def test_eligibility_full_name(self):
        name = ExtractEncoder.eligibility_file_name("PARENT01", date(2025, 1, 10))
        assert name == "PARENT01011025_full.txt"

    def test_eligibility_delta_name(self):
        name = ExtractEncoder.eligibility_file_name("PARENT01", date(2025, 12, 31), ExtractMode.DELTA)
        assert name == "PARENT01123125_delta.txt"

    def test_subscription_name(self):
        assert ExtractEncoder.subscription_file_name("SHAREING", date(2026, 10, 19)) == "SHAREING101926_full.txt"


class TestWriteFiles:
    def test_eligibility_file_one_line_per_record(self, encoder):
        records = [
            make_member_record(email="a@example.com"),
            make_member_record(email="b@example.com"),
        ]

        path, count = encoder.write_eligibility_file(
            records, "PARENT01", generated_on=date(2025, 1, 10)
        )

        assert count == 2
        assert path.name == "PARENT01011025_full.txt"
        content = path.read_text()
        assert not content.endswith("\n")
        lines = content.split("\n")
        assert [line.split("|")[25] for line in lines] == ["a@example.com", "b@example.com"]

    def test_empty_eligibility_file(self, encoder):
        path, count = encoder.write_eligibility_file([], "PARENT01", generated_on=date(2025, 1, 10))
        assert count == 0
        assert path.read_text() == ""

    def test_subscription_file_only_active(self, encoder):
        records = [
            make_member_record(email="active@example.com", next_due_date=date(2025, 2, 10)),
            make_member_record(email="lapsed@example.com", next_due_date=date(2025, 1, 31)),
            make_member_record(email="due@example.com", next_due_date=date(2025, 2, 1)),
        ]

        path, count = encoder.write_subscription_file(records, "SHAREING", today=date(2025, 2, 1))

        assert count == 1
        assert path.name == "SHAREING020125_full.txt"
        lines = path.read_bytes().decode("ascii").split("\n")
        assert len(lines) == 1
        assert lines[0].startswith("active@example.com")
        assert len(lines[0]) == SDF_LINE_WIDTH

    def test_output_directory_created(self, encoder):
        assert not encoder.output_dir.exists()
        encoder.write_eligibility_file([make_member_record()], "P", generated_on=date(2025, 1, 1))
        assert encoder.output_dir.is_dir()
