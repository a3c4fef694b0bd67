"""
Test: Fall 2025 schedule and due date helpers.
"""
import pytest

from canvas_wizard.services.dates import (
    format_date_and_time, format_long_date, format_short_date, format_time,
    input_date_value, input_time_value, normalize_due_date,
)
from canvas_wizard.services.schedule_service import generate_fall_2025_schedule


class TestSchedule:
    def test_is_fixed(self):
        assert generate_fall_2025_schedule() == generate_fall_2025_schedule()

    def test_header_and_breaks(self):
        schedule = generate_fall_2025_schedule()
        assert schedule.startswith("Fall 2025 Academic Schedule:")
        assert "Week 14 (Nov 25): Thanksgiving Break - No assignments" in schedule

    def test_sixteen_lines_after_header(self):
        lines = generate_fall_2025_schedule().splitlines()
        assert len(lines) == 17
        assert lines[1] == "Week 1 (Aug 26): Syllabus Quiz - Due: 2025-08-30T23:59:00-04:00"
        assert lines[-1] == "Finals Week: Final Exam - Due: 2025-12-13T23:59:00-04:00"

    def test_all_dates_use_canvas_offset(self):
        dues = [line.rsplit("Due: ", 1)[1] for line in generate_fall_2025_schedule().splitlines() if "Due: " in line]
        assert len(dues) == 15
        for due in dues:
            assert due.endswith("T23:59:00-04:00")
            assert normalize_due_date(due) == due


class TestNormalizeDueDate:
    def test_already_canonical(self):
        assert normalize_due_date("2025-09-15T23:59:00-04:00") == "2025-09-15T23:59:00-04:00"

    def test_utc_z_converted(self):
        assert normalize_due_date("2025-09-16T03:59:00.000Z") == "2025-09-15T23:59:00-04:00"

    def test_naive_taken_as_canvas_offset(self):
        assert normalize_due_date("2025-10-01T17:00") == "2025-10-01T17:00:00-04:00"

    def test_date_only(self):
        assert normalize_due_date("2025-10-01") == "2025-10-01T00:00:00-04:00"

    @pytest.mark.parametrize("value", ["", "   ", None, "tomorrow", "2025-13-01"])
    def test_invalid(self, value):
        with pytest.raises(ValueError):
            normalize_due_date(value)


class TestFormatting:
    DUE = "2025-09-06T23:59:00-04:00"

    def test_short(self):
        assert format_short_date(self.DUE) == "Sep 6, 2025"

    def test_long(self):
        assert format_long_date(self.DUE) == "Saturday, September 6, 2025"

    def test_time(self):
        assert format_time(self.DUE) == "11:59 PM"
        assert format_time("2025-09-06T09:05:00-04:00") == "9:05 AM"

    def test_date_and_time(self):
        assert format_date_and_time(self.DUE) == "Saturday, September 6, 2025 at 11:59 PM"

    def test_input_values(self):
        assert input_date_value(self.DUE) == "2025-09-06"
        assert input_time_value(self.DUE) == "23:59"
