from datetime import date, datetime, time

from src.field_attendance.field_attendance.shifts.model import ShiftWindow


def test_day_shift_occurrence_is_same_day():
    shift = ShiftWindow.parse("08:00", "16:00")
    assert not shift.is_overnight
    assert shift.occurrence_start(datetime(2026, 3, 1, 7, 0)) == datetime(2026, 3, 1, 8, 0)
    assert shift.end_on(date(2026, 3, 1)) == datetime(2026, 3, 1, 16, 0)


def test_overnight_shift_early_morning_belongs_to_previous_day():
    shift = ShiftWindow(start_time=time(22, 0), end_time=time(6, 0))
    assert shift.is_overnight
    assert shift.work_date_for(datetime(2026, 3, 2, 3, 0)) == date(2026, 3, 1)
    assert shift.work_date_for(datetime(2026, 3, 2, 21, 0)) == date(2026, 3, 2)
    assert shift.end_on(date(2026, 3, 1)) == datetime(2026, 3, 2, 6, 0)
