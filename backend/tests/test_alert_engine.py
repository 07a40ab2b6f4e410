"""Tests for expiry alerts, temperature compliance and cleaning due dates."""

import math
from datetime import date, datetime, timedelta, timezone

import pytest

from foodtrace.schemas.records import (
    CleaningArea,
    CleaningLog,
    Frequency,
    InboundItem,
    InboundStatus,
    RefrigerationUnit,
)
from foodtrace.services.alert_engine import (
    cleaning_due,
    compliance_summary,
    days_until,
    evaluate_reading,
    expiry_alerts,
    is_cleaning_due,
    is_compliant,
    last_done_by_area,
    parse_observed_value,
    requires_corrective_action,
)

TODAY = date(2024, 1, 10)


def _item(name, expiry=None, status=InboundStatus.IN_STOCK):
    return InboundItem(
        created_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
        name=name,
        expiry=expiry,
        status=status,
    )


def _log(area, day):
    return CleaningLog(area_id=area.id, date=day, created_at=datetime.now(timezone.utc))


@pytest.fixture
def cold_room():
    return RefrigerationUnit(name="Cold room +", min_temp=0, max_temp=4)


class TestExpiryAlerts:
    """Tests for DLC/DDM alerting on in-stock lots."""

    def test_days_until(self):
        assert days_until(TODAY + timedelta(days=3), TODAY) == 3
        assert days_until(TODAY - timedelta(days=2), TODAY) == -2
        assert days_until(None, TODAY) is None

    def test_within_threshold_included(self):
        items = [_item("Olives", TODAY + timedelta(days=3))]
        alerts = expiry_alerts(items, 7, TODAY)
        assert len(alerts) == 1
        assert alerts[0].days_left == 3
        assert alerts[0].name == "Olives"

    def test_beyond_threshold_excluded(self):
        items = [_item("Olives", TODAY + timedelta(days=3))]
        assert expiry_alerts(items, 2, TODAY) == []

    def test_expired_item_included_with_negative_days(self):
        alerts = expiry_alerts([_item("Old", TODAY - timedelta(days=1))], 7, TODAY)
        assert [a.days_left for a in alerts] == [-1]

    def test_zero_threshold_only_today_and_past(self):
        items = [
            _item("Today", TODAY),
            _item("Tomorrow", TODAY + timedelta(days=1)),
            _item("Past", TODAY - timedelta(days=5)),
        ]
        names = [a.name for a in expiry_alerts(items, 0, TODAY)]
        assert names == ["Past", "Today"]

    def test_missing_expiry_never_alerted(self):
        assert expiry_alerts([_item("No date")], 365, TODAY) == []

    def test_only_in_stock_items(self):
        items = [
            _item("Used", TODAY, InboundStatus.USED),
            _item("Out", TODAY, InboundStatus.OUT),
            _item("Stock", TODAY, InboundStatus.IN_STOCK),
        ]
        assert [a.name for a in expiry_alerts(items, 7, TODAY)] == ["Stock"]

    def test_sorted_soonest_first_and_stable(self):
        items = [
            _item("C", TODAY + timedelta(days=5)),
            _item("A", TODAY + timedelta(days=1)),
            _item("B1", TODAY + timedelta(days=2)),
            _item("B2", TODAY + timedelta(days=2)),
        ]
        assert [a.name for a in expiry_alerts(items, 7, TODAY)] == ["A", "B1", "B2", "C"]


class TestTemperatureCompliance:
    """Tests for reading evaluation against a unit's band."""

    @pytest.mark.parametrize("raw,expected", [
        ("3.5", 3.5),
        ("3,5", 3.5),
        (" -19 ", -19.0),
        (2, 2.0),
        ("", None),
        ("   ", None),
        ("abc", None),
        (None, None),
        ("nan", None),
        (float("inf"), None),
    ])
    def test_parse_observed_value(self, raw, expected):
        assert parse_observed_value(raw) == expected

    def test_band_edges_inclusive(self, cold_room):
        assert is_compliant(cold_room, 0)
        assert is_compliant(cold_room, 4)
        assert not is_compliant(cold_room, 4.01)
        assert not is_compliant(cold_room, -0.5)

    def test_non_finite_not_compliant(self, cold_room):
        assert not is_compliant(cold_room, None)
        assert not is_compliant(cold_room, math.nan)

    def test_out_of_range_reading(self, cold_room):
        reading = evaluate_reading(cold_room, "5.2")
        assert reading.value == 5.2
        assert reading.ok is False
        assert reading.unit_name == "Cold room +"
        assert (reading.min_temp, reading.max_temp) == (0, 4)
        assert requires_corrective_action(reading)

    def test_corrective_action_note_satisfies(self, cold_room):
        reading = evaluate_reading(cold_room, "5.2").model_copy(
            update={"corrective_action": "Door closed, product checked"}
        )
        assert not requires_corrective_action(reading)

    def test_blank_note_does_not_satisfy(self, cold_room):
        reading = evaluate_reading(cold_room, 9).model_copy(update={"corrective_action": "  "})
        assert requires_corrective_action(reading)

    def test_not_recorded_is_neither(self, cold_room):
        reading = evaluate_reading(cold_room, "")
        assert reading.value is None
        assert reading.ok is None
        assert not reading.recorded
        assert not requires_corrective_action(reading)

    def test_compliance_summary_skips_unrecorded(self, cold_room):
        readings = [
            evaluate_reading(cold_room, "2"),
            evaluate_reading(cold_room, "6"),
            evaluate_reading(cold_room, ""),
        ]
        summary = compliance_summary(readings)
        assert summary.recorded == 2
        assert summary.compliant == 1
        assert summary.non_compliant == 1


class TestCleaningDue:
    """Tests for cleaning recurrence rules."""

    def test_never_cleaned_is_due(self):
        for frequency in Frequency:
            area = CleaningArea(name="Area", frequency=frequency)
            assert is_cleaning_due(area, None, TODAY)

    def test_daily(self):
        area = CleaningArea(name="Table", frequency=Frequency.DAILY)
        assert not is_cleaning_due(area, TODAY, TODAY)
        assert is_cleaning_due(area, TODAY - timedelta(days=1), TODAY)

    def test_weekly_boundary(self):
        area = CleaningArea(name="Drains", frequency=Frequency.WEEKLY)
        done = TODAY
        assert not is_cleaning_due(area, done, done + timedelta(days=6))
        assert is_cleaning_due(area, done, done + timedelta(days=7))

    def test_monthly_follows_calendar_month(self):
        area = CleaningArea(name="Ceiling", frequency=Frequency.MONTHLY)
        assert not is_cleaning_due(area, date(2024, 1, 1), date(2024, 1, 31))
        assert is_cleaning_due(area, date(2024, 1, 31), date(2024, 2, 1))
        assert is_cleaning_due(area, date(2023, 2, 15), date(2024, 2, 15))

    def test_last_done_uses_latest_log(self):
        area = CleaningArea(name="Slicer")
        logs = [_log(area, date(2024, 1, 3)), _log(area, date(2024, 1, 8)), _log(area, date(2024, 1, 5))]
        assert last_done_by_area(logs) == {area.id: date(2024, 1, 8)}

    def test_cleaning_due_keeps_area_order(self):
        a = CleaningArea(name="A")
        b = CleaningArea(name="B", frequency=Frequency.WEEKLY)
        c = CleaningArea(name="C")
        logs = [_log(b, TODAY - timedelta(days=2)), _log(c, TODAY)]
        assert [x.name for x in cleaning_due([a, b, c], logs, TODAY)] == ["A"]
        assert [x.name for x in cleaning_due([c, a], [], TODAY)] == ["C", "A"]
