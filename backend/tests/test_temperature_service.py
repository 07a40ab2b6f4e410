"""Tests for refrigeration units and two-phase temperature reading saves."""

import pytest

from foodtrace.core.errors import (
    CorrectiveActionRequired,
    RecordNotFoundError,
    RecordValidationError,
)
from foodtrace.schemas.records import Slot
from foodtrace.services.app_state import AppState
from foodtrace.services.temperature_service import TemperatureService


@pytest.fixture
def temps(state: AppState) -> TemperatureService:
    return TemperatureService(state)


@pytest.fixture
def units(state: AppState):
    """Default units by name."""
    return {u.name: u for u in state.fridges}


class TestUnits:
    """Tests for refrigeration unit management."""

    def test_add_unit(self, temps: TemperatureService, state: AppState):
        unit = temps.add_unit("Display fridge", 2, 6)
        assert state.fridges[0] == unit
        assert len(state.fridges) == 4

    def test_min_above_max_rejected(self, temps: TemperatureService, state: AppState):
        with pytest.raises(RecordValidationError):
            temps.add_unit("Broken", 8, 2)
        assert len(state.fridges) == 3

    @pytest.mark.parametrize("low, high", [(float("nan"), 4), (float("-inf"), 4), (0, float("inf"))])
    def test_non_finite_band_rejected(self, temps: TemperatureService, state: AppState, low, high):
        temps.add_unit("Display fridge", 2, 6)
        with pytest.raises(RecordValidationError):
            temps.add_unit("Broken", low, high)
        with pytest.raises(RecordValidationError):
            temps.update_unit(state.fridges[0].id, max_temp=float("nan"))

        # Configured units survive a reload
        reloaded = AppState.load(state.store)
        assert [u.name for u in reloaded.fridges][0] == "Display fridge"
        assert len(reloaded.fridges) == 4

    def test_name_required(self, temps: TemperatureService):
        with pytest.raises(RecordValidationError):
            temps.add_unit("", 0, 4)

    def test_update_unit(self, temps: TemperatureService, units):
        unit = units["Cold room +"]
        updated = temps.update_unit(unit.id, max_temp=5)
        assert updated.id == unit.id
        assert (updated.min_temp, updated.max_temp) == (0, 5)
        with pytest.raises(RecordValidationError):
            temps.update_unit(unit.id, min_temp=10)

    def test_remove_unit(self, temps: TemperatureService, units, state: AppState):
        temps.remove_unit(units["Drying room"].id)
        assert [u.name for u in state.fridges] == ["Cold room +", "Cold room -"]
        with pytest.raises(RecordNotFoundError):
            temps.remove_unit(units["Drying room"].id)


class TestSaveReading:
    """Tests for the corrective-action gate and date/slot upsert."""

    def test_all_compliant(self, temps: TemperatureService, units, today):
        values = {units["Cold room +"].id: "2", units["Cold room -"].id: "-20", units["Drying room"].id: "14"}
        entry = temps.save_reading(today, Slot.MORNING, values)
        assert all(r.ok for r in entry.readings)
        assert temps.reading_for(today, Slot.MORNING) == entry

    def test_out_of_range_without_action_not_saved(self, temps: TemperatureService, units, state, today):
        values = {units["Cold room +"].id: "5.2"}
        with pytest.raises(CorrectiveActionRequired) as exc_info:
            temps.save_reading(today, Slot.MORNING, values)
        assert exc_info.value.unit_ids == [units["Cold room +"].id]
        assert "Cold room +" in str(exc_info.value)
        assert state.temps == []

    def test_out_of_range_with_action(self, temps: TemperatureService, units, today):
        unit = units["Cold room +"]
        entry = temps.save_reading(
            today, Slot.MORNING, {unit.id: "5.2"},
            corrective_actions={unit.id: "Door closed, rechecked at 4.0"},
        )
        reading = entry.readings[0]
        assert reading.ok is False
        assert reading.corrective_action == "Door closed, rechecked at 4.0"

    def test_ask_callback(self, temps: TemperatureService, units, today):
        unit = units["Cold room -"]
        asked = []

        def ask(reading):
            asked.append(reading.unit_name)
            return "Defrost cycle"

        entry = temps.save_reading(today, Slot.EVENING, {unit.id: "-10"}, ask=ask)
        assert asked == ["Cold room -"]
        by_unit = {r.unit_id: r for r in entry.readings}
        assert by_unit[unit.id].corrective_action == "Defrost cycle"

    def test_ask_callback_declining(self, temps: TemperatureService, units, state, today):
        unit = units["Cold room -"]
        with pytest.raises(CorrectiveActionRequired):
            temps.save_reading(today, Slot.EVENING, {unit.id: "-10"}, ask=lambda r: "  ")
        assert state.temps == []

    def test_missing_values_not_recorded(self, temps: TemperatureService, units, today):
        entry = temps.save_reading(today, Slot.MORNING, {units["Cold room +"].id: "3"})
        assert len(entry.readings) == 3
        recorded = [r for r in entry.readings if r.recorded]
        assert len(recorded) == 1
        assert all(r.ok is None for r in entry.readings if not r.recorded)

    def test_unknown_unit_rejected(self, temps: TemperatureService, today):
        with pytest.raises(RecordValidationError):
            temps.save_reading(today, Slot.MORNING, {"nope": "3"})

    def test_upsert_by_date_and_slot(self, temps: TemperatureService, units, state, today):
        unit = units["Cold room +"]
        first = temps.save_reading(today, Slot.MORNING, {unit.id: "2"})
        temps.save_reading(today, Slot.EVENING, {unit.id: "3"})
        second = temps.save_reading(today, Slot.MORNING, {unit.id: "1"}, note="Recheck")
        assert second.id == first.id
        assert len(state.temps) == 2
        morning = temps.reading_for(today, Slot.MORNING)
        assert morning.note == "Recheck"
        assert morning.readings[0].value == 1.0
        # Replaced in place, the evening entry stays first
        assert state.temps[0].slot == Slot.EVENING

    def test_band_snapshot_survives_unit_change(self, temps: TemperatureService, units, today):
        unit = units["Cold room +"]
        temps.save_reading(today, Slot.MORNING, {unit.id: "3"})
        temps.update_unit(unit.id, max_temp=2)
        reading = temps.reading_for(today, Slot.MORNING).readings[0]
        assert reading.max_temp == 4
        assert reading.ok is True

    def test_history_limit(self, temps: TemperatureService, units, today):
        unit = units["Cold room +"]
        temps.save_reading(today, Slot.MORNING, {unit.id: "2"})
        temps.save_reading(today, Slot.EVENING, {unit.id: "2"})
        assert len(temps.history()) == 2
        assert [t.slot for t in temps.history(1)] == [Slot.EVENING]
