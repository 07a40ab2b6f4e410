"""Temperature log service: refrigeration units and reading batches.

Saving a reading batch is two-phase. Every unit is evaluated first; out
of band readings then need a corrective-action note, taken from the
``corrective_actions`` mapping or asked for through the ``ask`` callback.
Only when every note is present is the batch committed, replacing any
existing reading for the same date and slot.
"""

import logging
from datetime import date, datetime, timezone
from typing import Callable, List, Mapping, Optional

from foodtrace.core.errors import (
    CorrectiveActionRequired,
    RecordNotFoundError,
    RecordValidationError,
)
from foodtrace.schemas.records import RefrigerationUnit, Slot, TemperatureReading, UnitReading, new_id
from foodtrace.services.alert_engine import RawValue, evaluate_reading, requires_corrective_action
from foodtrace.services.app_state import AppState

logger = logging.getLogger(__name__)

AskCorrectiveAction = Callable[[UnitReading], Optional[str]]


class TemperatureService:
    """Cold-chain records for the configured refrigeration units."""

    def __init__(self, state: AppState):
        self.state = state

    # ==================== REFRIGERATION UNITS ====================

    def add_unit(self, name: str, min_temp: float, max_temp: float) -> RefrigerationUnit:
        if not name or not name.strip():
            raise RecordValidationError("Unit name is required", field="name")
        unit = self._build_unit(name=name.strip(), min_temp=min_temp, max_temp=max_temp)
        self.state.replace("fridges", [unit, *self.state.fridges])
        logger.info(f"Added refrigeration unit {unit.name} ({unit.min_temp}..{unit.max_temp} C)")
        return unit

    def update_unit(
        self,
        unit_id: str,
        name: Optional[str] = None,
        min_temp: Optional[float] = None,
        max_temp: Optional[float] = None,
    ) -> RefrigerationUnit:
        current = self.get_unit(unit_id)
        updated = self._build_unit(
            id=current.id,
            name=name.strip() if name and name.strip() else current.name,
            min_temp=current.min_temp if min_temp is None else min_temp,
            max_temp=current.max_temp if max_temp is None else max_temp,
        )
        self.state.replace(
            "fridges", [updated if u.id == unit_id else u for u in self.state.fridges]
        )
        return updated

    def remove_unit(self, unit_id: str) -> None:
        self.get_unit(unit_id)
        self.state.replace("fridges", [u for u in self.state.fridges if u.id != unit_id])

    def get_unit(self, unit_id: str) -> RefrigerationUnit:
        for unit in self.state.fridges:
            if unit.id == unit_id:
                return unit
        raise RecordNotFoundError("fridges", unit_id)

    # ==================== READINGS ====================

    def evaluate(self, values: Mapping[str, RawValue]) -> List[UnitReading]:
        """Evaluate entered values against every current unit, in unit order."""
        known = {u.id for u in self.state.fridges}
        unknown = sorted(set(values) - known)
        if unknown:
            raise RecordValidationError(f"Unknown refrigeration units: {unknown}", field="values")
        return [evaluate_reading(unit, values.get(unit.id)) for unit in self.state.fridges]

    def save_reading(
        self,
        day: date,
        slot: Slot,
        values: Mapping[str, RawValue],
        note: str = "",
        corrective_actions: Optional[Mapping[str, str]] = None,
        ask: Optional[AskCorrectiveAction] = None,
    ) -> TemperatureReading:
        """Validate, collect corrective actions, then upsert the batch.

        Raises CorrectiveActionRequired, without saving anything, when an
        out-of-band reading is left without a note.
        """
        readings = self.evaluate(values)
        readings = self._collect_corrective_actions(readings, corrective_actions or {}, ask)

        missing = [r for r in readings if requires_corrective_action(r)]
        if missing:
            raise CorrectiveActionRequired(
                [r.unit_id for r in missing], [r.unit_name for r in missing]
            )

        existing = self.reading_for(day, slot)
        entry = TemperatureReading(
            id=existing.id if existing else new_id(),
            date=day,
            slot=slot,
            created_at=datetime.now(timezone.utc),
            note=(note or "").strip(),
            readings=readings,
        )
        if existing:
            temps = [entry if t.id == existing.id else t for t in self.state.temps]
        else:
            temps = [entry, *self.state.temps]
        self.state.replace("temps", temps)

        bad = sum(1 for r in readings if r.ok is False)
        if bad:
            logger.warning(f"Temperature reading {day} {slot.value}: {bad} unit(s) out of range")
        logger.info(
            f"{'Replaced' if existing else 'Saved'} temperature reading {day} {slot.value}"
        )
        return entry

    def reading_for(self, day: date, slot: Slot) -> Optional[TemperatureReading]:
        for reading in self.state.temps:
            if reading.date == day and reading.slot == slot:
                return reading
        return None

    def history(self, limit: Optional[int] = None) -> List[TemperatureReading]:
        temps = list(self.state.temps)
        return temps[:limit] if limit else temps

    @staticmethod
    def _collect_corrective_actions(
        readings: List[UnitReading],
        supplied: Mapping[str, str],
        ask: Optional[AskCorrectiveAction],
    ) -> List[UnitReading]:
        collected: List[UnitReading] = []
        for reading in readings:
            if reading.ok is not False:
                collected.append(reading)
                continue
            action = (supplied.get(reading.unit_id) or "").strip()
            if not action and ask is not None:
                action = (ask(reading) or "").strip()
            collected.append(reading.model_copy(update={"corrective_action": action}))
        return collected

    @staticmethod
    def _build_unit(**fields) -> RefrigerationUnit:
        try:
            return RefrigerationUnit(**fields)
        except ValueError as e:
            raise RecordValidationError(f"Invalid refrigeration unit: {e}") from e
