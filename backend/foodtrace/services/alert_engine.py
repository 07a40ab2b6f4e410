"""
Due/Alert Engine
================
Pure computations over the record collections:

- expiry (DLC/DDM) alerting for in-stock inbound lots
- temperature compliance of refrigeration unit readings
- cleaning-due scheduling per recurrence frequency

Nothing here reads the clock or the store. Callers pass the reference
date and the current collections, and results are rebuilt on every call.
"""

import math
from datetime import date
from typing import Dict, Iterable, List, Optional, Sequence, Union

from foodtrace.schemas.alerts import ComplianceSummary, ExpiryAlert
from foodtrace.schemas.records import (
    CleaningArea,
    CleaningLog,
    Frequency,
    InboundItem,
    InboundStatus,
    RefrigerationUnit,
    UnitReading,
)

WEEKLY_INTERVAL_DAYS = 7

RawValue = Union[str, int, float, None]


# ==================== EXPIRY ALERTS ====================

def days_until(expiry: Optional[date], today: date) -> Optional[int]:
    """Whole calendar days from ``today`` to ``expiry``.

    Negative once the date has passed, None when there is no expiry date.
    """
    if expiry is None:
        return None
    return (expiry - today).days


def expiry_alerts(
    items: Iterable[InboundItem], warn_days: int, today: date
) -> List[ExpiryAlert]:
    """In-stock items expiring within ``warn_days``, soonest first.

    Items without an expiry date are never alerted. With ``warn_days`` of 0
    only items expiring today or already expired are returned.
    """
    alerts: List[ExpiryAlert] = []
    for item in items:
        if item.status != InboundStatus.IN_STOCK:
            continue
        days_left = days_until(item.expiry, today)
        if days_left is None or days_left > warn_days:
            continue
        alerts.append(ExpiryAlert(**item.model_dump(), days_left=days_left))

    alerts.sort(key=lambda a: a.days_left)
    return alerts


# ==================== TEMPERATURE COMPLIANCE ====================

def parse_observed_value(raw: RawValue) -> Optional[float]:
    """Turn an entered value into a temperature.

    Empty, non-numeric and non-finite input all mean "not recorded".
    """
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, str):
        text = raw.strip().replace(",", ".")
        if not text:
            return None
        try:
            value = float(text)
        except ValueError:
            return None
    else:
        value = float(raw)
    return value if math.isfinite(value) else None


def is_compliant(unit: RefrigerationUnit, value: Optional[float]) -> bool:
    """True when ``value`` is a finite number inside the unit's band."""
    if value is None or not math.isfinite(value):
        return False
    return unit.min_temp <= value <= unit.max_temp


def evaluate_reading(unit: RefrigerationUnit, raw: RawValue) -> UnitReading:
    """Snapshot a unit's band together with its observed value."""
    value = parse_observed_value(raw)
    return UnitReading(
        unit_id=unit.id,
        unit_name=unit.name,
        min_temp=unit.min_temp,
        max_temp=unit.max_temp,
        value=value,
        ok=None if value is None else is_compliant(unit, value),
    )


def requires_corrective_action(reading: UnitReading) -> bool:
    """Recorded, out of band, and still without a corrective-action note."""
    return reading.ok is False and not reading.corrective_action.strip()


def compliance_summary(readings: Iterable[UnitReading]) -> ComplianceSummary:
    """Count compliant and non-compliant readings, skipping unrecorded ones."""
    summary = ComplianceSummary()
    for reading in readings:
        if reading.ok is None:
            continue
        summary.recorded += 1
        if reading.ok:
            summary.compliant += 1
        else:
            summary.non_compliant += 1
    return summary


# ==================== CLEANING SCHEDULE ====================

def last_done_by_area(logs: Iterable[CleaningLog]) -> Dict[str, date]:
    """Most recent log date for each area id."""
    last: Dict[str, date] = {}
    for log in logs:
        prev = last.get(log.area_id)
        if prev is None or log.date > prev:
            last[log.area_id] = log.date
    return last


def is_cleaning_due(area: CleaningArea, last_done: Optional[date], on: date) -> bool:
    """Whether ``area`` needs cleaning on date ``on``.

    DAILY areas are due unless done on that very date. WEEKLY areas become
    due 7 full days after the last clean. MONTHLY areas are due once the
    calendar month changes, not after a rolling 30 days.
    """
    if last_done is None:
        return True
    if area.frequency == Frequency.DAILY:
        return last_done != on
    if area.frequency == Frequency.WEEKLY:
        return (on - last_done).days >= WEEKLY_INTERVAL_DAYS
    if area.frequency == Frequency.MONTHLY:
        return (last_done.year, last_done.month) != (on.year, on.month)
    return False


def cleaning_due(
    areas: Sequence[CleaningArea], logs: Iterable[CleaningLog], on: date
) -> List[CleaningArea]:
    """Areas due on ``on``, keeping the areas' own order."""
    last = last_done_by_area(logs)
    return [area for area in areas if is_cleaning_due(area, last.get(area.id), on)]
