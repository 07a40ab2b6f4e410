"""Cleaning plan service: areas and their done-on-date logs."""

import logging
from datetime import date, datetime, timezone
from typing import List, Union

from foodtrace.core.errors import RecordNotFoundError, RecordValidationError
from foodtrace.schemas.alerts import CleaningStatus
from foodtrace.schemas.records import CleaningArea, CleaningLog, Frequency
from foodtrace.services.alert_engine import cleaning_due, is_cleaning_due, last_done_by_area
from foodtrace.services.app_state import AppState

logger = logging.getLogger(__name__)


def parse_frequency(value: Union[str, Frequency, None]) -> Frequency:
    """Frequency from free input; anything unrecognised means DAILY."""
    if isinstance(value, Frequency):
        return value
    try:
        return Frequency((value or "").strip().upper())
    except ValueError:
        logger.debug(f"Unknown cleaning frequency {value!r}, using DAILY")
        return Frequency.DAILY


class CleaningService:
    """Cleaning areas and the daily done/not-done toggles."""

    def __init__(self, state: AppState):
        self.state = state

    def add_area(self, name: str, frequency: Union[str, Frequency, None] = None) -> CleaningArea:
        if not name or not name.strip():
            raise RecordValidationError("Area name is required", field="name")
        area = CleaningArea(name=name.strip(), frequency=parse_frequency(frequency))
        self.state.replace("cleaning_areas", [*self.state.cleaning_areas, area])
        logger.info(f"Added cleaning area {area.name} ({area.frequency.value})")
        return area

    def remove_area(self, area_id: str) -> None:
        """Drop an area. Its past logs are kept for the record."""
        self.get_area(area_id)
        self.state.replace(
            "cleaning_areas", [a for a in self.state.cleaning_areas if a.id != area_id]
        )
        logger.info(f"Removed cleaning area {area_id}")

    def get_area(self, area_id: str) -> CleaningArea:
        for area in self.state.cleaning_areas:
            if area.id == area_id:
                return area
        raise RecordNotFoundError("cleaning_areas", area_id)

    def toggle_done(self, area_id: str, day: date) -> bool:
        """Flip the done flag of an area for ``day`` and return the new flag."""
        area = self.get_area(area_id)
        logs = self.state.cleaning_logs
        existing = [log for log in logs if log.area_id == area_id and log.date == day]
        if existing:
            self.state.replace(
                "cleaning_logs",
                [log for log in logs if not (log.area_id == area_id and log.date == day)],
            )
            logger.info(f"Cleaning of {area.name} on {day} undone")
            return False

        log = CleaningLog(area_id=area_id, date=day, created_at=datetime.now(timezone.utc))
        self.state.replace("cleaning_logs", [log, *logs])
        logger.info(f"Cleaning of {area.name} on {day} done")
        return True

    def done_on(self, day: date) -> List[str]:
        """Ids of the areas cleaned on ``day``."""
        return [log.area_id for log in self.state.cleaning_logs if log.date == day]

    def due(self, day: date) -> List[CleaningArea]:
        return cleaning_due(self.state.cleaning_areas, self.state.cleaning_logs, day)

    def statuses(self, day: date) -> List[CleaningStatus]:
        """Per-area view for the checklist screen."""
        last = last_done_by_area(self.state.cleaning_logs)
        done = set(self.done_on(day))
        return [
            CleaningStatus(
                area=area,
                last_done=last.get(area.id),
                done=area.id in done,
                due=is_cleaning_due(area, last.get(area.id), day),
            )
            for area in self.state.cleaning_areas
        ]
