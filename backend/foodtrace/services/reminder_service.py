"""Temperature reminder check and the monitor that keeps it current."""

import logging
from datetime import datetime
from typing import Callable, Iterable, List, Optional, Tuple

from foodtrace.core.clock import hhmm, local_now
from foodtrace.db.session import SessionLocal
from foodtrace.schemas.alerts import Reminder
from foodtrace.schemas.records import AppSettings, Slot, TemperatureReading
from foodtrace.services.notification_service import notifications
from foodtrace.services.record_store import RecordStore

logger = logging.getLogger(__name__)


def check_reminder(
    temps: Iterable[TemperatureReading], settings: AppSettings, now: datetime
) -> Optional[Reminder]:
    """Which reading, if any, is overdue at ``now``.

    MORNING wins over EVENING: once the morning time has passed without a
    morning reading today, that is the reminder even late in the evening.
    """
    today = now.date()
    current = hhmm(now)
    done = {t.slot for t in temps if t.date == today}

    if current >= settings.temp_morning and Slot.MORNING not in done:
        return Reminder(slot=Slot.MORNING)
    if current >= settings.temp_evening and Slot.EVENING not in done:
        return Reminder(slot=Slot.EVENING)
    return None


def read_reminder_inputs(store: RecordStore) -> Tuple[List[TemperatureReading], AppSettings]:
    """Temperature records and settings, read without seeding or repairing."""
    return store.load("temps"), store.load("settings")


def _load_from_database() -> Tuple[List[TemperatureReading], AppSettings]:
    db = SessionLocal()
    try:
        return read_reminder_inputs(RecordStore(db))
    finally:
        db.close()


class ReminderMonitor:
    """Holds the reminder currently shown to the user.

    ``refresh`` is registered as a periodic scheduler task. It reads state
    through ``load`` each time so the check always sees the latest records.
    """

    def __init__(
        self,
        load: Callable[[], tuple],
        clock: Callable[[], datetime],
        on_reminder: Optional[Callable[[Reminder], None]] = None,
    ):
        self._load = load
        self._clock = clock
        self._on_reminder = on_reminder
        self.current: Optional[Reminder] = None
        self.last_checked: Optional[datetime] = None

    def refresh(self) -> Optional[Reminder]:
        temps, settings = self._load()
        now = self._clock()
        reminder = check_reminder(temps, settings, now)
        if reminder is not None and reminder != self.current:
            logger.info(f"Temperature reading due: {reminder.slot.value}")
            if self._on_reminder is not None:
                self._on_reminder(reminder)
        self.current = reminder
        self.last_checked = now
        return reminder

    def dismiss(self) -> None:
        """Hide the reminder until the next refresh finds it again."""
        self.current = None


# Global monitor polled by the scheduler and read by the reminders API
reminder_monitor = ReminderMonitor(
    _load_from_database, local_now, on_reminder=notifications.notify_reminder
)
