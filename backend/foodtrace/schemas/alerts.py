"""Derived views computed from the record collections.

Nothing here is persisted; each view is rebuilt on every request.
"""

from __future__ import annotations

import datetime as dt
from typing import List, Optional

from pydantic import BaseModel

from foodtrace.schemas.records import CleaningArea, InboundItem, Slot


class ExpiryAlert(InboundItem):
    """In-stock item close to (or past) its expiry date."""

    days_left: int


class ComplianceSummary(BaseModel):
    """Counts over recorded readings only."""

    recorded: int = 0
    compliant: int = 0
    non_compliant: int = 0


class CleaningStatus(BaseModel):
    area: CleaningArea
    last_done: Optional[dt.date] = None
    done: bool = False
    due: bool = True


class Reminder(BaseModel):
    type: str = "TEMP"
    slot: Slot


class NotificationResult(BaseModel):
    """Outcome of a notification request, always safe to show to the user."""

    delivered: bool
    message: str


class Dashboard(BaseModel):
    today: dt.date
    company: str
    expiry_alerts: List[ExpiryAlert]
    cleaning_due: List[CleaningArea]
    lots_today: int
    reminder: Optional[Reminder] = None
