"""Temperature reminder API routes."""

from fastapi import APIRouter, Request

from foodtrace.api.deps import State
from foodtrace.core.clock import local_now
from foodtrace.core.rate_limit import limiter
from foodtrace.services.reminder_service import check_reminder, reminder_monitor
from foodtrace.services.scheduler_service import scheduler

router = APIRouter()


@router.get("/current")
@limiter.limit("120/minute")
def current_reminder(request: Request, state: State):
    """The reading currently due, or null when none is."""
    reminder = check_reminder(state.temps, state.settings, local_now())
    return {"reminder": reminder.model_dump() if reminder else None}


@router.get("/displayed")
@limiter.limit("120/minute")
def displayed_reminder(request: Request):
    """The reminder flag kept by the background poll."""
    current = reminder_monitor.current
    return {
        "reminder": current.model_dump() if current else None,
        "last_checked": reminder_monitor.last_checked,
    }


@router.post("/dismiss")
@limiter.limit("30/minute")
def dismiss_reminder(request: Request):
    """Hide the displayed reminder until the next poll finds it again."""
    reminder_monitor.dismiss()
    return {"reminder": None}


@router.get("/scheduler")
@limiter.limit("30/minute")
def scheduler_status(request: Request):
    """Status of the background reminder poll."""
    return {"running": scheduler.running, "tasks": scheduler.get_status()}
