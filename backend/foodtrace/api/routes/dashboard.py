"""Dashboard API route: today's alerts in one call."""

from fastapi import APIRouter, Request

from foodtrace.api.deps import State
from foodtrace.core.clock import local_now
from foodtrace.core.rate_limit import limiter
from foodtrace.schemas.alerts import Dashboard
from foodtrace.services.alert_engine import cleaning_due, expiry_alerts
from foodtrace.services.production_service import ProductionService
from foodtrace.services.reminder_service import check_reminder

router = APIRouter()


@router.get("/", response_model=Dashboard)
@limiter.limit("60/minute")
def get_dashboard(request: Request, state: State):
    """Expiry alerts, cleaning due, lots made today and the pending reminder."""
    now = local_now()
    today = now.date()
    return Dashboard(
        today=today,
        company=state.settings.company,
        expiry_alerts=expiry_alerts(state.inbound, state.settings.dlc_warn_days, today),
        cleaning_due=cleaning_due(state.cleaning_areas, state.cleaning_logs, today),
        lots_today=len(ProductionService(state).lots_on(today)),
        reminder=check_reminder(state.temps, state.settings, now),
    )
