"""Notification API routes."""

from fastapi import APIRouter, Request

from foodtrace.core.rate_limit import limiter
from foodtrace.schemas.alerts import NotificationResult
from foodtrace.services.notification_service import notifications

router = APIRouter()


@router.post("/permission", response_model=NotificationResult)
@limiter.limit("10/minute")
def request_permission(request: Request):
    """Ask whether reminders can be pushed on this installation."""
    return notifications.request_permission()


@router.post("/test", response_model=NotificationResult)
@limiter.limit("5/minute")
def send_test(request: Request):
    return notifications.notify("FoodTrace", "Test notification")
