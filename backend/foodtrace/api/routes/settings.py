"""Settings API routes."""

from typing import Optional

from fastapi import APIRouter, Request
from pydantic import BaseModel

from foodtrace.api.deps import State
from foodtrace.core.rate_limit import limiter
from foodtrace.schemas.records import AppSettings

router = APIRouter()


class SettingsUpdate(BaseModel):
    company: Optional[str] = None
    operator: Optional[str] = None
    temp_morning: Optional[str] = None
    temp_evening: Optional[str] = None
    dlc_warn_days: Optional[int] = None


@router.get("/", response_model=AppSettings)
@limiter.limit("60/minute")
def read_settings(request: Request, state: State):
    """Get the settings document."""
    return state.settings


@router.put("/", response_model=AppSettings)
@limiter.limit("30/minute")
def update_settings(request: Request, body: SettingsUpdate, state: State):
    """Update some settings; omitted fields keep their value."""
    return state.update_settings(**body.model_dump(exclude_none=True))
