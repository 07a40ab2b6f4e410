"""Cleaning plan API routes."""

import datetime as dt
from typing import Optional

from fastapi import APIRouter, Query, Request, status
from pydantic import BaseModel

from foodtrace.api.deps import State
from foodtrace.core.clock import local_today
from foodtrace.core.rate_limit import limiter
from foodtrace.core.responses import list_response
from foodtrace.schemas.records import CleaningArea
from foodtrace.services.cleaning_service import CleaningService

router = APIRouter()


class AreaCreate(BaseModel):
    name: str
    frequency: Optional[str] = None


class ToggleRequest(BaseModel):
    date: Optional[dt.date] = None


@router.get("/areas")
@limiter.limit("60/minute")
def list_areas(request: Request, state: State, day: Optional[dt.date] = Query(None)):
    """Areas with their done and due flags for ``day`` (default today)."""
    statuses = CleaningService(state).statuses(day or local_today())
    return list_response([s.model_dump(mode="json") for s in statuses])


@router.post("/areas", response_model=CleaningArea, status_code=status.HTTP_201_CREATED)
@limiter.limit("30/minute")
def add_area(request: Request, body: AreaCreate, state: State):
    return CleaningService(state).add_area(body.name, body.frequency)


@router.delete("/areas/{area_id}", status_code=status.HTTP_204_NO_CONTENT)
@limiter.limit("30/minute")
def remove_area(request: Request, area_id: str, state: State):
    CleaningService(state).remove_area(area_id)


@router.post("/areas/{area_id}/toggle")
@limiter.limit("60/minute")
def toggle_done(
    request: Request, area_id: str, state: State, body: Optional[ToggleRequest] = None
):
    """Tick or untick an area for the day."""
    day = (body.date if body else None) or local_today()
    done = CleaningService(state).toggle_done(area_id, day)
    return {"area_id": area_id, "date": day.isoformat(), "done": done}


@router.get("/due")
@limiter.limit("60/minute")
def list_due(request: Request, state: State, day: Optional[dt.date] = Query(None)):
    due = CleaningService(state).due(day or local_today())
    return list_response([a.model_dump(mode="json") for a in due])
