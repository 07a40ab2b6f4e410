"""Temperature log API routes: refrigeration units and readings."""

import datetime as dt
from typing import Dict, Optional, Union

from fastapi import APIRouter, HTTPException, Query, Request, status
from pydantic import BaseModel, Field

from foodtrace.api.deps import State
from foodtrace.core.clock import local_today
from foodtrace.core.rate_limit import limiter
from foodtrace.core.responses import list_response
from foodtrace.schemas.records import RefrigerationUnit, Slot, TemperatureReading
from foodtrace.services.alert_engine import compliance_summary
from foodtrace.services.temperature_service import TemperatureService

router = APIRouter()


class UnitCreate(BaseModel):
    name: str
    min_temp: float = Field(allow_inf_nan=False)
    max_temp: float = Field(allow_inf_nan=False)


class UnitUpdate(BaseModel):
    name: Optional[str] = None
    min_temp: Optional[float] = Field(None, allow_inf_nan=False)
    max_temp: Optional[float] = Field(None, allow_inf_nan=False)


class ReadingCreate(BaseModel):
    date: Optional[dt.date] = None
    slot: Slot
    values: Dict[str, Union[float, str, None]] = {}
    note: str = ""
    corrective_actions: Dict[str, str] = {}


# ==================== UNITS ====================

@router.get("/units")
@limiter.limit("60/minute")
def list_units(request: Request, state: State):
    return list_response([u.model_dump(mode="json") for u in state.fridges])


@router.post("/units", response_model=RefrigerationUnit, status_code=status.HTTP_201_CREATED)
@limiter.limit("30/minute")
def add_unit(request: Request, body: UnitCreate, state: State):
    return TemperatureService(state).add_unit(body.name, body.min_temp, body.max_temp)


@router.put("/units/{unit_id}", response_model=RefrigerationUnit)
@limiter.limit("30/minute")
def update_unit(request: Request, unit_id: str, body: UnitUpdate, state: State):
    return TemperatureService(state).update_unit(unit_id, **body.model_dump())


@router.delete("/units/{unit_id}", status_code=status.HTTP_204_NO_CONTENT)
@limiter.limit("30/minute")
def remove_unit(request: Request, unit_id: str, state: State):
    TemperatureService(state).remove_unit(unit_id)


# ==================== READINGS ====================

@router.get("/readings")
@limiter.limit("60/minute")
def list_readings(request: Request, state: State, limit: Optional[int] = Query(None, ge=1)):
    """Reading history, newest first."""
    history = TemperatureService(state).history(limit)
    return list_response([t.model_dump(mode="json") for t in history], total=len(state.temps))


@router.get("/readings/{day}/{slot}")
@limiter.limit("60/minute")
def get_reading(request: Request, day: dt.date, slot: Slot, state: State):
    """The reading for one date and slot, with its compliance counts."""
    reading = TemperatureService(state).reading_for(day, slot)
    if reading is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No {slot.value} reading on {day.isoformat()}",
        )
    return {
        "reading": reading.model_dump(mode="json"),
        "summary": compliance_summary(reading.readings).model_dump(),
    }


@router.post("/readings", response_model=TemperatureReading)
@limiter.limit("30/minute")
def save_reading(request: Request, body: ReadingCreate, state: State):
    """Save a reading batch.

    Out-of-range values need an entry in ``corrective_actions`` keyed by
    unit id; otherwise the response is 409 listing the units concerned.
    """
    return TemperatureService(state).save_reading(
        body.date or local_today(),
        body.slot,
        body.values,
        note=body.note,
        corrective_actions=body.corrective_actions,
    )
