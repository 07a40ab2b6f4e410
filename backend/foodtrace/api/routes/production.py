"""Production API routes: lot drafts, components and history."""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Query, Request, status
from pydantic import BaseModel

from foodtrace.api.deps import State
from foodtrace.core.clock import local_now
from foodtrace.core.rate_limit import limiter
from foodtrace.core.responses import list_response
from foodtrace.schemas.records import ComponentType, ProductionLot
from foodtrace.services.production_service import ProductionService

router = APIRouter()


class LotCreate(BaseModel):
    finished_name: str
    quantity: str = ""
    expiry: Optional[date] = None
    operator: Optional[str] = None


class ComponentCreate(BaseModel):
    type: ComponentType = ComponentType.INGREDIENT
    name: str = ""
    brand: str = ""
    lot_number: str = ""
    expiry: Optional[date] = None
    photo: str = ""
    inbound_id: Optional[str] = None


# ==================== DRAFTS ====================

@router.get("/drafts")
@limiter.limit("60/minute")
def list_drafts(request: Request, state: State):
    return list_response([lot.model_dump(mode="json") for lot in state.lot_drafts])


@router.post("/drafts", response_model=ProductionLot, status_code=status.HTTP_201_CREATED)
@limiter.limit("30/minute")
def start_lot(request: Request, body: LotCreate, state: State):
    """Open a new lot and assign its code."""
    return ProductionService(state).start_lot(now=local_now(), **body.model_dump())


@router.get("/drafts/{lot_id}", response_model=ProductionLot)
@limiter.limit("60/minute")
def get_draft(request: Request, lot_id: str, state: State):
    return ProductionService(state).get_draft(lot_id)


@router.post("/drafts/{lot_id}/components", response_model=ProductionLot)
@limiter.limit("60/minute")
def add_component(request: Request, lot_id: str, body: ComponentCreate, state: State):
    """Add a component by hand or from an in-stock inbound lot."""
    return ProductionService(state).add_component(lot_id, **body.model_dump())


@router.delete("/drafts/{lot_id}/components/{component_id}", response_model=ProductionLot)
@limiter.limit("60/minute")
def remove_component(request: Request, lot_id: str, component_id: str, state: State):
    return ProductionService(state).remove_component(lot_id, component_id)


@router.post("/drafts/{lot_id}/finalize", response_model=ProductionLot)
@limiter.limit("30/minute")
def finalize_lot(request: Request, lot_id: str, state: State):
    """Save the lot to the history. It can no longer be edited."""
    return ProductionService(state).finalize_lot(lot_id)


@router.delete("/drafts/{lot_id}", status_code=status.HTTP_204_NO_CONTENT)
@limiter.limit("30/minute")
def discard_lot(request: Request, lot_id: str, state: State):
    ProductionService(state).discard_lot(lot_id)


# ==================== HISTORY ====================

@router.get("/lots")
@limiter.limit("60/minute")
def list_lots(request: Request, state: State, day: Optional[date] = Query(None)):
    """Finalized lots, newest first; ``day`` restricts to one date."""
    lots = ProductionService(state).lots_on(day) if day else state.lots
    return list_response([lot.model_dump(mode="json") for lot in lots])


@router.get("/lots/{lot_id}", response_model=ProductionLot)
@limiter.limit("60/minute")
def get_lot(request: Request, lot_id: str, state: State):
    return ProductionService(state).get_lot(lot_id)
