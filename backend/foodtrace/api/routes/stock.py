"""Inbound stock API routes: receipt, status, search, catalogue and photos."""

from datetime import date
from typing import Optional

from fastapi import APIRouter, File, HTTPException, Query, Request, UploadFile, status
from pydantic import BaseModel

from foodtrace.api.deps import State
from foodtrace.core.config import settings
from foodtrace.core.rate_limit import limiter
from foodtrace.core.responses import list_response
from foodtrace.schemas.records import InboundItem, InboundStatus
from foodtrace.services.inbound_service import InboundService
from foodtrace.services.photo_service import to_data_uri

router = APIRouter()


class InboundCreate(BaseModel):
    name: str
    brand: str = ""
    supplier: str = ""
    lot_number: str = ""
    expiry: Optional[date] = None
    photo: str = ""


class StatusUpdate(BaseModel):
    status: InboundStatus


@router.get("/inbound")
@limiter.limit("60/minute")
def list_inbound(
    request: Request,
    state: State,
    q: str = Query("", description="Match on name, brand, supplier or lot number"),
):
    """List received lots, newest first, optionally filtered."""
    items = InboundService(state).search(q)
    return list_response([i.model_dump(mode="json") for i in items])


@router.get("/inbound/in-stock")
@limiter.limit("60/minute")
def list_in_stock(request: Request, state: State):
    """Lots that can still be used as production components."""
    items = InboundService(state).in_stock()
    return list_response([i.model_dump(mode="json") for i in items])


@router.post("/inbound", response_model=InboundItem, status_code=status.HTTP_201_CREATED)
@limiter.limit("30/minute")
def receive_inbound(request: Request, body: InboundCreate, state: State):
    """Record a received lot."""
    return InboundService(state).receive(**body.model_dump())


@router.get("/inbound/{item_id}", response_model=InboundItem)
@limiter.limit("60/minute")
def get_inbound(request: Request, item_id: str, state: State):
    return InboundService(state).get(item_id)


@router.patch("/inbound/{item_id}/status", response_model=InboundItem)
@limiter.limit("30/minute")
def update_inbound_status(request: Request, item_id: str, body: StatusUpdate, state: State):
    """Mark a lot USED or OUT."""
    return InboundService(state).mark_status(item_id, body.status)


@router.get("/catalogue")
@limiter.limit("60/minute")
def list_catalogue(request: Request, state: State):
    """Known (name, brand) products, for autocompletion."""
    return list_response([p.model_dump(mode="json") for p in state.products])


@router.post("/photos")
@limiter.limit("30/minute")
async def upload_photo(request: Request, file: UploadFile = File(...)):
    """Encode an uploaded photo as a data URI to attach to a record."""
    max_size = settings.max_upload_size_mb * 1024 * 1024
    content = await file.read()

    if len(content) > max_size:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"File too large. Maximum size is {settings.max_upload_size_mb}MB",
        )

    return {"photo": to_data_uri(content, file.content_type, file.filename)}
