"""Production lot service.

A lot starts as a draft (kept in ``lot_drafts``), collects components,
then is either finalized into the ``lots`` history or discarded. Once
finalized a lot is never edited again.
"""

import logging
import re
from datetime import date, datetime
from typing import List, Optional

from foodtrace.core.clock import hhmm
from foodtrace.core.errors import RecordNotFoundError, RecordValidationError
from foodtrace.schemas.records import Component, ComponentType, InboundStatus, ProductionLot
from foodtrace.services.app_state import AppState

logger = logging.getLogger(__name__)

LOT_CODE_PREFIX = "PF"
_LOT_CODE_PATTERN = re.compile(rf"^{LOT_CODE_PREFIX}-(\d{{8}})-(\d+)$")


def lot_code_for(day: date, sequence: int) -> str:
    """Lot code such as PF-20240110-003."""
    return f"{LOT_CODE_PREFIX}-{day.strftime('%Y%m%d')}-{sequence:03d}"


def next_sequence(lots: List[ProductionLot], day: date) -> int:
    """One past the highest sequence already used on ``day``."""
    stamp = day.strftime("%Y%m%d")
    highest = 0
    for lot in lots:
        match = _LOT_CODE_PATTERN.match(lot.lot_code)
        if match and match.group(1) == stamp:
            highest = max(highest, int(match.group(2)))
    return highest + 1


class ProductionService:
    """Create, fill and finalize finished-product lots."""

    def __init__(self, state: AppState):
        self.state = state

    # ==================== DRAFTS ====================

    def start_lot(
        self,
        finished_name: str,
        now: datetime,
        quantity: str = "",
        expiry: Optional[date] = None,
        operator: Optional[str] = None,
    ) -> ProductionLot:
        """Open a new in-progress lot with a code unique for its day."""
        if not finished_name or not finished_name.strip():
            raise RecordValidationError("Finished product name is required", field="finished_name")

        day = now.date()
        used = [*self.state.lots, *self.state.lot_drafts]
        lot = ProductionLot(
            lot_code=lot_code_for(day, next_sequence(used, day)),
            date=day,
            time=hhmm(now),
            finished_name=finished_name.strip(),
            quantity=(quantity or "").strip(),
            expiry=expiry,
            operator=(operator if operator is not None else self.state.settings.operator).strip(),
        )
        self.state.replace("lot_drafts", [lot, *self.state.lot_drafts])
        logger.info(f"Started lot {lot.lot_code} ({lot.finished_name})")
        return lot

    def get_draft(self, lot_id: str) -> ProductionLot:
        for lot in self.state.lot_drafts:
            if lot.id == lot_id:
                return lot
        raise RecordNotFoundError("lot_drafts", lot_id)

    def add_component(
        self,
        lot_id: str,
        type: ComponentType = ComponentType.INGREDIENT,
        name: str = "",
        brand: str = "",
        lot_number: str = "",
        expiry: Optional[date] = None,
        photo: str = "",
        inbound_id: Optional[str] = None,
    ) -> ProductionLot:
        """Append a component, optionally copied from an in-stock inbound lot."""
        draft = self.get_draft(lot_id)

        if inbound_id:
            source = next((x for x in self.state.inbound if x.id == inbound_id), None)
            if source is None:
                raise RecordNotFoundError("inbound", inbound_id)
            if source.status != InboundStatus.IN_STOCK:
                raise RecordValidationError(
                    f"Inbound lot {inbound_id} is {source.status.value}, not in stock",
                    field="inbound_id",
                )
            name, brand, lot_number, expiry = source.name, source.brand, source.lot_number, source.expiry
            photo = source.photo or photo

        if not name or not name.strip():
            raise RecordValidationError(
                "Component name is required (or pick a lot from stock)", field="name"
            )

        component = Component(
            type=type,
            name=name.strip(),
            brand=(brand or "").strip(),
            lot_number=(lot_number or "").strip(),
            expiry=expiry,
            photo=photo or "",
        )
        updated = draft.model_copy(update={"components": [*draft.components, component]})
        self._replace_draft(updated)
        logger.debug(f"Lot {draft.lot_code}: added {component.type.value} {component.name}")
        return updated

    def remove_component(self, lot_id: str, component_id: str) -> ProductionLot:
        draft = self.get_draft(lot_id)
        remaining = [c for c in draft.components if c.id != component_id]
        if len(remaining) == len(draft.components):
            raise RecordNotFoundError(f"components of {draft.lot_code}", component_id)
        updated = draft.model_copy(update={"components": remaining})
        self._replace_draft(updated)
        return updated

    def finalize_lot(self, lot_id: str) -> ProductionLot:
        """Move a draft to the front of the lot history."""
        draft = self.get_draft(lot_id)
        self.state.replace("lots", [draft, *self.state.lots])
        self.state.replace("lot_drafts", [x for x in self.state.lot_drafts if x.id != lot_id])
        logger.info(f"Finalized lot {draft.lot_code} with {len(draft.components)} components")
        return draft

    def discard_lot(self, lot_id: str) -> None:
        draft = self.get_draft(lot_id)
        self.state.replace("lot_drafts", [x for x in self.state.lot_drafts if x.id != lot_id])
        logger.info(f"Discarded lot {draft.lot_code}")

    # ==================== HISTORY ====================

    def get_lot(self, lot_id: str) -> ProductionLot:
        for lot in self.state.lots:
            if lot.id == lot_id:
                return lot
        raise RecordNotFoundError("lots", lot_id)

    def lots_on(self, day: date) -> List[ProductionLot]:
        return [lot for lot in self.state.lots if lot.date == day]

    def _replace_draft(self, updated: ProductionLot) -> None:
        self.state.replace(
            "lot_drafts",
            [updated if x.id == updated.id else x for x in self.state.lot_drafts],
        )
