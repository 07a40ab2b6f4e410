"""Inbound stock service: receipt of ingredient and packaging lots."""

import logging
from datetime import date, datetime, timezone
from typing import List, Optional

from foodtrace.core.errors import RecordNotFoundError, RecordValidationError, StatusTransitionError
from foodtrace.schemas.records import CatalogueProduct, InboundItem, InboundStatus
from foodtrace.services.app_state import AppState

logger = logging.getLogger(__name__)


class InboundService:
    """Receive inbound lots and track their stock status."""

    def __init__(self, state: AppState):
        self.state = state

    def receive(
        self,
        name: str,
        brand: str = "",
        supplier: str = "",
        lot_number: str = "",
        expiry: Optional[date] = None,
        photo: str = "",
    ) -> InboundItem:
        """Record a received lot as IN_STOCK and keep the catalogue in sync."""
        if not name or not name.strip():
            raise RecordValidationError("Product name is required", field="name")

        item = InboundItem(
            created_at=datetime.now(timezone.utc),
            name=name.strip(),
            brand=(brand or "").strip(),
            supplier=(supplier or "").strip(),
            lot_number=(lot_number or "").strip(),
            expiry=expiry,
            status=InboundStatus.IN_STOCK,
            photo=photo or "",
        )
        self.state.replace("inbound", [item, *self.state.inbound])

        known = any(
            p.name == item.name and p.brand == item.brand for p in self.state.products
        )
        if not known:
            product = CatalogueProduct(name=item.name, brand=item.brand, supplier=item.supplier)
            self.state.replace("products", [product, *self.state.products])
            logger.info(f"Added catalogue product {product.name!r} ({product.brand or 'no brand'})")

        logger.info(f"Received inbound lot {item.id}: {item.name} lot={item.lot_number or '?'}")
        return item

    def get(self, item_id: str) -> InboundItem:
        for item in self.state.inbound:
            if item.id == item_id:
                return item
        raise RecordNotFoundError("inbound", item_id)

    def mark_status(self, item_id: str, status: InboundStatus) -> InboundItem:
        """Move an item out of stock.

        Status only ever moves away from IN_STOCK; asking to go back raises
        StatusTransitionError. Setting the current status again is a no-op.
        """
        current = self.get(item_id)
        if current.status == status:
            return current
        if status == InboundStatus.IN_STOCK:
            raise StatusTransitionError(item_id, current.status.value, status.value)

        updated = current.model_copy(update={"status": status})
        self.state.replace(
            "inbound",
            [updated if x.id == item_id else x for x in self.state.inbound],
        )
        logger.info(f"Inbound lot {item_id} marked {status.value}")
        return updated

    def in_stock(self) -> List[InboundItem]:
        return [x for x in self.state.inbound if x.status == InboundStatus.IN_STOCK]

    def search(self, query: str = "") -> List[InboundItem]:
        """Case-insensitive match on name, brand, supplier and lot number."""
        q = (query or "").strip().lower()
        if not q:
            return list(self.state.inbound)
        return [
            x
            for x in self.state.inbound
            if any(q in (v or "").lower() for v in (x.name, x.brand, x.supplier, x.lot_number))
        ]
