"""Tests for inbound stock receipt and status tracking."""

from datetime import date

import pytest

from foodtrace.core.errors import RecordNotFoundError, RecordValidationError, StatusTransitionError
from foodtrace.schemas.records import InboundStatus
from foodtrace.services.app_state import AppState
from foodtrace.services.inbound_service import InboundService


@pytest.fixture
def inbound(state: AppState) -> InboundService:
    return InboundService(state)


class TestReceive:
    """Tests for receiving lots."""

    def test_receive_in_stock_and_prepended(self, inbound: InboundService, state: AppState):
        first = inbound.receive("Olives", brand="Lucques", lot_number="L1")
        second = inbound.receive("Salt", supplier="Salins")
        assert first.status == InboundStatus.IN_STOCK
        assert [x.id for x in state.inbound] == [second.id, first.id]
        assert first.created_at is not None

    def test_fields_trimmed(self, inbound: InboundService):
        item = inbound.receive("  Olives ", brand=" Lucques ", lot_number=" L1 ")
        assert (item.name, item.brand, item.lot_number) == ("Olives", "Lucques", "L1")

    def test_name_required(self, inbound: InboundService, state: AppState):
        with pytest.raises(RecordValidationError):
            inbound.receive("   ")
        assert state.inbound == []

    def test_photo_stored_verbatim(self, inbound: InboundService):
        item = inbound.receive("Olives", photo="data:image/png;base64,AAAA")
        assert item.photo == "data:image/png;base64,AAAA"

    def test_catalogue_gains_new_products_only(self, inbound: InboundService, state: AppState):
        inbound.receive("Olives", brand="Lucques")
        inbound.receive("Olives", brand="Lucques", lot_number="L2")
        inbound.receive("Olives", brand="Picholine")
        assert sorted((p.name, p.brand) for p in state.products) == [
            ("Olives", "Lucques"),
            ("Olives", "Picholine"),
        ]

    def test_persisted(self, inbound: InboundService, store):
        item = inbound.receive("Olives", expiry=date(2024, 2, 1))
        assert store.load("inbound")[0].expiry == date(2024, 2, 1)


class TestStatus:
    """Tests for one-directional status changes."""

    def test_mark_used_then_out(self, inbound: InboundService):
        item = inbound.receive("Olives")
        assert inbound.mark_status(item.id, InboundStatus.USED).status == InboundStatus.USED
        assert inbound.mark_status(item.id, InboundStatus.OUT).status == InboundStatus.OUT

    def test_back_to_stock_rejected(self, inbound: InboundService):
        item = inbound.receive("Olives")
        inbound.mark_status(item.id, InboundStatus.USED)
        with pytest.raises(StatusTransitionError):
            inbound.mark_status(item.id, InboundStatus.IN_STOCK)
        assert inbound.get(item.id).status == InboundStatus.USED

    def test_same_status_is_noop(self, inbound: InboundService):
        item = inbound.receive("Olives")
        assert inbound.mark_status(item.id, InboundStatus.IN_STOCK) == item

    def test_unknown_item(self, inbound: InboundService):
        with pytest.raises(RecordNotFoundError):
            inbound.mark_status("missing", InboundStatus.OUT)

    def test_in_stock_list(self, inbound: InboundService):
        a = inbound.receive("A")
        b = inbound.receive("B")
        inbound.mark_status(a.id, InboundStatus.OUT)
        assert [x.id for x in inbound.in_stock()] == [b.id]


class TestSearch:
    """Tests for inbound search."""

    def test_matches_any_field_case_insensitive(self, inbound: InboundService):
        inbound.receive("Olives", brand="Lucques", supplier="Moulin", lot_number="AB12")
        inbound.receive("Salt", supplier="Salins")
        assert [x.name for x in inbound.search("lucq")] == ["Olives"]
        assert [x.name for x in inbound.search("MOULIN")] == ["Olives"]
        assert [x.name for x in inbound.search("ab1")] == ["Olives"]
        assert [x.name for x in inbound.search("sal")] == ["Salt"]

    def test_empty_query_returns_all(self, inbound: InboundService):
        inbound.receive("A")
        inbound.receive("B")
        assert len(inbound.search("")) == 2
        assert inbound.search("zzz") == []
