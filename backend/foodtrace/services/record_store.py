"""Record store: persistence of named record collections.

Each collection is saved whole as one JSON document. Loading never raises
to the caller: an absent, corrupt or structurally invalid document falls
back to the collection's default value.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Tuple

from pydantic import TypeAdapter, ValidationError
from sqlalchemy.orm import Session

from foodtrace.models.record_document import RecordDocument
from foodtrace.schemas.records import (
    AppSettings,
    CatalogueProduct,
    CleaningArea,
    CleaningLog,
    Frequency,
    InboundItem,
    ProductionLot,
    RefrigerationUnit,
    TemperatureReading,
)

logger = logging.getLogger(__name__)


def _default_fridges() -> List[RefrigerationUnit]:
    return [
        RefrigerationUnit(name="Cold room +", min_temp=0, max_temp=4),
        RefrigerationUnit(name="Cold room -", min_temp=-22, max_temp=-18),
        RefrigerationUnit(name="Drying room", min_temp=12, max_temp=16),
    ]


def _default_cleaning_areas() -> List[CleaningArea]:
    return [
        CleaningArea(name="Stainless table", frequency=Frequency.DAILY),
        CleaningArea(name="Slicer", frequency=Frequency.DAILY),
        CleaningArea(name="Lab floor", frequency=Frequency.DAILY),
        CleaningArea(name="Drains", frequency=Frequency.WEEKLY),
    ]


@dataclass(frozen=True)
class CollectionSpec:
    """Type and default value of one named collection."""

    adapter: TypeAdapter
    default: Callable[[], Any]


COLLECTIONS: Dict[str, CollectionSpec] = {
    "settings": CollectionSpec(TypeAdapter(AppSettings), AppSettings),
    "products": CollectionSpec(TypeAdapter(List[CatalogueProduct]), list),
    "inbound": CollectionSpec(TypeAdapter(List[InboundItem]), list),
    "lots": CollectionSpec(TypeAdapter(List[ProductionLot]), list),
    "lot_drafts": CollectionSpec(TypeAdapter(List[ProductionLot]), list),
    "temps": CollectionSpec(TypeAdapter(List[TemperatureReading]), list),
    "fridges": CollectionSpec(TypeAdapter(List[RefrigerationUnit]), _default_fridges),
    "cleaning_areas": CollectionSpec(TypeAdapter(List[CleaningArea]), _default_cleaning_areas),
    "cleaning_logs": CollectionSpec(TypeAdapter(List[CleaningLog]), list),
}


class RecordStore:
    """Load/save record collections through a SQLAlchemy session."""

    def __init__(self, db: Session):
        self.db = db

    @staticmethod
    def spec(name: str) -> CollectionSpec:
        try:
            return COLLECTIONS[name]
        except KeyError:
            raise KeyError(f"Unknown record collection: {name}") from None

    def load(self, name: str) -> Any:
        """Load a collection, falling back to its default."""
        value, _ = self.load_with_status(name)
        return value

    def load_with_status(self, name: str) -> Tuple[Any, bool]:
        """Load a collection and report whether the stored document was used.

        Returns ``(value, found)``; ``found`` is False whenever the default
        was substituted.
        """
        spec = self.spec(name)
        doc = self.db.get(RecordDocument, name)
        if doc is None:
            logger.debug(f"No stored document for '{name}', using default")
            return spec.default(), False

        try:
            raw = json.loads(doc.payload)
            return spec.adapter.validate_python(raw), True
        except (json.JSONDecodeError, ValidationError) as e:
            logger.warning(f"Stored document '{name}' is unreadable, using default: {e}")
            return spec.default(), False

    def save(self, name: str, value: Any) -> None:
        """Replace a collection document with ``value``."""
        spec = self.spec(name)
        payload = spec.adapter.dump_json(value).decode("utf-8")

        doc = self.db.get(RecordDocument, name)
        if doc is None:
            self.db.add(RecordDocument(name=name, payload=payload))
        else:
            doc.payload = payload
        self.db.commit()
        logger.debug(f"Saved '{name}' ({len(payload)} bytes)")

