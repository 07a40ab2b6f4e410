"""Explicit application state.

Holds every record collection loaded from a RecordStore. Collections are
never mutated in place: a change builds a new value and hands it to
``replace()``, which persists it immediately.
"""

import logging
from typing import Any, Dict, List

from pydantic import ValidationError

from foodtrace.core.errors import RecordValidationError
from foodtrace.schemas.records import (
    AppSettings,
    CatalogueProduct,
    CleaningArea,
    CleaningLog,
    InboundItem,
    ProductionLot,
    RefrigerationUnit,
    TemperatureReading,
)
from foodtrace.services.record_store import COLLECTIONS, RecordStore

logger = logging.getLogger(__name__)


class AppState:
    """All record collections plus the store they are persisted to."""

    def __init__(self, store: RecordStore, collections: Dict[str, Any]):
        missing = set(COLLECTIONS) - set(collections)
        if missing:
            raise ValueError(f"Missing collections: {sorted(missing)}")
        self.store = store
        self._collections = dict(collections)

    @classmethod
    def load(cls, store: RecordStore) -> "AppState":
        """Load every collection, seeding defaults that were not stored yet."""
        collections: Dict[str, Any] = {}
        for name in COLLECTIONS:
            value, found = store.load_with_status(name)
            if not found:
                store.save(name, value)
                logger.info(f"Seeded record collection '{name}' with its default")
            collections[name] = value
        return cls(store, collections)

    def get(self, name: str) -> Any:
        return self._collections[name]

    def replace(self, name: str, value: Any) -> None:
        """Swap a whole collection for a new value and persist it."""
        if name not in self._collections:
            raise KeyError(f"Unknown record collection: {name}")
        self.store.save(name, value)
        self._collections[name] = value

    def snapshot(self) -> Dict[str, Any]:
        """Shallow copy of all collections, keyed by collection name."""
        return dict(self._collections)

    @property
    def settings(self) -> AppSettings:
        return self._collections["settings"]

    @property
    def products(self) -> List[CatalogueProduct]:
        return self._collections["products"]

    @property
    def inbound(self) -> List[InboundItem]:
        return self._collections["inbound"]

    @property
    def lots(self) -> List[ProductionLot]:
        return self._collections["lots"]

    @property
    def lot_drafts(self) -> List[ProductionLot]:
        return self._collections["lot_drafts"]

    @property
    def temps(self) -> List[TemperatureReading]:
        return self._collections["temps"]

    @property
    def fridges(self) -> List[RefrigerationUnit]:
        return self._collections["fridges"]

    @property
    def cleaning_areas(self) -> List[CleaningArea]:
        return self._collections["cleaning_areas"]

    @property
    def cleaning_logs(self) -> List[CleaningLog]:
        return self._collections["cleaning_logs"]

    def update_settings(self, **changes: Any) -> AppSettings:
        """Validate and store new settings values.

        Raises RecordValidationError when a value is out of range (for
        instance a negative warning threshold); nothing is saved then.
        """
        merged = {**self.settings.model_dump(), **changes}
        try:
            updated = AppSettings.model_validate(merged)
        except ValidationError as e:
            raise RecordValidationError(f"Invalid settings: {e.errors()[0]['msg']}") from e
        self.replace("settings", updated)
        logger.info(f"Settings updated: {sorted(changes)}")
        return updated
