# Services module

from foodtrace.services.app_state import AppState
from foodtrace.services.cleaning_service import CleaningService
from foodtrace.services.export_service import ExportService, write_exports
from foodtrace.services.inbound_service import InboundService
from foodtrace.services.production_service import ProductionService
from foodtrace.services.record_store import COLLECTIONS, RecordStore
from foodtrace.services.temperature_service import TemperatureService

__all__ = [
    "AppState",
    "CleaningService",
    "COLLECTIONS",
    "ExportService",
    "InboundService",
    "ProductionService",
    "RecordStore",
    "TemperatureService",
    "write_exports",
]
