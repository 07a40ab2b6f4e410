"""Export service: CSV reports and the full JSON backup."""

import csv
import io
import json
import logging
import os
from datetime import date
from typing import Any, Dict, Iterable, List, Optional, Sequence

from foodtrace.schemas.records import ProductionLot, TemperatureReading
from foodtrace.services.app_state import AppState
from foodtrace.services.record_store import COLLECTIONS

logger = logging.getLogger(__name__)

LOT_COLUMNS = [
    "lot_code",
    "finished_product",
    "date",
    "operator",
    "component_type",
    "component_name",
    "brand",
    "component_lot",
    "component_expiry",
]

TEMPERATURE_COLUMNS = [
    "date",
    "slot",
    "unit",
    "value",
    "min",
    "max",
    "compliant",
    "corrective_action",
    "note",
]


def _date(value: Optional[date]) -> str:
    return value.isoformat() if value else ""


def _number(value: Optional[float]) -> str:
    """Render 4.0 as "4" and 5.2 as "5.2"; None as empty."""
    if value is None:
        return ""
    return str(int(value)) if float(value).is_integer() else str(value)


def lot_rows(lots: Iterable[ProductionLot]) -> List[Dict[str, str]]:
    """One row per component; a lot without components still gets one row."""
    rows: List[Dict[str, str]] = []
    for lot in lots:
        base = {
            "lot_code": lot.lot_code,
            "finished_product": lot.finished_name,
            "date": _date(lot.date),
            "operator": lot.operator,
        }
        if not lot.components:
            rows.append({**base, **{c: "" for c in LOT_COLUMNS[4:]}})
            continue
        for component in lot.components:
            rows.append({
                **base,
                "component_type": component.type.value,
                "component_name": component.name,
                "brand": component.brand,
                "component_lot": component.lot_number,
                "component_expiry": _date(component.expiry),
            })
    return rows


def temperature_rows(temps: Iterable[TemperatureReading]) -> List[Dict[str, str]]:
    """One row per unit reading."""
    rows: List[Dict[str, str]] = []
    for entry in temps:
        for reading in entry.readings:
            if reading.ok is None:
                compliant = ""
            else:
                compliant = "YES" if reading.ok else "NO"
            rows.append({
                "date": _date(entry.date),
                "slot": entry.slot.value,
                "unit": reading.unit_name,
                "value": _number(reading.value),
                "min": _number(reading.min_temp),
                "max": _number(reading.max_temp),
                "compliant": compliant,
                "corrective_action": reading.corrective_action,
                "note": entry.note,
            })
    return rows


def to_csv(columns: Sequence[str], rows: Iterable[Dict[str, Any]]) -> str:
    """CSV text with a header row, quoting only fields that need it."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_MINIMAL, lineterminator="\r\n")
    writer.writerow(columns)
    for row in rows:
        writer.writerow([row.get(column, "") for column in columns])
    return buffer.getvalue()


def export_json(state: AppState) -> str:
    """Pretty-printed dump of every collection, keyed by collection name."""
    dump = {
        name: spec.adapter.dump_python(state.get(name), mode="json")
        for name, spec in COLLECTIONS.items()
    }
    return json.dumps(dump, indent=2, ensure_ascii=False)


def lots_filename(today: date) -> str:
    return f"lots_production_{today.isoformat()}.csv"


def temperatures_filename(today: date) -> str:
    return f"temperature_readings_{today.isoformat()}.csv"


def backup_filename(today: date) -> str:
    return f"foodtrace_export_{today.isoformat()}.json"


class ExportService:
    """Build export documents from the current state."""

    def __init__(self, state: AppState):
        self.state = state

    def lots_csv(self) -> str:
        return to_csv(LOT_COLUMNS, lot_rows(self.state.lots))

    def temperatures_csv(self) -> str:
        return to_csv(TEMPERATURE_COLUMNS, temperature_rows(self.state.temps))

    def backup_json(self) -> str:
        return export_json(self.state)

    def write_exports(self, directory: str, today: date) -> List[str]:
        """Write the two CSV reports and the JSON backup; return their paths."""
        os.makedirs(directory, exist_ok=True)
        documents = [
            (lots_filename(today), self.lots_csv()),
            (temperatures_filename(today), self.temperatures_csv()),
            (backup_filename(today), self.backup_json()),
        ]
        paths = []
        for filename, content in documents:
            filepath = os.path.join(directory, filename)
            with open(filepath, "w", encoding="utf-8", newline="") as f:
                f.write(content)
            paths.append(filepath)
        logger.info(f"Wrote {len(paths)} export files to {directory}")
        return paths


def write_exports(state: AppState, directory: str, today: date) -> List[str]:
    """Write every export for ``today`` into ``directory``."""
    return ExportService(state).write_exports(directory, today)
