"""Export API routes: CSV reports and the JSON backup as downloads."""

import io

from fastapi import APIRouter, Request
from fastapi.responses import StreamingResponse

from foodtrace.api.deps import State
from foodtrace.core.clock import local_today
from foodtrace.core.config import settings
from foodtrace.core.rate_limit import limiter
from foodtrace.services.export_service import (
    ExportService,
    backup_filename,
    lots_filename,
    temperatures_filename,
)

router = APIRouter()


def _download(content: str, media_type: str, filename: str) -> StreamingResponse:
    output = io.BytesIO(content.encode("utf-8"))
    return StreamingResponse(
        output,
        media_type=media_type,
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )


@router.get("/lots.csv")
@limiter.limit("10/minute")
def export_lots(request: Request, state: State):
    """Production lots, one row per component."""
    return _download(
        ExportService(state).lots_csv(), "text/csv", lots_filename(local_today())
    )


@router.get("/temperatures.csv")
@limiter.limit("10/minute")
def export_temperatures(request: Request, state: State):
    """Temperature readings, one row per unit."""
    return _download(
        ExportService(state).temperatures_csv(),
        "text/csv",
        temperatures_filename(local_today()),
    )


@router.get("/backup.json")
@limiter.limit("10/minute")
def export_backup(request: Request, state: State):
    """Full dump of every record collection."""
    return _download(
        ExportService(state).backup_json(),
        "application/json",
        backup_filename(local_today()),
    )


@router.post("/write")
@limiter.limit("5/minute")
def write_exports(request: Request, state: State):
    """Write all export files to the configured export directory."""
    paths = ExportService(state).write_exports(settings.export_dir, local_today())
    return {"files": paths}
