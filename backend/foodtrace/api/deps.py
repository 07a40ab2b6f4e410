"""Request dependencies shared by the route modules."""

from typing import Annotated

from fastapi import Depends

from foodtrace.db.session import DbSession
from foodtrace.services.app_state import AppState
from foodtrace.services.record_store import RecordStore


def get_state(db: DbSession) -> AppState:
    """Load the application state for this request."""
    return AppState.load(RecordStore(db))


# Type alias for dependency injection
State = Annotated[AppState, Depends(get_state)]
