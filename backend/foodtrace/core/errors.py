"""Domain exceptions raised by the record services.

Routes never build HTTP errors for these by hand; the handlers registered
in ``foodtrace.main`` translate them.
"""

from typing import List, Optional


class TraceError(Exception):
    """Base class for all record-keeping errors."""


class RecordValidationError(TraceError):
    """Raised when user input is missing a required field or is malformed.

    No state is mutated when this is raised.
    """

    def __init__(self, message: str, field: Optional[str] = None):
        self.field = field
        super().__init__(message)


class RecordNotFoundError(TraceError):
    """Raised when a record id does not exist in its collection."""

    def __init__(self, collection: str, record_id: str):
        self.collection = collection
        self.record_id = record_id
        super().__init__(f"No record '{record_id}' in {collection}")


class StatusTransitionError(TraceError):
    """Raised when an inbound item would move back to IN_STOCK."""

    def __init__(self, record_id: str, current: str, requested: str):
        self.record_id = record_id
        self.current = current
        self.requested = requested
        super().__init__(
            f"Cannot move item '{record_id}' from {current} to {requested}"
        )


class CorrectiveActionRequired(TraceError):
    """Raised when out-of-range readings have no corrective-action note.

    ``unit_ids`` lists the refrigeration units still waiting for a note.
    """

    def __init__(self, unit_ids: List[str], unit_names: List[str]):
        self.unit_ids = unit_ids
        self.unit_names = unit_names
        super().__init__(
            "Corrective action required for: " + ", ".join(unit_names)
        )
