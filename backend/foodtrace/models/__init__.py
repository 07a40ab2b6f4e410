"""SQLAlchemy models."""

from foodtrace.models.record_document import RecordDocument

__all__ = ["RecordDocument"]
