"""Persisted record collections.

Each named collection (settings, inbound lots, temperature readings, ...)
is stored whole as a single JSON document and replaced whole on save.
"""

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from foodtrace.db.base import Base, TimestampMixin


class RecordDocument(TimestampMixin, Base):
    """One named record collection serialized as JSON text."""

    __tablename__ = "record_documents"

    name: Mapped[str] = mapped_column(String(64), primary_key=True)
    payload: Mapped[str] = mapped_column(Text, nullable=False)

    def __repr__(self) -> str:
        return f"<RecordDocument {self.name} ({len(self.payload)} bytes)>"
