"""Document ORM: one JSON document inside a (domain, subdomain) collection.

Invariants:
    - Primary key is (domain, subdomain, doc_id); a document is unique within its collection
    - body holds the whole document; writes replace it
    - updated_at moves on every replace

Design Decisions:
    - One table for all collections: collections are addressed by data, not by schema
    - JSON column for body: documents carry no schema beyond what readers validate
"""

from datetime import datetime, timezone

from sqlalchemy import String, DateTime, JSON
from sqlalchemy.orm import Mapped, mapped_column

from userkit.db.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Document(Base):
    """A stored document addressed by collection and identifier."""
    __tablename__ = "documents"

    domain: Mapped[str] = mapped_column(String(64), primary_key=True)
    subdomain: Mapped[str] = mapped_column(String(64), primary_key=True)
    doc_id: Mapped[str] = mapped_column(String(255), primary_key=True)
    body: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow,
    )
