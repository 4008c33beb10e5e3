"""SQL Document Collection: DocumentCollection implemented on the documents table.

Invariants:
    - Reads and writes touch exactly one row, addressed by (domain, subdomain, doc_id)
    - upsert_one is a single INSERT ... ON CONFLICT DO UPDATE; concurrent first writes of
      one id all succeed and the last one wins
    - upsert_one replaces the stored body with the given fields; nothing is merged
    - Each call runs in its own session; faults surface as StorageError via the manager
"""

from datetime import datetime, timezone
from typing import TYPE_CHECKING

from sqlalchemy.dialects import postgresql, sqlite

from userkit.core.domain_types import UserId
from userkit.models.document import Document

if TYPE_CHECKING:
    from userkit.infrastructure.database import DatabaseSessionManager

_UPSERT_DIALECTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class SqlDocumentCollection:
    """Documents sharing one (domain, subdomain) pair."""

    def __init__(
        self, manager: "DatabaseSessionManager", domain: str, subdomain: str,
    ):
        self._manager = manager
        self.domain = domain
        self.subdomain = subdomain

    async def find_one(self, doc_id: UserId) -> dict | None:
        async with self._manager.session() as db:
            row = await db.get(Document, (self.domain, self.subdomain, doc_id))
            return dict(row.body) if row is not None else None

    async def upsert_one(self, doc_id: UserId, fields: dict) -> None:
        dialect = self._manager.engine.dialect.name
        insert = _UPSERT_DIALECTS.get(dialect)
        if insert is None:
            raise NotImplementedError(f"upsert not supported for dialect {dialect!r}")

        now = datetime.now(timezone.utc)
        stmt = insert(Document).values(
            domain=self.domain,
            subdomain=self.subdomain,
            doc_id=doc_id,
            body=dict(fields),
            created_at=now,
            updated_at=now,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[Document.domain, Document.subdomain, Document.doc_id],
            set_={"body": stmt.excluded.body, "updated_at": stmt.excluded.updated_at},
        )
        async with self._manager.session() as db:
            await db.execute(stmt)
            await db.commit()
