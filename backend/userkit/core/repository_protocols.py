"""Boundary Protocols: contracts between core and the storage shell.

Invariants:
    - Core NEVER imports from infrastructure; dependency arrows point inward only
    - A collection is addressed only by (domain, subdomain)
    - Documents are plain dicts matched by exact identifier
    - upsert_one is one atomic create-or-replace request

Design Decisions:
    - Protocol over ABC: structural subtyping, so test fakes need no inheritance
    - Async in Protocol: implementations do IO; the token codec never touches these
"""

from typing import Protocol

from userkit.core.domain_types import UserId


class DocumentCollection(Protocol):
    """Contract for one document collection, implemented by the shell."""
    async def find_one(self, doc_id: UserId) -> dict | None: ...
    async def upsert_one(self, doc_id: UserId, fields: dict) -> None: ...


class CollectionProvider(Protocol):
    """Contract for the connection-pool accessor that hands out collections."""
    def collection(self, domain: str, subdomain: str) -> DocumentCollection: ...
