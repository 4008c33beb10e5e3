"""Domain Types: rich types that replace bare primitives across the codebase.

Invariants:
    - UserId wraps the caller-assigned string identifier of an account record
    - CollectionName pairs domain and subdomain; it is the only way a collection is addressed

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
"""

from typing import NamedTuple, NewType


# ─── Identity Types ──────────────────────────────────────────────

UserId = NewType("UserId", str)


# ─── Value Types ─────────────────────────────────────────────────

class CollectionName(NamedTuple):
    """A document collection address, e.g. ("user", "info")."""
    domain: str
    subdomain: str


USER_INFO_COLLECTION = CollectionName("user", "info")
