"""User Store: fetch and upsert account records by identifier.

Invariants:
    - Lookups are exact matches on id; no partial or case-insensitive matching
    - Upsert writes exactly id, email, firstname, lastname and replaces the stored document
    - Miss raises UserNotFoundError; every other fault raises StorageError chained to its cause
    - No retries, no fallbacks, no cross-call transactions

Design Decisions:
    - CollectionProvider injected: the store never reaches for a process-wide handle
    - Collection resolved per call inside the error boundary: an unreachable store
      surfaces as StorageError like any other fault
"""

import logging

from pydantic import ValidationError

from userkit.core.domain_types import USER_INFO_COLLECTION, UserId
from userkit.core.errors import ErrorContext, StorageError, UserNotFoundError
from userkit.core.repository_protocols import CollectionProvider, DocumentCollection
from userkit.schemas.user import UserRecord

logger = logging.getLogger(__name__)


class UserStore:
    """Record store accessor for the user collection."""

    def __init__(
        self,
        collections: CollectionProvider,
        domain: str = USER_INFO_COLLECTION.domain,
        subdomain: str = USER_INFO_COLLECTION.subdomain,
    ):
        self._collections = collections
        self.domain = domain
        self.subdomain = subdomain

    async def fetch_user_by_id(self, user_id: UserId) -> UserRecord:
        """Return the record whose id equals user_id."""
        logger.debug(
            "Fetching user",
            extra={"user_id": user_id, "domain": self.domain, "subdomain": self.subdomain},
        )
        try:
            document = await self._collection().find_one(user_id)
            if document is None:
                raise UserNotFoundError(user_id, self._context(user_id))
            return UserRecord.model_validate(document)
        except UserNotFoundError:
            raise
        except StorageError as e:
            self._annotate(e, user_id)
            self._log_fault("fetch", user_id)
            raise
        except ValidationError as e:
            self._log_fault("fetch", user_id)
            raise StorageError(
                "stored document is malformed", "fetch", self._context(user_id),
            ) from e
        except Exception as e:
            self._log_fault("fetch", user_id)
            raise StorageError(str(e) or type(e).__name__, "fetch", self._context(user_id)) from e

    async def upsert_user_by_id(self, record: UserRecord) -> None:
        """Create or fully replace the document identified by record.id."""
        user_id = UserId(record.id)
        try:
            await self._collection().upsert_one(user_id, record.to_document())
        except StorageError as e:
            self._annotate(e, user_id)
            self._log_fault("upsert", user_id)
            raise
        except Exception as e:
            self._log_fault("upsert", user_id)
            raise StorageError(str(e) or type(e).__name__, "upsert", self._context(user_id)) from e

    def _collection(self) -> DocumentCollection:
        return self._collections.collection(self.domain, self.subdomain)

    def _context(self, user_id: UserId) -> ErrorContext:
        return ErrorContext(user_id=user_id, domain=self.domain, subdomain=self.subdomain)

    def _annotate(self, error: StorageError, user_id: UserId) -> None:
        """Fill the record address into a StorageError raised below the store."""
        error.context.user_id = error.context.user_id or user_id
        error.context.domain = error.context.domain or self.domain
        error.context.subdomain = error.context.subdomain or self.subdomain

    def _log_fault(self, operation: str, user_id: UserId) -> None:
        logger.error(
            f"User {operation} failed",
            exc_info=True,
            extra={
                "user_id": user_id,
                "operation": operation,
                "domain": self.domain,
                "subdomain": self.subdomain,
                "error_code": "STORAGE_ERROR",
            },
        )
