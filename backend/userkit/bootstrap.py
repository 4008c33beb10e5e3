"""Bootstrap: wires settings, logging, and the database pool into a ready UserStore.

Invariants:
    - Logging configured before the pool is created
    - The pool is the process-wide singleton from infrastructure/database.py
"""

import logging

from userkit.config import Settings, get_settings
from userkit.infrastructure.database import init_db
from userkit.infrastructure.observability import setup_logging
from userkit.services.user_store import UserStore

logger = logging.getLogger(__name__)


def build_user_store(settings: Settings | None = None) -> UserStore:
    """Return a UserStore backed by the configured database."""
    settings = settings or get_settings()
    setup_logging(settings.log_level, settings.log_format)
    manager = init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    logger.info(
        "User store ready",
        extra={
            "domain": settings.user_collection_domain,
            "subdomain": settings.user_collection_subdomain,
        },
    )
    return UserStore(
        manager,
        domain=settings.user_collection_domain,
        subdomain=settings.user_collection_subdomain,
    )
