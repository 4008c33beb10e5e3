"""Root conftest: shared test configuration and database fixtures.

Invariants:
    - Every test that asks for db_manager gets a fresh SQLite file database with the schema created
    - The manager is disposed after the test
"""

import os

import pytest

from userkit.infrastructure.database import DatabaseSessionManager

# Ensure tests never reach a real server database
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///test.db")


@pytest.fixture
async def db_manager(tmp_path):
    manager = DatabaseSessionManager(f"sqlite+aiosqlite:///{tmp_path / 'userkit.db'}")
    await manager.create_schema()
    yield manager
    await manager.close()
