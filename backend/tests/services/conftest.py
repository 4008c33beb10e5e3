"""Service test fixtures: user store over SQLite and over in-memory fakes.

Design Decisions:
    - FakeCollections implements CollectionProvider structurally; tests set `fail_with`
      to inject faults at the collection boundary
"""

import pytest

from userkit.services.user_store import UserStore


class FakeCollection:
    def __init__(self, owner: "FakeCollections", name: tuple[str, str]):
        self._owner = owner
        self._name = name

    async def find_one(self, doc_id: str) -> dict | None:
        self._owner.calls.append(("find_one", self._name, doc_id))
        if self._owner.fail_with:
            raise self._owner.fail_with
        return self._owner.docs.get((self._name, doc_id))

    async def upsert_one(self, doc_id: str, fields: dict) -> None:
        self._owner.calls.append(("upsert_one", self._name, doc_id))
        if self._owner.fail_with:
            raise self._owner.fail_with
        self._owner.docs[(self._name, doc_id)] = dict(fields)


class FakeCollections:
    def __init__(self):
        self.docs: dict = {}
        self.calls: list = []
        self.fail_with: Exception | None = None
        self.unreachable: Exception | None = None

    def collection(self, domain: str, subdomain: str) -> FakeCollection:
        if self.unreachable:
            raise self.unreachable
        return FakeCollection(self, (domain, subdomain))


@pytest.fixture
def fake_collections():
    return FakeCollections()


@pytest.fixture
def fake_store(fake_collections):
    return UserStore(fake_collections)


@pytest.fixture
def sql_store(db_manager):
    return UserStore(db_manager)
