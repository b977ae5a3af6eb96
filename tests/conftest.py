import os

import pytest

from recordstore import RecordStore
from tests.support import FakeConnection, Item


@pytest.fixture
def connection():
    return FakeConnection()


@pytest.fixture
def store(connection):
    return RecordStore(connection, "items", Item.from_row, Item.to_row)


def require_test_db():
    url = os.getenv("TEST_DATABASE_URL")
    if not url:
        pytest.skip("TEST_DATABASE_URL not set; skipping DB-dependent tests")
    return url
