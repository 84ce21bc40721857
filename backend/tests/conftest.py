import os
import tempfile
from pathlib import Path

import pytest

# Point the app at a throwaway SQLite file before `collegehub` is imported.
_DB_DIR = tempfile.mkdtemp(prefix="collegehub-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{Path(_DB_DIR) / 'test.db'}"

from sqlmodel import SQLModel, Session  # noqa: E402

from collegehub.database import engine, create_db_and_tables  # noqa: E402


@pytest.fixture(autouse=True)
def reset_db():
    """Give every test empty tables."""
    SQLModel.metadata.drop_all(engine)
    create_db_and_tables()
    yield


@pytest.fixture
def session():
    with Session(engine) as s:
        yield s
