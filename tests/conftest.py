"""Test configuration: point the app at a throwaway SQLite file before import."""
import os
import tempfile

import pytest

_tmpdir = tempfile.mkdtemp(prefix="restopos-test-")
os.environ.setdefault("DATABASE_URL", f"sqlite:///{os.path.join(_tmpdir, 'test.db')}")
os.environ.setdefault("SECRET_KEY", "x" * 32)
os.environ.setdefault("STATIC_DIR", "")

from fastapi.testclient import TestClient

from restopos.db import Base, SessionLocal, engine
from restopos.main import app
from restopos.models import ensure_tables


@pytest.fixture(autouse=True)
def fresh_db():
    Base.metadata.drop_all(bind=engine)
    ensure_tables(engine)
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    return TestClient(app)
