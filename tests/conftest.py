import os
import tempfile

# Point settings at throwaway storage before the app is imported
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="comicscript-logs-"))

import pytest
from typing import Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from comicscript.api.deps import get_db
from comicscript.database import Base
from comicscript.main import app
from comicscript.services.script_tree import ScriptTreeService


# 1. SETUP TEST DATABASE
# SQLite in-memory with StaticPool so every connection sees the same database
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool
)


@event.listens_for(engine, "connect")
def set_sqlite_pragma(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


TestingSessionLocal = sessionmaker(autoflush=False, bind=engine)


# 2. DB SESSION FIXTURE
@pytest.fixture(scope="function")
def db():
    """
    Creates a fresh database for every single test case.
    """
    Base.metadata.create_all(bind=engine)

    session = TestingSessionLocal()
    yield session

    session.close()
    Base.metadata.drop_all(bind=engine)


# 3. CLIENT FIXTURE
@pytest.fixture(scope="function")
def client(db) -> Generator:
    """
    Returns a TestClient with the database dependency overridden.
    """

    def override_get_db():
        try:
            yield db
        finally:
            # The 'db' fixture handles the teardown at the end of the test function.
            pass

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as c:
        yield c

    app.dependency_overrides.clear()


# 4. TREE FIXTURES
@pytest.fixture(scope="function")
def service(db):
    return ScriptTreeService(db)


@pytest.fixture(scope="function")
def series(db, service):
    series = service.add_series("Night Shift", synopsis="Crime in a city that never sleeps", category="crime")
    db.commit()
    return series


@pytest.fixture(scope="function")
def issue(db, service, series):
    """An issue holding Page 1 / Panel 1, both empty"""
    issue = service.add_issue(series, "The Long Night", writer="Jane Doe")
    service.add_page(issue)
    db.commit()
    return issue
