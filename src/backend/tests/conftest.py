"""Pytest configuration and shared fixtures."""

import os

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Settingsの必須項目．medal_compassをimportする前に設定しておく．
os.environ.setdefault("DB_NAME", "medal_compass_test")
os.environ.setdefault("DB_USER", "test")
os.environ.setdefault("DB_PASSWORD", "test")
os.environ["DB_RETRY_BACKOFF_SECONDS"] = "0"

from fastapi.testclient import TestClient  # noqa: E402

from medal_compass.db import base  # noqa: E402
from medal_compass.db import session as db_session  # noqa: E402
from medal_compass.main import app  # noqa: E402
from medal_compass.services import medal_service  # noqa: E402

TOKYO_STATION = (35.6812, 139.7671)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # SQLiteは既定で外部キー制約（ON DELETE CASCADE含む）が無効
    @event.listens_for(engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    base.Base.metadata.create_all(bind=engine)
    yield engine
    base.Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(engine):
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    def override_get_db():
        session = TestingSessionLocal()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[db_session.get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_medal(db):
    """Register a medal for the given owner; defaults to Tokyo Station."""
    def _make(user_id="owner", latitude=TOKYO_STATION[0], longitude=TOKYO_STATION[1]):
        return medal_service.register_medal(db, user_id=user_id, latitude=latitude, longitude=longitude)
    return _make


def auth(user_id):
    return {"X-User-Id": user_id}
