import os

# Settings are read at import time; point them at SQLite before anything loads
os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")
os.environ.setdefault("BIRTHDAY_SCHEDULER_ENABLED", "false")

from datetime import date

import httpx
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from personnel_directory.core.clock import get_today
from personnel_directory.db.base import Base
from personnel_directory.db.session import get_db
from personnel_directory.main import app
from personnel_directory.services.birthday import BirthdayNotifier, get_notifier

engine = create_engine(
    "sqlite+pysqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)


# pysqlite's own transaction handling breaks SAVEPOINTs; let SQLAlchemy emit BEGIN
@event.listens_for(engine, "connect")
def _disable_pysqlite_transactions(dbapi_connection, connection_record):
    dbapi_connection.isolation_level = None


@event.listens_for(engine, "begin")
def _emit_begin(conn):
    conn.exec_driver_sql("BEGIN")


TestingSessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)

TODAY = date(2026, 6, 15)


@pytest.fixture(autouse=True)
def create_test_schema():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def db_session(create_test_schema):
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture(autouse=True)
def override_get_db(db_session):
    def _get_db_override():
        try:
            yield db_session
            db_session.commit()
        except Exception:
            db_session.rollback()
            raise

    app.dependency_overrides[get_db] = _get_db_override
    app.dependency_overrides[get_today] = lambda: TODAY
    yield
    app.dependency_overrides.clear()


@pytest.fixture()
def client():
    return TestClient(app)


@pytest.fixture()
def sent_messages():
    """Requests captured by the fake WhatsApp gateway."""
    return []


@pytest.fixture()
def gateway_status():
    """Status code the fake gateway answers with; tests may change it."""
    return {"code": 200}


@pytest.fixture()
def notifier(sent_messages, gateway_status):
    def handler(request: httpx.Request) -> httpx.Response:
        sent_messages.append(request)
        return httpx.Response(gateway_status["code"], json={"ok": gateway_status["code"] < 400})

    http = httpx.Client(transport=httpx.MockTransport(handler))
    n = BirthdayNotifier(http, url="https://gateway.test/direct-send", delay=0)
    app.dependency_overrides[get_notifier] = lambda: n
    yield n
    http.close()
