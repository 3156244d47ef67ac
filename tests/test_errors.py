import pytest
from fastapi.testclient import TestClient
from sqlalchemy import exc as sa_exc

from personnel_directory.core.errors import TOO_MANY_CONNECTIONS, is_connection_exhausted
from personnel_directory.db.session import get_db
from personnel_directory.main import app


def failing_db(err: Exception):
    def _get_db_override():
        raise err
        yield  # pragma: no cover

    return _get_db_override


@pytest.mark.parametrize(
    "err",
    [
        sa_exc.TimeoutError("QueuePool limit of size 5 overflow 10 reached"),
        sa_exc.OperationalError("SELECT 1", {}, Exception("FATAL: sorry, too many clients already")),
        sa_exc.OperationalError("SELECT 1", {}, Exception("(1040, 'Too many connections')")),
    ],
)
def test_pool_exhaustion_is_503(client: TestClient, err):
    app.dependency_overrides[get_db] = failing_db(err)

    r = client.get("/api/employees")
    assert r.status_code == 503
    body = r.json()
    assert body["success"] is False
    assert body["code"] == TOO_MANY_CONNECTIONS
    # local environment includes the driver message
    assert "error" in body


def test_other_database_errors_are_500(client: TestClient):
    app.dependency_overrides[get_db] = failing_db(
        sa_exc.OperationalError("SELECT 1", {}, Exception("disk I/O error"))
    )

    r = client.get("/api/employees/stats")
    assert r.status_code == 500
    assert r.json()["message"] == "Database error occurred"
    assert "code" not in r.json()


def test_connection_exhaustion_detection():
    assert is_connection_exhausted(sa_exc.TimeoutError())
    assert not is_connection_exhausted(sa_exc.IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed")))


def test_not_found_routes_keep_json_shape(client: TestClient):
    r = client.get("/api/employees/unknown-id")
    assert r.status_code == 404
    assert r.json() == {"success": False, "message": "Not found"}
