from fastapi.testclient import TestClient


def test_health_ok(client: TestClient):
    """Test health check endpoint"""
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"


def test_root_endpoint(client: TestClient):
    """Test root endpoint"""
    response = client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "Personnel Directory Backend"
    assert data["status"] == "ok"
    assert "docs" in data
    assert "health" in data
