"""
Test health check endpoints.
"""


class UnreachableDatabase:
    async def ping(self):
        raise ConnectionError("connection refused")


def test_health_check(client):
    """
    Test that the health check endpoint returns 200 OK.
    """
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["db"] == "up"


def test_health_check_database_down(app, client):
    app.state.database = UnreachableDatabase()

    response = client.get("/health")

    assert response.status_code == 500
    assert response.json() == {"status": "error", "db": "down"}


def test_liveness(client):
    response = client.get("/health/live")
    assert response.status_code == 200
    assert response.json() == {"status": "alive"}


def test_root_endpoint(client):
    """
    Test that the root endpoint is accessible.
    """
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["name"] == "Grip Invest"
