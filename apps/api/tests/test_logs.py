"""
Test the audit log views.
"""


def test_my_logs_newest_first(client, signup):
    body = signup()
    headers = {"Authorization": f"Bearer {body['token']}"}
    client.get("/api/auth/me", headers=headers)

    response = client.get("/api/logs/user/me", headers=headers)

    assert response.status_code == 200
    logs = response.json()
    assert [log["endpoint"] for log in logs] == ["/api/auth/me", "/api/auth/signup"]
    assert logs[0]["httpMethod"] == "GET"
    assert logs[0]["statusCode"] == 200
    assert logs[0]["errorMessage"] is None
    assert logs[0]["userId"] == body["user"]["id"]


def test_my_logs_are_never_cached(client, auth_headers):
    response = client.get("/api/logs/user/me", headers=auth_headers())

    assert response.headers["cache-control"] == "no-cache, no-store, must-revalidate"
    assert response.headers["pragma"] == "no-cache"
    assert response.headers["expires"] == "0"
    assert response.headers["x-timestamp"].isdigit()


def test_logs_by_user_id(client, signup):
    body = signup()
    headers = {"Authorization": f"Bearer {body['token']}"}

    response = client.get(f"/api/logs/user/{body['user']['id']}", headers=headers)

    assert response.status_code == 200
    assert [log["endpoint"] for log in response.json()] == ["/api/auth/signup"]


def test_logs_require_a_token(client):
    assert client.get("/api/logs/user/me").status_code == 401
    assert client.get("/api/logs/user/someone").status_code == 401
    assert client.get("/api/logs/summary/someone").status_code == 401


def test_error_summary(client, signup):
    body = signup()
    headers = {"Authorization": f"Bearer {body['token']}"}
    client.put("/api/auth/me", json={}, headers=headers)
    client.put("/api/auth/me", json={}, headers=headers)
    client.post("/api/investments", json={"productId": "nope", "amount": 10}, headers=headers)

    response = client.get(f"/api/logs/summary/{body['user']['id']}", headers=headers)

    assert response.status_code == 200
    assert response.json() == {"summary": "You had 3 error(s). Most common status: 400."}


def test_error_summary_without_errors(client, signup):
    body = signup()
    headers = {"Authorization": f"Bearer {body['token']}"}

    response = client.get(f"/api/logs/summary/{body['user']['id']}", headers=headers)

    assert response.json() == {"summary": "You had 0 error(s). Most common status: n/a."}
