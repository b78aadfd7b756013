"""
Test investing and the portfolio view.
"""

import pytest
from sqlalchemy import insert
from sqlalchemy.exc import IntegrityError

from core.auth import create_access_token
from domain.investment.models import Investment


def test_invest(client, auth_headers, create_product):
    headers = auth_headers()
    product = create_product(headers, annualYield=12.5)

    response = client.post(
        "/api/investments", json={"productId": product["id"], "amount": 10000}, headers=headers
    )

    assert response.status_code == 201
    assert response.json() == {
        "message": "Investment successful",
        "amount": 10000,
        "expectedReturn": pytest.approx(11250),
    }


def test_invest_in_unknown_product(client, auth_headers):
    response = client.post(
        "/api/investments", json={"productId": "no-such-product", "amount": 1000}, headers=auth_headers()
    )

    assert response.status_code == 404
    assert response.json() == {"error": "User or product not found"}


def test_invest_as_unknown_user(client, auth_headers, create_product):
    product = create_product(auth_headers())
    ghost = {"Authorization": f"Bearer {create_access_token('ghost-user', 'ghost@example.com')}"}

    response = client.post(
        "/api/investments", json={"productId": product["id"], "amount": 1000}, headers=ghost
    )

    assert response.status_code == 404
    assert response.json() == {"error": "User or product not found"}


@pytest.mark.parametrize("amount", [0, -50, "lots"])
def test_invalid_amount(client, auth_headers, create_product, amount):
    headers = auth_headers()
    product = create_product(headers)

    response = client.post(
        "/api/investments", json={"productId": product["id"], "amount": amount}, headers=headers
    )

    assert response.status_code == 400
    assert "amount" in response.json()["error"]["fieldErrors"]


def test_invest_requires_a_token(client):
    response = client.post("/api/investments", json={"productId": "x", "amount": 1})
    assert response.status_code == 401


def test_empty_portfolio(client, auth_headers):
    response = client.get("/api/investments/portfolio", headers=auth_headers())

    assert response.status_code == 200
    body = response.json()
    assert body["total"] == 0
    assert body["count"] == 0
    assert body["investments"] == []
    assert body["diversificationScore"] == 0
    assert "no investments" in body["ai_summary"]


def test_portfolio_aggregates(client, auth_headers, create_product):
    headers = auth_headers()
    deposit = create_product(headers, name="HDFC Bank Fixed Deposit", annualYield=6.5, riskLevel="low")
    small_cap = create_product(
        headers, name="NVIDIA (NVDA)", investmentType="other", tenureMonths=0, annualYield=16, riskLevel="high"
    )
    client.post("/api/investments", json={"productId": deposit["id"], "amount": 1000}, headers=headers)
    client.post("/api/investments", json={"productId": small_cap["id"], "amount": 3000}, headers=headers)

    response = client.get("/api/investments/portfolio", headers=headers)

    assert response.status_code == 200
    body = response.json()
    assert body["total"] == 4000
    assert body["count"] == 2
    assert body["breakdown"] == {"low": 1000, "high": 3000}
    assert body["riskDistribution"]["low"]["percentage"] == pytest.approx(25)
    assert body["riskDistribution"]["high"]["percentage"] == pytest.approx(75)
    assert body["diversificationScore"] == 2
    assert body["expectedTotalReturn"] == pytest.approx(545)
    assert body["averageReturn"] == pytest.approx(272.5)
    assert "₹4,000.00" in body["ai_summary"]

    by_product = {item["product"]["name"]: item for item in body["investments"]}
    assert by_product["HDFC Bank Fixed Deposit"]["maturityDate"] is not None
    assert by_product["NVIDIA (NVDA)"]["maturityDate"] is None
    assert by_product["NVIDIA (NVDA)"]["status"] == "active"
    assert by_product["NVIDIA (NVDA)"]["product"]["riskLevel"] == "high"


def test_portfolio_is_per_user(client, auth_headers, create_product):
    mine = auth_headers(email="mine@example.com")
    theirs = auth_headers(email="theirs@example.com")
    product = create_product(mine)
    client.post("/api/investments", json={"productId": product["id"], "amount": 1000}, headers=mine)

    assert client.get("/api/investments/portfolio", headers=mine).json()["count"] == 1
    assert client.get("/api/investments/portfolio", headers=theirs).json()["count"] == 0


def test_portfolio_survives_product_delete_attempt(client, auth_headers, create_product):
    headers = auth_headers()
    product = create_product(headers)
    client.post("/api/investments", json={"productId": product["id"], "amount": 1000}, headers=headers)

    assert client.delete(f"/api/products/{product['id']}", headers=headers).status_code == 409

    response = client.get("/api/investments/portfolio", headers=headers)
    assert response.status_code == 200
    assert response.json()["count"] == 1
    assert response.json()["investments"][0]["product"]["id"] == product["id"]


def test_investments_must_reference_a_product(app, client, signup):
    user = signup()["user"]
    statement = insert(Investment).values(
        user_id=user["id"], product_id="no-such-product", amount=1000, expected_return=1100
    )

    with pytest.raises(IntegrityError):
        client.portal.call(app.state.database.execute, statement)
