import pytest
from app import create_app
from fastapi.testclient import TestClient


@pytest.fixture()
def client(services):
    return TestClient(create_app(services))


@pytest.fixture()
def order_id(client, shipping_address_data):
    """Create a pending order for user-1 through the API (prod-a ×2, prod-b ×1)."""
    client.post("/carts/user-1/items", json={"product_id": "prod-a", "quantity": 2})
    client.post("/carts/user-1/items", json={"product_id": "prod-b", "quantity": 1})
    response = client.post("/orders", json={"user_id": "user-1", "shipping_address": shipping_address_data})
    assert response.status_code == 201
    return response.json()["id"]
