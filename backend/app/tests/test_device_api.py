"""
Test suite for device API endpoints
"""

from datetime import date, timedelta
from decimal import Decimal

import pytest
from httpx import ASGITransport, AsyncClient

from app.api.deps import get_redis_client, get_session
from app.main import app


@pytest.fixture
async def client(test_session_factory, redis_client):
    """API client with the DB session and Redis client overridden."""

    async def override_get_session():
        async with test_session_factory() as session:
            yield session

    async def override_get_redis_client():
        return redis_client

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_redis_client] = override_get_redis_client

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c

    app.dependency_overrides.clear()


def device_payload(**overrides):
    payload = {
        "name": "MacBook Air",
        "brand": "Apple",
        "category": "LAPTOP",
        "description": "13-inch laptop",
        "price": "1099.00",
        "release_date": "2024-03-08",
        "image_url": "https://img.example.com/mba.png",
        "average_rating": "8.9",
    }
    payload.update(overrides)
    return payload


async def create(client, **overrides):
    response = await client.post("/api/v1/devices/", json=device_payload(**overrides))
    assert response.status_code == 201
    return response.json()


async def test_ping(client):
    response = await client.get("/ping")

    assert response.status_code == 200
    assert response.json() == {"message": "pong"}


async def test_create_and_read_device(client):
    created = await create(client)

    response = await client.get(f"/api/v1/devices/{created['id']}")

    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "MacBook Air"
    assert data["category"] == "LAPTOP"
    assert Decimal(data["price"]) == Decimal("1099.00")


async def test_create_rejects_invalid_payload(client):
    response = await client.post(
        "/api/v1/devices/", json=device_payload(name="  ", price="-1")
    )

    assert response.status_code == 422


async def test_create_rejects_future_release_date(client):
    tomorrow = (date.today() + timedelta(days=1)).isoformat()

    response = await client.post("/api/v1/devices/", json=device_payload(release_date=tomorrow))

    assert response.status_code == 422


async def test_read_missing_device_returns_404(client):
    response = await client.get("/api/v1/devices/9999")

    assert response.status_code == 404
    assert response.json() == {"detail": "Device not found with id 9999"}


async def test_list_devices_returns_page(client):
    for i in range(3):
        await create(client, name=f"Device {i}")

    response = await client.get("/api/v1/devices/", params={"page": 0, "size": 2})

    assert response.status_code == 200
    data = response.json()
    assert [d["name"] for d in data["content"]] == ["Device 0", "Device 1"]
    assert data["total_elements"] == 3
    assert data["total_pages"] == 2


async def test_list_devices_reflects_create_after_cached_read(client):
    await create(client, name="First")
    before = (await client.get("/api/v1/devices/", params={"page": 0, "size": 10})).json()

    await create(client, name="Second")
    after = (await client.get("/api/v1/devices/", params={"page": 0, "size": 10})).json()

    assert before["total_elements"] == 1
    assert after["total_elements"] == 2


async def test_list_devices_with_price_filter(client):
    for name, price in [("A", "99.99"), ("B", "100"), ("C", "200"), ("D", "200.01")]:
        await create(client, name=name, price=price)

    response = await client.get(
        "/api/v1/devices/", params={"min_price": "100", "max_price": "200"}
    )

    assert response.status_code == 200
    assert [d["name"] for d in response.json()["content"]] == ["B", "C"]


async def test_list_devices_rejects_oversized_page(client):
    response = await client.get("/api/v1/devices/", params={"size": 100000})

    assert response.status_code == 422


async def test_update_device_partially(client):
    created = await create(client)

    response = await client.put(
        f"/api/v1/devices/{created['id']}",
        json={"price": "-5", "name": "MacBook Air M3", "image_url": "https://img.example.com/m3.jpg"},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "MacBook Air M3"
    assert Decimal(data["price"]) == Decimal("1099.00")
    assert data["image_url"] == "https://img.example.com/m3.jpg"


async def test_update_with_invalid_id_returns_400(client):
    response = await client.put("/api/v1/devices/-1", json={"name": "x"})

    assert response.status_code == 400
    assert response.json() == {"detail": "Invalid device id -1"}


async def test_update_missing_device_returns_404(client):
    response = await client.put("/api/v1/devices/9999", json={"name": "x"})

    assert response.status_code == 404


async def test_delete_device(client):
    created = await create(client)

    response = await client.delete(f"/api/v1/devices/{created['id']}")
    assert response.status_code == 204

    response = await client.get(f"/api/v1/devices/{created['id']}")
    assert response.status_code == 404


async def test_delete_missing_device_returns_404(client):
    response = await client.delete("/api/v1/devices/9999")

    assert response.status_code == 404
