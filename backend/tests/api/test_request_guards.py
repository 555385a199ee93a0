"""Request Guards — payload size limit and store readiness.

Tests cover:
    - declared Content-Length above 1 MiB → 413 before any field validation
    - bodies at the limit pass through to validation
    - product routes answer 503 NOT_READY while the store is connecting
"""

from shopfront.core.domain_types import MAX_PAYLOAD_BYTES, ConnectionPhase


async def test_two_megabyte_body_is_413(client):
    res = await client.post(
        "/api/products",
        content=b"x" * (2 * 1024 * 1024),
        headers={"content-type": "application/json"},
    )
    assert res.status_code == 413
    assert res.json()["error"]["code"] == "PAYLOAD_TOO_LARGE"
    assert res.json()["error"]["message"] == "request payload too large"


async def test_oversized_valid_looking_body_is_still_413(client):
    padding = " " * MAX_PAYLOAD_BYTES
    res = await client.post(
        "/api/products",
        content=('{"name": "AB", "price": -1}' + padding).encode(),
        headers={"content-type": "application/json"},
    )
    assert res.status_code == 413
    assert (await client.get("/api/products")).json() == []


async def test_body_within_limit_reaches_validation(client):
    padding = " " * (MAX_PAYLOAD_BYTES - 100)
    res = await client.post(
        "/api/products",
        content=('{"name": "AB", "price": 1}' + padding).encode(),
        headers={"content-type": "application/json"},
    )
    assert res.status_code == 400
    assert res.json()["error"]["message"] == "name too short"


async def test_create_while_connecting_is_503(client, db_manager):
    db_manager._phase = ConnectionPhase.CONNECTING
    res = await client.post("/api/products", json={"name": "Lamp", "price": 1})
    assert res.status_code == 503
    assert res.json()["error"]["code"] == "NOT_READY"

    db_manager._phase = ConnectionPhase.CONNECTED
    assert (await client.get("/api/products")).json() == []


async def test_list_while_disconnecting_is_503(client, db_manager):
    db_manager._phase = ConnectionPhase.DISCONNECTING
    res = await client.get("/api/products")
    assert res.status_code == 503
    assert res.json()["error"]["code"] == "NOT_READY"


async def test_routes_without_store_are_503(service_app, client):
    service_app.state.db_manager = None
    res = await client.get("/api/products")
    assert res.status_code == 503
