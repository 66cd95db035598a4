"""Mini README: HTTP-level tests for the FastAPI interface.

Each test builds an isolated application around an in-memory store and
drives it through ``TestClient`` the way the admin and public screens do.
"""

from __future__ import annotations

from fastapi.testclient import TestClient

from fundtracker.configuration import FundTrackerSettings
from fundtracker.funds import FundManager
from fundtracker.interface import create_application
from fundtracker.storage import InMemoryCollectionStore


def _client(**overrides) -> TestClient:
    settings = FundTrackerSettings(**overrides)
    manager = FundManager(InMemoryCollectionStore(), settings)
    return TestClient(create_application(manager=manager, settings=settings))


def _create_collection(client: TestClient, **body) -> dict:
    payload = {"name": "Trip fund", **body}
    response = client.post("/api/collections", json=payload)
    assert response.status_code == 201
    return response.json()


def test_create_and_list_collections() -> None:
    client = _client()
    first = _create_collection(client, description="Goa", targetAmount=5000)
    _create_collection(client, name="Gift")

    assert first["id"] == "1"
    assert first["contributors"] == []
    assert first["targetAmount"] == 5000.0

    listing = client.get("/api/collections").json()
    assert [entry["name"] for entry in listing] == ["Gift", "Trip fund"]


def test_create_collection_rejects_blank_name() -> None:
    client = _client()

    response = client.post("/api/collections", json={"name": "  "})
    assert response.status_code == 400

    missing = client.post("/api/collections", json={})
    assert missing.status_code == 422


def test_contributor_payment_flow() -> None:
    client = _client()
    collection = _create_collection(client)
    base = f"/api/collections/{collection['id']}"

    added = client.post(f"{base}/contributors", json={"name": "Sam", "amount": 1000})
    assert added.status_code == 200
    contributor_id = added.json()["id"]
    assert added.json()["contributor"]["paymentStatus"] == "pending"

    partial = client.post(f"{base}/contributors/{contributor_id}/payments", json={"amount": 400})
    assert partial.json()["contributor"]["paidAmount"] == 400.0
    assert partial.json()["contributor"]["paymentStatus"] == "partially_paid"

    settled = client.post(f"{base}/contributors/{contributor_id}/payments", json={"amount": 700})
    assert settled.json()["contributor"]["paidAmount"] == 1000.0
    assert settled.json()["contributor"]["remaining"] == 0
    assert settled.json()["contributor"]["paymentStatus"] == "paid"

    detail = client.get(base).json()
    assert detail["summary"]["progressPercent"] == 100
    assert detail["updatedAt"] >= detail["createdAt"]


def test_invalid_requests_map_to_http_errors() -> None:
    client = _client()
    collection = _create_collection(client)
    base = f"/api/collections/{collection['id']}"
    contributor_id = client.post(f"{base}/contributors", json={"name": "Sam", "amount": 50}).json()["id"]

    assert client.post(f"{base}/contributors", json={"name": "  ", "amount": 50}).status_code == 400
    assert client.post(f"{base}/contributors", json={"name": "Sam", "amount": 0}).status_code == 400
    assert client.post(f"{base}/contributors/{contributor_id}/payments", json={"amount": -5}).status_code == 400
    assert client.post(f"{base}/contributors/{contributor_id}/status", json={"status": "refunded"}).status_code == 400

    missing = client.get("/api/collections/999")
    assert missing.status_code == 404
    assert missing.json()["detail"] == "Collection 999 not found"
    assert client.post(f"{base}/contributors/ghost/payments", json={"amount": 5}).status_code == 404


def test_reject_policy_returns_bad_request() -> None:
    client = _client(overpayment_policy="reject")
    collection = _create_collection(client)
    base = f"/api/collections/{collection['id']}"
    contributor_id = client.post(f"{base}/contributors", json={"name": "Sam", "amount": 50}).json()["id"]

    response = client.post(f"{base}/contributors/{contributor_id}/payments", json={"amount": 60})
    assert response.status_code == 400
    assert "exceeds the remaining balance" in response.json()["detail"]


def test_put_update_rederives_status() -> None:
    client = _client()
    collection = _create_collection(client)
    base = f"/api/collections/{collection['id']}"
    contributor_id = client.post(f"{base}/contributors", json={"name": "Sam", "amount": 200}).json()["id"]

    response = client.put(
        f"{base}/contributors",
        json={"contributorId": contributor_id, "paidAmount": 50, "paymentStatus": "paid"},
    )
    assert response.status_code == 200
    assert response.json()["contributor"]["paymentStatus"] == "partially_paid"

    too_much = client.put(f"{base}/contributors", json={"contributorId": contributor_id, "paidAmount": 250})
    assert too_much.status_code == 400


def test_status_route_and_public_view() -> None:
    client = _client()
    collection = _create_collection(client)
    base = f"/api/collections/{collection['id']}"
    ids = {
        name: client.post(f"{base}/contributors", json={"name": name, "amount": amount}).json()["id"]
        for name, amount in (("Ann", 100), ("Bob", 200))
    }

    marked = client.post(f"{base}/contributors/{ids['Ann']}/status", json={"status": "paid"})
    assert marked.json()["contributor"]["paidAmount"] == 100.0

    public = client.get(f"{base}/public").json()
    assert [entry["name"] for entry in public["contributors"]] == ["Ann", "Bob"]
    assert public["summary"]["totalRemaining"] == 200.0
    assert public["summary"]["progressPercent"] == 33

    summary = client.get(f"{base}/summary").json()
    assert summary["countByStatus"] == {"pending": 1, "partially_paid": 0, "paid": 1}

    reset = client.post(f"{base}/contributors/{ids['Ann']}/status", json={"status": "pending"})
    assert reset.json()["contributor"]["paymentStatus"] == "pending"


def test_delete_collection_and_init_db() -> None:
    client = _client()
    collection = _create_collection(client)

    assert client.delete(f"/api/collections/{collection['id']}").json() == {"success": True}
    assert client.get(f"/api/collections/{collection['id']}").status_code == 404
    assert client.delete(f"/api/collections/{collection['id']}").status_code == 404

    init = client.get("/api/init-db").json()
    assert init["tables"] == []

    index = client.get("/").json()
    assert index["storage"] == "memory"
    assert index["currency"] == "₹"


def test_sql_backend_serves_the_same_routes() -> None:
    settings = FundTrackerSettings(storage_backend="sql", database_url="sqlite://")
    client = TestClient(create_application(settings=settings))
    collection = _create_collection(client, targetAmount=1000)
    base = f"/api/collections/{collection['id']}"
    added = client.post(f"{base}/contributors", json={"name": "Ann", "amount": 400})
    contributor_id = added.json()["contributor"]["id"]

    payment = client.post(f"{base}/contributors/{contributor_id}/payments", json={"amount": 100})

    assert payment.status_code == 200
    assert payment.json()["contributor"]["paymentStatus"] == "partially_paid"
    assert client.get("/api/init-db").json()["tables"] == ["collections", "contributors"]
    assert client.get("/").json()["storage"] == "sql"
    assert client.get(f"{base}/summary").json()["totalPaid"] == 100.0
