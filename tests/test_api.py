from __future__ import annotations

import errno
import tempfile

from services.errors import StorageError


def test_root(client) -> None:
    assert client.get("/").json() == {"message": "ASIN Watcher backend is running"}


def test_health(client) -> None:
    resp = client.get("/api/health")

    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "ok"
    assert body["message"] == "ASIN Watcher API is running"
    assert isinstance(body["timestamp"], int)


def test_lifespan_creates_data_directory(client, service) -> None:
    assert service.storage.path.parent.is_dir()


def test_list_starts_empty(client) -> None:
    assert client.get("/api/deals").json() == {"deals": []}


def test_ingest_add_then_update(client) -> None:
    resp = client.post("/api/ingest", json={"asin": "B001", "title": "Widget", "price": "9.99"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["message"] == "Deal B001 added"
    assert body["deal"]["status"] == "Incomplete"
    assert "code" not in body["deal"]

    resp = client.post("/api/ingest", json={"asin": "B001", "code": "SAVE10"})
    body = resp.json()
    assert body["message"] == "Deal B001 updated"
    assert body["deal"]["title"] == "Widget"
    assert body["deal"]["price"] == "9.99"
    assert body["deal"]["status"] == "Ready"

    deals = client.get("/api/deals").json()["deals"]
    assert deals == [body["deal"]]


def test_ingest_keeps_numeric_price(client) -> None:
    body = client.post("/api/ingest", json={"asin": "N1", "price": 10, "discount": 2.5}).json()

    assert body["deal"]["price"] == 10
    assert body["deal"]["discount"] == 2.5


def test_ingest_without_asin_is_rejected(client, service) -> None:
    resp = client.post("/api/ingest", json={"title": "Widget"})

    assert resp.status_code == 400
    assert resp.json() == {"error": "ASIN is required"}
    assert not service.storage.path.exists()


def test_ingest_with_empty_asin_is_rejected(client) -> None:
    resp = client.post("/api/ingest", json={"asin": ""})

    assert resp.status_code == 400
    assert resp.json() == {"error": "ASIN is required"}


def test_replace_deals(client) -> None:
    deals = [{"asin": "A", "status": "Ready"}, {"asin": "B"}]

    resp = client.post("/api/deals", json={"deals": deals})

    assert resp.status_code == 200
    assert resp.json() == {"success": True, "count": 2}
    assert client.get("/api/deals").json() == {"deals": deals}


def test_replace_requires_array(client) -> None:
    resp = client.post("/api/deals", json={"deals": {"asin": "A"}})

    assert resp.status_code == 400
    assert resp.json() == {"error": "Deals must be an array"}


def test_non_object_body_is_rejected(client) -> None:
    resp = client.post("/api/deals", json=[{"asin": "A"}])

    assert resp.status_code == 400
    assert "error" in resp.json()


def test_clear_deals(client) -> None:
    client.post("/api/ingest", json={"asin": "A"})

    resp = client.delete("/api/deals")

    assert resp.json() == {"success": True, "message": "All deals cleared"}
    assert client.get("/api/deals").json() == {"deals": []}


def test_storage_failure_is_reported(client, service, monkeypatch) -> None:
    def fail(deals):
        raise StorageError("read-only filesystem")

    monkeypatch.setattr(service.storage, "write_all", fail)

    resp = client.post("/api/ingest", json={"asin": "A"})
    assert resp.status_code == 500
    assert resp.json() == {"error": "Failed to ingest deal"}

    resp = client.post("/api/deals", json={"deals": []})
    assert resp.status_code == 500
    assert resp.json() == {"error": "Failed to update deals"}


def test_clear_failure_is_reported(client, service, monkeypatch) -> None:
    def fail():
        raise StorageError("read-only filesystem")

    monkeypatch.setattr(service.storage, "clear", fail)

    resp = client.delete("/api/deals")
    assert resp.status_code == 500
    assert resp.json() == {"error": "Failed to clear deals"}


def test_extension_origin_is_allowed(client) -> None:
    resp = client.get("/api/health", headers={"Origin": "chrome-extension://abcdef"})

    assert resp.headers["access-control-allow-origin"] == "chrome-extension://abcdef"


def test_read_only_data_directory_is_reported_as_json(client, monkeypatch) -> None:
    def read_only(*args, **kwargs):
        raise OSError(errno.EROFS, "Read-only file system")

    monkeypatch.setattr(tempfile, "mkstemp", read_only)

    resp = client.post("/api/ingest", json={"asin": "A"})

    assert resp.status_code == 500
    assert resp.json() == {"error": "Failed to ingest deal"}


def test_ingest_accepts_any_json_values(client) -> None:
    resp = client.post("/api/ingest", json={"asin": "A", "title": "T", "price": 1, "code": 10})

    assert resp.status_code == 200
    deal = resp.json()["deal"]
    assert deal["code"] == 10
    assert deal["status"] == "Ready"


def test_ingest_with_numeric_asin_is_rejected(client) -> None:
    resp = client.post("/api/ingest", json={"asin": 123})

    assert resp.status_code == 400
    assert resp.json() == {"error": "ASIN is required"}
