"""End-to-end tests for /api/partners."""

import uuid
from datetime import datetime

from conftest import upload_exists


def _category(client, name="Exchange"):
    return client.post("/api/categories/", json={"name": name}).json()


def _partner(cat_id, **extra):
    body = {"name": "OKX", "category_id": cat_id, "link": "https://okx.com", "featured": True}
    body.update(extra)
    return body


def test_create_with_image_then_clear(client, upload) -> None:
    cat = _category(client)
    address = upload("okx.jpg")

    res = client.post("/api/partners/", json=_partner(cat["id"], image_url=address))
    assert res.status_code == 201
    partner = res.json()
    assert partner["image_url"] == address
    assert partner["featured"] is True
    assert partner["category_id"] == cat["id"]

    res = client.put(f"/api/partners/{partner['id']}", json=_partner(cat["id"], image_url=None))
    assert res.status_code == 200
    assert res.json()["image_url"] is None
    assert not upload_exists(address)


def test_omitted_image_is_left_alone(client, upload) -> None:
    cat = _category(client)
    address = upload()
    partner = client.post("/api/partners/", json=_partner(cat["id"], image_url=address)).json()

    res = client.put(f"/api/partners/{partner['id']}", json=_partner(cat["id"], name="OKX Exchange", featured=False))
    body = res.json()
    assert body["name"] == "OKX Exchange"
    assert body["featured"] is False
    assert body["image_url"] == address
    assert upload_exists(address)


def test_unknown_category_is_rejected_and_upload_discarded(client, upload) -> None:
    address = upload()
    res = client.post("/api/partners/", json=_partner(str(uuid.uuid4()), image_url=address))
    assert res.status_code == 400
    assert not upload_exists(address)


def test_partner_without_category(client) -> None:
    res = client.post("/api/partners/", json={"name": "Solo", "link": "http://solo.example.com"})
    assert res.status_code == 201
    assert res.json()["category_id"] is None
    assert res.json()["featured"] is False


def test_invalid_link(client) -> None:
    res = client.post("/api/partners/", json={"name": "OKX", "link": "okx.com"})
    assert res.status_code == 400
    assert res.json()["issues"][0]["loc"][-1] == "link"


def test_update_missing_leaves_upload(client, upload) -> None:
    address = upload()
    res = client.put(f"/api/partners/{uuid.uuid4()}", json={"name": "OKX", "link": "https://okx.com", "image_url": address})
    assert res.status_code == 404
    assert upload_exists(address)


def test_delete(client, upload) -> None:
    address = upload()
    partner = client.post("/api/partners/", json={"name": "OKX", "link": "https://okx.com", "image_url": address}).json()
    assert client.delete(f"/api/partners/{partner['id']}").json() == {"ok": True}
    assert client.get("/api/partners/").json() == {"items": []}
    assert not upload_exists(address)
    assert client.delete(f"/api/partners/{partner['id']}").status_code == 404


def test_list_is_newest_first(client) -> None:
    ids = [
        client.post("/api/partners/", json={"name": name, "link": "https://p.example.com"}).json()["id"]
        for name in ("First", "Second", "Third")
    ]
    listed = [p["id"] for p in client.get("/api/partners/").json()["items"]]
    assert listed == list(reversed(ids))


def test_update_refreshes_updated_at(client) -> None:
    created = client.post("/api/partners/", json={"name": "OKX", "link": "https://okx.com"}).json()
    updated = client.put(f"/api/partners/{created['id']}", json={"name": "OKX", "link": "https://okx.com", "featured": True}).json()
    assert datetime.fromisoformat(updated["updated_at"]) > datetime.fromisoformat(created["updated_at"])
    assert updated["created_at"] == created["created_at"]
