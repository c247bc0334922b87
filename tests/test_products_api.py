# tests/test_products_api.py
from fastapi.testclient import TestClient

from catalog.config import Settings
from catalog.database import InMemoryStore
from catalog.main import create_app
from catalog.models import PLACEHOLDER_IMAGE


def make_client(**settings):
    return TestClient(create_app(store=InMemoryStore(), settings=Settings(**settings)))


def test_create_applies_defaults():
    client = make_client()
    r = client.post("/api/products", json={"title": "Backpack", "price": 1299})
    assert r.status_code == 201
    body = r.json()
    assert body["id"]
    assert body["title"] == "Backpack"
    assert body["price"] == 1299
    assert body["stock"] == 100
    assert body["category"] == "general"
    assert body["description"] == ""
    assert body["image"] == PLACEHOLDER_IMAGE
    assert body["createdAt"] and body["updatedAt"]


def test_create_rejects_negative_price():
    client = make_client()
    r = client.post("/api/products", json={"title": "X", "price": -5})
    assert r.status_code == 400
    assert "price" in r.json()["detail"]
    assert client.get("/api/products").json() == []


def test_create_requires_title_and_price():
    client = make_client()
    r = client.post("/api/products", json={"price": 10})
    assert r.status_code == 400
    assert "title" in r.json()["detail"]

    r = client.post("/api/products", json={"title": "   ", "price": 10})
    assert r.status_code == 400
    assert "title must not be empty" in r.json()["detail"]

    r = client.post("/api/products", json={"title": "No price"})
    assert r.status_code == 400
    assert "price" in r.json()["detail"]


def test_create_rejects_boolean_numbers():
    client = make_client()
    r = client.post("/api/products", json={"title": "t", "price": True})
    assert r.status_code == 400
    assert "price" in r.json()["detail"]
    r = client.post("/api/products", json={"title": "t", "price": 1, "stock": False})
    assert r.status_code == 400
    assert "stock" in r.json()["detail"]


def test_create_rejects_bad_bodies():
    client = make_client()
    assert client.post("/api/products", json=[{"title": "a", "price": 1}]).status_code == 400
    r = client.post("/api/products", content="not json", headers={"Content-Type": "application/json"})
    assert r.status_code == 400


def test_create_ignores_client_id():
    client = make_client()
    r = client.post("/api/products", json={"id": "mine", "title": "Lamp", "price": 0})
    assert r.status_code == 201
    assert r.json()["id"] != "mine"


def test_list_filters_title_case_insensitively():
    client = make_client()
    client.post("/api/products", json={"title": "Smart Watch", "price": 1999})
    client.post("/api/products", json={"title": "Running Shoes", "price": 8999})

    titles = [p["title"] for p in client.get("/api/products", params={"q": "watch"}).json()]
    assert titles == ["Smart Watch"]
    titles = [p["title"] for p in client.get("/api/products", params={"q": "WATCH"}).json()]
    assert titles == ["Smart Watch"]
    assert len(client.get("/api/products", params={"q": ""}).json()) == 2


def test_list_treats_query_literally():
    client = make_client()
    client.post("/api/products", json={"title": "Smart Watch", "price": 1999})
    r = client.get("/api/products", params={"q": "(.*"})
    assert r.status_code == 200
    assert r.json() == []


def test_list_is_newest_first():
    client = make_client()
    for title in ("first", "second", "third"):
        client.post("/api/products", json={"title": title, "price": 1})
    titles = [p["title"] for p in client.get("/api/products").json()]
    assert titles == ["third", "second", "first"]


def test_get_product_and_not_found():
    client = make_client()
    pid = client.post("/api/products", json={"title": "Mug", "price": 500}).json()["id"]

    r = client.get(f"/api/products/{pid}")
    assert r.status_code == 200
    assert r.json()["title"] == "Mug"

    r = client.get("/api/products/does-not-exist")
    assert r.status_code == 404
    assert r.json()["detail"] == "product not found"


def test_health_and_root():
    client = make_client()
    assert client.get("/").status_code == 200
    assert client.get("/health").json() == {"status": "ok", "backend": "memory", "database": "connected"}


def test_seed_sample_data_on_startup():
    with make_client(seed_sample_data=True) as client:
        titles = [p["title"] for p in client.get("/api/products").json()]
    assert "Smart Watch" in titles
    assert "Running Shoes" in titles
