import pytest

from app import create_app
from auth import limiter
from config import TestConfig
import storage

ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = "secret123"


def product_payload(**overrides):
    payload = {
        "name": "Remera",
        "description": "Remera de algodón",
        "price": "10.00",
        "category": "Remeras",
        "stock": 5,
        "featured": False,
        "images": ["https://cdn.example.com/remera.jpg"],
        "sizes": ["S", "M", "L"],
        "colors": ["Negro", "Blanco"],
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def app():
    app = create_app(TestConfig)
    with app.app_context():
        limiter.reset()
    yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def admin(app):
    with app.app_context():
        return storage.create_admin(ADMIN_USERNAME, ADMIN_PASSWORD).public()


@pytest.fixture
def auth_client(client, admin):
    r = client.post("/api/admin/login", json={"username": ADMIN_USERNAME, "password": ADMIN_PASSWORD})
    assert r.status_code == 200
    return client
