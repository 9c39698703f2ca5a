import os
import sys
import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
os.environ.setdefault('APP_ENV', 'testing')

from goshop import create_app
from goshop.config import TestingConfig
from goshop.extensions import limiter
from goshop.store import MemoryStore
from goshop.version import API_PREFIX


@pytest.fixture()
def store():
    return MemoryStore()


@pytest.fixture()
def app_instance(store):
    app = create_app(TestingConfig, store=store)
    limiter.reset()
    return app


@pytest.fixture()
def app(app_instance):
    with app_instance.app_context():
        yield app_instance


@pytest.fixture()
def client(app):
    return app.test_client()


def product_id(store, name):
    return next(p.id for p in store.products.values() if p.name == name)


def signup(client, username="ama", email="ama@example.com", password="secret123", **extra):
    body = {"username": username, "email": email, "password": password}
    body.update(extra)
    return client.post(f"{API_PREFIX}/auth/signup", json=body)
