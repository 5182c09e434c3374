from datetime import date, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import insert

from rasoi import config
from rasoi.db.engine import get_engine
from rasoi.db.schema import metadata, users
from rasoi.main import app
from rasoi.security import create_token, hash_password

EVENT_DATE = date(2026, 11, 20)
RETURN_DATE = EVENT_DATE + timedelta(days=2)


@pytest.fixture
def engine(tmp_path, monkeypatch):
    monkeypatch.setattr(config, "DB_URL", f"sqlite:///{tmp_path / 'rasoi-test.sqlite'}")
    engine = get_engine()
    metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def client(engine):
    with TestClient(app) as c:
        yield c


def _add_user(engine, name, email, password, role):
    with engine.begin() as conn:
        return conn.execute(
            insert(users).values(
                name=name,
                email=email,
                password_hash=hash_password(password),
                role=role,
            )
        ).inserted_primary_key[0]


@pytest.fixture
def admin_id(engine):
    return _add_user(engine, "Meet", "admin@rasoi.com", "admin123", "admin")


@pytest.fixture
def worker_id(engine):
    return _add_user(engine, "Ramesh", "ramesh@rasoi.com", "worker123", "worker")


@pytest.fixture
def admin_headers(admin_id):
    return {"Authorization": f"Bearer {create_token(admin_id, 'admin')}"}


@pytest.fixture
def worker_headers(worker_id):
    return {"Authorization": f"Bearer {create_token(worker_id, 'worker')}"}


@pytest.fixture
def make_item(client, admin_headers):
    def _make(name="Patila", quantity=10, price="50", **extra):
        body = {
            "name": name,
            "nameLocalized": extra.pop("nameLocalized", "પતીલા"),
            "category": extra.pop("category", "Vessels"),
            "unit": extra.pop("unit", "pcs"),
            "totalQuantity": quantity,
            "price": price,
            **extra,
        }
        resp = client.post("/inventory", json=body, headers=admin_headers)
        assert resp.status_code == 201, resp.text
        return resp.json()

    return _make


@pytest.fixture
def order_body():
    def _body(lines, **overrides):
        body = {
            "customerName": "Hiren Shah",
            "phone": "9825012345",
            "address": "12 Station Road, Rajkot",
            "eventDate": EVENT_DATE.isoformat(),
            "returnDate": RETURN_DATE.isoformat(),
            "items": lines,
        }
        body.update(overrides)
        return body

    return _body


@pytest.fixture
def make_order(client, worker_headers, order_body):
    def _make(lines, **overrides):
        resp = client.post("/orders", json=order_body(lines, **overrides), headers=worker_headers)
        assert resp.status_code == 201, resp.text
        return resp.json()

    return _make
