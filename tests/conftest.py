import os
import uuid

import pytest

# Settings are read at import time
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["AUTO_CREATE_DB"] = "false"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["JWT_SECRET"] = "test-secret"

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from gestor.db import Base, get_db
from gestor.main import app as gestor_app


@pytest.fixture(scope="session")
def app():
    return gestor_app


@pytest.fixture(scope="function")
def engine():
    """Fresh in-memory SQLite database for every test"""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture(scope="function")
def session_factory(app, engine):
    TestingSession = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)

    def override_get_db():
        db = TestingSession()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestingSession
    app.dependency_overrides.clear()


def _signup(client: TestClient, email: str) -> TestClient:
    res = client.post("/auth/signup", json={"email": email, "password": "secret-pass", "nombre": email.split("@")[0]})
    assert res.status_code == 201, res.text
    client.headers["Authorization"] = f"Bearer {res.json()['access_token']}"
    return client


@pytest.fixture(scope="function")
def anon(app, session_factory):
    """Client with no identity"""
    return TestClient(app)


@pytest.fixture(scope="function")
def owner_a(app, session_factory):
    return _signup(TestClient(app), "owner.a@example.com")


@pytest.fixture(scope="function")
def owner_b(app, session_factory):
    return _signup(TestClient(app), "owner.b@example.com")


@pytest.fixture
def categoria(owner_a):
    res = owner_a.post("/categories", json={"nombre": "Audio"})
    assert res.status_code == 201, res.text
    return res.json()


@pytest.fixture
def marca(owner_a):
    res = owner_a.post("/brands", json={"nombre": "Yamaha"})
    assert res.status_code == 201, res.text
    return res.json()


@pytest.fixture
def producto(owner_a, categoria, marca):
    res = owner_a.post(
        "/products",
        json={
            "nombre": "Mesa de mezclas",
            "precio": 1200.0,
            "precio_alquiler": 60.0,
            "categoria_id": categoria["id"],
            "marca_id": marca["id"],
        },
    )
    assert res.status_code == 201, res.text
    return res.json()


@pytest.fixture
def puesto(owner_a):
    res = owner_a.post("/positions", json={"nombre": "Técnico de sonido", "precio_dia": 150.0})
    assert res.status_code == 201, res.text
    return res.json()


@pytest.fixture
def personal(owner_a):
    res = owner_a.post("/personnel", json={"nombre": "Lucía", "apellidos": "Martín"})
    assert res.status_code == 201, res.text
    return res.json()


@pytest.fixture
def missing_id():
    return str(uuid.uuid4())
