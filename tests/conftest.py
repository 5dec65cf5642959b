import os
import tempfile

# Configure the app for tests before anything from pawtrack is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["STORAGE_BACKEND"] = "local"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="pawtrack-uploads-")
os.environ["DB_LOG_SLOW_QUERIES"] = "false"

import pytest
from fastapi.testclient import TestClient

from pawtrack import rate_limiter
from pawtrack.database import Base, SessionLocal, engine
from pawtrack.main import app
from pawtrack.utils.storage import get_storage

PASSWORD = "supersecret1"


@pytest.fixture(autouse=True)
def _fresh_database():
    Base.metadata.create_all(bind=engine)
    get_storage.cache_clear()
    rate_limiter.memory_cache.clear()
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def register_business(client, email="owner@dogs.test", business="Happy Paws"):
    r = client.post(
        "/auth/register",
        json={
            "email": email,
            "password": PASSWORD,
            "confirmPassword": PASSWORD,
            "firstName": "Ana",
            "lastName": "Owner",
            "businessName": business,
        },
    )
    assert r.status_code == 201, r.text
    return r.json()


def login(client, email, password=PASSWORD):
    r = client.post("/auth/login", json={"email": email, "password": password})
    assert r.status_code == 200, r.text
    return bearer(r.json()["accessToken"])


@pytest.fixture
def admin_headers(client):
    return bearer(register_business(client)["accessToken"])


@pytest.fixture
def teacher(client, admin_headers):
    r = client.post(
        "/users",
        json={
            "email": "teacher@dogs.test",
            "firstName": "Tomas",
            "lastName": "Trainer",
            "role": "teacher",
            "password": PASSWORD,
        },
        headers=admin_headers,
    )
    assert r.status_code == 201, r.text
    return r.json()


@pytest.fixture
def teacher_headers(client, teacher):
    return login(client, teacher["email"])


@pytest.fixture
def customer(client, admin_headers):
    """A client record of the admin's business"""
    r = client.post(
        "/clients",
        json={"firstName": "Carla", "lastName": "Cliente", "email": "carla@mail.test", "phone": "555-0101"},
        headers=admin_headers,
    )
    assert r.status_code == 201, r.text
    return r.json()


@pytest.fixture
def pet_type(client, admin_headers):
    r = client.post("/pet-types", json={"name": "Perro"}, headers=admin_headers)
    assert r.status_code == 201, r.text
    return r.json()


@pytest.fixture
def dog(client, admin_headers, customer, pet_type):
    r = client.post(
        "/dogs",
        json={
            "clientId": customer["id"],
            "name": "Rocky",
            "petTypeId": pet_type["id"],
            "breed": "Labrador",
            "age": 3,
            "weight": "28.5",
        },
        headers=admin_headers,
    )
    assert r.status_code == 201, r.text
    return r.json()


@pytest.fixture
def training_service(client, admin_headers):
    services = client.get("/services", headers=admin_headers).json()
    return next(s for s in services if s["type"] == "training")


@pytest.fixture
def portal_headers(client, admin_headers, customer):
    """Login of a client-role user linked to the customer record"""
    r = client.post(
        "/users",
        json={
            "email": "carla.portal@mail.test",
            "firstName": "Carla",
            "lastName": "Cliente",
            "role": "client",
            "password": PASSWORD,
            "clientId": customer["id"],
        },
        headers=admin_headers,
    )
    assert r.status_code == 201, r.text
    return login(client, "carla.portal@mail.test")


@pytest.fixture
def other_admin_headers(client):
    """Admin of a second, unrelated business"""
    return bearer(register_business(client, "rival@dogs.test", "Rival Kennel")["accessToken"])
