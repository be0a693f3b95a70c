import os
import tempfile

# settings are read at import time, so the environment goes first
_TMP_DIR = tempfile.mkdtemp(prefix="carmarket-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TMP_DIR, 'test.db')}"
os.environ["CELERY_TASK_ALWAYS_EAGER"] = "true"
os.environ["LOGIN_GUARD_BACKEND"] = "memory"
os.environ["SESSION_SECRET"] = "test-session-secret"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from carmarket.data.database import Base, SessionLocal, engine  # noqa: E402
from carmarket.data.models.car import CarModel  # noqa: E402
from carmarket.data.models.user import UserModel  # noqa: E402
from carmarket.main import create_app  # noqa: E402
from carmarket.services.attempt_store import MemoryAttemptStore  # noqa: E402
from carmarket.services.auth_service import hash_password  # noqa: E402
from carmarket.services.login_guard import LoginGuard  # noqa: E402

PASSWORD = "Secret#123"


class FakeClock:
    def __init__(self, start: float = 1_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


@pytest.fixture(autouse=True)
def reset_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def guard(clock):
    return LoginGuard(MemoryAttemptStore(), clock=clock)


@pytest.fixture
def app(guard):
    return create_app(login_guard=guard)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def make_client(app):
    """Extra clients, each with its own cookie jar (one per logged-in user)."""
    clients = []

    def factory():
        c = TestClient(app)
        c.__enter__()
        clients.append(c)
        return c

    yield factory

    for c in clients:
        c.__exit__(None, None, None)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


def create_user(username: str, role: str = "user", password: str = PASSWORD) -> int:
    with SessionLocal() as session:
        user = UserModel(username=username, password=hash_password(password), role=role)
        session.add(user)
        session.commit()
        return user.id


def create_car(owner_id: int, **overrides) -> int:
    fields = dict(
        name="Mercedes G63",
        price=15000000,
        max_speed=220,
        acceleration="4.5",
        drive="AWD",
        category="suv",
        server="rublevka",
        created_by=owner_id,
    )
    fields.update(overrides)
    with SessionLocal() as session:
        car = CarModel(**fields)
        session.add(car)
        session.commit()
        return car.id


def car_payload(**overrides) -> dict:
    data = {
        "name": "BMW M5",
        "price": 8500000,
        "maxSpeed": 305,
        "acceleration": "3.3",
        "drive": "RWD",
        "category": "sport",
        "server": "patriki",
        "description": "F90 sport sedan",
    }
    data.update(overrides)
    return data


def login(client: TestClient, username: str, password: str = PASSWORD):
    resp = client.post("/api/login", json={"username": username, "password": password})
    assert resp.status_code == 200, resp.text
    return resp.json()
