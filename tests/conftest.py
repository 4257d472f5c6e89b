import os
import tempfile

# Configure before the app (and its engines) are imported
os.environ.setdefault("DB_PATH", os.path.join(tempfile.gettempdir(), "tfc_league_test.db"))
os.environ["AUTO_SEED"] = "0"
os.environ["TEST_MODE"] = "1"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, Session, create_engine

from tfc_league import models  # noqa: F401  (registers tables)
from tfc_league.core.database import get_session
from tfc_league.main import app


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def client(engine):
    def override_get_session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def admin_client(client):
    resp = client.post("/auth/register", json={"email": "admin@tfc.uz", "password": "secret123"})
    assert resp.status_code == 200
    resp = client.post("/auth/login", json={"email": "admin@tfc.uz", "password": "secret123"})
    assert resp.status_code == 200
    return client
