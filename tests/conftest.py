import os
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET", "test-secret")

from typing import Any, Dict, List, Optional

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

import models  # noqa: F401
from classify import ClassifyClient, get_classify_client
from database import get_session
from main import app
from security import issue_session, register_user

SEARCH_1984 = b"""<?xml version="1.0" encoding="UTF-8"?>
<classify xmlns="http://classify.oclc.org">
  <response code="4"/>
  <works>
    <work author="Orwell" editions="120" format="Book" holdings="9000" hyr="1950" itemtype="itemtype-book" lyr="2017" owi="123" schemes="DDC LCC" title="1984" wi="123"/>
  </works>
</classify>
"""

LOOKUP_123 = b"""<?xml version="1.0" encoding="UTF-8"?>
<classify xmlns="http://classify.oclc.org">
  <response code="0"/>
  <work author="Orwell" editions="120" format="Book" holdings="9000" hyr="1950" itemtype="itemtype-book" lyr="2017" owi="123" title="1984">123</work>
  <recommendations>
    <ddc>
      <mostPopular holdings="5000" nsfa="823.912" sfa="813"/>
    </ddc>
  </recommendations>
</classify>
"""


class FakeResponse:
    def __init__(self, content: bytes, status_code: int = 200) -> None:
        self.content = content
        self.status_code = status_code


class FakeHTTP:
    """Remplace `requests` : renvoie des corps prédéfinis selon le paramètre."""

    def __init__(
        self,
        responses: Optional[Dict[str, bytes]] = None,
        error: Optional[Exception] = None,
        status_code: int = 200,
    ) -> None:
        self.responses = responses or {}
        self.error = error
        self.status_code = status_code
        self.calls: List[Dict[str, Any]] = []

    def get(self, url: str, params: Dict[str, str], timeout: float) -> FakeResponse:
        self.calls.append({"url": url, "params": dict(params), "timeout": timeout})
        if self.error is not None:
            raise self.error
        key = params.get("title") or params.get("owi") or ""
        return FakeResponse(self.responses.get(key, b"<garbage"), self.status_code)


@pytest.fixture
def fake_http() -> FakeHTTP:
    return FakeHTTP({"1984": SEARCH_1984, "123": LOOKUP_123})


@pytest.fixture
def classify_client(fake_http: FakeHTTP) -> ClassifyClient:
    return ClassifyClient(base_url="http://classify.test/Classify", timeout=2, http=fake_http)


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
def alice(session):
    return register_user(session, "alice", "wonderland")


@pytest.fixture
def bob(session):
    return register_user(session, "bob", "builder")


@pytest.fixture
def client(engine, classify_client):
    def _session_override():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = _session_override
    app.dependency_overrides[get_classify_client] = lambda: classify_client
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def login_as(client):
    def _login(user) -> TestClient:
        client.cookies.set("user", issue_session(user))
        return client

    return _login

