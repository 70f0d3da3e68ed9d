"""
Shared pytest fixtures.

Uses a throwaway SQLite file so no Postgres is required for tests. The
environment is set before `app` is imported so the app's own engine points
at it too.
"""
import os

os.environ["DATABASE_URL"] = "sqlite:///./test_calmwell.db"
os.environ["OPENAI_API_KEY"] = ""

import pytest
from fastapi.testclient import TestClient

from app.core.config import settings
from app.db.base import Base, SessionLocal, engine
from app.main import app
from app.services.chat import ChatClient
from app.services.container import build_container
from app.services.events import EventBus

TEST_USER = "user-1"


class FakeChatClient(ChatClient):
    """Returns a canned completion, or raises the configured error."""

    def __init__(self, reply: str = "Take a slow breath with me.", error: Exception | None = None):
        super().__init__(api_key="")
        self.reply = reply
        self.error = error
        self.calls: list[tuple] = []

    async def send_message(self, text, history=(), system_prompt=None):
        self.calls.append((text, list(history), system_prompt))
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture(scope="session", autouse=True)
def create_tables():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def clean_tables():
    yield
    with engine.begin() as conn:
        for table in reversed(Base.metadata.sorted_tables):
            conn.execute(table.delete())


@pytest.fixture()
def db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def bus():
    return EventBus()


@pytest.fixture()
def chat_client():
    return FakeChatClient()


@pytest.fixture()
def container(chat_client):
    test_settings = settings.model_copy(update={"USER_READY_TIMEOUT": 0.05})
    return build_container(test_settings, SessionLocal, chat_client=chat_client)


@pytest.fixture()
def client(container):
    """Anonymous client: no user session yet."""
    previous = app.state.container
    app.state.container = container
    with TestClient(app) as c:
        yield c
    app.state.container = previous


@pytest.fixture()
def user_client(client):
    """Client with TEST_USER signed in."""
    r = client.put("/session", json={"user_id": TEST_USER})
    assert r.status_code == 200
    return client
