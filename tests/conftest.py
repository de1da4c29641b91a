import json
from typing import Dict, List, Tuple

import httpx
import pytest
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from brewbook.app.api.deps import get_db_session, get_drink_cache, get_http_client, get_llm_client
from brewbook.app.core.config import get_settings
from brewbook.app.core.errors import LLMError
from brewbook.app.db import models  # noqa: F401
from brewbook.app.db.base import Base
from brewbook.app.main import create_app
from brewbook.app.services.drink_of_day import DrinkOfDayCache
from brewbook.app.services.llm_client import ChatCompletion

EMBEDDING_VOCAB = ("coffee", "matcha", "ube", "tea", "iced", "hot", "vanilla", "chocolate")


class FakeLLM:
    """Stands in for LLMClient; replies are queued by the test."""

    def __init__(self):
        self.replies: List[str] = []
        self.chat_calls: List[Dict[str, object]] = []
        self.embedded: List[str] = []
        self.image_prompts: List[str] = []
        self.image_url = "https://images.example.com/drink.png"
        self.fail_embed = False
        self.fail_chat = False

    def queue(self, payload) -> None:
        self.replies.append(payload if isinstance(payload, str) else json.dumps(payload))

    async def chat_json(self, system_prompt, user_prompt, temperature=0.8, max_tokens=2000):
        self.chat_calls.append(
            {"system": system_prompt, "user": user_prompt, "temperature": temperature, "max_tokens": max_tokens}
        )
        if self.fail_chat:
            raise LLMError("chat endpoint unavailable")
        if not self.replies:
            raise LLMError("no reply queued")
        return ChatCompletion(content=self.replies.pop(0), tokens_used=42, model="fake-chat")

    async def embed(self, text):
        if self.fail_embed:
            raise LLMError("embedding endpoint unavailable")
        self.embedded.append(text)
        lowered = text.lower()
        return [float(lowered.count(word)) for word in EMBEDDING_VOCAB]

    async def generate_image(self, prompt, size="1024x1024", quality="standard"):
        self.image_prompts.append(prompt)
        return self.image_url


class FakeSite:
    """Maps URLs to canned responses for an httpx.MockTransport."""

    def __init__(self):
        self.pages: Dict[str, Tuple[int, str]] = {}
        self.requests: List[str] = []

    def add(self, url: str, body: str, status: int = 200) -> None:
        self.pages[url] = (status, body)

    def handler(self, request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        self.requests.append(url)
        status, body = self.pages.get(url, (404, "not found"))
        return httpx.Response(status, text=body, headers={"content-type": "text/html"})

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))


@pytest.fixture(scope="session")
def engine():
    engine = create_engine("sqlite+pysqlite:///:memory:", connect_args={"check_same_thread": False}, future=True)
    Base.metadata.create_all(bind=engine)
    return engine


@pytest.fixture
def db_session(engine):
    connection = engine.connect()
    transaction = connection.begin()
    SessionLocal = sessionmaker(bind=connection, autocommit=False, autoflush=False, future=True)
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
        transaction.rollback()
        connection.close()


@pytest.fixture
def fake_llm():
    return FakeLLM()


@pytest.fixture
def fake_site():
    return FakeSite()


@pytest.fixture
def drink_cache():
    return DrinkOfDayCache(ttl=get_drink_cache().ttl)


@pytest.fixture
def app(db_session, fake_llm, fake_site, drink_cache, monkeypatch):
    monkeypatch.setattr(get_settings(), "scraper_batch_delay_seconds", 0)
    app = create_app()

    def override_db():
        yield db_session

    async def override_http_client():
        async with fake_site.client() as client:
            yield client

    app.dependency_overrides[get_db_session] = override_db
    app.dependency_overrides[get_http_client] = override_http_client
    app.dependency_overrides[get_llm_client] = lambda: fake_llm
    app.dependency_overrides[get_drink_cache] = lambda: drink_cache
    return app


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def auth_settings():
    return get_settings()


def make_token(user_id: int, email: str, settings) -> str:
    payload = {"sub": str(user_id), "email": email}
    return jwt.encode(payload, settings.auth_secret_key, algorithm=settings.auth_algorithm)


@pytest.fixture
def user_token(auth_settings):
    return make_token(1, "user1@example.com", auth_settings)


@pytest.fixture
def auth_headers(user_token):
    return {"Authorization": f"Bearer {user_token}"}


@pytest.fixture
def other_user_headers(auth_settings):
    return {"Authorization": f"Bearer {make_token(2, 'user2@example.com', auth_settings)}"}
