"""
Shared pytest fixtures.

The registry runs on a throw-away SQLite file per test and the remote bot is
an httpx MockTransport, so nothing here touches the network or ./data.
"""
from typing import Callable, List, Union

import httpx
import pytest
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import NullPool

from registry.models import Base as RegistryBase


# ============================================================================
# Registry
# ============================================================================

@pytest.fixture
async def registry_sessionmaker(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'registry.db'}", poolclass=NullPool)
    async with engine.begin() as conn:
        await conn.run_sync(RegistryBase.metadata.create_all)
    yield sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)
    await engine.dispose()


@pytest.fixture
async def db(registry_sessionmaker):
    async with registry_sessionmaker() as session:
        yield session


@pytest.fixture
def connections_file(tmp_path, monkeypatch):
    path = tmp_path / "userdata" / "connections.json"
    monkeypatch.setattr("utils.connections_file.CONNECTIONS_PATH", path)
    return path


# ============================================================================
# Remote bot
# ============================================================================

Reply = Union[httpx.Response, Exception, Callable[[httpx.Request], httpx.Response]]


class FakeBot:
    """
    Scripted bot API. Each request pops the next reply; the last one repeats.
    A reply can be a Response, an exception to raise, or a callable.
    """

    def __init__(self):
        self.replies: List[Reply] = [httpx.Response(200, json={"status": "pong"})]
        self.requests: List[httpx.Request] = []
        self.transport = httpx.MockTransport(self.handle)

    def script(self, *replies: Reply) -> "FakeBot":
        self.replies = list(replies)
        return self

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        reply = self.replies.pop(0) if len(self.replies) > 1 else self.replies[0]
        if isinstance(reply, Exception):
            raise reply
        if callable(reply) and not isinstance(reply, httpx.Response):
            return reply(request)
        return reply


class FakeSleep:
    """Stands in for asyncio.sleep and remembers the requested delays."""

    def __init__(self):
        self.delays: List[float] = []

    async def __call__(self, seconds: float):
        self.delays.append(seconds)


@pytest.fixture
def bot():
    return FakeBot()


@pytest.fixture
def fake_sleep():
    return FakeSleep()


# ============================================================================
# App
# ============================================================================

@pytest.fixture
async def api(registry_sessionmaker, connections_file, bot, fake_sleep):
    from main import app
    from registry.session import get_registry_session
    from routes.proxy import get_client_options

    async def _session():
        async with registry_sessionmaker() as session:
            yield session

    app.dependency_overrides[get_registry_session] = _session
    app.dependency_overrides[get_client_options] = lambda: {"transport": bot.transport, "sleep": fake_sleep}
    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
