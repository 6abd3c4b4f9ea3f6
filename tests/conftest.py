"""Pytest configuration and fixtures."""

import os
from collections.abc import Callable, Generator, Iterator
from typing import Any

import pytest
from fastapi.testclient import TestClient

# Set test environment before importing app modules
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["LOG_LEVEL"] = "WARNING"
for _key in (
    "OPENAI_API_KEY",
    "ELEVENLABS_API_KEY",
    "RUNWAY_API_KEY",
    "HEYGEN_API_KEY",
    "R2_ENDPOINT",
    "R2_ACCESS_KEY_ID",
    "R2_SECRET_ACCESS_KEY",
    "R2_PUBLIC_URL",
    "SUPABASE_URL",
    "SUPABASE_ANON_KEY",
):
    os.environ[_key] = ""

import httpx  # noqa: E402
from sqlalchemy import Engine, create_engine  # noqa: E402
from sqlalchemy.orm import Session, sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from contentforge.adapters.avatar import StubAvatarProvider  # noqa: E402
from contentforge.adapters.image import StubImageProvider  # noqa: E402
from contentforge.adapters.registry import ProviderRegistry  # noqa: E402
from contentforge.adapters.text import StubTextProvider  # noqa: E402
from contentforge.adapters.video import StubVideoProvider  # noqa: E402
from contentforge.adapters.voice import StubVoiceProvider  # noqa: E402
from contentforge.api.auth import IdentityProvider  # noqa: E402
from contentforge.db.models import Base  # noqa: E402
from contentforge.domain.models import AuthenticatedUser  # noqa: E402

ALICE = AuthenticatedUser(id="user-alice", email="alice@example.com", name="Alice")
BOB = AuthenticatedUser(id="user-bob", email="bob@example.com", name="Bob")

ALICE_HEADERS = {"Authorization": "Bearer token-alice"}
BOB_HEADERS = {"Authorization": "Bearer token-bob"}


class FakeIdentityProvider(IdentityProvider):
    """Maps fixed tokens to users."""

    def __init__(self) -> None:
        self.users = {"token-alice": ALICE, "token-bob": BOB}

    async def verify(self, token: str) -> AuthenticatedUser | None:
        return self.users.get(token)


class FakeProviderAPI:
    """Scriptable provider HTTP API served through ``httpx.MockTransport``.

    Routes are ``(method, path) -> handler`` where the handler returns an
    ``httpx.Response``. Every request is recorded.
    """

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], Callable[[httpx.Request], httpx.Response]] = {}
        self.requests: list[httpx.Request] = []

    def on(self, method: str, path: str, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self.routes[(method, path)] = handler

    def respond(self, method: str, path: str, status_code: int = 200, **kwargs: Any) -> None:
        self.on(method, path, lambda request: httpx.Response(status_code, **kwargs))

    def sequence(self, method: str, path: str, payloads: list[dict[str, Any]]) -> None:
        """Serve payloads in order, repeating the last one."""
        remaining = list(payloads)

        def handler(request: httpx.Request) -> httpx.Response:
            payload = remaining.pop(0) if len(remaining) > 1 else remaining[0]
            return httpx.Response(200, json=payload)

        self.on(method, path, handler)

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handler = self.routes.get((request.method, request.url.path))
        if handler is None:
            return httpx.Response(404, json={"error": "not found"})
        return handler(request)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handle))


@pytest.fixture
def provider_api() -> FakeProviderAPI:
    """Fake provider HTTP API."""
    return FakeProviderAPI()


@pytest.fixture
def http_client(provider_api: FakeProviderAPI) -> httpx.AsyncClient:
    """AsyncClient routed to the fake provider API."""
    return provider_api.client()


@pytest.fixture
def stub_registry() -> ProviderRegistry:
    """Registry with every modality served by its stub."""
    return ProviderRegistry(
        text=StubTextProvider(None, None),  # type: ignore[arg-type]
        image=StubImageProvider(None, None),  # type: ignore[arg-type]
        voice=StubVoiceProvider(None, None),  # type: ignore[arg-type]
        video=StubVideoProvider(),
        avatar=StubAvatarProvider(),
    )


@pytest.fixture
def db_engine() -> Generator[Engine, None, None]:
    """In-memory SQLite engine shared across threads."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(db_engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=db_engine, autocommit=False, autoflush=False)


@pytest.fixture
def db_session(session_factory: sessionmaker[Session]) -> Generator[Session, None, None]:
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def make_client(
    session_factory: sessionmaker[Session],
    stub_registry: ProviderRegistry,
) -> Iterator[Callable[..., TestClient]]:
    """Build a TestClient against the app with test dependencies wired in.

    Pass ``providers`` to swap the provider registry and ``storage`` to swap
    the blob store.
    """
    from contentforge.api.deps import get_blob_storage, get_identity_provider, get_providers
    from contentforge.db.session import get_session
    from contentforge.main import app

    clients: list[TestClient] = []

    def override_session() -> Generator[Session, None, None]:
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    def factory(
        providers: ProviderRegistry | None = None,
        storage: Any | None = None,
        raise_server_exceptions: bool = True,
    ) -> TestClient:
        registry = providers or stub_registry
        app.dependency_overrides[get_session] = override_session
        app.dependency_overrides[get_providers] = lambda: registry
        app.dependency_overrides[get_identity_provider] = FakeIdentityProvider
        if storage is not None:
            app.dependency_overrides[get_blob_storage] = lambda: storage

        client = TestClient(app, raise_server_exceptions=raise_server_exceptions)
        client.__enter__()
        clients.append(client)
        return client

    yield factory

    for client in clients:
        client.__exit__(None, None, None)
    app.dependency_overrides.clear()


@pytest.fixture
def api_client(make_client: Callable[..., TestClient]) -> TestClient:
    """Test client backed by stub providers."""
    return make_client()
