"""Pytest fixtures for testing."""
import os
import time
from collections.abc import AsyncGenerator, Callable

import jwt
import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from models.base import Base
from models.card import Card
from models.deck import Deck

# Must be set before api.main or db.session is imported, both of which load Settings
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["AUTH_URL"] = "http://auth.test"
os.environ["AUTH_API_KEY"] = "test-anon-key"
os.environ["AUTH_JWT_SECRET"] = "test-jwt-secret-with-at-least-32-bytes!"
os.environ["DEV_MODE"] = "false"

USER_A_ID = "user-a-0000"
USER_B_ID = "user-b-0000"
JWT_AUDIENCE = "authenticated"


@pytest.fixture
async def async_engine() -> AsyncGenerator[AsyncEngine]:
    """
    Create an in-memory SQLite engine with the schema.

    StaticPool keeps a single connection so every session sees the same database.
    A fresh engine per test gives each test an empty database.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
async def db_session(async_engine: AsyncEngine) -> AsyncGenerator[AsyncSession]:
    """Create an async session for a test."""
    session_factory = async_sessionmaker(
        bind=async_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with session_factory() as session:
        yield session


@pytest.fixture
def token_factory() -> Callable[..., str]:
    """Factory that mints access tokens signed with the test JWT secret."""

    def make_token(
        user_id: str,
        email: str | None = None,
        expires_in: int = 3600,
        audience: str = JWT_AUDIENCE,
        secret: str | None = None,
    ) -> str:
        claims = {"sub": user_id, "aud": audience, "exp": int(time.time()) + expires_in}
        if email:
            claims["email"] = email
        return jwt.encode(claims, secret or os.environ["AUTH_JWT_SECRET"], algorithm="HS256")

    return make_token


@pytest.fixture
async def client_factory(
    db_session: AsyncSession,
    token_factory: Callable[..., str],
) -> AsyncGenerator[Callable[[str | None], AsyncClient]]:
    """
    Factory fixture that creates test clients authenticated as a specific user.

    Pass None for a client that sends no Authorization header. All clients share
    the test's database session.
    """
    # Clear the settings cache so it picks up the test environment
    from core.config import get_settings  # noqa: PLC0415

    get_settings.cache_clear()

    from api.main import app  # noqa: PLC0415
    from db.session import get_async_session  # noqa: PLC0415

    async def override_get_async_session() -> AsyncGenerator[AsyncSession]:
        yield db_session

    app.dependency_overrides[get_async_session] = override_get_async_session

    clients: list[AsyncClient] = []

    def make_client(user_id: str | None) -> AsyncClient:
        headers = {}
        if user_id:
            headers["Authorization"] = f"Bearer {token_factory(user_id)}"
        test_client = AsyncClient(
            transport=ASGITransport(app=app),
            base_url="http://test",
            headers=headers,
        )
        clients.append(test_client)
        return test_client

    yield make_client

    for test_client in clients:
        await test_client.aclose()
    app.dependency_overrides.clear()


@pytest.fixture
def client(client_factory: Callable[[str | None], AsyncClient]) -> AsyncClient:
    """Test client authenticated as user A."""
    return client_factory(USER_A_ID)


@pytest.fixture
def client_as_user_b(client_factory: Callable[[str | None], AsyncClient]) -> AsyncClient:
    """Test client authenticated as user B."""
    return client_factory(USER_B_ID)


@pytest.fixture
def anonymous_client(client_factory: Callable[[str | None], AsyncClient]) -> AsyncClient:
    """Test client that sends no credentials."""
    return client_factory(None)


@pytest.fixture
async def user_a_deck(db_session: AsyncSession) -> Deck:
    """Create a deck belonging to user A."""
    deck = Deck(user_id=USER_A_ID, name="Spanish", slug="spanish")
    db_session.add(deck)
    await db_session.flush()
    await db_session.refresh(deck)
    return deck


@pytest.fixture
async def user_a_card(db_session: AsyncSession, user_a_deck: Deck) -> Card:
    """Create a card in user A's deck."""
    card = Card(user_id=USER_A_ID, deck_id=user_a_deck.id, front="hola", back="hello")
    db_session.add(card)
    await db_session.flush()
    await db_session.refresh(card)
    return card


@pytest.fixture
async def user_b_deck(db_session: AsyncSession) -> Deck:
    """Create a deck belonging to user B."""
    deck = Deck(user_id=USER_B_ID, name="French", slug="french")
    db_session.add(deck)
    await db_session.flush()
    await db_session.refresh(deck)
    return deck
