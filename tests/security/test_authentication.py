"""
Authentication enforcement tests.

Every resource route requires a valid bearer token; failures are 401 with the
error envelope and a WWW-Authenticate challenge.
"""
from collections.abc import Callable

import pytest
from httpx import AsyncClient

PROTECTED_ROUTES = [
    ("GET", "/api/decks"),
    ("POST", "/api/decks"),
    ("GET", "/api/decks/slug/spanish"),
    ("GET", "/api/cards"),
    ("POST", "/api/cards"),
    ("GET", "/api/auth/me"),
]


@pytest.mark.parametrize(("method", "path"), PROTECTED_ROUTES)
async def test__protected_route__requires_token(
    anonymous_client: AsyncClient, method: str, path: str,
) -> None:
    response = await anonymous_client.request(method, path, json={})

    assert response.status_code == 401
    assert response.json() == {
        "status": "error",
        "message": "No token provided or invalid format",
    }
    assert response.headers["WWW-Authenticate"] == "Bearer"


async def test__expired_token__returns_401(
    client_factory: Callable[[str | None], AsyncClient],
    token_factory: Callable[..., str],
) -> None:
    client = client_factory(None)
    token = token_factory("user-a-0000", expires_in=-60)

    response = await client.get("/api/decks", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401
    assert response.json()["message"] == "Token has expired"


async def test__token_signed_with_other_secret__returns_401(
    client_factory: Callable[[str | None], AsyncClient],
    token_factory: Callable[..., str],
) -> None:
    client = client_factory(None)
    token = token_factory("user-a-0000", secret="forged-secret-that-is-also-long-enough")

    response = await client.get("/api/decks", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401


async def test__wrong_audience__returns_401(
    client_factory: Callable[[str | None], AsyncClient],
    token_factory: Callable[..., str],
) -> None:
    client = client_factory(None)
    token = token_factory("user-a-0000", audience="anon")

    response = await client.get("/api/decks", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401
    assert response.json()["message"] == "Invalid audience"


async def test__non_bearer_scheme__returns_401(anonymous_client: AsyncClient) -> None:
    response = await anonymous_client.get(
        "/api/decks", headers={"Authorization": "Basic dXNlcjpwYXNz"},
    )

    assert response.status_code == 401
