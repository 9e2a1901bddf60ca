"""Tests for the health endpoint."""
from collections.abc import Callable
from typing import Any

from httpx import AsyncClient
from sqlalchemy.exc import OperationalError


class _BrokenSession:
    async def execute(self, *_args: Any, **_kwargs: Any) -> None:
        raise OperationalError("SELECT 1", {}, Exception("connection refused"))


async def test__health__reports_healthy_database(anonymous_client: AsyncClient) -> None:
    response = await anonymous_client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "database": "healthy"}


async def test__health__unreachable_database_returns_503(
    client_factory: Callable[[str | None], AsyncClient],
) -> None:
    client = client_factory(None)
    from api.main import app  # noqa: PLC0415
    from db.session import get_async_session  # noqa: PLC0415

    async def broken_session() -> Any:
        yield _BrokenSession()

    app.dependency_overrides[get_async_session] = broken_session

    response = await client.get("/health")

    assert response.status_code == 503
    assert response.json() == {"status": "degraded", "database": "unhealthy"}
