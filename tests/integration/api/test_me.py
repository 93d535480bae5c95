import pytest
from httpx import AsyncClient

from tests.fixtures.api import bearer, signup_and_login


@pytest.mark.asyncio
async def test_me_with_bearer_token(client: AsyncClient):
    token = await signup_and_login(client)

    response = await client.get("/users/me", headers=bearer(token))

    assert response.status_code == 200
    assert response.json()["email"] == "a@x.com"
    assert set(response.json()) == {"id", "email"}


@pytest.mark.asyncio
async def test_me_with_session_cookie(client: AsyncClient):
    token = await signup_and_login(client)

    response = await client.get("/users/me", headers={"Cookie": f"token={token}"})

    assert response.status_code == 200
    assert response.json()["email"] == "a@x.com"


@pytest.mark.asyncio
async def test_me_without_token(client: AsyncClient):
    response = await client.get("/users/me")

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "UNAUTHENTICATED"


@pytest.mark.asyncio
async def test_me_with_invalid_token(client: AsyncClient):
    response = await client.get("/users/me", headers=bearer("invalid_token_here"))

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "UNAUTHENTICATED"
