import pytest
from httpx import AsyncClient

from tests.fixtures.api import bearer, signup_and_login


@pytest.mark.asyncio
async def test_change_password_invalidates_old_sessions(client: AsyncClient):
    """Password Change Revokes Existing Sessions

    Given I am signed in on two devices
    When I change my password on one of them
    Then I receive a fresh session token that works
    And the token held by the other device is rejected as stale
    """
    old_token = await signup_and_login(client)

    response = await client.post(
        "/auth/change-password",
        json={
            "current_password": "pass1234",
            "new_password": "newpass99",
            "new_password_confirm": "newpass99",
        },
        headers=bearer(old_token),
    )

    assert response.status_code == 200
    new_token = response.json()["access_token"]
    assert new_token != old_token
    assert response.headers["set-cookie"].startswith(f"token={new_token}")
    client.cookies.clear()

    stale = await client.get("/users/me", headers=bearer(old_token))
    assert stale.status_code == 401
    assert stale.json()["error"]["code"] == "STALE_SESSION"

    fresh = await client.get("/users/me", headers=bearer(new_token))
    assert fresh.status_code == 200


@pytest.mark.asyncio
async def test_change_password_then_login_with_new_password(client: AsyncClient):
    token = await signup_and_login(client)

    await client.post(
        "/auth/change-password",
        json={
            "current_password": "pass1234",
            "new_password": "newpass99",
            "new_password_confirm": "newpass99",
        },
        headers=bearer(token),
    )

    old = await client.post("/auth/login", json={"email": "a@x.com", "password": "pass1234"})
    new = await client.post("/auth/login", json={"email": "a@x.com", "password": "newpass99"})

    assert old.status_code == 401
    assert new.status_code == 200


@pytest.mark.asyncio
async def test_change_password_wrong_current_password(client: AsyncClient):
    token = await signup_and_login(client)

    response = await client.post(
        "/auth/change-password",
        json={
            "current_password": "wrongpass",
            "new_password": "newpass99",
            "new_password_confirm": "newpass99",
        },
        headers=bearer(token),
    )

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "INVALID_CREDENTIALS"

    # Session is still valid
    assert (await client.get("/users/me", headers=bearer(token))).status_code == 200


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "new_password,confirm,code",
    [
        ("newpass99", "newpass98", "PASSWORD_MISMATCH"),
        ("pass1234", "pass1234", "PASSWORD_UNCHANGED"),
        ("short", "short", "VALIDATION_ERROR"),
    ],
)
async def test_change_password_rejected(client: AsyncClient, new_password, confirm, code):
    token = await signup_and_login(client)

    response = await client.post(
        "/auth/change-password",
        json={
            "current_password": "pass1234",
            "new_password": new_password,
            "new_password_confirm": confirm,
        },
        headers=bearer(token),
    )

    assert response.status_code == 400
    assert response.json()["error"]["code"] == code


@pytest.mark.asyncio
async def test_change_password_requires_session(client: AsyncClient):
    response = await client.post(
        "/auth/change-password",
        json={
            "current_password": "pass1234",
            "new_password": "newpass99",
            "new_password_confirm": "newpass99",
        },
    )

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "UNAUTHENTICATED"
