import pytest
from httpx import AsyncClient
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.domain.entities import User


@pytest.mark.asyncio
async def test_successful_signup(client: AsyncClient, db_session: AsyncSession):
    """Successful Signup

    Given no account exists with email "founder@acme.com"
    When I submit signup with matching password and confirmation
    Then the account is created with a hashed password
    And the response never contains the password or its hash
    """
    response = await client.post("/auth/signup", json={
        "email": "Founder@Acme.com",
        "password": "SecurePass123!",
        "password_confirm": "SecurePass123!",
    })

    assert response.status_code == 201
    data = response.json()
    assert data["account"]["email"] == "founder@acme.com"
    assert "id" in data["account"]
    assert "password" not in response.text
    assert "password_hash" not in data["account"]

    user = (await db_session.exec(select(User).where(User.email == "founder@acme.com"))).one()
    assert user.password_hash.startswith("$2b$")
    assert user.password_hash != "SecurePass123!"
    assert user.password_changed_at is None


@pytest.mark.asyncio
async def test_signup_existing_email(client: AsyncClient):
    """Email Already Exists

    Given an account already exists with email "founder@acme.com"
    When I submit signup with that email in another case
    Then the request fails with 409 Conflict and DUPLICATE_EMAIL
    """
    payload = {
        "email": "founder@acme.com",
        "password": "SecurePass123!",
        "password_confirm": "SecurePass123!",
    }
    assert (await client.post("/auth/signup", json=payload)).status_code == 201

    payload["email"] = "FOUNDER@acme.com"
    response = await client.post("/auth/signup", json=payload)

    assert response.status_code == 409
    assert response.json()["error"]["code"] == "DUPLICATE_EMAIL"


@pytest.mark.asyncio
async def test_signup_password_mismatch(client: AsyncClient):
    response = await client.post("/auth/signup", json={
        "email": "founder@acme.com",
        "password": "SecurePass123!",
        "password_confirm": "SecurePass124!",
    })

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "PASSWORD_MISMATCH"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload",
    [
        {},
        {"email": "founder@acme.com", "password": "SecurePass123!"},
        {"email": "invalid-email", "password": "SecurePass123!", "password_confirm": "SecurePass123!"},
        {"email": "founder@acme.com", "password": "short", "password_confirm": "short"},
    ],
)
async def test_signup_invalid_input(client: AsyncClient, payload):
    response = await client.post("/auth/signup", json=payload)

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"
