from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.app.services.auth_settings import AuthSettings
from src.app.services.password_hasher import PasswordHasher
from src.app.services.session_token_codec import SessionTokenCodec
from tests.fixtures.clock import FrozenClock
from tests.fixtures.in_memory import CapturingEmailSender, InMemoryUnitOfWork


@pytest.fixture
def mock_uow():
    """Mock UnitOfWork with all repositories"""
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)  # Must return False to not suppress exceptions
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()

    uow.users = MagicMock()
    uow.users.get_by_email = AsyncMock()
    uow.users.get_by_id = AsyncMock()
    uow.users.create = AsyncMock(side_effect=lambda user: user)
    uow.users.update = AsyncMock(side_effect=lambda user: user)
    uow.users.delete = AsyncMock()

    uow.password_reset_tokens = MagicMock()
    uow.password_reset_tokens.replace = AsyncMock(side_effect=lambda token: token)
    uow.password_reset_tokens.get_by_token_hash = AsyncMock()
    uow.password_reset_tokens.delete = AsyncMock(return_value=True)
    uow.password_reset_tokens.delete_by_user_id = AsyncMock(return_value=0)
    return uow


@pytest.fixture
def settings():
    # Lowest bcrypt cost keeps the suite fast
    return AuthSettings(
        jwt_secret="unit-test-secret",
        bcrypt_rounds=4,
        session_token_lifetime=timedelta(days=7),
        reset_token_ttl=timedelta(hours=1),
        password_changed_at_skew=timedelta(seconds=1),
        password_reset_url="https://app.test/reset-password?token={token}",
    )


@pytest.fixture
def clock():
    return FrozenClock()


@pytest.fixture
def hasher(settings):
    return PasswordHasher(settings.bcrypt_rounds)


@pytest.fixture
def token_codec(settings, clock):
    return SessionTokenCodec(settings, clock=clock)


@pytest.fixture
def memory_uow():
    return InMemoryUnitOfWork()


@pytest.fixture
def email_sender():
    return CapturingEmailSender()
