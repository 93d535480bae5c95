import asyncio
from uuid import uuid4

import pytest
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from src.adapter.repositories.password_reset_token_repository import PasswordResetTokenRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.services.credential_service import CredentialService
from src.app.services.password_hasher import PasswordHasher
from src.app.services.reset_token_store import ResetTokenStore
from src.app.services.session_token_codec import SessionTokenCodec


@pytest.fixture
def session_factory(engine):
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest.fixture
def make_service(auth_settings, email_sender):
    def factory(session):
        return CredentialService(
            SqlAlchemyUnitOfWork(session),
            PasswordHasher(rounds=auth_settings.bcrypt_rounds),
            SessionTokenCodec(auth_settings),
            email_sender,
            auth_settings,
        )

    return factory


@pytest.mark.asyncio
async def test_concurrent_resets_with_one_token_succeed_once(
    session_factory, make_service, email_sender
):
    """Concurrent Password Resets

    Given a reset token was emailed to me
    When two requests redeem it at the same time on separate connections
    Then exactly one of them sets a new password
    """
    async with session_factory() as session:
        service = make_service(session)
        assert (await service.signup("a@x.com", "pass1234", "pass1234")).is_ok()
        assert (await service.request_password_reset("a@x.com")).is_ok()
    token = email_sender.last_reset_token()

    async with session_factory() as first, session_factory() as second:
        results = await asyncio.gather(
            make_service(first).complete_password_reset(token, "brandnew1", "brandnew1"),
            make_service(second).complete_password_reset(token, "another22", "another22"),
        )

    assert sorted(result.is_ok() for result in results) == [False, True]
    failed = next(result for result in results if result.is_err())
    assert failed.error.code == "TOKEN_INVALID_OR_EXPIRED"

    winner = "brandnew1" if results[0].is_ok() else "another22"
    loser = "another22" if results[0].is_ok() else "brandnew1"
    async with session_factory() as session:
        service = make_service(session)
        assert (await service.login("a@x.com", winner)).is_ok()
        assert (await service.login("a@x.com", loser)).is_err()


@pytest.mark.asyncio
async def test_deleting_a_token_twice_reports_it_gone(session_factory, auth_settings):
    async with session_factory() as session:
        repository = PasswordResetTokenRepository(session)
        store = ResetTokenStore(repository, ttl=auth_settings.reset_token_ttl)
        plaintext = await store.issue(uuid4())
        await session.commit()
        record = await repository.get_by_token_hash(ResetTokenStore.hash_token(plaintext))

        assert await repository.delete(record) is True
        assert await repository.delete(record) is False
