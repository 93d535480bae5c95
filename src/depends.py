from functools import lru_cache
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession
from starlette import status

from config import ApplicationConfig
from src.adapter.services.email_sender import LoggingEmailSender, SmtpEmailSender
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.api.error import ClientError
from src.app.services.auth_settings import AuthSettings
from src.app.services.credential_service import CredentialService
from src.app.services.email_sender import IEmailSender
from src.app.services.password_hasher import PasswordHasher
from src.app.services.session_guard import AuthenticatedAccount, SessionGuard
from src.app.services.session_token_codec import SessionTokenCodec
from src.app.services.unit_of_work import UnitOfWork

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)

security = HTTPBearer(auto_error=False)


async def get_unit_of_work():
    async with AsyncSessionLocal() as session:
        yield SqlAlchemyUnitOfWork(session)


@lru_cache
def get_auth_settings() -> AuthSettings:
    return AuthSettings.from_config(ApplicationConfig)


@lru_cache
def _password_hasher(rounds: int) -> PasswordHasher:
    return PasswordHasher(rounds)


def get_password_hasher(
    settings: AuthSettings = Depends(get_auth_settings),
) -> PasswordHasher:
    return _password_hasher(settings.bcrypt_rounds)


def get_session_token_codec(
    settings: AuthSettings = Depends(get_auth_settings),
) -> SessionTokenCodec:
    return SessionTokenCodec(settings)


@lru_cache
def get_email_sender() -> IEmailSender:
    if not ApplicationConfig.SMTP_HOST:
        return LoggingEmailSender()
    return SmtpEmailSender(
        host=ApplicationConfig.SMTP_HOST,
        port=ApplicationConfig.SMTP_PORT,
        from_address=ApplicationConfig.SMTP_FROM,
        user=ApplicationConfig.SMTP_USER,
        password=ApplicationConfig.SMTP_PASSWORD,
        use_tls=ApplicationConfig.SMTP_USE_TLS,
    )


def get_credential_service(
    uow: UnitOfWork = Depends(get_unit_of_work),
    settings: AuthSettings = Depends(get_auth_settings),
    password_hasher: PasswordHasher = Depends(get_password_hasher),
    token_codec: SessionTokenCodec = Depends(get_session_token_codec),
    email_sender: IEmailSender = Depends(get_email_sender),
) -> CredentialService:
    return CredentialService(uow, password_hasher, token_codec, email_sender, settings)


def get_session_guard(
    uow: UnitOfWork = Depends(get_unit_of_work),
    token_codec: SessionTokenCodec = Depends(get_session_token_codec),
) -> SessionGuard:
    return SessionGuard(uow, token_codec)


def get_session_token(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Optional[str]:
    """Session token from an explicit Bearer header, falling back to the session cookie"""
    if credentials is not None:
        return credentials.credentials
    return request.cookies.get(ApplicationConfig.SESSION_COOKIE_NAME)


async def get_current_account(
    token: Optional[str] = Depends(get_session_token),
    guard: SessionGuard = Depends(get_session_guard),
) -> AuthenticatedAccount:
    """
    Dependency guarding protected routes.

    Raises:
        ClientError: 401 if the token is missing, invalid, expired or stale
    """
    result = await guard.authenticate(token)
    if result.is_err():
        raise ClientError(result.error, status_code=status.HTTP_401_UNAUTHORIZED)
    return result.value


async def create_tables():
    """Create missing tables on the configured database"""
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
