"""
Session Guard

Per-request authentication pipeline for protected routes:

    no token            -> UNAUTHENTICATED
    bad signature/expiry -> UNAUTHENTICATED
    account missing     -> UNAUTHENTICATED
    token predates last password change -> STALE_SESSION
    otherwise           -> AuthenticatedAccount

The guard only reads; it never mutates accounts or tokens.
"""

import logging
from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from src.app.services.session_token_codec import SessionTokenCodec
from src.app.services.unit_of_work import UnitOfWork
from src.libs.result import Error, Result, Return

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthenticatedAccount:
    """Snapshot of the account attached to the request context"""

    id: UUID
    email: str


class SessionGuard:
    def __init__(self, uow: UnitOfWork, token_codec: SessionTokenCodec):
        self.uow = uow
        self.token_codec = token_codec

    async def authenticate(self, token: Optional[str]) -> Result[AuthenticatedAccount]:
        if not token:
            return Return.err(
                Error("UNAUTHENTICATED", "Sign in before accessing this route")
            )

        verified = self.token_codec.verify(token)
        if verified.is_err():
            logger.info(f"Session token rejected: {verified.error.code}")
            return Return.err(Error("UNAUTHENTICATED", "Token verification failed"))
        claims = verified.value

        async with self.uow:
            user = await self.uow.users.get_by_id(claims.account_id)
            if user is None:
                return Return.err(
                    Error("UNAUTHENTICATED", "The account for this session no longer exists")
                )

            # Credential version is authoritative; the timestamp check keeps
            # the issued-at >= password_changed_at invariant explicit
            stale = claims.credential_version != user.credential_version or (
                user.password_changed_at is not None
                and claims.issued_at < user.password_changed_at
            )
            if stale:
                logger.info(f"Stale session rejected for account {user.id}")
                return Return.err(
                    Error(
                        "STALE_SESSION",
                        "Password was changed recently, please sign in again",
                    )
                )

            return Return.ok(AuthenticatedAccount(id=user.id, email=user.email))
