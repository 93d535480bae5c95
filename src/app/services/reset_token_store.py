"""
Reset Token Store

Issues and consumes single-use password reset tokens.
Only the SHA-256 hash of a token is persisted; the plaintext goes out
by email and is never stored or logged.
"""

import hashlib
import secrets
from datetime import datetime, timedelta
from typing import Callable
from uuid import UUID

from src.app.repositories.password_reset_token_repository import IPasswordResetTokenRepository
from src.domain.base import utcnow
from src.domain.entities import PasswordResetToken
from src.libs.result import Error, Result, Return


class ResetTokenStore:
    """
    Business Rules:
    - 32 random bytes (256 bits) per token, URL-safe encoded
    - At most one live token per user: issuing replaces the previous one
    - Consumed tokens are deleted
    - Expired tokens are treated as absent and deleted when found
    """

    def __init__(
        self,
        repository: IPasswordResetTokenRepository,
        ttl: timedelta,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.repository = repository
        self.ttl = ttl
        self.clock = clock

    @staticmethod
    def hash_token(plaintext: str) -> str:
        return hashlib.sha256(plaintext.encode()).hexdigest()

    async def issue(self, user_id: UUID) -> str:
        """
        Create a reset token for a user, superseding any previous one

        Returns:
            The plaintext token (to be delivered out-of-band only)
        """
        plaintext = secrets.token_urlsafe(32)
        now = self.clock()
        await self.repository.replace(
            PasswordResetToken(
                user_id=user_id,
                token_hash=self.hash_token(plaintext),
                created_at=now,
                expires_at=now + self.ttl,
            )
        )
        return plaintext

    async def consume(self, plaintext: str) -> Result[UUID]:
        """
        Redeem a reset token

        Returns:
            Result with the owning user id, or Error TOKEN_NOT_FOUND / TOKEN_EXPIRED
        """
        if not plaintext:
            return Return.err(Error("TOKEN_NOT_FOUND", "Password reset token not found"))

        record = await self.repository.get_by_token_hash(self.hash_token(plaintext))
        if record is None:
            return Return.err(Error("TOKEN_NOT_FOUND", "Password reset token not found"))

        if not await self.repository.delete(record):
            # Consumed concurrently by another request
            return Return.err(Error("TOKEN_NOT_FOUND", "Password reset token not found"))

        if record.expires_at <= self.clock():
            return Return.err(Error("TOKEN_EXPIRED", "Password reset token has expired"))

        return Return.ok(record.user_id)
