"""
Complete Password Reset Use Case

Redeems a reset token and sets a new password.
"""

import logging
from datetime import datetime
from typing import Callable, Optional

from src.app.services.auth_settings import AuthSettings
from src.app.services.password_hasher import PasswordHasher
from src.app.services.reset_token_store import ResetTokenStore
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utcnow
from src.libs.result import Error, Result, Return

from .commands import CompletePasswordResetCommand, parse_command
from .dtos import CompletePasswordResetResponse

logger = logging.getLogger(__name__)


class CompletePasswordResetUseCase:
    """
    Use case for completing a password reset.

    Business Rules:
    - New password and confirmation must match
    - Unknown, expired and already used tokens all yield
      TOKEN_INVALID_OR_EXPIRED
    - The token is deleted on use
    - Password change invalidates every existing session
    - No session is issued; the user signs in afterwards
    """

    def __init__(
        self,
        uow: UnitOfWork,
        password_hasher: PasswordHasher,
        settings: AuthSettings,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.uow = uow
        self.password_hasher = password_hasher
        self.settings = settings
        self.clock = clock

    async def execute(
        self,
        token: Optional[str],
        new_password: Optional[str],
        new_password_confirm: Optional[str],
    ) -> Result[CompletePasswordResetResponse]:
        parsed = parse_command(
            CompletePasswordResetCommand,
            token=token,
            new_password=new_password,
            new_password_confirm=new_password_confirm,
        )
        if parsed.is_err():
            return Return.err(parsed.error)
        command = parsed.value

        if command.new_password != command.new_password_confirm:
            return Return.err(
                Error("PASSWORD_MISMATCH", "New password and confirmation do not match")
            )

        invalid_token = Error(
            "TOKEN_INVALID_OR_EXPIRED", "Password reset token is invalid or has expired"
        )

        async with self.uow:
            store = ResetTokenStore(
                self.uow.password_reset_tokens, self.settings.reset_token_ttl, self.clock
            )
            consumed = await store.consume(command.token)
            if consumed.is_err():
                if consumed.error.code == "TOKEN_EXPIRED":
                    # Persist removal of the expired record
                    await self.uow.commit()
                return Return.err(invalid_token)

            user = await self.uow.users.get_by_id(consumed.value)
            if user is None:
                return Return.err(invalid_token)

            user.password_hash = await self.password_hasher.hash_async(command.new_password)
            user.password_changed_at = self.clock() - self.settings.password_changed_at_skew
            user.credential_version += 1
            await self.uow.users.update(user)

            await self.uow.commit()
            logger.info(f"Password reset completed for account {user.id}")

            return Return.ok(
                CompletePasswordResetResponse(
                    status="success",
                    message="Password has been reset successfully, please sign in",
                )
            )
