"""
Change Password Use Case

Replaces the password of an authenticated account and invalidates every
session token issued before the change.
"""

import logging
from datetime import datetime
from typing import Callable, Optional
from uuid import UUID

from src.app.services.auth_settings import AuthSettings
from src.app.services.password_hasher import PasswordHasher
from src.app.services.session_token_codec import SessionTokenCodec
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utcnow
from src.libs.result import Error, Result, Return

from .commands import ChangePasswordCommand, parse_command
from .dtos import AccountInfo, SessionResponse

logger = logging.getLogger(__name__)


class ChangePasswordUseCase:
    """
    Business Rules:
    - Current password must verify (INVALID_CREDENTIALS otherwise)
    - New password and confirmation must match (PASSWORD_MISMATCH)
    - New password must differ from the current one (PASSWORD_UNCHANGED)
    - credential_version is incremented, so older tokens become stale
    - password_changed_at is stamped slightly in the past so the token
      issued in the same instant is not stale
    - A fresh session token is returned
    """

    def __init__(
        self,
        uow: UnitOfWork,
        password_hasher: PasswordHasher,
        token_codec: SessionTokenCodec,
        settings: AuthSettings,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.uow = uow
        self.password_hasher = password_hasher
        self.token_codec = token_codec
        self.settings = settings
        self.clock = clock

    async def execute(
        self,
        account_id: UUID,
        current_password: Optional[str],
        new_password: Optional[str],
        new_password_confirm: Optional[str],
    ) -> Result[SessionResponse]:
        parsed = parse_command(
            ChangePasswordCommand,
            current_password=current_password,
            new_password=new_password,
            new_password_confirm=new_password_confirm,
        )
        if parsed.is_err():
            return Return.err(parsed.error)
        command = parsed.value

        async with self.uow:
            user = await self.uow.users.get_by_id(account_id)
            if user is None:
                return Return.err(Error("ACCOUNT_NOT_FOUND", "Account not found"))

            current_valid = await self.password_hasher.verify_async(
                command.current_password, user.password_hash
            )
            if not current_valid:
                return Return.err(
                    Error("INVALID_CREDENTIALS", "Current password is incorrect")
                )

            if command.new_password != command.new_password_confirm:
                return Return.err(
                    Error("PASSWORD_MISMATCH", "New password and confirmation do not match")
                )

            if command.new_password == command.current_password:
                return Return.err(
                    Error(
                        "PASSWORD_UNCHANGED",
                        "New password must be different from the current one",
                    )
                )

            user.password_hash = await self.password_hasher.hash_async(command.new_password)
            user.password_changed_at = self.clock() - self.settings.password_changed_at_skew
            user.credential_version += 1
            await self.uow.users.update(user)

            issued = self.token_codec.issue(user.id, user.credential_version)

            await self.uow.commit()
            logger.info(f"Password changed for account {user.id}")

            return Return.ok(
                SessionResponse(
                    access_token=issued.token,
                    expires_at=issued.expires_at,
                    account=AccountInfo(id=str(user.id), email=user.email),
                )
            )
