"""
Login Use Case

Authenticates an account by email and password and issues a session token.
"""

import logging
from typing import Optional

from src.app.services.password_hasher import PasswordHasher
from src.app.services.session_token_codec import SessionTokenCodec
from src.app.services.unit_of_work import UnitOfWork
from src.libs.result import Error, Result, Return

from .commands import LoginCommand, parse_command
from .dtos import AccountInfo, SessionResponse

logger = logging.getLogger(__name__)


class LoginUseCase:
    """
    Use case for login and session token issuance.

    Business Rules:
    - Unknown email and wrong password both yield INVALID_CREDENTIALS
    - A dummy bcrypt check runs for unknown emails so timing does not
      reveal which accounts exist
    - Token embeds the account's current credential version
    """

    def __init__(
        self,
        uow: UnitOfWork,
        password_hasher: PasswordHasher,
        token_codec: SessionTokenCodec,
    ):
        self.uow = uow
        self.password_hasher = password_hasher
        self.token_codec = token_codec

    async def execute(
        self, email: Optional[str], password: Optional[str]
    ) -> Result[SessionResponse]:
        """
        Execute login use case.

        Args:
            email: Account email
            password: Plain text password

        Returns:
            Result with SessionResponse, or Error VALIDATION_ERROR / INVALID_CREDENTIALS
        """
        parsed = parse_command(LoginCommand, email=email, password=password)
        if parsed.is_err():
            return Return.err(parsed.error)
        command = parsed.value

        async with self.uow:
            user = await self.uow.users.get_by_email(command.email)

            if user is None:
                await self.password_hasher.verify_dummy_async(command.password)
                logger.info("Login failed: invalid credentials")
                return Return.err(
                    Error("INVALID_CREDENTIALS", "Invalid email or password")
                )

            password_valid = await self.password_hasher.verify_async(
                command.password, user.password_hash
            )
            if not password_valid:
                logger.info("Login failed: invalid credentials")
                return Return.err(
                    Error("INVALID_CREDENTIALS", "Invalid email or password")
                )

            issued = self.token_codec.issue(user.id, user.credential_version)
            logger.info(f"Login succeeded for account {user.id}")

            return Return.ok(
                SessionResponse(
                    access_token=issued.token,
                    expires_at=issued.expires_at,
                    account=AccountInfo(id=str(user.id), email=user.email),
                )
            )
