"""
Request Password Reset Use Case

Issues a password reset token and emails the reset link.
"""

import logging
from datetime import datetime
from typing import Callable, Optional

from src.app.services.auth_settings import AuthSettings
from src.app.services.email_sender import IEmailSender
from src.app.services.reset_token_store import ResetTokenStore
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utcnow
from src.libs.result import Error, Result, Return

from .commands import RequestPasswordResetCommand, parse_command
from .dtos import RequestPasswordResetResponse

logger = logging.getLogger(__name__)

RESET_EMAIL_SUBJECT = "Your password reset link"


class RequestPasswordResetUseCase:
    """
    Use case for requesting password reset.

    Business Rules:
    - Unknown email yields ACCOUNT_NOT_FOUND; hiding it from clients is
      the boundary's decision
    - Any previous reset token for the account is replaced
    - The token is committed before the email goes out; a delivery
      failure is reported as a warning, not as an error
    - The plaintext token only ever appears in the email body
    """

    def __init__(
        self,
        uow: UnitOfWork,
        email_sender: IEmailSender,
        settings: AuthSettings,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.uow = uow
        self.email_sender = email_sender
        self.settings = settings
        self.clock = clock

    def _build_email_body(self, reset_token: str) -> str:
        reset_link = self.settings.password_reset_url.format(token=reset_token)
        minutes = int(self.settings.reset_token_ttl.total_seconds() // 60)
        return (
            "Forgot your password? Submit a new password using the link below:\n"
            f"{reset_link}\n\n"
            f"The link is valid for {minutes} minutes and can be used once.\n"
            "If you didn't request a password reset, please ignore this email."
        )

    async def execute(self, email: Optional[str]) -> Result[RequestPasswordResetResponse]:
        """
        Execute request password reset use case.

        Returns:
            Result with reset status, or Error VALIDATION_ERROR / ACCOUNT_NOT_FOUND
        """
        parsed = parse_command(RequestPasswordResetCommand, email=email)
        if parsed.is_err():
            return Return.err(parsed.error)
        command = parsed.value

        async with self.uow:
            user = await self.uow.users.get_by_email(command.email)
            if user is None:
                return Return.err(
                    Error("ACCOUNT_NOT_FOUND", "There is no account with this email")
                )

            store = ResetTokenStore(
                self.uow.password_reset_tokens, self.settings.reset_token_ttl, self.clock
            )
            reset_token = await store.issue(user.id)
            await self.uow.commit()
            user_id = user.id

        logger.info(f"Password reset requested for account {user_id}")

        delivery = await self.email_sender.send(
            command.email, RESET_EMAIL_SUBJECT, self._build_email_body(reset_token)
        )
        if delivery.is_err():
            logger.warning(
                f"Password reset email not delivered for account {user_id}: "
                f"{delivery.error.code}"
            )
            return Return.ok(
                RequestPasswordResetResponse(
                    status="issued",
                    message="Password reset was issued but the email could not be delivered",
                    email_delivered=False,
                )
            )

        return Return.ok(
            RequestPasswordResetResponse(
                status="sent",
                message="A password reset link has been sent to your email",
                email_delivered=True,
            )
        )
