import logging
from typing import Optional

from src.app.repositories.user_repository import DuplicateEmailError
from src.app.services.password_hasher import PasswordHasher
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import User
from src.libs.result import Error, Result, Return

from .commands import SignupCommand, parse_command
from .dtos import AccountInfo, SignupResponse

logger = logging.getLogger(__name__)


class SignupUseCase:
    """
    Signup Use Case

    Business Logic:
    1. Validate email, password and confirmation against SignupCommand
    2. Reject when password and confirmation differ
    3. Reject when the email is already registered
    4. Hash password with bcrypt and create the User
    5. Commit; password_changed_at stays unset for new accounts
    """

    def __init__(self, uow: UnitOfWork, password_hasher: PasswordHasher):
        self.uow = uow
        self.password_hasher = password_hasher

    async def execute(
        self,
        email: Optional[str],
        password: Optional[str],
        password_confirm: Optional[str],
    ) -> Result[SignupResponse]:
        """
        Execute signup use case

        Returns:
            Result[SignupResponse] with the public account fields, or Error
            VALIDATION_ERROR / PASSWORD_MISMATCH / DUPLICATE_EMAIL
        """
        parsed = parse_command(
            SignupCommand,
            email=email,
            password=password,
            password_confirm=password_confirm,
        )
        if parsed.is_err():
            return Return.err(parsed.error)
        command = parsed.value

        if command.password != command.password_confirm:
            return Return.err(
                Error("PASSWORD_MISMATCH", "Password and confirmation do not match")
            )

        async with self.uow:
            existing_user = await self.uow.users.get_by_email(command.email)
            if existing_user:
                return Return.err(Error("DUPLICATE_EMAIL", "Email already registered"))

            password_hash = await self.password_hasher.hash_async(command.password)

            try:
                user = await self.uow.users.create(
                    User(email=command.email, password_hash=password_hash)
                )
            except DuplicateEmailError:
                # Lost a race with a concurrent signup for the same email
                return Return.err(Error("DUPLICATE_EMAIL", "Email already registered"))

            await self.uow.commit()
            logger.info(f"Account created: {user.id}")

            return Return.ok(
                SignupResponse(
                    account=AccountInfo(id=str(user.id), email=user.email),
                    message="Account was successfully created",
                )
            )
