import logging
from typing import Optional
from uuid import UUID

from src.app.services.password_hasher import PasswordHasher
from src.app.services.unit_of_work import UnitOfWork
from src.libs.result import Error, Result, Return

from .commands import DeleteAccountCommand, parse_command
from .dtos import DeleteAccountResponse

logger = logging.getLogger(__name__)


class DeleteAccountUseCase:
    """
    Deletes an account after re-checking its password.
    Reset tokens owned by the account are removed in the same transaction.
    """

    def __init__(self, uow: UnitOfWork, password_hasher: PasswordHasher):
        self.uow = uow
        self.password_hasher = password_hasher

    async def execute(
        self, account_id: UUID, password: Optional[str]
    ) -> Result[DeleteAccountResponse]:
        parsed = parse_command(DeleteAccountCommand, password=password)
        if parsed.is_err():
            return Return.err(parsed.error)
        command = parsed.value

        async with self.uow:
            user = await self.uow.users.get_by_id(account_id)
            if user is None:
                return Return.err(Error("ACCOUNT_NOT_FOUND", "Account not found"))

            password_valid = await self.password_hasher.verify_async(
                command.password, user.password_hash
            )
            if not password_valid:
                return Return.err(Error("INVALID_CREDENTIALS", "Password is incorrect"))

            await self.uow.password_reset_tokens.delete_by_user_id(user.id)
            await self.uow.users.delete(user.id)
            await self.uow.commit()
            logger.info(f"Account deleted: {account_id}")

            return Return.ok(
                DeleteAccountResponse(status="success", message="Account was deleted")
            )
