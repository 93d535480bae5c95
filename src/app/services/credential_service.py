"""
Credential Service

Entry point for every identity mutation. Binds the shared collaborators
once per request and runs the matching auth use case.
"""

from datetime import datetime
from typing import Callable, Optional
from uuid import UUID

from src.app.services.auth_settings import AuthSettings
from src.app.services.email_sender import IEmailSender
from src.app.services.password_hasher import PasswordHasher
from src.app.services.session_token_codec import SessionTokenCodec
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.auth import (
    ChangePasswordUseCase,
    CompletePasswordResetResponse,
    CompletePasswordResetUseCase,
    DeleteAccountResponse,
    DeleteAccountUseCase,
    LoginUseCase,
    RequestPasswordResetResponse,
    RequestPasswordResetUseCase,
    SessionResponse,
    SignupResponse,
    SignupUseCase,
)
from src.domain.base import utcnow
from src.libs.result import Result


class CredentialService:
    def __init__(
        self,
        uow: UnitOfWork,
        password_hasher: PasswordHasher,
        token_codec: SessionTokenCodec,
        email_sender: IEmailSender,
        settings: AuthSettings,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.uow = uow
        self.password_hasher = password_hasher
        self.token_codec = token_codec
        self.email_sender = email_sender
        self.settings = settings
        self.clock = clock

    async def signup(
        self,
        email: Optional[str],
        password: Optional[str],
        password_confirm: Optional[str],
    ) -> Result[SignupResponse]:
        use_case = SignupUseCase(self.uow, self.password_hasher)
        return await use_case.execute(email, password, password_confirm)

    async def login(
        self, email: Optional[str], password: Optional[str]
    ) -> Result[SessionResponse]:
        use_case = LoginUseCase(self.uow, self.password_hasher, self.token_codec)
        return await use_case.execute(email, password)

    async def change_password(
        self,
        account_id: UUID,
        current_password: Optional[str],
        new_password: Optional[str],
        new_password_confirm: Optional[str],
    ) -> Result[SessionResponse]:
        use_case = ChangePasswordUseCase(
            self.uow, self.password_hasher, self.token_codec, self.settings, self.clock
        )
        return await use_case.execute(
            account_id, current_password, new_password, new_password_confirm
        )

    async def request_password_reset(
        self, email: Optional[str]
    ) -> Result[RequestPasswordResetResponse]:
        use_case = RequestPasswordResetUseCase(
            self.uow, self.email_sender, self.settings, self.clock
        )
        return await use_case.execute(email)

    async def complete_password_reset(
        self,
        token: Optional[str],
        new_password: Optional[str],
        new_password_confirm: Optional[str],
    ) -> Result[CompletePasswordResetResponse]:
        use_case = CompletePasswordResetUseCase(
            self.uow, self.password_hasher, self.settings, self.clock
        )
        return await use_case.execute(token, new_password, new_password_confirm)

    async def delete_account(
        self, account_id: UUID, password: Optional[str]
    ) -> Result[DeleteAccountResponse]:
        use_case = DeleteAccountUseCase(self.uow, self.password_hasher)
        return await use_case.execute(account_id, password)
