"""
Authentication Use Cases

All credential and session lifecycle business logic.
"""

from .signup_use_case import SignupUseCase
from .login_use_case import LoginUseCase
from .change_password_use_case import ChangePasswordUseCase
from .request_password_reset_use_case import RequestPasswordResetUseCase
from .complete_password_reset_use_case import CompletePasswordResetUseCase
from .delete_account_use_case import DeleteAccountUseCase
from .commands import (
    SignupCommand,
    LoginCommand,
    ChangePasswordCommand,
    RequestPasswordResetCommand,
    CompletePasswordResetCommand,
    DeleteAccountCommand,
    parse_command,
)
from .dtos import (
    AccountInfo,
    SignupResponse,
    SessionResponse,
    RequestPasswordResetResponse,
    CompletePasswordResetResponse,
    DeleteAccountResponse,
)

__all__ = [
    # Use Cases
    "SignupUseCase",
    "LoginUseCase",
    "ChangePasswordUseCase",
    "RequestPasswordResetUseCase",
    "CompletePasswordResetUseCase",
    "DeleteAccountUseCase",
    # Commands
    "SignupCommand",
    "LoginCommand",
    "ChangePasswordCommand",
    "RequestPasswordResetCommand",
    "CompletePasswordResetCommand",
    "DeleteAccountCommand",
    "parse_command",
    # DTOs
    "AccountInfo",
    "SignupResponse",
    "SessionResponse",
    "RequestPasswordResetResponse",
    "CompletePasswordResetResponse",
    "DeleteAccountResponse",
]
