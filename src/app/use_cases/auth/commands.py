"""
Authentication Commands

One declarative schema per operation. Use cases parse their raw input
through parse_command exactly once; any schema violation comes back as
Error("VALIDATION_ERROR", ...).
"""

from typing import Type, TypeVar

from pydantic import BaseModel, EmailStr, Field, ValidationError, field_validator

from src.app.services.password_hasher import MAX_PASSWORD_BYTES
from src.libs.result import Error, Result, Return

MIN_PASSWORD_LENGTH = 8
MAX_PASSWORD_LENGTH = 128

C = TypeVar("C", bound=BaseModel)


def _check_password_bytes(value: str) -> str:
    # Longer passwords would be cut short by bcrypt
    if len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValueError(f"must be at most {MAX_PASSWORD_BYTES} bytes in UTF-8")
    return value


def parse_command(command_cls: Type[C], **fields) -> Result[C]:
    """Build a command, translating schema violations into a VALIDATION_ERROR"""
    try:
        return Return.ok(command_cls(**fields))
    except ValidationError as exc:
        first = exc.errors()[0]
        location = ".".join(str(part) for part in first["loc"]) or "input"
        return Return.err(Error("VALIDATION_ERROR", f"{location}: {first['msg']}"))


class _EmailCommand(BaseModel):
    email: EmailStr

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, value):
        if isinstance(value, str):
            return value.strip().lower()
        return value


class SignupCommand(_EmailCommand):
    password: str = Field(min_length=MIN_PASSWORD_LENGTH, max_length=MAX_PASSWORD_LENGTH)
    password_confirm: str = Field(
        min_length=MIN_PASSWORD_LENGTH, max_length=MAX_PASSWORD_LENGTH
    )

    check_password_bytes = field_validator("password", "password_confirm")(_check_password_bytes)


class LoginCommand(_EmailCommand):
    # No policy check here: a short password is just a wrong password
    password: str = Field(min_length=1, max_length=MAX_PASSWORD_LENGTH)


class ChangePasswordCommand(BaseModel):
    current_password: str = Field(min_length=1, max_length=MAX_PASSWORD_LENGTH)
    new_password: str = Field(
        min_length=MIN_PASSWORD_LENGTH, max_length=MAX_PASSWORD_LENGTH
    )
    new_password_confirm: str = Field(
        min_length=MIN_PASSWORD_LENGTH, max_length=MAX_PASSWORD_LENGTH
    )

    check_password_bytes = field_validator("new_password", "new_password_confirm")(
        _check_password_bytes
    )


class RequestPasswordResetCommand(_EmailCommand):
    pass


class CompletePasswordResetCommand(BaseModel):
    token: str = Field(min_length=1, max_length=256)
    new_password: str = Field(
        min_length=MIN_PASSWORD_LENGTH, max_length=MAX_PASSWORD_LENGTH
    )
    new_password_confirm: str = Field(
        min_length=MIN_PASSWORD_LENGTH, max_length=MAX_PASSWORD_LENGTH
    )

    check_password_bytes = field_validator("new_password", "new_password_confirm")(
        _check_password_bytes
    )


class DeleteAccountCommand(BaseModel):
    password: str = Field(min_length=1, max_length=MAX_PASSWORD_LENGTH)
