from typing import Optional

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel, Field

from config import ApplicationConfig
from src.api.error import ClientError, ServerError
from src.app.services.auth_settings import AuthSettings
from src.app.services.credential_service import CredentialService
from src.app.services.session_guard import AuthenticatedAccount
from src.app.use_cases.auth import (
    CompletePasswordResetResponse,
    DeleteAccountResponse,
    RequestPasswordResetResponse,
    SessionResponse,
    SignupResponse,
)
from src.depends import get_auth_settings, get_credential_service, get_current_account

router = APIRouter(prefix="/auth", tags=["Authentication"])

# Input is validated once inside the use cases, so request models only
# describe the payload shape and leave every field optional.

BAD_REQUEST_CODES = ("VALIDATION_ERROR", "PASSWORD_MISMATCH", "PASSWORD_UNCHANGED")


def set_session_cookie(response: Response, session: SessionResponse, settings: AuthSettings):
    response.set_cookie(
        key=ApplicationConfig.SESSION_COOKIE_NAME,
        value=session.access_token,
        max_age=int(settings.session_token_lifetime.total_seconds()),
        httponly=True,
        secure=ApplicationConfig.SESSION_COOKIE_SECURE,
        samesite="lax",
    )


def clear_session_cookie(response: Response):
    response.delete_cookie(
        key=ApplicationConfig.SESSION_COOKIE_NAME,
        httponly=True,
        secure=ApplicationConfig.SESSION_COOKIE_SECURE,
        samesite="lax",
    )


class MessageResponse(BaseModel):
    status: str
    message: str


class SignupRequest(BaseModel):
    """Signup HTTP request payload"""

    email: Optional[str] = Field(default=None, description="Account email address")
    password: Optional[str] = Field(default=None, description="Password (min 8 chars)")
    password_confirm: Optional[str] = Field(default=None, description="Password again")


@router.post("/signup", status_code=status.HTTP_201_CREATED, response_model=SignupResponse)
async def signup(
    request: SignupRequest,
    service: CredentialService = Depends(get_credential_service),
):
    """
    Create an account.

    Raises:
        - 400 Bad Request: Invalid input or password mismatch
        - 409 Conflict: Email already registered
        - 500 Internal Server Error: Server error
    """
    result = await service.signup(request.email, request.password, request.password_confirm)

    if result.is_err():
        error = result.error
        if error.code in BAD_REQUEST_CODES:
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        elif error.code == "DUPLICATE_EMAIL":
            raise ClientError(error, status_code=status.HTTP_409_CONFLICT)
        raise ServerError(error)

    return result.value


class LoginRequest(BaseModel):
    """Login HTTP request payload"""

    email: Optional[str] = Field(default=None, description="Account email address")
    password: Optional[str] = Field(default=None, description="Account password")


@router.post("/login", status_code=status.HTTP_200_OK, response_model=SessionResponse)
async def login(
    request: LoginRequest,
    response: Response,
    service: CredentialService = Depends(get_credential_service),
    settings: AuthSettings = Depends(get_auth_settings),
):
    """
    Sign in and receive a session token (cookie and response body).

    Raises:
        - 400 Bad Request: Invalid input
        - 401 Unauthorized: Invalid email or password
        - 500 Internal Server Error: Server error
    """
    result = await service.login(request.email, request.password)

    if result.is_err():
        error = result.error
        if error.code in BAD_REQUEST_CODES:
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        elif error.code == "INVALID_CREDENTIALS":
            raise ClientError(error, status_code=status.HTTP_401_UNAUTHORIZED)
        raise ServerError(error)

    set_session_cookie(response, result.value, settings)
    return result.value


@router.post("/logout", status_code=status.HTTP_200_OK, response_model=MessageResponse)
async def logout(response: Response):
    """Clear the session cookie. Tokens are stateless, nothing is revoked server-side."""
    clear_session_cookie(response)
    return MessageResponse(status="success", message="Logged out")


class ChangePasswordRequest(BaseModel):
    """Change password HTTP request payload"""

    current_password: Optional[str] = None
    new_password: Optional[str] = None
    new_password_confirm: Optional[str] = None


@router.post(
    "/change-password", status_code=status.HTTP_200_OK, response_model=SessionResponse
)
async def change_password(
    request: ChangePasswordRequest,
    response: Response,
    account: AuthenticatedAccount = Depends(get_current_account),
    service: CredentialService = Depends(get_credential_service),
    settings: AuthSettings = Depends(get_auth_settings),
):
    """
    Change the password of the signed-in account.

    Every session issued before the change stops working; the response
    carries a fresh session token.

    Raises:
        - 400 Bad Request: Invalid input, mismatch, or unchanged password
        - 401 Unauthorized: Not signed in or wrong current password
        - 500 Internal Server Error: Server error
    """
    result = await service.change_password(
        account.id,
        request.current_password,
        request.new_password,
        request.new_password_confirm,
    )

    if result.is_err():
        error = result.error
        if error.code in BAD_REQUEST_CODES:
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        elif error.code in ("INVALID_CREDENTIALS", "ACCOUNT_NOT_FOUND"):
            raise ClientError(error, status_code=status.HTTP_401_UNAUTHORIZED)
        raise ServerError(error)

    set_session_cookie(response, result.value, settings)
    return result.value


class ForgotPasswordRequest(BaseModel):
    """Forgot password HTTP request payload"""

    email: Optional[str] = Field(default=None, description="Account email address")


@router.post(
    "/forgot-password",
    status_code=status.HTTP_200_OK,
    response_model=RequestPasswordResetResponse,
)
async def forgot_password(
    request: ForgotPasswordRequest,
    service: CredentialService = Depends(get_credential_service),
):
    """
    Email a single-use password reset link.

    Unknown emails get the same response as known ones unless
    PASSWORD_RESET_REVEAL_UNKNOWN_EMAIL is enabled.

    Raises:
        - 400 Bad Request: Invalid input
        - 404 Not Found: Unknown email (only when revealing is enabled)
        - 500 Internal Server Error: Server error
    """
    result = await service.request_password_reset(request.email)

    if result.is_err():
        error = result.error
        if error.code in BAD_REQUEST_CODES:
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        elif error.code == "ACCOUNT_NOT_FOUND":
            if ApplicationConfig.PASSWORD_RESET_REVEAL_UNKNOWN_EMAIL:
                raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
            return RequestPasswordResetResponse(
                status="sent",
                message="A password reset link has been sent to your email",
                email_delivered=True,
            )
        raise ServerError(error)

    return result.value


class ResetPasswordRequest(BaseModel):
    """Reset password HTTP request payload"""

    token: Optional[str] = Field(default=None, description="Password reset token from email")
    new_password: Optional[str] = None
    new_password_confirm: Optional[str] = None


@router.post(
    "/reset-password",
    status_code=status.HTTP_200_OK,
    response_model=CompletePasswordResetResponse,
)
async def reset_password(
    request: ResetPasswordRequest,
    service: CredentialService = Depends(get_credential_service),
):
    """
    Set a new password using a reset token. Does not sign the user in.

    Raises:
        - 400 Bad Request: Invalid input, mismatch, or invalid/expired token
        - 500 Internal Server Error: Server error
    """
    result = await service.complete_password_reset(
        request.token, request.new_password, request.new_password_confirm
    )

    if result.is_err():
        error = result.error
        if error.code in BAD_REQUEST_CODES or error.code == "TOKEN_INVALID_OR_EXPIRED":
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        raise ServerError(error)

    return result.value


class DeleteAccountRequest(BaseModel):
    """Delete account HTTP request payload"""

    password: Optional[str] = None


@router.delete("/account", status_code=status.HTTP_200_OK, response_model=DeleteAccountResponse)
async def delete_account(
    request: DeleteAccountRequest,
    response: Response,
    account: AuthenticatedAccount = Depends(get_current_account),
    service: CredentialService = Depends(get_credential_service),
):
    """
    Delete the signed-in account and everything it owns.

    Raises:
        - 400 Bad Request: Invalid input
        - 401 Unauthorized: Not signed in or wrong password
        - 500 Internal Server Error: Server error
    """
    result = await service.delete_account(account.id, request.password)

    if result.is_err():
        error = result.error
        if error.code in BAD_REQUEST_CODES:
            raise ClientError(error, status_code=status.HTTP_400_BAD_REQUEST)
        elif error.code in ("INVALID_CREDENTIALS", "ACCOUNT_NOT_FOUND"):
            raise ClientError(error, status_code=status.HTTP_401_UNAUTHORIZED)
        raise ServerError(error)

    clear_session_cookie(response)
    return result.value
