"""
Authentication Use Case DTOs (Data Transfer Objects)

Response classes for the auth domain. None of them carries a password
hash or a plaintext reset token.
"""

from datetime import datetime

from pydantic import BaseModel


class AccountInfo(BaseModel):
    """Public account fields"""

    id: str
    email: str


class SignupResponse(BaseModel):
    """Response for signup use case"""

    account: AccountInfo
    message: str


class SessionResponse(BaseModel):
    """Response for use cases that issue a session token (login, change password)"""

    access_token: str
    token_type: str = "bearer"
    expires_at: datetime
    account: AccountInfo


class RequestPasswordResetResponse(BaseModel):
    """Response for request password reset use case"""

    status: str
    message: str
    email_delivered: bool


class CompletePasswordResetResponse(BaseModel):
    """Response for complete password reset use case"""

    status: str
    message: str


class DeleteAccountResponse(BaseModel):
    """Response for delete account use case"""

    status: str
    message: str
