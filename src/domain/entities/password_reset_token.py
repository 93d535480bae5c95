"""
PasswordResetToken Entity

Single-use, time-boxed password reset tokens.
"""

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from src.domain.base import utcnow


class PasswordResetToken(SQLModel, table=True):
    """
    PasswordResetToken entity - proves control of the account's email.

    Business Rules:
    - Token is SHA-256 hash of a secure random string; plaintext is never stored
    - At most one token per user (user_id is unique)
    - Expires at created_at + reset TTL, after which it is treated as absent
    - Deleted when consumed or superseded
    """

    __tablename__ = "password_reset_tokens"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    user_id: UUID = Field(foreign_key="users.id", unique=True)
    token_hash: str = Field(unique=True, max_length=64)  # SHA-256 output

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    expires_at: datetime = Field(sa_column=Column(DateTime))

    __table_args__ = (Index("idx_password_reset_expires_at", "expires_at"),)
