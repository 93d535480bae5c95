"""
User Entity

An account that can authenticate with email and password.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, SQLModel

from src.domain.base import utcnow


class User(SQLModel, table=True):
    """
    User entity - an account identified by a unique email.

    Business Rules:
    - Email must be unique across all users, stored lowercased
    - Password stored as bcrypt hash, never as plaintext
    - password_changed_at is unset until the first password change;
      an account without it has never invalidated any session
    - credential_version increments on every password mutation and is
      embedded in session tokens, so older tokens become stale
    """

    __tablename__ = "users"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    email: str = Field(unique=True, index=True, max_length=255)
    password_hash: str = Field(max_length=60)  # Bcrypt output is 60 chars

    password_changed_at: Optional[datetime] = Field(
        default=None, sa_column=Column(DateTime, nullable=True)
    )
    credential_version: int = Field(default=0)

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
