from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from src.domain.entities import PasswordResetToken


class IPasswordResetTokenRepository(ABC):
    """PasswordResetToken repository interface - application layer"""

    @abstractmethod
    async def replace(self, token: PasswordResetToken) -> PasswordResetToken:
        """Store token as the only one for token.user_id, dropping any previous one"""
        pass

    @abstractmethod
    async def get_by_token_hash(self, token_hash: str) -> Optional[PasswordResetToken]:
        """Get password reset token by token hash"""
        pass

    @abstractmethod
    async def delete(self, token: PasswordResetToken) -> bool:
        """Delete a single token, returning False when it was already gone"""
        pass

    @abstractmethod
    async def delete_by_user_id(self, user_id: UUID) -> int:
        """Delete all tokens owned by a user, returning the count"""
        pass
