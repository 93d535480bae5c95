from typing import Optional
from uuid import UUID

from sqlmodel import delete, select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.password_reset_token_repository import IPasswordResetTokenRepository
from src.domain.entities import PasswordResetToken


class PasswordResetTokenRepository(IPasswordResetTokenRepository):
    """PasswordResetToken repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def replace(self, token: PasswordResetToken) -> PasswordResetToken:
        """Delete the user's previous token and insert the new one in the same transaction"""
        await self.delete_by_user_id(token.user_id)
        self.session.add(token)
        await self.session.flush()
        await self.session.refresh(token)
        return token

    async def get_by_token_hash(self, token_hash: str) -> Optional[PasswordResetToken]:
        """Get password reset token by token hash"""
        stmt = select(PasswordResetToken).where(PasswordResetToken.token_hash == token_hash)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def delete(self, token: PasswordResetToken) -> bool:
        """Delete a single token, returning False when it was already gone"""
        # One conditional statement: of two concurrent callers only one sees a row
        result = await self.session.exec(
            delete(PasswordResetToken).where(
                PasswordResetToken.id == token.id,
                PasswordResetToken.token_hash == token.token_hash,
            )
        )
        await self.session.flush()
        return result.rowcount == 1

    async def delete_by_user_id(self, user_id: UUID) -> int:
        """Delete all tokens owned by a user"""
        result = await self.session.exec(
            delete(PasswordResetToken).where(PasswordResetToken.user_id == user_id)
        )
        await self.session.flush()
        return result.rowcount
