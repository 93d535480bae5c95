from fastapi import APIRouter, Depends, status

from src.app.services.session_guard import AuthenticatedAccount
from src.app.use_cases.auth import AccountInfo
from src.depends import get_current_account

router = APIRouter(prefix="/users", tags=["User"])


@router.get("/me", status_code=status.HTTP_200_OK, response_model=AccountInfo)
async def get_me(account: AuthenticatedAccount = Depends(get_current_account)):
    """
    Current account, resolved from the session token.

    Raises:
        - 401 Unauthorized: Missing, invalid, expired or stale session
    """
    return AccountInfo(id=str(account.id), email=account.email)
