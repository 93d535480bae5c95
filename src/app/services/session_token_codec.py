"""
Session Token Codec

Signs and verifies stateless session tokens (HS256 JWT).

Claims:
- sub: account id
- iat: issuance time, truncated to whole seconds
- exp: iat + session lifetime
- ver: account credential version at issuance

JWT times are whole seconds, so exp is computed from the truncated iat:
a token issued at T+0.9s expires at T + lifetime, up to one second
before the untruncated instant plus the lifetime.

Revocation is not handled here: SessionGuard compares iat/ver with the
account's current credential state.
"""

import calendar
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable
from uuid import UUID

from jose import JWTError, jwt

from src.domain.base import utcnow
from src.libs.result import Error, Result, Return

from .auth_settings import AuthSettings


@dataclass(frozen=True)
class IssuedSessionToken:
    token: str
    issued_at: datetime
    expires_at: datetime


@dataclass(frozen=True)
class SessionClaims:
    account_id: UUID
    issued_at: datetime
    expires_at: datetime
    credential_version: int


def _to_epoch(moment: datetime) -> int:
    return calendar.timegm(moment.utctimetuple())


def _from_epoch(seconds: int) -> datetime:
    return datetime(1970, 1, 1) + timedelta(seconds=seconds)


class SessionTokenCodec:
    def __init__(self, settings: AuthSettings, clock: Callable[[], datetime] = utcnow):
        self.settings = settings
        self.clock = clock

    @property
    def lifetime(self) -> timedelta:
        return self.settings.session_token_lifetime

    def issue(self, account_id: UUID, credential_version: int = 0) -> IssuedSessionToken:
        """
        Issue a signed session token for an account

        Args:
            account_id: Account UUID
            credential_version: Account credential version at issuance

        Returns:
            IssuedSessionToken with the encoded token and its validity window,
            both bounds in whole seconds
        """
        iat = _to_epoch(self.clock())
        exp = iat + int(self.lifetime.total_seconds())
        payload = {
            "sub": str(account_id),
            "iat": iat,
            "exp": exp,
            "ver": credential_version,
        }
        token = jwt.encode(
            payload, self.settings.jwt_secret, algorithm=self.settings.jwt_algorithm
        )
        return IssuedSessionToken(
            token=token, issued_at=_from_epoch(iat), expires_at=_from_epoch(exp)
        )

    def verify(self, token: str) -> Result[SessionClaims]:
        """
        Verify signature and expiry of a session token

        Returns:
            Result with SessionClaims, or Error INVALID_SIGNATURE / SESSION_EXPIRED
        """
        try:
            # Expiry is checked below against the injected clock
            payload = jwt.decode(
                token,
                self.settings.jwt_secret,
                algorithms=[self.settings.jwt_algorithm],
                options={"verify_exp": False},
            )
            claims = SessionClaims(
                account_id=UUID(payload["sub"]),
                issued_at=_from_epoch(int(payload["iat"])),
                expires_at=_from_epoch(int(payload["exp"])),
                credential_version=int(payload.get("ver", 0)),
            )
        except (JWTError, KeyError, TypeError, ValueError):
            return Return.err(
                Error("INVALID_SIGNATURE", "Session token signature is invalid")
            )

        if self.clock() >= claims.expires_at:
            return Return.err(Error("SESSION_EXPIRED", "Session token has expired"))

        return Return.ok(claims)
