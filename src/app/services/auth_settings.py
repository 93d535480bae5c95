from datetime import timedelta

from pydantic import BaseModel, ConfigDict, Field


class AuthSettings(BaseModel):
    """
    Credential and session parameters injected into auth components.

    Built once from ApplicationConfig at the edge of the application;
    components never read configuration on their own.
    """

    model_config = ConfigDict(frozen=True)

    jwt_secret: str = Field(..., min_length=1)
    jwt_algorithm: str = "HS256"
    session_token_lifetime: timedelta = timedelta(days=7)

    bcrypt_rounds: int = Field(default=12, ge=4, le=31)
    password_changed_at_skew: timedelta = timedelta(seconds=1)

    reset_token_ttl: timedelta = timedelta(hours=1)
    password_reset_url: str = "http://localhost:3000/reset-password?token={token}"

    @classmethod
    def from_config(cls, config) -> "AuthSettings":
        return cls(
            jwt_secret=config.JWT_SECRET,
            jwt_algorithm=config.JWT_ALGORITHM,
            session_token_lifetime=timedelta(days=config.SESSION_TOKEN_LIFETIME_DAYS),
            bcrypt_rounds=config.BCRYPT_ROUNDS,
            password_changed_at_skew=timedelta(
                seconds=config.PASSWORD_CHANGED_AT_SKEW_SECONDS
            ),
            reset_token_ttl=timedelta(seconds=config.RESET_TOKEN_TTL_SECONDS),
            password_reset_url=config.PASSWORD_RESET_URL,
        )
