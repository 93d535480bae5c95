import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file) or dict()
else:
    data = dict()


class ApplicationConfig:
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./app.db")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")

    # Session tokens
    JWT_SECRET = data.get("JWT_SECRET", "dev-secret-key-change-in-production")
    JWT_ALGORITHM = data.get("JWT_ALGORITHM", "HS256")
    SESSION_TOKEN_LIFETIME_DAYS = int(data.get("SESSION_TOKEN_LIFETIME_DAYS", 7))
    SESSION_COOKIE_NAME = data.get("SESSION_COOKIE_NAME", "token")
    SESSION_COOKIE_SECURE = bool(data.get("SESSION_COOKIE_SECURE", False))

    # Passwords
    BCRYPT_ROUNDS = int(data.get("BCRYPT_ROUNDS", 12))
    PASSWORD_CHANGED_AT_SKEW_SECONDS = int(data.get("PASSWORD_CHANGED_AT_SKEW_SECONDS", 1))

    # Password reset
    RESET_TOKEN_TTL_SECONDS = int(data.get("RESET_TOKEN_TTL_SECONDS", 3600))
    PASSWORD_RESET_URL = data.get(
        "PASSWORD_RESET_URL", "http://localhost:3000/reset-password?token={token}"
    )
    PASSWORD_RESET_REVEAL_UNKNOWN_EMAIL = bool(
        data.get("PASSWORD_RESET_REVEAL_UNKNOWN_EMAIL", False)
    )

    # Outbound email (empty SMTP_HOST logs instead of sending)
    SMTP_HOST = data.get("SMTP_HOST", "")
    SMTP_PORT = int(data.get("SMTP_PORT", 587))
    SMTP_USER = data.get("SMTP_USER", "")
    SMTP_PASSWORD = data.get("SMTP_PASSWORD", "")
    SMTP_FROM = data.get("SMTP_FROM", "no-reply@localhost")
    SMTP_USE_TLS = bool(data.get("SMTP_USE_TLS", True))
