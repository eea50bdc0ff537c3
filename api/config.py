"""
Environment-aware configuration.
Flask settings come from the classes below; the token secrets and lifetimes
are additionally frozen into an AuthConfig once at startup and handed to the
token core explicitly.
"""
import os
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Mapping

from dotenv import load_dotenv

load_dotenv()  # Read .env if present


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


class BaseConfig:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")  # Set a strong key in production
    DEBUG = False
    TESTING = False
    # CORS: in dev we usually allow '*', in prod supply a comma-separated list in env
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*")
    APP_ENV = os.getenv("APP_ENV", "dev")
    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///token-auth.db")

    # Development server bind address (python -m api)
    HOST = os.getenv("API_HOST", "127.0.0.1")
    PORT = int(os.getenv("API_PORT", "8000"))

    # Access and refresh tokens are signed with different secrets
    ACCESS_TOKEN_SECRET = os.getenv("ACCESS_TOKEN_SECRET", "dev-access-secret-change-me")
    REFRESH_TOKEN_SECRET = os.getenv("REFRESH_TOKEN_SECRET", "dev-refresh-secret-change-me")
    ACCESS_TOKEN_EXPIRES = timedelta(seconds=int(os.getenv("ACCESS_TOKEN_EXPIRES_SECONDS", "900")))
    REFRESH_TOKEN_EXPIRES = timedelta(seconds=int(os.getenv("REFRESH_TOKEN_EXPIRES_SECONDS", "864000")))
    JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
    JWT_ISSUER = os.getenv("JWT_ISSUER", "token-auth-api")

    AUTH_COOKIE_SECURE = _env_bool("AUTH_COOKIE_SECURE", "true")

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    LOG_FORMAT = os.getenv("LOG_FORMAT", "text")  # json or text


class DevelopmentConfig(BaseConfig):
    DEBUG = True
    LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")


class TestingConfig(BaseConfig):
    TESTING = True
    DATABASE_URL = "sqlite://"
    ACCESS_TOKEN_SECRET = "test-access-secret"
    REFRESH_TOKEN_SECRET = "test-refresh-secret"
    AUTH_COOKIE_SECURE = True


class ProductionConfig(BaseConfig):
    DEBUG = False


def get_config(name: str | None):
    """
    Select config class.
    - If name is provided, choose by name.
    - Else choose based on APP_ENV (dev/test/prod).
    """
    env = (name or os.getenv("APP_ENV", "dev")).lower()
    if env in ["prod", "production"]:
        return ProductionConfig
    if env in ["test", "testing"]:
        return TestingConfig
    return DevelopmentConfig


@dataclass(frozen=True)
class AuthConfig:
    """Signing configuration for the token core."""

    access_token_secret: str
    refresh_token_secret: str
    access_token_ttl: timedelta = timedelta(minutes=15)
    refresh_token_ttl: timedelta = timedelta(days=10)
    algorithm: str = "HS256"
    issuer: str = "token-auth-api"

    def __post_init__(self):
        if not self.access_token_secret or not self.refresh_token_secret:
            raise ValueError("Both access and refresh token secrets must be set")
        if self.access_token_secret == self.refresh_token_secret:
            raise ValueError("Access and refresh tokens must use distinct secrets")

    @classmethod
    def from_mapping(cls, config: Mapping[str, Any]) -> "AuthConfig":
        return cls(
            access_token_secret=config["ACCESS_TOKEN_SECRET"],
            refresh_token_secret=config["REFRESH_TOKEN_SECRET"],
            access_token_ttl=config.get("ACCESS_TOKEN_EXPIRES", timedelta(minutes=15)),
            refresh_token_ttl=config.get("REFRESH_TOKEN_EXPIRES", timedelta(days=10)),
            algorithm=config.get("JWT_ALGORITHM", "HS256"),
            issuer=config.get("JWT_ISSUER", "token-auth-api"),
        )
