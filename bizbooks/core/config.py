"""Configuration system for the bookkeeping API."""
from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env file from project root
env_path = Path(__file__).parent.parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

_FALSE_VALUES = {"0", "false", "False", "no", "off"}


@dataclass(slots=True)
class DatabaseSettings:
    """Connection details for the transactional database."""

    driver: str
    host: str
    port: int
    user: str
    password: str
    name: str
    pool_size: int = 10
    auto_create: bool = True
    url_override: str | None = None

    @property
    def sqlalchemy_url(self) -> str:
        """Build a SQLAlchemy compatible URL."""

        if self.url_override:
            return self.url_override
        if self.password:
            credentials = f"{self.user}:{self.password}"
        else:
            credentials = self.user
        return f"{self.driver}://{credentials}@{self.host}:{self.port}/{self.name}"

    @property
    def masked_url(self) -> str:
        if self.url_override:
            return self.url_override.split("@")[-1]
        pwd = "***" if self.password else ""
        return f"{self.driver}://{self.user}:{pwd}@{self.host}:{self.port}/{self.name}"


@dataclass(slots=True)
class AuthSettings:
    """Token settings loaded from environment variables."""

    secret_key: str
    algorithm: str
    access_token_expire_minutes: int
    issuer: str = "my-business-api"
    audience: str = "my-business-app"


@dataclass(slots=True)
class ServerSettings:
    """HTTP server and runtime environment options."""

    host: str
    port: int
    environment: str
    cors_origin: str
    log_level: str
    log_dir: str | None = None

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"


@dataclass(slots=True)
class Settings:
    """Top-level application configuration container."""

    database: DatabaseSettings
    auth: AuthSettings
    server: ServerSettings
    sqlalchemy_echo: bool = False

    @classmethod
    def from_env(cls) -> "Settings":
        """Load configuration values from environment variables."""

        def _get_env(name: str, default: str) -> str:
            return os.getenv(name, default)

        db = DatabaseSettings(
            driver=_get_env("DB_DRIVER", "mysql+pymysql"),
            host=_get_env("DB_HOST", "localhost"),
            port=int(_get_env("DB_PORT", "3306")),
            user=_get_env("DB_USER", "root"),
            password=_get_env("DB_PASSWORD", ""),
            name=_get_env("DB_NAME", "my_business"),
            pool_size=int(_get_env("DB_POOL_SIZE", "10")),
            auto_create=_get_env("DB_AUTO_CREATE", "1") not in _FALSE_VALUES,
            url_override=os.getenv("DATABASE_URL") or None,
        )
        auth = AuthSettings(
            secret_key=_get_env("JWT_SECRET", "fallback_secret_key"),
            algorithm=_get_env("JWT_ALGORITHM", "HS256"),
            access_token_expire_minutes=int(_get_env("JWT_EXPIRES_MINUTES", str(7 * 24 * 60))),
            issuer=_get_env("JWT_ISSUER", "my-business-api"),
            audience=_get_env("JWT_AUDIENCE", "my-business-app"),
        )
        server = ServerSettings(
            host=_get_env("HOST", "127.0.0.1"),
            port=int(_get_env("PORT", "5000")),
            environment=_get_env("APP_ENV", "development"),
            cors_origin=_get_env("CORS_ORIGIN", "http://localhost:5173"),
            log_level=_get_env("LOG_LEVEL", "INFO"),
            log_dir=os.getenv("LOG_DIR") or None,
        )
        echo_flag = _get_env("SQLALCHEMY_ECHO", "0")
        return cls(
            database=db,
            auth=auth,
            server=server,
            sqlalchemy_echo=echo_flag not in _FALSE_VALUES,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached ``Settings`` instance."""

    settings = Settings.from_env()

    # Import locally to avoid circular dependencies during module import time.
    from .log import get_logger

    logger = get_logger(__name__)
    logger.debug(
        "Settings initialised",
        extra={
            "sqlalchemy_echo": settings.sqlalchemy_echo,
            "database": settings.database.masked_url,
            "pool_size": settings.database.pool_size,
            "environment": settings.server.environment,
            "token_ttl_minutes": settings.auth.access_token_expire_minutes,
        },
    )
    return settings
