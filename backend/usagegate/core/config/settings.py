"""Application settings loaded from the environment.

All defaults live here. Values are read once at import time through
``usagegate.core.config.settings``; tests construct ``Settings(...)``
directly with overrides.
"""

from typing import Optional

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL

from usagegate.core.config.enums import Environment


class Settings(BaseSettings):
    """Settings for the rate-limit service.

    Env vars are upper case and unprefixed, e.g. ``RATE_LIMIT_INTERVAL_SECONDS=30``.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    PROJECT_NAME: str = "usagegate"
    ENVIRONMENT: Environment = Environment.LOCAL
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    LOCAL_DEVELOPMENT: bool = False

    # Refresh cycle
    RATE_LIMIT_INTERVAL_SECONDS: float = Field(60.0, gt=0)
    DEFAULT_RETENTION_DAYS: int = Field(30, gt=0)
    RATE_LIMIT_WARNING_RATIO: Optional[float] = None

    # External collaborators
    USAGE_ESTIMATOR_URL: Optional[str] = None
    EMAILS_URL: Optional[str] = None
    HTTP_TIMEOUT_SECONDS: float = Field(10.0, gt=0)

    POSTGRES_HOST: Optional[str] = None
    POSTGRES_PORT: int = 5432
    POSTGRES_USER: Optional[str] = None
    POSTGRES_PASSWORD: Optional[str] = None
    POSTGRES_DB: Optional[str] = None

    # Notifications
    NOTIFICATION_KEY_RETENTION_DAYS: int = Field(32, gt=0)

    # Observability
    SENTRY_DSN: Optional[str] = None
    METRICS_PORT: int = 9090

    @field_validator("RATE_LIMIT_WARNING_RATIO")
    @classmethod
    def _validate_warning_ratio(cls, v: Optional[float]) -> Optional[float]:
        if v is not None and not 0 < v <= 1:
            raise ValueError("RATE_LIMIT_WARNING_RATIO must be in (0, 1]")
        return v

    @model_validator(mode="after")
    def _validate_postgres(self) -> "Settings":
        """A partially configured Postgres connection is a wiring bug."""
        pg = [self.POSTGRES_HOST, self.POSTGRES_USER, self.POSTGRES_DB]
        if any(pg) and not all(pg):
            raise ValueError(
                "POSTGRES_HOST, POSTGRES_USER and POSTGRES_DB must be set together"
            )
        return self

    @property
    def postgres_configured(self) -> bool:
        """Whether the ownership store should be read from Postgres."""
        return self.POSTGRES_HOST is not None

    @property
    def postgres_url(self) -> str:
        """Async SQLAlchemy URL for the ownership store."""
        return URL.create(
            "postgresql+asyncpg",
            username=self.POSTGRES_USER,
            password=self.POSTGRES_PASSWORD,
            host=self.POSTGRES_HOST,
            port=self.POSTGRES_PORT,
            database=self.POSTGRES_DB,
        ).render_as_string(hide_password=False)

    @property
    def is_local(self) -> bool:
        """Whether in-memory adapters are acceptable fallbacks."""
        return self.ENVIRONMENT in (Environment.LOCAL, Environment.TEST)
