"""Configuration module for the usagegate service.

Provides centralized configuration management with type-safe enums.

Usage:
    from usagegate.core.config import settings, Environment

    if settings.ENVIRONMENT == Environment.PRD:
        ...
"""

from usagegate.core.config.enums import Environment
from usagegate.core.config.settings import Settings

__all__ = [
    "Settings",
    "Environment",
    "settings",
]

# Singleton settings instance
settings = Settings()
