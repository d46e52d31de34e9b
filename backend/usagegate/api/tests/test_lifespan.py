"""Tests for the application lifespan wiring."""

from unittest.mock import patch

import pytest

from usagegate.core import container as container_mod
from usagegate.core.config import Environment, Settings


def _local_settings() -> Settings:
    return Settings(
        _env_file=None,
        ENVIRONMENT=Environment.TEST,
        POSTGRES_HOST=None,
        POSTGRES_USER=None,
        POSTGRES_DB=None,
        USAGE_ESTIMATOR_URL=None,
        EMAILS_URL=None,
        SENTRY_DSN=None,
        METRICS_PORT=0,
    )


class TestLifespan:
    @pytest.mark.asyncio
    async def test_starts_and_stops_rate_limit_service(self):
        from usagegate.main import app, lifespan

        container_mod.reset_container()
        with patch("usagegate.main.settings", _local_settings()):
            async with lifespan(app):
                service = container_mod.container.rate_limit_service
                assert service.readiness()

        assert not service.readiness()
        assert container_mod.container is None
