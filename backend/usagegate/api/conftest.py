"""API test fixtures.

Provides an async HTTP client wired to the FastAPI app with the DI container
overridden to use fakes. The app lifespan does not run under ASGITransport,
so no scheduler or metrics server is started.
"""

import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from usagegate.api.deps import get_container


@pytest_asyncio.fixture
async def client(test_container):
    """Async HTTP client with faked DI container."""
    from usagegate.main import app

    app.dependency_overrides[get_container] = lambda: test_container

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
