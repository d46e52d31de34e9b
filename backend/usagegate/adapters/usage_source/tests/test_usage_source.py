"""Unit tests for the usage source adapters."""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest
from tenacity import wait_none

from usagegate.adapters.usage_source import HttpUsageSource, InMemoryUsageSource
from usagegate.domains.rate_limit.exceptions import SourceFetchError

BASE_URL = "http://usage-estimator:4011"
URL = f"{BASE_URL}/operations"
START = datetime(2024, 1, 1, tzinfo=timezone.utc)
END = datetime(2024, 1, 31, 23, 59, 59, 999000, tzinfo=timezone.utc)


def _response(status: int = 200, json=None, content: bytes | None = None) -> httpx.Response:
    request = httpx.Request("GET", URL)
    if content is not None:
        return httpx.Response(status, content=content, request=request)
    return httpx.Response(status, json=json if json is not None else {}, request=request)


def _mock_client(*outcomes):
    """Patchable AsyncClient class whose context-managed client yields *outcomes* in order."""
    client = MagicMock()
    client.get = AsyncMock(side_effect=list(outcomes))
    client_cls = MagicMock()
    client_cls.return_value.__aenter__ = AsyncMock(return_value=client)
    client_cls.return_value.__aexit__ = AsyncMock(return_value=False)
    return client_cls, client


def _source() -> HttpUsageSource:
    return HttpUsageSource(BASE_URL, timeout=5.0, retry_wait=wait_none())


# ---------------------------------------------------------------------------
# HttpUsageSource
# ---------------------------------------------------------------------------


class TestHttpUsageSource:
    @pytest.mark.asyncio
    async def test_returns_usage_map(self):
        client_cls, client = _mock_client(_response(json={"t1": 1500, "t2": 3}))

        with patch("usagegate.adapters.usage_source.http.httpx.AsyncClient", client_cls):
            usage = await _source().estimate(START, END)

        assert usage == {"t1": 1500, "t2": 3}
        client.get.assert_awaited_once_with(
            URL,
            params={
                "startTime": "Mon, 01 Jan 2024 00:00:00 GMT",
                "endTime": "Wed, 31 Jan 2024 23:59:59 GMT",
            },
        )
        client_cls.assert_called_once_with(timeout=5.0)

    @pytest.mark.asyncio
    async def test_retries_server_errors(self):
        client_cls, client = _mock_client(_response(503), _response(json={"t1": 1}))

        with patch("usagegate.adapters.usage_source.http.httpx.AsyncClient", client_cls):
            usage = await _source().estimate(START, END)

        assert usage == {"t1": 1}
        assert client.get.await_count == 2

    @pytest.mark.asyncio
    async def test_retries_connect_errors_then_gives_up(self):
        error = httpx.ConnectError("refused", request=httpx.Request("GET", URL))
        client_cls, client = _mock_client(error, error, error)

        with patch("usagegate.adapters.usage_source.http.httpx.AsyncClient", client_cls):
            with pytest.raises(SourceFetchError) as exc_info:
                await _source().estimate(START, END)

        assert exc_info.value.source == "usage-source"
        assert client.get.await_count == 3

    @pytest.mark.asyncio
    async def test_client_errors_are_not_retried(self):
        client_cls, client = _mock_client(_response(400))

        with patch("usagegate.adapters.usage_source.http.httpx.AsyncClient", client_cls):
            with pytest.raises(SourceFetchError):
                await _source().estimate(START, END)

        assert client.get.await_count == 1

    @pytest.mark.asyncio
    async def test_rejects_non_numeric_payload(self):
        client_cls, _ = _mock_client(_response(json={"t1": "lots"}))

        with patch("usagegate.adapters.usage_source.http.httpx.AsyncClient", client_cls):
            with pytest.raises(SourceFetchError):
                await _source().estimate(START, END)

    @pytest.mark.asyncio
    async def test_rejects_invalid_json(self):
        client_cls, _ = _mock_client(_response(content=b"<html>"))

        with patch("usagegate.adapters.usage_source.http.httpx.AsyncClient", client_cls):
            with pytest.raises(SourceFetchError):
                await _source().estimate(START, END)


# ---------------------------------------------------------------------------
# InMemoryUsageSource
# ---------------------------------------------------------------------------


class TestInMemoryUsageSource:
    @pytest.mark.asyncio
    async def test_replace_and_record(self):
        source = InMemoryUsageSource({"t1": 1})
        source.record("t1", 4)
        source.record("t2", 2)

        assert await source.estimate(START, END) == {"t1": 5, "t2": 2}

        source.replace({"t3": 9})
        assert await source.estimate(START, END) == {"t3": 9}
