"""Tests for the DeBounce realtime oracle."""

from unittest.mock import AsyncMock, MagicMock, patch

import aiohttp
import pytest

from burner_validator.oracles.debounce import DebounceOracle

pytestmark = pytest.mark.asyncio


@pytest.fixture
def oracle():
    return DebounceOracle(api_url="https://debounce.invalid/", timeout_seconds=1)


def _mock_session(mock_session_class, status=200, payload=None):
    mock_session = MagicMock()
    mock_session_class.return_value.__aenter__.return_value = mock_session

    mock_response = AsyncMock()
    mock_response.status = status
    mock_response.json = AsyncMock(return_value=payload)
    mock_session.get.return_value.__aenter__.return_value = mock_response
    return mock_session


class TestDebounceOracle:
    async def test_disposable(self, oracle):
        with patch("aiohttp.ClientSession") as mock_session_class:
            mock_session = _mock_session(mock_session_class, payload={"disposable": "true"})

            assert await oracle.is_disposable("x@burner.io") is True

        mock_session.get.assert_called_once_with(
            "https://debounce.invalid/", params={"email": "x@burner.io"}
        )

    async def test_not_disposable(self, oracle):
        with patch("aiohttp.ClientSession") as mock_session_class:
            _mock_session(mock_session_class, payload={"disposable": "false"})

            assert await oracle.is_disposable("x@company.com") is False

    async def test_verdict_cached_per_domain(self, oracle):
        with patch("aiohttp.ClientSession") as mock_session_class:
            mock_session = _mock_session(mock_session_class, payload={"disposable": "true"})

            await oracle.is_disposable("a@burner.io")
            assert await oracle.is_disposable("b@BURNER.io") is True

        assert mock_session.get.call_count == 1
        assert oracle.cache_stats() == {"size": 1}

    async def test_cache_expires(self, oracle):
        with patch("aiohttp.ClientSession") as mock_session_class:
            mock_session = _mock_session(mock_session_class, payload={"disposable": "false"})

            with patch("burner_validator.oracles.debounce.epoch_seconds", return_value=0.0):
                await oracle.is_disposable("a@company.com")
            with patch("burner_validator.oracles.debounce.epoch_seconds", return_value=24 * 3600 + 1):
                await oracle.is_disposable("a@company.com")

        assert mock_session.get.call_count == 2

    async def test_http_error_fails_open(self, oracle):
        with patch("aiohttp.ClientSession") as mock_session_class:
            _mock_session(mock_session_class, status=503)

            assert await oracle.is_disposable("x@burner.io") is False

        # Failures are not cached
        assert oracle.cache_stats() == {"size": 0}

    async def test_connection_error_fails_open(self, oracle):
        with patch("aiohttp.ClientSession") as mock_session_class:
            mock_session = _mock_session(mock_session_class)
            mock_session.get.side_effect = aiohttp.ClientError("Connection failed")

            assert await oracle.is_disposable("x@burner.io") is False

    async def test_timeout_fails_open(self, oracle):
        with patch("aiohttp.ClientSession") as mock_session_class:
            mock_session = _mock_session(mock_session_class)
            mock_session.get.side_effect = TimeoutError()

            assert await oracle.is_disposable("x@burner.io") is False

    async def test_unexpected_payload_fails_open(self, oracle):
        with patch("aiohttp.ClientSession") as mock_session_class:
            _mock_session(mock_session_class, payload=["not", "a", "dict"])

            assert await oracle.is_disposable("x@burner.io") is False

    async def test_clear_cache(self, oracle):
        oracle._cache["burner.io"] = (True, float("inf"))

        oracle.clear_cache()

        assert oracle.cache_stats() == {"size": 0}
