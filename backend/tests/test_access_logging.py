"""Tests for access logging middleware."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from starlette.requests import Request
from starlette.responses import Response
from subway.middleware.access_logging import AccessLoggingMiddleware


class TestAccessLoggingMiddleware:
    """Tests for AccessLoggingMiddleware."""

    @pytest.fixture
    def middleware(self) -> AccessLoggingMiddleware:
        """Create middleware instance."""
        return AccessLoggingMiddleware(MagicMock())

    @pytest.fixture
    def mock_request(self) -> MagicMock:
        """Create mock request."""
        request = MagicMock(spec=Request)
        request.method = "GET"
        request.url.path = "/lines/1"
        request.url.query = ""
        request.client.host = "127.0.0.1"
        request.headers = {}
        return request

    @pytest.mark.asyncio
    async def test_logs_request_with_structlog(
        self, middleware: AccessLoggingMiddleware, mock_request: MagicMock
    ) -> None:
        """One http_request event per request with the core fields."""
        response = Response(status_code=200)
        call_next = AsyncMock(return_value=response)

        with patch("subway.middleware.access_logging.logger") as mock_logger:
            result = await middleware.dispatch(mock_request, call_next)

        assert result == response
        mock_logger.info.assert_called_once()
        call_args = mock_logger.info.call_args
        assert call_args[0][0] == "http_request"
        assert call_args[1]["method"] == "GET"
        assert call_args[1]["path"] == "/lines/1"
        assert call_args[1]["status_code"] == 200
        assert "duration_ms" in call_args[1]
        assert call_args[1]["client_ip"] == "127.0.0.1"
        assert "query" not in call_args[1]
        assert "forwarded_for" not in call_args[1]

    @pytest.mark.asyncio
    async def test_logs_query_and_forwarded_for(
        self, middleware: AccessLoggingMiddleware, mock_request: MagicMock
    ) -> None:
        """Query string and the first X-Forwarded-For hop are included when present."""
        mock_request.url.query = "page=2"
        mock_request.headers = {"x-forwarded-for": "203.0.113.195, 70.41.3.18"}
        call_next = AsyncMock(return_value=Response(status_code=200))

        with patch("subway.middleware.access_logging.logger") as mock_logger:
            await middleware.dispatch(mock_request, call_next)

        call_args = mock_logger.info.call_args
        assert call_args[1]["query"] == "page=2"
        assert call_args[1]["forwarded_for"] == "203.0.113.195"
        assert call_args[1]["client_ip"] == "127.0.0.1"

    @pytest.mark.asyncio
    async def test_handles_missing_client(self, middleware: AccessLoggingMiddleware, mock_request: MagicMock) -> None:
        """A request without client info logs 'unknown'."""
        mock_request.client = None
        call_next = AsyncMock(return_value=Response(status_code=404))

        with patch("subway.middleware.access_logging.logger") as mock_logger:
            await middleware.dispatch(mock_request, call_next)

        assert mock_logger.info.call_args[1]["client_ip"] == "unknown"

    @pytest.mark.asyncio
    async def test_server_errors_logged_as_warning(
        self, middleware: AccessLoggingMiddleware, mock_request: MagicMock
    ) -> None:
        """5xx responses are logged at warning level."""
        call_next = AsyncMock(return_value=Response(status_code=500))

        with patch("subway.middleware.access_logging.logger") as mock_logger:
            await middleware.dispatch(mock_request, call_next)

        mock_logger.warning.assert_called_once()
        mock_logger.info.assert_not_called()
        assert mock_logger.warning.call_args[1]["status_code"] == 500
