"""Tests for health check endpoints."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

from efs_request_operator.health import create_combined_wsgi_app, start_metrics_server


def make_environ(path: str) -> dict:
    return {
        "REQUEST_METHOD": "GET",
        "PATH_INFO": path,
        "SCRIPT_NAME": "",
        "SERVER_NAME": "localhost",
        "SERVER_PORT": "8080",
        "wsgi.url_scheme": "http",
    }


class TestCombinedWsgiApp:
    """Test cases for create_combined_wsgi_app."""

    def test_healthz(self):
        """Test /healthz endpoint."""
        app = create_combined_wsgi_app()
        start_response = MagicMock()

        result = app(make_environ("/healthz"), start_response)

        assert b'"status":"ok"' in b"".join(result)
        assert "200" in start_response.call_args[0][0]

    def test_readyz_without_check(self):
        """Test /readyz is ready when no check is configured."""
        app = create_combined_wsgi_app()
        start_response = MagicMock()

        result = app(make_environ("/readyz"), start_response)

        assert b'"status":"ready"' in b"".join(result)

    def test_readyz_not_ready(self):
        """Test /readyz reports 503 until the driver runs."""
        app = create_combined_wsgi_app(ready_check=lambda: False)
        start_response = MagicMock()

        result = app(make_environ("/readyz"), start_response)

        assert b'"status":"not ready"' in b"".join(result)
        assert "503" in start_response.call_args[0][0]

    @patch("efs_request_operator.health.make_wsgi_app")
    def test_metrics_delegated(self, mock_make_wsgi_app):
        """Test other paths go to the prometheus app."""
        metrics_app = MagicMock(return_value=[b"metrics"])
        mock_make_wsgi_app.return_value = metrics_app
        app = create_combined_wsgi_app()
        environ = make_environ("/metrics")
        start_response = MagicMock()

        result = app(environ, start_response)

        assert result == [b"metrics"]
        metrics_app.assert_called_once_with(environ, start_response)


class TestStartMetricsServer:
    """Test cases for start_metrics_server."""

    @patch("efs_request_operator.health.threading.Thread")
    @patch("efs_request_operator.health.make_server")
    def test_serves_in_background(self, mock_make_server, mock_thread):
        """Test the server runs in a daemon thread."""
        server = start_metrics_server(9090)

        assert server is mock_make_server.return_value
        assert mock_make_server.call_args[0][:2] == ("", 9090)
        mock_thread.assert_called_once_with(target=server.serve_forever, daemon=True)
        mock_thread.return_value.start.assert_called_once()
