"""Test suite for logger configuration and the request context middleware."""

import json
import sys
from unittest.mock import MagicMock
from unittest.mock import patch

from filmops_api.monitoring.logger import configure_logger
from filmops_api.monitoring.logger import get_formatted_stacktrace
from filmops_api.monitoring.logger import log_response_info
from filmops_api.monitoring.logger import process_log_record
from tests.consts import API_BASE


class TestConfigureLogger:
    @patch("filmops_api.monitoring.logger.logger")
    def test_replaces_default_sink(self, mock_logger):
        configure_logger(level="debug")

        mock_logger.remove.assert_called_once_with()
        kwargs = mock_logger.add.call_args.kwargs
        assert kwargs["sink"] is sys.stdout
        assert kwargs["level"] == "DEBUG"
        assert kwargs["filter"] is process_log_record


class TestProcessLogRecord:
    def test_extra_serialized_to_single_line_json(self):
        record = {"extra": {"project_id": 3, "user_id": 4}, "exception": None}

        result = process_log_record(record)

        assert json.loads(result["extra"]) == {"project_id": 3, "user_id": 4}
        assert result["stacktrace"] == ""

    def test_exception_traceback_has_no_newlines(self):
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            exc_info = sys.exc_info()

        record = process_log_record({"extra": {}, "exception": exc_info})

        assert "RuntimeError: boom" in record["stacktrace"]
        assert "\n" not in record["stacktrace"]

    def test_formatted_stacktrace_keeps_newlines_when_asked(self):
        try:
            raise ValueError("bad")
        except ValueError:
            exc_info = sys.exc_info()

        stacktrace = get_formatted_stacktrace(exc_info, replace_newline_character_with_carriage_return=False)

        assert "\n" in stacktrace


@patch("filmops_api.monitoring.logger.logger")
def test_log_response_info(mock_logger):
    response = MagicMock()
    response.status_code = 404
    response.headers = {"content-type": "application/json"}

    log_response_info(response)

    mock_logger.debug.assert_called_once_with(
        "Response sent",
        http_response={"status_code": 404, "headers": {"content-type": "application/json"}},
    )


def test_monitoring_package_exports():
    import filmops_api.monitoring as monitoring

    assert monitoring.__all__ == ["RequestContextMiddleware"]
    assert monitoring.RequestContextMiddleware.__module__ == "filmops_api.monitoring.request_context"


class TestRequestContextMiddleware:
    def test_request_id_is_echoed(self, unauthenticated_client):
        response = unauthenticated_client.get(f"{API_BASE}/health", headers={"X-Request-ID": "req-123"})

        assert response.headers["X-Request-ID"] == "req-123"

    def test_request_id_is_generated(self, unauthenticated_client):
        response = unauthenticated_client.get(f"{API_BASE}/health")

        assert len(response.headers["X-Request-ID"]) == 36

    def test_summary_line_logged_with_forwarded_ip(self, unauthenticated_client):
        with patch("filmops_api.monitoring.request_context.logger") as mock_logger:
            unauthenticated_client.get(f"{API_BASE}/health", headers={"X-Forwarded-For": "203.0.113.9, 10.0.0.1"})

        mock_logger.contextualize.assert_called_once()
        context = mock_logger.contextualize.call_args.kwargs
        assert context["client_ip"] == "203.0.113.9"
        assert context["user_identity"] == "anonymous"
        assert context["request_path"] == f"GET {API_BASE}/health"

        summary = mock_logger.info.call_args.kwargs
        assert summary["status_code"] == 200
        assert summary["event_type"] == "http_request"
