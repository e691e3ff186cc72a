"""Tests for structured logging."""

import json
from pathlib import Path

from semtok.config.models import LoggingConfig, LogOutputConfig
from semtok.core.logging import (
    configure_logging,
    get_logger,
    get_request_id,
    request_context,
)


def _last_event(log_file: Path) -> dict:
    return json.loads(log_file.read_text().strip().splitlines()[-1])


def _json_file_config(log_file: Path, **kwargs: str) -> LoggingConfig:
    return LoggingConfig(
        outputs=[LogOutputConfig(format="json", destination=str(log_file))],
        **kwargs,
    )


class TestRequestContext:
    """Request correlation context."""

    def test_given_explicit_id_when_entered_then_visible(self) -> None:
        with request_context(request_id="req-1") as rid:
            assert rid == "req-1"
            assert get_request_id() == "req-1"

    def test_given_no_id_when_entered_then_generated(self) -> None:
        with request_context() as rid:
            assert len(rid) == 12  # uuid4().hex[:12]

    def test_given_exit_then_previous_context_restored(self) -> None:
        with request_context(request_id="outer"):
            with request_context(request_id="inner"):
                assert get_request_id() == "inner"
            assert get_request_id() == "outer"
        assert get_request_id() is None


class TestLoggingConfiguration:
    """Logging configuration tests."""

    def test_given_json_file_output_when_log_then_valid_json(self, tmp_path: Path) -> None:
        """JSON format produces valid JSON with required fields."""
        # Given
        log_file = tmp_path / "semtok.log"
        configure_logging(config=_json_file_config(log_file, level="INFO"))
        logger = get_logger("test")

        # When
        logger.info("tokens_provided", tokens=3)

        # Then
        data = _last_event(log_file)
        assert data["event"] == "tokens_provided"
        assert data["tokens"] == 3
        assert data["logger"] == "test"
        assert data["level"] == "info"
        assert "timestamp" in data

    def test_given_request_context_when_log_then_tagged(self, tmp_path: Path) -> None:
        """Events inside a request carry its id and document."""
        log_file = tmp_path / "semtok.log"
        configure_logging(config=_json_file_config(log_file))

        with request_context("file:///a.py", request_id="req-42"):
            get_logger().info("tree_parsed")

        data = _last_event(log_file)
        assert data["request_id"] == "req-42"
        assert data["document"] == "file:///a.py"

    def test_given_no_request_when_log_then_untagged(self, tmp_path: Path) -> None:
        log_file = tmp_path / "semtok.log"
        configure_logging(config=_json_file_config(log_file))

        get_logger().info("provider_ready")

        assert "request_id" not in _last_event(log_file)

    def test_given_config_object_when_configure_then_takes_precedence(self, tmp_path: Path) -> None:
        """LoggingConfig object takes precedence over simple params."""
        # Given
        log_file = tmp_path / "test.log"

        # When - config's DEBUG should override the level="ERROR" param
        configure_logging(
            config=_json_file_config(log_file, level="DEBUG"), json_format=False, level="ERROR"
        )
        get_logger().debug("debug msg")

        # Then
        assert "debug msg" in log_file.read_text()

    def test_given_multi_output_config_when_configure_then_logs_to_all(
        self, tmp_path: Path
    ) -> None:
        """Multiple outputs receive logs according to their levels."""
        # Given
        debug_file = tmp_path / "debug.log"
        info_file = tmp_path / "info.log"
        config = LoggingConfig(
            level="DEBUG",
            outputs=[
                LogOutputConfig(format="json", destination=str(info_file), level="INFO"),
                LogOutputConfig(format="json", destination=str(debug_file)),
            ],
        )

        # When
        configure_logging(config=config)
        logger = get_logger()
        logger.debug("debug only")
        logger.info("info msg")

        # Then
        info_content = info_file.read_text()
        assert "info msg" in info_content
        assert "debug only" not in info_content

        debug_content = debug_file.read_text()
        assert "debug only" in debug_content
        assert "info msg" in debug_content

    def test_given_console_format_when_log_then_plain_text(self, tmp_path: Path) -> None:
        log_file = tmp_path / "console.log"
        configure_logging(
            config=LoggingConfig(
                outputs=[LogOutputConfig(format="console", destination=str(log_file))]
            )
        )

        get_logger().warning("token_type_fallback", token_type="label")

        content = log_file.read_text()
        assert "token_type_fallback" in content
        assert "token_type=label" in content
