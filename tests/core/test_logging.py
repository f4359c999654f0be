"""Tests for structured logging."""

import json
import logging
from pathlib import Path

import structlog

from permminer.config.models import LoggingConfig, LogOutputConfig
from permminer.core.logging import (
    clear_run_id,
    configure_logging,
    get_logger,
    get_run_id,
    set_run_id,
)


class TestRunIdCorrelation:
    """Run ID context variable tests."""

    def setup_method(self) -> None:
        """Clear run ID before each test."""
        clear_run_id()

    def test_given_run_id_when_set_then_can_retrieve(self) -> None:
        """Run ID can be set and retrieved."""
        # Given
        run_id = "mine-123"

        # When
        result = set_run_id(run_id)

        # Then
        assert result == run_id
        assert get_run_id() == run_id

    def test_given_no_id_when_set_then_generates_uuid(self) -> None:
        """Set generates a UUID-based ID when none provided."""
        # When
        rid = set_run_id()

        # Then
        assert len(rid) == 12  # uuid4().hex[:12]

    def test_given_set_id_when_clear_then_removes_id(self) -> None:
        """Clear removes the current run ID."""
        # Given
        set_run_id("to-clear")

        # When
        clear_run_id()

        # Then
        assert get_run_id() is None


class TestLoggingConfiguration:
    """Logging configuration tests."""

    def setup_method(self) -> None:
        """Reset structlog and stdlib logging before each test."""
        structlog.reset_defaults()
        logging.getLogger().handlers.clear()
        clear_run_id()

    def teardown_method(self) -> None:
        clear_run_id()
        logging.getLogger().handlers.clear()

    def test_given_config_object_when_configure_then_takes_precedence(self, tmp_path: Path) -> None:
        """LoggingConfig object takes precedence over simple params."""
        # Given
        log_file = tmp_path / "test.log"
        config = LoggingConfig(
            level="DEBUG",
            outputs=[LogOutputConfig(format="json", destination=str(log_file))],
        )

        # When
        configure_logging(config=config, json_format=False, level="ERROR")
        get_logger().debug("debug msg")

        # Then
        assert "debug msg" in log_file.read_text()

    def test_given_json_file_when_log_then_includes_run_id(self, tmp_path: Path) -> None:
        """JSON records carry the event, bound fields and the run ID."""
        # Given
        log_file = tmp_path / "run.log"
        config = LoggingConfig(level="INFO", outputs=[LogOutputConfig(format="json", destination=str(log_file))])
        configure_logging(config=config)
        set_run_id("run-42")

        # When
        get_logger("mining").info("mining_started", classes=3)

        # Then
        record = json.loads(log_file.read_text().strip().splitlines()[-1])
        assert record["event"] == "mining_started"
        assert record["classes"] == 3
        assert record["run_id"] == "run-42"
        assert record["logger"] == "mining"
        assert record["level"] == "info"

    def test_given_multi_output_config_when_configure_then_levels_apply_per_output(self, tmp_path: Path) -> None:
        """Each output filters by its own level."""
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

    def test_given_module_logger_created_at_import_when_configured_later_then_level_applies(
        self, tmp_path: Path
    ) -> None:
        """Module-level loggers follow configuration done after import."""
        # Given
        from permminer.mining import collector

        log_file = tmp_path / "late.log"
        config = LoggingConfig(level="INFO", outputs=[LogOutputConfig(format="json", destination=str(log_file))])

        # When
        configure_logging(config=config)
        collector.log.debug("filtered_debug_event")
        collector.log.info("kept_info_event")

        # Then
        content = log_file.read_text()
        assert "filtered_debug_event" not in content
        record = json.loads(content.strip().splitlines()[-1])
        assert record["event"] == "kept_info_event"
        assert record["logger"] == "permminer.mining.collector"
