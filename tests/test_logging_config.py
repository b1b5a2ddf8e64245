"""Tests for structured logging."""

import json
import logging
import sys

from swagcomment.logging_config import (
    JSONFormatter,
    LogContext,
    StructuredLogger,
    TextFormatter,
    configure_logging,
    get_context,
    get_logger,
)


def make_record(message="Generated comment", **fields):
    record = logging.LogRecord(
        name="swagcomment.orchestrator",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg=message,
        args=(),
        exc_info=None,
    )
    record.structured_fields = fields
    return record


class TestFormatters:
    """Tests for JSON and text output."""

    def test_json_includes_fields(self):
        """Structured fields are merged into the JSON object."""
        data = json.loads(JSONFormatter().format(make_record(handler="GetUser")))
        assert data["msg"] == "Generated comment"
        assert data["level"] == "INFO"
        assert data["logger"] == "swagcomment.orchestrator"
        assert data["handler"] == "GetUser"
        assert data["ts"].endswith("Z")

    def test_json_includes_source_file_from_context(self):
        """The current source file is injected from the log context."""
        with LogContext(source_file="user_handler.go"):
            data = json.loads(JSONFormatter().format(make_record()))
        assert data["source_file"] == "user_handler.go"

    def test_text_format(self):
        """Text output uses the short logger name and key=value fields."""
        with LogContext(source_file="auth_handler.go"):
            line = TextFormatter().format(make_record(handler="Login"))
        assert "[INFO] [orchestrator] [auth_handler.go] Generated comment handler=Login" in line

    def test_exception_info(self):
        """Exception details are serialized."""
        try:
            raise ValueError("bad offset")
        except ValueError:
            record = make_record()
            record.exc_info = sys.exc_info()
        data = json.loads(JSONFormatter().format(record))
        assert data["exception"]["type"] == "ValueError"
        assert data["exception"]["message"] == "bad offset"


class TestLogContext:
    """Tests for context propagation."""

    def test_nested_contexts_restore(self):
        """Leaving a context restores the outer fields."""
        assert "source_file" not in get_context()
        with LogContext(source_file="a.go"):
            with LogContext(handler="GetUser"):
                assert get_context() == {"source_file": "a.go", "handler": "GetUser"}
            assert get_context() == {"source_file": "a.go"}
        assert "source_file" not in get_context()


class TestGetLogger:
    """Tests for logger lookup."""

    def test_cached(self):
        """The same name returns the same wrapper."""
        assert get_logger("swagcomment.test") is get_logger("swagcomment.test")
        assert isinstance(get_logger("swagcomment.test"), StructuredLogger)

    def test_disabled_levels_skipped(self, caplog):
        """Records below the logger level are not emitted."""
        logger = get_logger("swagcomment.quiet")
        logging.getLogger("swagcomment.quiet").setLevel(logging.ERROR)
        try:
            with caplog.at_level(logging.DEBUG):
                logger.info("hidden")
                logger.error("shown", path="x.go")
        finally:
            logging.getLogger("swagcomment.quiet").setLevel(logging.NOTSET)
        messages = [r.getMessage() for r in caplog.records]
        assert messages == ["shown"]
        assert caplog.records[0].structured_fields == {"path": "x.go"}


class TestConfigureLogging:
    """Tests for handler installation."""

    def test_json_console_handler(self, restore_root_logger):
        """JSON output installs a single JSON console handler."""
        configure_logging(level="WARNING", json_output=True)
        handlers = restore_root_logger.handlers
        assert len(handlers) == 1
        assert isinstance(handlers[0].formatter, JSONFormatter)
        assert logging.getLogger("swagcomment").level == logging.WARNING

    def test_file_handler(self, restore_root_logger, tmp_path):
        """A log file adds a rotating file handler."""
        log_file = tmp_path / "swagcomment.log"
        configure_logging(level="INFO", json_output=False, log_file=str(log_file))
        assert len(restore_root_logger.handlers) == 2

        get_logger("swagcomment.filetest").info("Processed file", file="user_handler.go")
        for handler in restore_root_logger.handlers:
            handler.flush()
        assert "Processed file file=user_handler.go" in log_file.read_text()
