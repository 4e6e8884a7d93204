"""Unit tests for newsdesk.core.logging."""

import logging
from unittest.mock import MagicMock

import pytest
import structlog

from newsdesk.core.logging import VALID_SOURCES, log_with_source, setup_logging


class TestLogWithSource:
    def test_passes_source_and_context(self):
        mock_logger = MagicMock()

        log_with_source(mock_logger, "client", "info", "Tag list fetched", count=3)

        mock_logger.info.assert_called_once_with("Tag list fetched", source="client", count=3)

    def test_invalid_level_raises(self):
        with pytest.raises(AttributeError):
            log_with_source(object(), "web", "loud", "x")

    def test_sources_cover_frontends(self):
        from newsdesk.core.middleware import KNOWN_FRONTENDS

        assert KNOWN_FRONTENDS <= VALID_SOURCES


class TestSetupLogging:
    @pytest.fixture(autouse=True)
    def restore_logging(self):
        root = logging.getLogger()
        handlers, level = root.handlers[:], root.level
        yield
        root.handlers[:] = handlers
        root.setLevel(level)
        structlog.reset_defaults()

    def test_overrides_yaml(self):
        setup_logging(level="DEBUG", format_type="console", enable_file_logging=False)

        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert logging.getLogger("httpx").level == logging.WARNING

    def test_console_can_be_disabled(self):
        setup_logging(enable_console=False, enable_file_logging=False)

        assert logging.getLogger().handlers == []


class TestSourceTagging:
    def test_missing_source_is_unknown(self):
        from newsdesk.core.logging import _tag_source

        assert _tag_source(None, "info", {"event": "x"})["source"] == "unknown"

    def test_unrecognized_source_is_kept_aside(self):
        from newsdesk.core.logging import _tag_source

        event = _tag_source(None, "info", {"event": "x", "source": "telegram"})

        assert event["source"] == "unknown"
        assert event["declared_source"] == "telegram"
