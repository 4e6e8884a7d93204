"""
Integration Tests for cli.py.

Runs the click command in-process with CliRunner.
"""

import pytest
import structlog
from click.testing import CliRunner

from cli import main


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture(autouse=True)
def keep_test_logging(monkeypatch):
    """The CLI reconfigures logging for the terminal; keep it out of the test run."""
    monkeypatch.setattr("cli.setup_logging", lambda **kwargs: None)
    yield
    structlog.contextvars.clear_contextvars()


class TestCli:
    def test_help(self, runner):
        result = runner.invoke(main, ["--help"])

        assert result.exit_code == 0
        assert "--service" in result.output

    def test_info(self, runner):
        result = runner.invoke(main, ["--service", "info"])

        assert result.exit_code == 0
        assert "newsdesk 0.1.0" in result.output
        assert "server" in result.output

    def test_config_hides_token(self, runner, monkeypatch):
        from newsdesk.core.config import get_settings

        monkeypatch.setenv("STRAPI_TOKEN", "very-secret-fragment")
        get_settings.cache_clear()
        try:
            result = runner.invoke(main, ["--service", "config"])
        finally:
            get_settings.cache_clear()

        assert result.exit_code == 0
        assert "backend.yaml" in result.output
        assert "/api/newstreams" in result.output
        assert "very-secret-fragment" not in result.output

    def test_rejects_unknown_service(self, runner):
        result = runner.invoke(main, ["--service", "worker"])

        assert result.exit_code != 0
