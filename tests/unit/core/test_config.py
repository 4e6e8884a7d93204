"""Unit tests for newsdesk.core.config."""

import pytest

from newsdesk.core.config import (
    get_app_config,
    get_backend_base_url,
    get_base_path,
    get_settings,
    load_yaml_config,
)
from newsdesk.core.config_schema import BackendSchema, RetrySchema


@pytest.fixture
def fresh_settings():
    """Re-read environment overrides for one test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestYamlSettings:
    """Settings shipped in config/settings."""

    def test_backend_defaults(self):
        """Retry policy and endpoints match the backend's expectations."""
        backend = get_app_config().backend

        assert backend.retry.max_retries == 3
        assert backend.retry.delay_seconds == 10
        assert backend.endpoints.tags == "/api/tags"
        assert backend.endpoints.records == "/api/newstreams"
        assert backend.locale == "zh-Hant-HK"
        assert backend.marker_tags == ["__test", "__hand_input"]

    def test_analytics_defaults(self):
        analytics = get_app_config().analytics

        assert analytics.enabled is True
        assert analytics.site_id == "2"
        assert analytics.tracker_url.startswith("https://")

    def test_missing_file_raises(self):
        with pytest.raises(FileNotFoundError):
            load_yaml_config("does-not-exist.yaml")

    def test_schema_rejects_unknown_keys(self):
        """Typos in settings files fail loudly."""
        raw = load_yaml_config("backend.yaml")
        raw["retires"] = 5

        with pytest.raises(ValueError):
            BackendSchema(**raw)

    def test_retry_rejects_negative_values(self):
        with pytest.raises(ValueError):
            RetrySchema(max_retries=-1, delay_seconds=10)


class TestEnvironmentOverrides:
    """STRAPI_ENDPOINT / BASE_PATH / STRAPI_TOKEN."""

    def test_endpoint_override_wins(self, monkeypatch, fresh_settings):
        monkeypatch.setenv("STRAPI_ENDPOINT", "https://cms.example.org/")

        assert get_backend_base_url() == "https://cms.example.org"

    def test_endpoint_falls_back_to_yaml(self, monkeypatch, fresh_settings):
        monkeypatch.delenv("STRAPI_ENDPOINT", raising=False)

        assert get_backend_base_url() == get_app_config().backend.base_url.rstrip("/")

    def test_base_path_override(self, monkeypatch, fresh_settings):
        monkeypatch.setenv("BASE_PATH", "/desk/")

        assert get_base_path() == "/desk"

    def test_token_from_environment(self, monkeypatch, fresh_settings):
        monkeypatch.setenv("STRAPI_TOKEN", "fragment")

        assert get_settings().strapi_token == "fragment"
