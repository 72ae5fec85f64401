"""Tests for application configuration."""

import pytest

from behavior_tracker.config import DEFAULT_APP_TITLE, AppConfig, ConfigError

pytestmark = pytest.mark.unit


@pytest.fixture
def env(monkeypatch):
    """Start every test from an environment without gateway settings."""
    for name in ("SUPABASE_URL", "SUPABASE_ANON_KEY", "GATEWAY_TIMEOUT", "APP_TITLE", "GATEWAY_AUTO_REFRESH"):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestFromEnv:
    """Tests for AppConfig.from_env."""

    def test_reads_url_and_key(self, env):
        """URL and key come from the environment."""
        env.setenv("SUPABASE_URL", "https://abc.supabase.co")
        env.setenv("SUPABASE_ANON_KEY", "anon")

        config = AppConfig.from_env(load_env_file=False)

        assert config.supabase_url == "https://abc.supabase.co"
        assert config.anon_key == "anon"
        assert config.timeout is None
        assert config.app_title == DEFAULT_APP_TITLE
        assert config.auto_refresh_token

    def test_missing_url_raises(self, env):
        """A missing URL is a configuration error."""
        env.setenv("SUPABASE_ANON_KEY", "anon")
        with pytest.raises(ConfigError, match="SUPABASE_URL"):
            AppConfig.from_env(load_env_file=False)

    def test_missing_key_raises(self, env):
        """A missing anon key is a configuration error."""
        env.setenv("SUPABASE_URL", "https://abc.supabase.co")
        with pytest.raises(ConfigError, match="SUPABASE_ANON_KEY"):
            AppConfig.from_env(load_env_file=False)

    def test_blank_values_count_as_missing(self, env):
        env.setenv("SUPABASE_URL", "   ")
        env.setenv("SUPABASE_ANON_KEY", "anon")
        with pytest.raises(ConfigError):
            AppConfig.from_env(load_env_file=False)

    def test_non_http_url_raises(self, env):
        env.setenv("SUPABASE_URL", "abc.supabase.co")
        env.setenv("SUPABASE_ANON_KEY", "anon")
        with pytest.raises(ConfigError, match="http"):
            AppConfig.from_env(load_env_file=False)

    def test_trailing_slash_is_stripped(self, env):
        env.setenv("SUPABASE_URL", "https://abc.supabase.co/")
        env.setenv("SUPABASE_ANON_KEY", "anon")

        config = AppConfig.from_env(load_env_file=False)

        assert config.supabase_url == "https://abc.supabase.co"

    def test_timeout_and_title(self, env):
        env.setenv("SUPABASE_URL", "https://abc.supabase.co")
        env.setenv("SUPABASE_ANON_KEY", "anon")
        env.setenv("GATEWAY_TIMEOUT", "12.5")
        env.setenv("APP_TITLE", "Rizal High")

        config = AppConfig.from_env(load_env_file=False)

        assert config.timeout == 12.5
        assert config.app_title == "Rizal High"

    @pytest.mark.parametrize("value", ["0", "false", "No", " off "])
    def test_auto_refresh_can_be_disabled(self, env, value):
        env.setenv("SUPABASE_URL", "https://abc.supabase.co")
        env.setenv("SUPABASE_ANON_KEY", "anon")
        env.setenv("GATEWAY_AUTO_REFRESH", value)

        assert not AppConfig.from_env(load_env_file=False).auto_refresh_token

    def test_bad_timeout_raises(self, env):
        env.setenv("SUPABASE_URL", "https://abc.supabase.co")
        env.setenv("SUPABASE_ANON_KEY", "anon")
        env.setenv("GATEWAY_TIMEOUT", "soon")
        with pytest.raises(ConfigError, match="GATEWAY_TIMEOUT"):
            AppConfig.from_env(load_env_file=False)

    def test_config_error_is_value_error(self):
        assert issubclass(ConfigError, ValueError)
