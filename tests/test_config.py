"""Unit tests for the config module."""

import os
from unittest.mock import patch

import pytest

from ghc.config import Config, load_config, parse_config_file, resolve_token

CONFIG_ENV_VARS = (
    "GH_HOST",
    "GH_TOKEN",
    "GITHUB_TOKEN",
    "GH_ENTERPRISE_TOKEN",
    "GITHUB_ENTERPRISE_TOKEN",
    "LOG_LEVEL",
    "GH_DEBUG",
)


@pytest.fixture
def clean_env():
    """Fixture removing config-related environment variables, restored afterwards."""
    with patch.dict(os.environ):
        for name in CONFIG_ENV_VARS:
            os.environ.pop(name, None)
        yield


@pytest.mark.unit
class TestConfig:
    """Tests for Config dataclass."""

    def test_defaults(self):
        """Test creating a Config with default values."""
        config = Config()

        assert config.hostname == "github.com"
        assert config.token is None
        assert config.app_version == "dev"
        assert config.http_timeout is None
        assert config.verbose is False
        assert config.api_url_override is None

    def test_repr_redacts_token(self):
        """Test that repr() never shows the token."""
        config = Config(token="ghp_supersecret", token_source="GH_TOKEN")

        assert "ghp_supersecret" not in repr(config)
        assert "[REDACTED]" in repr(config)


@pytest.mark.unit
class TestParseConfigFile:
    """Tests for parse_config_file function."""

    def test_parses_key_values(self, tmp_path):
        """Test KEY=value lines, comments, blanks and quotes."""
        config_file = tmp_path / "config"
        config_file.write_text(
            "# ghc settings\n"
            "\n"
            "HOST=github.mycompany.com\n"
            'TOKEN="ghp_quoted"\n'
            "APP_VERSION='1.2.3'\n"
            "API_URL = http://127.0.0.1:8080/?a=b\n"
        )

        data = parse_config_file(config_file)

        assert data == {
            "HOST": "github.mycompany.com",
            "TOKEN": "ghp_quoted",
            "APP_VERSION": "1.2.3",
            "API_URL": "http://127.0.0.1:8080/?a=b",
        }

    def test_ignores_lines_without_equals(self, tmp_path):
        """Test malformed lines are skipped."""
        config_file = tmp_path / "config"
        config_file.write_text("not a setting\nHOST=github.com\n")

        assert parse_config_file(config_file) == {"HOST": "github.com"}


@pytest.mark.unit
class TestResolveToken:
    """Tests for resolve_token function."""

    def test_env_wins_over_file(self, clean_env):
        """Test that GH_TOKEN takes precedence over the config file."""
        os.environ["GH_TOKEN"] = "ghp_env"

        assert resolve_token("github.com", {"TOKEN": "ghp_file"}) == ("ghp_env", "GH_TOKEN")

    def test_gh_token_before_github_token(self, clean_env):
        """Test variable precedence for github.com."""
        os.environ["GH_TOKEN"] = "first"
        os.environ["GITHUB_TOKEN"] = "second"

        assert resolve_token("github.com", {}) == ("first", "GH_TOKEN")

    def test_enterprise_uses_enterprise_vars(self, clean_env):
        """Test GHES hosts ignore GH_TOKEN and read the enterprise variables."""
        os.environ["GH_TOKEN"] = "cloud"
        os.environ["GITHUB_ENTERPRISE_TOKEN"] = "enterprise"

        token, source = resolve_token("github.mycompany.com", {})

        assert token == "enterprise"
        assert source == "GITHUB_ENTERPRISE_TOKEN"

    def test_ghe_com_uses_cloud_vars(self, clean_env):
        """Test GHE.com tenants read GH_TOKEN like github.com."""
        os.environ["GH_TOKEN"] = "cloud"

        assert resolve_token("octo.ghe.com", {}) == ("cloud", "GH_TOKEN")

    def test_file_token(self, clean_env):
        """Test the config file token is used when no variable is set."""
        assert resolve_token("github.com", {"TOKEN": "ghp_file"}) == ("ghp_file", "config")

    def test_no_token(self, clean_env):
        """Test (None, None) when nothing is configured."""
        assert resolve_token("github.com", {}) == (None, None)


@pytest.mark.unit
class TestLoadConfig:
    """Tests for load_config function."""

    def test_missing_file_uses_defaults(self, tmp_path, clean_env):
        """Test that a missing config file yields defaults."""
        config = load_config(tmp_path / "missing")

        assert config.hostname == "github.com"
        assert config.token is None
        assert config.token_source is None
        assert config.log_level == "INFO"

    def test_loads_all_settings_from_file(self, tmp_path, clean_env):
        """Test every supported key is read from the file."""
        config_file = tmp_path / "config"
        config_file.write_text(
            "HOST=https://GitHub.MyCompany.com/\n"
            "TOKEN=ghp_file\n"
            "APP_VERSION=2.0.0\n"
            "LOG_LEVEL=DEBUG\n"
            "LOG_FILE=.ghc/logs/ghc.log\n"
            "HTTP_TIMEOUT=12.5\n"
            "VERBOSE=true\n"
            "API_URL=http://127.0.0.1:8080/\n"
        )

        config = load_config(config_file)

        assert config.hostname == "github.mycompany.com"
        assert config.token == "ghp_file"
        assert config.token_source == "config"
        assert config.app_version == "2.0.0"
        assert config.log_level == "DEBUG"
        assert config.log_file == ".ghc/logs/ghc.log"
        assert config.http_timeout == 12.5
        assert config.verbose is True
        assert config.api_url_override == "http://127.0.0.1:8080/"

    def test_gh_host_overrides_file(self, tmp_path, clean_env):
        """Test GH_HOST in the environment wins over HOST in the file."""
        config_file = tmp_path / "config"
        config_file.write_text("HOST=github.mycompany.com\n")
        os.environ["GH_HOST"] = "octo.ghe.com"

        assert load_config(config_file).hostname == "octo.ghe.com"

    @pytest.mark.parametrize("value,expected", [("1", True), ("api", True), ("0", False)])
    def test_gh_debug_enables_verbose(self, tmp_path, clean_env, value, expected):
        """Test GH_DEBUG toggles verbose HTTP logging."""
        os.environ["GH_DEBUG"] = value

        assert load_config(tmp_path / "missing").verbose is expected

    def test_exports_log_level(self, tmp_path, clean_env):
        """Test the resolved log level is exported for setup_logging()."""
        config_file = tmp_path / "config"
        config_file.write_text("LOG_LEVEL=WARNING\n")

        load_config(config_file)

        assert os.environ["LOG_LEVEL"] == "WARNING"

    def test_invalid_timeout_raises(self, tmp_path, clean_env):
        """Test a non-numeric HTTP_TIMEOUT names the bad key."""
        config_file = tmp_path / "config"
        config_file.write_text("HTTP_TIMEOUT=soon\n")

        with pytest.raises(ValueError, match="HTTP_TIMEOUT"):
            load_config(config_file)

    def test_default_path_is_relative_to_cwd(self, tmp_path, clean_env, monkeypatch):
        """Test the default location is .ghc/config in the working directory."""
        (tmp_path / ".ghc").mkdir()
        (tmp_path / ".ghc" / "config").write_text("TOKEN=ghp_default\n")
        monkeypatch.chdir(tmp_path)

        assert load_config().token == "ghp_default"
