"""Configuration module for ghc.

This module provides configuration for the API layer, loading settings from
a .ghc/config file (KEY=value format) with fallback to environment variables.
Tokens taken from the environment record the variable name as their source,
since ghc cannot refresh them.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from ghc.instance import GITHUB_COM, is_enterprise, normalize_hostname

logger = logging.getLogger(__name__)

# Default paths relative to the working directory
GHC_DIR = ".ghc"
CONFIG_FILE = "config"

# Token environment variables in precedence order
GITHUB_TOKEN_VARS = ("GH_TOKEN", "GITHUB_TOKEN")
ENTERPRISE_TOKEN_VARS = ("GH_ENTERPRISE_TOKEN", "GITHUB_ENTERPRISE_TOKEN")

# Token source reported when the token comes from the config file
CONFIG_SOURCE = "config"


@dataclass
class Config:
    """API layer configuration.

    Attributes:
        hostname: GitHub hostname to talk to (github.com, a GHE.com tenant, or a GHES host)
        token: API token, or None for unauthenticated access
        token_source: Where the token came from ("config" or an env var name)
        app_version: Version reported in the User-Agent header
        log_level: Logging level name
        log_file: Optional path of a rotating log file
        http_timeout: Per-request timeout in seconds, or None for no timeout
        verbose: Log every HTTP request and response at DEBUG
        api_url_override: Base URL replacing the real API (tests and local mocks)
    """

    hostname: str = GITHUB_COM
    token: str | None = None
    token_source: str | None = None
    app_version: str = "dev"
    log_level: str = "INFO"
    log_file: str | None = None
    http_timeout: float | None = None
    verbose: bool = False
    api_url_override: str | None = None

    def __repr__(self) -> str:
        token = "[REDACTED]" if self.token else None
        return (
            f"Config(hostname={self.hostname!r}, token={token!r}, "
            f"token_source={self.token_source!r}, app_version={self.app_version!r})"
        )


def parse_config_file(config_path: Path) -> dict[str, str]:
    """Parse a KEY=value config file.

    Args:
        config_path: Path to the config file

    Returns:
        Dictionary of key-value pairs
    """
    config = {}
    with open(config_path) as f:
        for line in f:
            line = line.strip()
            # Skip empty lines and comments
            if not line or line.startswith("#"):
                continue
            if "=" in line:
                key, _, value = line.partition("=")
                key = key.strip()
                value = value.strip()
                # Remove surrounding quotes if present
                if (value.startswith('"') and value.endswith('"')) or (
                    value.startswith("'") and value.endswith("'")
                ):
                    value = value[1:-1]
                config[key] = value
    return config


def resolve_token(hostname: str, data: dict[str, str]) -> tuple[str | None, str | None]:
    """Resolve the token for a host, environment first, then the config file.

    github.com and GHE.com hosts read GH_TOKEN then GITHUB_TOKEN; GHES hosts
    read GH_ENTERPRISE_TOKEN then GITHUB_ENTERPRISE_TOKEN.

    Args:
        hostname: Normalized GitHub hostname
        data: Parsed config file contents

    Returns:
        Tuple of (token, source), or (None, None) if no token is configured
    """
    env_vars = ENTERPRISE_TOKEN_VARS if is_enterprise(hostname) else GITHUB_TOKEN_VARS
    for name in env_vars:
        token = os.environ.get(name)
        if token:
            return token, name

    token = data.get("TOKEN")
    if token:
        return token, CONFIG_SOURCE
    return None, None


def _parse_float(data: dict[str, str], key: str) -> float | None:
    value = data.get(key)
    if not value:
        return None
    try:
        return float(value)
    except ValueError as e:
        raise ValueError(f"Invalid value for {key}: {value!r} is not a number") from e


def load_config(config_path: Path | None = None) -> Config:
    """Load configuration from the config file and environment.

    The config file is optional; when absent every setting comes from the
    environment or defaults. GH_HOST in the environment overrides HOST in
    the file.

    Args:
        config_path: Path to the config file. Defaults to .ghc/config

    Returns:
        Config: A populated Config instance

    Raises:
        ValueError: If a numeric setting cannot be parsed
    """
    if config_path is None:
        config_path = Path.cwd() / GHC_DIR / CONFIG_FILE

    data: dict[str, str] = {}
    if config_path.exists():
        data = parse_config_file(config_path)
        logger.debug(f"Loaded config from {config_path}")

    hostname = normalize_hostname(os.environ.get("GH_HOST") or data.get("HOST") or GITHUB_COM)
    token, token_source = resolve_token(hostname, data)

    log_level = os.environ.get("LOG_LEVEL") or data.get("LOG_LEVEL", "INFO")
    os.environ["LOG_LEVEL"] = log_level  # Set for logger module

    verbose_value = os.environ.get("GH_DEBUG") or data.get("VERBOSE", "")
    verbose = verbose_value.lower() in ("1", "true", "api")

    return Config(
        hostname=hostname,
        token=token,
        token_source=token_source,
        app_version=data.get("APP_VERSION", "dev"),
        log_level=log_level,
        log_file=data.get("LOG_FILE") or None,
        http_timeout=_parse_float(data, "HTTP_TIMEOUT"),
        verbose=verbose,
        api_url_override=data.get("API_URL") or None,
    )
