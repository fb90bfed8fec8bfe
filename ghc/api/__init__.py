"""GitHub API access layer.

This package provides the REST/GraphQL client used by every ghc command:
- Client: authenticated requests, pagination, retry, error classification
- ApiError and its subclasses: the error taxonomy callers match on
- Scope helpers: OAuth scope suggestions and token display helpers

Use get_api_client() to build a client from a Config, and configure_logging()
to apply its logging settings.
"""

import os

from ghc.api.client import Client, is_retryable
from ghc.api.errors import (
    ApiError,
    AuthRequiredError,
    GraphQLError,
    GraphQLErrorEntry,
    HttpError,
    JsonParseError,
    MissingScopesError,
    RequestError,
)
from ghc.api.http import build_session
from ghc.api.pagination import PageInfo, RestPage, parse_link_next
from ghc.api.scopes import (
    check_minimum_scopes,
    expect_scopes,
    generate_scopes_suggestion,
    mask_token,
    token_source_is_writeable,
)
from ghc.api.secret import SecretToken
from ghc.config import Config
from ghc.instance import is_enterprise
from ghc.logger import setup_logging


def get_api_client(config: Config) -> Client:
    """Factory function to build a Client for the configured host.

    Args:
        config: Loaded configuration

    Returns:
        Client with a fresh HTTP session, the configured token, and the
        URL override applied if one is set
    """
    session = build_session(config.app_version, log_verbose=config.verbose)
    client = Client(session, config.hostname, config.token, timeout=config.http_timeout)
    if config.api_url_override:
        client = client.with_url_override(config.api_url_override)
    return client


def configure_logging(config: Config) -> None:
    """Set up logging from a Config.

    Applies the configured level and log file. Enterprise Server hostnames
    are masked in log output.
    """
    os.environ["LOG_LEVEL"] = config.log_level
    ghes_host = config.hostname if is_enterprise(config.hostname) else None
    setup_logging(log_file=config.log_file, ghes_host=ghes_host)


__all__ = [
    "ApiError",
    "AuthRequiredError",
    "Client",
    "Config",
    "GraphQLError",
    "GraphQLErrorEntry",
    "HttpError",
    "JsonParseError",
    "MissingScopesError",
    "PageInfo",
    "RequestError",
    "RestPage",
    "SecretToken",
    "build_session",
    "check_minimum_scopes",
    "configure_logging",
    "expect_scopes",
    "generate_scopes_suggestion",
    "get_api_client",
    "is_retryable",
    "mask_token",
    "parse_link_next",
    "token_source_is_writeable",
]
