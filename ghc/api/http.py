"""HTTP executor construction.

Builds the requests.Session shared by every Client for one CLI invocation,
with the default User-Agent and Accept headers GitHub expects.
"""

import os

import requests

from ghc.logger import get_logger

logger = get_logger(__name__)

# Default media type for the GitHub REST API
GITHUB_JSON = "application/vnd.github+json"

# Environment variables that can supply a github.com token, in precedence order
TOKEN_ENV_VARS = ("GH_TOKEN", "GITHUB_TOKEN")


def _log_response(response: requests.Response, *args, **kwargs) -> None:
    """Response hook that logs each request/response pair at DEBUG."""
    request = response.request
    logger.debug(f"* {request.method} {request.url}")
    logger.debug(f"< HTTP {response.status_code} {response.reason}")
    for name, value in response.headers.items():
        logger.debug(f"< {name}: {value}")


def build_session(
    app_version: str,
    skip_default_headers: bool = False,
    log_verbose: bool = False,
) -> requests.Session:
    """Build the HTTP session used for all API requests.

    Args:
        app_version: Application version, reported in the User-Agent header
        skip_default_headers: If True, leave requests' default headers untouched
        log_verbose: If True, log every request and response line at DEBUG

    Returns:
        A configured requests.Session, safe to share between Client instances
    """
    session = requests.Session()
    if not skip_default_headers:
        session.headers.update(
            {
                "User-Agent": f"GHC CLI {app_version}",
                "Accept": GITHUB_JSON,
            }
        )

    if log_verbose:
        logger.debug("Building HTTP session with verbose logging")
        session.hooks["response"].append(_log_response)

    return session


def auth_header_value(token: str) -> str:
    """Format an Authorization header value (GitHub's "token" scheme, not Bearer)."""
    return f"token {token}"


def auth_token_env_override() -> str | None:
    """Name of the environment variable overriding config-based auth, if any."""
    for name in TOKEN_ENV_VARS:
        if name in os.environ:
            return name
    return None


def auth_token_writeable(source: str) -> tuple[str, bool]:
    """Report whether a token source can be written back to.

    Returns:
        (source, writeable), writeable being False for *_TOKEN environment variables
    """
    return source, not source.endswith("_TOKEN")
