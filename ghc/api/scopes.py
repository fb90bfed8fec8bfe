"""OAuth scope advice and token display helpers.

GitHub reports the scopes a classic token carries in the X-OAuth-Scopes
response header and the scopes an endpoint accepts in X-Accepted-OAuth-Scopes.
Coarse scopes imply finer ones without listing them, so the granted set is
expanded before it is compared against what the endpoint needs.
"""

from ghc.api.errors import MissingScopesError
from ghc.instance import GITHUB_COM, normalize_hostname

# Scopes granted implicitly by a coarser scope
IMPLIED_SCOPES: dict[str, tuple[str, ...]] = {
    "repo": ("repo:status", "repo_deployment", "public_repo", "repo:invite", "security_events"),
    "user": ("read:user", "user:email", "user:follow"),
    "codespace": ("codespace:secrets",),
}

# Token prefixes that report classic OAuth scopes (PATs and OAuth app tokens)
SCOPED_TOKEN_PREFIXES = ("ghp_", "gho_")

# Any one of these satisfies the organization-read requirement
ORG_READ_SCOPES = {"read:org", "write:org", "admin:org"}


def parse_scopes(header: str | None) -> list[str]:
    """Split a comma-separated scopes header into scope names, preserving order."""
    if not header:
        return []
    return [s.strip() for s in header.split(",") if s.strip()]


def expand_scopes(scopes: list[str]) -> set[str]:
    """Expand granted scopes with every scope they imply.

    Args:
        scopes: Scope names as granted to the token (e.g., ["repo", "admin:org"])

    Returns:
        Set containing each literal scope plus the scopes it implies
    """
    expanded: set[str] = set()
    for scope in scopes:
        if scope in IMPLIED_SCOPES:
            expanded.update(IMPLIED_SCOPES[scope])
        elif scope.startswith("admin:"):
            rest = scope[len("admin:") :]
            expanded.update({f"read:{rest}", f"write:{rest}"})
        elif scope.startswith("write:"):
            expanded.add(f"read:{scope[len('write:'):]}")
        expanded.add(scope)
    return expanded


def generate_scopes_suggestion(
    status_code: int,
    endpoint_needs_scopes: str | None,
    token_has_scopes: str | None,
    hostname: str = GITHUB_COM,
) -> str | None:
    """Suggest how to fix a 4xx caused by a token missing an OAuth scope.

    Only the first missing scope (in the order the endpoint lists them) is
    reported.

    Args:
        status_code: HTTP status of the failed response
        endpoint_needs_scopes: Value of the X-Accepted-OAuth-Scopes header
        token_has_scopes: Value of the X-OAuth-Scopes header
        hostname: Host to name in the `ghc auth refresh` command

    Returns:
        Human-readable suggestion, or None if no scope is missing or the
        status is not an authorization failure
    """
    if not 400 <= status_code <= 499 or status_code == 422:
        return None

    # Fine-grained and integration tokens send an empty scopes header
    if not token_has_scopes:
        return None

    granted = expand_scopes(parse_scopes(token_has_scopes))
    for scope in parse_scopes(endpoint_needs_scopes):
        if scope in granted:
            continue
        return (
            f'This API operation needs the "{scope}" scope. To request it, run:  '
            f"ghc auth refresh -h {normalize_hostname(hostname)} -s {scope}"
        )
    return None


def check_minimum_scopes(scopes_header: str) -> None:
    """Validate that a token carries the baseline scopes the CLI needs.

    Requires "repo" and one of read:org, write:org or admin:org. An empty
    header passes, since fine-grained and integration tokens report no scopes.

    Raises:
        MissingScopesError: If any required scope is absent
    """
    if not scopes_header:
        return

    scopes = set(parse_scopes(scopes_header))
    missing = []
    if "repo" not in scopes:
        missing.append("repo")
    if not scopes & ORG_READ_SCOPES:
        missing.append("read:org")

    if missing:
        raise MissingScopesError(missing)


def mask_token(token: str) -> str:
    """Mask a token for display, keeping everything up to the last underscore.

    Example:
        >>> mask_token("ghp_abc123")
        'ghp_******'
    """
    idx = token.rfind("_")
    if idx == -1:
        return "*" * len(token)
    prefix = token[: idx + 1]
    return prefix + "*" * (len(token) - len(prefix))


def expect_scopes(token: str) -> bool:
    """Check whether a token type reports classic OAuth scopes at all."""
    return token.startswith(SCOPED_TOKEN_PREFIXES)


def token_source_is_writeable(source: str) -> bool:
    """Tokens read from *_TOKEN environment variables cannot be refreshed by ghc."""
    return not source.endswith("_TOKEN")
