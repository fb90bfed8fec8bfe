"""GitHub instance handling for different deployment types.

Supports github.com, GitHub Enterprise Server (GHES), and GHE.com tenants.
"""

from urllib.parse import urlparse

# Known GitHub cloud hostname
GITHUB_COM = "github.com"

# GitHub localhost for development
LOCALHOST = "github.localhost"

# GHE.com tenant suffix
GHE_COM_SUFFIX = ".ghe.com"


def normalize_hostname(host: str) -> str:
    """Normalize a GitHub hostname by removing protocol and trailing slashes.

    Args:
        host: Hostname, optionally with an http(s):// prefix (e.g., "https://GitHub.com/")

    Returns:
        Lower-cased bare hostname (e.g., "github.com")
    """
    for prefix in ("https://", "http://"):
        if host.startswith(prefix):
            host = host[len(prefix) :]
            break
    return host.rstrip("/").lower()


def is_github_com(host: str) -> bool:
    """Check if a hostname is a github.com cloud instance."""
    normalized = normalize_hostname(host)
    return normalized in (GITHUB_COM, LOCALHOST)


def is_ghe_com(host: str) -> bool:
    """Check if a hostname is a GHE.com tenant."""
    return normalize_hostname(host).endswith(GHE_COM_SUFFIX)


def is_enterprise(host: str) -> bool:
    """Check if a hostname is an Enterprise Server instance (not cloud, not GHE.com)."""
    return not is_github_com(host) and not is_ghe_com(host)


def rest_url(host: str) -> str:
    """Get the REST API base URL for a hostname.

    github.com uses the dedicated api.github.com host; every other host
    serves the REST API under /api/v3/.

    Args:
        host: GitHub hostname

    Returns:
        Base URL with a trailing slash (e.g., "https://github.mycompany.com/api/v3/")
    """
    normalized = normalize_hostname(host)
    if is_github_com(normalized):
        return "https://api.github.com/"
    return f"https://{normalized}/api/v3/"


def graphql_url(host: str) -> str:
    """Get the GraphQL endpoint for a hostname."""
    normalized = normalize_hostname(host)
    if is_github_com(normalized):
        return "https://api.github.com/graphql"
    return f"https://{normalized}/api/graphql"


def gist_host(host: str) -> str:
    """Get the Gist hostname for a GitHub hostname."""
    normalized = normalize_hostname(host)
    if is_github_com(normalized):
        return "gist.github.com"
    return normalized


def host_prefix(host: str) -> str:
    """Get the HTTPS URL prefix for a hostname (e.g., "https://github.com/")."""
    return f"https://{normalize_hostname(host)}/"


def host_from_url(url: str) -> str | None:
    """Get the normalized hostname from a URL.

    Returns:
        Hostname, or None if the URL has no host component (e.g., file:// URLs)
    """
    hostname = urlparse(url).hostname
    return normalize_hostname(hostname) if hostname else None
