"""API error types.

Every public Client method either returns a value or raises exactly one
ApiError subclass. The subclasses are mutually exclusive and carry different
data, so callers match on the exception type.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class GraphQLErrorEntry(BaseModel):
    """A single entry of a GraphQL response's "errors" array."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    message: str
    error_type: str | None = Field(default=None, alias="type")
    path: list[Any] | None = None


class ApiError(Exception):
    """Base exception for GitHub API errors."""

    def is_not_found(self) -> bool:
        """Check if this is a 404 Not Found error."""
        return False

    def is_unauthorized(self) -> bool:
        """Check if this is a 401 Unauthorized error."""
        return False

    def is_rate_limited(self) -> bool:
        """Check if this is a rate-limit (429) error."""
        return False

    @property
    def scopes_suggestion(self) -> str | None:
        """Scope remediation advice, only ever set on HttpError."""
        return None

    @property
    def missing_scopes(self) -> list[str] | None:
        """Missing scope names, only ever set on MissingScopesError."""
        return None


class HttpError(ApiError):
    """Non-success HTTP response from a REST or GraphQL request."""

    def __init__(
        self,
        status: int,
        message: str,
        scopes_suggestion: str | None = None,
        headers: dict[str, str] | None = None,
    ):
        super().__init__(f"HTTP {status}: {message}")
        self.status = status
        self.message = message
        self._scopes_suggestion = scopes_suggestion
        self.headers = headers or {}

    def is_not_found(self) -> bool:
        return self.status == 404

    def is_unauthorized(self) -> bool:
        return self.status == 401

    def is_rate_limited(self) -> bool:
        return self.status == 429

    @property
    def scopes_suggestion(self) -> str | None:
        return self._scopes_suggestion


class GraphQLError(ApiError):
    """GraphQL errors returned in the response body (often with HTTP 200)."""

    def __init__(self, entries: list[GraphQLErrorEntry]):
        messages = "; ".join(entry.message for entry in entries)
        super().__init__(f"GraphQL: {messages}")
        self.entries = entries


class RequestError(ApiError):
    """Transport-level failure: DNS, connection, TLS, or timeout."""

    def __init__(self, cause: BaseException):
        super().__init__(str(cause))
        self.cause = cause


class MissingScopesError(ApiError):
    """Token lacks the baseline OAuth scopes the CLI needs."""

    def __init__(self, scopes: list[str]):
        super().__init__(f"missing required scopes: {', '.join(scopes)}")
        self.scopes = scopes

    @property
    def missing_scopes(self) -> list[str] | None:
        return self.scopes


class AuthRequiredError(ApiError):
    """No credential is configured for an operation that needs one."""

    def __init__(self) -> None:
        super().__init__("authentication required: try running `ghc auth login`")


class JsonParseError(ApiError):
    """The response body could not be decoded into the requested type."""

    def __init__(self, cause: BaseException):
        super().__init__(f"failed to parse API response: {cause}")
        self.cause = cause
