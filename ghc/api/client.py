"""High-level GitHub API client.

Provides REST and GraphQL methods with Link-header pagination, retry with
exponential backoff for transient failures, error classification, and
OAuth scope suggestions.
"""

import time
from collections.abc import Mapping
from functools import lru_cache
from typing import Any

import requests
from pydantic import BaseModel, TypeAdapter, ValidationError
from tenacity import wait_exponential

from ghc.api.errors import (
    ApiError,
    AuthRequiredError,
    GraphQLError,
    GraphQLErrorEntry,
    HttpError,
    JsonParseError,
    RequestError,
)
from ghc.api.http import auth_header_value
from ghc.api.pagination import RestPage, parse_link_next
from ghc.api.scopes import check_minimum_scopes, generate_scopes_suggestion
from ghc.api.secret import SecretToken
from ghc.instance import graphql_url, normalize_hostname, rest_url
from ghc.logger import get_logger, log_message

logger = get_logger(__name__)

# Maximum number of attempts for rest_with_retry()
MAX_RETRIES = 3

# Backoff before the first retry, doubled for each further retry
RETRY_BASE_DELAY_SECONDS = 1

# Statuses that indicate a transient failure worth retrying
RETRYABLE_STATUSES = {429, 502, 503, 504}

# Opt-in header for GraphQL schema previews
GRAPHQL_FEATURES = "merge_queue"

_LIST_OF_ERROR_ENTRIES = TypeAdapter(list[GraphQLErrorEntry])


class _BackoffState:
    """Minimal state object for tenacity's wait_exponential.

    Tenacity's wait functions expect a RetryCallState with an attempt_number.
    """

    def __init__(self, attempt_number: int):
        self.attempt_number = attempt_number


class _ViewerLogin(BaseModel):
    login: str


class _ViewerResponse(BaseModel):
    viewer: _ViewerLogin


@lru_cache(maxsize=None)
def _type_adapter(model: Any) -> TypeAdapter:
    return TypeAdapter(model)


def _decode(payload: Any, model: Any = None) -> Any:
    """Validate decoded JSON against model, or return it as-is when model is None.

    Raises:
        JsonParseError: If the payload does not match the model
    """
    if model is None:
        return payload
    try:
        return _type_adapter(model).validate_python(payload)
    except ValidationError as e:
        raise JsonParseError(e) from e


def _json_body(response: requests.Response) -> Any:
    try:
        return response.json()
    except ValueError as e:
        raise JsonParseError(e) from e


def _is_success(response: requests.Response) -> bool:
    return 200 <= response.status_code < 300


def extract_header_map(headers: Mapping[str, Any]) -> dict[str, str]:
    """Copy every text-valued response header into a plain dict with lower-cased keys."""
    return {str(name).lower(): value for name, value in headers.items() if isinstance(value, str)}


def is_retryable(err: ApiError) -> bool:
    """Check if an API error is transient.

    Rate limiting and gateway errors are retryable, as is any transport-level
    failure. Every other error is terminal.
    """
    if isinstance(err, HttpError):
        return err.status in RETRYABLE_STATUSES
    return isinstance(err, RequestError)


class Client:
    """GitHub API client bound to a single hostname.

    A Client is immutable once built. with_url_override() and clone() return
    new instances that share the same requests.Session, so copies are cheap
    and safe to hand to concurrent callers.

    The token is stored as a SecretToken and never appears in repr(); the
    `token` property is the only way to read it.
    """

    __slots__ = ("_session", "_hostname", "_token", "_api_url_override", "_timeout")

    def __init__(
        self,
        session: requests.Session,
        hostname: str,
        token: str | SecretToken | None = None,
        api_url_override: str | None = None,
        timeout: float | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            session: Shared HTTP session (see ghc.api.http.build_session)
            hostname: GitHub hostname (e.g., "github.com" or "github.mycompany.com")
            token: API token, or None for unauthenticated requests
            api_url_override: Base URL used instead of the real API for REST and
                GraphQL requests, e.g. "http://127.0.0.1:8080/"
            timeout: Per-request timeout in seconds, or None to wait indefinitely
        """
        self._session = session
        self._hostname = normalize_hostname(hostname)
        self._token = SecretToken(token) if token else None
        self._api_url_override = api_url_override
        self._timeout = timeout

    def __repr__(self) -> str:
        token = "[REDACTED]" if self._token else None
        return (
            f"Client(hostname={self._hostname!r}, token={token!r}, "
            f"api_url_override={self._api_url_override!r})"
        )

    @property
    def hostname(self) -> str:
        """The normalized hostname this client talks to."""
        return self._hostname

    @property
    def token(self) -> str | None:
        """The raw token. Callers must not log or display it."""
        return self._token.expose_secret() if self._token else None

    @property
    def session(self) -> requests.Session:
        return self._session

    def require_token(self) -> str:
        """Return the raw token, raising AuthRequiredError if none is configured."""
        if self._token is None:
            raise AuthRequiredError()
        return self._token.expose_secret()

    def clone(self) -> "Client":
        """Return a copy sharing this client's HTTP session."""
        return Client(
            self._session,
            self._hostname,
            self._token,
            api_url_override=self._api_url_override,
            timeout=self._timeout,
        )

    def with_url_override(self, url: str) -> "Client":
        """Return a copy that sends all requests to `url` instead of GitHub.

        Args:
            url: Base URL, e.g. "http://127.0.0.1:8080/". A trailing slash is added
                if missing.
        """
        if not url.endswith("/"):
            url = f"{url}/"
        return Client(
            self._session,
            self._hostname,
            self._token,
            api_url_override=url,
            timeout=self._timeout,
        )

    # Transport

    def _auth_headers(self, extra: dict[str, str] | None = None) -> dict[str, str]:
        headers = dict(extra or {})
        if self._token:
            headers["Authorization"] = auth_header_value(self._token.expose_secret())
        return headers

    def _resolve_rest_url(self, path: str) -> str:
        if path.startswith(("https://", "http://")):
            return path
        base = self._api_url_override or rest_url(self._hostname)
        return f"{base}{path.lstrip('/')}"

    def _graphql_url(self) -> str:
        if self._api_url_override:
            return f"{self._api_url_override}graphql"
        return graphql_url(self._hostname)

    def _send(
        self,
        method: str,
        url: str,
        headers: dict[str, str],
        body: Any = None,
        data: bytes | None = None,
    ) -> requests.Response:
        """Send one HTTP request. No retries happen at this level.

        Raises:
            RequestError: On any transport-level failure
        """
        method = method.upper()
        logger.debug(f"{method} {url}")
        try:
            return self._session.request(
                method,
                url,
                headers=headers,
                json=body,
                data=data,
                timeout=self._timeout,
            )
        except requests.RequestException as e:
            logger.debug(f"{method} {url} failed: {e}")
            raise RequestError(e) from e

    def _check_response(
        self, response: requests.Response, include_scopes: bool = True
    ) -> requests.Response:
        """Raise HttpError for a non-success response.

        Args:
            response: Response to inspect
            include_scopes: Whether to attach an OAuth scope suggestion for 4xx errors

        Raises:
            HttpError: If the status is not 2xx
        """
        if _is_success(response):
            return response

        headers = extract_header_map(response.headers)
        suggestion = None
        if include_scopes:
            suggestion = generate_scopes_suggestion(
                response.status_code,
                headers.get("x-accepted-oauth-scopes"),
                headers.get("x-oauth-scopes"),
                hostname=self._hostname,
            )
        logger.debug(f"HTTP {response.status_code} from {response.url}")
        raise HttpError(
            status=response.status_code,
            message=response.text or "",
            scopes_suggestion=suggestion,
            headers=headers,
        )

    def _rest_response(
        self,
        method: str,
        path: str,
        body: Any = None,
        extra_headers: dict[str, str] | None = None,
    ) -> requests.Response:
        url = self._resolve_rest_url(path)
        response = self._send(method, url, self._auth_headers(extra_headers), body=body)
        return self._check_response(response)

    def rest(self, method: str, path: str, body: Any = None, model: Any = None) -> Any:
        """Execute a REST API request and decode the JSON response.

        Args:
            method: HTTP method (e.g., "GET")
            path: Path relative to the REST base, or an absolute URL
            body: JSON-serializable request body, or None
            model: Type to validate the response into (e.g., a pydantic model or
                list[Model]); None returns the decoded JSON unchanged

        Raises:
            HttpError: Non-success status
            RequestError: Transport failure
            JsonParseError: Body is not JSON or does not match `model`
        """
        response = self._rest_response(method, path, body)
        return _decode(_json_body(response), model)

    def rest_text(self, method: str, path: str, body: Any = None) -> str:
        """Execute a REST API request and return the raw response body as text."""
        return self._rest_response(method, path, body).text

    def rest_bytes(self, method: str, path: str) -> bytes:
        """Execute a REST API request and return the raw response body as bytes.

        Use this for binary content such as release assets, where decoding to
        text would corrupt the payload.
        """
        return self._rest_response(method, path).content

    def rest_with_accept(
        self, method: str, path: str, body: Any, accept: str, model: Any = None
    ) -> Any:
        """Execute a REST API request with a custom Accept header.

        Some endpoints change their payload shape depending on the media
        type, e.g. text-match search results.
        """
        response = self._rest_response(method, path, body, extra_headers={"Accept": accept})
        return _decode(_json_body(response), model)

    def upload_asset(
        self, upload_url: str, data: bytes, content_type: str, model: Any = None
    ) -> Any:
        """Upload raw bytes (e.g., a release asset) with an explicit content type."""
        url = self._resolve_rest_url(upload_url)
        headers = self._auth_headers({"Content-Type": content_type})
        logger.debug(f"Uploading {len(data)} bytes ({content_type})")
        response = self._check_response(self._send("POST", url, headers, data=data))
        return _decode(_json_body(response), model)

    def graphql(
        self,
        query: str,
        variables: dict[str, Any] | None = None,
        model: Any = None,
    ) -> Any:
        """Execute a GraphQL query and return its "data" object.

        When the response carries errors alongside data, the data is still
        returned if it validates against `model`. Partially-shaped data that
        does not validate raises GraphQLError.

        Args:
            query: GraphQL query or mutation document
            variables: Query variables
            model: Type to validate "data" into; None returns the decoded JSON

        Raises:
            HttpError: Non-success status (no scope suggestion), or a response
                with neither "data" nor "errors"
            GraphQLError: The response carries errors and no usable data
            RequestError: Transport failure
            JsonParseError: Body is not JSON or "data" does not match `model`
        """
        log_message(logger, "GraphQL query", query)
        payload = {"query": query, "variables": variables or {}}
        headers = self._auth_headers({"GraphQL-Features": GRAPHQL_FEATURES})
        response = self._send("POST", self._graphql_url(), headers, body=payload)

        if not _is_success(response):
            raise HttpError(
                status=response.status_code,
                message=response.text or "",
                headers=extract_header_map(response.headers),
            )

        result = _json_body(response)
        if not isinstance(result, dict):
            result = {}

        errors = result.get("errors")
        if errors:
            try:
                entries = _LIST_OF_ERROR_ENTRIES.validate_python(errors)
            except ValidationError:
                entries = []
            if entries:
                data = result.get("data")
                if data is not None:
                    try:
                        return _decode(data, model)
                    except JsonParseError:
                        pass
                logger.debug(f"GraphQL errors: {[entry.message for entry in entries]}")
                raise GraphQLError(entries)

        if "data" not in result:
            raise HttpError(status=200, message="no data in GraphQL response")

        return _decode(result["data"], model)

    # Pagination

    def rest_with_next(
        self, method: str, path: str, body: Any = None, model: Any = None
    ) -> RestPage:
        """Execute a REST request and return the page along with the next page URL.

        A 204 No Content response is a valid final page; an empty body yields
        data None.
        """
        response = self._rest_response(method, path, body)

        if response.status_code == 204:
            if not (response.text or "").strip():
                return RestPage(data=None, next_url=None)
            return RestPage(data=_decode(_json_body(response), model), next_url=None)

        next_url = parse_link_next(extract_header_map(response.headers).get("link"))
        return RestPage(data=_decode(_json_body(response), model), next_url=next_url)

    def rest_paginate(self, method: str, path: str, model: Any = None) -> list[Any]:
        """Collect all items from a paginated REST endpoint.

        Pages are fetched one after another by following the Link header's
        "next" relation. Items keep server order; duplicates across pages are
        not removed.

        Args:
            method: HTTP method
            path: First page path or URL
            model: Type of a single item; None returns decoded JSON items

        Raises:
            JsonParseError: A page body is not a JSON array
        """
        items: list[Any] = []
        page_model = list[model] if model is not None else None
        url = self._resolve_rest_url(path)
        pages = 0

        while True:
            page = self.rest_with_next(method, url, model=page_model)
            pages += 1
            if page.data is not None:
                if not isinstance(page.data, list):
                    raise JsonParseError(
                        TypeError(f"expected a JSON array, got {type(page.data).__name__}")
                    )
                items.extend(page.data)
            if page.next_url is None:
                break
            url = page.next_url

        logger.debug(f"Fetched {len(items)} items over {pages} page(s) from {path}")
        return items

    # Retry

    def rest_with_retry(
        self, method: str, path: str, body: Any = None, model: Any = None
    ) -> Any:
        """Execute a REST request, retrying transient failures with backoff.

        Makes up to MAX_RETRIES attempts, sleeping 1s then 2s between them.
        Non-retryable errors are raised immediately; if every attempt fails the
        last error is raised unmodified.

        The backoff sequence continues 1s, 2s, 4s, but no sleep follows the
        final attempt since nothing would be retried after it. Three failures
        therefore sleep 3s in total, not 7s.
        """
        # multiplier * 2 ** (attempt - 1): 1s, 2s, 4s...
        backoff = wait_exponential(multiplier=RETRY_BASE_DELAY_SECONDS)
        attempt = 0
        while True:
            try:
                return self.rest(method, path, body, model=model)
            except ApiError as e:
                attempt += 1
                if not is_retryable(e) or attempt >= MAX_RETRIES:
                    raise
                delay = backoff(_BackoffState(attempt))  # type: ignore[arg-type]
                logger.warning(
                    f"Retrying request (attempt {attempt}/{MAX_RETRIES}) in {delay}s: {e}"
                )
                time.sleep(delay)

    # Scopes and identity

    def get_scopes(self, token: str) -> str:
        """Get the X-OAuth-Scopes header for a token via a lightweight request.

        Scope suggestions are disabled for this call.

        Returns:
            The comma-separated scopes header, or "" if the token reports none
        """
        url = self._resolve_rest_url("")
        response = self._send("GET", url, {"Authorization": auth_header_value(token)})
        response = self._check_response(response, include_scopes=False)
        return extract_header_map(response.headers).get("x-oauth-scopes", "")

    def has_minimum_scopes(self, token: str | None = None) -> None:
        """Validate that a token has the baseline scopes.

        Args:
            token: Token to check; defaults to this client's own token

        Raises:
            AuthRequiredError: No token given and none configured
            MissingScopesError: The token lacks required scopes
        """
        if token is None:
            token = self.require_token()
        check_minimum_scopes(self.get_scopes(token))

    def current_login(self) -> str:
        """Get the login of the authenticated user."""
        query = "query UserCurrent { viewer { login } }"
        response = self.graphql(query, {}, model=_ViewerResponse)
        return response.viewer.login

    def current_login_with_token(self, token: str) -> str:
        """Get the login of the user owning `token`, using a temporary client."""
        temp_client = Client(
            self._session,
            self._hostname,
            token,
            api_url_override=self._api_url_override,
            timeout=self._timeout,
        )
        return temp_client.current_login()
