"""Tests for Client.get_scopes() and Client.has_minimum_scopes()."""

import pytest

from ghc.api.client import Client
from ghc.api.errors import AuthRequiredError, HttpError, MissingScopesError


@pytest.mark.unit
class TestGetScopes:
    """Tests for Client.get_scopes()."""

    def test_returns_scopes_header(self, client, mock_session, make_response):
        """Test the X-OAuth-Scopes header value is returned."""
        mock_session.request.return_value = make_response(
            json_data={}, headers={"X-OAuth-Scopes": "repo, read:org"}
        )

        assert client.get_scopes("ghp_probe") == "repo, read:org"

    def test_missing_header_returns_empty(self, client, mock_session, make_response):
        """Test that tokens reporting no scopes yield an empty string."""
        mock_session.request.return_value = make_response(json_data={})

        assert client.get_scopes("github_pat_x") == ""

    def test_probes_rest_base_with_given_token(self, client, mock_session, make_response):
        """Test the request targets the REST base and uses the given token."""
        mock_session.request.return_value = make_response(json_data={})

        client.get_scopes("ghp_probe")

        args, kwargs = mock_session.request.call_args
        assert args == ("GET", "https://api.github.com/")
        assert kwargs["headers"]["Authorization"] == "token ghp_probe"

    def test_failure_has_no_scope_suggestion(self, client, mock_session, make_response):
        """Test that the probe never computes scope advice."""
        mock_session.request.return_value = make_response(
            status_code=401,
            text="Bad credentials",
            headers={"x-accepted-oauth-scopes": "repo", "x-oauth-scopes": "gist"},
        )

        with pytest.raises(HttpError) as exc_info:
            client.get_scopes("ghp_revoked")

        assert exc_info.value.is_unauthorized()
        assert exc_info.value.scopes_suggestion is None


@pytest.mark.unit
class TestHasMinimumScopes:
    """Tests for Client.has_minimum_scopes()."""

    def test_passes_with_required_scopes(self, client, mock_session, make_response):
        """Test that repo plus an org scope passes."""
        mock_session.request.return_value = make_response(
            json_data={}, headers={"x-oauth-scopes": "repo, admin:org"}
        )

        client.has_minimum_scopes()

    def test_raises_missing_scopes(self, client, mock_session, make_response):
        """Test that missing scopes raise MissingScopesError."""
        mock_session.request.return_value = make_response(
            json_data={}, headers={"x-oauth-scopes": "gist"}
        )

        with pytest.raises(MissingScopesError) as exc_info:
            client.has_minimum_scopes()

        assert exc_info.value.missing_scopes == ["repo", "read:org"]

    def test_uses_given_token(self, client, mock_session, make_response):
        """Test that an explicit token is probed instead of the client's own."""
        mock_session.request.return_value = make_response(
            json_data={}, headers={"x-oauth-scopes": "repo, read:org"}
        )

        client.has_minimum_scopes("gho_explicit")

        headers = mock_session.request.call_args[1]["headers"]
        assert headers["Authorization"] == "token gho_explicit"

    def test_requires_token(self, mock_session):
        """Test that a client with no token raises AuthRequiredError."""
        client = Client(mock_session, "github.com")

        with pytest.raises(AuthRequiredError):
            client.has_minimum_scopes()

        mock_session.request.assert_not_called()
