"""
GitHub REST API client for Pureview.

Searches open pull requests by author or assignee and checks credentials.
Credentials are read from the config store and attached to every request.

Failures are reported as:
- AuthenticationError: credential probe rejected
- SearchError: non-2xx response from the API
- ResponseFormatError: response body is not JSON
- TransportError: the request never completed
- InvalidUsernameError: the name would alter the request path or query
"""

from __future__ import annotations

import base64
import logging
import re
from typing import Any

import requests

from .config import AUTH_KEY, ConfigStore

logger = logging.getLogger(__name__)


GITHUB_API_BASE = "https://api.github.com"
ACCEPT = "application/vnd.github.v3+json"
USER_AGENT = "pure-viewer-cli"
AUTH_SCHEME = "BASIC"
SEARCH_PAGE_SIZE = 100

AUTHOR = "author"
ASSIGNEE = "assignee"


class GitHubAPIError(Exception):
    """Error from GitHub API."""
    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class AuthenticationError(GitHubAPIError):
    """Credentials were rejected."""


class SearchError(GitHubAPIError):
    """The API answered a request with an error status."""


class ResponseFormatError(GitHubAPIError):
    """The API answered with a body that is not valid JSON."""


class TransportError(GitHubAPIError):
    """The request failed before a response was received."""


class InvalidUsernameError(GitHubAPIError):
    """A username that would change the request path or search query."""
    def __init__(self, username: str):
        super().__init__(f"Invalid GitHub username: {username!r}")
        self.username = username


def encode_credential(username: str, secret: str) -> str:
    """Base64-encode ``username:secret`` for the Authorization header."""
    return base64.b64encode(f"{username}:{secret}".encode("utf-8")).decode("ascii")


def authorization_header(credential: str) -> str:
    return f"{AUTH_SCHEME} {credential}"


def check_username(username: str) -> str:
    """Reject names containing whitespace, slashes or colons."""
    if not username or re.search(r"[\s/:]", username):
        raise InvalidUsernameError(username)
    return username


def search_query(role: str, username: str) -> str:
    """Build the issue-search query for open PRs where username has the given role."""
    if role not in (AUTHOR, ASSIGNEE):
        raise ValueError(f"Unknown search role: {role}")
    check_username(username)
    return f"type:pr state:open {role}:{username}"


def _error_message(response: requests.Response) -> str | None:
    """Pull GitHub's ``message`` field out of an error body, if there is one."""
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return None


class GitHubClient:
    """GitHub REST API client sharing one session and credential."""

    def __init__(self, store: ConfigStore):
        self.store = store
        self.session = requests.Session()

        self.session.headers["Accept"] = ACCEPT
        self.session.headers["User-Agent"] = USER_AGENT

        credential = store.get(AUTH_KEY)
        if credential:
            self.session.headers["Authorization"] = authorization_header(credential)

    @property
    def is_authenticated(self) -> bool:
        return "Authorization" in self.session.headers

    def _request(
        self,
        method: str,
        endpoint: str,
        params: dict[str, Any] | None = None,
        **kwargs: Any,
    ) -> requests.Response:
        """Make an API request, turning connection failures into TransportError."""
        url = f"{GITHUB_API_BASE}{endpoint}"
        logger.debug("%s %s params=%s", method, url, params)
        try:
            response = self.session.request(method, url, params=params, **kwargs)
        except requests.RequestException as e:
            raise TransportError(f"Request failed: {e}") from e
        logger.debug("%s %s -> %s", method, url, response.status_code)
        return response

    def _get_json(self, endpoint: str, params: dict[str, Any] | None = None) -> Any:
        response = self._request("GET", endpoint, params=params)

        if not 200 <= response.status_code < 300:
            message = _error_message(response) or response.reason or "Unknown error"
            raise SearchError(
                f"GitHub API error: {response.status_code} - {message}",
                response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise ResponseFormatError(
                f"Could not parse GitHub response from {endpoint}: {e}",
                response.status_code,
            ) from e

    def authenticate(self, username: str, secret: str) -> str:
        """
        Verify a username and password/token against GitHub and save them.

        The candidate header is only used for the probe; the session and the
        stored credential change only after GitHub accepts it.

        Returns:
            The encoded credential that was persisted.
        """
        credential = encode_credential(username, secret)
        header = authorization_header(credential)

        try:
            response = self._request("GET", "/user", headers={"Authorization": header})
        except TransportError as e:
            raise AuthenticationError(str(e)) from e

        if response.status_code != 200:
            message = _error_message(response) or "Authentication failed"
            raise AuthenticationError(
                f"{message} (HTTP {response.status_code})",
                response.status_code,
            )

        self.session.headers["Authorization"] = header
        self.store.set(AUTH_KEY, credential)
        logger.info("Authenticated as %s", username)
        return credential

    def search_pull_requests(self, role: str, username: str) -> dict[str, Any]:
        """
        Search the most recently updated open PRs for a user.

        Args:
            role: "author" or "assignee"
            username: GitHub login to search for

        Returns:
            The raw search result, ``{"total_count": int, "items": [...]}``.
            At most SEARCH_PAGE_SIZE items are returned.
        """
        params = {
            "q": search_query(role, username),
            "sort": "updated",
            "order": "desc",
            "per_page": SEARCH_PAGE_SIZE,
        }
        result = self._get_json("/search/issues", params=params)
        if not isinstance(result, dict):
            raise ResponseFormatError("Unexpected search response shape")
        return result

    def search_by_author(self, username: str) -> dict[str, Any]:
        return self.search_pull_requests(AUTHOR, username)

    def search_by_assignee(self, username: str) -> dict[str, Any]:
        return self.search_pull_requests(ASSIGNEE, username)

    def get_user(self, username: str) -> dict[str, Any]:
        """Get the public profile of a GitHub user."""
        check_username(username)
        return self._get_json(f"/users/{username}")
