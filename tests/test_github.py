from __future__ import annotations

import base64
from unittest.mock import Mock, patch

import pytest
import requests

from pureview.github import (
    AuthenticationError,
    GitHubClient,
    InvalidUsernameError,
    ResponseFormatError,
    SearchError,
    TransportError,
    check_username,
    encode_credential,
    search_query,
)


def _response(status_code=200, json_data=None, json_error=False, reason="OK"):
    response = Mock()
    response.status_code = status_code
    response.reason = reason
    if json_error:
        response.json.side_effect = ValueError("Expecting value")
    else:
        response.json.return_value = json_data
    return response


def test_encode_credential():
    credential = encode_credential("user", "secret")
    assert base64.b64decode(credential).decode() == "user:secret"


def test_search_query_roles():
    assert search_query("author", "octo") == "type:pr state:open author:octo"
    assert search_query("assignee", "octo") == "type:pr state:open assignee:octo"
    with pytest.raises(ValueError):
        search_query("asignee", "octo")


def test_client_default_headers_without_credential(store):
    client = GitHubClient(store)

    assert client.session.headers["Accept"] == "application/vnd.github.v3+json"
    assert client.session.headers["User-Agent"] == "pure-viewer-cli"
    assert "Authorization" not in client.session.headers
    assert client.is_authenticated is False


def test_client_uses_stored_credential(store):
    store.set("auth", "Y3JlZA==")
    client = GitHubClient(store)

    assert client.session.headers["Authorization"] == "BASIC Y3JlZA=="
    assert client.is_authenticated is True


def test_search_by_author_sends_query(store, make_item, make_result):
    client = GitHubClient(store)
    payload = make_result([make_item()])

    with patch.object(client.session, "request", return_value=_response(json_data=payload)) as request:
        result = client.search_by_author("octo")

    assert result == payload
    method, url = request.call_args.args
    params = request.call_args.kwargs["params"]
    assert method == "GET"
    assert url == "https://api.github.com/search/issues"
    assert params["q"] == "type:pr state:open author:octo"
    assert params["sort"] == "updated"
    assert params["per_page"] == 100


def test_search_by_assignee_spells_filter_correctly(store, make_result):
    client = GitHubClient(store)

    with patch.object(client.session, "request", return_value=_response(json_data=make_result([]))) as request:
        client.search_by_assignee("octo")

    assert request.call_args.kwargs["params"]["q"] == "type:pr state:open assignee:octo"


def test_search_error_carries_platform_message(store):
    client = GitHubClient(store)
    response = _response(422, {"message": "Validation Failed"}, reason="Unprocessable Entity")

    with patch.object(client.session, "request", return_value=response):
        with pytest.raises(SearchError) as exc_info:
            client.search_by_author("ghost")

    assert exc_info.value.status_code == 422
    assert "Validation Failed" in str(exc_info.value)


def test_search_error_without_json_body_uses_reason(store):
    client = GitHubClient(store)
    response = _response(502, json_error=True, reason="Bad Gateway")

    with patch.object(client.session, "request", return_value=response):
        with pytest.raises(SearchError, match="Bad Gateway"):
            client.search_by_author("octo")


def test_unparseable_body_is_response_format_error(store):
    client = GitHubClient(store)

    with patch.object(client.session, "request", return_value=_response(200, json_error=True)):
        with pytest.raises(ResponseFormatError):
            client.search_by_author("octo")


def test_connection_failure_is_transport_error(store):
    client = GitHubClient(store)

    with patch.object(client.session, "request", side_effect=requests.ConnectionError("DNS failure")):
        with pytest.raises(TransportError, match="DNS failure"):
            client.search_by_author("octo")


def test_get_user(store):
    client = GitHubClient(store)
    profile = {"login": "octo", "public_repos": 8}

    with patch.object(client.session, "request", return_value=_response(json_data=profile)) as request:
        assert client.get_user("octo") == profile

    assert request.call_args.args[1] == "https://api.github.com/users/octo"


def test_authenticate_success_persists_credential(store):
    client = GitHubClient(store)

    with patch.object(client.session, "request", return_value=_response(json_data={"login": "user"})) as request:
        credential = client.authenticate("user", "secret")

    expected = encode_credential("user", "secret")
    assert credential == expected
    assert store.get("auth") == expected
    assert client.session.headers["Authorization"] == f"BASIC {expected}"

    # Probe hits /user with the candidate header
    assert request.call_args.args[1] == "https://api.github.com/user"
    assert request.call_args.kwargs["headers"]["Authorization"] == f"BASIC {expected}"


def test_authenticate_failure_leaves_state_untouched(store):
    store.set("auth", "b2xkOmNyZWQ=")
    client = GitHubClient(store)
    response = _response(401, {"message": "Bad credentials"}, reason="Unauthorized")

    with patch.object(client.session, "request", return_value=response):
        with pytest.raises(AuthenticationError) as exc_info:
            client.authenticate("user", "badsecret")

    assert exc_info.value.status_code == 401
    assert "Bad credentials" in str(exc_info.value)
    assert store.get("auth") == "b2xkOmNyZWQ="
    assert client.session.headers["Authorization"] == "BASIC b2xkOmNyZWQ="


def test_authenticate_failure_generic_message(store):
    client = GitHubClient(store)

    with patch.object(client.session, "request", return_value=_response(500, json_error=True)):
        with pytest.raises(AuthenticationError, match="Authentication failed"):
            client.authenticate("user", "secret")

    assert store.get("auth") is None


def test_authenticate_transport_failure(store):
    client = GitHubClient(store)

    with patch.object(client.session, "request", side_effect=requests.Timeout("timed out")):
        with pytest.raises(AuthenticationError, match="timed out"):
            client.authenticate("user", "secret")

    assert store.get("auth") is None


@pytest.mark.parametrize("name", ["a/b", "x author:y", "two words", "", "../admin"])
def test_check_username_rejects_path_and_query_characters(name):
    with pytest.raises(InvalidUsernameError):
        check_username(name)


def test_check_username_accepts_logins():
    assert check_username("octo-cat") == "octo-cat"
    assert check_username("dependabot[bot]") == "dependabot[bot]"


def test_get_user_rejects_path_injection(store):
    client = GitHubClient(store)

    with patch.object(client.session, "request") as request:
        with pytest.raises(InvalidUsernameError):
            client.get_user("octo/repos")

    request.assert_not_called()


def test_search_rejects_query_injection(store):
    client = GitHubClient(store)

    with patch.object(client.session, "request") as request:
        with pytest.raises(InvalidUsernameError):
            client.search_by_author("x author:y")

    request.assert_not_called()
