from unittest.mock import MagicMock

import pytest
import requests

from api.api_client import ApiClient, _decode, error_for_status, record_id, unwrap
from utils.errors import ApiError, AuthError, ConflictError, NotFoundError, ValidationError


def _response(status=200, body=None):
    resp = MagicMock()
    resp.status_code = status
    resp.ok = 200 <= status < 300
    resp.content = b"{}" if body is not None else b""
    resp.json.return_value = body
    return resp


def _client(resp=None, token=None):
    session = MagicMock()
    session.request.return_value = resp or _response(200, {"status": "success", "data": {}})
    return ApiClient("http://api.test/", token=token, timeout=5, session=session), session


def test_request_sends_bearer_token_and_json():
    client, session = _client(token="abc")
    client.post("/api/expenses", {"amount": 5})

    args, kwargs = session.request.call_args
    assert args == ("POST", "http://api.test/api/expenses")
    assert kwargs["json"] == {"amount": 5}
    assert kwargs["headers"]["Authorization"] == "Bearer abc"
    assert kwargs["timeout"] == 5


def test_request_without_token_has_no_auth_header():
    client, session = _client()
    client.get("/api/categories")
    assert "Authorization" not in session.request.call_args.kwargs["headers"]
    assert not client.is_authenticated


def test_transport_failure_becomes_api_error():
    client, session = _client()
    session.request.side_effect = requests.ConnectionError("refused")
    with pytest.raises(ApiError, match="Could not reach the server"):
        client.get("/api/expenses")


def test_error_response_is_mapped():
    client, _ = _client(_response(401, {"status": "fail", "message": "Token expired"}))
    with pytest.raises(AuthError, match="Token expired") as err:
        client.get("/api/auth/me")
    assert err.value.status_code == 401


@pytest.mark.parametrize("status, message, expected", [
    (409, "Conflict", ConflictError),
    (400, "Category with this name already exists", ConflictError),
    (400, "Amount is required", ValidationError),
    (422, "Bad date", ValidationError),
    (403, "Forbidden", AuthError),
    (404, "Not found", NotFoundError),
    (500, "Server exploded", ApiError),
])
def test_error_for_status(status, message, expected):
    err = error_for_status(status, {"message": message}, "/api/x")
    assert type(err) is expected


def test_error_for_status_without_message():
    assert str(error_for_status(502, {})) == "Request failed (502)."


def test_decode_empty_and_no_content():
    assert _decode(_response(204, {"ignored": True})) == {}
    assert _decode(_response(200)) == {}


def test_decode_wraps_bare_list():
    assert _decode(_response(200, [1, 2])) == {"data": [1, 2]}


def test_unwrap_and_record_id():
    body = {"status": "success", "data": {"expense": {"_id": 42}}}
    assert unwrap(body, "expense") == {"_id": 42}
    assert unwrap(body, "missing") is None
    assert record_id({"_id": 42}) == "42"
    assert record_id({"id": "a", "_id": "b"}) == "a"
    assert record_id("c1") == "c1"
    assert record_id(None) is None
