import json

import pytest
import requests

from core.errors import SESSION_EXPIRED_MESSAGE, ServerError, SessionExpired
from infrastructure.api_client import (
    DUPLICATE_EMAIL_MESSAGE,
    DUPLICATE_OTHER_MESSAGE,
    DUPLICATE_PHONE_MESSAGE,
    ApiClient,
    translate_server_message,
)


def _response(status, body=None, text=None, content_type="application/json"):
    response = requests.Response()
    response.status_code = status
    if body is not None:
        response._content = json.dumps(body).encode("utf-8")
    elif text is not None:
        response._content = text.encode("utf-8")
    else:
        response._content = b""
    response.headers["Content-Type"] = content_type
    response.encoding = "utf-8"
    return response


class _Session:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def request(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))
        if self.error is not None:
            raise self.error
        return self.response


def _client(**kwargs):
    session = _Session(**kwargs)
    return ApiClient("https://api.example.fr/api/", timeout=5, session=session), session


def test_sends_bearer_token_and_json_body():
    client, session = _client(response=_response(200, {"advices": []}))

    assert client.post("/admin/advices", "tok", json={"title": "A"}) == {"advices": []}

    method, url, kwargs = session.calls[0]
    assert (method, url) == ("POST", "https://api.example.fr/api/admin/advices")
    assert kwargs["headers"]["Authorization"] == "Bearer tok"
    assert kwargs["json"] == {"title": "A"}
    assert kwargs["timeout"] == 5


@pytest.mark.parametrize("status", [401, 403])
def test_auth_failures_expire_the_session(status):
    client, _ = _client(response=_response(status, {"message": "jwt expired"}))

    with pytest.raises(SessionExpired) as exc_info:
        client.get("/admin/users", "tok")

    assert exc_info.value.message == SESSION_EXPIRED_MESSAGE


def test_json_error_uses_server_message():
    client, _ = _client(response=_response(400, {"message": "Titre requis"}))

    with pytest.raises(ServerError) as exc_info:
        client.put("/admin/advices/1", "tok", json={})

    assert exc_info.value.status == 400
    assert exc_info.value.message == "Titre requis"


def test_json_error_without_message_uses_generic_text():
    client, _ = _client(response=_response(500, {}))

    with pytest.raises(ServerError, match="Une erreur est survenue."):
        client.get("/admin/advices", "tok")


def test_non_json_error_includes_status_and_text():
    client, _ = _client(response=_response(502, text="Bad Gateway", content_type="text/html"))

    with pytest.raises(ServerError) as exc_info:
        client.get("/admin/advices", "tok")

    assert exc_info.value.message == "Erreur du serveur : 502. Bad Gateway"


def test_empty_success_returns_none():
    client, _ = _client(response=_response(204))

    assert client.delete("/admin/advices/1", "tok") is None


def test_network_error_becomes_server_error():
    client, _ = _client(error=requests.ConnectionError("refused"))

    with pytest.raises(ServerError) as exc_info:
        client.get("/admin/advices", "tok")

    assert exc_info.value.status is None


def test_duplicate_key_messages_are_translated():
    assert translate_server_message("E11000 duplicate key error index: phone_1") == DUPLICATE_PHONE_MESSAGE
    assert translate_server_message("E11000 duplicate key error index: email_1") == DUPLICATE_EMAIL_MESSAGE
    assert translate_server_message("E11000 duplicate key error index: name_1") == DUPLICATE_OTHER_MESSAGE
    assert translate_server_message("Autre erreur") == "Autre erreur"
