import json

import httpx
import pytest

from discosdk.errors import ValidationError
from discosdk.rest.api import APIClient
from discosdk.rest.messages import GetReactionsParams, Messages, encode_emoji


def make_messages(handler):
    requests = []

    def recorder(request):
        requests.append(request)
        return handler(request)

    http = httpx.Client(transport=httpx.MockTransport(recorder))
    client = APIClient("token", base_url="http://discord.test", http_client=http, backoff=0)
    return Messages(client), requests


def test_create_message():
    def handler(request):
        payload = json.loads(request.content)
        return httpx.Response(200, json={"id": "42", "content": payload["content"]})

    messages, requests = make_messages(handler)
    msg = messages.create_message("123", {"content": "hello"})
    assert msg == {"id": "42", "content": "hello"}
    assert requests[0].method == "POST"
    assert requests[0].url.path == "/channels/123/messages"


def test_edit_message():
    messages, requests = make_messages(
        lambda r: httpx.Response(200, json={"id": "55", "content": "updated"})
    )
    msg = messages.edit_message("123", "55", {"content": "updated"})
    assert msg["content"] == "updated"
    assert requests[0].method == "PATCH"


def test_delete_message():
    messages, requests = make_messages(lambda r: httpx.Response(204))
    messages.delete_message("123", "55")
    assert [(r.method, r.url.path) for r in requests] == [("DELETE", "/channels/123/messages/55")]


def test_bulk_delete_messages():
    messages, requests = make_messages(lambda r: httpx.Response(204))
    messages.bulk_delete_messages("123", ["1", "2"])
    assert requests[0].method == "POST"
    assert requests[0].url.path == "/channels/123/messages/bulk-delete"
    assert json.loads(requests[0].content) == {"messages": ["1", "2"]}


def test_get_message():
    messages, _ = make_messages(lambda r: httpx.Response(200, json={"id": "77", "content": "ping"}))
    assert messages.get_message("123", "77")["id"] == "77"


def test_validation():
    messages, requests = make_messages(lambda r: httpx.Response(204))
    with pytest.raises(ValidationError):
        messages.create_message("", {})
    with pytest.raises(ValidationError):
        messages.delete_message("123", "")
    with pytest.raises(ValidationError):
        messages.bulk_delete_messages("123", None)
    with pytest.raises(ValidationError):
        messages.bulk_delete_messages("123", [""] * 101)
    with pytest.raises(ValidationError):
        messages.create_reaction("", "1", ":smile:")
    with pytest.raises(ValidationError) as info:
        messages.create_message("123", None)
    assert info.value.field == "params"
    assert requests == []


def test_create_reaction_path():
    messages, requests = make_messages(lambda r: httpx.Response(204))
    messages.create_reaction("123", "456", ":smile:")
    assert requests[0].method == "PUT"
    assert requests[0].url.raw_path == b"/channels/123/messages/456/reactions/%3Asmile%3A/@me"


def test_delete_all_reactions_with_emoji():
    messages, requests = make_messages(lambda r: httpx.Response(204))
    messages.delete_all_reactions("123", "456", "\U0001F600")
    assert requests[0].method == "DELETE"
    assert requests[0].url.raw_path == b"/channels/123/messages/456/reactions/%F0%9F%98%80"


def test_delete_all_reactions_without_emoji():
    messages, requests = make_messages(lambda r: httpx.Response(204))
    messages.delete_all_reactions("123", "456")
    assert requests[0].url.raw_path == b"/channels/123/messages/456/reactions"


def test_delete_user_reaction_requires_user():
    messages, requests = make_messages(lambda r: httpx.Response(204))
    with pytest.raises(ValidationError) as info:
        messages.delete_user_reaction("123", "456", "x", "")
    assert info.value.field == "userID"
    messages.delete_user_reaction("123", "456", "x", "u9")
    assert requests[0].url.raw_path == b"/channels/123/messages/456/reactions/x/u9"


def test_get_reactions():
    messages, requests = make_messages(lambda r: httpx.Response(200, json=[{"id": "u1"}]))
    users = messages.get_reactions("123", "456", "\U0001F525", GetReactionsParams(limit=25))
    assert [u["id"] for u in users] == ["u1"]
    assert requests[0].url.params["limit"] == "25"


def test_get_reactions_limit_validation():
    messages, _ = make_messages(lambda r: httpx.Response(200, json=[]))
    with pytest.raises(ValidationError) as info:
        messages.get_reactions("123", "456", "x", GetReactionsParams(limit=101))
    assert info.value.field == "limit"


@pytest.mark.parametrize(
    "emoji, expected",
    [(":smile:", "%3Asmile%3A"), ("\U0001F600", "%F0%9F%98%80"), ("a b", "a+b")],
)
def test_encode_emoji(emoji, expected):
    assert encode_emoji(emoji) == expected


def test_encode_emoji_empty():
    with pytest.raises(ValidationError):
        encode_emoji("")