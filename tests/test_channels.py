import json

import httpx
import pytest

from discosdk.errors import ValidationError
from discosdk.rest.api import APIClient
from discosdk.rest.channels import Channels, GetChannelMessagesParams


def make_channels(handler):
    requests = []

    def recorder(request):
        requests.append(request)
        return handler(request)

    http = httpx.Client(transport=httpx.MockTransport(recorder))
    client = APIClient("token", base_url="http://discord.test", http_client=http, backoff=0)
    return Channels(client), requests


def test_get_channel():
    channels, requests = make_channels(
        lambda r: httpx.Response(200, json={"id": "123", "name": "general"})
    )
    channel = channels.get_channel("123")
    assert channel["id"] == "123"
    assert requests[0].method == "GET"
    assert requests[0].url.path == "/channels/123"


def test_modify_channel_sends_body_and_reason():
    def handler(request):
        payload = json.loads(request.content)
        return httpx.Response(200, json={"id": "123", "topic": payload["topic"]})

    channels, requests = make_channels(handler)
    channel = channels.modify_channel("123", {"topic": "Deployments"}, reason="Scheduled update")
    assert channel["topic"] == "Deployments"
    assert requests[0].method == "PATCH"
    assert requests[0].headers["X-Audit-Log-Reason"] == "Scheduled+update"


def test_modify_channel_without_reason_has_no_header():
    channels, requests = make_channels(lambda r: httpx.Response(200, json={"id": "1"}))
    channels.modify_channel("1", {"name": "x"})
    assert "X-Audit-Log-Reason" not in requests[0].headers


def test_modify_channel_requires_params():
    channels, requests = make_channels(lambda r: httpx.Response(200, json={}))
    with pytest.raises(ValidationError) as info:
        channels.modify_channel("123", None)
    assert info.value.field == "params"
    assert requests == []


def test_delete_channel():
    channels, requests = make_channels(lambda r: httpx.Response(204))
    assert channels.delete_channel("123") is None
    assert [r.method for r in requests] == ["DELETE"]


def test_get_channel_messages_query():
    channels, requests = make_channels(
        lambda r: httpx.Response(200, json=[{"id": "1", "content": "hello"}])
    )
    msgs = channels.get_channel_messages("123", GetChannelMessagesParams(limit=10, before="555"))
    assert [m["id"] for m in msgs] == ["1"]
    assert requests[0].url.params["limit"] == "10"
    assert requests[0].url.params["before"] == "555"
    assert requests[0].url.query == b"before=555&limit=10"


def test_get_channel_messages_without_params():
    channels, requests = make_channels(lambda r: httpx.Response(200, json=[]))
    assert channels.get_channel_messages("123") == []
    assert requests[0].url.query == b""


@pytest.mark.parametrize(
    "params, field",
    [
        (GetChannelMessagesParams(limit=500), "limit"),
        (GetChannelMessagesParams(limit=-1), "limit"),
        (GetChannelMessagesParams(around="1", before="2"), "around"),
        (GetChannelMessagesParams(around="1", after="2"), "around"),
    ],
)
def test_get_channel_messages_validation(params, field):
    channels, requests = make_channels(lambda r: httpx.Response(200, json=[]))
    with pytest.raises(ValidationError) as info:
        channels.get_channel_messages("123", params)
    assert info.value.field == field
    assert requests == []


def test_empty_channel_id_rejected():
    channels, _ = make_channels(lambda r: httpx.Response(200, json={}))
    with pytest.raises(ValidationError) as info:
        channels.get_channel("")
    assert info.value.field == "channelID"