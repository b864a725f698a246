import threading

import httpx
import pytest

from discosdk.errors import DiscordError
from discosdk.rest.api import APIClient
from discosdk.rest.batch import DEFAULT_BATCH_SIZE, DEFAULT_FLUSH_INTERVAL, Batcher


def make_client(calls, on_call=None):
    def handler(request):
        calls.append(f"{request.method} {request.url.path}")
        if on_call is not None:
            on_call()
        return httpx.Response(204)

    http = httpx.Client(transport=httpx.MockTransport(handler))
    return APIClient("token", base_url="http://discord.test", http_client=http, backoff=0)


def test_batcher_flushes_requests():
    calls = []
    with Batcher(make_client(calls), batch_size=2, flush_interval=0.05) as batcher:
        batcher.add_message("channel", "hi")
        batcher.add_reaction("channel", "msg", "emoji")
        batcher.flush(timeout=5)
        assert sorted(calls) == [
            "POST /channels/channel/messages",
            "PUT /channels/channel/messages/msg/reactions/emoji/@me",
        ]


def test_full_batch_is_sent_without_flush():
    calls = []
    reached = threading.Event()

    def on_call():
        if len(calls) >= 2:
            reached.set()

    with Batcher(make_client(calls, on_call), batch_size=2, flush_interval=60) as batcher:
        batcher.add_message("c", "one")
        batcher.add_message("c", "two")
        assert reached.wait(5)
    assert len(calls) == 2


def test_stop_sends_pending_requests():
    calls = []
    batcher = Batcher(make_client(calls), batch_size=10, flush_interval=60)
    batcher.add_message("c", "pending")
    batcher.stop()
    assert calls == ["POST /channels/c/messages"]


def test_use_after_stop_raises():
    calls = []
    batcher = Batcher(make_client(calls))
    batcher.stop()
    batcher.stop()
    with pytest.raises(DiscordError):
        batcher.add_message("c", "late")
    with pytest.raises(DiscordError):
        batcher.flush(timeout=1)
    assert calls == []


def test_invalid_options_fall_back_to_defaults():
    batcher = Batcher(make_client([]), batch_size=0, flush_interval=-1)
    try:
        assert batcher.batch_size == DEFAULT_BATCH_SIZE
        assert batcher.flush_interval == DEFAULT_FLUSH_INTERVAL
    finally:
        batcher.stop()