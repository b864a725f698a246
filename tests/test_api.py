import json

import httpx
import pytest

from discosdk.errors import (
    APIError,
    NetworkError,
    RetriesExhaustedError,
    ValidationError,
)
from discosdk.rest.api import APIClient, audit_headers, validate_id

BASE = "http://api.test"


def make_client(handler, **kwargs):
    http = httpx.Client(transport=httpx.MockTransport(handler))
    kwargs.setdefault("backoff", 0)
    return APIClient("token", base_url=BASE, http_client=http, **kwargs)


class MockTracker:
    def __init__(self, buckets=None):
        self.buckets = buckets or {}
        self.waits = []
        self.updates = []

    def wait(self, route):
        self.waits.append(route)

    def update(self, route, headers):
        self.updates.append(route)

    def get_bucket(self, route):
        return self.buckets.get(route)

    def clear(self):
        self.buckets.clear()


class MockStrategy:
    def __init__(self):
        self.checked = []
        self.recorded = []

    def should_wait(self, bucket):
        self.checked.append(bucket)
        return True

    def calculate_wait(self, bucket):
        return 0.001

    def record_request(self, bucket, hit_limit):
        self.recorded.append(hit_limit)


def test_new_client_requires_token():
    with pytest.raises(ValidationError) as info:
        APIClient("")
    assert info.value.field == "token"


def test_get_success_sends_auth_header():
    received = {}

    def handler(request):
        received["auth"] = request.headers.get("Authorization")
        return httpx.Response(200, json={"id": "123", "name": "test"})

    client = make_client(handler)
    result = client.get("/channels/123")
    assert received["auth"] == "Bot token"
    assert result == {"id": "123", "name": "test"}


def test_retries_on_server_error():
    attempts = []

    def handler(request):
        attempts.append(request)
        if len(attempts) < 3:
            return httpx.Response(500)
        return httpx.Response(204)

    client = make_client(handler, max_retries=3)
    assert client.post("/test", {"foo": "bar"}) is None
    assert len(attempts) == 3
    assert json.loads(attempts[0].content) == {"foo": "bar"}
    assert attempts[0].headers["Content-Type"] == "application/json"


def test_returns_api_error_without_retry():
    attempts = []

    def handler(request):
        attempts.append(request)
        return httpx.Response(400, json={"message": "bad", "code": 100})

    client = make_client(handler)
    with pytest.raises(APIError) as info:
        client.post("/fail")
    assert info.value.status_code == 400
    assert info.value.code == 100
    assert info.value.message == "bad"
    assert len(attempts) == 1
    assert "Content-Type" not in attempts[0].headers


def test_retries_exhausted_chains_last_error():
    client = make_client(lambda request: httpx.Response(503, text="down"), max_retries=1)
    with pytest.raises(RetriesExhaustedError) as info:
        client.get("/x")
    assert info.value.attempts == 2
    assert isinstance(info.value.__cause__, APIError)
    assert info.value.__cause__.status_code == 503
    assert info.value.__cause__.message == "down"


def test_network_error_is_wrapped():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    client = make_client(handler, max_retries=0)
    with pytest.raises(RetriesExhaustedError) as info:
        client.get("/x")
    assert isinstance(info.value.__cause__, NetworkError)
    assert info.value.__cause__.op == "request"


def test_waits_on_rate_limiter():
    route = f"GET:{BASE}/test"
    bucket = {"limit": 5, "remaining": 0}
    tracker = MockTracker({route: bucket})
    strategy = MockStrategy()
    client = make_client(
        lambda request: httpx.Response(204), rate_limiter=tracker, strategy=strategy
    )
    client.get("/test")
    assert tracker.waits == [route]
    assert tracker.updates == [route]
    assert strategy.checked == [bucket]
    assert strategy.recorded == [False]


def test_rate_limited_response_is_retried():
    responses = iter(
        [httpx.Response(429, json={"message": "slow", "retry_after": 0}), httpx.Response(200, json=[1])]
    )
    strategy = MockStrategy()
    client = make_client(
        lambda request: next(responses), rate_limiter=MockTracker(), strategy=strategy
    )
    assert client.get("/r") == [1]
    assert strategy.recorded == [True, False]


def test_extra_headers_are_sent():
    seen = {}

    def handler(request):
        seen["reason"] = request.headers.get("X-Audit-Log-Reason")
        return httpx.Response(200, json={"patched": True})

    client = make_client(handler)
    result = client.request("PATCH", "/c", {"a": 1}, audit_headers("Scheduled update"))
    assert result == {"patched": True}
    assert seen["reason"] == "Scheduled+update"


def test_middleware_runs_in_registration_order():
    order = []

    def tag(name):
        def middleware(next_handler):
            def handler(request):
                order.append(name)
                return next_handler(request)

            return handler

        return middleware

    client = make_client(lambda request: httpx.Response(200, json={"ok": True}))
    client.use(tag("first"), tag("second"))
    assert client.get("/x") == {"ok": True}
    assert order == ["first", "second"]


def test_build_url_and_route():
    client = APIClient("token", base_url="http://api.test/")
    assert client.build_url("channels") == "http://api.test/channels"
    assert client.build_url("/channels") == "http://api.test/channels"
    assert client.build_url("https://other.test/x") == "https://other.test/x"
    assert client.route_for("GET", "/a") == "GET:http://api.test/a"
    client.close()


def test_audit_headers_blank_reason():
    assert audit_headers("   ") is None
    assert audit_headers("a/b") == {"X-Audit-Log-Reason": "a%2Fb"}


def test_validate_id():
    with pytest.raises(ValidationError) as info:
        validate_id("channelID", "")
    assert info.value.field == "channelID"
    assert validate_id("channelID", "1") is None