"""Authenticated REST client with retries, rate limiting and middleware."""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass
from typing import Any, Mapping, Protocol
from urllib.parse import quote_plus

import httpx

from discosdk.errors import (
    APIError,
    DiscordError,
    NetworkError,
    RetriesExhaustedError,
    ValidationError,
)
from discosdk.rest.middleware import DEFAULT_LOGGER, Handler, Middleware

DEFAULT_BASE_URL = "https://discord.com/api"
DEFAULT_USER_AGENT = "DiscordPythonSDK/0.1"
AUDIT_LOG_HEADER = "X-Audit-Log-Reason"


class RateLimitTracker(Protocol):
    """Tracks rate-limit buckets per route."""

    def wait(self, route: str) -> None: ...

    def update(self, route: str, headers: Mapping[str, str]) -> None: ...

    def get_bucket(self, route: str) -> Any: ...

    def clear(self) -> None: ...


class RateLimitStrategy(Protocol):
    """Decides whether to pause before a request and for how many seconds."""

    def should_wait(self, bucket: Any) -> bool: ...

    def calculate_wait(self, bucket: Any) -> float: ...


@dataclass
class PoolConfig:
    """Connection pooling settings; non-positive values fall back to defaults."""

    max_idle_conns: int = 100
    idle_conn_timeout: float = 90.0

    def limits(self) -> httpx.Limits:
        return httpx.Limits(
            max_keepalive_connections=self.max_idle_conns if self.max_idle_conns > 0 else 100,
            keepalive_expiry=self.idle_conn_timeout if self.idle_conn_timeout > 0 else 90.0,
        )


def validate_id(field: str, value: str) -> None:
    """Raise ValidationError when an identifier is empty."""
    if not value:
        raise ValidationError(field, "ID is required")


def audit_headers(reason: str) -> dict[str, str] | None:
    """Headers carrying an escaped audit-log reason, or None for a blank reason."""
    if not reason or not reason.strip():
        return None
    return {AUDIT_LOG_HEADER: quote_plus(reason, safe="")}


class APIClient:
    """A synchronous client for the REST API of a bot."""

    def __init__(
        self,
        token: str,
        *,
        base_url: str = DEFAULT_BASE_URL,
        http_client: httpx.Client | None = None,
        logger: logging.Logger | None = None,
        rate_limiter: RateLimitTracker | None = None,
        strategy: RateLimitStrategy | None = None,
        max_retries: int = 3,
        timeout: float = 30.0,
        backoff: float = 1.0,
        pool_config: PoolConfig | None = None,
    ) -> None:
        if not token or not token.strip():
            raise ValidationError("token", "bot token is required")
        self._token = token
        self.base_url = base_url.rstrip("/") if base_url else DEFAULT_BASE_URL
        self._log = logger or DEFAULT_LOGGER
        self._rate_limiter = rate_limiter
        self._strategy = strategy
        self.max_retries = max_retries if max_retries >= 0 else 3
        self.timeout = timeout if timeout > 0 else 30.0
        self.backoff = max(backoff, 0.0)
        self.pool_config = pool_config or PoolConfig()
        self._owns_http = http_client is None
        self._http = http_client or httpx.Client(
            timeout=self.timeout, limits=self.pool_config.limits()
        )
        self._middlewares: list[Middleware] = []

    def get(self, path: str) -> Any:
        return self.request("GET", path)

    def post(self, path: str, body: Any = None) -> Any:
        return self.request("POST", path, body)

    def put(self, path: str, body: Any = None) -> Any:
        return self.request("PUT", path, body)

    def patch(self, path: str, body: Any = None) -> Any:
        return self.request("PATCH", path, body)

    def delete(self, path: str) -> None:
        self._do("DELETE", path, None, None, decode=False)

    def request(
        self,
        method: str,
        path: str,
        body: Any = None,
        headers: Mapping[str, str] | None = None,
    ) -> Any:
        """Send a request and return the decoded JSON body (None when empty)."""
        return self._do(method, path, body, headers, decode=True)

    def use(self, *args: Middleware) -> None:
        """Register middleware; the first registered runs first."""
        self._middlewares.extend(args)

    def build_url(self, path: str) -> str:
        if path.startswith(("http://", "https://")):
            return path
        if not path.startswith("/"):
            path = "/" + path
        return self.base_url + path

    def route_for(self, method: str, path: str) -> str:
        return f"{method}:{self.build_url(path)}"

    def close(self) -> None:
        if self._owns_http:
            self._http.close()

    def __enter__(self) -> APIClient:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def _do(
        self,
        method: str,
        path: str,
        body: Any,
        headers: Mapping[str, str] | None,
        *,
        decode: bool,
    ) -> Any:
        route = self.route_for(method, path)
        url = self.build_url(path)
        payload = None if body is None else json.dumps(body).encode("utf-8")

        backoff = self.backoff
        last_error: Exception | None = None

        for attempt in range(self.max_retries + 1):
            if attempt > 0:
                time.sleep(backoff)
                backoff *= 2

            self._wait_for_rate_limit(route)

            request_headers = [
                ("Authorization", f"Bot {self._token}"),
                ("User-Agent", DEFAULT_USER_AGENT),
            ]
            if payload is not None:
                request_headers.append(("Content-Type", "application/json"))
            if headers:
                request_headers.extend(headers.items())
            request = httpx.Request(method, url, content=payload, headers=request_headers)

            start = time.monotonic()
            self._log.debug(
                "discord.client.request method=%s path=%s attempt=%d", method, path, attempt + 1
            )
            try:
                response = self._execute(request)
            except httpx.HTTPError as exc:
                last_error = NetworkError("request", exc)
                continue

            if self._rate_limiter is not None:
                self._rate_limiter.update(route, response.headers)

            if 200 <= response.status_code < 300:
                self._record_outcome(route, hit_limit=False)
                result = self._decode(response) if decode else None
                self._log.debug(
                    "discord.client.response method=%s path=%s status=%d duration_ms=%d",
                    method,
                    path,
                    response.status_code,
                    int((time.monotonic() - start) * 1000),
                )
                return result

            api_error = self._parse_error(response)
            if response.status_code == 429:
                self._log.warning(
                    "rate limit hit route=%s retry_after=%d attempt=%d",
                    route,
                    api_error.retry_after,
                    attempt + 1,
                )
                self._record_outcome(route, hit_limit=True)
                if api_error.retry_after > 0:
                    backoff = float(api_error.retry_after)
                last_error = api_error
                continue
            if 400 <= response.status_code < 500:
                raise api_error
            last_error = api_error

        raise RetriesExhaustedError(self.max_retries + 1) from last_error

    def _execute(self, request: httpx.Request) -> httpx.Response:
        handler: Handler = self._http.send
        for middleware in reversed(self._middlewares):
            handler = middleware(handler)
        return handler(request)

    def _wait_for_rate_limit(self, route: str) -> None:
        if self._rate_limiter is None:
            return
        strategy_name = "none"
        if self._strategy is not None:
            strategy_name = type(self._strategy).__name__
            bucket = self._rate_limiter.get_bucket(route)
            if bucket is not None and self._strategy.should_wait(bucket):
                pause = self._strategy.calculate_wait(bucket)
                if pause > 0:
                    self._log.debug(
                        "rate limit: proactive wait route=%s wait=%s strategy=%s",
                        route,
                        pause,
                        strategy_name,
                    )
                    time.sleep(pause)
        self._rate_limiter.wait(route)
        self._log.debug("rate limit: wait complete route=%s strategy=%s", route, strategy_name)

    def _record_outcome(self, route: str, *, hit_limit: bool) -> None:
        record = getattr(self._strategy, "record_request", None)
        if not callable(record):
            return
        bucket = self._rate_limiter.get_bucket(route) if self._rate_limiter else None
        record(bucket, hit_limit)

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise DiscordError(f"failed to decode response: {exc}") from exc

    @staticmethod
    def _parse_error(response: httpx.Response) -> APIError:
        text = response.text
        message, code, errors, retry_after = text, 0, None, 0
        try:
            data = json.loads(text)
        except ValueError:
            data = None
        if isinstance(data, dict):
            if isinstance(data.get("message"), str) and data["message"]:
                message = data["message"]
            if isinstance(data.get("code"), int):
                code = data["code"]
            if isinstance(data.get("errors"), dict):
                errors = data["errors"]
            value = data.get("retry_after")
            if isinstance(value, (int, float)) and value > 0:
                retry_after = int(value)
        return APIError(
            response.status_code,
            message=message,
            code=code,
            errors=errors,
            retry_after=retry_after,
        )