"""Composable request middleware for the REST client.

A handler takes an ``httpx.Request`` and returns an ``httpx.Response``.
A middleware wraps one handler in another.
"""

from __future__ import annotations

import logging
import time
from typing import Callable, Optional

import httpx

Handler = Callable[[httpx.Request], httpx.Response]
Middleware = Callable[[Handler], Handler]
ShouldRetry = Callable[[Optional[httpx.Response], Optional[BaseException]], bool]
MetricsCollector = Callable[[str, str, int, float], None]

DEFAULT_LOGGER = logging.getLogger("discosdk.rest")


def status_code(response: httpx.Response | None) -> int:
    """The response status, or 0 when there is no response."""
    return 0 if response is None else response.status_code


def logging_middleware(log: logging.Logger | None = None) -> Middleware:
    """Log every request and its outcome at debug level."""
    log = log or DEFAULT_LOGGER

    def middleware(next_handler: Handler) -> Handler:
        def handler(request: httpx.Request) -> httpx.Response:
            start = time.monotonic()
            log.debug(
                "discord.client.middleware.request method=%s url=%s",
                request.method,
                request.url,
            )
            response: httpx.Response | None = None
            error: BaseException | None = None
            try:
                response = next_handler(request)
                return response
            except Exception as exc:
                error = exc
                raise
            finally:
                log.debug(
                    "discord.client.middleware.response method=%s url=%s status=%d "
                    "error=%s duration_ms=%d",
                    request.method,
                    request.url,
                    status_code(response),
                    error,
                    int((time.monotonic() - start) * 1000),
                )

        return handler

    return middleware


def _default_should_retry(
    response: httpx.Response | None, error: BaseException | None
) -> bool:
    if error is not None:
        return True
    if response is None:
        return False
    return response.status_code >= 500


def retry_middleware(
    max_retries: int = 3,
    should_retry: ShouldRetry | None = None,
    initial_backoff: float = 1.0,
) -> Middleware:
    """Retry a request while should_retry says so, doubling the pause each time.

    By default errors and 5xx responses are retried. The last outcome is
    returned, or its error raised, once the retries are used up.
    """
    max_retries = max(max_retries, 0)
    predicate = should_retry or _default_should_retry

    def middleware(next_handler: Handler) -> Handler:
        def handler(request: httpx.Request) -> httpx.Response:
            backoff = initial_backoff
            attempt = 0
            while True:
                response: httpx.Response | None = None
                error: Exception | None = None
                try:
                    response = next_handler(request)
                except Exception as exc:
                    error = exc
                if attempt == max_retries or not predicate(response, error):
                    if error is not None:
                        raise error
                    return response  # type: ignore[return-value]
                time.sleep(backoff)
                backoff *= 2
                attempt += 1

        return handler

    return middleware


def metrics_middleware(collect: MetricsCollector | None) -> Middleware:
    """Report method, path, status and duration in seconds of every request."""
    if collect is None:
        return lambda next_handler: next_handler

    def middleware(next_handler: Handler) -> Handler:
        def handler(request: httpx.Request) -> httpx.Response:
            start = time.monotonic()
            response: httpx.Response | None = None
            try:
                response = next_handler(request)
                return response
            finally:
                collect(
                    request.method,
                    request.url.path,
                    status_code(response),
                    time.monotonic() - start,
                )

        return handler

    return middleware


def dry_run_middleware(enabled: bool, log: logging.Logger | None = None) -> Middleware:
    """When enabled, answer every non-GET request with 202 without sending it."""

    def middleware(next_handler: Handler) -> Handler:
        def handler(request: httpx.Request) -> httpx.Response:
            if enabled and request.method != "GET":
                if log is not None:
                    log.info(
                        "discord.client.dry_run method=%s url=%s",
                        request.method,
                        request.url,
                    )
                return httpx.Response(202, request=request)
            return next_handler(request)

        return handler

    return middleware