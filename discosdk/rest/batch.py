"""Background batching of outgoing requests."""

from __future__ import annotations

import logging
import queue
import threading
import time
from typing import Any, Callable

from discosdk.errors import DiscordError
from discosdk.rest.api import APIClient

DEFAULT_BATCH_SIZE = 10
DEFAULT_FLUSH_INTERVAL = 0.25
QUEUE_SIZE = 100

_log = logging.getLogger("discosdk.rest.batch")
_STOP = object()


class Batcher:
    """Collects requests and dispatches them in batches from a worker thread.

    A batch is sent when it reaches ``batch_size``, every ``flush_interval``
    seconds, on ``flush()`` and on ``stop()``.
    """

    def __init__(
        self,
        client: APIClient,
        batch_size: int = DEFAULT_BATCH_SIZE,
        flush_interval: float = DEFAULT_FLUSH_INTERVAL,
    ) -> None:
        self._client = client
        self.batch_size = batch_size if batch_size > 0 else DEFAULT_BATCH_SIZE
        self.flush_interval = flush_interval if flush_interval > 0 else DEFAULT_FLUSH_INTERVAL
        self._queue: queue.Queue[Any] = queue.Queue(maxsize=QUEUE_SIZE)
        self._lock = threading.Lock()
        self._stopped = False
        self._thread = threading.Thread(target=self._run, name="discosdk-batcher", daemon=True)
        self._thread.start()

    def add_message(self, channel_id: str, content: str) -> None:
        """Queue a message for the channel."""
        self._enqueue("POST", f"channels/{channel_id}/messages", {"content": content})

    def add_reaction(self, channel_id: str, message_id: str, emoji: str) -> None:
        """Queue a reaction by the bot."""
        path = f"channels/{channel_id}/messages/{message_id}/reactions/{emoji}/@me"
        self._enqueue("PUT", path, None)

    def flush(self, timeout: float | None = None) -> None:
        """Dispatch everything queued so far and wait until it has been sent."""
        done = threading.Event()
        self._put(done)
        if not done.wait(timeout):
            raise TimeoutError("batch flush timed out")

    def stop(self) -> None:
        """Send what is pending and end the worker; later calls do nothing."""
        with self._lock:
            if self._stopped:
                return
            self._stopped = True
            self._queue.put(_STOP)
        self._thread.join()

    def __enter__(self) -> Batcher:
        return self

    def __exit__(self, *args: Any) -> None:
        self.stop()

    def _enqueue(self, method: str, path: str, body: Any) -> None:
        def send() -> None:
            self._client.request(method, path, body)

        self._put(send)

    def _put(self, item: Any) -> None:
        with self._lock:
            if self._stopped:
                raise DiscordError("batcher is stopped")
            self._queue.put(item)

    def _run(self) -> None:
        batch: list[Callable[[], None]] = []
        deadline = time.monotonic() + self.flush_interval
        while True:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                self._dispatch(batch)
                deadline = time.monotonic() + self.flush_interval
                continue
            try:
                item = self._queue.get(timeout=remaining)
            except queue.Empty:
                continue
            if item is _STOP:
                self._dispatch(batch)
                return
            if isinstance(item, threading.Event):
                self._dispatch(batch)
                item.set()
                continue
            batch.append(item)
            if len(batch) >= self.batch_size:
                self._dispatch(batch)

    @staticmethod
    def _dispatch(batch: list[Callable[[], None]]) -> None:
        for send in batch:
            try:
                send()
            except Exception as exc:
                _log.debug("batched request failed: %s", exc)
        batch.clear()