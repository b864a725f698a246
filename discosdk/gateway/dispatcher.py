"""Routing of gateway events to registered handlers."""

from __future__ import annotations

import inspect
import logging
import threading
from typing import Any, Awaitable, Callable, Union

from discosdk.errors import DiscordError
from discosdk.gateway.events import (
    GuildCreateEvent,
    GuildDeleteEvent,
    GuildUpdateEvent,
    InteractionCreateEvent,
    MessageCreateEvent,
    MessageDeleteEvent,
    MessageUpdateEvent,
    ReadyEvent,
)

Handler = Callable[[Any], Union[None, Awaitable[None]]]

READY = "READY"
MESSAGE_CREATE = "MESSAGE_CREATE"
MESSAGE_UPDATE = "MESSAGE_UPDATE"
MESSAGE_DELETE = "MESSAGE_DELETE"
GUILD_CREATE = "GUILD_CREATE"
GUILD_UPDATE = "GUILD_UPDATE"
GUILD_DELETE = "GUILD_DELETE"
INTERACTION_CREATE = "INTERACTION_CREATE"

_CLASS_NAMES: tuple[tuple[type, str], ...] = (
    (ReadyEvent, READY),
    (MessageCreateEvent, MESSAGE_CREATE),
    (MessageUpdateEvent, MESSAGE_UPDATE),
    (MessageDeleteEvent, MESSAGE_DELETE),
    (GuildCreateEvent, GUILD_CREATE),
    (GuildUpdateEvent, GUILD_UPDATE),
    (GuildDeleteEvent, GUILD_DELETE),
    (InteractionCreateEvent, INTERACTION_CREATE),
)

_DEFAULT_LOGGER = logging.getLogger("discosdk.gateway.dispatcher")


def _event_type(event: Any) -> str:
    for attribute in ("type", "TYPE"):
        value = getattr(event, attribute, None)
        if callable(value):
            value = value()
        if isinstance(value, str) and value:
            return str(value)
    for cls, name in _CLASS_NAMES:
        if isinstance(event, cls):
            return name
    return ""


class DispatchError(DiscordError):
    """One or more handlers failed for an event."""

    def __init__(self, event_type: str, errors: list[BaseException]) -> None:
        self.event_type = event_type
        self.errors = list(errors)
        detail = "; ".join(str(error) for error in self.errors)
        super().__init__(f"{len(self.errors)} handler(s) failed for {event_type}: {detail}")


class Dispatcher:
    """Calls every handler registered for an event's type, in registration order.

    Handlers take the event and may be plain functions or coroutines.
    """

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._handlers: dict[str, list[Handler]] = {}
        self._lock = threading.Lock()
        self._log = logger or _DEFAULT_LOGGER

    def on(self, event_type: str, handler: Handler | None) -> None:
        """Register handler for event_type; empty types and None are ignored."""
        if not event_type or handler is None:
            return
        with self._lock:
            self._handlers.setdefault(event_type, []).append(handler)

    def on_message_create(self, handler: Handler) -> None:
        self._on_typed(MESSAGE_CREATE, MessageCreateEvent, handler)

    def on_message_update(self, handler: Handler) -> None:
        self._on_typed(MESSAGE_UPDATE, MessageUpdateEvent, handler)

    def on_interaction(self, handler: Handler) -> None:
        self._on_typed(INTERACTION_CREATE, InteractionCreateEvent, handler)

    async def dispatch(self, event: Any) -> None:
        """Run the handlers for event; raise DispatchError if any of them failed."""
        if event is None:
            return
        name = _event_type(event)
        with self._lock:
            handlers = list(self._handlers.get(name, ()))
        errors: list[BaseException] = []
        for handler in handlers:
            try:
                result = handler(event)
                if inspect.isawaitable(result):
                    await result
            except Exception as exc:
                self._log.error("event handler error event=%s error=%s", name, exc)
                errors.append(exc)
        if errors:
            raise DispatchError(name, errors)

    def _on_typed(self, event_type: str, cls: type, handler: Handler | None) -> None:
        if handler is None:
            return

        def checked(event: Any) -> Any:
            if not isinstance(event, cls):
                raise TypeError(f"unexpected event type {type(event).__name__}")
            return handler(event)

        self.on(event_type, checked)