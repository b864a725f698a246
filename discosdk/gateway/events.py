"""Typed gateway dispatch events."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar

EVENT_READY = "READY"
EVENT_MESSAGE_CREATE = "MESSAGE_CREATE"
EVENT_MESSAGE_UPDATE = "MESSAGE_UPDATE"
EVENT_MESSAGE_DELETE = "MESSAGE_DELETE"
EVENT_GUILD_CREATE = "GUILD_CREATE"
EVENT_GUILD_UPDATE = "GUILD_UPDATE"
EVENT_GUILD_DELETE = "GUILD_DELETE"
EVENT_INTERACTION_CREATE = "INTERACTION_CREATE"


class Event:
    """Base class of gateway events; ``type`` names the dispatch event."""

    type: ClassVar[str] = ""


@dataclass
class ReadyEvent(Event):
    type: ClassVar[str] = EVENT_READY

    v: int = 0
    user: dict[str, Any] | None = None
    guilds: list[dict[str, Any]] = field(default_factory=list)
    session_id: str = ""
    resume_url: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ReadyEvent:
        return cls(
            v=data.get("v") or 0,
            user=data.get("user"),
            guilds=list(data.get("guilds") or []),
            session_id=data.get("session_id") or "",
            resume_url=data.get("resume_gateway_url") or "",
        )


@dataclass
class MessageCreateEvent(Event):
    type: ClassVar[str] = EVENT_MESSAGE_CREATE

    message: dict[str, Any] = field(default_factory=dict)


@dataclass
class MessageUpdateEvent(Event):
    type: ClassVar[str] = EVENT_MESSAGE_UPDATE

    message: dict[str, Any] = field(default_factory=dict)


@dataclass
class MessageDeleteEvent(Event):
    type: ClassVar[str] = EVENT_MESSAGE_DELETE

    id: str = ""
    channel_id: str = ""
    guild_id: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MessageDeleteEvent:
        return cls(
            id=data.get("id") or "",
            channel_id=data.get("channel_id") or "",
            guild_id=data.get("guild_id") or "",
        )


@dataclass
class InteractionCreateEvent(Event):
    type: ClassVar[str] = EVENT_INTERACTION_CREATE

    interaction: dict[str, Any] = field(default_factory=dict)


@dataclass
class GuildCreateEvent(Event):
    type: ClassVar[str] = EVENT_GUILD_CREATE

    guild: dict[str, Any] = field(default_factory=dict)


@dataclass
class GuildUpdateEvent(Event):
    type: ClassVar[str] = EVENT_GUILD_UPDATE

    guild: dict[str, Any] = field(default_factory=dict)


@dataclass
class GuildDeleteEvent(Event):
    type: ClassVar[str] = EVENT_GUILD_DELETE

    guild_id: str = ""
    unavailable: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> GuildDeleteEvent:
        return cls(guild_id=data.get("id") or "", unavailable=bool(data.get("unavailable")))

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"id": self.guild_id}
        if self.unavailable:
            out["unavailable"] = True
        return out