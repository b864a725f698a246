"""In-memory cache of guilds, channels and members seen on the gateway."""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Any, Mapping

from discosdk.errors import ValidationError


@dataclass(frozen=True)
class CacheStats:
    """Hit and miss counts per kind of object."""

    guild_hits: int = 0
    guild_misses: int = 0
    channel_hits: int = 0
    channel_misses: int = 0
    member_hits: int = 0
    member_misses: int = 0


@dataclass
class _Entry:
    value: Any
    created: float
    expires: float | None


def _field(obj: Any, name: str) -> Any:
    if isinstance(obj, Mapping):
        return obj.get(name)
    return getattr(obj, name, None)


class MemoryCache:
    """Thread-safe cache; entries expire after ttl seconds when ttl > 0."""

    def __init__(self, ttl: float = 0.0) -> None:
        self.ttl = ttl
        self._guilds: dict[str, _Entry] = {}
        self._channels: dict[str, _Entry] = {}
        self._members: dict[str, dict[str, _Entry]] = {}
        self._lock = threading.RLock()
        self._counts = {
            "guild_hits": 0,
            "guild_misses": 0,
            "channel_hits": 0,
            "channel_misses": 0,
            "member_hits": 0,
            "member_misses": 0,
        }

    def get_guild(self, guild_id: str) -> Any:
        """The cached guild, or None when absent or expired."""
        with self._lock:
            return self._lookup(self._guilds.get(guild_id), "guild")

    def set_guild(self, guild: Any) -> None:
        if guild is None:
            return
        with self._lock:
            self._guilds[_field(guild, "id")] = self._entry(guild)

    def remove_guild(self, guild_id: str) -> None:
        with self._lock:
            self._guilds.pop(guild_id, None)

    def get_channel(self, channel_id: str) -> Any:
        with self._lock:
            return self._lookup(self._channels.get(channel_id), "channel")

    def set_channel(self, channel: Any) -> None:
        if channel is None:
            return
        with self._lock:
            self._channels[_field(channel, "id")] = self._entry(channel)

    def remove_channel(self, channel_id: str) -> None:
        with self._lock:
            self._channels.pop(channel_id, None)

    def get_member(self, guild_id: str, user_id: str) -> Any:
        with self._lock:
            members = self._members.get(guild_id, {})
            return self._lookup(members.get(user_id), "member")

    def set_member(self, guild_id: str, member: Any) -> None:
        """Cache a member under its user's ID."""
        if member is None:
            return
        user = _field(member, "user")
        user_id = _field(user, "id") if user is not None else None
        if not user_id:
            raise ValidationError("member.user", "user ID is required")
        with self._lock:
            self._members.setdefault(guild_id, {})[user_id] = self._entry(member)

    def remove_member(self, guild_id: str, user_id: str) -> None:
        with self._lock:
            members = self._members.get(guild_id)
            if members is not None:
                members.pop(user_id, None)

    def stats(self) -> CacheStats:
        with self._lock:
            return CacheStats(**self._counts)

    def _entry(self, value: Any) -> _Entry:
        now = time.monotonic()
        return _Entry(value, now, now + self.ttl if self.ttl > 0 else None)

    def _lookup(self, entry: _Entry | None, kind: str) -> Any:
        if entry is None or self._expired(entry):
            self._counts[f"{kind}_misses"] += 1
            return None
        self._counts[f"{kind}_hits"] += 1
        return entry.value

    def _expired(self, entry: _Entry) -> bool:
        if self.ttl <= 0 or entry.expires is None:
            return False
        return time.monotonic() > entry.expires