"""Gateway opcodes and the JSON envelopes sent over the websocket."""

from __future__ import annotations

import enum
import json
from dataclasses import dataclass, field
from typing import Any


class OpCode(enum.IntEnum):
    DISPATCH = 0
    HEARTBEAT = 1
    IDENTIFY = 2
    PRESENCE_UPDATE = 3
    VOICE_STATE_UPDATE = 4
    RESUME = 6
    RECONNECT = 7
    REQUEST_GUILD_MEMBERS = 8
    INVALID_SESSION = 9
    HELLO = 10
    HEARTBEAT_ACK = 11


def _opcode(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"invalid opcode {value!r}")
    try:
        return OpCode(value)
    except ValueError:
        return value


@dataclass
class Payload:
    """The generic gateway envelope. ``d`` holds decoded JSON and is always sent."""

    op: int
    d: Any = None
    s: int = 0
    t: str = ""

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"op": int(self.op), "d": self.d}
        if self.s:
            out["s"] = self.s
        if self.t:
            out["t"] = self.t
        return out

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), separators=(",", ":"))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Payload:
        if not isinstance(data, dict):
            raise ValueError("payload must be a JSON object")
        return cls(
            op=_opcode(data.get("op", 0)),
            d=data.get("d"),
            s=data.get("s") or 0,
            t=data.get("t") or "",
        )

    @classmethod
    def from_json(cls, text: str | bytes) -> Payload:
        return cls.from_dict(json.loads(text))


@dataclass
class IdentifyProperties:
    os: str
    browser: str
    device: str

    def to_dict(self) -> dict[str, Any]:
        return {"os": self.os, "browser": self.browser, "device": self.device}


@dataclass
class IdentifyPayload:
    token: str
    properties: IdentifyProperties
    compress: bool = False
    intents: int = 0
    shard: list[int] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"token": self.token, "properties": self.properties.to_dict()}
        if self.compress:
            out["compress"] = True
        out["intents"] = int(self.intents)
        if self.shard:
            out["shard"] = list(self.shard)
        return out


@dataclass
class ResumePayload:
    token: str
    session_id: str
    seq: int

    def to_dict(self) -> dict[str, Any]:
        return {"token": self.token, "session_id": self.session_id, "seq": self.seq}