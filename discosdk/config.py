"""SDK configuration: YAML loading with environment expansion and defaults."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from datetime import timedelta
from fractions import Fraction
from pathlib import Path
from typing import Any

import yaml

_UNIT_NANOS = {
    "ns": 1,
    "us": 1_000,
    "µs": 1_000,
    "μs": 1_000,
    "ms": 1_000_000,
    "s": 1_000_000_000,
    "m": 60 * 1_000_000_000,
    "h": 3600 * 1_000_000_000,
}
_DURATION_PART = re.compile(r"([0-9]*(?:\.[0-9]*)?)(ns|us|µs|μs|ms|s|m|h)")
_SHELL_SPECIAL = set("*#$@!?-0123456789")


@dataclass
class RateLimitConfig:
    strategy: str = ""
    backoff_base: timedelta = timedelta(0)
    backoff_max: timedelta = timedelta(0)


@dataclass
class ClientConfig:
    timeout: timedelta = timedelta(0)
    retries: int = 0
    rate_limit: RateLimitConfig = field(default_factory=RateLimitConfig)
    rate_limit_strategy: str = ""


@dataclass
class DiscordConfig:
    bot_token: str = ""
    application_id: str = ""
    webhooks: dict[str, str] = field(default_factory=dict)


@dataclass
class LoggingConfig:
    level: str = ""
    format: str = ""
    output: str = ""


@dataclass
class Config:
    discord: DiscordConfig = field(default_factory=DiscordConfig)
    client: ClientConfig = field(default_factory=ClientConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def parse_duration(text: str) -> timedelta:
    """Parse a duration such as "1h30m", "2s" or "250ms"."""
    original = text
    sign = 1
    if text[:1] in "+-" and text:
        if text[0] == "-":
            sign = -1
        text = text[1:]
    if text == "0":
        return timedelta(0)
    if not text:
        raise ValueError(f"invalid duration {original!r}")
    total = Fraction(0)
    pos = 0
    while pos < len(text):
        match = _DURATION_PART.match(text, pos)
        if match is None or match.group(1) in ("", "."):
            raise ValueError(f"invalid duration {original!r}")
        total += Fraction(match.group(1)) * _UNIT_NANOS[match.group(2)]
        pos = match.end()
    return timedelta(microseconds=sign * int(total / 1000))


def _shell_name(rest: str) -> tuple[str, int]:
    if rest[0] == "{":
        if len(rest) > 2 and rest[1] in _SHELL_SPECIAL and rest[2] == "}":
            return rest[1], 3
        end = rest.find("}", 1)
        if end == -1:
            return "", 1
        if end == 1:
            return "", 2
        return rest[1:end], end + 1
    if rest[0] in _SHELL_SPECIAL:
        return rest[0], 1
    width = 0
    while width < len(rest) and rest[width].isascii() and (
        rest[width].isalnum() or rest[width] == "_"
    ):
        width += 1
    return rest[:width], width


def expand_env(text: str) -> str:
    """Replace $VAR and ${VAR} with environment values (empty when unset)."""
    out: list[str] = []
    i = 0
    while i < len(text):
        ch = text[i]
        if ch != "$" or i + 1 >= len(text):
            out.append(ch)
            i += 1
            continue
        name, width = _shell_name(text[i + 1:])
        if name:
            out.append(os.environ.get(name, ""))
        elif width == 0:
            out.append("$")
        i += 1 + width
    return "".join(out)


def _parse_error(detail: str) -> ValueError:
    return ValueError(f"failed to parse config file: {detail}")


def _mapping(value: Any, where: str) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise _parse_error(f"{where} must be a mapping")
    return value


def _text(value: Any, where: str) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (str, int, float)):
        return str(value)
    raise _parse_error(f"{where} must be a string")


def _integer(value: Any, where: str) -> int:
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int):
        raise _parse_error(f"{where} must be an integer")
    return value


def _duration(value: Any, where: str) -> timedelta:
    if value is None:
        return timedelta(0)
    if not isinstance(value, str):
        raise _parse_error(f"{where} must be a duration string")
    try:
        return parse_duration(value)
    except ValueError as exc:
        raise _parse_error(f"{where}: {exc}") from exc


def _env_or_default(key: str, fallback: str) -> str:
    return os.environ.get(key) or fallback


def _apply_rate_limit_defaults(client: ClientConfig) -> None:
    rate = client.rate_limit
    if not rate.strategy:
        rate.strategy = client.rate_limit_strategy or _env_or_default(
            "DISCORD_RATE_LIMIT_STRATEGY", "adaptive"
        )
    if not rate.backoff_base:
        rate.backoff_base = timedelta(seconds=1)
    if not rate.backoff_max:
        rate.backoff_max = timedelta(seconds=60)


def load(path: str | os.PathLike[str]) -> Config:
    """Read a YAML configuration file, expand ${VARS} and apply defaults."""
    raw = Path(path).read_text(encoding="utf-8")
    try:
        document = yaml.safe_load(expand_env(raw))
    except yaml.YAMLError as exc:
        raise _parse_error(str(exc)) from exc
    root = _mapping(document, "document")

    discord = _mapping(root.get("discord"), "discord")
    client = _mapping(root.get("client"), "client")
    rate = _mapping(client.get("rate_limit"), "client.rate_limit")
    logging = _mapping(root.get("logging"), "logging")
    webhooks = _mapping(discord.get("webhooks"), "discord.webhooks")

    cfg = Config(
        discord=DiscordConfig(
            bot_token=_text(discord.get("bot_token"), "discord.bot_token"),
            application_id=_text(discord.get("application_id"), "discord.application_id"),
            webhooks={
                str(name): _text(url, f"discord.webhooks.{name}")
                for name, url in webhooks.items()
            },
        ),
        client=ClientConfig(
            timeout=_duration(client.get("timeout"), "client.timeout"),
            retries=_integer(client.get("retries"), "client.retries"),
            rate_limit=RateLimitConfig(
                strategy=_text(rate.get("strategy"), "client.rate_limit.strategy"),
                backoff_base=_duration(rate.get("backoff_base"), "client.rate_limit.backoff_base"),
                backoff_max=_duration(rate.get("backoff_max"), "client.rate_limit.backoff_max"),
            ),
            rate_limit_strategy=_text(
                client.get("rate_limit_strategy"), "client.rate_limit_strategy"
            ),
        ),
        logging=LoggingConfig(
            level=_text(logging.get("level"), "logging.level"),
            format=_text(logging.get("format"), "logging.format"),
            output=_text(logging.get("output"), "logging.output"),
        ),
    )

    if not cfg.client.timeout:
        cfg.client.timeout = timedelta(seconds=30)
    if cfg.client.retries == 0:
        cfg.client.retries = 3
    _apply_rate_limit_defaults(cfg.client)
    if not cfg.logging.level:
        cfg.logging.level = "info"
    if not cfg.logging.format:
        cfg.logging.format = "json"
    return cfg


def default() -> Config:
    """Build a configuration from environment variables and built-in defaults."""
    return Config(
        discord=DiscordConfig(
            bot_token=os.environ.get("DISCORD_BOT_TOKEN", ""),
            application_id=os.environ.get("DISCORD_APPLICATION_ID", ""),
            webhooks={"default": os.environ.get("DISCORD_WEBHOOK", "")},
        ),
        client=ClientConfig(
            timeout=timedelta(seconds=30),
            retries=3,
            rate_limit=RateLimitConfig(
                strategy=_env_or_default("DISCORD_RATE_LIMIT_STRATEGY", "adaptive"),
                backoff_base=timedelta(seconds=1),
                backoff_max=timedelta(seconds=60),
            ),
        ),
        logging=LoggingConfig(
            level=_env_or_default("DISCORD_LOG_LEVEL", "info"),
            format="json",
            output="stderr",
        ),
    )