"""Rich embed model and a fluent builder that enforces Discord's limits."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

MAX_TITLE_CHARS = 256
MAX_DESCRIPTION_CHARS = 4096
MAX_FIELD_NAME_CHARS = 256
MAX_FIELD_VALUE_CHARS = 1024
MAX_FIELDS = 25

SUCCESS_COLOR = 0x57F287
ERROR_COLOR = 0xED4245


class EmbedError(ValueError):
    """An embed would exceed one of Discord's limits."""


@dataclass
class EmbedField:
    name: str
    value: str
    inline: bool = False


@dataclass
class EmbedFooter:
    text: str
    icon_url: str = ""


@dataclass
class EmbedImage:
    url: str


@dataclass
class EmbedAuthor:
    name: str
    url: str = ""
    icon_url: str = ""


def _compact(pairs: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in pairs.items() if value}


@dataclass
class Embed:
    title: str = ""
    description: str = ""
    url: str = ""
    color: int = 0
    timestamp: datetime | None = None
    footer: EmbedFooter | None = None
    image: EmbedImage | None = None
    thumbnail: EmbedImage | None = None
    author: EmbedAuthor | None = None
    fields: list[EmbedField] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """The JSON shape of the embed, leaving out empty parts."""
        out = _compact(
            {
                "title": self.title,
                "description": self.description,
                "url": self.url,
                "color": self.color,
            }
        )
        if self.timestamp is not None:
            out["timestamp"] = self.timestamp.isoformat()
        if self.footer is not None:
            out["footer"] = _compact({"text": self.footer.text, "icon_url": self.footer.icon_url})
        if self.image is not None:
            out["image"] = _compact({"url": self.image.url})
        if self.thumbnail is not None:
            out["thumbnail"] = _compact({"url": self.thumbnail.url})
        if self.author is not None:
            out["author"] = _compact(
                {"name": self.author.name, "url": self.author.url, "icon_url": self.author.icon_url}
            )
        if self.fields:
            out["fields"] = [
                {"name": f.name, "value": f.value, "inline": f.inline} for f in self.fields
            ]
        return out


class EmbedBuilder:
    """Fluent construction of an Embed; every setter returns the builder."""

    def __init__(self, embed: Embed | None = None) -> None:
        self._embed = embed if embed is not None else Embed()

    def set_title(self, title: str) -> EmbedBuilder:
        if len(title) > MAX_TITLE_CHARS:
            raise EmbedError(f"title exceeds {MAX_TITLE_CHARS} characters")
        self._embed.title = title
        return self

    def set_description(self, description: str) -> EmbedBuilder:
        if len(description) > MAX_DESCRIPTION_CHARS:
            raise EmbedError(f"description exceeds {MAX_DESCRIPTION_CHARS} characters")
        self._embed.description = description
        return self

    def set_color(self, color: int) -> EmbedBuilder:
        self._embed.color = color
        return self

    def set_url(self, url: str) -> EmbedBuilder:
        self._embed.url = url
        return self

    def set_timestamp(self, timestamp: datetime) -> EmbedBuilder:
        self._embed.timestamp = timestamp
        return self

    def set_footer(self, text: str, icon_url: str = "") -> EmbedBuilder:
        self._embed.footer = EmbedFooter(text, icon_url)
        return self

    def set_image(self, url: str) -> EmbedBuilder:
        self._embed.image = EmbedImage(url)
        return self

    def set_thumbnail(self, url: str) -> EmbedBuilder:
        self._embed.thumbnail = EmbedImage(url)
        return self

    def set_author(self, name: str, url: str = "", icon_url: str = "") -> EmbedBuilder:
        self._embed.author = EmbedAuthor(name, url, icon_url)
        return self

    def add_field(self, name: str, value: str, inline: bool = False) -> EmbedBuilder:
        if len(self._embed.fields) >= MAX_FIELDS:
            raise EmbedError(f"maximum of {MAX_FIELDS} fields exceeded")
        if len(name) > MAX_FIELD_NAME_CHARS:
            raise EmbedError(f"field name exceeds {MAX_FIELD_NAME_CHARS} characters")
        if len(value) > MAX_FIELD_VALUE_CHARS:
            raise EmbedError(f"field value exceeds {MAX_FIELD_VALUE_CHARS} characters")
        self._embed.fields.append(EmbedField(name, value, inline))
        return self

    def build(self) -> Embed:
        return self._embed


def success(title: str, description: str) -> Embed:
    """A green embed for successful outcomes."""
    return EmbedBuilder().set_title(title).set_description(description).set_color(
        SUCCESS_COLOR
    ).build()


def error(title: str, description: str) -> Embed:
    """A red embed for failures."""
    return EmbedBuilder().set_title(title).set_description(description).set_color(
        ERROR_COLOR
    ).build()