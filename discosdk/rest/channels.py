"""Channel endpoints of the REST API."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any
from urllib.parse import urlencode

from discosdk.errors import ValidationError
from discosdk.rest.api import APIClient, audit_headers, validate_id

MAX_MESSAGES_LIMIT = 100


@dataclass
class GetChannelMessagesParams:
    """Pagination for channel history; zero or empty values are left out."""

    limit: int = 0
    before: str = ""
    after: str = ""
    around: str = ""

    def validate(self) -> None:
        if self.limit < 0:
            raise ValidationError("limit", "limit must be positive")
        if self.limit > MAX_MESSAGES_LIMIT:
            raise ValidationError("limit", "limit must be between 1 and 100")
        if self.around and (self.before or self.after):
            raise ValidationError("around", "cannot use around with before/after")

    def query(self) -> dict[str, str]:
        values: dict[str, str] = {}
        if self.limit > 0:
            values["limit"] = str(self.limit)
        if self.before:
            values["before"] = self.before
        if self.after:
            values["after"] = self.after
        if self.around:
            values["around"] = self.around
        return values


def _with_query(path: str, values: dict[str, str]) -> str:
    if not values:
        return path
    return path + "?" + urlencode(sorted(values.items()))


class Channels:
    """Channel-related helpers bound to an API client."""

    def __init__(self, client: APIClient) -> None:
        self._client = client

    def get_channel(self, channel_id: str) -> dict[str, Any]:
        """Fetch a channel by ID."""
        validate_id("channelID", channel_id)
        return self._client.get(f"/channels/{channel_id}") or {}

    def modify_channel(
        self, channel_id: str, params: dict[str, Any] | None, reason: str = ""
    ) -> dict[str, Any]:
        """Update channel settings such as topic or position."""
        validate_id("channelID", channel_id)
        if params is None:
            raise ValidationError("params", "modify params required")
        result = self._client.request(
            "PATCH", f"/channels/{channel_id}", params, audit_headers(reason)
        )
        return result or {}

    def delete_channel(self, channel_id: str) -> None:
        """Delete a channel."""
        validate_id("channelID", channel_id)
        self._client.delete(f"/channels/{channel_id}")

    def get_channel_messages(
        self, channel_id: str, params: GetChannelMessagesParams | None = None
    ) -> list[dict[str, Any]]:
        """Fetch a page of channel messages."""
        validate_id("channelID", channel_id)
        values: dict[str, str] = {}
        if params is not None:
            params.validate()
            values = params.query()
        path = _with_query(f"/channels/{channel_id}/messages", values)
        return self._client.get(path) or []