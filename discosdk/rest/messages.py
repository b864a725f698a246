"""Message and reaction endpoints of the REST API."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any
from urllib.parse import quote_plus, urlencode

from discosdk.errors import ValidationError
from discosdk.rest.api import APIClient, validate_id

MAX_BULK_DELETE = 100
MAX_REACTIONS_LIMIT = 100


@dataclass
class GetReactionsParams:
    """Pagination for the users who reacted with an emoji."""

    limit: int = 0
    after: str = ""

    def validate(self) -> None:
        if self.limit < 0 or self.limit > MAX_REACTIONS_LIMIT:
            raise ValidationError("limit", "limit must be between 0 and 100")


def encode_emoji(emoji: str) -> str:
    """Escape an emoji for use as a path segment."""
    if not emoji:
        raise ValidationError("emoji", "emoji is required")
    encoded = quote_plus(emoji, safe="")
    if not encoded:
        raise ValidationError("emoji", "invalid emoji")
    return encoded


class Messages:
    """Message and reaction helpers bound to an API client."""

    def __init__(self, client: APIClient) -> None:
        self._client = client

    def create_message(self, channel_id: str, params: dict[str, Any] | None) -> dict[str, Any]:
        """Send a message to a channel."""
        validate_id("channelID", channel_id)
        if params is None:
            raise ValidationError("params", "message create params required")
        return self._client.post(f"/channels/{channel_id}/messages", params) or {}

    def get_message(self, channel_id: str, message_id: str) -> dict[str, Any]:
        validate_id("channelID", channel_id)
        validate_id("messageID", message_id)
        return self._client.get(f"/channels/{channel_id}/messages/{message_id}") or {}

    def edit_message(
        self, channel_id: str, message_id: str, params: dict[str, Any] | None
    ) -> dict[str, Any]:
        """Update the content or embeds of a message."""
        validate_id("channelID", channel_id)
        validate_id("messageID", message_id)
        if params is None:
            raise ValidationError("params", "message edit params required")
        return self._client.patch(f"/channels/{channel_id}/messages/{message_id}", params) or {}

    def delete_message(self, channel_id: str, message_id: str) -> None:
        validate_id("channelID", channel_id)
        validate_id("messageID", message_id)
        self._client.delete(f"/channels/{channel_id}/messages/{message_id}")

    def bulk_delete_messages(self, channel_id: str, message_ids: list[str] | None) -> None:
        """Delete between 1 and 100 messages in one call."""
        validate_id("channelID", channel_id)
        if not message_ids:
            raise ValidationError("messages", "at least one message ID required")
        if len(message_ids) > MAX_BULK_DELETE:
            raise ValidationError("messages", "maximum 100 messages per bulk delete")
        self._client.post(
            f"/channels/{channel_id}/messages/bulk-delete", {"messages": list(message_ids)}
        )

    def create_reaction(self, channel_id: str, message_id: str, emoji: str) -> None:
        """React to a message as the bot."""
        path = self._reaction_path(channel_id, message_id, emoji, "@me")
        self._client.put(path)

    def delete_own_reaction(self, channel_id: str, message_id: str, emoji: str) -> None:
        path = self._reaction_path(channel_id, message_id, emoji, "@me")
        self._client.delete(path)

    def delete_user_reaction(
        self, channel_id: str, message_id: str, emoji: str, user_id: str
    ) -> None:
        validate_id("userID", user_id)
        path = self._reaction_path(channel_id, message_id, emoji, user_id)
        self._client.delete(path)

    def delete_all_reactions(self, channel_id: str, message_id: str, emoji: str = "") -> None:
        """Remove every reaction, or only those with emoji when one is given."""
        validate_id("channelID", channel_id)
        validate_id("messageID", message_id)
        path = f"/channels/{channel_id}/messages/{message_id}/reactions"
        if emoji:
            path += "/" + encode_emoji(emoji)
        self._client.delete(path)

    def get_reactions(
        self,
        channel_id: str,
        message_id: str,
        emoji: str,
        params: GetReactionsParams | None = None,
    ) -> list[dict[str, Any]]:
        """List the users who reacted with emoji."""
        validate_id("channelID", channel_id)
        validate_id("messageID", message_id)
        if not emoji:
            raise ValidationError("emoji", "emoji is required")
        values: dict[str, str] = {}
        if params is not None:
            params.validate()
            if params.limit > 0:
                values["limit"] = str(params.limit)
            if params.after:
                values["after"] = params.after
        path = f"/channels/{channel_id}/messages/{message_id}/reactions/{encode_emoji(emoji)}"
        if values:
            path += "?" + urlencode(sorted(values.items()))
        return self._client.get(path) or []

    @staticmethod
    def _reaction_path(channel_id: str, message_id: str, emoji: str, suffix: str) -> str:
        validate_id("channelID", channel_id)
        validate_id("messageID", message_id)
        if not emoji:
            raise ValidationError("emoji", "emoji is required")
        encoded = encode_emoji(emoji)
        return f"/channels/{channel_id}/messages/{message_id}/reactions/{encoded}/{suffix}"