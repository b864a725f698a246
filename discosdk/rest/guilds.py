"""Guild, role and member endpoints of the REST API."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping
from urllib.parse import urlencode

from discosdk.errors import ValidationError
from discosdk.rest.api import APIClient, audit_headers, validate_id

MAX_MEMBERS_LIMIT = 1000


@dataclass
class ListMembersParams:
    """Pagination for guild members; zero or empty values are left out."""

    limit: int = 0
    after: str = ""

    def validate(self) -> None:
        if self.limit < 0 or self.limit > MAX_MEMBERS_LIMIT:
            raise ValidationError("limit", "limit must be between 1 and 1000")

    def query(self) -> dict[str, str]:
        values: dict[str, str] = {}
        if self.limit > 0:
            values["limit"] = str(self.limit)
        if self.after:
            values["after"] = self.after
        return values


class Guilds:
    """Guild-related helpers bound to an API client."""

    def __init__(self, client: APIClient) -> None:
        self._client = client

    def get_guild(self, guild_id: str, with_counts: bool = False) -> dict[str, Any]:
        """Fetch a guild, optionally with approximate member counts."""
        validate_id("guildID", guild_id)
        path = f"/guilds/{guild_id}"
        if with_counts:
            path += "?with_counts=true"
        return self._client.get(path) or {}

    def get_guild_preview(self, guild_id: str) -> dict[str, Any]:
        validate_id("guildID", guild_id)
        return self._client.get(f"/guilds/{guild_id}/preview") or {}

    def modify_guild(
        self, guild_id: str, params: Mapping[str, Any] | None, reason: str = ""
    ) -> dict[str, Any]:
        """Update mutable guild settings."""
        validate_id("guildID", guild_id)
        if params is None:
            raise ValidationError("params", "guild modify params required")
        result = self._client.request(
            "PATCH", f"/guilds/{guild_id}", dict(params), audit_headers(reason)
        )
        return result or {}

    def get_guild_channels(self, guild_id: str) -> list[dict[str, Any]]:
        validate_id("guildID", guild_id)
        return self._client.get(f"/guilds/{guild_id}/channels") or []

    def create_guild_channel(
        self, guild_id: str, params: Mapping[str, Any] | None, reason: str = ""
    ) -> dict[str, Any]:
        """Create a channel in the guild."""
        validate_id("guildID", guild_id)
        if params is None:
            raise ValidationError("params", "channel params required")
        if not params.get("name"):
            raise ValidationError("name", "channel name is required")
        result = self._client.request(
            "POST", f"/guilds/{guild_id}/channels", dict(params), audit_headers(reason)
        )
        return result or {}

    def get_guild_roles(self, guild_id: str) -> list[dict[str, Any]]:
        validate_id("guildID", guild_id)
        return self._client.get(f"/guilds/{guild_id}/roles") or []

    def create_guild_role(
        self, guild_id: str, params: Mapping[str, Any] | None = None, reason: str = ""
    ) -> dict[str, Any]:
        """Create a role; missing settings take the API's defaults."""
        validate_id("guildID", guild_id)
        result = self._client.request(
            "POST", f"/guilds/{guild_id}/roles", dict(params or {}), audit_headers(reason)
        )
        return result or {}

    def modify_guild_role(
        self,
        guild_id: str,
        role_id: str,
        params: Mapping[str, Any] | None = None,
        reason: str = "",
    ) -> dict[str, Any]:
        validate_id("guildID", guild_id)
        validate_id("roleID", role_id)
        result = self._client.request(
            "PATCH",
            f"/guilds/{guild_id}/roles/{role_id}",
            dict(params or {}),
            audit_headers(reason),
        )
        return result or {}

    def delete_guild_role(self, guild_id: str, role_id: str) -> None:
        validate_id("guildID", guild_id)
        validate_id("roleID", role_id)
        self._client.delete(f"/guilds/{guild_id}/roles/{role_id}")

    def get_guild_member(self, guild_id: str, user_id: str) -> dict[str, Any]:
        validate_id("guildID", guild_id)
        validate_id("userID", user_id)
        return self._client.get(f"/guilds/{guild_id}/members/{user_id}") or {}

    def list_guild_members(
        self, guild_id: str, params: ListMembersParams | None = None
    ) -> list[dict[str, Any]]:
        """Fetch a page of guild members."""
        validate_id("guildID", guild_id)
        path = f"/guilds/{guild_id}/members"
        if params is not None:
            params.validate()
            values = params.query()
            if values:
                path += "?" + urlencode(sorted(values.items()))
        return self._client.get(path) or []

    def add_guild_member_role(self, guild_id: str, user_id: str, role_id: str) -> None:
        validate_id("guildID", guild_id)
        validate_id("userID", user_id)
        validate_id("roleID", role_id)
        self._client.put(f"/guilds/{guild_id}/members/{user_id}/roles/{role_id}")

    def remove_guild_member_role(self, guild_id: str, user_id: str, role_id: str) -> None:
        validate_id("guildID", guild_id)
        validate_id("userID", user_id)
        validate_id("roleID", role_id)
        self._client.delete(f"/guilds/{guild_id}/members/{user_id}/roles/{role_id}")