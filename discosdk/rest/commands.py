"""Application command endpoints of the REST API."""

from __future__ import annotations

from typing import Any, Mapping, Sequence

from discosdk.errors import ValidationError
from discosdk.rest.api import APIClient, audit_headers, validate_id

CHAT_INPUT_COMMAND = 1

Command = Mapping[str, Any]


def _validate_command(command: Command | None) -> None:
    if command is None:
        raise ValidationError("command", "command is required")
    if not command.get("name"):
        raise ValidationError("name", "name is required")
    command_type = command.get("type") or CHAT_INPUT_COMMAND
    if command_type == CHAT_INPUT_COMMAND and not command.get("description"):
        raise ValidationError("description", "description is required for chat input commands")


def _validate_commands(commands: Sequence[Command | None]) -> None:
    for index, command in enumerate(commands):
        try:
            _validate_command(command)
        except ValidationError as exc:
            raise ValidationError(f"command[{index}].{exc.field}", exc.message) from exc


class ApplicationCommands:
    """Global and guild command management scoped to one application."""

    def __init__(self, client: APIClient, application_id: str) -> None:
        self._client = client
        self.application_id = application_id

    def get_global_application_commands(self) -> list[dict[str, Any]]:
        """List the application's global commands."""
        self._ensure_application_id()
        return self._client.get(self._global_path()) or []

    def create_global_application_command(
        self, command: Command | None, reason: str = ""
    ) -> dict[str, Any]:
        """Register a new global command."""
        self._ensure_application_id()
        _validate_command(command)
        result = self._client.request(
            "POST", self._global_path(), dict(command), audit_headers(reason)
        )
        return result or {}

    def edit_global_application_command(
        self, command_id: str, command: Command | None, reason: str = ""
    ) -> dict[str, Any]:
        """Update an existing global command."""
        self._ensure_application_id()
        validate_id("commandID", command_id)
        _validate_command(command)
        result = self._client.request(
            "PATCH", self._global_path(command_id), dict(command), audit_headers(reason)
        )
        return result or {}

    def delete_global_application_command(self, command_id: str) -> None:
        self._ensure_application_id()
        validate_id("commandID", command_id)
        self._client.delete(self._global_path(command_id))

    def get_guild_application_commands(self, guild_id: str) -> list[dict[str, Any]]:
        """List the commands registered for one guild."""
        self._ensure_application_id()
        validate_id("guildID", guild_id)
        return self._client.get(self._guild_path(guild_id)) or []

    def create_guild_application_command(
        self, guild_id: str, command: Command | None, reason: str = ""
    ) -> dict[str, Any]:
        """Register a new guild-scoped command."""
        self._ensure_application_id()
        validate_id("guildID", guild_id)
        _validate_command(command)
        result = self._client.request(
            "POST", self._guild_path(guild_id), dict(command), audit_headers(reason)
        )
        return result or {}

    def edit_guild_application_command(
        self, guild_id: str, command_id: str, command: Command | None, reason: str = ""
    ) -> dict[str, Any]:
        """Update an existing guild command."""
        self._ensure_application_id()
        validate_id("guildID", guild_id)
        validate_id("commandID", command_id)
        _validate_command(command)
        result = self._client.request(
            "PATCH",
            self._guild_path(guild_id, command_id),
            dict(command),
            audit_headers(reason),
        )
        return result or {}

    def delete_guild_application_command(self, guild_id: str, command_id: str) -> None:
        self._ensure_application_id()
        validate_id("guildID", guild_id)
        validate_id("commandID", command_id)
        self._client.delete(self._guild_path(guild_id, command_id))

    def bulk_overwrite_global_application_commands(
        self, commands: Sequence[Command] | None
    ) -> list[dict[str, Any]]:
        """Replace every global command with the given list."""
        self._ensure_application_id()
        payload = list(commands or [])
        _validate_commands(payload)
        return self._client.put(self._global_path(), [dict(c) for c in payload]) or []

    def bulk_overwrite_guild_application_commands(
        self, guild_id: str, commands: Sequence[Command] | None
    ) -> list[dict[str, Any]]:
        """Replace every command of the guild with the given list."""
        self._ensure_application_id()
        validate_id("guildID", guild_id)
        payload = list(commands or [])
        _validate_commands(payload)
        return self._client.put(self._guild_path(guild_id), [dict(c) for c in payload]) or []

    def _ensure_application_id(self) -> None:
        if not self.application_id or not self.application_id.strip():
            raise ValidationError("applicationID", "application ID is required")

    def _global_path(self, command_id: str = "") -> str:
        path = f"/applications/{self.application_id}/commands"
        return f"{path}/{command_id}" if command_id else path

    def _guild_path(self, guild_id: str, command_id: str = "") -> str:
        path = f"/applications/{self.application_id}/guilds/{guild_id}/commands"
        return f"{path}/{command_id}" if command_id else path