"""Gateway intent flags."""

from __future__ import annotations

import enum
import functools
import operator


class Intent(enum.IntFlag):
    GUILDS = 1 << 0
    GUILD_MEMBERS = 1 << 1
    GUILD_BANS = 1 << 2
    GUILD_EMOJIS = 1 << 3
    GUILD_INTEGRATIONS = 1 << 4
    GUILD_WEBHOOKS = 1 << 5
    GUILD_INVITES = 1 << 6
    GUILD_VOICE_STATES = 1 << 7
    GUILD_PRESENCES = 1 << 8
    GUILD_MESSAGES = 1 << 9
    GUILD_MESSAGE_REACTIONS = 1 << 10
    GUILD_MESSAGE_TYPING = 1 << 11
    DIRECT_MESSAGES = 1 << 12
    DIRECT_MESSAGE_REACTIONS = 1 << 13
    DIRECT_MESSAGE_TYPING = 1 << 14
    MESSAGE_CONTENT = 1 << 15
    GUILD_SCHEDULED_EVENTS = 1 << 16
    AUTO_MODERATION_CONFIGURATION = 1 << 17
    AUTO_MODERATION_EXECUTION = 1 << 18

    def has(self, intent: int) -> bool:
        """True if every bit of intent is set; the empty intent is always present."""
        wanted = int(intent)
        if wanted == 0:
            return True
        return int(self) & wanted == wanted


def all_intents() -> Intent:
    """A mask with every intent enabled."""
    return functools.reduce(operator.or_, Intent, Intent(0))


def default_intents() -> Intent:
    """A mask without privileged intents, suitable for most bots."""
    return (
        Intent.GUILDS
        | Intent.GUILD_MEMBERS
        | Intent.GUILD_MESSAGES
        | Intent.GUILD_MESSAGE_REACTIONS
        | Intent.GUILD_MESSAGE_TYPING
        | Intent.DIRECT_MESSAGES
        | Intent.DIRECT_MESSAGE_REACTIONS
        | Intent.DIRECT_MESSAGE_TYPING
    )