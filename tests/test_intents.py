from discosdk.gateway.intents import Intent, all_intents, default_intents


def test_all_intents_includes_everything():
    mask = all_intents()
    assert mask.has(Intent.MESSAGE_CONTENT)
    assert mask.has(Intent.GUILDS)
    assert all(mask.has(member) for member in Intent)


def test_default_intents_excludes_privileged():
    mask = default_intents()
    assert not mask.has(Intent.MESSAGE_CONTENT)
    assert mask.has(Intent.GUILD_MESSAGES)
    assert not mask.has(Intent.GUILD_PRESENCES)


def test_has_handles_zero():
    assert all_intents().has(0)
    assert Intent(0).has(0)


def test_has_requires_all_bits():
    mask = Intent.GUILDS
    assert not mask.has(Intent.GUILDS | Intent.GUILD_MEMBERS)
    assert (mask | Intent.GUILD_MEMBERS).has(Intent.GUILDS | Intent.GUILD_MEMBERS)


def test_guild_messages_value():
    assert default_intents() & Intent.GUILD_MESSAGES == 512
    assert all_intents().has(512)