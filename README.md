# discosdk

A toolkit for writing Discord bots in Python. It covers:

- **REST API** (`discosdk.rest`): an authenticated `APIClient` that retries
  failed requests and backs off when rate limited, plus services for channels
  (`Channels`), messages and reactions (`Messages`), guilds, roles and members
  (`Guilds`) and application commands (`ApplicationCommands`). Request
  middleware in `discosdk.rest.middleware` handles logging, retries, metrics
  and dry runs, and a `Batcher` in `discosdk.rest.batch` sends queued requests
  in groups from a worker thread.
- **Gateway data** (`discosdk.gateway`): intent flags (`Intent`), opcodes and
  payload envelopes (`OpCode`, `Payload`, `IdentifyPayload`, `ResumePayload`),
  typed dispatch events, a `Dispatcher` that routes events to handlers, and a
  TTL-aware `MemoryCache` for guilds, channels and members.
- **Utilities**: an `EmbedBuilder` that enforces Discord's length limits, an
  `LRUCache` with hit, miss and eviction counts, YAML configuration with
  environment expansion, and output formatters (JSON, YAML, table).

The package needs Python 3.10 or newer and depends on `httpx` and `pyyaml`.

## Configuration

```python
from discosdk import config

cfg = config.load("discord.yaml")    # $VARS and ${VARS} are expanded from the environment
print(cfg.client.rate_limit.strategy)

fallback = config.default()          # built from DISCORD_* environment variables
```

An example configuration file:

```yaml
discord:
  bot_token: ${DISCORD_BOT_TOKEN}
  application_id: ${DISCORD_APPLICATION_ID}
  webhooks:
    default: ${DISCORD_WEBHOOK}
client:
  timeout: 30s
  retries: 3
  rate_limit:
    strategy: adaptive      # reactive, proactive or adaptive
    backoff_base: 1s
    backoff_max: 60s
logging:
  level: info
  format: json
```

Durations are written like `250ms`, `2s` or `1h30m` and are loaded as
`datetime.timedelta`. Left-out timeout, retries, rate-limit settings, log level
and log format fall back to the values shown above. The older top-level key
`client.rate_limit_strategy` is used when `client.rate_limit.strategy` is not
set. A file that cannot be parsed raises `ValueError`.

## REST API

```python
from discosdk.rest.api import APIClient
from discosdk.rest.channels import Channels, GetChannelMessagesParams
from discosdk.rest.messages import Messages

with APIClient("token") as client:
    channel = Channels(client).get_channel("123")
    history = Channels(client).get_channel_messages(
        "123", GetChannelMessagesParams(limit=10, before="555")
    )
    Messages(client).create_reaction("123", "456", "🔥")
```

Responses are returned as decoded JSON (dicts and lists). Requests send
`Authorization: Bot <token>`; an audit-log reason passed as `reason=` to the
modifying calls goes out escaped in the `X-Audit-Log-Reason` header.

Errors are raised from `discosdk.errors`:

- `ValidationError` for a missing ID or an invalid parameter (it is also a
  `ValueError`).
- `APIError` for a 4xx response other than 429. It carries `status_code`,
  `code`, `errors` and `retry_after`.
- `RetriesExhaustedError` once every attempt has failed; 5xx responses, 429
  responses and `NetworkError` transport failures are retried with a doubling
  pause, and the last failure is chained as the cause.

### Middleware

```python
from discosdk.rest.middleware import dry_run_middleware, logging_middleware

client.use(logging_middleware(), dry_run_middleware(True))
```

Middleware registered first runs first. `dry_run_middleware(True)` answers
every non-GET request with a 202 without sending it.

### Embeds

```python
from discosdk import embeds

embed = (
    embeds.EmbedBuilder()
    .set_title("Deploy finished")
    .set_description("All services are healthy")
    .add_field("Region", "eu-west", True)
    .build()
)
payload = embed.to_dict()
ok = embeds.success("Done", "Everything worked")
```

A setter raises `EmbedError` as soon as a title, description, field name or
field value goes over Discord's limits, or a 26th field is added.

## Gateway data and dispatch

```python
from discosdk.gateway.intents import Intent, default_intents
from discosdk.gateway.dispatcher import Dispatcher
from discosdk.gateway.events import MessageCreateEvent

mask = default_intents()
assert mask.has(Intent.GUILD_MESSAGES)
assert not mask.has(Intent.MESSAGE_CONTENT)

dispatcher = Dispatcher()
dispatcher.on_message_create(lambda event: print(event.message["content"]))
# inside a coroutine:
# await dispatcher.dispatch(MessageCreateEvent(message={"content": "hi"}))
```

Handlers may be plain functions or coroutines. `dispatch` is a coroutine; when
any handlers fail, their errors are gathered into one `DispatchError`.

## Caching

```python
from discosdk.cache import LRUCache

cache = LRUCache(2)
cache.set("a", "1")
cache.set("b", "2")
cache.set("c", "3")          # evicts "a"
assert "a" not in cache
print(cache.stats())         # hits, misses, evictions
```

`discosdk.gateway.state.MemoryCache(ttl)` keeps guilds, channels and members;
lookups return `None` when an entry is missing or older than `ttl` seconds.

## What the package does not do

The package does not open a websocket to the gateway: there is no connection
with heartbeats or session resume, no client that identifies and feeds received
events to the `Dispatcher`, and no shard management. It provides the payloads,
events and dispatch for such a connection, but the connection itself is left to
the caller. There are no health checks and no command-line program.