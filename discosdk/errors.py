"""Exception hierarchy shared by the REST and gateway clients."""

from __future__ import annotations

from typing import Any


class DiscordError(Exception):
    """Base class for every error raised by the SDK."""

    default_message = "discord error"

    def __str__(self) -> str:
        return super().__str__() or self.default_message


class ValidationError(DiscordError, ValueError):
    """A request argument failed client-side validation."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"validation error on {field}: {message}")
        self.field = field
        self.message = message


class APIError(DiscordError):
    """The API answered with a non-success status."""

    def __init__(
        self,
        status_code: int,
        message: str = "",
        code: int = 0,
        errors: dict[str, Any] | None = None,
        retry_after: int = 0,
    ) -> None:
        text = f"discord API error {status_code}"
        if code:
            text += f" (code {code})"
        if message:
            text += f": {message}"
        super().__init__(text)
        self.status_code = status_code
        self.message = message
        self.code = code
        self.errors = dict(errors) if errors else {}
        self.retry_after = retry_after


class NetworkError(DiscordError):
    """A transport-level failure while performing an operation."""

    def __init__(self, op: str, cause: BaseException) -> None:
        super().__init__(f"network error during {op}: {cause}")
        self.op = op
        self.cause = cause
        self.__cause__ = cause


class RetriesExhaustedError(DiscordError):
    """Every attempt of a retried request failed."""

    def __init__(self, attempts: int) -> None:
        super().__init__(f"request failed after {attempts} attempts")
        self.attempts = attempts


class NotConnectedError(DiscordError):
    """An operation needs an open connection and there is none."""

    default_message = "not connected"


class AlreadyConnectedError(DiscordError):
    """A connection was opened twice."""

    default_message = "already connected"


class TokenRequiredError(DiscordError):
    """A token is needed for the operation."""

    default_message = "token is required"