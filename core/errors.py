from __future__ import annotations

from enum import Enum

PUBLIC_MESSAGE = "INVALID HASH URL!"


class ErrorKind(str, Enum):
    BAD_PAYLOAD = "bad_payload"
    INVALID_HASH = "invalid_hash"
    EXPIRED_URL = "expired_url"


class TokenError(Exception):
    """A token was rejected. `kind` says why; the message is the same for every kind."""

    kind: ErrorKind

    def __init__(self, message: str = PUBLIC_MESSAGE) -> None:
        super().__init__(message)
        self.message = message

    @staticmethod
    def from_kind(kind: ErrorKind, message: str = PUBLIC_MESSAGE) -> "TokenError":
        return _BY_KIND[kind](message)


class BadPayload(TokenError):
    kind = ErrorKind.BAD_PAYLOAD


class InvalidHash(TokenError):
    kind = ErrorKind.INVALID_HASH


class ExpiredUrl(TokenError):
    kind = ErrorKind.EXPIRED_URL


class ConfigurationError(RuntimeError):
    pass


_BY_KIND: dict[ErrorKind, type[TokenError]] = {
    ErrorKind.BAD_PAYLOAD: BadPayload,
    ErrorKind.INVALID_HASH: InvalidHash,
    ErrorKind.EXPIRED_URL: ExpiredUrl,
}
