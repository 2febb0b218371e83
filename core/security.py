from __future__ import annotations

import base64
import binascii
import hashlib
import logging
import os
import re
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from core.errors import BadPayload, ConfigurationError, ErrorKind, ExpiredUrl, InvalidHash, TokenError

logger = logging.getLogger(__name__)

NONCE_SIZE = 12
TAG_SIZE = 16
MIN_TOKEN_BYTES = NONCE_SIZE + TAG_SIZE
SEPARATOR = "|"

_EXPIRY_RE = re.compile(r"\s*[+-]?\d{1,20}\s*", re.ASCII)


def derive_key(secret: bytes | str | None) -> bytes:
    """SHA-256 of the secret, used directly as the AES-256 key."""
    if isinstance(secret, str):
        secret = secret.encode("utf-8")
    if not secret:
        raise ConfigurationError("SECRET_REFERRER is not set")
    return hashlib.sha256(secret).digest()


def b64url_encode(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")


def b64url_decode(token: str) -> bytes:
    try:
        data = token.rstrip("=").encode("ascii")
    except (AttributeError, UnicodeEncodeError) as exc:
        raise BadPayload() from exc
    data += b"=" * (-len(data) % 4)
    try:
        return base64.b64decode(data, altchars=b"-_", validate=True)
    except (binascii.Error, ValueError) as exc:
        raise BadPayload() from exc


class ResultKind(str, Enum):
    OK = "ok"
    BAD_PAYLOAD = ErrorKind.BAD_PAYLOAD.value
    INVALID_HASH = ErrorKind.INVALID_HASH.value
    EXPIRED_URL = ErrorKind.EXPIRED_URL.value


@dataclass(frozen=True)
class DecodeResult:
    kind: ResultKind
    message: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.kind is ResultKind.OK

    def unwrap(self) -> str:
        if self.kind is ResultKind.OK:
            return self.message or ""
        raise TokenError.from_kind(ErrorKind(self.kind.value))


class TokenCodec:
    """AES-256-GCM codec for referrer tokens.

    Token layout before base64: nonce(12) || ciphertext || tag(16).
    The plaintext is ``"<message>|<expires_at>"``; the last ``|`` separates
    the two, so the message may itself contain pipes.
    """

    def __init__(self, secret: bytes | str | None, clock: Callable[[], float] = time.time) -> None:
        self._aead = AESGCM(derive_key(secret))
        self._clock = clock

    def encode(self, message: str, expires_at: int) -> str:
        plaintext = f"{message}{SEPARATOR}{int(expires_at)}".encode("utf-8")
        nonce = os.urandom(NONCE_SIZE)
        sealed = self._aead.encrypt(nonce, plaintext, None)
        return b64url_encode(nonce + sealed)

    def encode_for(self, message: str, ttl_seconds: int) -> str:
        return self.encode(message, int(self._clock()) + int(ttl_seconds))

    def decode(self, token: str) -> str:
        raw = b64url_decode(token)
        if len(raw) < MIN_TOKEN_BYTES:
            raise BadPayload()

        nonce = raw[:NONCE_SIZE]
        ciphertext = raw[NONCE_SIZE:-TAG_SIZE]
        tag = raw[-TAG_SIZE:]
        if len(tag) != TAG_SIZE:
            raise BadPayload()

        try:
            plaintext = self._aead.decrypt(nonce, ciphertext + tag, None)
        except InvalidTag as exc:
            raise InvalidHash() from exc

        message, expires_at = _parse_payload(plaintext)
        if self._clock() > expires_at:
            raise ExpiredUrl()
        return message

    def try_decode(self, token: str) -> DecodeResult:
        try:
            message = self.decode(token)
        except TokenError as exc:
            logger.debug("token rejected: %s", exc.kind.value)
            return DecodeResult(kind=ResultKind(exc.kind.value))
        return DecodeResult(kind=ResultKind.OK, message=message)


def _parse_payload(plaintext: bytes) -> tuple[str, int]:
    try:
        text = plaintext.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise BadPayload() from exc

    message, sep, expires_text = text.rpartition(SEPARATOR)
    if not sep:
        raise BadPayload()
    # NaN, inf and blanks would never compare as expired, so reject them here
    if not _EXPIRY_RE.fullmatch(expires_text):
        raise BadPayload()
    return message, int(expires_text)
