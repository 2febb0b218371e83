"""Issue referrer tokens from the command line.

    python -m core.issue https://example.com --ttl 3600 --base-url https://r.example
"""
from __future__ import annotations

import argparse
import sys
import time
from typing import Optional, Sequence
from urllib.parse import quote

from core.config import settings
from core.errors import ConfigurationError
from core.security import TokenCodec
from models.schemas import IssuedToken

DEFAULT_TTL = 3600


def issue_token(
    codec: TokenCodec,
    url: str,
    expires_at: int,
    base_url: Optional[str] = None,
    quote_url: bool = False,
) -> IssuedToken:
    message = quote(url, safe=":/?&=#%") if quote_url else url
    token = codec.encode(message, expires_at)
    link = f"{base_url.rstrip('/')}/url/{token}" if base_url else None
    return IssuedToken(token=token, expires_at=expires_at, link=link)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="core.issue", description="Issue an encrypted referrer token.")
    parser.add_argument("url", help="destination URL")
    when = parser.add_mutually_exclusive_group()
    when.add_argument("--ttl", type=int, default=DEFAULT_TTL, help="seconds until expiry (default: 3600)")
    when.add_argument("--expires-at", type=int, help="absolute expiry as a Unix timestamp")
    parser.add_argument("--base-url", help="print a full /url/<token> link under this base")
    parser.add_argument("--quote", action="store_true", help="percent-encode the URL before encrypting")
    return parser


def main(argv: Sequence[str] | None = None, secret: str | None = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        codec = TokenCodec(settings.referrer_secret if secret is None else secret)
    except ConfigurationError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    expires_at = args.expires_at if args.expires_at is not None else int(time.time()) + args.ttl
    issued = issue_token(codec, args.url, expires_at, base_url=args.base_url, quote_url=args.quote)
    print(issued.link or issued.token)
    return 0


if __name__ == "__main__":
    sys.exit(main())
