from __future__ import annotations

from typing import Optional

from pydantic import BaseModel


class HealthResponse(BaseModel):
    ok: bool
    brand: str


class PageContext(BaseModel):
    title: str


class ReferrerContext(PageContext):
    target: str
    auto_redirect: bool = True
    delay: int = 10


class ErrorContext(PageContext):
    error: str


class LegalContext(PageContext):
    last_updated: str


class IssuedToken(BaseModel):
    token: str
    expires_at: int
    link: Optional[str] = None
