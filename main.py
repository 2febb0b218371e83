from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from urllib.parse import unquote, urlparse

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import HTMLResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.config import Settings, settings as default_settings
from core.errors import ConfigurationError, TokenError
from core.log import setup_logging
from core.security import TokenCodec
from models.schemas import ErrorContext, HealthResponse, LegalContext, PageContext, ReferrerContext

BASE_DIR = Path(__file__).resolve().parent
GENERIC_ERROR = "An error occurred"
LEGAL_LAST_UPDATED = "2025-12-12"
ALLOWED_SCHEMES = {"http", "https"}

logger = logging.getLogger("referrer")

templates = Jinja2Templates(directory=str(BASE_DIR / "templates"))
templates.env.globals["current_year"] = lambda: datetime.now().year


def is_valid_url(value: str) -> bool:
    parsed = urlparse(value)
    return parsed.scheme.lower() in ALLOWED_SCHEMES and bool(parsed.netloc)


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or default_settings
    app = FastAPI(title=settings.app_name, version=settings.app_version)
    app.mount("/static", StaticFiles(directory=str(BASE_DIR / "static")), name="static")

    @app.on_event("startup")
    def startup() -> None:
        setup_logging(settings.log_level)
        try:
            app.state.codec = TokenCodec(settings.referrer_secret)
        except ConfigurationError:
            logger.critical("referrer secret missing, refusing to start")
            raise
        logger.info("%s %s started (env=%s)", settings.app_name, settings.app_version, settings.environment)

    def render(request: Request, name: str, context: PageContext, status_code: int = 200) -> HTMLResponse:
        return templates.TemplateResponse(request, name, context.model_dump(), status_code=status_code)

    @app.get("/", response_class=HTMLResponse)
    async def index(request: Request) -> HTMLResponse:
        return render(request, "index.html", PageContext(title=f"Welcome to {settings.app_name}"))

    @app.get("/url/{target}", response_class=HTMLResponse)
    async def referrer(request: Request, target: str) -> HTMLResponse:
        codec: TokenCodec = request.app.state.codec
        try:
            message = codec.decode(target)
        except TokenError as exc:
            logger.info("rejected token: %s", exc.kind.value)
            error = exc.message if settings.exposes_error_detail else GENERIC_ERROR
            return render(request, "50x.html", ErrorContext(title="Error", error=error), status_code=500)

        target_url = unquote(message)
        if not is_valid_url(target_url):
            logger.info("rejected token: decoded target is not a URL")
            return render(
                request, "50x.html", ErrorContext(title="Error", error="Invalid URL format"), status_code=400
            )

        context = ReferrerContext(
            title="Referrer . . .",
            target=target_url,
            auto_redirect=True,
            delay=settings.redirect_delay,
        )
        return render(request, "referrer.html", context)

    @app.get("/privacy", response_class=HTMLResponse)
    async def privacy(request: Request) -> HTMLResponse:
        return render(request, "privacy.html", LegalContext(title="Privacy Policy", last_updated=LEGAL_LAST_UPDATED))

    @app.get("/tos", response_class=HTMLResponse)
    async def tos(request: Request) -> HTMLResponse:
        return render(request, "tos.html", LegalContext(title="Terms of Service", last_updated=LEGAL_LAST_UPDATED))

    @app.get("/api/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(ok=True, brand=settings.app_name)

    @app.exception_handler(StarletteHTTPException)
    async def not_found(request: Request, exc: StarletteHTTPException):
        if exc.status_code != 404:
            return await http_exception_handler(request, exc)
        return render(request, "404.html", PageContext(title="Page Not Found"), status_code=404)

    return app


app = create_app()
