from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv


ROOT_DIR = Path(__file__).resolve().parents[1]
load_dotenv(ROOT_DIR / ".env")


@dataclass(frozen=True)
class Settings:
    app_name: str = os.getenv("REFERRER_APP_NAME", "Yakuza Referrer")
    app_version: str = "0.1.0"
    referrer_secret: str = field(default=os.getenv("SECRET_REFERRER", ""), repr=False)
    environment: str = os.getenv("REFERRER_ENV", "development")
    redirect_delay: int = int(os.getenv("REFERRER_REDIRECT_DELAY", "10"))
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    def __post_init__(self) -> None:
        object.__setattr__(self, "environment", (self.environment or "").strip().lower())

    @property
    def exposes_error_detail(self) -> bool:
        return self.environment == "development"


settings = Settings()
