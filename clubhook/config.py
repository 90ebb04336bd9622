"""the beautiful world start from here."""

from __future__ import annotations

import math
import os
from dataclasses import dataclass
from urllib.parse import urlparse

from dotenv import load_dotenv

load_dotenv()

DEFAULT_CLUBHOUSE_API_BASE = "https://api.clubhouse.io/api/v3"


@dataclass(frozen=True)
class Settings:
    """App Settings"""

    discord_webhook_url: str = ""
    clubhouse_api_token: str = ""
    clubhouse_webhook_secret: str = ""
    clubhouse_api_base: str = DEFAULT_CLUBHOUSE_API_BASE
    http_timeout_seconds: float = 15.0
    timezone: str = "UTC"
    log_level: str = "INFO"
    invalid: tuple[str, ...] = ()

    @classmethod
    def from_env(cls) -> "Settings":
        """Read every setting from the process environment."""
        invalid: list[str] = []
        timeout = _positive_float_env("HTTP_TIMEOUT_SECONDS", 15.0, invalid)
        return cls(
            discord_webhook_url=os.getenv("DISCORD_WEBHOOK_URL", "").strip(),
            clubhouse_api_token=os.getenv("CLUBHOUSE_API_TOKEN", "").strip(),
            clubhouse_webhook_secret=os.getenv("CLUBHOUSE_WEBHOOK_SECRET", "").strip(),
            clubhouse_api_base=os.getenv(
                "CLUBHOUSE_API_BASE", DEFAULT_CLUBHOUSE_API_BASE
            ).rstrip("/"),
            http_timeout_seconds=timeout,
            timezone=os.getenv("TIMEZONE", "UTC"),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            invalid=tuple(invalid),
        )

    def problems(self) -> list[str]:
        """
        Describe what is wrong with the configuration.

        Returns
        -------
        list[str]
            Empty when the service can forward events.
        """
        issues: list[str] = list(self.invalid)
        if not self.discord_webhook_url:
            issues.append("`DISCORD_WEBHOOK_URL` is not set in the environment")
        elif not is_http_url(self.discord_webhook_url):
            issues.append("`DISCORD_WEBHOOK_URL` is not a valid http(s) URL")
        if not self.clubhouse_api_token:
            issues.append("`CLUBHOUSE_API_TOKEN` is not set in the environment")
        return issues


def _positive_float_env(name: str, default: float, invalid: list[str]) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        value = 0.0
    if not math.isfinite(value) or value <= 0:
        invalid.append(f"`{name}` must be a positive number, got {raw!r}")
        return default
    return value


def is_http_url(value: str) -> bool:
    try:
        parsed = urlparse(value)
    except ValueError:
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


settings = Settings.from_env()
