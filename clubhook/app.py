"""the beautiful world start from here."""

from __future__ import annotations

import logging
import os
from typing import Optional

import httpx
import uvicorn
from fastapi import FastAPI

from clubhook.config import Settings, settings as env_settings
from clubhook.logs import setup_logging
from clubhook.routers import clubhouse, info
from clubhook.timezone import load_timezone

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    *,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """
    Build the ASGI app.

    ``transport`` replaces the network for every outbound call (Clubhouse
    and Discord); tests pass an ``httpx.MockTransport``.
    """
    settings = settings or env_settings
    setup_logging(settings.log_level)

    app = FastAPI(title="Clubhouse → Discord")
    app.state.settings = settings
    app.state.tz, app.state.tz_name = load_timezone(settings.timezone)
    app.state.http_transport = transport

    for problem in settings.problems():
        logger.warning(problem)

    app.include_router(info.router)
    app.include_router(clubhouse.router)
    return app


app = create_app()


def main() -> None:
    """Run the service with uvicorn (``HOST``/``PORT`` from the environment)."""
    uvicorn.run(
        "clubhook.app:app",
        host=os.getenv("HOST", "127.0.0.1"),
        port=int(os.getenv("PORT", "8000")),
        proxy_headers=True,
    )
