"""Yet another discord services"""

from __future__ import annotations

import logging
from typing import Optional

import httpx

from clubhook.errors import DeliveryError
from clubhook.schemas import DiscordWebhook

HTTP_TIMEOUT_SECONDS = 15

logger = logging.getLogger(__name__)


async def send_message(
    webhook_url: str,
    message: DiscordWebhook,
    *,
    timeout: float = HTTP_TIMEOUT_SECONDS,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.Response:
    """POST one message to a Discord webhook URL."""
    payload = message.to_payload()
    try:
        async with httpx.AsyncClient(timeout=timeout, transport=transport) as client:
            resp = await client.post(webhook_url, json=payload)
    except httpx.HTTPError as exc:
        raise DeliveryError(f"Discord error: {exc}") from exc

    if resp.status_code < 200 or resp.status_code >= 300:
        logger.error("payload %s", message.model_dump_json(exclude_none=True))
        raise DeliveryError(
            f"Discord error: {resp.status_code} {resp.text}",
            status_code=resp.status_code,
        )
    return resp
