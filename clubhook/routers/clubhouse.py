"""Ruter Clubhouse?"""

from __future__ import annotations

import json
import logging

from fastapi import APIRouter, Header, HTTPException, Request
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from pydantic import ValidationError

from clubhook.config import Settings
from clubhook.errors import UpstreamError
from clubhook.schemas import ClubhouseWebhook
from clubhook.services.clubhouse import ClubhouseApiClient
from clubhook.services.discord import send_message
from clubhook.services.translator import SUPPORTED_VERSION, translate
from clubhook.utils import ch_verify, media_type, sign_body

router = APIRouter(tags=["clubhouse"])

logger = logging.getLogger(__name__)

ALL_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"]
INVALID_REQUEST = "invalid request"
UPSTREAM_ERROR = "upstream error"


def _settings(request: Request) -> Settings:
    settings: Settings = request.app.state.settings
    problems = settings.problems()
    if problems:
        for problem in problems:
            logger.error(problem)
        raise HTTPException(500, "service is not configured")
    return settings


@router.api_route("/", methods=ALL_METHODS)
@router.api_route("/clubhouse", methods=ALL_METHODS)
async def clubhouse_webhook(
    request: Request,
    clubhouse_signature: str | None = Header(None),
) -> Response:
    """
    Clubhouse webhook endpoint.

    Verifies the optional ``Clubhouse-Signature``, translates the single
    action of a v1 event into a Discord embed and forwards it to the
    configured Discord webhook.
    """
    settings = _settings(request)

    content_type = request.headers.get("content-type")
    if request.method != "POST" or media_type(content_type) != "application/json":
        logger.info("invalid method / content-type: %s / %s", request.method, content_type)
        raise HTTPException(400, INVALID_REQUEST)

    body = await request.body()

    signature = (clubhouse_signature or "").strip()
    if signature:
        secret = settings.clubhouse_webhook_secret
        if not secret:
            logger.error(
                "received webhook with signature, but `CLUBHOUSE_WEBHOOK_SECRET` "
                "was not set in the environment"
            )
            raise HTTPException(500, "service is not configured")
        if not ch_verify(secret, body, signature):
            logger.warning(
                "signature does not match: %s (got) != %s (want)",
                signature,
                sign_body(secret, body).hex(),
            )
            raise HTTPException(400, INVALID_REQUEST)

    try:
        webhook = ClubhouseWebhook.model_validate(json.loads(body))
    except (ValueError, ValidationError) as exc:
        logger.error("raw data received: %r", body)
        logger.error("could not decode webhook: %s", exc)
        raise HTTPException(500, "could not decode webhook") from exc

    if webhook.version != SUPPORTED_VERSION:
        logger.info("version not supported: %s", webhook.version)
        raise HTTPException(400, INVALID_REQUEST)

    if len(webhook.actions) != 1:
        logger.info("skipping event %s with %d actions", webhook.id, len(webhook.actions))
        return PlainTextResponse("ignored")

    transport = getattr(request.app.state, "http_transport", None)
    members = ClubhouseApiClient(
        settings.clubhouse_api_token,
        base_url=settings.clubhouse_api_base,
        timeout=settings.http_timeout_seconds,
        transport=transport,
    )
    tz = request.app.state.tz

    try:
        message = await translate(webhook, members, tz=tz)
    except UpstreamError as exc:
        logger.error("translation failed for event %s: %s", webhook.id, exc)
        raise HTTPException(502, UPSTREAM_ERROR) from exc

    if message is None:
        logger.info("unhandled event %s", webhook.id)
        logger.debug("unhandled raw data received: %r", body)
        return PlainTextResponse("ignored")

    try:
        await send_message(
            settings.discord_webhook_url,
            message,
            timeout=settings.http_timeout_seconds,
            transport=transport,
        )
    except UpstreamError as exc:
        logger.error("forwarding event %s failed: %s", webhook.id, exc)
        raise HTTPException(502, UPSTREAM_ERROR) from exc

    logger.info("event %s forwarded: %s", webhook.id, message.embeds[0].title)
    return JSONResponse(message.to_payload())
