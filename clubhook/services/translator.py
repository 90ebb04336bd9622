"""Clubhouse webhook → Discord message."""

from __future__ import annotations

import datetime as dt
import logging
from typing import Optional

from clubhook.schemas import ClubhouseAction, ClubhouseWebhook, DiscordWebhook, Embed, EmbedField
from clubhook.services.clubhouse import MemberLookup
from clubhook.services.fields import get_action_fields, get_changes_fields
from clubhook.services.references import ReferenceIndex
from clubhook.utils import title_case

COLOR_CREATE = 5424154
COLOR_UPDATE = 16440084
COLOR_DELETE = 16065069

SUPPORTED_VERSION = "v1"

logger = logging.getLogger(__name__)


async def build_title(
    members: MemberLookup, action: ClubhouseAction, member_id: Optional[str]
) -> str:
    """
    '<Member> <kind>d <entity>: <name>', or '<Kind>d <entity>: <name>' when
    the event has no triggering member.
    """
    if not (action.action and action.entity_type and action.name):
        return ""
    if member_id:
        member = await members.get_member(member_id)
        return (
            f"{title_case(member.profile.name)} {action.action}d "
            f"{action.entity_type}: {action.name}"
        )
    return f"{title_case(action.action)}d {action.entity_type}: {action.name}"


async def translate(
    webhook: ClubhouseWebhook,
    members: MemberLookup,
    *,
    tz: Optional[dt.tzinfo] = None,
) -> Optional[DiscordWebhook]:
    """
    Map the single action of ``webhook`` to a Discord message.

    Returns
    -------
    DiscordWebhook | None
        ``None`` when the event is not worth posting (unsupported kind,
        nothing changed that we display, missing title or URL).

    Raises
    ------
    MemberLookupError
        When a member lookup needed for the title or an owner change fails.
    """
    if len(webhook.actions) != 1:
        return None
    action = webhook.actions[0]
    refs = ReferenceIndex(webhook.references)

    fields: Optional[list[EmbedField]] = None
    if action.action == "create":
        color = COLOR_CREATE
        fields = get_action_fields(refs, action)
        if not fields:
            return None
    elif action.action == "update":
        color = COLOR_UPDATE
        fields = await get_changes_fields(refs, members, action.changes, tz=tz)
        if not fields:
            return None
    elif action.action == "delete":
        color = COLOR_DELETE
    else:
        logger.debug("unsupported action kind: %r", action.action)
        return None

    title = await build_title(members, action, webhook.member_id)
    url = action.app_url
    if not title or not url:
        return None

    return DiscordWebhook(
        embeds=[Embed(title=title, url=url, color=color, fields=fields or None)]
    )
