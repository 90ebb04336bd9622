"""Yet another clubhouse services"""

from __future__ import annotations

import logging
from typing import Optional, Protocol
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from clubhook.config import DEFAULT_CLUBHOUSE_API_BASE
from clubhook.errors import MemberLookupError
from clubhook.schemas import ClubhouseMember

HTTP_TIMEOUT_SECONDS = 15

logger = logging.getLogger(__name__)


class MemberLookup(Protocol):
    """Anything that can turn a member id into a member profile."""

    async def get_member(self, member_id: str) -> ClubhouseMember:
        ...


class ClubhouseApiClient:
    """
    Thin wrapper around the Clubhouse REST API.

    Every call opens its own short-lived ``httpx.AsyncClient``; nothing is
    cached between calls.
    """

    def __init__(
        self,
        api_token: str,
        *,
        base_url: str = DEFAULT_CLUBHOUSE_API_BASE,
        timeout: float = HTTP_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_token = api_token
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    def _headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Clubhouse-Token": self.api_token,
        }

    async def get_member(self, member_id: str) -> ClubhouseMember:
        """Get a member (https://clubhouse.io/api/rest/v3/#Get-Member)."""
        url = f"{self.base_url}/members/{quote(member_id, safe='')}"
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self._transport
            ) as client:
                r = await client.get(url, headers=self._headers())
        except httpx.HTTPError as exc:
            raise MemberLookupError(f"failed to get member {member_id!r}: {exc}") from exc

        if r.status_code < 200 or r.status_code >= 300:
            raise MemberLookupError(
                f"failed to get member: {r.text!r} (status code: {r.status_code})",
                status_code=r.status_code,
            )

        try:
            return ClubhouseMember.model_validate(r.json())
        except (ValueError, ValidationError) as exc:
            logger.warning("raw member data received: %r", r.text)
            raise MemberLookupError(
                f"unexpected member payload for {member_id!r}",
                status_code=r.status_code,
            ) from exc
