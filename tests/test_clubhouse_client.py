from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from clubhook.errors import DeliveryError, MemberLookupError
from clubhook.schemas import DiscordWebhook, Embed
from clubhook.services.clubhouse import ClubhouseApiClient
from clubhook.services.discord import send_message

from conftest import CLUBHOUSE_API, DISCORD_URL


def _client(handler) -> ClubhouseApiClient:
    return ClubhouseApiClient(
        "token-123", base_url=CLUBHOUSE_API + "/", transport=httpx.MockTransport(handler)
    )


def test_get_member_sends_token_and_parses_profile():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json={
                "id": "m-1",
                "role": "admin",
                "profile": {"name": "Jane Doe", "mention_name": "jane", "extra": 1},
                "group_ids": [],
            },
        )

    member = asyncio.run(_client(handler).get_member("m-1"))
    assert member.profile.name == "Jane Doe"
    assert member.profile.mention_name == "jane"
    assert str(seen[0].url) == "https://clubhouse.test/api/v3/members/m-1"
    assert seen[0].method == "GET"
    assert seen[0].headers["Clubhouse-Token"] == "token-123"


def test_get_member_non_2xx_is_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, text="not found")

    with pytest.raises(MemberLookupError) as info:
        asyncio.run(_client(handler).get_member("m-1"))
    assert info.value.status_code == 404


def test_get_member_bad_body_is_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>")

    with pytest.raises(MemberLookupError):
        asyncio.run(_client(handler).get_member("m-1"))


def test_get_member_transport_failure_is_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("boom", request=request)

    with pytest.raises(MemberLookupError):
        asyncio.run(_client(handler).get_member("m-1"))


MESSAGE = DiscordWebhook(embeds=[Embed(title="Deleted story: x", url="https://x", color=1)])


def test_send_message_posts_payload():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(204)

    asyncio.run(send_message(DISCORD_URL, MESSAGE, transport=httpx.MockTransport(handler)))
    assert seen[0].method == "POST"
    assert str(seen[0].url) == DISCORD_URL
    assert json.loads(seen[0].content) == MESSAGE.to_payload()


def test_send_message_non_2xx_is_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(400, json={"message": "Invalid Form Body"})

    with pytest.raises(DeliveryError) as info:
        asyncio.run(send_message(DISCORD_URL, MESSAGE, transport=httpx.MockTransport(handler)))
    assert info.value.status_code == 400


def test_get_member_escapes_id_as_one_segment():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"id": "x", "profile": {"name": "X"}})

    asyncio.run(_client(handler).get_member("../x?y=1"))
    assert seen[0].url.raw_path == b"/api/v3/members/..%2Fx%3Fy%3D1"
    assert seen[0].url.query == b""
