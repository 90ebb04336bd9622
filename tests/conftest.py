from __future__ import annotations

import json
from dataclasses import replace
from typing import Any, Callable

import httpx
import pytest
from fastapi.testclient import TestClient

from clubhook.app import create_app
from clubhook.config import Settings
from clubhook.errors import MemberLookupError
from clubhook.schemas import ClubhouseMember

DISCORD_URL = "https://discord.test/api/webhooks/1/abc"
CLUBHOUSE_API = "https://clubhouse.test/api/v3"
SECRET = "s3cret"


class FakeMembers:
    """In-memory member lookup; ids listed in ``fail_on`` raise."""

    def __init__(self, names: dict[str, str] | None = None, fail_on: set[str] | None = None):
        self.names = names or {}
        self.fail_on = fail_on or set()
        self.calls: list[str] = []

    async def get_member(self, member_id: str) -> ClubhouseMember:
        self.calls.append(member_id)
        if member_id in self.fail_on or member_id not in self.names:
            raise MemberLookupError(f"failed to get member {member_id!r}", status_code=404)
        return ClubhouseMember.model_validate(
            {"id": member_id, "profile": {"id": member_id, "name": self.names[member_id]}}
        )


class Upstream:
    """Records outbound requests and answers like Clubhouse and Discord would."""

    def __init__(self, members: dict[str, str] | None = None, discord_status: int = 204):
        self.members = members or {}
        self.discord_status = discord_status
        self.requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.host == "discord.test":
            return httpx.Response(self.discord_status)
        member_id = request.url.path.rsplit("/", 1)[-1]
        if member_id in self.members:
            return httpx.Response(
                200, json={"id": member_id, "profile": {"name": self.members[member_id]}}
            )
        return httpx.Response(404, json={"message": "Resource not found."})

    @property
    def discord_posts(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.host == "discord.test"]

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        discord_webhook_url=DISCORD_URL,
        clubhouse_api_token="token-123",
        clubhouse_webhook_secret=SECRET,
        clubhouse_api_base=CLUBHOUSE_API,
        timezone="UTC",
    )


@pytest.fixture
def upstream() -> Upstream:
    return Upstream(members={"m-1": "jane doe", "m-2": "John Smith"})


@pytest.fixture
def make_client(settings, upstream) -> Callable[..., TestClient]:
    def _make(**overrides: Any) -> TestClient:
        cfg = replace(settings, **overrides)
        return TestClient(create_app(cfg, transport=upstream.transport()))

    return _make


@pytest.fixture
def client(make_client) -> TestClient:
    return make_client()


def make_event(*actions: dict, references: list[dict] | None = None, **extra: Any) -> dict:
    event = {
        "id": "5c0e2f8e-0000-4000-8000-000000000001",
        "changed_at": "2026-03-01T12:00:00Z",
        "version": "v1",
        "primary_id": 42,
        "member_id": "m-1",
        "actions": list(actions),
        "references": references or [],
    }
    event.update(extra)
    return event


def story_action(kind: str = "update", **extra: Any) -> dict:
    action = {
        "id": 42,
        "entity_type": "story",
        "action": kind,
        "name": "Fix login bug",
        "app_url": "https://app.clubhouse.io/acme/story/42",
        "story_type": "bug",
    }
    action.update(extra)
    return action


def as_body(event: dict) -> bytes:
    return json.dumps(event).encode()
