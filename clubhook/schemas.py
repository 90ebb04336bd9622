"""Payload schemas"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any, Optional

from pydantic import BaseModel, BeforeValidator, Field as PydanticField


def _null_as_blank(value: Any) -> Any:
    return "" if value is None else value


def _null_as_empty(value: Any) -> Any:
    return [] if value is None else value


# JSON null decodes to the zero value, like an absent key.
BlankStr = Annotated[str, BeforeValidator(_null_as_blank)]
IntList = Annotated[list[int], BeforeValidator(_null_as_empty)]
StrList = Annotated[list[str], BeforeValidator(_null_as_empty)]


class BoolChange(BaseModel):
    old: Optional[bool] = None
    new: Optional[bool] = None


class IntChange(BaseModel):
    old: Optional[int] = None
    new: Optional[int] = None


class StrChange(BaseModel):
    old: Optional[str] = None
    new: Optional[str] = None


class DateTimeChange(BaseModel):
    old: Optional[datetime] = None
    new: Optional[datetime] = None


class IntSetChange(BaseModel):
    adds: IntList = PydanticField(default_factory=list)
    removes: IntList = PydanticField(default_factory=list)


class StrSetChange(BaseModel):
    adds: StrList = PydanticField(default_factory=list)
    removes: StrList = PydanticField(default_factory=list)


class ClubhouseChanges(BaseModel):
    """
    Per-field deltas attached to an ``update`` action.

    Every attribute is ``None`` unless the webhook carried that key.
    """

    archived: Optional[BoolChange] = None
    blocker: Optional[BoolChange] = None
    comment_ids: Optional[IntSetChange] = None
    completed: Optional[BoolChange] = None
    completed_at: Optional[DateTimeChange] = None
    deadline: Optional[DateTimeChange] = None
    epic_id: Optional[IntChange] = None
    estimate: Optional[IntChange] = None
    follower_ids: Optional[StrSetChange] = None
    iteration_id: Optional[IntChange] = None
    label_ids: Optional[IntSetChange] = None
    owner_ids: Optional[StrSetChange] = None
    position: Optional[IntChange] = None
    project_id: Optional[IntChange] = None
    started: Optional[BoolChange] = None
    started_at: Optional[DateTimeChange] = None
    story_type: Optional[StrChange] = None
    text: Optional[StrChange] = None
    workflow_state_id: Optional[IntChange] = None


class ClubhouseAction(BaseModel):
    """One mutation inside a webhook envelope."""

    action: BlankStr = ""
    app_url: BlankStr = ""
    author_id: Optional[str] = None
    changes: Optional[ClubhouseChanges] = None
    complete: Optional[bool] = None
    description: Optional[str] = None
    entity_type: BlankStr = ""
    epic_id: Optional[int] = None
    estimate: Optional[int] = None
    follower_ids: StrList = PydanticField(default_factory=list)
    id: Optional[int] = None
    iteration_id: Optional[int] = None
    milestone_id: Optional[int] = None
    name: BlankStr = ""
    owner_ids: StrList = PydanticField(default_factory=list)
    position: Optional[int] = None
    project_id: Optional[int] = None
    requested_by_id: Optional[str] = None
    story_type: Optional[str] = None
    task_ids: IntList = PydanticField(default_factory=list)
    text: Optional[str] = None
    url: Optional[str] = None
    workflow_state_id: Optional[int] = None


class ClubhouseReference(BaseModel):
    app_url: BlankStr = ""
    entity_type: BlankStr = ""
    id: int
    name: BlankStr = ""
    type: Optional[str] = None


class ClubhouseWebhook(BaseModel):
    """
    Clubhouse outgoing webhook envelope.

    See https://clubhouse.io/api/webhook/v1/#Webhook-Format
    """

    actions: Annotated[list[ClubhouseAction], BeforeValidator(_null_as_empty)] = PydanticField(
        default_factory=list
    )
    changed_at: Optional[datetime] = None
    id: Optional[str] = None
    member_id: Optional[str] = None
    primary_id: Optional[int] = None
    references: Annotated[
        list[ClubhouseReference], BeforeValidator(_null_as_empty)
    ] = PydanticField(default_factory=list)
    version: BlankStr = ""


class MemberProfile(BaseModel):
    id: Optional[str] = None
    name: BlankStr = ""
    mention_name: Optional[str] = None
    email_address: Optional[str] = None
    deactivated: bool = False


class ClubhouseMember(BaseModel):
    """Subset of https://clubhouse.io/api/rest/v3/#Get-Member"""

    id: BlankStr = ""
    role: Optional[str] = None
    disabled: bool = False
    profile: MemberProfile = PydanticField(default_factory=MemberProfile)


class EmbedField(BaseModel):
    name: str
    value: str
    inline: bool = False


class Embed(BaseModel):
    title: str
    url: str
    description: str = ""
    color: int
    fields: Optional[list[EmbedField]] = None


class DiscordWebhook(BaseModel):
    """Discord execute-webhook body; ``fields`` is left out when empty."""

    content: str = ""
    embeds: list[Embed] = PydanticField(default_factory=list)

    def to_payload(self) -> dict:
        return self.model_dump(exclude_none=True)
