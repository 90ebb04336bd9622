"""Embed fields for Clubhouse create and update actions."""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, Sequence

from clubhook.schemas import (
    ClubhouseAction,
    ClubhouseChanges,
    EmbedField,
    IntChange,
)
from clubhook.services.clubhouse import MemberLookup
from clubhook.services.references import ReferenceIndex
from clubhook.timezone import format_datetime
from clubhook.utils import title_case

NO_DATE = "No Date"
NONE = "None"
UNESTIMATED = "Unestimated"
EDITED = "(Edited)"  # Descriptions are likely too long to include.

ARROW = "{} -> {}"


def _arrow(old: str, new: str) -> str:
    return ARROW.format(old, new)


# Create path ----------------------------------------------------------------

# (field name, reference entity type, action attribute), in display order.
ACTION_REFERENCE_FIELDS: tuple[tuple[str, str, str], ...] = (
    ("Project", "project", "project_id"),
    ("Milestone", "milestone", "milestone_id"),
    ("State", "workflow-state", "workflow_state_id"),
    ("Epic", "epic", "epic_id"),
    ("Iteration", "iteration", "iteration_id"),
)


def get_action_fields(refs: ReferenceIndex, action: ClubhouseAction) -> list[EmbedField]:
    """
    Inline fields describing a freshly created entity.

    Only attributes that are set (non-empty, non-zero) produce a field.
    """
    fields: list[EmbedField] = []

    if action.story_type:
        fields.append(EmbedField(name="Type", value=action.story_type, inline=True))

    for name, entity_type, attr in ACTION_REFERENCE_FIELDS:
        ref_id = getattr(action, attr)
        if ref_id and ref_id > 0:
            fields.append(
                EmbedField(name=name, value=refs.name_of(entity_type, ref_id), inline=True)
            )

    if action.estimate and action.estimate > 0:
        fields.append(EmbedField(name="Estimate", value=str(action.estimate), inline=True))

    return fields


# Update path ----------------------------------------------------------------


@dataclass(frozen=True)
class ChangeContext:
    refs: ReferenceIndex
    members: MemberLookup
    tz: Optional[dt.tzinfo] = None


ChangeBuilder = Callable[[ChangeContext, ClubhouseChanges], Awaitable[list[EmbedField]]]


def _ref_value(refs: ReferenceIndex, entity_type: str, ref_id: Optional[int]) -> str:
    if ref_id is None:
        return NONE
    return refs.name_of(entity_type, ref_id)


def _ref_change(
    refs: ReferenceIndex, entity_type: str, change: IntChange, *, titled: bool = False
) -> str:
    value = _arrow(
        _ref_value(refs, entity_type, change.old),
        _ref_value(refs, entity_type, change.new),
    )
    return title_case(value) if titled else value


def _reference_builder(name: str, key: str, entity_type: str, *, titled: bool = False) -> ChangeBuilder:
    async def build(ctx: ChangeContext, changes: ClubhouseChanges) -> list[EmbedField]:
        change: Optional[IntChange] = getattr(changes, key)
        if change is None:
            return []
        return [EmbedField(name=name, value=_ref_change(ctx.refs, entity_type, change, titled=titled))]

    build.__name__ = f"_build_{key}"
    return build


async def _build_deadline(ctx: ChangeContext, changes: ClubhouseChanges) -> list[EmbedField]:
    change = changes.deadline
    if change is None:
        return []
    old = format_datetime(change.old, ctx.tz) if change.old else NO_DATE
    new = format_datetime(change.new, ctx.tz) if change.new else NO_DATE
    return [EmbedField(name="Deadline", value=_arrow(old, new))]


async def _build_estimate(ctx: ChangeContext, changes: ClubhouseChanges) -> list[EmbedField]:
    change = changes.estimate
    if change is None:
        return []
    old = str(change.old) if change.old is not None else UNESTIMATED
    new = str(change.new) if change.new is not None else UNESTIMATED
    return [EmbedField(name="Estimate", value=_arrow(old, new))]


def _label_names(refs: ReferenceIndex, label_ids: Sequence[int]) -> str:
    return ", ".join(refs.name_of("label", label_id) for label_id in label_ids)


async def _build_labels(ctx: ChangeContext, changes: ClubhouseChanges) -> list[EmbedField]:
    change = changes.label_ids
    if change is None:
        return []
    fields: list[EmbedField] = []
    if change.adds:
        fields.append(EmbedField(name="Label(s) Added", value=_label_names(ctx.refs, change.adds)))
    if change.removes:
        fields.append(
            EmbedField(name="Label(s) Removed", value=_label_names(ctx.refs, change.removes))
        )
    return fields


async def _member_names(members: MemberLookup, member_ids: Sequence[str]) -> str:
    # One lookup at a time; the first failure aborts the rest.
    names: list[str] = []
    for member_id in member_ids:
        member = await members.get_member(member_id)
        names.append(member.profile.name)
    return ", ".join(names)


async def _build_owners(ctx: ChangeContext, changes: ClubhouseChanges) -> list[EmbedField]:
    change = changes.owner_ids
    if change is None:
        return []
    fields: list[EmbedField] = []
    if change.adds:
        fields.append(
            EmbedField(name="Owner(s) Added", value=await _member_names(ctx.members, change.adds))
        )
    if change.removes:
        fields.append(
            EmbedField(
                name="Owner(s) Removed", value=await _member_names(ctx.members, change.removes)
            )
        )
    return fields


async def _build_story_type(ctx: ChangeContext, changes: ClubhouseChanges) -> list[EmbedField]:
    change = changes.story_type
    if change is None:
        return []
    return [EmbedField(name="Type", value=title_case(_arrow(change.old or "", change.new or "")))]


async def _build_text(ctx: ChangeContext, changes: ClubhouseChanges) -> list[EmbedField]:
    change = changes.text
    if change is None or change.old == change.new:
        return []
    return [EmbedField(name="Description", value=EDITED)]


CHANGE_BUILDERS: tuple[ChangeBuilder, ...] = (
    _build_deadline,
    _reference_builder("Epic", "epic_id", "epic"),
    _build_estimate,
    _reference_builder("Iteration", "iteration_id", "iteration"),
    _build_labels,
    _build_owners,
    _reference_builder("Project", "project_id", "project"),
    _build_story_type,
    _build_text,
    _reference_builder("State", "workflow_state_id", "workflow-state", titled=True),
)


async def get_changes_fields(
    refs: ReferenceIndex,
    members: MemberLookup,
    changes: Optional[ClubhouseChanges],
    *,
    tz: Optional[dt.tzinfo] = None,
) -> list[EmbedField]:
    """
    Fields describing an update, in a fixed order.

    Raises whatever ``members.get_member`` raises; no partial result is
    returned in that case.
    """
    if changes is None:
        return []
    ctx = ChangeContext(refs=refs, members=members, tz=tz)
    fields: list[EmbedField] = []
    for build in CHANGE_BUILDERS:
        fields.extend(await build(ctx, changes))
    return fields
