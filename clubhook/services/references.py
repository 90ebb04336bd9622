"""Request-scoped lookup of the references bundled with a webhook."""

from __future__ import annotations

from typing import Iterable, Optional

from clubhook.schemas import ClubhouseReference

UNKNOWN = "Unknown"

ReferenceKey = tuple[str, int]


class ReferenceIndex:
    """
    Map ``(entity_type, id)`` to the matching reference.

    Ids are only unique per entity type. When the same key shows up twice
    the later reference wins.
    """

    def __init__(self, references: Iterable[ClubhouseReference] = ()):
        self._by_key: dict[ReferenceKey, ClubhouseReference] = {}
        for ref in references:
            self._by_key[(ref.entity_type, ref.id)] = ref

    def __len__(self) -> int:
        return len(self._by_key)

    def __contains__(self, key: object) -> bool:
        return key in self._by_key

    def get(self, entity_type: str, ref_id: int) -> Optional[ClubhouseReference]:
        return self._by_key.get((entity_type, ref_id))

    def name_of(self, entity_type: str, ref_id: int) -> str:
        """Reference name, or ``UNKNOWN`` when the event did not bundle it."""
        ref = self.get(entity_type, ref_id)
        return ref.name if ref is not None else UNKNOWN
