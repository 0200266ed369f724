# app/services/reconciliation.py
from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from app.schemas.backfill import BackfillPolicy
from app.schemas.meeting import MeetingKey, MeetingOccurrence


@dataclass(frozen=True)
class WriteSet:
    """
    Storage writes needed to bring the meetings table in line with a
    freshly generated occurrence list. Deletes are applied before inserts.
    """

    to_insert: list[MeetingOccurrence] = field(default_factory=list)
    to_delete: frozenset[MeetingKey] = field(default_factory=frozenset)

    @property
    def is_empty(self) -> bool:
        return not self.to_insert and not self.to_delete


def reconcile(
    generated: Sequence[MeetingOccurrence],
    existing: Iterable[MeetingKey],
    policy: BackfillPolicy = BackfillPolicy.ADD_MISSING,
) -> WriteSet:
    """
    Diff generated occurrences against the keys already in storage.

    Policies
    --------
    ADD_MISSING:
        Insert each generated occurrence whose (date, time) key is neither
        stored nor already queued; delete nothing. Running it again against
        the resulting storage yields an empty write-set.
    REPLACE_ALL:
        Delete every existing key and insert every generated occurrence.
        Discards notes edits, so callers must only use it on explicit request.

    `policy` may also be given by value ("replace_all"); unknown values raise
    ValueError.

    This function performs no I/O. `existing` must be a complete snapshot;
    if storage could not be read, do not call it with a partial one.
    """
    policy = BackfillPolicy(policy)
    existing_keys = frozenset(existing)

    if policy is BackfillPolicy.REPLACE_ALL:
        return WriteSet(to_insert=list(generated), to_delete=existing_keys)

    seen = set(existing_keys)
    to_insert: list[MeetingOccurrence] = []
    for occurrence in generated:
        key = occurrence.key
        if key in seen:
            continue
        seen.add(key)
        to_insert.append(occurrence)

    return WriteSet(to_insert=to_insert)
