"""
Petly Backend: Entity Identities
==================================

Local records (rows in our database) have integer ids. Remote records
(from Petfinder) have string ids. A raw `7` and a raw `"7"` name two
different entities, so identities are tagged instead of compared raw.
"""

from dataclasses import dataclass
from typing import Any, List, Mapping, Union


@dataclass(frozen=True)
class LocalId:
    value: int

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class RemoteId:
    value: str

    def __str__(self) -> str:
        return self.value


EntityId = Union[LocalId, RemoteId]


def identity_of(record: Mapping[str, Any]) -> EntityId:
    """Tag a record's `id` by the space it was issued in."""
    raw = record["id"]
    # bool is an int subclass; no store ever issues one as an id
    if isinstance(raw, int) and not isinstance(raw, bool):
        return LocalId(raw)
    return RemoteId(str(raw))


def candidate_identities(reference: str) -> List[EntityId]:
    """
    Identities a raw path reference may name.

    Every reference may be a remote id. All-digit references may also be a
    local primary key; Petfinder ids are numeric too, so both are tried.
    """
    candidates: List[EntityId] = []
    if reference.isdigit():
        candidates.append(LocalId(int(reference)))
    candidates.append(RemoteId(reference))
    return candidates


def local_candidate(reference: str) -> Union[LocalId, None]:
    for candidate in candidate_identities(reference):
        if isinstance(candidate, LocalId):
            return candidate
    return None
