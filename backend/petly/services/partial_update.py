"""
Petly Backend: Partial Update SQL Builder
===========================================

What:  Turns a sparse `{externalName: newValue}` mapping into the SET clause
       of a parameterized UPDATE plus its bound values.
How:   External (camelCase) names go through an alias table to storage
       column names; unmapped names keep their own spelling. Placeholders
       are numbered from `start`, so the caller can append the WHERE-clause
       value as `$<start + len(values)>`.

Example:
    >>> sql_for_partial_update({"firstName": "Aliya", "age": 32},
    ...                        {"firstName": "first_name"})
    PartialUpdate(assignments=['"first_name" = $1', '"age" = $2'],
                  values=['Aliya', 32])

Values are passed through untouched; validation happens before this point.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from petly.exceptions import InvalidUpdateError


@dataclass
class PartialUpdate:
    assignments: List[str] = field(default_factory=list)
    values: List[Any] = field(default_factory=list)
    start: int = 1

    @property
    def set_clause(self) -> str:
        return ", ".join(self.assignments)

    @property
    def next_placeholder(self) -> int:
        """Index of the first placeholder after the assignments."""
        return self.start + len(self.values)


def sql_for_partial_update(
    data: Mapping[str, Any],
    aliases: Optional[Dict[str, str]] = None,
    start: int = 1,
) -> PartialUpdate:
    """
    Build the assignment list for an UPDATE from a partial mapping.

    Fragments follow the iteration order of `data`; `values[i]` is bound to
    placeholder `$<start + i>`.

    Raises:
        InvalidUpdateError: `data` is empty
    """
    if not data:
        raise InvalidUpdateError()

    aliases = aliases or {}
    update = PartialUpdate(start=start)
    for offset, (name, value) in enumerate(data.items()):
        column = aliases.get(name, name)
        update.assignments.append(f'"{column}" = ${start + offset}')
        update.values.append(value)
    return update
