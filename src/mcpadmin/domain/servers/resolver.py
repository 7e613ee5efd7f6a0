"""Pick the single record a mutating command should act on."""

from __future__ import annotations

from typing import Sequence

from .equivalence import differs
from .errors import AmbiguousSourceError, NameNotFoundError, NoMatchingSourceError
from .value_objects import ProvenancedRecord


def resolve(name: str, records: Sequence[ProvenancedRecord], hint: str | None = None) -> ProvenancedRecord:
    """Return one record for ``name``.

    A hint selects the first record whose source project contains it. Without
    a hint, equivalent copies are interchangeable and the first one wins;
    copies that genuinely disagree are never guessed between.
    """

    if not records:
        raise NameNotFoundError(name)
    candidates = [item.source_project for item in records]
    if hint is not None:
        for item in records:
            if hint in item.source_project:
                return item
        raise NoMatchingSourceError(name, hint, candidates)
    if len(records) == 1 or not differs(records):
        return records[0]
    raise AmbiguousSourceError(name, candidates)


__all__ = ["resolve"]
