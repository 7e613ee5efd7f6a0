"""Decide whether records for one name describe the same configuration.

Each record's arguments are compared with its own project path replaced by a
placeholder, so a server deployed identically in two projects that each embed
their own absolute path is not reported as divergent.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Sequence, Tuple

from .value_objects import ProvenancedRecord

PROJECT_PLACEHOLDER = "<PROJECT>"


def normalize_args(args: Sequence[Any], project: str) -> List[Any]:
    if not project:
        return list(args)
    return [arg.replace(project, PROJECT_PLACEHOLDER) if isinstance(arg, str) else arg for arg in args]


@dataclass(frozen=True)
class FieldDivergence:
    """Fields of a record that disagree with the baseline record."""

    command: bool = False
    url: bool = False
    args: bool = False
    arg_indices: Tuple[int, ...] = ()
    env: bool = False
    env_missing: bool = False

    @property
    def any(self) -> bool:
        return self.command or self.url or self.args or self.env


def compare_to_baseline(baseline: ProvenancedRecord, candidate: ProvenancedRecord) -> FieldDivergence:
    base_args = normalize_args(baseline.record.args, baseline.source_project)
    cand_args = normalize_args(candidate.record.args, candidate.source_project)
    args_differ = base_args != cand_args
    indices: Tuple[int, ...] = ()
    if args_differ:
        indices = tuple(
            index
            for index, value in enumerate(cand_args)
            if index >= len(base_args) or base_args[index] != value
        )
    env_differ = candidate.record.env != baseline.record.env
    return FieldDivergence(
        command=candidate.record.command != baseline.record.command,
        url=candidate.record.url != baseline.record.url,
        args=args_differ,
        arg_indices=indices,
        env=env_differ,
        env_missing=env_differ and not candidate.record.env,
    )


def divergences(records: Sequence[ProvenancedRecord]) -> List[FieldDivergence]:
    """Compare every record to the first; the first never diverges."""

    if not records:
        return []
    baseline = records[0]
    return [FieldDivergence()] + [compare_to_baseline(baseline, item) for item in records[1:]]


def differs(records: Sequence[ProvenancedRecord]) -> bool:
    if len(records) <= 1:
        return False
    baseline = records[0]
    return any(compare_to_baseline(baseline, item).any for item in records[1:])


__all__ = [
    "FieldDivergence",
    "PROJECT_PLACEHOLDER",
    "compare_to_baseline",
    "differs",
    "divergences",
    "normalize_args",
]
