"""Merge records from every source into a by-name registry."""

from __future__ import annotations

from typing import Any, Dict, Iterator, List, Mapping, Tuple

from .value_objects import ProvenancedRecord, ServerRecord

RawServers = Mapping[str, Any]
RawProjects = Mapping[str, RawServers]


class ServerRegistry(Mapping[str, Tuple[ProvenancedRecord, ...]]):
    """Server name to every record found for it, ordered by source project."""

    def __init__(self, entries: Mapping[str, Tuple[ProvenancedRecord, ...]] | None = None) -> None:
        self._entries: Dict[str, Tuple[ProvenancedRecord, ...]] = dict(entries or {})

    def __getitem__(self, name: str) -> Tuple[ProvenancedRecord, ...]:
        return self._entries[name]

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._entries))

    def __len__(self) -> int:
        return len(self._entries)

    def records_for(self, name: str) -> Tuple[ProvenancedRecord, ...]:
        return self._entries.get(name, ())


def _append_source(collected: Dict[str, List[ProvenancedRecord]], projects: RawProjects) -> None:
    for project_path, servers in projects.items():
        if not isinstance(servers, Mapping):
            continue
        for name, raw in servers.items():
            if not isinstance(raw, Mapping):
                continue
            entry = ProvenancedRecord(record=ServerRecord.from_dict(raw), source_project=str(project_path))
            collected.setdefault(str(name), []).append(entry)


def aggregate(global_projects: RawProjects, overrides: RawProjects | None = None) -> ServerRegistry:
    """Build a registry from the global source and per-project override sources.

    Both arguments map a project path to that project's raw ``mcpServers``
    mapping. Nothing is overwritten here: a name declared by several projects,
    or by both sources for the same project, keeps every contribution.
    """

    collected: Dict[str, List[ProvenancedRecord]] = {}
    _append_source(collected, global_projects)
    _append_source(collected, overrides or {})
    ordered = {
        name: tuple(sorted(records, key=lambda item: item.source_project))
        for name, records in collected.items()
    }
    return ServerRegistry(ordered)


def active_view(
    global_projects: RawProjects,
    project: str,
    override_servers: RawServers | None = None,
) -> Dict[str, ServerRecord]:
    """Servers effective for ``project``; the override file wins on collisions."""

    view: Dict[str, ServerRecord] = {}
    for source in (global_projects.get(project) or {}, override_servers or {}):
        if not isinstance(source, Mapping):
            continue
        for name, raw in source.items():
            if isinstance(raw, Mapping):
                view[str(name)] = ServerRecord.from_dict(raw)
    return view


__all__ = ["ServerRegistry", "active_view", "aggregate"]
