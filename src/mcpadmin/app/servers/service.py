"""Application service behind the list/show/add/remove commands."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, FrozenSet, List, Tuple

from mcpadmin.domain.servers import (
    FieldDivergence,
    GlobalRegistryFile,
    NameNotFoundError,
    NotEnabledError,
    ProjectOverrideFile,
    ProvenancedRecord,
    RegistryMutator,
    ServerRecord,
    ServerRegistry,
    active_view,
    aggregate,
    collect_sources,
    differs,
    divergences,
    resolve,
)
from mcpadmin.domain.servers.repository import load_override_quietly
from mcpadmin.settings import RuntimeSettings


@dataclass(frozen=True)
class ServerSnapshot:
    """Everything one invocation knows about servers, relative to a project."""

    project: str
    registry: ServerRegistry
    active: Dict[str, ServerRecord]
    override_names: FrozenSet[str] = frozenset()
    unreadable_sources: Tuple[str, ...] = ()


@dataclass(frozen=True)
class ServerSummary:
    name: str
    records: Tuple[ProvenancedRecord, ...]
    enabled: bool
    divergent: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "enabled": self.enabled,
            "divergent": self.divergent,
            "projects": [item.source_project for item in self.records],
            "target": self.records[0].record.display_target() if self.records else None,
        }


@dataclass(frozen=True)
class ServerListing:
    project: str
    servers: List[ServerSummary]
    enabled_count: int
    unreadable_sources: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "project": self.project,
            "servers": [item.to_dict() for item in self.servers],
            "total": len(self.servers),
            "enabled": self.enabled_count,
        }


@dataclass(frozen=True)
class ServerDetail:
    name: str
    enabled: bool
    records: Tuple[ProvenancedRecord, ...]
    divergences: List[FieldDivergence] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        configurations = []
        for item, divergence in zip(self.records, self.divergences):
            payload = item.to_dict()
            payload["differs"] = divergence.any
            configurations.append(payload)
        return {"name": self.name, "enabled": self.enabled, "configurations": configurations}


@dataclass(frozen=True)
class AddOutcome:
    status: str
    name: str
    project: str
    record: ServerRecord | None = None
    source_project: str | None = None

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"status": self.status, "name": self.name, "project": self.project}
        if self.record is not None:
            payload["server"] = self.record.to_dict()
        if self.source_project is not None:
            payload["source_project"] = self.source_project
        return payload


@dataclass(frozen=True)
class RemoveOutcome:
    status: str
    name: str
    project: str
    override_path: Path | None = None

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"status": self.status, "name": self.name, "project": self.project}
        if self.override_path is not None:
            payload["override_path"] = str(self.override_path)
        return payload


@dataclass
class ServerAdminService:
    """Coordinates sources, reconciliation and registry mutation."""

    registry_file: GlobalRegistryFile
    overrides: ProjectOverrideFile

    @classmethod
    def from_settings(cls, settings: RuntimeSettings) -> "ServerAdminService":
        return cls(
            registry_file=GlobalRegistryFile(settings.registry_file),
            overrides=ProjectOverrideFile(settings.override_filename),
        )

    def snapshot(self, project: str) -> ServerSnapshot:
        collected = collect_sources(self.registry_file, self.overrides)
        unreadable = [str(exc.path) for exc in collected.unreadable]
        if project in collected.overrides:
            local = collected.overrides[project]
        else:
            local, error = load_override_quietly(self.overrides, project)
            if error is not None and str(error.path) not in unreadable:
                unreadable.append(str(error.path))
        return ServerSnapshot(
            project=project,
            registry=aggregate(collected.global_projects, collected.overrides),
            active=active_view(collected.global_projects, project, local),
            override_names=frozenset(local),
            unreadable_sources=tuple(unreadable),
        )

    def list_servers(self, project: str) -> ServerListing:
        snapshot = self.snapshot(project)
        summaries = [
            ServerSummary(
                name=name,
                records=records,
                enabled=name in snapshot.active,
                divergent=differs(records),
            )
            for name, records in snapshot.registry.items()
        ]
        return ServerListing(
            project=project,
            servers=summaries,
            enabled_count=len(snapshot.active),
            unreadable_sources=snapshot.unreadable_sources,
        )

    def show(self, name: str, project: str) -> ServerDetail:
        snapshot = self.snapshot(project)
        records = snapshot.registry.records_for(name)
        if not records:
            raise NameNotFoundError(name)
        return ServerDetail(
            name=name,
            enabled=name in snapshot.active,
            records=records,
            divergences=divergences(records),
        )

    def add(self, name: str, project: str, *, hint: str | None = None) -> AddOutcome:
        snapshot = self.snapshot(project)
        if name in snapshot.active:
            return AddOutcome(status="already-enabled", name=name, project=project)
        chosen = resolve(name, snapshot.registry.records_for(name), hint)
        installed = RegistryMutator(self.registry_file).install(name, chosen, project)
        return AddOutcome(
            status="added",
            name=name,
            project=project,
            record=installed,
            source_project=chosen.source_project,
        )

    def remove(self, name: str, project: str) -> RemoveOutcome:
        snapshot = self.snapshot(project)
        if name not in snapshot.active:
            raise NotEnabledError(name)
        if name in snapshot.override_names:
            return RemoveOutcome(
                status="override",
                name=name,
                project=project,
                override_path=self.overrides.path_for(project),
            )
        if not RegistryMutator(self.registry_file).uninstall(name, project):
            raise NotEnabledError(name)
        return RemoveOutcome(status="removed", name=name, project=project)


__all__ = [
    "AddOutcome",
    "RemoveOutcome",
    "ServerAdminService",
    "ServerDetail",
    "ServerListing",
    "ServerSnapshot",
    "ServerSummary",
]
