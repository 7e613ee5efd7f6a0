"""Filesystem access to the global registry and per-project override files."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Tuple

from .errors import RegistryUnreadableError, RegistryUnwritableError, SourceUnreadableError

SERVERS_KEY = "mcpServers"
PROJECTS_KEY = "projects"


class GlobalRegistryFile:
    """The user-wide JSON document keyed by project path."""

    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def load_document(self) -> Dict[str, Any]:
        if not self._path.exists():
            raise RegistryUnreadableError(self._path, "file not found")
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError) as exc:
            raise RegistryUnreadableError(self._path, str(exc)) from exc
        except json.JSONDecodeError as exc:
            raise RegistryUnreadableError(self._path, f"invalid JSON ({exc})") from exc
        if not isinstance(data, dict):
            raise RegistryUnreadableError(self._path, "top-level value is not an object")
        return data

    def save_document(self, document: Dict[str, Any]) -> None:
        payload = json.dumps(document, ensure_ascii=False, indent=2) + "\n"
        try:
            self._path.write_text(payload, encoding="utf-8")
        except OSError as exc:
            raise RegistryUnwritableError(self._path, str(exc)) from exc

    @staticmethod
    def project_servers(document: Dict[str, Any]) -> Dict[str, Dict[str, Any]]:
        """Map each known project path to its raw server mapping."""

        projects = document.get(PROJECTS_KEY)
        if not isinstance(projects, dict):
            return {}
        result: Dict[str, Dict[str, Any]] = {}
        for project_path, config in projects.items():
            servers = config.get(SERVERS_KEY) if isinstance(config, dict) else None
            result[str(project_path)] = servers if isinstance(servers, dict) else {}
        return result


class ProjectOverrideFile:
    """Read-only access to ``<project>/.mcp.json`` style files."""

    def __init__(self, filename: str = ".mcp.json") -> None:
        self._filename = filename

    @property
    def filename(self) -> str:
        return self._filename

    def path_for(self, project: str) -> Path:
        return Path(project) / self._filename

    def load(self, project: str) -> Dict[str, Any] | None:
        """Return the file's servers, or None when the file does not exist."""

        path = self.path_for(project)
        if not path.is_file():
            return None
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise SourceUnreadableError(path, str(exc)) from exc
        if not isinstance(data, dict):
            raise SourceUnreadableError(path, "top-level value is not an object")
        servers = data.get(SERVERS_KEY, {})
        if not isinstance(servers, dict):
            raise SourceUnreadableError(path, f"'{SERVERS_KEY}' is not an object")
        return servers


@dataclass
class CollectedSources:
    """Raw server mappings read from disk for one invocation."""

    global_projects: Dict[str, Dict[str, Any]]
    overrides: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    unreadable: List[SourceUnreadableError] = field(default_factory=list)


def collect_sources(registry: GlobalRegistryFile, overrides: ProjectOverrideFile) -> CollectedSources:
    """Read the global registry and the override file of every project it knows."""

    global_projects = registry.project_servers(registry.load_document())
    collected = CollectedSources(global_projects=global_projects)
    for project_path in global_projects:
        try:
            servers = overrides.load(project_path)
        except SourceUnreadableError as exc:
            collected.unreadable.append(exc)
            continue
        if servers is not None:
            collected.overrides[project_path] = servers
    return collected


def load_override_quietly(overrides: ProjectOverrideFile, project: str) -> Tuple[Dict[str, Any], SourceUnreadableError | None]:
    try:
        return overrides.load(project) or {}, None
    except SourceUnreadableError as exc:
        return {}, exc


__all__ = [
    "CollectedSources",
    "GlobalRegistryFile",
    "ProjectOverrideFile",
    "collect_sources",
    "load_override_quietly",
]
