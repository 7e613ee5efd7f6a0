"""Apply add/remove decisions to the global registry document."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Sequence, Tuple

from .errors import RegistryUnwritableError
from .repository import PROJECTS_KEY, SERVERS_KEY, GlobalRegistryFile
from .value_objects import ProvenancedRecord, ServerRecord


def rebase_args(args: Sequence[Any], source_project: str, destination: str) -> Tuple[Any, ...]:
    """Point arguments that embed ``source_project`` at ``destination``."""

    if not source_project:
        return tuple(args)
    return tuple(
        arg.replace(source_project, destination) if isinstance(arg, str) and source_project in arg else arg
        for arg in args
    )


def _child_object(parent: Dict[str, Any], key: str, path: Path) -> Dict[str, Any]:
    if key not in parent:
        parent[key] = {}
    child = parent[key]
    if not isinstance(child, dict):
        raise RegistryUnwritableError(path, f"'{key}' is not an object")
    return child


def install_into_document(
    document: Dict[str, Any],
    name: str,
    record: ServerRecord,
    destination: str,
    *,
    path: Path,
) -> None:
    projects = _child_object(document, PROJECTS_KEY, path)
    project_entry = _child_object(projects, destination, path)
    servers = _child_object(project_entry, SERVERS_KEY, path)
    servers[name] = record.to_dict()


def uninstall_from_document(document: Dict[str, Any], name: str, destination: str) -> bool:
    projects = document.get(PROJECTS_KEY)
    project_entry = projects.get(destination) if isinstance(projects, dict) else None
    servers = project_entry.get(SERVERS_KEY) if isinstance(project_entry, dict) else None
    if not isinstance(servers, dict) or name not in servers:
        return False
    del servers[name]
    return True


class RegistryMutator:
    """Read-modify-write operations against the global registry file.

    The whole document is loaded and written back so unrelated projects,
    servers and top-level keys survive untouched apart from formatting.
    """

    def __init__(self, repository: GlobalRegistryFile) -> None:
        self._repository = repository

    def install(self, name: str, chosen: ProvenancedRecord, destination: str) -> ServerRecord:
        adapted = chosen.record.with_args(rebase_args(chosen.record.args, chosen.source_project, destination))
        document = self._repository.load_document()
        install_into_document(document, name, adapted, destination, path=self._repository.path)
        self._repository.save_document(document)
        return adapted

    def uninstall(self, name: str, destination: str) -> bool:
        document = self._repository.load_document()
        removed = uninstall_from_document(document, name, destination)
        if removed:
            self._repository.save_document(document)
        return removed


__all__ = [
    "RegistryMutator",
    "install_into_document",
    "rebase_args",
    "uninstall_from_document",
]
