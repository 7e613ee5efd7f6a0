from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable

import pytest

from mcpadmin.app.servers import ServerAdminService
from mcpadmin.domain.servers import (
    AmbiguousSourceError,
    GlobalRegistryFile,
    NameNotFoundError,
    NotEnabledError,
    ProjectOverrideFile,
)


@pytest.fixture()
def paths(workspace: Path) -> dict[str, str]:
    return {name: str(workspace / name) for name in ("alpha", "beta", "gamma")}


def _service(registry: Path) -> ServerAdminService:
    return ServerAdminService(registry_file=GlobalRegistryFile(registry), overrides=ProjectOverrideFile())


def _registry_servers(registry: Path, project: str) -> dict[str, Any]:
    document = json.loads(registry.read_text(encoding="utf-8"))
    return document["projects"].get(project, {}).get("mcpServers", {})


def test_equivalent_copies_install_without_hint(
    workspace: Path, paths: dict[str, str], write_json: Callable[[Path, Any], Path]
) -> None:
    alpha, beta, gamma = paths["alpha"], paths["beta"], paths["gamma"]
    registry = write_json(
        workspace / "claude.json",
        {
            "projects": {
                alpha: {"mcpServers": {"foo": {"command": "run", "args": [f"{alpha}/data"]}}},
                beta: {"mcpServers": {"foo": {"command": "run", "args": [f"{beta}/data"]}}},
            }
        },
    )
    service = _service(registry)

    assert [item.divergent for item in service.list_servers(gamma).servers] == [False]
    outcome = service.add("foo", gamma)

    assert outcome.status == "added"
    assert outcome.source_project == alpha
    assert _registry_servers(registry, gamma)["foo"]["args"] == [f"{gamma}/data"]
    assert service.show("foo", gamma).enabled is True


def test_divergent_copies_require_hint(
    workspace: Path, paths: dict[str, str], write_json: Callable[[Path, Any], Path]
) -> None:
    alpha, beta, gamma = paths["alpha"], paths["beta"], paths["gamma"]
    registry = write_json(
        workspace / "claude.json",
        {
            "projects": {
                alpha: {"mcpServers": {"foo": {"command": "run-v1"}}},
                beta: {"mcpServers": {"foo": {"command": "run-v2"}}},
            }
        },
    )
    service = _service(registry)

    with pytest.raises(AmbiguousSourceError) as excinfo:
        service.add("foo", gamma)
    assert excinfo.value.candidates == (alpha, beta)
    assert gamma not in json.loads(registry.read_text(encoding="utf-8"))["projects"]

    outcome = service.add("foo", gamma, hint="beta")
    assert outcome.record is not None and outcome.record.command == "run-v2"
    assert _registry_servers(registry, gamma)["foo"]["command"] == "run-v2"


def test_add_reports_already_enabled(
    workspace: Path, paths: dict[str, str], write_json: Callable[[Path, Any], Path]
) -> None:
    alpha = paths["alpha"]
    registry = write_json(workspace / "claude.json", {"projects": {alpha: {"mcpServers": {}}}})
    write_json(workspace / "alpha" / ".mcp.json", {"mcpServers": {"foo": {"command": "run"}}})
    before = registry.read_text(encoding="utf-8")

    outcome = _service(registry).add("foo", alpha)

    assert outcome.status == "already-enabled"
    assert registry.read_text(encoding="utf-8") == before


def test_add_unknown_name(workspace: Path, paths: dict[str, str], write_json: Callable[[Path, Any], Path]) -> None:
    registry = write_json(workspace / "claude.json", {"projects": {}})
    with pytest.raises(NameNotFoundError):
        _service(registry).add("ghost", paths["alpha"])


def test_remove_global_entry(workspace: Path, paths: dict[str, str], write_json: Callable[[Path, Any], Path]) -> None:
    alpha, beta = paths["alpha"], paths["beta"]
    registry = write_json(
        workspace / "claude.json",
        {
            "projects": {
                alpha: {"mcpServers": {"foo": {"command": "run"}, "bar": {"command": "bar"}}},
                beta: {"mcpServers": {"foo": {"command": "run"}}},
            }
        },
    )

    outcome = _service(registry).remove("foo", alpha)

    assert outcome.status == "removed"
    assert list(_registry_servers(registry, alpha)) == ["bar"]
    assert list(_registry_servers(registry, beta)) == ["foo"]


def test_remove_refuses_override_entries(
    workspace: Path, paths: dict[str, str], write_json: Callable[[Path, Any], Path]
) -> None:
    alpha = paths["alpha"]
    registry = write_json(workspace / "claude.json", {"projects": {alpha: {"mcpServers": {"foo": {"command": "g"}}}}})
    write_json(workspace / "alpha" / ".mcp.json", {"mcpServers": {"foo": {"command": "local"}}})

    outcome = _service(registry).remove("foo", alpha)

    assert outcome.status == "override"
    assert outcome.override_path == workspace / "alpha" / ".mcp.json"
    assert "foo" in _registry_servers(registry, alpha)


def test_remove_not_enabled(workspace: Path, paths: dict[str, str], write_json: Callable[[Path, Any], Path]) -> None:
    registry = write_json(workspace / "claude.json", {"projects": {paths["beta"]: {"mcpServers": {"foo": {}}}}})
    with pytest.raises(NotEnabledError):
        _service(registry).remove("foo", paths["alpha"])


def test_listing_includes_override_only_servers_and_skips_broken_files(
    workspace: Path, paths: dict[str, str], write_json: Callable[[Path, Any], Path]
) -> None:
    alpha, beta = paths["alpha"], paths["beta"]
    registry = write_json(
        workspace / "claude.json",
        {"projects": {alpha: {"mcpServers": {"foo": {"command": "run"}}}, beta: {}}},
    )
    write_json(workspace / "alpha" / ".mcp.json", {"mcpServers": {"local": {"url": "http://local"}}})
    (workspace / "beta" / ".mcp.json").write_text("{broken", encoding="utf-8")

    listing = _service(registry).list_servers(alpha)

    assert [item.name for item in listing.servers] == ["foo", "local"]
    assert listing.enabled_count == 2
    assert listing.unreadable_sources == (str(workspace / "beta" / ".mcp.json"),)
    assert listing.to_dict()["servers"][1]["target"] == "http://local"


def test_show_detail_marks_divergent_configurations(
    workspace: Path, paths: dict[str, str], write_json: Callable[[Path, Any], Path]
) -> None:
    alpha, beta = paths["alpha"], paths["beta"]
    registry = write_json(
        workspace / "claude.json",
        {
            "projects": {
                alpha: {"mcpServers": {"foo": {"command": "run", "env": {"K": "1"}}}},
                beta: {"mcpServers": {"foo": {"command": "run"}}},
            }
        },
    )

    detail = _service(registry).show("foo", paths["gamma"])

    assert detail.enabled is False
    assert [item["differs"] for item in detail.to_dict()["configurations"]] == [False, True]
    assert detail.divergences[1].env_missing is True
