"""Error taxonomy for server reconciliation."""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence


class ServerAdminError(RuntimeError):
    """Base error carrying a machine-readable code."""

    code = "servers.error"

    def __init__(self, message: str, remediation: Optional[str] = None) -> None:
        super().__init__(message)
        self.remediation = remediation

    def to_dict(self) -> dict[str, object]:
        payload: dict[str, object] = {"code": self.code, "message": str(self)}
        if self.remediation:
            payload["remediation"] = self.remediation
        return payload


class SourceUnreadableError(ServerAdminError):
    """A per-project override file exists but cannot be parsed."""

    code = "source.unreadable"

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"cannot read {path}: {reason}")
        self.path = path


class RegistryUnreadableError(ServerAdminError):
    code = "registry.unreadable"

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(
            f"cannot read global registry {path}: {reason}",
            remediation="Check that the file exists and contains a JSON object, or set MCPADMIN_REGISTRY.",
        )
        self.path = path


class RegistryUnwritableError(ServerAdminError):
    code = "registry.unwritable"

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"cannot update global registry {path}: {reason}")
        self.path = path


class NameNotFoundError(ServerAdminError):
    code = "server.not_found"

    def __init__(self, name: str) -> None:
        super().__init__(f"MCP server '{name}' not found in any project")
        self.name = name


class NotEnabledError(ServerAdminError):
    code = "server.not_enabled"

    def __init__(self, name: str) -> None:
        super().__init__(f"MCP server '{name}' is not enabled in this project")
        self.name = name


class _CandidateError(ServerAdminError):
    """Resolver failure listing every project the caller may pick from."""

    def __init__(self, message: str, name: str, candidates: Sequence[str]) -> None:
        super().__init__(message)
        self.name = name
        self.candidates = tuple(candidates)

    def to_dict(self) -> dict[str, object]:
        payload = super().to_dict()
        payload["candidates"] = list(self.candidates)
        return payload


class AmbiguousSourceError(_CandidateError):
    code = "source.ambiguous"

    def __init__(self, name: str, candidates: Sequence[str]) -> None:
        super().__init__(
            f"Multiple configurations found for '{name}'. Use --from to specify",
            name,
            candidates,
        )


class NoMatchingSourceError(_CandidateError):
    code = "source.no_match"

    def __init__(self, name: str, hint: str, candidates: Sequence[str]) -> None:
        super().__init__(f"No configuration found matching '{hint}'", name, candidates)
        self.hint = hint


__all__ = [
    "AmbiguousSourceError",
    "NameNotFoundError",
    "NoMatchingSourceError",
    "NotEnabledError",
    "RegistryUnreadableError",
    "RegistryUnwritableError",
    "ServerAdminError",
    "SourceUnreadableError",
]
