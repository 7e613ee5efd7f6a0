"""Value objects describing MCP server records and where they came from."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Tuple

_KNOWN_KEYS = ("type", "command", "url", "args", "env")


def _optional_str(value: Any) -> str | None:
    if value is None:
        return None
    return str(value)


@dataclass(frozen=True)
class ServerRecord:
    """One server definition as written in a configuration source."""

    command: str | None = None
    url: str | None = None
    args: Tuple[Any, ...] = ()
    env: Dict[str, Any] = field(default_factory=dict)
    server_type: str | None = None
    extras: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "args", tuple(self.args))
        object.__setattr__(self, "env", dict(self.env))
        object.__setattr__(self, "extras", dict(self.extras))

    def display_target(self) -> str:
        if self.command is not None:
            return self.command
        if self.url is not None:
            return self.url
        return "(unknown)"

    def target_label(self) -> str:
        if self.command is None and self.url is not None:
            return "url"
        return "command"

    def with_args(self, args: Tuple[Any, ...]) -> "ServerRecord":
        return ServerRecord(
            command=self.command,
            url=self.url,
            args=args,
            env=self.env,
            server_type=self.server_type,
            extras=self.extras,
        )

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {}
        if self.server_type is not None:
            payload["type"] = self.server_type
        if self.command is not None:
            payload["command"] = self.command
        if self.url is not None:
            payload["url"] = self.url
        payload["args"] = list(self.args)
        payload["env"] = dict(self.env)
        payload.update(self.extras)
        return payload

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ServerRecord":
        args = data.get("args")
        env = data.get("env")
        return cls(
            command=_optional_str(data.get("command")),
            url=_optional_str(data.get("url")),
            args=tuple(args) if isinstance(args, list) else (),
            env=dict(env) if isinstance(env, dict) else {},
            server_type=_optional_str(data.get("type")),
            extras={key: value for key, value in data.items() if key not in _KNOWN_KEYS},
        )


@dataclass(frozen=True)
class ProvenancedRecord:
    """A record paired with the project directory that declared it."""

    record: ServerRecord
    source_project: str

    def to_dict(self) -> Dict[str, Any]:
        return {"source_project": self.source_project, "server": self.record.to_dict()}


__all__ = ["ProvenancedRecord", "ServerRecord"]
