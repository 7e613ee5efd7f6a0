"""Domain primitives for reconciling MCP server configs across projects."""

from .equivalence import PROJECT_PLACEHOLDER, FieldDivergence, differs, divergences, normalize_args
from .errors import (
    AmbiguousSourceError,
    NameNotFoundError,
    NoMatchingSourceError,
    NotEnabledError,
    RegistryUnreadableError,
    RegistryUnwritableError,
    ServerAdminError,
    SourceUnreadableError,
)
from .mutator import RegistryMutator, rebase_args
from .registry import ServerRegistry, active_view, aggregate
from .repository import GlobalRegistryFile, ProjectOverrideFile, collect_sources
from .resolver import resolve
from .value_objects import ProvenancedRecord, ServerRecord

__all__ = [
    "AmbiguousSourceError",
    "FieldDivergence",
    "GlobalRegistryFile",
    "NameNotFoundError",
    "NoMatchingSourceError",
    "NotEnabledError",
    "PROJECT_PLACEHOLDER",
    "ProjectOverrideFile",
    "ProvenancedRecord",
    "RegistryMutator",
    "RegistryUnreadableError",
    "RegistryUnwritableError",
    "ServerAdminError",
    "ServerRecord",
    "ServerRegistry",
    "SourceUnreadableError",
    "active_view",
    "aggregate",
    "collect_sources",
    "differs",
    "divergences",
    "normalize_args",
    "rebase_args",
    "resolve",
]
