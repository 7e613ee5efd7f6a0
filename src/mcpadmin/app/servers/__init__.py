from .service import (
    AddOutcome,
    RemoveOutcome,
    ServerAdminService,
    ServerDetail,
    ServerListing,
    ServerSnapshot,
    ServerSummary,
)

__all__ = [
    "AddOutcome",
    "RemoveOutcome",
    "ServerAdminService",
    "ServerDetail",
    "ServerListing",
    "ServerSnapshot",
    "ServerSummary",
]
