"""mcpadmin: reconcile MCP server configs across projects."""

__version__ = "0.1.0"

__all__ = ["__version__"]
