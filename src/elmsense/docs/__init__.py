"""Documentation lookup for dependency declarations."""

from elmsense.docs.index import DocumentationIndex, find_declaration

__all__ = ["DocumentationIndex", "find_declaration"]
