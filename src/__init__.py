# src/__init__.py — v1
"""bodyforge: cache-backed generation of method bodies for marked classes."""

from bodyforge.codegen.marker import implement
from bodyforge.version import __version__

__all__ = ["__version__", "implement"]
