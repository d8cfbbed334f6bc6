"""Public interface re-exports for jobsuche_core."""

from jobsuche_core.interfaces.search import SearchClient

__all__ = ["SearchClient"]
