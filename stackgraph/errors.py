from __future__ import annotations


class GraphDataError(ValueError):
    """Raised when input series do not have the expected structure."""
