"""API module."""

from .context import get_principals
from .guards import require_mode

__all__ = [
    "get_principals",
    "require_mode",
]
