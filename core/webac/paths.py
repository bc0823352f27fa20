"""
Translation between repository URIs and store paths.

Authorization documents name resources by URI (``info:fedora/acls/01`` or
``http://localhost:8080/rest/acls/01``); the store and the matcher work
with bare paths (``/acls/01``).
"""

import logging
from typing import Iterable, Optional

logger = logging.getLogger(__name__)

DEFAULT_REPOSITORY_PREFIXES = (
    "info:fedora",
    "http://localhost:8080/rest",
)


class PathTranslator:
    """Strips known repository prefixes from URIs."""

    def __init__(self, prefixes: Optional[Iterable[str]] = None):
        if prefixes is None:
            prefixes = DEFAULT_REPOSITORY_PREFIXES
        prefixes = [p.rstrip("/") for p in prefixes if p]
        self.primary = prefixes[0] if prefixes else None
        # Longest first so nested prefixes resolve to the most specific one
        self.prefixes = tuple(sorted(prefixes, key=len, reverse=True))

    def to_path(self, uri: str) -> Optional[str]:
        """
        Translate a URI to a store path.

        Args:
            uri: Absolute repository URI or an already bare path

        Returns:
            The path (always starting with "/"), or None if the URI does not
            belong to this repository

        Examples:
            >>> PathTranslator().to_path("info:fedora/acls/01")
            '/acls/01'
            >>> PathTranslator().to_path("/webacl_box1")
            '/webacl_box1'
            >>> PathTranslator().to_path("http://example.org/elsewhere") is None
            True
        """
        if not uri:
            return None

        for prefix in self.prefixes:
            if uri == prefix:
                return "/"
            if uri.startswith(prefix + "/"):
                return uri[len(prefix):]

        if uri.startswith("/"):
            return uri

        logger.debug(f"URI outside repository prefixes: {uri}")
        return None

    def to_uri(self, path: str) -> str:
        """Render a store path as a URI under the primary prefix."""
        if self.primary is None:
            return path
        return self.primary + (path if path.startswith("/") else "/" + path)


def parent_path(path: str) -> Optional[str]:
    """
    Parent of a slash-delimited path, None for the root.

    Examples:
        >>> parent_path("/webacl_box1/foo")
        '/webacl_box1'
        >>> parent_path("/webacl_box1")
        '/'
        >>> parent_path("/") is None
        True
    """
    trimmed = path.rstrip("/")
    if not trimmed:
        return None
    head, _, _ = trimmed.rpartition("/")
    return head or "/"
