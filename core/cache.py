#!/usr/bin/env python3
"""
core/cache.py - Short-lived cache of resolved WebAC role maps.

Sits in front of role resolution, never inside it.

Features:
- TTL-based caching keyed by resource path
- Subtree invalidation (an ACL change affects every descendant)
- Copies on the way in and out so callers cannot corrupt entries
- Thread-safe operations
- Metrics tracking
"""

import time
import threading
from typing import Any, Dict, Optional, Set
from dataclasses import dataclass

from core.metrics import increment_counter


@dataclass
class CacheEntry:
    """Single cache entry with TTL."""
    key: str
    value: Dict[str, Set[str]]
    created_at: float
    ttl_seconds: float
    acl_path: Optional[str] = None  # ACL the value was resolved from

    def is_expired(self, now: Optional[float] = None) -> bool:
        """Check if entry is expired."""
        now = now or time.time()
        return (now - self.created_at) >= self.ttl_seconds


def _copy_roles(roles: Dict[str, Set[str]]) -> Dict[str, Set[str]]:
    return {principal: set(modes) for principal, modes in roles.items()}


def _in_subtree(path: str, root: str) -> bool:
    if root == "/":
        return True
    root = root.rstrip("/")
    return path == root or path.startswith(root + "/")


class RoleMapCache:
    """
    Short-lived cache of role maps by resource path.

    Invalidate with ``invalidate(path)`` whenever something under ``path``
    changes: an ACL or one of its authorizations (pass the ACL path), or an
    acl:accessControl link (pass the node declaring it). Entries are dropped
    if their resource or their governing ACL lies in that subtree.
    """

    def __init__(self, ttl_seconds: float = 60.0, cleanup_interval: float = 30.0):
        """
        Initialize role map cache.

        Args:
            ttl_seconds: Lifetime of each entry (seconds)
            cleanup_interval: How often to sweep expired entries (seconds)
        """
        if ttl_seconds <= 0:
            raise ValueError(f"ttl_seconds must be positive, got {ttl_seconds}")

        self.ttl_seconds = ttl_seconds
        self.cleanup_interval = cleanup_interval

        self._entries: Dict[str, CacheEntry] = {}
        self._lock = threading.RLock()
        self._last_cleanup = time.time()

    def _cleanup_expired(self, force: bool = False):
        """
        Cleanup expired entries.

        Args:
            force: Force cleanup regardless of interval
        """
        now = time.time()

        if not force and (now - self._last_cleanup) < self.cleanup_interval:
            return

        with self._lock:
            expired = [key for key, entry in self._entries.items() if entry.is_expired(now)]
            for key in expired:
                self._entries.pop(key, None)

            self._last_cleanup = now

            if expired:
                increment_counter("webac.cache.expired", value=len(expired))

    def get(self, path: str) -> Optional[Dict[str, Set[str]]]:
        """
        Get the cached role map for a path.

        Args:
            path: Resource path

        Returns:
            Copy of the cached role map, or None on a miss
        """
        with self._lock:
            self._cleanup_expired()

            entry = self._entries.get(path)

            if entry is None:
                increment_counter("webac.cache.miss")
                return None

            if entry.is_expired():
                self._entries.pop(path, None)
                increment_counter("webac.cache.miss", labels={"reason": "expired"})
                return None

            increment_counter("webac.cache.hit")
            return _copy_roles(entry.value)

    def set(self, path: str, roles: Dict[str, Set[str]], acl_path: Optional[str] = None):
        """
        Cache the role map for a path.

        Args:
            path: Resource path
            roles: Resolved role map
            acl_path: Path of the ACL the roles came from, None if no ACL applied
        """
        with self._lock:
            self._entries[path] = CacheEntry(
                key=path,
                value=_copy_roles(roles),
                created_at=time.time(),
                ttl_seconds=self.ttl_seconds,
                acl_path=acl_path,
            )
            increment_counter("webac.cache.set")

    def invalidate(self, path: str) -> int:
        """
        Drop entries for resources at or below ``path``, and entries whose
        governing ACL is at or below ``path`` or contains it (a single
        authorization changed).

        Args:
            path: Root of the changed subtree

        Returns:
            Number of entries dropped
        """
        with self._lock:
            stale = [
                key for key, entry in self._entries.items()
                if _in_subtree(key, path)
                or (entry.acl_path is not None and (
                    _in_subtree(entry.acl_path, path) or _in_subtree(path, entry.acl_path)
                ))
            ]
            for key in stale:
                del self._entries[key]

            if stale:
                increment_counter("webac.cache.invalidated", value=len(stale))
            return len(stale)

    def invalidate_all(self):
        """Clear all cache entries."""
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
            increment_counter("webac.cache.invalidated", value=count, labels={"trigger": "manual"})

    def get_stats(self) -> Dict[str, Any]:
        """
        Get cache statistics.

        Returns:
            Dictionary with cache stats
        """
        with self._lock:
            return {
                "count": len(self._entries),
                "ttl": self.ttl_seconds,
                "last_cleanup": self._last_cleanup,
            }
