"""
Role resolution for WebAC-protected resources.

Resolves the effective roles on a resource in four steps:
- locate the governing ACL (own or inherited)
- load its authorizations
- keep those matching the resource
- union the modes per principal
"""

import logging
from typing import Any, Iterable, Optional, Tuple

from core.metrics import (
    record_webac_resolution,
    record_webac_resolution_error,
    time_operation,
)

from .aggregate import RoleMap, aggregate
from .authorizations import load_authorizations
from .errors import StoreAccessError
from .locator import locate
from .matcher import filter_matching
from .paths import PathTranslator
from .store import ResourceView, StoreSession

logger = logging.getLogger(__name__)


# ============================================================================
# Roles Provider
# ============================================================================

class WebACRolesProvider:
    """
    Computes role maps from the live state of the store.

    Holds only immutable configuration; every call reads through the
    session it is given, so one provider can serve concurrent requests.
    """

    def __init__(
        self,
        repository_prefixes: Optional[Iterable[str]] = None,
        cache: Optional[Any] = None,
    ):
        """
        Initialize roles provider.

        Args:
            repository_prefixes: URI prefixes under which store paths are
                published (e.g. "info:fedora"); defaults cover the usual
                internal and HTTP forms
            cache: Optional RoleMapCache consulted before resolving
        """
        self.translator = PathTranslator(repository_prefixes)
        self.cache = cache

    def get_roles(self, resource: ResourceView, session: StoreSession) -> RoleMap:
        """
        Resolve the role map for a resource.

        Args:
            resource: Node being queried
            session: Store session to read the ACL through

        Returns:
            Principal to granted modes; empty when no ACL applies

        Raises:
            StoreAccessError: If the store fails mid-resolution
        """
        if self.cache is not None:
            cached = self.cache.get(resource.path)
            if cached is not None:
                return cached

        try:
            with time_operation("webac.resolve"):
                roles, acl_path = self._resolve(resource, session)
        except StoreAccessError as e:
            logger.error(f"Store failure resolving roles for {resource.path}: {e}")
            record_webac_resolution_error(type(e).__name__)
            raise

        if self.cache is not None:
            self.cache.set(resource.path, roles, acl_path=acl_path)

        return roles

    def _resolve(self, resource: ResourceView, session: StoreSession) -> Tuple[RoleMap, Optional[str]]:
        """Resolve uncached; also returns the governing ACL path, if any."""
        located = locate(resource, session, self.translator)
        if located is None:
            record_webac_resolution(acl_found=False)
            return {}, None

        acl, subject_path = located
        authorizations = load_authorizations(acl, self.translator)
        matching = filter_matching(authorizations, subject_path, resource.types)
        roles = aggregate(matching)

        logger.debug(
            f"Resolved roles for {resource.path}: acl={acl.path}, "
            f"subject={subject_path}, matched={len(matching)}/{len(authorizations)}, "
            f"principals={sorted(roles)}"
        )
        record_webac_resolution(
            acl_found=True,
            principal_count=len(roles),
            authorization_count=len(authorizations),
        )
        return roles, acl.path


def resolve_roles(
    resource: ResourceView,
    session: StoreSession,
    provider: Optional[WebACRolesProvider] = None,
) -> RoleMap:
    """
    Resolve the role map for a resource with the global provider.

    Args:
        resource: Node being queried
        session: Store session to read through
        provider: Overrides the globally configured provider

    Returns:
        Principal to granted modes
    """
    return (provider or get_provider()).get_roles(resource, session)


# ============================================================================
# Global Provider Instance
# ============================================================================

_global_provider: Optional[WebACRolesProvider] = None


def get_provider() -> WebACRolesProvider:
    """
    Get the global roles provider, creating a default one if needed.

    Returns:
        Global WebACRolesProvider instance
    """
    global _global_provider

    if _global_provider is None:
        logger.warning("Using default WebAC roles provider (not configured)")
        _global_provider = WebACRolesProvider()

    return _global_provider


def configure_provider(
    repository_prefixes: Optional[Iterable[str]] = None,
    cache: Optional[Any] = None,
) -> WebACRolesProvider:
    """
    Configure the global roles provider.

    Args:
        repository_prefixes: URI prefixes under which store paths are published
        cache: Optional RoleMapCache placed in front of resolution

    Returns:
        Configured WebACRolesProvider instance
    """
    global _global_provider

    _global_provider = WebACRolesProvider(
        repository_prefixes=repository_prefixes,
        cache=cache,
    )

    logger.info(f"Configured WebAC roles provider with prefixes {_global_provider.translator.prefixes}")
    return _global_provider


def reset_provider():
    """Reset the global provider (useful for testing)."""
    global _global_provider
    _global_provider = None
