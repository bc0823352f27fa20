"""
Enforcement on top of resolved role maps.

The role engine answers "who holds which modes here"; this module answers
"may these principals do this", which is a set lookup against that answer.
"""

import logging
from typing import AbstractSet, Dict, Iterable, Optional

from .aggregate import RoleMap
from .paths import parent_path
from .resolve import WebACRolesProvider, get_provider
from .store import ResourceView, StoreSession
from .vocab import MODE_APPEND, MODE_CONTROL, MODE_READ, MODE_WRITE

logger = logging.getLogger(__name__)


# ============================================================================
# Action to Mode Mapping
# ============================================================================

ACTION_MODES: Dict[str, str] = {
    "read": MODE_READ,
    "add_node": MODE_WRITE,
    "set_property": MODE_WRITE,
    "remove": MODE_WRITE,
    "remove_childnodes": MODE_WRITE,
    "append": MODE_APPEND,
    "read_access_control": MODE_CONTROL,
    "modify_access_control": MODE_CONTROL,
}

# Modes that also satisfy a requested mode
IMPLIED_BY: Dict[str, AbstractSet[str]] = {
    MODE_APPEND: frozenset({MODE_WRITE}),
}


def has_mode(roles: RoleMap, principals: Iterable[str], mode: str) -> bool:
    """
    Check if any principal holds a mode in a role map.

    Args:
        roles: Resolved role map
        principals: Agent and agent class identifiers of the caller
        mode: Mode URI required

    Returns:
        True if some principal was granted the mode (or one implying it)

    Examples:
        >>> has_mode({"smith123": {MODE_READ}}, ["smith123"], MODE_READ)
        True
        >>> has_mode({"smith123": {MODE_WRITE}}, ["smith123"], MODE_APPEND)
        True
        >>> has_mode({"smith123": {MODE_READ}}, ["jones"], MODE_READ)
        False
    """
    acceptable = {mode} | set(IMPLIED_BY.get(mode, ()))
    return any(
        not acceptable.isdisjoint(roles.get(principal, ()))
        for principal in principals
    )


# ============================================================================
# Authorization Delegate
# ============================================================================

class WebACAuthorizationDelegate:
    """Decides repository actions for a set of principals."""

    def __init__(self, provider: Optional[WebACRolesProvider] = None):
        self._provider = provider

    @property
    def provider(self) -> WebACRolesProvider:
        return self._provider or get_provider()

    def roles_have_permission(
        self,
        session: StoreSession,
        abs_path: str,
        actions: Iterable[str],
        principals: AbstractSet[str],
    ) -> bool:
        """
        Check if the principals may perform every action at a path.

        Paths that do not exist yet are checked against their nearest
        existing ancestor. Unknown actions, an empty action list, empty
        principals, or no existing ancestor all deny.

        Args:
            session: Store session to read through
            abs_path: Target store path
            actions: Repository action names (see ACTION_MODES)
            principals: Caller's agent and agent class identifiers

        Returns:
            True only if every action is permitted

        Raises:
            StoreAccessError: If the store cannot answer
        """
        actions = list(actions)
        if not actions or not principals:
            return False

        required = set()
        for action in actions:
            mode = ACTION_MODES.get(action)
            if mode is None:
                logger.warning(f"Unknown action '{action}' requested on {abs_path}, denying")
                return False
            required.add(mode)

        resource = self.nearest_existing(session, abs_path)
        if resource is None:
            logger.debug(f"No existing resource at or above {abs_path}, denying")
            return False

        roles = self.provider.get_roles(resource, session)
        allowed = all(has_mode(roles, principals, mode) for mode in required)

        logger.debug(
            f"Permission check at {abs_path} (via {resource.path}): "
            f"actions={actions}, principals={sorted(principals)}, allowed={allowed}"
        )
        return allowed

    @staticmethod
    def nearest_existing(session: StoreSession, abs_path: str) -> Optional[ResourceView]:
        """Find the node at ``abs_path`` or its closest existing ancestor."""
        path = abs_path
        while path is not None:
            resource = session.find(path)
            if resource is not None:
                return resource
            path = parent_path(path)
        return None
