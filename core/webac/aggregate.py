"""
Folds matching authorizations into a role map.
"""

from typing import Dict, Iterable, Set

from .authorizations import Authorization

RoleMap = Dict[str, Set[str]]
"""Principal (agent or agent class) to granted mode URIs."""


def aggregate(authorizations: Iterable[Authorization]) -> RoleMap:
    """
    Union the modes granted to each principal.

    Every principal named by any authorization gets the union of modes
    across all of them; nothing is overwritten and order does not matter.
    Authorizations without modes add no keys, so no principal ever maps
    to an empty set. There is no deny: absence is the only denial.

    Args:
        authorizations: Authorizations already known to match

    Returns:
        Fresh role map

    Examples:
        >>> from core.webac.authorizations import Authorization
        >>> aggregate([
        ...     Authorization(agents=frozenset({"a"}), modes=frozenset({"r"})),
        ...     Authorization(agents=frozenset({"a"}), modes=frozenset({"w"})),
        ... ]) == {"a": {"r", "w"}}
        True
    """
    roles: RoleMap = {}

    for auth in authorizations:
        if not auth.modes:
            continue
        for principal in auth.principals:
            roles.setdefault(principal, set()).update(auth.modes)

    return roles
