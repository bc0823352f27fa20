"""
Decides whether an authorization applies to a resource.
"""

from typing import AbstractSet, Iterable, List

from .authorizations import Authorization


def matches(
    auth: Authorization,
    subject_path: str,
    resource_types: AbstractSet[str],
) -> bool:
    """
    Check if an authorization applies.

    Two independent scopes are tested:

    - acl:accessTo names ``subject_path``, the path of the node that
      declared the ACL (not the queried node when the ACL was inherited)
    - acl:accessToClass shares a type with ``resource_types``, the types
      of the queried node itself

    An authorization with neither scope never matches.

    Args:
        auth: Parsed authorization
        subject_path: Path where the governing ACL was found
        resource_types: Declared types of the queried resource

    Returns:
        True if the authorization applies

    Examples:
        >>> auth = Authorization(access_to=frozenset({"/webacl_box1"}))
        >>> matches(auth, "/webacl_box1", frozenset())
        True
        >>> matches(auth, "/webacl_box2", frozenset())
        False
    """
    if subject_path in auth.access_to:
        return True
    return not auth.access_to_class.isdisjoint(resource_types)


def filter_matching(
    authorizations: Iterable[Authorization],
    subject_path: str,
    resource_types: AbstractSet[str],
) -> List[Authorization]:
    """Keep only the authorizations that apply."""
    return [
        auth for auth in authorizations
        if matches(auth, subject_path, resource_types)
    ]
