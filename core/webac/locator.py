"""
Discovery of the ACL governing a resource.
"""

import logging
from typing import Optional, Tuple

from .paths import PathTranslator
from .store import ResourceView, StoreSession

logger = logging.getLogger(__name__)


def locate(
    resource: ResourceView,
    session: StoreSession,
    translator: Optional[PathTranslator] = None,
) -> Optional[Tuple[ResourceView, str]]:
    """
    Find the nearest ACL in the containment chain of ``resource``.

    Walks from the resource up through its containers until a node
    declares acl:accessControl. The returned subject path is the path of
    that declaring node, which is what acl:accessTo is matched against.

    A link that cannot be translated to a store path, or that points at
    nothing, ends the walk with no ACL. It does not fall through to an
    ancestor's ACL.

    Args:
        resource: Node being queried
        session: Store session used to resolve the link
        translator: Maps the link URI to a store path

    Returns:
        ``(acl, subject_path)``, or None when no usable ACL governs the node

    Raises:
        StoreAccessError: If the store cannot answer a read
    """
    translator = translator or PathTranslator()
    current = resource

    while current is not None:
        link = current.access_control_link

        if link is not None:
            acl_path = translator.to_path(link)
            if acl_path is None:
                logger.warning(f"Malformed access control link on {current.path}: {link}")
                return None

            acl = session.find(acl_path)
            if acl is None:
                logger.warning(f"Dangling access control link on {current.path}: {acl_path}")
                return None

            logger.debug(f"ACL {acl.path} governs {resource.path} via {current.path}")
            return acl, current.path

        if current.depth == 0:
            break

        logger.debug(f"No ACL declared on {current.path}, checking container")
        current = current.container

    logger.debug(f"No ACL found for {resource.path}")
    return None
