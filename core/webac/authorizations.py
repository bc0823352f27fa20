"""
Authorization records and the loader that reads them out of an ACL.

An ACL is a store node whose children include acl:Authorization nodes.
Each authorization node is parsed from its property triples into a
normalized, immutable ``Authorization``.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, List, Optional, Set

from .paths import PathTranslator
from .store import ResourceView
from .vocab import (
    ACCESS_TO,
    ACCESS_TO_CLASS,
    AGENT,
    AGENT_CLASS,
    AUTHORIZATION,
    MODE,
)

logger = logging.getLogger(__name__)


# ============================================================================
# Data Classes
# ============================================================================

@dataclass(frozen=True)
class Authorization:
    """One access grant: who, what modes, and where."""
    agents: FrozenSet[str] = field(default_factory=frozenset)
    agent_classes: FrozenSet[str] = field(default_factory=frozenset)
    modes: FrozenSet[str] = field(default_factory=frozenset)
    access_to: FrozenSet[str] = field(default_factory=frozenset)
    access_to_class: FrozenSet[str] = field(default_factory=frozenset)
    path: Optional[str] = None  # node the grant was parsed from

    @property
    def principals(self) -> FrozenSet[str]:
        """Agents and agent classes, which share one namespace."""
        return self.agents | self.agent_classes

    @property
    def is_inert(self) -> bool:
        """True if this grant can never contribute a role."""
        return (
            not self.principals
            or not self.modes
            or not (self.access_to or self.access_to_class)
        )


# ============================================================================
# Parsing
# ============================================================================

def parse_authorization(
    resource: ResourceView,
    translator: Optional[PathTranslator] = None,
) -> Authorization:
    """
    Parse an authorization node's triples into an Authorization.

    All five predicates are optional and multi-valued. Missing values
    yield empty sets, so malformed nodes come back inert rather than
    raising.

    Args:
        resource: Node typed acl:Authorization
        translator: Maps acl:accessTo URIs to store paths

    Returns:
        Parsed Authorization
    """
    translator = translator or PathTranslator()
    values: Dict[str, Set[str]] = {
        AGENT: set(),
        AGENT_CLASS: set(),
        MODE: set(),
        ACCESS_TO: set(),
        ACCESS_TO_CLASS: set(),
    }

    for _, predicate, obj in resource.triples():
        if predicate in values:
            values[predicate].add(obj)

    # Targets outside the repository stay verbatim; they match no path
    access_to = {translator.to_path(uri) or uri for uri in values[ACCESS_TO]}

    auth = Authorization(
        agents=frozenset(values[AGENT]),
        agent_classes=frozenset(values[AGENT_CLASS]),
        modes=frozenset(values[MODE]),
        access_to=frozenset(access_to),
        access_to_class=frozenset(values[ACCESS_TO_CLASS]),
        path=resource.path,
    )

    if auth.is_inert:
        logger.debug(f"Authorization at {resource.path} is inert: {auth}")

    return auth


def load_authorizations(
    acl: ResourceView,
    translator: Optional[PathTranslator] = None,
) -> List[Authorization]:
    """
    Load every authorization contained in an ACL.

    Children not typed acl:Authorization are skipped. The result follows
    store iteration order, which carries no meaning since grants combine
    by union.

    Args:
        acl: The ACL node
        translator: Maps acl:accessTo URIs to store paths

    Returns:
        List of parsed authorizations (possibly empty)
    """
    translator = translator or PathTranslator()
    authorizations = []

    for child in acl.children():
        if AUTHORIZATION not in child.types:
            logger.debug(f"Skipping non-authorization child {child.path} of ACL {acl.path}")
            continue
        authorizations.append(parse_authorization(child, translator))

    logger.debug(f"Loaded {len(authorizations)} authorizations from ACL {acl.path}")
    return authorizations
