"""
WebAC (Web Access Control) role resolution.

Resolves which principals hold which access modes on a resource by
locating the governing ACL in the containment tree, loading its
authorizations, and matching them by path or by resource type.
"""

from .vocab import (
    # Modes
    MODE_READ,
    MODE_WRITE,
    MODE_APPEND,
    MODE_CONTROL,
    ALL_MODES,
    # Classes and predicates
    AUTHORIZATION,
    ACCESS_CONTROL,
    AGENT,
    AGENT_CLASS,
    MODE,
    ACCESS_TO,
    ACCESS_TO_CLASS,
    FOAF_AGENT,
    RDF_TYPE,
)

from .errors import StoreAccessError

from .store import (
    ResourceView,
    StoreSession,
)

from .paths import (
    DEFAULT_REPOSITORY_PREFIXES,
    PathTranslator,
    parent_path,
)

from .authorizations import (
    Authorization,
    parse_authorization,
    load_authorizations,
)

from .locator import locate
from .matcher import matches, filter_matching
from .aggregate import RoleMap, aggregate

from .resolve import (
    WebACRolesProvider,
    resolve_roles,
    configure_provider,
    get_provider,
    reset_provider,
)

from .delegate import (
    ACTION_MODES,
    WebACAuthorizationDelegate,
    has_mode,
)

__all__ = [
    # Vocabulary
    "MODE_READ",
    "MODE_WRITE",
    "MODE_APPEND",
    "MODE_CONTROL",
    "ALL_MODES",
    "AUTHORIZATION",
    "ACCESS_CONTROL",
    "AGENT",
    "AGENT_CLASS",
    "MODE",
    "ACCESS_TO",
    "ACCESS_TO_CLASS",
    "FOAF_AGENT",
    "RDF_TYPE",
    # Store boundary
    "StoreAccessError",
    "ResourceView",
    "StoreSession",
    "DEFAULT_REPOSITORY_PREFIXES",
    "PathTranslator",
    "parent_path",
    # Engine
    "Authorization",
    "parse_authorization",
    "load_authorizations",
    "locate",
    "matches",
    "filter_matching",
    "RoleMap",
    "aggregate",
    "WebACRolesProvider",
    "resolve_roles",
    "configure_provider",
    "get_provider",
    "reset_provider",
    # Enforcement
    "ACTION_MODES",
    "WebACAuthorizationDelegate",
    "has_mode",
]
