"""
WebAC vocabulary constants.

URIs for the W3C ACL ontology, plus the handful of FOAF and RDF terms
that authorization documents rely on.
"""

# ============================================================================
# Namespaces
# ============================================================================

ACL_NAMESPACE = "http://www.w3.org/ns/auth/acl#"
FOAF_NAMESPACE = "http://xmlns.com/foaf/0.1/"
RDF_NAMESPACE = "http://www.w3.org/1999/02/22-rdf-syntax-ns#"

RDF_TYPE = RDF_NAMESPACE + "type"


# ============================================================================
# Access Modes
# ============================================================================

MODE_READ = ACL_NAMESPACE + "Read"
"""Read the resource and its properties."""

MODE_WRITE = ACL_NAMESPACE + "Write"
"""Modify or delete the resource. Implies append."""

MODE_APPEND = ACL_NAMESPACE + "Append"
"""Add to the resource without removing anything."""

MODE_CONTROL = ACL_NAMESPACE + "Control"
"""Read and modify the ACL governing the resource."""

ALL_MODES = frozenset({
    MODE_READ,
    MODE_WRITE,
    MODE_APPEND,
    MODE_CONTROL,
})


# ============================================================================
# Classes and Predicates
# ============================================================================

AUTHORIZATION = ACL_NAMESPACE + "Authorization"
"""rdf:type carried by every authorization node inside an ACL."""

ACCESS_CONTROL = ACL_NAMESPACE + "accessControl"
"""Links a resource to the ACL governing it."""

AGENT = ACL_NAMESPACE + "agent"
AGENT_CLASS = ACL_NAMESPACE + "agentClass"
MODE = ACL_NAMESPACE + "mode"
ACCESS_TO = ACL_NAMESPACE + "accessTo"
ACCESS_TO_CLASS = ACL_NAMESPACE + "accessToClass"

FOAF_AGENT = FOAF_NAMESPACE + "Agent"
"""Agent class matching everyone, authenticated or not."""
