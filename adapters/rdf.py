# adapters/rdf.py - rdflib bridge for WebAC authorization documents

import logging
from typing import FrozenSet, List, Optional

from rdflib import Graph, Namespace, URIRef
from rdflib.namespace import RDF

from core.webac.store import Triple
from core.webac.vocab import ACL_NAMESPACE, FOAF_NAMESPACE

logger = logging.getLogger(__name__)

ACL = Namespace(ACL_NAMESPACE)
FOAF = Namespace(FOAF_NAMESPACE)

DEFAULT_BASE_URI = "http://localhost:8080/rest"


def parse_turtle(data: str, public_id: Optional[str] = None) -> Graph:
    """
    Parse a Turtle document.

    Args:
        data: Turtle source
        public_id: Base URI for relative references such as ``<>``

    Returns:
        Parsed rdflib Graph

    Raises:
        ValueError: If the document is not valid Turtle
    """
    graph = Graph()
    graph.bind("acl", ACL)
    graph.bind("foaf", FOAF)
    try:
        graph.parse(data=data, format="turtle", publicID=public_id)
    except Exception as e:
        raise ValueError(f"Invalid Turtle for {public_id or 'document'}: {e}") from e
    return graph


def subject_triples(graph: Graph, subject: str, path: str) -> List[Triple]:
    """
    Flatten the statements about one subject into string triples.

    The subject URI is replaced by the store ``path``. URIs become their
    full form and literals their lexical value, which is how agent names
    such as ``"smith123"`` reach the role map. Statements about any other
    subject (e.g. sibling ``<#hash>`` resources) are left out.
    """
    return [(path, str(p), str(o)) for p, o in graph.predicate_objects(URIRef(subject))]


def graph_types(graph: Graph, subject: Optional[str] = None) -> FrozenSet[str]:
    """
    Collect rdf:type values.

    Args:
        graph: Parsed graph
        subject: Restrict to this subject URI; all subjects when None

    Returns:
        Set of type URIs
    """
    subject_ref = URIRef(subject) if subject else None
    return frozenset(str(o) for o in graph.objects(subject_ref, RDF.type))


def load_turtle_resource(
    store,
    path: str,
    data: str,
    base_uri: str = DEFAULT_BASE_URI,
    extra_types=(),
):
    """
    Add a node to an InMemoryStore from a Turtle document.

    The node is the document resource itself (``<>``): its types are the
    rdf:type values declared on it plus ``extra_types``, and its triples
    are the statements whose subject it is.

    Args:
        store: InMemoryStore to add to
        path: Store path of the new node
        data: Turtle source
        base_uri: Repository base the path is published under
        extra_types: Additional declared types

    Returns:
        The stored node
    """
    public_id = base_uri.rstrip("/") + path
    graph = parse_turtle(data, public_id=public_id)
    types = set(graph_types(graph, subject=public_id)) | set(extra_types)
    triples = subject_triples(graph, public_id, path)

    skipped = len(graph) - len(triples)
    if skipped:
        logger.warning(f"Ignored {skipped} statements about other subjects in Turtle for {path}")

    logger.debug(f"Loaded {len(triples)} triples for {path} (types={sorted(types)})")
    return store.add(path, types=types, triples=triples)
