# adapters/memory_store.py - in-memory resource store for WebAC resolution

import logging
import threading
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, Iterator, List, Optional, Tuple

from core.webac.errors import StoreAccessError
from core.webac.paths import parent_path
from core.webac.store import ResourceView, StoreSession, Triple
from core.webac.vocab import (
    ACCESS_CONTROL,
    ACCESS_TO,
    ACCESS_TO_CLASS,
    AGENT,
    AGENT_CLASS,
    AUTHORIZATION,
    MODE,
    RDF_TYPE,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MemoryNode:
    path: str
    types: FrozenSet[str] = field(default_factory=frozenset)
    triples: Tuple[Triple, ...] = ()


class InMemoryStore:
    """
    Path-keyed node store.

    A node's container is its nearest ancestor path present in the store,
    so sparse trees work: "/dark/archive" with no "/dark" node is a root
    at depth 0.
    """

    def __init__(self):
        self._nodes: Dict[str, MemoryNode] = {}
        self._lock = threading.RLock()

    def add(
        self,
        path: str,
        types: Iterable[str] = (),
        triples: Iterable[Triple] = (),
        access_control: Optional[str] = None,
    ) -> MemoryNode:
        """
        Add or replace a node.

        Args:
            path: Store path
            types: Declared rdf:type URIs
            triples: Additional (subject, predicate, object) triples
            access_control: ACL link to declare on this node (path or URI)

        Returns:
            The stored node
        """
        if not path.startswith("/"):
            raise ValueError(f"path must start with '/', got {path!r}")

        triples = list(triples)
        if access_control is not None:
            triples.append((path, ACCESS_CONTROL, access_control))

        node = MemoryNode(path=path, types=frozenset(types), triples=tuple(triples))
        with self._lock:
            self._nodes[path] = node
        return node

    def add_authorization(
        self,
        path: str,
        agents: Iterable[str] = (),
        agent_classes: Iterable[str] = (),
        modes: Iterable[str] = (),
        access_to: Iterable[str] = (),
        access_to_class: Iterable[str] = (),
    ) -> MemoryNode:
        """Add an acl:Authorization node built from plain values."""
        triples: List[Triple] = [(path, RDF_TYPE, AUTHORIZATION)]
        for predicate, values in (
            (AGENT, agents),
            (AGENT_CLASS, agent_classes),
            (MODE, modes),
            (ACCESS_TO, access_to),
            (ACCESS_TO_CLASS, access_to_class),
        ):
            triples.extend((path, predicate, value) for value in values)

        return self.add(path, types=[AUTHORIZATION], triples=triples)

    def remove(self, path: str):
        """Remove a node; its descendants are re-parented to the next ancestor."""
        with self._lock:
            self._nodes.pop(path, None)
        logger.debug(f"Removed {path} from in-memory store")

    def session(self) -> "InMemorySession":
        """Open a session over a snapshot of the current nodes."""
        with self._lock:
            return InMemorySession(dict(self._nodes))

    def __len__(self) -> int:
        return len(self._nodes)


class InMemorySession(StoreSession):
    """Consistent read view over a snapshot of an InMemoryStore."""

    def __init__(self, nodes: Dict[str, MemoryNode]):
        self._nodes = nodes
        self._closed = False

    def close(self):
        self._closed = True

    def _check_open(self, path: str):
        if self._closed:
            raise StoreAccessError(f"Session closed while reading {path}", path=path)

    def node(self, path: str) -> Optional[MemoryNode]:
        self._check_open(path)
        return self._nodes.get(path)

    def container_path(self, path: str) -> Optional[str]:
        self._check_open(path)
        candidate = parent_path(path)
        while candidate is not None:
            if candidate in self._nodes:
                return candidate
            candidate = parent_path(candidate)
        return None

    def child_paths(self, path: str) -> List[str]:
        self._check_open(path)
        return [p for p in self._nodes if p != path and self.container_path(p) == path]

    def find(self, path: str) -> Optional["MemoryResourceView"]:
        node = self.node(path)
        if node is None:
            return None
        return MemoryResourceView(self, node)


class MemoryResourceView(ResourceView):
    """ResourceView over one node of an InMemorySession."""

    def __init__(self, session: InMemorySession, node: MemoryNode):
        self._session = session
        self._node = node

    @property
    def path(self) -> str:
        return self._node.path

    @property
    def depth(self) -> int:
        depth = 0
        current = self._session.container_path(self._node.path)
        while current is not None:
            depth += 1
            current = self._session.container_path(current)
        return depth

    @property
    def types(self) -> FrozenSet[str]:
        self._session._check_open(self._node.path)
        return self._node.types

    @property
    def container(self) -> Optional["MemoryResourceView"]:
        container_path = self._session.container_path(self._node.path)
        if container_path is None:
            return None
        return self._session.find(container_path)

    def children(self) -> Iterator["MemoryResourceView"]:
        for child_path in self._session.child_paths(self._node.path):
            yield self._session.find(child_path)

    def triples(self) -> Iterator[Triple]:
        self._session._check_open(self._node.path)
        return iter(self._node.triples)
