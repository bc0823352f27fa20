"""
Read interface the role engine consumes from the resource store.

Store implementations subclass these; the engine never writes and never
holds on to a view beyond a single resolution.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import FrozenSet, Iterator, Optional, Tuple

from .vocab import ACCESS_CONTROL

Triple = Tuple[str, str, str]


class ResourceView(ABC):
    """Read-only snapshot of one node in the containment tree."""

    @property
    @abstractmethod
    def path(self) -> str:
        """Slash-delimited store path, unique per node."""
        pass

    @property
    @abstractmethod
    def depth(self) -> int:
        """Containment depth; the root is 0."""
        pass

    @property
    @abstractmethod
    def types(self) -> FrozenSet[str]:
        """Declared rdf:type URIs, empty when none."""
        pass

    @property
    @abstractmethod
    def container(self) -> Optional["ResourceView"]:
        """Parent node, None at depth 0."""
        pass

    @abstractmethod
    def children(self) -> Iterator["ResourceView"]:
        """Contained nodes in store iteration order."""
        pass

    @abstractmethod
    def triples(self) -> Iterator[Triple]:
        """Outgoing (subject, predicate, object) property triples; the subject is ``path``."""
        pass

    @property
    def access_control_link(self) -> Optional[str]:
        """
        Object of the acl:accessControl triple declared on this node.

        Only triples whose subject is this node's path are consulted;
        inheritance is the locator's job.
        """
        for subject, predicate, obj in self.triples():
            if subject == self.path and predicate == ACCESS_CONTROL:
                return obj
        return None

    def __repr__(self) -> str:
        return f"{type(self).__name__}(path={self.path!r})"


class StoreSession(ABC):
    """
    A consistent read view of the store for the duration of one call.

    Passed explicitly into every resolution so concurrent callers never
    share session state.
    """

    @abstractmethod
    def find(self, path: str) -> Optional[ResourceView]:
        """
        Look up a node by path.

        Returns:
            The node, or None if nothing exists at ``path``

        Raises:
            StoreAccessError: If the store cannot answer
        """
        pass

    def close(self) -> None:
        """Release the read view. Further reads may fail."""
        pass

    def __enter__(self) -> "StoreSession":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
