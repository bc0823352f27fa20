"""
Tests for the in-memory resource store.
"""

import pytest

from adapters.memory_store import InMemoryStore
from core.webac import (
    ACCESS_CONTROL,
    AUTHORIZATION,
    MODE,
    MODE_READ,
    RDF_TYPE,
    StoreAccessError,
)


@pytest.fixture
def store():
    store = InMemoryStore()
    store.add("/col", access_control="/acls/a")
    store.add("/col/one")
    store.add("/col/two", types=["http://example.com/terms#publicImage"])
    store.add("/col/one/deep")
    return store


class TestInMemoryStore:

    def test_add_requires_absolute_path(self):
        with pytest.raises(ValueError):
            InMemoryStore().add("relative/path")

    def test_access_control_triple(self, store):
        with store.session() as session:
            col = session.find("/col")
            assert ("/col", ACCESS_CONTROL, "/acls/a") in list(col.triples())
            assert col.access_control_link == "/acls/a"
            assert session.find("/col/one").access_control_link is None

    def test_add_authorization(self):
        store = InMemoryStore()
        store.add_authorization("/acls/a/auth", agents=["smith123"], modes=[MODE_READ])

        with store.session() as session:
            auth = session.find("/acls/a/auth")
            triples = list(auth.triples())

            assert auth.types == {AUTHORIZATION}
            assert ("/acls/a/auth", RDF_TYPE, AUTHORIZATION) in triples
            assert ("/acls/a/auth", MODE, MODE_READ) in triples

    def test_access_control_link_ignores_other_subjects(self):
        """Test a link stated about another resource is not this node's link."""
        store = InMemoryStore()
        store.add("/col", triples=[("/col/elsewhere", ACCESS_CONTROL, "/acls/a")])

        with store.session() as session:
            assert session.find("/col").access_control_link is None

    def test_len_and_remove(self, store):
        assert len(store) == 4
        store.remove("/col/one")
        store.remove("/never/there")
        assert len(store) == 3

    def test_session_is_snapshot(self, store):
        """Test writes after opening a session are not visible to it."""
        session = store.session()
        store.add("/col/three")

        assert session.find("/col/three") is None
        assert store.session().find("/col/three") is not None


class TestMemoryResourceView:

    def test_depth_and_container(self, store):
        with store.session() as session:
            deep = session.find("/col/one/deep")
            assert deep.depth == 2
            assert deep.container.path == "/col/one"
            assert deep.container.container.path == "/col"
            assert deep.container.container.container is None

    def test_sparse_tree_container(self):
        """Test missing intermediate nodes are skipped."""
        store = InMemoryStore()
        store.add("/dark/archive")
        store.add("/dark/archive/sunshine")

        with store.session() as session:
            archive = session.find("/dark/archive")
            assert archive.depth == 0
            assert archive.container is None
            assert session.find("/dark/archive/sunshine").container.path == "/dark/archive"

    def test_children_direct_only(self, store):
        with store.session() as session:
            children = [c.path for c in session.find("/col").children()]
        assert children == ["/col/one", "/col/two"]

    def test_types(self, store):
        with store.session() as session:
            assert session.find("/col/two").types == {"http://example.com/terms#publicImage"}
            assert session.find("/col/one").types == frozenset()

    def test_repr(self, store):
        with store.session() as session:
            assert repr(session.find("/col")) == "MemoryResourceView(path='/col')"

    def test_closed_session_raises(self, store):
        session = store.session()
        col = session.find("/col")
        session.close()

        with pytest.raises(StoreAccessError) as exc_info:
            list(col.triples())
        assert exc_info.value.path == "/col"

        with pytest.raises(StoreAccessError):
            session.find("/col")
