"""
Tests for authorization parsing and ACL loading.
"""

import pytest

from adapters.memory_store import InMemoryStore
from core.webac import (
    ACCESS_TO,
    AGENT,
    AUTHORIZATION,
    FOAF_AGENT,
    MODE,
    MODE_READ,
    MODE_WRITE,
    Authorization,
    load_authorizations,
    parse_authorization,
)


@pytest.fixture
def store():
    store = InMemoryStore()
    store.add("/acls/a")
    return store


class TestAuthorization:
    """Test the Authorization record."""

    def test_principals_share_namespace(self):
        """Test agents and agent classes combine."""
        auth = Authorization(
            agents=frozenset({"smith123"}),
            agent_classes=frozenset({FOAF_AGENT}),
        )
        assert auth.principals == {"smith123", FOAF_AGENT}

    @pytest.mark.parametrize("kwargs,inert", [
        ({}, True),
        ({"agents": frozenset({"a"}), "modes": frozenset({MODE_READ})}, True),
        ({"modes": frozenset({MODE_READ}), "access_to": frozenset({"/x"})}, True),
        ({"agents": frozenset({"a"}), "access_to": frozenset({"/x"})}, True),
        ({"agents": frozenset({"a"}), "modes": frozenset({MODE_READ}),
          "access_to": frozenset({"/x"})}, False),
        ({"agent_classes": frozenset({"g"}), "modes": frozenset({MODE_READ}),
          "access_to_class": frozenset({"t"})}, False),
    ])
    def test_is_inert(self, kwargs, inert):
        """Test grants missing who, what, or where are inert."""
        assert Authorization(**kwargs).is_inert is inert

    def test_frozen(self):
        """Test authorizations are immutable."""
        auth = Authorization()
        with pytest.raises(AttributeError):
            auth.modes = frozenset({MODE_READ})


class TestParseAuthorization:
    """Test parsing authorization nodes."""

    def test_parses_all_predicates(self, store):
        """Test multi-valued predicates are collected."""
        store.add_authorization(
            "/acls/a/auth",
            agents=["smith123", "jones"],
            agent_classes=["Editors"],
            modes=[MODE_READ, MODE_WRITE],
            access_to=["info:fedora/webacl_box1"],
            access_to_class=["http://example.com/terms#publicImage"],
        )

        with store.session() as session:
            auth = parse_authorization(session.find("/acls/a/auth"))

        assert auth.agents == {"smith123", "jones"}
        assert auth.agent_classes == {"Editors"}
        assert auth.modes == {MODE_READ, MODE_WRITE}
        assert auth.access_to == {"/webacl_box1"}
        assert auth.access_to_class == {"http://example.com/terms#publicImage"}
        assert auth.path == "/acls/a/auth"

    def test_foreign_access_to_kept_verbatim(self, store):
        """Test targets outside the repository are not translated."""
        store.add_authorization(
            "/acls/a/auth", agents=["a"], modes=[MODE_READ],
            access_to=["http://elsewhere.example/thing"],
        )

        with store.session() as session:
            auth = parse_authorization(session.find("/acls/a/auth"))

        assert auth.access_to == {"http://elsewhere.example/thing"}

    def test_missing_predicates_give_inert(self, store):
        """Test a bare authorization parses without raising."""
        store.add_authorization("/acls/a/empty")

        with store.session() as session:
            auth = parse_authorization(session.find("/acls/a/empty"))

        assert auth.is_inert
        assert auth.principals == frozenset()

    def test_ignores_unrelated_predicates(self, store):
        """Test only WebAC predicates are read."""
        store.add(
            "/acls/a/auth",
            types=[AUTHORIZATION],
            triples=[
                ("/acls/a/auth", AGENT, "a"),
                ("/acls/a/auth", MODE, MODE_READ),
                ("/acls/a/auth", ACCESS_TO, "/x"),
                ("/acls/a/auth", "http://purl.org/dc/terms/title", "Readers"),
            ],
        )

        with store.session() as session:
            auth = parse_authorization(session.find("/acls/a/auth"))

        assert auth == Authorization(
            agents=frozenset({"a"}),
            modes=frozenset({MODE_READ}),
            access_to=frozenset({"/x"}),
            path="/acls/a/auth",
        )


class TestLoadAuthorizations:
    """Test loading all authorizations of an ACL."""

    def test_only_authorization_children(self, store):
        """Test children not typed acl:Authorization are skipped."""
        store.add_authorization("/acls/a/one", agents=["a"], modes=[MODE_READ], access_to=["/x"])
        store.add("/acls/a/readme", types=["http://example.com/terms#Note"])
        store.add_authorization("/acls/a/two", agents=["b"], modes=[MODE_WRITE], access_to=["/x"])

        with store.session() as session:
            auths = load_authorizations(session.find("/acls/a"))

        assert sorted(a.path for a in auths) == ["/acls/a/one", "/acls/a/two"]

    def test_grandchildren_not_loaded(self, store):
        """Test only direct children of the ACL count."""
        store.add("/acls/a/group")
        store.add_authorization("/acls/a/group/nested", agents=["a"], modes=[MODE_READ], access_to=["/x"])

        with store.session() as session:
            assert load_authorizations(session.find("/acls/a")) == []

    def test_keeps_inert_entries(self, store):
        """Test malformed grants load as inert rather than aborting."""
        store.add_authorization("/acls/a/broken")
        store.add_authorization("/acls/a/good", agents=["a"], modes=[MODE_READ], access_to=["/x"])

        with store.session() as session:
            auths = load_authorizations(session.find("/acls/a"))

        assert len(auths) == 2
        assert sum(a.is_inert for a in auths) == 1
