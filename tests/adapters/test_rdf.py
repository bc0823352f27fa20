"""
Tests for the rdflib bridge.
"""

from pathlib import Path

import pytest

from adapters.memory_store import InMemoryStore
from adapters.rdf import graph_types, load_turtle_resource, parse_turtle, subject_triples
from core.webac import (
    ACCESS_TO,
    AGENT,
    AGENT_CLASS,
    AUTHORIZATION,
    FOAF_AGENT,
    MODE_CONTROL,
    MODE_READ,
    MODE_WRITE,
    WebACRolesProvider,
    parse_authorization,
)

FIXTURES = Path(__file__).parent.parent / "fixtures" / "acls"


class TestParseTurtle:

    def test_relative_subject_uses_public_id(self):
        graph = parse_turtle(
            (FIXTURES / "01" / "authorization.ttl").read_text(),
            public_id="http://localhost:8080/rest/acls/01/authorization",
        )
        subjects = {str(s) for s in graph.subjects()}
        assert subjects == {"http://localhost:8080/rest/acls/01/authorization"}

    def test_literals_and_uris_flatten_to_strings(self):
        public_id = "http://localhost:8080/rest/acls/01/authorization"
        graph = parse_turtle((FIXTURES / "01" / "authorization.ttl").read_text(), public_id=public_id)
        triples = subject_triples(graph, public_id, "/acls/01/authorization")

        assert {s for s, _, _ in triples} == {"/acls/01/authorization"}

        assert any(p == AGENT and o == "smith123" for _, p, o in triples)
        assert any(p == ACCESS_TO and o == "http://localhost:8080/rest/webacl_box1" for _, p, o in triples)

    def test_types(self):
        graph = parse_turtle((FIXTURES / "03" / "auth_open.ttl").read_text())
        assert graph_types(graph) == {AUTHORIZATION}
        assert graph_types(graph, subject="http://example.com/none") == frozenset()

    def test_invalid_turtle(self):
        with pytest.raises(ValueError) as exc_info:
            parse_turtle("<> a <unterminated", public_id="http://localhost:8080/rest/bad")
        assert "Invalid Turtle" in str(exc_info.value)


class TestLoadTurtleResource:

    def test_authorization_round_trip(self):
        """Test a Turtle authorization parses into the expected grant."""
        store = InMemoryStore()
        load_turtle_resource(store, "/acls/04/auth2", (FIXTURES / "04" / "auth2.ttl").read_text())

        with store.session() as session:
            auth = parse_authorization(session.find("/acls/04/auth2"))

        assert auth.agent_classes == {"Editors"}
        assert auth.modes == {MODE_READ, MODE_WRITE}
        assert auth.access_to == {"/public_collection"}

    def test_foaf_agent_class(self):
        store = InMemoryStore()
        node = load_turtle_resource(store, "/acls/04/auth1", (FIXTURES / "04" / "auth1.ttl").read_text())

        assert node.types == {AUTHORIZATION}
        assert ("/acls/04/auth1", AGENT_CLASS, FOAF_AGENT) in node.triples

    def test_extra_types(self):
        store = InMemoryStore()
        node = load_turtle_resource(
            store, "/acls/04/auth1", (FIXTURES / "04" / "auth1.ttl").read_text(),
            extra_types=["http://example.com/terms#Reviewed"],
        )
        assert node.types == {AUTHORIZATION, "http://example.com/terms#Reviewed"}

    def test_custom_base_uri(self):
        store = InMemoryStore()
        node = load_turtle_resource(
            store, "/x", "<> <http://purl.org/dc/terms/title> \"X\" .",
            base_uri="http://repo.example/rest/",
        )
        assert node.triples == (("/x", "http://purl.org/dc/terms/title", "X"),)


TWO_GRANTS = """
@prefix acl: <http://www.w3.org/ns/auth/acl#> .

<> a acl:Authorization ;
    acl:agent "alice" ;
    acl:mode acl:Read ;
    acl:accessTo <http://localhost:8080/rest/box> .

<#bob> a acl:Authorization ;
    acl:agent "bob" ;
    acl:mode acl:Write, acl:Control ;
    acl:accessTo <http://localhost:8080/rest/other> .
"""


class TestSubjectScoping:
    """Test only statements about the document resource reach the node."""

    def test_other_subjects_not_merged(self):
        """Test a hash resource's grant stays out of the document's grant."""
        store = InMemoryStore()
        node = load_turtle_resource(store, "/acls/a/grants", TWO_GRANTS)

        assert {p for _, p, _ in node.triples} == {
            "http://www.w3.org/1999/02/22-rdf-syntax-ns#type",
            AGENT,
            "http://www.w3.org/ns/auth/acl#mode",
            ACCESS_TO,
        }
        assert all(s == "/acls/a/grants" for s, _, _ in node.triples)

        with store.session() as session:
            auth = parse_authorization(session.find("/acls/a/grants"))

        assert auth.agents == {"alice"}
        assert auth.modes == {MODE_READ}
        assert auth.access_to == {"/box"}

    def test_resolution_does_not_leak_modes(self):
        """Test resolving /box grants alice Read and nothing else."""
        store = InMemoryStore()
        store.add("/box", access_control="info:fedora/acls/a")
        store.add("/acls/a")
        load_turtle_resource(store, "/acls/a/grants", TWO_GRANTS)

        with store.session() as session:
            roles = WebACRolesProvider().get_roles(session.find("/box"), session)

        assert roles == {"alice": {MODE_READ}}
        assert MODE_CONTROL not in roles["alice"]

    def test_types_from_document_resource_only(self):
        """Test a document typed only through a hash resource is not an authorization."""
        data = """
        @prefix acl: <http://www.w3.org/ns/auth/acl#> .
        <#inner> a acl:Authorization .
        """
        node = load_turtle_resource(InMemoryStore(), "/acls/a/doc", data)

        assert AUTHORIZATION not in node.types
        assert node.triples == ()
