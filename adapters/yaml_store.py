"""
YAML layouts for in-memory WebAC stores.

A layout lists resources by path. Each entry may declare types, an ACL
link, a Turtle document (relative to the layout file), or an inline
authorization:

    base_uri: http://localhost:8080/rest
    resources:
      - path: /webacl_box1
        acl: /acls/01
      - path: /acls/01
      - path: /acls/01/authorization.ttl
        turtle: acls/01/authorization.ttl
      - path: /acls/01/readers
        authorization:
          agent_classes: [http://xmlns.com/foaf/0.1/Agent]
          modes: [http://www.w3.org/ns/auth/acl#Read]
          access_to: [/webacl_box1]
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from adapters.memory_store import InMemoryStore
from adapters.rdf import DEFAULT_BASE_URI, load_turtle_resource

logger = logging.getLogger(__name__)

AUTHORIZATION_FIELDS = ("agents", "agent_classes", "modes", "access_to", "access_to_class")


def load_store(layout_path: Union[str, Path]) -> InMemoryStore:
    """
    Build a store from a YAML layout file.

    Args:
        layout_path: Path to the YAML layout

    Returns:
        Populated InMemoryStore

    Raises:
        ValueError: If the layout is malformed
        FileNotFoundError: If the layout or a referenced Turtle file is missing
    """
    layout_path = Path(layout_path)
    with open(layout_path, "r") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Failed to parse layout YAML at {layout_path}: {e}") from e

    store = build_store(data, base_dir=layout_path.parent)
    logger.info(f"Loaded {len(store)} resources from {layout_path}")
    return store


def build_store(data: Dict[str, Any], base_dir: Optional[Path] = None) -> InMemoryStore:
    """
    Build a store from an already parsed layout.

    Args:
        data: Layout mapping with a ``resources`` list
        base_dir: Directory Turtle references are relative to

    Returns:
        Populated InMemoryStore
    """
    if not isinstance(data, dict):
        raise ValueError(f"Layout must be a mapping, got {type(data).__name__}")

    resources = data.get("resources")
    if not isinstance(resources, list):
        raise ValueError("Layout must contain a 'resources' list")

    base_dir = Path(base_dir) if base_dir else Path.cwd()
    base_uri = data.get("base_uri", DEFAULT_BASE_URI)
    store = InMemoryStore()

    for i, entry in enumerate(resources):
        if not isinstance(entry, dict) or "path" not in entry:
            raise ValueError(f"Resource entry {i} must be a mapping with a 'path'")
        _add_entry(store, entry, base_dir, base_uri)

    return store


def _add_entry(store: InMemoryStore, entry: Dict[str, Any], base_dir: Path, base_uri: str):
    path = entry["path"]
    types = entry.get("types") or []

    if "turtle" in entry:
        turtle_file = base_dir / entry["turtle"]
        node = load_turtle_resource(
            store,
            path,
            turtle_file.read_text(),
            base_uri=base_uri,
            extra_types=types,
        )
        if "acl" in entry:
            store.add(
                path,
                types=node.types,
                triples=node.triples,
                access_control=entry["acl"],
            )
        return

    if "authorization" in entry:
        auth = entry["authorization"] or {}
        unknown = set(auth) - set(AUTHORIZATION_FIELDS)
        if unknown:
            raise ValueError(f"Unknown authorization fields at {path}: {sorted(unknown)}")
        store.add_authorization(path, **{k: auth.get(k) or [] for k in AUTHORIZATION_FIELDS})
        return

    store.add(path, types=types, access_control=entry.get("acl"))
