"""
Helpers for naming graph elements and rendering the Cypher statements the loader runs.
"""

import hashlib
import re
from typing import Dict, Optional

NEO4J_TYPE_MAP = {
    'string': 'String',
    'email': 'String',
    'url': 'String',
    'phone': 'String',
    'id': 'String',
    'number': 'Float',
    'boolean': 'Boolean',
    'date': 'DateTime',
}

RELATIONSHIP_PREFIXES = {
    'foreign_key': 'RELATES_TO',
    'hierarchical': 'PARENT_OF',
    'temporal': 'PRECEDES',
    'semantic': 'RELATED_TO',
}

_NON_WORD = re.compile(r"[^A-Z0-9_]+")


def map_to_neo4j_type(data_type: str) -> str:
    """Neo4j property type for an inferred column type; unknown types map to String."""
    return NEO4J_TYPE_MAP.get(data_type, 'String')


def sanitize_identifier(name: str) -> str:
    """Upper-case a name and replace every run of non-alphanumerics with a single underscore."""
    cleaned = _NON_WORD.sub('_', str(name).upper()).strip('_')
    return cleaned or 'FIELD'


def relationship_base_name(kind: str, source: str, target: str) -> str:
    prefix = RELATIONSHIP_PREFIXES.get(kind, 'RELATES_TO')
    if kind == 'temporal' and source == target:
        return f"{prefix}_{sanitize_identifier(source)}"
    return f"{prefix}_{sanitize_identifier(source)}_{sanitize_identifier(target)}"


def unique_name(base: str, taken: Dict[str, int]) -> str:
    """
    Return base, or base with the next free numeric suffix (_2, _3, ...).

    Args:
        base: Preferred name
        taken: Mutable registry of names already handed out

    Returns:
        A name not yet present in taken (which is updated)
    """
    if base not in taken:
        taken[base] = 1
        return base
    counter = taken[base] + 1
    candidate = f"{base}_{counter}"
    while candidate in taken:
        counter += 1
        candidate = f"{base}_{counter}"
    taken[base] = counter
    taken[candidate] = 1
    return candidate


def quote(name: str) -> str:
    """Backtick-quote a label, property or relationship type for Cypher."""
    return "`" + str(name).replace("`", "``") + "`"


def schema_object_name(label: str, prop: str, suffix: str) -> str:
    """
    Name for a constraint or index on label.prop.

    Labels and properties that need sanitizing get a short hash of the raw names, so
    `first name` and `first_name` never share a schema object name.
    """
    base = f"{label.lower()}_{prop}"
    name = re.sub(r"[^A-Za-z0-9_]+", "_", base)
    if name != base:
        digest = hashlib.sha1(f"{label}\x00{prop}".encode("utf-8")).hexdigest()[:8]
        name = f"{name}_{digest}"
    return f"{name}_{suffix}"


def constraint_query(label: str, prop: str) -> str:
    name = schema_object_name(label, prop, 'unique')
    return (
        f"CREATE CONSTRAINT {name} IF NOT EXISTS "
        f"FOR (n:{quote(label)}) REQUIRE n.{quote(prop)} IS UNIQUE"
    )


def index_query(label: str, prop: str) -> str:
    name = schema_object_name(label, prop, 'index')
    return f"CREATE INDEX {name} IF NOT EXISTS FOR (n:{quote(label)}) ON (n.{quote(prop)})"


def create_nodes_query(label: str) -> str:
    return f"UNWIND $batch AS row CREATE (n:{quote(label)}) SET n += row RETURN count(n) AS created"


def foreign_key_query(label: str, source: str, target: str, rel_type: str) -> str:
    return (
        f"UNWIND $values AS value "
        f"MATCH (source:{quote(label)} {{{quote(source)}: value}}) "
        f"MATCH (target:{quote(label)} {{{quote(target)}: value}}) "
        f"WHERE source <> target "
        f"CREATE (source)-[r:{quote(rel_type)}]->(target) "
        f"SET r.confidence = $confidence, r.description = $description "
        f"RETURN count(r) AS created"
    )


def hierarchical_query(label: str, source: str, target: str, rel_type: str) -> str:
    return (
        f"MATCH (parent:{quote(label)}) "
        f"MATCH (child:{quote(label)}) "
        f"WHERE parent.{quote(source)} = child.{quote(target)} AND parent <> child "
        f"CREATE (parent)-[r:{quote(rel_type)}]->(child) "
        f"SET r.confidence = $confidence, r.description = $description "
        f"RETURN count(r) AS created"
    )


def temporal_query(label: str, source: str, target: str, rel_type: str) -> str:
    return (
        f"MATCH (earlier:{quote(label)}) "
        f"MATCH (later:{quote(label)}) "
        f"WHERE earlier.{quote(source)} < later.{quote(target)} "
        f"CREATE (earlier)-[r:{quote(rel_type)}]->(later) "
        f"SET r.confidence = $confidence, r.description = $description "
        f"RETURN count(r) AS created"
    )


RELATIONSHIP_QUERY_BUILDERS = {
    'foreign_key': foreign_key_query,
    'hierarchical': hierarchical_query,
    'temporal': temporal_query,
}


def relationship_query(kind: str, label: str, source: str, target: str, rel_type: str) -> Optional[str]:
    """Cypher that materializes one relationship type, or None for kinds that are never written."""
    builder = RELATIONSHIP_QUERY_BUILDERS.get(kind)
    if builder is None:
        return None
    return builder(label, source, target, rel_type)
