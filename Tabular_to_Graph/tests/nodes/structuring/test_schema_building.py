"""
Tests for the schema building node.
"""

import pytest

from Tabular_to_Graph.models import ColumnProfile, RelationshipCandidate
from Tabular_to_Graph.nodes.structuring.schema_building import build_schema, build_schema_node


@pytest.mark.unit
def test_build_schema_flags_unique_and_nullable():
    profiles = {
        "id": ColumnProfile(name="id", data_type="number", patterns=("identifier",), unique_count=3),
        "mgr": ColumnProfile(name="mgr", data_type="number", unique_count=2, null_count=1, null_percentage=33.3),
    }
    fk = RelationshipCandidate(type="foreign_key", source="id", target="mgr", confidence=1.0)

    schema = build_schema(profiles, [fk], row_count=3)

    entity = schema.main_entity
    assert entity.name == "MainEntity"
    assert [prop.name for prop in entity.properties] == ["id", "mgr"]
    assert entity.properties[0].unique and not entity.properties[0].nullable
    assert not entity.properties[1].unique and entity.properties[1].nullable
    assert [(c.type, c.property) for c in schema.constraints] == [("UNIQUE", "id")]
    assert schema.relationships == (fk,)


@pytest.mark.unit
def test_build_schema_node(manager_dataset):
    profiles = {
        "id": ColumnProfile(name="id", data_type="number", unique_count=3),
        "mgr": ColumnProfile(name="mgr", data_type="number", unique_count=2),
    }
    update = build_schema_node({"dataset": manager_dataset, "column_profiles": profiles, "relationships": []})
    assert len(update["schema"].constraints) == 1
