"""
Tests for graph model compilation.
"""

import pytest

from Tabular_to_Graph.models import Entity, RelationshipCandidate, Schema, SchemaProperty
from Tabular_to_Graph.nodes.graph_modeling.model_compilation import compile_graph_model, compile_graph_model_node


@pytest.fixture
def manager_schema():
    fk = RelationshipCandidate(
        type="foreign_key", source="id", target="mgr", confidence=1.0,
        description="Potential foreign key relationship between id and mgr",
    )
    return Schema(
        entities=(Entity(name="MainEntity", properties=(
            SchemaProperty(name="id", type="number", patterns=("identifier", "integer", "positive"), unique=True),
            SchemaProperty(name="mgr", type="number", patterns=("integer", "positive")),
        )),),
        relationships=(fk,),
    )


@pytest.mark.unit
def test_compile_manager_schema(manager_schema):
    model = compile_graph_model(manager_schema)

    assert len(model.node_types) == 1
    node_type = model.node_types[0]
    assert node_type.name == "MainEntity"
    assert [(p.name, p.type, p.indexed, p.unique) for p in node_type.properties] == [
        ("id", "Float", True, True),
        ("mgr", "Float", True, False),
    ]
    assert node_type.constraints == [{"type": "UNIQUE", "property": "id"}]

    assert len(model.relationship_types) == 1
    rel_type = model.relationship_types[0]
    assert rel_type.name == "RELATES_TO_ID_MGR"
    assert rel_type.type == "foreign_key"
    assert rel_type.properties["confidence"] == 1.0

    assert model.constraints == [{"label": "MainEntity", "type": "UNIQUE", "property": "id"}]
    assert model.indexes == [
        {"label": "MainEntity", "property": "id"},
        {"label": "MainEntity", "property": "mgr"},
    ]


@pytest.mark.unit
def test_compilation_is_deterministic(manager_schema):
    assert compile_graph_model(manager_schema) == compile_graph_model(manager_schema)


@pytest.mark.unit
def test_colliding_relationship_names_get_suffixes():
    schema = Schema(
        entities=(Entity(name="MainEntity", properties=(
            SchemaProperty(name="a b", type="number"),
            SchemaProperty(name="a_b", type="number"),
            SchemaProperty(name="c", type="number"),
        )),),
        relationships=(
            RelationshipCandidate(type="foreign_key", source="a b", target="c", confidence=0.8),
            RelationshipCandidate(type="foreign_key", source="a_b", target="c", confidence=0.9),
        ),
    )
    names = [rel.name for rel in compile_graph_model(schema).relationship_types]
    assert names == ["RELATES_TO_A_B_C", "RELATES_TO_A_B_C_2"]


@pytest.mark.unit
def test_semantic_relationship_types_are_added():
    schema = Schema(entities=(Entity(name="MainEntity", properties=(
        SchemaProperty(name="user_id", type="id", patterns=("identifier",)),
        SchemaProperty(name="user_name", type="string", patterns=("name",)),
    )),))

    model = compile_graph_model(schema)

    assert [(r.name, r.type, r.properties["confidence"]) for r in model.relationship_types] == [
        ("RELATED_TO_USER_ID_USER_NAME", "semantic", 0.6),
    ]
    assert model.node_types[0].properties[0].indexed
    assert not model.node_types[0].properties[1].indexed


@pytest.mark.unit
def test_compile_graph_model_node(manager_schema):
    update = compile_graph_model_node({"schema": manager_schema})
    assert update["graph_model"].relationship_types[0].name == "RELATES_TO_ID_MGR"
