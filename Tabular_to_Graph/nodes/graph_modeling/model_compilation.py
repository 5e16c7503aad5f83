"""
Graph model compilation module for the Tabular to Graph pipeline.
Translates the inferred schema into node types, relationship types, constraints and indexes.
"""

from typing import Any, Dict, List, Set

from Tabular_to_Graph.app_state import ModelingState
from Tabular_to_Graph.models import (
    GraphModel,
    NodeProperty,
    NodeType,
    RelationshipCandidate,
    RelationshipType,
    Schema,
)
from Tabular_to_Graph.utils.cypher_utils import map_to_neo4j_type, relationship_base_name, unique_name
from Tabular_to_Graph.utils.relationship_utils import detect_semantic
from Tabular_to_Graph.utils.logging_config import get_logger

# Configure logging
logger = get_logger(__name__)


def join_properties(relationships: List[RelationshipCandidate]) -> Set[str]:
    """Property names the loader matches foreign keys on."""
    joined = set()
    for rel in relationships:
        if rel.type == 'foreign_key':
            joined.add(rel.source)
            joined.add(rel.target)
    return joined


def compile_graph_model(schema: Schema) -> GraphModel:
    """
    Compile a schema into a graph model.

    The output depends only on the schema, so compiling the same schema twice yields
    equal models with identical names.

    Args:
        schema: Schema produced by the structuring stage

    Returns:
        GraphModel with one node type per entity and one relationship type per candidate,
        followed by the name-based semantic relationship types
    """
    joined = join_properties(list(schema.relationships))
    model = GraphModel()

    for entity in schema.entities:
        properties = [
            NodeProperty(
                name=prop.name,
                type=map_to_neo4j_type(prop.type),
                indexed='identifier' in prop.patterns or prop.unique or prop.name in joined,
                unique=prop.unique,
            )
            for prop in entity.properties
        ]
        constraints = [{'type': 'UNIQUE', 'property': prop.name} for prop in entity.properties if prop.unique]
        model.node_types.append(NodeType(name=entity.name, properties=properties, constraints=constraints))

    columns = [prop.name for prop in schema.main_entity.properties] if schema.main_entity else []
    candidates = list(schema.relationships) + detect_semantic(columns)

    taken: Dict[str, int] = {}
    for rel in candidates:
        name = unique_name(relationship_base_name(rel.type, rel.source, rel.target), taken)
        model.relationship_types.append(RelationshipType(
            name=name,
            source=rel.source,
            target=rel.target,
            type=rel.type,
            properties={'confidence': rel.confidence, 'description': rel.description},
        ))

    return model


def compile_graph_model_node(state: ModelingState) -> Dict[str, Any]:
    """
    Build the graph model for the current schema.

    Args:
        state: The current modeling state

    Returns:
        State update with graph_model
    """
    model = compile_graph_model(state['schema'])
    logger.info(
        f"Compiled graph model with {len(model.node_types)} node types, "
        f"{len(model.relationship_types)} relationship types, {len(model.constraints)} constraints "
        f"and {len(model.indexes)} indexes"
    )
    for rel_type in model.relationship_types:
        logger.debug(f"Relationship type {rel_type.name} ({rel_type.type}): {rel_type.source} -> {rel_type.target}")
    return {'graph_model': model}
