"""
Schema building module for the Tabular to Graph pipeline.
Wraps every column into a single entity and derives uniqueness constraints.
"""

from typing import Any, Dict, List

from Tabular_to_Graph.app_state import StructuringState
from Tabular_to_Graph.config import MAIN_ENTITY_NAME
from Tabular_to_Graph.models import (
    ColumnProfile,
    Constraint,
    Entity,
    RelationshipCandidate,
    Schema,
    SchemaProperty,
)
from Tabular_to_Graph.utils.logging_config import get_logger

logger = get_logger(__name__)


def build_schema(
    profiles: Dict[str, ColumnProfile],
    relationships: List[RelationshipCandidate],
    row_count: int,
    entity_name: str = MAIN_ENTITY_NAME,
) -> Schema:
    """
    Build the single-entity schema for a profiled dataset.

    A property is unique when its distinct-value count equals the dataset's row count,
    and nullable when any sampled value was null.

    Args:
        profiles: Column profiles in column order
        relationships: Relationship candidates to carry into the schema
        row_count: Total number of rows in the dataset
        entity_name: Name of the synthesized entity

    Returns:
        Schema with one entity, the candidates and one UNIQUE constraint per unique property
    """
    properties = tuple(
        SchemaProperty(
            name=name,
            type=profile.data_type,
            patterns=profile.patterns,
            nullable=profile.null_percentage > 0,
            unique=row_count > 0 and profile.unique_count == row_count,
            statistics=dict(profile.statistics),
        )
        for name, profile in profiles.items()
    )
    constraints = tuple(
        Constraint(type='UNIQUE', entity=entity_name, property=prop.name)
        for prop in properties
        if prop.unique
    )
    return Schema(
        entities=(Entity(name=entity_name, properties=properties),),
        relationships=tuple(relationships),
        constraints=constraints,
    )


def build_schema_node(state: StructuringState) -> Dict[str, Any]:
    dataset = state['dataset']
    schema = build_schema(state['column_profiles'], state.get('relationships', []), dataset.row_count)
    logger.info(
        f"Built schema with {len(schema.main_entity.properties)} properties, "
        f"{len(schema.relationships)} relationships and {len(schema.constraints)} constraints"
    )
    return {'schema': schema}
