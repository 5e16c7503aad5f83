"""
Relationship detection module for the Tabular to Graph pipeline.
This module finds candidate relationships between the columns of the cleaned dataset.
"""

from collections import Counter
from typing import Any, Dict

from Tabular_to_Graph.app_state import StructuringState
from Tabular_to_Graph.utils.relationship_utils import detect_relationships
from Tabular_to_Graph.utils.logging_config import get_logger

# Configure logging
logger = get_logger(__name__)


def detect_relationships_node(state: StructuringState) -> Dict[str, Any]:
    """
    Detect foreign-key, hierarchical and temporal relationship candidates.

    Args:
        state: The current structuring state

    Returns:
        State update with relationships
    """
    dataset = state.get('cleaned_dataset')
    if dataset is None:
        dataset = state['dataset']
    logger.info(f"Detecting relationships across {len(dataset.columns)} columns")

    candidates = detect_relationships(dataset, state['column_profiles'])

    counts = Counter(candidate.type for candidate in candidates)
    logger.info(f"Found {len(candidates)} relationship candidates: {dict(counts)}")
    for candidate in candidates:
        logger.debug(
            f"{candidate.type}: {candidate.source} -> {candidate.target} "
            f"(confidence: {candidate.confidence:.2f})"
        )
    return {'relationships': candidates}
