"""
Column profiling module for the Tabular to Graph pipeline.
This module handles type inference and statistical analysis of columns.
"""

from typing import Any, Dict

from Tabular_to_Graph.app_state import StructuringState
from Tabular_to_Graph.config import SAMPLE_SIZE
from Tabular_to_Graph.utils.analytics_utils import analyze_all_columns, assess_data_quality
from Tabular_to_Graph.utils.logging_config import get_logger

# Configure logging
logger = get_logger(__name__)


def profile_columns_node(state: StructuringState) -> Dict[str, Any]:
    """
    Profile every column of the dataset from a bounded sample.

    Args:
        state: The current structuring state

    Returns:
        State update with column_profiles and data_quality
    """
    dataset = state['dataset']
    sample_size = min(SAMPLE_SIZE, dataset.row_count)
    logger.info(f"Profiling {len(dataset.columns)} columns from a sample of {sample_size} rows")

    profiles = analyze_all_columns(dataset, SAMPLE_SIZE)
    quality = assess_data_quality(profiles)

    unknown = [name for name, profile in profiles.items() if profile.data_type == 'unknown']
    if unknown:
        logger.warning(f"Columns without non-null sample values: {unknown}")
    logger.info(f"Successfully profiled {len(profiles)} columns (overall quality {quality.overall:.1f}%)")

    return {'column_profiles': profiles, 'data_quality': quality}
