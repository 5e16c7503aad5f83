"""
Record cleaning module for the Tabular to Graph pipeline.
Normalizes every value according to the inferred type of its column.
"""

from typing import Any, Dict

from Tabular_to_Graph.app_state import StructuringState
from Tabular_to_Graph.models import Dataset
from Tabular_to_Graph.utils.analytics_utils import clean_value
from Tabular_to_Graph.utils.logging_config import get_logger

logger = get_logger(__name__)


def clean_dataset(dataset: Dataset, column_types: Dict[str, str]) -> Dataset:
    """Return a copy of the dataset with typed values; missing keys become None."""
    cleaned = [
        {column: clean_value(row.get(column), column_types.get(column, 'string')) for column in dataset.columns}
        for row in dataset.records
    ]
    return Dataset(records=cleaned, columns=list(dataset.columns), metadata=dict(dataset.metadata))


def clean_records_node(state: StructuringState) -> Dict[str, Any]:
    profiles = state['column_profiles']
    column_types = {name: profile.data_type for name, profile in profiles.items()}
    cleaned = clean_dataset(state['dataset'], column_types)
    logger.info(f"Cleaned {cleaned.row_count} records")
    return {'cleaned_dataset': cleaned}
