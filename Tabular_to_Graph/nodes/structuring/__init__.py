"""
Structuring package for the Tabular to Graph pipeline.
This package contains the nodes that profile, clean and relate the columns of a dataset.
"""

from Tabular_to_Graph.nodes.structuring.column_profiling import profile_columns_node
from Tabular_to_Graph.nodes.structuring.record_cleaning import clean_records_node
from Tabular_to_Graph.nodes.structuring.relationship_detection import detect_relationships_node
from Tabular_to_Graph.nodes.structuring.schema_building import build_schema_node

__all__ = [
    'profile_columns_node',
    'clean_records_node',
    'detect_relationships_node',
    'build_schema_node',
]
