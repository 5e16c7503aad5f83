"""
Configuration package for Tabular_to_Graph.
"""

from Tabular_to_Graph.config.settings import (
    NEO4J_URI,
    NEO4J_USER,
    NEO4J_PASSWORD,
    NEO4J_DATABASE,
    GRAPH_STORE_OFFLINE,
    CLEAR_EXISTING,
    BATCH_SIZE,
    CSV_ENCODING,
    CSV_DELIMITER,
    SAMPLE_SIZE,
    TYPE_DETECTION_SAMPLE_SIZE,
    MAX_SAMPLE_VALUES,
    FOREIGN_KEY_OVERLAP_THRESHOLD,
    HIERARCHICAL_CONFIDENCE,
    TEMPORAL_CONFIDENCE,
    SEMANTIC_CONFIDENCE,
    SEMANTIC_KEYWORDS,
    MAIN_ENTITY_NAME,
    ROW_INDEX_PROPERTY,
    DEMO_NODE_LIMIT,
    DEMO_EDGE_LIMIT,
    TOP_NODES_LIMIT,
    JOB_HISTORY_LIMIT,
    MAX_CONCURRENT_JOBS,
)
