"""
Graph definition for the data structuring stage of Tabular_to_Graph.
"""
import time

from langgraph.graph import StateGraph, START, END

from Tabular_to_Graph.app_state import StructuringState
from Tabular_to_Graph.models import Dataset
from Tabular_to_Graph.nodes.structuring import (
    profile_columns_node,
    clean_records_node,
    detect_relationships_node,
    build_schema_node,
)
from Tabular_to_Graph.utils.logging_config import get_logger

logger = get_logger(__name__)

# Ordered list of nodes in the stage.
PIPELINE_NODES = [
    ("profile_columns", profile_columns_node),
    ("clean_records", clean_records_node),
    ("detect_relationships", detect_relationships_node),
    ("build_schema", build_schema_node),
]

# Declarative edge definitions. A tuple represents a direct edge.
PIPELINE_EDGES = [
    (START, "profile_columns"),
    ("profile_columns", "clean_records"),
    ("clean_records", "detect_relationships"),
    ("detect_relationships", "build_schema"),
    ("build_schema", END),
]


def create_structuring_graph() -> StateGraph:
    """
    Create the LangGraph for the data structuring stage.
    Returns:
        StateGraph instance
    """
    graph = StateGraph(StructuringState)
    for node_name, node_func in PIPELINE_NODES:
        graph.add_node(node_name, node_func)
    for edge in PIPELINE_EDGES:
        graph.add_edge(*edge)
    return graph


def run_structuring(dataset: Dataset) -> StructuringState:
    """
    Profile, clean and relate the columns of a dataset and build its schema.

    Args:
        dataset: Loaded dataset

    Returns:
        Final structuring state
    """
    app = create_structuring_graph().compile()
    logger.info(f"Executing structuring stage on {dataset.row_count} records")
    start_time = time.time()
    final_state = app.invoke({'dataset': dataset})
    logger.info(f"Structuring completed in {time.time() - start_time:.2f} seconds")
    return final_state
