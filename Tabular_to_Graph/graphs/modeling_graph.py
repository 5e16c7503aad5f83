"""
Graph definition for the graph modeling stage of Tabular_to_Graph.
"""
import time

from langgraph.graph import StateGraph, START, END

from Tabular_to_Graph.app_state import ModelingState
from Tabular_to_Graph.models import Dataset, Schema
from Tabular_to_Graph.nodes.graph_modeling import (
    GraphLoader,
    compile_graph_model_node,
    load_graph_node,
    analyze_graph_node,
)
from Tabular_to_Graph.utils.logging_config import get_logger

logger = get_logger(__name__)

# Ordered list of nodes in the stage. The flag marks nodes that talk to the graph store.
PIPELINE_NODES = [
    ("compile_model", compile_graph_model_node, False),
    ("load_graph", load_graph_node, True),
    ("analyze_graph", analyze_graph_node, True),
]

PIPELINE_EDGES = [
    (START, "compile_model"),
    ("compile_model", "load_graph"),
    ("load_graph", "analyze_graph"),
    ("analyze_graph", END),
]


def create_modeling_graph(loader: GraphLoader) -> StateGraph:
    """
    Create the LangGraph for the graph modeling stage.

    Args:
        loader: Graph loader shared by the store-facing nodes

    Returns:
        StateGraph instance
    """
    graph = StateGraph(ModelingState)

    # LangGraph calls each node with the state only. Store-facing nodes also need the
    # loader, so they are wrapped in a closure that injects it.
    def _make_wrapper(func):
        def _wrapper(state: ModelingState):
            return func(state, loader=loader)
        return _wrapper

    for node_name, node_func, needs_loader in PIPELINE_NODES:
        graph.add_node(node_name, _make_wrapper(node_func) if needs_loader else node_func)
    for edge in PIPELINE_EDGES:
        graph.add_edge(*edge)
    return graph


def run_modeling(dataset: Dataset, schema: Schema, loader: GraphLoader) -> ModelingState:
    """
    Compile the graph model, load the dataset and analyze the result.

    Args:
        dataset: Cleaned dataset
        schema: Schema from the structuring stage
        loader: Graph loader to write through

    Returns:
        Final modeling state
    """
    app = create_modeling_graph(loader).compile()
    logger.info("Executing graph modeling stage")
    start_time = time.time()
    final_state = app.invoke({'dataset': dataset, 'schema': schema})
    logger.info(f"Graph modeling completed in {time.time() - start_time:.2f} seconds")
    return final_state
