"""
Graph modeling package for the Tabular to Graph pipeline.
This package contains the nodes that compile, load and analyze the property graph.
"""

from Tabular_to_Graph.nodes.graph_modeling.model_compilation import compile_graph_model_node
from Tabular_to_Graph.nodes.graph_modeling.graph_loading import GraphLoader, load_graph_node
from Tabular_to_Graph.nodes.graph_modeling.graph_analysis import analyze_graph_node

__all__ = [
    'GraphLoader',
    'compile_graph_model_node',
    'load_graph_node',
    'analyze_graph_node',
]
