"""
Graph analysis module for the Tabular to Graph pipeline.
Computes size, density and degree leaders of the loaded graph, and rule-based insights.
"""

from collections import Counter
from typing import Any, Dict, List

from neo4j.exceptions import DriverError, Neo4jError

from Tabular_to_Graph.app_state import ModelingState
from Tabular_to_Graph.config import ROW_INDEX_PROPERTY, TOP_NODES_LIMIT
from Tabular_to_Graph.exceptions import PipelineError
from Tabular_to_Graph.models import GraphAnalysis, LoadResult
from Tabular_to_Graph.nodes.graph_modeling.graph_loading import GraphLoader
from Tabular_to_Graph.utils.logging_config import get_logger

# Configure logging
logger = get_logger(__name__)

NODE_COUNT_QUERY = "MATCH (n) RETURN count(n) AS count"
RELATIONSHIP_COUNT_QUERY = "MATCH ()-[r]->() RETURN count(r) AS count"
LABELS_QUERY = "CALL db.labels() YIELD label RETURN collect(label) AS labels"
RELATIONSHIP_TYPES_QUERY = (
    "CALL db.relationshipTypes() YIELD relationshipType RETURN collect(relationshipType) AS types"
)
TOP_NODES_QUERY = (
    "MATCH (n) "
    "OPTIONAL MATCH (n)-[r]-() "
    "WITH n, count(r) AS degree "
    "ORDER BY degree DESC "
    "LIMIT $limit "
    f"RETURN coalesce(n.id, n.{ROW_INDEX_PROPERTY}, elementId(n)) AS node_id, degree"
)


def graph_density(node_count: int, relationship_count: int) -> float:
    """Directed density: relationships over n·(n−1), zero for graphs with fewer than two nodes."""
    if node_count <= 1:
        return 0.0
    return relationship_count / (node_count * (node_count - 1))


def analyze_store(loader: GraphLoader, limit: int = TOP_NODES_LIMIT) -> GraphAnalysis:
    """
    Analyze the graph held by the store. Read-only.

    Args:
        loader: Connected graph loader
        limit: Number of highest-degree nodes to report

    Returns:
        GraphAnalysis of the whole database
    """
    node_count = loader.run_query(NODE_COUNT_QUERY)[0]['count']
    relationship_count = loader.run_query(RELATIONSHIP_COUNT_QUERY)[0]['count']
    top_nodes = [
        {'node_id': row['node_id'], 'degree': row['degree']}
        for row in loader.run_query(TOP_NODES_QUERY, limit=limit)
    ]
    labels = loader.run_query(LABELS_QUERY)
    types = loader.run_query(RELATIONSHIP_TYPES_QUERY)
    return GraphAnalysis(
        node_count=node_count,
        relationship_count=relationship_count,
        density=graph_density(node_count, relationship_count),
        top_nodes=top_nodes,
        node_labels=sorted(labels[0]['labels']) if labels else [],
        relationship_types=sorted(types[0]['types']) if types else [],
    )


def analyze_preview(load_result: LoadResult, limit: int = TOP_NODES_LIMIT) -> GraphAnalysis:
    """Analyze the in-memory demo preview."""
    graph_data = load_result.graph_data or {'nodes': [], 'edges': []}
    nodes = graph_data.get('nodes', [])
    edges = graph_data.get('edges', [])

    degrees = Counter({node['id']: 0 for node in nodes})
    for edge in edges:
        degrees[edge['from']] += 1
        degrees[edge['to']] += 1
    # Counter.most_common keeps insertion order among equal counts
    top_nodes = [{'node_id': node_id, 'degree': degree} for node_id, degree in degrees.most_common(limit)]

    return GraphAnalysis(
        node_count=len(nodes),
        relationship_count=len(edges),
        density=graph_density(len(nodes), len(edges)),
        top_nodes=top_nodes,
        node_labels=sorted({node['group'] for node in nodes}),
        relationship_types=sorted({edge['label'] for edge in edges}),
    )


def connectivity_level(density: float) -> str:
    if density > 0.1:
        return 'High'
    if density > 0.01:
        return 'Medium'
    return 'Low'


def generate_graph_insights(analysis: GraphAnalysis) -> Dict[str, Any]:
    """
    Rule-based summary, notable patterns and recommendations for an analyzed graph.
    """
    patterns: List[Dict[str, str]] = []
    recommendations: List[Dict[str, str]] = []

    if analysis.density > 0.1:
        patterns.append({
            'type': 'dense_network',
            'description': 'The graph shows high connectivity with many relationships between nodes',
            'significance': 'High',
        })

    if analysis.top_nodes:
        max_degree = analysis.top_nodes[0]['degree']
        if max_degree > analysis.node_count * 0.1:
            patterns.append({
                'type': 'hub_nodes',
                'description': f"Found hub nodes with high degree centrality (max: {max_degree})",
                'significance': 'Medium',
            })

    if analysis.density < 0.01:
        recommendations.append({
            'type': 'sparse_graph',
            'description': 'Consider adding more relationships to improve graph connectivity',
            'priority': 'Medium',
        })

    if analysis.relationship_count == 0:
        recommendations.append({
            'type': 'no_relationships',
            'description': 'No relationships were created. Review data for potential connections',
            'priority': 'High',
        })

    return {
        'summary': {
            'total_nodes': analysis.node_count,
            'total_relationships': analysis.relationship_count,
            'density': analysis.density,
            'connectivity': connectivity_level(analysis.density),
        },
        'patterns': patterns,
        'recommendations': recommendations,
    }


def analyze_graph_node(state: ModelingState, loader: GraphLoader) -> Dict[str, Any]:
    """
    Analyze the loaded graph and derive insights.

    Args:
        state: The current modeling state
        loader: Loader bound by the modeling graph

    Returns:
        State update with graph_analysis and insights
    """
    load_result = state['load_result']
    if load_result.demo_mode:
        analysis = analyze_preview(load_result)
    else:
        try:
            analysis = analyze_store(loader)
        except (Neo4jError, DriverError) as e:
            raise PipelineError(f"Graph analysis failed: {e}") from e

    insights = generate_graph_insights(analysis)
    logger.info(
        f"Graph has {analysis.node_count} nodes, {analysis.relationship_count} relationships "
        f"(density {analysis.density:.4f}, connectivity {insights['summary']['connectivity']})"
    )
    return {'graph_analysis': analysis, 'insights': insights}
