"""
Graph loading module for the Tabular to Graph pipeline.

Executes a compiled graph model against Neo4j: constraints and indexes first, then
batched node creation, then relationship materialization per relationship type.
When the store cannot be reached the loader switches to demo mode and returns a
small deterministic preview instead.
"""

import threading
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Tuple

import numpy as np
from neo4j import GraphDatabase
from neo4j.exceptions import DriverError, Neo4jError

from Tabular_to_Graph.app_state import ModelingState
from Tabular_to_Graph.config import (
    NEO4J_URI,
    NEO4J_USER,
    NEO4J_PASSWORD,
    NEO4J_DATABASE,
    GRAPH_STORE_OFFLINE,
    CLEAR_EXISTING,
    BATCH_SIZE,
    MAIN_ENTITY_NAME,
    ROW_INDEX_PROPERTY,
    DEMO_NODE_LIMIT,
    DEMO_EDGE_LIMIT,
)
from Tabular_to_Graph.exceptions import RelationshipMaterializationError, StoreUnavailableError, WriteError
from Tabular_to_Graph.models import Dataset, GraphModel, LoadResult, Record
from Tabular_to_Graph.utils.analytics_utils import is_null
from Tabular_to_Graph.utils.cypher_utils import (
    constraint_query,
    create_nodes_query,
    index_query,
    relationship_query,
)
from Tabular_to_Graph.utils.relationship_utils import common_values
from Tabular_to_Graph.utils.logging_config import get_logger

# Configure logging
logger = get_logger(__name__)

ALREADY_EXISTS_CODES = {
    "Neo.ClientError.Schema.EquivalentSchemaRuleAlreadyExists",
    "Neo.ClientError.Schema.ConstraintAlreadyExists",
    "Neo.ClientError.Schema.IndexAlreadyExists",
}

DEMO_MESSAGE = "Demo mode: graph data generated for preview. Configure a reachable Neo4j instance for full functionality."

DEMO_INSIGHTS = [
    {
        'type': 'pattern',
        'title': 'Data Clustering',
        'description': 'Detected 3 main clusters in the data structure',
        'confidence': 0.85,
    },
    {
        'type': 'anomaly',
        'title': 'Outlier Detection',
        'description': 'Found 2 potential outliers in the dataset',
        'confidence': 0.72,
    },
    {
        'type': 'relationship',
        'title': 'Strong Correlations',
        'description': 'Identified 5 strong correlations between entities',
        'confidence': 0.91,
    },
]


def to_property_value(value: Any) -> Any:
    """Coerce a cleaned value into something Neo4j can store as a property."""
    if isinstance(value, np.generic):
        return value.item()
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, (str, bool, int, float)):
        return value
    if isinstance(value, (list, tuple)):
        return [to_property_value(item) for item in value]
    return str(value)


def to_node_properties(record: Record, row_index: int) -> Dict[str, Any]:
    """
    Property map for one record: non-null values plus the positional row index.

    A column that already uses the row index name keeps its own value.
    """
    properties = {
        str(key): to_property_value(value)
        for key, value in record.items()
        if not is_null(value)
    }
    properties.setdefault(ROW_INDEX_PROPERTY, row_index)
    return properties


class GraphLoader:
    """
    Loads datasets into Neo4j according to a compiled graph model.

    Example:
        loader = GraphLoader()
        loader.initialize()
        result = loader.load(dataset, graph_model)
        loader.close()
    """

    def __init__(
        self,
        uri: str = NEO4J_URI,
        user: str = NEO4J_USER,
        password: str = NEO4J_PASSWORD,
        database: Optional[str] = NEO4J_DATABASE,
        batch_size: int = BATCH_SIZE,
        clear_existing: bool = CLEAR_EXISTING,
        offline: bool = GRAPH_STORE_OFFLINE,
    ):
        self.uri = uri
        self.user = user
        self.password = password
        self.database = database
        self.batch_size = batch_size
        self.clear_existing = clear_existing
        self.offline = offline
        self.driver = None
        self.state = "uninitialized"
        self.load_state = "idle"
        self._lock = threading.Lock()

    @property
    def demo_mode(self) -> bool:
        return self.state == "demo"

    def initialize(self) -> bool:
        """
        Connect to the store and verify connectivity.

        Returns:
            True when connected, False when the loader fell back to demo mode
        """
        with self._lock:
            if self.state != "uninitialized":
                return self.state == "connected"

            if self.offline:
                logger.info("Graph store disabled, running in demo mode")
                self.state = "demo"
                return False

            try:
                driver = self.connect()
            except StoreUnavailableError as e:
                logger.warning(f"{e}; running in demo mode")
                self.state = "demo"
                return False

            self.driver = driver
            self.state = "connected"
            logger.info(f"Connected to Neo4j at {self.uri}")
            return True

    def connect(self):
        """
        Create a driver and verify that the store answers.

        Raises:
            StoreUnavailableError: If the driver cannot be created or the server is unreachable
        """
        driver = None
        try:
            driver = GraphDatabase.driver(self.uri, auth=(self.user, self.password))
            driver.verify_connectivity()
        except (Neo4jError, DriverError, OSError, ValueError) as e:
            if driver is not None:
                driver.close()
            raise StoreUnavailableError(f"Neo4j not available at {self.uri}: {e}") from e
        return driver

    def close(self):
        """Close the Neo4j driver connection."""
        with self._lock:
            if self.driver is not None:
                self.driver.close()
                self.driver = None
                logger.info("Neo4j connection closed")
            if self.state == "connected":
                self.state = "uninitialized"

    def session(self):
        return self.driver.session(database=self.database)

    def run_query(self, query: str, **params) -> List[Dict[str, Any]]:
        """Run a read query and return its records as dictionaries."""
        with self.session() as session:
            return session.run(query, **params).data()

    def load(self, dataset: Dataset, graph_model: GraphModel) -> LoadResult:
        """
        Load a dataset into the store following the graph model.

        Args:
            dataset: Cleaned dataset whose records become nodes
            graph_model: Compiled graph model

        Returns:
            LoadResult with created node and relationship counts, or the demo preview

        Raises:
            WriteError: If a node batch fails
            RelationshipMaterializationError: If a relationship type fails to materialize
        """
        if self.state == "uninitialized":
            self.initialize()

        if self.demo_mode:
            return self.generate_demo_data(dataset, graph_model)

        label = graph_model.node_types[0].name if graph_model.node_types else MAIN_ENTITY_NAME
        self.load_state = "loading"
        try:
            with self.session() as session:
                if self.clear_existing:
                    self.clear_database(session)
                self.create_constraints_and_indexes(session, graph_model)
                node_count = self.create_nodes(session, label, dataset.records)
                relationship_count = self.create_relationships(session, dataset, label, graph_model)
        except (WriteError, RelationshipMaterializationError):
            self.load_state = "failed"
            raise
        except (Neo4jError, DriverError) as e:
            self.load_state = "failed"
            raise WriteError(f"Graph load failed: {e}") from e

        self.load_state = "loaded"
        logger.info(f"Loaded {node_count} nodes and {relationship_count} relationships")
        return LoadResult(node_count=node_count, relationship_count=relationship_count, demo_mode=False)

    def clear_database(self, session) -> int:
        """
        Clear all nodes and relationships from the database.

        Returns:
            Number of nodes deleted
        """
        logger.warning("Clearing entire database...")
        result = session.run("MATCH (n) DETACH DELETE n RETURN count(n) AS count")
        count = result.single()["count"]
        logger.info(f"Deleted {count} nodes and all relationships")
        return count

    def create_constraints_and_indexes(self, session, graph_model: GraphModel) -> Tuple[int, int]:
        """
        Create UNIQUE constraints and indexes for indexed properties.

        Constraints already back their property with an index, so unique properties get no
        separate index. Failures are logged and skipped.

        Returns:
            Tuple of (statements applied, statements skipped)
        """
        statements = [constraint_query(c['label'], c['property']) for c in graph_model.constraints]
        unique = {(c['label'], c['property']) for c in graph_model.constraints}
        statements.extend(
            index_query(i['label'], i['property'])
            for i in graph_model.indexes
            if (i['label'], i['property']) not in unique
        )

        applied = skipped = 0
        for statement in statements:
            try:
                session.run(statement).consume()
                applied += 1
                logger.debug(f"Created: {statement[:80]}...")
            except Neo4jError as e:
                skipped += 1
                if e.code in ALREADY_EXISTS_CODES:
                    logger.info(f"Schema rule already exists, skipping: {statement[:80]}")
                else:
                    logger.warning(f"Could not apply schema statement '{statement}': {e}")
        logger.info(f"Applied {applied} constraint/index statements ({skipped} skipped)")
        return applied, skipped

    def create_nodes(self, session, label: str, records: List[Record]) -> int:
        """
        Create one node per record in batches using the UNWIND pattern.

        Returns:
            Total number of nodes created
        """
        total = len(records)
        if total == 0:
            logger.warning("No records to import")
            return 0

        if any(ROW_INDEX_PROPERTY in record for record in records):
            logger.warning(
                f"Column {ROW_INDEX_PROPERTY} exists in the data; nodes keep its values instead of the row position"
            )

        query = create_nodes_query(label)
        created = 0
        for start in range(0, total, self.batch_size):
            batch = [
                to_node_properties(record, start + offset)
                for offset, record in enumerate(records[start:start + self.batch_size])
            ]
            try:
                result = session.run(query, batch=batch)
                created += result.single()["created"]
            except (Neo4jError, DriverError) as e:
                raise WriteError(f"Node batch starting at row {start} failed: {e}") from e
            logger.debug(f"Created {created}/{total} nodes")
        return created

    def create_relationships(self, session, dataset: Dataset, label: str, graph_model: GraphModel) -> int:
        """
        Materialize every writable relationship type of the model.

        Returns:
            Total number of relationships created
        """
        total = 0
        for rel_type in graph_model.relationship_types:
            query = relationship_query(rel_type.type, label, rel_type.source, rel_type.target, rel_type.name)
            if query is None:
                logger.debug(f"Skipping {rel_type.type} relationship type {rel_type.name}")
                continue

            params = {
                'confidence': rel_type.properties.get('confidence'),
                'description': rel_type.properties.get('description'),
            }
            if rel_type.type == 'foreign_key':
                params['values'] = [
                    to_property_value(value) for value in common_values(dataset, rel_type.source, rel_type.target)
                ]

            try:
                created = session.run(query, **params).single()["created"]
            except (Neo4jError, DriverError) as e:
                raise RelationshipMaterializationError(
                    f"Failed to create {rel_type.name}: {e}", relationship_type=rel_type.name
                ) from e
            logger.info(f"Created {created} {rel_type.name} relationships")
            total += created
        return total

    def generate_demo_data(self, dataset: Dataset, graph_model: GraphModel) -> LoadResult:
        """
        Build the offline preview: the first records as nodes chained by sequential edges.
        """
        node_type = graph_model.node_types[0].name if graph_model.node_types else 'Entity'
        nodes = [
            {
                'id': f"node_{index}",
                'label': f"{node_type} {index + 1}",
                'group': node_type,
                'properties': {key: to_property_value(value) for key, value in record.items() if not is_null(value)},
            }
            for index, record in enumerate(dataset.records[:DEMO_NODE_LIMIT])
        ]
        edges = [
            {
                'id': f"edge_{index}",
                'from': nodes[index]['id'],
                'to': nodes[index + 1]['id'],
                'label': 'RELATES_TO',
            }
            for index in range(min(DEMO_EDGE_LIMIT, len(nodes) - 1))
        ]
        logger.info(f"Generated demo preview with {len(nodes)} nodes and {len(edges)} edges")
        self.load_state = "loaded"
        return LoadResult(
            node_count=len(nodes),
            relationship_count=len(edges),
            demo_mode=True,
            graph_data={'nodes': nodes, 'edges': edges},
            insights=[dict(insight) for insight in DEMO_INSIGHTS],
            message=DEMO_MESSAGE,
        )


def load_graph_node(state: ModelingState, loader: GraphLoader) -> Dict[str, Any]:
    """
    Load the dataset into the graph store.

    Args:
        state: The current modeling state
        loader: Loader bound by the modeling graph

    Returns:
        State update with load_result
    """
    logger.info(f"Loading {state['dataset'].row_count} records into the graph store")
    result = loader.load(state['dataset'], state['graph_model'])
    if result.demo_mode:
        logger.info(result.message)
    return {'load_result': result}
