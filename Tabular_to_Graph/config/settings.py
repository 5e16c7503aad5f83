"""Configuration settings for the Tabular to Graph pipeline."""

import os
from dotenv import load_dotenv, find_dotenv

# Load environment variables from a .env file if present
load_dotenv(find_dotenv())


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


# Neo4j Configuration
NEO4J_URI = os.getenv("NEO4J_URI", "bolt://localhost:7687")
NEO4J_USER = os.getenv("NEO4J_USER", "neo4j")
NEO4J_PASSWORD = os.getenv("NEO4J_PASSWORD", "password")
NEO4J_DATABASE = os.getenv("NEO4J_DATABASE") or None  # None selects the server default database
GRAPH_STORE_OFFLINE = _env_flag("GRAPH_STORE_OFFLINE")  # Skip the connectivity check and run in demo mode
CLEAR_EXISTING = _env_flag("CLEAR_EXISTING")  # Wipe the store before loading (development runs only)
BATCH_SIZE = int(os.getenv("BATCH_SIZE", "1000"))  # Nodes per UNWIND batch


# CSV Processing Settings
CSV_ENCODING = "utf-8"  # Fallback encoding when detection is inconclusive
CSV_DELIMITER = ","  # Default delimiter for CSV files


# Analysis Settings
SAMPLE_SIZE = 100  # Rows profiled per column
TYPE_DETECTION_SAMPLE_SIZE = 10  # Non-null values tested during type classification
MAX_SAMPLE_VALUES = 5  # Sample values kept on each column profile
FOREIGN_KEY_OVERLAP_THRESHOLD = 0.5  # Overlap must be strictly greater than this
HIERARCHICAL_CONFIDENCE = 0.9
TEMPORAL_CONFIDENCE = 0.7
SEMANTIC_CONFIDENCE = 0.6
SEMANTIC_KEYWORDS = ("id", "name", "type", "status", "date", "time")


# Graph Model Settings
MAIN_ENTITY_NAME = "MainEntity"
ROW_INDEX_PROPERTY = "_row_index"  # Positional identifier stored on every loaded node
DEMO_NODE_LIMIT = 10
DEMO_EDGE_LIMIT = 5
TOP_NODES_LIMIT = 10


# Orchestration Settings
JOB_HISTORY_LIMIT = int(os.getenv("JOB_HISTORY_LIMIT", "100"))  # Oldest jobs are evicted beyond this
MAX_CONCURRENT_JOBS = int(os.getenv("MAX_CONCURRENT_JOBS", "5"))  # Worker threads for submitted jobs
