"""
Test fixtures for Tabular to Graph tests.
"""

import pytest
from unittest.mock import MagicMock

from Tabular_to_Graph.models import Dataset
from Tabular_to_Graph.nodes.graph_modeling.graph_loading import GraphLoader
from Tabular_to_Graph.orchestration import PipelineOrchestrator


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast tests without external services")
    config.addinivalue_line("markers", "integration: tests that run whole stages or jobs")


@pytest.fixture
def sample_records():
    """Fixture that returns people-like records."""
    return [
        {"id": 1, "name": "John Doe", "age": 30, "email": "john@example.com", "city": "New York"},
        {"id": 2, "name": "Jane Smith", "age": 25, "email": "jane@example.com", "city": "Los Angeles"},
        {"id": 3, "name": "Bob Johnson", "age": 40, "email": "bob@example.com", "city": "Chicago"},
        {"id": 4, "name": "Alice Brown", "age": 35, "email": "alice@example.com", "city": "Houston"},
        {"id": 5, "name": "Charlie Wilson", "age": 28, "email": "charlie@example.com", "city": "Phoenix"},
    ]


@pytest.fixture
def sample_dataset(sample_records):
    return Dataset.from_records(sample_records)


@pytest.fixture
def manager_records():
    """Records whose mgr column references the id column."""
    return [{"id": 1, "mgr": 5}, {"id": 2, "mgr": 1}, {"id": 5, "mgr": 5}]


@pytest.fixture
def manager_dataset(manager_records):
    return Dataset.from_records(manager_records)


@pytest.fixture
def sample_csv_content(tmp_path):
    """Create a sample CSV file for testing."""
    content = """id,name,age,email,city
1,John Doe,30,john@example.com,New York
2,Jane Smith,25,jane@example.com,Los Angeles
3,Bob Johnson,40,bob@example.com,Chicago
4,Alice Brown,,alice@example.com,Houston
5,Charlie Wilson,28,charlie@example.com,Phoenix
"""
    path = tmp_path / "people.csv"
    path.write_text(content)
    return str(path)


@pytest.fixture
def offline_loader():
    return GraphLoader(offline=True)


@pytest.fixture
def orchestrator(offline_loader):
    with PipelineOrchestrator(loader=offline_loader) as orchestrator:
        yield orchestrator


@pytest.fixture
def mock_session():
    """Neo4j session mock whose queries each report three created elements."""
    session = MagicMock()
    session.run.return_value.single.return_value = {"created": 3, "count": 0}
    return session


@pytest.fixture
def mock_driver(mock_session):
    driver = MagicMock()
    driver.session.return_value.__enter__.return_value = mock_session
    driver.session.return_value.__exit__.return_value = False
    return driver
