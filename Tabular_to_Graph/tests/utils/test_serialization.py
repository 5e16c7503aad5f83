"""
Tests for JSON serialization helpers.
"""

import json
from datetime import date, datetime

import numpy as np
import pandas as pd
import pytest

from Tabular_to_Graph.models import GraphAnalysis, GraphModel, LoadResult, NodeProperty, NodeType, Schema
from Tabular_to_Graph.app_state import PipelineResult
from Tabular_to_Graph.utils.serialization import json_default, to_serializable


@pytest.fixture
def graph_model():
    return GraphModel(node_types=[NodeType(
        name="MainEntity",
        properties=[NodeProperty(name="id", type="Float", indexed=True, unique=True)],
        constraints=[{"type": "UNIQUE", "property": "id"}],
    )])


@pytest.mark.unit
@pytest.mark.parametrize("value,expected", [
    (np.int64(3), 3),
    (np.float64(1.5), 1.5),
    (np.bool_(True), True),
    (np.array([1, 2]), [1, 2]),
    (datetime(2024, 1, 2, 3, 4, 5), "2024-01-02T03:04:05"),
    (date(2024, 1, 2), "2024-01-02"),
    (pd.Timestamp("2024-01-02"), "2024-01-02T00:00:00"),
])
def test_json_default(value, expected):
    assert json_default(value) == expected


@pytest.mark.unit
def test_json_default_falls_back_to_str():
    class Opaque:
        def __str__(self):
            return "opaque"

    assert json_default(Opaque()) == "opaque"
    assert sorted(json_default({"b", "a"})) == ["a", "b"]


@pytest.mark.unit
def test_graph_model_includes_derived_views(graph_model):
    data = json_default(graph_model)
    assert data["constraints"] == [{"label": "MainEntity", "type": "UNIQUE", "property": "id"}]
    assert data["indexes"] == [{"label": "MainEntity", "property": "id"}]


@pytest.mark.unit
def test_pipeline_result_round_trips_through_json(graph_model):
    result = PipelineResult(
        job_id="job_1",
        schema=Schema(),
        relationships=[],
        graph_model=graph_model,
        load_result=LoadResult(node_count=np.int64(3), demo_mode=True),
        graph_analysis=GraphAnalysis(node_count=3),
        insights={"summary": {"density": np.float64(0.5)}},
    )

    data = json.loads(json.dumps(to_serializable(result), default=json_default))

    assert data["job_id"] == "job_1"
    assert data["load_result"]["node_count"] == 3
    assert data["graph_model"]["indexes"] == [{"label": "MainEntity", "property": "id"}]
    assert data["insights"]["summary"]["density"] == 0.5
