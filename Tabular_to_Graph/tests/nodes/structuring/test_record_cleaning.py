"""
Tests for the record cleaning node.
"""

import pytest

from Tabular_to_Graph.models import ColumnProfile, Dataset
from Tabular_to_Graph.nodes.structuring.record_cleaning import clean_dataset, clean_records_node


@pytest.mark.unit
def test_clean_dataset_normalizes_by_type():
    dataset = Dataset.from_records([
        {"qty": "3", "active": "yes", "email": " Bob@Example.COM", "note": " hi "},
        {"qty": "", "active": "no", "email": "x@y.io"},
    ])
    cleaned = clean_dataset(dataset, {"qty": "number", "active": "boolean", "email": "email", "note": "string"})

    assert cleaned.records[0] == {"qty": 3, "active": True, "email": "bob@example.com", "note": "hi"}
    assert cleaned.records[1] == {"qty": None, "active": False, "email": "x@y.io", "note": None}
    # The source dataset is left untouched
    assert dataset.records[0]["qty"] == "3"


@pytest.mark.unit
def test_clean_records_node(manager_dataset):
    profiles = {
        "id": ColumnProfile(name="id", data_type="number"),
        "mgr": ColumnProfile(name="mgr", data_type="number"),
    }
    update = clean_records_node({"dataset": manager_dataset, "column_profiles": profiles})
    assert update["cleaned_dataset"].records == manager_dataset.records
