"""
Tests for the column analytics utilities.
"""

import math

import pytest

from Tabular_to_Graph.models import ColumnProfile, Dataset
from Tabular_to_Graph.utils.analytics_utils import (
    analyze_all_columns,
    analyze_column,
    assess_data_quality,
    calculate_statistics,
    clean_value,
    detect_data_type,
    detect_patterns,
    is_null,
)


@pytest.mark.unit
@pytest.mark.parametrize(
    "values, expected",
    [
        (["true", "False", "yes", "NO"], "boolean"),
        (["1", "0", "1"], "boolean"),
        ([10, 20, 30], "number"),
        (["1.5", "2", "-3"], "number"),
        (["2023-01-15", "2023-02-20"], "date"),
        (["john@example.com", "jane@test.org"], "email"),
        (["https://example.com", "http://test.org/path"], "url"),
        (["+1 (555) 123-4567", "555-987-6543"], "phone"),
        (["abc-123", "def_456", "XYZ9"], "id"),
        (["New York", "LA"], "string"),
        ([], "unknown"),
    ],
)
def test_detect_data_type(values, expected):
    """Each value family resolves to its type under the precedence order."""
    assert detect_data_type(values) == expected


@pytest.mark.unit
def test_detect_data_type_only_tests_first_ten_values():
    values = [str(i) for i in range(2, 12)] + ["not a number"]
    assert detect_data_type(values) == "number"


@pytest.mark.unit
def test_is_null():
    assert is_null(None)
    assert is_null("")
    assert is_null(float("nan"))
    assert not is_null(0)
    assert not is_null(" ")


@pytest.mark.unit
def test_detect_patterns_from_name_and_values():
    assert detect_patterns("user_id", [1, 2, 3], "number") == ["identifier", "integer", "positive"]
    assert detect_patterns("price", [1.5, -2.0], "number") == ["decimal"]
    assert detect_patterns("customer_name", ["Ann", "Bob"], "string") == ["name", "fixed_length"]
    assert detect_patterns("email_address", ["a@b.co"], "email") == ["email", "address"]
    assert detect_patterns("created_time", ["x"], "date") == ["temporal"]


@pytest.mark.unit
def test_calculate_statistics_for_numbers():
    stats = calculate_statistics([1, 2, 3, 4], "number")
    assert stats["min"] == 1
    assert stats["max"] == 4
    assert stats["mean"] == 2.5
    assert stats["median"] == 2.5
    assert math.isclose(stats["std_dev"], math.sqrt(1.25))


@pytest.mark.unit
def test_calculate_statistics_for_strings_and_other_types():
    stats = calculate_statistics(["a", "abc"], "string")
    assert stats == {"min_length": 1.0, "max_length": 3.0, "avg_length": 2.0}
    assert calculate_statistics(["2023-01-01"], "date") == {}


@pytest.mark.unit
def test_analyze_column_counts_nulls_over_the_sample():
    profile = analyze_column("age", [30, None, "", 40])
    assert profile.data_type == "number"
    assert profile.null_count == 2
    assert profile.null_percentage == 50.0
    assert profile.unique_count == 2
    assert profile.sample_values == (30, 40)


@pytest.mark.unit
def test_analyze_column_without_values_is_unknown():
    profile = analyze_column("empty", [None, None])
    assert profile.data_type == "unknown"
    assert profile.statistics == {}
    assert profile.null_percentage == 100.0


@pytest.mark.unit
def test_analyze_all_columns_uses_bounded_sample():
    dataset = Dataset.from_records([{"id": i, "label": f"item-{i}"} for i in range(150)])
    profiles = analyze_all_columns(dataset, sample_size=100)
    assert list(profiles) == ["id", "label"]
    assert profiles["id"].unique_count == 100
    assert len(profiles["label"].sample_values) == 5


@pytest.mark.unit
def test_analyze_all_columns_treats_missing_keys_as_null():
    dataset = Dataset.from_records([{"a": 1, "b": "x"}, {"a": 2}])
    profiles = analyze_all_columns(dataset)
    assert profiles["b"].null_count == 1


@pytest.mark.unit
def test_assess_data_quality():
    profiles = {
        "a": ColumnProfile(name="a", data_type="number", null_percentage=0.0),
        "b": ColumnProfile(name="b", data_type="unknown", null_percentage=100.0),
    }
    quality = assess_data_quality(profiles)
    assert quality.completeness == pytest.approx(50.0)
    assert quality.consistency == pytest.approx(40.0)
    assert quality.accuracy == pytest.approx(40.0)
    assert quality.overall == pytest.approx(130.0 / 3)


@pytest.mark.unit
@pytest.mark.parametrize(
    "value, data_type, expected",
    [
        ("3", "number", 3),
        ("2.5", "number", 2.5),
        ("Yes", "boolean", True),
        ("0", "boolean", False),
        (" A@B.COM ", "email", "a@b.com"),
        ("2023-01-15", "date", "2023-01-15T00:00:00"),
        ("  padded ", "string", "padded"),
        ("", "string", None),
        (None, "number", None),
    ],
)
def test_clean_value(value, data_type, expected):
    assert clean_value(value, data_type) == expected


@pytest.mark.unit
def test_digit_separators_are_not_numbers():
    profile = analyze_column("qty", ["1_000", "2_000"])
    assert profile.data_type != "number"

    mixed = analyze_column("qty", ["1000", "2000", "3_000"])
    assert mixed.data_type != "number"


@pytest.mark.unit
def test_number_statistics_follow_type_detection():
    profile = analyze_column("qty", ["10", " 20 ", "1e1"])
    assert profile.data_type == "number"
    assert profile.statistics["min"] == 10
    assert profile.statistics["max"] == 20
    assert "integer" in profile.patterns
