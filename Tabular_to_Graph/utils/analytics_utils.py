"""
Utility functions for column analytics.
"""

import math
import re
from datetime import date, datetime
from typing import Any, Dict, List, Sequence
from urllib.parse import urlparse

import numpy as np
import pandas as pd

from Tabular_to_Graph.config import (
    SAMPLE_SIZE,
    TYPE_DETECTION_SAMPLE_SIZE,
    MAX_SAMPLE_VALUES,
)
from Tabular_to_Graph.models import ColumnProfile, DataQuality, Dataset
from Tabular_to_Graph.utils.logging_config import get_logger

logger = get_logger(__name__)

BOOLEAN_TOKENS = {"true", "false", "1", "0", "yes", "no"}
TRUTHY_TOKENS = {"true", "1", "yes", "y"}

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_PATTERN = re.compile(r"^\+?[1-9]\d{0,15}$")
PHONE_SEPARATORS = re.compile(r"[\s\-()]")
ID_PATTERN = re.compile(r"^[A-Za-z0-9\-_]+$")
URL_SCHEME_PATTERN = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*$")

DATE_FORMATS = [
    '%Y-%m-%d', '%d/%m/%Y', '%m/%d/%Y', '%Y/%m/%d', '%d-%m-%Y', '%m-%d-%Y',
    '%d.%m.%Y', '%Y-%m-%d %H:%M:%S', '%Y-%m-%d %H:%M', '%Y-%m-%dT%H:%M:%S',
    '%Y-%m-%dT%H:%M:%S.%f', '%m/%d/%Y %H:%M', '%m/%d/%Y %H:%M:%S',
    '%d %b %Y', '%d %B %Y', '%b %d, %Y', '%B %d, %Y',
]

# Substrings of the lower-cased column name and the tag each one yields
NAME_PATTERNS = [
    (("id", "key"), "identifier"),
    (("name",), "name"),
    (("email",), "email"),
    (("phone", "tel"), "phone"),
    (("date", "time"), "temporal"),
    (("address",), "address"),
    (("url", "link"), "url"),
]


def is_null(value: Any) -> bool:
    """True for None, NaN/NaT and empty strings."""
    if value is None or value is pd.NaT:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    if isinstance(value, str) and value == "":
        return True
    return False


def non_null_values(values: Sequence[Any]) -> List[Any]:
    return [value for value in values if not is_null(value)]


def parse_number(value: Any):
    """Return the value as a finite float, or None when it does not parse."""
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float, np.integer, np.floating)):
        number = float(value)
    else:
        text = str(value).strip()
        # digit separators such as 1_000 are not numbers
        if "_" in text:
            return None
        try:
            number = float(text)
        except (TypeError, ValueError):
            return None
    return number if math.isfinite(number) else None


def parse_date(value: Any):
    """Return a datetime for date-like values, or None."""
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if not isinstance(value, str):
        return None
    text = value.strip()
    if not text:
        return None
    for date_format in DATE_FORMATS:
        try:
            return datetime.strptime(text, date_format)
        except ValueError:
            continue
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        return None


def is_boolean_value(value: Any) -> bool:
    return str(value).lower() in BOOLEAN_TOKENS


def is_number_value(value: Any) -> bool:
    return parse_number(value) is not None


def is_date_value(value: Any) -> bool:
    return parse_date(value) is not None


def is_email_value(value: Any) -> bool:
    return bool(EMAIL_PATTERN.match(str(value)))


def is_url_value(value: Any) -> bool:
    text = str(value)
    if not text or any(ch.isspace() for ch in text):
        return False
    try:
        parsed = urlparse(text)
    except ValueError:
        return False
    if not parsed.scheme or not URL_SCHEME_PATTERN.match(parsed.scheme):
        return False
    return bool(parsed.netloc or parsed.path)


def is_phone_value(value: Any) -> bool:
    return bool(PHONE_PATTERN.match(PHONE_SEPARATORS.sub("", str(value))))


def looks_like_id(value: Any) -> bool:
    text = str(value)
    return bool(ID_PATTERN.match(text)) and len(text) > 3


# Ordered by specificity: the first check that accepts every sampled value wins
TYPE_CHECKS = [
    ("boolean", is_boolean_value),
    ("number", is_number_value),
    ("date", is_date_value),
    ("email", is_email_value),
    ("url", is_url_value),
    ("phone", is_phone_value),
    ("id", looks_like_id),
]


def detect_data_type(values: Sequence[Any], sample_size: int = TYPE_DETECTION_SAMPLE_SIZE) -> str:
    """
    Classify non-null values into one of the supported value types.

    Args:
        values: Non-null values of a column
        sample_size: Number of leading values tested

    Returns:
        One of 'boolean', 'number', 'date', 'email', 'url', 'phone', 'id', 'string', 'unknown'
    """
    if len(values) == 0:
        return 'unknown'

    sample = list(values[:sample_size])
    for data_type, check in TYPE_CHECKS:
        if all(check(value) for value in sample):
            return data_type
    return 'string'


def detect_patterns(column_name: str, values: Sequence[Any], data_type: str) -> List[str]:
    """
    Derive pattern tags from the column name and, for numbers and strings, from the values.
    """
    patterns: List[str] = []
    lower_name = column_name.lower()
    for needles, tag in NAME_PATTERNS:
        if any(needle in lower_name for needle in needles):
            patterns.append(tag)

    if data_type == 'number':
        numbers = pd.Series([parse_number(value) for value in values], dtype=float).dropna()
        if not numbers.empty:
            patterns.append('integer' if bool((numbers % 1 == 0).all()) else 'decimal')
            if bool((numbers >= 0).all()):
                patterns.append('positive')

    if data_type == 'string' and len(values) > 0:
        lengths = {len(str(value)) for value in values}
        if len(lengths) == 1:
            patterns.append('fixed_length')

    return patterns


def calculate_statistics(values: Sequence[Any], data_type: str) -> Dict[str, float]:
    """
    Numeric statistics for numbers, length statistics for strings, nothing otherwise.
    """
    if data_type == 'number':
        numbers = pd.Series([parse_number(value) for value in values], dtype=float).dropna()
        if numbers.empty:
            return {}
        array = numbers.to_numpy(dtype=float)
        return {
            'min': float(np.min(array)),
            'max': float(np.max(array)),
            'mean': float(np.mean(array)),
            'median': float(np.median(array)),
            'std_dev': float(np.std(array)),  # population standard deviation
        }

    if data_type == 'string':
        if len(values) == 0:
            return {}
        lengths = np.array([len(str(value)) for value in values], dtype=float)
        return {
            'min_length': float(lengths.min()),
            'max_length': float(lengths.max()),
            'avg_length': float(lengths.mean()),
        }

    return {}


def count_unique(values: Sequence[Any]) -> int:
    seen = set()
    for value in values:
        try:
            seen.add(value)
        except TypeError:
            seen.add(repr(value))
    return len(seen)


def analyze_column(column_name: str, sample_values: Sequence[Any]) -> ColumnProfile:
    """
    Profile one column from its sampled values (nulls included).

    Args:
        column_name: Name of the column
        sample_values: Column values for every sampled row, in row order

    Returns:
        ColumnProfile for the column
    """
    values = non_null_values(sample_values)
    total = len(sample_values)
    null_count = total - len(values)
    data_type = detect_data_type(values)

    return ColumnProfile(
        name=column_name,
        data_type=data_type,
        patterns=tuple(detect_patterns(column_name, values, data_type)),
        statistics=calculate_statistics(values, data_type),
        null_count=null_count,
        null_percentage=(null_count / total) * 100 if total else 0.0,
        unique_count=count_unique(values),
        sample_values=tuple(values[:MAX_SAMPLE_VALUES]),
    )


def sample_dataframe(dataset: Dataset, sample_size: int = SAMPLE_SIZE) -> pd.DataFrame:
    """First min(sample_size, N) records as an object-typed DataFrame; missing keys become None."""
    sample = dataset.records[:min(sample_size, len(dataset.records))]
    df = pd.DataFrame(sample, columns=dataset.columns, dtype=object)
    return df.astype(object).where(pd.notna(df), None)


def analyze_all_columns(dataset: Dataset, sample_size: int = SAMPLE_SIZE) -> Dict[str, ColumnProfile]:
    """
    Profile every column of a dataset from a bounded sample.

    Args:
        dataset: Dataset to profile
        sample_size: Upper bound on the number of rows sampled

    Returns:
        Dictionary mapping column names to their profiles, in column order
    """
    df = sample_dataframe(dataset, sample_size)
    results: Dict[str, ColumnProfile] = {}
    for column_name in dataset.columns:
        profile = analyze_column(column_name, df[column_name].tolist())
        logger.debug(
            f"Column '{column_name}': type={profile.data_type}, patterns={list(profile.patterns)}, "
            f"unique={profile.unique_count}, nulls={profile.null_percentage:.2f}%"
        )
        results[column_name] = profile
    return results


def assess_data_quality(profiles: Dict[str, ColumnProfile]) -> DataQuality:
    """
    Summarise completeness and type consistency of the profiled columns, as percentages.
    """
    if not profiles:
        return DataQuality()

    total_completeness = 0.0
    total_consistency = 0.0
    for profile in profiles.values():
        total_completeness += (100 - profile.null_percentage) / 100
        if profile.data_type != 'unknown':
            total_consistency += 0.8

    completeness = (total_completeness / len(profiles)) * 100
    consistency = (total_consistency / len(profiles)) * 100
    accuracy = min(completeness, consistency)
    return DataQuality(
        completeness=completeness,
        consistency=consistency,
        accuracy=accuracy,
        overall=(completeness + consistency + accuracy) / 3,
    )


def normalize_boolean(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).lower() in TRUTHY_TOKENS


def normalize_number(value: Any):
    number = parse_number(value)
    if number is None:
        return value
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, np.integer)) or (number.is_integer() and not isinstance(value, (float, np.floating))):
        return int(number)
    return number


def normalize_date(value: Any):
    parsed = parse_date(value)
    return parsed.isoformat() if parsed is not None else value


def clean_value(value: Any, data_type: str) -> Any:
    """Normalize a raw value according to its column type; nulls become None."""
    if is_null(value):
        return None
    if data_type == 'number':
        return normalize_number(value)
    if data_type == 'boolean':
        return normalize_boolean(value)
    if data_type == 'date':
        return normalize_date(value)
    if data_type == 'email':
        return str(value).lower().strip()
    if data_type == 'string':
        return str(value).strip()
    if isinstance(value, np.generic):
        return value.item()
    return value
