"""
Utility functions for discovering relationships between the columns of a dataset.

Foreign-key candidates come from value overlap; hierarchical, temporal and
semantic candidates come from column names and inferred types only.
"""

from itertools import combinations
from typing import Any, Dict, Hashable, List, Sequence, Set

from Tabular_to_Graph.config import (
    FOREIGN_KEY_OVERLAP_THRESHOLD,
    HIERARCHICAL_CONFIDENCE,
    TEMPORAL_CONFIDENCE,
    SEMANTIC_CONFIDENCE,
    SEMANTIC_KEYWORDS,
)
from Tabular_to_Graph.models import ColumnProfile, Dataset, RelationshipCandidate
from Tabular_to_Graph.utils.analytics_utils import is_null
from Tabular_to_Graph.utils.logging_config import get_logger

logger = get_logger(__name__)


def value_key(value: Any) -> Hashable:
    """Hashable identity of a value; booleans are kept apart from 0 and 1."""
    if isinstance(value, bool):
        return ("bool", value)
    try:
        hash(value)
    except TypeError:
        return ("repr", repr(value))
    return value


def column_value_set(dataset: Dataset, column: str) -> Set[Hashable]:
    return {value_key(value) for value in dataset.column_values(column) if not is_null(value)}


def build_value_sets(dataset: Dataset) -> Dict[str, Set[Hashable]]:
    """Non-null value set of every column, computed once per dataset."""
    return {column: column_value_set(dataset, column) for column in dataset.columns}


def overlap_ratio(first: Set[Hashable], second: Set[Hashable]) -> float:
    if not first or not second:
        return 0.0
    return len(first & second) / min(len(first), len(second))


def common_values(dataset: Dataset, source: str, target: str) -> List[Any]:
    """
    Values present in both columns, in first-seen order of the source column.

    Args:
        dataset: Dataset holding both columns
        source: Source column name
        target: Target column name

    Returns:
        List of raw values shared by the two columns
    """
    target_keys = column_value_set(dataset, target)
    shared: List[Any] = []
    seen: Set[Hashable] = set()
    for value in dataset.column_values(source):
        if is_null(value):
            continue
        key = value_key(value)
        if key in target_keys and key not in seen:
            seen.add(key)
            shared.append(value)
    return shared


def detect_foreign_keys(
    dataset: Dataset,
    threshold: float = FOREIGN_KEY_OVERLAP_THRESHOLD,
) -> List[RelationshipCandidate]:
    """
    Emit one foreign_key candidate per column pair whose value overlap exceeds the threshold.

    Pairs are visited as (i, j) with i < j in column order; the source is always the earlier column.
    """
    value_sets = build_value_sets(dataset)
    candidates: List[RelationshipCandidate] = []

    for source, target in combinations(dataset.columns, 2):
        first, second = value_sets[source], value_sets[target]
        if not first & second:
            continue
        overlap = overlap_ratio(first, second)
        logger.debug(f"Overlap between '{source}' and '{target}': {overlap:.3f}")
        if overlap > threshold:
            candidates.append(RelationshipCandidate(
                type='foreign_key',
                source=source,
                target=target,
                confidence=overlap,
                description=f"Potential foreign key relationship between {source} and {target}",
            ))
    return candidates


def detect_hierarchical(profiles: Dict[str, ColumnProfile]) -> List[RelationshipCandidate]:
    """
    Pair parent-named and child-named columns.

    A parent column with no child columns hangs off the identifier columns instead,
    and a child column with no parent columns points at them.
    """
    columns = list(profiles)
    parents = [c for c in columns if 'parent' in c.lower()]
    children = [c for c in columns if 'child' in c.lower() and c not in parents]
    identifiers = [
        c for c in columns
        if profiles[c].has_pattern('identifier') and c not in parents and c not in children
    ]

    pairs = []
    if parents and children:
        pairs = [(parent, child) for parent in parents for child in children]
    elif parents:
        pairs = [(key, parent) for parent in parents for key in identifiers]
    elif children:
        pairs = [(child, key) for child in children for key in identifiers]

    return [
        RelationshipCandidate(
            type='hierarchical',
            source=source,
            target=target,
            confidence=HIERARCHICAL_CONFIDENCE,
            description=f"Parent-child relationship between {source} and {target}",
        )
        for source, target in pairs
    ]


def detect_temporal(profiles: Dict[str, ColumnProfile]) -> List[RelationshipCandidate]:
    """One chronological candidate per date-typed or date-named column, ordering rows by that column."""
    return [
        RelationshipCandidate(
            type='temporal',
            source=name,
            target=name,
            confidence=TEMPORAL_CONFIDENCE,
            description=f"Temporal relationship ordering records by {name}",
        )
        for name, profile in profiles.items()
        if profile.data_type == 'date' or 'date' in name.lower()
    ]


def are_columns_related(first: str, second: str, keywords: Sequence[str] = SEMANTIC_KEYWORDS) -> bool:
    """True when both names share a keyword, or one names an id and the other a name."""
    lower_first, lower_second = first.lower(), second.lower()
    for word in keywords:
        if word in lower_first and word in lower_second:
            return True
    if 'id' in lower_first and 'name' in lower_second:
        return True
    if 'name' in lower_first and 'id' in lower_second:
        return True
    return False


def detect_semantic(columns: Sequence[str]) -> List[RelationshipCandidate]:
    return [
        RelationshipCandidate(
            type='semantic',
            source=first,
            target=second,
            confidence=SEMANTIC_CONFIDENCE,
            description=f"Semantic relationship between {first} and {second}",
        )
        for first, second in combinations(columns, 2)
        if are_columns_related(first, second)
    ]


def detect_relationships(dataset: Dataset, profiles: Dict[str, ColumnProfile]) -> List[RelationshipCandidate]:
    """
    Run value-based and name-based detection over a cleaned dataset.

    Args:
        dataset: Cleaned dataset
        profiles: Column profiles keyed by column name

    Returns:
        Foreign-key candidates followed by hierarchical and temporal ones
    """
    candidates = detect_foreign_keys(dataset)
    candidates.extend(detect_hierarchical(profiles))
    candidates.extend(detect_temporal(profiles))
    return candidates
