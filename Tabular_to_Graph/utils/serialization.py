"""Utility helpers for JSON serialization of pipeline results.

This module provides a `json_default` function that can be passed to
`json.dump(..., default=json_default)` so that the objects produced by the
pipeline (dataclasses, numpy scalars, datetimes, etc.) are converted to a
JSON-serialisable representation rather than falling back to `str(obj)`.

The strategy is:
1. dataclasses -> `dataclasses.asdict`, plus the derived `constraints` /
   `indexes` views for a `GraphModel`.
2. numpy scalars and arrays -> native Python values.
3. `datetime` / `date` / `pandas.Timestamp` -> ISO-8601 string.
4. `set`, `frozenset`, `tuple` -> list.
5. Anything else -> fall back to `str(obj)`.
"""

from dataclasses import asdict, fields, is_dataclass
from datetime import date, datetime
from typing import Any

import numpy as np
import pandas as pd

from Tabular_to_Graph.models import GraphModel

__all__ = ["json_default", "to_serializable"]


def json_default(obj: Any):  # noqa: ANN401 – signature required by json
    """Default handler for `json.dump`/`json.dumps`.

    Example
    -------
    >>> json.dumps(result, default=json_default)
    """
    if isinstance(obj, GraphModel):
        return obj.to_dict()
    if is_dataclass(obj) and not isinstance(obj, type):
        return asdict(obj)
    if isinstance(obj, np.generic):
        return obj.item()
    if isinstance(obj, np.ndarray):
        return obj.tolist()
    if isinstance(obj, (datetime, date, pd.Timestamp)):
        return obj.isoformat()
    if isinstance(obj, (set, frozenset, tuple)):
        return list(obj)
    return str(obj)


def to_serializable(obj: Any) -> Any:
    """Recursively convert an object graph into plain JSON-compatible values."""
    if obj is None or isinstance(obj, (str, bool, int, float)):
        return obj
    if isinstance(obj, dict):
        return {str(key): to_serializable(value) for key, value in obj.items()}
    if isinstance(obj, (list, tuple, set, frozenset)):
        return [to_serializable(value) for value in obj]
    if is_dataclass(obj) and not isinstance(obj, (type, GraphModel)):
        return {f.name: to_serializable(getattr(obj, f.name)) for f in fields(obj)}
    return to_serializable(json_default(obj))
