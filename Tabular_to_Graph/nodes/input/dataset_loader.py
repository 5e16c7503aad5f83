"""
Dataset loader module for the Tabular to Graph pipeline.
This module turns a job's data source into a Dataset of records.
"""

import os
from typing import Any, Dict, List, Tuple

import chardet
import numpy as np
import pandas as pd

from Tabular_to_Graph.config import CSV_ENCODING, CSV_DELIMITER
from Tabular_to_Graph.exceptions import InputError
from Tabular_to_Graph.models import Dataset, Record
from Tabular_to_Graph.utils.logging_config import get_logger

# Configure logging
logger = get_logger(__name__)

SUPPORTED_SOURCES = ("records", "local", "upload")
SUPPORTED_FILE_TYPES = ("csv", "json")
CANDIDATE_DELIMITERS = [',', ';', '\t', '|']


def file_encoding_detection(file_path: str) -> Tuple[str, float]:
    """
    Try to detect the encoding used in a text file.

    Args:
        file_path: The path to the file

    Returns:
        A tuple of (encoding, confidence); the configured encoding when detection is inconclusive
    """
    with open(file_path, 'rb') as f:
        raw_data = f.read(10000)  # Read a sample to detect encoding
    result = chardet.detect(raw_data)
    encoding = result.get('encoding') or CSV_ENCODING
    confidence = result.get('confidence') or 0.0
    logger.debug(f"Detected encoding: {encoding} with confidence: {confidence}")
    return encoding, confidence


def delimiter_detection(file_path: str, encoding: str) -> str:
    """
    Pick the delimiter that splits the first rows into more than one column.
    """
    for delimiter in CANDIDATE_DELIMITERS:
        try:
            df = pd.read_csv(file_path, delimiter=delimiter, nrows=5, encoding=encoding)
        except (pd.errors.ParserError, UnicodeDecodeError, ValueError):
            continue
        if len(df.columns) > 1:
            return delimiter
    return CSV_DELIMITER


def dataframe_to_records(df: pd.DataFrame) -> List[Record]:
    """Convert a DataFrame to records, mapping NaN/NaT to None and numpy scalars to Python values."""
    df = df.astype(object).where(pd.notna(df), None)
    records = []
    for row in df.to_dict(orient='records'):
        records.append({
            str(key): value.item() if isinstance(value, np.generic) else value
            for key, value in row.items()
        })
    return records


def load_csv_file(file_path: str) -> Dataset:
    encoding, _ = file_encoding_detection(file_path)
    delimiter = delimiter_detection(file_path, encoding)
    try:
        df = pd.read_csv(file_path, delimiter=delimiter, encoding=encoding, low_memory=False)
    except pd.errors.EmptyDataError as e:
        raise InputError(f"CSV file is empty: {file_path}") from e
    except (pd.errors.ParserError, UnicodeDecodeError) as e:
        raise InputError(f"Could not parse CSV file {file_path}: {e}") from e
    logger.debug(f"CSV file with {len(df)} rows and {len(df.columns)} columns using encoding: {encoding}")
    return Dataset.from_records(
        dataframe_to_records(df),
        metadata={"type": "csv", "path": file_path, "encoding": encoding, "delimiter": delimiter},
    )


def load_json_file(file_path: str) -> Dataset:
    try:
        df = pd.read_json(file_path, orient='records')
    except ValueError as e:
        raise InputError(f"Could not parse JSON file {file_path}: {e}") from e
    logger.debug(f"JSON file with {len(df)} rows and {len(df.columns)} columns")
    return Dataset.from_records(dataframe_to_records(df), metadata={"type": "json", "path": file_path})


def load_dataset(data_source: Dict[str, Any]) -> Dataset:
    """
    Load the dataset described by a job's data source.

    Args:
        data_source: Mapping with 'source' in {'records', 'local', 'upload'}; inline
            records under 'data', files under 'path' with an optional 'type' (csv or json)

    Returns:
        Dataset with records, columns and metadata

    Raises:
        InputError: If the data source is malformed, missing or of an unsupported type
    """
    if not isinstance(data_source, dict):
        raise InputError("Data source must be a mapping")

    source = data_source.get('source', 'records')
    if source not in SUPPORTED_SOURCES:
        raise InputError(f"Unsupported data source: {source}")

    if source == 'records':
        records = data_source.get('data')
        if not isinstance(records, list) or not all(isinstance(row, dict) for row in records):
            raise InputError("Inline data must be a list of records")
        logger.info(f"Using {len(records)} inline records")
        return Dataset.from_records(records)

    file_path = data_source.get('path')
    if not file_path:
        raise InputError(f"Data source '{source}' requires a path")
    if not os.path.exists(file_path):
        logger.error(f"Input path not found: {file_path}")
        raise InputError(f"Input path not found: {file_path}")

    file_type = (data_source.get('type') or os.path.splitext(file_path)[1].lstrip('.')).lower()
    logger.info(f"Loading {file_type} file: {file_path}")
    if file_type not in SUPPORTED_FILE_TYPES:
        raise InputError(f"Unsupported file type: {file_type}")
    if file_type == 'csv':
        return load_csv_file(file_path)
    return load_json_file(file_path)
