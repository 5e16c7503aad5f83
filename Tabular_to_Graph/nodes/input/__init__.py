"""
Input package for the Tabular to Graph pipeline.
This package contains the loader that turns a job's data source into a Dataset.
"""

from Tabular_to_Graph.nodes.input.dataset_loader import load_dataset

__all__ = [
    'load_dataset'
]
