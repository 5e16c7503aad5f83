"""
Utility modules for the Tabular to Graph pipeline.
"""
