"""
Stage graphs for the Tabular to Graph pipeline.
"""
