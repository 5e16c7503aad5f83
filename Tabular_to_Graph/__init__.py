"""
Tabular to Graph: infer the structure of tabular data and load it into Neo4j.
"""
