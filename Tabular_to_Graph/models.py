"""
Domain types produced by the structuring and graph modeling stages.

Profiles, candidates and schemas are frozen once built; the graph model and the
load/analysis results are plain containers handed from one stage to the next.
"""

from __future__ import annotations

from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List, Optional, Tuple

Record = Dict[str, Any]

DATA_TYPES = ("string", "number", "boolean", "date", "email", "url", "phone", "id", "unknown")
RELATIONSHIP_KINDS = ("foreign_key", "hierarchical", "temporal", "semantic")


@dataclass
class Dataset:
    """An ordered sequence of records sharing the column set of the first record."""

    records: List[Record] = field(default_factory=list)
    columns: List[str] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_records(cls, records: List[Record], metadata: Optional[Dict[str, Any]] = None) -> "Dataset":
        records = list(records or [])
        columns = list(records[0].keys()) if records and isinstance(records[0], dict) else []
        meta = {"type": "records", "row_count": len(records), "columns": columns}
        if metadata:
            meta.update(metadata)
        return cls(records=records, columns=columns, metadata=meta)

    @property
    def row_count(self) -> int:
        return len(self.records)

    def column_values(self, column: str) -> List[Any]:
        """Values of one column in row order; missing keys read as None."""
        return [row.get(column) for row in self.records]

    def __len__(self) -> int:
        return len(self.records)


@dataclass(frozen=True)
class ColumnProfile:
    name: str
    data_type: str
    patterns: Tuple[str, ...] = ()
    statistics: Dict[str, float] = field(default_factory=dict)
    null_count: int = 0
    null_percentage: float = 0.0
    unique_count: int = 0
    sample_values: Tuple[Any, ...] = ()

    def has_pattern(self, pattern: str) -> bool:
        return pattern in self.patterns


@dataclass(frozen=True)
class DataQuality:
    completeness: float = 0.0
    consistency: float = 0.0
    accuracy: float = 0.0
    overall: float = 0.0


@dataclass(frozen=True)
class RelationshipCandidate:
    type: str
    source: str
    target: str
    confidence: float
    description: str = ""


@dataclass(frozen=True)
class SchemaProperty:
    name: str
    type: str
    patterns: Tuple[str, ...] = ()
    nullable: bool = False
    unique: bool = False
    statistics: Dict[str, float] = field(default_factory=dict)


@dataclass(frozen=True)
class Entity:
    name: str
    properties: Tuple[SchemaProperty, ...] = ()


@dataclass(frozen=True)
class Constraint:
    type: str
    entity: str
    property: str


@dataclass(frozen=True)
class Schema:
    entities: Tuple[Entity, ...] = ()
    relationships: Tuple[RelationshipCandidate, ...] = ()
    constraints: Tuple[Constraint, ...] = ()

    @property
    def main_entity(self) -> Optional[Entity]:
        return self.entities[0] if self.entities else None


@dataclass
class NodeProperty:
    name: str
    type: str
    indexed: bool = False
    unique: bool = False


@dataclass
class NodeType:
    name: str
    properties: List[NodeProperty] = field(default_factory=list)
    constraints: List[Dict[str, str]] = field(default_factory=list)


@dataclass
class RelationshipType:
    name: str
    source: str
    target: str
    type: str
    properties: Dict[str, Any] = field(default_factory=dict)


@dataclass
class GraphModel:
    node_types: List[NodeType] = field(default_factory=list)
    relationship_types: List[RelationshipType] = field(default_factory=list)

    @property
    def constraints(self) -> List[Dict[str, str]]:
        return [
            {"label": node_type.name, **constraint}
            for node_type in self.node_types
            for constraint in node_type.constraints
        ]

    @property
    def indexes(self) -> List[Dict[str, str]]:
        return [
            {"label": node_type.name, "property": prop.name}
            for node_type in self.node_types
            for prop in node_type.properties
            if prop.indexed
        ]

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["constraints"] = self.constraints
        data["indexes"] = self.indexes
        return data


@dataclass
class LoadResult:
    node_count: int = 0
    relationship_count: int = 0
    demo_mode: bool = False
    graph_data: Optional[Dict[str, List[Dict[str, Any]]]] = None
    insights: List[Dict[str, Any]] = field(default_factory=list)
    message: str = ""


@dataclass
class GraphAnalysis:
    node_count: int = 0
    relationship_count: int = 0
    density: float = 0.0
    top_nodes: List[Dict[str, Any]] = field(default_factory=list)
    node_labels: List[str] = field(default_factory=list)
    relationship_types: List[str] = field(default_factory=list)
