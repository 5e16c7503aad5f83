from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, TypedDict

from Tabular_to_Graph.models import (
    ColumnProfile,
    DataQuality,
    Dataset,
    GraphAnalysis,
    GraphModel,
    LoadResult,
    RelationshipCandidate,
    Schema,
)

JOB_STATUSES = ("started", "completed", "failed")
STEP_NAMES = ("dataLoading", "dataStructuring", "graphModeling")


class StructuringState(TypedDict, total=False):
    """State carried through the data structuring graph."""

    dataset: Dataset
    column_profiles: Dict[str, ColumnProfile]
    data_quality: DataQuality
    cleaned_dataset: Dataset
    relationships: List[RelationshipCandidate]
    schema: Schema


class ModelingState(TypedDict, total=False):
    """State carried through the graph modeling graph."""

    dataset: Dataset
    schema: Schema
    column_profiles: Dict[str, ColumnProfile]
    graph_model: GraphModel
    load_result: LoadResult
    graph_analysis: GraphAnalysis
    insights: Dict[str, Any]


@dataclass
class Step:
    name: str
    status: str = "started"
    start_time: Optional[float] = None
    end_time: Optional[float] = None
    result: Any = None
    error: Optional[str] = None

    @property
    def duration(self) -> Optional[float]:
        if self.start_time is None or self.end_time is None:
            return None
        return self.end_time - self.start_time

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "status": self.status,
            "start_time": self.start_time,
            "end_time": self.end_time,
            "duration": self.duration,
            "error": self.error,
        }


@dataclass
class PipelineResult:
    """Everything a completed job produced."""

    job_id: str
    schema: Schema
    relationships: List[RelationshipCandidate]
    graph_model: GraphModel
    load_result: LoadResult
    graph_analysis: GraphAnalysis
    insights: Dict[str, Any] = field(default_factory=dict)
    column_profiles: Dict[str, ColumnProfile] = field(default_factory=dict)
    data_quality: Optional[DataQuality] = None
    demo_mode: bool = False


@dataclass
class Job:
    id: str
    config: Dict[str, Any] = field(default_factory=dict)
    status: str = "started"
    steps: List[Step] = field(default_factory=list)
    start_time: Optional[float] = None
    end_time: Optional[float] = None
    result: Optional[PipelineResult] = None
    error: Optional[str] = None

    @property
    def duration(self) -> Optional[float]:
        if self.start_time is None or self.end_time is None:
            return None
        return self.end_time - self.start_time

    def current_step(self) -> Optional[Step]:
        return self.steps[-1] if self.steps else None

    def to_status(self) -> Dict[str, Any]:
        """Full status with the step history."""
        return {
            "id": self.id,
            "status": self.status,
            "start_time": self.start_time,
            "end_time": self.end_time,
            "duration": self.duration,
            "error": self.error,
            "steps": [step.to_dict() for step in self.steps],
        }

    def to_summary(self) -> Dict[str, Any]:
        current = self.current_step()
        return {
            "id": self.id,
            "status": self.status,
            "start_time": self.start_time,
            "end_time": self.end_time,
            "duration": self.duration,
            "step_count": len(self.steps),
            "last_step": current.name if current else None,
            "error": self.error,
        }
