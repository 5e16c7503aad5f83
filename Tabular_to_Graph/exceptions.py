"""
Exception hierarchy for the Tabular to Graph pipeline.
Stage-level errors bubble up to the orchestrator, which records the failing stage.
"""

from typing import Optional


class PipelineError(Exception):
    """Base class for all pipeline errors."""

    def __init__(self, message: str, stage: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.stage = stage

    def __str__(self) -> str:
        if self.stage:
            return f"[{self.stage}] {self.message}"
        return self.message


class InputError(PipelineError, ValueError):
    """Empty or malformed dataset, or an unusable job configuration."""


class StoreUnavailableError(PipelineError):
    """The graph store could not be reached when the loader was initialized."""


class WriteError(PipelineError):
    """A write against the graph store failed."""


class RelationshipMaterializationError(PipelineError):
    """Materializing one relationship type failed; remaining types are skipped."""

    def __init__(self, message: str, relationship_type: Optional[str] = None, stage: Optional[str] = None):
        super().__init__(message, stage=stage)
        self.relationship_type = relationship_type


class JobNotFoundError(PipelineError, LookupError):
    """No job with the requested id is known to the orchestrator."""

    def __init__(self, job_id: str):
        super().__init__(f"Job {job_id} not found")
        self.job_id = job_id
