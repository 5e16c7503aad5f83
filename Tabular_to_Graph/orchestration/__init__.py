"""
Job orchestration for the Tabular to Graph pipeline.
"""

from Tabular_to_Graph.orchestration.orchestrator import (
    PipelineOrchestrator,
    create_local_file_job,
    create_records_job,
    create_upload_job,
)
from Tabular_to_Graph.orchestration.status_channel import StatusChannel, StatusEvent

__all__ = [
    'PipelineOrchestrator',
    'StatusChannel',
    'StatusEvent',
    'create_local_file_job',
    'create_records_job',
    'create_upload_job',
]
