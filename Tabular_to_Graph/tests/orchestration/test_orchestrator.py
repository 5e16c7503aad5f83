"""
Tests for the pipeline orchestrator.
"""

import queue

import pytest
from unittest.mock import MagicMock

from Tabular_to_Graph.exceptions import InputError, JobNotFoundError
from Tabular_to_Graph.orchestration import (
    PipelineOrchestrator,
    create_local_file_job,
    create_records_job,
)
from Tabular_to_Graph.orchestration.orchestrator import DATA_LOADING, generate_job_id


def drain(subscriber):
    events = []
    while True:
        try:
            events.append(subscriber.get_nowait())
        except queue.Empty:
            return events


@pytest.mark.unit
def test_generate_job_id_format():
    job_id = generate_job_id()
    prefix, millis, suffix = job_id.split("_")
    assert prefix == "job"
    assert millis.isdigit()
    assert len(suffix) == 9
    assert generate_job_id() != job_id


@pytest.mark.integration
def test_process_records_job(orchestrator, manager_records):
    result = orchestrator.process_data(create_records_job(manager_records))

    assert result.demo_mode
    assert result.load_result.node_count == 3
    assert result.load_result.relationship_count <= 2
    assert [rel.type for rel in result.relationships] == ["foreign_key"]
    assert [rel.name for rel in result.graph_model.relationship_types] == ["RELATES_TO_ID_MGR"]
    assert result.insights["summary"]["total_nodes"] == 3

    status = orchestrator.get_job_status(result.job_id)
    assert status["status"] == "completed"
    assert [(s["name"], s["status"]) for s in status["steps"]] == [
        ("dataLoading", "completed"),
        ("dataStructuring", "completed"),
        ("graphModeling", "completed"),
    ]
    assert all(s["duration"] is not None for s in status["steps"])


@pytest.mark.integration
def test_process_local_file_job(orchestrator, sample_csv_content):
    result = orchestrator.process_data(create_local_file_job(sample_csv_content))

    assert result.schema.main_entity.name == "MainEntity"
    assert [p.name for p in result.schema.main_entity.properties] == ["id", "name", "age", "email", "city"]
    assert result.column_profiles["email"].data_type == "email"
    assert result.load_result.node_count == 5


@pytest.mark.integration
def test_run_pipeline_with_loaded_dataset(orchestrator, manager_dataset):
    result = orchestrator.run_pipeline(manager_dataset)
    assert orchestrator.get_status(result.job_id)["status"] == "completed"


@pytest.mark.unit
def test_empty_dataset_fails_in_loading_step(orchestrator):
    with pytest.raises(InputError) as excinfo:
        orchestrator.process_data(create_records_job([]))

    assert excinfo.value.stage == DATA_LOADING
    history = orchestrator.get_job_history()
    assert len(history) == 1
    assert history[0]["status"] == "failed"
    assert history[0]["last_step"] == DATA_LOADING
    assert "no records" in history[0]["error"]


@pytest.mark.unit
@pytest.mark.parametrize("job_config", [
    {},
    {"data_source": "people.csv"},
    {"data_source": {"source": "odbc"}},
    {"data_source": {"source": "local", "path": "/no/such/file.csv"}},
])
def test_malformed_job_config(orchestrator, job_config):
    with pytest.raises(InputError):
        orchestrator.process_data(job_config)


@pytest.mark.integration
def test_process_batch_collects_failures(orchestrator, manager_records):
    outcome = orchestrator.process_batch([
        create_records_job(manager_records),
        {"data_source": {"source": "odbc"}},
        create_records_job(manager_records),
    ])

    assert outcome["summary"] == {"total": 3, "successful": 2, "failed": 1}
    assert [r["index"] for r in outcome["results"]] == [0, 2]
    assert outcome["errors"][0]["index"] == 1
    assert "Unsupported data source" in outcome["errors"][0]["error"]


@pytest.mark.unit
def test_unknown_job_id(orchestrator):
    with pytest.raises(JobNotFoundError):
        orchestrator.get_job_status("job_0_missing")
    with pytest.raises(JobNotFoundError):
        orchestrator.wait("job_0_missing")


@pytest.mark.integration
def test_submit_and_wait(orchestrator, manager_records):
    job_ids = [orchestrator.submit(create_records_job(manager_records)) for _ in range(3)]

    results = [orchestrator.wait(job_id, timeout=60) for job_id in job_ids]

    assert [r.job_id for r in results] == job_ids
    assert all(orchestrator.get_job_status(job_id)["status"] == "completed" for job_id in job_ids)


@pytest.mark.unit
def test_wait_reraises_job_failure(orchestrator):
    job_id = orchestrator.submit(create_records_job([]))
    with pytest.raises(InputError):
        orchestrator.wait(job_id, timeout=60)
    assert orchestrator.get_job_status(job_id)["status"] == "failed"


@pytest.mark.integration
def test_status_events_are_ordered(orchestrator, manager_records):
    subscriber = orchestrator.subscribe()

    result = orchestrator.process_data(create_records_job(manager_records))

    events = drain(subscriber)
    assert [(e.step, e.status) for e in events] == [
        (None, "started"),
        ("dataLoading", "started"),
        ("dataLoading", "completed"),
        ("dataStructuring", "started"),
        ("dataStructuring", "completed"),
        ("graphModeling", "started"),
        ("graphModeling", "completed"),
        (None, "completed"),
    ]
    assert {e.job_id for e in events} == {result.job_id}
    timestamps = [e.timestamp for e in events]
    assert timestamps == sorted(timestamps)


@pytest.mark.unit
def test_failure_events(orchestrator):
    subscriber = orchestrator.subscribe()

    with pytest.raises(InputError):
        orchestrator.process_data(create_records_job([]))

    events = drain(subscriber)
    assert [(e.step, e.status) for e in events] == [
        (None, "started"),
        ("dataLoading", "started"),
        ("dataLoading", "failed"),
        (None, "failed"),
    ]
    assert "no records" in events[-1].error


@pytest.mark.integration
def test_history_is_bounded(offline_loader, manager_records):
    with PipelineOrchestrator(loader=offline_loader, history_limit=2) as orchestrator:
        job_ids = [
            orchestrator.process_data(create_records_job(manager_records)).job_id
            for _ in range(3)
        ]

        assert [job["id"] for job in orchestrator.get_job_history()] == job_ids[1:]
        with pytest.raises(JobNotFoundError):
            orchestrator.get_job_status(job_ids[0])


@pytest.mark.unit
def test_close_releases_loader():
    loader = MagicMock()
    orchestrator = PipelineOrchestrator(loader=loader)
    orchestrator.close()
    loader.close.assert_called_once()
