"""
Pipeline orchestration for Tabular to Graph.

Runs jobs through the dataLoading, dataStructuring and graphModeling steps, keeps a
bounded job history, and publishes status events for every transition.
"""

import threading
import time
import uuid
from collections import deque
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Callable, Dict, List, Optional

from Tabular_to_Graph.app_state import Job, PipelineResult, Step
from Tabular_to_Graph.config import JOB_HISTORY_LIMIT, MAX_CONCURRENT_JOBS
from Tabular_to_Graph.exceptions import InputError, JobNotFoundError, PipelineError
from Tabular_to_Graph.graphs.modeling_graph import run_modeling
from Tabular_to_Graph.graphs.structuring_graph import run_structuring
from Tabular_to_Graph.models import Dataset
from Tabular_to_Graph.nodes.graph_modeling import GraphLoader
from Tabular_to_Graph.nodes.input import load_dataset
from Tabular_to_Graph.orchestration.status_channel import StatusChannel, StatusEvent
from Tabular_to_Graph.utils.logging_config import get_logger

# Configure logging
logger = get_logger(__name__)

DATA_LOADING = "dataLoading"
DATA_STRUCTURING = "dataStructuring"
GRAPH_MODELING = "graphModeling"


def generate_job_id() -> str:
    return f"job_{int(time.time() * 1000)}_{uuid.uuid4().hex[:9]}"


def validate_dataset(dataset: Dataset) -> Dataset:
    if dataset.row_count == 0:
        raise InputError("Dataset contains no records")
    if not dataset.columns:
        raise InputError("Dataset has no columns")
    return dataset


def create_local_file_job(file_path: str, file_type: Optional[str] = None) -> Dict[str, Any]:
    return {'data_source': {'source': 'local', 'path': file_path, 'type': file_type}}


def create_upload_job(file_path: str, file_type: Optional[str] = None) -> Dict[str, Any]:
    return {'data_source': {'source': 'upload', 'path': file_path, 'type': file_type}}


def create_records_job(records: List[Dict[str, Any]]) -> Dict[str, Any]:
    return {'data_source': {'source': 'records', 'data': records}}


class PipelineOrchestrator:
    """
    Runs pipeline jobs and tracks their progress.

    Jobs run their steps strictly in sequence. Jobs handed to `submit` may run
    concurrently on a worker pool; `process_data`, `run_pipeline` and
    `process_batch` run on the calling thread.

    Example:
        with PipelineOrchestrator() as orchestrator:
            result = orchestrator.process_data(create_local_file_job("people.csv"))
            status = orchestrator.get_job_status(result.job_id)
    """

    def __init__(
        self,
        loader: Optional[GraphLoader] = None,
        max_workers: int = MAX_CONCURRENT_JOBS,
        history_limit: int = JOB_HISTORY_LIMIT,
    ):
        self.loader = loader if loader is not None else GraphLoader()
        self.status_channel = StatusChannel()
        self.max_workers = max_workers
        self._history = deque(maxlen=history_limit)
        self._futures: Dict[str, Future] = {}
        self._lock = threading.Lock()
        self._executor: Optional[ThreadPoolExecutor] = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    # Status subscriptions

    def subscribe(self, maxsize: int = 0):
        """Return a queue that receives every StatusEvent published from now on."""
        return self.status_channel.subscribe(maxsize)

    def unsubscribe(self, subscriber) -> None:
        self.status_channel.unsubscribe(subscriber)

    # Job entry points

    def process_data(self, job_config: Dict[str, Any]) -> PipelineResult:
        """
        Run one job synchronously.

        Args:
            job_config: Mapping with a 'data_source' entry understood by load_dataset

        Returns:
            PipelineResult of the job

        Raises:
            PipelineError: If any step fails; the error carries the failing step in `stage`
        """
        job = self._create_job(job_config)
        return self._execute(job)

    def run_pipeline(self, dataset: Dataset, job_config: Optional[Dict[str, Any]] = None) -> PipelineResult:
        """Run one job synchronously for an already loaded dataset."""
        job = self._create_job(job_config or {'data_source': {'source': 'dataset'}})
        return self._execute(job, dataset=dataset)

    def submit(self, job_config: Dict[str, Any]) -> str:
        """
        Queue a job on the worker pool.

        The job is registered before this returns, so its status can be queried at once.

        Returns:
            Job id
        """
        job = self._create_job(job_config)
        future = self._get_executor().submit(self._execute, job)
        with self._lock:
            self._futures[job.id] = future
        return job.id

    def wait(self, job_id: str, timeout: Optional[float] = None) -> PipelineResult:
        """
        Block until a job finishes.

        Raises:
            JobNotFoundError: If the job id is unknown
            PipelineError: If the job failed
            concurrent.futures.TimeoutError: If the job is still running after `timeout` seconds
        """
        with self._lock:
            future = self._futures.get(job_id)
        if future is not None:
            return future.result(timeout=timeout)

        job = self._find_job(job_id)
        if job.status == "failed":
            failed = job.current_step()
            raise PipelineError(job.error or "Job failed", stage=failed.name if failed else None)
        return job.result

    def process_batch(self, job_configs: List[Dict[str, Any]]) -> Dict[str, Any]:
        """
        Run jobs one after another, collecting results and failures.

        Returns:
            Mapping with 'results', 'errors' and a 'summary' of the counts
        """
        logger.info(f"Processing batch of {len(job_configs)} jobs")
        results = []
        errors = []
        for index, job_config in enumerate(job_configs):
            logger.info(f"Processing job {index + 1}/{len(job_configs)}")
            job = self._create_job(job_config)
            try:
                result = self._execute(job)
            except Exception as e:
                errors.append({'index': index, 'job_id': job.id, 'error': str(e)})
                continue
            results.append({'index': index, 'job_id': job.id, 'result': result})

        logger.info(f"Batch processing completed. {len(results)} successful, {len(errors)} failed")
        return {
            'results': results,
            'errors': errors,
            'summary': {
                'total': len(job_configs),
                'successful': len(results),
                'failed': len(errors),
            },
        }

    # Job queries

    def get_job_status(self, job_id: str) -> Dict[str, Any]:
        """
        Full status of a job, including every step with its timing.

        Raises:
            JobNotFoundError: If the job id is unknown or was evicted from the history
        """
        return self._find_job(job_id).to_status()

    get_status = get_job_status

    def get_job_history(self) -> List[Dict[str, Any]]:
        with self._lock:
            jobs = list(self._history)
        return [job.to_summary() for job in jobs]

    def close(self):
        """Stop the worker pool and release the graph store connection."""
        with self._lock:
            executor, self._executor = self._executor, None
        if executor is not None:
            executor.shutdown(wait=True)
        self.loader.close()
        logger.info("Pipeline orchestrator stopped")

    # Internals

    def _get_executor(self) -> ThreadPoolExecutor:
        with self._lock:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=self.max_workers, thread_name_prefix="pipeline-job"
                )
            return self._executor

    def _create_job(self, job_config: Dict[str, Any]) -> Job:
        job = Job(id=generate_job_id(), config=job_config, start_time=time.time())
        with self._lock:
            if len(self._history) == self._history.maxlen:
                evicted = self._history[0]
                self._futures.pop(evicted.id, None)
            self._history.append(job)
        logger.info(f"Starting data processing job {job.id}")
        self.status_channel.publish(StatusEvent(job_id=job.id, status="started"))
        return job

    def _find_job(self, job_id: str) -> Job:
        with self._lock:
            for job in self._history:
                if job.id == job_id:
                    return job
        raise JobNotFoundError(job_id)

    def _run_step(self, job: Job, name: str, action: Callable[[], Any], summarize: Callable[[Any], Any]):
        step = Step(name=name, start_time=time.time())
        job.steps.append(step)
        self.status_channel.publish(StatusEvent(job_id=job.id, step=name, status="started"))
        try:
            outcome = action()
        except Exception as e:
            if isinstance(e, PipelineError) and e.stage is None:
                e.stage = name
            step.status = "failed"
            step.end_time = time.time()
            step.error = str(e)
            self.status_channel.publish(StatusEvent(job_id=job.id, step=name, status="failed", error=str(e)))
            raise
        step.status = "completed"
        step.end_time = time.time()
        step.result = summarize(outcome)
        self.status_channel.publish(StatusEvent(job_id=job.id, step=name, status="completed"))
        return outcome

    def _load(self, job: Job) -> Dataset:
        config = job.config
        if not isinstance(config, dict) or not isinstance(config.get('data_source'), dict):
            raise InputError("Job configuration must contain a 'data_source' mapping")
        return validate_dataset(load_dataset(config['data_source']))

    def _execute(self, job: Job, dataset: Optional[Dataset] = None) -> PipelineResult:
        try:
            logger.info("Step 1: Loading data")
            if dataset is None:
                dataset = self._run_step(job, DATA_LOADING, lambda: self._load(job), _summarize_dataset)
            else:
                loaded = dataset
                dataset = self._run_step(job, DATA_LOADING, lambda: validate_dataset(loaded), _summarize_dataset)

            logger.info("Step 2: Structuring data")
            structuring = self._run_step(job, DATA_STRUCTURING, lambda: run_structuring(dataset), _summarize_structuring)

            logger.info("Step 3: Creating graph model")
            modeling = self._run_step(
                job,
                GRAPH_MODELING,
                lambda: run_modeling(structuring['cleaned_dataset'], structuring['schema'], self.loader),
                _summarize_modeling,
            )
        except Exception as e:
            logger.error(f"Job {job.id} failed: {e}")
            job.status = "failed"
            job.end_time = time.time()
            job.error = str(e)
            self.status_channel.publish(StatusEvent(job_id=job.id, status="failed", error=str(e)))
            raise

        load_result = modeling['load_result']
        job.result = PipelineResult(
            job_id=job.id,
            schema=structuring['schema'],
            relationships=list(structuring['relationships']),
            graph_model=modeling['graph_model'],
            load_result=load_result,
            graph_analysis=modeling['graph_analysis'],
            insights=modeling['insights'],
            column_profiles=structuring['column_profiles'],
            data_quality=structuring['data_quality'],
            demo_mode=load_result.demo_mode,
        )
        job.status = "completed"
        job.end_time = time.time()
        logger.info(f"Job {job.id} completed successfully")
        self.status_channel.publish(StatusEvent(job_id=job.id, status="completed"))
        return job.result


def _summarize_dataset(dataset: Dataset) -> Dict[str, Any]:
    return {'row_count': dataset.row_count, 'columns': list(dataset.columns)}


def _summarize_structuring(state) -> Dict[str, Any]:
    return {
        'column_count': len(state['column_profiles']),
        'relationship_count': len(state['relationships']),
        'data_quality': state['data_quality'].overall,
    }


def _summarize_modeling(state) -> Dict[str, Any]:
    load_result = state['load_result']
    return {
        'node_count': load_result.node_count,
        'relationship_count': load_result.relationship_count,
        'demo_mode': load_result.demo_mode,
    }
