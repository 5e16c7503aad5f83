"""
Main script for the Tabular to Graph pipeline.
"""

import argparse
import json
import os
import sys
from pathlib import Path

from Tabular_to_Graph.app_state import PipelineResult
from Tabular_to_Graph.config import CLEAR_EXISTING, GRAPH_STORE_OFFLINE
from Tabular_to_Graph.exceptions import PipelineError
from Tabular_to_Graph.nodes.graph_modeling import GraphLoader
from Tabular_to_Graph.orchestration import PipelineOrchestrator, create_local_file_job
from Tabular_to_Graph.utils.logging_config import get_logger, setup_logging
from Tabular_to_Graph.utils.serialization import json_default, to_serializable

# Get a logger for this module
logger = get_logger(__name__)

RESULT_FILENAME = "pipeline_result.json"


def save_result(result: PipelineResult, output_dir: str) -> Path:
    out_dir = Path(output_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    out_path = out_dir / RESULT_FILENAME
    with open(out_path, "w", encoding="utf-8") as f:
        json.dump(to_serializable(result), f, indent=2, default=json_default)
    logger.info(f"Saved pipeline result to {out_path}")
    return out_path


def run(
    input_path: str,
    output_dir: str = "samples",
    offline: bool = GRAPH_STORE_OFFLINE,
    clear_existing: bool = CLEAR_EXISTING,
) -> PipelineResult:
    """
    Run the full pipeline for one CSV or JSON file.
    Args:
        input_path: Path to the CSV or JSON file
        output_dir: Directory the result JSON is written to (default: samples)
        offline: Skip the graph store and produce the demo preview
        clear_existing: Wipe the graph store before loading
    Returns:
        The PipelineResult of the job
    """
    if not os.path.exists(input_path):
        logger.error(f"Input path not found: {input_path}")
        raise FileNotFoundError(f"Input path not found: {input_path}")
    file_size = os.path.getsize(input_path) / 1024  # KB
    logger.info(f"File size: {file_size:.2f} KB")

    loader = GraphLoader(offline=offline, clear_existing=clear_existing)
    with PipelineOrchestrator(loader=loader) as orchestrator:
        result = orchestrator.process_data(create_local_file_job(input_path))

    save_result(result, output_dir)
    summary = result.insights.get('summary', {})
    logger.info(
        f"Job {result.job_id}: {result.load_result.node_count} nodes, "
        f"{result.load_result.relationship_count} relationships, "
        f"connectivity {summary.get('connectivity', 'n/a')}"
        + (" (demo mode)" if result.demo_mode else "")
    )
    return result


def main():
    """
    Main entry point for the command-line interface.
    """
    parser = argparse.ArgumentParser(description="Run the Tabular to Graph pipeline.")
    parser.add_argument("--input_path", required=True, help="Path to the CSV or JSON file")
    parser.add_argument("--output_dir", "-o", default="samples", help="Directory to save the pipeline result to")
    parser.add_argument("--offline", action="store_true", default=GRAPH_STORE_OFFLINE,
                        help="Do not contact Neo4j; produce the demo preview instead")
    parser.add_argument("--clear-existing", action="store_true", default=CLEAR_EXISTING,
                        help="Delete all nodes and relationships before loading")
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Use the detailed log format"
    )
    parser.add_argument("--log-file", default=None, help="Also write logs to this file")
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Set the logging level (default: INFO)",
    )

    args = parser.parse_args()

    setup_logging(log_level=args.log_level, log_file=args.log_file, detailed_format=args.verbose)

    try:
        run(
            args.input_path,
            args.output_dir,
            offline=args.offline,
            clear_existing=args.clear_existing,
        )
    except (PipelineError, OSError) as e:
        logger.error("Error: %s", e)
        sys.exit(1)


if __name__ == "__main__":
    main()
