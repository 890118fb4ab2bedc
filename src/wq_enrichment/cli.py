"""
Command line interface for the water quality enrichment pipeline.

Reads the sample/rain CSV pairs dropped into the input directory, enriches
every sample with rainfall, tide and water quality history, and publishes
one dataset directory per date:

    enrich-data --input-dir scripts/input --output-dir public/data
"""

import argparse
from datetime import datetime
import logging
from pathlib import Path
import sys

import yaml

from . import config
from .logging_utils import setup_logging
from .pipeline import DatasetOrchestrator, PipelineError

logger = logging.getLogger(__name__)


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description='Enrich water quality samples with rainfall and tide data'
    )

    parser.add_argument(
        '--input-dir',
        type=Path,
        help='Directory holding the sample/rain CSV files (default from settings)'
    )

    parser.add_argument(
        '--output-dir',
        type=Path,
        help='Root of the published dataset tree (default from settings)'
    )

    parser.add_argument(
        '--config',
        type=Path,
        help='Custom settings YAML file'
    )

    parser.add_argument(
        '--keep-inputs',
        action='store_true',
        help='Do not delete input files after a date is processed'
    )

    parser.add_argument(
        '--log-file',
        type=Path,
        help='Log file path (default: a timestamped file under paths.log_dir)'
    )

    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Enable verbose logging'
    )

    return parser.parse_args(argv)


def default_log_file(settings) -> Path:
    """Timestamped log file under the configured log directory."""
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    return config.log_dir(settings) / f"enrich_data_{timestamp}.log"


def main(argv=None) -> int:
    """Main execution function.

    Returns:
        0 when the run completes (even if some dates failed), 1 on a fatal
        error
    """
    args = parse_args(argv)
    level = logging.DEBUG if args.verbose else logging.INFO

    try:
        settings = config.load_settings(args.config) if args.config else config.SETTINGS
    except (OSError, ValueError, yaml.YAMLError) as e:
        setup_logging(level=level, log_file=args.log_file)
        logger.error(f"Error loading settings: {e}")
        return 1

    log_file = args.log_file or default_log_file(settings)
    setup_logging(level=level, log_file=log_file)
    logger.info(f"Logging to {log_file}")

    input_dir = args.input_dir or config.input_dir(settings)
    output_dir = args.output_dir or config.output_dir(settings)

    try:
        orchestrator = DatasetOrchestrator(
            input_dir=input_dir,
            output_dir=output_dir,
            settings=settings,
            keep_inputs=args.keep_inputs
        )
        result = orchestrator.run()
    except PipelineError as e:
        logger.error(f"Enrichment failed: {e}")
        return 1

    if result.failed_dates:
        logger.warning(f"Dates that failed and kept their inputs: {', '.join(result.failed_dates)}")
    if result.incomplete_dates:
        logger.warning(f"Dates waiting for a missing file: {', '.join(result.incomplete_dates)}")
    logger.info(f"Processed dates: {', '.join(result.processed_dates) or 'none'}")
    if result.latest_date:
        logger.info(f"Latest dataset: {result.latest_date}")

    return 0


if __name__ == '__main__':
    sys.exit(main())
