"""
Script run by the scheduler: move spooled accounting files into the backend
"""

import argparse
import sys
import logging

from core.config import settings
from core.exceptions import ConfigurationError, FatalRunError
from core.logging import setup_logging
from ingestion.runner import SpoolRunner
from schemas.results import RunSummary

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FATAL = 1
EXIT_RETAINED = 2
EXIT_NOT_DELETED = 3


def exit_code_for(summary: RunSummary) -> int:
    """Map a run summary to the process exit status."""
    if summary.files_not_deleted:
        return EXIT_NOT_DELETED
    if summary.files_retained:
        return EXIT_RETAINED
    return EXIT_OK


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Move spooled RADIUS accounting files into the SQL backend"
    )
    parser.add_argument(
        "--skip-rotation",
        action="store_true",
        help="Only process files already in the spool directory"
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help=f"Override LOG_LEVEL (default: {settings.LOG_LEVEL})"
    )
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    setup_logging(args.log_level)

    try:
        config = settings.to_spool_config()
    except ConfigurationError as e:
        logger.error(f"FATAL: {e}", extra={"error_context": e.to_dict()})
        return EXIT_FATAL

    try:
        summary = SpoolRunner(config, rotate=not args.skip_rotation).run()
    except FatalRunError as e:
        logger.error(f"FATAL: {e}", extra={"error_context": e.to_dict()})
        return EXIT_FATAL

    for result in summary.files:
        if result.retained:
            logger.warning(f"Retained {result.path}: {result.outcome.value}")

    return exit_code_for(summary)


if __name__ == "__main__":
    sys.exit(main())
