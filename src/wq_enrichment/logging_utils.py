"""
Centralized logging configuration for the enrichment pipeline.

Library modules should NOT call logging.basicConfig() - that's the
application's responsibility. Instead, they should just use:

    import logging
    logger = logging.getLogger(__name__)

Only the command line entry point calls setup_logging().
"""

import logging
import sys
from pathlib import Path
from typing import Optional

DEFAULT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# Chatty third-party loggers kept at WARNING unless running verbose
NOISY_LOGGERS = ('urllib3', 'requests')


def setup_logging(
    level: int = logging.INFO,
    log_file: Optional[Path] = None,
    format_string: Optional[str] = None
) -> None:
    """
    Configure logging for the application.

    Args:
        level: Logging level (default: INFO)
        log_file: Optional path to write logs to file
        format_string: Optional custom format string
    """
    if format_string is None:
        format_string = DEFAULT_FORMAT

    handlers = [logging.StreamHandler(sys.stdout)]

    if log_file:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=level,
        format=format_string,
        handlers=handlers,
        force=True  # Override any existing configuration
    )

    if level > logging.DEBUG:
        for name in NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)
