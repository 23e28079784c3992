import logging
import sys
from typing import Optional


def setup_logging(level: Optional[str] = 'INFO') -> None:
    """Send migration log lines to stdout; calling it twice does not double the output."""
    log_level = getattr(logging, str(level).upper(), logging.INFO)
    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    formatter = logging.Formatter(
        fmt='%(asctime)s | %(levelname)s | %(name)s | %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
    )
    handler.setFormatter(formatter)
    root_logger.addHandler(handler)

    # SQLAlchemy's engine logger is noisy at INFO; keep it to warnings unless debugging.
    if log_level > logging.DEBUG:
        logging.getLogger('sqlalchemy.engine').setLevel(logging.WARNING)
