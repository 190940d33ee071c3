import logging
import os
import sys
from datetime import datetime
from typing import Optional

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(level: str = "INFO", log_dir: Optional[str] = None) -> Optional[str]:
    """
    Configure the root logger with a console handler and, when ``log_dir``
    is given, a timestamped file handler.

    Returns:
        Path of the log file, or None when only console logging is enabled
    """
    root = logging.getLogger()
    root.setLevel(level.upper())

    formatter = logging.Formatter(LOG_FORMAT)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)

    # Drop handlers from a previous call before adding ours
    root.handlers = []
    root.addHandler(console_handler)

    log_filename = None
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        log_filename = os.path.join(log_dir, f"bytescale_{datetime.now().strftime('%Y%m%d_%H%M%S')}.log")
        file_handler = logging.FileHandler(log_filename, encoding='utf-8')
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    # aiohttp access/client logs are noisy at INFO
    logging.getLogger('aiohttp').setLevel(logging.WARNING)

    return log_filename
