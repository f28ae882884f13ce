"""Logging configuration for the rpglump command-line tool."""
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional, Union


def setup_logging(log_dir: Optional[Union[str, Path]], log_level: int = logging.INFO) -> Optional[Path]:
    """Configure the root logger.

    Args:
        log_dir: Directory for the timestamped log file, or None to log
            to the console only
        log_level: Logging level (default: INFO)

    Returns:
        Path of the log file, if one was created

    Installs a stderr console handler and, when ``log_dir`` is given, a
    file handler writing to ``rpglump_<timestamp>.log`` in that directory.
    Handlers installed earlier are removed.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(logging.Formatter('%(levelname)s: %(message)s'))
    console_handler.setLevel(log_level)
    root_logger.addHandler(console_handler)

    log_file = None
    if log_dir is not None:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)
        timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
        log_file = log_path / f'rpglump_{timestamp}.log'
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setFormatter(logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s'))
        file_handler.setLevel(log_level)
        root_logger.addHandler(file_handler)

    root_logger.info(f"Logging initialized at {logging.getLevelName(log_level)}")
    if log_file:
        root_logger.info(f"Log file: {log_file}")
    return log_file
