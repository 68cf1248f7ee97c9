"""
Logging utilities for the call session.
"""
import os
import logging


def setup_logging(log_file_path: str, level: str = "INFO") -> str:
    """
    Set up logging to file with minimal console output.

    Args:
        log_file_path: Full path to the log file
        level: Level name for the file handler

    Returns:
        Path to the log file
    """
    # Create the directory part of the path, if any
    workdir = os.path.dirname(log_file_path)
    if workdir:
        os.makedirs(workdir, exist_ok=True)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    # File handler for detailed logs
    file_handler = logging.FileHandler(log_file_path, mode='a')
    file_handler.setLevel(getattr(logging, str(level).upper(), logging.INFO))
    file_handler.setFormatter(logging.Formatter('%(asctime)s %(levelname)s %(name)s - %(message)s'))

    # Console handler for critical messages only
    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.CRITICAL)
    console_handler.setFormatter(logging.Formatter('%(message)s'))

    root_logger.setLevel(logging.DEBUG)
    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)

    return log_file_path
