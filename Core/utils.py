"""
Shared utilities for logging setup and random-stream creation.
"""

import logging
import time
from pathlib import Path
from typing import Optional, Union

import numpy as np


def setup_logging(log_type: str, problem_name: str, log_dir: Union[str, Path] = 'logs',
                  session_id: Optional[int] = None) -> logging.Logger:
    """Sets up a logger writing to `<log_dir>/<log_type>_logs.log` and stderr."""
    log_dir_path = Path(log_dir)
    log_dir_path.mkdir(parents=True, exist_ok=True)

    log_file = log_dir_path / f"{log_type}_logs.log"

    logger = logging.getLogger(f"{log_type}_{problem_name}_logger")
    logger.setLevel(logging.INFO)
    logger.propagate = False

    # Prevent adding multiple handlers if the logger already exists
    if not logger.handlers:
        file_handler = logging.FileHandler(log_file, mode='a')  # Append mode
        stream_handler = logging.StreamHandler()

        session = int(time.time()) if session_id is None else int(session_id)
        formatter = logging.Formatter(
            f'%(asctime)s - %(levelname)s - [Session: {session}]-[Problem: {problem_name}] - %(message)s'
        )
        file_handler.setFormatter(formatter)
        stream_handler.setFormatter(formatter)

        logger.addHandler(file_handler)
        logger.addHandler(stream_handler)

    return logger


def make_rng(seed: Union[None, int, np.random.Generator] = None) -> np.random.Generator:
    """Return the single random stream a run draws from.

    Passing an existing Generator returns it unchanged so callers can share one
    stream between the colony and the populations it feeds.
    """
    if isinstance(seed, np.random.Generator):
        return seed
    return np.random.default_rng(seed)
