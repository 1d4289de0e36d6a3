# predsim/logging_config.py
"""Logging configuration for simulation runs.

The console shows INFO and above; an optional log file receives everything
down to DEBUG with timestamps.
"""

import logging
from datetime import datetime
from pathlib import Path

ROOT_LOGGER = "predsim"


def setup_logging(level="INFO", log_file=None):
    """Configure the predsim logger for a new run. Overwrites log_file if given."""
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(logging.DEBUG)
    logger.handlers.clear()
    logger.propagate = False

    console_handler = logging.StreamHandler()
    console_handler.setLevel(getattr(logging, str(level).upper(), logging.INFO))
    console_handler.setFormatter(logging.Formatter('[%(name)s] %(message)s'))
    logger.addHandler(console_handler)

    if log_file is not None:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, mode='w')
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s [%(name)s] %(levelname)s: %(message)s',
            datefmt='%H:%M:%S'
        ))
        logger.addHandler(file_handler)

    logger.info(f"=== Run started: {datetime.now().isoformat()} ===")
    return logger


def get_logger(name: str = ROOT_LOGGER) -> logging.Logger:
    """Get a logger instance under the predsim hierarchy."""
    if name != ROOT_LOGGER and not name.startswith(ROOT_LOGGER + "."):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)


def log_death(tick: int, agent_id: int, generation: int, lifespan: float):
    logger = logging.getLogger(ROOT_LOGGER)
    logger.info(
        f"DEATH t={tick} | agent={agent_id} gen={generation} "
        f"lived={lifespan:.1f}s"
    )


def log_birth(tick: int, child_id: int, parents: tuple, generation: int):
    logger = logging.getLogger(ROOT_LOGGER)
    logger.info(
        f"BIRTH t={tick} | agent={child_id} parents={parents} gen={generation}"
    )
