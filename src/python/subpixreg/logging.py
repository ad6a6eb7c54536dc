"""Logging utilities for registration steps."""

import logging
from functools import wraps
from time import perf_counter

logger = logging.getLogger("subpixreg")


def log_step(func):
    """Decorator to log registration steps with timing."""

    @wraps(func)
    def wrapper(*args, **kwargs):
        step_name = func.__name__
        logger.info(f"Starting {step_name}")
        start = perf_counter()
        try:
            result = func(*args, **kwargs)
            elapsed = perf_counter() - start
            logger.info(f"Completed {step_name} in {elapsed:.2f}s")
            return result
        except Exception as e:
            logger.error(f"Failed {step_name}: {e}")
            raise

    return wrapper
