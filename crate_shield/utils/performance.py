"""Timing helpers for crate-shield."""

import functools
import logging
import os
import time
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, TypeVar

F = TypeVar('F', bound=Callable[..., Any])

BENCHMARK_ENV_VAR = "CRATE_SHIELD_VERBOSE_BENCHMARK"


def benchmark(func: F) -> F:
    """Simple benchmark decorator.

    Timings are only logged when ``CRATE_SHIELD_VERBOSE_BENCHMARK`` is set.

    Args:
        func: Function to benchmark

    Returns:
        Wrapped function with timing
    """
    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        start_time = time.perf_counter()
        result = func(*args, **kwargs)
        end_time = time.perf_counter()

        if os.environ.get(BENCHMARK_ENV_VAR):
            logger = logging.getLogger("Performance")
            logger.info(f"{func.__name__} took {end_time - start_time:.4f} seconds")
        return result
    return wrapper  # type: ignore[return-value]


@contextmanager
def measure(timings: Dict[str, float], name: str) -> Iterator[None]:
    """Record the wall time of a block into ``timings[name]``.

    Args:
        timings: Dictionary receiving the elapsed seconds
        name: Key for this measurement
    """
    start_time = time.perf_counter()
    try:
        yield
    finally:
        timings[name] = time.perf_counter() - start_time
