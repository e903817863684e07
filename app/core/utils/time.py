"""Elapsed-time measurement"""

import time
from contextlib import contextmanager
from typing import Generator


@contextmanager
def measure_time() -> Generator[dict[str, float], None, None]:
    """Context manager that records elapsed milliseconds

    Usage:
        with measure_time() as timer:
            await engine.score_candidates(...)
        elapsed_ms = timer["elapsed_ms"]

    Yields:
        dict: holds ``elapsed_ms`` once the block exits
    """
    timer = {"elapsed_ms": 0.0}
    start = time.perf_counter()
    try:
        yield timer
    finally:
        timer["elapsed_ms"] = (time.perf_counter() - start) * 1000
