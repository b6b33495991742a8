"""
Timing helpers for transform steps.
"""

import time
from contextlib import contextmanager
from typing import Generator


@contextmanager
def timer() -> Generator[dict, None, None]:
    """
    Wall-clock time of a transform step.

    The elapsed time is written when the block exits, including when the
    transform raises, so a failed step can still be logged with its cost.

    Usage:
        with timer() as t:
            current = apply_transform(current, params, engine)
        steps.append(TransformStep(params=params, result=current, duration_ms=t["ms"]))

    Yields:
        Dictionary whose 'ms' entry is filled in with elapsed milliseconds
    """
    elapsed = {"ms": 0.0}
    started = time.perf_counter()
    try:
        yield elapsed
    finally:
        elapsed["ms"] = (time.perf_counter() - started) * 1000
