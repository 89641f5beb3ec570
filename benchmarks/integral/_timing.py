"""Timing helpers shared by the integral benchmarks."""

from __future__ import annotations

import time
from typing import Any, Callable

import numpy as np


def benchmark(
    func: Callable,
    *args: Any,
    warmup: int = 3,
    iterations: int = 10,
    **kwargs: Any,
) -> dict[str, float]:
    """Wall-clock ``func(*args, **kwargs)`` after ``warmup`` untimed calls.

    Returns the ``mean`` and ``std`` of ``iterations`` timed calls, in seconds.
    """
    for _ in range(warmup):
        func(*args, **kwargs)

    times = np.empty(iterations)
    for i in range(iterations):
        start = time.perf_counter()
        func(*args, **kwargs)
        times[i] = time.perf_counter() - start

    return {"mean": times.mean(), "std": times.std()}


def format_time(seconds: float) -> str:
    for scale, suffix in ((1e-6, "ns"), (1e-3, "us"), (1.0, "ms")):
        if seconds < scale:
            return f"{seconds * 1e3 / scale:.3f}{suffix}"
    return f"{seconds:.3f}s"


def print_comparison(
    name: str,
    ti_time: dict[str, float],
    scipy_time: dict[str, float] | None = None,
) -> None:
    """Print benchmark comparison results."""
    print(f"\n{name}")
    print("-" * len(name))
    print(
        f"  torchintegrals: {format_time(ti_time['mean'])} +/- {format_time(ti_time['std'])}"
    )
    if scipy_time is not None:
        print(
            f"  scipy:          {format_time(scipy_time['mean'])} +/- {format_time(scipy_time['std'])}"
        )
        speedup = scipy_time["mean"] / ti_time["mean"]
        if speedup >= 1:
            print(f"  Speedup:        {speedup:.2f}x faster")
        else:
            print(f"  Speedup:        {1 / speedup:.2f}x slower")
