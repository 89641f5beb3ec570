"""Benchmarks for the quadrature primitives against scipy."""

from __future__ import annotations

import math
from typing import Any, Callable

import numpy as np
import torch
from scipy import integrate as scipy_integrate

from torchintegrals.quadrature import hcubature, quad

from ._timing import benchmark, print_comparison


class BenchQuadrature:
    """Benchmarks for quad and hcubature."""

    def __init__(self, warmup: int = 3, iterations: int = 10):
        """Initialize benchmark runner.

        Parameters
        ----------
        warmup : int, optional
            Number of warmup iterations. Default is 3.
        iterations : int, optional
            Number of timed iterations. Default is 10.
        """
        self.warmup = warmup
        self.iterations = iterations

    def _bench(
        self, func: Callable, *args: Any, **kwargs: Any
    ) -> dict[str, float]:
        """Run benchmark with configured settings."""
        return benchmark(
            func,
            *args,
            warmup=self.warmup,
            iterations=self.iterations,
            **kwargs,
        )

    def bench_quad(self, frequency: float = 10.0) -> None:
        """Benchmark quad vs scipy.integrate.quad on an oscillatory integrand.

        Parameters
        ----------
        frequency : float, optional
            Angular frequency of the integrand. Default is 10.0.
        """
        ti_time = self._bench(
            quad, lambda x: torch.sin(frequency * x), 0.0, math.pi, limit=200
        )
        scipy_time = self._bench(
            scipy_integrate.quad,
            lambda x: math.sin(frequency * x),
            0.0,
            math.pi,
            limit=200,
        )
        print_comparison(f"quad (sin({frequency} x) on [0, pi])", ti_time, scipy_time)

    def bench_quad_infinite(self) -> None:
        """Benchmark quad on the real line."""
        ti_time = self._bench(
            quad, lambda x: torch.exp(-(x**2)), -math.inf, math.inf
        )
        scipy_time = self._bench(
            scipy_integrate.quad, lambda x: math.exp(-(x**2)), -np.inf, np.inf
        )
        print_comparison("quad (Gaussian on R)", ti_time, scipy_time)

    def bench_hcubature(self, ndim: int = 3) -> None:
        """Benchmark hcubature on a Gaussian over [0, 1]^ndim.

        Parameters
        ----------
        ndim : int, optional
            Dimension of the domain. Default is 3.
        """

        def f(x: torch.Tensor) -> torch.Tensor:
            return torch.exp(-torch.sum(x**2, dim=-1))

        ti_time = self._bench(
            hcubature, f, torch.zeros(ndim, dtype=torch.float64), torch.ones(ndim)
        )
        print_comparison(f"hcubature (Gaussian, ndim={ndim})", ti_time)

    def run_all(self) -> None:
        """Run all benchmarks."""
        print("=" * 60)
        print("QUADRATURE BENCHMARKS")
        print("=" * 60)

        print("\n--- One-Dimensional ---")
        self.bench_quad()
        self.bench_quad_infinite()

        print("\n--- Cubature ---")
        for ndim in [2, 3, 4]:
            self.bench_hcubature(ndim)


if __name__ == "__main__":
    bench = BenchQuadrature(warmup=5, iterations=20)
    bench.run_all()
