"""Benchmarks for ``integral`` over each rule and geometry family."""

from __future__ import annotations

import math
from typing import Any, Callable

import torch

from torchintegrals import (
    GaussKronrod,
    GaussLegendre,
    HAdaptiveCubature,
    integral,
    ureg,
)
from torchintegrals.geometry import (
    Ball,
    BezierCurve,
    Circle,
    Plane,
    PolyArea,
    Segment,
    Sphere,
    Tetrahedron,
)

from ._timing import benchmark, print_comparison


def gaussian(p: torch.Tensor) -> torch.Tensor:
    return torch.exp(-torch.sum(p**2))


def vector_gaussian(p: torch.Tensor) -> torch.Tensor:
    return gaussian(p) * torch.arange(1, 4, dtype=p.dtype)


class BenchIntegral:
    """Benchmarks for integrals over parametric geometries."""

    def __init__(self, warmup: int = 1, iterations: int = 5):
        """Initialize benchmark runner.

        Parameters
        ----------
        warmup : int, optional
            Number of warmup iterations. Default is 1.
        iterations : int, optional
            Number of timed iterations. Default is 5.
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

    def bench_rules(self, geometry, name: str, integrand: Callable = gaussian) -> None:
        """Time every rule on ``geometry``."""
        rules = [GaussKronrod(), GaussLegendre(20), HAdaptiveCubature()]
        if geometry.paramdim >= 3:
            rules = rules[1:]
        for rule in rules:
            timing = self._bench(integral, integrand, geometry, rule)
            print_comparison(f"{name} with {rule!r}", timing)

    def bench_bezier_algorithms(self, num_control_points: int = 64) -> None:
        """Horner against de Casteljau evaluation of a long Bezier curve.

        Parameters
        ----------
        num_control_points : int, optional
            Number of control points. Default is 64.
        """
        s = torch.linspace(0, 4 * math.pi, num_control_points, dtype=torch.float64)
        curve = BezierCurve(torch.stack([torch.cos(s), torch.sin(s), s], dim=-1))

        for alg in ("horner", "decasteljau"):
            timing = self._bench(
                integral, gaussian, curve, GaussLegendre(50), alg=alg
            )
            print_comparison(
                f"BezierCurve (n={num_control_points}, alg={alg})", timing
            )

    def bench_gauss_legendre_order(self, n: int = 20) -> None:
        """GaussLegendre(n) on a tetrahedron with a unit-carrying integrand.

        Parameters
        ----------
        n : int, optional
            Nodes per parametric axis. Default is 20.
        """
        tetrahedron = Tetrahedron(
            [0.0, 3.0, 0.0], [-7.0, 0.0, 0.0], [8.0, 0.0, 0.0], [0.0, 3.0, 1.0]
        )
        timing = self._bench(
            integral, lambda p: 1.0 * ureg.ampere, tetrahedron, GaussLegendre(n)
        )
        print_comparison(f"Tetrahedron with GaussLegendre({n}), n^3 points", timing)

    def run_all(self) -> None:
        """Run all benchmarks."""
        print("=" * 60)
        print("INTEGRAL BENCHMARKS")
        print("=" * 60)

        xy = Plane([0.0, 0.0, 0.0], [0.0, 0.0, 1.0])

        print("\n--- Curves ---")
        self.bench_rules(Segment([0.0, 0.0, 0.0], [1.0, 1.0, 1.0]), "Segment")
        self.bench_rules(
            Segment([0.0, 0.0, 0.0], [1.0, 1.0, 1.0]), "Segment (vector)", vector_gaussian
        )
        self.bench_rules(Circle(xy, 1.0), "Circle")

        print("\n--- Surfaces ---")
        self.bench_rules(Sphere([0.0, 0.0, 0.0], 1.0), "Sphere")
        self.bench_rules(
            Sphere([0.0, 0.0, 0.0], 1.0), "Sphere (vector)", vector_gaussian
        )
        self.bench_rules(
            PolyArea([[0, 0], [2, 0], [2, 1], [1, 1], [1, 2], [0, 2]]), "PolyArea"
        )

        print("\n--- Unbounded ---")
        self.bench_rules(xy, "Plane")

        print("\n--- Solids ---")
        self.bench_rules(Ball([0.0, 0.0, 0.0], 1.0), "Ball")

        print("\n--- Bezier Evaluation ---")
        self.bench_bezier_algorithms()

    def run_scaling(self) -> None:
        """Run scaling benchmarks with varying parameters."""
        print("=" * 60)
        print("SCALING BENCHMARKS")
        print("=" * 60)

        print("\n--- GaussLegendre Order (Tetrahedron) ---")
        for n in [5, 10, 20, 40]:
            self.bench_gauss_legendre_order(n)

        print("\n--- Bezier Degree ---")
        for num_control_points in [8, 64, 256]:
            self.bench_bezier_algorithms(num_control_points)


if __name__ == "__main__":
    bench = BenchIntegral(warmup=1, iterations=5)
    bench.run_all()
    print("\n")
    bench.run_scaling()
