"""Benchmarks for integrals over parametric geometries.

This module provides benchmark classes timing each integration rule on
representative geometries, and the quadrature primitives against scipy
baselines.
"""

from .bench_integral import BenchIntegral
from .bench_quadrature import BenchQuadrature

__all__ = [
    "BenchIntegral",
    "BenchQuadrature",
]
