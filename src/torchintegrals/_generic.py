"""Integration over the unit hypercube [0, 1]^N of a parametrization."""

from __future__ import annotations

import warnings
from typing import Callable, Tuple

import torch
from torch import Tensor

from torchintegrals._differentiation import (
    DifferentiationMethod,
    differential_batch,
)
from torchintegrals._units import UnitlessIntegrand
from torchintegrals._rules import GaussKronrod, GaussLegendre, HAdaptiveCubature
from torchintegrals.quadrature import QuadratureWarning, hcubature, quad

# Points evaluated at once by the fixed-order rule
_CHUNK_SIZE = 2**16


def weighted(values: Tensor, factor: Tensor) -> Tensor:
    """Multiply values (npoints, *shape) by a per-point factor (npoints,)."""
    return values * factor.reshape(factor.shape + (1,) * (values.dim() - 1))


def nested_quad(
    f: Callable[[Tensor, Tensor], Tensor],
    a,
    b,
    inner_bounds: Callable[[Tensor], Tuple],
    dtype: torch.dtype,
    **options,
) -> Tensor:
    """Iterated 1-D quadrature ``int_a^b int_{lo(u)}^{hi(u)} f(u, v) dv du``.

    ``f`` receives a scalar ``u`` and a vector of ``v`` abscissae and must
    return values of shape (len(v), *shape).
    """

    def outer(us: Tensor) -> Tensor:
        results = []
        for u in us:
            lower, upper = inner_bounds(u)
            results.append(
                quad(
                    lambda vs, u=u: f(u, vs),
                    torch.as_tensor(lower, dtype=dtype),
                    upper,
                    **options,
                )
            )
        return torch.stack(results)

    return quad(outer, torch.as_tensor(a, dtype=dtype), b, **options)


def integrand_times_measure(
    integrand: UnitlessIntegrand,
    geometry,
    diff_method: DifferentiationMethod,
) -> Callable[[Tensor], Tensor]:
    """``ts (npoints, N) -> f(geometry(ts)) * differential(geometry, ts)``."""

    def g(ts: Tensor) -> Tensor:
        values = integrand(geometry._parametrize(ts))
        return weighted(values, differential_batch(geometry, ts, diff_method))

    return g


def integrate_gauss_kronrod(
    integrand: UnitlessIntegrand,
    geometry,
    rule: GaussKronrod,
    diff_method: DifferentiationMethod,
) -> Tensor:
    dtype = geometry.dtype
    options = rule.options(dtype)
    g = integrand_times_measure(integrand, geometry, diff_method)

    if geometry.paramdim == 1:
        return quad(
            lambda t: g(t[:, None]),
            torch.tensor(0.0, dtype=dtype),
            1.0,
            **options,
        )

    warnings.warn(
        f"Integrating a {type(geometry).__name__} with GaussKronrod by nested "
        f"1-D quadrature is deprecated; use HAdaptiveCubature instead.",
        QuadratureWarning,
        stacklevel=4,
    )

    def h(u: Tensor, vs: Tensor) -> Tensor:
        return g(torch.stack([u.expand_as(vs), vs], dim=-1))

    return nested_quad(h, 0.0, 1.0, lambda u: (0.0, 1.0), dtype, **options)


def integrate_gauss_legendre(
    integrand: UnitlessIntegrand,
    geometry,
    rule: GaussLegendre,
    diff_method: DifferentiationMethod,
) -> Tensor:
    N = geometry.paramdim
    nodes, weights = rule.nodes_and_weights(geometry.dtype)

    # Tensor-product grid on [-1, 1]^N mapped to [0, 1]^N
    ts = torch.stack(
        [g.reshape(-1) for g in torch.meshgrid(*([nodes] * N), indexing="ij")],
        dim=-1,
    )
    ts = (ts + 1) / 2
    ws = torch.stack(
        [g.reshape(-1) for g in torch.meshgrid(*([weights] * N), indexing="ij")],
        dim=-1,
    ).prod(dim=-1)

    g = integrand_times_measure(integrand, geometry, diff_method)
    total = None
    for start in range(0, ts.shape[0], _CHUNK_SIZE):
        stop = start + _CHUNK_SIZE
        partial = torch.tensordot(ws[start:stop], g(ts[start:stop]), dims=1)
        total = partial if total is None else total + partial

    return total / 2**N


def integrate_hadaptive_cubature(
    integrand: UnitlessIntegrand,
    geometry,
    rule: HAdaptiveCubature,
    diff_method: DifferentiationMethod,
) -> Tensor:
    dtype = geometry.dtype
    N = geometry.paramdim
    return hcubature(
        integrand_times_measure(integrand, geometry, diff_method),
        torch.zeros(N, dtype=dtype),
        torch.ones(N, dtype=dtype),
        dtype=dtype,
        **rule.options(dtype),
    )


GENERIC_ROUTINES = {
    GaussKronrod: integrate_gauss_kronrod,
    GaussLegendre: integrate_gauss_legendre,
    HAdaptiveCubature: integrate_hadaptive_cubature,
}
