"""Integration rule configuration objects."""

from typing import Dict, Tuple

import torch
from torch import Tensor

from torchintegrals.quadrature import gauss_legendre_nodes_weights


class IntegrationRule:
    """Base class of the quadrature strategies accepted by ``integral``."""

    _options: Tuple[str, ...] = ()

    def __init__(self, **kwargs):
        unknown = sorted(set(kwargs) - set(self._options))
        if unknown:
            raise TypeError(
                f"{type(self).__name__} got unexpected options {unknown}; "
                f"expected a subset of {list(self._options)}"
            )
        self._kwargs = dict(kwargs)

    @property
    def kwargs(self) -> Dict:
        return dict(self._kwargs)

    def __repr__(self) -> str:
        options = ", ".join(f"{k}={v!r}" for k, v in self._kwargs.items())
        return f"{type(self).__name__}({options})"


class GaussKronrod(IntegrationRule):
    """
    Adaptive Gauss-Kronrod quadrature.

    One-dimensional by nature; two-dimensional geometries are integrated by
    nesting (deprecated in favour of ``HAdaptiveCubature``) and higher
    dimensions are not supported.

    Parameters
    ----------
    epsabs, epsrel : float, optional
        Absolute and relative tolerance. Default ``sqrt(eps)`` of the
        integration dtype.
    limit : int, optional
        Maximum number of subintervals.
    order : int, optional
        Kronrod order, 15 or 21.

    Examples
    --------
    >>> GaussKronrod(epsrel=1e-10, limit=200)
    GaussKronrod(epsrel=1e-10, limit=200)
    """

    _options = ("epsabs", "epsrel", "limit", "order")

    def options(self, dtype: torch.dtype) -> Dict:
        tolerance = torch.finfo(dtype).eps ** 0.5
        return {"epsabs": tolerance, "epsrel": tolerance, **self._kwargs}


class HAdaptiveCubature(IntegrationRule):
    """
    h-adaptive cubature over the parametric hyperrectangle.

    Parameters
    ----------
    rtol : float, optional
        Relative tolerance. Default ``sqrt(eps)`` of the integration dtype.
    atol : float, optional
        Absolute tolerance. Default 0.
    max_subdivisions : int, optional
        Upper bound on region subdivisions.
    rule : str, optional
        ``"gk21"``, ``"gk15"`` or ``"genz-malik"``.
    """

    _options = ("rtol", "atol", "max_subdivisions", "rule")

    def options(self, dtype: torch.dtype) -> Dict:
        return {"rtol": torch.finfo(dtype).eps ** 0.5, **self._kwargs}


class GaussLegendre(IntegrationRule):
    """
    Fixed-order Gauss-Legendre product rule.

    Nodes and weights on [-1, 1] are computed once, at construction.
    Exact for polynomials of degree <= 2n-1 in each parametric coordinate;
    there is no error control, so ``n`` must suit the integrand.

    Parameters
    ----------
    n : int
        Number of nodes per parametric axis. Must be >= 1.

    Attributes
    ----------
    nodes, weights : Tensor
        Rule on [-1, 1], shape (n,), float64.
    """

    def __init__(self, n: int):
        super().__init__()
        if n < 1:
            raise ValueError(f"n must be at least 1, got {n}")
        self.n = n
        self.nodes, self.weights = gauss_legendre_nodes_weights(n)
        self._cache: dict = {}

    def nodes_and_weights(self, dtype: torch.dtype) -> Tuple[Tensor, Tensor]:
        """Nodes and weights on [-1, 1] cast to ``dtype``."""
        if dtype not in self._cache:
            self._cache[dtype] = (
                self.nodes.to(dtype),
                self.weights.to(dtype),
            )
        return self._cache[dtype]

    def __repr__(self) -> str:
        return f"GaussLegendre({self.n})"


def default_rule(paramdim: int) -> IntegrationRule:
    """``GaussKronrod()`` for curves, ``HAdaptiveCubature()`` otherwise."""
    if paramdim < 1:
        raise ValueError(f"paramdim must be at least 1, got {paramdim}")
    if paramdim == 1:
        return GaussKronrod()
    return HAdaptiveCubature()
