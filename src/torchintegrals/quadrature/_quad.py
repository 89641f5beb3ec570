"""Globally adaptive one-dimensional Gauss-Kronrod quadrature."""

import heapq
import math
import warnings
from typing import Callable, Tuple, Union

import torch
from torch import Tensor

from torchintegrals.quadrature._exceptions import (
    IntegrationError,
    QuadratureWarning,
)
from torchintegrals.quadrature._nodes import gauss_kronrod_nodes_weights


def quad(
    f: Callable[[Tensor], Tensor],
    a: Union[float, Tensor],
    b: Union[float, Tensor],
    *,
    epsabs: float = 1.49e-8,
    epsrel: float = 1.49e-8,
    limit: int = 50,
    order: int = 21,
) -> Tensor:
    """
    Integrate ``f`` over [a, b].

    The subinterval with the largest Kronrod-minus-Gauss error is bisected
    until the summed error meets the tolerance. Infinite bounds are mapped
    onto a finite interval first.

    Parameters
    ----------
    f : callable
        Vectorized integrand. Called with a tensor of ``order`` abscissae,
        shape (order,), and must return values of shape (order, *value_shape).
    a, b : float or Tensor
        Scalar limits, possibly ``-inf`` or ``inf``. Reversed limits negate
        the result.
    epsabs, epsrel : float
        Stop once the error estimate is below
        ``epsabs + epsrel * |result|``.
    limit : int
        Cap on the number of subintervals.
    order : int
        Kronrod order of the local rule, 15 or 21.

    Returns
    -------
    Tensor
        Shape ``value_shape``.

    Raises
    ------
    IntegrationError
        If ``limit`` subintervals are used up before the tolerance is met.

    Examples
    --------
    >>> quad(torch.sin, 0, torch.pi)  # 2
    >>> quad(lambda x: torch.exp(-(x**2)), -math.inf, math.inf)  # sqrt(pi)
    >>> quad(lambda x: torch.stack([x, x**2], dim=-1), 0, 1)  # [1/2, 1/3]
    """
    result, error, info = quad_info(
        f, a, b, epsabs=epsabs, epsrel=epsrel, limit=limit, order=order
    )

    if not info["converged"]:
        raise IntegrationError(
            f"quad failed to converge: error {error.item():.2e} after "
            f"{info['nsubintervals']} subintervals, tolerance "
            f"{epsabs + epsrel * torch.linalg.vector_norm(result).item():.2e}"
        )

    return result


def quad_info(
    f: Callable[[Tensor], Tensor],
    a: Union[float, Tensor],
    b: Union[float, Tensor],
    *,
    epsabs: float = 1.49e-8,
    epsrel: float = 1.49e-8,
    limit: int = 50,
    order: int = 21,
) -> Tuple[Tensor, Tensor, dict]:
    """
    :func:`quad` that warns instead of raising and reports diagnostics.

    Returns
    -------
    result : Tensor
    error : Tensor
        Absolute error estimate, a Euclidean norm for vector integrands.
    info : dict
        ``neval`` (integrand evaluations), ``nsubintervals`` and
        ``converged``.
    """
    if isinstance(a, Tensor):
        dtype, device = a.dtype, a.device
    elif isinstance(b, Tensor):
        dtype, device = b.dtype, b.device
    else:
        dtype, device = torch.float64, torch.device("cpu")

    a_val = float(a)
    b_val = float(b)

    if b_val < a_val:
        result, error, info = quad_info(
            f,
            torch.tensor(b_val, dtype=dtype, device=device),
            a_val,
            epsabs=epsabs,
            epsrel=epsrel,
            limit=limit,
            order=order,
        )
        return -result, error, info

    g, lower, upper = _finite_interval(f, a_val, b_val)

    nodes, k_weights, g_weights, g_indices = gauss_kronrod_nodes_weights(
        order, dtype=dtype, device=device
    )

    def estimate(left: float, right: float) -> Tuple[Tensor, Tensor]:
        half_width = (right - left) / 2
        center = (left + right) / 2
        values = g(half_width * nodes + center)
        kronrod = half_width * torch.tensordot(k_weights, values, dims=1)
        gauss = half_width * torch.tensordot(
            g_weights, values[g_indices], dims=1
        )
        return kronrod, torch.linalg.vector_norm(kronrod - gauss)

    def tolerance(value: Tensor) -> float:
        return epsabs + epsrel * torch.linalg.vector_norm(value).item()

    total_result, total_error = estimate(lower, upper)
    neval = order
    nsubintervals = 1

    # Max-heap by error; the counter breaks ties without comparing tensors
    heap = [(-total_error.item(), 0, lower, upper, total_result, total_error)]
    counter = 1

    while (
        total_error.item() > tolerance(total_result)
        and nsubintervals < limit
    ):
        _, _, left, right, result, error = heapq.heappop(heap)
        mid = (left + right) / 2

        result_left, error_left = estimate(left, mid)
        result_right, error_right = estimate(mid, right)
        neval += 2 * order
        nsubintervals += 1

        total_result = total_result + (result_left + result_right - result)
        total_error = total_error + (error_left + error_right - error)

        heapq.heappush(
            heap,
            (-error_left.item(), counter, left, mid, result_left, error_left),
        )
        heapq.heappush(
            heap,
            (
                -error_right.item(),
                counter + 1,
                mid,
                right,
                result_right,
                error_right,
            ),
        )
        counter += 2

    # Re-sum the leaves to drop the drift of the running totals
    if nsubintervals > 1:
        total_result = torch.stack([entry[4] for entry in heap]).sum(dim=0)
        total_error = torch.stack([entry[5] for entry in heap]).sum(dim=0)

    converged = total_error.item() <= tolerance(total_result)

    if not converged:
        warnings.warn(
            f"quad did not converge, error estimate {total_error.item():.2e}",
            QuadratureWarning,
        )

    return (
        total_result,
        total_error,
        {
            "neval": neval,
            "nsubintervals": nsubintervals,
            "converged": converged,
        },
    )


def _finite_interval(
    f: Callable[[Tensor], Tensor], a: float, b: float
) -> Tuple[Callable[[Tensor], Tensor], float, float]:
    """Map an infinite or semi-infinite [a, b] onto a finite interval."""
    if math.isinf(a) and math.isinf(b):
        # x = t / (1 - t^2) maps (-1, 1) onto the real line
        def g(t: Tensor) -> Tensor:
            denominator = 1 - t**2
            return _scale(
                f(t / denominator), (1 + t**2) / denominator**2
            )

        return g, -1.0, 1.0

    if math.isinf(b):
        # x = a + t / (1 - t) maps [0, 1) onto [a, inf)
        def g(t: Tensor) -> Tensor:
            return _scale(f(a + t / (1 - t)), 1 / (1 - t) ** 2)

        return g, 0.0, 1.0

    if math.isinf(a):
        # x = b - t / (1 - t) maps [0, 1) onto (-inf, b]
        def g(t: Tensor) -> Tensor:
            return _scale(f(b - t / (1 - t)), 1 / (1 - t) ** 2)

        return g, 0.0, 1.0

    return f, a, b


def _scale(values: Tensor, factor: Tensor) -> Tensor:
    """Multiply per-node values of any trailing shape by a per-node factor."""
    return values * factor.reshape(factor.shape + (1,) * (values.dim() - 1))
