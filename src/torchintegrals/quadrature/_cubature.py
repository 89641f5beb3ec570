"""Adaptive multidimensional cubature over hyperrectangles."""

from typing import Callable, Optional, Sequence, Tuple, Union

import numpy as np
import scipy.integrate
import torch
from torch import Tensor

from torchintegrals.quadrature._exceptions import IntegrationError


def hcubature(
    f: Callable[[Tensor], Tensor],
    a: Union[Sequence[float], Tensor],
    b: Union[Sequence[float], Tensor],
    *,
    rtol: float = 1.49e-8,
    atol: float = 0.0,
    max_subdivisions: int = 10000,
    rule: Optional[str] = None,
    dtype: torch.dtype = torch.float64,
) -> Tensor:
    """
    Integrate ``f`` over the box ``[a, b]`` by h-adaptive cubature.

    Regions are bisected where the embedded error estimate is largest until
    the total error is below ``max(atol, rtol * |estimate|)``.

    Parameters
    ----------
    f : callable
        Vectorized integrand. Receives points of shape (npoints, ndim) and
        returns values of shape (npoints, *value_shape).
    a, b : sequence of float or Tensor
        Lower and upper corners of the box, shape (ndim,).
    rtol, atol : float
        Relative and absolute tolerances.
    max_subdivisions : int
        Upper bound on the number of region subdivisions.
    rule : str, optional
        ``"gk21"``, ``"gk15"`` or ``"genz-malik"``. Defaults to ``"gk21"`` in
        one dimension and ``"genz-malik"`` otherwise.
    dtype : torch.dtype
        Dtype of the points passed to ``f`` and of the result.

    Returns
    -------
    Tensor
        Integral approximation, shape ``value_shape``.

    Raises
    ------
    IntegrationError
        If the tolerance is not met within ``max_subdivisions``.

    Examples
    --------
    >>> hcubature(lambda x: x.prod(dim=-1), [0.0, 0.0], [1.0, 1.0])  # 0.25
    """
    result, error, info = hcubature_info(
        f,
        a,
        b,
        rtol=rtol,
        atol=atol,
        max_subdivisions=max_subdivisions,
        rule=rule,
        dtype=dtype,
    )

    if not info["converged"]:
        raise IntegrationError(
            f"Cubature failed to converge after {info['subdivisions']} subdivisions. "
            f"Error estimate: {torch.linalg.vector_norm(error).item():.2e}"
        )

    return result


def hcubature_info(
    f: Callable[[Tensor], Tensor],
    a: Union[Sequence[float], Tensor],
    b: Union[Sequence[float], Tensor],
    *,
    rtol: float = 1.49e-8,
    atol: float = 0.0,
    max_subdivisions: int = 10000,
    rule: Optional[str] = None,
    dtype: torch.dtype = torch.float64,
) -> Tuple[Tensor, Tensor, dict]:
    """
    Like hcubature, but returns the error estimate and an info dict.

    Returns
    -------
    result : Tensor
        Integral approximation.
    error : Tensor
        Estimated absolute error, same shape as ``result``.
    info : dict
        Information dict with keys:
        - "subdivisions": Number of subdivisions performed
        - "regions": Number of regions in the final partition
        - "converged": Whether tolerance was achieved
    """
    lower = _as_array(a)
    upper = _as_array(b)

    if lower.shape != upper.shape or lower.ndim != 1:
        raise ValueError(
            f"a and b must be 1-D with equal length, got shapes "
            f"{lower.shape} and {upper.shape}"
        )

    if rule is None:
        rule = "gk21" if lower.shape[0] == 1 else "genz-malik"

    # The scipy primitive works on float64 arrays only
    def wrapped(x: np.ndarray) -> np.ndarray:
        values = f(torch.as_tensor(x, dtype=dtype))
        return values.detach().cpu().to(torch.float64).numpy()

    res = scipy.integrate.cubature(
        wrapped,
        lower,
        upper,
        rule=rule,
        rtol=rtol,
        atol=atol,
        max_subdivisions=max_subdivisions,
    )

    return (
        torch.as_tensor(res.estimate, dtype=dtype),
        torch.as_tensor(res.error, dtype=dtype),
        {
            "subdivisions": res.subdivisions,
            "regions": len(res.regions),
            "converged": res.status == "converged",
        },
    )


def _as_array(x: Union[Sequence[float], Tensor]) -> np.ndarray:
    if isinstance(x, Tensor):
        x = x.detach().cpu().to(torch.float64).numpy()
    return np.asarray(x, dtype=np.float64)
