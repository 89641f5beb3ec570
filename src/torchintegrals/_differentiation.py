"""Jacobians and differential elements of parametrized geometries."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Optional, Sequence, Tuple

import torch
from torch import Tensor

from torchintegrals._exceptions import (
    DimensionMismatchError,
    UnsupportedCombinationError,
)
from torchintegrals._units import with_unit

# Parameters closer than this to 0 or 1 get one-sided differences
_BOUNDARY_MARGIN = 0.01


class DifferentiationMethod:
    """Base class of the Jacobian strategies."""


@dataclass(frozen=True)
class FiniteDifference(DifferentiationMethod):
    """
    Finite-difference Jacobian with step ``epsilon``.

    Central differences are used in the interior of [0, 1]; within 0.01 of
    either end the second-order one-sided stencil pointing into the domain
    is used instead, so the parametrization is never evaluated outside
    [0, 1].
    """

    epsilon: float = 1e-6


@dataclass(frozen=True)
class Analytical(DifferentiationMethod):
    """Closed-form Jacobian provided by the geometry."""


@dataclass(frozen=True)
class AutoDiff(DifferentiationMethod):
    """Jacobian by reverse-mode automatic differentiation (torch.autograd)."""


def has_analytical(geometry: Any) -> bool:
    """Whether a geometry (or geometry type) has a closed-form Jacobian."""
    if isinstance(geometry, type):
        return getattr(geometry, "analytical", False)
    return getattr(geometry, "has_analytical_jacobian", False)


def default_diff_method(geometry: Any) -> DifferentiationMethod:
    """``Analytical()`` where a closed form exists, else ``FiniteDifference()``."""
    if has_analytical(geometry):
        return Analytical()
    return FiniteDifference()


def check_diff_method(geometry, diff_method: DifferentiationMethod) -> None:
    """Raise if ``diff_method`` cannot differentiate ``geometry``."""
    if not isinstance(diff_method, DifferentiationMethod):
        raise TypeError(
            f"diff_method must be FiniteDifference, Analytical or AutoDiff, "
            f"got {type(diff_method).__name__}"
        )
    if isinstance(diff_method, Analytical) and not has_analytical(geometry):
        raise UnsupportedCombinationError(
            f"Analytical differentiation of a {type(geometry).__name__} not "
            f"supported; requires diff_method=FiniteDifference()."
        )


def _forward(f: Callable, ts: Tensor, h: Tensor, epsilon: float) -> Tensor:
    return (-3 * f(ts) + 4 * f(ts + h) - f(ts + 2 * h)) / (2 * epsilon)


def _backward(f: Callable, ts: Tensor, h: Tensor, epsilon: float) -> Tensor:
    return (3 * f(ts) - 4 * f(ts - h) + f(ts - 2 * h)) / (2 * epsilon)


def _central(f: Callable, ts: Tensor, h: Tensor, epsilon: float) -> Tensor:
    return (f(ts + h) - f(ts - h)) / (2 * epsilon)


def _finite_difference(geometry, ts: Tensor, epsilon: float) -> Tensor:
    columns = []
    for n in range(ts.shape[-1]):
        h = torch.zeros(ts.shape[-1], dtype=ts.dtype, device=ts.device)
        h[n] = epsilon
        t = ts[..., n]
        forward = t < _BOUNDARY_MARGIN
        backward = t > 1 - _BOUNDARY_MARGIN
        central = ~(forward | backward)

        column = None
        for mask, stencil in (
            (forward, _forward),
            (backward, _backward),
            (central, _central),
        ):
            if not torch.any(mask):
                continue
            values = stencil(geometry._parametrize, ts[mask], h, epsilon)
            if column is None:
                column = values.new_empty(ts.shape[:-1] + values.shape[-1:])
            column[mask] = values
        columns.append(column)
    return torch.stack(columns, dim=-2)


def _autodiff(geometry, ts: Tensor) -> Tensor:
    flat = ts.reshape(-1, ts.shape[-1])
    # Points depend on their own parameters only, so the Jacobian of the
    # batch sum holds every per-point Jacobian
    J = torch.autograd.functional.jacobian(
        lambda t: geometry._parametrize(t).sum(dim=0), flat
    )
    J = J.permute(1, 2, 0)
    return J.reshape(ts.shape[:-1] + J.shape[-2:])


def jacobian_batch(
    geometry, ts: Tensor, diff_method: DifferentiationMethod
) -> Tensor:
    """Jacobians at parameters ``ts`` (..., N), shape (..., N, dim)."""
    if isinstance(diff_method, Analytical):
        return geometry._jacobian(ts)
    if isinstance(diff_method, AutoDiff):
        return _autodiff(geometry, ts)
    return _finite_difference(geometry, ts, diff_method.epsilon)


def wedge_norm(J: Tensor) -> Tensor:
    """Magnitude of the exterior product of the rows of ``J`` (..., N, dim).

    This is the N-volume of the parallelotope spanned by the N vectors,
    ``sqrt(det(J J^T))``, with cheaper closed forms for the common cases.
    """
    N, dim = J.shape[-2:]
    if N == 1:
        return torch.linalg.vector_norm(J[..., 0, :], dim=-1)
    if N == 2 and dim == 3:
        return torch.linalg.vector_norm(
            torch.linalg.cross(J[..., 0, :], J[..., 1, :]), dim=-1
        )
    if N == dim:
        return torch.abs(torch.linalg.det(J))
    gram = J @ J.transpose(-1, -2)
    return torch.sqrt(torch.clamp(torch.linalg.det(gram), min=0))


def differential_batch(
    geometry, ts: Tensor, diff_method: DifferentiationMethod
) -> Tensor:
    """Differential elements at parameters ``ts`` (..., N), shape (...,)."""
    return wedge_norm(jacobian_batch(geometry, ts, diff_method))


def _parameters(geometry, ts: Sequence) -> Tensor:
    if len(ts) != geometry.paramdim:
        raise DimensionMismatchError(
            f"ts must have same number of dimensions as geometry: "
            f"{type(geometry).__name__} has {geometry.paramdim}, got {len(ts)}"
        )
    return torch.stack(
        [torch.as_tensor(t, dtype=geometry.dtype) for t in ts]
    )


def jacobian(
    geometry,
    ts: Sequence,
    diff_method: Optional[DifferentiationMethod] = None,
) -> Tuple[Any, ...]:
    """
    Partial derivatives of the parametrization of ``geometry`` at ``ts``.

    Parameters
    ----------
    geometry : Geometry
        Geometry to differentiate.
    ts : sequence of float
        Parametric coordinates, one per parametric dimension.
    diff_method : DifferentiationMethod, optional
        Defaults to ``default_diff_method(geometry)``.

    Returns
    -------
    tuple of Tensor
        One (dim,) vector per parametric axis, in ``geometry.unit`` if set.

    Raises
    ------
    DimensionMismatchError
        If ``len(ts) != geometry.paramdim``.
    UnsupportedCombinationError
        If ``Analytical`` is requested for a geometry without a closed form.
    DomainError
        If the closed form is undefined at ``ts``.

    Examples
    --------
    >>> segment = Segment([0.0, 0.0], [3.0, 4.0])
    >>> jacobian(segment, (0.5,))
    (tensor([3., 4.], dtype=torch.float64),)
    """
    params = _parameters(geometry, ts)
    diff_method = diff_method or default_diff_method(geometry)
    check_diff_method(geometry, diff_method)
    J = jacobian_batch(geometry, params[None], diff_method)[0]
    return tuple(with_unit(column, geometry.unit) for column in J)


def differential(
    geometry,
    ts: Sequence,
    diff_method: Optional[DifferentiationMethod] = None,
) -> Any:
    """
    Length, area or volume element of ``geometry`` at ``ts``.

    The magnitude of the exterior product of the Jacobian vectors; carries
    ``geometry.unit ** paramdim`` if the geometry has a unit.

    Examples
    --------
    >>> differential(Sphere([0.0, 0.0, 0.0], 1.0), (0.5, 0.0))  # 2 pi^2
    """
    params = _parameters(geometry, ts)
    diff_method = diff_method or default_diff_method(geometry)
    check_diff_method(geometry, diff_method)
    element = differential_batch(geometry, params[None], diff_method)[0]
    unit = None if geometry.unit is None else geometry.unit**geometry.paramdim
    return with_unit(element, unit)
