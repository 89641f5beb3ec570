"""Base class and adapter for parametrized geometries."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from typing import Any, Callable, ClassVar, Optional, Tuple

import pint
import torch
from torch import Tensor

from torchintegrals._exceptions import DimensionMismatchError
from torchintegrals._units import with_unit


def as_coordinates(value: Any) -> Tensor:
    """Convert array-like input to a floating tensor.

    Floating tensors keep their dtype; everything else becomes float64.
    """
    if isinstance(value, Tensor) and value.is_floating_point():
        return value
    return torch.as_tensor(value, dtype=torch.float64)


@dataclass(frozen=True, eq=False)
class Geometry:
    """Immutable geometry with a parametrization ``[0, 1]^N -> R^dim``.

    Subclasses set the class attribute ``paramdim`` (or a property of the
    same name), list the names of their coordinate fields in
    ``_tensor_fields`` and implement ``_parametrize``. Those with a
    closed-form derivative set ``analytical = True`` and implement
    ``_jacobian``.

    All tensor-valued hooks work on batches: ``ts`` has shape (..., N),
    ``_parametrize`` returns (..., dim) and ``_jacobian`` returns
    (..., N, dim).

    Parameters
    ----------
    unit : pint.Unit, optional
        Length unit of the coordinates. Measures and integrals over the
        geometry carry ``unit ** paramdim``.
    """

    analytical: ClassVar[bool] = False
    _tensor_fields: ClassVar[Tuple[str, ...]] = ()

    unit: Optional[pint.Unit] = field(default=None, kw_only=True)

    def __post_init__(self):
        for name in self._tensor_fields:
            object.__setattr__(self, name, as_coordinates(getattr(self, name)))

    def __call__(self, *ts) -> Tensor:
        """Evaluate the parametrization at ``geometry(t1, ..., tN)``.

        Each ``t`` may be a number or a tensor; they are broadcast together
        and the result has shape ``broadcast_shape + (dim,)``.
        """
        if len(ts) != self.paramdim:
            raise DimensionMismatchError(
                f"{type(self).__name__} takes {self.paramdim} parametric "
                f"coordinates, got {len(ts)}"
            )
        ts = torch.broadcast_tensors(
            *[torch.as_tensor(t, dtype=self.dtype) for t in ts]
        )
        return self._parametrize(torch.stack(ts, dim=-1))

    def _parametrize(self, ts: Tensor) -> Tensor:
        raise NotImplementedError(
            f"{type(self).__name__} has no parametrization"
        )

    def _jacobian(self, ts: Tensor) -> Tensor:
        raise NotImplementedError(
            f"{type(self).__name__} has no closed-form Jacobian"
        )

    def _measure(self) -> Tensor:
        raise NotImplementedError(
            f"{type(self).__name__} has no closed-form measure"
        )

    @property
    def has_analytical_jacobian(self) -> bool:
        return type(self).analytical

    def measure(self) -> Any:
        """Length, area or volume, in ``unit ** paramdim`` if ``unit`` is set."""
        unit = None if self.unit is None else self.unit**self.paramdim
        return with_unit(self._measure(), unit)

    def representative_parameters(self) -> Tensor:
        """An interior point of the parametric domain, shape (N,)."""
        return torch.full((self.paramdim,), 0.5, dtype=self.dtype)

    def representative_point(self) -> Tensor:
        """An interior point of the geometry, shape (dim,)."""
        return self._parametrize(self.representative_parameters())

    @property
    def embedding_dim(self) -> int:
        return self.representative_point().shape[-1]

    @property
    def dtype(self) -> torch.dtype:
        for f in dataclasses.fields(self):
            value = getattr(self, f.name)
            if isinstance(value, Tensor) and value.is_floating_point():
                return value.dtype
            if isinstance(value, Geometry):
                return value.dtype
        return torch.float64

    def to(self, dtype: torch.dtype) -> Geometry:
        """Copy of the geometry with all coordinates cast to ``dtype``."""
        changes = {}
        for f in dataclasses.fields(self):
            if not f.init:
                continue
            value = getattr(self, f.name)
            if isinstance(value, Tensor) and value.is_floating_point():
                changes[f.name] = value.to(dtype)
            elif isinstance(value, Geometry):
                changes[f.name] = value.to(dtype)
        return dataclasses.replace(self, **changes)


@dataclass(frozen=True, eq=False)
class ParametricGeometry(Geometry):
    """Adapter turning a function on ``[0, 1]^paramdim`` into a geometry.

    Used to re-express geometries whose natural domain is unbounded or
    non-rectangular after a change of variables.

    Parameters
    ----------
    function : callable
        Maps parametric coordinates of shape (..., paramdim) to points of
        shape (..., dim).
    paramdim : int
        Number of parametric coordinates.
    jacobian : callable, optional
        Closed-form derivative of ``function``, mapping (..., paramdim) to
        (..., paramdim, dim). Enables ``Analytical`` differentiation.
    dtype : torch.dtype
        Dtype of the parametric coordinates.

    Examples
    --------
    >>> helix = ParametricGeometry(
    ...     lambda ts: torch.stack(
    ...         [torch.cos(6 * ts[..., 0]), torch.sin(6 * ts[..., 0]), ts[..., 0]],
    ...         dim=-1,
    ...     ),
    ...     1,
    ... )
    >>> helix(0.5).shape
    torch.Size([3])
    """

    function: Callable[[Tensor], Tensor]
    paramdim: int
    jacobian: Optional[Callable[[Tensor], Tensor]] = None
    dtype: torch.dtype = torch.float64

    def _parametrize(self, ts: Tensor) -> Tensor:
        return self.function(ts)

    def _jacobian(self, ts: Tensor) -> Tensor:
        if self.jacobian is None:
            return super()._jacobian(ts)
        return self.jacobian(ts)

    @property
    def has_analytical_jacobian(self) -> bool:
        return self.jacobian is not None

    def to(self, dtype: torch.dtype) -> ParametricGeometry:
        return dataclasses.replace(self, dtype=dtype)


def is_curve(geometry) -> bool:
    return geometry.paramdim == 1


def is_surface(geometry) -> bool:
    return geometry.paramdim == 2


def is_solid(geometry) -> bool:
    return geometry.paramdim == 3
