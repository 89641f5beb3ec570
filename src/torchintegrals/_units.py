"""Physical units around unit-naive numerical primitives."""

from __future__ import annotations

from typing import Any, Callable, Optional, Tuple

import pint
import torch
from torch import Tensor

from torchintegrals._exceptions import IntegrandError

ureg = pint.get_application_registry()


def with_unit(value: Tensor, unit: Optional[pint.Unit]) -> Any:
    """Attach ``unit`` to ``value``, or return ``value`` unchanged if None."""
    if unit is None:
        return value
    return ureg.Quantity(value, unit)


def combine_units(
    integrand_unit: Optional[pint.Unit],
    length_unit: Optional[pint.Unit],
    paramdim: int,
) -> Optional[pint.Unit]:
    """Unit of ``integral(f, geometry)``: unit(f) * unit(length)^paramdim."""
    if length_unit is not None:
        measure_unit = length_unit**paramdim
        if integrand_unit is None:
            return measure_unit
        return integrand_unit * measure_unit
    return integrand_unit


class UnitlessIntegrand:
    """
    Integrand evaluated over a batch of points with units stripped.

    The wrapped function is called once at ``probe`` to validate it and to
    learn the unit and shape of its values. Every later evaluation is
    converted to that unit and returned as a bare tensor, so the result of
    any quadrature over it is a magnitude in ``self.unit``.

    The unit of the integrand must be constant over the domain.

    Parameters
    ----------
    f : callable
        Integrand, mapping a point of shape (dim,) to a scalar, a tensor,
        or a ``pint.Quantity`` of either.
    probe : Tensor
        An interior point of the geometry, shape (dim,).
    dtype : torch.dtype
        Dtype of the returned values.

    Raises
    ------
    IntegrandError
        If ``f`` is not callable, fails with a ``TypeError`` at ``probe``,
        or returns something that is not numeric.
    """

    def __init__(self, f: Callable[[Tensor], Any], probe: Tensor, dtype):
        if not callable(f):
            raise IntegrandError(
                f"integrand must be callable, got {type(f).__name__}"
            )

        self.f = f
        self.dtype = dtype

        try:
            value = f(probe)
        except TypeError as exc:
            raise IntegrandError(
                f"integrand cannot be evaluated at a point of shape "
                f"{tuple(probe.shape)}: {exc}"
            ) from exc

        self.unit = value.units if isinstance(value, pint.Quantity) else None

        try:
            stripped = self._strip(value)
        except (TypeError, ValueError, RuntimeError) as exc:
            raise IntegrandError(
                f"integrand returned a non-numeric value of type "
                f"{type(value).__name__}"
            ) from exc

        self.shape: Tuple[int, ...] = tuple(stripped.shape)

    def _strip(self, value: Any) -> Tensor:
        if isinstance(value, pint.Quantity):
            if self.unit is None:
                raise IntegrandError(
                    "integrand returned a quantity with units where it "
                    "previously returned a plain number"
                )
            value = value.m_as(self.unit)
        elif self.unit is not None:
            raise IntegrandError(
                f"integrand returned a plain number where it previously "
                f"returned a quantity in {self.unit}"
            )
        return torch.as_tensor(value, dtype=self.dtype)

    def __call__(self, points: Tensor) -> Tensor:
        """Evaluate at points of shape (npoints, dim) -> (npoints, *shape)."""
        values = [self._strip(self.f(point)) for point in points.unbind(0)]
        if not values:
            return points.new_zeros((0,) + self.shape, dtype=self.dtype)
        return torch.stack(values)
