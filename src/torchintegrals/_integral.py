"""The ``integral`` entry point."""

from __future__ import annotations

from typing import Any, Callable, Optional

import torch
from torch import Tensor

from torchintegrals import _specializations  # noqa: F401  (registers routines)
from torchintegrals._differentiation import DifferentiationMethod
from torchintegrals._dispatch import integrate_unitless, validate
from torchintegrals._rules import IntegrationRule, default_rule
from torchintegrals._units import UnitlessIntegrand, combine_units, with_unit
from torchintegrals.geometry import Mesh, elements


def integral(
    f: Callable[[Tensor], Any],
    geometry,
    rule: Optional[IntegrationRule] = None,
    *,
    diff_method: Optional[DifferentiationMethod] = None,
    dtype: torch.dtype = torch.float64,
    **options,
) -> Any:
    r"""
    Integrate ``f`` over ``geometry``.

    .. math::

        \int_G f(p) \, dG = \int_{[0,1]^N} f(G(t)) \,
        \left\| \bigwedge_n \partial_n G(t) \right\| dt

    Parameters
    ----------
    f : callable
        Integrand. Called with one point of shape (dim,) at a time, in the
        coordinates of ``geometry``. May return a number, a tensor, or a
        ``pint.Quantity`` of either; the unit must be the same everywhere.
    geometry : Geometry or Mesh
        Domain of integration. A ``Mesh`` is integrated element by element.
    rule : IntegrationRule, optional
        Defaults to ``default_rule(geometry.paramdim)``: ``GaussKronrod()``
        for curves and ``HAdaptiveCubature()`` otherwise.
    diff_method : DifferentiationMethod, optional
        How Jacobians are computed. Defaults to ``Analytical()`` for
        geometries with a closed form and ``FiniteDifference()`` otherwise.
    dtype : torch.dtype
        Floating-point precision of the computation.
    **options
        Geometry-specific options, such as ``alg="decasteljau"`` for
        ``BezierCurve``.

    Returns
    -------
    Tensor or pint.Quantity
        Same shape as the values of ``f``. Carries ``unit(f) *
        geometry.unit ** paramdim`` if either has a unit.

    Raises
    ------
    UnsupportedCombinationError
        If the geometry cannot be integrated with ``rule`` or
        ``diff_method``. Raised before any evaluation of ``f``.
    IntegrandError
        If ``f`` cannot be evaluated on points of the geometry.
    IntegrationError
        If an adaptive rule does not converge.

    Examples
    --------
    >>> circle = Circle(Plane([0.0, 0.0, 0.0], [0.0, 0.0, 1.0]), 2.5)
    >>> integral(lambda p: 1.0, circle)  # 2 pi 2.5
    >>> integral(lambda p: p[0] ** 2, Box([0.0, 0.0], [1.0, 1.0]), GaussLegendre(4))
    >>> integral(lambda p: 2.0 * ureg.ampere, Segment([0.0], [3.0], unit=ureg.meter))
    """
    if isinstance(geometry, Mesh):
        return _integrate_mesh(f, geometry, rule, diff_method, dtype, options)

    if rule is None:
        rule = default_rule(geometry.paramdim)

    validate(geometry, rule, diff_method)

    geometry = geometry.to(dtype)
    integrand = UnitlessIntegrand(f, geometry.representative_point(), dtype)
    value = integrate_unitless(integrand, geometry, rule, diff_method, **options)

    unit = combine_units(integrand.unit, geometry.unit, geometry.paramdim)
    return with_unit(value, unit)


def _integrate_mesh(f, mesh, rule, diff_method, dtype, options):
    if rule is None:
        rule = default_rule(mesh.paramdim)

    total = None
    for element in elements(mesh):
        value = integral(
            f, element, rule, diff_method=diff_method, dtype=dtype, **options
        )
        total = value if total is None else total + value
    return total
