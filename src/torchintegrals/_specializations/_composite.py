"""Closed surfaces of revolution: lateral surface plus flat end caps."""

from torchintegrals._differentiation import AutoDiff, FiniteDifference
from torchintegrals._dispatch import (
    integrate_unitless,
    register,
    register_unsupported,
)
from torchintegrals._rules import GaussKronrod, GaussLegendre, HAdaptiveCubature
from torchintegrals.geometry import ConeSurface, CylinderSurface, FrustumSurface


def _surface_of_revolution(integrand, surface, rule, diff_method):
    total = integrate_unitless(integrand, surface.lateral(), rule, diff_method)
    for cap in surface.caps():
        total = total + integrate_unitless(integrand, cap, rule, diff_method)
    return total


_DIFF_METHODS = (FiniteDifference, AutoDiff)

register(
    CylinderSurface,
    GaussKronrod,
    HAdaptiveCubature,
    requires=_DIFF_METHODS,
)(_surface_of_revolution)

# TODO: support GaussLegendre once the lateral surface has a closed-form
# Jacobian.
register_unsupported(CylinderSurface, GaussLegendre)

for _surface in (ConeSurface, FrustumSurface):
    register(
        _surface,
        GaussKronrod,
        GaussLegendre,
        HAdaptiveCubature,
        requires=_DIFF_METHODS,
    )(_surface_of_revolution)
