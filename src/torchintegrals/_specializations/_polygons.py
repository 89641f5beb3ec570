"""Polygonal chains, polygons and meshes: sums over their pieces."""

from torchintegrals._dispatch import integrate_unitless, register
from torchintegrals._rules import GaussKronrod, GaussLegendre, HAdaptiveCubature
from torchintegrals.geometry import PolyArea, Rope, discretize, elements

_RULES = (GaussKronrod, GaussLegendre, HAdaptiveCubature)


def _sum(integrand, pieces, rule, diff_method):
    total = None
    for piece in pieces:
        value = integrate_unitless(integrand, piece, rule, diff_method)
        total = value if total is None else total + value
    return total


@register(Rope, *_RULES)
def _rope(integrand, rope, rule, diff_method):
    # Covers Ring, whose segments include the closing one
    return _sum(integrand, rope.segments(), rule, diff_method)


@register(PolyArea, *_RULES)
def _polyarea(integrand, polygon, rule, diff_method):
    # Triangles are integrated in closed form
    return _sum(integrand, elements(discretize(polygon)), rule, None)
