"""Triangles and tetrahedra, whose parametric domain is a simplex.

Gauss-Kronrod integrates the triangle with inner bounds depending on the
outer variable. The product rules need a rectangular domain: the triangle
is remapped by polar-barycentric coordinates and the tetrahedron by the
Duffy transformation, both as parametrizations of the unit cube with
closed-form Jacobians.
"""

import math

import torch
from torch import Tensor

from torchintegrals._differentiation import Analytical
from torchintegrals._dispatch import (
    integrate_unitless,
    register,
    register_unsupported,
)
from torchintegrals._generic import nested_quad
from torchintegrals._rules import GaussKronrod, GaussLegendre, HAdaptiveCubature
from torchintegrals.geometry import ParametricGeometry, Tetrahedron, Triangle


@register(Triangle, GaussKronrod, requires=Analytical)
def _triangle_gauss_kronrod(integrand, triangle, rule, diff_method):
    dtype = triangle.dtype

    def g(u: Tensor, vs: Tensor) -> Tensor:
        ts = torch.stack([u.expand_as(vs), vs], dim=-1)
        return integrand(triangle._parametrize(ts))

    # The unit simplex has area 1/2
    scale = 2 * triangle._measure()
    return scale * nested_quad(
        g,
        0.0,
        1.0,
        lambda u: (0.0, 1.0 - u.item()),
        dtype,
        **rule.options(dtype),
    )


def _polar_barycentric(ts: Tensor):
    """(R, phi / (pi/2)) in [0, 1]^2 -> barycentric (u, v) and derivatives.

    u = R cos(phi) / (sin(phi) + cos(phi)), v = R sin(phi) / (...), so that
    u + v = R.
    """
    R = ts[..., 0:1]
    phi = math.pi / 2 * ts[..., 1:2]
    c, s = torch.cos(phi), torch.sin(phi)
    D = c + s
    uv = R * torch.cat([c, s], dim=-1) / D
    d_dR = torch.cat([c, s], dim=-1) / D
    ones = torch.ones_like(R)
    d_dphi = math.pi / 2 * R / D**2 * torch.cat([-ones, ones], dim=-1)
    return uv, torch.stack([d_dR, d_dphi], dim=-2)


@register(Triangle, GaussLegendre, HAdaptiveCubature, requires=Analytical)
def _triangle_product_rule(integrand, triangle, rule, diff_method):
    edges = torch.stack([triangle.b - triangle.a, triangle.c - triangle.a])

    def function(ts: Tensor) -> Tensor:
        uv, _ = _polar_barycentric(ts)
        return triangle.a + uv @ edges

    def jacobian(ts: Tensor) -> Tensor:
        _, d = _polar_barycentric(ts)
        return d @ edges

    wrapped = ParametricGeometry(function, 2, jacobian, dtype=triangle.dtype)
    return integrate_unitless(integrand, wrapped, rule, diff_method)


register_unsupported(Tetrahedron, GaussKronrod)


def _duffy(ts: Tensor):
    """Unit cube -> unit simplex, u = s1 (1 - s2), v = s1 s2 (1 - s3),
    w = s1 s2 s3, and the derivatives of (u, v, w) by (s1, s2, s3)."""
    s1, s2, s3 = ts[..., 0], ts[..., 1], ts[..., 2]
    uvw = torch.stack(
        [s1 * (1 - s2), s1 * s2 * (1 - s3), s1 * s2 * s3], dim=-1
    )
    zero = torch.zeros_like(s1)
    d = torch.stack(
        [
            torch.stack([1 - s2, s2 * (1 - s3), s2 * s3], dim=-1),
            torch.stack([-s1, s1 * (1 - s3), s1 * s3], dim=-1),
            torch.stack([zero, -s1 * s2, s1 * s2], dim=-1),
        ],
        dim=-2,
    )
    return uvw, d


@register(
    Tetrahedron, GaussLegendre, HAdaptiveCubature, requires=Analytical
)
def _tetrahedron_product_rule(integrand, tetrahedron, rule, diff_method):
    edges = tetrahedron.edges

    def function(ts: Tensor) -> Tensor:
        uvw, _ = _duffy(ts)
        return tetrahedron.a + uvw @ edges

    def jacobian(ts: Tensor) -> Tensor:
        _, d = _duffy(ts)
        return d @ edges

    wrapped = ParametricGeometry(
        function, 3, jacobian, dtype=tetrahedron.dtype
    )
    return integrate_unitless(integrand, wrapped, rule, diff_method)
