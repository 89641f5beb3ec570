"""Lines, rays and planes: integrals over unbounded parametric domains.

Gauss-Kronrod integrates over the infinite interval directly. The product
rules see the domain through x = s / (1 - s^2), which maps (-1, 1) onto the
real line with dx/ds = (1 + s^2) / (1 - s^2)^2.
"""

import math

import torch
from torch import Tensor

from torchintegrals._differentiation import Analytical
from torchintegrals._dispatch import integrate_unitless, register
from torchintegrals._generic import nested_quad
from torchintegrals._rules import GaussKronrod, GaussLegendre, HAdaptiveCubature
from torchintegrals.geometry import Line, ParametricGeometry, Plane, Ray
from torchintegrals.quadrature import quad


def _stretch(s: Tensor):
    """x(s) = s / (1 - s^2) and its derivative."""
    denominator = 1 - s**2
    return s / denominator, (1 + s**2) / denominator**2


@register(Line, GaussKronrod, requires=Analytical)
def _line_gauss_kronrod(integrand, line, rule, diff_method):
    dtype = line.dtype
    direction = line.b - line.a
    speed = torch.linalg.vector_norm(direction)

    def g(t: Tensor) -> Tensor:
        values = integrand(line.a + t[:, None] * direction)
        return values * speed

    return quad(
        g,
        torch.tensor(-math.inf, dtype=dtype),
        math.inf,
        **rule.options(dtype),
    )


@register(Line, GaussLegendre, HAdaptiveCubature, requires=Analytical)
def _line_product_rule(integrand, line, rule, diff_method):
    direction = line.b - line.a

    # u in [0, 1] -> s = 2u - 1 in [-1, 1] -> x(s) in R
    def function(ts: Tensor) -> Tensor:
        x, _ = _stretch(2 * ts - 1)
        return line.a + x * direction

    def jacobian(ts: Tensor) -> Tensor:
        _, dx = _stretch(2 * ts - 1)
        return (2 * dx * direction)[..., None, :]

    wrapped = ParametricGeometry(function, 1, jacobian, dtype=line.dtype)
    return integrate_unitless(integrand, wrapped, rule, diff_method)


@register(Ray, GaussKronrod, requires=Analytical)
def _ray_gauss_kronrod(integrand, ray, rule, diff_method):
    dtype = ray.dtype
    speed = torch.linalg.vector_norm(ray.direction)

    def g(t: Tensor) -> Tensor:
        values = integrand(ray.origin + t[:, None] * ray.direction)
        return values * speed

    return quad(
        g, torch.tensor(0.0, dtype=dtype), math.inf, **rule.options(dtype)
    )


@register(Ray, GaussLegendre, HAdaptiveCubature, requires=Analytical)
def _ray_product_rule(integrand, ray, rule, diff_method):
    # t in [0, 1) -> x(t) in [0, inf)
    def function(ts: Tensor) -> Tensor:
        x, _ = _stretch(ts)
        return ray.origin + x * ray.direction

    def jacobian(ts: Tensor) -> Tensor:
        _, dx = _stretch(ts)
        return (dx * ray.direction)[..., None, :]

    wrapped = ParametricGeometry(function, 1, jacobian, dtype=ray.dtype)
    return integrate_unitless(integrand, wrapped, rule, diff_method)


@register(Plane, GaussKronrod, requires=Analytical)
def _plane_gauss_kronrod(integrand, plane, rule, diff_method):
    dtype = plane.dtype
    u, v = plane.basis

    def g(s: Tensor, ts: Tensor) -> Tensor:
        return integrand(plane.point + s * u + ts[:, None] * v)

    return nested_quad(
        g,
        -math.inf,
        math.inf,
        lambda s: (-math.inf, math.inf),
        dtype,
        **rule.options(dtype),
    )


@register(Plane, GaussLegendre, HAdaptiveCubature, requires=Analytical)
def _plane_product_rule(integrand, plane, rule, diff_method):
    u, v = plane.basis

    def function(ts: Tensor) -> Tensor:
        x, _ = _stretch(2 * ts - 1)
        return plane.point + x[..., 0:1] * u + x[..., 1:2] * v

    def jacobian(ts: Tensor) -> Tensor:
        _, dx = _stretch(2 * ts - 1)
        return torch.stack(
            [2 * dx[..., 0:1] * u, 2 * dx[..., 1:2] * v], dim=-2
        )

    wrapped = ParametricGeometry(function, 2, jacobian, dtype=plane.dtype)
    return integrate_unitless(integrand, wrapped, rule, diff_method)
