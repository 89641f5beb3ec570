"""Two-dimensional geometries."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Tuple

import torch
from torch import Tensor

from ._exceptions import DegenerateInputError
from ._geometry import Geometry, ParametricGeometry


def orthonormal_basis(normal: Tensor) -> Tuple[Tensor, Tensor]:
    """Two unit vectors spanning the plane orthogonal to ``normal`` (3,)."""
    n = normal / torch.linalg.vector_norm(normal)
    helper = torch.zeros_like(n)
    helper[0 if torch.abs(n[0]) < 0.9 else 1] = 1
    u = helper - torch.dot(helper, n) * n
    u = u / torch.linalg.vector_norm(u)
    return u, torch.linalg.cross(n, u)


def simplex_measure(edges: Tensor) -> Tensor:
    """Volume of the k-simplex spanned by ``edges`` of shape (k, dim)."""
    k = edges.shape[-2]
    gram = edges @ edges.transpose(-1, -2)
    return torch.sqrt(torch.clamp(torch.linalg.det(gram), min=0)) / math.factorial(k)


def _polar(plane_basis: Tuple[Tensor, Tensor], phi: Tensor) -> Tensor:
    u, v = plane_basis
    return torch.cos(phi) * u + torch.sin(phi) * v


@dataclass(frozen=True, eq=False)
class Plane(Geometry):
    """Infinite plane through ``point`` orthogonal to ``normal``.

    Parametrized as ``point + s * u + t * v`` for (s, t) in R^2 with
    ``(u, v)`` an orthonormal basis of the plane.
    """

    point: Tensor
    normal: Tensor

    paramdim = 2
    analytical = True
    _tensor_fields = ("point", "normal")

    def __post_init__(self):
        super().__post_init__()
        if self.normal.shape != (3,) or not torch.any(self.normal != 0):
            raise DegenerateInputError(
                "Plane normal must be a non-zero vector of shape (3,)"
            )

    @property
    def basis(self) -> Tuple[Tensor, Tensor]:
        return orthonormal_basis(self.normal)

    def _parametrize(self, ts: Tensor) -> Tensor:
        u, v = self.basis
        return self.point + ts[..., 0:1] * u + ts[..., 1:2] * v

    def _jacobian(self, ts: Tensor) -> Tensor:
        return torch.stack(self.basis).expand(ts.shape[:-1] + (2, 3))

    def _measure(self) -> Tensor:
        return torch.tensor(math.inf, dtype=self.dtype)


@dataclass(frozen=True, eq=False)
class Disk(Geometry):
    """Flat disk of ``radius`` centered at the origin of ``plane``."""

    plane: Plane
    radius: Tensor

    paramdim = 2
    _tensor_fields = ("radius",)

    def _parametrize(self, ts: Tensor) -> Tensor:
        rho = self.radius * ts[..., 0:1]
        return self.plane.point + rho * _polar(
            self.plane.basis, 2 * math.pi * ts[..., 1:2]
        )

    def _measure(self) -> Tensor:
        return math.pi * self.radius**2


@dataclass(frozen=True, eq=False)
class Sphere(Geometry):
    """Sphere of ``radius`` around ``center``.

    In two dimensions this is a circle (paramdim 1); in three dimensions
    a surface parametrized by polar and azimuthal angle.
    """

    center: Tensor
    radius: Tensor

    _tensor_fields = ("center", "radius")

    def __post_init__(self):
        super().__post_init__()
        if self.center.shape not in ((2,), (3,)):
            raise DegenerateInputError(
                f"Sphere center must have shape (2,) or (3,), got "
                f"{tuple(self.center.shape)}"
            )

    @property
    def paramdim(self) -> int:
        return self.center.shape[0] - 1

    def _parametrize(self, ts: Tensor) -> Tensor:
        if self.paramdim == 1:
            phi = 2 * math.pi * ts[..., 0]
            direction = torch.stack([torch.cos(phi), torch.sin(phi)], dim=-1)
        else:
            theta = math.pi * ts[..., 0]
            phi = 2 * math.pi * ts[..., 1]
            direction = torch.stack(
                [
                    torch.sin(theta) * torch.cos(phi),
                    torch.sin(theta) * torch.sin(phi),
                    torch.cos(theta),
                ],
                dim=-1,
            )
        return self.center + self.radius * direction

    def _measure(self) -> Tensor:
        if self.paramdim == 1:
            return 2 * math.pi * self.radius
        return 4 * math.pi * self.radius**2


@dataclass(frozen=True, eq=False)
class Triangle(Geometry):
    """Triangle ``a + u (b - a) + v (c - a)`` over u, v >= 0, u + v <= 1.

    Its parametric domain is the unit simplex, not the unit square.
    """

    a: Tensor
    b: Tensor
    c: Tensor

    paramdim = 2
    analytical = True
    _tensor_fields = ("a", "b", "c")

    def _parametrize(self, ts: Tensor) -> Tensor:
        return (
            self.a
            + ts[..., 0:1] * (self.b - self.a)
            + ts[..., 1:2] * (self.c - self.a)
        )

    def _jacobian(self, ts: Tensor) -> Tensor:
        edges = torch.stack([self.b - self.a, self.c - self.a])
        return edges.expand(ts.shape[:-1] + edges.shape)

    def representative_parameters(self) -> Tensor:
        return torch.full((2,), 1 / 3, dtype=self.dtype)

    def _measure(self) -> Tensor:
        return simplex_measure(torch.stack([self.b - self.a, self.c - self.a]))


@dataclass(frozen=True, eq=False)
class Quadrangle(Geometry):
    """Bilinear patch through ``a, b, c, d`` in counter-clockwise order."""

    a: Tensor
    b: Tensor
    c: Tensor
    d: Tensor

    paramdim = 2
    _tensor_fields = ("a", "b", "c", "d")

    def _parametrize(self, ts: Tensor) -> Tensor:
        u = ts[..., 0:1]
        v = ts[..., 1:2]
        return (
            (1 - u) * (1 - v) * self.a
            + u * (1 - v) * self.b
            + u * v * self.c
            + (1 - u) * v * self.d
        )

    def _measure(self) -> Tensor:
        # Exact for planar quadrangles
        return simplex_measure(
            torch.stack([self.b - self.a, self.c - self.a])
        ) + simplex_measure(torch.stack([self.c - self.a, self.d - self.a]))


@dataclass(frozen=True, eq=False)
class Torus(Geometry):
    """Torus around ``center`` with axis ``normal``.

    ``major_radius`` is the distance from the center to the tube center,
    ``minor_radius`` the radius of the tube.
    """

    center: Tensor
    normal: Tensor
    major_radius: Tensor
    minor_radius: Tensor

    paramdim = 2
    _tensor_fields = ("center", "normal", "major_radius", "minor_radius")

    def _parametrize(self, ts: Tensor) -> Tensor:
        axis = self.normal / torch.linalg.vector_norm(self.normal)
        u = 2 * math.pi * ts[..., 0:1]
        v = 2 * math.pi * ts[..., 1:2]
        ring = self.major_radius + self.minor_radius * torch.cos(v)
        return (
            self.center
            + ring * _polar(orthonormal_basis(axis), u)
            + self.minor_radius * torch.sin(v) * axis
        )

    def _measure(self) -> Tensor:
        return 4 * math.pi**2 * self.major_radius * self.minor_radius


class _SurfaceOfRevolution:
    """Lateral surface plus flat end caps around the axis ``top - bottom``.

    The parametrization covers the lateral surface only,
    ``(u, v) -> bottom + v * axis + r(v) * (cos 2 pi u, sin 2 pi u)`` with
    the radius linear in ``v``; the flat ends are returned by ``caps``.
    """

    paramdim = 2

    @property
    def axis(self) -> Tensor:
        return self.top - self.bottom

    @property
    def height(self) -> Tensor:
        return torch.linalg.vector_norm(self.axis)

    def _parametrize(self, ts: Tensor) -> Tensor:
        u = ts[..., 0:1]
        v = ts[..., 1:2]
        radius = (1 - v) * self.bottom_radius + v * self.top_radius
        return (
            self.bottom
            + v * self.axis
            + radius * _polar(orthonormal_basis(self.axis), 2 * math.pi * u)
        )

    def lateral(self) -> ParametricGeometry:
        """The curved part alone, as a standalone geometry."""
        return ParametricGeometry(self._parametrize, 2, dtype=self.dtype)

    def caps(self) -> List[Disk]:
        disks = []
        for center, radius in (
            (self.bottom, self.bottom_radius),
            (self.top, self.top_radius),
        ):
            if radius > 0:
                disks.append(Disk(Plane(center, self.axis), radius))
        return disks

    def _measure(self) -> Tensor:
        slant = torch.sqrt(
            (self.bottom_radius - self.top_radius) ** 2 + self.height**2
        )
        lateral = math.pi * (self.bottom_radius + self.top_radius) * slant
        return lateral + sum(cap._measure() for cap in self.caps())


@dataclass(frozen=True, eq=False)
class FrustumSurface(_SurfaceOfRevolution, Geometry):
    """Closed surface of a conical frustum between two centers."""

    bottom: Tensor
    top: Tensor
    bottom_radius: Tensor
    top_radius: Tensor

    _tensor_fields = ("bottom", "top", "bottom_radius", "top_radius")


@dataclass(frozen=True, eq=False)
class CylinderSurface(_SurfaceOfRevolution, Geometry):
    """Closed surface of a right circular cylinder between two centers."""

    bottom: Tensor
    top: Tensor
    radius: Tensor

    _tensor_fields = ("bottom", "top", "radius")

    @property
    def bottom_radius(self) -> Tensor:
        return self.radius

    @property
    def top_radius(self) -> Tensor:
        return self.radius


@dataclass(frozen=True, eq=False)
class ConeSurface(_SurfaceOfRevolution, Geometry):
    """Closed surface of a right circular cone: lateral part and base."""

    apex: Tensor
    base: Tensor
    radius: Tensor

    _tensor_fields = ("apex", "base", "radius")

    @property
    def bottom(self) -> Tensor:
        return self.base

    @property
    def top(self) -> Tensor:
        return self.apex

    @property
    def bottom_radius(self) -> Tensor:
        return self.radius

    @property
    def top_radius(self) -> Tensor:
        return torch.zeros_like(self.radius)


@dataclass(frozen=True, eq=False)
class PolyArea(Geometry):
    """Planar polygon with ``vertices`` of shape (n, 2) or (n, 3).

    A polygon has no single parametrization; it is integrated through a
    triangulation (see ``discretize``). Holes are not supported.
    """

    vertices: Tensor

    paramdim = 2
    _tensor_fields = ("vertices",)

    def __post_init__(self):
        super().__post_init__()
        if self.vertices.dim() != 2 or self.vertices.shape[0] < 3:
            raise DegenerateInputError(
                "PolyArea needs at least three vertices of shape (n, dim)"
            )

    def representative_point(self) -> Tensor:
        return self.vertices[0]

    def _measure(self) -> Tensor:
        v = self.vertices
        w = torch.roll(v, -1, dims=0)
        if v.shape[-1] == 2:
            return torch.abs(
                (v[:, 0] * w[:, 1] - v[:, 1] * w[:, 0]).sum()
            ) / 2
        # Newell's method for planar polygons in 3-D
        return torch.linalg.vector_norm(torch.linalg.cross(v, w).sum(dim=0)) / 2
