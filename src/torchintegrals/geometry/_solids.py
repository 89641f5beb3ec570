"""Three-dimensional (and N-dimensional) geometries."""

from __future__ import annotations

import math
from dataclasses import dataclass

import torch
from torch import Tensor

from ._exceptions import DegenerateInputError
from ._geometry import Geometry
from ._surfaces import orthonormal_basis, simplex_measure

# Reference corners of the trilinear hexahedron, in VTK order
_HEXAHEDRON_CORNERS = [
    [0, 0, 0],
    [1, 0, 0],
    [1, 1, 0],
    [0, 1, 0],
    [0, 0, 1],
    [1, 0, 1],
    [1, 1, 1],
    [0, 1, 1],
]


@dataclass(frozen=True, eq=False)
class Ball(Geometry):
    """Solid ball of ``radius`` around ``center`` in two or three dimensions."""

    center: Tensor
    radius: Tensor

    _tensor_fields = ("center", "radius")

    def __post_init__(self):
        super().__post_init__()
        if self.center.shape not in ((2,), (3,)):
            raise DegenerateInputError(
                f"Ball center must have shape (2,) or (3,), got "
                f"{tuple(self.center.shape)}"
            )

    @property
    def paramdim(self) -> int:
        return self.center.shape[0]

    def _parametrize(self, ts: Tensor) -> Tensor:
        rho = self.radius * ts[..., 0]
        if self.paramdim == 2:
            phi = 2 * math.pi * ts[..., 1]
            direction = torch.stack([torch.cos(phi), torch.sin(phi)], dim=-1)
        else:
            theta = math.pi * ts[..., 1]
            phi = 2 * math.pi * ts[..., 2]
            direction = torch.stack(
                [
                    torch.sin(theta) * torch.cos(phi),
                    torch.sin(theta) * torch.sin(phi),
                    torch.cos(theta),
                ],
                dim=-1,
            )
        return self.center + rho[..., None] * direction

    def _measure(self) -> Tensor:
        if self.paramdim == 2:
            return math.pi * self.radius**2
        return 4 / 3 * math.pi * self.radius**3


@dataclass(frozen=True, eq=False)
class Box(Geometry):
    """Axis-aligned box ``[min, max]`` in any dimension."""

    min: Tensor
    max: Tensor

    analytical = True
    _tensor_fields = ("min", "max")

    def __post_init__(self):
        super().__post_init__()
        if self.min.shape != self.max.shape or self.min.dim() != 1:
            raise DegenerateInputError(
                "Box corners must be vectors of equal length"
            )

    @property
    def paramdim(self) -> int:
        return self.min.shape[0]

    def _parametrize(self, ts: Tensor) -> Tensor:
        return self.min + ts * (self.max - self.min)

    def _jacobian(self, ts: Tensor) -> Tensor:
        J = torch.diag(self.max - self.min)
        return J.expand(ts.shape[:-1] + J.shape)

    def _measure(self) -> Tensor:
        return torch.prod(self.max - self.min)


@dataclass(frozen=True, eq=False)
class Tetrahedron(Geometry):
    """Tetrahedron ``a + u (b - a) + v (c - a) + w (d - a)``.

    Its parametric domain is the unit simplex u, v, w >= 0, u + v + w <= 1.
    """

    a: Tensor
    b: Tensor
    c: Tensor
    d: Tensor

    paramdim = 3
    analytical = True
    _tensor_fields = ("a", "b", "c", "d")

    @property
    def edges(self) -> Tensor:
        """Edge vectors from ``a``, shape (3, dim)."""
        return torch.stack([self.b - self.a, self.c - self.a, self.d - self.a])

    def _parametrize(self, ts: Tensor) -> Tensor:
        return self.a + ts @ self.edges

    def _jacobian(self, ts: Tensor) -> Tensor:
        return self.edges.expand(ts.shape[:-1] + (3, self.a.shape[-1]))

    def representative_parameters(self) -> Tensor:
        return torch.full((3,), 0.25, dtype=self.dtype)

    def _measure(self) -> Tensor:
        return simplex_measure(self.edges)


@dataclass(frozen=True, eq=False)
class Hexahedron(Geometry):
    """Trilinear hexahedron through 8 ``vertices`` in VTK order."""

    vertices: Tensor

    paramdim = 3
    _tensor_fields = ("vertices",)

    def __post_init__(self):
        super().__post_init__()
        if self.vertices.shape != (8, 3):
            raise DegenerateInputError(
                f"Hexahedron needs vertices of shape (8, 3), got "
                f"{tuple(self.vertices.shape)}"
            )

    def _corners(self) -> Tensor:
        return torch.tensor(
            _HEXAHEDRON_CORNERS,
            dtype=self.vertices.dtype,
            device=self.vertices.device,
        )

    def _parametrize(self, ts: Tensor) -> Tensor:
        corners = self._corners()
        t = ts[..., None, :]
        shape = torch.prod(corners * t + (1 - corners) * (1 - t), dim=-1)
        return shape @ self.vertices

    def _measure(self) -> Tensor:
        # det(J) of a trilinear map has degree <= 2 per axis, so the
        # 2-point Gauss rule on each axis is exact
        corners = self._corners()
        offset = 0.5 / math.sqrt(3)
        nodes = torch.tensor(
            [0.5 - offset, 0.5 + offset], dtype=self.vertices.dtype
        )
        ts = torch.cartesian_prod(nodes, nodes, nodes)
        t = ts[:, None, :]
        factors = corners * t + (1 - corners) * (1 - t)
        sign = 2 * corners - 1
        derivatives = []
        for k in range(3):
            others = torch.cat([factors[..., :k], factors[..., k + 1 :]], dim=-1)
            derivatives.append((sign[:, k] * torch.prod(others, dim=-1)) @ self.vertices)
        J = torch.stack(derivatives, dim=-2)
        return torch.abs(torch.linalg.det(J)).sum() / 8


@dataclass(frozen=True, eq=False)
class Cylinder(Geometry):
    """Solid right circular cylinder between centers ``bottom`` and ``top``."""

    bottom: Tensor
    top: Tensor
    radius: Tensor

    paramdim = 3
    _tensor_fields = ("bottom", "top", "radius")

    def _parametrize(self, ts: Tensor) -> Tensor:
        axis = self.top - self.bottom
        u, v = orthonormal_basis(axis)
        rho = self.radius * ts[..., 0:1]
        phi = 2 * math.pi * ts[..., 1:2]
        return (
            self.bottom
            + ts[..., 2:3] * axis
            + rho * (torch.cos(phi) * u + torch.sin(phi) * v)
        )

    def _measure(self) -> Tensor:
        height = torch.linalg.vector_norm(self.top - self.bottom)
        return math.pi * self.radius**2 * height


@dataclass(frozen=True, eq=False)
class Cone(Geometry):
    """Solid right circular cone with ``base`` center and ``apex``."""

    apex: Tensor
    base: Tensor
    radius: Tensor

    paramdim = 3
    _tensor_fields = ("apex", "base", "radius")

    def _parametrize(self, ts: Tensor) -> Tensor:
        axis = self.apex - self.base
        u, v = orthonormal_basis(axis)
        w = ts[..., 2:3]
        rho = (1 - w) * self.radius * ts[..., 0:1]
        phi = 2 * math.pi * ts[..., 1:2]
        return (
            self.base
            + w * axis
            + rho * (torch.cos(phi) * u + torch.sin(phi) * v)
        )

    def _measure(self) -> Tensor:
        height = torch.linalg.vector_norm(self.apex - self.base)
        return math.pi * self.radius**2 * height / 3
