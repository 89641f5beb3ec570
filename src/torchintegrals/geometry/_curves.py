"""One-dimensional geometries."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, List, Tuple

import torch
from torch import Tensor

from torchintegrals._exceptions import DegreeOverflowError
from torchintegrals.quadrature import gauss_legendre_nodes_weights

from ._exceptions import DegenerateInputError, DomainError
from ._geometry import Geometry
from ._surfaces import Plane


def _expand_jacobian(vector: Tensor, ts: Tensor) -> Tensor:
    """Constant (dim,) derivative broadcast to shape (..., 1, dim)."""
    return vector.expand(ts.shape[:-1] + (1, vector.shape[-1]))


@dataclass(frozen=True, eq=False)
class Segment(Geometry):
    """Straight segment from ``a`` (t = 0) to ``b`` (t = 1)."""

    a: Tensor
    b: Tensor

    paramdim = 1
    analytical = True
    _tensor_fields = ("a", "b")

    def _parametrize(self, ts: Tensor) -> Tensor:
        return self.a + ts[..., 0:1] * (self.b - self.a)

    def _jacobian(self, ts: Tensor) -> Tensor:
        return _expand_jacobian(self.b - self.a, ts)

    def _measure(self) -> Tensor:
        return torch.linalg.vector_norm(self.b - self.a)


@dataclass(frozen=True, eq=False)
class Line(Geometry):
    """Infinite line through ``a`` (t = 0) and ``b`` (t = 1), t in R."""

    a: Tensor
    b: Tensor

    paramdim = 1
    analytical = True
    _tensor_fields = ("a", "b")

    def __post_init__(self):
        super().__post_init__()
        if torch.equal(self.a, self.b):
            raise DegenerateInputError("Line requires two distinct points")

    def _parametrize(self, ts: Tensor) -> Tensor:
        return self.a + ts[..., 0:1] * (self.b - self.a)

    def _jacobian(self, ts: Tensor) -> Tensor:
        return _expand_jacobian(self.b - self.a, ts)

    def _measure(self) -> Tensor:
        return torch.tensor(math.inf, dtype=self.dtype)


@dataclass(frozen=True, eq=False)
class Ray(Geometry):
    """Half-line ``origin + t * direction`` for t in [0, inf)."""

    origin: Tensor
    direction: Tensor

    paramdim = 1
    analytical = True
    _tensor_fields = ("origin", "direction")

    def __post_init__(self):
        super().__post_init__()
        if not torch.any(self.direction != 0):
            raise DegenerateInputError("Ray direction must be non-zero")

    def _parametrize(self, ts: Tensor) -> Tensor:
        return self.origin + ts[..., 0:1] * self.direction

    def _jacobian(self, ts: Tensor) -> Tensor:
        return _expand_jacobian(self.direction, ts)

    def _measure(self) -> Tensor:
        return torch.tensor(math.inf, dtype=self.dtype)


@dataclass(frozen=True, eq=False)
class Circle(Geometry):
    """Circle of ``radius`` centered at the origin of ``plane``."""

    plane: Plane
    radius: Tensor

    paramdim = 1
    _tensor_fields = ("radius",)

    def _parametrize(self, ts: Tensor) -> Tensor:
        u, v = self.plane.basis
        phi = 2 * math.pi * ts[..., 0:1]
        return self.plane.point + self.radius * (
            torch.cos(phi) * u + torch.sin(phi) * v
        )

    def _measure(self) -> Tensor:
        return 2 * math.pi * self.radius


# C(n, i) leaves float64 range past this many control points
_MAX_BEZIER_CONTROL_POINTS = 1028

# Horner's partial sums grow like 2^n times the control points
_MAX_HORNER_DEGREE = 1000


def _horner(points: Tensor, t: Tensor) -> Tensor:
    """Evaluate the Bezier curve with ``points`` at ``t`` by Horner's rule.

    For t > 1/2 the curve is evaluated in reverse so the power basis
    variable s = t / (1 - t) stays in [0, 1].
    """
    n = points.shape[0] - 1
    if n > _MAX_HORNER_DEGREE:
        raise DegreeOverflowError(
            f"Horner evaluation overflows for Bezier curves of degree above "
            f"{_MAX_HORNER_DEGREE}, got {n}; use alg='decasteljau' instead"
        )
    binomials = torch.tensor(
        [math.comb(n, i) for i in range(n + 1)],
        dtype=points.dtype,
        device=points.device,
    )
    coefficients = binomials[:, None] * points
    reversed_coefficients = coefficients.flip(0)

    flip = t > 0.5
    u = torch.where(flip, 1 - t, t)
    s = (u / (1 - u))[..., None]

    forward = coefficients[n].expand(t.shape + (points.shape[-1],))
    backward = reversed_coefficients[n].expand_as(forward)
    for i in range(n - 1, -1, -1):
        forward = forward * s + coefficients[i]
        backward = backward * s + reversed_coefficients[i]

    return torch.where(flip[..., None], backward, forward) * (
        (1 - u) ** n
    )[..., None]


def _de_casteljau(points: Tensor, t: Tensor) -> Tensor:
    """Evaluate the Bezier curve with ``points`` at ``t`` by repeated lerp."""
    t = t[..., None, None]
    q = points.expand(t.shape[:-2] + points.shape)
    while q.shape[-2] > 1:
        q = q[..., :-1, :] + t * (q[..., 1:, :] - q[..., :-1, :])
    return q[..., 0, :]


_BEZIER_ALGORITHMS = {
    "horner": _horner,
    "decasteljau": _de_casteljau,
}


@dataclass(frozen=True, eq=False)
class BezierCurve(Geometry):
    """Bezier curve through ``control_points`` of shape (n, dim).

    Examples
    --------
    >>> curve = BezierCurve([[0.0, 0.0], [1.0, 2.0], [2.0, 0.0]])
    >>> curve(0.5)
    tensor([1., 1.], dtype=torch.float64)
    """

    control_points: Tensor

    paramdim = 1
    analytical = True
    _tensor_fields = ("control_points",)

    def __post_init__(self):
        super().__post_init__()
        if self.control_points.dim() != 2 or self.control_points.shape[0] < 2:
            raise DegenerateInputError(
                "BezierCurve needs at least two control points of shape (n, dim)"
            )

    @property
    def degree(self) -> int:
        return self.control_points.shape[0] - 1

    def evaluate(self, ts: Tensor, alg: str = "horner") -> Tensor:
        """Evaluate at ``ts`` of shape (..., 1) with ``alg``.

        ``"horner"`` is fast; ``"decasteljau"`` is slower but numerically
        more stable for high degrees.
        """
        if alg not in _BEZIER_ALGORITHMS:
            raise ValueError(
                f"alg must be one of {sorted(_BEZIER_ALGORITHMS)}, got {alg!r}"
            )
        return _BEZIER_ALGORITHMS[alg](self.control_points, ts[..., 0])

    def _parametrize(self, ts: Tensor) -> Tensor:
        if self.degree > _MAX_HORNER_DEGREE:
            return self.evaluate(ts, "decasteljau")
        return self.evaluate(ts)

    def _jacobian(self, ts: Tensor) -> Tensor:
        """Derivative n * sum_i B_i^{n-1}(t) (P_{i+1} - P_i)."""
        t = ts[..., 0]
        outside = (t < 0) | (t > 1)
        if torch.any(outside):
            raise DomainError(
                f"b(t) is not defined for t outside [0, 1], got t="
                f"{t[outside].flatten()[0].item()}"
            )
        if self.control_points.shape[0] > _MAX_BEZIER_CONTROL_POINTS:
            raise DegreeOverflowError(
                f"The analytical derivative overflows for curves with more "
                f"than {_MAX_BEZIER_CONTROL_POINTS} control points, got "
                f"{self.control_points.shape[0]}; use "
                f"diff_method=FiniteDifference() with alg='decasteljau' instead"
            )
        differences = self.control_points[1:] - self.control_points[:-1]
        derivative = self.degree * _de_casteljau(differences, t)
        return derivative[..., None, :]

    def _measure(self) -> Tensor:
        nodes, weights = gauss_legendre_nodes_weights(64, dtype=self.dtype)
        ts = ((nodes + 1) / 2)[:, None]
        speed = torch.linalg.vector_norm(self._jacobian(ts)[:, 0], dim=-1)
        return (weights * speed).sum() / 2


@dataclass(frozen=True, eq=False)
class Rope(Geometry):
    """Open polygonal chain through ``vertices`` of shape (n, dim).

    Parametrized by normalized arc length.
    """

    vertices: Tensor

    paramdim = 1
    closed = False
    _tensor_fields = ("vertices",)

    def __post_init__(self):
        super().__post_init__()
        if self.vertices.dim() != 2 or self.vertices.shape[0] < 2:
            raise DegenerateInputError(
                f"{type(self).__name__} needs at least two vertices of shape (n, dim)"
            )

    def _endpoints(self) -> Tuple[Tensor, Tensor]:
        starts = self.vertices
        if self.closed:
            return starts, torch.roll(starts, -1, dims=0)
        return starts[:-1], starts[1:]

    def segments(self) -> List[Segment]:
        """The chain's segments, in order."""
        return [
            Segment(a, b, unit=self.unit) for a, b in zip(*self._endpoints())
        ]

    def _parametrize(self, ts: Tensor) -> Tensor:
        starts, ends = self._endpoints()
        lengths = torch.linalg.vector_norm(ends - starts, dim=-1)
        cumulative = torch.cat([lengths.new_zeros(1), lengths.cumsum(0)])
        s = ts[..., 0] * cumulative[-1]
        index = torch.searchsorted(
            cumulative[1:], s.contiguous(), right=True
        ).clamp(max=lengths.shape[0] - 1)
        local = ((s - cumulative[index]) / lengths[index])[..., None]
        return starts[index] + local * (ends[index] - starts[index])

    def representative_point(self) -> Tensor:
        return self.vertices[0]

    def _measure(self) -> Tensor:
        starts, ends = self._endpoints()
        return torch.linalg.vector_norm(ends - starts, dim=-1).sum()


@dataclass(frozen=True, eq=False)
class Ring(Rope):
    """Closed polygonal chain; the last vertex connects back to the first."""

    closed = True


@dataclass(frozen=True, eq=False)
class ParametrizedCurve(Geometry):
    """Curve given by a function of one real variable on ``interval``.

    Parameters
    ----------
    function : callable
        Maps a tensor of parameters of shape (...,) to points (..., dim).
    interval : tuple of float
        Domain ``(a, b)`` of ``function``; it is rescaled to [0, 1].
    """

    function: Callable[[Tensor], Tensor]
    interval: Tuple[float, float] = (0.0, 1.0)
    dtype: torch.dtype = torch.float64

    paramdim = 1

    def _parametrize(self, ts: Tensor) -> Tensor:
        a, b = self.interval
        return self.function(a + (b - a) * ts[..., 0])

    def to(self, dtype: torch.dtype) -> ParametrizedCurve:
        return type(self)(self.function, self.interval, dtype, unit=self.unit)
