"""Mesh tensorclass, polygon triangulation and element iteration."""

from __future__ import annotations

from typing import Any, ClassVar, Iterator, List, Optional

import pint
import torch
from tensordict import tensorclass
from torch import Tensor

from torchintegrals._units import with_unit

from ._curves import Segment
from ._exceptions import DegenerateInputError
from ._geometry import Geometry
from ._solids import Hexahedron, Tetrahedron
from ._surfaces import PolyArea, Quadrangle, Triangle, orthonormal_basis


@tensorclass
class Mesh:
    """Mesh of primitive elements sharing a vertex array.

    Attributes
    ----------
    vertices : Tensor
        Vertex coordinates, shape (num_vertices, dim).
    elements : Tensor
        Element connectivity, shape (num_elements, nodes_per_element).
        Each row contains vertex indices forming an element.
    element_type : str
        Element type: "line", "triangle", "quad", "tetrahedron", "hexahedron".

    Examples
    --------
    >>> mesh = Mesh(
    ...     vertices=torch.tensor([[0.0, 0.0], [1.0, 0.0], [0.0, 1.0]]),
    ...     elements=torch.tensor([[0, 1, 2]]),
    ...     element_type="triangle",
    ...     batch_size=[],
    ... )
    >>> mesh.paramdim
    2
    """

    _NODES_PER_ELEMENT: ClassVar[dict] = {
        "line": 2,
        "triangle": 3,
        "quad": 4,
        "tetrahedron": 4,
        "hexahedron": 8,
    }

    _ELEMENT_DIM: ClassVar[dict] = {
        "line": 1,
        "triangle": 2,
        "quad": 2,
        "tetrahedron": 3,
        "hexahedron": 3,
    }

    vertices: Tensor
    elements: Tensor
    element_type: str

    @property
    def dim(self) -> int:
        """Spatial dimension of the mesh."""
        return self.vertices.shape[-1]

    @property
    def paramdim(self) -> int:
        """Parametric dimension of the elements."""
        return self._ELEMENT_DIM[self.element_type]

    @property
    def num_vertices(self) -> int:
        return self.vertices.shape[-2]

    @property
    def num_elements(self) -> int:
        return self.elements.shape[-2]

    def measure(self, unit: Optional[pint.Unit] = None) -> Any:
        """Total length, area or volume, in ``unit ** paramdim`` if given."""
        total = sum(element._measure() for element in elements(self))
        return with_unit(total, None if unit is None else unit**self.paramdim)


_ELEMENT_GEOMETRIES = {
    "line": Segment,
    "triangle": Triangle,
    "quad": Quadrangle,
    "tetrahedron": Tetrahedron,
}


def elements(
    mesh: Mesh, unit: Optional[pint.Unit] = None
) -> Iterator[Geometry]:
    """Iterate over the elements of ``mesh`` as geometries.

    Parameters
    ----------
    mesh : Mesh
        Mesh to iterate over.
    unit : pint.Unit, optional
        Length unit attached to each element.
    """
    if mesh.element_type not in Mesh._NODES_PER_ELEMENT:
        raise ValueError(f"unknown element type {mesh.element_type!r}")

    expected = Mesh._NODES_PER_ELEMENT[mesh.element_type]
    if mesh.elements.shape[-1] != expected:
        raise DegenerateInputError(
            f"{mesh.element_type} elements need {expected} vertices, got "
            f"{mesh.elements.shape[-1]}"
        )

    for connectivity in mesh.elements:
        corners = mesh.vertices[connectivity]
        if mesh.element_type == "hexahedron":
            yield Hexahedron(corners, unit=unit)
        else:
            yield _ELEMENT_GEOMETRIES[mesh.element_type](*corners, unit=unit)


def discretize(polygon: PolyArea) -> Mesh:
    """Triangulate a simple polygon by ear clipping.

    Collinear vertices are dropped first since they do not change the
    area. Polygons in 3-D are triangulated in their own plane.

    Raises
    ------
    DegenerateInputError
        If fewer than three non-collinear vertices remain or no ear can
        be found (self-intersecting input).
    """
    vertices = polygon.vertices
    planar = _project(vertices)

    def cross(o: int, p: int, q: int) -> float:
        a = planar[p] - planar[o]
        b = planar[q] - planar[p]
        return (a[0] * b[1] - a[1] * b[0]).item()

    tolerance = 1e-12 * float(torch.max(torch.abs(planar))) ** 2

    indices = list(range(vertices.shape[0]))
    indices = [
        i
        for k, i in enumerate(indices)
        if abs(cross(indices[k - 1], i, indices[(k + 1) % len(indices)]))
        > tolerance
    ]
    if len(indices) < 3:
        raise DegenerateInputError(
            "PolyArea has fewer than three non-collinear vertices"
        )

    # Counter-clockwise orientation makes convex corners positive
    if _signed_area(planar[indices]) < 0:
        indices.reverse()

    triangles: List[List[int]] = []
    while len(indices) > 3:
        for k in range(len(indices)):
            prev, curr, nxt = (
                indices[k - 1],
                indices[k],
                indices[(k + 1) % len(indices)],
            )
            if cross(prev, curr, nxt) <= tolerance:
                continue
            if any(
                _in_triangle(planar[j], planar[prev], planar[curr], planar[nxt])
                for j in indices
                if j not in (prev, curr, nxt)
            ):
                continue
            triangles.append([prev, curr, nxt])
            del indices[k]
            break
        else:
            raise DegenerateInputError(
                "PolyArea could not be triangulated; is it self-intersecting?"
            )
    triangles.append(indices)

    return Mesh(
        vertices=vertices,
        elements=torch.tensor(triangles, dtype=torch.long),
        element_type="triangle",
        batch_size=[],
    )


def _project(vertices: Tensor) -> Tensor:
    """Coordinates of planar polygon vertices within their plane."""
    if vertices.shape[-1] == 2:
        return vertices
    shifted = torch.roll(vertices, -1, dims=0)
    normal = torch.linalg.cross(vertices, shifted).sum(dim=0)
    if not torch.any(normal != 0):
        raise DegenerateInputError("PolyArea vertices are collinear")
    u, v = orthonormal_basis(normal)
    relative = vertices - vertices[0]
    return torch.stack([relative @ u, relative @ v], dim=-1)


def _signed_area(planar: Tensor) -> float:
    shifted = torch.roll(planar, -1, dims=0)
    return (
        (planar[:, 0] * shifted[:, 1] - planar[:, 1] * shifted[:, 0]).sum() / 2
    ).item()


def _in_triangle(p: Tensor, a: Tensor, b: Tensor, c: Tensor) -> bool:
    """Whether ``p`` lies inside or on the counter-clockwise triangle abc."""

    def side(o: Tensor, q: Tensor) -> Tensor:
        return (q[0] - o[0]) * (p[1] - o[1]) - (q[1] - o[1]) * (p[0] - o[0])

    return bool(side(a, b) >= 0 and side(b, c) >= 0 and side(c, a) >= 0)
