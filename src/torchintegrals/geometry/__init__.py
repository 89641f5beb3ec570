"""Parametrized geometries that integrals are taken over."""

from ._curves import (
    BezierCurve,
    Circle,
    Line,
    ParametrizedCurve,
    Ray,
    Ring,
    Rope,
    Segment,
)
from ._exceptions import DegenerateInputError, DomainError, GeometryError
from ._geometry import (
    Geometry,
    ParametricGeometry,
    is_curve,
    is_solid,
    is_surface,
)
from ._mesh import Mesh, discretize, elements
from ._solids import Ball, Box, Cone, Cylinder, Hexahedron, Tetrahedron
from ._surfaces import (
    ConeSurface,
    CylinderSurface,
    Disk,
    FrustumSurface,
    Plane,
    PolyArea,
    Quadrangle,
    Sphere,
    Torus,
    Triangle,
)

__all__ = [
    "Ball",
    "BezierCurve",
    "Box",
    "Circle",
    "Cone",
    "ConeSurface",
    "Cylinder",
    "CylinderSurface",
    "DegenerateInputError",
    "Disk",
    "DomainError",
    "FrustumSurface",
    "Geometry",
    "GeometryError",
    "Hexahedron",
    "Line",
    "Mesh",
    "ParametricGeometry",
    "ParametrizedCurve",
    "Plane",
    "PolyArea",
    "Quadrangle",
    "Ray",
    "Ring",
    "Rope",
    "Segment",
    "Sphere",
    "Tetrahedron",
    "Torus",
    "Triangle",
    "discretize",
    "elements",
    "is_curve",
    "is_solid",
    "is_surface",
]
