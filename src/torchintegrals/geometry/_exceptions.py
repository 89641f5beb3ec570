"""Geometry module exceptions."""


class GeometryError(Exception):
    """Base exception for geometry operations."""

    pass


class DegenerateInputError(GeometryError):
    """Input is degenerate (e.g., zero-length direction, collinear polygon)."""

    pass


class DomainError(GeometryError, ValueError):
    """A parametric coordinate lies outside the geometry's domain."""

    pass
