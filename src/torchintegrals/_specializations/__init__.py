"""Geometry-specific integration routines.

Importing this package registers every routine with the dispatcher.
"""

from . import _bezier, _composite, _polygons, _simplices, _unbounded  # noqa: F401
