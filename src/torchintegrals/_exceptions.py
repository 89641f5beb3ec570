"""Exceptions raised by the integration engine."""


class IntegralError(Exception):
    """Base exception for integral evaluation."""

    pass


class UnsupportedCombinationError(IntegralError, ValueError):
    """A geometry cannot be integrated with the requested rule or method."""

    pass


class DimensionMismatchError(IntegralError, ValueError):
    """Parametric coordinates or geometry dimension do not match."""

    pass


class IntegrandError(IntegralError, TypeError):
    """The integrand cannot be evaluated on points of the geometry."""

    pass


class DegreeOverflowError(IntegralError, OverflowError):
    """A closed-form derivative would overflow for the curve's degree."""

    pass
