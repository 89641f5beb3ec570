"""Exceptions raised by the numerical integration primitives."""


class QuadratureWarning(UserWarning):
    """Warning for quadrature issues (unmet tolerance, deprecated nesting)."""

    pass


class IntegrationError(Exception):
    """Adaptive quadrature or cubature failed to reach its tolerance."""

    pass
