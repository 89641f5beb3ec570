"""
Integrals of functions over parametric geometries.

Entry points:
    integral, lineintegral, surfaceintegral, volumeintegral

Differential geometry:
    jacobian, differential

Integration rules:
    GaussKronrod, GaussLegendre, HAdaptiveCubature, default_rule

Differentiation methods:
    FiniteDifference, Analytical, AutoDiff, default_diff_method,
    has_analytical

Units:
    ureg

Subpackages:
    geometry, quadrature
"""

from torchintegrals import geometry, quadrature
from torchintegrals._aliases import lineintegral, surfaceintegral, volumeintegral
from torchintegrals._differentiation import (
    Analytical,
    AutoDiff,
    DifferentiationMethod,
    FiniteDifference,
    default_diff_method,
    differential,
    has_analytical,
    jacobian,
)
from torchintegrals._exceptions import (
    DegreeOverflowError,
    DimensionMismatchError,
    IntegralError,
    IntegrandError,
    UnsupportedCombinationError,
)
from torchintegrals._integral import integral
from torchintegrals._rules import (
    GaussKronrod,
    GaussLegendre,
    HAdaptiveCubature,
    IntegrationRule,
    default_rule,
)
from torchintegrals._units import ureg
from torchintegrals.geometry import DomainError
from torchintegrals.quadrature import IntegrationError, QuadratureWarning

__all__ = [
    # Entry points
    "integral",
    "lineintegral",
    "surfaceintegral",
    "volumeintegral",
    # Differential geometry
    "jacobian",
    "differential",
    # Rules
    "IntegrationRule",
    "GaussKronrod",
    "GaussLegendre",
    "HAdaptiveCubature",
    "default_rule",
    # Differentiation methods
    "DifferentiationMethod",
    "FiniteDifference",
    "Analytical",
    "AutoDiff",
    "default_diff_method",
    "has_analytical",
    # Units
    "ureg",
    # Exceptions
    "IntegralError",
    "UnsupportedCombinationError",
    "DimensionMismatchError",
    "IntegrandError",
    "DegreeOverflowError",
    "DomainError",
    "IntegrationError",
    "QuadratureWarning",
    # Subpackages
    "geometry",
    "quadrature",
]
