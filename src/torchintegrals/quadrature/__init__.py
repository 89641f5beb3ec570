"""
Numerical integration primitives.

Function-based integration (evaluates a vectorized callable):
    quad, quad_info, hcubature, hcubature_info

Node/weight computation for Gaussian quadrature:
    gauss_legendre_nodes_weights, gauss_kronrod_nodes_weights

Exceptions:
    QuadratureWarning, IntegrationError
"""

from torchintegrals.quadrature._cubature import hcubature, hcubature_info
from torchintegrals.quadrature._exceptions import (
    IntegrationError,
    QuadratureWarning,
)
from torchintegrals.quadrature._nodes import (
    gauss_kronrod_nodes_weights,
    gauss_legendre_nodes_weights,
)
from torchintegrals.quadrature._quad import quad, quad_info

__all__ = [
    # Function-based
    "quad",
    "quad_info",
    "hcubature",
    "hcubature_info",
    # Nodes and weights
    "gauss_legendre_nodes_weights",
    "gauss_kronrod_nodes_weights",
    # Exceptions
    "QuadratureWarning",
    "IntegrationError",
]
