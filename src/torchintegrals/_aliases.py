"""Dimension-checked shorthands for ``integral``."""

from typing import Optional

from torchintegrals._exceptions import DimensionMismatchError
from torchintegrals._integral import integral
from torchintegrals._rules import IntegrationRule, default_rule


def _checked_integral(kind: str, paramdim: int, f, geometry, rule, kwargs):
    if geometry.paramdim != paramdim:
        raise DimensionMismatchError(
            f"Performing a {kind} integral on a geometry with "
            f"{geometry.paramdim} parametric dimensions not supported."
        )
    if rule is None:
        rule = default_rule(paramdim)
    return integral(f, geometry, rule, **kwargs)


def lineintegral(f, geometry, rule: Optional[IntegrationRule] = None, **kwargs):
    """``integral`` over a curve; raises unless ``geometry.paramdim == 1``."""
    return _checked_integral("line", 1, f, geometry, rule, kwargs)


def surfaceintegral(
    f, geometry, rule: Optional[IntegrationRule] = None, **kwargs
):
    """``integral`` over a surface; raises unless ``geometry.paramdim == 2``."""
    return _checked_integral("surface", 2, f, geometry, rule, kwargs)


def volumeintegral(
    f, geometry, rule: Optional[IntegrationRule] = None, **kwargs
):
    """``integral`` over a volume; raises unless ``geometry.paramdim == 3``."""
    return _checked_integral("volume", 3, f, geometry, rule, kwargs)
