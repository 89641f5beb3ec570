"""Registry of geometry-specific integration routines.

Integration is dispatched on the pair (geometry type, rule type). Pairs
without an entry use the generic routine for the rule, which integrates the
parametrization over [0, 1]^N. Lookups walk the method resolution order of
both types, so an entry for a base class also covers its subclasses.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple

from torch import Tensor

from torchintegrals._differentiation import (
    DifferentiationMethod,
    check_diff_method,
    default_diff_method,
)
from torchintegrals._exceptions import UnsupportedCombinationError
from torchintegrals._generic import GENERIC_ROUTINES
from torchintegrals._rules import GaussKronrod, IntegrationRule
from torchintegrals._units import UnitlessIntegrand


@dataclass(frozen=True)
class Specialization:
    """Registry entry.

    Attributes
    ----------
    function : callable or None
        ``function(integrand, geometry, rule, diff_method, **options)``
        returning the unitless integral. None marks an unsupported pair.
    requires : tuple of type
        Differentiation methods the routine accepts; empty accepts all.
    """

    function: Optional[Callable[..., Tensor]]
    requires: Tuple[type, ...] = ()


_REGISTRY: Dict[Tuple[type, type], Specialization] = {}


def register(geometry_type: type, *rule_types: type, requires=()):
    """Decorator registering a routine for ``geometry_type`` and each rule."""
    if isinstance(requires, type):
        requires = (requires,)

    def decorator(function):
        for rule_type in rule_types:
            _REGISTRY[(geometry_type, rule_type)] = Specialization(
                function, tuple(requires)
            )
        return function

    return decorator


def register_unsupported(geometry_type: type, *rule_types: type) -> None:
    for rule_type in rule_types:
        _REGISTRY[(geometry_type, rule_type)] = Specialization(None)


def lookup(geometry, rule: IntegrationRule) -> Optional[Specialization]:
    for geometry_type in type(geometry).__mro__:
        for rule_type in type(rule).__mro__:
            entry = _REGISTRY.get((geometry_type, rule_type))
            if entry is not None:
                return entry
    return None


def unsupported_combination(geometry, rule: IntegrationRule):
    raise UnsupportedCombinationError(
        f"Integrating a {type(geometry).__name__} using a "
        f"{type(rule).__name__} rule not supported."
    )


def validate(
    geometry,
    rule: IntegrationRule,
    diff_method: Optional[DifferentiationMethod],
) -> Optional[Specialization]:
    """Check the combination before any numerical work; return its entry."""
    if not isinstance(rule, IntegrationRule):
        raise TypeError(
            f"rule must be GaussKronrod, GaussLegendre or HAdaptiveCubature, "
            f"got {type(rule).__name__}"
        )

    entry = lookup(geometry, rule)

    if entry is None:
        if isinstance(rule, GaussKronrod) and geometry.paramdim >= 3:
            unsupported_combination(geometry, rule)
        check_diff_method(
            geometry, diff_method or default_diff_method(geometry)
        )
        return None

    if entry.function is None:
        unsupported_combination(geometry, rule)

    if diff_method is not None:
        if not isinstance(diff_method, DifferentiationMethod):
            raise TypeError(
                f"diff_method must be FiniteDifference, Analytical or "
                f"AutoDiff, got {type(diff_method).__name__}"
            )
        if entry.requires and not isinstance(diff_method, entry.requires):
            raise UnsupportedCombinationError(
                f"Integrating a {type(geometry).__name__} using "
                f"{diff_method!r} not supported; requires "
                f"diff_method={entry.requires[0].__name__}()."
            )

    return entry


def integrate_unitless(
    integrand: UnitlessIntegrand,
    geometry,
    rule: IntegrationRule,
    diff_method: Optional[DifferentiationMethod] = None,
    **options,
) -> Tensor:
    """Integrate ``integrand`` over ``geometry``, returning a bare tensor."""
    entry = validate(geometry, rule, diff_method)

    if entry is not None:
        return entry.function(integrand, geometry, rule, diff_method, **options)

    if options:
        raise TypeError(
            f"Integrating a {type(geometry).__name__} takes no options, got "
            f"{sorted(options)}"
        )

    diff_method = diff_method or default_diff_method(geometry)
    return GENERIC_ROUTINES[_rule_kind(rule)](
        integrand, geometry, rule, diff_method
    )


def _rule_kind(rule: IntegrationRule) -> type:
    for rule_type in type(rule).__mro__:
        if rule_type in GENERIC_ROUTINES:
            return rule_type
    raise TypeError(f"no generic routine for {type(rule).__name__}")
