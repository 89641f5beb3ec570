"""Bezier curves with a choice of evaluation algorithm."""

from torchintegrals._dispatch import integrate_unitless, register
from torchintegrals._rules import GaussKronrod, GaussLegendre, HAdaptiveCubature
from torchintegrals.geometry import BezierCurve, ParametricGeometry


@register(BezierCurve, GaussKronrod, GaussLegendre, HAdaptiveCubature)
def _bezier_curve(integrand, curve, rule, diff_method, alg="horner"):
    """Integrate with the curve evaluated by ``alg``.

    ``alg`` is ``"horner"`` (fast) or ``"decasteljau"`` (stable).
    """
    wrapped = ParametricGeometry(
        lambda ts: curve.evaluate(ts, alg),
        1,
        curve._jacobian,
        dtype=curve.dtype,
    )
    return integrate_unitless(integrand, wrapped, rule, diff_method)
