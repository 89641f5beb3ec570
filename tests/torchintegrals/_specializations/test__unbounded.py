import math

import pytest
import torch


def _rule(name):
    from torchintegrals import GaussKronrod, GaussLegendre, HAdaptiveCubature

    return {
        "gauss_kronrod": GaussKronrod,
        "gauss_legendre": lambda: GaussLegendre(100),
        "hadaptive_cubature": HAdaptiveCubature,
    }[name]()


RULES = ["gauss_kronrod", "gauss_legendre", "hadaptive_cubature"]


def gaussian(p):
    return torch.exp(-torch.sum(p**2))


class TestLine:
    @pytest.mark.parametrize("rule", RULES)
    def test_gaussian(self, rule):
        from torchintegrals import integral
        from torchintegrals.geometry import Line

        line = Line([0.0, 0.0, 0.0], [2.0, 0.0, 0.0])

        result = integral(gaussian, line, _rule(rule))

        assert result.item() == pytest.approx(math.sqrt(math.pi), rel=1e-6)

    def test_vector_integrand(self):
        from torchintegrals import integral
        from torchintegrals.geometry import Line

        line = Line([0.0, 0.0], [0.0, 1.0])

        result = integral(lambda p: torch.stack([gaussian(p), 2 * gaussian(p)]), line)

        torch.testing.assert_close(
            result,
            torch.tensor([1.0, 2.0], dtype=torch.float64) * math.sqrt(math.pi),
        )

    def test_finite_difference_raises(self):
        from torchintegrals import (
            FiniteDifference,
            UnsupportedCombinationError,
            integral,
        )
        from torchintegrals.geometry import Line

        with pytest.raises(UnsupportedCombinationError, match="Analytical"):
            integral(
                gaussian,
                Line([0.0], [1.0]),
                diff_method=FiniteDifference(),
            )


class TestRay:
    @pytest.mark.parametrize("rule", RULES)
    def test_gaussian(self, rule):
        from torchintegrals import integral
        from torchintegrals.geometry import Ray

        ray = Ray([0.0, 0.0, 0.0], [0.0, 0.0, 3.0])

        result = integral(gaussian, ray, _rule(rule))

        assert result.item() == pytest.approx(math.sqrt(math.pi) / 2, rel=1e-6)

    def test_offset_origin(self):
        from torchintegrals import integral
        from torchintegrals.geometry import Ray

        # int_1^inf exp(-x^2) dx = sqrt(pi) / 2 erfc(1)
        ray = Ray([1.0, 0.0], [1.0, 0.0])

        result = integral(gaussian, ray)

        expected = math.sqrt(math.pi) / 2 * math.erfc(1.0)
        assert result.item() == pytest.approx(expected, rel=1e-6)


class TestPlane:
    @pytest.mark.parametrize("rule", RULES)
    def test_gaussian(self, rule):
        from torchintegrals import integral
        from torchintegrals.geometry import Plane

        plane = Plane([0.0, 0.0, 0.0], [1.0, 1.0, 1.0])

        result = integral(gaussian, plane, _rule(rule))

        assert result.item() == pytest.approx(math.pi, rel=1e-6)
