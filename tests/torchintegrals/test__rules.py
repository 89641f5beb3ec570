import pytest
import torch


class TestIntegrationRule:
    def test_repr_lists_options(self):
        from torchintegrals import GaussKronrod, HAdaptiveCubature

        assert repr(GaussKronrod()) == "GaussKronrod()"
        assert (
            repr(GaussKronrod(epsrel=1e-10, limit=200))
            == "GaussKronrod(epsrel=1e-10, limit=200)"
        )
        assert repr(HAdaptiveCubature(rule="gk15")) == "HAdaptiveCubature(rule='gk15')"

    def test_unknown_option_raises(self):
        from torchintegrals import GaussKronrod

        with pytest.raises(TypeError, match="unexpected options"):
            GaussKronrod(rtol=1e-3)

    def test_kwargs_is_a_copy(self):
        from torchintegrals import HAdaptiveCubature

        rule = HAdaptiveCubature(atol=1e-6)
        rule.kwargs["atol"] = 1.0

        assert rule.kwargs == {"atol": 1e-6}


class TestGaussKronrod:
    def test_default_tolerances_follow_dtype(self):
        from torchintegrals import GaussKronrod

        options = GaussKronrod().options(torch.float32)

        assert options["epsabs"] == pytest.approx(torch.finfo(torch.float32).eps ** 0.5)
        assert options["epsrel"] == options["epsabs"]

    def test_explicit_options_override_defaults(self):
        from torchintegrals import GaussKronrod

        options = GaussKronrod(epsrel=1e-12, order=15).options(torch.float64)

        assert options["epsrel"] == 1e-12
        assert options["order"] == 15


class TestHAdaptiveCubature:
    def test_default_rtol(self):
        from torchintegrals import HAdaptiveCubature

        options = HAdaptiveCubature().options(torch.float64)

        assert options == {"rtol": torch.finfo(torch.float64).eps ** 0.5}


class TestGaussLegendre:
    def test_nodes_and_weights(self):
        from torchintegrals import GaussLegendre

        rule = GaussLegendre(5)

        assert rule.nodes.shape == (5,)
        assert rule.nodes.dtype == torch.float64
        assert rule.weights.sum().item() == pytest.approx(2.0)

    def test_cast_is_cached(self):
        from torchintegrals import GaussLegendre

        rule = GaussLegendre(4)
        nodes, weights = rule.nodes_and_weights(torch.float32)

        assert nodes.dtype == torch.float32
        assert rule.nodes_and_weights(torch.float32)[0] is nodes

    def test_repr(self):
        from torchintegrals import GaussLegendre

        assert repr(GaussLegendre(100)) == "GaussLegendre(100)"

    def test_invalid_order_raises(self):
        from torchintegrals import GaussLegendre

        with pytest.raises(ValueError, match="at least 1"):
            GaussLegendre(0)


class TestDefaultRule:
    def test_curves_use_gauss_kronrod(self):
        from torchintegrals import GaussKronrod, default_rule

        assert isinstance(default_rule(1), GaussKronrod)

    def test_higher_dimensions_use_cubature(self):
        from torchintegrals import HAdaptiveCubature, default_rule

        assert isinstance(default_rule(2), HAdaptiveCubature)
        assert isinstance(default_rule(3), HAdaptiveCubature)

    def test_invalid_dimension_raises(self):
        from torchintegrals import default_rule

        with pytest.raises(ValueError):
            default_rule(0)
