import pytest
import torch


class TestCombineUnits:
    def test_no_units(self):
        from torchintegrals._units import combine_units

        assert combine_units(None, None, 2) is None

    def test_integrand_unit_only(self):
        from torchintegrals import ureg
        from torchintegrals._units import combine_units

        assert combine_units(ureg.ampere, None, 3) == ureg.ampere

    def test_length_unit_raised_to_paramdim(self):
        from torchintegrals import ureg
        from torchintegrals._units import combine_units

        assert combine_units(None, ureg.meter, 3) == ureg.meter**3
        assert combine_units(ureg.ampere, ureg.meter, 2) == ureg.ampere * ureg.meter**2


class TestWithUnit:
    def test_none_returns_value(self):
        from torchintegrals._units import with_unit

        value = torch.tensor(2.0)

        assert with_unit(value, None) is value

    def test_quantity(self):
        from torchintegrals import ureg
        from torchintegrals._units import with_unit

        quantity = with_unit(torch.tensor(2.0), ureg.second)

        assert quantity.units == ureg.second
        assert quantity.magnitude.item() == 2.0


class TestUnitlessIntegrand:
    def test_scalar(self):
        from torchintegrals._units import UnitlessIntegrand

        integrand = UnitlessIntegrand(
            lambda p: p[0] + p[1], torch.zeros(2, dtype=torch.float64), torch.float64
        )
        values = integrand(torch.tensor([[1.0, 2.0], [3.0, 4.0]], dtype=torch.float64))

        assert integrand.unit is None
        assert integrand.shape == ()
        torch.testing.assert_close(
            values, torch.tensor([3.0, 7.0], dtype=torch.float64)
        )

    def test_vector_values(self):
        from torchintegrals._units import UnitlessIntegrand

        integrand = UnitlessIntegrand(
            lambda p: [1.0, 2.0, 3.0], torch.zeros(3), torch.float32
        )
        values = integrand(torch.zeros(5, 3))

        assert integrand.shape == (3,)
        assert values.shape == (5, 3)
        assert values.dtype == torch.float32

    def test_quantities_are_converted_to_the_probed_unit(self):
        from torchintegrals import ureg
        from torchintegrals._units import UnitlessIntegrand

        def f(p):
            if p[0] < 0.5:
                return 2.0 * ureg.ampere
            return 3000.0 * ureg.milliampere

        integrand = UnitlessIntegrand(f, torch.zeros(1), torch.float64)
        values = integrand(torch.tensor([[0.0], [1.0]]))

        assert integrand.unit == ureg.ampere
        torch.testing.assert_close(
            values, torch.tensor([2.0, 3.0], dtype=torch.float64)
        )

    def test_empty_batch(self):
        from torchintegrals._units import UnitlessIntegrand

        integrand = UnitlessIntegrand(lambda p: [1.0, 2.0], torch.zeros(2), torch.float64)

        assert integrand(torch.zeros(0, 2)).shape == (0, 2)

    def test_not_callable_raises(self):
        from torchintegrals import IntegrandError
        from torchintegrals._units import UnitlessIntegrand

        with pytest.raises(IntegrandError, match="must be callable"):
            UnitlessIntegrand(1.0, torch.zeros(2), torch.float64)

    def test_wrong_arity_raises(self):
        from torchintegrals import IntegrandError
        from torchintegrals._units import UnitlessIntegrand

        with pytest.raises(IntegrandError, match=r"point of shape \(3,\)"):
            UnitlessIntegrand(lambda x, y: x + y, torch.zeros(3), torch.float64)

    def test_non_numeric_raises(self):
        from torchintegrals import IntegrandError
        from torchintegrals._units import UnitlessIntegrand

        with pytest.raises(IntegrandError, match="non-numeric"):
            UnitlessIntegrand(lambda p: "one", torch.zeros(2), torch.float64)

    def test_integrand_error_is_a_type_error(self):
        from torchintegrals._units import UnitlessIntegrand

        with pytest.raises(TypeError):
            UnitlessIntegrand(None, torch.zeros(2), torch.float64)

    def test_units_appearing_later_raise(self):
        from torchintegrals import IntegrandError, ureg
        from torchintegrals._units import UnitlessIntegrand

        def f(p):
            return 1.0 if p[0] < 0.5 else 1.0 * ureg.meter

        integrand = UnitlessIntegrand(f, torch.zeros(1), torch.float64)

        with pytest.raises(IntegrandError, match="previously returned a plain number"):
            integrand(torch.tensor([[1.0]]))

    def test_units_disappearing_later_raise(self):
        from torchintegrals import IntegrandError, ureg
        from torchintegrals._units import UnitlessIntegrand

        def f(p):
            return 1.0 * ureg.meter if p[0] < 0.5 else 1.0

        integrand = UnitlessIntegrand(f, torch.zeros(1), torch.float64)

        with pytest.raises(IntegrandError, match="previously returned a quantity"):
            integrand(torch.tensor([[1.0]]))

    def test_incompatible_units_raise(self):
        import pint

        from torchintegrals import ureg
        from torchintegrals._units import UnitlessIntegrand

        def f(p):
            return 1.0 * ureg.meter if p[0] < 0.5 else 1.0 * ureg.second

        integrand = UnitlessIntegrand(f, torch.zeros(1), torch.float64)

        with pytest.raises(pint.DimensionalityError):
            integrand(torch.tensor([[1.0]]))
