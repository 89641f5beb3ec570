import pytest


class TestExceptionHierarchy:
    def test_engine_errors_share_a_base(self):
        from torchintegrals import (
            DegreeOverflowError,
            DimensionMismatchError,
            IntegralError,
            IntegrandError,
            UnsupportedCombinationError,
        )

        for error in (
            DegreeOverflowError,
            DimensionMismatchError,
            IntegrandError,
            UnsupportedCombinationError,
        ):
            assert issubclass(error, IntegralError)

    def test_builtin_bases(self):
        from torchintegrals import (
            DegreeOverflowError,
            DimensionMismatchError,
            DomainError,
            IntegrandError,
            UnsupportedCombinationError,
        )

        assert issubclass(UnsupportedCombinationError, ValueError)
        assert issubclass(DimensionMismatchError, ValueError)
        assert issubclass(IntegrandError, TypeError)
        assert issubclass(DegreeOverflowError, OverflowError)
        assert issubclass(DomainError, ValueError)

    def test_geometry_errors(self):
        from torchintegrals.geometry import (
            DegenerateInputError,
            DomainError,
            GeometryError,
        )

        assert issubclass(DegenerateInputError, GeometryError)
        assert issubclass(DomainError, GeometryError)

    def test_catch_as_value_error(self):
        from torchintegrals import GaussKronrod, integral
        from torchintegrals.geometry import Ball

        with pytest.raises(ValueError):
            integral(lambda p: 1.0, Ball([0.0, 0.0, 0.0], 1.0), GaussKronrod())
