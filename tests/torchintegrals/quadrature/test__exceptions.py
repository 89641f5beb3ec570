import warnings

import pytest

from torchintegrals.quadrature import (
    IntegrationError,
    QuadratureWarning,
)


class TestExceptions:
    def test_quadrature_warning_is_user_warning(self):
        assert issubclass(QuadratureWarning, UserWarning)

    def test_integration_error_is_exception(self):
        assert issubclass(IntegrationError, Exception)

    def test_quadrature_warning_can_be_filtered(self):
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("ignore", QuadratureWarning)
            warnings.warn("nested", QuadratureWarning)

        assert caught == []

    def test_integration_error_is_exported_at_top_level(self):
        import torchintegrals

        assert torchintegrals.IntegrationError is IntegrationError
        with pytest.raises(torchintegrals.IntegrationError):
            raise IntegrationError("did not converge")
