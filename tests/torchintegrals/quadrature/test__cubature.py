import math

import pytest
import torch


class TestHCubature:
    def test_product(self):
        from torchintegrals.quadrature import hcubature

        result = hcubature(lambda x: x.prod(dim=-1), [0.0, 0.0], [1.0, 1.0])

        assert abs(result.item() - 0.25) < 1e-10

    def test_gaussian_3d(self):
        from torchintegrals.quadrature import hcubature

        result = hcubature(
            lambda x: torch.exp(-(x**2).sum(dim=-1)),
            [-1.0, -1.0, -1.0],
            [1.0, 1.0, 1.0],
            rtol=1e-8,
        )
        expected = (math.sqrt(math.pi) * math.erf(1.0)) ** 3

        assert abs(result.item() - expected) < 1e-7

    def test_one_dimensional_defaults_to_gk21(self):
        from torchintegrals.quadrature import hcubature

        result = hcubature(lambda x: torch.sin(x[:, 0]), [0.0], [math.pi])

        assert abs(result.item() - 2.0) < 1e-9

    def test_vector_valued(self):
        from torchintegrals.quadrature import hcubature

        result = hcubature(
            lambda x: torch.stack([x[:, 0], x[:, 1] ** 2], dim=-1),
            torch.zeros(2, dtype=torch.float64),
            torch.ones(2, dtype=torch.float64),
        )

        torch.testing.assert_close(
            result, torch.tensor([0.5, 1 / 3], dtype=torch.float64)
        )

    def test_receives_tensors_of_dtype(self):
        from torchintegrals.quadrature import hcubature

        seen = []

        def f(x):
            seen.append((type(x), x.dtype, x.shape[-1]))
            return torch.ones(x.shape[0], dtype=x.dtype)

        result = hcubature(f, [0.0, 0.0], [2.0, 3.0], dtype=torch.float32)

        assert result.dtype == torch.float32
        assert abs(result.item() - 6.0) < 1e-5
        assert all(entry == (torch.Tensor, torch.float32, 2) for entry in seen)

    def test_mismatched_bounds_raise(self):
        from torchintegrals.quadrature import hcubature

        with pytest.raises(ValueError, match="equal length"):
            hcubature(lambda x: x[:, 0], [0.0, 0.0], [1.0])

    def test_convergence_failure_raises(self):
        from torchintegrals.quadrature import IntegrationError, hcubature

        with pytest.raises(IntegrationError, match="failed to converge"):
            hcubature(
                lambda x: torch.sin(200 * x.sum(dim=-1)) ** 2,
                [0.0, 0.0],
                [1.0, 1.0],
                rtol=1e-14,
                max_subdivisions=2,
            )


class TestHCubatureInfo:
    def test_info(self):
        from torchintegrals.quadrature import hcubature_info

        result, error, info = hcubature_info(
            lambda x: torch.cos(x).prod(dim=-1), [0.0, 0.0], [1.0, 1.0]
        )

        assert abs(result.item() - math.sin(1.0) ** 2) < 1e-9
        assert error.item() < 1e-7
        assert info["converged"]
        assert info["regions"] >= 1
