import math

import pytest
import torch


class TestSegment:
    def test_endpoints(self):
        from torchintegrals.geometry import Segment

        segment = Segment([0.0, 1.0, 2.0], [3.0, 5.0, 2.0])

        torch.testing.assert_close(
            segment(0.0), torch.tensor([0.0, 1.0, 2.0], dtype=torch.float64)
        )
        torch.testing.assert_close(
            segment(1.0), torch.tensor([3.0, 5.0, 2.0], dtype=torch.float64)
        )

    def test_measure(self):
        from torchintegrals.geometry import Segment

        assert Segment([0, 0], [3, 4]).measure().item() == pytest.approx(5.0)

    def test_integer_coordinates_become_float64(self):
        from torchintegrals.geometry import Segment

        segment = Segment([0, 0], [1, 1])

        assert segment.a.dtype == torch.float64
        assert segment.dtype == torch.float64

    def test_batched_evaluation(self):
        from torchintegrals.geometry import Segment

        segment = Segment([0.0, 0.0], [2.0, 0.0])
        points = segment(torch.tensor([0.0, 0.25, 0.5]))

        assert points.shape == (3, 2)
        torch.testing.assert_close(
            points[:, 0], torch.tensor([0.0, 0.5, 1.0], dtype=torch.float64)
        )

    def test_wrong_number_of_parameters_raises(self):
        from torchintegrals import DimensionMismatchError
        from torchintegrals.geometry import Segment

        with pytest.raises(DimensionMismatchError, match="takes 1"):
            Segment([0.0], [1.0])(0.1, 0.2)


class TestLineAndRay:
    def test_line_extends_beyond_points(self):
        from torchintegrals.geometry import Line

        line = Line([0.0, 0.0], [1.0, 1.0])

        torch.testing.assert_close(
            line(-2.0), torch.tensor([-2.0, -2.0], dtype=torch.float64)
        )
        assert math.isinf(line.measure().item())

    def test_degenerate_line_raises(self):
        from torchintegrals.geometry import DegenerateInputError, Line

        with pytest.raises(DegenerateInputError):
            Line([1.0, 1.0], [1.0, 1.0])

    def test_ray(self):
        from torchintegrals.geometry import Ray

        ray = Ray([1.0, 0.0, 0.0], [0.0, 2.0, 0.0])

        torch.testing.assert_close(
            ray(3.0), torch.tensor([1.0, 6.0, 0.0], dtype=torch.float64)
        )

    def test_zero_direction_raises(self):
        from torchintegrals.geometry import DegenerateInputError, Ray

        with pytest.raises(DegenerateInputError, match="non-zero"):
            Ray([0.0, 0.0], [0.0, 0.0])


class TestCircle:
    def test_points_lie_on_circle(self):
        from torchintegrals.geometry import Circle, Plane

        circle = Circle(Plane([1.0, 2.0, 3.0], [0.0, 0.0, 1.0]), 2.5)
        points = circle(torch.linspace(0, 1, 11, dtype=torch.float64))
        offsets = points - torch.tensor([1.0, 2.0, 3.0], dtype=torch.float64)

        torch.testing.assert_close(
            torch.linalg.vector_norm(offsets, dim=-1),
            torch.full((11,), 2.5, dtype=torch.float64),
        )
        torch.testing.assert_close(
            offsets[:, 2], torch.zeros(11, dtype=torch.float64)
        )

    def test_measure(self):
        from torchintegrals.geometry import Circle, Plane

        circle = Circle(Plane([0.0, 0.0, 0.0], [0.0, 0.0, 1.0]), 2.5)

        assert circle.measure().item() == pytest.approx(2 * math.pi * 2.5)


class TestBezierCurve:
    def test_endpoints_interpolated(self):
        from torchintegrals.geometry import BezierCurve

        curve = BezierCurve([[0.0, 0.0], [1.0, 2.0], [3.0, -1.0], [4.0, 0.0]])

        torch.testing.assert_close(
            curve(0.0), torch.tensor([0.0, 0.0], dtype=torch.float64)
        )
        torch.testing.assert_close(
            curve(1.0), torch.tensor([4.0, 0.0], dtype=torch.float64)
        )

    def test_quadratic_midpoint(self):
        from torchintegrals.geometry import BezierCurve

        curve = BezierCurve([[0.0, 0.0], [1.0, 2.0], [2.0, 0.0]])

        torch.testing.assert_close(
            curve(0.5), torch.tensor([1.0, 1.0], dtype=torch.float64)
        )

    def test_algorithms_agree(self):
        from torchintegrals.geometry import BezierCurve

        torch.manual_seed(0)
        curve = BezierCurve(torch.randn(9, 3, dtype=torch.float64))
        ts = torch.linspace(0, 1, 33, dtype=torch.float64)[:, None]

        torch.testing.assert_close(
            curve.evaluate(ts, "horner"), curve.evaluate(ts, "decasteljau")
        )

    def test_unknown_algorithm_raises(self):
        from torchintegrals.geometry import BezierCurve

        curve = BezierCurve([[0.0, 0.0], [1.0, 1.0]])

        with pytest.raises(ValueError, match="alg"):
            curve.evaluate(torch.zeros(1, 1, dtype=torch.float64), "bernstein")

    def test_straight_curve_measure(self):
        from torchintegrals.geometry import BezierCurve

        curve = BezierCurve([[0.0, 0.0], [1.0, 0.0], [2.0, 0.0], [3.0, 0.0]])

        assert curve.measure().item() == pytest.approx(3.0)

    def test_single_control_point_raises(self):
        from torchintegrals.geometry import BezierCurve, DegenerateInputError

        with pytest.raises(DegenerateInputError):
            BezierCurve([[0.0, 0.0]])

    def test_high_degree_evaluation(self):
        from torchintegrals import DegreeOverflowError
        from torchintegrals.geometry import BezierCurve

        curve = BezierCurve([[float(i), 0.0] for i in range(1100)])
        ts = torch.tensor([[0.25], [0.5]], dtype=torch.float64)

        with pytest.raises(DegreeOverflowError, match="decasteljau"):
            curve.evaluate(ts, "horner")

        torch.testing.assert_close(
            curve(torch.tensor([0.25, 0.5], dtype=torch.float64)),
            torch.tensor([[274.75, 0.0], [549.5, 0.0]], dtype=torch.float64),
        )


class TestRopeAndRing:
    def test_rope_segments(self):
        from torchintegrals.geometry import Rope

        rope = Rope([[0.0, 0.0], [1.0, 0.0], [1.0, 2.0]])

        assert len(rope.segments()) == 2
        assert rope.measure().item() == pytest.approx(3.0)

    def test_ring_closes(self):
        from torchintegrals.geometry import Ring

        ring = Ring([[0.0, 0.0], [1.0, 0.0], [1.0, 1.0], [0.0, 1.0]])

        assert len(ring.segments()) == 4
        assert ring.measure().item() == pytest.approx(4.0)

    def test_arc_length_parametrization(self):
        from torchintegrals.geometry import Rope

        rope = Rope([[0.0, 0.0], [1.0, 0.0], [1.0, 3.0]])

        torch.testing.assert_close(
            rope(0.25), torch.tensor([1.0, 0.0], dtype=torch.float64)
        )
        torch.testing.assert_close(
            rope(1.0), torch.tensor([1.0, 3.0], dtype=torch.float64)
        )
        torch.testing.assert_close(
            rope(0.5), torch.tensor([1.0, 1.0], dtype=torch.float64)
        )


class TestParametrizedCurve:
    def test_interval_is_rescaled(self):
        from torchintegrals.geometry import ParametrizedCurve

        curve = ParametrizedCurve(
            lambda s: torch.stack([torch.cos(s), torch.sin(s)], dim=-1),
            (0.0, math.pi),
        )

        torch.testing.assert_close(
            curve(1.0),
            torch.tensor([-1.0, 0.0], dtype=torch.float64),
            atol=1e-12,
            rtol=0,
        )

    def test_to_dtype(self):
        from torchintegrals.geometry import ParametrizedCurve

        curve = ParametrizedCurve(lambda s: torch.stack([s, s], dim=-1))

        assert curve.to(torch.float32).dtype == torch.float32
        assert curve(0.5).dtype == torch.float64
