import pytest
import torch


def _square_mesh():
    from torchintegrals.geometry import Mesh

    return Mesh(
        vertices=torch.tensor(
            [[0.0, 0.0], [1.0, 0.0], [1.0, 1.0], [0.0, 1.0]], dtype=torch.float64
        ),
        elements=torch.tensor([[0, 1, 2], [0, 2, 3]]),
        element_type="triangle",
        batch_size=[],
    )


class TestMesh:
    def test_properties(self):
        mesh = _square_mesh()

        assert mesh.dim == 2
        assert mesh.paramdim == 2
        assert mesh.num_vertices == 4
        assert mesh.num_elements == 2

    def test_measure(self):
        assert _square_mesh().measure().item() == pytest.approx(1.0)

    def test_measure_with_unit(self):
        from torchintegrals import ureg

        area = _square_mesh().measure(ureg.centimeter)

        assert area.units == ureg.centimeter**2
        assert area.magnitude.item() == pytest.approx(1.0)


class TestElements:
    def test_triangles(self):
        from torchintegrals.geometry import Triangle, elements

        triangles = list(elements(_square_mesh()))

        assert len(triangles) == 2
        assert all(isinstance(t, Triangle) for t in triangles)
        torch.testing.assert_close(
            triangles[1].c, torch.tensor([0.0, 1.0], dtype=torch.float64)
        )

    def test_lines(self):
        from torchintegrals.geometry import Mesh, Segment, elements

        mesh = Mesh(
            vertices=torch.tensor([[0.0, 0.0], [3.0, 4.0], [3.0, 0.0]]),
            elements=torch.tensor([[0, 1], [1, 2]]),
            element_type="line",
            batch_size=[],
        )
        segments = list(elements(mesh))

        assert all(isinstance(s, Segment) for s in segments)
        assert sum(s.measure().item() for s in segments) == pytest.approx(9.0)

    def test_unit_is_attached(self):
        from torchintegrals import ureg
        from torchintegrals.geometry import elements

        triangle = next(elements(_square_mesh(), unit=ureg.meter))

        assert triangle.measure().units == ureg.meter**2

    def test_wrong_connectivity_raises(self):
        from torchintegrals.geometry import DegenerateInputError, Mesh, elements

        mesh = Mesh(
            vertices=torch.zeros(4, 3),
            elements=torch.tensor([[0, 1, 2]]),
            element_type="tetrahedron",
            batch_size=[],
        )

        with pytest.raises(DegenerateInputError, match="need 4 vertices"):
            list(elements(mesh))

    def test_unknown_element_type_raises(self):
        from torchintegrals.geometry import Mesh, elements

        mesh = Mesh(
            vertices=torch.zeros(3, 2),
            elements=torch.tensor([[0, 1, 2]]),
            element_type="pentagon",
            batch_size=[],
        )

        with pytest.raises(ValueError, match="unknown element type"):
            list(elements(mesh))


class TestDiscretize:
    def test_l_shape(self):
        from torchintegrals.geometry import PolyArea, discretize, elements

        polygon = PolyArea([[0, 0], [2, 0], [2, 1], [1, 1], [1, 2], [0, 2]])
        mesh = discretize(polygon)

        assert mesh.element_type == "triangle"
        assert mesh.num_elements == 4
        areas = [t.measure().item() for t in elements(mesh)]
        assert sum(areas) == pytest.approx(3.0)
        assert all(area > 0 for area in areas)

    def test_clockwise_input(self):
        from torchintegrals.geometry import PolyArea, discretize, elements

        polygon = PolyArea([[0, 2], [1, 2], [1, 1], [2, 1], [2, 0], [0, 0]])
        mesh = discretize(polygon)

        assert sum(t.measure().item() for t in elements(mesh)) == pytest.approx(3.0)

    def test_collinear_vertices_dropped(self):
        from torchintegrals.geometry import PolyArea, discretize

        polygon = PolyArea([[0, 0], [1, 0], [2, 0], [2, 2], [0, 2]])

        assert discretize(polygon).num_elements == 2

    def test_polygon_in_3d(self):
        from torchintegrals.geometry import PolyArea, discretize, elements

        polygon = PolyArea([[0, 0, 0], [2, 0, 2], [2, 2, 2], [0, 2, 0]])
        mesh = discretize(polygon)

        assert mesh.dim == 3
        assert sum(t.measure().item() for t in elements(mesh)) == pytest.approx(
            4 * 2**0.5
        )

    def test_collinear_polygon_raises(self):
        from torchintegrals.geometry import DegenerateInputError, PolyArea, discretize

        with pytest.raises(DegenerateInputError):
            discretize(PolyArea([[0, 0], [1, 1], [2, 2]]))
