"""Tests for element-type prototypes and Gauss rules."""

import numpy as np
import pytest

from imagefem.analysis.gauss import gauss_points_weights_edge, gauss_points_weights_tensor


class TestGauss:

    @pytest.mark.parametrize("n_points", [1, 2, 3])
    def test_edge_weights_sum_to_length(self, n_points):
        _, weights = gauss_points_weights_edge(n_points)
        assert weights.sum() == pytest.approx(2.0)

    def test_unsupported_edge_rule(self):
        with pytest.raises(ValueError, match="Unsupported number of Gauss points"):
            gauss_points_weights_edge(4)

    def test_tensor_rule_first_coordinate_fastest(self):
        points, weights = gauss_points_weights_tensor(2, 2)
        g = 1 / np.sqrt(3)
        np.testing.assert_allclose(points, [[-g, -g], [g, -g], [-g, g], [g, g]])
        np.testing.assert_allclose(weights, 1.0)

    def test_tensor_rule_integrates_cube_volume(self):
        _, weights = gauss_points_weights_tensor(3, 3)
        assert weights.shape == (27,)
        assert weights.sum() == pytest.approx(8.0)


class TestQuad4Membrane:

    def test_prototype_properties(self, quad4):
        assert quad4.dimension == 2
        assert quad4.number_of_nodes == 4
        assert quad4.degrees_of_freedom == 8
        assert quad4.n_integration_points == 4
        assert quad4.cell_type == "quad"

    def test_shape_functions_are_nodal(self, quad4):
        corners = [[-1, -1], [1, -1], [1, 1], [-1, 1]]
        values = np.array([quad4.shape_functions(np.array(c, dtype=float)) for c in corners])
        np.testing.assert_allclose(values, np.eye(4), atol=1e-12)

    def test_partition_of_unity(self, quad4):
        values = quad4.shape_functions(np.array([0.3, -0.7]))
        assert values.sum() == pytest.approx(1.0)
        np.testing.assert_allclose(quad4.shape_function_derivatives(np.array([0.3, -0.7])).sum(axis=1), 0.0, atol=1e-12)

    def test_area_of_rectangle(self, quad4):
        coords = [[0.0, 0.0], [2.0, 0.0], [2.0, 3.0], [0.0, 3.0]]
        assert quad4.measure(coords) == pytest.approx(6.0)

    def test_clockwise_winding_gives_negative_area(self, quad4):
        coords = [[0.0, 0.0], [0.0, 3.0], [2.0, 3.0], [2.0, 0.0]]
        assert quad4.measure(coords) == pytest.approx(-6.0)

    def test_area_of_trapezoid(self, quad4):
        coords = [[0.0, 0.0], [4.0, 0.0], [3.0, 2.0], [1.0, 2.0]]
        assert quad4.measure(coords) == pytest.approx(6.0)

    def test_coordinate_shape_is_checked(self, quad4):
        with pytest.raises(ValueError, match="expects nodal coordinates of shape"):
            quad4.measure([[0.0, 0.0], [1.0, 0.0], [1.0, 1.0]])

    def test_integration_scheme(self, quad4):
        points, weights = quad4.integration_scheme()
        assert points.shape == (4, 2)
        assert weights.sum() == pytest.approx(4.0)

    def test_jacobian_matrices_of_rectangle(self, quad4):
        coords = [[0.0, 0.0], [2.0, 0.0], [2.0, 3.0], [0.0, 3.0]]
        jacobians = quad4.jacobian_matrices(coords)
        assert jacobians.shape == (4, 2, 2)
        # half the edge lengths on the diagonal at every point
        np.testing.assert_allclose(jacobians, np.broadcast_to(np.diag([1.0, 1.5]), (4, 2, 2)), atol=1e-12)
        np.testing.assert_allclose(quad4.jacobian_determinants(coords), 1.5)


class TestHex8Membrane:

    def test_prototype_properties(self, hex8):
        assert hex8.number_of_nodes == 8
        assert hex8.degrees_of_freedom == 24
        assert hex8.n_integration_points == 8
        assert hex8.cell_type == "hexahedron"

    def test_volume_of_box(self, hex8):
        bottom = [[0.0, 0.0], [2.0, 0.0], [2.0, 3.0], [0.0, 3.0]]
        coords = [xy + [0.0] for xy in bottom] + [xy + [4.0] for xy in bottom]
        assert hex8.measure(coords) == pytest.approx(24.0)
        assert np.all(hex8.jacobian_determinants(coords) > 0)

    def test_shape_functions_partition_of_unity(self, hex8):
        assert hex8.shape_functions(np.array([0.1, 0.2, -0.5])).sum() == pytest.approx(1.0)
