from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from imagefem.analysis.finite_elements.finite_element import (
    ElementType,
    multilinear_shape_functions,
    multilinear_shape_function_derivatives,
)

if TYPE_CHECKING:
    import numpy.typing as npt


# Local node order: the Quad4 order on the bottom face (t = -1), then on the top face (t = 1).
REFERENCE_CORNERS = np.array([
    [-1.0, -1.0, -1.0],
    [1.0, -1.0, -1.0],
    [1.0, 1.0, -1.0],
    [-1.0, 1.0, -1.0],
    [-1.0, -1.0, 1.0],
    [1.0, -1.0, 1.0],
    [1.0, 1.0, 1.0],
    [-1.0, 1.0, 1.0],
])


class Hex8Membrane(ElementType):
    """
    Eight-node linear hexahedral element (Hex8) with three displacement
    degrees of freedom per node.
    """
    dimension = 3
    number_of_nodes = 8
    n_dof_per_node = 3
    cell_type = "hexahedron"

    @staticmethod
    def shape_functions(iso_coords: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
        """Trilinear shape functions ``[N1, ..., N8]`` at [r, s, t]."""
        return multilinear_shape_functions(REFERENCE_CORNERS, iso_coords)

    @staticmethod
    def shape_function_derivatives(iso_coords: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
        return multilinear_shape_function_derivatives(REFERENCE_CORNERS, iso_coords)
