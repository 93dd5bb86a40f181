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


# Local node order: counter-clockwise from the lower-left corner.
REFERENCE_CORNERS = np.array([
    [-1.0, -1.0],
    [1.0, -1.0],
    [1.0, 1.0],
    [-1.0, 1.0],
])


class Quad4Membrane(ElementType):
    """
    Four-node linear quadrilateral membrane element (Quad4).

    Two in-plane displacement degrees of freedom per node.
    """
    dimension = 2
    number_of_nodes = 4
    n_dof_per_node = 2
    cell_type = "quad"

    @staticmethod
    def shape_functions(iso_coords: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
        """
        Calculate the bilinear shape functions of the Quad4 element.

        Args:
            iso_coords: Isoparametric coordinates [r, s] in the range [-1, 1].

        Returns:
            Shape function values at the given coordinates ``[N1, N2, N3, N4]``.
        """
        return multilinear_shape_functions(REFERENCE_CORNERS, iso_coords)

    @staticmethod
    def shape_function_derivatives(iso_coords: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
        """
        Calculate the shape function derivatives of the Quad4 element.

        Returns:
            [[dN1/dr, ..., dN4/dr], [dN1/ds, ..., dN4/ds]]
        """
        return multilinear_shape_function_derivatives(REFERENCE_CORNERS, iso_coords)
