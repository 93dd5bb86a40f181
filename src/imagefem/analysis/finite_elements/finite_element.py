from __future__ import annotations

from abc import ABC, abstractmethod

from typing import TYPE_CHECKING, ClassVar

import numpy as np

import imagefem.analysis.gauss as gauss

if TYPE_CHECKING:
    import numpy.typing as npt


def multilinear_shape_functions(
    reference_corners: npt.NDArray[np.float64],
    iso_coords: npt.NDArray[np.float64],
) -> npt.NDArray[np.float64]:
    """
    Evaluate multilinear Lagrange shape functions of a [-1, 1]^d reference cell.

    N_a(ξ) = Π_k (1 + ξ_k ξ_ak) / 2

    Args:
        reference_corners: Corner coordinates (n_nodes, d) in local node order.
        iso_coords: Isoparametric coordinates (d,) in the range [-1, 1].

    Returns:
        Shape function values ``[N1, ..., Nn]``.
    """
    factors = 0.5 * (1.0 + reference_corners * np.asarray(iso_coords, dtype=np.float64))
    return np.prod(factors, axis=1)


def multilinear_shape_function_derivatives(
    reference_corners: npt.NDArray[np.float64],
    iso_coords: npt.NDArray[np.float64],
) -> npt.NDArray[np.float64]:
    """
    Derivatives of :func:`multilinear_shape_functions` with respect to the
    isoparametric coordinates.

    Returns:
        Array (d, n_nodes) where row k holds dN_a/dξ_k.
    """
    factors = 0.5 * (1.0 + reference_corners * np.asarray(iso_coords, dtype=np.float64))
    dimension = reference_corners.shape[1]
    derivatives = np.empty((dimension, reference_corners.shape[0]), dtype=np.float64)
    for k in range(dimension):
        others = np.delete(factors, k, axis=1)
        derivatives[k] = 0.5 * reference_corners[:, k] * np.prod(others, axis=1)
    return derivatives


class ElementType(ABC):
    """
    Abstract base class for element-type prototypes.

    A prototype describes the connectivity arity, degrees of freedom and
    shape-function behaviour of an element. A single instance is shared by
    every element that uses it; prototypes hold no per-element state.
    """
    dimension: ClassVar[int]
    number_of_nodes: ClassVar[int]
    n_dof_per_node: ClassVar[int]
    cell_type: ClassVar[str]

    def __init__(self, n_integration_points_per_axis: int = 2) -> None:
        """
        Initialize the prototype.

        Args:
            n_integration_points_per_axis: Order of the Gauss rule along each local axis.
        """
        self.n_integration_points_per_axis = n_integration_points_per_axis

    def __repr__(self) -> str:
        """String representation of the element type."""
        return (
            f"{self.__class__.__name__}(nodes={self.number_of_nodes}, "
            f"dofs_per_node={self.n_dof_per_node})"
        )

    @property
    def degrees_of_freedom(self) -> int:
        """Number of degrees of freedom of one element."""
        return self.number_of_nodes * self.n_dof_per_node

    @property
    def n_integration_points(self) -> int:
        """Total number of integration points of the element."""
        return self.n_integration_points_per_axis ** self.dimension

    @staticmethod
    @abstractmethod
    def shape_functions(iso_coords: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
        """Calculate the shape functions at given local coordinates."""
        pass

    @staticmethod
    @abstractmethod
    def shape_function_derivatives(iso_coords: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
        """Calculate the shape function derivatives at given local coordinates."""
        pass

    def integration_scheme(self) -> tuple[npt.NDArray[np.float64], npt.NDArray[np.float64]]:
        """
        Get the integration scheme of the element.

        Returns:
            Tuple of Gauss points and weights for numerical integration.
        """
        return gauss.gauss_points_weights_tensor(self.n_integration_points_per_axis, self.dimension)

    def check_coordinates(self, coords: npt.ArrayLike) -> npt.NDArray[np.float64]:
        """
        Validate the nodal coordinates of one element.

        Raises:
            ValueError: If the array is not of shape (number_of_nodes, dimension).
        """
        coords = np.asarray(coords, dtype=np.float64)
        expected = (self.number_of_nodes, self.dimension)
        if coords.shape != expected:
            raise ValueError(
                f"{self.__class__.__name__} expects nodal coordinates of shape {expected}, "
                f"got {coords.shape}."
            )
        return coords

    def jacobian_matrix(
        self,
        coords: npt.ArrayLike,
        iso_coords: npt.NDArray[np.float64],
    ) -> npt.NDArray[np.float64]:
        """
        Calculate the Jacobian matrix at given local coordinates.

        [J] = [dN/dξ] [X]

        Args:
            coords: Nodal coordinates (number_of_nodes, dimension) in local node order.
            iso_coords: Isoparametric coordinates.

        Returns:
            Jacobian matrix of the element.
        """
        coords = self.check_coordinates(coords)
        return self.shape_function_derivatives(iso_coords) @ coords

    def jacobian_matrices(self, coords: npt.ArrayLike) -> npt.NDArray[np.float64]:
        """
        Jacobian matrix at every integration point.

        Returns:
            Array (n_integration_points, dimension, dimension).
        """
        coords = self.check_coordinates(coords)
        points, _ = self.integration_scheme()
        return np.array([self.jacobian_matrix(coords, point) for point in points])

    def jacobian_determinants(self, coords: npt.ArrayLike) -> npt.NDArray[np.float64]:
        """Jacobian determinant at every integration point."""
        return np.linalg.det(self.jacobian_matrices(coords))

    def measure(self, coords: npt.ArrayLike) -> float:
        """
        Calculate the area (2D) or volume (3D) of an element.

        The result is negative when the nodes are wound clockwise
        (or the hexahedron is inverted).
        """
        _, weights = self.integration_scheme()
        return float(np.sum(weights * self.jacobian_determinants(coords)))
