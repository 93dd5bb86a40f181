from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    import numpy.typing as npt


def gauss_points_weights_edge(n_points: int) -> tuple[npt.NDArray[np.float64], npt.NDArray[np.float64]]:
    """
    Generate Gauss points and weights for a 1D Gaussian integration on [-1, 1].

    Args:
        n_points: Number of integration points.

    Raises:
        ValueError: If `n_points` is not 1, 2, or 3.

    Returns:
        A tuple containing the Gauss points and weights.
    """
    if n_points == 1:
        return np.array([0.0]), np.array([2.0])
    elif n_points == 2:
        return np.array([-1/np.sqrt(3), 1/np.sqrt(3)]), np.array([1.0, 1.0])
    elif n_points == 3:
        return np.array([-np.sqrt(3/5), 0.0, np.sqrt(3/5)]), np.array([5/9, 8/9, 5/9])
    else:
        raise ValueError(f"Unsupported number of Gauss points: {n_points}. "
                         f"'n_points' must be 1, 2, or 3.")


def gauss_points_weights_tensor(
    n_points_per_axis: int,
    dimension: int,
) -> tuple[npt.NDArray[np.float64], npt.NDArray[np.float64]]:
    """
    Generate Gauss points and weights for a quadrilateral (2D) or hexahedral (3D)
    reference cell [-1, 1]^dimension as a tensor product of 1D rules.

    The first isoparametric coordinate varies fastest.

    Args:
        n_points_per_axis: Number of integration points along each axis.
        dimension: Dimension of the reference cell.

    Raises:
        ValueError: If `dimension` is smaller than 1.

    Returns:
        A tuple of points with shape (n_points_per_axis**dimension, dimension)
        and the matching weights.
    """
    if dimension < 1:
        raise ValueError(f"Unsupported dimension: {dimension}. 'dimension' must be at least 1.")

    points_1d, weights_1d = gauss_points_weights_edge(n_points_per_axis)

    grids = np.meshgrid(*([points_1d] * dimension), indexing="ij")
    weight_grids = np.meshgrid(*([weights_1d] * dimension), indexing="ij")

    # Reverse the axes so that the first coordinate varies fastest
    points = np.stack([g.transpose().ravel() for g in grids], axis=1)
    weights = np.prod(np.stack([w.transpose().ravel() for w in weight_grids], axis=1), axis=1)
    return points, weights
