from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from imagefem.config import COORDINATE_DTYPE

if TYPE_CHECKING:
    import numpy.typing as npt


class Node:
    """
    Represents a node of a finite element mesh.

    Nodes are owned by a :class:`~imagefem.analysis.fem_object.FEMObject`;
    instances handed out by the container are read-only views.
    """
    def __init__(
        self,
        index: int,
        coords: list[float] | npt.NDArray[np.float64],
    ) -> None:
        """
        Initialize the node with coordinates.

        Args:
            index: Global number of the node in its container.
            coords: Coordinates of the node in the physical system [X, Y(, Z)].
        """
        self.coords = np.array(coords, dtype=COORDINATE_DTYPE)
        self.coords.setflags(write=False)
        self.uid = index

    def __repr__(self) -> str:
        """String representation of the node."""
        return f"{self.__class__.__name__}(id={self.uid}, coords={self.coords})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Node):
            return NotImplemented
        return self.uid == other.uid and np.array_equal(self.coords, other.coords)

    def __hash__(self) -> int:
        return hash((self.uid, self.coords.tobytes()))

    @property
    def dimension(self) -> int:
        """Number of coordinates of the node."""
        return self.coords.shape[0]

    @property
    def x(self) -> float:
        """X-coordinate of the node."""
        return float(self.coords[0])

    @property
    def y(self) -> float:
        """Y-coordinate of the node."""
        return float(self.coords[1])

    @property
    def z(self) -> float:
        """Z-coordinate of the node (3-D meshes only)."""
        if self.dimension < 3:
            raise AttributeError(f"{self!r} is two-dimensional and has no z-coordinate.")
        return float(self.coords[2])
