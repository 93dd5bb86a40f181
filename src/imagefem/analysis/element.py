from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    import numpy.typing as npt
    from imagefem.analysis.finite_elements.finite_element import ElementType
    from imagefem.analysis.node import Node
    from imagefem.pre.material import Material


class Element:
    """
    Represents one element of a finite element mesh.

    Elements are views assembled by a
    :class:`~imagefem.analysis.fem_object.FEMObject` from its connectivity
    arrays; the material and element type are the container's shared
    instances.
    """
    def __init__(
        self,
        index: int,
        nodes: list[Node],
        material: Material,
        element_type: ElementType,
    ) -> None:
        """
        Initialize the element.

        Args:
            index: Global number of the element in its container.
            nodes: Nodes of the element in winding order.
            material: The material associated with the element.
            element_type: The element-type prototype of the element.
        """
        self.id = index
        self.nodes = nodes
        self.material = material
        self.element_type = element_type

    def __repr__(self) -> str:
        """String representation of the finite element."""
        return (
            f"{self.__class__.__name__}(id={self.id}, type={self.element_type.__class__.__name__}, "
            f"nodes={self.node_ids.tolist()}, material={self.material.name!r})"
        )

    @property
    def number_of_nodes(self) -> int:
        """Number of nodes in the finite element."""
        return len(self.nodes)

    @property
    def node_ids(self) -> npt.NDArray[np.int64]:
        """Global numbers of the nodes in winding order."""
        return np.array([node.uid for node in self.nodes], dtype=np.int64)

    def get_node(self, local_index: int) -> Node:
        """Return the node at `local_index` in winding order."""
        return self.nodes[local_index]

    @property
    def coords(self) -> npt.NDArray[np.float64]:
        """Nodal coordinates (number_of_nodes, dimension)."""
        return np.array([node.coords for node in self.nodes], dtype=np.float64)

    @property
    def centroid(self) -> npt.NDArray[np.float64]:
        return self.coords.mean(axis=0)

    @property
    def measure(self) -> float:
        """Area (2D) or volume (3D) of the element."""
        return self.element_type.measure(self.coords)
