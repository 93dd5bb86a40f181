"""
FEM Object (Mesh Container)
===========================
Owns the nodes, elements, materials and element types of a finite element
mesh.

Storage is flat: node coordinates live in one (n_nodes, D) array and element
connectivity in one (n_elements, nodes_per_element) array of global node
numbers. Materials and element types are kept once in registries and
elements refer to them by registry id, so a single material shared by
thousands of elements is stored only once. Global numbers are the dense
positions in these arrays.

:class:`Node` and :class:`Element` objects returned by the lookups are
read-only views built on demand.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Iterator, Optional, Type, TypeVar

import meshio
import numpy as np
import scipy as sp

from imagefem.analysis.element import Element
from imagefem.analysis.finite_elements.finite_element import ElementType
from imagefem.analysis.node import Node
from imagefem.config import COORDINATE_DTYPE, INDEX_DTYPE
from imagefem.errors import DanglingReference
from imagefem.pre.material import Material

if TYPE_CHECKING:
    import numpy.typing as npt
    import matplotlib.axes
    import pyvista as pv

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=Material)


class FEMObject:
    """
    Container of a finite element mesh.

    Attributes:
        dimension: Number of coordinates per node.
    """
    def __init__(self, dimension: int) -> None:
        """
        Initialize an empty container.

        Args:
            dimension: Number of coordinates per node (2 or 3 for image meshes).

        Raises:
            ValueError: If `dimension` is smaller than 1.
        """
        if dimension < 1:
            raise ValueError(f"FEMObject dimension must be at least 1, got {dimension}.")
        self.dimension = dimension

        self._node_coords: npt.NDArray[np.float64] = np.empty((0, dimension), dtype=COORDINATE_DTYPE)
        self._connectivity: npt.NDArray[np.int64] = np.empty((0, 0), dtype=INDEX_DTYPE)
        self._element_material_ids: npt.NDArray[np.int64] = np.empty(0, dtype=INDEX_DTYPE)
        self._element_type_ids: npt.NDArray[np.int64] = np.empty(0, dtype=INDEX_DTYPE)

        self._materials: list[Material] = []
        self._element_types: list[ElementType] = []

    def __repr__(self) -> str:
        """String representation of the container."""
        return (
            f"{self.__class__.__name__}(dimension={self.dimension}, nodes={self.number_of_nodes}, "
            f"elements={self.number_of_elements}, materials={self.number_of_materials})"
        )

    # ------------------------------------------------------------------
    # Counts
    # ------------------------------------------------------------------
    @property
    def number_of_nodes(self) -> int:
        """Return the number of nodes in the mesh."""
        return self._node_coords.shape[0]

    @property
    def number_of_elements(self) -> int:
        """Return the number of elements in the mesh."""
        return self._connectivity.shape[0]

    @property
    def number_of_materials(self) -> int:
        """Return the number of registered materials."""
        return len(self._materials)

    @property
    def number_of_element_types(self) -> int:
        """Return the number of registered element types."""
        return len(self._element_types)

    @property
    def nodes_per_element(self) -> int:
        """Connectivity arity of the elements (0 while the mesh has no elements)."""
        return self._connectivity.shape[1]

    # ------------------------------------------------------------------
    # Read-only bulk views
    # ------------------------------------------------------------------
    @property
    def node_coordinates(self) -> npt.NDArray[np.float64]:
        """Coordinates of all nodes, row `n` belongs to node `n`."""
        return _read_only(self._node_coords)

    @property
    def connectivity(self) -> npt.NDArray[np.int64]:
        """Global node numbers of all elements in winding order, row `e` belongs to element `e`."""
        return _read_only(self._connectivity)

    @property
    def element_material_ids(self) -> npt.NDArray[np.int64]:
        return _read_only(self._element_material_ids)

    @property
    def element_type_ids(self) -> npt.NDArray[np.int64]:
        return _read_only(self._element_type_ids)

    # ------------------------------------------------------------------
    # Building
    # ------------------------------------------------------------------
    def add_node(self, coords: npt.ArrayLike) -> int:
        """Add a node to the mesh and return its global number."""
        return int(self.add_nodes(np.atleast_2d(np.asarray(coords, dtype=COORDINATE_DTYPE)))[0])

    def add_nodes(self, coords: npt.ArrayLike) -> npt.NDArray[np.int64]:
        """
        Add several nodes at once.

        Args:
            coords: Coordinates of shape (n, dimension).

        Raises:
            ValueError: If the coordinates do not have `dimension` columns.

        Returns:
            Global numbers assigned to the new nodes.
        """
        coords = np.asarray(coords, dtype=COORDINATE_DTYPE)
        if coords.ndim != 2 or coords.shape[1] != self.dimension:
            raise ValueError(
                f"Node coordinates must have shape (n, {self.dimension}), got {coords.shape}."
            )
        first = self.number_of_nodes
        self._node_coords = np.concatenate([self._node_coords, coords], axis=0)
        return np.arange(first, self.number_of_nodes, dtype=INDEX_DTYPE)

    def add_material(self, material: Material) -> int:
        """
        Register a material and return its id.

        A material already registered (the same instance) keeps its id.
        """
        if not isinstance(material, Material):
            raise TypeError(f"Expected a Material, got {type(material).__name__}.")
        return _register(self._materials, material)

    def add_element_type(self, element_type: ElementType) -> int:
        """
        Register an element-type prototype and return its id.

        A prototype already registered (the same instance) keeps its id.
        """
        if not isinstance(element_type, ElementType):
            raise TypeError(f"Expected an ElementType, got {type(element_type).__name__}.")
        return _register(self._element_types, element_type)

    def add_element(self, node_ids: npt.ArrayLike, material_id: int, element_type_id: int) -> int:
        """Add one element to the mesh and return its global number."""
        connectivity = np.atleast_2d(np.asarray(node_ids, dtype=INDEX_DTYPE))
        return int(self.add_elements(connectivity, material_id, element_type_id)[0])

    def add_elements(
        self,
        connectivity: npt.ArrayLike,
        material_id: int,
        element_type_id: int,
    ) -> npt.NDArray[np.int64]:
        """
        Add a block of elements sharing one material and one element type.

        Args:
            connectivity: Global node numbers (n, nodes_per_element) in winding order.
            material_id: Registry id of the material.
            element_type_id: Registry id of the element type.

        Raises:
            ValueError: If the arity does not match the element type or the rest
                of the mesh, or an element repeats a node.
            DanglingReference: If a node, material or element type id is not
                present in the container.

        Returns:
            Global numbers assigned to the new elements.
        """
        connectivity = np.asarray(connectivity, dtype=INDEX_DTYPE)
        if connectivity.ndim != 2 or connectivity.shape[0] == 0:
            raise ValueError(f"Connectivity must be a non-empty 2D array, got shape {connectivity.shape}.")

        arity = connectivity.shape[1]
        if 0 <= element_type_id < self.number_of_element_types:
            expected = self._element_types[element_type_id].number_of_nodes
            if arity != expected:
                raise ValueError(
                    f"{self._element_types[element_type_id]!r} needs {expected} nodes per element, got {arity}."
                )

        material_ids = np.full(connectivity.shape[0], material_id, dtype=INDEX_DTYPE)
        type_ids = np.full(connectivity.shape[0], element_type_id, dtype=INDEX_DTYPE)
        self._check_references(connectivity, material_ids, type_ids)

        if self.number_of_elements > 0 and arity != self.nodes_per_element:
            raise ValueError(
                f"All elements must have {self.nodes_per_element} nodes, got a block with {arity}."
            )
        sorted_ids = np.sort(connectivity, axis=1)
        if np.any(sorted_ids[:, 1:] == sorted_ids[:, :-1]):
            raise ValueError("An element references the same node more than once.")

        first = self.number_of_elements
        if first == 0:
            self._connectivity = connectivity.copy()
        else:
            self._connectivity = np.concatenate([self._connectivity, connectivity], axis=0)
        self._element_material_ids = np.concatenate([self._element_material_ids, material_ids])
        self._element_type_ids = np.concatenate([self._element_type_ids, type_ids])
        return np.arange(first, self.number_of_elements, dtype=INDEX_DTYPE)

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------
    def get_node(self, global_number: int) -> Node:
        """
        Return the node with the given global number.

        Raises:
            IndexError: If no such node exists.
        """
        _check_index(global_number, self.number_of_nodes, "node")
        return Node(index=int(global_number), coords=self._node_coords[global_number])

    def get_element(self, global_number: int) -> Element:
        """
        Return the element with the given global number.

        Raises:
            IndexError: If no such element exists.
        """
        _check_index(global_number, self.number_of_elements, "element")
        return Element(
            index=int(global_number),
            nodes=[self.get_node(n) for n in self._connectivity[global_number]],
            material=self._materials[self._element_material_ids[global_number]],
            element_type=self._element_types[self._element_type_ids[global_number]],
        )

    def get_material(self, index: int, expected_type: Optional[Type[M]] = None) -> Material:
        """
        Return the material registered under `index`.

        Args:
            index: Registry id of the material.
            expected_type: When given, the material is returned through
                :meth:`Material.as_type` and a different type raises
                :class:`~imagefem.errors.TypeMismatch`.

        Raises:
            IndexError: If no such material exists.
        """
        _check_index(index, self.number_of_materials, "material")
        material = self._materials[index]
        if expected_type is not None:
            return material.as_type(expected_type)
        return material

    def get_element_type(self, index: int) -> ElementType:
        """Return the element type registered under `index`."""
        _check_index(index, self.number_of_element_types, "element type")
        return self._element_types[index]

    @property
    def nodes(self) -> Iterator[Node]:
        """Iterate over the nodes in global-number order."""
        return (self.get_node(n) for n in range(self.number_of_nodes))

    @property
    def elements(self) -> Iterator[Element]:
        """Iterate over the elements in global-number order."""
        return (self.get_element(e) for e in range(self.number_of_elements))

    @property
    def materials(self) -> list[Material]:
        return list(self._materials)

    # ------------------------------------------------------------------
    # Topology
    # ------------------------------------------------------------------
    def validate(self) -> None:
        """
        Check that every element reference resolves inside the container.

        Raises:
            DanglingReference: If an element references a missing node,
                material or element type, or its arity disagrees with its
                element type.
        """
        self._check_references(self._connectivity, self._element_material_ids, self._element_type_ids)

    def node_element_incidence(self) -> sp.sparse.csr_matrix:
        """
        Node-to-element incidence matrix.

        Returns:
            Sparse (n_nodes, n_elements) matrix with 1 where the node belongs
            to the element.
        """
        rows = self._connectivity.ravel()
        cols = np.repeat(np.arange(self.number_of_elements, dtype=INDEX_DTYPE), self.nodes_per_element)
        data = np.ones(rows.shape[0], dtype=np.int8)
        return sp.sparse.csr_matrix(
            (data, (rows, cols)),
            shape=(self.number_of_nodes, self.number_of_elements),
        )

    def elements_sharing_node(self, global_number: int) -> npt.NDArray[np.int64]:
        """Global numbers of the elements connected to a node, in ascending order."""
        _check_index(global_number, self.number_of_nodes, "node")
        incidence = self.node_element_incidence()
        return np.sort(incidence[global_number].indices).astype(INDEX_DTYPE)

    def bounds(self) -> tuple[npt.NDArray[np.float64], npt.NDArray[np.float64]]:
        """
        Axis-aligned bounding box of the nodes.

        Raises:
            ValueError: If the mesh has no nodes.
        """
        if self.number_of_nodes == 0:
            raise ValueError("Cannot compute the bounds of a mesh without nodes.")
        return self._node_coords.min(axis=0), self._node_coords.max(axis=0)

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------
    def to_meshio(self) -> meshio.Mesh:
        """
        Convert the mesh to a :class:`meshio.Mesh`.

        Elements are grouped into one cell block per element type, in
        registry order. Cell data ``material`` and ``element_id`` hold the
        material id and the global number of each cell.
        """
        points = self._node_coords
        if self.dimension < 3:
            points = np.hstack([points, np.zeros((self.number_of_nodes, 3 - self.dimension))])

        cells = []
        material_data = []
        element_data = []
        for type_id, element_type in enumerate(self._element_types):
            mask = self._element_type_ids == type_id
            if not np.any(mask):
                continue
            cells.append((element_type.cell_type, self._connectivity[mask]))
            material_data.append(self._element_material_ids[mask])
            element_data.append(np.flatnonzero(mask).astype(INDEX_DTYPE))

        return meshio.Mesh(
            points,
            cells,
            cell_data={"material": material_data, "element_id": element_data},
        )

    def write(self, filename: str, file_format: Optional[str] = None, **kwargs: Any) -> None:
        """
        Write the mesh to a file through meshio (format deduced from the extension).
        """
        logger.info(f"Writing {self} to: {filename}")
        meshio.write(filename, self.to_meshio(), file_format=file_format, **kwargs)

    def to_pyvista(self) -> pv.UnstructuredGrid:
        """Convert the mesh to a :class:`pyvista.UnstructuredGrid`."""
        import pyvista as pv

        return pv.from_meshio(self.to_meshio())

    def plot(
        self,
        ax: Optional[matplotlib.axes.Axes] = None,
        show_node_ids: bool = False,
        show_element_ids: bool = False,
    ) -> matplotlib.axes.Axes:
        """
        Plot a two-dimensional mesh with Matplotlib.

        Args:
            ax: Axes to draw into; a new figure is created when omitted.
            show_node_ids: Annotate nodes with their global numbers.
            show_element_ids: Annotate element centroids with their global numbers.

        Raises:
            ValueError: If the mesh is not two-dimensional.

        Returns:
            The axes the mesh was drawn into.
        """
        import matplotlib.pyplot as plt

        if self.dimension != 2:
            raise ValueError(f"Only two-dimensional meshes can be plotted, this one is {self.dimension}D.")

        if ax is None:
            _, ax = plt.subplots()
        ax.set_aspect('equal')

        cmap = plt.get_cmap("tab10")
        for element_id, node_ids in enumerate(self._connectivity):
            coords = self._node_coords[node_ids]
            coords = np.vstack((coords, coords[0]))  # Close the polygon
            color = cmap(int(self._element_material_ids[element_id]) % cmap.N)

            ax.fill(coords[:, 0], coords[:, 1], color=color, alpha=0.1)
            ax.plot(coords[:, 0], coords[:, 1], color='black', lw=1)

            if show_element_ids:
                centroid = np.mean(coords[:-1], axis=0)
                ax.text(centroid[0], centroid[1], str(element_id), color=color, ha='center', va='center')

        ax.plot(self._node_coords[:, 0], self._node_coords[:, 1], 'ko', markersize=2)
        if show_node_ids:
            for node_id, (x, y) in enumerate(self._node_coords):
                ax.text(x, y, str(node_id), color='k', ha='left', va='bottom')

        ax.set_xlabel("X Coordinate")
        ax.set_ylabel("Y Coordinate")
        return ax

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _check_references(
        self,
        connectivity: npt.NDArray[np.int64],
        material_ids: npt.NDArray[np.int64],
        type_ids: npt.NDArray[np.int64],
    ) -> None:
        if connectivity.shape[0] == 0:
            return

        bad_nodes = (connectivity < 0) | (connectivity >= self.number_of_nodes)
        if np.any(bad_nodes):
            element, _ = np.argwhere(bad_nodes)[0]
            raise DanglingReference(
                f"Element row {element} references node(s) {connectivity[element].tolist()}, "
                f"but the mesh has {self.number_of_nodes} nodes."
            )

        bad_materials = (material_ids < 0) | (material_ids >= self.number_of_materials)
        if np.any(bad_materials):
            raise DanglingReference(
                f"Material id {int(material_ids[bad_materials][0])} is not registered "
                f"({self.number_of_materials} materials)."
            )

        bad_types = (type_ids < 0) | (type_ids >= self.number_of_element_types)
        if np.any(bad_types):
            raise DanglingReference(
                f"Element type id {int(type_ids[bad_types][0])} is not registered "
                f"({self.number_of_element_types} element types)."
            )

        for type_id in np.unique(type_ids):
            element_type = self._element_types[type_id]
            if connectivity.shape[1] != element_type.number_of_nodes:
                raise DanglingReference(
                    f"{element_type!r} needs {element_type.number_of_nodes} nodes per element, "
                    f"the connectivity has {connectivity.shape[1]}."
                )


def _read_only(array: npt.NDArray[Any]) -> npt.NDArray[Any]:
    view = array.view()
    view.setflags(write=False)
    return view


def _register(registry: list, item: Any) -> int:
    for index, registered in enumerate(registry):
        if registered is item:
            return index
    registry.append(item)
    return len(registry) - 1


def _check_index(index: int, count: int, what: str) -> None:
    if not 0 <= index < count:
        raise IndexError(f"No {what} with global number {index} (the mesh has {count}).")
