"""
Rectilinear Mesh Generation
===========================
Partitions the pixel grid of an image into a regular grid of finite elements.

Every element covers `pixels_per_element[i]` pixels along axis `i`, so an
image of `size[i]` pixels yields `size[i] // pixels_per_element[i]` elements
along that axis. Trailing pixels that do not fill a whole element are left
out of the mesh.

Numbering
---------
Nodes and elements are numbered in row-major order with axis 0 (x) varying
fastest. For a node at grid index (i, j[, k]):

    node = i + (Nx + 1) * (j + (Ny + 1) * k)

and for the element of cell (i, j[, k]):

    element = i + Nx * (j + Ny * k)

Winding
-------
2D: (i, j) -> (i+1, j) -> (i+1, j+1) -> (i, j+1), counter-clockwise from the
lower-left corner. 3D: the 2D winding on face k followed by the same winding
on face k + 1.
"""
from __future__ import annotations

import logging
from numbers import Integral
from typing import TYPE_CHECKING, Optional, Sequence, Union

import numpy as np

from imagefem.analysis.fem_object import FEMObject
from imagefem.analysis.finite_elements.finite_element import ElementType
from imagefem.config import INDEX_DTYPE, SUPPORTED_DIMENSIONS
from imagefem.errors import InvalidConfiguration
from imagefem.pre.image import ImageDescriptor
from imagefem.pre.material import Material

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)

ImageLike = Union[ImageDescriptor, "npt.NDArray"]

# Corner offsets of one grid cell in winding order, keyed by dimension.
CELL_CORNER_OFFSETS: dict[int, npt.NDArray[np.int64]] = {
    2: np.array([
        [0, 0],
        [1, 0],
        [1, 1],
        [0, 1],
    ], dtype=INDEX_DTYPE),
    3: np.array([
        [0, 0, 0],
        [1, 0, 0],
        [1, 1, 0],
        [0, 1, 0],
        [0, 0, 1],
        [1, 0, 1],
        [1, 1, 1],
        [0, 1, 1],
    ], dtype=INDEX_DTYPE),
}


def grid_indices(shape: Sequence[int]) -> npt.NDArray[np.int64]:
    """
    Enumerate every index of a grid with axis 0 varying fastest.

    Args:
        shape: Number of points along each axis.

    Returns:
        Array (prod(shape), len(shape)); row `n` is the grid index of point `n`.

    **Example**:

        grid_indices((2, 2))
        # [[0, 0], [1, 0], [0, 1], [1, 1]]
    """
    # np.indices varies its last axis fastest, so enumerate the reversed shape
    reversed_indices = np.indices(tuple(reversed(shape)), dtype=INDEX_DTYPE).reshape(len(shape), -1)
    return np.ascontiguousarray(reversed_indices[::-1].T)


def grid_strides(shape: Sequence[int]) -> npt.NDArray[np.int64]:
    """Global-number strides of a grid numbered with axis 0 varying fastest."""
    return np.concatenate([[1], np.cumprod(shape[:-1])]).astype(INDEX_DTYPE)


def compute_number_of_elements(
    image_size: Sequence[int],
    pixels_per_element: Sequence[int],
) -> npt.NDArray[np.int64]:
    """
    Number of whole elements along each axis.

    Raises:
        InvalidConfiguration: If the lengths differ, a spacing is not a
            positive integer, or an axis would hold no element.
    """
    if len(pixels_per_element) != len(image_size):
        raise InvalidConfiguration(
            f"Pixels per element {tuple(pixels_per_element)} must have one entry per image axis "
            f"({len(image_size)})."
        )
    for axis, value in enumerate(pixels_per_element):
        if isinstance(value, bool) or not isinstance(value, Integral) or value <= 0:
            raise InvalidConfiguration(
                f"Pixels per element must be positive integers, got {value!r} along axis {axis}."
            )

    # Python ints: spacings beyond the int64 range still divide to zero elements
    counts = [int(size) // int(value) for size, value in zip(image_size, pixels_per_element)]
    for axis, count in enumerate(counts):
        if count == 0:
            raise InvalidConfiguration(
                f"Image size {image_size[axis]} along axis {axis} is smaller than "
                f"{pixels_per_element[axis]} pixels per element; the mesh would have no element along it."
            )
    return np.array(counts, dtype=INDEX_DTYPE)


def generate_rectilinear_mesh(
    image: ImageLike,
    pixels_per_element: Sequence[int],
    material: Material,
    element_type: ElementType,
) -> FEMObject:
    """
    Generate a rectilinear finite element mesh covering an image.

    Args:
        image: Image descriptor, or a NumPy image (see :meth:`ImageDescriptor.from_array`).
        pixels_per_element: Pixels spanned by one element edge along each axis (x, y[, z]).
        material: Material shared by every element.
        element_type: Element-type prototype shared by every element.

    Raises:
        InvalidConfiguration: If the inputs cannot produce a mesh with at least
            one element along every axis. No partial mesh is built.

    Returns:
        A new FEMObject with one material, one element type,
        prod(N + 1) nodes and prod(N) elements.
    """
    descriptor = _as_descriptor(image)
    pixels_per_element = tuple(pixels_per_element)
    try:
        number_of_elements = _validate_configuration(descriptor, pixels_per_element, material, element_type)
    except InvalidConfiguration as exc:
        logger.error(f"Rectilinear mesh generation failed: {exc}")
        raise

    dimension = descriptor.dimension
    node_shape = number_of_elements + 1
    logger.debug(
        f"Meshing image of size {descriptor.size} with {pixels_per_element} pixels per element "
        f"into {tuple(int(n) for n in number_of_elements)} elements."
    )

    fem_object = FEMObject(dimension=dimension)

    # 1) Nodes: one per element corner, placed on the pixel grid
    node_grid = grid_indices(node_shape)
    pixel_index = node_grid * np.array(pixels_per_element, dtype=INDEX_DTYPE)
    fem_object.add_nodes(descriptor.transform_index_to_physical_point(pixel_index))

    # 2) Registries: the material and the prototype are stored once
    material_id = fem_object.add_material(material)
    element_type_id = fem_object.add_element_type(element_type)

    # 3) Elements: corners of every cell in winding order
    cell_grid = grid_indices(number_of_elements)
    corners = cell_grid[:, np.newaxis, :] + CELL_CORNER_OFFSETS[dimension][np.newaxis, :, :]
    connectivity = corners @ grid_strides(node_shape)
    fem_object.add_elements(connectivity, material_id, element_type_id)

    fem_object.validate()
    logger.info(
        f"Generated rectilinear mesh: {fem_object.number_of_nodes} nodes, "
        f"{fem_object.number_of_elements} elements."
    )
    return fem_object


class RectilinearMeshGenerator:
    """
    Configurable wrapper around :func:`generate_rectilinear_mesh`.

    The generator keeps its configuration between runs and exposes the
    values used by the last run (`number_of_elements` in particular) for
    diagnostics. It never mutates the image, the material or the element
    type, and each call to :meth:`generate` returns a new FEMObject.

    **Example**:

        generator = RectilinearMeshGenerator(
            pixels_per_element=(5, 5),
            material=LinearElasticity(youngs_modulus=3000.0),
            element_type=Quad4Membrane(),
        )
        fem_object = generator.generate(ImageDescriptor(size=(20, 20)))
        generator.number_of_elements  # (4, 4)
    """
    def __init__(
        self,
        pixels_per_element: Optional[Sequence[int]] = None,
        material: Optional[Material] = None,
        element_type: Optional[ElementType] = None,
    ) -> None:
        self.pixels_per_element = pixels_per_element
        self.material = material
        self.element_type = element_type
        self._number_of_elements: Optional[tuple[int, ...]] = None
        self._output: Optional[FEMObject] = None

    @property
    def pixels_per_element(self) -> Optional[tuple[int, ...]]:
        """Pixels spanned by one element edge along each axis."""
        return self._pixels_per_element

    @pixels_per_element.setter
    def pixels_per_element(self, value: Optional[Sequence[int]]) -> None:
        self._pixels_per_element = None if value is None else tuple(value)

    @property
    def number_of_elements(self) -> Optional[tuple[int, ...]]:
        """Elements along each axis computed by the last successful run."""
        return self._number_of_elements

    @property
    def output(self) -> Optional[FEMObject]:
        """FEMObject produced by the last successful run."""
        return self._output

    def generate(self, image: ImageLike) -> FEMObject:
        """
        Mesh `image` with the current configuration.

        Raises:
            InvalidConfiguration: If the configuration is incomplete or invalid.
        """
        if self.pixels_per_element is None:
            raise InvalidConfiguration("Pixels per element must be set before generating a mesh.")

        fem_object = generate_rectilinear_mesh(
            image=image,
            pixels_per_element=self.pixels_per_element,
            material=self.material,
            element_type=self.element_type,
        )
        descriptor = _as_descriptor(image)
        self._number_of_elements = tuple(
            int(n) for n in compute_number_of_elements(descriptor.size, self.pixels_per_element)
        )
        self._output = fem_object
        return fem_object


def _as_descriptor(image: ImageLike) -> ImageDescriptor:
    if isinstance(image, ImageDescriptor):
        return image
    if isinstance(image, np.ndarray):
        return ImageDescriptor.from_array(image)
    raise InvalidConfiguration(
        f"Expected an ImageDescriptor or a NumPy array, got {type(image).__name__}."
    )


def _validate_configuration(
    descriptor: ImageDescriptor,
    pixels_per_element: tuple[int, ...],
    material: Material,
    element_type: ElementType,
) -> npt.NDArray[np.int64]:
    if descriptor.dimension not in SUPPORTED_DIMENSIONS:
        raise InvalidConfiguration(
            f"Rectilinear meshes are supported for {SUPPORTED_DIMENSIONS}-dimensional images, "
            f"got {descriptor.dimension} dimensions."
        )
    if not isinstance(material, Material):
        raise InvalidConfiguration(f"Expected a Material, got {type(material).__name__}.")
    if not isinstance(element_type, ElementType):
        raise InvalidConfiguration(f"Expected an ElementType, got {type(element_type).__name__}.")

    n_corners = CELL_CORNER_OFFSETS[descriptor.dimension].shape[0]
    if element_type.dimension != descriptor.dimension or element_type.number_of_nodes != n_corners:
        raise InvalidConfiguration(
            f"{element_type!r} cannot mesh a {descriptor.dimension}D image: it needs a "
            f"{descriptor.dimension}D element with {n_corners} nodes."
        )

    return compute_number_of_elements(descriptor.size, pixels_per_element)
