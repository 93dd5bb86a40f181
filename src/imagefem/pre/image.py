"""
Image Descriptor
================
The geometric description of a raster image: pixel extent, spacing, origin
and direction along each axis.

Axis 0 is x (columns), axis 1 is y (rows) and axis 2 is z (slices). NumPy
arrays index the other way round, which :meth:`ImageDescriptor.from_array`
takes care of.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from numbers import Integral
from typing import TYPE_CHECKING, Optional, Sequence

import numpy as np

from imagefem.config import COORDINATE_DTYPE
from imagefem.errors import InvalidConfiguration

if TYPE_CHECKING:
    import numpy.typing as npt


@dataclass(frozen=True, eq=False)
class ImageDescriptor:
    """
    Read-only geometry of an image.

    Two descriptors are equal when size, spacing, origin and direction all
    match.

    Attributes:
        size: Number of pixels along each axis (x, y[, z]).
        spacing: Physical pixel size along each axis. Defaults to 1.0.
        origin: Physical coordinates of pixel index 0. Defaults to 0.0.
        direction: Direction cosine matrix (D x D). Defaults to identity.
    """
    size: tuple[int, ...]
    spacing: tuple[float, ...] = field(default=())
    origin: tuple[float, ...] = field(default=())
    direction: Optional[npt.NDArray[np.float64]] = field(default=None)

    def __post_init__(self) -> None:
        for axis, s in enumerate(self.size):
            if isinstance(s, bool) or not isinstance(s, Integral):
                raise InvalidConfiguration(f"Image size must be integral, got {s!r} along axis {axis}.")
        size = tuple(int(s) for s in self.size)
        dimension = len(size)
        if dimension == 0:
            raise InvalidConfiguration("Image must have at least one axis.")
        if any(s < 1 for s in size):
            raise InvalidConfiguration(f"Image size must be at least 1 along every axis, got {size}.")

        spacing = tuple(float(s) for s in self.spacing) or (1.0,) * dimension
        origin = tuple(float(o) for o in self.origin) or (0.0,) * dimension
        if len(spacing) != dimension or len(origin) != dimension:
            raise InvalidConfiguration(
                f"Spacing {spacing} and origin {origin} must have {dimension} entries like size {size}."
            )
        if any(not math.isfinite(s) or s <= 0.0 for s in spacing):
            raise InvalidConfiguration(f"Pixel spacing must be positive and finite, got {spacing}.")
        if not all(math.isfinite(o) for o in origin):
            raise InvalidConfiguration(f"Origin must be finite, got {origin}.")

        if self.direction is None:
            direction = np.eye(dimension, dtype=COORDINATE_DTYPE)
        else:
            direction = np.array(self.direction, dtype=COORDINATE_DTYPE)
        if direction.shape != (dimension, dimension):
            raise InvalidConfiguration(
                f"Direction must be a {dimension}x{dimension} matrix, got shape {direction.shape}."
            )
        if not np.all(np.isfinite(direction)):
            raise InvalidConfiguration("Direction must be finite.")
        direction.setflags(write=False)

        # frozen dataclass: normalised values are written through object.__setattr__
        object.__setattr__(self, "size", size)
        object.__setattr__(self, "spacing", spacing)
        object.__setattr__(self, "origin", origin)
        object.__setattr__(self, "direction", direction)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ImageDescriptor):
            return NotImplemented
        return (
            self.size == other.size
            and self.spacing == other.spacing
            and self.origin == other.origin
            and np.array_equal(self.direction, other.direction)
        )

    def __hash__(self) -> int:
        # + 0.0 folds -0.0 into 0.0 so equal directions hash alike
        return hash((self.size, self.spacing, self.origin, (self.direction + 0.0).tobytes()))

    @classmethod
    def from_array(
        cls,
        array: npt.ArrayLike,
        spacing: Sequence[float] = (),
        origin: Sequence[float] = (),
        direction: Optional[npt.ArrayLike] = None,
    ) -> ImageDescriptor:
        """
        Describe a NumPy image of shape (rows, cols) or (slices, rows, cols).

        `spacing` and `origin` are given in (x, y[, z]) order.
        """
        shape = np.shape(array)
        return cls(
            size=tuple(reversed(shape)),
            spacing=tuple(spacing),
            origin=tuple(origin),
            direction=None if direction is None else np.asarray(direction),
        )

    @property
    def dimension(self) -> int:
        """Number of image axes."""
        return len(self.size)

    @property
    def number_of_pixels(self) -> int:
        return int(np.prod(self.size))

    def transform_index_to_physical_point(self, index: npt.ArrayLike) -> npt.NDArray[np.float64]:
        """
        Map continuous pixel indices to physical coordinates.

        point = origin + direction @ (spacing * index)

        Args:
            index: One index (D,) or an array of indices (n, D).

        Returns:
            Physical point(s) with the same shape as `index`.
        """
        index = np.asarray(index, dtype=COORDINATE_DTYPE)
        scaled = index * np.asarray(self.spacing, dtype=COORDINATE_DTYPE)
        return np.asarray(self.origin, dtype=COORDINATE_DTYPE) + scaled @ self.direction.T
