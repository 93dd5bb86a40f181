"""
Exceptions
==========
Error kinds raised while building image meshes.

Classes:
    ImageFEMError: Base class of every error raised by the package.
    InvalidConfiguration: Bad generator input, rejected before any mesh is built.
    DanglingReference: An element refers to something absent from its container.
    TypeMismatch: A typed accessor found an object of another type.
"""


class ImageFEMError(Exception):
    """Base class for errors raised by imagefem."""


class InvalidConfiguration(ImageFEMError, ValueError):
    """Raised when the image, spacing, material or element type cannot produce a mesh."""


class DanglingReference(ImageFEMError, RuntimeError):
    """Raised when an element references a node, material or element type missing from the container."""


class TypeMismatch(ImageFEMError, TypeError):
    """Raised when an object is not of the type requested by a typed accessor."""
