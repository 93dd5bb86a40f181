"""
imagefem
========
Rectilinear finite element meshes generated from raster images.

Usage:
    from imagefem import ImageDescriptor, LinearElasticity, Quad4Membrane, generate_rectilinear_mesh

    fem_object = generate_rectilinear_mesh(
        ImageDescriptor(size=(20, 20)),
        pixels_per_element=(5, 5),
        material=LinearElasticity(youngs_modulus=3000.0),
        element_type=Quad4Membrane(),
    )
"""
from imagefem.errors import ImageFEMError, InvalidConfiguration, DanglingReference, TypeMismatch
from imagefem.analysis.node import Node
from imagefem.analysis.element import Element
from imagefem.analysis.finite_elements import ElementType, Quad4Membrane, Hex8Membrane
from imagefem.analysis.fem_object import FEMObject
from imagefem.pre.image import ImageDescriptor
from imagefem.pre.material import Material, LinearElasticity
from imagefem.pre.rectilinear import RectilinearMeshGenerator, generate_rectilinear_mesh
from imagefem.logging_config import setup_logging

__all__ = [
    "ImageFEMError",
    "InvalidConfiguration",
    "DanglingReference",
    "TypeMismatch",
    "Node",
    "Element",
    "ElementType",
    "Quad4Membrane",
    "Hex8Membrane",
    "FEMObject",
    "ImageDescriptor",
    "Material",
    "LinearElasticity",
    "RectilinearMeshGenerator",
    "generate_rectilinear_mesh",
    "setup_logging",
]
