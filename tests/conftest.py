"""pytest configuration and fixtures for imagefem tests."""

import matplotlib
import pytest

matplotlib.use("Agg")

from imagefem.analysis.finite_elements import Hex8Membrane, Quad4Membrane
from imagefem.pre.image import ImageDescriptor
from imagefem.pre.material import LinearElasticity


@pytest.fixture
def elasticity():
    """Material used by the membrane mesh tests."""
    return LinearElasticity(
        name="membrane",
        youngs_modulus=3000.0,
        cross_sectional_area=0.02,
        moment_of_inertia=0.004,
    )


@pytest.fixture
def quad4():
    return Quad4Membrane()


@pytest.fixture
def hex8():
    return Hex8Membrane()


@pytest.fixture
def image_20x20():
    """A 20 x 20 pixel image with unit spacing at the origin."""
    return ImageDescriptor(size=(20, 20))


@pytest.fixture
def mesh_4x4(image_20x20, elasticity, quad4):
    """4 x 4 element mesh of a 20 x 20 image."""
    from imagefem.pre.rectilinear import generate_rectilinear_mesh

    return generate_rectilinear_mesh(image_20x20, (5, 5), elasticity, quad4)
