"""Tests for exporting meshes through meshio, PyVista and Matplotlib."""

import matplotlib.pyplot as plt
import meshio
import numpy as np
import pytest

from imagefem.pre.image import ImageDescriptor
from imagefem.pre.rectilinear import generate_rectilinear_mesh


class TestMeshio:

    def test_to_meshio(self, mesh_4x4):
        mesh = mesh_4x4.to_meshio()

        assert mesh.points.shape == (25, 3)
        assert np.all(mesh.points[:, 2] == 0.0)
        assert len(mesh.cells) == 1
        assert mesh.cells[0].type == "quad"
        assert np.array_equal(mesh.cells[0].data, mesh_4x4.connectivity)
        assert np.all(mesh.cell_data["material"][0] == 0)
        assert mesh.cell_data["element_id"][0].tolist() == list(range(16))

    def test_write_vtu(self, mesh_4x4, tmp_path):
        filename = tmp_path / "mesh.vtu"
        mesh_4x4.write(str(filename))

        mesh = meshio.read(filename)
        assert mesh.points.shape[0] == 25
        assert mesh.cells[0].data.shape == (16, 4)

    def test_hexahedron_cells(self, elasticity, hex8):
        fem_object = generate_rectilinear_mesh(ImageDescriptor(size=(4, 4, 4)), (2, 2, 2), elasticity, hex8)
        mesh = fem_object.to_meshio()

        assert mesh.points.shape == (27, 3)
        assert mesh.cells[0].type == "hexahedron"
        assert mesh.cells[0].data.shape == (8, 8)


class TestPyvista:

    def test_to_pyvista(self, mesh_4x4):
        grid = mesh_4x4.to_pyvista()
        assert grid.n_points == 25
        assert grid.n_cells == 16

    def test_hexahedron_volume(self, elasticity, hex8):
        fem_object = generate_rectilinear_mesh(ImageDescriptor(size=(4, 4, 4)), (2, 2, 2), elasticity, hex8)
        grid = fem_object.to_pyvista()
        assert grid.volume == pytest.approx(64.0)


class TestPlot:

    def test_plot_2d(self, mesh_4x4):
        ax = mesh_4x4.plot(show_node_ids=True, show_element_ids=True)
        assert len(ax.texts) == 25 + 16
        plt.close(ax.figure)

    def test_plot_into_existing_axes(self, mesh_4x4):
        fig, ax = plt.subplots()
        assert mesh_4x4.plot(ax=ax) is ax
        plt.close(fig)

    def test_plot_3d_is_rejected(self, elasticity, hex8):
        fem_object = generate_rectilinear_mesh(ImageDescriptor(size=(4, 4, 4)), (2, 2, 2), elasticity, hex8)
        with pytest.raises(ValueError, match="two-dimensional"):
            fem_object.plot()
