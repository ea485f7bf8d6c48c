import numpy as np
import pytest
import trimesh

from mesh_simplification.utils import (
    arrays_to_mesh,
    create_plane,
    create_sample_mesh,
    create_tetrahedron,
    get_mesh_info,
    load_mesh,
    mesh_arrays,
    print_mesh_info,
    save_mesh,
)


def test_tetrahedron_is_closed():
    mesh = create_tetrahedron()
    info = get_mesh_info(mesh)

    assert info['vertices'] == 4
    assert info['faces'] == 4
    assert info['is_watertight']
    assert info['boundary_edges'] == 0


def test_plane_has_boundary():
    mesh = create_plane(rows=2, cols=2)
    assert len(mesh.faces) == 2
    assert np.allclose(mesh.vertices[:, 2], 0.0)
    assert get_mesh_info(mesh)['boundary_edges'] == 4

    assert len(create_plane(rows=4, cols=5).faces) == 2 * 3 * 4


@pytest.mark.parametrize("kind", ["sphere", "torus", "cube", "cylinder", "tetrahedron", "plane"])
def test_sample_meshes(kind):
    mesh = create_sample_mesh(kind)
    assert len(mesh.faces) > 0


def test_unknown_sample_mesh():
    with pytest.raises(ValueError):
        create_sample_mesh("teapot")


def test_arrays_round_trip_keeps_order():
    vertices = np.array([[0, 0, 0], [0, 0, 0], [1, 0, 0], [0, 1, 0]], dtype=float)
    faces = np.array([[0, 2, 3]])
    mesh = arrays_to_mesh(vertices, faces)

    # Duplicate and unreferenced vertices are kept
    out_vertices, out_faces = mesh_arrays(mesh)
    assert np.array_equal(out_vertices, vertices)
    assert np.array_equal(out_faces, faces)
    assert out_faces.dtype == np.int64


def test_empty_mesh_info():
    mesh = arrays_to_mesh(np.zeros((0, 3)), np.zeros((0, 3)))
    info = get_mesh_info(mesh)
    assert info['faces'] == 0
    assert info['area'] == 0.0


def test_save_and_load_obj(tmp_path):
    mesh = trimesh.creation.icosphere(subdivisions=1)
    path = tmp_path / "sphere.obj"

    save_mesh(mesh, str(path))
    loaded = load_mesh(str(path))

    assert isinstance(loaded, trimesh.Trimesh)
    assert len(loaded.faces) == len(mesh.faces)
    assert np.isclose(loaded.area, mesh.area)


def test_quiet_save_and_load(tmp_path, capsys):
    path = tmp_path / "tetra.ply"

    save_mesh(create_tetrahedron(), str(path), verbose=False)
    loaded = load_mesh(str(path), verbose=False)

    assert len(loaded.faces) == 4
    assert capsys.readouterr().out == ""


def test_print_mesh_info(capsys):
    print_mesh_info(create_plane(rows=3, cols=3), "Grid")

    out = capsys.readouterr().out
    assert "Grid Information:" in out
    assert "Faces:           8" in out
    assert "Boundary Edges:  8" in out
