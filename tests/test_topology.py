import numpy as np
import pytest

from mesh_simplification.exceptions import DegenerateGeometry, InvalidInputTopology
from mesh_simplification.topology import MeshTopology, validate_mesh_arrays
from mesh_simplification.vector import Vector3


def test_from_arrays(tetrahedron):
    vertices, faces = tetrahedron
    topology = MeshTopology.from_arrays(vertices, faces)

    assert topology.num_vertices == 4
    assert topology.num_triangles == 4
    assert topology.triangle(0) == tuple(faces[0])
    assert topology.vertex(1) == Vector3.from_array(vertices[1])
    assert topology.merged == [False] * 4
    assert topology.valid_triangle_count() == 4


def test_build_incidence(tetrahedron):
    topology = MeshTopology.from_arrays(*tetrahedron)
    topology.build_incidence()

    # Every tetrahedron vertex touches three triangles
    for vi in range(4):
        assert len(topology.incident[vi]) == 3
        for ti in topology.incident[vi]:
            assert topology.contains(ti, vi)


@pytest.mark.parametrize("faces", [
    [[0, 1, 4]],
    [[-1, 1, 2]],
    [[0, 1, 2], [2, 3, 7]],
])
def test_out_of_range_indices_rejected(faces):
    vertices = np.zeros((4, 3))
    with pytest.raises(InvalidInputTopology):
        MeshTopology.from_arrays(vertices, faces)


def test_bad_shapes_rejected():
    with pytest.raises(InvalidInputTopology):
        validate_mesh_arrays(np.zeros((4, 2)), [[0, 1, 2]])
    with pytest.raises(InvalidInputTopology):
        validate_mesh_arrays(np.zeros((4, 3)), [[0, 1, 2, 3]])
    with pytest.raises(InvalidInputTopology):
        validate_mesh_arrays(np.zeros((4, 3)), [[0.0, 1.0, 2.0]])


def test_repeated_vertex_rejected():
    with pytest.raises(InvalidInputTopology, match="repeats"):
        validate_mesh_arrays(np.eye(3), [[0, 1, 1]])


def test_invalid_topology_is_value_error():
    with pytest.raises(ValueError):
        validate_mesh_arrays(np.eye(3), [[0, 1, 3]])


def test_non_finite_position_rejected():
    vertices = np.eye(3)
    vertices[1, 2] = np.nan
    with pytest.raises(DegenerateGeometry):
        validate_mesh_arrays(vertices, [[0, 1, 2]])


def test_empty_mesh_is_valid():
    vertices, faces = validate_mesh_arrays([], [])
    assert vertices.shape == (0, 3)
    assert faces.shape == (0, 3)


def test_empty_vertices_with_wrong_width_rejected():
    with pytest.raises(InvalidInputTopology):
        validate_mesh_arrays(np.zeros((0, 2)), [])


def test_corner_helpers():
    topology = MeshTopology.from_arrays(np.zeros((5, 3)), [[0, 1, 2]])

    assert topology.other_corners(0, 0) == (1, 2)
    assert topology.other_corners(0, 1) == (2, 0)
    assert topology.other_corners(0, 2) == (0, 1)
    assert topology.opposite_corner(0, 2, 0) == 1

    topology.replace_corner(0, 1, 4)
    assert topology.triangle(0) == (0, 4, 2)
    assert not topology.contains(0, 1)


def test_add_vertex_and_merged_flags():
    topology = MeshTopology.from_arrays(np.eye(3), [[0, 1, 2]])
    new_idx = topology.add_vertex(Vector3(1, 1, 1))

    assert new_idx == 3
    assert topology.merged[new_idx] is False
    assert topology.incident[new_idx] == []
    assert topology.quadrics[new_idx].allclose(topology.quadrics[0])

    topology.merged[1] = True
    assert not topology.is_valid_triangle(0)
    assert topology.live_vertices() == [0, 2, 3]


def test_compact_renumbers_in_first_seen_order():
    vertices = np.arange(15, dtype=np.float64).reshape(5, 3)
    topology = MeshTopology.from_arrays(vertices, [[2, 3, 0], [0, 1, 3], [3, 4, 2]])
    topology.merged[1] = True

    out_vertices, out_faces = topology.compact()

    # Vertex 1 only appears in the dropped triangle
    assert out_faces.tolist() == [[0, 1, 2], [1, 3, 0]]
    assert np.array_equal(out_vertices, vertices[[2, 3, 0, 4]])
    assert out_faces.dtype == np.int64


def test_compact_with_no_valid_triangles():
    topology = MeshTopology.from_arrays(np.eye(3), [[0, 1, 2]])
    topology.merged[0] = True
    out_vertices, out_faces = topology.compact()
    assert out_vertices.shape == (0, 3)
    assert out_faces.shape == (0, 3)
