import numpy as np
import pytest
import trimesh

from mesh_simplification.utils import create_plane, create_tetrahedron


@pytest.fixture
def tetrahedron():
    mesh = create_tetrahedron()
    return np.asarray(mesh.vertices), np.asarray(mesh.faces)


@pytest.fixture
def quad():
    """Unit square split into two coplanar triangles sharing the 1-2 diagonal."""
    mesh = create_plane(rows=2, cols=2)
    return np.asarray(mesh.vertices), np.asarray(mesh.faces)


@pytest.fixture
def sphere():
    mesh = trimesh.creation.icosphere(subdivisions=2, radius=1.0)
    return np.asarray(mesh.vertices), np.asarray(mesh.faces)


@pytest.fixture
def sphere_mesh():
    return trimesh.creation.icosphere(subdivisions=2, radius=1.0)
