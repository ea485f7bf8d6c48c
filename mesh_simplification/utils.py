"""
Utility Functions
=================

Mesh loading/saving and sample mesh creation utilities.
"""

from typing import Tuple

import numpy as np
import trimesh


def load_mesh(path: str, verbose: bool = True) -> trimesh.Trimesh:
    """
    Load a triangle mesh from file.

    Supports: OBJ, PLY, STL, OFF, and other formats supported by trimesh.
    Vertices are kept in file order (no merging or reordering).

    Args:
        path: Path to mesh file
        verbose: Print a loading message

    Returns:
        Loaded trimesh object
    """
    if verbose:
        print(f"Loading the mesh from {path}")
    mesh = trimesh.load(path, force='mesh', process=False)

    if isinstance(mesh, trimesh.Scene):
        # Convert scene to single mesh
        meshes = [geom for geom in mesh.geometry.values() if isinstance(geom, trimesh.Trimesh)]
        if not meshes:
            raise ValueError(f"No valid meshes found in {path}")
        mesh = trimesh.util.concatenate(meshes)

    if not isinstance(mesh, trimesh.Trimesh):
        raise ValueError(f"No triangle mesh found in {path}")

    return mesh


def save_mesh(mesh: trimesh.Trimesh, path: str, verbose: bool = True):
    """
    Save a mesh to file. The format follows the file extension.

    Args:
        mesh: Mesh to save
        path: Output path
        verbose: Print the saved path
    """
    mesh.export(path)
    if verbose:
        print(f"Saved mesh to: {path}")


def mesh_arrays(mesh: trimesh.Trimesh) -> Tuple[np.ndarray, np.ndarray]:
    """Vertex and face arrays of a trimesh object as float64 / int64 copies."""
    return (np.asarray(mesh.vertices, dtype=np.float64).copy(),
            np.asarray(mesh.faces, dtype=np.int64).copy())


def arrays_to_mesh(vertices: np.ndarray, faces: np.ndarray) -> trimesh.Trimesh:
    """Wrap arrays in a trimesh object without merging or reordering."""
    faces = np.asarray(faces, dtype=np.int64).reshape(-1, 3)
    return trimesh.Trimesh(vertices=np.asarray(vertices).reshape(-1, 3), faces=faces, process=False)


def create_tetrahedron(size: float = 1.0) -> trimesh.Trimesh:
    """Regular tetrahedron with outward-facing triangles."""
    vertices = np.array([
        [1, 1, 1],
        [1, -1, -1],
        [-1, 1, -1],
        [-1, -1, 1],
    ], dtype=np.float64) * size
    faces = np.array([
        [0, 1, 2],
        [0, 3, 1],
        [0, 2, 3],
        [1, 3, 2],
    ])
    return arrays_to_mesh(vertices, faces)


def create_plane(rows: int = 2, cols: int = 2, size: float = 1.0) -> trimesh.Trimesh:
    """
    Create a flat grid in the z = 0 plane (an open surface).

    Args:
        rows: Number of vertex rows
        cols: Number of vertex columns
        size: Side length of the square

    Returns:
        Planar mesh with 2 * (rows - 1) * (cols - 1) triangles
    """
    x = np.linspace(0, size, cols)
    y = np.linspace(0, size, rows)
    X, Y = np.meshgrid(x, y)
    vertices = np.column_stack([X.flatten(), Y.flatten(), np.zeros(rows * cols)])

    # Two triangles per grid cell
    faces = []
    for i in range(rows - 1):
        for j in range(cols - 1):
            idx = i * cols + j
            faces.append([idx, idx + 1, idx + cols])
            faces.append([idx + 1, idx + cols + 1, idx + cols])

    return arrays_to_mesh(vertices, np.array(faces))


def create_sample_mesh(mesh_type: str = "sphere") -> trimesh.Trimesh:
    """
    Create a sample mesh for testing.

    Args:
        mesh_type: Type of mesh to create:
            - "sphere": Icosphere
            - "torus": Torus
            - "cube": Subdivided cube
            - "cylinder": Cylinder
            - "tetrahedron": Regular tetrahedron
            - "plane": Flat open grid

    Returns:
        Generated trimesh object
    """
    if mesh_type == "sphere":
        mesh = trimesh.creation.icosphere(subdivisions=3, radius=1.0)
    elif mesh_type == "torus":
        mesh = trimesh.creation.torus(major_radius=1.0, minor_radius=0.3,
                                      major_sections=32, minor_sections=16)
    elif mesh_type == "cube":
        mesh = trimesh.creation.box(extents=[1, 1, 1])
        # Subdivide for more faces
        for _ in range(3):
            mesh = mesh.subdivide()
    elif mesh_type == "cylinder":
        mesh = trimesh.creation.cylinder(radius=0.5, height=2.0, sections=32)
    elif mesh_type == "tetrahedron":
        mesh = create_tetrahedron()
    elif mesh_type == "plane":
        mesh = create_plane(rows=16, cols=16)
    else:
        raise ValueError(f"Unknown sample mesh type: {mesh_type}")

    return mesh


def get_mesh_info(mesh: trimesh.Trimesh) -> dict:
    """
    Get basic information about a mesh.

    Args:
        mesh: Input mesh

    Returns:
        Dictionary of mesh properties
    """
    info = {
        'vertices': len(mesh.vertices),
        'faces': len(mesh.faces),
    }

    if len(mesh.faces) == 0:
        info.update({'is_watertight': False, 'area': 0.0, 'boundary_edges': 0})
        return info

    info['is_watertight'] = bool(mesh.is_watertight)
    info['area'] = float(mesh.area)
    info['bounds'] = mesh.bounds.tolist()

    # Count boundary edges
    edge_count = {}
    for face in mesh.faces:
        for i in range(3):
            edge = tuple(sorted([face[i], face[(i + 1) % 3]]))
            edge_count[edge] = edge_count.get(edge, 0) + 1

    info['boundary_edges'] = sum(1 for count in edge_count.values() if count == 1)

    return info


def print_mesh_info(mesh: trimesh.Trimesh, name: str = "Mesh"):
    """
    Print mesh information to console.

    Args:
        mesh: Input mesh
        name: Name to display
    """
    info = get_mesh_info(mesh)

    print(f"\n{name} Information:")
    print("-" * 40)
    print(f"  Vertices:        {info['vertices']}")
    print(f"  Faces:           {info['faces']}")
    print(f"  Boundary Edges:  {info['boundary_edges']}")
    print(f"  Watertight:      {info['is_watertight']}")
    print(f"  Surface Area:    {info['area']}")
