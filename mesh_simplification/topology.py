"""
Mesh Topology Store
===================

Index-based arrays of vertex positions and triangles, plus the per-vertex
and per-triangle bookkeeping used by the collapse loop:

- incident-triangle lists (append-only, so they may list triangles that
  are no longer valid; liveness is checked through the merged flags)
- aggregate vertex quadrics and stored face quadrics
- a permanent `merged` flag per vertex

Vertices are only ever appended; triangles are relabeled in place. Nothing
is physically removed until compact().
"""

import numpy as np
from typing import List, Optional, Tuple

from .exceptions import DegenerateGeometry, InvalidInputTopology
from .quadric import Quadric
from .vector import Vector3


def validate_mesh_arrays(vertices, faces) -> Tuple[np.ndarray, np.ndarray]:
    """
    Check and normalize raw input arrays.

    Args:
        vertices: (N, 3) array-like of positions
        faces: (M, 3) array-like of 0-based vertex indices

    Returns:
        Tuple of (float64 (N, 3) vertices, int64 (M, 3) faces)

    Raises:
        InvalidInputTopology: bad shapes, non-integer indices, out of range
            indices or a triangle repeating a vertex
        DegenerateGeometry: non-finite positions
    """
    try:
        vertices = np.asarray(vertices, dtype=np.float64)
        faces = np.asarray(faces)
    except (TypeError, ValueError) as e:
        raise InvalidInputTopology(f"Cannot interpret mesh arrays: {e}") from e

    if vertices.ndim == 1 and vertices.size == 0:
        vertices = vertices.reshape(0, 3)
    if faces.size == 0:
        faces = np.zeros((0, 3), dtype=np.int64)

    if vertices.ndim != 2 or vertices.shape[1] != 3:
        raise InvalidInputTopology(f"Vertices must have shape (N, 3), got {vertices.shape}")
    if faces.ndim != 2 or faces.shape[1] != 3:
        raise InvalidInputTopology(f"Faces must have shape (M, 3), got {faces.shape}")
    if faces.dtype.kind not in "iu":
        raise InvalidInputTopology(f"Face indices must be integers, got dtype {faces.dtype}")

    faces = faces.astype(np.int64)
    n_vertices = len(vertices)

    out_of_range = (faces < 0) | (faces >= n_vertices)
    if out_of_range.any():
        face_idx = int(np.argwhere(out_of_range.any(axis=1))[0, 0])
        raise InvalidInputTopology(
            f"Triangle {face_idx} {faces[face_idx].tolist()} references a vertex "
            f"outside [0, {n_vertices})"
        )

    repeated = (faces[:, 0] == faces[:, 1]) | (faces[:, 1] == faces[:, 2]) | (faces[:, 0] == faces[:, 2])
    if repeated.any():
        face_idx = int(np.argmax(repeated))
        raise InvalidInputTopology(
            f"Triangle {face_idx} {faces[face_idx].tolist()} repeats a vertex"
        )

    if not np.all(np.isfinite(vertices)):
        vertex_idx = int(np.argwhere(~np.isfinite(vertices).all(axis=1))[0, 0])
        raise DegenerateGeometry(f"Vertex {vertex_idx} has a non-finite position")

    return vertices, faces


class MeshTopology:
    """
    Mutable vertex/triangle store for one simplification run.
    """

    def __init__(self, positions: List[Vector3], triangles: List[List[int]]):
        """
        Args:
            positions: Vertex positions (already validated)
            triangles: Triangles as lists of three vertex indices
        """
        self.positions = positions
        self.triangles = triangles
        self.merged: List[bool] = [False] * len(positions)
        self.quadrics: List[Quadric] = [Quadric() for _ in range(len(positions))]
        self.face_quadrics: List[Quadric] = [Quadric() for _ in range(len(triangles))]
        self.incident: List[List[int]] = [[] for _ in range(len(positions))]

    @classmethod
    def from_arrays(cls, vertices, faces) -> "MeshTopology":
        """Validate raw arrays and build a store from them."""
        vertices, faces = validate_mesh_arrays(vertices, faces)
        positions = [Vector3.from_array(v) for v in vertices]
        triangles = [list(f) for f in faces.tolist()]
        return cls(positions, triangles)

    @property
    def num_vertices(self) -> int:
        return len(self.positions)

    @property
    def num_triangles(self) -> int:
        return len(self.triangles)

    def vertex(self, vi: int) -> Vector3:
        return self.positions[vi]

    def triangle(self, ti: int) -> Tuple[int, int, int]:
        return tuple(self.triangles[ti])

    def add_vertex(self, position: Vector3, quadric: Optional[Quadric] = None) -> int:
        """Append a live vertex and return its index."""
        self.positions.append(position)
        self.merged.append(False)
        self.quadrics.append(quadric if quadric is not None else Quadric())
        self.incident.append([])
        return len(self.positions) - 1

    def build_incidence(self):
        """Append every triangle index to each of its corners' lists."""
        for ti, tri in enumerate(self.triangles):
            for vi in tri:
                self.incident[vi].append(ti)

    def contains(self, ti: int, vi: int) -> bool:
        return vi in self.triangles[ti]

    def is_valid_triangle(self, ti: int) -> bool:
        merged = self.merged
        return not any(merged[vi] for vi in self.triangles[ti])

    def valid_triangles(self) -> List[int]:
        return [ti for ti in range(len(self.triangles)) if self.is_valid_triangle(ti)]

    def valid_triangle_count(self) -> int:
        return len(self.valid_triangles())

    def live_vertices(self) -> List[int]:
        return [vi for vi, merged in enumerate(self.merged) if not merged]

    def other_corners(self, ti: int, vi: int) -> Tuple[int, int]:
        """The two corners of triangle ti other than vi."""
        a, b, c = self.triangles[ti]
        if a == vi:
            return b, c
        if b == vi:
            return c, a
        return a, b

    def opposite_corner(self, ti: int, va: int, vb: int) -> int:
        """The corner of triangle ti that is neither va nor vb."""
        for vi in self.triangles[ti]:
            if vi != va and vi != vb:
                return vi
        raise ValueError(f"Triangle {ti} has no corner opposite ({va}, {vb})")

    def replace_corner(self, ti: int, old: int, new: int):
        tri = self.triangles[ti]
        tri[tri.index(old)] = new

    def corner_positions(self, ti: int) -> Tuple[Vector3, Vector3, Vector3]:
        a, b, c = self.triangles[ti]
        return self.positions[a], self.positions[b], self.positions[c]

    def compact(self) -> Tuple[np.ndarray, np.ndarray]:
        """
        Drop invalid triangles and renumber referenced vertices densely.

        Vertices get new indices in first-seen order while scanning the
        triangle array.

        Returns:
            Tuple of ((K, 3) float64 vertices, (F, 3) int64 faces)
        """
        remap = {}
        out_vertices = []
        out_faces = []

        for ti, tri in enumerate(self.triangles):
            if not self.is_valid_triangle(ti):
                continue
            new_face = []
            for vi in tri:
                if vi not in remap:
                    remap[vi] = len(out_vertices)
                    out_vertices.append(self.positions[vi].to_array())
                new_face.append(remap[vi])
            out_faces.append(new_face)

        vertices_array = np.array(out_vertices) if out_vertices else np.zeros((0, 3))
        faces_array = np.array(out_faces, dtype=np.int64) if out_faces else np.zeros((0, 3), dtype=np.int64)
        return vertices_array, faces_array
