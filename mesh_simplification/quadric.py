"""
Quadric Error Metrics
=====================

4x4 quadric matrices and the per-face quadrics they are built from.

The fundamental quadric Q for a plane ax + by + cz + d = 0 is the 4x4 matrix:
Q = p * p^T where p = [a, b, c, d]^T

The error of a vertex v = [x, y, z, 1]^T with respect to Q is:
error(v) = v^T * Q * v

Based on: "Surface Simplification Using Quadric Error Metrics"
by Michael Garland and Paul S. Heckbert (SIGGRAPH 1997)
"""

import numpy as np
from typing import Optional

from .vector import Vector3

# Largest pivot magnitude treated as zero during inversion
INVERSE_TOLERANCE = 1e-5

# Cross products shorter than this mark a zero-area triangle
DEGENERATE_AREA_EPS = 1e-12


class Quadric:
    """
    Dense 4x4 matrix used as a vertex or face error quadric.

    Supports elementwise addition/subtraction, matrix products, evaluation
    of the quadratic form for a homogeneous point, and inversion by
    Gauss-Jordan elimination with partial pivoting.
    """

    __slots__ = ("data",)

    def __init__(self, data=None):
        """
        Args:
            data: Optional 4x4 array-like. Defaults to the zero matrix.
        """
        if data is None:
            self.data = np.zeros((4, 4))
        else:
            self.data = np.array(data, dtype=np.float64).reshape(4, 4)

    @classmethod
    def zeros(cls) -> "Quadric":
        return cls()

    @classmethod
    def identity(cls) -> "Quadric":
        return cls(np.eye(4))

    @classmethod
    def from_plane(cls, plane) -> "Quadric":
        """Fundamental quadric p * p^T of plane coefficients [a, b, c, d]."""
        plane = np.asarray(plane, dtype=np.float64)
        return cls(np.outer(plane, plane))

    def __getitem__(self, row: int) -> np.ndarray:
        return self.data[row]

    def __add__(self, other: "Quadric") -> "Quadric":
        return Quadric(self.data + other.data)

    def __sub__(self, other: "Quadric") -> "Quadric":
        return Quadric(self.data - other.data)

    def __iadd__(self, other: "Quadric") -> "Quadric":
        self.data += other.data
        return self

    def __isub__(self, other: "Quadric") -> "Quadric":
        self.data -= other.data
        return self

    def __mul__(self, other: "Quadric") -> "Quadric":
        return Quadric(self.data @ other.data)

    __matmul__ = __mul__

    def __repr__(self) -> str:
        rows = ", ".join(str(row.tolist()) for row in self.data)
        return f"Quadric([{rows}])"

    def copy(self) -> "Quadric":
        return Quadric(self.data)

    def allclose(self, other: "Quadric", atol: float = 1e-8) -> bool:
        return bool(np.allclose(self.data, other.data, atol=atol))

    def evaluate(self, v: Vector3) -> float:
        """
        Quadric error of a point.

        error = v^T * Q * v where v is [x, y, z, 1]
        """
        v_homo = v.homogeneous()
        return float(v_homo @ self.data @ v_homo)

    def split(self) -> "Quadric":
        """
        Copy with the last row replaced by [0, 0, 0, 1].

        Solving split(Q) * x = [0, 0, 0, 1]^T gives the point minimizing
        v^T * Q * v, which is the last column of the inverse.
        """
        ret = self.copy()
        ret.data[3, :] = [0.0, 0.0, 0.0, 1.0]
        return ret

    def inverse(self, tolerance: float = INVERSE_TOLERANCE) -> Optional["Quadric"]:
        """
        Invert by Gauss-Jordan elimination with partial pivoting.

        Returns:
            The inverse matrix, or None if a pivot of magnitude
            <= tolerance is met (matrix treated as singular).
        """
        a = self.data.copy()
        b = np.eye(4)

        for col in range(4):
            # Partial pivoting: largest magnitude entry at or below the diagonal
            pivot = col + int(np.argmax(np.abs(a[col:, col])))
            if abs(a[pivot, col]) <= tolerance:
                return None

            if pivot != col:
                a[[col, pivot]] = a[[pivot, col]]
                b[[col, pivot]] = b[[pivot, col]]

            for row in range(4):
                if row == col:
                    continue
                factor = a[row, col] / a[col, col]
                a[row] -= factor * a[col]
                b[row] -= factor * b[col]

        # a is now diagonal
        b /= np.diag(a)[:, None]
        return Quadric(b)


def compute_face_plane(v0: Vector3, v1: Vector3, v2: Vector3) -> Optional[np.ndarray]:
    """
    Compute the plane equation coefficients for a triangle face.

    The plane equation is: ax + by + cz + d = 0
    where [a, b, c] is the unit normal and d = -dot(normal, point_on_plane)

    The normal is not area weighted.

    Args:
        v0, v1, v2: Triangle corners

    Returns:
        Plane coefficients [a, b, c, d], or None for a zero-area triangle
    """
    # Compute normal via cross product of two edge vectors
    normal = (v0 - v2).cross(v1 - v2)
    if not normal.length() >= DEGENERATE_AREA_EPS:
        # Degenerate triangle (or non-finite corners)
        return None

    normal = normal.normalize()
    d = -normal.dot(v2)

    return np.array([normal.x, normal.y, normal.z, d])


def compute_face_quadric(v0: Vector3, v1: Vector3, v2: Vector3) -> Quadric:
    """
    Fundamental error quadric of a triangle's supporting plane.

    Zero-area triangles contribute the zero quadric.
    """
    plane = compute_face_plane(v0, v1, v2)
    if plane is None:
        return Quadric()
    return Quadric.from_plane(plane)
