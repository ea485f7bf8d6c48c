"""
Vector3
=======

Three-component float64 vector used for vertex positions and normals.

Index 3 of a vector is the homogeneous coordinate and always reads as 1.0,
so a Vector3 can be dotted directly against a row of a 4x4 quadric.
"""

import numpy as np
from typing import Iterator, Union

Scalar = Union[int, float, np.floating]


class Vector3:
    """
    3D vector with componentwise arithmetic.

    Arithmetic follows IEEE float semantics: dividing by zero (or normalizing
    a zero-length vector) produces inf/NaN components instead of raising.
    """

    __slots__ = ("_xyz",)

    def __init__(self, x: Scalar = 0.0, y: Scalar = 0.0, z: Scalar = 0.0):
        self._xyz = np.array([x, y, z], dtype=np.float64)

    @classmethod
    def from_array(cls, values) -> "Vector3":
        """Build a vector from any length-3 sequence or array."""
        values = np.asarray(values, dtype=np.float64).reshape(3)
        return cls._wrap(values.copy())

    @classmethod
    def _wrap(cls, xyz: np.ndarray) -> "Vector3":
        vec = cls.__new__(cls)
        vec._xyz = xyz
        return vec

    @property
    def x(self) -> float:
        return float(self._xyz[0])

    @property
    def y(self) -> float:
        return float(self._xyz[1])

    @property
    def z(self) -> float:
        return float(self._xyz[2])

    def __getitem__(self, idx: int) -> float:
        if idx == 3:
            return 1.0
        if idx not in (0, 1, 2):
            raise IndexError(f"Vector3 index out of range: {idx}")
        return float(self._xyz[idx])

    def __iter__(self) -> Iterator[float]:
        return iter(self._xyz.tolist())

    def __len__(self) -> int:
        return 3

    def _operand(self, other):
        if isinstance(other, Vector3):
            return other._xyz
        return other

    def __add__(self, other) -> "Vector3":
        return Vector3._wrap(self._xyz + self._operand(other))

    __radd__ = __add__

    def __sub__(self, other) -> "Vector3":
        return Vector3._wrap(self._xyz - self._operand(other))

    def __rsub__(self, other) -> "Vector3":
        return Vector3._wrap(self._operand(other) - self._xyz)

    def __mul__(self, other) -> "Vector3":
        return Vector3._wrap(self._xyz * self._operand(other))

    __rmul__ = __mul__

    def __truediv__(self, other) -> "Vector3":
        with np.errstate(divide="ignore", invalid="ignore"):
            return Vector3._wrap(self._xyz / self._operand(other))

    def __neg__(self) -> "Vector3":
        return Vector3._wrap(-self._xyz)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Vector3):
            return NotImplemented
        return bool(np.array_equal(self._xyz, other._xyz))

    def __hash__(self):
        return hash(tuple(self._xyz.tolist()))

    def __repr__(self) -> str:
        return f"Vector3({self.x!r}, {self.y!r}, {self.z!r})"

    def dot(self, other: "Vector3") -> float:
        return float(np.dot(self._xyz, other._xyz))

    def cross(self, other: "Vector3") -> "Vector3":
        a, b = self._xyz, other._xyz
        return Vector3(
            a[1] * b[2] - a[2] * b[1],
            a[2] * b[0] - a[0] * b[2],
            a[0] * b[1] - a[1] * b[0],
        )

    def length_squared(self) -> float:
        return self.dot(self)

    def length(self) -> float:
        return float(np.sqrt(self.length_squared()))

    def normalize(self) -> "Vector3":
        """Return the unit vector. Not guarded: a zero vector yields NaN."""
        return self / self.length()

    def minimum(self, other: "Vector3") -> "Vector3":
        return Vector3._wrap(np.minimum(self._xyz, other._xyz))

    def maximum(self, other: "Vector3") -> "Vector3":
        return Vector3._wrap(np.maximum(self._xyz, other._xyz))

    def is_finite(self) -> bool:
        return bool(np.all(np.isfinite(self._xyz)))

    def homogeneous(self) -> np.ndarray:
        """Return (x, y, z, 1) as a 4-element array."""
        return np.append(self._xyz, 1.0)

    def to_array(self) -> np.ndarray:
        return self._xyz.copy()
