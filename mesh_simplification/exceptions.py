"""Errors raised by the simplification pipeline."""


class SimplificationError(Exception):
    """Base class for errors that stop a simplification run."""


class InvalidInputTopology(SimplificationError, ValueError):
    """
    Malformed input arrays: wrong shapes, non-integer faces, indices out of
    range of the vertex array, or a triangle that repeats a vertex.
    """


class DegenerateGeometry(SimplificationError, ValueError):
    """Non-finite vertex positions, or a zero-area source triangle when rejected."""
