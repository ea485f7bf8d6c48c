"""
Mesh Simplification using Quadric Error Metrics (QEM)
=====================================================

Triangle mesh decimation by iterative edge collapse, following
"Surface Simplification Using Quadric Error Metrics"
by Michael Garland and Paul S. Heckbert (SIGGRAPH 1997).
"""

from .vector import Vector3
from .quadric import Quadric, compute_face_plane, compute_face_quadric
from .topology import MeshTopology
from .candidates import Candidate, CandidateQueue
from .simplifier import QuadricSimplifier, SimplificationResult, SimplifierState, simplify
from .evaluation import MeshEvaluator
from .exceptions import SimplificationError, InvalidInputTopology, DegenerateGeometry

__version__ = "1.0.0"
__all__ = [
    "Vector3", "Quadric", "compute_face_plane", "compute_face_quadric",
    "MeshTopology", "Candidate", "CandidateQueue",
    "QuadricSimplifier", "SimplificationResult", "SimplifierState", "simplify",
    "MeshEvaluator",
    "SimplificationError", "InvalidInputTopology", "DegenerateGeometry",
]
