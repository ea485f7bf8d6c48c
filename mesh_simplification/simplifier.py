"""
Quadric Simplifier
==================

Main mesh simplification engine: iterative edge collapse ordered by
Quadric Error Metrics, with incremental quadric and adjacency updates.

A run moves through INITIALIZING -> COLLAPSING -> COMPACTING -> DONE.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Tuple

import numpy as np
import trimesh

from .candidates import Candidate, CandidateQueue, DEFAULT_MAX_COST, DEFAULT_MAX_SQ_DISTANCE
from .exceptions import DegenerateGeometry
from .quadric import Quadric, compute_face_plane, compute_face_quadric
from .topology import MeshTopology
from .utils import arrays_to_mesh, mesh_arrays

DEGENERATE_POLICIES = ("zero", "raise")


class SimplifierState(Enum):
    INITIALIZING = "initializing"
    COLLAPSING = "collapsing"
    COMPACTING = "compacting"
    DONE = "done"


@dataclass
class CollapseRecord:
    """One performed collapse: v1 and v2 merged into new_vertex."""
    v1: int
    v2: int
    new_vertex: int
    cost: float


@dataclass
class SimplificationResult:
    vertices: np.ndarray
    faces: np.ndarray
    collapses: int


class QuadricSimplifier:
    """
    Mesh simplification using Quadric Error Metrics (QEM).

    Implements iterative edge collapse with:
    - Priority queue based on collapse cost
    - Lazy invalidation of stale candidates
    - Incremental per-vertex quadric updates
    - A removal budget of two triangles per collapse

    The engine holds the state of one run at a time; begin() resets it.
    """

    def __init__(self, max_cost: float = DEFAULT_MAX_COST,
                 max_sq_distance: float = DEFAULT_MAX_SQ_DISTANCE,
                 degenerate_policy: str = "zero",
                 verbose: bool = True):
        """
        Initialize the simplifier.

        Args:
            max_cost: Candidates costing at least this are never collapsed
            max_sq_distance: Vertex pairs at least this far apart (squared)
                             are never collapsed
            degenerate_policy: "zero" gives zero-area source triangles a zero
                               quadric, "raise" rejects them with DegenerateGeometry
            verbose: Print progress messages
        """
        if degenerate_policy not in DEGENERATE_POLICIES:
            raise ValueError(
                f"degenerate_policy must be one of {DEGENERATE_POLICIES}, got {degenerate_policy!r}"
            )
        self.max_cost = max_cost
        self.max_sq_distance = max_sq_distance
        self.degenerate_policy = degenerate_policy
        self.verbose = verbose

        # State variables (initialized per run)
        self.state: Optional[SimplifierState] = None
        self._topology: Optional[MeshTopology] = None
        self._queue: Optional[CandidateQueue] = None
        self._budget: int = 0
        self._collapse_history: Optional[List[CollapseRecord]] = None

    @property
    def topology(self) -> Optional[MeshTopology]:
        return self._topology

    @property
    def queue(self) -> Optional[CandidateQueue]:
        return self._queue

    @property
    def budget(self) -> int:
        """Triangles that may still be removed in this run."""
        return self._budget

    def simplify(self, vertices, faces, ratio: float,
                 progress_callback: Optional[Callable[[float], None]] = None) -> SimplificationResult:
        """
        Simplify a mesh given as arrays.

        Args:
            vertices: (N, 3) vertex positions
            faces: (M, 3) triangle vertex indices
            ratio: Fraction of triangles to remove, in [0, 1)
            progress_callback: Optional callback for progress updates

        Returns:
            SimplificationResult with densely renumbered arrays
        """
        self.begin(vertices, faces, ratio)

        initial_faces = self._topology.num_triangles
        max_collapses = self._budget // 2

        if self.verbose:
            print(f"Starting simplification: {initial_faces} -> "
                  f"{initial_faces - 2 * max_collapses} faces")

        collapses_done = 0
        last_progress = 0.0

        while self.step():
            collapses_done += 1

            if progress_callback is not None:
                progress = collapses_done / max(1, max_collapses)
                if progress - last_progress >= 0.05:  # Update every 5%
                    progress_callback(min(1.0, progress))
                    last_progress = progress

        vertices_out, faces_out = self.finish()

        if self.verbose:
            print(f"Simplification complete: {len(faces_out)} faces, {collapses_done} collapses")

        return SimplificationResult(vertices=vertices_out, faces=faces_out, collapses=collapses_done)

    def decimate(self, mesh: trimesh.Trimesh, ratio: float,
                 progress_callback: Optional[Callable[[float], None]] = None) -> trimesh.Trimesh:
        """
        Simplify a trimesh object.

        Args:
            mesh: Input trimesh object
            ratio: Fraction of triangles to remove, in [0, 1)
            progress_callback: Optional callback for progress updates

        Returns:
            Simplified trimesh object
        """
        vertices, faces = mesh_arrays(mesh)
        result = self.simplify(vertices, faces, ratio, progress_callback)
        return arrays_to_mesh(result.vertices, result.faces)

    def begin(self, vertices, faces, ratio: float):
        """
        Validate the input and build quadrics, adjacency and the initial queue.

        Raises:
            ValueError: ratio outside [0, 1)
            InvalidInputTopology: malformed vertex/face arrays
            DegenerateGeometry: non-finite positions, or zero-area triangles
                                with degenerate_policy="raise"
        """
        if not 0.0 <= ratio < 1.0:
            raise ValueError(f"ratio must be in [0, 1), got {ratio}")

        self.state = SimplifierState.INITIALIZING
        self._topology = MeshTopology.from_arrays(vertices, faces)
        self._queue = CandidateQueue(max_cost=self.max_cost, max_sq_distance=self.max_sq_distance)
        self._collapse_history = []

        self._compute_initial_quadrics()
        self._topology.build_incidence()
        self._initialize_edge_queue()

        self._budget = int(round(self._topology.num_triangles * ratio))
        self.state = SimplifierState.COLLAPSING

    def step(self) -> bool:
        """
        Perform the next collapse.

        Returns:
            True if a collapse was performed, False once the budget or the
            queue is exhausted (the run then moves to COMPACTING)
        """
        if self.state is SimplifierState.COMPACTING:
            return False
        self._require_state(SimplifierState.COLLAPSING)

        # Each collapse removes two triangles
        if self._budget < 2:
            self.state = SimplifierState.COMPACTING
            return False

        candidate = self._pop_live_candidate()
        if candidate is None:
            self.state = SimplifierState.COMPACTING
            return False

        self._collapse_edge(candidate)
        self._budget -= 2
        return True

    def finish(self) -> Tuple[np.ndarray, np.ndarray]:
        """
        Compact the mesh into dense output arrays.

        Returns:
            Tuple of ((K, 3) vertices, (F, 3) faces)
        """
        if self.state is SimplifierState.COLLAPSING:
            self.state = SimplifierState.COMPACTING
        self._require_state(SimplifierState.COMPACTING)

        vertices, faces = self._topology.compact()
        self.state = SimplifierState.DONE
        return vertices, faces

    def get_collapse_history(self) -> List[CollapseRecord]:
        """Get the history of edge collapses performed."""
        return self._collapse_history.copy() if self._collapse_history else []

    def _require_state(self, expected: SimplifierState):
        if self.state is not expected:
            current = self.state.value if self.state is not None else "not started"
            raise RuntimeError(f"Simplifier is {current}, expected {expected.value}")

    def _compute_initial_quadrics(self):
        """Store each face quadric and add it to its three corners."""
        topology = self._topology

        for ti, tri in enumerate(topology.triangles):
            plane = compute_face_plane(*topology.corner_positions(ti))
            if plane is None:
                if self.degenerate_policy == "raise":
                    raise DegenerateGeometry(f"Triangle {ti} {tri} has zero area")
                Q = Quadric()
            else:
                Q = Quadric.from_plane(plane)

            topology.face_quadrics[ti] = Q
            for vi in tri:
                topology.quadrics[vi] += Q

    def _initialize_edge_queue(self):
        """Queue a candidate for every triangle edge (shared edges twice)."""
        topology = self._topology

        for v1, v2, v3 in topology.triangles:
            self._queue.consider(topology, v1, v2)
            self._queue.consider(topology, v2, v3)
            self._queue.consider(topology, v1, v3)

    def _pop_live_candidate(self) -> Optional[Candidate]:
        """Pop candidates until one whose endpoints are both live."""
        merged = self._topology.merged

        while self._queue:
            candidate = self._queue.pop()
            if merged[candidate.v1] or merged[candidate.v2]:
                continue
            return candidate

        return None

    def _collapse_edge(self, candidate: Candidate):
        """
        Merge v1 and v2 into a new vertex at the candidate position.

        Triangles holding only one endpoint are relabeled to the new vertex;
        triangles holding both are dropped and their quadric is removed from
        the opposite corner. New candidates are queued from the new vertex to
        every live neighbour touched.
        """
        topology = self._topology
        v1_idx, v2_idx = candidate.v1, candidate.v2

        new_idx = topology.add_vertex(candidate.position)
        neighbors: List[int] = []

        for ti in topology.incident[v1_idx]:
            if not topology.is_valid_triangle(ti):
                continue
            if topology.contains(ti, v2_idx):
                # Triangle on the collapsed edge disappears
                opposite = topology.opposite_corner(ti, v1_idx, v2_idx)
                topology.quadrics[opposite] -= topology.face_quadrics[ti]
                neighbors.append(opposite)
            else:
                self._relabel_triangle(ti, v1_idx, new_idx, neighbors)

        for ti in topology.incident[v2_idx]:
            if topology.is_valid_triangle(ti) and not topology.contains(ti, v1_idx):
                self._relabel_triangle(ti, v2_idx, new_idx, neighbors)

        topology.merged[v1_idx] = True
        topology.merged[v2_idx] = True

        # One candidate per distinct live neighbour
        visited = set()
        for vi in neighbors:
            if topology.merged[vi] or vi in visited:
                continue
            visited.add(vi)
            self._queue.consider(topology, new_idx, vi)

        self._collapse_history.append(CollapseRecord(
            v1=v1_idx, v2=v2_idx, new_vertex=new_idx, cost=candidate.cost
        ))

    def _relabel_triangle(self, ti: int, old_idx: int, new_idx: int, neighbors: List[int]):
        """Move one corner of a surviving triangle onto the new vertex."""
        topology = self._topology
        u, w = topology.other_corners(ti, old_idx)

        new_quadric = compute_face_quadric(
            topology.positions[new_idx], topology.positions[u], topology.positions[w]
        )
        delta = new_quadric - topology.face_quadrics[ti]

        topology.quadrics[u] += delta
        topology.quadrics[w] += delta
        topology.quadrics[new_idx] += new_quadric
        topology.face_quadrics[ti] = new_quadric

        topology.replace_corner(ti, old_idx, new_idx)
        topology.incident[new_idx].append(ti)
        neighbors.extend((u, w))


def simplify(vertices, faces, ratio: float, **options) -> Tuple[np.ndarray, np.ndarray]:
    """
    Simplify a mesh given as arrays.

    Args:
        vertices: (N, 3) vertex positions
        faces: (M, 3) triangle vertex indices
        ratio: Fraction of triangles to remove, in [0, 1)
        **options: Keyword arguments for QuadricSimplifier

    Returns:
        Tuple of (vertices, faces) of the simplified mesh
    """
    options.setdefault("verbose", False)
    result = QuadricSimplifier(**options).simplify(vertices, faces, ratio)
    return result.vertices, result.faces
