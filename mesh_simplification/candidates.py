"""
Edge Collapse Candidates
========================

Priority queue of proposed vertex-pair collapses ordered by quadric error.

Candidates are appended to a backing list and never removed; the heap holds
(cost, index) pairs into that list. Entries whose endpoints have since been
merged are stale and must be skipped by whoever pops them.
"""

import heapq
import math
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .quadric import Quadric
from .topology import MeshTopology
from .vector import Vector3

# Ceilings large enough to never trigger on real meshes
DEFAULT_MAX_COST = 1e50
DEFAULT_MAX_SQ_DISTANCE = 1e50


@dataclass
class Candidate:
    """A proposed collapse of (v1, v2) into a single vertex at `position`."""
    v1: int
    v2: int
    quadric: Quadric
    position: Vector3
    cost: float


class CandidateQueue:
    """
    Min-priority queue of edge collapse candidates with lazy invalidation.
    """

    def __init__(self, max_cost: float = DEFAULT_MAX_COST,
                 max_sq_distance: float = DEFAULT_MAX_SQ_DISTANCE):
        """
        Args:
            max_cost: Candidates with cost at or above this are rejected
            max_sq_distance: Vertex pairs whose squared distance is at or
                             above this are rejected
        """
        self.max_cost = max_cost
        self.max_sq_distance = max_sq_distance
        self.candidates: List[Candidate] = []
        self._heap: List[Tuple[float, int]] = []

    def __len__(self) -> int:
        return len(self._heap)

    def __bool__(self) -> bool:
        return bool(self._heap)

    def consider(self, topology: MeshTopology, v1_idx: int, v2_idx: int) -> Optional[Candidate]:
        """
        Build the collapse candidate for a vertex pair and enqueue it.

        The merge point minimizes the combined quadric when split(Q) is
        invertible, otherwise the edge midpoint is used.

        Returns:
            The enqueued candidate, or None if it was rejected
        """
        p1 = topology.positions[v1_idx]
        p2 = topology.positions[v2_idx]

        if (p1 - p2).length_squared() >= self.max_sq_distance:
            return None

        Q = topology.quadrics[v1_idx] + topology.quadrics[v2_idx]

        inv = Q.split().inverse()
        if inv is not None:
            position = Vector3(inv[0][3], inv[1][3], inv[2][3])
        else:
            # Singular quadric (e.g. flat neighbourhood)
            position = (p1 + p2) * 0.5

        cost = Q.evaluate(position)
        if not math.isfinite(cost) or cost >= self.max_cost:
            return None

        candidate = Candidate(v1=v1_idx, v2=v2_idx, quadric=Q, position=position, cost=cost)
        self.candidates.append(candidate)
        heapq.heappush(self._heap, (cost, len(self.candidates) - 1))
        return candidate

    def pop(self) -> Optional[Candidate]:
        """Remove and return the cheapest candidate, or None when empty."""
        if not self._heap:
            return None
        _, index = heapq.heappop(self._heap)
        return self.candidates[index]
