"""
Mesh Evaluation Module
======================

Quantitative evaluation of a simplification result:
- Hausdorff distance
- Chamfer distance
- Vertex/Face count statistics
- Surface area change
"""

from typing import Dict, Tuple

import numpy as np
import trimesh
from scipy.spatial import cKDTree


class MeshEvaluator:
    """
    Geometric distance metrics and count statistics between an original
    mesh and its simplification.
    """

    def __init__(self, sample_points: int = 10000, seed: int = 0):
        """
        Args:
            sample_points: Number of points to sample for distance metrics
            seed: Seed for surface sampling, so reports are reproducible
        """
        self.sample_points = sample_points
        self.seed = seed

    def _sample(self, mesh: trimesh.Trimesh) -> np.ndarray:
        """Sample the surface, falling back to vertices for meshes without area."""
        if len(mesh.faces) > 0 and mesh.area > 0:
            points, _ = trimesh.sample.sample_surface(mesh, self.sample_points, seed=self.seed)
            return np.asarray(points)
        return np.asarray(mesh.vertices)

    def compute_all_metrics(self, original: trimesh.Trimesh,
                            simplified: trimesh.Trimesh) -> Dict[str, float]:
        """
        Compute all available metrics.

        Args:
            original: Original high-resolution mesh
            simplified: Simplified mesh

        Returns:
            Dictionary of metric names to values
        """
        metrics = {}

        # Count statistics
        metrics['original_faces'] = len(original.faces)
        metrics['simplified_faces'] = len(simplified.faces)
        metrics['original_vertices'] = len(original.vertices)
        metrics['simplified_vertices'] = len(simplified.vertices)
        metrics['face_reduction_ratio'] = len(simplified.faces) / max(1, len(original.faces))
        metrics['vertex_reduction_ratio'] = len(simplified.vertices) / max(1, len(original.vertices))

        # Geometric metrics
        hausdorff, hausdorff_forward, hausdorff_backward = self.hausdorff_distance(
            original, simplified
        )
        metrics['hausdorff_distance'] = hausdorff
        metrics['hausdorff_forward'] = hausdorff_forward
        metrics['hausdorff_backward'] = hausdorff_backward
        metrics['chamfer_distance'] = self.chamfer_distance(original, simplified)

        # Surface area
        original_area = float(original.area) if len(original.faces) else 0.0
        simplified_area = float(simplified.area) if len(simplified.faces) else 0.0
        metrics['original_area'] = original_area
        metrics['simplified_area'] = simplified_area
        metrics['area_error'] = abs(simplified_area - original_area) / max(original_area, 1e-10)

        return metrics

    def _nearest_distances(self, mesh1: trimesh.Trimesh,
                           mesh2: trimesh.Trimesh) -> Tuple[np.ndarray, np.ndarray]:
        points1 = self._sample(mesh1)
        points2 = self._sample(mesh2)

        if len(points1) == 0 or len(points2) == 0:
            return np.array([np.inf]), np.array([np.inf])

        # Forward (mesh1 -> mesh2) and backward (mesh2 -> mesh1)
        distances_forward, _ = cKDTree(points2).query(points1)
        distances_backward, _ = cKDTree(points1).query(points2)
        return distances_forward, distances_backward

    def hausdorff_distance(self, mesh1: trimesh.Trimesh,
                           mesh2: trimesh.Trimesh) -> Tuple[float, float, float]:
        """
        Compute symmetric Hausdorff distance between two meshes.

        Uses point sampling on the mesh surfaces.

        Returns:
            Tuple of (symmetric_hausdorff, forward, backward) distances
        """
        distances_forward, distances_backward = self._nearest_distances(mesh1, mesh2)
        hausdorff_forward = float(np.max(distances_forward))
        hausdorff_backward = float(np.max(distances_backward))

        return max(hausdorff_forward, hausdorff_backward), hausdorff_forward, hausdorff_backward

    def chamfer_distance(self, mesh1: trimesh.Trimesh,
                         mesh2: trimesh.Trimesh) -> float:
        """
        Compute symmetric Chamfer distance between two meshes.

        Sum of the mean squared nearest-neighbour distances in both directions.
        """
        distances_forward, distances_backward = self._nearest_distances(mesh1, mesh2)
        return float(np.mean(distances_forward ** 2)) + float(np.mean(distances_backward ** 2))

    def generate_report(self, metrics: Dict[str, float],
                        method_name: str = "QEM") -> str:
        """
        Generate a human-readable evaluation report.

        Args:
            metrics: Dictionary of metric values
            method_name: Name of the simplification method

        Returns:
            Formatted report string
        """
        lines = [
            "=" * 60,
            f"Mesh Simplification Report - {method_name}",
            "=" * 60,
            "",
            "MESH STATISTICS",
            "-" * 40,
            f"  Original:    {metrics.get('original_faces', 'N/A'):>8} faces, "
            f"{metrics.get('original_vertices', 'N/A'):>8} vertices",
            f"  Simplified:  {metrics.get('simplified_faces', 'N/A'):>8} faces, "
            f"{metrics.get('simplified_vertices', 'N/A'):>8} vertices",
            f"  Reduction:   {metrics.get('face_reduction_ratio', 0)*100:>7.2f}% of original faces",
            "",
            "GEOMETRIC ACCURACY",
            "-" * 40,
            f"  Hausdorff Distance:    {metrics.get('hausdorff_distance', np.nan):>12.6f}",
            f"    Forward:             {metrics.get('hausdorff_forward', np.nan):>12.6f}",
            f"    Backward:            {metrics.get('hausdorff_backward', np.nan):>12.6f}",
            f"  Chamfer Distance:      {metrics.get('chamfer_distance', np.nan):>12.6f}",
            f"  Area Error:            {metrics.get('area_error', 0)*100:>11.4f}%",
        ]

        if 'collapses' in metrics:
            lines.append(f"  Edge Collapses:        {metrics['collapses']:>12d}")
        if 'runtime' in metrics:
            lines.append(f"  Runtime:               {metrics['runtime']:>11.4f} seconds")

        lines.append("=" * 60)
        return "\n".join(lines)

    def print_report(self, metrics: Dict[str, float], method_name: str = "QEM"):
        """Print the evaluation report to console."""
        print(self.generate_report(metrics, method_name))
