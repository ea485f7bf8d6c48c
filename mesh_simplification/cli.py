"""
Command-line entry point: simplify a mesh file.

    mesh-simplify input.obj output.obj 0.5
"""

import argparse
import sys
import time
from typing import List, Optional

from .candidates import DEFAULT_MAX_COST, DEFAULT_MAX_SQ_DISTANCE
from .evaluation import MeshEvaluator
from .exceptions import SimplificationError
from .simplifier import DEGENERATE_POLICIES, QuadricSimplifier
from .utils import load_mesh, print_mesh_info, save_mesh


def _ratio(value: str) -> float:
    try:
        ratio = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid ratio: {value!r}")
    if not 0.0 <= ratio < 1.0:
        raise argparse.ArgumentTypeError(f"ratio must be in [0, 1), got {value}")
    return ratio


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mesh-simplify",
        description="Reduce the triangle count of a mesh using Quadric Error Metrics (QEM)"
    )
    parser.add_argument("input", help="Input mesh file (OBJ, PLY, STL, OFF, ...)")
    parser.add_argument("output", help="Output mesh file; format follows the extension")
    parser.add_argument(
        "ratio", type=_ratio,
        help="Fraction of triangles to remove, in [0, 1)"
    )
    parser.add_argument(
        "--max-cost", type=float, default=DEFAULT_MAX_COST,
        help="Never collapse edges whose quadric cost reaches this value"
    )
    parser.add_argument(
        "--max-sq-distance", type=float, default=DEFAULT_MAX_SQ_DISTANCE,
        help="Never merge vertices whose squared distance reaches this value"
    )
    parser.add_argument(
        "--degenerate", choices=DEGENERATE_POLICIES, default="zero",
        help="Zero-area input triangles: 'zero' ignores their plane, 'raise' aborts"
    )
    parser.add_argument(
        "--report", action="store_true",
        help="Print Hausdorff/Chamfer metrics against the input"
    )
    parser.add_argument(
        "--quiet", "-q", action="store_true",
        help="Suppress simplification progress messages"
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Run the command line tool and return the exit status."""
    args = build_parser().parse_args(argv)
    verbose = not args.quiet

    try:
        mesh = load_mesh(args.input, verbose=verbose)
    except (OSError, ValueError) as e:
        print(f"Error: cannot load {args.input}: {e}", file=sys.stderr)
        return 1

    if verbose:
        print_mesh_info(mesh, "Input")

    simplifier = QuadricSimplifier(
        max_cost=args.max_cost,
        max_sq_distance=args.max_sq_distance,
        degenerate_policy=args.degenerate,
        verbose=verbose,
    )

    start_time = time.time()
    try:
        simplified = simplifier.decimate(mesh, args.ratio)
    except SimplificationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    runtime = time.time() - start_time

    try:
        save_mesh(simplified, args.output, verbose=verbose)
    except (OSError, ValueError) as e:
        print(f"Error: cannot write {args.output}: {e}", file=sys.stderr)
        return 1

    if verbose:
        print_mesh_info(simplified, "Simplified")

    if args.report:
        evaluator = MeshEvaluator()
        metrics = evaluator.compute_all_metrics(mesh, simplified)
        metrics['collapses'] = len(simplifier.get_collapse_history())
        metrics['runtime'] = runtime
        evaluator.print_report(metrics)

    return 0


if __name__ == "__main__":
    sys.exit(main())
