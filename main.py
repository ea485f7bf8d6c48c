"""
Mesh Simplification - Command Line
==================================

Usage:
    python main.py input.obj output.obj 0.5

Removes the given fraction of triangles using Quadric Error Metrics (QEM).
"""

import sys

from mesh_simplification.cli import main


if __name__ == "__main__":
    sys.exit(main())
