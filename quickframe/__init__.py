# quickframe - Direct stiffness analysis of 3D frames
"""
QUICKFRAME: Linear Static Analysis of 3D Frame Structures
=========================================================

This package provides:
- 12×12 frame element stiffness (Euler–Bernoulli and Timoshenko)
- End releases (axial, torsion, fully released bending)
- Member-local ⇄ world coordinate transforms
- Sparse global assembly and free-DOF linear solve

ARCHITECTURE:
-------------
    kernel/         Element-agnostic core (DOF numbering, assembly, solve)
    v3d/            3D frame model, element stiffness, transforms
    analysis.py     One analysis pass: stiffness → assembly → solve
    config.py       Solver defaults (ZERO_EPSILON, formulation, tolerances)
    errors.py       Exception hierarchy
"""

import logging

from .config import CONFIG, ZERO_EPSILON
from .errors import (
    QuickFrameError,
    NodeNotFoundError,
    FrameNotFoundError,
    ElementStiffnessNotFoundError,
    UnsupportedEndReleaseError,
    MechanismError,
    SingularSystemError,
)
from .kernel import DOFManager, solve_for_displacements, assemble_global_stiffness
from .analysis import AnalysisResults, FrameAnalysis, FrameStiffness, nodal_forces

# Library: let the application decide where records go
logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"
