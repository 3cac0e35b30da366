# quickframe/kernel - Element-agnostic structural analysis core
"""
KERNEL: THE ELEMENT-AGNOSTIC FOUNDATION
=======================================

Assembly and solving don't care what the element is. They just need:
- A way to map element DOFs → world DOF indices
- Element stiffness matrices in world coordinates
- Free DOF lists
- Load vectors

The 3D frame element itself lives in quickframe.v3d.
"""

from .dof import DOFManager, reduce_to_free, expand_displacements
from .assemble import assemble_global_stiffness, stiffness_map_to_sparse
from .solve import solve_for_displacements, compute_reactions

__all__ = [
    'DOFManager', 'reduce_to_free', 'expand_displacements',
    'assemble_global_stiffness', 'stiffness_map_to_sparse',
    'solve_for_displacements', 'compute_reactions',
]
