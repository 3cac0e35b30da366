# quickframe/kernel/dof.py
"""
DOF MANAGER: World Degree of Freedom Indexing
=============================================

PURPOSE:
--------
This module hands out world DOF index blocks to nodes, and reduces the
assembled world system to its free DOFs.

A 3D frame node carries 6 DOFs:

    0=ux, 1=uy, 2=uz   (translations)
    3=rx, 4=ry, 5=rz   (rotations)

Every node owns a 6-tuple of world DOF indices. The registry numbers new
nodes contiguously after the highest index already in use:

    first node  -> [0, 1, 2, 3, 4, 5]
    second node -> [6, 7, 8, 9, 10, 11]
    ...

Nodes may also carry their own numbering, so the index range can have gaps
that no node owns. The free set is therefore always built from the nodes
(every unrestrained DOF of a registered node), never as "everything that is
not fixed". reduce_to_free() keeps exactly those rows/columns before the
solve and expand_displacements() puts zeros everywhere else afterwards.

USAGE:
------
    dof = DOFManager(dof_per_node=6)
    dof.node_dofs(first=12)        # → [12, 13, 14, 15, 16, 17]

    K_ff, F_f, free = reduce_to_free(world_stiffness, F, model.free_dofs(), model.ndof)
    d_f = solve_for_displacements(K_ff, F_f)
    d = expand_displacements(d_f, free, model.ndof)
"""

from dataclasses import dataclass
from typing import Dict, Iterable, List, Tuple

import numpy as np
from scipy import sparse

from ..config import CONFIG
from .assemble import stiffness_map_to_sparse


@dataclass
class DOFManager:
    """
    Hands out blocks of consecutive world DOF indices, one block per node.

    Attributes:
    -----------
    dof_per_node : int
        Number of DOFs per node (6 for a 3D frame: ux, uy, uz, rx, ry, rz)

    Examples:
    ---------
    >>> DOFManager(dof_per_node=6).node_dofs(first=6)
    [6, 7, 8, 9, 10, 11]
    """
    dof_per_node: int

    def node_dofs(self, first: int) -> List[int]:
        """World DOF indices of a node whose block starts at `first`."""
        if first < 0:
            raise IndexError(f"DOF block cannot start at {first}")
        return list(range(first, first + self.dof_per_node))


# ux, uy, uz, rx, ry, rz
DOF_3D_FRAME = DOFManager(dof_per_node=CONFIG.dof_per_node)


def reduce_to_free(
    stiffness: Dict[Tuple[int, int], float],
    forces: np.ndarray,
    free_dofs: Iterable[int],
    ndof: int,
) -> Tuple[sparse.csc_matrix, np.ndarray, np.ndarray]:
    """
    Restrict the world system to the given free DOFs.

    Rows and columns of every other index drop out of K·d = F: fixed DOFs
    carry zero displacement, and indices no node owns carry nothing at all.

    Args:
        stiffness: Global stiffness map (world row, world col) → value
        forces: Applied force vector over all world DOFs (ndof,)
        free_dofs: World indices to solve for (unrestrained node DOFs)
        ndof: Total number of world DOFs

    Returns:
        K_ff: Free-DOF stiffness (n_free x n_free), CSC format
        F_f: Free-DOF force vector (n_free,)
        free: Sorted world indices of the free DOFs, in solver order

    Raises:
        ValueError: Force vector length doesn't match ndof
        IndexError: A free DOF lies outside 0..ndof-1
    """
    F = np.asarray(forces, dtype=float)
    if F.shape != (ndof,):
        raise ValueError(f"force vector shape {F.shape} doesn't match ndof {ndof}")

    free = np.array(sorted(set(int(i) for i in free_dofs)), dtype=int)
    if free.size and (free[0] < 0 or free[-1] >= ndof):
        raise IndexError(f"free DOFs {free[0]}..{free[-1]} outside 0..{ndof - 1}")

    K = stiffness_map_to_sparse(stiffness, ndof).tocsr()
    K_ff = K[free, :][:, free].tocsc()

    return K_ff, F[free], free


def expand_displacements(d_free: np.ndarray, free: np.ndarray, ndof: int) -> np.ndarray:
    """Scatter a free-DOF solution back into a full world vector (zeros elsewhere)."""
    d = np.zeros(ndof, dtype=float)
    d[free] = d_free
    return d
