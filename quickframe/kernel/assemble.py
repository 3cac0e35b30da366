# quickframe/kernel/assemble.py
"""
ASSEMBLY: Sparse Global Stiffness Assembly
==========================================

PURPOSE:
--------
This module handles the assembly of element contributions into the global
system. This is the scatter-add operation that builds K and F from
element-level data.

The global stiffness is kept as a sparse map:

    {(world_row, world_col): coefficient}

Only coefficients that actually carry stiffness are stored. A source entry
whose magnitude is within ZERO_EPSILON of zero is skipped before it is
merged; the filter is applied per source entry, never to the summed value,
so assembly order does not change the result.

USAGE:
------
    # Element stiffnesses must already be in the analysis results
    compute_frame_stiffnesses(model, results=results)

    # Assemble (world DOF pairs → summed stiffness)
    world = assemble_global_stiffness(model, results)
    K = stiffness_map_to_sparse(world, model.ndof)
"""

import logging
from typing import Any, Dict, Optional, Sequence, Tuple

import numpy as np
from scipy import sparse

from ..config import CONFIG
from ..errors import ElementStiffnessNotFoundError

logger = logging.getLogger(__name__)

StiffnessMap = Dict[Tuple[int, int], float]


def merge_stiffness_at_dofs(
    assembled: StiffnessMap,
    dof_map: Sequence[int],
    ke: np.ndarray,
    zero_epsilon: float,
) -> StiffnessMap:
    """
    Scatter-add one element matrix into the global stiffness map (in-place).

    ALGORITHM:
    ----------
    for each (a, b) in ke:
        if |ke[a, b]| <= zero_epsilon: skip
        assembled[dof_map[a], dof_map[b]] += ke[a, b]

    Args:
        assembled: Global stiffness map, modified in-place and returned
        dof_map: World DOF index for each element DOF
        ke: Element stiffness in world coordinates, shape (n, n)
        zero_epsilon: Source coefficients at or below this magnitude are skipped

    Returns:
        The same map, for chaining
    """
    n_element_dofs = len(dof_map)

    # Sanity check: ke must match dof_map size
    assert ke.shape == (n_element_dofs, n_element_dofs), \
        f"Element ke shape {ke.shape} doesn't match dof_map length {n_element_dofs}"

    for a in range(n_element_dofs):
        ia = dof_map[a]
        for b in range(n_element_dofs):
            value = float(ke[a, b])
            # Ignore numerical noise
            if abs(value) <= zero_epsilon:
                continue
            key = (ia, dof_map[b])
            assembled[key] = assembled.get(key, 0.0) + value

    return assembled


def assemble_global_stiffness(
    model: Any,
    results: Any,
    zero_epsilon: Optional[float] = None,
) -> StiffnessMap:
    """
    Assemble the world stiffness map from every frame in the model.

    For each frame:
    - its world stiffness is looked up in results.frame_stiffnesses
      (it must have been computed first)
    - both endpoint nodes are resolved for their 6 world DOF indices
    - local rows/cols 0-5 go to the start node DOFs, 6-11 to the end node DOFs

    Args:
        model: Node/frame registry (FrameModel)
        results: Analysis results holding frame_stiffnesses by frame id
        zero_epsilon: Skip threshold; defaults to CONFIG.zero_epsilon

    Returns:
        Dict mapping (world_row, world_col) → summed stiffness

    Raises:
        ElementStiffnessNotFoundError: A frame has no stored stiffness
        NodeNotFoundError: An endpoint node is not registered
    """
    eps = CONFIG.zero_epsilon if zero_epsilon is None else zero_epsilon
    assembled: StiffnessMap = {}

    for frame in model.frames.values():
        stiffness = results.frame_stiffnesses.get(frame.id)
        if stiffness is None:
            raise ElementStiffnessNotFoundError(frame.id)

        start = model.require_node(frame.start_node)
        end = model.require_node(frame.end_node)

        dof_map = list(start.dofs) + list(end.dofs)
        merge_stiffness_at_dofs(assembled, dof_map, stiffness.world, eps)
        logger.debug("merged frame %s into DOFs %s", frame.id, dof_map)

    logger.info(
        "assembled %d frames into %d nonzero stiffness entries",
        len(model.frames), len(assembled),
    )
    return assembled


def stiffness_map_to_sparse(stiffness: StiffnessMap, ndof: int) -> sparse.csc_matrix:
    """
    Convert a stiffness map into an (ndof x ndof) scipy CSC matrix.

    Raises:
        IndexError: A key lies outside 0..ndof-1
    """
    n = len(stiffness)
    rows = np.empty(n, dtype=int)
    cols = np.empty(n, dtype=int)
    vals = np.empty(n, dtype=float)
    for k, ((i, j), v) in enumerate(stiffness.items()):
        if not (0 <= i < ndof and 0 <= j < ndof):
            raise IndexError(f"stiffness entry ({i}, {j}) outside {ndof}x{ndof} system")
        rows[k] = i
        cols[k] = j
        vals[k] = v
    return sparse.coo_matrix((vals, (rows, cols)), shape=(ndof, ndof)).tocsc()


def add_nodal_load(
    F: np.ndarray,
    node_dofs: Sequence[int],
    load_vector: Sequence[float],
) -> None:
    """
    Add a nodal load to the world load vector (in-place).

    Example:
    --------
    >>> F = np.zeros(12)
    >>> add_nodal_load(F, node.dofs, [0, 0, -1000.0, 0, 0, 0])
    >>> # F[node.dofs[2]] is now -1000 (downward force at the node)
    """
    if len(load_vector) != len(node_dofs):
        raise ValueError(
            f"load has {len(load_vector)} components, node has {len(node_dofs)} DOFs"
        )
    for dof, val in zip(node_dofs, load_vector):
        F[dof] += val
