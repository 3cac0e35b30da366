# quickframe/analysis.py
"""
Linear static analysis pass: element stiffness → assembly → reduction → solve.

One pass owns its results. Nothing is cached between passes, so changing a
model and running again always starts from freshly computed stiffnesses.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional, Sequence, Tuple

import numpy as np

from .kernel.assemble import (
    add_nodal_load,
    assemble_global_stiffness,
    stiffness_map_to_sparse,
)
from .kernel.dof import expand_displacements, reduce_to_free
from .kernel.solve import compute_reactions, solve_for_displacements
from .v3d.elements import Formulation, frame3d_stiffness
from .v3d.model import Frame3D, FrameModel

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class FrameStiffness:
    """Local and world 12×12 stiffness of one frame."""
    local: np.ndarray
    world: np.ndarray


@dataclass
class AnalysisResults:
    """
    Everything one analysis pass produces.

    Attributes:
        frame_stiffnesses: FrameStiffness by frame id
        world_stiffness: Global stiffness map (world row, world col) → value
        applied_forces: World load vector (ndof,)
        free_dofs: World indices of the free DOFs, in solver order
        displacements: Solved displacements at the free DOFs
        reactions: K·d - F over all world DOFs
        ndof: Size of the world system
    """
    frame_stiffnesses: Dict[str, FrameStiffness] = field(default_factory=dict)
    world_stiffness: Dict[Tuple[int, int], float] = field(default_factory=dict)
    applied_forces: Optional[np.ndarray] = None
    free_dofs: Optional[np.ndarray] = None
    displacements: Optional[np.ndarray] = None
    reactions: Optional[np.ndarray] = None
    ndof: int = 0

    def full_displacements(self) -> np.ndarray:
        """Displacements over all world DOFs, zero at supports."""
        if self.displacements is None:
            raise RuntimeError("analysis has not been solved yet")
        return expand_displacements(self.displacements, self.free_dofs, self.ndof)

    def node_displacements(self, model: FrameModel, node_id: str) -> np.ndarray:
        """[ux, uy, uz, rx, ry, rz] of one node."""
        node = model.require_node(node_id)
        return self.full_displacements()[list(node.dofs)]


def update_frame_stiffness(
    results: AnalysisResults,
    frame: Frame3D,
    local: np.ndarray,
    world: np.ndarray,
) -> None:
    """Store (or replace) the stiffness pair of one frame."""
    results.frame_stiffnesses[frame.id] = FrameStiffness(local=local, world=world)


def compute_frame_stiffnesses(
    model: FrameModel,
    formulation: Optional[Formulation] = None,
    results: Optional[AnalysisResults] = None,
) -> AnalysisResults:
    """
    Compute local and world stiffness for every frame in the model.

    Each frame only reads its own data and its two end nodes, and writes its
    own slot in results.frame_stiffnesses.

    Raises:
        NodeNotFoundError: A frame references an unregistered node
        UnsupportedEndReleaseError: A frame has a single-sided bending release
    """
    if results is None:
        results = AnalysisResults()

    for frame in model.frames.values():
        # Unresolved ends would otherwise silently zero the frame's stiffness
        model.require_node(frame.start_node)
        model.require_node(frame.end_node)

        local, world = frame3d_stiffness(model, frame, formulation)
        update_frame_stiffness(results, frame, local, world)

    return results


def nodal_forces(model: FrameModel, loads: Mapping[str, Sequence[float]]) -> np.ndarray:
    """
    World load vector from per-node loads.

    Args:
        loads: node id → [Fx, Fy, Fz, Mx, My, Mz]

    Raises:
        NodeNotFoundError: A load references an unregistered node
    """
    F = np.zeros(model.ndof, dtype=float)
    for node_id, load in loads.items():
        add_nodal_load(F, model.require_node(node_id).dofs, load)
    return F


class FrameAnalysis:
    """
    Linear static analysis of a FrameModel.

    Examples:
    ---------
    >>> analysis = FrameAnalysis(model, formulation=Formulation.TIMOSHENKO)
    >>> results = analysis.run(nodal_forces(model, {'tip': [0, -1e3, 0, 0, 0, 0]}))
    >>> results.node_displacements(model, 'tip')
    """

    def __init__(self, model: FrameModel, formulation: Optional[Formulation] = None):
        self.model = model
        self.formulation = formulation

    def run(self, forces: np.ndarray) -> AnalysisResults:
        """
        Solve K·d = F.

        Args:
            forces: World load vector over all DOFs (model.ndof,). Only entries at
                unrestrained node DOFs enter the solve.

        Returns:
            AnalysisResults with stiffnesses, global map and displacements

        Raises:
            ModelReferenceError: Unresolved node reference
            UnsupportedEndReleaseError: Single-sided bending release
            SingularSystemError: Under-constrained structure
        """
        model = self.model
        ndof = model.ndof
        logger.info(
            "analysing %d nodes, %d frames, %d DOFs",
            len(model.nodes), len(model.frames), ndof,
        )

        results = compute_frame_stiffnesses(model, self.formulation)
        results.ndof = ndof
        results.world_stiffness = assemble_global_stiffness(model, results)
        results.applied_forces = np.asarray(forces, dtype=float)

        K_ff, F_f, free = reduce_to_free(
            results.world_stiffness, results.applied_forces, model.free_dofs(), ndof
        )
        results.free_dofs = free
        results.displacements = solve_for_displacements(K_ff, F_f)

        K = stiffness_map_to_sparse(results.world_stiffness, ndof)
        results.reactions = compute_reactions(K, results.full_displacements(), results.applied_forces)

        return results
