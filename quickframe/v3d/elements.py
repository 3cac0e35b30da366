"""
3D FRAME ELEMENT: Local and World Stiffness Matrices
====================================================

PURPOSE:
--------
This module computes the 12×12 stiffness matrix of a 3D frame member in its
local axes, applies end releases, and rotates it into world axes.

LOCAL DOF ORDER:
----------------
    0  ux_i    3  rx_i    6  ux_j    9  rx_j
    1  uy_i    4  ry_i    7  uy_j   10  ry_j
    2  uz_i    5  rz_i    8  uz_j   11  rz_j

ENGINEERING DERIVATION:
-----------------------
For a prismatic member the four actions are uncoupled, so the 12×12 matrix
is built from small per-action blocks, each scattered through an index map:

    axial          (0, 6)          EA/L  × [ 1 -1; -1 1 ]
    torsion        (3, 9)          GJ/L  × [ 1 -1; -1 1 ]
    bending ⟂ z    (1, 5, 7, 11)   EIz   × 4×4 beam block
    bending ⟂ y    (2, 4, 8, 10)   EIy   × 4×4 beam block (sign mirrored)

The y-bending block is the z-bending block with the rotation terms negated:
a positive rotation about local y lifts the member in -z, so the coupling
between uz and ry flips sign (right-hand rule).

Two beam theories are available:

EULER–BERNOULLI (plane sections stay normal to the axis)

    EI × [ 12/L³   6/L²  -12/L³   6/L² ]
         [  6/L²   4/L    -6/L²   2/L  ]
         [-12/L³  -6/L²   12/L³  -6/L² ]
         [  6/L²   2/L    -6/L²   4/L  ]

TIMOSHENKO (adds shear flexibility through η = EI / (Av·G))

    EI / (L (L²/12 + η)) × [  1     -L/2    -1     -L/2   ]
                           [ -L/2  L²/3+η   L/2   L²/6-η ]
                           [ -1     L/2      1      L/2   ]
                           [ -L/2  L²/6-η   L/2   L²/3+η ]

scattered with the j-end DOFs first, (7, 11, 1, 5) and (8, 10, 2, 4). As
Av → ∞, η → 0 and the Timoshenko block reduces to Euler–Bernoulli.
"""

import logging
import math
from enum import Enum
from typing import Optional, Sequence, Tuple

import numpy as np

from ..config import CONFIG
from ..errors import UnsupportedEndReleaseError
from .model import Frame3D, FrameEndReleases, FrameModel
from .transform import transform_stiffness, world_to_local_transform

logger = logging.getLogger(__name__)


class Formulation(Enum):
    """Beam theory used for the bending blocks."""
    EULER_BERNOULLI = "euler_bernoulli"
    TIMOSHENKO = "timoshenko"


AXIAL_DOFS = (0, 6)
TORSION_DOFS = (3, 9)
BENDING_Z_DOFS = (1, 5, 7, 11)
BENDING_Y_DOFS = (2, 4, 8, 10)


def _merge_action(k: np.ndarray, index_map: Sequence[int], block: np.ndarray) -> None:
    """Write a per-action block into the 12×12 matrix at index_map."""
    assert all(0 <= i < 12 for i in index_map), f"index map {index_map} outside 0..11"
    idx = np.asarray(index_map, dtype=int)
    k[np.ix_(idx, idx)] = block


def _two_node_block(stiffness: float) -> np.ndarray:
    return stiffness * np.array([[1.0, -1.0],
                                 [-1.0, 1.0]])


def euler_bernoulli_local_stiffness(frame: Frame3D, length: float) -> np.ndarray:
    """
    12×12 local stiffness without shear deformation (no releases applied).

    Args:
        frame: The frame element (section and material are read from it)
        length: Member length; math.inf degenerates every block to zero

    Returns:
        np.ndarray, shape (12, 12), symmetric
    """
    s = frame.section
    E, G = frame.material.E, frame.material.G
    L = length
    L2 = L * L

    k = np.zeros((12, 12), dtype=float)

    # Axial
    _merge_action(k, AXIAL_DOFS, _two_node_block(E * s.A / L))

    # Torsion
    _merge_action(k, TORSION_DOFS, _two_node_block(G * s.J / L))

    # Bending about z (uy, rz) uses Iz
    _merge_action(k, BENDING_Z_DOFS, E * s.Iz / L * np.array([
        [ 12.0 / L2,  6.0 / L, -12.0 / L2,  6.0 / L],
        [  6.0 / L,   4.0,      -6.0 / L,   2.0    ],
        [-12.0 / L2, -6.0 / L,  12.0 / L2, -6.0 / L],
        [  6.0 / L,   2.0,      -6.0 / L,   4.0    ],
    ]))

    # Bending about y (uz, ry) uses Iy (note sign pattern)
    _merge_action(k, BENDING_Y_DOFS, E * s.Iy / L * np.array([
        [ 12.0 / L2, -6.0 / L, -12.0 / L2, -6.0 / L],
        [ -6.0 / L,   4.0,       6.0 / L,   2.0    ],
        [-12.0 / L2,  6.0 / L,  12.0 / L2,  6.0 / L],
        [ -6.0 / L,   2.0,       6.0 / L,   4.0    ],
    ]))

    return k


def timoshenko_local_stiffness(frame: Frame3D, length: float) -> np.ndarray:
    """
    12×12 local stiffness including shear deformation (no releases applied).

    Requires nonzero shear areas Avy and Avz; a zero shear area raises
    ZeroDivisionError.
    """
    s = frame.section
    E, G = frame.material.E, frame.material.G
    L = length
    L2 = L * L

    k = np.zeros((12, 12), dtype=float)

    # Axial
    _merge_action(k, AXIAL_DOFS, _two_node_block(E * s.A / L))

    # Torsion
    _merge_action(k, TORSION_DOFS, _two_node_block(G * s.J / L))

    # Unresolved length: no bending stiffness (inf * 0 would give nan)
    if math.isinf(L):
        return k

    # Bending about z: j-end first
    eta = E * s.Iz / s.Avy / G
    _merge_action(k, (7, 11, 1, 5), E * s.Iz / L / (L2 / 12.0 + eta) * np.array([
        [ 1.0,     -L / 2.0,          -1.0,     -L / 2.0        ],
        [-L / 2.0,  L2 / 3.0 + eta,    L / 2.0,  L2 / 6.0 - eta ],
        [-1.0,      L / 2.0,           1.0,      L / 2.0        ],
        [-L / 2.0,  L2 / 6.0 - eta,    L / 2.0,  L2 / 3.0 + eta ],
    ]))

    # Bending about y: j-end first
    eta = E * s.Iy / s.Avz / G
    _merge_action(k, (8, 10, 2, 4), E * s.Iy / L / (L2 / 12.0 + eta) * np.array([
        [ 1.0,      L / 2.0,          -1.0,      L / 2.0        ],
        [ L / 2.0,  L2 / 3.0 + eta,   -L / 2.0,  L2 / 6.0 - eta ],
        [-1.0,     -L / 2.0,           1.0,     -L / 2.0        ],
        [ L / 2.0,  L2 / 6.0 - eta,   -L / 2.0,  L2 / 3.0 + eta ],
    ]))

    return k


def _zero_block(k: np.ndarray, index_map: Sequence[int]) -> None:
    idx = np.asarray(index_map, dtype=int)
    k[np.ix_(idx, idx)] = 0.0


def _bending_fully_released(
    frame_id: str,
    start: FrameEndReleases,
    end: FrameEndReleases,
    moment: str,
    shear: str,
) -> bool:
    """
    True when a bending action carries no stiffness at all.

    That is the case when the moment is free at both ends, or moment and
    shear are both free at the same end. Any other free moment or shear
    would need a condensed partial-release matrix, which is not implemented.
    """
    if (start.is_free(moment) and end.is_free(moment)) \
            or (start.is_free(moment) and start.is_free(shear)) \
            or (end.is_free(moment) and end.is_free(shear)):
        return True

    if start.is_free(moment) or end.is_free(moment) \
            or start.is_free(shear) or end.is_free(shear):
        raise UnsupportedEndReleaseError(frame_id, moment, shear)

    return False


def apply_end_releases(
    k: np.ndarray,
    start: FrameEndReleases,
    end: FrameEndReleases,
    frame_id: str = "?",
) -> np.ndarray:
    """
    Zero the stiffness of released actions (in-place).

    - Axial free at either end      → {0, 6} block zeroed
    - Torsion free at either end    → {3, 9} block zeroed
    - Mz/Vy fully released          → {1, 5, 7, 11} block zeroed
    - My/Vz fully released          → {2, 4, 8, 10} block zeroed

    Raises:
        UnsupportedEndReleaseError: A moment or shear is released at one end
            only, without its partner action at that end
    """
    if start.is_free('A') or end.is_free('A'):
        _zero_block(k, AXIAL_DOFS)

    if start.is_free('T') or end.is_free('T'):
        _zero_block(k, TORSION_DOFS)

    # TODO derive the condensed stiffness for a member with one moment-released end
    if _bending_fully_released(frame_id, start, end, 'Mz', 'Vy'):
        _zero_block(k, BENDING_Z_DOFS)

    if _bending_fully_released(frame_id, start, end, 'My', 'Vz'):
        _zero_block(k, BENDING_Y_DOFS)

    return k


def _resolve_formulation(formulation) -> Formulation:
    if formulation is None:
        formulation = CONFIG.formulation
    if isinstance(formulation, Formulation):
        return formulation
    return Formulation[str(formulation).upper()]


_FORMULATORS = {
    Formulation.EULER_BERNOULLI: euler_bernoulli_local_stiffness,
    Formulation.TIMOSHENKO: timoshenko_local_stiffness,
}


def frame3d_local_stiffness(
    model: FrameModel,
    frame: Frame3D,
    formulation: Optional[Formulation] = None,
) -> np.ndarray:
    """
    12×12 local stiffness of a frame with its end releases applied.

    Parameters:
    -----------
    model : FrameModel
        Registry used to resolve the end nodes (for the length)

    frame : Frame3D
        The frame element

    formulation : Formulation, optional
        Beam theory; defaults to CONFIG.formulation

    Returns:
    --------
    np.ndarray
        12×12 local stiffness matrix, symmetric

    Raises:
    -------
    UnsupportedEndReleaseError
        For a single-sided moment/shear release
    ValueError
        If the end nodes coincide
    """
    formulator = _FORMULATORS[_resolve_formulation(formulation)]

    L = model.frame_length(frame)
    if L <= 0.0:
        raise ValueError(
            f"Element {frame.id} has zero length (nodes {frame.start_node} and "
            f"{frame.end_node} at same location)"
        )

    k = formulator(frame, L)
    return apply_end_releases(k, frame.start_releases, frame.end_releases, frame.id)


def frame3d_world_stiffness(frame: Frame3D, k_local: np.ndarray) -> np.ndarray:
    """Rotate a local 12×12 stiffness into world axes: Γᵀ · k · Γ."""
    return transform_stiffness(k_local, world_to_local_transform(frame.local_axes))


def frame3d_stiffness(
    model: FrameModel,
    frame: Frame3D,
    formulation: Optional[Formulation] = None,
) -> Tuple[np.ndarray, np.ndarray]:
    """(local, world) stiffness pair for one frame."""
    k_local = frame3d_local_stiffness(model, frame, formulation)
    k_world = frame3d_world_stiffness(frame, k_local)
    logger.debug("frame %s: local/world stiffness computed", frame.id)
    return k_local, k_world
