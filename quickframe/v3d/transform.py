"""
COORDINATE TRANSFORMATION: Member-Local ⇄ World
===============================================

A frame member's stiffness is derived in its LOCAL axes (x along the member,
y and z the principal section axes). Assembly needs it in WORLD axes.

The 3×3 rotation R holds the direction cosines of the local axes:

    R[i, j] = cos(angle between local axis i and world axis j)

so that v_local = R @ v_world. The 12×12 transform Γ repeats R on the
diagonal, once for each translation/rotation triple of each end:

    Γ = diag(R, R, R, R)

and the world stiffness is the similarity transform

    k_world = Γᵀ · k_local · Γ

which keeps k_world symmetric whenever k_local is.
"""

import math
from typing import Optional, Sequence

import numpy as np


def world_to_local_rotation(local_axes: np.ndarray) -> np.ndarray:
    """
    3×3 direction-cosine matrix from a local axis triad.

    Args:
        local_axes: 3×3, columns are the local x, y, z axes in world
            coordinates (any length)

    Returns:
        R with v_local = R @ v_world

    Raises:
        ValueError: Wrong shape or a zero-length axis
    """
    axes = np.asarray(local_axes, dtype=float)
    if axes.shape != (3, 3):
        raise ValueError(f"local_axes must be 3x3, got {axes.shape}")

    norms = np.linalg.norm(axes, axis=0)
    if np.any(norms <= 0.0):
        raise ValueError(f"local axis has zero length (norms {norms})")

    # Row i = unit local axis i
    return (axes / norms).T


def world_to_local_transform(local_axes: np.ndarray) -> np.ndarray:
    """12×12 block-diagonal transform: u_local = Γ @ u_world."""
    rot = world_to_local_rotation(local_axes)
    t = np.zeros((12, 12), dtype=float)
    # node i
    t[0:3, 0:3] = rot
    t[3:6, 3:6] = rot
    # node j
    t[6:9, 6:9] = rot
    t[9:12, 9:12] = rot
    return t


def transform_frame_local_to_world(frame, m: np.ndarray) -> np.ndarray:
    """Γᵀ · m, with Γ built from the frame's local axes."""
    return world_to_local_transform(frame.local_axes).T @ m


def transform_frame_world_to_local(frame, m: np.ndarray) -> np.ndarray:
    """Γ · m, with Γ built from the frame's local axes."""
    return world_to_local_transform(frame.local_axes) @ m


def transform_stiffness(local_k: np.ndarray, t: np.ndarray) -> np.ndarray:
    """k_world = Γᵀ · k_local · Γ"""
    return t.T @ local_k @ t


def local_axes_from_endpoints(
    start: Sequence[float],
    end: Sequence[float],
    roll: float = 0.0,
    up: Optional[Sequence[float]] = None,
) -> np.ndarray:
    """
    Build a right-handed local axis triad for a member from its end points.

    Local x runs from start to end. Local y is perpendicular to both the
    reference `up` vector (world z by default) and local x; local z
    completes the triad. For members parallel to `up` the world y axis is
    used as the reference instead. `roll` rotates y and z about local x
    (radians).

    A member along world x gets the world axes back:

    >>> local_axes_from_endpoints((0, 0, 0), (5, 0, 0))
    array([[1., 0., 0.],
           [0., 1., 0.],
           [0., 0., 1.]])

    Returns:
        3×3 array with the unit local x, y, z axes as columns

    Raises:
        ValueError: If start and end coincide
    """
    p0 = np.asarray(start, dtype=float)
    p1 = np.asarray(end, dtype=float)
    axis = p1 - p0
    length = np.linalg.norm(axis)
    if length <= 0.0:
        raise ValueError("zero length member: start and end coincide")
    x_local = axis / length

    ref = np.array([0.0, 0.0, 1.0]) if up is None else np.asarray(up, dtype=float)
    y_local = np.cross(ref, x_local)
    if np.linalg.norm(y_local) < 1e-8:
        y_local = np.cross(np.array([0.0, 1.0, 0.0]), x_local)
    y_local = y_local / np.linalg.norm(y_local)
    z_local = np.cross(x_local, y_local)

    if roll:
        c, s = math.cos(roll), math.sin(roll)
        y_local, z_local = c * y_local + s * z_local, -s * y_local + c * z_local

    return np.column_stack([x_local, y_local, z_local])
