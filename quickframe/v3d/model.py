"""
3D FRAME MODEL DEFINITIONS
==========================

PURPOSE:
--------
This module defines the data structures for 3D frame analysis:
- Node3D: A point in 3D space with 6 world DOFs and optional supports
- CrossSection / IsotropicMaterial: member properties
- FrameEndReleases: which internal actions a member end can transmit
- Frame3D: A beam/column connecting two nodes
- FrameModel: the registry that owns nodes and frames for one analysis

ENGINEERING CONTEXT:
--------------------
A 3D FRAME member carries axial force, torsion and bending about two axes.
Each node therefore has 6 DOFs: ux, uy, uz, rx, ry, rz, and each member has
a 12×12 stiffness matrix (6 DOFs at each end).

Members refer to their nodes by id only. Geometry is resolved through the
FrameModel at analysis time, so a node can be shared by any number of
members without being copied.
"""

import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from ..errors import FrameNotFoundError, NodeNotFoundError
from ..kernel.dof import DOF_3D_FRAME, DOFManager

logger = logging.getLogger(__name__)

DOF_NAMES = ('ux', 'uy', 'uz', 'rx', 'ry', 'rz')


@dataclass(frozen=True)
class Node3D:
    """
    A node (joint) in 3D space.

    Parameters:
    -----------
    id : str
        Unique identifier for this node

    x, y, z : float
        Coordinates in the world coordinate system

    dofs : Tuple[int, ...]
        World DOF indices for (ux, uy, uz, rx, ry, rz)

    restraints : Tuple[bool, ...]
        True where the DOF is fixed by a support. Defaults to all free.

    Examples:
    ---------
    >>> a = Node3D('a', 0.0, 0.0, 0.0, dofs=(0, 1, 2, 3, 4, 5),
    ...            restraints=(True,) * 6)   # fully fixed support
    >>> b = Node3D('b', 3.0, 0.0, 0.0, dofs=(6, 7, 8, 9, 10, 11))
    """
    id: str
    x: float
    y: float
    z: float
    dofs: Tuple[int, ...]
    restraints: Tuple[bool, ...] = (False,) * 6

    def __post_init__(self):
        if len(self.dofs) != 6:
            raise ValueError(f"Node {self.id} needs 6 DOF indices, got {len(self.dofs)}")
        if len(self.restraints) != 6:
            raise ValueError(f"Node {self.id} needs 6 restraint flags, got {len(self.restraints)}")
        object.__setattr__(self, 'dofs', tuple(int(d) for d in self.dofs))
        object.__setattr__(self, 'restraints', tuple(bool(r) for r in self.restraints))

    @property
    def coordinate(self) -> np.ndarray:
        return np.array([self.x, self.y, self.z], dtype=float)

    @property
    def fixed_dofs(self) -> List[int]:
        return [d for d, r in zip(self.dofs, self.restraints) if r]

    @property
    def free_dofs(self) -> List[int]:
        return [d for d, r in zip(self.dofs, self.restraints) if not r]


@dataclass(frozen=True)
class CrossSection:
    """
    Cross-section properties of a prismatic member.

    A        : area (axial stiffness)
    Avy, Avz : shear areas along local y / z (shear-deformation formulation only)
    J        : torsion constant
    Iy, Iz   : second moments of area about local y / z
    """
    A: float
    Avy: float
    Avz: float
    J: float
    Iy: float
    Iz: float


@dataclass(frozen=True)
class IsotropicMaterial:
    """
    Linear elastic isotropic material.

    The shear modulus is always derived, G = E / (2(1 + ν)), so it can
    never disagree with E and ν.

    >>> IsotropicMaterial(E=200.0, nu=0.3).G
    76.92307692307692
    """
    E: float
    nu: float
    G: float = field(init=False)

    def __post_init__(self):
        object.__setattr__(self, 'G', self.E / (2.0 * (1.0 + self.nu)))


class EndRelease(Enum):
    """Whether a member end transmits an internal action."""
    FIXED = "fixed"
    FREE = "free"


@dataclass(frozen=True)
class FrameEndReleases:
    """
    Release state of the six internal actions at one member end.

    A: axial force, Vy/Vz: shear along local y/z, T: torsion,
    My/Mz: bending moment about local y/z.
    """
    A: EndRelease = EndRelease.FIXED
    Vy: EndRelease = EndRelease.FIXED
    Vz: EndRelease = EndRelease.FIXED
    T: EndRelease = EndRelease.FIXED
    My: EndRelease = EndRelease.FIXED
    Mz: EndRelease = EndRelease.FIXED

    @classmethod
    def fully_fixed(cls) -> 'FrameEndReleases':
        return cls()

    @classmethod
    def pinned(cls) -> 'FrameEndReleases':
        """Moments released, axial/shear/torsion transmitted."""
        return cls(My=EndRelease.FREE, Mz=EndRelease.FREE)

    def is_free(self, action: str) -> bool:
        return getattr(self, action) is EndRelease.FREE


@dataclass(frozen=True, eq=False)
class Frame3D:
    """
    A 3D frame element (beam/column) connecting two nodes.

    The element stiffness matrix is 12×12 (6 DOFs at each of 2 nodes):
        [ux_i, uy_i, uz_i, rx_i, ry_i, rz_i, ux_j, ..., rz_j]

    Parameters:
    -----------
    id : str
        Unique identifier for this element

    start_node, end_node : str
        Ids of the end nodes, resolved through the FrameModel

    section : CrossSection
    material : IsotropicMaterial

    local_axes : np.ndarray
        3×3 matrix whose columns are the local x, y, z axes expressed in
        world coordinates. Columns need not be unit length. Defaults to
        the world axes.

    start_releases, end_releases : FrameEndReleases
        Defaults to fully fixed at both ends.

    Notes:
    ------
    Frames are immutable once created. To change one, remove it from the
    model and add a new one with the same id.
    """
    id: str
    start_node: str
    end_node: str
    section: CrossSection
    material: IsotropicMaterial
    local_axes: np.ndarray = field(default_factory=lambda: np.eye(3))
    start_releases: FrameEndReleases = field(default_factory=FrameEndReleases.fully_fixed)
    end_releases: FrameEndReleases = field(default_factory=FrameEndReleases.fully_fixed)

    def __post_init__(self):
        axes = np.array(self.local_axes, dtype=float)
        if axes.shape != (3, 3):
            raise ValueError(f"Frame {self.id} local_axes must be 3x3, got {axes.shape}")
        axes.setflags(write=False)
        object.__setattr__(self, 'local_axes', axes)


class FrameModel:
    """
    Registry of the nodes and frames of one structural model.

    A FrameModel is an ordinary object passed into each analysis, so two
    models never share state.

    Examples:
    ---------
    >>> model = FrameModel()
    >>> model.create_node('a', 0.0, 0.0, 0.0, restraints=(True,) * 6)
    >>> model.create_node('b', 3.0, 0.0, 0.0)
    >>> model.add_frame(Frame3D('ab', 'a', 'b', section, material))
    >>> model.frame_length(model.require_frame('ab'))
    3.0
    """

    def __init__(self, dof_manager: Optional[DOFManager] = None):
        self.dof = dof_manager if dof_manager is not None else DOF_3D_FRAME
        self.nodes: Dict[str, Node3D] = {}
        self.frames: Dict[str, Frame3D] = {}

    # ------------------------------------------------------------------
    # Nodes
    # ------------------------------------------------------------------

    def add_node(self, node: Node3D) -> Node3D:
        if node.id in self.nodes:
            raise ValueError(f"Node {node.id} already exists")
        self.nodes[node.id] = node
        return node

    def create_node(
        self,
        id: str,
        x: float,
        y: float,
        z: float,
        restraints: Optional[Sequence[bool]] = None,
    ) -> Node3D:
        """Create and register a node, numbering its 6 DOFs right after the highest index in use."""
        node = Node3D(
            id=id, x=float(x), y=float(y), z=float(z),
            dofs=tuple(self.dof.node_dofs(first=self.ndof)),
            restraints=tuple(restraints) if restraints is not None else (False,) * 6,
        )
        return self.add_node(node)

    def get_node(self, id: str) -> Optional[Node3D]:
        return self.nodes.get(id)

    def require_node(self, id: str) -> Node3D:
        node = self.nodes.get(id)
        if node is None:
            raise NodeNotFoundError(id)
        return node

    # ------------------------------------------------------------------
    # Frames
    # ------------------------------------------------------------------

    def add_frame(self, frame: Frame3D) -> Frame3D:
        if frame.id in self.frames:
            raise ValueError(f"Frame {frame.id} already exists; remove it before replacing")
        self.frames[frame.id] = frame
        return frame

    def get_frame(self, id: str) -> Optional[Frame3D]:
        return self.frames.get(id)

    def require_frame(self, id: str) -> Frame3D:
        frame = self.frames.get(id)
        if frame is None:
            raise FrameNotFoundError(id)
        return frame

    def remove_frame(self, id: str) -> Frame3D:
        if id not in self.frames:
            raise FrameNotFoundError(id)
        return self.frames.pop(id)

    def frame_length(self, frame: Frame3D) -> float:
        """
        Distance between the frame's end nodes.

        Returns math.inf when either node is not registered; the axial and
        bending stiffness of such a frame degenerates to zero.
        """
        start = self.nodes.get(frame.start_node)
        end = self.nodes.get(frame.end_node)
        if start is None or end is None:
            logger.warning(
                "frame %s: end node %s not registered, treating length as infinite",
                frame.id, frame.start_node if start is None else frame.end_node,
            )
            return math.inf
        return float(np.linalg.norm(end.coordinate - start.coordinate))

    # ------------------------------------------------------------------
    # DOFs
    # ------------------------------------------------------------------

    @property
    def ndof(self) -> int:
        """Size of the world system (highest DOF index in use + 1)."""
        if not self.nodes:
            return 0
        return max(max(node.dofs) for node in self.nodes.values()) + 1

    def fixed_dofs(self) -> List[int]:
        return sorted(d for node in self.nodes.values() for d in node.fixed_dofs)

    def free_dofs(self) -> List[int]:
        """
        Unrestrained DOFs of the registered nodes.

        Indices below ndof that no node owns are neither fixed nor free.
        """
        return sorted(d for node in self.nodes.values() for d in node.free_dofs)
