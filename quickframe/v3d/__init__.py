# quickframe/v3d - 3D Frame Elements
"""
V3D: 3D FRAME ELEMENTS
======================

This package provides the 3D frame (beam/column) element:
- Frame3D: 12×12 stiffness, 6 DOF/node, Euler–Bernoulli or Timoshenko
- FrameModel: node/frame registry for one analysis
- Coordinate transforms between member-local and world axes

USAGE:
------
    from quickframe.v3d import FrameModel, Frame3D, CrossSection, IsotropicMaterial
    from quickframe.analysis import FrameAnalysis

    model = FrameModel()
    model.create_node('a', 0.0, 0.0, 0.0, restraints=(True,) * 6)
    model.create_node('b', 3.0, 0.0, 0.0)
    model.add_frame(Frame3D('ab', 'a', 'b', section, IsotropicMaterial(210e9, 0.3)))

    F = np.zeros(model.ndof)
    F[model.require_node('b').dofs[1]] = -1000.0
    results = FrameAnalysis(model).run(F)
"""

from .model import (
    Node3D,
    CrossSection,
    IsotropicMaterial,
    EndRelease,
    FrameEndReleases,
    Frame3D,
    FrameModel,
)
from .elements import (
    Formulation,
    apply_end_releases,
    euler_bernoulli_local_stiffness,
    timoshenko_local_stiffness,
    frame3d_local_stiffness,
    frame3d_world_stiffness,
    frame3d_stiffness,
)
from .transform import (
    world_to_local_rotation,
    world_to_local_transform,
    transform_frame_local_to_world,
    transform_frame_world_to_local,
    local_axes_from_endpoints,
)

__all__ = [
    'Node3D', 'CrossSection', 'IsotropicMaterial', 'EndRelease',
    'FrameEndReleases', 'Frame3D', 'FrameModel',
    'Formulation', 'apply_end_releases', 'euler_bernoulli_local_stiffness',
    'timoshenko_local_stiffness', 'frame3d_local_stiffness',
    'frame3d_world_stiffness', 'frame3d_stiffness',
    'world_to_local_rotation', 'world_to_local_transform',
    'transform_frame_local_to_world', 'transform_frame_world_to_local',
    'local_axes_from_endpoints',
]
