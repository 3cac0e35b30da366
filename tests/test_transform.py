# tests/test_transform.py
"""
Coordinate transforms between member-local and world axes.
"""

import numpy as np
import pytest

from quickframe.v3d.elements import frame3d_local_stiffness, frame3d_world_stiffness
from quickframe.v3d.model import CrossSection, Frame3D, FrameModel, IsotropicMaterial
from quickframe.v3d.transform import (
    local_axes_from_endpoints,
    transform_frame_local_to_world,
    transform_frame_world_to_local,
    transform_stiffness,
    world_to_local_rotation,
    world_to_local_transform,
)

STEEL = IsotropicMaterial(E=210e9, nu=0.3)
SECTION = CrossSection(A=0.01, Avy=0.005, Avz=0.004, J=1.2e-5, Iy=5.0e-6, Iz=8.0e-6)


class TestRotation:

    def test_world_axes_give_identity(self):
        np.testing.assert_allclose(world_to_local_rotation(np.eye(3)), np.eye(3), atol=1e-12)
        np.testing.assert_allclose(world_to_local_transform(np.eye(3)), np.eye(12), atol=1e-12)

    def test_axes_need_not_be_unit_length(self):
        scaled = np.diag([2.0, 0.5, 7.0])
        np.testing.assert_allclose(world_to_local_rotation(scaled), np.eye(3), atol=1e-12)

    def test_rows_are_direction_cosines(self):
        """Row i holds cos(local axis i, world x/y/z)."""
        axes = np.column_stack([[1.0, 1.0, 0.0], [-1.0, 1.0, 0.0], [0.0, 0.0, 3.0]])
        R = world_to_local_rotation(axes)

        c = 1.0 / np.sqrt(2.0)
        np.testing.assert_allclose(R, [[c, c, 0.0], [-c, c, 0.0], [0.0, 0.0, 1.0]], atol=1e-12)

        # A vector along local x maps onto local (1, 0, 0)
        np.testing.assert_allclose(R @ np.array([1.0, 1.0, 0.0]), [np.sqrt(2.0), 0.0, 0.0], atol=1e-12)

    def test_orthonormal_triad_gives_orthogonal_rotation(self):
        axes = local_axes_from_endpoints((0, 0, 0), (1.0, 2.0, 3.0), roll=0.7)
        R = world_to_local_rotation(axes)
        np.testing.assert_allclose(R @ R.T, np.eye(3), atol=1e-12)
        assert np.linalg.det(R) == pytest.approx(1.0)

    def test_transform_is_block_diagonal(self):
        axes = local_axes_from_endpoints((0, 0, 0), (1.0, -2.0, 0.5))
        R = world_to_local_rotation(axes)
        T = world_to_local_transform(axes)

        for b in range(4):
            s = slice(3 * b, 3 * b + 3)
            np.testing.assert_array_equal(T[s, s], R)
        mask = np.kron(np.eye(4), np.ones((3, 3))).astype(bool)
        assert not np.any(T[~mask])

    @pytest.mark.parametrize("axes", [np.zeros((3, 3)), np.eye(2)])
    def test_invalid_axes_rejected(self, axes):
        with pytest.raises(ValueError):
            world_to_local_rotation(axes)


class TestLocalAxesFromEndpoints:

    def test_member_along_world_x(self):
        np.testing.assert_allclose(
            local_axes_from_endpoints((0, 0, 0), (5, 0, 0)), np.eye(3), atol=1e-12
        )

    def test_vertical_member_uses_world_y_reference(self):
        axes = local_axes_from_endpoints((0, 0, 0), (0, 0, 4))
        np.testing.assert_allclose(axes[:, 0], [0, 0, 1], atol=1e-12)
        np.testing.assert_allclose(axes[:, 1], [1, 0, 0], atol=1e-12)
        np.testing.assert_allclose(axes[:, 2], [0, 1, 0], atol=1e-12)

    def test_roll_rotates_about_member_axis(self):
        axes = local_axes_from_endpoints((0, 0, 0), (5, 0, 0), roll=np.pi / 2)
        np.testing.assert_allclose(axes[:, 0], [1, 0, 0], atol=1e-12)
        np.testing.assert_allclose(axes[:, 1], [0, 0, 1], atol=1e-12)
        np.testing.assert_allclose(axes[:, 2], [0, -1, 0], atol=1e-12)

    def test_coincident_points_rejected(self):
        with pytest.raises(ValueError, match="zero length"):
            local_axes_from_endpoints((1, 1, 1), (1, 1, 1))


class TestFrameTransforms:

    def make_frame(self, end, local_axes):
        model = FrameModel()
        model.create_node('i', 0.0, 0.0, 0.0)
        model.create_node('j', *end)
        frame = model.add_frame(Frame3D('m', 'i', 'j', SECTION, STEEL, local_axes=local_axes))
        return model, frame

    def test_identity_axes_leave_stiffness_unchanged(self):
        model, frame = self.make_frame((3.0, 0.0, 0.0), np.eye(3))
        k_local = frame3d_local_stiffness(model, frame)

        np.testing.assert_array_equal(frame3d_world_stiffness(frame, k_local), k_local)
        np.testing.assert_array_equal(transform_frame_local_to_world(frame, k_local), k_local)
        np.testing.assert_array_equal(transform_frame_world_to_local(frame, k_local), k_local)

    def test_one_sided_transforms_are_inverse(self):
        axes = local_axes_from_endpoints((0, 0, 0), (1.0, 2.0, 3.0), roll=0.2)
        model, frame = self.make_frame((1.0, 2.0, 3.0), axes)
        k_local = frame3d_local_stiffness(model, frame)

        there = transform_frame_local_to_world(frame, k_local)
        back = transform_frame_world_to_local(frame, there)
        np.testing.assert_allclose(back, k_local, rtol=1e-12, atol=1e-9 * np.abs(k_local).max())

    def test_similarity_transform_round_trip(self):
        axes = local_axes_from_endpoints((0, 0, 0), (-2.0, 1.0, 1.0))
        model, frame = self.make_frame((-2.0, 1.0, 1.0), axes)
        k_local = frame3d_local_stiffness(model, frame)
        T = world_to_local_transform(axes)

        k_world = transform_stiffness(k_local, T)
        np.testing.assert_allclose(T @ k_world @ T.T, k_local, atol=1e-9 * np.abs(k_local).max())

    def test_axial_stiffness_lands_along_member(self):
        """A bar along (1, 1, 0)/√2: world ux-ux stiffness is EA/L · cos²45°."""
        end = (2.0, 2.0, 0.0)
        axes = local_axes_from_endpoints((0, 0, 0), end)
        model, frame = self.make_frame(end, axes)
        k_world = frame3d_world_stiffness(frame, frame3d_local_stiffness(model, frame))

        L = np.sqrt(8.0)
        EA_L = STEEL.E * SECTION.A / L
        twelve_EI = 12 * STEEL.E * SECTION.Iz / L**3
        assert k_world[0, 0] == pytest.approx(0.5 * EA_L + 0.5 * twelve_EI)
        assert k_world[0, 1] == pytest.approx(0.5 * EA_L - 0.5 * twelve_EI)
