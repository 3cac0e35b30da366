# tests/test_model.py
"""
Node/frame registry, DOF numbering and model data types.
"""

import dataclasses
import logging
import math

import numpy as np
import pytest

from quickframe.analysis import compute_frame_stiffnesses
from quickframe.errors import FrameNotFoundError, ModelReferenceError, NodeNotFoundError
from quickframe.kernel.dof import DOFManager
from quickframe.v3d.model import (
    CrossSection,
    EndRelease,
    Frame3D,
    FrameEndReleases,
    FrameModel,
    IsotropicMaterial,
    Node3D,
)

STEEL = IsotropicMaterial(E=210e9, nu=0.3)
SECTION = CrossSection(A=0.01, Avy=0.005, Avz=0.004, J=1.2e-5, Iy=5.0e-6, Iz=8.0e-6)


class TestDOFManager:

    def test_node_block(self):
        assert DOFManager(dof_per_node=6).node_dofs(first=12) == [12, 13, 14, 15, 16, 17]

    def test_negative_block_start(self):
        with pytest.raises(IndexError):
            DOFManager(dof_per_node=6).node_dofs(first=-6)


class TestNodes:

    def test_create_node_numbers_dofs_in_order(self):
        model = FrameModel()
        a = model.create_node('a', 0, 0, 0)
        b = model.create_node('b', 1, 0, 0)

        assert a.dofs == (0, 1, 2, 3, 4, 5)
        assert b.dofs == (6, 7, 8, 9, 10, 11)
        assert model.ndof == 12

    def test_create_node_after_custom_numbering(self):
        model = FrameModel()
        model.add_node(Node3D('a', 0, 0, 0, dofs=(20, 21, 22, 23, 24, 25)))
        b = model.create_node('b', 1, 0, 0)

        # Contiguous after the highest index in use
        assert b.dofs == (26, 27, 28, 29, 30, 31)
        assert model.ndof == 32

    def test_unowned_indices_are_neither_fixed_nor_free(self):
        model = FrameModel()
        model.add_node(Node3D('a', 0, 0, 0, dofs=(0, 1, 2, 3, 4, 5), restraints=(True,) * 6))
        model.add_node(Node3D('b', 1, 0, 0, dofs=(12, 13, 14, 15, 16, 17)))

        assert model.ndof == 18
        assert model.fixed_dofs() == [0, 1, 2, 3, 4, 5]
        assert model.free_dofs() == [12, 13, 14, 15, 16, 17]

    def test_empty_model(self):
        model = FrameModel()
        assert model.ndof == 0
        assert model.free_dofs() == []

    def test_duplicate_node(self):
        model = FrameModel()
        model.create_node('a', 0, 0, 0)
        with pytest.raises(ValueError, match="already exists"):
            model.create_node('a', 1, 0, 0)

    def test_node_needs_six_dofs(self):
        with pytest.raises(ValueError):
            Node3D('a', 0, 0, 0, dofs=(0, 1, 2))

    def test_require_unknown_node(self):
        with pytest.raises(NodeNotFoundError, match="node not found: id=zz") as exc:
            FrameModel().require_node('zz')

        assert exc.value.id == 'zz'
        assert isinstance(exc.value, ModelReferenceError)
        assert isinstance(exc.value, LookupError)

    def test_get_unknown_node_is_none(self):
        assert FrameModel().get_node('zz') is None

    def test_fixed_and_free_dofs(self):
        model = FrameModel()
        model.create_node('a', 0, 0, 0, restraints=(True, True, True, False, False, False))
        model.create_node('b', 1, 0, 0, restraints=(False,) * 5 + (True,))

        assert model.fixed_dofs() == [0, 1, 2, 11]
        assert model.free_dofs() == [3, 4, 5, 6, 7, 8, 9, 10]
        assert model.require_node('b').fixed_dofs == [11]


class TestMaterial:

    def test_shear_modulus_is_derived(self):
        assert IsotropicMaterial(E=200.0, nu=0.3).G == pytest.approx(200.0 / 2.6)
        assert IsotropicMaterial(E=1.0, nu=0.0).G == 0.5

    def test_shear_modulus_cannot_be_passed(self):
        with pytest.raises(TypeError):
            IsotropicMaterial(E=200.0, nu=0.3, G=80.0)

    def test_immutable(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            STEEL.E = 1.0


class TestEndReleases:

    def test_defaults_are_fixed(self):
        releases = FrameEndReleases()
        assert releases == FrameEndReleases.fully_fixed()
        assert not any(releases.is_free(a) for a in ('A', 'Vy', 'Vz', 'T', 'My', 'Mz'))

    def test_pinned_releases_moments_only(self):
        pinned = FrameEndReleases.pinned()
        assert pinned.My is EndRelease.FREE
        assert pinned.Mz is EndRelease.FREE
        assert not pinned.is_free('A')
        assert not pinned.is_free('Vy')
        assert not pinned.is_free('T')


class TestFrames:

    def make_model(self):
        model = FrameModel()
        model.create_node('a', 0, 0, 0)
        model.create_node('b', 3, 4, 0)
        return model

    def test_frame_is_immutable(self):
        frame = Frame3D('ab', 'a', 'b', SECTION, STEEL)
        with pytest.raises(dataclasses.FrozenInstanceError):
            frame.start_node = 'c'

    def test_local_axes_are_read_only_copies(self):
        axes = np.eye(3)
        frame = Frame3D('ab', 'a', 'b', SECTION, STEEL, local_axes=axes)

        axes[0, 0] = 5.0
        assert frame.local_axes[0, 0] == 1.0
        with pytest.raises(ValueError):
            frame.local_axes[0, 0] = 5.0

    def test_local_axes_shape_checked(self):
        with pytest.raises(ValueError, match="3x3"):
            Frame3D('ab', 'a', 'b', SECTION, STEEL, local_axes=np.eye(2))

    def test_duplicate_frame_rejected(self):
        model = self.make_model()
        model.add_frame(Frame3D('ab', 'a', 'b', SECTION, STEEL))
        with pytest.raises(ValueError, match="already exists"):
            model.add_frame(Frame3D('ab', 'b', 'a', SECTION, STEEL))

    def test_replace_by_remove_and_add(self):
        model = self.make_model()
        old = model.add_frame(Frame3D('ab', 'a', 'b', SECTION, STEEL))

        assert model.remove_frame('ab') is old
        new = model.add_frame(Frame3D('ab', 'b', 'a', SECTION, STEEL))
        assert model.require_frame('ab') is new

    def test_unknown_frame(self):
        model = self.make_model()
        assert model.get_frame('zz') is None
        with pytest.raises(FrameNotFoundError, match="frame not found: id=zz"):
            model.require_frame('zz')
        with pytest.raises(FrameNotFoundError):
            model.remove_frame('zz')

    def test_frame_length(self):
        model = self.make_model()
        frame = model.add_frame(Frame3D('ab', 'a', 'b', SECTION, STEEL))
        assert model.frame_length(frame) == pytest.approx(5.0)

    def test_unresolved_node_gives_infinite_length(self, caplog):
        model = self.make_model()
        frame = model.add_frame(Frame3D('ac', 'a', 'c', SECTION, STEEL))

        with caplog.at_level(logging.WARNING, logger="quickframe"):
            assert math.isinf(model.frame_length(frame))

        assert "not registered" in caplog.text

    def test_analysis_rejects_unresolved_node(self):
        model = self.make_model()
        model.add_frame(Frame3D('ac', 'a', 'c', SECTION, STEEL))

        with pytest.raises(NodeNotFoundError, match="node not found: id=c"):
            compute_frame_stiffnesses(model)
