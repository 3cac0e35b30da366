#!/usr/bin/env python3
"""
RUN_SPACE_FRAME: 3D Frame Analysis Demo
=======================================

This demo shows a complete 3D frame analysis workflow:
1. Build a one-bay, one-storey space frame (4 columns, 4 beams)
2. Apply a lateral and a gravity load at the roof
3. Solve with both beam theories
4. Print roof displacements and base reactions

The beams are pinned at both ends, so the columns alone carry the
sway; the roof beams only tie the column heads together.

Run with:
    python demos/run_space_frame.py
"""

import logging
import sys
from pathlib import Path

import numpy as np

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from quickframe.analysis import FrameAnalysis, nodal_forces
from quickframe.v3d.elements import Formulation
from quickframe.v3d.model import (
    CrossSection,
    Frame3D,
    FrameEndReleases,
    FrameModel,
    IsotropicMaterial,
)
from quickframe.v3d.transform import local_axes_from_endpoints


def print_header(text: str):
    """Print a formatted section header."""
    print("\n" + "=" * 60)
    print(f"  {text}")
    print("=" * 60)


def build_model(span: float = 6.0, depth: float = 4.0, height: float = 3.5) -> FrameModel:
    steel = IsotropicMaterial(E=210e9, nu=0.3)

    # Roughly an HEB 200 column and an IPE 300 beam
    column = CrossSection(A=7.81e-3, Avy=1.87e-3, Avz=5.44e-3, J=5.93e-7, Iy=2.00e-5, Iz=5.70e-5)
    beam = CrossSection(A=5.38e-3, Avy=2.57e-3, Avz=3.16e-3, J=2.01e-7, Iy=6.04e-6, Iz=8.36e-5)

    model = FrameModel()

    corners = {'1': (0.0, 0.0), '2': (span, 0.0), '3': (span, depth), '4': (0.0, depth)}
    for name, (x, y) in corners.items():
        model.create_node(f"base{name}", x, y, 0.0, restraints=(True,) * 6)
        model.create_node(f"top{name}", x, y, height)

    for name in corners:
        start = model.require_node(f"base{name}")
        end = model.require_node(f"top{name}")
        model.add_frame(Frame3D(
            f"col{name}", start.id, end.id, column, steel,
            local_axes=local_axes_from_endpoints(start.coordinate, end.coordinate),
        ))

    for a, b in [('1', '2'), ('2', '3'), ('3', '4'), ('4', '1')]:
        start = model.require_node(f"top{a}")
        end = model.require_node(f"top{b}")
        model.add_frame(Frame3D(
            f"beam{a}{b}", start.id, end.id, beam, steel,
            local_axes=local_axes_from_endpoints(start.coordinate, end.coordinate),
            start_releases=FrameEndReleases.pinned(),
            end_releases=FrameEndReleases.pinned(),
        ))

    return model


def main():
    logging.basicConfig(level=logging.INFO, format="%(name)s: %(message)s")

    print_header("3D SPACE FRAME ANALYSIS")

    model = build_model()
    print(f"\nNodes:  {len(model.nodes)}")
    print(f"Frames: {len(model.frames)}")
    print(f"DOFs:   {model.ndof} ({len(model.free_dofs())} free)")

    # 10 kN wind along +x at one corner, 50 kN gravity on every column head
    loads = {f"top{n}": [0.0, 0.0, -50e3, 0.0, 0.0, 0.0] for n in '1234'}
    loads['top1'] = [10e3, 0.0, -50e3, 0.0, 0.0, 0.0]
    F = nodal_forces(model, loads)

    for formulation in Formulation:
        print_header(f"SOLVE: {formulation.name}")
        results = FrameAnalysis(model, formulation=formulation).run(F)

        print("\nRoof displacements (mm):")
        for n in '1234':
            ux, uy, uz = results.node_displacements(model, f"top{n}")[:3] * 1e3
            print(f"  top{n}: ux = {ux:8.4f}  uy = {uy:8.4f}  uz = {uz:8.4f}")

        print("\nBase reactions (kN):")
        total = np.zeros(3)
        for n in '1234':
            node = model.require_node(f"base{n}")
            Rx, Ry, Rz = results.reactions[list(node.dofs[:3])]
            total += (Rx, Ry, Rz)
            print(f"  base{n}: Rx = {Rx / 1e3:8.3f}  Ry = {Ry / 1e3:8.3f}  Rz = {Rz / 1e3:8.3f}")

        print(f"\n  Sum:   Rx = {total[0] / 1e3:8.3f}  Ry = {total[1] / 1e3:8.3f}  Rz = {total[2] / 1e3:8.3f}")
        print("  (should balance the applied 10 kN lateral and 200 kN gravity)")


if __name__ == "__main__":
    main()
