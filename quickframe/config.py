# quickframe/config.py
"""
Solver configuration and defaults.
"""

from dataclasses import dataclass


# Absolute tolerance below which a world stiffness coefficient is treated
# as an exact zero when it is merged into the global stiffness map.
ZERO_EPSILON = 1e-10


@dataclass
class SolverConfig:
    """Global solver configuration."""

    # Assembly
    zero_epsilon: float = ZERO_EPSILON

    # Default beam theory for the local stiffness formulator.
    # One of the Formulation enum names: 'EULER_BERNOULLI', 'TIMOSHENKO'
    formulation: str = "EULER_BERNOULLI"

    # Sparse solver: min |pivot| relative to the largest pivot
    pivot_tol: float = 1e-13

    # ux, uy, uz, rx, ry, rz
    dof_per_node: int = 6


# Global config instance
CONFIG = SolverConfig()
