# quickframe/errors.py
"""Exceptions raised by the frame model, assembler and solver."""


class QuickFrameError(Exception):
    """Base class for all quickframe errors."""
    pass


class ModelReferenceError(QuickFrameError, LookupError):
    """An id referenced by another entity could not be resolved."""

    kind = "entity"

    def __init__(self, id: str):
        self.id = id
        super().__init__(f"{self.kind} not found: id={id}")


class NodeNotFoundError(ModelReferenceError):
    kind = "node"


class FrameNotFoundError(ModelReferenceError):
    kind = "frame"


class ElementStiffnessNotFoundError(ModelReferenceError):
    """The frame has no precomputed stiffness in the analysis results."""
    kind = "element stiffness"


class UnsupportedEndReleaseError(QuickFrameError, NotImplementedError):
    """
    A single-sided moment/shear release was requested.

    Only fully released bending actions are supported: the moment released
    at both ends, or moment and shear released together at one end.
    """

    def __init__(self, frame_id: str, moment: str, shear: str):
        self.frame_id = frame_id
        self.moment = moment
        self.shear = shear
        super().__init__(
            f"unsupported end-release combination on frame {frame_id}: "
            f"{moment}/{shear} released at a single end only"
        )


class MechanismError(QuickFrameError, RuntimeError):
    """Raised when structure is unstable or ill-conditioned."""
    pass


class SingularSystemError(MechanismError):
    """Raised when the sparse factorization of the free-DOF system fails."""
    pass
