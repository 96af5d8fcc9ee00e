from .recorder import (
    BoundaryMapping,
    BoundaryRecorder,
    InsufficientPointsError,
    RecorderClosedError,
    RecorderConfig,
    summarize_boundary,
)

__all__ = [
    "BoundaryMapping",
    "BoundaryRecorder",
    "InsufficientPointsError",
    "RecorderClosedError",
    "RecorderConfig",
    "summarize_boundary",
]
