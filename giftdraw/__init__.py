from giftdraw.models import AssignmentPair, ExclusionPair, Participant
from giftdraw.services import (
    AssignmentError,
    DrawOutcome,
    DrawResult,
    ErrorKind,
    FailureReason,
    ImpossibleAssignment,
    InvalidInput,
    draw,
    generate_assignment,
    try_generate_assignment,
)

__version__ = "0.1.0"

__all__ = [
    "AssignmentError",
    "AssignmentPair",
    "DrawOutcome",
    "DrawResult",
    "ErrorKind",
    "ExclusionPair",
    "FailureReason",
    "ImpossibleAssignment",
    "InvalidInput",
    "Participant",
    "draw",
    "generate_assignment",
    "try_generate_assignment",
]
