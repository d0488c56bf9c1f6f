from giftdraw.services.assignment import (
    DrawOutcome,
    DrawResult,
    draw,
    generate_assignment,
    try_generate_assignment,
)
from giftdraw.errors import (
    AssignmentError,
    ErrorKind,
    FailureReason,
    ImpossibleAssignment,
    InvalidInput,
)

__all__ = [
    "AssignmentError",
    "DrawOutcome",
    "DrawResult",
    "ErrorKind",
    "FailureReason",
    "ImpossibleAssignment",
    "InvalidInput",
    "draw",
    "generate_assignment",
    "try_generate_assignment",
]
