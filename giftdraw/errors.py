from __future__ import annotations

import enum
from typing import Optional, Sequence


class ErrorKind(str, enum.Enum):
    INVALID_INPUT = "invalid-input"
    IMPOSSIBLE_ASSIGNMENT = "impossible-assignment"


class FailureReason(str, enum.Enum):
    HEURISTICALLY_PROVEN_INFEASIBLE = "heuristically-proven-infeasible"
    ATTEMPT_BUDGET_EXHAUSTED = "attempt-budget-exhausted"


class AssignmentError(RuntimeError):
    kind: ErrorKind
    reason: Optional[FailureReason] = None


class InvalidInput(AssignmentError):
    kind = ErrorKind.INVALID_INPUT


class ImpossibleAssignment(AssignmentError):
    """The draw could not be satisfied.

    ``reason`` tells a proven impossibility apart from a random search that
    simply ran out of attempts; only the former says anything about the
    configuration itself.
    """

    kind = ErrorKind.IMPOSSIBLE_ASSIGNMENT

    def __init__(
        self,
        message: str,
        participants: Sequence,
        exclusions: Sequence,
        reason: FailureReason,
        attempts: int = 0,
    ) -> None:
        super().__init__(message)
        self.participants = list(participants)
        self.exclusions = list(exclusions)
        self.reason = reason
        self.attempts = attempts

    @property
    def proven(self) -> bool:
        return self.reason == FailureReason.HEURISTICALLY_PROVEN_INFEASIBLE


def describe(error: Optional[AssignmentError]) -> str:
    if error is None:
        return "ok"
    if error.reason is not None:
        return f"{error.kind.value} ({error.reason.value}): {error}"
    return f"{error.kind.value}: {error}"
