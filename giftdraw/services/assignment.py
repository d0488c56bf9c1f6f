from __future__ import annotations

import random
from collections import Counter
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence

from giftdraw.models import ExclusionLike, ExclusionPair, Participant, normalize_exclusions
from giftdraw.errors import (
    AssignmentError,
    FailureReason,
    ImpossibleAssignment,
    InvalidInput,
)
from giftdraw.services.feasibility import is_assignment_possible
from giftdraw.services.shuffle import fisher_yates_shuffle
from giftdraw.services.validation import is_valid_assignment

DEFAULT_MAX_ATTEMPTS = 1000


@dataclass(frozen=True)
class DrawResult:
    assignment: Dict[str, str]
    attempts: int


@dataclass(frozen=True)
class DrawOutcome:
    """Tagged draw result: exactly one of ``assignment`` and ``error`` is set."""

    assignment: Optional[Dict[str, str]] = None
    attempts: int = 0
    error: Optional[AssignmentError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _check_input(
    participants: Sequence[Participant],
    exclusions: List[ExclusionPair],
    max_attempts: int,
) -> List[str]:
    if len(participants) < 2:
        raise InvalidInput("At least 2 participants are required.")

    participant_ids = [participant.id for participant in participants]
    if len(set(participant_ids)) != len(participant_ids):
        duplicates = sorted(pid for pid, count in Counter(participant_ids).items() if count > 1)
        raise InvalidInput(f"Participant ids must be unique, duplicated: {', '.join(map(str, duplicates))}.")

    known = set(participant_ids)
    for pair in exclusions:
        first, second = pair.ids()
        if first not in known or second not in known:
            raise InvalidInput(f"Exclusion pair contains invalid participant id: [{first}, {second}].")

    if isinstance(max_attempts, bool) or not isinstance(max_attempts, int) or max_attempts < 1:
        raise InvalidInput(f"max_attempts must be a positive integer, got {max_attempts!r}.")

    return participant_ids


def _resolve_rng(seed: Optional[int], rng: Optional[random.Random]) -> random.Random:
    if seed is not None and rng is not None:
        raise InvalidInput("Pass either seed or rng, not both.")
    if rng is not None:
        return rng
    return random.Random(seed)


def _attempt(
    participant_ids: Sequence[str],
    exclusions: Sequence[ExclusionPair],
    rng: random.Random,
) -> Optional[Dict[str, str]]:
    receivers = fisher_yates_shuffle(participant_ids, rng)
    candidate = dict(zip(participant_ids, receivers))
    if not is_valid_assignment(candidate, exclusions):
        return None
    return candidate


def draw(
    participants: Sequence[Participant],
    exclusions: Optional[Iterable[ExclusionLike]] = None,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    seed: Optional[int] = None,
    rng: Optional[random.Random] = None,
) -> DrawResult:
    """Draw a giver -> receiver mapping and report how many attempts it took.

    Every giver gets exactly one receiver, nobody draws themselves and no
    exclusion pair is matched in either direction.

    Raises:
        InvalidInput: fewer than 2 participants, duplicate ids, a malformed
            exclusion, an exclusion naming an unknown id, or a bad budget.
        ImpossibleAssignment: the feasibility check proved the draw
            impossible (no attempts spent), or ``max_attempts`` random
            permutations were all rejected. ``reason`` tells them apart.
    """
    participants = list(participants)
    pairs = normalize_exclusions(exclusions)
    participant_ids = _check_input(participants, pairs, max_attempts)
    generator = _resolve_rng(seed, rng)

    if not is_assignment_possible(len(participant_ids), pairs):
        raise ImpossibleAssignment(
            "Assignment is impossible with given exclusions. Too many constraints.",
            participants,
            pairs,
            reason=FailureReason.HEURISTICALLY_PROVEN_INFEASIBLE,
            attempts=0,
        )

    for attempt in range(1, max_attempts + 1):
        candidate = _attempt(participant_ids, pairs, generator)
        if candidate is not None:
            return DrawResult(assignment=candidate, attempts=attempt)

    raise ImpossibleAssignment(
        f"Failed to generate a valid assignment after {max_attempts} attempts. "
        "The configuration may still be feasible.",
        participants,
        pairs,
        reason=FailureReason.ATTEMPT_BUDGET_EXHAUSTED,
        attempts=max_attempts,
    )


def generate_assignment(
    participants: Sequence[Participant],
    exclusions: Optional[Iterable[ExclusionLike]] = None,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    seed: Optional[int] = None,
    rng: Optional[random.Random] = None,
) -> Dict[str, str]:
    return draw(participants, exclusions, max_attempts=max_attempts, seed=seed, rng=rng).assignment


def try_generate_assignment(
    participants: Sequence[Participant],
    exclusions: Optional[Iterable[ExclusionLike]] = None,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    seed: Optional[int] = None,
    rng: Optional[random.Random] = None,
) -> DrawOutcome:
    try:
        result = draw(participants, exclusions, max_attempts=max_attempts, seed=seed, rng=rng)
    except ImpossibleAssignment as exc:
        return DrawOutcome(attempts=exc.attempts, error=exc)
    except InvalidInput as exc:
        return DrawOutcome(error=exc)
    return DrawOutcome(assignment=result.assignment, attempts=result.attempts)
