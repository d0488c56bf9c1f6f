from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence

from loguru import logger

from giftdraw.models import (
    AssignmentPair,
    ExclusionLike,
    Participant,
    participants_by_id,
    to_pairs,
)
from giftdraw.services.assignment import DEFAULT_MAX_ATTEMPTS, draw
from giftdraw.errors import ImpossibleAssignment, InvalidInput


@dataclass(frozen=True)
class DrawReport:
    assignment: Dict[str, str]
    pairs: List[AssignmentPair]
    participants: List[Participant]
    attempts: int
    seed: int


def format_participant_label(participant: Participant) -> str:
    if participant.name and participant.email:
        return f"{participant.name} <{participant.email}>"
    if participant.name:
        return participant.name
    return f"participant-{participant.id}"


def format_assignment(participants: Sequence[Participant], assignment: Dict[str, str]) -> List[str]:
    lookup = participants_by_id(participants)
    return [
        f"{format_participant_label(participant)} -> {format_participant_label(lookup[assignment[participant.id]])}"
        for participant in participants
    ]


def run_draw(
    participants: Sequence[Participant],
    exclusions: Optional[Iterable[ExclusionLike]] = None,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    seed: Optional[int] = None,
) -> DrawReport:
    participants = list(participants)
    exclusions = list(exclusions or [])
    if seed is None:
        seed = random.randint(1, 2**31 - 1)

    log = logger.bind(participants=len(participants), exclusions=len(exclusions), seed=seed)
    try:
        result = draw(participants, exclusions, max_attempts=max_attempts, seed=seed)
    except InvalidInput as exc:
        log.warning("Draw rejected: {error}", error=str(exc))
        raise
    except ImpossibleAssignment as exc:
        log.bind(reason=exc.reason.value, attempts=exc.attempts).warning(
            "Draw failed: {error}", error=str(exc)
        )
        raise

    log.bind(attempts=result.attempts).info("Assignments generated")
    return DrawReport(
        assignment=result.assignment,
        pairs=to_pairs(participants, result.assignment),
        participants=participants,
        attempts=result.attempts,
        seed=seed,
    )
