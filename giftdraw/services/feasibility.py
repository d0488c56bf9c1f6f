"""Cheap, conservative impossibility check run before any sampling.

``is_assignment_possible`` only answers ``False`` when no valid draw can
exist, so a ``False`` is proof. A ``True`` is not: some configurations pass
here and are still infeasible because of how several exclusions combine,
and the random search will then exhaust its attempt budget instead.
"""
from __future__ import annotations

from collections import defaultdict
from typing import Dict, Iterable, Set

from giftdraw.models import ExclusionPair


def exclusion_counts(exclusions: Iterable[ExclusionPair]) -> Dict[str, int]:
    # Distinct partners only: mirrored or repeated pairs must not inflate the tally.
    partners: Dict[str, Set[str]] = defaultdict(set)
    for pair in exclusions:
        first, second = pair.ids()
        if first == second:
            continue
        partners[first].add(second)
        partners[second].add(first)
    return {participant_id: len(others) for participant_id, others in partners.items()}


def is_assignment_possible(participant_count: int, exclusions: Iterable[ExclusionPair]) -> bool:
    exclusions = list(exclusions)
    if participant_count == 2:
        return not any(pair.first != pair.second for pair in exclusions)

    counts = exclusion_counts(exclusions)
    return all(count < participant_count - 1 for count in counts.values())
