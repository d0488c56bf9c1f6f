from __future__ import annotations

from typing import Iterable, Mapping

from giftdraw.models import ExclusionPair


def has_fixed_point(assignment: Mapping[str, str]) -> bool:
    return any(giver == receiver for giver, receiver in assignment.items())


def violates_exclusion(assignment: Mapping[str, str], pair: ExclusionPair) -> bool:
    first, second = pair.ids()
    return assignment.get(first) == second or assignment.get(second) == first


def is_valid_assignment(assignment: Mapping[str, str], exclusions: Iterable[ExclusionPair]) -> bool:
    if has_fixed_point(assignment):
        return False
    return not any(violates_exclusion(assignment, pair) for pair in exclusions)
