from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from giftdraw.errors import InvalidInput


@dataclass(frozen=True)
class Participant:
    id: str
    name: str
    email: Optional[str] = None


@dataclass(frozen=True)
class ExclusionPair:
    """Unordered pair: neither id may draw the other."""

    first: str
    second: str

    def __iter__(self):
        yield self.first
        yield self.second

    def ids(self) -> Tuple[str, str]:
        return self.first, self.second

    def involves(self, participant_id: str) -> bool:
        return participant_id in (self.first, self.second)


@dataclass(frozen=True)
class AssignmentPair:
    giver_id: str
    receiver_id: str


ExclusionLike = Union[ExclusionPair, Sequence[str]]


def to_exclusion_pair(raw: ExclusionLike) -> ExclusionPair:
    if isinstance(raw, ExclusionPair):
        return raw
    if isinstance(raw, (str, bytes)):
        raise InvalidInput(f"Exclusion must be a pair of ids, got {raw!r}.")
    try:
        items = list(raw)
    except TypeError as exc:
        raise InvalidInput(f"Exclusion must be a pair of ids, got {raw!r}.") from exc
    if len(items) != 2:
        raise InvalidInput(f"Exclusion must be a pair of ids, got {raw!r}.")
    return ExclusionPair(items[0], items[1])


def normalize_exclusions(exclusions: Optional[Iterable[ExclusionLike]]) -> List[ExclusionPair]:
    return [to_exclusion_pair(raw) for raw in exclusions or []]


def to_pairs(participants: Sequence[Participant], assignment: Mapping[str, str]) -> List[AssignmentPair]:
    return [
        AssignmentPair(giver_id=participant.id, receiver_id=assignment[participant.id])
        for participant in participants
    ]


def parse_participant(raw: Any) -> Participant:
    if not isinstance(raw, Mapping):
        raise InvalidInput(f"Participant entry must be an object, got {raw!r}.")
    participant_id = raw.get("id")
    if participant_id is None or str(participant_id) == "":
        raise InvalidInput(f"Participant entry is missing an id: {raw!r}.")
    name = raw.get("name") or str(participant_id)
    email = raw.get("email") or None
    return Participant(id=str(participant_id), name=str(name), email=email)


def parse_draw_request(data: Any) -> Tuple[List[Participant], List[ExclusionPair]]:
    """Build participants and exclusions from a decoded JSON draw request.

    Expected shape::

        {"participants": [{"id": "1", "name": "Alice"}, ...],
         "exclusions": [["1", "2"], ...]}
    """
    if not isinstance(data, Mapping):
        raise InvalidInput("Draw request must be a JSON object.")
    raw_participants = data.get("participants")
    if not isinstance(raw_participants, list):
        raise InvalidInput("Draw request needs a 'participants' list.")
    raw_exclusions = data.get("exclusions") or []
    if not isinstance(raw_exclusions, list):
        raise InvalidInput("'exclusions' must be a list of id pairs.")

    participants = [parse_participant(item) for item in raw_participants]
    exclusions = [
        ExclusionPair(*(str(value) for value in pair.ids()))
        for pair in normalize_exclusions(raw_exclusions)
    ]
    return participants, exclusions


def participants_by_id(participants: Iterable[Participant]) -> Dict[str, Participant]:
    return {participant.id: participant for participant in participants}
