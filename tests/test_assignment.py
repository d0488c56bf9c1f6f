import random

import pytest

from giftdraw import (
    ErrorKind,
    ExclusionPair,
    FailureReason,
    ImpossibleAssignment,
    InvalidInput,
    Participant,
    draw,
    generate_assignment,
    try_generate_assignment,
)


def people(*ids):
    return [Participant(id=pid, name=pid.title()) for pid in ids]


def assert_valid(participants, exclusions, assignments):
    ids = [p.id for p in participants]
    assert sorted(assignments.keys()) == sorted(ids)
    assert sorted(assignments.values()) == sorted(ids)
    assert all(giver != receiver for giver, receiver in assignments.items())
    for a, b in exclusions:
        assert assignments[a] != b
        assert assignments[b] != a


def test_assignment_basic_bijection():
    participants = people("a", "b", "c", "d")
    assignments = generate_assignment(participants, seed=42)
    assert_valid(participants, [], assignments)


def test_assignment_two_people():
    assignments = generate_assignment(people("a", "b"), seed=1)
    assert assignments == {"a": "b", "b": "a"}


def test_assignment_deterministic_seed():
    participants = people("a", "b", "c", "d", "e")
    first = generate_assignment(participants, seed=123)
    second = generate_assignment(participants, seed=123)
    assert first == second


def test_assignment_injected_rng_is_used():
    participants = people("a", "b", "c", "d", "e")
    first = generate_assignment(participants, rng=random.Random(5))
    second = generate_assignment(participants, rng=random.Random(5))
    assert first == second


def test_assignment_respects_exclusion_pairs():
    participants = people("a", "b", "c", "d")
    exclusions = [("a", "b"), ("c", "d")]
    for seed in range(50):
        assignments = generate_assignment(participants, exclusions=exclusions, seed=seed)
        assert_valid(participants, exclusions, assignments)


def test_assignment_accepts_exclusion_pair_objects():
    participants = people("a", "b", "c", "d")
    exclusions = [ExclusionPair("a", "b"), ["c", "d"]]
    assignments = generate_assignment(participants, exclusions=exclusions, seed=11)
    assert_valid(participants, [("a", "b"), ("c", "d")], assignments)


def test_assignment_varies_between_runs():
    participants = people("a", "b", "c", "d", "e", "f")
    results = {tuple(sorted(generate_assignment(participants, seed=seed).items())) for seed in range(20)}
    assert len(results) > 1
    for result in results:
        assert_valid(participants, [], dict(result))


def test_assignment_scales_to_large_groups():
    participants = [Participant(id=str(i), name=f"Person {i}") for i in range(100)]
    result = draw(participants, seed=2024)
    assert result.attempts <= 50
    assert_valid(participants, [], result.assignment)


def test_assignment_self_pair_exclusion_is_redundant():
    assignments = generate_assignment(people("a", "b"), exclusions=[("a", "a")], seed=3)
    assert assignments == {"a": "b", "b": "a"}


def test_assignment_does_not_modify_input():
    participants = people("a", "b", "c")
    snapshot = list(participants)
    generate_assignment(participants, seed=8)
    assert participants == snapshot


def test_assignment_fails_for_minimal_infeasible_case():
    participants = people("a", "b")
    exclusions = [("a", "b")]
    with pytest.raises(ImpossibleAssignment) as excinfo:
        generate_assignment(participants, exclusions=exclusions, seed=7)

    error = excinfo.value
    assert error.kind == ErrorKind.IMPOSSIBLE_ASSIGNMENT
    assert error.reason == FailureReason.HEURISTICALLY_PROVEN_INFEASIBLE
    assert error.proven
    assert error.attempts == 0
    assert error.participants == participants
    assert [pair.ids() for pair in error.exclusions] == [("a", "b")]


def test_assignment_reports_exhausted_budget_for_hidden_impossibility():
    # Every 3-cycle uses a->b or b->a, yet no id is excluded from everyone.
    participants = people("a", "b", "c")
    with pytest.raises(ImpossibleAssignment) as excinfo:
        generate_assignment(participants, exclusions=[("a", "b")], max_attempts=300, seed=4)

    error = excinfo.value
    assert error.reason == FailureReason.ATTEMPT_BUDGET_EXHAUSTED
    assert not error.proven
    assert error.attempts == 300


def test_assignment_fails_for_too_few_participants():
    with pytest.raises(InvalidInput):
        generate_assignment(people("a"))
    with pytest.raises(InvalidInput):
        generate_assignment([])


def test_assignment_rejects_duplicate_ids():
    with pytest.raises(InvalidInput, match="duplicated: a"):
        generate_assignment(people("a", "b", "a"))


def test_assignment_rejects_unknown_exclusion_id():
    with pytest.raises(InvalidInput, match="invalid participant id"):
        generate_assignment(people("a", "b", "c"), exclusions=[("a", "z")])


@pytest.mark.parametrize("exclusion", ["ab", ("a", "b", "c"), ("a",), 5])
def test_assignment_rejects_malformed_exclusion(exclusion):
    with pytest.raises(InvalidInput):
        generate_assignment(people("a", "b", "c"), exclusions=[exclusion])


@pytest.mark.parametrize("max_attempts", [0, -3, True, 2.5])
def test_assignment_rejects_bad_attempt_budget(max_attempts):
    with pytest.raises(InvalidInput):
        generate_assignment(people("a", "b", "c"), max_attempts=max_attempts)


def test_assignment_rejects_seed_and_rng_together():
    with pytest.raises(InvalidInput):
        generate_assignment(people("a", "b"), seed=1, rng=random.Random(1))


def test_try_generate_assignment_success_outcome():
    outcome = try_generate_assignment(people("a", "b", "c", "d"), seed=9)
    assert outcome.ok
    assert outcome.error is None
    assert outcome.attempts >= 1
    assert_valid(people("a", "b", "c", "d"), [], outcome.assignment)


def test_try_generate_assignment_tags_invalid_input():
    outcome = try_generate_assignment(people("a"))
    assert not outcome.ok
    assert outcome.assignment is None
    assert outcome.error.kind == ErrorKind.INVALID_INPUT
    assert outcome.error.reason is None


def test_try_generate_assignment_tags_impossible_assignment():
    outcome = try_generate_assignment(people("a", "b"), exclusions=[("b", "a")])
    assert not outcome.ok
    assert outcome.assignment is None
    assert outcome.error.kind == ErrorKind.IMPOSSIBLE_ASSIGNMENT
    assert outcome.error.reason == FailureReason.HEURISTICALLY_PROVEN_INFEASIBLE
