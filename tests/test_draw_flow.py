import pytest
from loguru import logger

from giftdraw.errors import ImpossibleAssignment, InvalidInput
from giftdraw.models import AssignmentPair, Participant
from giftdraw.services.draw_flow import format_assignment, format_participant_label, run_draw


def family():
    return [
        Participant(id="1", name="Alice", email="alice@example.com"),
        Participant(id="2", name="Bob"),
        Participant(id="3", name="Charlie"),
        Participant(id="4", name="Diana"),
    ]


@pytest.fixture
def records():
    captured = []
    handler_id = logger.add(lambda message: captured.append(message.record), level="DEBUG")
    yield captured
    logger.remove(handler_id)


def test_run_draw_builds_pairs_in_participant_order():
    participants = family()
    report = run_draw(participants, [("1", "2"), ("3", "4")], seed=17)

    assert report.seed == 17
    assert [pair.giver_id for pair in report.pairs] == ["1", "2", "3", "4"]
    assert report.pairs == [AssignmentPair(giver, receiver) for giver, receiver in report.assignment.items()]
    assert report.assignment["1"] in {"3", "4"}
    assert report.assignment["3"] in {"1", "2"}


def test_run_draw_picks_seed_when_missing():
    report = run_draw(family())
    assert 1 <= report.seed < 2**31
    assert report == run_draw(family(), seed=report.seed)


def test_run_draw_logs_success(records):
    report = run_draw(family(), seed=5)
    generated = [r for r in records if r["message"] == "Assignments generated"]
    assert len(generated) == 1
    assert generated[0]["extra"]["attempts"] == report.attempts
    assert generated[0]["extra"]["seed"] == 5


def test_run_draw_logs_and_reraises_failures(records):
    with pytest.raises(ImpossibleAssignment):
        run_draw(family()[:2], [("1", "2")], seed=1)
    with pytest.raises(InvalidInput):
        run_draw(family()[:1], seed=1)

    warnings = [r for r in records if r["level"].name == "WARNING"]
    assert len(warnings) == 2
    assert warnings[0]["extra"]["reason"] == "heuristically-proven-infeasible"


def test_format_assignment_lines():
    participants = family()[:2]
    lines = format_assignment(participants, {"1": "2", "2": "1"})
    assert lines == ["Alice <alice@example.com> -> Bob", "Bob -> Alice <alice@example.com>"]


def test_format_participant_label_falls_back_to_id():
    assert format_participant_label(Participant(id="9", name="")) == "participant-9"
