from __future__ import annotations

import argparse
import json
from typing import List, Optional, Sequence

from loguru import logger

from giftdraw.core.config import load_settings
from giftdraw.core.logging import setup_logging
from giftdraw.errors import AssignmentError, ErrorKind, InvalidInput
from giftdraw.models import Participant, parse_draw_request
from giftdraw.services.diagnostics import run_scenarios, simulate
from giftdraw.services.draw_flow import format_assignment, run_draw

EXIT_OK = 0
EXIT_IMPOSSIBLE = 1
EXIT_INVALID = 2


def load_request(path: str):
    try:
        with open(path, encoding="utf-8") as handle:
            data = json.load(handle)
    except OSError as exc:
        raise InvalidInput(f"Cannot read draw request {path}: {exc.strerror}.") from exc
    except json.JSONDecodeError as exc:
        raise InvalidInput(f"Draw request {path} is not valid JSON: {exc.msg} (line {exc.lineno}).") from exc
    return parse_draw_request(data)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="giftdraw",
        description="Gift exchange draw with exclusion pairs.",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    draw_cmd = commands.add_parser("draw", help="Draw givers and receivers from a JSON request")
    draw_cmd.add_argument("request", help="Path to a JSON file with participants and exclusions")
    draw_cmd.add_argument("--max-attempts", type=int, default=None, help="Attempt budget (default: DRAW_MAX_ATTEMPTS)")
    draw_cmd.add_argument("--seed", type=int, default=None, help="Random seed (optional, for reproducibility)")
    draw_cmd.add_argument("--json", action="store_true", help="Print the assignment as JSON")

    check_cmd = commands.add_parser("check", help="Run the built-in algorithm self-check")
    check_cmd.add_argument("--seed", type=int, default=None, help="Random seed (optional)")

    sim_cmd = commands.add_parser("simulate", help="Repeat a draw and report statistics")
    sim_cmd.add_argument("request", help="Path to a JSON file with participants and exclusions")
    sim_cmd.add_argument("--runs", type=int, default=100, help="Number of draws (default: 100)")
    sim_cmd.add_argument("--max-attempts", type=int, default=None, help="Attempt budget per draw")
    sim_cmd.add_argument("--seed", type=int, default=None, help="Random seed (optional)")

    return parser


def _print_draw(participants: List[Participant], report, as_json: bool) -> None:
    if as_json:
        payload = {
            "seed": report.seed,
            "attempts": report.attempts,
            "assignments": [
                {"giver_id": pair.giver_id, "receiver_id": pair.receiver_id} for pair in report.pairs
            ],
        }
        print(json.dumps(payload, indent=2))
        return
    for line in format_assignment(participants, report.assignment):
        print(line)


def _cmd_draw(args, max_attempts: int) -> int:
    participants, exclusions = load_request(args.request)
    report = run_draw(participants, exclusions, max_attempts=max_attempts, seed=args.seed)
    _print_draw(participants, report, args.json)
    return EXIT_OK


def _cmd_check(args) -> int:
    reports = run_scenarios(seed=args.seed)
    for report in reports:
        status = "PASS" if report.passed else "FAIL"
        print(f"[{status}] {report.name}: {report.message}")
    return EXIT_OK if all(report.passed for report in reports) else EXIT_IMPOSSIBLE


def _cmd_simulate(args, max_attempts: int) -> int:
    participants, exclusions = load_request(args.request)
    if args.runs < 1:
        raise InvalidInput("--runs must be a positive integer.")
    stats = simulate(participants, exclusions, runs=args.runs, max_attempts=max_attempts, seed=args.seed)
    print(f"runs:                 {stats.runs}")
    print(f"successes:            {stats.successes} ({stats.success_rate:.1%})")
    print(f"proven infeasible:    {stats.proven_failures}")
    print(f"budget exhausted:     {stats.exhausted_failures}")
    print(f"mean attempts:        {stats.mean_attempts:.2f}")
    print(f"max attempts:         {stats.max_attempts_seen}")
    print(f"distinct assignments: {stats.distinct_assignments}")
    return EXIT_OK if stats.successes else EXIT_IMPOSSIBLE


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = load_settings()
    setup_logging(settings.log_level, settings.log_path)

    max_attempts = getattr(args, "max_attempts", None)
    if max_attempts is None:
        max_attempts = settings.max_attempts
    try:
        if args.command == "draw":
            return _cmd_draw(args, max_attempts)
        if args.command == "check":
            return _cmd_check(args)
        return _cmd_simulate(args, max_attempts)
    except AssignmentError as exc:
        logger.bind(command=args.command).error("{error}", error=str(exc))
        return EXIT_INVALID if exc.kind == ErrorKind.INVALID_INPUT else EXIT_IMPOSSIBLE
