"""
Command line front-end.

Usage:
    cbt-toolkit [--root DIR] [--settings FILE] [-v] <command> QUIZ [...]

Commands:
    parse        Show the parsed questions and any advisory errors
    history      List recorded attempts, newest first
    record       Append an attempt from a compact JSON record file, then list
                 the history unless show_history_after_exam is off
    remove       Delete an attempt by session id
    performance  Show per-question mastery (rebuilt from history on demand)
    adaptive     Show an adaptive re-study selection

Exit status is 1 for a missing quiz, an unknown attempt id or an
unreadable record file, 0 otherwise.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from cbt_toolkit import __version__
from cbt_toolkit.analysis import summarize_performance
from cbt_toolkit.config import SettingsStore, StudySettings
from cbt_toolkit.controller import StudyController
from cbt_toolkit.core.models import ExamDefinition, ExamResult, question_type_of
from cbt_toolkit.core.schemas import ValidationError
from cbt_toolkit.core.utils import decompress_result, round_tenth
from cbt_toolkit.ledger import DocumentNotFoundError, FileDocumentStore
from cbt_toolkit.ledger.markup import format_duration

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cbt-toolkit",
        description="Parse quiz markup, keep attempt history and build adaptive re-study sessions",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--root", type=Path, default=Path("."), help="Directory holding the quiz documents")
    parser.add_argument("--settings", type=Path, help="Settings JSON file (defaults when omitted)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    commands = parser.add_subparsers(dest="command", required=True)

    parse_cmd = commands.add_parser("parse", help="Show parsed questions")
    parse_cmd.add_argument("quiz", help="Quiz document name, relative to --root")

    history_cmd = commands.add_parser("history", help="List recorded attempts")
    history_cmd.add_argument("quiz")

    record_cmd = commands.add_parser("record", help="Append an attempt")
    record_cmd.add_argument("quiz")
    record_cmd.add_argument("result", type=Path, help="Compact attempt record (JSON file)")

    remove_cmd = commands.add_parser("remove", help="Delete an attempt")
    remove_cmd.add_argument("quiz")
    remove_cmd.add_argument("session_id", help="Full session id of the attempt")

    performance_cmd = commands.add_parser("performance", help="Show per-question mastery")
    performance_cmd.add_argument("quiz")
    performance_cmd.add_argument("--rebuild", action="store_true", help="Ignore the cached index")

    adaptive_cmd = commands.add_parser("adaptive", help="Show an adaptive re-study selection")
    adaptive_cmd.add_argument("quiz")
    adaptive_cmd.add_argument("--seed", type=int, help="Random seed for a reproducible selection")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    settings = SettingsStore(args.settings).load() if args.settings else StudySettings()
    controller = StudyController(FileDocumentStore(args.root), settings)

    try:
        definition = controller.load_quiz(args.quiz)
    except DocumentNotFoundError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    logger.debug(f"Running {args.command} on {args.quiz} under {args.root}")
    handler = _COMMANDS[args.command]
    return handler(controller, definition, args)


# ─────────────────────────────────────────────────────────────────────────────
# Commands
# ─────────────────────────────────────────────────────────────────────────────

def _cmd_parse(controller: StudyController, definition: ExamDefinition, args: argparse.Namespace) -> int:
    config = definition.config
    print(f"{definition.title} ({len(definition.questions)} questions)")
    print(
        f"time limit: {config.time_limit_minutes or 'none'} | "
        f"pass: {round((config.pass_threshold or 0) * 100)}% | "
        f"shuffle: {config.shuffle_questions} | show answer: {config.show_answer}"
    )
    for message in config.range_errors:
        print(f"exam-range: {message}")

    for question in definition.questions:
        first_line = question.question_text.split("\n")[0]
        print(f"{question.order:>3}. [{question_type_of(question).value}] {question.id} {first_line}")
        for message in question.errors:
            print(f"       ! {message}")
    return 0


def _cmd_history(controller: StudyController, definition: ExamDefinition, args: argparse.Namespace) -> int:
    attempts = controller.attempts(definition)
    if not attempts:
        print("No attempts recorded.")
        return 0

    _print_attempts(attempts)
    return 0


def _print_attempts(attempts: List[ExamResult]) -> None:
    for attempt in attempts:
        status = "PASS" if attempt.is_pass else "FAIL"
        correct = f"{attempt.correct_count}/{len(attempt.question_results)}"
        print(
            f"{attempt.session_id}  {attempt.recorded_at:%Y-%m-%d %H:%M}  "
            f"{round_tenth(attempt.percentage):5.1f}%  {correct:>7} correct  "
            f"{format_duration(attempt.duration_seconds):>8}  {status}"
        )


def _cmd_record(controller: StudyController, definition: ExamDefinition, args: argparse.Namespace) -> int:
    try:
        result = decompress_result(json.loads(args.result.read_text(encoding="utf-8")))
    except (OSError, ValueError, ValidationError) as e:
        print(f"error: cannot read attempt record {args.result}: {e}", file=sys.stderr)
        return 1

    if controller.record_attempt(definition, result) is None:
        print("History saving is disabled; attempt not recorded.")
        return 0

    print(f"Recorded attempt {result.short_id}.")
    if controller.settings.show_history_after_exam:
        _print_attempts(controller.attempts(definition))
    return 0


def _cmd_remove(controller: StudyController, definition: ExamDefinition, args: argparse.Namespace) -> int:
    if not controller.delete_attempt(definition, args.session_id):
        print(f"error: no attempt {args.session_id} in {definition.source_path}", file=sys.stderr)
        return 1
    print(f"Removed attempt {args.session_id[:8]}.")
    return 0


def _cmd_performance(controller: StudyController, definition: ExamDefinition, args: argparse.Namespace) -> int:
    if args.rebuild:
        index = controller.refresh_performance(definition)
    else:
        index = controller.load_performance(definition)
    if index is None:
        print("No attempts recorded.")
        return 0

    for perf in sorted(index.values(), key=lambda p: p.question_order):
        rate = "-" if not perf.has_attempts else f"{perf.success_rate * 100:.0f}%"
        print(
            f"{perf.question_order:>3}. {perf.question_id:<8} {perf.category.value:<10} "
            f"{perf.correct_count}/{perf.total_attempts} ({rate}) streak {perf.streak}"
        )

    summary = summarize_performance(index)
    print(
        f"mastered {summary.mastered}, improving {summary.improving}, "
        f"struggling {summary.struggling}, failed {summary.failed}, unseen {summary.unseen} "
        f"({summary.mastery_percent}% mastered)"
    )
    return 0


def _cmd_adaptive(controller: StudyController, definition: ExamDefinition, args: argparse.Namespace) -> int:
    adaptive = controller.build_adaptive_exam(definition, seed=args.seed)
    selection = adaptive.selection

    if selection.no_history:
        print("Take the exam at least once before starting adaptive study.")
        return 0
    if selection.all_mastered:
        print(f"All {selection.mastered_count} questions are mastered.")
        return 0

    print(
        f"{len(selection.questions)} questions: {selection.improvable_count} to improve, "
        f"{selection.mastered_count} mastered for review"
    )
    for question in selection.questions:
        first_line = question.question_text.split("\n")[0]
        print(f"{question.order:>3}. {question.id} {first_line}")
    return 0


_COMMANDS = {
    "parse": _cmd_parse,
    "history": _cmd_history,
    "record": _cmd_record,
    "remove": _cmd_remove,
    "performance": _cmd_performance,
    "adaptive": _cmd_adaptive,
}


if __name__ == "__main__":
    sys.exit(main())
