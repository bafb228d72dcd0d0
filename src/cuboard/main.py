"""
Application Initialization
==========================
Command-line entry point. Builds the keymap, the session and a turn source,
then runs them.

Why is this file needed?
------------------------
It acts as the "Dependency Injection" root. It:
1. Sets up logging from the command-line flags.
2. Loads the keymap (bundled default or --keymap).
3. Wires a Turn Source to a session and prints the typed text.

Usage:
    $ cuboard type "R U U F"
    $ cuboard replay moves.txt --trace
"""
from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from PySide6.QtCore import QCoreApplication

from cuboard.config import available_keymaps, resolve_keymap_path
from cuboard.controller.replay import Token, read_turn_log
from cuboard.controller.segmenter import LineFinished
from cuboard.controller.session import TypingSession
from cuboard.controller.sinks import EventRecorder, TextBuffer, deliver
from cuboard.controller.workers import SessionController, TurnFeedWorker
from cuboard.logging_config import LEVEL_NAMES, setup_logging
from cuboard.model.errors import InvalidTurnError, KeymapError
from cuboard.model.keymap import Keymap

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="cuboard", description="Type text with face turns of a cube.")
    parser.add_argument("--keymap", default="default",
                        help=f"bundled keymap ({', '.join(available_keymaps()) or 'none found'}) or a JSON file")
    parser.add_argument("--no-finish", action="store_true", help="do not hand off lines after a newline")
    parser.add_argument("--trace", action="store_true", help="print every emitted event")
    parser.add_argument("--log-level", default="WARNING", type=str.upper, choices=LEVEL_NAMES)
    parser.add_argument("--log-file", default=None, help="also write logs to this file")

    commands = parser.add_subparsers(dest="command", required=True)

    type_cmd = commands.add_parser("type", help="feed turns given as notation")
    type_cmd.add_argument("moves", nargs="+", help="turns, e.g. R U U F")

    replay_cmd = commands.add_parser("replay", help="replay a turn log through the worker thread")
    replay_cmd.add_argument("file", help="turn log, '#' starts a comment")
    replay_cmd.add_argument("--interval", type=int, default=0, help="delay between turns in ms")
    return parser


def run_type(keymap: Keymap, moves: List[str], finish: bool, trace: bool) -> int:
    recorder = EventRecorder()
    session = TypingSession(keymap, sink=recorder, finish_on_newline=finish)
    try:
        session.feed_notation(" ".join(moves))
    except InvalidTurnError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    buffer = TextBuffer()
    deliver(buffer, recorder.events)
    _print_result(buffer.text, session.pending, recorder.trace() if trace else None)
    return 0


def run_replay(keymap: Keymap, tokens: List[Token], finish: bool, trace: bool, interval_ms: int = 0) -> int:
    app = QCoreApplication.instance() or QCoreApplication(sys.argv[:1])

    controller = SessionController(keymap, finish_on_newline=finish)
    recorder = EventRecorder()
    controller.committed.connect(recorder.commit)
    controller.retracted.connect(recorder.retract)
    controller.cleared.connect(recorder.reset)
    controller.unmapped.connect(recorder.report)
    controller.line_finished.connect(lambda text: recorder.report(LineFinished(text)))

    worker = TurnFeedWorker(tokens, interval_ms=interval_ms)
    worker.turn_ready.connect(controller.feed_turn)
    worker.turn_rejected.connect(controller.reject_turn)
    worker.finished.connect(app.quit)

    worker.start()
    app.exec()
    worker.wait()

    for message in controller.rejected:
        print(f"rejected: {message}", file=sys.stderr)
    _print_result(controller.text, controller.session.pending, recorder.trace() if trace else None)
    return 0


def _print_result(text: str, pending: str, trace: Optional[List[str]]) -> None:
    if trace is not None:
        for line in trace:
            print(line)
    print(text, end="" if text.endswith("\n") else "\n")
    if pending:
        print(f"pending: {pending}", file=sys.stderr)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    # 1. Setup Logging
    setup_logging(level=args.log_level, log_file=args.log_file)

    # 2. Load Keymap
    try:
        keymap = Keymap.from_file(resolve_keymap_path(args.keymap))
    except (OSError, KeymapError) as e:
        logger.error(f"Could not load keymap: {e}")
        return 1

    # 3. Run the selected Turn Source
    finish = not args.no_finish
    if args.command == "type":
        return run_type(keymap, args.moves, finish, args.trace)

    try:
        tokens = read_turn_log(args.file)
    except OSError as e:
        logger.error(f"Could not read turn log: {e}")
        return 1
    return run_replay(keymap, tokens, finish, args.trace, args.interval)


if __name__ == "__main__":
    sys.exit(main())
