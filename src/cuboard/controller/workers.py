"""
Background Workers (Threading)
==============================
This module connects the typing session to the Qt event loop.

Why is this file needed?
------------------------
1. Responsiveness: Reading turns (from a log file today, from a device link
   in a real setup) may block. TurnFeedWorker does that on a QThread.
2. Ordering: The worker never touches the session. It emits one
   `turn_ready` signal per turn; SessionController lives on the main thread,
   so every turn arrives through the same queued connection and is fully
   processed before the next one.
3. Signals: SessionController is an Output Sink that re-emits
   Commit/Retract/Reset and the advisory reports as Qt Signals.

Classes:
    SessionController: QObject wrapper around a TypingSession.
    TurnFeedWorker: Parses a token stream and emits validated Turns.
"""
from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from PySide6.QtCore import QObject, QThread, Signal, Slot

from cuboard.controller.replay import Token, parse_token
from cuboard.controller.segmenter import LineFinished, Report
from cuboard.controller.session import TypingSession
from cuboard.controller.sinks import TextBuffer
from cuboard.model.errors import InvalidTurnError
from cuboard.model.keymap import Keymap
from cuboard.model.turns import Turn

logger = logging.getLogger(__name__)


class SessionController(QObject):
    # Signals mirror the Output Sink contract
    committed = Signal(str)
    retracted = Signal()
    cleared = Signal()
    unmapped = Signal(object)        # UnmappedKeyPair
    line_finished = Signal(str)
    turn_rejected = Signal(str)

    def __init__(self, keymap: Keymap, finish_on_newline: bool = True, parent: Optional[QObject] = None):
        super().__init__(parent)
        self.buffer = TextBuffer()
        self.session = TypingSession(keymap, sink=self, finish_on_newline=finish_on_newline)
        self.rejected: List[str] = []

    # --- Output Sink ---
    def commit(self, character: str) -> None:
        self.buffer.commit(character)
        self.committed.emit(character)

    def retract(self) -> None:
        self.buffer.retract()
        self.retracted.emit()

    def reset(self) -> None:
        self.buffer.reset()
        self.cleared.emit()

    def report(self, event: Report) -> None:
        self.buffer.report(event)
        if isinstance(event, LineFinished):
            self.line_finished.emit(event.text)
        else:
            self.unmapped.emit(event)

    # --- Slots ---
    @Slot(object)
    def feed_turn(self, turn: Turn) -> None:
        self.session.feed(turn)

    @Slot(str)
    def reject_turn(self, message: str) -> None:
        self.rejected.append(message)
        self.turn_rejected.emit(message)

    @Slot()
    def reset_session(self) -> None:
        self.session.reset()

    @property
    def text(self) -> str:
        return self.buffer.text


class TurnFeedWorker(QThread):
    # Signals to hand turns to the main thread
    turn_ready = Signal(object)      # Turn
    turn_rejected = Signal(str)

    def __init__(self, tokens: Iterable[Token], interval_ms: int = 0):
        super().__init__()
        self.tokens = tokens
        self.interval_ms = interval_ms
        self.is_running = True
        self.emitted = 0

    def run(self):
        logger.info("Starting turn feed in background thread...")
        for lineno, token in self.tokens:
            if not self.is_running:
                logger.info("Turn feed stopped before the end of the stream.")
                break

            try:
                turn = parse_token(lineno, token)
            except InvalidTurnError as e:
                logger.warning(f"Rejected turn: {e}")
                self.turn_rejected.emit(str(e))
                continue

            self.turn_ready.emit(turn)
            self.emitted += 1
            if self.interval_ms:
                self.msleep(self.interval_ms)

        logger.info(f"Turn feed finished after {self.emitted} turns.")

    def stop(self) -> None:
        self.is_running = False
