"""
Typing Session
==============
Glues one Canonical Path, one Segmenter and one Output Sink together.

Why is this file needed?
------------------------
1. Ordering: Each turn is reduced, the cascade resolved, the diff computed and
   every resulting event delivered before the next turn is accepted.
2. Ownership: A session exclusively owns its path and cursor. Two devices
   means two sessions; they share nothing but the (read-only) keymap.
"""
from __future__ import annotations

import logging
from typing import List, Optional

from cuboard.controller.segmenter import Commit, Event, LineFinished, Reset, Segmenter
from cuboard.controller.sinks import OutputSink, TextBuffer, deliver
from cuboard.model.keymap import Keymap
from cuboard.model.path import CanonicalPath
from cuboard.model.turns import Face, Turn, parse_turns

logger = logging.getLogger(__name__)


class TypingSession:
    def __init__(
        self,
        keymap: Keymap,
        sink: Optional[OutputSink] = None,
        finish_on_newline: bool = True,
    ) -> None:
        self.keymap = keymap
        self.sink: OutputSink = sink if sink is not None else TextBuffer()
        self.finish_on_newline = finish_on_newline

        self.path = CanonicalPath()
        self.segmenter = Segmenter(keymap)
        self.turn_count: int = 0

    # ---------------------------------------------------------------
    # Input
    # ---------------------------------------------------------------

    def feed(self, turn: Turn) -> List[Event]:
        """Apply one turn and deliver the resulting events. Returns them too."""
        self.turn_count += 1
        self.path.apply(turn)
        events = self.segmenter.update(self.path)
        deliver(self.sink, events)

        if self.finish_on_newline and any(
            isinstance(event, Commit) and event.character == "\n" for event in events
        ):
            events.append(self.finish())
        return events

    def feed_move(self, face: Face | str, quarter_turns: int) -> List[Event]:
        """Validate a raw (face, quarter_turns) record, then feed it."""
        return self.feed(Turn(face, quarter_turns))

    def feed_notation(self, text: str) -> List[Event]:
        """
        Feed whitespace separated notation, e.g. "U F R'".
        All tokens are validated before any of them is applied.
        """
        events: List[Event] = []
        for turn in parse_turns(text):
            events.extend(self.feed(turn))
        return events

    # ---------------------------------------------------------------
    # Session control
    # ---------------------------------------------------------------

    def finish(self) -> LineFinished:
        """
        Hand off the committed text. The consumed slots are dropped from the
        path, so the finished text can no longer be undone; a pending slot is
        kept.
        """
        consumed = self.segmenter.cursor
        text = self.segmenter.finish()
        self.path.drop_slots(consumed)

        event = LineFinished(text)
        deliver(self.sink, [event])
        logger.info(f"Finished line {text!r}")
        return event

    def reset(self) -> Reset:
        """Clear the path and cursor, and the sink, with a single Reset event."""
        self.path.clear()
        self.segmenter.reset()

        event = Reset()
        deliver(self.sink, [event])
        logger.info("Typing session has been reset.")
        return event

    # ---------------------------------------------------------------
    # Read access
    # ---------------------------------------------------------------

    @property
    def emitted_count(self) -> int:
        return self.segmenter.emitted_count

    @property
    def committed_text(self) -> str:
        return self.segmenter.committed_text

    @property
    def pending(self) -> str:
        """Notation of the slots not yet consumed into a key."""
        track = self.path.flat_track()[self.segmenter.cursor:]
        return " ".join(slot.notation for slot in track)
