"""
Output Sinks
============
Consumers of the Commit/Retract/Reset stream.

Classes:
    OutputSink: Protocol every sink implements.
    TextBuffer: Keeps the visible text (current line plus finished lines).
    EventRecorder: Keeps the raw event trace.
"""
from __future__ import annotations

import logging
from typing import Iterable, List, Protocol

from cuboard.controller.segmenter import Commit, Event, LineFinished, Report, Reset, Retract, UnmappedKeyPair
from cuboard.model.errors import RetractUnderflowError

logger = logging.getLogger(__name__)


class OutputSink(Protocol):
    def commit(self, character: str) -> None: ...
    def retract(self) -> None: ...
    def reset(self) -> None: ...
    def report(self, event: Report) -> None: ...


def deliver(sink: OutputSink, events: Iterable[Event]) -> None:
    """Hand events to the sink strictly in the given order."""
    for event in events:
        if isinstance(event, Commit):
            sink.commit(event.character)
        elif isinstance(event, Retract):
            sink.retract()
        elif isinstance(event, Reset):
            sink.reset()
        elif isinstance(event, (UnmappedKeyPair, LineFinished)):
            sink.report(event)
        else:
            raise TypeError(f"Unknown event: {event!r}")


class TextBuffer:
    """The visible typed text."""

    def __init__(self) -> None:
        self.lines: List[str] = []
        self.unmapped: List[UnmappedKeyPair] = []
        self._current: List[str] = []

    @property
    def current(self) -> str:
        """Text that can still be retracted."""
        return "".join(self._current)

    @property
    def text(self) -> str:
        return "".join(self.lines) + self.current

    def commit(self, character: str) -> None:
        self._current.append(character)

    def retract(self) -> None:
        if not self._current:
            raise RetractUnderflowError("Retract issued against an empty committed buffer")
        self._current.pop()

    def reset(self) -> None:
        self.lines.clear()
        self._current.clear()

    def report(self, event: Report) -> None:
        if isinstance(event, LineFinished):
            if event.text != self.current:
                logger.warning(f"Finished line {event.text!r} differs from buffer {self.current!r}")
            self.lines.append(event.text)
            self._current.clear()
        else:
            self.unmapped.append(event)


class EventRecorder:
    """Records every delivered event; used for traces and tests."""

    def __init__(self) -> None:
        self.events: List[Event] = []

    def commit(self, character: str) -> None:
        self.events.append(Commit(character))

    def retract(self) -> None:
        self.events.append(Retract())

    def reset(self) -> None:
        self.events.append(Reset())

    def report(self, event: Report) -> None:
        self.events.append(event)

    def clear(self) -> None:
        self.events.clear()

    def trace(self) -> List[str]:
        """Compact one-line-per-event rendering."""
        rendered = []
        for event in self.events:
            if isinstance(event, Commit):
                rendered.append(f"commit {event.character!r}")
            elif isinstance(event, Retract):
                rendered.append("retract")
            elif isinstance(event, Reset):
                rendered.append("reset")
            elif isinstance(event, LineFinished):
                rendered.append(f"line {event.text!r}")
            else:
                rendered.append(str(event))
        return rendered
