"""
Segmenter / Emitter
===================
Derives Commit/Retract events from the Canonical Path.

Why is this file needed?
------------------------
1. Pairing: The path is flattened into an ordered list of slots (the flat
   track) and read two slots at a time. Every complete pair is one key; a
   trailing odd slot is pending and types nothing yet.
2. Diffing: The path can shrink (undo) or a committed pair can be rewritten
   (e.g. U F followed by another F becomes U F2). The segmenter compares the
   new pairs to the pairs it has already committed and emits retractions for
   whatever no longer matches, then commits the new tail.

The segmenter never mutates the path. It only remembers, per committed key,
which pair of slot classes produced it and whether a character was shown.
"""
from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import List, Optional, Union

from cuboard.model.keymap import Keymap, SlotClass
from cuboard.model.path import CanonicalPath, Slot

logger = logging.getLogger(__name__)


# ------------------------------------------------------------------------------
# Events
# ------------------------------------------------------------------------------
@dataclass(frozen=True)
class Commit:
    """Append one character."""
    character: str


@dataclass(frozen=True)
class Retract:
    """Remove the most recently committed character."""


@dataclass(frozen=True)
class Reset:
    """Clear everything in one step."""


@dataclass(frozen=True)
class UnmappedKeyPair:
    """A complete slot pair with no keymap entry. Advisory."""
    first: SlotClass
    second: SlotClass
    position: int

    def __str__(self) -> str:
        return f"unmapped key #{self.position}: {self.first.notation} {self.second.notation}"


@dataclass(frozen=True)
class LineFinished:
    """Committed text handed off; it can no longer be retracted."""
    text: str


Report = Union[UnmappedKeyPair, LineFinished]
Event = Union[Commit, Retract, Reset, UnmappedKeyPair, LineFinished]


@dataclass(frozen=True)
class CommittedKey:
    first: SlotClass
    second: SlotClass
    character: Optional[str]

    def matches(self, first: SlotClass, second: SlotClass) -> bool:
        return self.first == first and self.second == second


def pair_slots(track: List[Slot]) -> List[tuple[SlotClass, SlotClass]]:
    """Group a flat track into complete (first, second) class pairs."""
    return [
        (SlotClass.of(first), SlotClass.of(second))
        for first, second in zip(track[0::2], track[1::2])
    ]


class Segmenter:
    def __init__(self, keymap: Keymap) -> None:
        self.keymap = keymap
        self._committed: List[CommittedKey] = []

    @property
    def emitted_count(self) -> int:
        """Number of consumed slot pairs, shown or not."""
        return len(self._committed)

    @property
    def cursor(self) -> int:
        """Number of slots already consumed into keys. Always even."""
        return 2 * len(self._committed)

    @property
    def committed_text(self) -> str:
        return "".join(key.character for key in self._committed if key.character is not None)

    def update(self, path: CanonicalPath) -> List[Event]:
        """Recompute pairs from the path and return the events, in delivery order."""
        pairs = pair_slots(path.flat_track())

        # 1. Longest prefix that is still committed as-is
        keep = 0
        for key, (first, second) in zip(self._committed, pairs):
            if not key.matches(first, second):
                break
            keep += 1

        events: List[Event] = []

        # 2. Retract lost keys, most recent first
        for key in reversed(self._committed[keep:]):
            if key.character is not None:
                events.append(Retract())
        del self._committed[keep:]

        # 3. Commit the new keys
        for position, (first, second) in enumerate(pairs[keep:], start=keep):
            character = self.keymap.lookup(first, second)
            if character is None:
                report = UnmappedKeyPair(first, second, position)
                logger.warning(f"Skipping {report}")
                events.append(report)
            else:
                events.append(Commit(character))
            self._committed.append(CommittedKey(first, second, character))

        if events:
            logger.debug(f"Segmenter emitted {events}")
        return events

    def finish(self) -> str:
        """Hand off every committed key. Returns the text they produced."""
        text = self.committed_text
        self._committed.clear()
        return text

    def reset(self) -> None:
        self._committed.clear()
