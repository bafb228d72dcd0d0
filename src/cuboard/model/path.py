"""
Canonical Reducer
=================
Keeps a reduced representation of the entire rotation history, updated one
turn at a time.

Why is this file needed?
------------------------
1. Path equivalence: Two rotation histories are equivalent iff they reduce to
   the same CanonicalPath. Turns on the same axis commute, so they are
   accumulated into one Syllable; turns on different axes never commute.
2. Undo by inversion: When a syllable returns to zero on both poles it is
   removed, and the neighbours it used to separate may now share an axis and
   merge. This cascade is what makes "type, undo, retype" behave like
   backspacing.

Classes:
    Slot: One single-pole rotation extracted for pairing.
    Syllable: Accumulated rotation state of one axis.
    CanonicalPath: The reduced, axis-alternating sequence of syllables.
"""
from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import List, Optional

from cuboard.model.turns import Axis, Face, Pole, Turn, combine, face_of, format_rotation

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Slot:
    """A single-pole rotation, e.g. (R, -1)."""
    face: Face
    exponent: int

    @property
    def notation(self) -> str:
        return format_rotation(self.face, self.exponent)


@dataclass
class Syllable:
    """
    Rotation state of one axis.

    `last_touched` and `touched_at` only decide the order in which the two
    slots of a two-pole syllable are read out; they are not part of the path
    identity and are excluded from equality.
    """
    axis: Axis
    exp_primary: int = 0
    exp_secondary: int = 0
    last_touched: Pole = field(default=Pole.PRIMARY, compare=False)
    touched_at: int = field(default=0, compare=False)

    @classmethod
    def from_turn(cls, turn: Turn, clock: int) -> Syllable:
        syllable = cls(axis=turn.axis)
        syllable.touch(turn.pole, turn.quarter_turns, clock)
        return syllable

    def exponent(self, pole: Pole) -> int:
        return self.exp_primary if pole is Pole.PRIMARY else self.exp_secondary

    def touch(self, pole: Pole, quarter_turns: int, clock: int) -> None:
        if pole is Pole.PRIMARY:
            self.exp_primary = combine(self.exp_primary, quarter_turns)
        else:
            self.exp_secondary = combine(self.exp_secondary, quarter_turns)
        self.last_touched = pole
        self.touched_at = clock

    def absorb(self, later: Syllable) -> None:
        """Merge a same-axis syllable that follows this one in the path."""
        if later.axis is not self.axis:
            raise ValueError(f"Cannot merge {later.axis} into {self.axis}")
        self.exp_primary = combine(self.exp_primary, later.exp_primary)
        self.exp_secondary = combine(self.exp_secondary, later.exp_secondary)
        # The chronologically later sub-update keeps its tag
        if later.touched_at > self.touched_at:
            self.last_touched = later.last_touched
            self.touched_at = later.touched_at

    @property
    def is_identity(self) -> bool:
        return self.exp_primary == 0 and self.exp_secondary == 0

    def slots(self) -> List[Slot]:
        """
        One slot per nonzero pole. With both poles set, the pole that was NOT
        touched most recently comes first, so redoing a rotation moves it last.
        """
        recent = self.last_touched
        order = (recent.other, recent)
        return [
            Slot(face_of(self.axis, pole), self.exponent(pole))
            for pole in order
            if self.exponent(pole) != 0
        ]

    def drop_pole(self, pole: Pole) -> None:
        if pole is Pole.PRIMARY:
            self.exp_primary = 0
        else:
            self.exp_secondary = 0

    def copy(self) -> Syllable:
        return Syllable(self.axis, self.exp_primary, self.exp_secondary, self.last_touched, self.touched_at)


class CanonicalPath:
    """
    The reduced form of a rotation history.

    Invariants:
        - no syllable is the identity (both exponents zero);
        - no two adjacent syllables share an axis.
    Only the tail is ever touched, so a plain list used as a stack suffices.
    """

    def __init__(self) -> None:
        self._syllables: List[Syllable] = []
        # Logical time of the last applied turn, used for the merge tag rule
        self._clock: int = 0

    # ---------------------------------------------------------------
    # Reduction
    # ---------------------------------------------------------------

    def apply(self, turn: Turn) -> None:
        """Append one turn and restore both invariants."""
        self._clock += 1
        last = self.last

        # 1. New axis: open a new syllable
        if last is None or last.axis is not turn.axis:
            self._syllables.append(Syllable.from_turn(turn, self._clock))
            return

        # 2. Same axis: accumulate on the matching pole
        last.touch(turn.pole, turn.quarter_turns, self._clock)

        # 3. Cancellation cascade
        self._collapse_tail()

    def _collapse_tail(self) -> None:
        while self._syllables and self._syllables[-1].is_identity:
            removed = self._syllables.pop()
            logger.debug(f"Syllable on {removed.axis} cancelled, path length {len(self._syllables)}")

            if len(self._syllables) >= 2 and self._syllables[-1].axis is self._syllables[-2].axis:
                later = self._syllables.pop()
                self._syllables[-1].absorb(later)
                logger.debug(f"Merged neighbouring {later.axis} syllables")

    def clear(self) -> None:
        self._syllables.clear()

    def drop_slots(self, count: int) -> None:
        """
        Forget the first `count` slots of the flat track.

        Whole syllables are removed; a two-pole syllable split by the boundary
        keeps only its later (pending) pole.
        """
        if count < 0 or count > self.slot_count:
            raise ValueError(f"Cannot drop {count} slots from a track of {self.slot_count}")

        remaining = count
        while remaining > 0:
            head = self._syllables[0]
            slots = head.slots()
            if len(slots) <= remaining:
                self._syllables.pop(0)
                remaining -= len(slots)
            else:
                # Split syllable: its first slot is the not-most-recent pole
                head.drop_pole(head.last_touched.other)
                remaining = 0

    # ---------------------------------------------------------------
    # Read access
    # ---------------------------------------------------------------

    @property
    def syllables(self) -> List[Syllable]:
        """Snapshot copies; mutating them does not affect the path."""
        return [syllable.copy() for syllable in self._syllables]

    @property
    def last(self) -> Optional[Syllable]:
        return self._syllables[-1] if self._syllables else None

    def flat_track(self) -> List[Slot]:
        track: List[Slot] = []
        for syllable in self._syllables:
            track.extend(syllable.slots())
        return track

    @property
    def slot_count(self) -> int:
        return sum(len(syllable.slots()) for syllable in self._syllables)

    def notation(self) -> str:
        return " ".join(slot.notation for slot in self.flat_track())

    def __len__(self) -> int:
        return len(self._syllables)

    def __bool__(self) -> bool:
        return bool(self._syllables)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CanonicalPath):
            return NotImplemented
        return self._syllables == other._syllables

    def __repr__(self) -> str:
        return f"CanonicalPath({self.notation()!r})"
