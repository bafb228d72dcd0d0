"""
Axis/Turn Algebra
=================
Classification of the six faces into three opposing pairs and the
arithmetic used to combine rotations on the same face.

Why is this file needed?
------------------------
1. Addressing: Every face belongs to exactly one Axis and is either its
   PRIMARY or its SECONDARY pole. The reducer only ever talks about
   (axis, pole) so that U and D land in the same syllable.
2. Notation: Turns are written in the usual cube notation (U, U', U2, U2').
   Parsing happens here, at the boundary, so malformed input never reaches
   the reducer.

Exponents are plain integers. Composition never wraps modulo 4: U U U U is
a different path from doing nothing.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum, StrEnum
from typing import Iterable, List

from cuboard.model.errors import InvalidTurnError


class Face(StrEnum):
    U = "U"
    D = "D"
    L = "L"
    R = "R"
    F = "F"
    B = "B"

    @property
    def axis(self) -> Axis:
        return axis_of(self)

    @property
    def pole(self) -> Pole:
        return pole_of(self)


class Axis(StrEnum):
    """The three pairs of opposing faces."""
    UD = "UD"
    LR = "LR"
    FB = "FB"


class Pole(Enum):
    PRIMARY = 0
    SECONDARY = 1

    @property
    def other(self) -> Pole:
        return Pole.SECONDARY if self is Pole.PRIMARY else Pole.PRIMARY


class SlotKind(StrEnum):
    """Magnitude/direction category of a single-pole rotation."""
    CW1 = "single-CW"
    CW2 = "double-CW"
    CCW1 = "single-CCW"
    CCW2 = "double-CCW"
    OTHER = "other"


# Fixed labeling; only used for consistent addressing
_FACE_ADDRESS = {
    Face.U: (Axis.UD, Pole.PRIMARY),
    Face.D: (Axis.UD, Pole.SECONDARY),
    Face.R: (Axis.LR, Pole.PRIMARY),
    Face.L: (Axis.LR, Pole.SECONDARY),
    Face.F: (Axis.FB, Pole.PRIMARY),
    Face.B: (Axis.FB, Pole.SECONDARY),
}
_ADDRESS_FACE = {address: face for face, address in _FACE_ADDRESS.items()}

_KIND_BY_EXPONENT = {
    1: SlotKind.CW1,
    2: SlotKind.CW2,
    -1: SlotKind.CCW1,
    -2: SlotKind.CCW2,
}

# Kinds that can be addressed by a keymap, in table order
MAPPED_KINDS: tuple[SlotKind, ...] = (SlotKind.CW1, SlotKind.CW2, SlotKind.CCW1, SlotKind.CCW2)

_NOTATION_RE = re.compile(r"^([UDLRFB])(\d*)(')?$")


def axis_of(face: Face) -> Axis:
    return _FACE_ADDRESS[face][0]


def pole_of(face: Face) -> Pole:
    return _FACE_ADDRESS[face][1]


def face_of(axis: Axis, pole: Pole) -> Face:
    return _ADDRESS_FACE[(axis, pole)]


def combine(old_exponent: int, new_exponent: int) -> int:
    """Compose two rotations of the same face. No modulus."""
    return old_exponent + new_exponent


def classify(exponent: int) -> SlotKind:
    """Map an exponent to its category; magnitudes of 3 or more are OTHER."""
    return _KIND_BY_EXPONENT.get(exponent, SlotKind.OTHER)


def format_rotation(face: Face, exponent: int) -> str:
    """Render one single-face rotation, e.g. (U, -2) -> "U2'"."""
    count = abs(exponent)
    text = str(face) if count == 1 else f"{face}{count}"
    return text + "'" if exponent < 0 else text


def parse_rotation(token: str) -> tuple[Face, int]:
    """Parse "U", "U'", "U2", "U2'" (any positive count) into (face, exponent)."""
    match = _NOTATION_RE.match(token.strip()) if isinstance(token, str) else None
    if match is None:
        raise InvalidTurnError(f"Malformed turn notation: {token!r}")

    letter, count, prime = match.groups()
    magnitude = int(count) if count else 1
    if magnitude == 0:
        raise InvalidTurnError(f"Zero-magnitude turn: {token!r}")
    return Face(letter), -magnitude if prime else magnitude


@dataclass(frozen=True)
class Turn:
    """One atomic rotation: a face and a nonzero number of quarter-turns."""
    face: Face
    quarter_turns: int

    def __post_init__(self) -> None:
        try:
            face = Face(self.face)
        except ValueError:
            raise InvalidTurnError(f"Unknown face: {self.face!r}") from None
        # bool is an int subclass, but True is not a rotation
        if isinstance(self.quarter_turns, bool) or not isinstance(self.quarter_turns, int):
            raise InvalidTurnError(f"Quarter-turns must be an integer, got {self.quarter_turns!r}")
        if self.quarter_turns == 0:
            raise InvalidTurnError(f"Zero-magnitude turn on face {face}")
        # Accept plain "U" strings as faces
        object.__setattr__(self, "face", face)

    @classmethod
    def parse(cls, token: str) -> Turn:
        face, exponent = parse_rotation(token)
        return cls(face, exponent)

    @property
    def axis(self) -> Axis:
        return axis_of(self.face)

    @property
    def pole(self) -> Pole:
        return pole_of(self.face)

    def inverse(self) -> Turn:
        return Turn(self.face, -self.quarter_turns)

    @property
    def notation(self) -> str:
        return format_rotation(self.face, self.quarter_turns)

    def __str__(self) -> str:
        return self.notation


def parse_turns(text: str) -> List[Turn]:
    """Parse whitespace separated notation. Raises on the first bad token."""
    return [Turn.parse(token) for token in text.split()]


def format_turns(turns: Iterable[Turn]) -> str:
    return " ".join(turn.notation for turn in turns)
