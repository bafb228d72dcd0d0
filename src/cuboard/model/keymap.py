"""
Keymap (Character Table)
========================
Pure lookup from an ordered pair of slot classes to a character.

Why is this file needed?
------------------------
1. Configuration: Which pair of rotations types which character is data, not
   algorithm. The bundled layout lives in cuboard/assets/keymap_default.json.
2. Partiality: Most of the 24 x 24 class pairs are deliberately unmapped.
   A miss is a normal outcome (`lookup` returns None), never an exception.

The table is a numpy unicode array indexed by SlotClass.index; an empty
string marks an unmapped pair.
"""
from __future__ import annotations

from dataclasses import dataclass
import json
import logging
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple

import numpy as np

from cuboard.model.errors import InvalidTurnError, KeymapError
from cuboard.model.path import Slot
from cuboard.model.turns import MAPPED_KINDS, Face, SlotKind, classify, format_rotation, parse_rotation

logger = logging.getLogger(__name__)

_FACES: tuple[Face, ...] = tuple(Face)
_KIND_EXPONENT = {SlotKind.CW1: 1, SlotKind.CW2: 2, SlotKind.CCW1: -1, SlotKind.CCW2: -2}

# Leader kinds accepted by each keymap layer. The leader's direction is free.
LAYER_LEADER_KINDS: Dict[str, Tuple[SlotKind, ...]] = {
    "single": (SlotKind.CW1, SlotKind.CCW1),
    "double": (SlotKind.CW2, SlotKind.CCW2),
}


@dataclass(frozen=True)
class SlotClass:
    """Keymap address of a slot: its face and its magnitude/direction kind."""
    face: Face
    kind: SlotKind

    @classmethod
    def of(cls, slot: Slot) -> SlotClass:
        return cls(slot.face, classify(slot.exponent))

    @classmethod
    def parse(cls, token: str) -> SlotClass:
        try:
            face, exponent = parse_rotation(token)
        except InvalidTurnError as e:
            raise KeymapError(str(e)) from e
        kind = classify(exponent)
        if kind is SlotKind.OTHER:
            raise KeymapError(f"Slot class out of range: {token!r}")
        return cls(face, kind)

    @property
    def is_addressable(self) -> bool:
        return self.kind is not SlotKind.OTHER

    @property
    def index(self) -> int:
        if not self.is_addressable:
            raise KeymapError(f"{self} has no keymap address")
        return _FACES.index(self.face) * len(MAPPED_KINDS) + MAPPED_KINDS.index(self.kind)

    @property
    def notation(self) -> str:
        if not self.is_addressable:
            return f"{self.face}?"
        return format_rotation(self.face, _KIND_EXPONENT[self.kind])

    def __str__(self) -> str:
        return f"{self.kind}/{self.face}"


SLOT_CLASS_COUNT: int = len(_FACES) * len(MAPPED_KINDS)


class Keymap:
    """A (possibly partial) map (SlotClass, SlotClass) -> character."""

    def __init__(self, name: str = "custom") -> None:
        self.name = name
        self._table = np.full((SLOT_CLASS_COUNT, SLOT_CLASS_COUNT), "", dtype="<U1")

    # ---------------------------------------------------------------
    # Building
    # ---------------------------------------------------------------

    def bind(self, first: SlotClass, second: SlotClass, character: str) -> None:
        if not isinstance(character, str) or len(character) != 1:
            raise KeymapError(f"Keymap entries must be single characters, got {character!r}")
        if not (character.isprintable() or character == "\n"):
            raise KeymapError(f"Keymap character must be printable or newline, got {character!r}")
        self._table[first.index, second.index] = character

    @classmethod
    def from_entries(cls, entries: Iterable[Tuple[str, str, str]], name: str = "custom") -> Keymap:
        """Build from (first, second, character) triples in move notation."""
        keymap = cls(name)
        for first, second, character in entries:
            keymap.bind(SlotClass.parse(first), SlotClass.parse(second), character)
        return keymap

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Keymap:
        """
        Build from the JSON layout of cuboard/assets/keymap_default.json.

        "layers" maps a layer name ("single"/"double") to rows keyed by the
        main slot ("U", "U'", ...). Character i of a row is typed by
        neighbours[main face][i] as leader, then the main slot. "pairs" adds
        explicit [first, second, char] entries.
        """
        if not isinstance(data, dict):
            raise KeymapError("Keymap data must be a JSON object")

        keymap = cls(str(data.get("name", "custom")))
        layers = data.get("layers", {})
        if not isinstance(layers, dict):
            raise KeymapError("'layers' must be an object")
        if layers:
            neighbours = cls._read_neighbours(data.get("neighbours"))
            for layer_name, rows in layers.items():
                keymap._bind_layer(layer_name, rows, neighbours)

        pairs = data.get("pairs", [])
        if not isinstance(pairs, list):
            raise KeymapError("'pairs' must be a list")
        for entry in pairs:
            if not isinstance(entry, (list, tuple)) or len(entry) != 3:
                raise KeymapError(f"Pair entries must be [first, second, char], got {entry!r}")
            first, second, character = entry
            keymap.bind(SlotClass.parse(first), SlotClass.parse(second), character)

        logger.debug(f"Keymap '{keymap.name}' built with {len(keymap)} entries")
        return keymap

    @classmethod
    def from_file(cls, filepath: str) -> Keymap:
        logger.info(f"Loading keymap from: {filepath}")
        try:
            with open(filepath, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise KeymapError(f"Keymap file '{filepath}' is not valid JSON: {e}") from e
        except UnicodeDecodeError as e:
            raise KeymapError(f"Keymap file '{filepath}' is not UTF-8 text: {e}") from e
        return cls.from_dict(data)

    @staticmethod
    def _read_neighbours(raw: Any) -> Dict[Face, List[Face]]:
        if not isinstance(raw, dict):
            raise KeymapError("Layered keymaps need a 'neighbours' object")
        for main, row in raw.items():
            if not isinstance(row, str):
                raise KeymapError(f"Neighbours of {main!r} must be a string of faces, got {row!r}")
        try:
            return {Face(main): [Face(letter) for letter in row] for main, row in raw.items()}
        except ValueError as e:
            raise KeymapError(f"Bad face in 'neighbours': {e}") from e

    def _bind_layer(self, layer_name: str, rows: Dict[str, str], neighbours: Dict[Face, List[Face]]) -> None:
        if layer_name not in LAYER_LEADER_KINDS:
            raise KeymapError(f"Unknown keymap layer: {layer_name!r}")
        if not isinstance(rows, dict):
            raise KeymapError(f"Layer '{layer_name}' must be an object of rows")
        leader_kinds = LAYER_LEADER_KINDS[layer_name]

        for main_token, characters in rows.items():
            if not isinstance(characters, str):
                raise KeymapError(f"Layer '{layer_name}' row {main_token!r} must be a string")
            main = SlotClass.parse(main_token)
            leaders = neighbours.get(main.face)
            if leaders is None:
                raise KeymapError(f"No neighbours defined for face {main.face}")
            if len(characters) != len(leaders):
                raise KeymapError(
                    f"Layer '{layer_name}' row {main_token!r} has {len(characters)} characters, "
                    f"expected {len(leaders)}"
                )
            for leader_face, character in zip(leaders, characters):
                for kind in leader_kinds:
                    self.bind(SlotClass(leader_face, kind), main, character)

    # ---------------------------------------------------------------
    # Lookup
    # ---------------------------------------------------------------

    def lookup(self, first: SlotClass, second: SlotClass) -> Optional[str]:
        """Character for the ordered pair, or None if the pair is unmapped."""
        if not (first.is_addressable and second.is_addressable):
            return None
        character = self._table[first.index, second.index]
        return str(character) if character else None

    def entries(self) -> Iterator[Tuple[SlotClass, SlotClass, str]]:
        classes = [SlotClass(face, kind) for face in _FACES for kind in MAPPED_KINDS]
        for i, j in np.argwhere(self._table != ""):
            yield classes[i], classes[j], str(self._table[i, j])

    def __contains__(self, pair: Tuple[SlotClass, SlotClass]) -> bool:
        return self.lookup(*pair) is not None

    def __len__(self) -> int:
        return int(np.count_nonzero(self._table != ""))

    def __repr__(self) -> str:
        return f"Keymap(name={self.name!r}, entries={len(self)})"


def load_default_keymap() -> Keymap:
    """Load the keymap bundled in the assets directory."""
    from cuboard.config import DEFAULT_KEYMAP_PATH

    return Keymap.from_file(DEFAULT_KEYMAP_PATH)
