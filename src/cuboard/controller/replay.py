"""
Turn Log Replay
===============
A Turn Source that reads move notation from text instead of a device.

A turn log is plain text: whitespace separated tokens ("U", "R'", "F2"),
any number per line, '#' starts a comment. Malformed tokens are rejected at
this boundary, logged, and skipped; the stream continues.
"""
from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import Iterable, Iterator, List, Tuple

from cuboard.controller.session import TypingSession
from cuboard.model.errors import InvalidTurnError
from cuboard.model.turns import Turn

logger = logging.getLogger(__name__)

Token = Tuple[int, str]


@dataclass(frozen=True)
class RejectedTurn:
    line: int
    token: str
    reason: str


@dataclass
class ReplayResult:
    applied: int = 0
    rejected: List[RejectedTurn] = field(default_factory=list)


def iter_tokens(lines: Iterable[str]) -> Iterator[Token]:
    """Yield (line number, token) pairs, skipping comments and blank lines."""
    for lineno, line in enumerate(lines, start=1):
        content = line.split("#", 1)[0]
        for token in content.split():
            yield lineno, token


def read_turn_log(filepath: str) -> List[Token]:
    """Undecodable bytes become U+FFFD and are rejected like any other bad token."""
    logger.info(f"Reading turn log from: {filepath}")
    with open(filepath, "r", encoding="utf-8", errors="replace") as f:
        return list(iter_tokens(f))


def parse_token(lineno: int, token: str) -> Turn:
    """Parse one token, adding its position to the error message."""
    try:
        return Turn.parse(token)
    except InvalidTurnError as e:
        raise InvalidTurnError(f"line {lineno}: {e}") from e


def replay(session: TypingSession, tokens: Iterable[Token]) -> ReplayResult:
    """Feed tokens one at a time; bad tokens are reported and skipped."""
    result = ReplayResult()
    for lineno, token in tokens:
        try:
            turn = parse_token(lineno, token)
        except InvalidTurnError as e:
            logger.warning(f"Rejected turn: {e}")
            result.rejected.append(RejectedTurn(lineno, token, str(e)))
            continue
        session.feed(turn)
        result.applied += 1

    logger.info(f"Replay done: {result.applied} turns applied, {len(result.rejected)} rejected")
    return result
