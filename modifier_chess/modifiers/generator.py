from __future__ import annotations

import logging
import random
from typing import Iterable, List, Protocol, Sequence, Tuple

from ..config import DEFAULT_RETRY_CAP
from ..core.types import Color, Piece, PieceKind
from .definitions import Modifier, ModifierKind, bound_color

LOGGER = logging.getLogger("modchess.modifiers.generator")

DICE_SIDES = 1 << 16
CANDIDATE_COUNT = 3

# cumulative upper bounds over dice % 100
PIECE_TABLE: Tuple[Tuple[int, PieceKind], ...] = (
    (34, PieceKind.PAWN),
    (54, PieceKind.BISHOP),
    (74, PieceKind.KNIGHT),
    (90, PieceKind.ROOK),
    (100, PieceKind.QUEEN),
)

MODIFIER_TABLE: Tuple[Tuple[int, ModifierKind], ...] = (
    (10, ModifierKind.KING_OF_THE_HILL),
    (28, ModifierKind.ATOMIC),
    (46, ModifierKind.CRAZY_HOUSE),
    (64, ModifierKind.EXTINCTION),
    (82, ModifierKind.SNIPER),
    (100, ModifierKind.TRIPLE_CHECK),
)

class Dice(Protocol):
    def tick(self) -> None:
        ...

    def roll(self) -> Tuple[int, int]:
        ...

class DiceStream:
    """Seeded source of dice pairs.

    Every tick() or roll() advances the stream by exactly one step, so the
    number of idle ticks and rerolls fully determines what comes next.
    """

    def __init__(self, seed: int = 1337) -> None:
        self.seed = seed
        self.counter = 0
        self._rng = random.Random(seed)

    def _advance(self) -> Tuple[int, int]:
        self.counter += 1
        return self._rng.randrange(DICE_SIDES), self._rng.randrange(DICE_SIDES)

    def tick(self) -> None:
        self._advance()

    def roll(self) -> Tuple[int, int]:
        return self._advance()

def _pick(table: Sequence[Tuple[int, object]], dice: int):
    d = dice % 100
    for upper, value in table:
        if d < upper:
            return value
    raise AssertionError("table does not cover 0..99")

def generate(recipient: Color, dice_a: int, dice_b: int) -> Modifier:
    """Turn two dice into a modifier for ``recipient``."""
    piece_kind: PieceKind = _pick(PIECE_TABLE, dice_a)
    kind: ModifierKind = _pick(MODIFIER_TABLE, dice_b)
    color = bound_color(kind, recipient)
    if color is None:
        return Modifier.king_of_the_hill()
    return Modifier(kind, Piece(piece_kind, color))

def modifier_space(recipient: Color) -> List[Modifier]:
    """Every modifier generate() can produce for ``recipient``, in table order."""
    out: List[Modifier] = []
    for _, kind in MODIFIER_TABLE:
        color = bound_color(kind, recipient)
        if color is None:
            out.append(Modifier.king_of_the_hill())
            continue
        for _, piece_kind in PIECE_TABLE:
            out.append(Modifier(kind, Piece(piece_kind, color)))
    return out

def draw_candidates(
    recipient: Color,
    existing: Iterable[Modifier],
    dice: Dice,
    retry_cap: int = DEFAULT_RETRY_CAP,
    count: int = CANDIDATE_COUNT,
) -> Tuple[Modifier, ...]:
    """Draw up to ``count`` distinct modifiers that ``recipient`` does not hold.

    Rerolls on collisions. After ``retry_cap`` attempts the remaining
    unheld modifiers are enumerated and picked from directly; if fewer than
    ``count`` exist at all, all of them are returned.
    """
    held = set(existing)
    drawn: List[Modifier] = []

    attempts = 0
    while len(drawn) < count and attempts < retry_cap:
        attempts += 1
        a, b = dice.roll()
        m = generate(recipient, a, b)
        if m in held or m in drawn:
            continue
        drawn.append(m)

    if len(drawn) < count:
        remaining = [m for m in modifier_space(recipient) if m not in held and m not in drawn]
        LOGGER.info(
            "reward_draw_widened",
            extra={"recipient": recipient.name, "attempts": attempts, "remaining": len(remaining)},
        )
        while len(drawn) < count and remaining:
            a, _ = dice.roll()
            drawn.append(remaining.pop(a % len(remaining)))

    return tuple(drawn)
