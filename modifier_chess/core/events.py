from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple, TYPE_CHECKING

from .types import Color, Piece, Position

if TYPE_CHECKING:
    from ..modifiers.definitions import Modifier
    from ..modifiers.resolver import MoveOutcome, RoundVerdict

@dataclass(frozen=True)
class MoveResolved:
    mover: Color
    from_pos: Position
    to_pos: Position
    outcome: "MoveOutcome"

@dataclass(frozen=True)
class PieceDropped:
    mover: Color
    piece: Piece
    to_pos: Position
    outcome: "MoveOutcome"

@dataclass(frozen=True)
class RoundFinished:
    verdict: "RoundVerdict"
    round_number: int

@dataclass(frozen=True)
class RewardOffered:
    recipient: Color
    candidates: Tuple["Modifier", ...]

@dataclass(frozen=True)
class RewardGranted:
    recipient: Color
    modifier: Optional["Modifier"]
