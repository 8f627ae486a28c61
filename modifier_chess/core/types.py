from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Tuple

class Color(Enum):
    WHITE = 1
    BLACK = -1

    def opponent(self) -> "Color":
        return Color.BLACK if self is Color.WHITE else Color.WHITE

class PieceKind(str, Enum):
    KING = "King"
    QUEEN = "Queen"
    ROOK = "Rook"
    BISHOP = "Bishop"
    KNIGHT = "Knight"
    PAWN = "Pawn"

class GameState(str, Enum):
    NORMAL = "normal"
    CHECK = "check"
    CHECKMATE = "checkmate"
    STALEMATE = "stalemate"

FILES = "abcdefgh"

# kinds a pawn may promote to
PROMOTION_KINDS: Tuple[PieceKind, ...] = (PieceKind.QUEEN, PieceKind.ROOK, PieceKind.BISHOP, PieceKind.KNIGHT)

@dataclass(frozen=True, order=True)
class Position:
    """A board square; file and rank are both 1-based (a1 == (1, 1))."""
    file: int
    rank: int

    def __post_init__(self) -> None:
        if not in_bounds(self.file, self.rank):
            raise ValueError(f"Square out of bounds: ({self.file}, {self.rank})")

    @property
    def name(self) -> str:
        return f"{FILES[self.file - 1]}{self.rank}"

    @classmethod
    def from_name(cls, name: str) -> "Position":
        s = name.strip().lower()
        if len(s) != 2 or s[0] not in FILES or not s[1].isdigit():
            raise ValueError(f"Bad square: {name!r}")
        return cls(FILES.index(s[0]) + 1, int(s[1]))

    def neighborhood(self) -> Iterator["Position"]:
        """The 3x3 block centered here, clipped to the board, center included."""
        for df in (-1, 0, 1):
            for dr in (-1, 0, 1):
                f, r = self.file + df, self.rank + dr
                if in_bounds(f, r):
                    yield Position(f, r)

    def __str__(self) -> str:
        return self.name

@dataclass(frozen=True)
class Piece:
    kind: PieceKind
    color: Color

    def as_color(self, color: Color) -> "Piece":
        return Piece(self.kind, color)

    def __str__(self) -> str:
        return f"{self.color.name.title()} {self.kind.value}"

def in_bounds(file: int, rank: int) -> bool:
    return 1 <= file <= 8 and 1 <= rank <= 8

def all_positions() -> Iterator[Position]:
    for rank in range(1, 9):
        for file in range(1, 9):
            yield Position(file, rank)

CENTER_SQUARES: Tuple[Position, ...] = (
    Position(4, 4), Position(5, 4), Position(4, 5), Position(5, 5),  # d4 e4 d5 e5
)
