from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional

from ..core.types import Color, Piece, PieceKind

TRIPLE_CHECK_TARGET = 3

@dataclass(frozen=True)
class CapturedEntry:
    uid: int
    piece: Piece

class CapturedPile:
    """Removed pieces of one color, oldest first.

    Entries are addressed by uid so a selection made before a mutation still
    points at the same piece (or at nothing) afterwards.
    """

    def __init__(self, color: Color) -> None:
        self.color = color
        self._entries: List[CapturedEntry] = []
        self._uids = itertools.count(1)

    def push(self, piece: Piece) -> CapturedEntry:
        if piece.color is not self.color:
            raise ValueError(f"{piece} does not belong in the {self.color.name} pile")
        entry = CapturedEntry(next(self._uids), piece)
        self._entries.append(entry)
        return entry

    def get(self, uid: int) -> Optional[CapturedEntry]:
        for e in self._entries:
            if e.uid == uid:
                return e
        return None

    def take(self, uid: int) -> Optional[CapturedEntry]:
        for i, e in enumerate(self._entries):
            if e.uid == uid:
                return self._entries.pop(i)
        return None

    def count(self, kind: PieceKind) -> int:
        return sum(1 for e in self._entries if e.piece.kind is kind)

    @property
    def entries(self) -> List[CapturedEntry]:
        return list(self._entries)

    def __iter__(self) -> Iterator[CapturedEntry]:
        return iter(list(self._entries))

    def __len__(self) -> int:
        return len(self._entries)

@dataclass
class BoardOverlay:
    """Per-round state the modifiers keep next to the base engine's board."""

    # captured[c] holds pieces of color c that left the board
    captured: Dict[Color, CapturedPile] = field(
        default_factory=lambda: {Color.WHITE: CapturedPile(Color.WHITE), Color.BLACK: CapturedPile(Color.BLACK)}
    )
    # triple_checks[c] counts qualifying checks delivered by c
    triple_checks: Dict[Color, int] = field(default_factory=lambda: {Color.WHITE: 0, Color.BLACK: 0})

    def record_capture(self, piece: Piece) -> CapturedEntry:
        return self.captured[piece.color].push(piece)

    def add_check(self, color: Color) -> int:
        self.triple_checks[color] += 1
        return self.triple_checks[color]

    def triple_check_reached(self, color: Color) -> bool:
        return self.triple_checks[color] >= TRIPLE_CHECK_TARGET
