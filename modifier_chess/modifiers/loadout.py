from __future__ import annotations

from typing import Iterable, Iterator, List, Optional, Set

from ..core.types import Color, Piece, PieceKind
from .definitions import Modifier, ModifierKind

class ModifierSet:
    """Modifiers held by one player. Grows only; there is no remove."""

    def __init__(self, modifiers: Iterable[Modifier] = ()) -> None:
        self._mods: Set[Modifier] = set()
        for m in modifiers:
            self.add(m)

    def add(self, modifier: Modifier) -> bool:
        """Returns False if the modifier was already held."""
        if modifier in self._mods:
            return False
        self._mods.add(modifier)
        return True

    def has(self, kind: ModifierKind, piece: Optional[Piece] = None) -> bool:
        """With no piece, true if any modifier of ``kind`` is held."""
        if piece is None:
            return any(m.kind is kind for m in self._mods)
        return Modifier(kind, piece) in self._mods

    def has_for(self, kind: ModifierKind, piece_kind: PieceKind, color: Color) -> bool:
        return Modifier(kind, Piece(piece_kind, color)) in self._mods

    def sorted(self) -> List[Modifier]:
        # stable order for snapshots and the CLI
        return sorted(self._mods, key=lambda m: (m.kind.value, str(m)))

    def __contains__(self, modifier: object) -> bool:
        return modifier in self._mods

    def __iter__(self) -> Iterator[Modifier]:
        return iter(self.sorted())

    def __len__(self) -> int:
        return len(self._mods)

    def __repr__(self) -> str:
        return f"ModifierSet({[str(m) for m in self.sorted()]})"
