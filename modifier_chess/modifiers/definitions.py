from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Set

from ..core.types import Color, Piece, PieceKind

class ModifierKind(str, Enum):
    CRAZY_HOUSE = "CrazyHouse"
    ATOMIC = "Atomic"
    SNIPER = "Sniper"
    KING_OF_THE_HILL = "KingOfTheHill"
    EXTINCTION = "Extinction"
    TRIPLE_CHECK = "TripleCheck"

class Binding(str, Enum):
    """Which army a gated modifier's piece belongs to, relative to its holder."""
    OWN = "own"
    OPPONENT = "opponent"
    NONE = "none"

@dataclass(frozen=True)
class ModifierDef:
    kind: ModifierKind
    name: str
    binding: Binding
    summary: str

MODIFIER_DEFS: Dict[ModifierKind, ModifierDef] = {
    ModifierKind.CRAZY_HOUSE: ModifierDef(ModifierKind.CRAZY_HOUSE, "Crazy House", Binding.OPPONENT,
                                          "Captured enemy pieces of this kind can be dropped back as your own."),
    ModifierKind.ATOMIC: ModifierDef(ModifierKind.ATOMIC, "Atomic", Binding.OWN,
                                     "Captures by this piece blow up every non-pawn piece around the target."),
    ModifierKind.SNIPER: ModifierDef(ModifierKind.SNIPER, "Sniper", Binding.OWN,
                                     "This piece captures without leaving its square."),
    ModifierKind.KING_OF_THE_HILL: ModifierDef(ModifierKind.KING_OF_THE_HILL, "King of the Hill", Binding.NONE,
                                               "A king reaching d4, e4, d5 or e5 wins the round."),
    ModifierKind.EXTINCTION: ModifierDef(ModifierKind.EXTINCTION, "Extinction", Binding.OPPONENT,
                                         "Capturing the last enemy piece of this kind wins the round."),
    ModifierKind.TRIPLE_CHECK: ModifierDef(ModifierKind.TRIPLE_CHECK, "Triple Check", Binding.OWN,
                                           "Three checks delivered by this piece win the round."),
}

GATED_KINDS: Set[ModifierKind] = {k for k, d in MODIFIER_DEFS.items() if d.binding is not Binding.NONE}

@dataclass(frozen=True)
class Modifier:
    kind: ModifierKind
    piece: Optional[Piece] = None

    def __post_init__(self) -> None:
        gated = self.kind in GATED_KINDS
        if gated and self.piece is None:
            raise ValueError(f"{self.kind.value} needs a gating piece")
        if not gated and self.piece is not None:
            raise ValueError(f"{self.kind.value} takes no piece")

    # constructors read like the variant names
    @classmethod
    def crazy_house(cls, kind: PieceKind, color: Color) -> "Modifier":
        return cls(ModifierKind.CRAZY_HOUSE, Piece(kind, color))

    @classmethod
    def atomic(cls, kind: PieceKind, color: Color) -> "Modifier":
        return cls(ModifierKind.ATOMIC, Piece(kind, color))

    @classmethod
    def sniper(cls, kind: PieceKind, color: Color) -> "Modifier":
        return cls(ModifierKind.SNIPER, Piece(kind, color))

    @classmethod
    def king_of_the_hill(cls) -> "Modifier":
        return cls(ModifierKind.KING_OF_THE_HILL)

    @classmethod
    def extinction(cls, kind: PieceKind, color: Color) -> "Modifier":
        return cls(ModifierKind.EXTINCTION, Piece(kind, color))

    @classmethod
    def triple_check(cls, kind: PieceKind, color: Color) -> "Modifier":
        return cls(ModifierKind.TRIPLE_CHECK, Piece(kind, color))

    @property
    def definition(self) -> ModifierDef:
        return MODIFIER_DEFS[self.kind]

    def __str__(self) -> str:
        if self.piece is None:
            return self.kind.value
        return f"{self.kind.value}({self.piece.kind.value}, {self.piece.color.name.title()})"

def bound_color(kind: ModifierKind, holder: Color) -> Optional[Color]:
    binding = MODIFIER_DEFS[kind].binding
    if binding is Binding.OWN:
        return holder
    if binding is Binding.OPPONENT:
        return holder.opponent()
    return None
