from .types import Color, PieceKind, Piece, Position, GameState, FILES, CENTER_SQUARES, PROMOTION_KINDS, all_positions, in_bounds
from .board import BaseEngine, ChessEngine, IllegalMoveError
from .events import MoveResolved, PieceDropped, RoundFinished, RewardOffered, RewardGranted

__all__ = [
    "Color","PieceKind","Piece","Position","GameState",
    "FILES","CENTER_SQUARES","PROMOTION_KINDS","all_positions","in_bounds",
    "BaseEngine","ChessEngine","IllegalMoveError",
    "MoveResolved","PieceDropped","RoundFinished","RewardOffered","RewardGranted",
]
