from __future__ import annotations

import logging
from typing import Dict, List, Mapping, Optional, Protocol, Set

import chess

from .types import Color, GameState, Piece, PieceKind, Position, PROMOTION_KINDS

LOGGER = logging.getLogger("modchess.core.board")

_KIND_TO_CHESS: Dict[PieceKind, int] = {
    PieceKind.PAWN: chess.PAWN,
    PieceKind.KNIGHT: chess.KNIGHT,
    PieceKind.BISHOP: chess.BISHOP,
    PieceKind.ROOK: chess.ROOK,
    PieceKind.QUEEN: chess.QUEEN,
    PieceKind.KING: chess.KING,
}
_CHESS_TO_KIND: Dict[int, PieceKind] = {v: k for k, v in _KIND_TO_CHESS.items()}

class IllegalMoveError(ValueError):
    pass

class BaseEngine(Protocol):
    """What the modifier layer needs from a legal-chess-move engine."""

    @property
    def board(self) -> Mapping[Position, Piece]:
        ...

    @property
    def active_color(self) -> Color:
        ...

    def piece_at(self, pos: Position) -> Optional[Piece]:
        ...

    def set_piece(self, pos: Position, piece: Piece) -> None:
        ...

    def remove_piece(self, pos: Position) -> Optional[Piece]:
        ...

    def make_move(self, from_pos: Position, to_pos: Position) -> None:
        ...

    def get_possible_moves(self, from_pos: Position) -> List[Position]:
        ...

    def get_game_state(self) -> GameState:
        ...

    def set_promotion(self, kind: PieceKind) -> None:
        ...

    def checkers(self) -> Set[Position]:
        ...

    def is_attacked(self, pos: Position, by: Color) -> bool:
        ...

    def is_attacked_after_drop(self, drop_pos: Position, piece: Piece, target: Position, by: Color) -> bool:
        ...

    def pass_turn(self) -> None:
        ...

    def reset(self) -> None:
        ...

def _to_square(pos: Position) -> int:
    return chess.square(pos.file - 1, pos.rank - 1)

def _to_position(square: int) -> Position:
    return Position(chess.square_file(square) + 1, chess.square_rank(square) + 1)

def _to_piece(p: chess.Piece) -> Piece:
    return Piece(_CHESS_TO_KIND[p.piece_type], Color.WHITE if p.color == chess.WHITE else Color.BLACK)

def _to_chess_piece(p: Piece) -> chess.Piece:
    return chess.Piece(_KIND_TO_CHESS[p.kind], p.color is Color.WHITE)

class ChessEngine:
    """BaseEngine backed by python-chess.

    Overlay edits (Sniper reverts, Atomic removals, CrazyHouse drops) write
    straight into the underlying ``chess.Board``; python-chess keeps generating
    legal moves from whatever position it holds.
    """

    def __init__(self, fen: Optional[str] = None, promotion: PieceKind = PieceKind.QUEEN) -> None:
        if promotion not in PROMOTION_KINDS:
            raise ValueError(f"Cannot promote to {promotion.value}")
        self._start_fen = fen if fen is not None else chess.STARTING_FEN
        self.chess_board = chess.Board(self._start_fen)
        self._promotion: Dict[Color, PieceKind] = {Color.WHITE: promotion, Color.BLACK: promotion}

    def reset(self) -> None:
        self.chess_board = chess.Board(self._start_fen)

    @property
    def board(self) -> Dict[Position, Piece]:
        return {_to_position(s): _to_piece(p) for s, p in self.chess_board.piece_map().items()}

    @property
    def active_color(self) -> Color:
        return Color.WHITE if self.chess_board.turn == chess.WHITE else Color.BLACK

    @property
    def promotion(self) -> Dict[Color, PieceKind]:
        return dict(self._promotion)

    def fen(self) -> str:
        return self.chess_board.fen()

    def piece_at(self, pos: Position) -> Optional[Piece]:
        p = self.chess_board.piece_at(_to_square(pos))
        return None if p is None else _to_piece(p)

    def set_piece(self, pos: Position, piece: Piece) -> None:
        s = _to_square(pos)
        self.chess_board.set_piece_at(s, _to_chess_piece(piece))
        # a piece placed by hand never grants castling rights
        self.chess_board.castling_rights &= ~chess.BB_SQUARES[s]

    def remove_piece(self, pos: Position) -> Optional[Piece]:
        s = _to_square(pos)
        p = self.chess_board.remove_piece_at(s)
        self.chess_board.castling_rights &= ~chess.BB_SQUARES[s]
        return None if p is None else _to_piece(p)

    def _legal_from(self, from_pos: Position) -> List[chess.Move]:
        mask = chess.BB_SQUARES[_to_square(from_pos)]
        return list(self.chess_board.generate_legal_moves(from_mask=mask))

    def get_possible_moves(self, from_pos: Position) -> List[Position]:
        out: List[Position] = []
        for m in self._legal_from(from_pos):
            dest = _to_position(m.to_square)
            if dest not in out:
                out.append(dest)
        return out

    def make_move(self, from_pos: Position, to_pos: Position) -> None:
        to_sq = _to_square(to_pos)
        candidates = [m for m in self._legal_from(from_pos) if m.to_square == to_sq]
        if not candidates:
            raise IllegalMoveError(f"Illegal move: {from_pos}{to_pos}")

        move = candidates[0]
        if move.promotion is not None:
            want = _KIND_TO_CHESS[self._promotion[self.active_color]]
            for m in candidates:
                if m.promotion == want:
                    move = m
                    break
        self.chess_board.push(move)

    def get_game_state(self) -> GameState:
        b = self.chess_board
        if b.is_checkmate():
            return GameState.CHECKMATE
        if b.is_stalemate():
            return GameState.STALEMATE
        if b.is_check():
            return GameState.CHECK
        return GameState.NORMAL

    def set_promotion(self, kind: PieceKind) -> None:
        if kind not in PROMOTION_KINDS:
            raise ValueError(f"Cannot promote to {kind.value}")
        self._promotion[self.active_color] = kind

    def checkers(self) -> Set[Position]:
        return {_to_position(s) for s in self.chess_board.checkers()}

    def is_attacked(self, pos: Position, by: Color) -> bool:
        return self.chess_board.is_attacked_by(by is Color.WHITE, _to_square(pos))

    def is_attacked_after_drop(self, drop_pos: Position, piece: Piece, target: Position, by: Color) -> bool:
        """Would ``target`` be attacked once ``piece`` sits on ``drop_pos``? Leaves this board alone."""
        b = self.chess_board.copy(stack=False)
        b.set_piece_at(_to_square(drop_pos), _to_chess_piece(piece))
        return b.is_attacked_by(by is Color.WHITE, _to_square(target))

    def king_position(self, color: Color) -> Optional[Position]:
        s = self.chess_board.king(color is Color.WHITE)
        return None if s is None else _to_position(s)

    def pass_turn(self) -> None:
        b = self.chess_board
        b.turn = not b.turn
        b.ep_square = None
        if b.turn == chess.WHITE:
            b.fullmove_number += 1
        LOGGER.debug("turn_passed", extra={"active": self.active_color.name})

    def ascii(self) -> str:
        return str(self.chess_board)
