import unittest

import chess

from modifier_chess.core.board import ChessEngine, IllegalMoveError
from modifier_chess.core.types import Color, GameState, Piece, PieceKind, Position


def _sq(alg: str) -> Position:
    return Position.from_name(alg)


class TestChessEngine(unittest.TestCase):
    def test_start_position(self):
        e = ChessEngine()
        self.assertEqual(len(e.board), 32)
        self.assertIs(e.active_color, Color.WHITE)
        self.assertEqual(e.piece_at(_sq("e1")), Piece(PieceKind.KING, Color.WHITE))
        self.assertEqual(set(e.get_possible_moves(_sq("e2"))), {_sq("e3"), _sq("e4")})
        self.assertEqual(e.get_possible_moves(_sq("e4")), [])

    def test_illegal_move_raises_and_keeps_position(self):
        e = ChessEngine()
        with self.assertRaisesRegex(IllegalMoveError, "Illegal move"):
            e.make_move(_sq("e2"), _sq("e5"))
        self.assertEqual(e.fen(), chess.STARTING_FEN)

    def test_game_states(self):
        self.assertIs(ChessEngine().get_game_state(), GameState.NORMAL)
        self.assertIs(ChessEngine("4k3/8/8/8/8/8/8/R3K3 b - - 0 1").get_game_state(), GameState.NORMAL)
        checked = ChessEngine("R3k3/8/8/8/8/8/8/4K3 b - - 0 1")
        self.assertIs(checked.get_game_state(), GameState.CHECK)
        self.assertEqual(checked.checkers(), {_sq("a8")})
        self.assertIs(ChessEngine("7k/5Q2/6K1/8/8/8/8/8 b - - 0 1").get_game_state(), GameState.STALEMATE)
        self.assertIs(ChessEngine("R5k1/5ppp/8/8/8/8/8/6K1 b - - 0 1").get_game_state(), GameState.CHECKMATE)

    def test_promotion_is_per_color(self):
        e = ChessEngine("8/P6k/8/8/8/8/p7/4K3 w - - 0 1")
        e.set_promotion(PieceKind.ROOK)
        self.assertEqual(e.promotion, {Color.WHITE: PieceKind.ROOK, Color.BLACK: PieceKind.QUEEN})
        e.make_move(_sq("a7"), _sq("a8"))
        self.assertEqual(e.piece_at(_sq("a8")), Piece(PieceKind.ROOK, Color.WHITE))
        e.make_move(_sq("a2"), _sq("a1"))
        self.assertEqual(e.piece_at(_sq("a1")), Piece(PieceKind.QUEEN, Color.BLACK))
        with self.assertRaises(ValueError):
            ChessEngine(promotion=PieceKind.PAWN)

    def test_hand_edits_drop_castling_rights(self):
        e = ChessEngine()
        self.assertTrue(e.chess_board.has_kingside_castling_rights(chess.WHITE))
        self.assertEqual(e.remove_piece(_sq("h1")), Piece(PieceKind.ROOK, Color.WHITE))
        self.assertFalse(e.chess_board.has_kingside_castling_rights(chess.WHITE))
        e.set_piece(_sq("h1"), Piece(PieceKind.ROOK, Color.WHITE))
        self.assertFalse(e.chess_board.has_kingside_castling_rights(chess.WHITE))
        self.assertTrue(e.chess_board.has_queenside_castling_rights(chess.WHITE))
        self.assertIsNone(e.remove_piece(_sq("e4")))

    def test_drop_check_leaves_board_and_history(self):
        e = ChessEngine("4r2k/8/8/8/8/8/8/4K3 w - - 0 1")
        e.make_move(_sq("e1"), _sq("d1"))
        e.make_move(_sq("e8"), _sq("d8"))
        before = e.fen()
        knight = Piece(PieceKind.KNIGHT, Color.WHITE)
        self.assertFalse(e.is_attacked_after_drop(_sq("d4"), knight, _sq("d1"), Color.BLACK))
        self.assertTrue(e.is_attacked_after_drop(_sq("a4"), knight, _sq("d1"), Color.BLACK))
        self.assertEqual(e.fen(), before)
        self.assertEqual(len(e.chess_board.move_stack), 2)

    def test_pass_turn(self):
        e = ChessEngine("4k3/8/8/8/8/8/8/4K3 w - - 0 1")
        e.pass_turn()
        self.assertIs(e.active_color, Color.BLACK)
        e.pass_turn()
        self.assertIs(e.active_color, Color.WHITE)
        self.assertEqual(e.chess_board.fullmove_number, 2)

    def test_is_attacked_and_reset(self):
        e = ChessEngine("4k3/8/8/8/8/8/8/R3K3 w - - 0 1")
        self.assertTrue(e.is_attacked(_sq("a8"), Color.WHITE))
        self.assertFalse(e.is_attacked(_sq("b8"), Color.WHITE))
        e.make_move(_sq("a1"), _sq("a5"))
        e.reset()
        self.assertEqual(e.piece_at(_sq("a1")), Piece(PieceKind.ROOK, Color.WHITE))
        self.assertEqual(e.king_position(Color.BLACK), _sq("e8"))


if __name__ == "__main__":
    unittest.main()
