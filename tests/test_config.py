import argparse
import io
import unittest
from contextlib import redirect_stdout

from modifier_chess.cli import main, parse_grant
from modifier_chess.config import DEFAULT_RETRY_CAP, MatchConfig, parse_promotion
from modifier_chess.core.types import Color, PieceKind
from modifier_chess.modifiers.definitions import Modifier


class TestMatchConfig(unittest.TestCase):
    def test_defaults(self):
        cfg = MatchConfig.from_env({})
        self.assertEqual(cfg.seed, 1337)
        self.assertEqual(cfg.reward_retry_cap, DEFAULT_RETRY_CAP)
        self.assertFalse(cfg.king_of_the_hill_requires_modifier)
        self.assertIs(cfg.promotion, PieceKind.QUEEN)
        self.assertIsNone(cfg.fen)

    def test_environment_values(self):
        cfg = MatchConfig.from_env({
            "MODCHESS_SEED": "42",
            "MODCHESS_REWARD_RETRY_CAP": "8",
            "MODCHESS_KOTH_REQUIRES_MOD": "yes",
            "MODCHESS_PROMOTION": "Knight",
        })
        self.assertEqual(cfg.seed, 42)
        self.assertEqual(cfg.reward_retry_cap, 8)
        self.assertTrue(cfg.king_of_the_hill_requires_modifier)
        self.assertIs(cfg.promotion, PieceKind.KNIGHT)

    def test_overrides_win_unless_none(self):
        cfg = MatchConfig.from_env({"MODCHESS_SEED": "42"}, seed=7, fen=None)
        self.assertEqual(cfg.seed, 7)
        self.assertIsNone(cfg.fen)
        with self.assertRaises(TypeError):
            MatchConfig.from_env({}, colour="white")

    def test_bad_values_raise(self):
        for env in (
            {"MODCHESS_KOTH_REQUIRES_MOD": "maybe"},
            {"MODCHESS_REWARD_RETRY_CAP": "0"},
            {"MODCHESS_SEED": "abc"},
            {"MODCHESS_PROMOTION": "king"},
        ):
            with self.subTest(env=env):
                with self.assertRaises(ValueError):
                    MatchConfig.from_env(env)

    def test_parse_promotion(self):
        self.assertIs(parse_promotion(" rook "), PieceKind.ROOK)
        with self.assertRaises(ValueError):
            parse_promotion("pawn")


class TestCli(unittest.TestCase):
    def test_parse_grant(self):
        self.assertEqual(parse_grant("white:atomic:rook"), (Color.WHITE, Modifier.atomic(PieceKind.ROOK, Color.WHITE)))
        # opponent-bound kinds gate on the other side's pieces
        self.assertEqual(parse_grant("black:extinction:queen"), (Color.BLACK, Modifier.extinction(PieceKind.QUEEN, Color.WHITE)))
        self.assertEqual(parse_grant("black:kingofthehill"), (Color.BLACK, Modifier.king_of_the_hill()))
        for bad in ("white", "green:atomic:rook", "white:chaos:rook", "white:sniper", "white:sniper:dragon"):
            with self.subTest(bad=bad):
                with self.assertRaises(argparse.ArgumentTypeError):
                    parse_grant(bad)

    def test_roll_is_reproducible(self):
        def run(*argv):
            buf = io.StringIO()
            with redirect_stdout(buf):
                rc = main(["roll", *argv])
            self.assertEqual(rc, 0)
            return buf.getvalue().splitlines()

        first = run("--seed", "9")
        self.assertEqual(len(first), 3)
        self.assertEqual(first, run("--seed", "9"))
        self.assertEqual(len(run("--seed", "9", "--count", "5")), 5)
        self.assertTrue(all(": " in line for line in first))


if __name__ == "__main__":
    unittest.main()
