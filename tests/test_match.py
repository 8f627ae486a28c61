import unittest

import chess

from modifier_chess.config import MatchConfig
from modifier_chess.core.events import MoveResolved, PieceDropped, RewardGranted, RewardOffered, RoundFinished
from modifier_chess.core.types import Color, Piece, PieceKind, Position
from modifier_chess.modifiers.definitions import Modifier
from modifier_chess.modifiers.generator import DiceStream, modifier_space
from modifier_chess.modifiers.match import AwaitingReward, Listener, Match, Playing, RoundEnded
from modifier_chess.modifiers.resolver import RoundVerdict


def _sq(alg: str) -> Position:
    return Position.from_name(alg)


class Recorder(Listener):
    def __init__(self):
        self.events = []

    def on_event(self, match, event):
        self.events.append(event)

    def of(self, cls):
        return [e for e in self.events if isinstance(e, cls)]


class CountingDice(DiceStream):
    def __init__(self, seed=1337):
        super().__init__(seed)
        self.ticks = 0

    def tick(self):
        self.ticks += 1
        super().tick()


def _match(fen=None, white=(), black=(), **kw):
    cfg = MatchConfig(fen=fen, starting_modifiers={Color.WHITE: tuple(white), Color.BLACK: tuple(black)}, **kw)
    m = Match(cfg)
    rec = Recorder()
    m.listeners.append(rec)
    return m, rec


def _fools_mate(m):
    for fr, to in (("f2", "f3"), ("e7", "e5"), ("g2", "g4"), ("d8", "h4")):
        out = m.move(_sq(fr), _sq(to))
        assert out.committed, (fr, to)


class TestRoundLifecycle(unittest.TestCase):
    def test_checkmate_reward_and_next_round(self):
        m, rec = _match()
        _fools_mate(m)
        self.assertTrue(m.playing)

        self.assertEqual(m.poll(), RoundVerdict(Color.BLACK, "checkmate"))
        self.assertEqual(m.state, RoundEnded(Color.BLACK, "checkmate"))
        self.assertEqual(m.tally, {Color.WHITE: 0, Color.BLACK: 1})
        self.assertEqual(len(rec.of(RoundFinished)), 1)

        self.assertTrue(m.acknowledge())
        self.assertIsInstance(m.state, AwaitingReward)
        self.assertIs(m.state.recipient, Color.WHITE)
        self.assertEqual(len(m.state.candidates), 3)
        self.assertEqual(rec.of(RewardOffered)[0].candidates, m.state.candidates)

        chosen = m.state.candidates[1]
        self.assertTrue(m.select_reward(1))
        self.assertIn(chosen, m.loadouts[Color.WHITE])
        self.assertEqual(len(m.loadouts[Color.BLACK]), 0)
        self.assertEqual(rec.of(RewardGranted)[0].modifier, chosen)

        self.assertIsInstance(m.state, Playing)
        self.assertEqual(m.round_number, 2)
        self.assertEqual(m.engine.fen(), chess.STARTING_FEN)
        self.assertEqual(len(m.overlay.captured[Color.WHITE]), 0)

    def test_stalemate_has_no_winner_and_no_reward(self):
        m, rec = _match("7k/5Q2/6K1/8/8/8/8/8 b - - 0 1")
        self.assertEqual(m.poll(), RoundVerdict(None, "stalemate"))
        self.assertEqual(m.tally, {Color.WHITE: 0, Color.BLACK: 0})
        self.assertTrue(m.acknowledge())
        self.assertIsInstance(m.state, Playing)
        self.assertEqual(m.round_number, 2)
        self.assertEqual(rec.of(RewardOffered), [])

    def test_modifier_win_ends_round_on_the_move(self):
        m, rec = _match(
            "4k3/8/8/3q4/8/8/8/3QK3 w - - 0 1",
            white=[Modifier.extinction(PieceKind.QUEEN, Color.BLACK)],
        )
        out = m.move(_sq("d1"), _sq("d5"))
        self.assertEqual(out.round_end, RoundVerdict(Color.WHITE, "extinction"))
        self.assertEqual(m.state, RoundEnded(Color.WHITE, "extinction"))
        self.assertEqual(m.tally[Color.WHITE], 1)
        self.assertIsInstance(rec.events[0], MoveResolved)
        self.assertIsInstance(rec.events[1], RoundFinished)

        m.acknowledge()
        self.assertIs(m.state.recipient, Color.BLACK)

    def test_king_on_the_hill(self):
        m, _ = _match("4k3/8/8/8/8/3K4/8/8 w - - 0 1")
        m.move(_sq("d3"), _sq("e4"))
        self.assertEqual(m.state, RoundEnded(Color.WHITE, "king_of_the_hill"))

    def test_exhausted_reward_space_skips_the_reward(self):
        m, rec = _match(white=modifier_space(Color.WHITE), reward_retry_cap=4)
        _fools_mate(m)
        m.poll()
        self.assertTrue(m.acknowledge())
        self.assertIsInstance(m.state, Playing)
        self.assertEqual(m.round_number, 2)
        granted = rec.of(RewardGranted)
        self.assertEqual(len(granted), 1)
        self.assertIsNone(granted[0].modifier)
        self.assertIs(granted[0].recipient, Color.WHITE)


class TestIgnoredInputs(unittest.TestCase):
    def test_reward_inputs_ignored_while_playing(self):
        m, _ = _match()
        self.assertFalse(m.acknowledge())
        self.assertFalse(m.select_reward(0))
        self.assertIsInstance(m.state, Playing)

    def test_moves_ignored_outside_playing(self):
        m, rec = _match()
        _fools_mate(m)
        m.poll()
        before = m.engine.fen()
        self.assertFalse(m.move(_sq("a2"), _sq("a3")).committed)
        self.assertEqual(m.legal_moves(_sq("a2")), [])
        self.assertEqual(m.engine.fen(), before)
        self.assertIsNone(m.poll())
        self.assertEqual(m.tally[Color.BLACK], 1)

        m.acknowledge()
        self.assertFalse(m.select_reward(3))
        self.assertFalse(m.select_reward(-1))
        self.assertIsInstance(m.state, AwaitingReward)
        self.assertFalse(m.acknowledge())

    def test_rejected_move_emits_nothing(self):
        m, rec = _match()
        self.assertFalse(m.move(_sq("e2"), _sq("e5")).committed)
        self.assertFalse(m.move(_sq("e7"), _sq("e5")).committed)
        self.assertEqual(rec.events, [])


class TestMatchActions(unittest.TestCase):
    def test_poll_ticks_the_dice_and_moves_do_not(self):
        dice = CountingDice()
        m = Match(MatchConfig(), dice=dice)
        m.move(_sq("e2"), _sq("e4"))
        self.assertEqual(dice.ticks, 0)
        m.poll()
        m.poll()
        self.assertEqual(dice.ticks, 2)

    def test_drop_emits_event(self):
        m, rec = _match("4k3/8/8/8/8/8/8/4K3 w - - 0 1", white=[Modifier.crazy_house(PieceKind.KNIGHT, Color.BLACK)])
        uid = m.overlay.captured[Color.BLACK].push(Piece(PieceKind.KNIGHT, Color.BLACK)).uid
        self.assertIn(_sq("d4"), m.drop_targets(uid))
        out = m.drop(uid, _sq("d4"))
        self.assertTrue(out.committed)
        ev = rec.of(PieceDropped)[0]
        self.assertEqual(ev.piece, Piece(PieceKind.KNIGHT, Color.WHITE))
        self.assertIs(m.engine.active_color, Color.BLACK)

    def test_promotion_choice(self):
        m, _ = _match("4k3/P7/8/8/8/8/8/4K3 w - - 0 1")
        with self.assertRaises(ValueError):
            m.set_promotion(PieceKind.KING)
        m.set_promotion(PieceKind.KNIGHT)
        m.move(_sq("a7"), _sq("a8"))
        self.assertEqual(m.engine.piece_at(_sq("a8")), Piece(PieceKind.KNIGHT, Color.WHITE))

    def test_legal_moves_only_for_side_to_move(self):
        m, _ = _match()
        self.assertEqual(set(m.legal_moves(_sq("g1"))), {_sq("f3"), _sq("h3")})
        self.assertEqual(m.legal_moves(_sq("g8")), [])
        self.assertEqual(m.legal_moves(_sq("e4")), [])


if __name__ == "__main__":
    unittest.main()
