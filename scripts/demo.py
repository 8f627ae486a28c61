from __future__ import annotations

from pathlib import Path
import sys

# Ensure the repo root is on sys.path so `import modifier_chess` works.
ROOT_DIR = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT_DIR))

from modifier_chess import Match, MatchConfig, Modifier
from modifier_chess.core import Color, PieceKind, Position


def show(title: str, match: Match) -> None:
    print("\n" + "=" * 72)
    print(title)
    print(match.engine.ascii())
    print("Side to move:", match.engine.active_color.name, "| state:", type(match.state).__name__)


def play(match: Match, move: str) -> None:
    out = match.move(Position.from_name(move[:2]), Position.from_name(move[2:]))
    print(f"{move}: committed={out.committed}")
    for e in out.effects:
        print("  effect:", {k: str(v) for k, v in e.items()})
    if out.round_end is not None:
        print("  round over:", out.round_end.winner, out.round_end.reason)


def demo_sniper_atomic() -> None:
    cfg = MatchConfig(
        fen="4k3/8/8/2nqb3/3pp3/2P1N3/8/3RK3 w - - 0 1",
        starting_modifiers={Color.WHITE: (
            Modifier.atomic(PieceKind.ROOK, Color.WHITE),
            Modifier.sniper(PieceKind.ROOK, Color.WHITE),
        )},
    )
    m = Match(cfg)
    show("Demo 1: Sniper + Atomic rook takes d4 from d1", m)
    play(m, "d1d4")
    show("After the blast (pawns survive, the rook never left d1)", m)
    print("Captured BLACK:", [(e.uid, e.piece.kind.value) for e in m.overlay.captured[Color.BLACK]])
    print("Captured WHITE:", [(e.uid, e.piece.kind.value) for e in m.overlay.captured[Color.WHITE]])


def demo_crazy_house() -> None:
    cfg = MatchConfig(
        fen="4k3/8/8/3n4/8/8/8/3QK3 w - - 0 1",
        starting_modifiers={Color.WHITE: (Modifier.crazy_house(PieceKind.KNIGHT, Color.BLACK),)},
    )
    m = Match(cfg)
    show("Demo 2: capture a knight, then drop it back as our own", m)
    play(m, "d1d5")
    play(m, "e8f8")
    uid = m.overlay.captured[Color.BLACK].entries[0].uid
    print("Drop targets:", len(m.drop_targets(uid)))
    out = m.drop(uid, Position.from_name("e6"))
    print(f"drop [{uid}] e6: committed={out.committed}")
    show("After the drop", m)


def demo_round_and_reward() -> None:
    m = Match(MatchConfig(seed=7))
    show("Demo 3: fool's mate, then the loser picks a reward", m)
    for mv in ("f2f3", "e7e5", "g2g4", "d8h4"):
        play(m, mv)
    print("poll ->", m.poll())
    m.acknowledge()
    state = m.state
    print("Reward for", state.recipient.name)
    for i, mod in enumerate(state.candidates):
        print(f"  {i}. {mod}: {mod.definition.summary}")
    m.select_reward(0)
    print("WHITE modifiers:", [str(x) for x in m.loadouts[Color.WHITE]])
    show("Round 2 starts from the opening position", m)


if __name__ == "__main__":
    demo_sniper_atomic()
    demo_crazy_house()
    demo_round_and_reward()
