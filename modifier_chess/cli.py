from __future__ import annotations

import argparse
import logging
from typing import Dict, List, Optional, Tuple

from .config import MatchConfig, parse_promotion
from .core.types import Color, Piece, PieceKind, Position
from .modifiers.definitions import Modifier, ModifierKind, bound_color
from .modifiers.generator import DiceStream, draw_candidates
from .modifiers.match import AwaitingReward, Match, Playing, RoundEnded

HELP = """commands:
  e2e4             move (squares in algebraic notation)
  moves e2         list legal destinations from a square
  drop <uid> <sq>  crazy-house drop of a captured piece
  promote <piece>  queen / rook / bishop / knight
  ack              continue after a round ends
  pick <n>         choose reward candidate n (1-3)
  mods             show modifier sets and captured piles
  quit"""


def parse_grant(text: str) -> Tuple[Color, Modifier]:
    """Parse ``white:atomic:rook`` (or ``black:kingofthehill``) into a starting modifier."""
    parts = [p.strip().lower() for p in text.split(":")]
    if len(parts) not in (2, 3):
        raise argparse.ArgumentTypeError(f"bad modifier grant: {text!r}")
    try:
        holder = Color[parts[0].upper()]
    except KeyError:
        raise argparse.ArgumentTypeError(f"bad color in {text!r}") from None
    kinds = {k.value.lower(): k for k in ModifierKind}
    kind = kinds.get(parts[1])
    if kind is None:
        raise argparse.ArgumentTypeError(f"unknown modifier in {text!r}")
    color = bound_color(kind, holder)
    if color is None:
        return holder, Modifier(kind)
    if len(parts) != 3:
        raise argparse.ArgumentTypeError(f"{kind.value} needs a piece: {text!r}")
    pieces = {k.value.lower(): k for k in PieceKind}
    piece_kind = pieces.get(parts[2])
    if piece_kind is None:
        raise argparse.ArgumentTypeError(f"unknown piece in {text!r}")
    return holder, Modifier(kind, Piece(piece_kind, color))


def _print_overview(match: Match) -> None:
    for c in (Color.WHITE, Color.BLACK):
        mods = ", ".join(str(m) for m in match.loadouts[c]) or "-"
        pile = " ".join(f"[{e.uid}]{e.piece.kind.value}" for e in match.overlay.captured[c]) or "-"
        print(f"{c.name:5} wins={match.tally[c]} checks={match.overlay.triple_checks[c]} mods: {mods}")
        print(f"      captured: {pile}")


def _print_board(match: Match) -> None:
    ascii_fn = getattr(match.engine, "ascii", None)
    if callable(ascii_fn):
        print(ascii_fn())
    print(f"Round {match.round_number}, {match.engine.active_color.name} to move ({match.engine.get_game_state().value})")


def _report(match: Match) -> None:
    state = match.state
    if isinstance(state, RoundEnded):
        who = state.winner.name if state.winner is not None else "nobody"
        print(f"Round over: {who} wins ({state.reason}). Type 'ack' to continue.")
    elif isinstance(state, AwaitingReward):
        print(f"{state.recipient.name} picks a reward:")
        for i, m in enumerate(state.candidates, 1):
            print(f"  {i}. {m}: {m.definition.summary}")


def _handle(match: Match, line: str) -> bool:
    words = line.split()
    if not words:
        return True
    cmd = words[0].lower()

    if cmd in ("quit", "exit"):
        return False
    if cmd == "help":
        print(HELP)
    elif cmd == "mods":
        _print_overview(match)
    elif cmd == "ack":
        if not match.acknowledge():
            print("Nothing to acknowledge.")
    elif cmd == "pick" and len(words) == 2 and words[1].isdigit():
        if not match.select_reward(int(words[1]) - 1):
            print("No such reward.")
    elif cmd == "promote" and len(words) == 2:
        match.set_promotion(parse_promotion(words[1]))
    elif cmd == "moves" and len(words) == 2:
        print(" ".join(p.name for p in match.legal_moves(Position.from_name(words[1]))) or "(none)")
    elif cmd == "drop" and len(words) == 3 and words[1].isdigit():
        outcome = match.drop(int(words[1]), Position.from_name(words[2]))
        if not outcome.committed:
            print("Illegal drop.")
    elif len(cmd) == 4:
        outcome = match.move(Position.from_name(cmd[:2]), Position.from_name(cmd[2:]))
        if not outcome.committed:
            print("Illegal move.")
        for e in outcome.effects:
            if e["type"] != "capture":
                print("  effect:", e["type"])
    else:
        print("Unknown command; try 'help'.")
    return True


def cmd_play(args: argparse.Namespace) -> int:
    grants: Dict[Color, List[Modifier]] = {Color.WHITE: [], Color.BLACK: []}
    for holder, mod in args.grant or []:
        grants[holder].append(mod)
    cfg = MatchConfig.from_env(
        seed=args.seed,
        fen=args.fen,
        king_of_the_hill_requires_modifier=True if args.strict_hill else None,
        starting_modifiers={c: tuple(ms) for c, ms in grants.items()},
    )
    match = Match(cfg)
    print(HELP)

    while True:
        match.poll()
        if isinstance(match.state, Playing):
            print()
            _print_board(match)
        _report(match)
        try:
            line = input("> ").strip()
        except EOFError:
            return 0
        try:
            if not _handle(match, line):
                return 0
        except ValueError as exc:
            print(f"Error: {exc}")


def cmd_roll(args: argparse.Namespace) -> int:
    recipient = Color[args.recipient.upper()]
    dice = DiceStream(args.seed)
    for _ in range(args.ticks):
        dice.tick()
    for m in draw_candidates(recipient, (), dice, count=args.count):
        print(f"{m}: {m.definition.summary}")
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    ap = argparse.ArgumentParser(prog="modchess")
    ap.add_argument("--log-level", default="WARNING", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    sub = ap.add_subparsers(dest="cmd", required=True)

    pl = sub.add_parser("play", help="Play a hot-seat match in the terminal")
    pl.add_argument("--seed", type=int, default=None)
    pl.add_argument("--fen", type=str, default=None, help="start every round from this position")
    pl.add_argument("--grant", type=parse_grant, action="append",
                    help="starting modifier, e.g. white:atomic:rook or black:kingofthehill")
    pl.add_argument("--strict-hill", action="store_true",
                    help="king of the hill only counts for players holding the modifier")
    pl.set_defaults(fn=cmd_play)

    rl = sub.add_parser("roll", help="Show reward candidates for a seed")
    rl.add_argument("--recipient", default="white", choices=["white", "black"])
    rl.add_argument("--seed", type=int, default=1337)
    rl.add_argument("--ticks", type=int, default=0, help="idle ticks before the draw")
    rl.add_argument("--count", type=int, default=3)
    rl.set_defaults(fn=cmd_roll)

    args = ap.parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s %(name)s: %(message)s")
    return int(args.fn(args))


if __name__ == "__main__":
    raise SystemExit(main())
