from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional

from ..core.board import BaseEngine, IllegalMoveError
from ..core.types import CENTER_SQUARES, Color, GameState, Piece, PieceKind, Position, all_positions
from .definitions import ModifierKind
from .loadout import ModifierSet
from .state import BoardOverlay

LOGGER = logging.getLogger("modchess.modifiers.resolver")

@dataclass(frozen=True)
class RoundVerdict:
    winner: Optional[Color]
    reason: str

@dataclass
class MoveOutcome:
    committed: bool
    round_end: Optional[RoundVerdict] = None
    # per-action effect records, in the order they happened
    effects: List[dict] = field(default_factory=list)

def _kings(board: Mapping[Position, Piece]) -> Dict[Color, Position]:
    out: Dict[Color, Position] = {}
    for pos, p in board.items():
        if p.kind is PieceKind.KING:
            out[p.color] = pos
    return out

class ModifierResolver:
    """Applies modifier side effects around a single move or drop.

    A move runs through a fixed sequence: taking detection, commit, Sniper,
    Atomic, Extinction, Triple-Check, King-of-the-Hill. Each step sees the
    board as the earlier ones left it. Everything that mutates the board
    happens after the base engine accepted the move, so a rejected commit
    leaves no trace.
    """

    def __init__(self, king_of_the_hill_requires_modifier: bool = False) -> None:
        self.king_of_the_hill_requires_modifier = king_of_the_hill_requires_modifier

    # --- moves ---
    def resolve_move(
        self,
        overlay: BoardOverlay,
        engine: BaseEngine,
        loadouts: Mapping[Color, ModifierSet],
        mover: Color,
        from_pos: Position,
        to_pos: Position,
    ) -> MoveOutcome:
        if engine.active_color is not mover:
            return self._reject("not_active_color", mover, from_pos, to_pos)
        piece = engine.piece_at(from_pos)
        if piece is None or piece.color is not mover:
            return self._reject("no_own_piece", mover, from_pos, to_pos)
        if to_pos not in engine.get_possible_moves(from_pos):
            return self._reject("illegal_destination", mover, from_pos, to_pos)

        mods = loadouts[mover]
        opponent = mover.opponent()

        # 1. taking detection, on the board as it was proposed
        defender = engine.piece_at(to_pos)
        taking = defender is not None and defender.color is opponent

        # 2-3. decide which capture modifiers fire before anything moves
        sniper = taking and mods.has_for(ModifierKind.SNIPER, piece.kind, mover)
        atomic = taking and mods.has_for(ModifierKind.ATOMIC, piece.kind, mover)

        # 4. commit
        try:
            engine.make_move(from_pos, to_pos)
        except IllegalMoveError as exc:
            LOGGER.warning("commit_failed", extra={"error": str(exc)})
            return MoveOutcome(committed=False)

        outcome = MoveOutcome(committed=True)
        effects = outcome.effects
        verdicts: List[RoundVerdict] = []

        if taking:
            entry = overlay.record_capture(defender)
            effects.append({"type": "capture", "piece": defender, "at": to_pos, "uid": entry.uid})
        elif piece.kind is PieceKind.PAWN and from_pos.file != to_pos.file:
            # en passant: the base engine removed a pawn beside the destination
            ep_pawn = Piece(PieceKind.PAWN, opponent)
            entry = overlay.record_capture(ep_pawn)
            effects.append({"type": "capture", "piece": ep_pawn, "at": Position(to_pos.file, from_pos.rank), "uid": entry.uid})

        actor_pos = to_pos
        if sniper:
            landed = engine.remove_piece(to_pos)
            if landed is not None:
                engine.set_piece(from_pos, landed)
            actor_pos = from_pos
            effects.append({"type": "sniper", "from": from_pos, "to": to_pos})

        if atomic:
            verdicts.extend(self._explode(overlay, engine, mover, to_pos, actor_pos, effects))

        # 5. extinction, read from the board left after the capture and any blast
        if (
            taking
            and mods.has(ModifierKind.EXTINCTION, defender)
            and not any(p == defender for p in engine.board.values())
        ):
            effects.append({"type": "extinction", "piece": defender})
            verdicts.append(RoundVerdict(mover, "extinction"))

        # 6. triple check, gated by the mover's own TripleCheck(kind, mover), not the defender's set
        actor = engine.piece_at(actor_pos)
        if actor is not None and mods.has_for(ModifierKind.TRIPLE_CHECK, actor.kind, mover):
            if engine.get_game_state() in (GameState.CHECK, GameState.CHECKMATE) and actor_pos in engine.checkers():
                n = overlay.add_check(mover)
                effects.append({"type": "triple_check", "color": mover, "count": n})
                if overlay.triple_check_reached(mover):
                    verdicts.append(RoundVerdict(mover, "triple_check"))

        # 7. king of the hill
        hill = self._king_on_hill(engine, loadouts, mover)
        if hill is not None:
            effects.append({"type": "king_of_the_hill", "color": hill})
            verdicts.append(RoundVerdict(hill, "king_of_the_hill"))

        # 8. the earliest verdict in step order stands
        if verdicts:
            outcome.round_end = verdicts[0]
        LOGGER.debug(
            "move_resolved",
            extra={"mover": mover.name, "move": f"{from_pos}{to_pos}", "effects": len(effects)},
        )
        return outcome

    def _explode(
        self,
        overlay: BoardOverlay,
        engine: BaseEngine,
        mover: Color,
        center: Position,
        actor_pos: Position,
        effects: List[dict],
    ) -> List[RoundVerdict]:
        removed: List[Position] = []
        for pos in center.neighborhood():
            # the capturing piece never blows itself up
            if pos == center or pos == actor_pos:
                continue
            p = engine.piece_at(pos)
            if p is None or p.kind is PieceKind.PAWN:
                continue
            engine.remove_piece(pos)
            overlay.record_capture(p)
            removed.append(pos)
        effects.append({"type": "atomic", "center": center, "removed": removed})

        kings = _kings(engine.board)
        opponent = mover.opponent()
        if not kings:
            return [RoundVerdict(None, "atomic")]
        if mover not in kings:
            return [RoundVerdict(opponent, "atomic")]
        if opponent not in kings:
            return [RoundVerdict(mover, "atomic")]
        return []

    def _king_on_hill(
        self, engine: BaseEngine, loadouts: Mapping[Color, ModifierSet], mover: Color
    ) -> Optional[Color]:
        kings = _kings(engine.board)
        for color in (mover, mover.opponent()):
            pos = kings.get(color)
            if pos is None or pos not in CENTER_SQUARES:
                continue
            if self.king_of_the_hill_requires_modifier and not loadouts[color].has(ModifierKind.KING_OF_THE_HILL):
                continue
            return color
        return None

    # --- crazy house drops ---
    def drop_targets(
        self,
        overlay: BoardOverlay,
        engine: BaseEngine,
        loadouts: Mapping[Color, ModifierSet],
        mover: Color,
        uid: int,
    ) -> List[Position]:
        if engine.active_color is not mover:
            return []
        entry = overlay.captured[mover.opponent()].get(uid)
        if entry is None or not loadouts[mover].has(ModifierKind.CRAZY_HOUSE, entry.piece):
            return []

        dropped = entry.piece.as_color(mover)
        board = engine.board
        king = _kings(board).get(mover)
        out: List[Position] = []
        for pos in all_positions():
            if pos in board:
                continue
            if dropped.kind is PieceKind.PAWN and pos.rank in (1, 8):
                continue
            if king is not None and engine.is_attacked_after_drop(pos, dropped, king, mover.opponent()):
                continue
            out.append(pos)
        return out

    def drop_piece(
        self,
        overlay: BoardOverlay,
        engine: BaseEngine,
        loadouts: Mapping[Color, ModifierSet],
        mover: Color,
        uid: int,
        to_pos: Position,
    ) -> MoveOutcome:
        if to_pos not in self.drop_targets(overlay, engine, loadouts, mover, uid):
            LOGGER.debug("drop_rejected", extra={"mover": mover.name, "uid": uid, "square": to_pos.name})
            return MoveOutcome(committed=False)

        entry = overlay.captured[mover.opponent()].take(uid)
        if entry is None:
            return MoveOutcome(committed=False)
        dropped = entry.piece.as_color(mover)
        engine.set_piece(to_pos, dropped)
        engine.pass_turn()
        LOGGER.debug("piece_dropped", extra={"mover": mover.name, "uid": uid, "square": to_pos.name})
        return MoveOutcome(committed=True, effects=[{"type": "drop", "piece": dropped, "at": to_pos, "uid": uid}])

    def _reject(self, why: str, mover: Color, from_pos: Position, to_pos: Position) -> MoveOutcome:
        LOGGER.debug("move_rejected", extra={"reason": why, "mover": mover.name, "move": f"{from_pos}{to_pos}"})
        return MoveOutcome(committed=False)
