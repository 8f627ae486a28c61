from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple, Union

from ..config import MatchConfig
from ..core.board import BaseEngine, ChessEngine
from ..core.events import MoveResolved, PieceDropped, RewardGranted, RewardOffered, RoundFinished
from ..core.types import Color, GameState, PieceKind, Position
from .definitions import Modifier
from .generator import Dice, DiceStream, draw_candidates
from .loadout import ModifierSet
from .resolver import ModifierResolver, MoveOutcome, RoundVerdict
from .state import BoardOverlay

LOGGER = logging.getLogger("modchess.modifiers.match")

@dataclass(frozen=True)
class Playing:
    pass

@dataclass(frozen=True)
class RoundEnded:
    winner: Optional[Color]
    reason: str = ""

@dataclass(frozen=True)
class AwaitingReward:
    candidates: Tuple[Modifier, ...]
    recipient: Color

MatchState = Union[Playing, RoundEnded, AwaitingReward]

class Listener:
    def on_event(self, match: "Match", event: object) -> None:
        return

class Match:
    """Round-after-round match loop.

    Playing -> RoundEnded -> (AwaitingReward ->) Playing, forever. Inputs that
    do not fit the current state are ignored.
    """

    def __init__(
        self,
        config: Optional[MatchConfig] = None,
        engine: Optional[BaseEngine] = None,
        dice: Optional[Dice] = None,
    ) -> None:
        self.config = config if config is not None else MatchConfig()
        self.config.validate()

        self.engine: BaseEngine = engine if engine is not None else ChessEngine(self.config.fen, self.config.promotion)
        self.dice: Dice = dice if dice is not None else DiceStream(self.config.seed)
        self.resolver = ModifierResolver(self.config.king_of_the_hill_requires_modifier)

        self.loadouts: Dict[Color, ModifierSet] = {
            c: ModifierSet(self.config.starting_modifiers.get(c, ())) for c in (Color.WHITE, Color.BLACK)
        }
        self.tally: Dict[Color, int] = {Color.WHITE: 0, Color.BLACK: 0}
        self.overlay = BoardOverlay()
        self.state: MatchState = Playing()
        self.round_number = 1
        self.listeners: List[Listener] = []

    def emit(self, event: object) -> None:
        for listener in list(self.listeners):
            listener.on_event(self, event)

    @property
    def playing(self) -> bool:
        return isinstance(self.state, Playing)

    # --- player actions ---
    def legal_moves(self, from_pos: Position) -> List[Position]:
        if not self.playing:
            return []
        p = self.engine.piece_at(from_pos)
        if p is None or p.color is not self.engine.active_color:
            return []
        return self.engine.get_possible_moves(from_pos)

    def move(self, from_pos: Position, to_pos: Position) -> MoveOutcome:
        if not self.playing:
            return self._ignored("move")
        mover = self.engine.active_color
        outcome = self.resolver.resolve_move(self.overlay, self.engine, self.loadouts, mover, from_pos, to_pos)
        if not outcome.committed:
            return outcome
        self.emit(MoveResolved(mover=mover, from_pos=from_pos, to_pos=to_pos, outcome=outcome))
        if outcome.round_end is not None:
            self._finish(outcome.round_end)
        return outcome

    def drop_targets(self, uid: int) -> List[Position]:
        if not self.playing:
            return []
        return self.resolver.drop_targets(self.overlay, self.engine, self.loadouts, self.engine.active_color, uid)

    def drop(self, uid: int, to_pos: Position) -> MoveOutcome:
        if not self.playing:
            return self._ignored("drop")
        mover = self.engine.active_color
        outcome = self.resolver.drop_piece(self.overlay, self.engine, self.loadouts, mover, uid, to_pos)
        if outcome.committed:
            dropped = self.engine.piece_at(to_pos)
            self.emit(PieceDropped(mover=mover, piece=dropped, to_pos=to_pos, outcome=outcome))
        return outcome

    def set_promotion(self, kind: PieceKind) -> None:
        self.engine.set_promotion(kind)

    # --- ticking ---
    def poll(self) -> Optional[RoundVerdict]:
        """Idle tick: advance the dice once, then look for mate."""
        self.dice.tick()
        return self.check_game_over()

    def check_game_over(self) -> Optional[RoundVerdict]:
        if not self.playing:
            return None
        gs = self.engine.get_game_state()
        if gs is GameState.CHECKMATE:
            verdict = RoundVerdict(self.engine.active_color.opponent(), "checkmate")
        elif gs is GameState.STALEMATE:
            verdict = RoundVerdict(None, "stalemate")
        else:
            return None
        self._finish(verdict)
        return verdict

    # --- round transitions ---
    def acknowledge(self) -> bool:
        state = self.state
        if not isinstance(state, RoundEnded):
            self._ignored("acknowledge")
            return False

        if state.winner is None:
            self._start_round()
            return True

        recipient = state.winner.opponent()
        candidates = draw_candidates(
            recipient, self.loadouts[recipient], self.dice, retry_cap=self.config.reward_retry_cap
        )
        if not candidates:
            LOGGER.warning("reward_space_exhausted", extra={"recipient": recipient.name})
            self.emit(RewardGranted(recipient=recipient, modifier=None))
            self._start_round()
            return True

        self.state = AwaitingReward(candidates=candidates, recipient=recipient)
        self.emit(RewardOffered(recipient=recipient, candidates=candidates))
        return True

    def select_reward(self, index: int) -> bool:
        state = self.state
        if not isinstance(state, AwaitingReward):
            self._ignored("select_reward")
            return False
        if not 0 <= index < len(state.candidates):
            LOGGER.debug("reward_index_out_of_range", extra={"index": index})
            return False

        chosen = state.candidates[index]
        self.loadouts[state.recipient].add(chosen)
        LOGGER.info("reward_granted", extra={"recipient": state.recipient.name, "modifier": str(chosen)})
        self.emit(RewardGranted(recipient=state.recipient, modifier=chosen))
        self._start_round()
        return True

    def _finish(self, verdict: RoundVerdict) -> None:
        self.state = RoundEnded(winner=verdict.winner, reason=verdict.reason)
        if verdict.winner is not None:
            self.tally[verdict.winner] += 1
        LOGGER.info(
            "round_finished",
            extra={
                "round": self.round_number,
                "winner": verdict.winner.name if verdict.winner is not None else None,
                "reason": verdict.reason,
            },
        )
        self.emit(RoundFinished(verdict=verdict, round_number=self.round_number))

    def _start_round(self) -> None:
        self.engine.reset()
        self.overlay = BoardOverlay()
        self.round_number += 1
        self.state = Playing()

    def _ignored(self, action: str) -> MoveOutcome:
        LOGGER.debug("input_ignored", extra={"action": action, "state": type(self.state).__name__})
        return MoveOutcome(committed=False)
