from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from ..config import MatchConfig, parse_promotion
from ..core.board import BaseEngine
from ..core.types import Position
from ..modifiers.generator import Dice
from ..modifiers.match import Match
from ..modifiers.resolver import MoveOutcome

from .serde import outcome_to_dict, snapshot, verdict_to_dict

LOGGER = logging.getLogger("modchess.api.facade")


class ModifierChessAPI:
    """A small, stable facade for UI integration.

    Every call returns a JSON-friendly dict with ``ok`` and the new state.
    Bad input (malformed squares, unknown pieces) comes back as
    ``{"ok": False, "error": ...}``; moves the rules reject come back with
    ``ok`` True and ``committed`` False, the match untouched.
    """

    def __init__(
        self,
        config: Optional[MatchConfig] = None,
        engine: Optional[BaseEngine] = None,
        dice: Optional[Dice] = None,
    ) -> None:
        self.match = Match(config=config, engine=engine, dice=dice)

    def state(self) -> Dict[str, Any]:
        return snapshot(self.match)

    def legal_moves(self, from_alg: str) -> Dict[str, Any]:
        try:
            pos = Position.from_name(from_alg)
        except ValueError as exc:
            return self._error(exc)
        return {"ok": True, "moves": [p.name for p in self.match.legal_moves(pos)]}

    def drop_targets(self, uid: int) -> Dict[str, Any]:
        return {"ok": True, "targets": [p.name for p in self.match.drop_targets(int(uid))]}

    def move(self, from_alg: str, to_alg: str) -> Dict[str, Any]:
        try:
            fr = Position.from_name(from_alg)
            to = Position.from_name(to_alg)
        except ValueError as exc:
            return self._error(exc)
        outcome = self.match.move(fr, to)
        return self._after_action(outcome)

    def drop(self, uid: int, to_alg: str) -> Dict[str, Any]:
        try:
            to = Position.from_name(to_alg)
        except ValueError as exc:
            return self._error(exc)
        outcome = self.match.drop(int(uid), to)
        return self._after_action(outcome)

    def poll(self) -> Dict[str, Any]:
        verdict = self.match.poll()
        return {"ok": True, "round_end": verdict_to_dict(verdict), "state": self.state()}

    def acknowledge(self) -> Dict[str, Any]:
        return {"ok": self.match.acknowledge(), "state": self.state()}

    def select_reward(self, index: int) -> Dict[str, Any]:
        return {"ok": self.match.select_reward(int(index)), "state": self.state()}

    def set_promotion(self, name: str) -> Dict[str, Any]:
        try:
            self.match.set_promotion(parse_promotion(name))
        except ValueError as exc:
            return self._error(exc)
        return {"ok": True, "state": self.state()}

    def _after_action(self, outcome: MoveOutcome) -> Dict[str, Any]:
        result = outcome_to_dict(outcome)
        if outcome.committed and outcome.round_end is None:
            # mate shows up on the same cycle instead of waiting for the next poll
            result["round_end"] = verdict_to_dict(self.match.check_game_over())
        return {"ok": True, "result": result, "state": self.state()}

    def _error(self, exc: ValueError) -> Dict[str, Any]:
        LOGGER.debug("api_bad_input", extra={"error": str(exc)})
        return {"ok": False, "error": str(exc)}
