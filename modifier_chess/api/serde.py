from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from ..core.types import Color, Piece, PieceKind, Position
from ..modifiers.definitions import Modifier, ModifierKind
from ..modifiers.match import AwaitingReward, Match, Playing, RoundEnded
from ..modifiers.resolver import MoveOutcome, RoundVerdict

LOGGER = logging.getLogger("modchess.api.serde")


def _color_to_str(c: Optional[Color]) -> Optional[str]:
    return None if c is None else c.name


def _str_to_color(s: str) -> Color:
    try:
        return Color[s.strip().upper()]
    except KeyError:
        raise ValueError(f"Bad color: {s!r}") from None


def piece_to_dict(p: Piece) -> Dict[str, Any]:
    return {"type": p.kind.value, "color": _color_to_str(p.color)}


def dict_to_piece(d: Dict[str, Any]) -> Piece:
    try:
        kind = PieceKind(str(d["type"]))
    except (KeyError, ValueError):
        raise ValueError(f"Bad piece: {d!r}") from None
    return Piece(kind, _str_to_color(str(d.get("color", ""))))


def modifier_to_dict(m: Modifier) -> Dict[str, Any]:
    d: Dict[str, Any] = {"kind": m.kind.value, "name": m.definition.name, "label": str(m)}
    d["piece"] = piece_to_dict(m.piece) if m.piece is not None else None
    return d


def dict_to_modifier(d: Dict[str, Any]) -> Modifier:
    try:
        kind = ModifierKind(str(d["kind"]))
    except (KeyError, ValueError):
        raise ValueError(f"Unknown modifier kind: {d.get('kind')!r}") from None
    piece = d.get("piece")
    return Modifier(kind, dict_to_piece(piece) if piece is not None else None)


def _jsonify(value: Any) -> Any:
    if isinstance(value, Piece):
        return piece_to_dict(value)
    if isinstance(value, Position):
        return value.name
    if isinstance(value, Color):
        return value.name
    if isinstance(value, (list, tuple)):
        return [_jsonify(v) for v in value]
    if isinstance(value, dict):
        return {k: _jsonify(v) for k, v in value.items()}
    return value


def verdict_to_dict(v: Optional[RoundVerdict]) -> Optional[Dict[str, Any]]:
    if v is None:
        return None
    return {"winner": _color_to_str(v.winner), "reason": v.reason}


def outcome_to_dict(o: MoveOutcome) -> Dict[str, Any]:
    return {
        "committed": o.committed,
        "round_end": verdict_to_dict(o.round_end),
        "effects": [_jsonify(e) for e in o.effects],
    }


def match_state_to_dict(state) -> Dict[str, Any]:
    if isinstance(state, Playing):
        return {"kind": "playing"}
    if isinstance(state, RoundEnded):
        return {"kind": "round_ended", "winner": _color_to_str(state.winner), "reason": state.reason}
    if isinstance(state, AwaitingReward):
        return {
            "kind": "awaiting_reward",
            "recipient": _color_to_str(state.recipient),
            "candidates": [modifier_to_dict(m) for m in state.candidates],
        }
    LOGGER.error("unknown_match_state", extra={"state_type": type(state).__name__})
    raise ValueError(f"Unknown match state: {state!r}")


def snapshot(match: Match) -> Dict[str, Any]:
    """JSON-friendly, read-only snapshot of everything a renderer draws."""
    engine = match.engine

    pieces: List[Dict[str, Any]] = []
    for pos, p in engine.board.items():
        d = piece_to_dict(p)
        d["pos"] = pos.name
        pieces.append(d)

    def pile(color: Color) -> List[Dict[str, Any]]:
        out = []
        for entry in match.overlay.captured[color]:
            d = piece_to_dict(entry.piece)
            d["uid"] = entry.uid
            out.append(d)
        return out

    out: Dict[str, Any] = {
        "round": match.round_number,
        "state": match_state_to_dict(match.state),
        "active_color": _color_to_str(engine.active_color),
        "game_state": engine.get_game_state().value,
        "pieces": sorted(pieces, key=lambda x: (x["color"], x["type"], x["pos"])),
        "modifiers": {
            c.name: [modifier_to_dict(m) for m in match.loadouts[c]] for c in (Color.WHITE, Color.BLACK)
        },
        "captured": {c.name: pile(c) for c in (Color.WHITE, Color.BLACK)},
        "triple_checks": {c.name: int(match.overlay.triple_checks[c]) for c in (Color.WHITE, Color.BLACK)},
        "tally": {c.name: int(match.tally[c]) for c in (Color.WHITE, Color.BLACK)},
    }

    # FEN convenience (only engines that expose one)
    fen = getattr(engine, "fen", None)
    out["fen"] = fen() if callable(fen) else None
    return out
