from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional, Tuple, TYPE_CHECKING

from .core.types import Color, PieceKind, PROMOTION_KINDS

if TYPE_CHECKING:
    from .modifiers.definitions import Modifier

DEFAULT_RETRY_CAP = 64

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}

def _env_bool(raw: str, key: str) -> bool:
    v = raw.strip().lower()
    if v in _TRUE:
        return True
    if v in _FALSE:
        return False
    raise ValueError(f"{key} must be a boolean, got {raw!r}")

def parse_promotion(name: str) -> PieceKind:
    for kind in PROMOTION_KINDS:
        if kind.value.lower() == name.strip().lower():
            return kind
    raise ValueError(f"Unknown promotion piece: {name!r}")

@dataclass
class MatchConfig:
    seed: int = 1337
    reward_retry_cap: int = DEFAULT_RETRY_CAP
    # False: any king reaching the center ends the round
    king_of_the_hill_requires_modifier: bool = False
    promotion: PieceKind = PieceKind.QUEEN
    fen: Optional[str] = None
    starting_modifiers: Dict[Color, Tuple[Modifier, ...]] = field(default_factory=dict)

    def validate(self) -> None:
        if self.reward_retry_cap < 1:
            raise ValueError(f"reward_retry_cap must be >= 1 (got {self.reward_retry_cap})")
        if self.promotion not in PROMOTION_KINDS:
            raise ValueError(f"Cannot promote to {self.promotion.value}")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, **overrides) -> "MatchConfig":
        env = os.environ if environ is None else environ
        cfg = cls()
        if "MODCHESS_SEED" in env:
            cfg.seed = int(env["MODCHESS_SEED"])
        if "MODCHESS_REWARD_RETRY_CAP" in env:
            cfg.reward_retry_cap = int(env["MODCHESS_REWARD_RETRY_CAP"])
        if "MODCHESS_KOTH_REQUIRES_MOD" in env:
            cfg.king_of_the_hill_requires_modifier = _env_bool(env["MODCHESS_KOTH_REQUIRES_MOD"], "MODCHESS_KOTH_REQUIRES_MOD")
        if "MODCHESS_PROMOTION" in env:
            cfg.promotion = parse_promotion(env["MODCHESS_PROMOTION"])
        for k, v in overrides.items():
            if not hasattr(cfg, k):
                raise TypeError(f"Unknown config field: {k}")
            if v is not None:
                setattr(cfg, k, v)
        cfg.validate()
        return cfg
