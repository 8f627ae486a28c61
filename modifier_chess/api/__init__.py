"""Stable boundary for a rendering layer.

This layer is **frontend-agnostic** and only speaks JSON-friendly structures:
- read-only match snapshots (board, modifier sets, captured piles, counters)
- modifier / piece encode-decode
- actions returning outcomes with effect records for animation
"""

from .facade import ModifierChessAPI
from .serde import snapshot, modifier_to_dict, dict_to_modifier, piece_to_dict, dict_to_piece, outcome_to_dict

__all__ = [
    "ModifierChessAPI",
    "snapshot","modifier_to_dict","dict_to_modifier","piece_to_dict","dict_to_piece","outcome_to_dict",
]
