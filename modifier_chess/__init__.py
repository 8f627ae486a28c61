"""Modifier Chess (backend).

- core: shared types, the python-chess base engine adapter, match events
- modifiers: modifier model, captured piles, reward generator, effect resolver, match loop
- api: JSON-oriented facade for UIs
- cli: terminal front end
"""

from . import core, modifiers, api
from .config import MatchConfig
from .modifiers import Match, Modifier, ModifierKind

__all__ = [
    "core","modifiers","api",
    "MatchConfig",
    "Match","Modifier","ModifierKind",
]
