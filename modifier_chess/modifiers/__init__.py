from .definitions import ModifierKind, Modifier, ModifierDef, Binding, MODIFIER_DEFS, GATED_KINDS, bound_color
from .loadout import ModifierSet
from .state import BoardOverlay, CapturedPile, CapturedEntry, TRIPLE_CHECK_TARGET
from .generator import DiceStream, generate, draw_candidates, modifier_space
from .resolver import ModifierResolver, MoveOutcome, RoundVerdict
from .match import Match, MatchState, Playing, RoundEnded, AwaitingReward, Listener

__all__ = [
    "ModifierKind","Modifier","ModifierDef","Binding","MODIFIER_DEFS","GATED_KINDS","bound_color",
    "ModifierSet",
    "BoardOverlay","CapturedPile","CapturedEntry","TRIPLE_CHECK_TARGET",
    "DiceStream","generate","draw_candidates","modifier_space",
    "ModifierResolver","MoveOutcome","RoundVerdict",
    "Match","MatchState","Playing","RoundEnded","AwaitingReward","Listener",
]
