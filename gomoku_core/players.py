"""
Players, game modes and outcomes
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from .board import Mark


class BehaviorKind(Enum):
    HUMAN = "human"
    SYNTHETIC_EASY = "easy"
    SYNTHETIC_HARD = "hard"

    @property
    def is_synthetic(self) -> bool:
        return self is not BehaviorKind.HUMAN

    @property
    def is_hard(self) -> bool:
        return self is BehaviorKind.SYNTHETIC_HARD


class GameMode(Enum):
    """Who controls each side. Black always moves first."""
    PVP = "pvp"
    PVE_EASY = "easy"
    PVE_HARD = "hard"
    AI_VS_AI = "ai"

    @property
    def kinds(self) -> Tuple[BehaviorKind, BehaviorKind]:
        """(black kind, white kind)"""
        return _MODE_KINDS[self]


_MODE_KINDS = {
    GameMode.PVP: (BehaviorKind.HUMAN, BehaviorKind.HUMAN),
    GameMode.PVE_EASY: (BehaviorKind.HUMAN, BehaviorKind.SYNTHETIC_EASY),
    GameMode.PVE_HARD: (BehaviorKind.HUMAN, BehaviorKind.SYNTHETIC_HARD),
    GameMode.AI_VS_AI: (BehaviorKind.SYNTHETIC_HARD, BehaviorKind.SYNTHETIC_HARD),
}


class Outcome(Enum):
    BLACK_WINS = "black"
    WHITE_WINS = "white"
    DRAW = "draw"

    @classmethod
    def for_winner(cls, mark) -> "Outcome":
        return cls.BLACK_WINS if Mark(mark) is Mark.BLACK else cls.WHITE_WINS

    @property
    def winner_mark(self) -> Optional[Mark]:
        if self is Outcome.BLACK_WINS:
            return Mark.BLACK
        if self is Outcome.WHITE_WINS:
            return Mark.WHITE
        return None


@dataclass
class Player:
    name: str
    mark: Mark
    kind: BehaviorKind = BehaviorKind.HUMAN

    @property
    def is_synthetic(self) -> bool:
        return self.kind.is_synthetic
