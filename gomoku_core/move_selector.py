"""
Synthetic opponent move selection.

Per turn, in order:
  1. play a candidate that wins immediately;
  2. otherwise block a candidate where the opponent would win immediately;
  3. otherwise score every candidate for attack and defense with the shape
     table and pick the best (hard) or one of the top few at random (easy).

Single ply only: there is no lookahead beyond the immediate win/block check.
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

import numpy as np

from .board import Board, Mark
from .config import (
    CANDIDATE_RADIUS,
    DEFENSE_WEIGHT_DEFAULT,
    DEFENSE_WEIGHT_HARD,
    HARD_ATTACK_BONUS_DIVISOR,
    TOP_K_EASY,
)
from .errors import ConfigurationError
from .players import BehaviorKind
from .tactical_patterns import score_moves

logger = logging.getLogger(__name__)


class Tier(Enum):
    WIN = "win"
    BLOCK = "block"
    HEURISTIC = "heuristic"


@dataclass(frozen=True)
class MoveDecision:
    row: int
    col: int
    tier: Tier
    score: Optional[int] = None

    @property
    def move(self) -> Tuple[int, int]:
        return self.row, self.col


class MoveSelector:
    """
    Picks a move for a synthetic player.

    Args:
        radius: candidate neighborhood radius around existing stones
        top_k: how many of the best-scored candidates easy play chooses from
        rng: numpy Generator used for the easy tier's random pick
    """

    def __init__(self, radius=CANDIDATE_RADIUS, top_k=TOP_K_EASY, rng=None):
        if radius < 1:
            raise ConfigurationError("candidate radius must be at least 1", context={"radius": radius})
        if top_k < 1:
            raise ConfigurationError("top_k must be at least 1", context={"top_k": top_k})
        self.radius = radius
        self.top_k = top_k
        self.rng = rng if rng is not None else np.random.default_rng()

    def select(self, board: Board, mark, kind=BehaviorKind.SYNTHETIC_HARD) -> Optional[MoveDecision]:
        """
        Chooses a move for `mark` on `board`.

        The board is only modified inside hypothetical placements, and is
        back in its original state when this returns.

        Returns:
            MoveDecision, or None if there is no candidate cell
        """
        mark = Mark(mark)
        if mark is Mark.EMPTY:
            logger.warning("Move selection requested for the EMPTY mark")
            return None

        candidates = board.candidates(self.radius)
        if not candidates:
            logger.warning(f"No candidate moves for {mark.name}")
            return None

        win = self._first_winning(board, candidates, mark)
        if win is not None:
            logger.debug(f"{mark.name} wins at {win}")
            return MoveDecision(win[0], win[1], Tier.WIN)

        block = self._first_winning(board, candidates, mark.opponent)
        if block is not None:
            logger.debug(f"{mark.name} blocks at {block}")
            return MoveDecision(block[0], block[1], Tier.BLOCK)

        return self._pick_scored(board, candidates, mark, kind)

    @staticmethod
    def _first_winning(board: Board, candidates: List[Tuple[int, int]], mark: Mark) -> Optional[Tuple[int, int]]:
        for row, col in candidates:
            with board.hypothetical(row, col, mark) as placed:
                if placed and board.check_win(row, col, mark):
                    return row, col
        return None

    def score_candidates(self, board: Board, candidates: List[Tuple[int, int]], mark: Mark, kind) -> np.ndarray:
        """Combined attack/defense score of each candidate, in candidate order."""
        moves = np.asarray(candidates, dtype=np.int64).reshape(-1, 2)
        attack = score_moves(board.view, moves, int(mark), board.win_length)
        defend = score_moves(board.view, moves, int(mark.opponent), board.win_length)

        weight = DEFENSE_WEIGHT_HARD if kind.is_hard else DEFENSE_WEIGHT_DEFAULT
        totals = attack + (defend * weight) // 100
        if kind.is_hard:
            totals += attack // HARD_ATTACK_BONUS_DIVISOR
        return totals

    def _pick_scored(self, board, candidates, mark, kind) -> MoveDecision:
        totals = self.score_candidates(board, candidates, mark, kind)

        if kind.is_hard:
            index = int(np.argmax(totals))
        else:
            order = np.argsort(-totals, kind="stable")
            top = order[:min(self.top_k, len(order))]
            index = int(top[self.rng.integers(len(top))])

        row, col = candidates[index]
        logger.debug(f"{mark.name} ({kind.value}) plays {(row, col)} scored {int(totals[index])}")
        return MoveDecision(row, col, Tier.HEURISTIC, int(totals[index]))
