"""
Turn session: one game between two players, from new game to result.

Human moves arrive through `submit_move`; synthetic moves are chosen by a
MoveSelector and applied through the same validation path. When a
scheduler is supplied, each synthetic move is committed after a short
delay and is discarded if the game was undone, restarted or reloaded in
the meantime.
"""
from __future__ import annotations

import functools
import logging
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from .board import Board, Mark
from .config import (
    BLACK_NAME,
    BOARD_SIZE,
    DEFAULT_SLOT,
    THINK_DELAY,
    THINK_DELAY_TACTICAL,
    WHITE_NAME,
    WIN_LENGTH,
)
from .errors import CorruptSnapshotError
from .events import EventHub, GameEnded, MoveApplied
from .move_selector import MoveDecision, MoveSelector, Tier
from .persistence import decode_snapshot, encode_snapshot, snapshot_session, validate_snapshot
from .players import GameMode, Outcome, Player
from .scheduler import MoveScheduler, ScheduledHandle
from .storage import SaveStore

logger = logging.getLogger(__name__)


class SessionState(Enum):
    PLAYING = "playing"
    ENDED = "ended"


class TurnSession:
    """
    Game state machine: board, players, side to move, history and result.

    The session starts in PLAYING with black to move and the players' kinds
    taken from `mode`. It does not start a synthetic first move by itself;
    call `new_game` or `resume` once listeners are attached.

    Args:
        mode: initial GameMode
        board_size, win_length: board configuration
        selector: MoveSelector for synthetic players
        scheduler: optional MoveScheduler; without one, synthetic moves are
            applied immediately
        think_delay: delay before committing a scored move
        tactical_delay: delay before committing a winning or blocking move
    """

    def __init__(self,
                 mode=GameMode.PVP,
                 *,
                 board_size=BOARD_SIZE,
                 win_length=WIN_LENGTH,
                 selector: Optional[MoveSelector] = None,
                 scheduler: Optional[MoveScheduler] = None,
                 black_name=BLACK_NAME,
                 white_name=WHITE_NAME,
                 think_delay=THINK_DELAY,
                 tactical_delay=THINK_DELAY_TACTICAL):
        self.events = EventHub()
        self._board = Board(board_size, win_length)
        self._black = Player(black_name, Mark.BLACK)
        self._white = Player(white_name, Mark.WHITE)
        self._selector = selector if selector is not None else MoveSelector()
        self._scheduler = scheduler
        self.think_delay = think_delay
        self.tactical_delay = tactical_delay

        self._history: List[Tuple[int, int]] = []
        self._pending: Optional[ScheduledHandle] = None
        self._turn_token = 0

        self.mode = GameMode(mode)
        self._apply_mode()
        self._active = self._black
        self._state = SessionState.PLAYING
        self._result: Optional[Outcome] = None

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def board(self) -> Board:
        return self._board

    @property
    def players(self) -> Tuple[Player, Player]:
        return self._black, self._white

    @property
    def active_player(self) -> Player:
        return self._active

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def result(self) -> Optional[Outcome]:
        return self._result

    @property
    def is_game_over(self) -> bool:
        return self._state is SessionState.ENDED

    @property
    def winner(self) -> Optional[Player]:
        if self._result is None or self._result is Outcome.DRAW:
            return None
        return self.player_for(self._result.winner_mark)

    @property
    def history(self) -> List[Tuple[int, int]]:
        return list(self._history)

    @property
    def has_pending_move(self) -> bool:
        return self._pending is not None

    def player_for(self, mark) -> Player:
        return self._black if Mark(mark) is Mark.BLACK else self._white

    def cell(self, row, col) -> int:
        """Mark code at (row, col): 0 empty, 1 black, 2 white."""
        return int(self._board.get(row, col))

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def new_game(self, mode=None):
        """Resets everything for a new game; black moves first."""
        self._cancel_pending()
        if mode is not None:
            self.mode = GameMode(mode)
        self._apply_mode()
        self._board.reset()
        self._history.clear()
        self._active = self._black
        self._state = SessionState.PLAYING
        self._result = None
        logger.info(f"New game, mode {self.mode.value}")
        self._request_synthetic_move()

    def submit_move(self, row, col) -> bool:
        """
        Plays a human move for the active player.

        Returns:
            True if the move was applied, False if it was rejected
        """
        if self._state is SessionState.ENDED:
            logger.warning(f"Game is over, ignoring move ({row}, {col})")
            return False
        if self._active.is_synthetic:
            logger.warning(f"{self._active.name} is synthetic, ignoring manual move ({row}, {col})")
            return False
        if not self._apply_move(row, col):
            return False
        self._request_synthetic_move()
        return True

    def undo(self) -> bool:
        """Takes back the last move and gives the turn back to its player."""
        if self._state is SessionState.ENDED:
            logger.warning("Game is over, cannot undo")
            return False
        if not self._history:
            logger.warning("No moves to undo")
            return False

        self._cancel_pending()
        row, col = self._history.pop()
        self._board.place(row, col, Mark.EMPTY)
        logger.info(f"Undid move ({row}, {col})")
        self.events.emit_move_applied(MoveApplied(row, col, int(Mark.EMPTY)))
        self._switch_turn()
        return True

    def resume(self) -> bool:
        """
        Starts the synthetic player's move if it is its turn and none is
        pending, e.g. after an undo or a load left it to move.
        """
        if (self._state is not SessionState.PLAYING or not self._active.is_synthetic
                or self._pending is not None):
            return False
        moves_before = len(self._history)
        self._request_synthetic_move()
        return len(self._history) != moves_before or self._pending is not None

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def snapshot(self) -> Dict[str, Any]:
        return snapshot_session(self)

    def save(self, store: SaveStore, slot=DEFAULT_SLOT) -> bool:
        ok = store.save(encode_snapshot(self.snapshot()), slot)
        if not ok:
            logger.warning(f"Saving slot {slot!r} failed")
        return ok

    def load(self, store: SaveStore, slot=DEFAULT_SLOT) -> bool:
        """Replaces the current game with the one saved in `slot`; keeps it on any failure."""
        payload = store.load(slot)
        if not payload:
            logger.warning(f"Nothing to load in slot {slot!r}")
            return False
        try:
            data = decode_snapshot(payload)
        except CorruptSnapshotError as e:
            logger.warning(f"Refusing to load slot {slot!r}: {e}")
            return False
        return self.restore(data)

    def restore(self, data: Dict[str, Any]) -> bool:
        """Adopts a snapshot dict entirely, or not at all."""
        try:
            snap = validate_snapshot(data)
        except CorruptSnapshotError as e:
            logger.warning(f"Refusing to restore session: {e}")
            return False

        self._cancel_pending()
        self._board = snap.board
        self._history = list(snap.history)
        self.mode = snap.mode
        self._black.name, self._white.name = snap.names
        self._apply_mode()
        self._active = self.player_for(snap.active_mark)
        self._result = snap.result
        self._state = SessionState.PLAYING if snap.result is None else SessionState.ENDED
        logger.info(f"Restored game with {len(self._history)} moves, mode {self.mode.value}")
        return True

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _apply_mode(self):
        self._black.kind, self._white.kind = self.mode.kinds

    def _switch_turn(self):
        self._active = self._white if self._active is self._black else self._black
        logger.debug(f"Turn: {self._active.name}")

    def _apply_move(self, row, col) -> bool:
        player = self._active
        if not self._board.place(row, col, player.mark):
            logger.warning(f"Illegal move by {player.name} at ({row}, {col}): off the board or occupied")
            return False

        self._history.append((row, col))
        logger.info(f"{player.name} plays ({row}, {col})")

        # Settle the position before listeners run; they may call back in.
        outcome = None
        if self._board.check_win(row, col, player.mark):
            outcome = Outcome.for_winner(player.mark)
        elif self._board.is_full():
            outcome = Outcome.DRAW
        if outcome is not None:
            self._state = SessionState.ENDED
            self._result = outcome
        else:
            self._switch_turn()

        self.events.emit_move_applied(MoveApplied(row, col, int(player.mark)))
        if outcome is not None:
            self._announce_result(outcome)
        return True

    def _announce_result(self, outcome: Outcome):
        winner = self.winner
        name = winner.name if winner is not None else None
        logger.info(f"Game over: {outcome.value}" + (f", {name} wins" if name else ""))
        self.events.emit_game_ended(GameEnded(outcome, name))

    def _decide(self) -> Optional[MoveDecision]:
        player = self._active
        decision = self._selector.select(self._board, player.mark, player.kind)
        if decision is None:
            logger.warning(f"No move available for {player.name}, passing")
        return decision

    def _request_synthetic_move(self):
        if self._scheduler is None:
            self._play_synthetic_now()
        else:
            self._schedule_synthetic()

    def _play_synthetic_now(self):
        # Loop rather than recurse so AI-vs-AI games stay flat.
        while self._state is SessionState.PLAYING and self._active.is_synthetic:
            decision = self._decide()
            if decision is None or not self._apply_move(decision.row, decision.col):
                return

    def _schedule_synthetic(self):
        if (self._state is not SessionState.PLAYING or not self._active.is_synthetic
                or self._pending is not None):
            return
        decision = self._decide()
        if decision is None:
            return
        delay = self.think_delay if decision.tier is Tier.HEURISTIC else self.tactical_delay
        commit = functools.partial(self._commit_synthetic, self._turn_token, decision)
        self._pending = self._scheduler.schedule(delay, commit)
        logger.debug(f"{self._active.name} will play {decision.move} in {delay:.2f}s")

    def _commit_synthetic(self, token, decision: MoveDecision):
        if token != self._turn_token:
            logger.debug(f"Discarding stale synthetic move {decision.move}")
            return
        self._pending = None
        if self._state is not SessionState.PLAYING or not self._active.is_synthetic:
            return
        if self._apply_move(decision.row, decision.col):
            self._request_synthetic_move()

    def _cancel_pending(self):
        self._turn_token += 1
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None
            logger.info("Cancelled pending synthetic move")
