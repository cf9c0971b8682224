"""
Outward notifications for presentation layers.
"""
import logging
from dataclasses import dataclass
from typing import Callable, List, Optional

from .players import Outcome

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MoveApplied:
    """A cell changed. mark_code is 0 when a move was taken back."""
    row: int
    col: int
    mark_code: int


@dataclass(frozen=True)
class GameEnded:
    outcome: Outcome
    winner_name: Optional[str] = None

    @property
    def is_draw(self) -> bool:
        return self.outcome is Outcome.DRAW


class EventHub:
    """Listener lists for MoveApplied and GameEnded events."""

    def __init__(self):
        self._move_listeners: List[Callable[[MoveApplied], None]] = []
        self._end_listeners: List[Callable[[GameEnded], None]] = []

    def subscribe_move_applied(self, callback):
        self._move_listeners.append(callback)
        return lambda: self._remove(self._move_listeners, callback)

    def subscribe_game_ended(self, callback):
        self._end_listeners.append(callback)
        return lambda: self._remove(self._end_listeners, callback)

    def emit_move_applied(self, event: MoveApplied):
        self._dispatch(self._move_listeners, event)

    def emit_game_ended(self, event: GameEnded):
        self._dispatch(self._end_listeners, event)

    @staticmethod
    def _remove(listeners, callback):
        if callback in listeners:
            listeners.remove(callback)

    @staticmethod
    def _dispatch(listeners, event):
        for callback in list(listeners):
            try:
                callback(event)
            except Exception:
                logger.exception(f"Listener {callback!r} failed on {event}")
