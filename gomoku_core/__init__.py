# Engine (Numba functions)
from .game_engine import (
    run_length,
    line_shape,
    check_win_at,
    find_winner,
    candidate_moves,
    is_board_full,
)

# Tactical Patterns
from .tactical_patterns import (
    score_shape,
    score_point,
    score_moves,
    center_bonus,
)

# Board & players
from .board import Board, Mark
from .players import BehaviorKind, GameMode, Outcome, Player

# AI
from .move_selector import MoveDecision, MoveSelector, Tier

# Session
from .events import EventHub, GameEnded, MoveApplied
from .scheduler import AsyncioScheduler, ManualScheduler, MoveScheduler
from .session import SessionState, TurnSession

# Persistence
from .persistence import (
    SessionSnapshot,
    snapshot_session,
    encode_snapshot,
    decode_snapshot,
    validate_snapshot,
)
from .storage import FileSaveStore, MemorySaveStore, SaveStore

from .errors import ConfigurationError, CorruptSnapshotError, GomokuError


__all__ = [
    # Game Engine
    'run_length',
    'line_shape',
    'check_win_at',
    'find_winner',
    'candidate_moves',
    'is_board_full',

    # Tactical Patterns
    'score_shape',
    'score_point',
    'score_moves',
    'center_bonus',

    # Board & players
    'Board',
    'Mark',
    'BehaviorKind',
    'GameMode',
    'Outcome',
    'Player',

    # AI
    'MoveDecision',
    'MoveSelector',
    'Tier',

    # Session
    'EventHub',
    'GameEnded',
    'MoveApplied',
    'AsyncioScheduler',
    'ManualScheduler',
    'MoveScheduler',
    'SessionState',
    'TurnSession',

    # Persistence
    'SessionSnapshot',
    'snapshot_session',
    'encode_snapshot',
    'decode_snapshot',
    'validate_snapshot',
    'FileSaveStore',
    'MemorySaveStore',
    'SaveStore',

    # Errors
    'ConfigurationError',
    'CorruptSnapshotError',
    'GomokuError',
]

__version__ = '1.0.0'
