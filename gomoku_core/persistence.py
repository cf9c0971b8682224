"""
Session snapshots: conversion to and from a JSON-compatible dict.

A snapshot holds the full grid, the move history, the side to move, the
result, the mode and the player names. `validate_snapshot` replays the
history and refuses anything that does not describe a position the
session could actually have reached.
"""
import json
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

import numpy as np

from .board import Board, Mark
from .config import SNAPSHOT_VERSION
from .errors import ConfigurationError, CorruptSnapshotError
from .game_engine import find_winner
from .players import GameMode, Outcome


@dataclass(frozen=True)
class SessionSnapshot:
    board_size: int
    win_length: int
    mode: GameMode
    names: Tuple[str, str]
    history: Tuple[Tuple[int, int], ...]
    active_mark: Mark
    result: Optional[Outcome]
    board: Board
    saved_at: Optional[str] = None


def snapshot_session(session) -> Dict[str, Any]:
    black, white = session.players
    return {
        "version": SNAPSHOT_VERSION,
        "board_size": session.board.size,
        "win_length": session.board.win_length,
        "board": session.board.grid.tolist(),
        "mode": session.mode.value,
        "players": [
            {"name": black.name, "mark": int(black.mark), "kind": black.kind.value},
            {"name": white.name, "mark": int(white.mark), "kind": white.kind.value},
        ],
        "history": [[row, col] for row, col in session.history],
        "active_mark": int(session.active_player.mark),
        "result": session.result.value if session.result is not None else None,
        "saved_at": datetime.now().isoformat(timespec="seconds"),
    }


def encode_snapshot(data: Dict[str, Any]) -> str:
    return json.dumps(data, indent=2)


def decode_snapshot(payload: str) -> Dict[str, Any]:
    try:
        data = json.loads(payload)
    except (TypeError, ValueError, RecursionError) as e:
        raise CorruptSnapshotError("save payload is not valid JSON", context={"error": str(e)}) from e
    if not isinstance(data, dict):
        raise CorruptSnapshotError("save payload is not a JSON object")
    return data


def _require(condition, message, **context):
    if not condition:
        raise CorruptSnapshotError(message, context=context)


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _read_grid(raw, size) -> np.ndarray:
    _require(isinstance(raw, list) and len(raw) == size, "board must have one list per row", size=size)
    for r, row in enumerate(raw):
        _require(isinstance(row, list) and len(row) == size, "board row has the wrong length", row=r)
        for c, value in enumerate(row):
            _require(_is_int(value) and value in (0, 1, 2), "board cell holds an invalid mark", row=r, col=c)
    return np.asarray(raw, dtype=np.int8)


def _read_history(raw, size) -> List[Tuple[int, int]]:
    _require(isinstance(raw, list), "history must be a list")
    history = []
    for i, entry in enumerate(raw):
        _require(isinstance(entry, (list, tuple)) and len(entry) == 2, "history entry is not a pair", index=i)
        row, col = entry
        _require(_is_int(row) and _is_int(col), "history entry is not integral", index=i)
        _require(0 <= row < size and 0 <= col < size, "history entry is off the board", index=i)
        history.append((row, col))
    return history


def _read_mode_and_names(data) -> Tuple[GameMode, Tuple[str, str]]:
    try:
        mode = GameMode(data.get("mode"))
    except ValueError as e:
        raise CorruptSnapshotError("unknown game mode", context={"mode": data.get("mode")}) from e

    players = data.get("players")
    _require(isinstance(players, list) and len(players) == 2, "players must hold exactly two entries")
    names = []
    for expected_mark, kind, entry in zip((Mark.BLACK, Mark.WHITE), mode.kinds, players):
        _require(isinstance(entry, dict), "player entry is not an object")
        _require(isinstance(entry.get("name"), str) and entry["name"], "player name is missing")
        _require(entry.get("mark") == int(expected_mark), "player mark binding is wrong", mark=entry.get("mark"))
        _require(entry.get("kind") == kind.value, "player kind does not match the mode", kind=entry.get("kind"))
        names.append(entry["name"])
    return mode, (names[0], names[1])


def validate_snapshot(data: Dict[str, Any]) -> SessionSnapshot:
    """
    Checks a decoded snapshot and rebuilds its board.

    Raises:
        CorruptSnapshotError: on any missing field or inconsistency
    """
    _require(isinstance(data, dict), "snapshot is not an object")
    _require(data.get("version") == SNAPSHOT_VERSION, "unsupported snapshot version", version=data.get("version"))

    size = data.get("board_size")
    win_length = data.get("win_length")
    _require(_is_int(size) and _is_int(win_length), "board size and win length must be integers")
    grid = _read_grid(data.get("board"), size)
    try:
        board = Board(size, win_length)
    except ConfigurationError as e:
        raise CorruptSnapshotError("invalid board configuration", context=e.context) from e

    history = _read_history(data.get("history"), size)
    mode, names = _read_mode_and_names(data)

    # Replay: black moves first, marks alternate, no move may follow a win.
    won = False
    for i, (row, col) in enumerate(history):
        _require(not won, "history continues after a winning move", index=i)
        mark = Mark.BLACK if i % 2 == 0 else Mark.WHITE
        _require(board.place(row, col, mark), "history places two stones on one cell", index=i)
        won = board.check_win(row, col, mark)
    _require(np.array_equal(board.grid, grid), "board does not match the move history")

    raw_result = data.get("result")
    try:
        result = Outcome(raw_result) if raw_result is not None else None
    except ValueError as e:
        raise CorruptSnapshotError("unknown result", context={"result": raw_result}) from e

    try:
        active_mark = Mark(data.get("active_mark"))
    except ValueError as e:
        raise CorruptSnapshotError("invalid active mark", context={"active_mark": data.get("active_mark")}) from e
    _require(active_mark is not Mark.EMPTY, "active mark cannot be EMPTY")

    last_mover = Mark.BLACK if len(history) % 2 == 1 else Mark.WHITE
    if result is None:
        _require(not won, "a winning move is recorded but the game is not over")
        _require(not board.is_full(), "the board is full but the game is not over")
        expected = Mark.BLACK if len(history) % 2 == 0 else Mark.WHITE
        _require(active_mark is expected, "side to move does not match the history", active_mark=int(active_mark))
    else:
        _require(len(history) > 0, "a finished game must have moves")
        _require(active_mark is last_mover, "finished game must keep the last mover active")
        if result is Outcome.DRAW:
            _require(not won and board.is_full(), "a draw requires a full board without a win")
        else:
            _require(won and result.winner_mark is last_mover, "recorded winner does not match the board")

    # No run anywhere on the board except the recorded winner's.
    expected_winner = 0 if result is None or result is Outcome.DRAW else int(result.winner_mark)
    board_winner = int(find_winner(board.view, win_length))
    _require(board_winner == expected_winner, "board holds a run the result does not account for",
             board_winner=board_winner)

    saved_at = data.get("saved_at")
    return SessionSnapshot(
        board_size=size,
        win_length=win_length,
        mode=mode,
        names=names,
        history=tuple(history),
        active_mark=active_mark,
        result=result,
        board=board,
        saved_at=saved_at if isinstance(saved_at, str) else None,
    )
