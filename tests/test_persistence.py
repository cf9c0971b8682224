import copy
import json

import numpy as np
import pytest

from gomoku_core import (
    CorruptSnapshotError,
    FileSaveStore,
    GameMode,
    Mark,
    MemorySaveStore,
    Outcome,
    SessionState,
    TurnSession,
    decode_snapshot,
    validate_snapshot,
)


@pytest.fixture
def midgame(make_session):
    session = make_session()
    for move in [(7, 7), (7, 8), (8, 8), (6, 6), (9, 9)]:
        session.submit_move(*move)
    return session


def test_snapshot_fields(midgame):
    data = midgame.snapshot()
    assert data["board_size"] == 15
    assert data["win_length"] == 5
    assert data["history"] == [[7, 7], [7, 8], [8, 8], [6, 6], [9, 9]]
    assert data["active_mark"] == 2
    assert data["result"] is None
    assert data["mode"] == "pvp"
    assert data["board"][7][8] == 2
    assert json.loads(json.dumps(data)) == data


def test_save_and_load_round_trip(midgame):
    store = MemorySaveStore()
    assert midgame.save(store, "slot1")
    assert store.has_save("slot1")

    other = TurnSession(GameMode.PVE_HARD)
    assert other.load(store, "slot1")
    assert np.array_equal(other.board.grid, midgame.board.grid)
    assert other.history == midgame.history
    assert other.active_player.mark is Mark.WHITE
    assert other.mode is GameMode.PVP
    assert other.state is SessionState.PLAYING

    # the restored game continues normally
    assert other.submit_move(0, 0)
    assert other.undo()
    assert other.undo()
    assert other.history == midgame.history[:-1]


def test_finished_game_round_trip(make_session):
    session = make_session()
    for c in range(4):
        session.submit_move(0, c)
        session.submit_move(1, c)
    session.submit_move(0, 4)
    store = MemorySaveStore()
    session.save(store)

    other = TurnSession()
    assert other.load(store)
    assert other.is_game_over
    assert other.result is Outcome.BLACK_WINS
    assert other.active_player.mark is Mark.BLACK
    assert not other.submit_move(5, 5)


def test_names_and_mode_are_restored():
    session = TurnSession(GameMode.PVE_EASY, black_name="Ana", white_name="Bot")
    session.new_game()
    session.submit_move(7, 7)
    data = session.snapshot()

    other = TurnSession(black_name="x", white_name="y")
    assert other.restore(data)
    black, white = other.players
    assert (black.name, white.name) == ("Ana", "Bot")
    assert other.mode is GameMode.PVE_EASY
    assert white.is_synthetic


def _corrupt(data, mutate):
    broken = copy.deepcopy(data)
    mutate(broken)
    return broken


CORRUPTIONS = {
    "bad version": lambda d: d.update(version=99),
    "missing board": lambda d: d.pop("board"),
    "short row": lambda d: d["board"][3].pop(),
    "bad cell value": lambda d: d["board"][0].__setitem__(0, 3),
    "extra stone": lambda d: d["board"][0].__setitem__(0, 1),
    "history off board": lambda d: d["history"].append([15, 0]),
    "history not pairs": lambda d: d["history"].__setitem__(0, [7]),
    "history missing move": lambda d: d["history"].pop(),
    "duplicated move": lambda d: d["history"].__setitem__(2, [7, 7]),
    "wrong side to move": lambda d: d.update(active_mark=1),
    "empty side to move": lambda d: d.update(active_mark=0),
    "claimed winner": lambda d: d.update(result="black"),
    "claimed draw": lambda d: d.update(result="draw"),
    "unknown result": lambda d: d.update(result="maybe"),
    "unknown mode": lambda d: d.update(mode="chess"),
    "kind mismatch": lambda d: d["players"][1].update(kind="hard"),
    "swapped marks": lambda d: d["players"].reverse(),
    "bool size": lambda d: d.update(board_size=True),
    "zero size": lambda d: d.update(board_size=0, board=[]),
    "shorter win length": lambda d: d.update(win_length=3),
}


@pytest.mark.parametrize("name", sorted(CORRUPTIONS))
def test_corrupt_snapshot_is_refused(midgame, name):
    data = _corrupt(midgame.snapshot(), CORRUPTIONS[name])
    with pytest.raises(CorruptSnapshotError):
        validate_snapshot(data)


@pytest.mark.parametrize("name", sorted(CORRUPTIONS))
def test_corrupt_load_keeps_current_game(midgame, make_session, name):
    store = MemorySaveStore()
    store.save(json.dumps(_corrupt(midgame.snapshot(), CORRUPTIONS[name])))

    current = make_session()
    current.submit_move(3, 3)
    before = current.board.grid
    assert not current.load(store)
    assert np.array_equal(current.board.grid, before)
    assert current.history == [(3, 3)]
    assert current.active_player.mark is Mark.WHITE


def test_moves_after_a_win_are_refused(make_session):
    session = make_session()
    for c in range(4):
        session.submit_move(0, c)
        session.submit_move(1, c)
    session.submit_move(0, 4)
    data = session.snapshot()
    data["history"].append([5, 5])
    data["board"][5][5] = 2
    data["active_mark"] = 2
    with pytest.raises(CorruptSnapshotError):
        validate_snapshot(data)


@pytest.mark.parametrize("payload", ["", "not json", "[1, 2, 3]", "null", "[" * 200000],
                         ids=["empty", "not-json", "list", "null", "deeply-nested"])
def test_undecodable_payloads(payload):
    store = MemorySaveStore()
    store.slots["autosave"] = payload
    session = TurnSession()
    assert not session.load(store)
    if payload:
        with pytest.raises(CorruptSnapshotError):
            decode_snapshot(payload)


def test_load_from_empty_slot_fails():
    assert not TurnSession().load(MemorySaveStore(), "nothing")


def test_load_cancels_pending_move(make_session, manual_scheduler, midgame):
    store = MemorySaveStore()
    midgame.save(store)

    session = make_session(GameMode.PVE_HARD, scheduler=manual_scheduler)
    session.submit_move(0, 0)
    assert session.has_pending_move
    assert session.load(store)
    assert not session.has_pending_move
    manual_scheduler.run_pending()
    assert session.history == midgame.history


def test_resume_after_load_when_synthetic_to_move(make_session):
    session = make_session()
    session.submit_move(7, 7)
    data = session.snapshot()
    data["mode"] = "hard"
    data["players"][1]["kind"] = "hard"

    other = TurnSession()
    assert other.restore(data)
    assert other.active_player.is_synthetic
    assert other.resume()
    assert len(other.history) == 2


def test_file_store_round_trip(tmp_path, midgame):
    store = FileSaveStore(tmp_path / "saves")
    assert not store.has_save("slot1")
    assert midgame.save(store, "slot1")
    assert store.has_save("slot1")
    assert (tmp_path / "saves" / "slot1.save").is_file()

    other = TurnSession()
    assert other.load(store, "slot1")
    assert other.history == midgame.history


def test_file_store_defaults_and_missing(tmp_path):
    store = FileSaveStore(tmp_path)
    assert store.load("missing") is None
    assert store.save("{}", "")
    assert (tmp_path / "autosave.save").read_text(encoding="utf-8") == "{}"
    assert store.load() == "{}"


@pytest.mark.parametrize("slot", ["../escape", "a/b", ".."])
def test_file_store_rejects_path_slots(tmp_path, slot):
    store = FileSaveStore(tmp_path / "saves")
    assert not store.save("{}", slot)
    assert store.load(slot) is None
    assert not store.has_save(slot)


def test_empty_payload_is_not_saved(tmp_path):
    assert not MemorySaveStore().save("")
    assert not FileSaveStore(tmp_path).save("")


def test_undecodable_save_file_keeps_current_game(tmp_path, make_session):
    (tmp_path / "autosave.save").write_bytes(b'{"version": 1, "board": "\xff\xfe"}')
    store = FileSaveStore(tmp_path)
    assert store.load() is None

    session = make_session()
    session.submit_move(3, 3)
    assert not session.load(store)
    assert session.history == [(3, 3)]
    assert session.cell(3, 3) == 1
    assert session.active_player.mark is Mark.WHITE
