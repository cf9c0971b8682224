import asyncio

from gomoku_core import AsyncioScheduler, GameMode, ManualScheduler, Mark, MoveSelector, TurnSession


def test_manual_scheduler_fires_in_due_order():
    scheduler = ManualScheduler()
    fired = []
    scheduler.schedule(0.5, lambda: fired.append("b"))
    scheduler.schedule(0.2, lambda: fired.append("a"))
    scheduler.schedule(0.9, lambda: fired.append("c"))
    assert scheduler.advance(0.6) == 2
    assert fired == ["a", "b"]
    assert scheduler.pending == 1
    assert scheduler.run_pending() == 1
    assert fired == ["a", "b", "c"]


def test_manual_scheduler_cancel():
    scheduler = ManualScheduler()
    fired = []
    handle = scheduler.schedule(0.1, lambda: fired.append(1))
    handle.cancel()
    assert scheduler.pending == 0
    assert scheduler.run_pending() == 0
    assert fired == []


def test_synthetic_move_waits_for_the_delay(make_session, manual_scheduler):
    session = make_session(GameMode.PVE_HARD, scheduler=manual_scheduler,
                           think_delay=0.5, tactical_delay=0.4)
    session.submit_move(7, 7)
    assert session.has_pending_move
    assert session.history == [(7, 7)]

    manual_scheduler.advance(0.3)
    assert session.history == [(7, 7)]
    manual_scheduler.advance(0.3)
    assert len(session.history) == 2
    assert not session.has_pending_move
    assert session.active_player.mark is Mark.BLACK


def test_undo_cancels_pending_synthetic_move(make_session, manual_scheduler):
    session = make_session(GameMode.PVE_HARD, scheduler=manual_scheduler)
    session.submit_move(7, 7)
    assert session.has_pending_move

    assert session.undo()
    assert not session.has_pending_move
    manual_scheduler.run_pending()
    assert session.board.is_empty()
    assert session.history == []
    assert session.active_player.mark is Mark.BLACK


def test_new_game_cancels_pending_synthetic_move(make_session, manual_scheduler):
    session = make_session(GameMode.PVE_EASY, scheduler=manual_scheduler)
    session.submit_move(3, 3)
    session.new_game()
    manual_scheduler.run_pending()
    assert session.board.is_empty()
    assert session.history == []


def test_stale_commit_is_discarded_even_if_cancel_is_ignored(make_session):
    class DeafScheduler(ManualScheduler):
        def schedule(self, delay, callback):
            handle = super().schedule(delay, callback)
            handle.cancel = lambda: None
            return handle

    scheduler = DeafScheduler()
    session = make_session(GameMode.PVE_HARD, scheduler=scheduler)
    session.submit_move(7, 7)
    session.undo()
    scheduler.run_pending()
    assert session.board.is_empty()


def test_ai_vs_ai_with_scheduler(manual_scheduler):
    session = TurnSession(GameMode.AI_VS_AI, selector=MoveSelector(), scheduler=manual_scheduler)
    session.new_game()
    assert session.history == []
    assert session.has_pending_move
    manual_scheduler.advance(0.5)
    assert len(session.history) == 1
    manual_scheduler.run_pending()
    assert session.is_game_over
    assert not session.has_pending_move


def test_winning_move_uses_tactical_delay(make_session, manual_scheduler):
    session = make_session(scheduler=manual_scheduler)
    for black, white in [((7, 5), (2, 2)), ((7, 6), (2, 3)), ((7, 7), (2, 4)), ((12, 12), (2, 5))]:
        session.submit_move(*black)
        session.submit_move(*white)
    data = session.snapshot()
    data["mode"] = GameMode.PVE_HARD.value
    data["players"][1]["kind"] = "hard"
    assert session.restore(data)

    session.think_delay, session.tactical_delay = 5.0, 0.1
    session.submit_move(13, 13)
    manual_scheduler.advance(0.2)
    assert session.is_game_over
    assert session.winner.mark is Mark.WHITE


def test_asyncio_scheduler_commits_after_delay():
    async def scenario():
        session = TurnSession(GameMode.PVE_HARD, scheduler=AsyncioScheduler(),
                              think_delay=0.01, tactical_delay=0.01)
        session.new_game()
        assert session.submit_move(7, 7)
        assert session.has_pending_move
        await asyncio.sleep(0.1)
        return session

    session = asyncio.run(scenario())
    assert len(session.history) == 2
    assert not session.has_pending_move


def test_asyncio_pending_move_cancelled_by_undo():
    async def scenario():
        session = TurnSession(GameMode.PVE_HARD, scheduler=AsyncioScheduler(),
                              think_delay=0.05, tactical_delay=0.05)
        session.new_game()
        session.submit_move(7, 7)
        session.undo()
        await asyncio.sleep(0.1)
        return session

    session = asyncio.run(scenario())
    assert session.history == []
    assert session.board.is_empty()
