"""
Terminal game runner – hosts a TurnSession and reads human moves from stdin.

Commands at the prompt:
  <row> <col>     place a stone
  undo            take back your last move (and the reply to it)
  save [slot]     save the game
  load [slot]     load a saved game
  new             start over in the same mode
  quit            leave
"""
import sys
import os
import argparse
import asyncio
import logging

ROOT_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

import numpy as np

from gomoku_core import AsyncioScheduler, FileSaveStore, GameMode, MoveSelector, TurnSession
from gomoku_core.config import BOARD_SIZE, CANDIDATE_RADIUS, DEFAULT_SLOT, THINK_DELAY, THINK_DELAY_TACTICAL

SAVE_DIR = os.path.join(ROOT_DIR, "saves")
SYMBOLS = {0: '·', 1: '●', 2: '○'}


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Play connect-five in the terminal")
    parser.add_argument('--mode', default=GameMode.PVE_HARD.value, choices=[m.value for m in GameMode])
    parser.add_argument('--size', type=int, default=BOARD_SIZE)
    parser.add_argument('--radius', type=int, default=CANDIDATE_RADIUS)
    parser.add_argument('--delay', type=float, default=THINK_DELAY, help='seconds before a scored AI move')
    parser.add_argument('--tactical-delay', type=float, default=THINK_DELAY_TACTICAL,
                        help='seconds before a winning or blocking AI move')
    parser.add_argument('--seed', type=int, default=None)
    parser.add_argument('--save-dir', default=SAVE_DIR)
    parser.add_argument('--nodisplay', action='store_true')
    parser.add_argument('--verbose', '-v', action='store_true')
    return parser.parse_args(argv)


def handle_command(session, store, line):
    """Applies one line of input. Returns False when the player wants to quit."""
    parts = line.split()
    if not parts:
        return True
    command = parts[0].lower()

    if command in ('quit', 'exit', 'q'):
        return False
    if command == 'undo':
        if session.undo():
            # Take back the synthetic reply as well so the human is to move again.
            while session.active_player.is_synthetic and session.undo():
                pass
        return True
    if command == 'new':
        session.new_game()
        return True
    if command == 'save':
        slot = parts[1] if len(parts) > 1 else DEFAULT_SLOT
        print("Saved." if session.save(store, slot) else "Save failed.")
        return True
    if command == 'load':
        slot = parts[1] if len(parts) > 1 else DEFAULT_SLOT
        if session.load(store, slot):
            print(session.board.render())
            session.resume()
        else:
            print("Load failed, current game kept.")
        return True

    try:
        row, col = int(parts[0]), int(parts[1])
    except (ValueError, IndexError):
        print("Enter a move as: <row> <col>")
        return True
    if not session.submit_move(row, col):
        print(f"({row}, {col}) is not a legal move.")
    return True


async def run(args):
    loop = asyncio.get_running_loop()
    selector = MoveSelector(radius=args.radius, rng=np.random.default_rng(args.seed))
    session = TurnSession(args.mode,
                          board_size=args.size,
                          selector=selector,
                          scheduler=AsyncioScheduler(loop),
                          think_delay=args.delay,
                          tactical_delay=args.tactical_delay)
    store = FileSaveStore(args.save_dir)
    turn_ready = asyncio.Event()

    def check_turn():
        if session.is_game_over or not session.active_player.is_synthetic:
            turn_ready.set()

    def on_move(event):
        if event.mark_code:
            print(f"{session.player_for(event.mark_code).name} ({SYMBOLS[event.mark_code]}) → ({event.row}, {event.col})")
        if not args.nodisplay:
            print(session.board.render())
            print()
        # The session switches turns after notifying, so check on the next loop pass.
        loop.call_soon(check_turn)

    def on_end(event):
        print(f"\n{'='*60}")
        if event.is_draw:
            print("Game Over: DRAW!")
        else:
            print(f"Game Over: {event.winner_name} WINS!")
        print(f"Total turns: {len(session.history)}")
        print(f"{'='*60}\n")
        loop.call_soon(check_turn)

    session.events.subscribe_move_applied(on_move)
    session.events.subscribe_game_ended(on_end)

    black, white = session.players
    print(f"\n{'='*60}")
    print(f"Mode: {session.mode.value}")
    print(f"Black (●): {black.name} [{black.kind.value}]")
    print(f"White (○): {white.name} [{white.kind.value}]")
    print(f"{'='*60}\n")

    session.new_game()
    if not args.nodisplay:
        print(session.board.render())
        print()

    while not session.is_game_over:
        if session.active_player.is_synthetic:
            if not session.has_pending_move and not session.resume():
                print("No move available for the computer.")
                break
            turn_ready.clear()
            await turn_ready.wait()
            continue

        try:
            line = await asyncio.to_thread(input, f"{session.active_player.name} > ")
        except EOFError:
            break
        if not handle_command(session, store, line):
            break

    return session


def main():
    args = parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    try:
        asyncio.run(run(args))
    except KeyboardInterrupt:
        print()
    sys.exit(0)


if __name__ == "__main__":
    main()
