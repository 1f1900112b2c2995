# cli_driver.py
# This file is intended to be run to play or test the 2048 game on the CLI

import argparse
import logging
import random
from typing import List, Optional

from core import DEFAULT_BOARD_SIZE, GameState
from grid import Side
from terminality import MAX_PIECE, GameProgressState

logger = logging.getLogger(__name__)

KEY_TO_SIDE = {'W': Side.NORTH, 'A': Side.WEST, 'S': Side.SOUTH, 'D': Side.EAST}

def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Play 2048 in the terminal.")
    p.add_argument("--size", type=int, default=DEFAULT_BOARD_SIZE, help="Dimension of the N x N board.")
    p.add_argument("--win-tile", type=int, default=MAX_PIECE,
                   help="Tile value that wins the game (can be set lower, e.g. 32, for testing).")
    p.add_argument("--seed", type=int, default=None, help="Seed for tile spawning.")
    p.add_argument("--log-level", default="WARNING", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return p

def main(argv: Optional[List[str]] = None) -> None:
    play(argv)

def play(argv: Optional[List[str]] = None) -> GameState:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=args.log_level, format="%(levelname)s %(name)s: %(message)s")

    rng = random.Random(args.seed)

    # 1. Initialize game
    state = GameState(args.size, args.win_tile)
    state.new_game(rng)
    display_state(state)

    # 2. Game Loop
    while state.progress() == GameProgressState.IN_PROGRESS:
        try:
            move_input = input("Enter move (W/A/S/D for Up/Left/Down/Right, Q to quit): ").strip().upper()
        except EOFError:
            # Closed stdin or Ctrl-D
            print()
            move_input = 'Q'

        if move_input == 'Q':
            print("Quitting game.")
            break

        chosen_side = KEY_TO_SIDE.get(move_input)
        if chosen_side is None:
            print("Invalid input. Use W, A, S, D.")
            continue

        # 3. Process the move
        if state.tilt(chosen_side):
            # 4. Add a new random tile if the move changed the board
            state.add_random_tile(rng)
        else:
            print("Move did not change the board. Try a different direction.")

        display_state(state)

    # 5. Game Ended
    progress = state.progress()
    logger.info("Game finished: %s, score %d", progress.name, state.score)
    if progress == GameProgressState.GAME_WON:
        print(f"Congratulations! You reached the {state.win_tile} tile!")
    elif progress == GameProgressState.GAME_OVER:
        print("No more moves possible. Better luck next time!")
    return state


def display_state(state: GameState) -> None:
    """Prints the board, score, and game status to the console."""
    print(state)
    print(f"Status: {state.progress().name}")

if __name__ == "__main__":
    main()
