"""Runs the game in a curses terminal."""

from __future__ import annotations

import argparse
import curses
import time

from .backend import DEFAULT_SCORE_PATH, SPAWN_X, SPAWN_Y, Game, UserAction
from .cli import (
    ENTER_KEY,
    ESCAPE_KEY,
    action_for_key,
    init_gui,
    print_frogger,
    print_game,
    print_info,
)

TICKS_PER_STEP = 20
GAME_OVER_SECONDS = 1.0
GAME_OVER_TEXT = "GAME OVER"


def _wait_for_start(stdscr, game):
    while True:
        key = stdscr.getch()
        if key == ESCAPE_KEY:
            return
        print_frogger(stdscr)
        print_info(stdscr, game)
        stdscr.refresh()
        if key == ENTER_KEY:
            game.start()
            return


def _show_game_over(stdscr):
    try:
        stdscr.addstr(14, 16, GAME_OVER_TEXT)
    except curses.error:
        pass
    stdscr.refresh()
    time.sleep(GAME_OVER_SECONDS)


def run(stdscr, game):
    """Play one game on the given window; return the final score."""
    init_gui(stdscr)
    _wait_for_start(stdscr, game)
    game.coord_x = SPAWN_X
    game.coord_y = SPAWN_Y

    action = None
    while game.game_start and action is not UserAction.TERMINATE:
        game.tick = TICKS_PER_STEP
        while game.tick:
            game.tick -= 1
            action = action_for_key(stdscr.getch())
            game.user_input(action, False)
            game.collision()
            if game.game_over or action is UserAction.TERMINATE:
                _show_game_over(stdscr)
                action = UserAction.TERMINATE
                game.game_start = False
                game.game_over = False
                break
            time.sleep(max(game.speed - game.level * 3, 0) / 1000)
            stdscr.erase()
            print_game(stdscr, game)
            game.check_and_remove_lines()
        if not game.game_over:
            game.move_down()
        stdscr.refresh()
    return game.score


def main(argv=None):
    """Command-line entry point."""
    parser = argparse.ArgumentParser(
        prog="brickgame", description="Falling-blocks puzzle for the terminal."
    )
    parser.add_argument(
        "--score-file",
        default=DEFAULT_SCORE_PATH,
        help="file that keeps the high score (default: %(default)s)",
    )
    args = parser.parse_args(argv)
    curses.wrapper(lambda stdscr: run(stdscr, Game(score_path=args.score_file)))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())