"""Terminal drawing and keyboard handling for the game."""

from __future__ import annotations

import curses
import random
import time

from .backend import FIGURE_SIZE, HEIGHT, WIDTH, UserAction

FROGGER_Y = 1
FROGGER_X = 7
WINDOW_Y = 24
WINDOW_X = 41
FIELD_Y = 22
FIELD_X = 24

ESCAPE_KEY = 27
ENTER_KEY = ord("\n")

CELL = "[]"
PAUSE_BLINK_SECONDS = 0.2

TITLE_PAIR = 3
VALUE_PAIR = 4
MESSAGE_PAIR = 2

_KEY_ACTIONS = {
    curses.KEY_LEFT: UserAction.LEFT,
    curses.KEY_RIGHT: UserAction.RIGHT,
    curses.KEY_UP: UserAction.UP,
    curses.KEY_DOWN: UserAction.DOWN,
    ENTER_KEY: UserAction.START,
    ord("p"): UserAction.PAUSE,
    ord("P"): UserAction.PAUSE,
    ord("q"): UserAction.TERMINATE,
    ord("Q"): UserAction.TERMINATE,
    ord(" "): UserAction.ACTION,
}

_START_PROMPT = (
    (11, 14, 'PRESS "ENTER"'),
    (12, 12, "TO START THE GAME"),
    (13, 18, "OR"),
    (14, 15, 'PRESS "ESC"'),
    (15, 12, "TO EXIT THE GAME"),
)

_HELP = (
    (25, 8, "Press:"),
    (25, 14, "Start: 'Enter'"),
    (26, 14, "Pause: 'p'"),
    (27, 14, "Exit: 'q'"),
    (28, 14, "Arrows to move: '<' '>'"),
    (29, 14, "Space to rotate: '___'"),
    (30, 14, "Arrow down to plant: 'v'"),
)


def action_for_key(key):
    """Translate a key code (or a one-character string) into a player action."""
    if isinstance(key, str):
        key = ord(key) if len(key) == 1 else -1
    return _KEY_ACTIONS.get(key, UserAction.UP)


def _acs(name, fallback):
    # Line-drawing characters only exist once the terminal is initialised.
    return getattr(curses, name, fallback)


def _color(pair):
    try:
        return curses.color_pair(pair)
    except curses.error:
        return 0


def _put(stdscr, y, x, text, attr=0):
    try:
        stdscr.addstr(y, x, text, attr)
    except curses.error:
        pass


def _put_char(stdscr, y, x, ch):
    try:
        stdscr.addch(y, x, ch)
    except curses.error:
        pass


def init_gui(stdscr):
    """Prepare the terminal: colours, raw keys and non-blocking input."""
    try:
        curses.curs_set(0)
    except curses.error:
        pass
    curses.start_color()
    curses.init_pair(1, curses.COLOR_BLUE, curses.COLOR_BLACK)
    curses.init_pair(2, curses.COLOR_RED, curses.COLOR_BLACK)
    curses.init_pair(3, curses.COLOR_YELLOW, curses.COLOR_BLACK)
    curses.init_pair(4, curses.COLOR_GREEN, curses.COLOR_BLACK)
    curses.cbreak()
    curses.noecho()
    stdscr.nodelay(True)
    stdscr.scrollok(True)
    stdscr.keypad(True)


def print_rectangle(stdscr, top_y, bottom_y, left_x, right_x):
    """Draw a box frame with the given corners."""
    hline = _acs("ACS_HLINE", "-")
    vline = _acs("ACS_VLINE", "|")
    end_x = max(left_x + 1, right_x)

    _put_char(stdscr, top_y, left_x, _acs("ACS_ULCORNER", "+"))
    for col in range(left_x + 1, right_x):
        _put_char(stdscr, top_y, col, hline)
    _put_char(stdscr, top_y, end_x, _acs("ACS_URCORNER", "+"))

    for row in range(top_y + 1, bottom_y):
        _put_char(stdscr, row, left_x, vline)
        _put_char(stdscr, row, right_x, vline)

    _put_char(stdscr, bottom_y, left_x, _acs("ACS_LLCORNER", "+"))
    for col in range(left_x + 1, right_x):
        _put_char(stdscr, bottom_y, col, hline)
    _put_char(stdscr, bottom_y, end_x, _acs("ACS_LRCORNER", "+"))


def print_frogger(stdscr):
    """Draw the frames of the main window, the field and the side panels."""
    print_rectangle(stdscr, FROGGER_Y, WINDOW_Y, FROGGER_X + 1, WINDOW_X + 9)
    print_rectangle(
        stdscr, FROGGER_Y + 1, FROGGER_Y + FIELD_Y, FROGGER_X + 3, FROGGER_X + FIELD_X
    )
    print_rectangle(
        stdscr,
        FROGGER_Y + 1,
        FROGGER_Y + FIELD_Y,
        FROGGER_X + FIELD_X + 2,
        FROGGER_X + FIELD_X + 17,
    )

    panel_left = FROGGER_X + FIELD_X + 4
    panel_right = WINDOW_X + 5
    for top, bottom in ((3, 5), (7, 9), (11, 17), (19, 21)):
        print_rectangle(stdscr, top, bottom, panel_left, panel_right)

    label_x = FROGGER_X + FIELD_Y + 10
    bold = curses.A_BOLD
    _put(stdscr, 3, label_x, "LEVEL", bold)
    _put(stdscr, 7, label_x, "SCORE", bold)
    _put(stdscr, 11, label_x, "NEXT", bold)
    _put(stdscr, 19, label_x - 1, "RECORD", bold)


def print_info(stdscr, game):
    """Draw the title, level, score, record, preview, field and messages."""
    _put(stdscr, 1, WINDOW_X // 2 + 8, "TETRIS", _color(TITLE_PAIR))

    values = _color(VALUE_PAIR)
    _put(stdscr, 4, 41, str(game.level), values)
    _put(stdscr, 8, 41, str(game.score), values)
    print_next(stdscr, game.next_figure)
    print_field(stdscr, game.field)
    _put(stdscr, 20, 39, str(game.high_score), values)

    messages = _color(MESSAGE_PAIR)
    if game.pause:
        _put(stdscr, 4 + random.randrange(18), 14, "GAME IS PAUSED", messages)
        time.sleep(PAUSE_BLINK_SECONDS)
    if not game.game_start:
        for row, col, text in _START_PROMPT:
            _put(stdscr, row, col, text, messages)

    for row, col, text in _HELP:
        _put(stdscr, row, col, text)


def print_next(stdscr, next_figure):
    """Draw the preview of the next figure."""
    if not next_figure:
        return
    for i, row in enumerate(next_figure[:FIGURE_SIZE]):
        for j, filled in enumerate(row[:FIGURE_SIZE]):
            if filled:
                _put(stdscr, 13 + i, 36 + 2 * j, CELL)


def print_field(stdscr, field):
    """Draw the settled blocks of the playing field."""
    if not field:
        return
    for i, row in enumerate(field[:HEIGHT]):
        for j, filled in enumerate(row[:WIDTH]):
            if filled:
                _put(stdscr, 3 + i, 11 + 2 * j, CELL)


def print_current(stdscr, game):
    """Draw the falling figure at its current position."""
    for i, row in enumerate(game.current):
        for j, filled in enumerate(row):
            if filled:
                _put(stdscr, game.coord_y + 3 + i, game.coord_x * 2 + 2 * j - 1, CELL)


def print_game(stdscr, game):
    """Draw a full frame of the running game."""
    print_frogger(stdscr)
    print_field(stdscr, game.field)
    print_next(stdscr, game.next_figure)
    print_current(stdscr, game)
    print_info(stdscr, game)
    stdscr.refresh()