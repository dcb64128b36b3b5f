"""Game state and rules for the falling-blocks puzzle."""

from __future__ import annotations

import random
import re
from enum import IntEnum
from itertools import product
from pathlib import Path

WIDTH = 10
HEIGHT = 20
FIELD_ROWS = 22
FIGURE_SIZE = 4

SPAWN_X = 10
SPAWN_Y = 0

# Offset between the piece's x coordinate and the field column of its left edge.
_X_OFFSET = 6

DEFAULT_SCORE_PATH = "max_score.txt"

LINE_SCORES = {1: 100, 2: 300, 3: 700, 4: 1500}
POINTS_PER_LEVEL = 600
MAX_LEVEL = 10

FIGURES = (
    (
        ((0, 0, 0, 0), (0, 0, 0, 0), (1, 1, 1, 1), (0, 0, 0, 0)),
        ((0, 0, 1, 0), (0, 0, 1, 0), (0, 0, 1, 0), (0, 0, 1, 0)),
        ((0, 0, 0, 0), (0, 0, 0, 0), (1, 1, 1, 1), (0, 0, 0, 0)),
        ((0, 0, 1, 0), (0, 0, 1, 0), (0, 0, 1, 0), (0, 0, 1, 0)),
    ),
    (
        ((0, 1, 0, 0), (0, 1, 1, 1), (0, 0, 0, 0), (0, 0, 0, 0)),
        ((0, 1, 1, 0), (0, 1, 0, 0), (0, 1, 0, 0), (0, 0, 0, 0)),
        ((0, 1, 1, 1), (0, 0, 0, 1), (0, 0, 0, 0), (0, 0, 0, 0)),
        ((0, 0, 1, 0), (0, 0, 1, 0), (0, 1, 1, 0), (0, 0, 0, 0)),
    ),
    (
        ((0, 0, 0, 1), (0, 1, 1, 1), (0, 0, 0, 0), (0, 0, 0, 0)),
        ((0, 0, 1, 0), (0, 0, 1, 0), (0, 0, 1, 1), (0, 0, 0, 0)),
        ((0, 1, 1, 1), (0, 1, 0, 0), (0, 0, 0, 0), (0, 0, 0, 0)),
        ((0, 1, 1, 0), (0, 0, 1, 0), (0, 0, 1, 0), (0, 0, 0, 0)),
    ),
    (
        ((0, 0, 1, 1), (0, 0, 1, 1), (0, 0, 0, 0), (0, 0, 0, 0)),
        ((0, 0, 1, 1), (0, 0, 1, 1), (0, 0, 0, 0), (0, 0, 0, 0)),
        ((0, 0, 1, 1), (0, 0, 1, 1), (0, 0, 0, 0), (0, 0, 0, 0)),
        ((0, 0, 1, 1), (0, 0, 1, 1), (0, 0, 0, 0), (0, 0, 0, 0)),
    ),
    (
        ((0, 1, 1, 0), (1, 1, 0, 0), (0, 0, 0, 0), (0, 0, 0, 0)),
        ((0, 1, 0, 0), (0, 1, 1, 0), (0, 0, 1, 0), (0, 0, 0, 0)),
        ((0, 1, 1, 0), (1, 1, 0, 0), (0, 0, 0, 0), (0, 0, 0, 0)),
        ((0, 1, 0, 0), (0, 1, 1, 0), (0, 0, 1, 0), (0, 0, 0, 0)),
    ),
    (
        ((0, 1, 1, 0), (0, 0, 1, 1), (0, 0, 0, 0), (0, 0, 0, 0)),
        ((0, 0, 1, 0), (0, 1, 1, 0), (0, 1, 0, 0), (0, 0, 0, 0)),
        ((0, 1, 1, 0), (0, 0, 1, 1), (0, 0, 0, 0), (0, 0, 0, 0)),
        ((0, 0, 1, 0), (0, 1, 1, 0), (0, 1, 0, 0), (0, 0, 0, 0)),
    ),
    (
        ((0, 0, 1, 0), (0, 1, 1, 1), (0, 0, 0, 0), (0, 0, 0, 0)),
        ((0, 0, 1, 0), (0, 0, 1, 1), (0, 0, 1, 0), (0, 0, 0, 0)),
        ((0, 1, 1, 1), (0, 0, 1, 0), (0, 0, 0, 0), (0, 0, 0, 0)),
        ((0, 0, 1, 0), (0, 1, 1, 0), (0, 0, 1, 0), (0, 0, 0, 0)),
    ),
)

_INT_PREFIX = re.compile(r"\s*([+-]?\d+)")


class UserAction(IntEnum):
    """Actions a player can request."""

    START = 0
    PAUSE = 1
    TERMINATE = 2
    LEFT = 3
    RIGHT = 4
    UP = 5
    DOWN = 6
    ACTION = 7


def load_high_score(path=DEFAULT_SCORE_PATH):
    """Read the stored high score; create an empty file and return 0 if missing."""
    path = Path(path)
    try:
        text = path.read_text()
    except FileNotFoundError:
        try:
            path.touch()
        except OSError:
            pass
        return 0
    except OSError:
        return 0
    match = _INT_PREFIX.match(text)
    return int(match.group(1)) if match else 0


def save_high_score(high_score, path=DEFAULT_SCORE_PATH):
    """Store the high score; write failures are ignored."""
    try:
        Path(path).write_text(str(high_score))
    except OSError:
        pass


def _shape(figure_type, orientation):
    return [list(row) for row in FIGURES[figure_type][orientation]]


def _cells():
    return product(range(FIGURE_SIZE), repeat=2)


class Game:
    """The complete state of one game together with its rules."""

    def __init__(self, rng=None, score_path=DEFAULT_SCORE_PATH):
        self._rng = rng if rng is not None else random.Random()
        self.score_path = score_path
        self.field = [[0] * WIDTH for _ in range(FIELD_ROWS)]
        self.next_figure = [[0] * FIGURE_SIZE for _ in range(FIGURE_SIZE)]
        self.current = [[0] * FIGURE_SIZE for _ in range(FIGURE_SIZE)]
        self.orientation_figure = 0
        self.new_orientation_figure = 0
        self.type_figure = 0
        self.type_current = 0
        self.coord_x = SPAWN_X
        self.coord_y = SPAWN_Y
        self.tick = 0
        self.drop_next()
        self.drop_current()
        self.score = 0
        self.high_score = load_high_score(score_path)
        self.level = 1
        self.speed = 50
        self.pause = False
        self.game_over = False
        self.game_start = False

    # The field is stored row after row; out-of-range columns spill into
    # neighbouring rows and anything outside the whole field reads as empty.
    def _cell(self, row, col):
        index = row * WIDTH + col
        if 0 <= index < FIELD_ROWS * WIDTH:
            r, c = divmod(index, WIDTH)
            return self.field[r][c]
        return 0

    def _set_cell(self, row, col, value):
        index = row * WIDTH + col
        if 0 <= index < FIELD_ROWS * WIDTH:
            r, c = divmod(index, WIDTH)
            self.field[r][c] = value

    def _reset_position(self):
        self.coord_x = SPAWN_X
        self.coord_y = SPAWN_Y

    def start(self):
        """Mark the game as started."""
        self.game_start = True

    def drop_next(self):
        """Hand the previewed figure over and pick a new random preview."""
        self.new_orientation_figure = self.orientation_figure
        self.type_current = self.type_figure
        self.type_figure = self._rng.randrange(len(FIGURES))
        self.orientation_figure = self._rng.randrange(FIGURE_SIZE)
        self.next_figure = _shape(self.type_figure, self.orientation_figure)

    def drop_current(self):
        """Make the previewed figure the falling one and preview another."""
        self.current = [list(row) for row in self.next_figure]
        self.drop_next()

    def drop_figure(self):
        """Fix the falling figure into the field, or end the game at the top."""
        if self.coord_y > 0 and not self.game_over:
            for i, j in _cells():
                if self.current[i][j]:
                    self._set_cell(
                        self.coord_y + i - 1,
                        self.coord_x + j - _X_OFFSET,
                        self.current[i][j],
                    )
            self._reset_position()
        else:
            self.game_over = True

    def user_input(self, action, hold=False):
        """Apply a player action unless the key is being held."""
        if hold:
            return
        action = UserAction(action)
        if action is UserAction.PAUSE:
            self.toggle_pause()
        elif action is UserAction.ACTION:
            self.rotate_figure()
            self.collision()
        elif action is UserAction.DOWN:
            self.hard_drop()
        elif action is UserAction.LEFT:
            self.move_left()
            self.collision_left()
        elif action is UserAction.RIGHT:
            self.move_right()
            self.collision_right()
        elif action is UserAction.TERMINATE:
            self.terminate()

    def rotate_figure(self):
        """Turn the falling figure a quarter unless the field blocks it."""
        if self.pause:
            return
        self.new_orientation_figure = (self.new_orientation_figure + 1) % FIGURE_SIZE
        shape = FIGURES[self.type_current][self.new_orientation_figure]
        blocked = any(
            shape[i][j]
            and self._cell(self.coord_y + i, self.coord_x - _X_OFFSET + j)
            for i, j in _cells()
        )
        if not blocked:
            self.current = [list(row) for row in shape]

    def terminate(self):
        """End the game."""
        self.game_over = True

    def toggle_pause(self):
        """Switch pause on or off."""
        self.pause = not self.pause

    def collision(self):
        """Push the figure back from the walls and land it on the floor or stack."""
        for j in range(FIGURE_SIZE):
            for i in range(FIGURE_SIZE):
                if self.current[i][j] and self.coord_x < _X_OFFSET - j:
                    self.move_right()
                    break
                if self.current[i][3 - j] and self.coord_x > 12 + j:
                    self.move_left()
                    break
                if self.current[3 - j][i] and (
                    self.coord_y > 16 + j
                    or self._cell(self.coord_y + 3 - j, self.coord_x - _X_OFFSET + i)
                ):
                    self.drop_figure()
                    self.drop_current()
                    self._reset_position()

    def _overlaps_field(self):
        return any(
            self.current[i][j]
            and self._cell(self.coord_y + i, self.coord_x - _X_OFFSET + j)
            for i, j in _cells()
        )

    def collision_left(self):
        """Undo a step left that ran into the stack."""
        for i in range(FIGURE_SIZE):
            for j in range(FIGURE_SIZE):
                if self.current[i][j] and self._cell(
                    self.coord_y + i, self.coord_x - _X_OFFSET + j
                ):
                    self.move_right()
                    break

    def collision_right(self):
        """Undo a step right that ran into the stack."""
        for i in range(FIGURE_SIZE):
            for j in range(FIGURE_SIZE):
                if self.current[i][j] and self._cell(
                    self.coord_y + i, self.coord_x - _X_OFFSET + j
                ):
                    self.move_left()
                    break

    def check_and_remove_lines(self):
        """Clear full rows, score them, and update the record and level."""
        removed = 0
        row = 0
        while row < HEIGHT:
            if self.is_line_full(row):
                self.remove_line(row)
                removed += 1
            else:
                row += 1
        self.score += LINE_SCORES.get(removed, 0)
        if self.score > self.high_score:
            save_high_score(self.score, self.score_path)
            self.high_score = self.score
        self.update_level()

    def update_level(self):
        """Raise the level by one for each 600 points, up to 10."""
        if self.score // POINTS_PER_LEVEL:
            self.level = self.score // POINTS_PER_LEVEL + 1
        if self.level > MAX_LEVEL:
            self.level = MAX_LEVEL

    def is_line_full(self, row):
        """Whether every cell of the row is occupied."""
        return all(self.field[row])

    def remove_line(self, row):
        """Delete a row, shifting everything above it down by one."""
        for i in range(row, 0, -1):
            self.field[i] = list(self.field[i - 1])
        self.field[0] = [0] * WIDTH

    def move_down(self):
        """Move the figure one row down while the game runs."""
        if not self.pause and not self.game_over:
            self.coord_y += 1

    def hard_drop(self):
        """Drop the figure until it lands."""
        start_y = self.coord_y
        self.move_down()
        while self.coord_y > start_y:
            self.move_down()
            self.collision()

    def move_left(self):
        """Move the figure one column left unless paused."""
        if not self.pause:
            self.coord_x -= 1

    def move_right(self):
        """Move the figure one column right unless paused."""
        if not self.pause:
            self.coord_x += 1