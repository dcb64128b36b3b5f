import curses
import random
from unittest import mock

import pytest

from brickgame.backend import SPAWN_X, SPAWN_Y, Game
from brickgame.cli import ENTER_KEY, ESCAPE_KEY
from brickgame.tetris import GAME_OVER_SECONDS, GAME_OVER_TEXT, main, run


class FakeWindow:
    def __init__(self, keys):
        self.keys = list(keys)
        self.writes = []
        self.erased = 0

    def getch(self):
        if not self.keys:
            raise RuntimeError("no more keys")
        return self.keys.pop(0)

    def addstr(self, y, x, text, attr=0):
        if not (0 <= y < 40 and 0 <= x < 80):
            raise curses.error("out of window")
        self.writes.append((y, x, text))

    def addch(self, y, x, ch):
        if not (0 <= y < 40 and 0 <= x < 80):
            raise curses.error("out of window")

    def refresh(self):
        pass

    def erase(self):
        self.erased += 1

    def nodelay(self, flag):
        pass

    def scrollok(self, flag):
        pass

    def keypad(self, flag):
        pass

    def texts(self):
        return [text for _, _, text in self.writes]


@pytest.fixture
def terminal():
    with mock.patch.multiple(
        "curses",
        curs_set=mock.DEFAULT,
        start_color=mock.DEFAULT,
        init_pair=mock.DEFAULT,
        cbreak=mock.DEFAULT,
        noecho=mock.DEFAULT,
    ), mock.patch("time.sleep") as sleep:
        yield sleep


@pytest.fixture
def game(tmp_path):
    return Game(rng=random.Random(3), score_path=tmp_path / "score.txt")


def test_escape_leaves_without_playing(terminal, game):
    window = FakeWindow([ESCAPE_KEY])
    score = run(window, game)
    assert score == 0
    assert game.game_start is False
    assert window.writes == []
    assert (game.coord_x, game.coord_y) == (SPAWN_X, SPAWN_Y)


def test_idle_keys_keep_start_screen(terminal, game):
    window = FakeWindow([-1, -1, ESCAPE_KEY])
    run(window, game)
    assert window.texts().count("TO START THE GAME") == 2
    assert GAME_OVER_TEXT not in window.texts()


def test_quit_shows_game_over(terminal, game):
    window = FakeWindow([ENTER_KEY, ord("q")])
    run(window, game)
    assert GAME_OVER_TEXT in window.texts()
    terminal.assert_any_call(GAME_OVER_SECONDS)
    assert game.game_start is False
    assert game.game_over is False


def test_left_key_moves_figure(terminal, game):
    window = FakeWindow([ENTER_KEY, curses.KEY_LEFT, ord("q")])
    run(window, game)
    assert game.coord_x == SPAWN_X - 1
    assert window.erased == 1


def test_figure_falls_once_per_step(terminal, tmp_path):
    short = Game(rng=random.Random(5), score_path=tmp_path / "a.txt")
    run(FakeWindow([ENTER_KEY, ord("q")]), short)
    long = Game(rng=random.Random(5), score_path=tmp_path / "b.txt")
    window = FakeWindow([ENTER_KEY] + [-1] * 20 + [ord("q")])
    run(window, long)
    assert long.coord_y == short.coord_y + 1
    assert long.coord_x == short.coord_x


def test_run_returns_score(terminal, game):
    game.score = 700
    assert run(FakeWindow([ENTER_KEY, ord("q")]), game) == 700


def test_main_help_exits():
    with pytest.raises(SystemExit) as excinfo:
        main(["--help"])
    assert excinfo.value.code == 0


def test_main_runs_game_in_wrapper(terminal, tmp_path):
    score_file = tmp_path / "record.txt"
    with mock.patch("curses.wrapper") as wrapper:
        assert main(["--score-file", str(score_file)]) == 0
    wrapper.assert_called_once()
    play = wrapper.call_args.args[0]
    assert play(FakeWindow([ESCAPE_KEY])) == 0
    assert score_file.exists()