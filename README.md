# brickgame

A falling-block puzzle game that runs in a terminal through Python's
`curses` module. It needs a system where `curses` is available, such as
Linux or macOS.

## Installing

```
pip install .
```

## Playing

```
brickgame
```

The game opens on a start screen. Press Enter to begin or Esc to leave
without playing.

Controls during play:

| Key         | Effect                          |
|-------------|---------------------------------|
| Left/Right  | Move the piece sideways         |
| Space       | Rotate the piece                |
| Down        | Drop the piece to the bottom    |
| `p` / `P`   | Pause or resume                 |
| `q` / `Q`   | Quit                            |

Completing rows clears them and scores points: 100 for one row, 300 for
two, 700 for three and 1500 for four at once. Every 600 points raise the
level by one, up to level 10, and each level makes the pieces fall a
little faster. The game ends when a piece lands at the very top of the
field, or when you quit; "GAME OVER" is shown for a second and the
program exits.

The best score is kept in `max_score.txt` in the directory the game is
started from. Another file can be chosen with `--score-file`:

```
brickgame --score-file ~/.brickgame_record
```

## Modules

- `brickgame.backend` holds the rules and needs no terminal: the `Game`
  class, the `UserAction` enum, and `load_high_score` /
  `save_high_score` for the record file.
- `brickgame.cli` draws a `Game` onto a curses window (`print_game`,
  `print_field`, `print_next`, `print_current`, `print_info`,
  `print_frogger`, `print_rectangle`), sets the terminal up
  (`init_gui`) and maps key codes to actions (`action_for_key`).
- `brickgame.tetris` ties them together: `run(stdscr, game)` plays one
  game on a curses window and returns the final score; `main(argv=None)`
  is the `brickgame` command.

## Using the game logic

```python
import random
from brickgame.backend import Game, UserAction

game = Game(random.Random(1), "max_score.txt")
game.start()
game.user_input(UserAction.LEFT, False)
game.move_down()
game.check_and_remove_lines()
print(game.score, game.level)
```

`Game` takes an optional random number generator, so the sequence of
pieces can be made repeatable, and the path of the record file, which is
read when the game is created and rewritten whenever the score beats it.

Keys map to actions without a terminal as well:

```python
from brickgame.cli import action_for_key

action_for_key("p")   # UserAction.PAUSE
action_for_key("x")   # UserAction.UP, which does nothing in play
```

## Running the tests

```
pip install ".[test]"
pytest
```