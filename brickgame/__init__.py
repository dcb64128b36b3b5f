"""A falling-block puzzle game for the terminal: rules, curses drawing and the command."""

__version__ = "0.1.0"
__all__ = ["backend", "cli", "tetris"]