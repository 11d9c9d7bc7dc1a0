"""
Rendering collaborators for the life engine.

A renderer is anything with ``render(board)``. The core never looks
inside one; Game.render() just hands it the current board. Renderers
read cell state with Board.alive_at, so drawing a frame never grows the
board.
"""

from __future__ import annotations

import curses
import shutil
from typing import TYPE_CHECKING, Protocol

import numpy as np
from numpy.typing import NDArray

if TYPE_CHECKING:
    from life import Board


class Renderer(Protocol):
    def render(self, board: Board) -> object: ...


def _window_offset(size: int) -> int:
    """Shift that centres a window of `size` cells on coordinate 0."""
    return -((size - 1) // 2)


# ═══════════════════════════════════════════════════════════════════════
#  Array
# ═══════════════════════════════════════════════════════════════════════

class ArrayRenderer:
    """Renders the materialized bounding box as a numpy array, indexed [y][x]."""

    def __init__(self, living: int = 1, dead: int = 0) -> None:
        self.living = living
        self.dead = dead

    def render(self, board: Board) -> NDArray[np.int_]:
        bounds = board.bounds()
        if bounds is None:
            return np.zeros((0, 0), dtype=np.int_)
        min_x, min_y, max_x, max_y = bounds
        out = np.full((max_y - min_y + 1, max_x - min_x + 1), self.dead, dtype=np.int_)
        for cell in board.living_cells():
            out[cell.y - min_y, cell.x - min_x] = self.living
        return out


# ═══════════════════════════════════════════════════════════════════════
#  Text
# ═══════════════════════════════════════════════════════════════════════

class TextRenderer:
    """
    Renders a fixed width × height window centred on the origin as text.

    Rows are joined with newlines (no trailing newline). Missing
    dimensions are taken from the size of the attached terminal.
    """

    def __init__(
        self,
        width: int | None = None,
        height: int | None = None,
        living: str = "▓",
        dead: str = "░",
        print_coordinates: bool = False,
    ) -> None:
        term = shutil.get_terminal_size()
        self.width: int = width if width is not None else term.columns
        self.height: int = height if height is not None else term.lines
        self.living = living
        self.dead = dead
        self.print_coordinates = print_coordinates

    def render(self, board: Board) -> str:
        x_offset = _window_offset(self.width)
        y_offset = _window_offset(self.height)
        lines: list[str] = []
        if self.print_coordinates:
            lines.append("  " + "".join(str(x)[-1] for x in range(self.width)))
        for y in range(self.height):
            row = "".join(
                self.living if board.alive_at(x + x_offset, y + y_offset) else self.dead
                for x in range(self.width)
            )
            lines.append(f"{y}:{row}" if self.print_coordinates else row)
        return "\n".join(lines)


# ═══════════════════════════════════════════════════════════════════════
#  Curses
# ═══════════════════════════════════════════════════════════════════════

class CursesRenderer:
    """Draws the centred window straight onto a curses window."""

    def __init__(
        self,
        window: curses.window,
        width: int | None = None,
        height: int | None = None,
        living: str = "#",
        dead: str = " ",
    ) -> None:
        self.window = window
        self.width = width
        self.height = height
        self.living = living
        self.dead = dead

    def size(self) -> tuple[int, int]:
        """(width, height) to draw, defaulting to the whole window."""
        max_y, max_x = self.window.getmaxyx()
        width = self.width if self.width is not None else max_x
        height = self.height if self.height is not None else max_y
        return width, height

    def render(self, board: Board) -> None:
        width, height = self.size()
        x_offset = _window_offset(width)
        y_offset = _window_offset(height)

        self.window.erase()
        # A blank dead glyph needs no drawing after erase()
        draw_dead = self.dead != " "
        _addstr = self.window.addstr
        for y in range(height):
            for x in range(width):
                alive = board.alive_at(x + x_offset, y + y_offset)
                if not alive and not draw_dead:
                    continue
                try:
                    _addstr(y, x, self.living if alive else self.dead)
                except curses.error:
                    # Writing the bottom-right cell moves the cursor off-screen
                    pass
        self.window.refresh()
