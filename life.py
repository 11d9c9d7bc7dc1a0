#!/usr/bin/env python3
"""
  ∞  S P A R S E   L I F E  ∞
  Conway's Game of Life on an unbounded integer grid.

  Only cells that have been looked at exist. Each generation visits the
  living cells and their eight neighbours, so the cost of a step tracks
  the population, never the (infinite) extent of the plane.

  The core here knows nothing about drawing. Renderers in life_render.py
  read cell state through Board.cell_at / Board.alive_at and turn a board
  into an array, a block of text, or a curses frame.
"""

from __future__ import annotations

import itertools
import sys
import time
import weakref
from collections.abc import Iterator, Sequence
from pathlib import Path
from typing import IO, ClassVar, Union

import numpy as np
from numpy.typing import NDArray

from life_render import ArrayRenderer, Renderer

Coordinate = tuple[int, int]
SeedPattern = Union[Sequence[Sequence[int]], NDArray[np.integer]]

# ── Neighbourhood ───────────────────────────────────────────────────────
# Row-major by y then x, skipping the cell itself.
NEIGHBOR_OFFSETS: tuple[Coordinate, ...] = (
    (-1, -1), (0, -1), (1, -1),
    (-1, 0),           (1, 0),
    (-1, 1),  (0, 1),  (1, 1),
)

SURVIVE_COUNTS = frozenset((2, 3))
BIRTH_COUNT = 3

# ── Pattern library ─────────────────────────────────────────────────────
# Seed grids: outer index = y (downward), inner index = x (rightward).
PATTERNS: dict[str, list[list[int]]] = {
    "blinker": [[1, 1, 1]],
    "block": [[1, 1], [1, 1]],
    "glider": [
        [0, 1, 0],
        [0, 0, 1],
        [1, 1, 1],
    ],
    "lwss": [
        [0, 1, 0, 0, 1],
        [1, 0, 0, 0, 0],
        [1, 0, 0, 0, 1],
        [1, 1, 1, 1, 0],
    ],
    "r_pentomino": [
        [0, 1, 1],
        [1, 1, 0],
        [0, 1, 0],
    ],
    "acorn": [
        [0, 1, 0, 0, 0, 0, 0],
        [0, 0, 0, 1, 0, 0, 0],
        [1, 1, 0, 0, 1, 1, 1],
    ],
    "diehard": [
        [0, 0, 0, 0, 0, 0, 1, 0],
        [1, 1, 0, 0, 0, 0, 0, 0],
        [0, 1, 0, 0, 0, 1, 1, 1],
    ],
    "pentadecathlon": [
        [0, 1, 0], [0, 1, 0], [1, 0, 1], [0, 1, 0], [0, 1, 0],
        [0, 1, 0], [0, 1, 0], [1, 0, 1], [0, 1, 0], [0, 1, 0],
    ],
}


def random_soup(
    width: int, height: int, density: float = 0.35, seed: int | None = None
) -> NDArray[np.int8]:
    """A height × width 0/1 grid with roughly `density` of the cells alive."""
    rng = np.random.default_rng(seed)
    return (rng.random((height, width)) < density).astype(np.int8)


# ═══════════════════════════════════════════════════════════════════════
#  Errors
# ═══════════════════════════════════════════════════════════════════════

class LifeError(Exception):
    """Base class for errors raised by the life engine."""


class InvalidSeedError(LifeError, ValueError):
    """A seed pattern that is not a rectangular grid of 0/1 values."""


def _validate_seed(pattern: SeedPattern) -> NDArray[np.int8]:
    try:
        grid = np.asarray(pattern)
    except ValueError as exc:
        raise InvalidSeedError(f"seed rows must all have the same length ({exc})") from exc

    if grid.size == 0:
        return np.zeros((0, 0), dtype=np.int8)
    if grid.ndim != 2:
        raise InvalidSeedError(
            f"seed must be a 2D grid of rows, got {grid.ndim} dimension(s)"
        )
    if grid.dtype.kind not in "biu":
        raise InvalidSeedError(f"seed values must be 0 or 1, got dtype {grid.dtype}")
    bad = ~np.isin(grid, (0, 1))
    if bad.any():
        y, x = (int(i) for i in np.argwhere(bad)[0])
        raise InvalidSeedError(
            f"seed value at row {y}, column {x} must be 0 or 1, got {grid[y, x]!r}"
        )
    return grid.astype(np.int8)


# ═══════════════════════════════════════════════════════════════════════
#  Cell
# ═══════════════════════════════════════════════════════════════════════

class Cell:
    """One position on a board, alive or dead.

    The coordinate is fixed at creation. The cell holds only a weak
    reference to its board, used to look up neighbours; the board owns the
    cell, so a discarded board is freed as soon as the game lets go of it.
    """

    __slots__ = ("_x", "_y", "_board", "alive")

    def __init__(self, board: Board, x: int, y: int, alive: bool = False) -> None:
        self._board = weakref.ref(board)
        self._x = x
        self._y = y
        self.alive: bool = bool(alive)

    def __repr__(self) -> str:
        state = "alive" if self.alive else "dead"
        return f"<Cell ({self._x}, {self._y}) {state}>"

    @property
    def x(self) -> int:
        return self._x

    @property
    def y(self) -> int:
        return self._y

    @property
    def coordinate(self) -> Coordinate:
        return (self._x, self._y)

    def is_alive(self) -> bool:
        return self.alive

    def is_dead(self) -> bool:
        return not self.alive

    def set_alive(self) -> None:
        self.alive = True

    def set_dead(self) -> None:
        self.alive = False

    def _owner(self) -> Board:
        board = self._board()
        if board is None:
            raise LifeError(f"board holding cell ({self._x}, {self._y}) has been discarded")
        return board

    def neighbor_cells(self) -> list[Cell]:
        """The eight surrounding cells, materializing any not seen yet."""
        return self._owner().neighbors_of(self._x, self._y)

    def living_neighbor_count(self) -> int:
        # Read-only lookups: counting never adds cells to the board.
        return self._owner().living_neighbor_count(self._x, self._y)

    def will_be_alive_next_generation(self) -> bool:
        """Apply B3/S23 to the current board state. Never mutates anything."""
        n = self.living_neighbor_count()
        if self.alive:
            return n in SURVIVE_COUNTS
        return n == BIRTH_COUNT

    def will_die_next_generation(self) -> bool:
        return not self.will_be_alive_next_generation()


# ═══════════════════════════════════════════════════════════════════════
#  Board
# ═══════════════════════════════════════════════════════════════════════

class Board:
    """
    A sparse snapshot of one generation.

    Cells live in a dict keyed by (x, y). Asking for a coordinate that has
    never been seen creates a dead cell there; asking again returns the
    same Cell object. The plane is unbounded in every direction.
    """

    def __init__(self, seed_pattern: SeedPattern | None = None) -> None:
        self.cells: dict[Coordinate, Cell] = {}
        self.seed(seed_pattern)

    def __repr__(self) -> str:
        return f"<Board cells={len(self.cells)} population={self.population()}>"

    def __len__(self) -> int:
        return len(self.cells)

    def __getitem__(self, key: Coordinate) -> Cell:
        x, y = key
        return self.cell_at(x, y)

    # ── Cell access ─────────────────────────────────────────────────

    def cell_at(self, x: int, y: int, initial_alive: bool | None = None) -> Cell:
        """Return the cell at (x, y), creating it on first access.

        `initial_alive` only applies when the cell is created; once a cell
        exists its state is changed through set_alive / set_dead.
        """
        cell = self.cells.get((x, y))
        if cell is None:
            cell = Cell(self, x, y, bool(initial_alive))
            self.cells[(x, y)] = cell
        return cell

    def alive_at(self, x: int, y: int) -> bool:
        """Liveness at (x, y) without materializing a cell."""
        cell = self.cells.get((x, y))
        return cell is not None and cell.alive

    def neighbors_of(self, x: int, y: int) -> list[Cell]:
        return [self.cell_at(x + dx, y + dy) for dx, dy in NEIGHBOR_OFFSETS]

    def living_neighbor_count(self, x: int, y: int) -> int:
        cells = self.cells
        count = 0
        for dx, dy in NEIGHBOR_OFFSETS:
            cell = cells.get((x + dx, y + dy))
            if cell is not None and cell.alive:
                count += 1
        return count

    # ── Whole-board queries ─────────────────────────────────────────

    def living_cells(self) -> Iterator[Cell]:
        return (cell for cell in self.cells.values() if cell.alive)

    def population(self) -> int:
        return sum(1 for _ in self.living_cells())

    def significant_cells(self) -> set[Cell]:
        """
        Every cell that could change state next generation: the living
        cells plus all of their neighbours. A dead cell with no living
        neighbour cannot be born, so nothing else needs visiting.
        """
        # Snapshot first; neighbour lookups grow self.cells.
        living = list(self.living_cells())
        significant: set[Cell] = set(living)
        for cell in living:
            significant.update(cell.neighbor_cells())
        return significant

    def bounds(self) -> tuple[int, int, int, int] | None:
        """(min_x, min_y, max_x, max_y) over materialized cells, None if empty."""
        if not self.cells:
            return None
        xs = [x for x, _ in self.cells]
        ys = [y for _, y in self.cells]
        return min(xs), min(ys), max(xs), max(ys)

    # ── Seeding ─────────────────────────────────────────────────────

    def seed(self, seed_pattern: SeedPattern | None = None) -> None:
        """Clear the board, then lay `seed_pattern` out with row 0 at y = 0.

        Raises InvalidSeedError (leaving the board as it was) if the
        pattern is ragged or holds anything other than 0 and 1.
        """
        grid = _validate_seed(seed_pattern) if seed_pattern is not None else None
        self.cells = {}
        if grid is None:
            return
        for y, row in enumerate(grid.tolist()):
            for x, value in enumerate(row):
                self.cell_at(x, y, value == 1)


# ═══════════════════════════════════════════════════════════════════════
#  Stats logger
# ═══════════════════════════════════════════════════════════════════════

class StatsLogger:
    """Writes per-generation telemetry to CSV for post-hoc analysis."""

    HEADER: ClassVar[str] = "gen,time_s,population,significant,materialized,event\n"

    def __init__(self, path: Path) -> None:
        self._path = path
        self._fh: IO[str] | None = None
        self._t0: float = time.monotonic()

    def open(self) -> None:
        try:
            self._fh = open(self._path, "w")
            self._fh.write(self.HEADER)
            self._fh.flush()
        except OSError:
            self._fh = None

    def log(
        self,
        gen: int,
        population: int,
        significant: int,
        materialized: int,
        event: str = "",
    ) -> None:
        if self._fh is None:
            return
        t = time.monotonic() - self._t0
        self._fh.write(f"{gen},{t:.3f},{population},{significant},{materialized},{event}\n")
        # Flush on events or periodically
        if event or gen % 50 == 0:
            try:
                self._fh.flush()
            except OSError:
                pass

    def close(self) -> None:
        if self._fh is not None:
            try:
                self._fh.close()
            except OSError:
                pass
            self._fh = None


# ═══════════════════════════════════════════════════════════════════════
#  The game
# ═══════════════════════════════════════════════════════════════════════

class Game:
    """
    Owns the current board and the generation counter.

    Each advance() builds a brand-new Board from the old board's
    significant cells and then drops the old one, so a board is never
    written to while its successor is being computed.
    """

    def __init__(
        self,
        seed_pattern: SeedPattern | None = None,
        renderer: Renderer | None = None,
        stats: StatsLogger | None = None,
    ) -> None:
        self.board: Board = Board()
        self.generation: int = 0
        self.renderer: Renderer = renderer if renderer is not None else ArrayRenderer()
        self.stats: StatsLogger | None = stats
        self.seed(seed_pattern)

    def seed(self, seed_pattern: SeedPattern | None = None) -> None:
        """Reseed the current board. The generation counter is left alone."""
        self.board.seed(seed_pattern)

    def population(self) -> int:
        return self.board.population()

    # ── Simulation ──────────────────────────────────────────────────

    def advance(self) -> None:
        """Advance exactly one generation."""
        previous_population = self.board.population()
        next_board = Board()
        significant = self.board.significant_cells()
        for cell in significant:
            # Fate is read from the old board only.
            next_board.cell_at(cell.x, cell.y, cell.will_be_alive_next_generation())
        self.generation += 1
        self.board = next_board

        if self.stats is not None:
            population = next_board.population()
            self.stats.log(
                gen=self.generation,
                population=population,
                significant=len(significant),
                materialized=len(next_board),
                event="extinct" if previous_population and not population else "",
            )

    def render(self, renderer: Renderer | None = None) -> object:
        """Hand the current board to `renderer`, or to the one set at construction."""
        if renderer is None:
            renderer = self.renderer
        return renderer.render(self.board)

    def play(
        self,
        max_generations: int | None = None,
        show_generation: bool = False,
        delay: float = 1.0 / 24,
        out: IO[str] | None = None,
        renderer: Renderer | None = None,
    ) -> None:
        """Render, advance and sleep in a loop.

        Runs `max_generations` times, or until interrupted when None. With
        `show_generation` each frame is printed with the generation number
        written over its tail; that needs a renderer that produces text.
        `renderer` overrides the construction-time renderer for this run only.
        """
        out = out if out is not None else sys.stdout
        steps = range(max_generations) if max_generations is not None else itertools.count()
        for _ in steps:
            frame = self.render(renderer)
            if show_generation:
                label = f" {self.generation}"
                text = str(frame)
                print("\n" + text[: max(len(text) - len(label), 0)] + label, file=out)
            self.advance()
            if delay > 0:
                time.sleep(delay)
