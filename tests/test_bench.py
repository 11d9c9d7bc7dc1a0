from __future__ import annotations

import numpy as np
import pytest

from life import PATTERNS, Game, random_soup
from life_bench import FakeWindow, board_to_grid, dense_step, simulate_render_work, verify


def test_dense_step_blinker() -> None:
    grid = np.zeros((3, 3), dtype=np.int8)
    grid[1, :] = 1
    expected = np.zeros((3, 3), dtype=np.int8)
    expected[:, 1] = 1
    assert np.array_equal(dense_step(grid), expected)


def test_board_to_grid_clips_to_window() -> None:
    game = Game([[1, 0], [0, 1]])
    game.board.cell_at(10, 10, True)
    grid = board_to_grid(game.board, (0, 0), (2, 2))
    assert grid.tolist() == [[1, 0], [0, 1]]


@pytest.mark.parametrize("name", ["glider", "r_pentomino", "acorn", "pentadecathlon"])
def test_sparse_engine_matches_dense_reference_on_patterns(name: str) -> None:
    assert verify(PATTERNS[name], 25)


@pytest.mark.parametrize("rng_seed", range(5))
def test_sparse_engine_matches_dense_reference_on_soups(rng_seed: int) -> None:
    assert verify(random_soup(12, 10, 0.4, seed=rng_seed), 20)


def test_random_soup_is_reproducible() -> None:
    a = random_soup(8, 4, seed=3)
    assert a.shape == (4, 8)
    assert set(np.unique(a).tolist()) <= {0, 1}
    assert np.array_equal(a, random_soup(8, 4, seed=3))


def test_simulate_render_work_reports_each_renderer() -> None:
    game = Game(PATTERNS["glider"])
    timings = simulate_render_work(game, FakeWindow(6, 8))
    assert {"array", "text", "curses", "_char_calls"} <= set(timings)
    assert timings["_char_calls"] == 5.0
