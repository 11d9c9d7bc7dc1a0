from __future__ import annotations

import pytest

from life import Board, Cell, LifeError


def test_fresh_cell_is_dead() -> None:
    cell = Board().cell_at(0, 0)
    assert isinstance(cell, Cell)
    assert cell.is_dead()
    assert not cell.is_alive()


def test_set_alive_and_dead_toggle_and_are_idempotent() -> None:
    cell = Board().cell_at(3, -2)
    cell.set_dead()
    assert cell.is_dead()
    cell.set_alive()
    cell.set_alive()
    assert cell.is_alive()
    cell.set_dead()
    assert not cell.is_alive()
    assert cell.is_dead()


def test_coordinate_is_fixed() -> None:
    cell = Board().cell_at(-4, 7)
    assert cell.coordinate == (-4, 7)
    assert (cell.x, cell.y) == (-4, 7)
    with pytest.raises(AttributeError):
        cell.x = 1  # type: ignore[misc]


def test_neighbor_cells_fixed_order_and_materialized() -> None:
    board = Board()
    cell = board.cell_at(5, 5)
    neighbors = cell.neighbor_cells()
    assert [n.coordinate for n in neighbors] == [
        (4, 4), (5, 4), (6, 4),
        (4, 5), (6, 5),
        (4, 6), (5, 6), (6, 6),
    ]
    assert all(n.is_dead() for n in neighbors)
    assert len(board) == 9
    assert all(board.cell_at(*n.coordinate) is n for n in neighbors)


def test_living_neighbor_count_does_not_grow_board() -> None:
    board = Board([[0, 1], [1, 1]])
    assert board.cell_at(0, 0).living_neighbor_count() == 3
    assert len(board) == 4


@pytest.mark.parametrize("n", [0, 1])
def test_live_cell_with_too_few_neighbors_dies(n: int) -> None:
    board = Board()
    cell = board.cell_at(0, 0, True)
    for dx, dy in [(1, 0), (0, 1)][:n]:
        board.cell_at(dx, dy, True)
    assert cell.living_neighbor_count() == n
    assert cell.will_be_alive_next_generation() is False
    assert cell.will_die_next_generation() is True


def test_rule_from_seeded_boards() -> None:
    # under-population
    board = Board([[0, 1, 0],
                   [0, 1, 0],
                   [0, 0, 0],
                   [0, 1, 0]])
    assert board[1, 1].will_die_next_generation()
    assert board[1, 3].will_die_next_generation()

    # survival with 2 or 3, birth with 3
    board = Board([[0, 1, 0],
                   [1, 1, 0],
                   [0, 1, 0]])
    assert board[1, 1].will_be_alive_next_generation()
    assert board[2, 1].will_be_alive_next_generation()

    # over-population
    board = Board([[1, 1, 0],
                   [1, 1, 0],
                   [1, 1, 1]])
    assert board[1, 1].will_die_next_generation()
    assert board[1, 2].will_die_next_generation()


def _centre_with(alive: bool, n: int) -> tuple[Board, Cell]:
    board = Board()
    cell = board.cell_at(0, 0, alive)
    for x, y in [(-1, -1), (0, -1), (1, -1), (-1, 0), (1, 0), (-1, 1), (0, 1), (1, 1)][:n]:
        board.cell_at(x, y, True)
    assert cell.living_neighbor_count() == n
    return board, cell


@pytest.mark.parametrize(
    "alive,n,expected",
    [(True, n, n in (2, 3)) for n in range(9)] + [(False, n, n == 3) for n in range(9)],
)
def test_rule_over_every_neighbor_count(alive: bool, n: int, expected: bool) -> None:
    _board, cell = _centre_with(alive, n)
    assert cell.will_be_alive_next_generation() is expected


def test_fate_is_pure() -> None:
    board = Board([[1, 1, 1]])
    before = {c: cell.alive for c, cell in board.cells.items()}
    for cell in list(board.cells.values()):
        cell.will_be_alive_next_generation()
    assert {c: cell.alive for c, cell in board.cells.items()} == before


def test_cell_outliving_its_board_cannot_see_neighbors() -> None:
    cell = Board([[1]]).cell_at(0, 0)
    # state survives, but the board it belonged to is gone
    assert cell.is_alive()
    with pytest.raises(LifeError):
        cell.neighbor_cells()
    with pytest.raises(LifeError):
        cell.living_neighbor_count()
