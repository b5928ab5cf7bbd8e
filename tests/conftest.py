import numpy as np
import pytest

from dejaq.board import Board, Tile


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def walled_board(rng):
    """10x10 board with edge walls, player at (5, 5), nothing else."""
    return Board.with_edge_walls(10, 10, rng=rng)


@pytest.fixture
def trapped_board(rng):
    """Player boxed in on three sides with a ghost directly below."""
    board = Board.with_edge_walls(10, 10, rng=rng)
    for x, y in [(4, 5), (6, 5), (5, 4)]:
        board.tiles[y, x] = Tile.WALL
    board.ghosts.append((5, 6))
    return board


@pytest.fixture
def corridor_board(rng):
    """4x3 board: a two-cell corridor, ghost on the left, player on the right."""
    board = Board.with_edge_walls(4, 3, rng=rng)
    assert board.player == (2, 1)
    board.ghosts.append((1, 1))
    return board
