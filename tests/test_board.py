import numpy as np
import pytest

from dejaq.board import GLYPHS, PLAYER_GLYPH, Action, Board, BoardFullError, Tile


def test_edge_walls(walled_board):
    tiles = walled_board.tiles
    assert (tiles[0, :] == Tile.WALL).all()
    assert (tiles[-1, :] == Tile.WALL).all()
    assert (tiles[:, 0] == Tile.WALL).all()
    assert (tiles[:, -1] == Tile.WALL).all()
    assert (tiles[1:-1, 1:-1] == Tile.EMPTY).all()
    assert walled_board.player == (5, 5)
    assert walled_board.ghosts == []


def test_too_small():
    with pytest.raises(ValueError):
        Board.with_edge_walls(2, 10)


def test_tile_at_outside_is_wall(walled_board):
    assert walled_board.tile_at(-1, 3) == Tile.WALL
    assert walled_board.tile_at(3, -1) == Tile.WALL
    assert walled_board.tile_at(10, 3) == Tile.WALL
    assert walled_board.tile_at(3, 3) == Tile.EMPTY


def test_move_into_wall_is_refused(rng):
    board = Board.with_edge_walls(3, 3, rng=rng)
    for action in Action:
        assert board.move_player(action) is False
        assert board.player == (1, 1)


def test_idle_does_not_move(walled_board):
    assert walled_board.move_player(Action.IDLE) is False
    assert walled_board.player == (5, 5)


def test_move_eats_food(walled_board):
    walled_board.tiles[4, 5] = Tile.FOOD
    assert walled_board.food_remaining == 1

    assert walled_board.move_player(Action.UP) is True
    assert walled_board.player == (5, 4)
    assert walled_board.tile_at(5, 4) == Tile.EMPTY
    assert walled_board.food_remaining == 0

    assert walled_board.move_player(Action.DOWN) is False
    assert walled_board.player == (5, 5)


def test_moves_follow_deltas(walled_board):
    walled_board.move_player(Action.LEFT)
    assert walled_board.player == (4, 5)
    walled_board.move_player(Action.RIGHT)
    walled_board.move_player(Action.RIGHT)
    assert walled_board.player == (6, 5)


def test_terminal_on_ghost_or_wall(walled_board):
    assert not walled_board.is_terminal()
    walled_board.ghosts.append((5, 5))
    assert walled_board.is_terminal()

    walled_board.ghosts.clear()
    walled_board.player = (0, 0)
    assert walled_board.is_terminal()


def test_walking_onto_ghost_is_terminal(trapped_board):
    assert not trapped_board.is_terminal()
    trapped_board.move_player(Action.DOWN)
    assert trapped_board.player == (5, 6)
    assert trapped_board.is_terminal()


def test_random_free_cell_skips_player_and_ghosts(rng):
    board = Board.with_edge_walls(4, 3, rng=rng)
    for _ in range(20):
        assert board.random_free_cell() == (1, 1)

    board.ghosts.append((1, 1))
    with pytest.raises(BoardFullError):
        board.random_free_cell()


def test_random_free_cell_without_food(rng):
    board = Board.with_edge_walls(5, 3, rng=rng)
    board.player = (1, 1)
    board.tiles[1, 2] = Tile.FOOD
    for _ in range(20):
        assert board.random_free_cell(allow_food=False) == (3, 1)


def test_random_board_layout():
    board = Board.random(10, 10, n_ghosts=3, n_food=12, rng=np.random.default_rng(7))
    occupied = [board.player] + board.ghosts
    assert len(set(occupied)) == 4
    for x, y in occupied:
        assert board.tile_at(x, y) == Tile.EMPTY
    assert board.food_remaining == 12
    assert not board.is_terminal()


def test_random_board_too_crowded():
    with pytest.raises(BoardFullError):
        Board.random(4, 4, n_ghosts=2, n_food=2, rng=np.random.default_rng(0))


def test_random_board_is_seeded():
    a = Board.random(10, 10, 3, 12, rng=np.random.default_rng(99))
    b = Board.random(10, 10, 3, 12, rng=np.random.default_rng(99))
    assert a.player == b.player
    assert a.ghosts == b.ghosts
    assert (a.tiles == b.tiles).all()


def test_render(corridor_board):
    wall = GLYPHS[Tile.WALL]
    lines = corridor_board.render().split('\n')
    assert lines == [
        wall * 4,
        wall + GLYPHS[Tile.GHOST] + PLAYER_GLYPH + wall,
        wall * 4,
    ]
    assert str(corridor_board) == corridor_board.render()


def test_render_food(walled_board):
    walled_board.tiles[2, 3] = Tile.FOOD
    lines = walled_board.render().split('\n')
    assert lines[2][3] == GLYPHS[Tile.FOOD]
    assert lines[5][5] == PLAYER_GLYPH
