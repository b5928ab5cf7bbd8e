import itertools

from dejaq.board import Action, Tile

DIRECTIONS = (Action.UP, Action.DOWN, Action.LEFT, Action.RIGHT)

# All 24 orderings of the four cardinal directions, built once
DIRECTION_ORDERS = tuple(itertools.permutations(DIRECTIONS))


def step_ghosts(board, rng=None):
    """
    Move every ghost one cell in a random direction.

    Each ghost draws one of the 24 direction orders and takes the first
    neighbour that is not a wall and not held by another ghost, or stays put.
    Ghosts move in list order, so an earlier ghost can claim a cell a later
    one would have picked. Moving onto the player is allowed.
    """
    if rng is None:
        rng = board.rng

    for i, (x, y) in enumerate(board.ghosts):
        order = DIRECTION_ORDERS[int(rng.integers(len(DIRECTION_ORDERS)))]
        for direction in order:
            dx, dy = direction.delta
            target = (x + dx, y + dy)
            if board.tile_at(*target) == Tile.WALL or target in board.ghosts:
                continue
            board.ghosts[i] = target
            break
