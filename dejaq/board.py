from enum import IntEnum

import numpy as np


class Tile(IntEnum):
    """Classification of a single cell. GHOST only shows up in encoded views."""
    EMPTY = 0
    WALL = 1
    FOOD = 2
    GHOST = 3


class Action(IntEnum):
    IDLE = 0
    UP = 1
    DOWN = 2
    LEFT = 3
    RIGHT = 4

    @property
    def delta(self):
        return ACTION_DELTAS[self]


# y grows downward, row 0 is the top of the board
ACTION_DELTAS = {
    Action.IDLE: (0, 0),
    Action.UP: (0, -1),
    Action.DOWN: (0, 1),
    Action.LEFT: (-1, 0),
    Action.RIGHT: (1, 0),
}

GLYPHS = {
    Tile.EMPTY: '　',
    Tile.WALL: '⬜',
    Tile.FOOD: '🍒',
    Tile.GHOST: '👻',
}
PLAYER_GLYPH = '🤪'


class BoardFullError(RuntimeError):
    pass


class Board:
    """
    Grid of tile backgrounds plus the ghost list and the player position.

    Positions are (x, y) tuples of plain ints. Anything outside the grid is
    treated as wall, so neighbour arithmetic never needs a bounds check of
    its own.
    """

    def __init__(self, tiles, player=None, ghosts=(), rng=None):
        self.tiles = np.array(tiles, dtype=np.int8)
        if self.tiles.ndim != 2:
            raise ValueError(f"tiles must be 2D, got shape {self.tiles.shape}")
        self.height, self.width = self.tiles.shape
        self.player = tuple(player) if player is not None else None
        self.ghosts = [tuple(g) for g in ghosts]
        self.rng = rng if rng is not None else np.random.default_rng()

    @classmethod
    def with_edge_walls(cls, width, height, rng=None):
        """Empty board walled on all four edges, player in the middle."""
        if width < 3 or height < 3:
            raise ValueError(f"Board must be at least 3x3, got {width}x{height}")
        tiles = np.full((height, width), Tile.EMPTY, dtype=np.int8)
        tiles[0, :] = Tile.WALL
        tiles[-1, :] = Tile.WALL
        tiles[:, 0] = Tile.WALL
        tiles[:, -1] = Tile.WALL
        return cls(tiles, player=(width // 2, height // 2), rng=rng)

    @classmethod
    def random(cls, width, height, n_ghosts, n_food, rng=None):
        """Edge-walled board with player, ghosts and food on distinct random cells."""
        board = cls.with_edge_walls(width, height, rng=rng)
        board.player = None
        board.player = board.random_free_cell()
        for _ in range(n_ghosts):
            board.ghosts.append(board.random_free_cell())
        for _ in range(n_food):
            x, y = board.random_free_cell(allow_food=False)
            board.tiles[y, x] = Tile.FOOD
        return board

    def in_bounds(self, x, y):
        return 0 <= x < self.width and 0 <= y < self.height

    def tile_at(self, x, y):
        if not self.in_bounds(x, y):
            return Tile.WALL
        return Tile(int(self.tiles[y, x]))

    def random_free_cell(self, allow_food=True):
        """Uniformly random non-wall cell not held by the player or a ghost."""
        allowed = [Tile.EMPTY, Tile.FOOD] if allow_food else [Tile.EMPTY]
        taken = set(self.ghosts)
        if self.player is not None:
            taken.add(self.player)
        candidates = [
            (int(x), int(y))
            for y, x in np.argwhere(np.isin(self.tiles, allowed))
            if (int(x), int(y)) not in taken
        ]
        if not candidates:
            raise BoardFullError(f"No free cell left on {self.width}x{self.height} board")
        return candidates[int(self.rng.integers(len(candidates)))]

    @property
    def food_remaining(self):
        return int(np.count_nonzero(self.tiles == Tile.FOOD))

    def is_terminal(self):
        """Player stands on a wall or shares a cell with a ghost."""
        return self.tile_at(*self.player) == Tile.WALL or self.player in self.ghosts

    def move_player(self, action):
        """
        Move the player one cell unless the destination is a wall.

        Returns True when the move consumed food. Walking onto a ghost is
        allowed; the caller sees it through is_terminal().
        """
        dx, dy = Action(action).delta
        if dx == 0 and dy == 0:
            return False
        x, y = self.player[0] + dx, self.player[1] + dy
        if self.tile_at(x, y) == Tile.WALL:
            return False
        self.player = (x, y)
        if self.tiles[y, x] == Tile.FOOD:
            self.tiles[y, x] = Tile.EMPTY
            return True
        return False

    def render(self):
        ghosts = set(self.ghosts)
        lines = []
        for y in range(self.height):
            row = []
            for x in range(self.width):
                if (x, y) == self.player:
                    row.append(PLAYER_GLYPH)
                elif (x, y) in ghosts:
                    row.append(GLYPHS[Tile.GHOST])
                else:
                    row.append(GLYPHS[Tile(int(self.tiles[y, x]))])
            lines.append(''.join(row))
        return '\n'.join(lines)

    def __str__(self):
        return self.render()
