import os
import pickle

import numpy as np

from dejaq import config
from dejaq.board import Action, Tile

FORMAT = 'deja-q/qtable'
VERSION = 1


def window_size(radius):
    """Number of cells in the view window, center excluded."""
    side = 2 * radius + 1
    return side * side - 1


def window_index(dx, dy, radius):
    """
    Slot of a relative offset in the flattened view window.

    Slots run row-major from the top-left corner with the center cell left
    out, so every offset after the center shifts down by one. Returns None
    for the center itself.
    """
    if abs(dx) > radius or abs(dy) > radius:
        raise ValueError(f"Offset ({dx}, {dy}) outside radius {radius}")
    if dx == 0 and dy == 0:
        return None
    side = 2 * radius + 1
    flat = (dy + radius) * side + (dx + radius)
    center = radius * side + radius
    return flat - 1 if flat > center else flat


def window_offsets(radius):
    """Relative offsets in slot order."""
    return [
        (dx, dy)
        for dy in range(-radius, radius + 1)
        for dx in range(-radius, radius + 1)
        if (dx, dy) != (0, 0)
    ]


def encode_state(board, radius=config.VIEW_RADIUS, include_ghosts=config.VIEW_GHOSTS):
    """
    Local view around the player as a hashable tuple.

    Every cell in the window is classified as EMPTY, WALL or FOOD (cells past
    the board edge count as WALL), then ghosts inside the window overwrite
    their slot with GHOST.
    """
    px, py = board.player
    view = [int(board.tile_at(px + dx, py + dy)) for dx, dy in window_offsets(radius)]

    if include_ghosts:
        for gx, gy in board.ghosts:
            dx, dy = gx - px, gy - py
            if abs(dx) > radius or abs(dy) > radius:
                continue
            idx = window_index(dx, dy, radius)
            if idx is not None:
                view[idx] = int(Tile.GHOST)

    return tuple(view)


class QTableError(ValueError):
    pass


class QTable:
    """
    Mapping from encoded state to one value per action.

    Rows appear at 0.0 the first time row() sees a state. values() is the
    read-only lookup and never inserts.
    """

    def __init__(self, radius=config.VIEW_RADIUS):
        self.radius = radius
        self.Q = {}

    def __len__(self):
        return len(self.Q)

    def __contains__(self, state):
        return state in self.Q

    def row(self, state):
        if state not in self.Q:
            self.Q[state] = np.zeros(len(Action), dtype=float)
        return self.Q[state]

    def values(self, state):
        row = self.Q.get(state)
        if row is None:
            return np.zeros(len(Action), dtype=float)
        return row

    def to_dict(self):
        return {state: row.tolist() for state, row in self.Q.items()}

    def save(self, filename):
        directory = os.path.dirname(filename)
        try:
            if directory:
                os.makedirs(directory, exist_ok=True)
            with open(filename, 'wb') as f:
                pickle.dump({
                    'format': FORMAT,
                    'version': VERSION,
                    'radius': self.radius,
                    'actions': [a.name for a in Action],
                    'Q': self.to_dict(),
                }, f)
        except OSError as e:
            raise QTableError(f"Cannot write Q-table {filename}: {e}") from e
        print(f"[SAVE] {len(self.Q)} states -> {filename}")

    @classmethod
    def load(cls, filename):
        try:
            with open(filename, 'rb') as f:
                data = pickle.load(f)
        except FileNotFoundError:
            raise QTableError(f"Q-table file not found: {filename}") from None
        except OSError as e:
            raise QTableError(f"Cannot read Q-table {filename}: {e}") from e
        except (pickle.UnpicklingError, EOFError, AttributeError, ImportError,
                IndexError, TypeError, ValueError) as e:
            raise QTableError(f"Corrupt Q-table {filename}: {e}") from e

        table = cls.from_payload(data, source=filename)
        print(f"[LOAD] {len(table)} states <- {filename}")
        return table

    @classmethod
    def from_payload(cls, data, source='<payload>'):
        if not isinstance(data, dict) or data.get('format') != FORMAT:
            raise QTableError(f"{source} is not a deja-q Q-table")
        if data.get('version') != VERSION:
            raise QTableError(f"{source} has unsupported version {data.get('version')!r}")
        if data.get('actions') != [a.name for a in Action]:
            raise QTableError(f"{source} was saved with actions {data.get('actions')!r}")

        radius = data.get('radius')
        if not isinstance(radius, int) or radius < 1:
            raise QTableError(f"{source} has invalid view radius {radius!r}")
        entries = data.get('Q')
        if not isinstance(entries, dict):
            raise QTableError(f"{source} has no state table")

        table = cls(radius=radius)
        n_slots = window_size(radius)
        for state, values in entries.items():
            if not isinstance(state, tuple) or len(state) != n_slots:
                raise QTableError(f"{source} holds a state of the wrong shape: {state!r}")
            if not isinstance(values, (list, tuple)) or len(values) != len(Action):
                raise QTableError(f"{source} holds a malformed row for state {state!r}")
            try:
                row = np.array(values, dtype=float)
            except (TypeError, ValueError) as e:
                raise QTableError(f"{source} holds a non-numeric row for state {state!r}: {e}") from e
            if row.shape != (len(Action),) or not np.isfinite(row).all():
                raise QTableError(f"{source} holds a malformed row for state {state!r}")
            table.Q[state] = row
        return table


class QLearningAgent:
    """
    Tabular Q-learning over the local view.

    The agent holds no exploration state of its own; the caller passes the
    current epsilon into choose_action() so the schedule lives in the loop.
    """

    def __init__(self, table=None, alpha=config.ALPHA, gamma=config.GAMMA,
                 rng=None, include_ghosts=config.VIEW_GHOSTS):
        self.table = table if table is not None else QTable()
        self.alpha = alpha
        self.gamma = gamma
        self.rng = rng if rng is not None else np.random.default_rng()
        self.include_ghosts = include_ghosts

        # Stats
        self.updates_count = 0

    def observe(self, board):
        return encode_state(board, self.table.radius, self.include_ghosts)

    def best_action(self, state):
        # argmax returns the first maximum, which fixes tie-breaking
        return Action(int(np.argmax(self.table.values(state))))

    def choose_action(self, state, epsilon=0.0):
        """Epsilon-greedy: random action with probability epsilon, else the best one."""
        if self.rng.random() < epsilon:
            return Action(int(self.rng.integers(len(Action))))
        return self.best_action(state)

    def update(self, state, action, reward, next_state, done=False):
        """
        Q(s,a) <- Q(s,a) + alpha * (r + gamma * max_a' Q(s',a') - Q(s,a))

        Terminal transitions drop the bootstrap term. Returns the TD error.
        """
        row = self.table.row(state)
        best_future = 0.0 if done else float(np.max(self.table.values(next_state)))
        td_error = reward + self.gamma * best_future - row[action]
        row[action] += self.alpha * td_error
        self.updates_count += 1
        return float(td_error)

    def print_stats(self):
        print(f"\n{'='*60}")
        print(f"Q-TABLE STATS")
        print(f"{'='*60}")
        print(f"States:  {len(self.table)}")
        print(f"Updates: {self.updates_count}")

        if self.table.Q:
            all_q = [(s, Action(a), q) for s, row in self.table.Q.items() for a, q in enumerate(row)]
            all_q.sort(key=lambda x: x[2], reverse=True)

            print(f"\nTop 5 Q-values:")
            for s, a, q in all_q[:5]:
                print(f"  Q={q:7.3f} {a.name:5s} food_in_view={s.count(Tile.FOOD)} ghosts_in_view={s.count(Tile.GHOST)}")

            print(f"\nBottom 5 Q-values:")
            for s, a, q in all_q[-5:]:
                print(f"  Q={q:7.3f} {a.name:5s} food_in_view={s.count(Tile.FOOD)} ghosts_in_view={s.count(Tile.GHOST)}")

        print(f"{'='*60}\n")
