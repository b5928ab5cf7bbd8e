import sys
import time

import numpy as np

from dejaq import config
from dejaq.qlearn import QLearningAgent, QTable
from dejaq.train import new_board, run_episode

CLEAR_SCREEN = '\x1bc'


def draw(board, out=None):
    """Clear the terminal and draw one frame."""
    out = out or sys.stdout
    out.write(CLEAR_SCREEN)
    out.write(board.render() + '\n')
    out.flush()


def play(path, frame_delay=config.FRAME_DELAY, max_steps=None, seed=None, out=None):
    """
    Watch a trained agent play greedily until it dies.

    The table is only read, never updated. Returns the EpisodeStats.
    """
    out = out or sys.stdout
    table = QTable.load(path)
    rng = np.random.default_rng(seed)
    agent = QLearningAgent(table, rng=rng)
    board = new_board(rng)

    def on_step(board, stats):
        time.sleep(frame_delay)
        draw(board, out)
        out.write(f"Steps: {stats.steps}  Food: {stats.food_eaten}\n")

    draw(board, out)
    stats = run_episode(
        board, agent,
        epsilon=0.0,
        max_steps=max_steps if max_steps is not None else float('inf'),
        learn=False,
        on_step=on_step,
    )

    if stats.died:
        out.write("Game over\n")
    out.flush()
    return stats
