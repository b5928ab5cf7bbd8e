"""
Q-learning training loop for the grid game.

An episode starts from a fresh random board and alternates one agent move
with one ghost move until the player dies or the step cap is hit:

- Walking into a ghost, or a ghost walking into the player, ends the episode (-1)
- Eating food is rewarded (+1)
- Everything else is neutral (0)
"""

import json
import os
from dataclasses import asdict, dataclass

import numpy as np
from tqdm import tqdm

from dejaq import config
from dejaq.board import Board
from dejaq.ghosts import step_ghosts
from dejaq.qlearn import QLearningAgent, QTable
from dejaq.schedules import exponential_decay, fixed


@dataclass
class EpisodeStats:
    steps: int = 0
    food_eaten: int = 0
    died: bool = False
    total_reward: float = 0.0


def new_board(rng=None):
    return Board.random(config.BOARD_WIDTH, config.BOARD_HEIGHT,
                        config.N_GHOSTS, config.N_FOOD, rng=rng)


def step(board, action, rng=None):
    """
    Apply one agent action followed by one ghost move.

    Returns (reward, done, ate_food). Ghosts do not move once the player's
    own move was already fatal.
    """
    ate_food = board.move_player(action)
    if not board.is_terminal():
        step_ghosts(board, rng)

    if board.is_terminal():
        return config.REWARDS['death'], True, ate_food
    if ate_food:
        return config.REWARDS['food'], False, ate_food
    return config.REWARDS['step'], False, ate_food


def run_episode(board, agent, epsilon=0.0, max_steps=config.MAX_STEPS_PER_EPISODE,
                learn=True, on_step=None):
    """
    Play one episode on `board`. With learn=False the table is left untouched.

    on_step(board, stats) is called after every transition.
    """
    stats = EpisodeStats()
    state = agent.observe(board)

    while stats.steps < max_steps:
        action = agent.choose_action(state, epsilon)
        reward, done, ate_food = step(board, action, agent.rng)
        next_state = agent.observe(board)

        if learn:
            agent.update(state, action, reward, next_state, done)

        stats.steps += 1
        stats.total_reward += reward
        stats.food_eaten += int(ate_food)
        stats.died = done

        if on_step is not None:
            on_step(board, stats)

        if done:
            break
        state = next_state

    return stats


def _print_summary(history, n, table):
    recent = history[-n:]
    tqdm.write(f"\n{'='*60}")
    tqdm.write(f"SUMMARY - Last {n} episodes")
    tqdm.write(f"{'='*60}")
    tqdm.write(f"Avg Steps:   {sum(r['steps'] for r in recent)/n:9.1f}")
    tqdm.write(f"Avg Food:    {sum(r['food_eaten'] for r in recent)/n:9.2f}")
    tqdm.write(f"Death Rate:  {sum(r['died'] for r in recent)/n:9.2%}")
    tqdm.write(f"Epsilon:     {recent[-1]['epsilon']:9.3f}")
    tqdm.write(f"States in Q: {len(table):9d}")
    tqdm.write(f"{'='*60}\n")


def train(iterations=config.ITERATIONS, output='qtable.pkl', input_path=None,
          epsilon=config.EPSILON_START, seed=None, history_path=None):
    """
    Train a Q-table for `iterations` episodes and write it to `output`.

    Args:
        iterations: Number of episodes
        output: Where to write the trained table
        input_path: Existing table to resume from
        epsilon: Initial exploration rate, decays to EPSILON_MIN by the last episode
            (held constant when already at or below EPSILON_MIN)
        seed: Seed for board layout, ghosts and exploration
        history_path: Optional JSON file for per-episode stats

    Returns:
        (agent, history)
    """
    print(f"\n{'='*60}")
    print(f"TABULAR Q-LEARNING")
    print(f"{'='*60}")
    print(f"Episodes: {iterations}")
    print(f"Board:    {config.BOARD_WIDTH}x{config.BOARD_HEIGHT}, "
          f"{config.N_GHOSTS} ghosts, {config.N_FOOD} food")
    print(f"α={config.ALPHA}, γ={config.GAMMA}, ε={epsilon}→{config.EPSILON_MIN}")
    print(f"{'='*60}\n")

    rng = np.random.default_rng(seed)
    table = QTable.load(input_path) if input_path else QTable()
    agent = QLearningAgent(table, rng=rng)
    if epsilon <= config.EPSILON_MIN:
        # Already at or under the floor, nothing to decay
        schedule = fixed(epsilon)
    else:
        schedule = exponential_decay(epsilon, config.EPSILON_MIN, iterations)

    history = []

    try:
        with tqdm(range(1, iterations + 1), desc="Training", unit="ep") as bar:
            for ep in bar:
                eps = schedule(ep - 1)
                stats = run_episode(new_board(rng), agent, epsilon=eps)

                history.append({'episode': ep, 'epsilon': eps, **asdict(stats)})
                bar.set_postfix(eps=f"{eps:.3f}", states=len(table), food=stats.food_eaten)

                if ep % config.SUMMARY_EVERY == 0:
                    _print_summary(history, min(config.SUMMARY_EVERY, len(history)), table)

                if ep % config.SAVE_EVERY == 0 and ep < iterations:
                    table.save(output)

    except KeyboardInterrupt:
        print("\n[INTERRUPTED]")

    table.save(output)

    print(f"\n{'='*60}")
    print(f"TRAINING COMPLETE")
    print(f"{'='*60}")
    if history:
        print(f"Episodes:    {len(history)}")
        print(f"Avg Steps:   {sum(r['steps'] for r in history)/len(history):.1f}")
        print(f"Avg Food:    {sum(r['food_eaten'] for r in history)/len(history):.2f}")
        print(f"States in Q: {len(table)}")
    print(f"{'='*60}")

    agent.print_stats()

    if history_path:
        directory = os.path.dirname(history_path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(history_path, 'w') as f:
            json.dump(history, f)

    return agent, history
