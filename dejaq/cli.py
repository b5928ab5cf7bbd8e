#!/usr/bin/env python3
"""
Command line entry point.

Usage:
    dejaq train --iterations 20000 --output qtable.pkl
    dejaq train --iterations 5000 --output qtable.pkl --input qtable.pkl --epsilon 0.3
    dejaq run qtable.pkl
"""

import argparse
import sys

from dejaq import config
from dejaq.play import play
from dejaq.qlearn import QTableError
from dejaq.train import train


def positive_int(value):
    try:
        n = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"{value!r} is not an integer")
    if n <= 0:
        raise argparse.ArgumentTypeError(f"{value!r} must be positive")
    return n


def unit_rate(value):
    try:
        rate = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"{value!r} is not a number")
    if not 0.0 <= rate <= 1.0:
        raise argparse.ArgumentTypeError(f"{value!r} must be between 0 and 1")
    return rate


def non_negative_float(value):
    try:
        x = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"{value!r} is not a number")
    if x < 0:
        raise argparse.ArgumentTypeError(f"{value!r} must not be negative")
    return x


def build_parser():
    parser = argparse.ArgumentParser(prog="dejaq", description="Grid Pacman with a tabular Q-learning agent")
    sub = parser.add_subparsers(dest="command", required=True)

    p_train = sub.add_parser("train", help="Train a Q-table")
    p_train.add_argument("--iterations", type=positive_int, default=config.ITERATIONS,
                         help="Number of training episodes")
    p_train.add_argument("--output", required=True,
                         help="Where to write the trained Q-table")
    p_train.add_argument("--input", default=None,
                         help="Existing Q-table to resume training from")
    p_train.add_argument("--epsilon", type=unit_rate, default=config.EPSILON_START,
                         help="Initial exploration rate")
    p_train.add_argument("--seed", type=int, default=None,
                         help="Random seed")
    p_train.add_argument("--history", default=None,
                         help="Write per-episode stats to this JSON file")

    p_run = sub.add_parser("run", help="Watch a trained agent play")
    p_run.add_argument("path", help="Trained Q-table")
    p_run.add_argument("--delay", type=non_negative_float, default=config.FRAME_DELAY,
                       help="Seconds between frames")
    p_run.add_argument("--max-steps", type=positive_int, default=None,
                       help="Stop after this many steps")
    p_run.add_argument("--seed", type=int, default=None,
                       help="Random seed")

    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    try:
        if args.command == "train":
            train(
                iterations=args.iterations,
                output=args.output,
                input_path=args.input,
                epsilon=args.epsilon,
                seed=args.seed,
                history_path=args.history,
            )
        else:
            play(args.path, frame_delay=args.delay, max_steps=args.max_steps, seed=args.seed)
    except QTableError as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
