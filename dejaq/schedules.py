import math

from dejaq import config

# Exploration schedules: step -> epsilon


def exponential_decay_rate(initial, floor, total, step):
    """
    Exploration rate after `step` of `total` steps.

    initial * exp(-r * step) with r = -ln(floor / initial) / total, so the
    rate starts at `initial` and reaches `floor` at step == total. Never
    drops below `floor`. The rate stays at `initial` when there is nothing
    to decay toward (initial <= floor, floor <= 0, or total <= 0).
    """
    if initial <= floor or total <= 0 or floor <= 0:
        return initial
    r = -math.log(floor / initial) / total
    return max(floor, initial * math.exp(-r * step))


def exponential_decay(initial=config.EPSILON_START, floor=config.EPSILON_MIN, total=config.ITERATIONS):
    """
    Usage: eps_fn = exponential_decay(1.0, 0.05, total=10000)
           eps = eps_fn(episode)
    """
    def fn(step):
        return exponential_decay_rate(initial, floor, total, step)
    return fn


def fixed(rate):
    """Constant exploration rate."""
    return lambda step: rate
