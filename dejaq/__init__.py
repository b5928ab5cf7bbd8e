"""Grid Pacman with a tabular Q-learning agent."""

__version__ = "0.1.0"
