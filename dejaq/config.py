# Board Settings
BOARD_WIDTH = 10
BOARD_HEIGHT = 10
N_GHOSTS = 3
N_FOOD = 12

# State encoding
VIEW_RADIUS = 2       # 5x5 window around the player (radius 1 gives 3x3)
VIEW_GHOSTS = True    # Project ghost positions into the view

# Training Hyperparameters
ALPHA = 0.7           # Learning rate
GAMMA = 0.9           # Discount factor
EPSILON_START = 1.0   # Initial exploration rate
EPSILON_MIN = 0.05    # Exploration floor reached at the last episode

# Reward Configuration
REWARDS = {
    'death': -1.0,    # Player walked into a ghost/wall or got caught
    'food': 1.0,      # Ate a food pellet
    'step': 0.0,      # Anything else
}

# Training Settings
ITERATIONS = 10000
MAX_STEPS_PER_EPISODE = 10000  # Prevent infinite episodes
SUMMARY_EVERY = 500
SAVE_EVERY = 1000

# Play Settings
FRAME_DELAY = 0.1     # Seconds between rendered frames
