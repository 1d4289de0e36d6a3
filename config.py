# config.py

# --- Global Simulation Settings ---
WORLD_WIDTH = 100.0
WORLD_HEIGHT = 100.0
WORLD_GRID_CELL_SIZE = 20  # For the spatial index
TICK_DT = 0.1  # Simulated seconds per tick
DEFAULT_TICKS = 3000
SEED = None  # None = fresh entropy each run

# --- Prey Settings ---
INITIAL_PREY_COUNT = 10
MAX_PREY = 20
# Seconds between prey top-ups; one prey is added per interval while below MAX_PREY.
PREY_SPAWN_INTERVAL = 2.0
PREY_HUNGER_VALUE = 25.0
PREY_RADIUS = 0.5

# --- Population Settings ---
RESPAWN_WHEN_EXTINCT = True
CORPSE_REMOVAL_DELAY = 1.4  # Seconds a dead agent stays in the registry

# --- Movement Settings ---
MOVE_SPEED = 10.0
ROTATE_SPEED = 180.0  # degrees per second
MIN_FORWARD = 0.3

# --- Logging Settings ---
LOG_LEVEL = "INFO"
LOG_FILE = None  # e.g. "runs/latest.log"
STATS_LOG_INTERVAL = 100  # ticks
STATS_MAX_POINTS = 500
