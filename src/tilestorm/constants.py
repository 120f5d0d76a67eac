# ============================================================================
# SCORING
# ============================================================================
SCORE_PER_TILE = 100


# ============================================================================
# RESOURCE DISPENSER
# ============================================================================
# Fraction of the pool that may be drawn before the reservoir is reshuffled.
SHUFFLE_THRESHOLD_RATIO = 0.75


# ============================================================================
# BOARD SETUP & DISASTERS
# ============================================================================
# Number of times a full no-match fill is restarted before setup gives up.
SETUP_MAX_ATTEMPTS = 200
# Extra column picks when the chosen top cell already holds a disaster.
DISASTER_SPAWN_RETRIES = 7
# Horizontal steps a disaster may take on each move (straight down is always allowed).
DISASTER_DRIFT_CHOICES = (-1, 0, 1)


# ============================================================================
# SETTINGS DEFAULTS & RANGES
# ============================================================================
DEFAULT_BOARD_ROWS = 8
DEFAULT_BOARD_COLS = 6
MIN_BOARD_SIZE = 3
MAX_BOARD_SIZE = 16

DEFAULT_DUPLICATE_RESOURCES = 10
MIN_DUPLICATE_RESOURCES = 1
MAX_DUPLICATE_RESOURCES = 100

DEFAULT_INITIAL_DISASTER_MOVE_TIME = 30
MIN_INITIAL_DISASTER_MOVE_TIME = 5
MAX_INITIAL_DISASTER_MOVE_TIME = 60

# Extrema for any disaster move interval. Do not make moves faster than this.
MIN_DISASTER_MOVE_TIME = 1
MAX_DISASTER_MOVE_TIME = 50

DEFAULT_DISASTER_TIME_DELTA = 3
MIN_DISASTER_TIME_DELTA = 1

DEFAULT_MAX_ACTIVE_DISASTERS = 5
MIN_MAX_ACTIVE_DISASTERS = 1

DEFAULT_WAVES_PER_ADDITIONAL_DISASTER = 3
MIN_WAVES_PER_ADDITIONAL_DISASTER = 1
MAX_WAVES_PER_ADDITIONAL_DISASTER = 10

DEFAULT_SCORE_PER_DISASTER = 500
MIN_SCORE_PER_DISASTER = 0
MAX_SCORE_PER_DISASTER = 100_000

DEFAULT_TIME_PER_WAVE = 30
MIN_TIME_PER_WAVE = 5
MAX_TIME_PER_WAVE = 300

DEFAULT_SCORE_PER_WAVE = 15_000
MIN_SCORE_PER_WAVE = 1
MAX_SCORE_PER_WAVE = 10_000_000

DEFAULT_SCORE_PER_WAVE_MULTIPLIER = 1.5
MIN_SCORE_PER_WAVE_MULTIPLIER = 1.0
MAX_SCORE_PER_WAVE_MULTIPLIER = 100.0
