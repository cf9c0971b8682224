"""
Engine configuration constants.

Every value here is a default; the classes that use them accept keyword
overrides (board_size=..., radius=..., ...).
"""

BOARD_SIZE = 15
WIN_LENGTH = 5

# Chebyshev radius around existing stones searched for candidate moves
CANDIDATE_RADIUS = 2

# Move selection
TOP_K_EASY = 5
DEFENSE_WEIGHT_HARD = 125      # percent
DEFENSE_WEIGHT_DEFAULT = 115   # percent
HARD_ATTACK_BONUS_DIVISOR = 50

# Presentational delay (seconds) before a synthetic move is committed
THINK_DELAY = 0.5
THINK_DELAY_TACTICAL = 0.4

BLACK_NAME = "Black"
WHITE_NAME = "White"

DEFAULT_SLOT = "autosave"
SNAPSHOT_VERSION = 1
