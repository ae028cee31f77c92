GRID_ROWS = 8
GRID_COLS = 8

# Base symbols drawn by the generator, in palette order.
DEFAULT_PALETTE = ("red", "blue", "green", "yellow", "purple")

# Smallest run or region that counts as a match.
MIN_MATCH = 3

# Score per cleared cell before the combo multiplier is applied.
BASE_POINTS = 10
# Upper bound for the combo multiplier so displays never overflow.
COMBO_CEILING = 99

# Attempts allowed when rolling a match-free (and playable) layout.
MAX_LAYOUT_ATTEMPTS = 200
