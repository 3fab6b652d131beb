"""
Constants for the Connect-Four engine.

This module defines the board geometry used by the bitboard encoding,
the shift amounts used for four-in-a-row detection, and the default
search parameters.
"""
from typing import Final, Tuple


# Board geometry
COLUMNS: Final[int] = 7
ROWS: Final[int] = 6
ROW_STRIDE: Final[int] = 8  # 7 playable bits + 1 padding bit per row

# Mask of the 42 playable cells (bit y*8+x); bit y*8+7 is padding
FULL_GRID: Final[int] = 0x7F7F7F7F7F7F

# Shift per direction: horizontal, vertical, and the two diagonals
WIN_SHIFTS: Final[Tuple[int, ...]] = (1, ROW_STRIDE, ROW_STRIDE + 1, ROW_STRIDE - 1)

# Simulation outcome codes, from the point of view of the player who
# just moved into the simulated state
OUTCOME_LOSS: Final[int] = 0
OUTCOME_DRAW: Final[int] = 1
OUTCOME_WIN: Final[int] = 2

# Maps an outcome code onto the other player's point of view
FLIP_OUTCOME: Final[Tuple[int, int, int]] = (2, 1, 0)

# Search defaults
DEFAULT_MCTS_ITERATIONS: Final[int] = 10_000
DEFAULT_UCT_CONSTANT: Final[float] = 2.0
DEFAULT_TIME_LIMIT: Final[float] = 1.0  # seconds, for the timed preset

# Display
PLAYER_SYMBOLS: Final[Tuple[str, str, str]] = ("_", "X", "O")
