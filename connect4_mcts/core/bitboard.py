"""
Bitboard encoding and rules for Connect-Four.

A position is a pair of stone masks ``(to_move, just_moved)``. The first
mask always belongs to the player about to move and the second to the
player who made the last move; every move swaps the two slots. Cell
``(x, y)`` lives at bit ``y * 8 + x`` so that the eighth bit of each row
stays empty and shifted masks never wrap from one row into the next.
"""
from __future__ import annotations
from enum import Enum, auto
from typing import Tuple

import numpy as np

from connect4_mcts.core.constants import (
    COLUMNS, ROWS, ROW_STRIDE, FULL_GRID, WIN_SHIFTS
)

State = Tuple[int, int]
"""Relative board state: (stones of player to move, stones of player who just moved)"""

EMPTY_STATE: State = (0, 0)


class GameStatus(Enum):
    """Terminal status of a state, seen from the player about to move."""
    PLAYING = auto()
    WON = auto()
    LOST = auto()
    DRAW = auto()

    @property
    def is_terminal(self) -> bool:
        return self is not GameStatus.PLAYING


def cell_index(x: int, y: int) -> int:
    """Bit index of column ``x``, row ``y`` (row 0 is the bottom row)."""
    return y * ROW_STRIDE + x


def cell_bit(x: int, y: int) -> int:
    return 1 << cell_index(x, y)


def in_bounds(x: int, y: int) -> bool:
    return 0 <= x < COLUMNS and 0 <= y < ROWS


def is_winning(mask: int) -> bool:
    """
    Check whether a stone mask contains four in a row.

    Args:
        mask: Stones of a single player

    Returns:
        True if the stones form a horizontal, vertical or diagonal line of four
    """
    for shift in WIN_SHIFTS:
        if mask & (mask >> shift) & (mask >> 2 * shift) & (mask >> 3 * shift):
            return True
    return False


def is_full(to_move: int, just_moved: int) -> bool:
    return to_move | just_moved == FULL_GRID


def get_status(to_move: int, just_moved: int) -> GameStatus:
    """
    Compute the terminal status of a state.

    The checks run in a fixed priority order: a line for the player to
    move, then a line for the player who just moved, then a full board.

    Args:
        to_move: Stones of the player about to move
        just_moved: Stones of the player who moved last

    Returns:
        GameStatus relative to the player about to move
    """
    if is_winning(to_move):
        return GameStatus.WON
    if is_winning(just_moved):
        return GameStatus.LOST
    if is_full(to_move, just_moved):
        return GameStatus.DRAW
    return GameStatus.PLAYING


def count_stones(mask: int) -> int:
    return bin(mask).count("1")


def to_grid(state: State, first_to_move: bool = True) -> np.ndarray:
    """
    Convert a relative state into an absolute ROWS x COLUMNS grid.

    Args:
        state: Relative board state
        first_to_move: Whether the first player is the one about to move

    Returns:
        Integer array with 0 for empty, 1 for the first player and 2 for
        the second player; row 0 is the bottom of the board
    """
    to_move, just_moved = state
    first, second = (to_move, just_moved) if first_to_move else (just_moved, to_move)
    grid = np.zeros((ROWS, COLUMNS), dtype=np.int8)
    for y in range(ROWS):
        for x in range(COLUMNS):
            bit = cell_bit(x, y)
            if first & bit:
                grid[y, x] = 1
            elif second & bit:
                grid[y, x] = 2
    return grid
