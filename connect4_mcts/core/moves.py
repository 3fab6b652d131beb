"""
Move generation and move validation for Connect-Four.

Moves are represented directly as state transitions: a move turns
``(to_move, just_moved)`` into ``(just_moved, to_move | bit)``.
"""
from __future__ import annotations
from typing import List

from connect4_mcts.core.bitboard import State, cell_bit, in_bounds
from connect4_mcts.core.constants import COLUMNS, ROWS, ROW_STRIDE


class IllegalMoveError(ValueError):
    """Raised when an externally supplied move cannot be played."""


def play(state: State, bit: int) -> State:
    """Place a stone for the player to move and swap the roles."""
    to_move, just_moved = state
    return just_moved, to_move | bit


def get_moves(to_move: int, just_moved: int) -> List[State]:
    """
    List every legal successor state.

    Columns are scanned left to right and each column contributes the
    state obtained by filling its lowest empty cell. Full columns are
    skipped. The order is stable and the search relies on it.

    Args:
        to_move: Stones of the player about to move
        just_moved: Stones of the player who moved last

    Returns:
        Successor states, at most one per column
    """
    grid = to_move | just_moved
    moves: List[State] = []
    for x in range(COLUMNS):
        for y in range(ROWS):
            bit = cell_bit(x, y)
            if not grid & bit:
                moves.append((just_moved, to_move | bit))
                break
    return moves


def lowest_empty_row(state: State, column: int) -> int:
    """Row where a stone dropped into ``column`` would land, or -1 if full."""
    grid = state[0] | state[1]
    for y in range(ROWS):
        if not grid & cell_bit(column, y):
            return y
    return -1


def apply_cell_move(state: State, x: int, y: int, require_support: bool = True) -> State:
    """
    Validate and apply a move given as a cell coordinate.

    Args:
        state: Current relative state
        x: Column (0-6)
        y: Row (0-5, bottom row is 0)
        require_support: Reject cells that are not the lowest empty cell
            of their column

    Returns:
        The state after the move

    Raises:
        IllegalMoveError: If the coordinate is off the board, the cell is
            occupied, or the cell is floating above an empty one
    """
    if not in_bounds(x, y):
        raise IllegalMoveError(f"Cell ({x}, {y}) is outside the {COLUMNS}x{ROWS} board")
    bit = cell_bit(x, y)
    if (state[0] | state[1]) & bit:
        raise IllegalMoveError(f"Cell ({x}, {y}) is already occupied")
    if require_support and lowest_empty_row(state, x) != y:
        raise IllegalMoveError(f"Cell ({x}, {y}) is not the lowest free cell of column {x}")
    return play(state, bit)


def drop_piece(state: State, column: int) -> State:
    """
    Drop a stone into a column.

    Raises:
        IllegalMoveError: If the column does not exist or is full
    """
    if not 0 <= column < COLUMNS:
        raise IllegalMoveError(f"Column {column} does not exist")
    row = lowest_empty_row(state, column)
    if row < 0:
        raise IllegalMoveError(f"Column {column} is full")
    return play(state, cell_bit(column, row))


def move_column(before: State, after: State) -> int:
    """
    Recover the column played between two consecutive states.

    Raises:
        ValueError: If ``after`` is not one move away from ``before``
    """
    placed = after[1] & ~before[0]
    if after[0] != before[1] or placed == 0 or placed & (placed - 1):
        raise ValueError("States are not separated by a single move")
    return (placed.bit_length() - 1) % ROW_STRIDE
