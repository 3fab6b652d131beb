"""
Connect-Four Core Package

This package contains the game rules, including:
- The bitboard state encoding and terminal detection
- Move generation and validation of human moves
- The game record used by the front ends
- Constants

All core components can be imported directly from this package.
"""

# Bitboard and rules
from connect4_mcts.core.bitboard import (
    State, EMPTY_STATE, GameStatus,
    cell_index, cell_bit, in_bounds, is_winning, is_full, get_status,
    count_stones, to_grid
)

# Moves
from connect4_mcts.core.moves import (
    IllegalMoveError, play, get_moves, lowest_empty_row,
    apply_cell_move, drop_piece, move_column
)

# Game
from connect4_mcts.core.game import Game, GameResult

# Constants
from connect4_mcts.core.constants import (
    COLUMNS, ROWS, FULL_GRID,
    OUTCOME_LOSS, OUTCOME_DRAW, OUTCOME_WIN, FLIP_OUTCOME
)

__all__ = [
    # Bitboard
    'State', 'EMPTY_STATE', 'GameStatus',
    'cell_index', 'cell_bit', 'in_bounds', 'is_winning', 'is_full', 'get_status',
    'count_stones', 'to_grid',

    # Moves
    'IllegalMoveError', 'play', 'get_moves', 'lowest_empty_row',
    'apply_cell_move', 'drop_piece', 'move_column',

    # Game
    'Game', 'GameResult',

    # Constants
    'COLUMNS', 'ROWS', 'FULL_GRID',
    'OUTCOME_LOSS', 'OUTCOME_DRAW', 'OUTCOME_WIN', 'FLIP_OUTCOME'
]
