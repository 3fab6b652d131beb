#!/usr/bin/env python
"""
Tests for move generation and validation of external moves.
"""
import random
import unittest

from connect4_mcts.core.bitboard import EMPTY_STATE, cell_bit, get_status, count_stones
from connect4_mcts.core.constants import COLUMNS, ROWS
from connect4_mcts.core.moves import (
    IllegalMoveError, apply_cell_move, drop_piece, get_moves, lowest_empty_row, move_column
)

from test_bitboard import drawn_board


def random_states(seed, games=50):
    """Yield every non-terminal state of a number of random games."""
    rng = random.Random(seed)
    for _ in range(games):
        state = EMPTY_STATE
        while not get_status(*state).is_terminal:
            yield state
            moves = get_moves(*state)
            state = moves[rng.randrange(len(moves))]


class TestMoveGenerator(unittest.TestCase):
    """Test case for get_moves."""

    def test_empty_board(self):
        moves = get_moves(*EMPTY_STATE)
        self.assertEqual(len(moves), COLUMNS)
        for x, state in enumerate(moves):
            self.assertEqual(state, (0, cell_bit(x, 0)))

    def test_roles_swap(self):
        state = drop_piece(EMPTY_STATE, 3)
        for to_move, just_moved in get_moves(*state):
            self.assertEqual(to_move, state[1])
            self.assertEqual(count_stones(just_moved), 1)

    def test_full_column_is_skipped(self):
        state = EMPTY_STATE
        for _ in range(ROWS):
            state = drop_piece(state, 0)
        moves = get_moves(*state)
        self.assertEqual(len(moves), COLUMNS - 1)
        self.assertEqual([move_column(state, m) for m in moves], list(range(1, COLUMNS)))

    def test_full_board_has_no_moves(self):
        self.assertEqual(get_moves(*drawn_board()), [])

    def test_each_move_adds_one_stone_at_lowest_empty_row(self):
        for state in random_states(seed=3):
            to_move, just_moved = state
            moves = get_moves(*state)
            self.assertLessEqual(len(moves), COLUMNS)
            self.assertGreater(len(moves), 0)
            columns = []
            for new_to_move, new_just_moved in moves:
                self.assertEqual(new_to_move, just_moved)
                placed = new_just_moved & ~to_move
                self.assertEqual(new_just_moved, to_move | placed)
                self.assertEqual(count_stones(placed), 1)
                column = move_column(state, (new_to_move, new_just_moved))
                row = lowest_empty_row(state, column)
                self.assertEqual(placed, cell_bit(column, row))
                columns.append(column)
            self.assertEqual(columns, sorted(columns))

    def test_occupancy_is_monotonic(self):
        for state in random_states(seed=11, games=20):
            available = len(get_moves(*state))
            for move in get_moves(*state):
                self.assertGreaterEqual(len(get_moves(*move)), available - 1)


class TestMoveValidation(unittest.TestCase):
    """Test case for moves coming from outside the engine."""

    def setUp(self):
        self.state = drop_piece(EMPTY_STATE, 3)

    def test_valid_cell_move(self):
        self.assertEqual(apply_cell_move(EMPTY_STATE, 3, 0), (0, cell_bit(3, 0)))
        self.assertEqual(apply_cell_move(self.state, 3, 1), drop_piece(self.state, 3))

    def test_out_of_range(self):
        for x, y in [(-1, 0), (COLUMNS, 0), (0, -1), (0, ROWS)]:
            with self.assertRaises(IllegalMoveError):
                apply_cell_move(self.state, x, y)

    def test_occupied_cell(self):
        with self.assertRaises(IllegalMoveError):
            apply_cell_move(self.state, 3, 0)

    def test_floating_cell(self):
        with self.assertRaises(IllegalMoveError):
            apply_cell_move(self.state, 4, 2)
        # accepted when gravity is not enforced
        state = apply_cell_move(self.state, 4, 2, require_support=False)
        self.assertEqual(state, (self.state[1], self.state[0] | cell_bit(4, 2)))

    def test_drop_piece_errors(self):
        with self.assertRaises(IllegalMoveError):
            drop_piece(self.state, COLUMNS)
        state = EMPTY_STATE
        for _ in range(ROWS):
            state = drop_piece(state, 6)
        with self.assertRaises(IllegalMoveError):
            drop_piece(state, 6)

    def test_illegal_move_error_is_value_error(self):
        self.assertTrue(issubclass(IllegalMoveError, ValueError))

    def test_move_column(self):
        self.assertEqual(move_column(EMPTY_STATE, self.state), 3)
        with self.assertRaises(ValueError):
            move_column(EMPTY_STATE, EMPTY_STATE)
        with self.assertRaises(ValueError):
            move_column(EMPTY_STATE, drop_piece(self.state, 2))


if __name__ == "__main__":
    unittest.main()
