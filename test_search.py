#!/usr/bin/env python
"""
Tests for the MCTS phases and the budgeted search loop.
"""
import random
import unittest
from collections import Counter

from connect4_mcts.core.bitboard import EMPTY_STATE, GameStatus, cell_bit
from connect4_mcts.core.constants import COLUMNS, OUTCOME_WIN, OUTCOME_DRAW, OUTCOME_LOSS
from connect4_mcts.core.moves import drop_piece, get_moves, move_column
from connect4_mcts.mcts.config import MCTSConfig
from connect4_mcts.mcts.node import GameTree
from connect4_mcts.mcts.search import (
    backpropagate, best_child, expand_node, get_action_statistics,
    get_principal_variation, mcts_search, run_iteration, select_node,
    simulate_game, uct_value
)

from test_bitboard import drawn_board, mask_of


class FirstMoveRandom(random.Random):
    """Random source that always picks the first legal move."""

    def randrange(self, *args, **kwargs):
        return 0


class TestSimulation(unittest.TestCase):
    """Test case for the random playout."""

    def test_previous_player_already_won(self):
        state = (mask_of((0, 1), (1, 1)), mask_of((0, 0), (1, 0), (2, 0), (3, 0)))
        self.assertEqual(simulate_game(state, random.Random(0)), (OUTCOME_WIN, 0))

    def test_full_board(self):
        self.assertEqual(simulate_game(drawn_board(), random.Random(0)), (OUTCOME_DRAW, 0))

    def test_first_move_playout_after_center_opening(self):
        # filling columns left to right hands the first player row 0 of columns 3-6
        state = drop_piece(EMPTY_STATE, 3)
        self.assertEqual(simulate_game(state, FirstMoveRandom()), (OUTCOME_WIN, 36))

    def test_outcome_flips_with_each_ply(self):
        # the player to move completes a vertical line with their only move
        to_move = mask_of((0, 0), (0, 1), (0, 2))
        just_moved = mask_of((1, 0), (1, 1), (2, 0))
        outcome, steps = simulate_game((to_move, just_moved), FirstMoveRandom())
        self.assertEqual(steps, 1)
        self.assertEqual(outcome, OUTCOME_LOSS)


class TestTreePhases(unittest.TestCase):
    """Test case for selection, expansion and backpropagation."""

    def setUp(self):
        self.tree = GameTree(EMPTY_STATE)

    def test_first_iteration_expands_first_column(self):
        working = run_iteration(self.tree, random.Random(0))
        self.assertEqual(working, 1)
        self.assertEqual(self.tree.root_node.children, [1])
        self.assertEqual(self.tree[1].state, get_moves(*EMPTY_STATE)[0])
        self.assertEqual(self.tree[1].parent, self.tree.root)
        self.assertEqual(self.tree.root_node.visits, 1)
        self.assertEqual(self.tree[1].visits, 1)

    def test_expansion_follows_generator_order(self):
        rng = random.Random(1)
        for _ in range(COLUMNS):
            run_iteration(self.tree, rng)
        columns = [move_column(EMPTY_STATE, self.tree[c].state)
                   for c in self.tree.root_node.children]
        self.assertEqual(columns, list(range(COLUMNS)))
        self.assertTrue(self.tree.root_node.is_fully_expanded())

    def test_expansion_computes_status(self):
        state = (mask_of((0, 1), (1, 1), (2, 1)), mask_of((0, 0), (1, 0), (2, 0), (4, 0)))
        tree = GameTree(state)
        self.assertEqual(tree.root_node.status, GameStatus.PLAYING)
        # the first move (column 0) keeps the game open; walk to column 3
        for _ in range(4):
            child = expand_node(tree, tree.root)
        self.assertEqual(move_column(state, tree[child].state), 3)
        self.assertEqual(tree[child].status, GameStatus.PLAYING)
        self.assertFalse(tree[tree.root_node.children[0]].is_terminal())

    def test_expansion_of_winning_move(self):
        # the player to move has three in row 0; column 3 completes it
        state = (mask_of((0, 0), (1, 0), (2, 0)), mask_of((0, 1), (1, 1), (2, 1)))
        tree = GameTree(state)
        for _ in range(4):
            child = expand_node(tree, tree.root)
        self.assertEqual(tree[child].status, GameStatus.LOST)
        # terminal nodes are returned unchanged
        self.assertEqual(expand_node(tree, child), child)
        self.assertEqual(select_node(tree, child), child)

    def test_backpropagate_flips_outcome(self):
        child = self.tree.add_node(drop_piece(EMPTY_STATE, 3), parent=self.tree.root)
        grandchild = self.tree.add_node(drop_piece(self.tree[child].state, 3), parent=child)
        updated = backpropagate(self.tree, grandchild, OUTCOME_WIN)
        self.assertEqual(updated, 3)
        self.assertEqual((self.tree[grandchild].visits, self.tree[grandchild].score), (1, 2))
        self.assertEqual((self.tree[child].visits, self.tree[child].score), (1, 0))
        self.assertEqual((self.tree.root_node.visits, self.tree.root_node.score), (1, 2))

        backpropagate(self.tree, child, OUTCOME_DRAW)
        self.assertEqual((self.tree[child].visits, self.tree[child].score), (2, 1))
        self.assertEqual((self.tree.root_node.visits, self.tree.root_node.score), (2, 3))

    def test_uct_requires_visited_parent(self):
        child = self.tree.add_node(drop_piece(EMPTY_STATE, 0), parent=self.tree.root)
        self.tree[child].visits = 1
        with self.assertRaises(RuntimeError):
            uct_value(self.tree, self.tree.root, child)

    def test_uct_value(self):
        child = self.tree.add_node(drop_piece(EMPTY_STATE, 0), parent=self.tree.root)
        self.tree.root_node.visits = 16
        self.tree[child].visits = 4
        self.tree[child].score = 6
        # 6/4 + 2 * sqrt(log2(16) / 4) = 1.5 + 2
        self.assertAlmostEqual(uct_value(self.tree, self.tree.root, child), 3.5)
        self.assertAlmostEqual(uct_value(self.tree, self.tree.root, child, 0.0), 1.5)

    def test_selection_prefers_first_on_ties(self):
        tree = GameTree(EMPTY_STATE)
        for _ in range(COLUMNS):
            child = expand_node(tree, tree.root)
            tree[child].visits = 2
            tree[child].score = 2
        tree.root_node.visits = COLUMNS * 2
        self.assertEqual(select_node(tree, tree.root), tree.root_node.children[0])

    def test_best_child(self):
        for column, (visits, score) in enumerate([(4, 4), (2, 3), (4, 6), (1, 0)]):
            child = self.tree.add_node(drop_piece(EMPTY_STATE, column), parent=self.tree.root)
            self.tree[child].visits = visits
            self.tree[child].score = score
        # columns 1 and 2 tie at 1.5; the earlier one wins
        self.assertEqual(best_child(self.tree), self.tree.root_node.children[1])

    def test_best_child_requires_children(self):
        with self.assertRaises(RuntimeError):
            best_child(self.tree)

    def test_visits_count_passes_ending_in_subtree(self):
        rng = random.Random(5)
        ended = Counter()
        for _ in range(500):
            ended[run_iteration(self.tree, rng)] += 1
        self.assertEqual(self.tree.root_node.visits, 500)
        for index in range(len(self.tree)):
            expected = sum(ended[n] for n in self.tree.subtree(index))
            self.assertEqual(self.tree[index].visits, expected)
            if self.tree[index].children:
                self.assertGreater(self.tree[index].visits, 0)


class TestSearch(unittest.TestCase):
    """Test case for the budgeted search."""

    def test_iteration_budget(self):
        tree = GameTree(EMPTY_STATE)
        best, stats = mcts_search(tree, MCTSConfig(iterations=200), random.Random(0))
        self.assertEqual(stats["iterations"], 200)
        self.assertFalse(stats["stopped_early"])
        self.assertEqual(tree.root_node.visits, 200)
        self.assertEqual(stats["node_count"], len(tree))
        self.assertIn(best, tree.root_node.children)
        self.assertEqual(set(stats["actions"]), set(range(COLUMNS)))
        self.assertGreaterEqual(stats["max_depth"], 1)

    def test_time_budget(self):
        tree = GameTree(EMPTY_STATE)
        config = MCTSConfig(iterations=None, time_limit=0.05)
        _, stats = mcts_search(tree, config, random.Random(0))
        self.assertTrue(stats["stopped_early"])
        self.assertGreaterEqual(stats["iterations"], 1)
        self.assertEqual(tree.root_node.visits, stats["iterations"])

    def test_search_extends_existing_tree(self):
        tree = GameTree(EMPTY_STATE)
        rng = random.Random(2)
        mcts_search(tree, MCTSConfig(iterations=100), rng)
        mcts_search(tree, MCTSConfig(iterations=50), rng)
        self.assertEqual(tree.root_node.visits, 150)

    def test_terminal_root_is_rejected(self):
        lost = (mask_of((0, 1), (1, 1), (2, 1)), mask_of((0, 0), (1, 0), (2, 0), (3, 0)))
        for state in (lost, drawn_board()):
            with self.assertRaises(RuntimeError):
                mcts_search(GameTree(state), MCTSConfig(iterations=10), random.Random(0))

    def test_center_is_best_with_first_move_playouts(self):
        tree = GameTree(EMPTY_STATE)
        best, stats = mcts_search(tree, MCTSConfig(iterations=COLUMNS), FirstMoveRandom())
        values = {column: action["value"] for column, action in stats["actions"].items()}
        self.assertEqual(values[3], 2.0)
        self.assertEqual(values[3], max(values.values()))
        self.assertEqual(tree[best].value, 2.0)

    def test_blocks_open_three(self):
        # the player who just moved has three in row 0 and threatens column 3
        state = (mask_of((0, 1), (1, 1)), mask_of((0, 0), (1, 0), (2, 0)))
        tree = GameTree(state)
        best, stats = mcts_search(tree, MCTSConfig(iterations=5000), random.Random(42))
        self.assertEqual(move_column(state, tree[best].state), 3)
        self.assertEqual(tree[best].state, (state[1], state[0] | cell_bit(3, 0)))
        block_value = stats["actions"][3]["value"]
        for column, action in stats["actions"].items():
            if column != 3:
                self.assertLess(action["value"], block_value)

    def test_same_seed_same_search(self):
        results = []
        for _ in range(2):
            tree = GameTree(EMPTY_STATE)
            best, stats = mcts_search(tree, MCTSConfig(iterations=300, seed=9))
            results.append((tree[best].state, tree[best].score, tree[best].visits))
        self.assertEqual(results[0], results[1])

    def test_principal_variation(self):
        tree = GameTree(EMPTY_STATE)
        mcts_search(tree, MCTSConfig(iterations=300), random.Random(4))
        variation = get_principal_variation(tree, max_depth=3)
        self.assertGreaterEqual(len(variation), 1)
        self.assertLessEqual(len(variation), 3)
        for column, value in variation:
            self.assertIn(column, range(COLUMNS))
            self.assertGreaterEqual(value, 0.0)
            self.assertLessEqual(value, 2.0)
        first_column = variation[0][0]
        most_visited = max(tree.root_node.children, key=lambda c: tree[c].visits)
        self.assertEqual(first_column, move_column(EMPTY_STATE, tree[most_visited].state))
        self.assertEqual(set(get_action_statistics(tree)), set(range(COLUMNS)))


if __name__ == "__main__":
    unittest.main()
