"""
Game tree for Monte Carlo Tree Search.

The tree is an arena: ``GameTree.nodes`` owns every ``Node`` and nodes
refer to their parent and children by list index. Nodes are only ever
appended; when the root moves forward, the part of the tree above it
simply becomes unreachable and is dropped with the whole arena on the
next rebuild.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional, Iterator

from connect4_mcts.core.bitboard import State, GameStatus, get_status
from connect4_mcts.core.moves import get_moves


@dataclass
class Node:
    """
    A node in the search tree.

    ``score`` accumulates simulation outcome codes (0 loss, 1 draw, 2 win)
    from the point of view of the player who moved into ``state``.
    """
    state: State
    parent: Optional[int] = None
    children: List[int] = field(default_factory=list)
    visits: int = 0
    score: int = 0
    status: GameStatus = GameStatus.PLAYING
    _moves: Optional[List[State]] = field(default=None, repr=False, compare=False)

    @property
    def moves(self) -> List[State]:
        """
        Legal successor states, computed on first access.

        Returns:
            Successor states in generator order
        """
        if self._moves is None:
            self._moves = get_moves(*self.state)
        return self._moves

    @property
    def value(self) -> float:
        """Average outcome, in [0, 2]."""
        return self.score / self.visits

    def is_terminal(self) -> bool:
        return self.status.is_terminal

    def is_fully_expanded(self) -> bool:
        return len(self.children) >= len(self.moves)

    def next_untried(self) -> State:
        """State reached by the first move that has no child yet."""
        return self.moves[len(self.children)]

    def __str__(self) -> str:
        return (f"Node(visits={self.visits}, score={self.score}, "
                f"children={len(self.children)}, status={self.status.name})")


class GameTree:
    """
    Arena of search nodes rooted at the current real position.
    """

    def __init__(self, state: State):
        """
        Create a tree holding a single root node.

        Args:
            state: Position of the root
        """
        self.nodes: List[Node] = []
        self.root = self.add_node(state)

    def __len__(self) -> int:
        return len(self.nodes)

    def __getitem__(self, index: int) -> Node:
        return self.nodes[index]

    @property
    def root_node(self) -> Node:
        return self.nodes[self.root]

    @property
    def root_state(self) -> State:
        return self.nodes[self.root].state

    def add_node(self, state: State, parent: Optional[int] = None) -> int:
        """
        Append a node and link it under its parent.

        Args:
            state: Position of the new node
            parent: Index of the parent node (None for a root)

        Returns:
            Index of the new node
        """
        index = len(self.nodes)
        self.nodes.append(Node(state=state, parent=parent, status=get_status(*state)))
        if parent is not None:
            self.nodes[parent].children.append(index)
        return index

    def find_child(self, index: int, state: State) -> Optional[int]:
        """Index of the child of ``index`` whose state equals ``state``, if any."""
        for child in self.nodes[index].children:
            if self.nodes[child].state == state:
                return child
        return None

    def set_root(self, index: int) -> None:
        """Make ``index`` the root, detaching it from its former parent."""
        self.nodes[index].parent = None
        self.root = index

    def path_to_root(self, index: int) -> Iterator[int]:
        """Yield ``index`` and each of its ancestors up to the root."""
        current: Optional[int] = index
        while current is not None:
            yield current
            current = self.nodes[current].parent

    def depth(self, index: int) -> int:
        return sum(1 for _ in self.path_to_root(index)) - 1

    def subtree(self, index: int) -> Iterator[int]:
        """Yield the indices of ``index`` and all its descendants."""
        stack = [index]
        while stack:
            current = stack.pop()
            yield current
            stack.extend(self.nodes[current].children)

    def count_nodes(self, index: Optional[int] = None) -> int:
        """Number of nodes reachable from ``index`` (default: the root)."""
        return sum(1 for _ in self.subtree(self.root if index is None else index))
