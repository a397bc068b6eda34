"""
AVL tree -- self-balancing binary search tree.

Every node caches the height of its subtree. Insert and remove descend
recursively and, on the way back up, refresh the height of each node on the
path and rotate it when its two subtrees differ in height by more than one.
Each recursive helper returns the subtree that should occupy the slot it was
given, so a rotation is published to the parent simply by being returned.
"""

import logging
from typing import TypeVar, Generic, List, Iterator, Optional, Tuple

T = TypeVar('T')

logger = logging.getLogger(__name__)


class AVLTree(Generic[T]):
    class Node:
        def __init__(self, value: T) -> None:
            self.value: T = value
            self.left: Optional['AVLTree.Node'] = None
            self.right: Optional['AVLTree.Node'] = None
            self.height: int = 1

    def __init__(self) -> None:
        self._root: Optional[AVLTree.Node] = None
        self._size: int = 0

    # ------------------------------------------------------------------
    # Height bookkeeping and rotations
    # ------------------------------------------------------------------

    @staticmethod
    def _height(node: Optional[Node]) -> int:
        return node.height if node is not None else 0

    def _refresh_height(self, node: Node) -> None:
        node.height = 1 + max(self._height(node.left), self._height(node.right))

    def _rotate_right(self, node: Node) -> Node:
        top = node.left
        assert top is not None
        logger.debug("rotate right at %r", node.value)

        node.left = top.right
        top.right = node

        self._refresh_height(node)
        self._refresh_height(top)
        return top

    def _rotate_left(self, node: Node) -> Node:
        top = node.right
        assert top is not None
        logger.debug("rotate left at %r", node.value)

        node.right = top.left
        top.left = node

        self._refresh_height(node)
        self._refresh_height(top)
        return top

    def _rebalance(self, node: Node) -> Node:
        """Refresh ``node``'s height and restore the AVL property at it.

        Returns the node now at the top of this subtree.
        """
        self._refresh_height(node)
        balance = self._height(node.left) - self._height(node.right)

        if balance > 1:
            child = node.left
            assert child is not None
            if self._height(child.right) > self._height(child.left):
                node.left = self._rotate_left(child)
            return self._rotate_right(node)

        if balance < -1:
            child = node.right
            assert child is not None
            if self._height(child.left) > self._height(child.right):
                node.right = self._rotate_right(child)
            return self._rotate_left(node)

        return node

    # ------------------------------------------------------------------
    # Insertion
    # ------------------------------------------------------------------

    def _insert(self, node: Optional[Node], value: T) -> Tuple[Node, bool]:
        if node is None:
            return AVLTree.Node(value), True

        if value == node.value:
            return node, False

        if value < node.value:
            node.left, inserted = self._insert(node.left, value)
        else:
            node.right, inserted = self._insert(node.right, value)

        if not inserted:
            return node, False
        return self._rebalance(node), True

    def insert(self, value: T) -> bool:
        """Add ``value`` to the tree.

        Returns False, leaving the tree untouched, if ``value`` is already
        present.
        """
        self._root, inserted = self._insert(self._root, value)
        if inserted:
            self._size += 1
        return inserted

    # ------------------------------------------------------------------
    # Removal
    # ------------------------------------------------------------------

    @staticmethod
    def _min_node(node: Node) -> Node:
        while node.left is not None:
            node = node.left
        return node

    @staticmethod
    def _max_node(node: Node) -> Node:
        while node.right is not None:
            node = node.right
        return node

    def _remove(self, node: Optional[Node], value: T) -> Tuple[Optional[Node], bool]:
        if node is None:
            return None, False

        if value == node.value:
            if node.left is None:
                return node.right, True
            if node.right is None:
                return node.left, True
            # Two children: take over the successor's value, then delete the
            # successor from the right subtree.
            successor = self._min_node(node.right)
            node.value = successor.value
            node.right, _ = self._remove(node.right, successor.value)
            return self._rebalance(node), True

        if value < node.value:
            node.left, removed = self._remove(node.left, value)
        else:
            node.right, removed = self._remove(node.right, value)

        if not removed:
            return node, False
        return self._rebalance(node), True

    def remove(self, value: T) -> bool:
        """Delete ``value`` from the tree. Returns False if it was absent."""
        self._root, removed = self._remove(self._root, value)
        if removed:
            self._size -= 1
        return removed

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def _contains(self, node: Optional[Node], value: T) -> bool:
        if node is None:
            return False
        if value == node.value:
            return True
        if value < node.value:
            return self._contains(node.left, value)
        return self._contains(node.right, value)

    def contains(self, value: T) -> bool:
        return self._contains(self._root, value)

    def min(self) -> T:
        if self._root is None:
            raise ValueError("min from empty tree")
        return self._min_node(self._root).value

    def max(self) -> T:
        if self._root is None:
            raise ValueError("max from empty tree")
        return self._max_node(self._root).value

    def size(self) -> int:
        return self._size

    def is_empty(self) -> bool:
        return self._size == 0

    def clear(self) -> None:
        self._root = None
        self._size = 0

    def height(self) -> int:
        return self._height(self._root)

    # ------------------------------------------------------------------
    # Traversals
    # ------------------------------------------------------------------

    def _in_order(self, node: Optional[Node], result: List[T]) -> None:
        if node is None:
            return
        self._in_order(node.left, result)
        result.append(node.value)
        self._in_order(node.right, result)

    def _pre_order(self, node: Optional[Node], result: List[T]) -> None:
        if node is None:
            return
        result.append(node.value)
        self._pre_order(node.left, result)
        self._pre_order(node.right, result)

    def _post_order(self, node: Optional[Node], result: List[T]) -> None:
        if node is None:
            return
        self._post_order(node.left, result)
        self._post_order(node.right, result)
        result.append(node.value)

    def in_order(self) -> List[T]:
        result: List[T] = []
        self._in_order(self._root, result)
        return result

    def pre_order(self) -> List[T]:
        result: List[T] = []
        self._pre_order(self._root, result)
        return result

    def post_order(self) -> List[T]:
        result: List[T] = []
        self._post_order(self._root, result)
        return result

    # ------------------------------------------------------------------
    # Balance check
    # ------------------------------------------------------------------

    def _check_balance(self, node: Optional[Node]) -> Tuple[bool, int]:
        # Recomputes heights instead of trusting the cached ones.
        if node is None:
            return True, 0
        left_ok, left_height = self._check_balance(node.left)
        right_ok, right_height = self._check_balance(node.right)
        balanced = left_ok and right_ok and abs(left_height - right_height) <= 1
        return balanced, 1 + max(left_height, right_height)

    def is_balanced(self) -> bool:
        balanced, _ = self._check_balance(self._root)
        return balanced

    def __len__(self) -> int:
        return self._size

    def __contains__(self, value: T) -> bool:
        return self.contains(value)

    def __iter__(self) -> Iterator[T]:
        return iter(self.in_order())

    def __repr__(self) -> str:
        return f"AVLTree({self.in_order()})"

    def __str__(self) -> str:
        return f"AVLTree(size={self._size}, height={self.height()})"
