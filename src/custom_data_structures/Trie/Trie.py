"""This module represents the implementation of a Trie structure over
token sequences that's used for fast streaming matching of multi-token terms.
"""

from collections.abc import Iterable
from typing import Optional


class TrieNode:
    """Represent a node in the term trie structure."""

    __slots__ = ("children", "is_terminal")

    def __init__(self) -> None:
        """Initialize a new Trie node.

        Attributes:
            children (dict): A dictionary mapping lowercased tokens to
            their corresponding child TrieNode instances.
            is_terminal (bool): Indicates whether the token path from
            the root to this node spells a complete loaded term.

        """
        # A dictionary to store child nodes (token: TrieNode)
        self.children: dict[str, TrieNode] = {}
        # Boolean flag to indicate if a term ends at this node
        self.is_terminal = False


class TermTrie:
    """Represents the term trie data structure."""

    def __init__(self) -> None:
        """Initialize the root node of the Trie.

        The root represents the empty prefix and is never terminal.
        """
        self.root = TrieNode()
        self._size = 0

    def insert(self, tokens: Iterable[str]) -> None:
        """Insert a token sequence into the Term Trie structure.

        Inserting an empty sequence is a no-op, and inserting a term that
        is already present has no observable effect.

        Args:
            tokens (Iterable[str]): The lowercased tokens of the term.

        """
        node = self.root
        for token in tokens:
            # If the token is not already a child, add a new TrieNode
            child = node.children.get(token)
            if child is None:
                child = TrieNode()
                node.children[token] = child
            # Move to the child node
            node = child

        if node is self.root:
            return

        # Mark the end of the term
        if not node.is_terminal:
            node.is_terminal = True
            self._size += 1

    @staticmethod
    def lookup(node: TrieNode, token: str) -> Optional[TrieNode]:
        """Return the child of `node` labeled by `token`, if any.

        Args:
            node (TrieNode): The node to descend from.
            token (str): The lowercased edge label.

        Returns:
            Optional[TrieNode]: The child node, or None when absent.

        """
        return node.children.get(token)

    def contains(self, tokens: Iterable[str]) -> bool:
        """Check for the existence of a complete term in the Term Trie.

        Args:
            tokens (Iterable[str]): The lowercased tokens of the term.

        Returns:
            bool: True if the exact token sequence was inserted as a
            complete term, False otherwise.

        """
        node = self.root
        for token in tokens:
            child = self.lookup(node, token)
            # If the token is not found, the term does not exist
            if child is None:
                return False
            node = child
        return node.is_terminal

    def is_empty(self) -> bool:
        """Return True when no term has been inserted yet."""
        return not self.root.children

    def __len__(self) -> int:
        """Return the number of distinct terms stored in the trie."""
        return self._size
