"""Prefix trie over Unicode code points with pruning deletion."""

from __future__ import annotations

import logging

log = logging.getLogger("trie")


class InvalidEncoding(ValueError):
    """Raised by :meth:`Trie.put` when its input is not well-formed text."""


def _decode(s) -> str:
    """
    Normalize input to a well-formed ``str``.

    ``str`` values must be encodable as UTF-8 (no lone surrogates);
    bytes-like values must decode as strict UTF-8.

    Raises:
        UnicodeError: If the input is malformed.
        TypeError: If the input is neither text nor bytes.
    """
    if isinstance(s, str):
        s.encode("utf-8")
        return s
    if isinstance(s, (bytes, bytearray, memoryview)):
        return bytes(s).decode("utf-8")
    raise TypeError(f"expected str or bytes, got {type(s).__name__}")


def _decode_or_none(s) -> str | None:
    try:
        return _decode(s)
    except UnicodeError:
        return None


class TrieNode:
    """
    A single node in the trie.

    Attributes:
        children (dict[str, TrieNode]):
            Mapping from a code point to the owned child node.
        is_terminal (bool):
            True if an inserted string ends exactly at this node.
    """
    __slots__ = ("children", "is_terminal")

    def __init__(self):
        self.children: dict[str, TrieNode] = {}
        self.is_terminal: bool = False


class Trie:
    """
    A trie (prefix tree) supporting insertion, membership and prefix
    checks, and deletion that prunes every node no other string needs.

    Nodes hold no parent references. Deletion finds the nearest
    ancestor that must survive during a single downward walk.
    """

    def __init__(self):
        """Initialize an empty trie with a non-terminal root."""
        self.root = TrieNode()

    # -------------------------------------------------------------
    # Core Operations
    # -------------------------------------------------------------

    def put(self, s) -> None:
        """
        Insert a string into the trie.

        Args:
            s (str | bytes): The string to insert. Bytes are read as UTF-8.

        Raises:
            InvalidEncoding: If ``s`` is not well-formed text. The trie
                is left untouched.
        """
        try:
            text = _decode(s)
        except UnicodeError as exc:
            log.warning("Rejected malformed input: %s", exc)
            raise InvalidEncoding(f"invalid UTF-8 in {s!r}") from exc

        node = self.root
        for ch in text:
            child = node.children.get(ch)
            if child is None:
                child = node.children[ch] = TrieNode()
            node = child
        node.is_terminal = True

    def has(self, s) -> bool:
        """
        Determine whether a string was inserted (and not deleted).

        Args:
            s (str | bytes): The string to look up.

        Returns:
            bool: True if the string is present. False if it is absent,
                only a prefix of something else, or malformed.
        """
        node = self._walk(s)
        return node is not None and node.is_terminal

    def has_prefix(self, s) -> bool:
        """
        Check whether any inserted string begins with ``s``.

        The empty prefix is always present, even in an empty trie.

        Args:
            s (str | bytes): The prefix to test.

        Returns:
            bool: True if the walk consumes all of ``s``. False if it
                falls off the tree or ``s`` is malformed.
        """
        return self._walk(s) is not None

    def __contains__(self, s) -> bool:
        return self.has(s)

    def delete(self, s) -> None:
        """
        Delete a string, pruning the nodes that only it was using.

        Deleting an absent, malformed or empty string is a no-op.

        Args:
            s (str | bytes): The string to delete.

        Raises:
            RuntimeError: If the prune-to-root branch finds the root
                branching, which would mean the tree was already corrupt.
        """
        text = _decode_or_none(s)
        if not text:
            return

        # Deepest node on the path that is terminal or branches, and the
        # code point leading out of it towards ``text``.
        last_needed: TrieNode | None = None
        last_needed_ch = ""

        node = self.root
        for ch in text:
            if node.is_terminal or len(node.children) > 1:
                last_needed, last_needed_ch = node, ch
            node = node.children.get(ch)
            if node is None:
                return

        if not node.is_terminal:
            return

        if node.children:
            node.is_terminal = False
            log.debug("Unmarked %r, still a prefix of other strings", text)
        elif last_needed is None:
            if len(self.root.children) != 1:
                raise RuntimeError(
                    f"internal error: root has {len(self.root.children)} "
                    "children while pruning to root"
                )
            self.root.children.clear()
            log.debug("Pruned %r back to the root", text)
        else:
            del last_needed.children[last_needed_ch]
            log.debug("Pruned %r below code point %r", text, last_needed_ch)

    # -------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------

    def _walk(self, s) -> TrieNode | None:
        """Return the node spelled by ``s``, or None if absent or malformed."""
        text = _decode_or_none(s)
        if text is None:
            return None
        node = self.root
        for ch in text:
            node = node.children.get(ch)
            if node is None:
                return None
        return node
