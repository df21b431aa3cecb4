"""Prefix-trie dispatch of byte sequences to editing actions.

Key presses arrive as byte sequences of varying length: a printable
character is one byte, ``Ctrl-U`` is one control byte, and the left arrow
is ``ESC [ D``. Sequences are stored in a trie so that a short sequence can
be a complete command and, at the same time, a prefix of a longer one.

Matching is longest-match-wins. Bytes are consumed while they extend a
registered path; a leaf fires immediately. When the next byte does not
extend the path, the deepest action seen on the path fires and every byte
read after it is pushed back to the source, so nothing typed is lost. If
no node on the path carries an action, the default handler receives the
first byte of the path and the rest is pushed back.
"""

from __future__ import annotations

import logging
from typing import Callable

from pi.readline.errors import UnknownCommandError
from pi.readline.input import ByteSource

logger = logging.getLogger(__name__)

Action = Callable[[], None]
DefaultAction = Callable[[int], None]


class _Node:
    __slots__ = ("children", "action")

    def __init__(self) -> None:
        self.children: dict[int, _Node] = {}
        self.action: Action | None = None

    @property
    def is_leaf(self) -> bool:
        return not self.children


class Dispatcher:
    """Routes bytes read from a :class:`ByteSource` to registered actions."""

    def __init__(self) -> None:
        self._root = _Node()
        self._default: DefaultAction | None = None
        self._stopped: bool = False
        self._at_eof: bool = False
        self._current_byte: int | None = None
        self._commands_run: int = 0

    # -- configuration ------------------------------------------------------

    def register(self, sequence: bytes, action: Action) -> None:
        """Bind *sequence* to *action*, replacing any previous binding."""
        if not sequence:
            raise ValueError("Cannot register an empty byte sequence")
        node = self._root
        for byte in sequence:
            node = node.children.setdefault(byte, _Node())
        if node.action is not None:
            logger.debug("Rebinding command sequence %r", bytes(sequence))
        node.action = action

    def set_default(self, action: DefaultAction | None) -> None:
        """Handler for bytes that do not start any registered sequence."""
        self._default = action

    def lookup(self, sequence: bytes) -> Action | None:
        """Return the action bound to exactly *sequence*, if any."""
        node = self._root
        for byte in sequence:
            node = node.children.get(byte)
            if node is None:
                return None
        return node.action

    # -- state --------------------------------------------------------------

    @property
    def stopped(self) -> bool:
        return self._stopped

    @property
    def at_eof(self) -> bool:
        return self._at_eof

    @property
    def current_byte(self) -> int | None:
        """The byte that completed the command being executed."""
        return self._current_byte

    @property
    def commands_run(self) -> int:
        """Commands executed so far by the current or last :meth:`run`."""
        return self._commands_run

    def stop(self) -> None:
        self._stopped = True

    # -- dispatch loop ------------------------------------------------------

    def run(self, source: ByteSource) -> None:
        """Read and execute commands until :meth:`stop` or end of input."""
        self._stopped = False
        self._at_eof = False
        self._commands_run = 0

        node = self._root
        path = bytearray()
        # Deepest action on the current path and the path length it matched.
        matched: Action | None = None
        matched_len = 0

        while not self._stopped:
            byte = source.read_byte()

            if byte is None:
                if not path:
                    self._at_eof = True
                    break
                # Settle the partial sequence; pushed-back bytes are re-read
                # and the loop reaches end of input again with an empty path.
                self._resolve(source, path, matched, matched_len)
                node, path, matched, matched_len = self._root, bytearray(), None, 0
                continue

            child = node.children.get(byte)
            if child is not None:
                path.append(byte)
                node = child
                if child.action is not None:
                    matched, matched_len = child.action, len(path)
                if child.is_leaf:
                    self._fire(child.action, byte)
                    node, path, matched, matched_len = self._root, bytearray(), None, 0
                continue

            if not path:
                self._fire_default(bytes((byte,)))
                continue

            source.unget(byte)
            self._resolve(source, path, matched, matched_len)
            node, path, matched, matched_len = self._root, bytearray(), None, 0

    def _resolve(
        self,
        source: ByteSource,
        path: bytearray,
        matched: Action | None,
        matched_len: int,
    ) -> None:
        """Fire the best match for an abandoned *path* and push back the rest."""
        if matched is not None:
            rest = bytes(path[matched_len:])
            if rest:
                source.unread(rest)
            self._fire(matched, path[matched_len - 1])
            return

        if self._default is None:
            pending = source.pending
            raise UnknownCommandError(bytes(path) + pending[:1])

        rest = bytes(path[1:])
        if rest:
            source.unread(rest)
        self._fire_default(bytes(path[:1]))

    def _fire(self, action: Action | None, byte: int) -> None:
        self._current_byte = byte
        self._commands_run += 1
        if action is not None:
            action()

    def _fire_default(self, sequence: bytes) -> None:
        byte = sequence[0]
        self._current_byte = byte
        self._commands_run += 1
        if self._default is None:
            raise UnknownCommandError(sequence)
        self._default(byte)
