from __future__ import annotations

from collections.abc import Sequence


class MoveTreeError(Exception):
    """Base class for move-tree failures."""


class InvalidPathError(MoveTreeError, ValueError):
    """A mutation or replay target does not resolve to a node."""

    def __init__(self, path: Sequence[int], msg: str = "node not found") -> None:
        self.path = list(path)
        super().__init__(f"Invalid path {self.path!r}: {msg}")


class ReplayError(MoveTreeError, RuntimeError):
    """A stored move does not apply to the replayed position.

    This means the persisted tree and its positions are out of sync.
    """

    def __init__(self, path: Sequence[int], ply: int, san: str) -> None:
        self.path = list(path)
        self.ply = ply
        self.san = san
        super().__init__(
            f"Replay failed at ply {ply} ({san!r}) while loading path {self.path!r}"
        )


class IllegalMoveError(MoveTreeError, ValueError):
    """The oracle rejected a move request for the current position."""
