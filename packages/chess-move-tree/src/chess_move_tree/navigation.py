from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING, NamedTuple

from .errors import InvalidPathError, ReplayError
from .paths import _descend, _resolve_node, is_root_branch_path, is_well_formed_path
from .types import BranchSequence, ChessMove, MoveNode

if TYPE_CHECKING:
    from .replay import ChessOracle

logger = logging.getLogger(__name__)

STARTING_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"


class BranchContext(NamedTuple):
    sequence: BranchSequence
    move_index: int
    node: MoveNode

    @property
    def is_last(self) -> bool:
        return self.move_index == len(self.sequence) - 1


def traverse_branch_segments(
    branches: Sequence[BranchSequence], segments: Sequence[int]
) -> BranchContext | None:
    found = _descend(branches, segments)
    return BranchContext(*found) if found else None


def get_branch_context_for_path(
    tree: Sequence[MoveNode],
    root_branches: Sequence[BranchSequence],
    path: Sequence[int],
) -> BranchContext | None:
    """Owning sequence of an in-branch node; None for main-line or invalid paths."""
    if not is_well_formed_path(path):
        return None
    if is_root_branch_path(path):
        return traverse_branch_segments(root_branches, path[1:])
    if len(path) < 3:
        return None
    main_index = path[0]
    if main_index >= len(tree):
        return None
    return traverse_branch_segments(tree[main_index]["branches"], path[1:])


def get_node_at_path(
    tree: Sequence[MoveNode],
    root_branches: Sequence[BranchSequence],
    path: Sequence[int],
) -> MoveNode | None:
    return _resolve_node(tree, root_branches, path)


def _append_branch_moves(
    branches: Sequence[BranchSequence],
    segments: Sequence[int],
    moves: list[ChessMove],
) -> None:
    for i in range(0, len(segments), 2):
        sequence = branches[segments[i]]
        move_index = segments[i + 1]
        moves.extend(node["move"] for node in sequence[: move_index + 1])
        branches = sequence[move_index]["branches"]


def get_moves_along_path(
    tree: Sequence[MoveNode],
    root_branches: Sequence[BranchSequence],
    path: Sequence[int],
) -> list[ChessMove]:
    """Moves to replay from the start position to reach ``path``.

    A branch stored on ``tree[i]`` starts after move ``i``, so an in-branch
    path replays the main line through ``i`` inclusive before the branch
    segments. Unresolvable paths yield ``[]``.
    """
    if not path or get_node_at_path(tree, root_branches, path) is None:
        return []

    moves: list[ChessMove] = []
    if is_root_branch_path(path):
        _append_branch_moves(root_branches, path[1:], moves)
        return moves

    main_index = path[0]
    moves.extend(node["move"] for node in tree[: main_index + 1])
    _append_branch_moves(tree[main_index]["branches"], path[1:], moves)
    return moves


def load_position_from_path(
    oracle: ChessOracle,
    tree: Sequence[MoveNode],
    root_branches: Sequence[BranchSequence],
    path: Sequence[int],
    starting_position: str | None = None,
) -> str:
    """Reset ``oracle`` to the start and replay the moves leading to ``path``.

    Returns the resulting FEN. Raises InvalidPathError for unresolvable paths
    and ReplayError when a stored move does not apply.
    """
    position = starting_position or STARTING_FEN
    try:
        oracle.reset(position)
    except ValueError as e:
        logger.warning("Failed to load starting position %r, using default: %s", position, e)
        oracle.reset(STARTING_FEN)

    if path and get_node_at_path(tree, root_branches, path) is None:
        raise InvalidPathError(path)

    for ply, move in enumerate(get_moves_along_path(tree, root_branches, path), start=1):
        if not oracle.apply(move):
            raise ReplayError(path, ply, move.get("san", "?"))
    return oracle.fen()
