"""Stepping a cursor path through the tree (previous/next/end, branch lookup)."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from .navigation import get_branch_context_for_path, get_node_at_path
from .paths import ROOT_PATH_INDEX, get_branches_at_path, is_root_branch_path
from .types import BranchSequence, MoveNode, MovePath


def is_at_end_of_path(
    tree: Sequence[MoveNode],
    root_branches: Sequence[BranchSequence],
    path: Sequence[int],
) -> bool:
    """True when a new move at ``path`` would extend rather than branch."""
    if not path:
        return not tree and not root_branches
    if len(path) == 1 and not is_root_branch_path(path):
        return path[0] == len(tree) - 1
    context = get_branch_context_for_path(tree, root_branches, path)
    return context is not None and context.is_last


def get_continuation_path(
    tree: Sequence[MoveNode],
    root_branches: Sequence[BranchSequence],
    path: Sequence[int],
) -> MovePath | None:
    """Next node in the same sequence, or None at its end."""
    if not path:
        return [0] if tree else None
    if len(path) == 1 and not is_root_branch_path(path):
        main_index = path[0]
        if main_index < 0 or main_index >= len(tree) - 1:
            return None
        return [main_index + 1]
    context = get_branch_context_for_path(tree, root_branches, path)
    if context is None or context.is_last:
        return None
    return [*path[:-1], context.move_index + 1]


def get_next_path(
    tree: Sequence[MoveNode],
    root_branches: Sequence[BranchSequence],
    path: Sequence[int],
) -> MovePath | None:
    continuation = get_continuation_path(tree, root_branches, path)
    if continuation is not None:
        return continuation
    if not path:
        return [ROOT_PATH_INDEX, 0, 0] if root_branches else None
    node = get_node_at_path(tree, root_branches, path)
    if node is not None and node["branches"]:
        return [*path, 0, 0]
    return None


def get_previous_path(path: Sequence[int]) -> MovePath:
    """One move back. The head of a branch steps back to its anchor node."""
    if not path:
        return []
    if len(path) == 1:
        return [path[0] - 1] if path[0] > 0 else []
    if path[-1] > 0:
        return [*path[:-1], path[-1] - 1]
    previous = list(path[:-2])
    if previous == [ROOT_PATH_INDEX]:
        return []
    return previous


def get_last_path_in_line(
    tree: Sequence[MoveNode],
    root_branches: Sequence[BranchSequence],
    path: Sequence[int],
) -> MovePath | None:
    """Last node of the sequence ``path`` sits in; from the start, the main line's end."""
    if not path or (len(path) == 1 and not is_root_branch_path(path)):
        return [len(tree) - 1] if tree else None
    context = get_branch_context_for_path(tree, root_branches, path)
    if context is None:
        return None
    return [*path[:-1], len(context.sequence) - 1]


def _same_move(move: Mapping[str, Any], request: Mapping[str, Any]) -> bool:
    return (
        move.get("from") == request.get("from")
        and move.get("to") == request.get("to")
        and (move.get("promotion") or "") == (request.get("promotion") or "")
    )


def find_matching_branch_at_path(
    tree: Sequence[MoveNode],
    root_branches: Sequence[BranchSequence],
    path: Sequence[int],
    request: Mapping[str, Any],
) -> MovePath | None:
    """Path to the first node of an existing branch that starts with ``request``."""
    for i, sequence in enumerate(get_branches_at_path(tree, root_branches, path)):
        if sequence and _same_move(sequence[0]["move"], request):
            head = [ROOT_PATH_INDEX] if not path else list(path)
            return [*head, i, 0]
    return None


def continuation_matches(
    tree: Sequence[MoveNode],
    root_branches: Sequence[BranchSequence],
    path: Sequence[int],
    request: Mapping[str, Any],
) -> MovePath | None:
    """The continuation path if its move is ``request``, else None."""
    continuation = get_continuation_path(tree, root_branches, path)
    if continuation is None:
        return None
    node = get_node_at_path(tree, root_branches, continuation)
    if node is not None and _same_move(node["move"], request):
        return continuation
    return None
