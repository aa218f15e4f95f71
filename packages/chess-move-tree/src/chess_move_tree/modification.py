"""Tree mutation.

Branches are stored on the node *after* which they start: a branch created
while standing on ``tree[1]`` goes into ``tree[1]["branches"]`` and is an
alternative to ``tree[2]``.
"""

from __future__ import annotations

import logging
from typing import NamedTuple

from .errors import InvalidPathError
from .navigation import get_branch_context_for_path
from .paths import ROOT_PATH_INDEX, is_root_branch_path, is_well_formed_path
from .types import BranchSequence, ChessMove, MoveNode, MovePath

logger = logging.getLogger(__name__)


class AddMoveResult(NamedTuple):
    new_path: MovePath
    is_new_branch: bool


def _new_node(move: ChessMove) -> MoveNode:
    return {"move": move, "branches": []}


def add_move_to_tree(
    tree: list[MoveNode],
    root_branches: list[BranchSequence],
    path: MovePath,
    move: ChessMove,
) -> AddMoveResult:
    """Insert ``move`` after the node at ``path``.

    Extends the sequence the node belongs to when the node is its last
    element, otherwise starts a new branch on the node. Raises
    InvalidPathError, without touching the tree, for unresolvable paths.
    """
    if not path:
        if not tree and not root_branches:
            tree.append(_new_node(move))
            return AddMoveResult([0], False)
        root_branches.append([_new_node(move)])
        logger.debug("New root branch %d", len(root_branches) - 1)
        return AddMoveResult([ROOT_PATH_INDEX, len(root_branches) - 1, 0], True)

    if not is_well_formed_path(path):
        raise InvalidPathError(path, "malformed path")

    if len(path) == 1 and not is_root_branch_path(path):
        main_index = path[0]
        if main_index >= len(tree):
            raise InvalidPathError(path, "main line index out of range")
        if main_index == len(tree) - 1:
            tree.append(_new_node(move))
            return AddMoveResult([len(tree) - 1], False)
        node = tree[main_index]
        node["branches"].append([_new_node(move)])
        logger.debug("New branch on main line move %d", main_index)
        return AddMoveResult([main_index, len(node["branches"]) - 1, 0], True)

    context = get_branch_context_for_path(tree, root_branches, path)
    if context is None:
        raise InvalidPathError(path)

    if context.is_last:
        context.sequence.append(_new_node(move))
        return AddMoveResult([*path[:-1], len(context.sequence) - 1], False)

    context.node["branches"].append([_new_node(move)])
    logger.debug("New branch at %r", path)
    return AddMoveResult([*path, len(context.node["branches"]) - 1, 0], True)


def remove_last_move(
    tree: list[MoveNode],
    root_branches: list[BranchSequence],
    path: MovePath,
) -> MovePath:
    """Remove the node at ``path`` if it ends its sequence; return the preceding path.

    A branch emptied by the removal is dropped from its owner, which shifts
    the indices of later sibling branches. Comment keys are not rewritten.
    """
    if not path:
        raise InvalidPathError(path, "nothing to remove at the starting position")
    if not is_well_formed_path(path):
        raise InvalidPathError(path, "malformed path")

    if len(path) == 1 and not is_root_branch_path(path):
        main_index = path[0]
        if main_index >= len(tree):
            raise InvalidPathError(path, "main line index out of range")
        if main_index != len(tree) - 1:
            raise InvalidPathError(path, "only the last move of a line can be removed")
        tree.pop()
        return [main_index - 1] if main_index > 0 else []

    context = get_branch_context_for_path(tree, root_branches, path)
    if context is None:
        raise InvalidPathError(path)
    if not context.is_last:
        raise InvalidPathError(path, "only the last move of a line can be removed")

    if context.move_index > 0:
        context.sequence.pop()
        return [*path[:-1], context.move_index - 1]

    # The branch empties: drop it and step back to its anchor.
    anchor = path[:-2]
    if anchor == [ROOT_PATH_INDEX]:
        owner = root_branches
        anchor = []
    elif len(anchor) == 1:
        owner = tree[anchor[0]]["branches"]
    else:
        anchor_context = get_branch_context_for_path(tree, root_branches, anchor)
        if anchor_context is None:
            raise InvalidPathError(path, "branch anchor not found")
        owner = anchor_context.node["branches"]
    del owner[path[-2]]
    logger.debug("Removed empty branch %d below %r", path[-2], anchor)
    return anchor
