"""Path addressing for move trees.

A path is a list of ints. The head is either a main-line index or
``ROOT_PATH_INDEX`` for variations that replace the first main-line move; the
tail is a sequence of ``(branch_index, move_index)`` pairs, one per nesting
level::

    []              starting position
    [5]             main-line move 5
    [5, 0, 2]       move 2 of branch 0 stored on main-line move 5
    [5, 0, 2, 1, 0] move 0 of branch 1 stored on the node above
    [-1, 0, 1]      move 1 of root branch 0

Branches stored on a node start *after* that node's move.
"""

from __future__ import annotations

from collections.abc import Sequence

from .types import BranchSequence, ChessMove, MoveNode, MovePath

ROOT_PATH_INDEX = -1
PATH_DELIMITER = "-"


def is_root_branch_path(path: Sequence[int]) -> bool:
    return len(path) > 0 and path[0] == ROOT_PATH_INDEX


def is_main_line_path(path: Sequence[int]) -> bool:
    return len(path) == 1 and path[0] >= 0


def is_well_formed_path(path: Sequence[int]) -> bool:
    """Shape check only: valid head, ints throughout, complete pairs."""
    if not path:
        return True
    if any(isinstance(i, bool) or not isinstance(i, int) for i in path):
        return False
    if path[0] < ROOT_PATH_INDEX:
        return False
    return (len(path) - 1) % 2 == 0


def path_to_string(path: Sequence[int]) -> str:
    """Comment-store key for ``path``. The empty path maps to ``""``."""
    return PATH_DELIMITER.join(str(i) for i in path)


def path_from_string(key: str) -> MovePath:
    """Inverse of :func:`path_to_string`.

    Root paths serialize as ``"-1-0-2"``: the leading delimiter is the sign of
    the root head, not a separator.
    """
    if key == "":
        return []
    parts = key.split(PATH_DELIMITER)
    if parts[0] == "":
        if len(parts) < 2:
            raise ValueError(f"Invalid path key: {key!r}")
        parts = [PATH_DELIMITER + parts[1], *parts[2:]]
    try:
        return [int(p) for p in parts]
    except ValueError as e:
        raise ValueError(f"Invalid path key: {key!r}") from e


def get_path_depth(path: Sequence[int]) -> int:
    """Number of nested branch levels, for indentation. Odd tails truncate."""
    if not path:
        return 0
    return (len(path) - 1) // 2


def get_main_line_moves(tree: Sequence[MoveNode]) -> list[ChessMove]:
    return [node["move"] for node in tree]


def _descend(
    branches: Sequence[BranchSequence], segments: Sequence[int]
) -> tuple[BranchSequence, int, MoveNode] | None:
    """Walk (branch, move) pairs; return the last (sequence, index, node)."""
    if not segments or len(segments) % 2:
        return None

    found: tuple[BranchSequence, int, MoveNode] | None = None
    for i in range(0, len(segments), 2):
        branch_index, move_index = segments[i], segments[i + 1]
        if branch_index < 0 or branch_index >= len(branches):
            return None
        sequence = branches[branch_index]
        if move_index < 0 or move_index >= len(sequence):
            return None
        node = sequence[move_index]
        found = (sequence, move_index, node)
        branches = node["branches"]
    return found


def _resolve_node(
    tree: Sequence[MoveNode],
    root_branches: Sequence[BranchSequence],
    path: Sequence[int],
) -> MoveNode | None:
    if not path or not is_well_formed_path(path):
        return None

    if is_root_branch_path(path):
        found = _descend(root_branches, path[1:])
        return found[2] if found else None

    main_index = path[0]
    if main_index >= len(tree):
        return None
    if len(path) == 1:
        return tree[main_index]
    found = _descend(tree[main_index]["branches"], path[1:])
    return found[2] if found else None


def get_absolute_move_index(
    tree: Sequence[MoveNode],
    root_branches: Sequence[BranchSequence],
    path: Sequence[int],
) -> int:
    """0-based count of moves played to reach ``path``; -1 at the start or if unresolvable."""
    if not path or not is_well_formed_path(path):
        return -1

    if is_root_branch_path(path):
        branches: Sequence[BranchSequence] = root_branches
        absolute = -1
    else:
        main_index = path[0]
        if main_index >= len(tree):
            return -1
        branches = tree[main_index]["branches"]
        absolute = main_index

    for i in range(1, len(path), 2):
        branch_index, move_index = path[i], path[i + 1]
        if branch_index < 0 or branch_index >= len(branches):
            return -1
        sequence = branches[branch_index]
        if move_index < 0 or move_index >= len(sequence):
            return -1
        absolute += move_index + 1
        branches = sequence[move_index]["branches"]

    return absolute


def get_branches_at_path(
    tree: Sequence[MoveNode],
    root_branches: Sequence[BranchSequence],
    path: Sequence[int],
) -> Sequence[BranchSequence]:
    """Branches the UI offers as alternatives from the position at ``path``."""
    if not path or list(path) == [ROOT_PATH_INDEX]:
        return root_branches
    node = _resolve_node(tree, root_branches, path)
    return node["branches"] if node is not None else []
