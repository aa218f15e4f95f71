"""Comment store helpers.

Comments live in a flat ``{path_to_string(path): text}`` mapping next to the
tree, not inside nodes. Keys whose node has been removed stay behind as
orphans; nothing here prunes them.
"""

from __future__ import annotations

from collections.abc import Mapping, MutableMapping, Sequence

from .errors import InvalidPathError
from .navigation import get_node_at_path
from .paths import path_from_string, path_to_string
from .types import BranchSequence, MoveNode


def get_comment_key(path: Sequence[int]) -> str:
    return path_to_string(path)


def get_comment(comments: Mapping[str, str], path: Sequence[int]) -> str:
    if not path:
        return ""
    return comments.get(get_comment_key(path), "")


def set_comment(comments: MutableMapping[str, str], path: Sequence[int], text: str) -> None:
    """Store ``text`` for ``path``; blank text removes the entry."""
    if not path:
        raise InvalidPathError(path, "the starting position takes no comment")
    key = get_comment_key(path)
    if text.strip() == "":
        comments.pop(key, None)
    else:
        comments[key] = text


def orphaned_comment_keys(
    tree: Sequence[MoveNode],
    root_branches: Sequence[BranchSequence],
    comments: Mapping[str, str],
) -> list[str]:
    """Keys that no longer address a node (or do not parse as paths)."""
    out: list[str] = []
    for key in comments:
        try:
            path = path_from_string(key)
        except ValueError:
            out.append(key)
            continue
        if get_node_at_path(tree, root_branches, path) is None:
            out.append(key)
    return out
