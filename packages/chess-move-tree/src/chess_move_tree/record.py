from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

from .navigation import STARTING_FEN, get_node_at_path
from .paths import is_well_formed_path, path_from_string, path_to_string
from .types import StudyGameState


def _err(prefix: str, msg: str) -> ValueError:
    return ValueError(f"{prefix}: {msg}")


def new_game_state(starting_fen: str | None = None) -> StudyGameState:
    fen = starting_fen or STARTING_FEN
    return {
        "position": fen,
        "startingPosition": fen,
        "moveTree": [],
        "rootBranches": [],
        "currentPath": [],
        "isFlipped": False,
        "comments": {},
    }


def _check_move(prefix: str, move: Any) -> None:
    if not isinstance(move, Mapping):
        raise _err(f"{prefix}.move", "expected mapping")
    for k in ("from", "to", "san"):
        v = move.get(k)
        if not isinstance(v, str) or not v:
            raise _err(f"{prefix}.move.{k}", "expected non-empty str")


def _check_sequences(prefix: str, sequences: Any) -> None:
    if not isinstance(sequences, list):
        raise _err(prefix, "expected list of branch sequences")
    for b, sequence in enumerate(sequences):
        if not isinstance(sequence, list) or not sequence:
            raise _err(f"{prefix}[{b}]", "expected non-empty list of MoveNode")
        _check_nodes(f"{prefix}[{b}]", sequence)


def _check_nodes(prefix: str, nodes: Any) -> None:
    if not isinstance(nodes, list):
        raise _err(prefix, "expected list of MoveNode")
    for i, node in enumerate(nodes):
        if not isinstance(node, Mapping):
            raise _err(f"{prefix}[{i}]", "expected mapping")
        _check_move(f"{prefix}[{i}]", node.get("move"))
        _check_sequences(f"{prefix}[{i}].branches", node.get("branches"))


def validate_game_state(state: Mapping[str, Any]) -> None:
    """Soft validation for a persisted study record.

    Raises ValueError with a human-readable message on schema/invariant violations.
    """
    if not isinstance(state, Mapping):
        raise _err("StudyGameState", "expected a mapping/dict")

    for k in ("position", "moveTree", "rootBranches", "currentPath", "isFlipped", "comments"):
        if k not in state:
            raise _err("StudyGameState", f"missing required key {k!r}")

    for k in ("position", "startingPosition"):
        if k in state and (not isinstance(state[k], str) or not state[k]):
            raise _err(f"StudyGameState.{k}", "expected non-empty FEN str")

    if not isinstance(state["isFlipped"], bool):
        raise _err("StudyGameState.isFlipped", "expected bool")

    _check_nodes("StudyGameState.moveTree", state["moveTree"])
    _check_sequences("StudyGameState.rootBranches", state["rootBranches"])

    path = state["currentPath"]
    if not isinstance(path, list) or not is_well_formed_path(path):
        raise _err("StudyGameState.currentPath", f"malformed path {path!r}")
    if path and get_node_at_path(state["moveTree"], state["rootBranches"], path) is None:
        raise _err("StudyGameState.currentPath", f"path {path!r} does not resolve")

    comments = state["comments"]
    if not isinstance(comments, Mapping):
        raise _err("StudyGameState.comments", "expected mapping key -> text")
    for key, text in comments.items():
        if not isinstance(key, str) or not isinstance(text, str):
            raise _err("StudyGameState.comments", "keys and texts must be str")
        try:
            parsed = path_from_string(key)
        except ValueError as e:
            raise _err("StudyGameState.comments", str(e)) from e
        if path_to_string(parsed) != key:
            raise _err("StudyGameState.comments", f"non-canonical key {key!r}")

    opening = state.get("opening")
    if opening is not None:
        if not isinstance(opening, Mapping) or not all(
            isinstance(opening.get(k), str) for k in ("name", "eco")
        ):
            raise _err("StudyGameState.opening", "expected {name: str, eco: str}")


def dump_game_state(state: StudyGameState) -> str:
    return json.dumps(state, ensure_ascii=False)


def load_game_state(text: str) -> StudyGameState:
    """Parse and validate a persisted record; fills ``startingPosition`` from ``position``."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise _err("StudyGameState", f"invalid JSON: {e}") from e
    validate_game_state(data)
    data.setdefault("startingPosition", data["position"])
    return data
