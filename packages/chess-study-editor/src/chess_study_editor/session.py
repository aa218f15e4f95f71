from __future__ import annotations

import copy
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from chess_move_tree import (
    ChessMove,
    ChessOracle,
    IllegalMoveError,
    MovePath,
    MoveRequest,
    PythonChessOracle,
    StudyGameState,
    add_move_to_tree,
    continuation_matches,
    find_matching_branch_at_path,
    get_comment,
    get_comment_key,
    get_last_path_in_line,
    get_next_path,
    get_previous_path,
    is_at_end_of_path,
    load_position_from_path,
    new_game_state,
    remove_last_move,
    set_comment,
    validate_game_state,
)

logger = logging.getLogger(__name__)

_CHECK_MARKS = "+#!?"


@dataclass(frozen=True, slots=True)
class StudyOptions:
    starting_fen: str | None = None
    allow_undo: bool = True
    auto_promotion: str = "q"


def _opts(options: dict[str, Any] | StudyOptions | None) -> StudyOptions:
    if isinstance(options, StudyOptions):
        return options
    if not options:
        return StudyOptions()
    return StudyOptions(
        starting_fen=options.get("starting_fen") or None,
        allow_undo=bool(options.get("allow_undo", True)),
        auto_promotion=str(options.get("auto_promotion") or "q").lower(),
    )


class StudySession:
    """One study being edited: the record plus an oracle kept at the current path.

    Tree mutations run on copies that replace the record's tree only once
    they succeed. A session is meant for a single editor; callers sharing a
    study must serialize calls themselves.
    """

    def __init__(
        self,
        state: StudyGameState | None = None,
        options: dict[str, Any] | StudyOptions | None = None,
        oracle: ChessOracle | None = None,
    ) -> None:
        self.options = _opts(options)
        if state is None:
            state = new_game_state(self.options.starting_fen)
        validate_game_state(state)
        state.setdefault("startingPosition", state["position"])
        self.state = state
        self.oracle = oracle or PythonChessOracle()
        self.navigate_to_path(state["currentPath"])

    @property
    def current_path(self) -> MovePath:
        return list(self.state["currentPath"])

    @property
    def position(self) -> str:
        return self.state["position"]

    @property
    def starting_position(self) -> str:
        return self.state["startingPosition"]

    @property
    def comment(self) -> str:
        return get_comment(self.state["comments"], self.state["currentPath"])

    def _load(self, path: Sequence[int]) -> str:
        return load_position_from_path(
            self.oracle,
            self.state["moveTree"],
            self.state["rootBranches"],
            path,
            self.starting_position,
        )

    def navigate_to_path(self, path: Sequence[int]) -> str:
        fen = self._load(path)
        self.state["currentPath"] = list(path)
        self.state["position"] = fen
        return fen

    def go_to_start(self) -> None:
        self.navigate_to_path([])

    def go_to_previous(self) -> bool:
        if not self.state["currentPath"]:
            return False
        self.navigate_to_path(get_previous_path(self.state["currentPath"]))
        return True

    def go_to_next(self) -> bool:
        path = get_next_path(self.state["moveTree"], self.state["rootBranches"], self.state["currentPath"])
        if path is None:
            return False
        self.navigate_to_path(path)
        return True

    def go_to_end(self) -> bool:
        path = get_last_path_in_line(
            self.state["moveTree"], self.state["rootBranches"], self.state["currentPath"]
        )
        if path is None or path == self.state["currentPath"]:
            return False
        self.navigate_to_path(path)
        return True

    def _with_promotion(self, request: MoveRequest) -> MoveRequest:
        if request.get("promotion"):
            return request
        for legal in self.oracle.legal_moves():
            if legal["from"] == request.get("from") and legal["to"] == request.get("to"):
                if legal.get("promotion"):
                    return {**request, "promotion": self.options.auto_promotion}  # type: ignore[typeddict-item]
                break
        return request

    def make_move(self, request: MoveRequest) -> MovePath:
        """Play ``request`` from the current position and return the new current path.

        Follows an existing continuation or branch when the move is already in
        the tree, otherwise inserts it. Raises IllegalMoveError for illegal
        moves and ReplayError when the current path no longer replays.
        """
        tree, root_branches = self.state["moveTree"], self.state["rootBranches"]
        path = self.state["currentPath"]

        self._load(path)
        request = self._with_promotion(request)
        try:
            move = self.oracle.make_move(request)
        except IllegalMoveError:
            logger.warning("Rejected move %r at path %r", request, path)
            raise

        # Match on what the oracle played: it normalizes promotion letters.
        played = self._request_of(move)
        existing = continuation_matches(tree, root_branches, path, played)
        if existing is None:
            existing = find_matching_branch_at_path(tree, root_branches, path, played)
        if existing is not None:
            self.navigate_to_path(existing)
            return existing

        return self._insert(move)

    def make_text_move(self, text: str) -> MovePath:
        """Play a move typed as SAN (``Nf3``) or coordinates (``g1f3``)."""
        wanted = text.strip().rstrip(_CHECK_MARKS)
        self._load(self.state["currentPath"])
        for legal in self.oracle.legal_moves():
            if wanted in (legal["san"].rstrip(_CHECK_MARKS), legal["lan"]):
                return self.make_move(self._request_of(legal))
        logger.warning("Rejected move text %r at path %r", text, self.state["currentPath"])
        raise IllegalMoveError(f"Illegal move {text!r} in position {self.oracle.fen()}")

    @staticmethod
    def _request_of(move: ChessMove) -> MoveRequest:
        request: MoveRequest = {"from": move["from"], "to": move["to"]}
        if move.get("promotion"):
            request["promotion"] = move["promotion"]
        return request

    def _insert(self, move: ChessMove) -> MovePath:
        tree = copy.deepcopy(self.state["moveTree"])
        root_branches = copy.deepcopy(self.state["rootBranches"])
        result = add_move_to_tree(tree, root_branches, self.state["currentPath"], move)
        self.state["moveTree"] = tree
        self.state["rootBranches"] = root_branches
        self.state["currentPath"] = result.new_path
        self.state["position"] = move["after"]
        logger.debug(
            "Inserted %s at %r (new branch: %s)", move["san"], result.new_path, result.is_new_branch
        )
        return result.new_path

    def undo_move(self) -> bool:
        """Delete the current move when it ends its line; False when not allowed."""
        path = self.state["currentPath"]
        if not self.options.allow_undo or not path:
            return False
        if not is_at_end_of_path(self.state["moveTree"], self.state["rootBranches"], path):
            return False

        tree = copy.deepcopy(self.state["moveTree"])
        root_branches = copy.deepcopy(self.state["rootBranches"])
        new_path = remove_last_move(tree, root_branches, path)
        self.state["moveTree"] = tree
        self.state["rootBranches"] = root_branches
        self.state["comments"].pop(get_comment_key(path), None)
        self.navigate_to_path(new_path)
        return True

    def set_comment(self, text: str) -> None:
        set_comment(self.state["comments"], self.state["currentPath"], text)

    def flip(self) -> bool:
        self.state["isFlipped"] = not self.state["isFlipped"]
        return self.state["isFlipped"]

    def to_record(self) -> StudyGameState:
        return copy.deepcopy(self.state)
