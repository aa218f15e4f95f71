from __future__ import annotations

import io
import logging
from dataclasses import dataclass

import chess.pgn

from chess_move_tree import (
    ROOT_PATH_INDEX,
    BranchSequence,
    MoveNode,
    StudyGameState,
    new_game_state,
    path_to_string,
    to_chess_move,
    validate_game_state,
)

logger = logging.getLogger(__name__)


def _join_comment(node: chess.pgn.ChildNode) -> str:
    parts = [str(getattr(node, "starting_comment", "") or "").strip(), str(node.comment or "").strip()]
    return " ".join(p for p in parts if p)


@dataclass(frozen=True, slots=True)
class StudyTreeBuilder:
    """PGN -> study record.

    PGN variations are alternatives to the move they follow, while study
    branches hang on the move before it: the alternatives to move ``k`` land
    on node ``k - 1``, or in the root branches when ``k`` is the first move.
    """

    def build(self, pgn: str) -> StudyGameState:
        game = chess.pgn.read_game(io.StringIO(pgn))
        if game is None:
            raise ValueError("PGN: no game found")
        if game.errors:
            raise ValueError(f"PGN: {game.errors[0]}")

        state = new_game_state(game.board().fen())
        comments = state["comments"]

        def follow(first: chess.pgn.ChildNode, sequence: BranchSequence, prefix: list[int]) -> None:
            cur = first
            while True:
                node: MoveNode = {
                    "move": to_chess_move(cur.parent.board(), cur.move),
                    "branches": [],
                }
                sequence.append(node)
                path = [*prefix, len(sequence) - 1]

                text = _join_comment(cur)
                if text:
                    comments[path_to_string(path)] = text

                if not cur.variations:
                    return
                main, *alternatives = cur.variations
                for alt in alternatives:
                    branch: BranchSequence = []
                    node["branches"].append(branch)
                    follow(alt, branch, [*path, len(node["branches"]) - 1])
                cur = main

        if game.variations:
            main, *alternatives = game.variations
            for alt in alternatives:
                branch: BranchSequence = []
                state["rootBranches"].append(branch)
                follow(alt, branch, [ROOT_PATH_INDEX, len(state["rootBranches"]) - 1])
            follow(main, state["moveTree"], [])

        headers = game.headers
        if headers.get("Opening") and headers.get("ECO"):
            state["opening"] = {"name": headers["Opening"], "eco": headers["ECO"]}

        validate_game_state(state)
        logger.debug(
            "Built study: %d main line moves, %d root branches",
            len(state["moveTree"]),
            len(state["rootBranches"]),
        )
        return state
