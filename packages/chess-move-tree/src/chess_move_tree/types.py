from __future__ import annotations

from typing import Literal, TypedDict

from typing_extensions import NotRequired


ColorCode = Literal["w", "b"]


ChessMove = TypedDict(
    "ChessMove",
    {
        "from": str,
        "to": str,
        "promotion": NotRequired[str],
        "san": str,
        "lan": str,
        "before": str,  # FEN before the move
        "after": str,  # FEN after the move
        "captured": NotRequired[str],
        "flags": str,
        "piece": str,
        "color": ColorCode,
    },
)


MoveRequest = TypedDict(
    "MoveRequest",
    {
        "from": str,
        "to": str,
        "promotion": NotRequired[str],
    },
)


class MoveNode(TypedDict):
    move: ChessMove
    # Alternative continuations from the position *after* `move`.
    branches: list[list[MoveNode]]


BranchSequence = list[MoveNode]
MovePath = list[int]


class Opening(TypedDict):
    name: str
    eco: str


class StudyGameState(TypedDict):
    position: str
    startingPosition: str
    moveTree: list[MoveNode]
    rootBranches: list[BranchSequence]
    currentPath: MovePath
    isFlipped: bool
    comments: dict[str, str]  # pathToString(path) -> text
    opening: NotRequired[Opening]
