from __future__ import annotations

from collections.abc import Iterable
from typing import Any, Protocol

import chess

from .errors import IllegalMoveError
from .navigation import STARTING_FEN
from .types import ChessMove, MoveRequest


class ChessOracle(Protocol):
    """Black-box chess rules: the tree stores what this produces."""

    def reset(self, fen: str) -> None: ...

    def fen(self) -> str: ...

    def legal_moves(self) -> list[ChessMove]: ...

    def make_move(self, request: MoveRequest) -> ChessMove: ...

    def apply(self, move: ChessMove) -> bool: ...


def _flags(board: chess.Board, move: chess.Move) -> str:
    flags = ""
    if board.is_en_passant(move):
        flags += "e"
    elif board.is_capture(move):
        flags += "c"
    if move.promotion:
        flags += "p"
    if board.is_kingside_castling(move):
        flags += "k"
    elif board.is_queenside_castling(move):
        flags += "q"
    piece = board.piece_at(move.from_square)
    if (
        piece is not None
        and piece.piece_type == chess.PAWN
        and abs(chess.square_rank(move.to_square) - chess.square_rank(move.from_square)) == 2
    ):
        flags += "b"
    return flags or "n"


def to_chess_move(board: chess.Board, move: chess.Move) -> ChessMove:
    """Describe a legal ``move`` played from ``board`` (the position before it)."""
    piece = board.piece_at(move.from_square)
    if piece is None:
        raise IllegalMoveError(f"No piece on {chess.square_name(move.from_square)}")

    record: dict[str, Any] = {
        "from": chess.square_name(move.from_square),
        "to": chess.square_name(move.to_square),
        "san": board.san(move),
        "lan": move.uci(),
        "before": board.fen(),
        "flags": _flags(board, move),
        "piece": chess.piece_symbol(piece.piece_type),
        "color": "w" if piece.color == chess.WHITE else "b",
    }
    if move.promotion:
        record["promotion"] = chess.piece_symbol(move.promotion)
    if board.is_en_passant(move):
        record["captured"] = "p"
    else:
        captured = board.piece_at(move.to_square)
        if captured is not None and board.is_capture(move):
            record["captured"] = chess.piece_symbol(captured.piece_type)

    after = board.copy(stack=False)
    after.push(move)
    record["after"] = after.fen()
    return record  # type: ignore[return-value]


def _request_to_move(request: MoveRequest) -> chess.Move:
    try:
        promotion = request.get("promotion")
        return chess.Move(
            chess.parse_square(request["from"]),
            chess.parse_square(request["to"]),
            promotion=chess.Piece.from_symbol(promotion).piece_type if promotion else None,
        )
    except (KeyError, ValueError) as e:
        raise IllegalMoveError(f"Malformed move request: {request!r}") from e


class PythonChessOracle:
    """ChessOracle backed by a python-chess board."""

    def __init__(self, fen: str | None = None) -> None:
        self.board = chess.Board(fen or STARTING_FEN)

    def reset(self, fen: str) -> None:
        self.board = chess.Board(fen)

    def fen(self) -> str:
        return self.board.fen()

    def legal_moves(self) -> list[ChessMove]:
        return [to_chess_move(self.board, m) for m in self.board.legal_moves]

    def make_move(self, request: MoveRequest) -> ChessMove:
        move = _request_to_move(request)
        if move not in self.board.legal_moves:
            raise IllegalMoveError(
                f"Illegal move {move.uci()} in position {self.board.fen()}"
            )
        record = to_chess_move(self.board, move)
        self.board.push(move)
        return record

    def apply(self, move: ChessMove) -> bool:
        try:
            self.make_move(move)  # type: ignore[arg-type]
        except IllegalMoveError:
            return False
        return True


def replay_moves(oracle: ChessOracle, moves: Iterable[ChessMove]) -> int:
    """Apply ``moves`` in order; return how many applied before the first failure."""
    applied = 0
    for move in moves:
        if not oracle.apply(move):
            break
        applied += 1
    return applied
