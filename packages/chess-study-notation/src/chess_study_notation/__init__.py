from .notation import (
    NotationLine,
    NotationOptions,
    NotationToken,
    build_notation_lines,
    chess_notation,
)

__all__ = [
    "NotationLine",
    "NotationOptions",
    "NotationToken",
    "build_notation_lines",
    "chess_notation",
]
