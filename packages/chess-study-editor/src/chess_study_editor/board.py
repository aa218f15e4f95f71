from __future__ import annotations

from typing import Annotated, Any, Dict, Optional

import reflex as rx
from reflex.utils.imports import ImportVar


class StudyBoard(rx.Component):
    """Drag-and-drop board for the study editor.

    The board does not judge legality: every drop is reported through
    ``on_move`` as ``{"from", "to"}`` and the piece snaps back until the server
    answers with a new ``fen``. Promotion is left to the session's
    ``auto_promotion``.
    """

    # Defined in the injected module code below, loaded client-side only.
    tag = "StudyBoardShim"

    lib_dependencies = ["react-chessboard@5.8.6"]

    fen: str = "start"
    orientation: str = "white"
    options: Optional[Dict[str, Any]] = None

    on_move: Annotated[rx.EventHandler, lambda payload: [payload]]

    def add_imports(self):
        return {
            "react": [ImportVar(tag="useId"), ImportVar(tag="useMemo")],
            "$/utils/context": [ImportVar(tag="ClientSide")],
            "@emotion/react": [ImportVar(tag="jsx")],
        }

    def _get_custom_code(self) -> str:
        # The symbol name must match `tag`.
        return r"""
const StudyBoardShim = ClientSide(async () => {
  const mod = await import("react-chessboard");
  const Board = mod?.Chessboard ?? mod?.default ?? mod;

  return function StudyBoardShimInner(props) {
    const { fen, orientation, options, onMove } = props;
    const reactId = useId();

    const boardOptions = useMemo(() => {
      const onPieceDrop = ({ sourceSquare, targetSquare }) => {
        if (!sourceSquare || !targetSquare || sourceSquare === targetSquare) return false;
        if (onMove) onMove({ from: sourceSquare, to: targetSquare });
        return false;
      };
      return {
        ...(options || {}),
        id: (options && options.id) || `study-board-${reactId}`,
        position: fen && fen !== "start" ? fen : "start",
        boardOrientation: orientation === "black" ? "black" : "white",
        onPieceDrop,
      };
    }, [options, fen, orientation, onMove, reactId]);

    return jsx(Board, { options: boardOptions });
  };
});
"""


study_board = StudyBoard.create
