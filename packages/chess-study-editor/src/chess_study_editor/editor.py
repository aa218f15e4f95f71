from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any, NamedTuple

import chess
import reflex as rx

from chess_move_tree import (
    STARTING_FEN,
    MoveRequest,
    MoveTreeError,
    ReplayError,
    dump_game_state,
    load_game_state,
    path_from_string,
    path_to_string,
)
from chess_study_notation import NotationLine, build_notation_lines, chess_notation

from .board import study_board
from .builder import StudyTreeBuilder
from .session import StudySession

logger = logging.getLogger(__name__)

UPLOAD_ID = "study-pgn-upload"

Action = Callable[[StudySession], Any]


class EditorView(NamedTuple):
    """Everything the page shows, derived from one study record."""

    study_json: str
    fen: str
    selected_key: str
    is_flipped: bool
    comment: str
    notation_lines: list[NotationLine]


def render_view(session: StudySession, notation_options: dict[str, Any] | None = None) -> EditorView:
    record = session.to_record()
    return EditorView(
        study_json=dump_game_state(record),
        fen=session.position,
        selected_key=path_to_string(session.current_path),
        is_flipped=record["isFlipped"],
        comment=session.comment,
        notation_lines=build_notation_lines(
            record["moveTree"],
            record["rootBranches"],
            comments=record["comments"],
            options=notation_options,
            start_ply=chess.Board(session.starting_position).ply(),
        ),
    )


def apply_to_study(
    study_json: str,
    action: Action,
    *,
    study_options: dict[str, Any] | None = None,
    notation_options: dict[str, Any] | None = None,
) -> tuple[EditorView | None, str]:
    """Run ``action`` on the study stored in ``study_json`` (empty: a new study).

    Returns ``(view, "")`` on success and ``(None, message)`` when the record
    is unreadable or the action is rejected; the stored study is then kept.
    """
    try:
        state = load_game_state(study_json) if study_json else None
        session = StudySession(state, options=study_options)
        action(session)
    except ReplayError as e:
        logger.error("Study no longer replays: %s", e)
        return None, str(e)
    except (MoveTreeError, ValueError) as e:
        logger.warning("Study edit rejected: %s", e)
        return None, str(e)
    return render_view(session, notation_options), ""


def select_action(key: str) -> Action:
    return lambda s: s.navigate_to_path(path_from_string(key))


def board_move_action(payload: Mapping[str, Any]) -> Action:
    request: MoveRequest = {"from": str(payload.get("from") or ""), "to": str(payload.get("to") or "")}
    if payload.get("promotion"):
        request["promotion"] = str(payload["promotion"])
    return lambda s: s.make_move(request)


def text_move_action(text: str) -> Action:
    return lambda s: s.make_text_move(text)


def comment_action(text: str) -> Action:
    return lambda s: s.set_comment(text)


def _keep(session: StudySession) -> None:
    return None


class StudyEditorState(rx.State):
    error: str = ""
    study_json: str = ""
    fen: str = STARTING_FEN
    selected_key: str = ""
    is_flipped: bool = False
    notation_lines: list[NotationLine] = []
    comment_draft: str = ""
    move_text: str = ""

    notation_options: dict[str, Any] = {
        "show_move_numbers": True,
        "show_comments": True,
        "max_variation_depth": 8,
    }
    study_options: dict[str, Any] = {
        "allow_undo": True,
        "auto_promotion": "q",
    }

    def _run(self, action: Action) -> bool:
        view, error = apply_to_study(
            self.study_json,
            action,
            study_options=self.study_options,
            notation_options=self.notation_options,
        )
        self.error = error
        if view is None:
            return False
        self.study_json = view.study_json
        self.fen = view.fen
        self.selected_key = view.selected_key
        self.is_flipped = view.is_flipped
        self.comment_draft = view.comment
        self.notation_lines = view.notation_lines
        return True

    def new_study(self) -> None:
        self.study_json = ""
        self._run(_keep)

    def load_pgn_text(self, pgn: str) -> None:
        try:
            record = StudyTreeBuilder().build(pgn)
        except ValueError as e:
            logger.warning("PGN import failed: %s", e)
            self.error = str(e)
            return
        self.study_json = dump_game_state(record)
        self._run(_keep)

    async def on_pgn_upload(self, files: list[rx.UploadFile]) -> None:
        if not files:
            return
        try:
            data = await files[0].read()
        except OSError as e:
            logger.warning("PGN upload unreadable: %s", e)
            self.error = f"upload read failed: {e}"
            return
        # utf-8-sig drops the BOM some PGN exporters write.
        self.load_pgn_text(data.decode("utf-8-sig", errors="replace"))

    def on_select(self, payload: dict) -> None:
        key = payload.get("path")
        if isinstance(key, str):
            self._run(select_action(key))

    def on_move(self, payload: dict) -> None:
        self._run(board_move_action(payload))

    def set_move_text(self, value: str) -> None:
        self.move_text = value

    def submit_move_text(self) -> None:
        if self._run(text_move_action(self.move_text)):
            self.move_text = ""

    def nav_start(self) -> None:
        self._run(StudySession.go_to_start)

    def nav_back(self) -> None:
        self._run(StudySession.go_to_previous)

    def nav_forward(self) -> None:
        self._run(StudySession.go_to_next)

    def nav_end(self) -> None:
        self._run(StudySession.go_to_end)

    def undo(self) -> None:
        self._run(StudySession.undo_move)

    def flip(self) -> None:
        self._run(StudySession.flip)

    def set_comment_draft(self, value: str) -> None:
        self.comment_draft = value

    def save_comment(self) -> None:
        self._run(comment_action(self.comment_draft))


def study_editor() -> rx.Component:
    upload = rx.upload.root(
        rx.vstack(
            rx.text("Drop a PGN file here to start a study from it"),
            rx.text("Variations and comments are kept.", opacity="0.75", font_size="12px"),
            spacing="1",
        ),
        id=UPLOAD_ID,
        multiple=False,
        max_files=1,
        accept={"text/plain": [".pgn", ".txt"]},
        border="1px dashed rgba(0,0,0,0.25)",
        border_radius="10px",
        padding="12px",
        width="100%",
        on_drop=StudyEditorState.on_pgn_upload(rx.upload_files(upload_id=UPLOAD_ID)),
    )

    toolbar = rx.hstack(
        rx.button("New", on_click=StudyEditorState.new_study),
        rx.button("Start", on_click=StudyEditorState.nav_start),
        rx.button("Back", on_click=StudyEditorState.nav_back),
        rx.button("Forward", on_click=StudyEditorState.nav_forward),
        rx.button("End", on_click=StudyEditorState.nav_end),
        rx.button("Undo", on_click=StudyEditorState.undo),
        rx.button("Flip", on_click=StudyEditorState.flip),
        spacing="2",
        wrap="wrap",
    )

    move_input = rx.hstack(
        rx.input(
            value=StudyEditorState.move_text,
            on_change=StudyEditorState.set_move_text,
            placeholder="e4, Nf3, e7e8q ...",
            width="200px",
        ),
        rx.button("Play", on_click=StudyEditorState.submit_move_text),
        spacing="2",
    )

    comment_box = rx.vstack(
        rx.text_area(
            value=StudyEditorState.comment_draft,
            on_change=StudyEditorState.set_comment_draft,
            placeholder="Comment on the current move",
            width="100%",
        ),
        rx.button("Save comment", on_click=StudyEditorState.save_comment),
        spacing="2",
        width="100%",
    )

    main = rx.hstack(
        rx.box(
            study_board(
                fen=StudyEditorState.fen,
                orientation=rx.cond(StudyEditorState.is_flipped, "black", "white"),
                on_move=StudyEditorState.on_move,
            ),
            width="480px",
            max_width="100%",
        ),
        rx.vstack(
            chess_notation(
                lines=StudyEditorState.notation_lines,
                selected_key=StudyEditorState.selected_key,
                on_select=StudyEditorState.on_select,
            ),
            move_input,
            comment_box,
            spacing="3",
            width="100%",
        ),
        spacing="4",
        align="start",
        wrap="wrap",
        width="100%",
    )

    return rx.vstack(
        upload,
        rx.cond(StudyEditorState.error != "", rx.callout(StudyEditorState.error, color_scheme="red")),
        toolbar,
        main,
        rx.hstack(rx.text("fen:"), rx.code(StudyEditorState.fen), spacing="2"),
        spacing="4",
        width="100%",
    )
